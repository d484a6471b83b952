import logging
from typing import AbstractSet, Iterable, List, Set

from models import Identity, PersistentVolumeClaim, Pod


def match_pvcs(storage_classes: AbstractSet[str], pvcs: Iterable[PersistentVolumeClaim]) -> Set[Identity]:
    """Return identities of the PVCs bound to one of ``storage_classes``.

    Storage class names are compared case-sensitively. A PVC without a
    storage class never matches.
    """
    matched = {
        pvc.identity
        for pvc in pvcs
        if pvc.storage_class and pvc.storage_class in storage_classes
    }
    logging.info(
        f"Found {len(matched)} PVCs that use one of these storage classes: {sorted(storage_classes)}"
    )
    logging.debug(f"PVCs that use wanted storage classes: {sorted(matched)}")
    return matched


def resolve_pods(matched: AbstractSet[Identity], pods: Iterable[Pod]) -> List[Pod]:
    """Return the pods that mount at least one of the ``matched`` PVCs.

    Claims are resolved in the pod's own namespace. Every pod appears once,
    in listing order, however many matched claims it mounts.
    """
    seen: Set[Identity] = set()
    resolved = []

    for pod in pods:
        if pod.identity in seen:
            continue
        for vol in pod.volumes:
            if vol.claim_name is None:
                continue
            if (pod.namespace, vol.claim_name) in matched:
                seen.add(pod.identity)
                resolved.append(pod)
                break

    logging.info(f"Found {len(resolved)} pods that use previously found PVCs")
    return resolved
