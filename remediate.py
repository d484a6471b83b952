import logging
from collections import Counter
from typing import List

from cluster import AccessorError
from executor import execute
from matcher import match_pvcs, resolve_pods
from models import SKIPPED_UNCONTROLLED, PodResult
from ownership import filter_pods


class ListingError(Exception):
    """PVCs or pods could not be listed, so nothing can be remediated."""


def remediate(settings, accessor) -> List[PodResult]:
    """Run one remediation pass and return the per-pod outcome.

    PVCs and pods are listed fresh on every call. Raises ``ListingError``
    if either listing fails; deletion failures are reported per pod.
    """
    logging.info(
        f"Querying for pods that use PVCs with one of these storage classes: {sorted(settings.storage_class)}"
    )
    try:
        pvcs = accessor.list_persistent_volume_claims()
        pods = accessor.list_pods()
    except AccessorError as e:
        raise ListingError(str(e)) from e

    matched = match_pvcs(settings.storage_class, pvcs)
    candidates = resolve_pods(matched, pods)
    eligible, skipped = filter_pods(candidates, settings.delete_uncontrolled)

    results = execute(eligible, settings.dry_run, accessor, workers=settings.delete_workers)
    results.extend(PodResult(pod.namespace, pod.name, SKIPPED_UNCONTROLLED) for pod in skipped)
    results.sort(key=lambda r: r.identity)

    summary = Counter(r.action for r in results)
    logging.info(f"Remediation finished: {dict(summary)}")
    return results
