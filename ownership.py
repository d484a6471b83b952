import logging
from typing import Iterable, List, Tuple

from models import Pod


def is_controlled(pod: Pod) -> bool:
    # Any controller reference counts, whatever its kind.
    return any(owner.controller for owner in pod.owners)


def filter_pods(pods: Iterable[Pod], delete_uncontrolled: bool) -> Tuple[List[Pod], List[Pod]]:
    """Split candidate pods into (eligible, skipped).

    Pods without a controller owner reference would not be recreated after
    deletion, so they are skipped unless ``delete_uncontrolled`` is set.
    """
    eligible = []
    skipped = []

    for pod in pods:
        if delete_uncontrolled or is_controlled(pod):
            eligible.append(pod)
        else:
            logging.warning(f"Skipping uncontrolled pod {pod.namespace}/{pod.name}")
            skipped.append(pod)

    return eligible, skipped
