import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from cluster import AccessorError, PodNotFound
from models import DELETED, FAILED, SKIPPED_DRY_RUN, Pod, PodResult


# ------------------------------
# Delete Pod
# ------------------------------
def delete_pod(accessor, pod: Pod) -> PodResult:
    # Accessors report every cluster failure as AccessorError; anything else is a bug and propagates.
    try:
        accessor.delete_pod(pod.namespace, pod.name)
    except PodNotFound:
        logging.info(f"Pod {pod.namespace}/{pod.name} already gone")
        return PodResult(pod.namespace, pod.name, DELETED)
    except AccessorError as e:
        logging.error(f"Delete failed {pod.namespace}/{pod.name}: {e}")
        return PodResult(pod.namespace, pod.name, FAILED, error=str(e))

    logging.warning(f"Deleted pod: {pod.namespace}/{pod.name}")
    return PodResult(pod.namespace, pod.name, DELETED)


def execute(pods: Sequence[Pod], dry_run: bool, accessor, workers: int = 4) -> List[PodResult]:
    """Delete every pod in ``pods`` once, or only report it when ``dry_run``.

    Deletions run on a pool of at most ``workers`` threads. A failed deletion
    is recorded in its own result and does not stop the others. Results come
    back in the order of ``pods``.
    """
    if dry_run:
        for pod in pods:
            logging.info(f"[DRY RUN] Would delete pod {pod.namespace}/{pod.name}")
        return [PodResult(pod.namespace, pod.name, SKIPPED_DRY_RUN) for pod in pods]

    if not pods:
        return []

    with ThreadPoolExecutor(max_workers=min(workers, len(pods))) as pool:
        return list(pool.map(lambda pod: delete_pod(accessor, pod), pods))
