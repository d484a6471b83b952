import logging
from typing import List, Optional

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from models import OwnerReference, PersistentVolumeClaim, Pod, Volume

RUNNING_SELECTOR = "status.phase=Running"


class AccessorError(Exception):
    """A call against the cluster API failed."""


class PodNotFound(AccessorError):
    """The pod to delete is already gone."""


def load_core_api() -> client.CoreV1Api:
    try:
        config.load_incluster_config()
        logging.info("Running inside Kubernetes cluster")
    except config.ConfigException:
        config.load_kube_config()
        logging.info("Running locally using kubeconfig")
    return client.CoreV1Api()


# ------------------------------
# API object -> snapshot
# ------------------------------
def pvc_from_api(item) -> PersistentVolumeClaim:
    spec = item.spec
    return PersistentVolumeClaim(
        namespace=item.metadata.namespace,
        name=item.metadata.name,
        storage_class=spec.storage_class_name if spec else None,
        volume_name=spec.volume_name if spec else None,
    )


def pod_from_api(item) -> Pod:
    volumes = []
    if item.spec and item.spec.volumes:
        for vol in item.spec.volumes:
            claim = vol.persistent_volume_claim
            volumes.append(Volume(name=vol.name, claim_name=claim.claim_name if claim else None))

    owners = [
        OwnerReference(kind=ref.kind, name=ref.name, controller=bool(ref.controller))
        for ref in (item.metadata.owner_references or [])
    ]

    return Pod(
        namespace=item.metadata.namespace,
        name=item.metadata.name,
        volumes=tuple(volumes),
        owners=tuple(owners),
    )


class KubeClusterAccessor:
    """Cluster resource access backed by the kubernetes CoreV1Api.

    Every call is bounded by ``timeout`` seconds. Failures are raised as
    ``AccessorError``; a 404 on delete is raised as ``PodNotFound``.
    """

    def __init__(self, core_api: client.CoreV1Api, timeout: float = 30.0, running_only: bool = True):
        self.core_api = core_api
        self.timeout = timeout
        self.running_only = running_only

    @classmethod
    def from_settings(cls, settings, core_api: Optional[client.CoreV1Api] = None) -> "KubeClusterAccessor":
        return cls(
            core_api or load_core_api(),
            timeout=settings.request_timeout,
            running_only=settings.running_only,
        )

    def list_persistent_volume_claims(self) -> List[PersistentVolumeClaim]:
        try:
            pvcs = self.core_api.list_persistent_volume_claim_for_all_namespaces(
                _request_timeout=self.timeout
            )
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise AccessorError(f"Failed to list PVCs: {e}") from e
        return [pvc_from_api(item) for item in pvcs.items]

    def list_pods(self) -> List[Pod]:
        kwargs = {"_request_timeout": self.timeout}
        if self.running_only:
            kwargs["field_selector"] = RUNNING_SELECTOR
        try:
            pods = self.core_api.list_pod_for_all_namespaces(**kwargs)
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise AccessorError(f"Failed to list pods: {e}") from e
        return [pod_from_api(item) for item in pods.items]

    def delete_pod(self, namespace: str, name: str) -> None:
        try:
            self.core_api.delete_namespaced_pod(name, namespace, _request_timeout=self.timeout)
        except ApiException as e:
            if e.status == 404:
                raise PodNotFound(f"Pod {namespace}/{name} not found") from e
            raise AccessorError(f"{e.status} {e.reason}") from e
        except urllib3.exceptions.HTTPError as e:
            raise AccessorError(str(e)) from e
