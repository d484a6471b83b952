"""Shared test fixtures."""

import os
import sys
import threading
from pathlib import Path

import pytest

# Add project root to path for module imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from models import OwnerReference, PersistentVolumeClaim, Pod, Volume  # noqa: E402
from settings import Settings  # noqa: E402


class FakeAccessor:
    """In-memory cluster accessor recording every delete call."""

    def __init__(self, pvcs=None, pods=None, delete_errors=None, pvc_error=None, pod_error=None):
        self.pvcs = list(pvcs or [])
        self.pods = list(pods or [])
        # (namespace, name) -> exception raised by delete_pod
        self.delete_errors = delete_errors or {}
        self.pvc_error = pvc_error
        self.pod_error = pod_error
        self.deleted: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def list_persistent_volume_claims(self):
        if self.pvc_error:
            raise self.pvc_error
        return list(self.pvcs)

    def list_pods(self):
        if self.pod_error:
            raise self.pod_error
        return list(self.pods)

    def delete_pod(self, namespace, name):
        with self._lock:
            self.deleted.append((namespace, name))
        error = self.delete_errors.get((namespace, name))
        if error:
            raise error


def make_pvc(name, storage_class=None, namespace="default"):
    return PersistentVolumeClaim(namespace=namespace, name=name, storage_class=storage_class)


def make_pod(name, claims=(), namespace="default", owners=None, extra_volumes=()):
    """Build a pod mounting ``claims``; owned by a ReplicaSet unless ``owners`` is given."""
    if owners is None:
        owners = [OwnerReference(kind="ReplicaSet", name=f"{name}-rs", controller=True)]
    volumes = [Volume(name=f"vol-{claim}", claim_name=claim) for claim in claims]
    volumes += [Volume(name=extra) for extra in extra_volumes]
    return Pod(namespace=namespace, name=name, volumes=tuple(volumes), owners=tuple(owners))


@pytest.fixture
def fake_accessor():
    """Factory fixture for creating FakeAccessor instances."""
    def _create(**kwargs) -> FakeAccessor:
        return FakeAccessor(**kwargs)
    return _create


@pytest.fixture
def make_settings(monkeypatch, tmp_path):
    """Factory fixture for Settings isolated from the host env and config.toml."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("RESTARTER_"):
            monkeypatch.delenv(key)

    def _create(**overrides) -> Settings:
        values = {"bearer_token": "s3cret", "storage_class": "fast-ssd"}
        values.update(overrides)
        return Settings(**values)
    return _create
