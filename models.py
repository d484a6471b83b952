from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

# (namespace, name)
Identity = Tuple[str, str]

DELETED = "deleted"
SKIPPED_DRY_RUN = "skipped-dry-run"
SKIPPED_UNCONTROLLED = "skipped-uncontrolled"
FAILED = "failed"


@dataclass(frozen=True)
class OwnerReference:
    kind: str
    name: str
    controller: bool = False


@dataclass(frozen=True)
class Volume:
    name: str
    # None for anything that is not a persistentVolumeClaim source
    claim_name: Optional[str] = None


@dataclass(frozen=True)
class PersistentVolumeClaim:
    namespace: str
    name: str
    storage_class: Optional[str] = None
    volume_name: Optional[str] = None

    @property
    def identity(self) -> Identity:
        return (self.namespace, self.name)


@dataclass(frozen=True)
class Pod:
    namespace: str
    name: str
    volumes: Tuple[Volume, ...] = ()
    owners: Tuple[OwnerReference, ...] = ()

    @property
    def identity(self) -> Identity:
        return (self.namespace, self.name)


@dataclass(frozen=True)
class PodResult:
    """Outcome of remediation for a single pod."""

    namespace: str
    name: str
    action: str
    error: Optional[str] = None

    @property
    def identity(self) -> Identity:
        return (self.namespace, self.name)

    def as_dict(self) -> Dict[str, Any]:
        result = {
            "namespace": self.namespace,
            "pod": self.name,
            "action": self.action,
        }
        if self.error is not None:
            result["error"] = self.error
        return result
