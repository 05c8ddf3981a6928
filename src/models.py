"""
Data models for the build coordinator provisioner.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class DiskReference:
    """An existing persistent disk, attached read-write and kept on delete."""

    name: str
    source: str  # selfLink of the existing disk
    auto_delete: bool = False
    boot: bool = True
    mode: str = "READ_WRITE"

    def to_api(self) -> Dict:
        return {
            "autoDelete": self.auto_delete,
            "boot": self.boot,
            "deviceName": self.name,
            "type": "PERSISTENT",
            "source": self.source,
            "mode": self.mode,
        }


@dataclass(frozen=True)
class DiskSpecification:
    """A fresh persistent disk initialized from a base image."""

    name: str
    source_image: str
    size_gb: int
    disk_type: str  # full diskTypes URL, or "" for the provider default
    auto_delete: bool
    boot: bool = True

    def to_api(self) -> Dict:
        params: Dict = {
            "diskName": self.name,
            "sourceImage": self.source_image,
            "diskSizeGb": str(self.size_gb),
        }
        if self.disk_type:
            params["diskType"] = self.disk_type
        return {
            "autoDelete": self.auto_delete,
            "boot": self.boot,
            "type": "PERSISTENT",
            "initializeParams": params,
        }


DiskDescriptor = Union[DiskReference, DiskSpecification]


class _Unassigned:
    """Sentinel: let the provider allocate an external IP dynamically."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNASSIGNED"

    def __bool__(self) -> bool:
        return False


UNASSIGNED = _Unassigned()

NetworkAddress = Union[str, _Unassigned]


@dataclass(frozen=True)
class InstanceSpecification:
    """Full description of the instance to create. Immutable once built."""

    name: str
    machine_type: str
    disk: DiskDescriptor
    nat_ip: NetworkAddress
    network: str
    metadata: str
    scopes: Tuple[str, ...]
    tags: Tuple[str, ...] = ("http-server", "https-server", "allow-ssh")
    description: str = "Build coordinator"

    def to_api(self) -> Dict:
        """Render the instances.insert request body."""
        access_config: Dict = {"type": "ONE_TO_ONE_NAT", "name": "External NAT"}
        if self.nat_ip is not UNASSIGNED:
            access_config["natIP"] = self.nat_ip

        return {
            "name": self.name,
            "description": self.description,
            "machineType": self.machine_type,
            "disks": [self.disk.to_api()],
            "tags": {"items": list(self.tags)},
            "metadata": {"items": [{"key": "user-data", "value": self.metadata}]},
            "networkInterfaces": [
                {"network": self.network, "accessConfigs": [access_config]}
            ],
            "serviceAccounts": [{"email": "default", "scopes": list(self.scopes)}],
        }


class OperationStatus(Enum):
    """Status of a zone operation. UNRECOGNIZED covers anything else."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"
    UNRECOGNIZED = "UNRECOGNIZED"

    @classmethod
    def parse(cls, value: Optional[str]) -> "OperationStatus":
        if value in ("PENDING", "RUNNING", "DONE"):
            return cls(value)
        return cls.UNRECOGNIZED


@dataclass(frozen=True)
class Operation:
    """Snapshot of a zone operation as returned by one fetch."""

    name: str
    status: OperationStatus
    raw_status: str
    errors: List[Dict] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict) -> "Operation":
        raw = str(data.get("status", ""))
        errors = list((data.get("error") or {}).get("errors", []))
        return cls(
            name=data.get("name", ""),
            status=OperationStatus.parse(raw),
            raw_status=raw,
            errors=errors,
        )

    @property
    def done(self) -> bool:
        return self.status is OperationStatus.DONE
