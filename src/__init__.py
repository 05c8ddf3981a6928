"""
Build coordinator instance provisioner for Compute Engine.
"""

from clients import ComputeRestClient
from config import ProvisionConfig
from credentials import CredentialProvider
from disks import DiskResolver
from errors import ProvisionError
from instance_spec import InstanceSpecBuilder
from log_utils import setup_logging
from models import DiskReference, DiskSpecification, InstanceSpecification, Operation
from network import NetworkResolver
from poller import OperationPoller
from provisioner import CoordinatorProvisioner

__all__ = [
    "ComputeRestClient",
    "ProvisionConfig",
    "CredentialProvider",
    "DiskResolver",
    "ProvisionError",
    "InstanceSpecBuilder",
    "setup_logging",
    "DiskReference",
    "DiskSpecification",
    "InstanceSpecification",
    "Operation",
    "NetworkResolver",
    "OperationPoller",
    "CoordinatorProvisioner",
]
