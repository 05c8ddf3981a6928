"""
Configuration management for the build coordinator provisioner.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from errors import ConfigurationError

PROD_PROJECT = "symbolic-datum-552"
STAGING_PROJECT = "go-dashboard-dev"
PROD_COORDINATOR_URL = "https://storage.googleapis.com/go-builder-data/coordinator"
STAGING_COORDINATOR_URL = (
    "https://storage.googleapis.com/dev-go-builder-data/coordinator"
)

# GCP does not allow renaming an address, so these predate the "<instance>-ip"
# naming convention and have to be pinned per project.
KNOWN_STATIC_IPS = {
    PROD_PROJECT: "107.178.219.46",
    STAGING_PROJECT: "104.154.113.235",
}

DEFAULT_IMAGE_URL = (
    "https://www.googleapis.com/compute/v1/projects/coreos-cloud/global/images/"
    "coreos-stable-723-3-0-v20150804"
)

STORAGE_FULL_CONTROL_SCOPE = "https://www.googleapis.com/auth/devstorage.full_control"
COMPUTE_SCOPE = "https://www.googleapis.com/auth/compute"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

DEFAULT_SCOPES = (STORAGE_FULL_CONTROL_SCOPE, COMPUTE_SCOPE, CLOUD_PLATFORM_SCOPE)

RESOURCE_BASE = "https://www.googleapis.com/compute/v1/projects"


@dataclass(frozen=True)
class ProvisionConfig:
    """Configuration for a single coordinator provisioning run."""

    project_id: str
    zone: str = "us-central1-f"
    machine_type: str = "n1-standard-4"
    instance_name: str = "farmer"
    ssh_public_key_files: Tuple[str, ...] = ()
    static_ip: str = ""
    reuse_disk: bool = True
    ssd: bool = True
    coordinator_url: str = PROD_COORDINATOR_URL
    staging: bool = False
    disk_size_gb: int = 50
    image_url: str = DEFAULT_IMAGE_URL
    poll_interval: float = 2.0
    timeout: Optional[float] = None
    scopes: Tuple[str, ...] = DEFAULT_SCOPES
    credentials_dir: str = "."
    verbose: bool = False

    @property
    def staging_prefix(self) -> str:
        """Namespace prefix for the OAuth client and token files."""
        return "staging-" if self.staging else ""

    @property
    def project_url(self) -> str:
        return f"{RESOURCE_BASE}/{self.project_id}"

    @property
    def machine_type_url(self) -> str:
        return f"{self.project_url}/zones/{self.zone}/machineTypes/{self.machine_type}"

    @property
    def network_url(self) -> str:
        return f"{self.project_url}/global/networks/default"

    @property
    def ssd_disk_type_url(self) -> str:
        return f"{self.project_url}/zones/{self.zone}/diskTypes/pd-ssd"

    @property
    def disk_name(self) -> str:
        return f"{self.instance_name}-coreos-stateless-pd"

    def credential_path(self, filename: str) -> str:
        """Path of a staging-prefixed credential file, e.g. ``token.dat``."""
        return os.path.join(self.credentials_dir, self.staging_prefix + filename)

    @classmethod
    def from_args(cls, args) -> "ProvisionConfig":
        """
        Create configuration from command-line arguments.

        Staging mode swaps the production project and coordinator defaults for
        their dev-cluster values, but leaves explicitly chosen values alone.
        When no static IP is given, a pinned address for a known project is used.

        Args:
            args: Parsed argparse arguments

        Returns:
            ProvisionConfig instance

        Raises:
            ConfigurationError: If no project ID is given
        """
        project_id = args.project
        coordinator_url = args.coordinator
        if args.staging:
            if project_id == PROD_PROJECT:
                project_id = STAGING_PROJECT
            if coordinator_url == PROD_COORDINATOR_URL:
                coordinator_url = STAGING_COORDINATOR_URL
        if not project_id:
            raise ConfigurationError("Missing --project flag")

        static_ip = args.static_ip or KNOWN_STATIC_IPS.get(project_id, "")

        return cls(
            project_id=project_id,
            zone=args.zone,
            machine_type=args.machine_type,
            instance_name=args.instance_name,
            ssh_public_key_files=tuple(args.ssh_public_key or ()),
            static_ip=static_ip,
            reuse_disk=args.reuse_disk,
            ssd=args.ssd,
            coordinator_url=coordinator_url,
            staging=args.staging,
            disk_size_gb=args.disk_size_gb,
            poll_interval=args.poll_interval,
            timeout=args.timeout,
            credentials_dir=args.credentials_dir,
            verbose=args.verbose,
        )
