"""
Boot disk resolution: reuse an existing persistent disk or create a fresh one.
"""

import logging

from clients import ComputeRestClient
from config import DEFAULT_IMAGE_URL, RESOURCE_BASE
from errors import ComputeApiError, ResolutionError
from models import DiskDescriptor, DiskReference, DiskSpecification

logger = logging.getLogger(__name__)


class DiskResolver:
    """Decides which boot disk the new instance gets."""

    def __init__(self, api: ComputeRestClient):
        self.api = api

    def resolve(
        self,
        project_id: str,
        zone: str,
        disk_name: str,
        reuse: bool,
        want_ssd: bool,
        size_gb: int = 50,
        image_url: str = DEFAULT_IMAGE_URL,
    ) -> DiskDescriptor:
        """
        Resolve the boot disk for the instance.

        With ``reuse`` set, an existing disk named ``disk_name`` in the zone is
        attached as-is. A failed listing is fatal: falling through to a fresh
        disk would orphan the existing disk's data.

        Args:
            project_id: GCP project ID
            zone: Zone to look for the disk in
            disk_name: Name of the disk to reuse or create
            reuse: Reuse an existing disk if one exists
            want_ssd: Request a pd-ssd disk type for a fresh disk
            size_gb: Size of a fresh disk
            image_url: Source image for a fresh disk

        Returns:
            DiskReference if an existing disk was found, else DiskSpecification

        Raises:
            ResolutionError: If listing disks fails while reuse is requested
        """
        if reuse:
            try:
                disks = self.api.list_disks()
            except ComputeApiError as e:
                raise ResolutionError(f"Error listing disks in {zone}: {e}") from e

            for disk in disks:
                if disk.get("name") != disk_name:
                    continue
                logger.info(f"Reusing existing disk {disk_name}")
                return DiskReference(name=disk_name, source=disk["selfLink"])

            logger.info(f"No existing disk named {disk_name}; creating one")

        disk_type = ""
        if want_ssd:
            disk_type = f"{RESOURCE_BASE}/{project_id}/zones/{zone}/diskTypes/pd-ssd"

        return DiskSpecification(
            name=disk_name,
            source_image=image_url,
            size_gb=size_gb,
            disk_type=disk_type,
            auto_delete=not reuse,
        )
