"""
End-to-end provisioning of the build coordinator instance.
"""

import json
import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

from clients import ComputeRestClient
from config import ProvisionConfig
from credentials import CredentialProvider
from disks import DiskResolver
from errors import ComputeApiError, ConfigurationError, SubmissionError
from instance_spec import CLOUD_CONFIG_TEMPLATE, InstanceSpecBuilder, render_metadata
from network import NetworkResolver
from poller import OperationPoller

logger = logging.getLogger(__name__)


def read_ssh_public_keys(paths) -> List[str]:
    """
    Read SSH public keys, one per file. Contents are not validated.

    Raises:
        ConfigurationError: If a key file cannot be read
    """
    keys = []
    for path in paths:
        try:
            with open(path) as f:
                keys.append(f.read().strip())
        except OSError as e:
            raise ConfigurationError(f"Error reading {path}: {e}") from e
    return keys


class CoordinatorProvisioner:
    """Creates the coordinator VM: resolve, build, submit, poll, confirm."""

    def __init__(
        self,
        config: ProvisionConfig,
        api: Optional[ComputeRestClient] = None,
        credential_provider: Optional[CredentialProvider] = None,
        cloud_config_template: str = CLOUD_CONFIG_TEMPLATE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the provisioner.

        Args:
            config: Run configuration
            api: Compute client; built from acquired credentials if omitted
            credential_provider: Used only when ``api`` is omitted
            cloud_config_template: Startup cloud-config with a $COORDINATOR placeholder
            sleep: Sleep function used between operation polls
        """
        self.config = config
        self.cloud_config_template = cloud_config_template
        self.sleep = sleep
        self._api = api
        self.credential_provider = credential_provider or CredentialProvider(config)

    @property
    def api(self) -> ComputeRestClient:
        if self._api is None:
            creds = self.credential_provider.acquire()
            self._api = ComputeRestClient(
                project_id=self.config.project_id,
                zone=self.config.zone,
                credentials=creds,
            )
        return self._api

    def _log_header(self) -> None:
        cfg = self.config
        logger.info("=" * 70)
        logger.info("Build coordinator instance provisioning")
        logger.info("=" * 70)
        logger.info(f"Project: {cfg.project_id}")
        logger.info(f"Zone: {cfg.zone}")
        logger.info(f"Instance: {cfg.instance_name} ({cfg.machine_type})")
        logger.info(f"Coordinator: {cfg.coordinator_url}")
        logger.info(f"Static IP: {cfg.static_ip or '(reserved <instance>-ip lookup)'}")
        logger.info(f"Reuse disk: {cfg.reuse_disk}")
        logger.info(f"SSD: {cfg.ssd}")
        logger.info(f"Staging: {cfg.staging}")
        logger.info(f"Poll interval: {cfg.poll_interval}s")
        if cfg.timeout is not None:
            logger.info(f"Timeout: {cfg.timeout}s")
        logger.info(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info("=" * 70)

    def run(self) -> Dict:
        """
        Execute the provisioning run.

        Returns:
            The created instance resource

        Raises:
            ProvisionError: Any failure; there is no partial success
        """
        cfg = self.config
        self._log_header()

        ssh_keys = read_ssh_public_keys(cfg.ssh_public_key_files)
        # Size check up front so an oversized config never reaches the API.
        render_metadata(self.cloud_config_template, cfg.coordinator_url, ssh_keys)

        disk = DiskResolver(self.api).resolve(
            project_id=cfg.project_id,
            zone=cfg.zone,
            disk_name=cfg.disk_name,
            reuse=cfg.reuse_disk,
            want_ssd=cfg.ssd,
            size_gb=cfg.disk_size_gb,
            image_url=cfg.image_url,
        )
        nat_ip = NetworkResolver(self.api).resolve(
            project_id=cfg.project_id,
            explicit_ip=cfg.static_ip,
            instance_name=cfg.instance_name,
        )

        spec = InstanceSpecBuilder(cfg).build(
            name=cfg.instance_name,
            machine_type_url=cfg.machine_type_url,
            disk=disk,
            network=nat_ip,
            cloud_config_template=self.cloud_config_template,
            coordinator_url=cfg.coordinator_url,
            ssh_public_keys=ssh_keys,
        )

        logger.info("Creating instance...")
        try:
            op = self.api.insert_instance(spec.to_api())
        except ComputeApiError as e:
            raise SubmissionError(f"Failed to create instance: {e}") from e
        op_name = op["name"]
        logger.info(f"Created. Waiting on operation {op_name}")

        poller = OperationPoller(
            self.api,
            poll_interval=cfg.poll_interval,
            timeout=cfg.timeout,
            sleep=self.sleep,
        )
        instance = poller.run(op_name, cfg.instance_name)
        logger.info(f"Instance: {json.dumps(instance, indent=4)}")
        return instance
