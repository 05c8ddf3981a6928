"""
Instance specification assembly, including the startup cloud-config.
"""

from typing import Sequence

from config import ProvisionConfig
from errors import ConfigTooLarge
from models import DiskDescriptor, InstanceSpecification, NetworkAddress

# Compute Engine rejects metadata values over 32 KiB.
MAX_METADATA_BYTES = 32 << 10

COORDINATOR_PLACEHOLDER = "$COORDINATOR"

CLOUD_CONFIG_TEMPLATE = """#cloud-config
coreos:
  update:
    group: stable
    reboot-strategy: off
  units:
    - name: gobuild.service
      command: start
      content: |
        [Unit]
        Description=Go Builders
        After=docker.service
        Requires=docker.service

        [Service]
        ExecStartPre=/bin/bash -c 'mkdir -p /opt/bin && curl -s -o /opt/bin/coordinator.tmp $COORDINATOR && install -m 0755 /opt/bin/coordinator{.tmp,}'
        ExecStart=/opt/bin/coordinator
        RestartSec=10s
        Restart=always
        StartLimitInterval=0
        Type=simple

        [Install]
        WantedBy=multi-user.target
"""


def render_metadata(
    template: str, coordinator_url: str, ssh_public_keys: Sequence[str]
) -> str:
    """
    Render the user-data blob for the instance.

    Raises:
        ConfigTooLarge: If the result exceeds MAX_METADATA_BYTES
    """
    cloud_config = template.replace(COORDINATOR_PLACEHOLDER, coordinator_url, 1)
    for key in ssh_public_keys:
        cloud_config += f"\nssh_authorized_keys:\n    - {key.strip()}\n"

    size = len(cloud_config.encode("utf-8"))
    if size > MAX_METADATA_BYTES:
        raise ConfigTooLarge(size, MAX_METADATA_BYTES)
    return cloud_config


class InstanceSpecBuilder:
    """Builds the InstanceSpecification for the coordinator VM."""

    def __init__(self, config: ProvisionConfig):
        self.config = config

    def build(
        self,
        name: str,
        machine_type_url: str,
        disk: DiskDescriptor,
        network: NetworkAddress,
        cloud_config_template: str,
        coordinator_url: str,
        ssh_public_keys: Sequence[str],
    ) -> InstanceSpecification:
        """
        Assemble the instance description. Makes no API calls.

        Raises:
            ConfigTooLarge: If the rendered startup metadata is too large
        """
        metadata = render_metadata(
            cloud_config_template, coordinator_url, ssh_public_keys
        )
        return InstanceSpecification(
            name=name,
            machine_type=machine_type_url,
            disk=disk,
            nat_ip=network,
            network=self.config.network_url,
            metadata=metadata,
            scopes=tuple(self.config.scopes),
        )
