"""
External NAT IP resolution.
"""

import logging

from clients import ComputeRestClient
from errors import ComputeApiError, ResolutionError
from models import UNASSIGNED, NetworkAddress

logger = logging.getLogger(__name__)


class NetworkResolver:
    """Picks the external IP: explicit, then reserved by name, then dynamic."""

    def __init__(self, api: ComputeRestClient):
        self.api = api

    def resolve(
        self, project_id: str, explicit_ip: str, instance_name: str
    ) -> NetworkAddress:
        """
        Resolve the NAT IP for the instance.

        An explicit IP is passed through unvalidated. Otherwise the first
        RESERVED address named ``<instance_name>-ip`` across all regions is
        used; if several regions hold one, which is picked depends on the
        provider's listing order.

        Raises:
            ResolutionError: If the aggregated address listing fails
        """
        if explicit_ip:
            return explicit_ip

        want = f"{instance_name}-ip"
        try:
            for addr in self.api.aggregated_list_addresses():
                if addr.get("name") == want and addr.get("status") == "RESERVED":
                    logger.info(f"Using reserved address {want}: {addr['address']}")
                    return addr["address"]
        except ComputeApiError as e:
            raise ResolutionError(
                f"Error listing addresses in project {project_id}: {e}"
            ) from e

        logger.info(f"No reserved address named {want}; using an ephemeral IP")
        return UNASSIGNED
