"""
REST API client for Compute Engine (v1 API).
"""

import logging
from typing import Dict, Iterator, List, Optional

import requests
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession

from errors import ComputeApiError, CredentialError

logger = logging.getLogger(__name__)

API_BASE = "https://compute.googleapis.com/compute/v1"


class ComputeRestClient:
    """REST client for the subset of Compute Engine v1 used to create an instance.

    Requests are issued once; there is no retry. Any non-success response
    raises ComputeApiError naming the call that failed.
    """

    def __init__(
        self,
        project_id: str,
        zone: str,
        credentials: Credentials,
        timeout_s: int = 60,
    ):
        """
        Initialize the Compute REST client.

        Args:
            project_id: GCP project ID
            zone: Zone the instance, its disk and its operation live in
            credentials: google-auth credentials to authorize requests with
            timeout_s: Request timeout in seconds
        """
        self.project_id = project_id
        self.zone = zone
        self.timeout_s = timeout_s
        self.session = AuthorizedSession(credentials)

    def _url(self, path: str) -> str:
        """Construct full API URL from path."""
        return f"{API_BASE}/{path.lstrip('/')}"

    def _zone_path(self, suffix: str) -> str:
        return f"projects/{self.project_id}/zones/{self.zone}/{suffix}"

    def _request(self, call: str, method: str, path: str, **kwargs) -> Dict:
        """
        Execute one HTTP request and decode the JSON body.

        Args:
            call: Human-readable name of the API call, used in errors
            method: HTTP method (GET, POST)
            path: API path relative to API_BASE
            **kwargs: Additional request parameters

        Returns:
            Decoded response body

        Raises:
            CredentialError: If the credentials cannot be refreshed
            ComputeApiError: On transport failure or a non-2xx response
        """
        url = self._url(path)
        logger.debug(f"{method} {url}")
        try:
            resp = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except GoogleAuthError as e:
            raise CredentialError(f"{call}: could not authorize request: {e}") from e
        except requests.RequestException as e:
            raise ComputeApiError(call, None, str(e)) from e

        if resp.status_code not in (200, 201, 202):
            detail = resp.text[:500]
            try:
                err = resp.json().get("error")
                if isinstance(err, dict):
                    detail = err.get("message", "") or detail
                elif err:
                    detail = str(err)
            except (ValueError, AttributeError):
                pass
            raise ComputeApiError(call, resp.status_code, detail)

        try:
            return resp.json()
        except ValueError as e:
            raise ComputeApiError(call, resp.status_code, f"invalid JSON: {e}") from e

    def _paginate(self, call: str, path: str) -> Iterator[Dict]:
        """Yield each page of a list call, following nextPageToken."""
        page_token: Optional[str] = None
        while True:
            params = {}
            if page_token:
                params["pageToken"] = page_token

            data = self._request(call, "GET", path, params=params)
            yield data

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    def list_disks(self) -> List[Dict]:
        """
        List all persistent disks in the client's zone.

        Returns:
            List of disk resources (dicts with at least name and selfLink)

        Raises:
            ComputeApiError: If API call fails
        """
        disks: List[Dict] = []
        for page in self._paginate("disks.list", self._zone_path("disks")):
            disks.extend(page.get("items", []))
        return disks

    def aggregated_list_addresses(self) -> Iterator[Dict]:
        """
        Iterate over every address in the project, across all regions.

        Order across scopes is whatever the provider returns.

        Raises:
            ComputeApiError: If API call fails
        """
        path = f"projects/{self.project_id}/aggregated/addresses"
        for page in self._paginate("addresses.aggregatedList", path):
            for scoped in page.get("items", {}).values():
                for addr in scoped.get("addresses", []):
                    yield addr

    def insert_instance(self, body: Dict) -> Dict:
        """
        Submit an instance creation request.

        Args:
            body: Instance resource

        Returns:
            Operation resource for the asynchronous create

        Raises:
            ComputeApiError: If API call fails
        """
        data = self._request(
            "instances.insert", "POST", self._zone_path("instances"), json=body
        )
        if "name" not in data:
            raise ComputeApiError(
                "instances.insert", None, f"unexpected response: {data}"
            )
        return data

    def get_zone_operation(self, op_name: str) -> Dict:
        """
        Get status of a zone operation.

        Args:
            op_name: Operation name (short name, not a URL)

        Returns:
            Operation resource

        Raises:
            ComputeApiError: If API call fails
        """
        return self._request(
            f"zoneOperations.get({op_name})",
            "GET",
            self._zone_path(f"operations/{op_name}"),
        )

    def get_instance(self, instance_name: str) -> Dict:
        """
        Get the full description of an instance.

        Raises:
            ComputeApiError: If API call fails
        """
        return self._request(
            f"instances.get({instance_name})",
            "GET",
            self._zone_path(f"instances/{instance_name}"),
        )
