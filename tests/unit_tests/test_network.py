"""
Unit tests for external IP resolution.
"""

import unittest

from errors import ComputeApiError, ResolutionError
from fakes import FakeComputeApi
from models import UNASSIGNED
from network import NetworkResolver


class TestNetworkResolver(unittest.TestCase):
    """Test NetworkResolver resolution order."""

    def test_explicit_ip_wins(self):
        """Test an explicit IP is returned unchanged without any lookup."""
        api = FakeComputeApi(
            addresses=[{"name": "farmer-ip", "status": "RESERVED", "address": "203.0.113.9"}]
        )

        result = NetworkResolver(api).resolve("p", "198.51.100.7", "farmer")

        self.assertEqual(result, "198.51.100.7")
        self.assertEqual(api.calls, [])

    def test_explicit_ip_is_not_validated(self):
        """Test explicit input passes through as-is."""
        result = NetworkResolver(FakeComputeApi()).resolve("p", "not-an-ip", "farmer")
        self.assertEqual(result, "not-an-ip")

    def test_reserved_address_by_name(self):
        """Test a reserved address named after the instance is used."""
        api = FakeComputeApi(
            addresses=[
                {"name": "other-ip", "status": "RESERVED", "address": "192.0.2.1"},
                {"name": "farmer-ip", "status": "RESERVED", "address": "203.0.113.9"},
            ]
        )

        result = NetworkResolver(api).resolve("p", "", "farmer")

        self.assertEqual(result, "203.0.113.9")
        self.assertEqual(api.count("aggregated_list_addresses"), 1)

    def test_in_use_address_is_skipped(self):
        """Test an address already bound to something else is not taken."""
        api = FakeComputeApi(
            addresses=[
                {"name": "farmer-ip", "status": "IN_USE", "address": "192.0.2.1"},
                {"name": "farmer-ip", "status": "RESERVED", "address": "203.0.113.9"},
            ]
        )

        self.assertEqual(NetworkResolver(api).resolve("p", "", "farmer"), "203.0.113.9")

    def test_no_match_is_unassigned(self):
        """Test no matching reservation leaves allocation to the provider."""
        api = FakeComputeApi(
            addresses=[{"name": "farmer-ip", "status": "IN_USE", "address": "192.0.2.1"}]
        )

        self.assertIs(NetworkResolver(api).resolve("p", "", "farmer"), UNASSIGNED)

    def test_listing_failure_is_fatal(self):
        """Test a failed address listing is a ResolutionError."""
        api = FakeComputeApi(
            fail={
                "aggregated_list_addresses": ComputeApiError(
                    "addresses.aggregatedList", 500, "backend error"
                )
            }
        )

        with self.assertRaises(ResolutionError):
            NetworkResolver(api).resolve("p", "", "farmer")


if __name__ == "__main__":
    unittest.main()
