"""
Unit tests for data models.
"""

import unittest

from models import (
    UNASSIGNED,
    DiskReference,
    DiskSpecification,
    InstanceSpecification,
    Operation,
    OperationStatus,
)


class TestDiskDescriptors(unittest.TestCase):
    """Test the two disk descriptor variants."""

    def test_reference_to_api(self):
        """Test an existing disk is attached by source, read-write, kept on delete."""
        disk = DiskReference(name="farmer-coreos-stateless-pd", source="https://x/disks/d")
        body = disk.to_api()
        self.assertFalse(body["autoDelete"])
        self.assertTrue(body["boot"])
        self.assertEqual(body["mode"], "READ_WRITE")
        self.assertEqual(body["source"], "https://x/disks/d")
        self.assertEqual(body["deviceName"], "farmer-coreos-stateless-pd")
        self.assertNotIn("initializeParams", body)

    def test_specification_to_api(self):
        """Test a fresh disk carries initialize params."""
        disk = DiskSpecification(
            name="d", source_image="img", size_gb=50, disk_type="ssd", auto_delete=True
        )
        body = disk.to_api()
        self.assertTrue(body["autoDelete"])
        self.assertNotIn("source", body)
        self.assertEqual(body["initializeParams"]["diskName"], "d")
        self.assertEqual(body["initializeParams"]["diskSizeGb"], "50")
        self.assertEqual(body["initializeParams"]["diskType"], "ssd")

    def test_specification_omits_default_disk_type(self):
        """Test an empty disk type leaves the provider default."""
        disk = DiskSpecification(
            name="d", source_image="img", size_gb=10, disk_type="", auto_delete=False
        )
        self.assertNotIn("diskType", disk.to_api()["initializeParams"])


class TestInstanceSpecification(unittest.TestCase):
    """Test InstanceSpecification rendering."""

    def _spec(self, nat_ip):
        return InstanceSpecification(
            name="farmer",
            machine_type="mt",
            disk=DiskReference(name="d", source="src"),
            nat_ip=nat_ip,
            network="net",
            metadata="#cloud-config",
            scopes=("s1", "s2"),
        )

    def test_to_api_with_static_ip(self):
        """Test the NAT IP lands in the access config."""
        body = self._spec("203.0.113.9").to_api()
        access = body["networkInterfaces"][0]["accessConfigs"][0]
        self.assertEqual(access["natIP"], "203.0.113.9")
        self.assertEqual(access["type"], "ONE_TO_ONE_NAT")
        self.assertEqual(body["tags"]["items"], ["http-server", "https-server", "allow-ssh"])
        self.assertEqual(body["metadata"]["items"][0]["key"], "user-data")
        self.assertEqual(body["serviceAccounts"][0]["scopes"], ["s1", "s2"])

    def test_to_api_unassigned_omits_nat_ip(self):
        """Test an unassigned address lets the provider allocate one."""
        body = self._spec(UNASSIGNED).to_api()
        self.assertNotIn("natIP", body["networkInterfaces"][0]["accessConfigs"][0])


class TestOperation(unittest.TestCase):
    """Test Operation snapshots."""

    def test_parse_known_statuses(self):
        """Test known statuses map onto the enum."""
        for value in ("PENDING", "RUNNING", "DONE"):
            self.assertEqual(OperationStatus.parse(value).value, value)

    def test_parse_unknown_status(self):
        """Test anything else is UNRECOGNIZED."""
        self.assertIs(OperationStatus.parse("ABORTING"), OperationStatus.UNRECOGNIZED)
        self.assertIs(OperationStatus.parse(None), OperationStatus.UNRECOGNIZED)

    def test_from_api_with_errors(self):
        """Test errors are lifted out of the error envelope."""
        op = Operation.from_api(
            {"name": "op-1", "status": "DONE", "error": {"errors": [{"code": "X"}]}}
        )
        self.assertTrue(op.done)
        self.assertEqual(op.errors, [{"code": "X"}])

    def test_from_api_keeps_raw_status(self):
        """Test the raw status survives for error reporting."""
        op = Operation.from_api({"name": "op-1", "status": "WEIRD"})
        self.assertEqual(op.raw_status, "WEIRD")
        self.assertFalse(op.done)
        self.assertEqual(op.errors, [])


if __name__ == "__main__":
    unittest.main()
