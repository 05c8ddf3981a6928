"""
Error taxonomy for the build coordinator provisioner.

Every error is terminal for a provisioning run.
"""

from typing import Dict, List, Optional


class ProvisionError(RuntimeError):
    """Base class for all provisioning failures."""


class ConfigurationError(ProvisionError):
    """Invalid or incomplete run configuration (missing project, unreadable key file)."""


class CredentialError(ProvisionError):
    """Token acquisition, exchange or cache I/O failed."""


class ComputeApiError(ProvisionError):
    """A Compute Engine REST call returned a non-success response."""

    def __init__(self, call: str, status_code: Optional[int], detail: str):
        self.call = call
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            super().__init__(f"{call} failed: {detail}")
        else:
            super().__init__(f"{call} failed ({status_code}): {detail}")


class ResolutionError(ProvisionError):
    """Disk or address listing failed."""


class ConfigTooLarge(ProvisionError):
    """Rendered startup metadata exceeds the provider's metadata value limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"cloud config length of {size} bytes is over {limit} byte limit"
        )


class SubmissionError(ProvisionError):
    """The instances.insert call was rejected."""


class OperationError(ProvisionError):
    """The create operation finished with one or more errors."""

    def __init__(self, op_name: str, errors: List[Dict]):
        self.op_name = op_name
        self.errors = errors
        codes = ", ".join(str(e.get("code", "UNKNOWN")) for e in errors)
        super().__init__(
            f"Operation {op_name} finished with {len(errors)} error(s): {codes}"
        )


class UnknownOperationState(ProvisionError):
    """The operation reported a status outside PENDING/RUNNING/DONE."""

    def __init__(self, op_name: str, status: str):
        self.op_name = op_name
        self.status = status
        super().__init__(f"Unknown status {status!r} for operation {op_name}")


class OperationTimeout(ProvisionError):
    """The operation did not reach DONE within the configured timeout."""

    def __init__(self, op_name: str, timeout: float):
        self.op_name = op_name
        self.timeout = timeout
        super().__init__(
            f"Operation {op_name} did not finish within {timeout:.0f}s"
        )
