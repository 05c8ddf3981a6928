"""
Polling of the asynchronous instance-create operation.
"""

import logging
import time
from typing import Callable, Dict, Optional

from clients import ComputeRestClient
from errors import OperationError, OperationTimeout, UnknownOperationState
from models import Operation, OperationStatus

logger = logging.getLogger(__name__)


class OperationPoller:
    """Polls a zone operation at a fixed interval until it is DONE.

    With ``timeout=None`` (the default) the loop is unbounded and only an
    interrupt stops it. A numeric timeout raises OperationTimeout instead.
    """

    def __init__(
        self,
        api: ComputeRestClient,
        poll_interval: float = 2.0,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.sleep = sleep
        self.clock = clock

    def wait(self, op_name: str) -> Operation:
        """
        Block until the operation finishes successfully.

        Returns:
            The final DONE snapshot

        Raises:
            OperationError: If the operation finished with errors
            UnknownOperationState: If the status is not PENDING/RUNNING/DONE
            OperationTimeout: If a timeout is set and exceeded
            ComputeApiError: If fetching the operation fails
        """
        start = self.clock()
        while True:
            self.sleep(self.poll_interval)
            op = Operation.from_api(self.api.get_zone_operation(op_name))

            if op.status in (OperationStatus.PENDING, OperationStatus.RUNNING):
                logger.info(f"Waiting on operation {op_name} ({op.raw_status})")
                if self.timeout is not None and self.clock() - start > self.timeout:
                    raise OperationTimeout(op_name, self.timeout)
                continue

            if op.status is OperationStatus.DONE:
                if op.errors:
                    for err in op.errors:
                        logger.error(f"Error: {err}")
                    raise OperationError(op_name, op.errors)
                logger.info(f"Operation {op_name} succeeded")
                return op

            raise UnknownOperationState(op_name, op.raw_status)

    def run(self, op_name: str, instance_name: str) -> Dict:
        """
        Wait for the operation, then fetch the created instance once.

        Returns:
            The instance resource as reported by the provider
        """
        self.wait(op_name)
        return self.api.get_instance(instance_name)
