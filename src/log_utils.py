"""
Logging utilities for the build coordinator provisioner.
"""

import logging
import sys
from typing import Optional

# Chatty at DEBUG; only surfaced with --verbose.
NOISY_LOGGERS = ("urllib3", "google.auth", "requests_oauthlib")


def setup_logging(
    verbose: bool = False, log_file: Optional[str] = "coordinator-create.log"
) -> logging.Logger:
    """
    Set up logging for a provisioning run.

    Args:
        verbose: Enable verbose (DEBUG) logging, including HTTP client libraries
        log_file: Path to log file, or None to log to stdout only

    Returns:
        Logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logging.getLogger("provisioner")
