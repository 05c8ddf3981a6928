"""Console entry point for the build coordinator provisioner."""

from __future__ import annotations

import argparse
import logging
from typing import List

from config import PROD_COORDINATOR_URL, PROD_PROJECT, ProvisionConfig
from errors import ProvisionError
from log_utils import setup_logging
from provisioner import CoordinatorProvisioner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Create the build coordinator VM on Compute Engine"
    )
    parser.add_argument("--project", default=PROD_PROJECT, help="GCP project ID")
    parser.add_argument("--zone", default="us-central1-f", help="GCE zone")
    parser.add_argument("--machine-type", default="n1-standard-4")
    parser.add_argument(
        "--instance-name", default="farmer", help="Name of VM instance"
    )
    parser.add_argument(
        "--ssh-public-key",
        action="append",
        metavar="FILE",
        help="SSH public key file to authorize (repeatable)",
    )
    parser.add_argument(
        "--static-ip",
        default="",
        help=(
            "Static IP to use. If empty, the pinned address of a known project "
            "is used, else a reserved <instance>-ip address, else an ephemeral one."
        ),
    )
    parser.add_argument(
        "--reuse-disk",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Reuse the boot disk between shutdowns/restarts",
    )
    parser.add_argument(
        "--ssd",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Use a solid state disk (faster, more expensive)",
    )
    parser.add_argument(
        "--coordinator", default=PROD_COORDINATOR_URL, help="Coordinator binary URL"
    )
    parser.add_argument(
        "--staging",
        action="store_true",
        help=(
            "Use dev cluster defaults for --project and --coordinator, and "
            "'staging-' prefixed OAuth token files"
        ),
    )
    parser.add_argument("--disk-size-gb", type=int, default=50)
    parser.add_argument("--poll-interval", type=float, default=2.0)
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up waiting on the create operation after this many seconds",
    )
    parser.add_argument(
        "--credentials-dir",
        default=".",
        help="Directory holding client-id.dat, client-secret.dat and token.dat",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    setup_logging(verbose=args.verbose)

    try:
        config = ProvisionConfig.from_args(args)
        CoordinatorProvisioner(config).run()
    except ProvisionError as e:
        logger.error(f"Provisioning failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    return 0
