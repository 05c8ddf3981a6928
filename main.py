#!/usr/bin/env python3
"""
Build Coordinator Instance Provisioner (Compute Engine REST v1)

Creates the long-lived VM that runs the build farm coordinator:
- reuses the coordinator's persistent boot disk when it exists
- attaches the reserved "<instance>-ip" address when no static IP is given
- boots CoreOS with a cloud-config that fetches and runs the coordinator

This script supports running directly from a source checkout. It adds the
local `src/` directory to sys.path before importing the CLI. For production
use, prefer installing the project and using the `create-coordinator`
console script.

Examples:
  # Production instance with defaults
  python3 main.py

  # Dev cluster, with an SSH key authorized on the instance
  python3 main.py --staging --ssh-public-key ~/.ssh/id_ed25519.pub

  # Fresh throwaway disk, standard persistent disk type
  python3 main.py --instance-name farmer-test --no-reuse-disk --no-ssd
"""

import os
import sys

REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from cli import main

if __name__ == "__main__":
    sys.exit(main())
