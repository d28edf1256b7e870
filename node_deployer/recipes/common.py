from __future__ import annotations

import os

from ..constants import REPOS_DIR, SCRIPTS_DIR, START_SCRIPT_DIR, SYSTEMD_DIR, UNIT_FILE_DIR


def script(*lines: str) -> str:
    return "\n".join(["set -euo pipefail", *lines])


def repo_dir(network: str, client: str) -> str:
    return f"{REPOS_DIR}/{network}/{client}"


def start_script_name(client: str, network: str) -> str:
    return f"start_{client}_{network}.sh"


def start_script_paths(client: str, network: str) -> tuple[str, str]:
    """(local path, remote path) of a client's start script."""
    name = start_script_name(client, network)
    return f"{START_SCRIPT_DIR}/{name}", f"{SCRIPTS_DIR}/{name}"


def unit_name(service_type: str, network: str) -> str:
    return f"{service_type}.{network}"


def unit_file_paths(service_type: str, network: str) -> tuple[str, str]:
    """(local path, remote path) of a systemd unit file."""
    name = f"{unit_name(service_type, network)}.service"
    return f"{UNIT_FILE_DIR}/{name}", f"{SYSTEMD_DIR}/{name}"


def require_local_file(path: str, what: str) -> str:
    """Fail at plan time rather than on apply when a local asset is missing."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"{what} does not exist: {os.path.abspath(path)}")
    return path
