from __future__ import annotations

import pulumi

from ..config.models import DeploymentType
from ..plan import Plan
from .common import require_local_file, start_script_paths

CREATE_DATA_DIR = "create-data-dir"
COPY_START_SCRIPT = "copy-start-script"
CHMOD_START_SCRIPT = "chmod-start-script"


def rollup_plan(client: str, network: str, deployment_type: DeploymentType, data_dir: str, scope: str) -> Plan:
    # Only the start script is managed so far; the rollup binary and its
    # service unit are installed by hand.
    plan = Plan(scope)
    if deployment_type != DeploymentType.SOURCE:
        pulumi.log.warn(f"{deployment_type.value} deployment of rollup client {client} not yet supported")
        return plan

    local_script, remote_script = start_script_paths(client, network)
    require_local_file(local_script, "start script")
    plan.add(CREATE_DATA_DIR, "command", {"create": f"mkdir -p {data_dir}"})
    copy = plan.add(COPY_START_SCRIPT, "copy", {"local_path": local_script, "remote_path": remote_script})
    plan.add(
        CHMOD_START_SCRIPT,
        "command",
        {"create": f"chmod +x {remote_script}", "delete": "echo 0"},
        depends_on=[copy],
    )
    return plan
