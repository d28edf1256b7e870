"""
Source-build recipe template.

Step graph (arrows point at predecessors):

    create-data-dir
    clone-repo              -> create-data-dir
    create-service-account
    install-toolchain
    set-repo-ownership      -> clone-repo, create-service-account
    build                   -> install-toolchain, set-repo-ownership
    install-binary          -> build                  (clients that need it)
    copy-start-script
    chmod-start-script      -> copy-start-script
    service-unit            -> install-binary | build, chmod-start-script
    finalize-ownership      -> service-unit
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..config.models import ClientSpec, RepoSpec
from ..constants import BIN_DIR, SHARED_GROUP, TOOLCHAIN_INSTALLERS
from ..plan import Plan
from .common import repo_dir, require_local_file, script, start_script_paths, unit_file_paths

if TYPE_CHECKING:
    from ..catalog import ClientDescriptor

CREATE_DATA_DIR = "create-data-dir"
CLONE_REPO = "clone-repo"
CREATE_SERVICE_ACCOUNT = "create-service-account"
INSTALL_TOOLCHAIN = "install-toolchain"
SET_REPO_OWNERSHIP = "set-repo-ownership"
BUILD = "build"
INSTALL_BINARY = "install-binary"
COPY_START_SCRIPT = "copy-start-script"
CHMOD_START_SCRIPT = "chmod-start-script"
SERVICE_UNIT = "service-unit"
FINALIZE_OWNERSHIP = "finalize-ownership"


def source_plan(client: ClientDescriptor, spec: ClientSpec, scope: str) -> Plan:
    name = client.name.value
    user = name
    repo = repo_dir(spec.network, name)
    source = spec.repo or RepoSpec(url=client.repo_url, branch=client.branch)
    variant = client.variant(spec.network)
    local_script, remote_script = start_script_paths(name, spec.network)
    require_local_file(local_script, "start script")
    require_local_file(unit_file_paths(variant.service_type, spec.network)[0], "systemd unit file")
    fmt = {"repo": repo, "client": name, "bin_dir": BIN_DIR}

    plan = Plan(scope)

    data_dir = plan.add(CREATE_DATA_DIR, "command", {"create": f"mkdir -p {spec.data_dir}"})

    # update must not re-clone into an existing checkout
    clone = plan.add(
        CLONE_REPO,
        "command",
        {
            "create": script(
                f"mkdir -p {repo.rsplit('/', 1)[0]}",
                f"git clone -b {source.branch} {source.url} {repo}",
            ),
            "update": script(
                f"cd {repo}",
                "git fetch origin",
                f"git checkout {source.branch}",
                f"git pull --ff-only origin {source.branch}",
            ),
            "delete": f"rm -rf {repo}",
        },
        depends_on=[data_dir],
    )

    account = plan.add(
        CREATE_SERVICE_ACCOUNT,
        "command",
        {
            "create": script(
                f"getent group {SHARED_GROUP} >/dev/null || groupadd --system {SHARED_GROUP}",
                f"id -u {user} >/dev/null 2>&1 || useradd --system --no-create-home --user-group --groups {SHARED_GROUP} {user}",
            ),
        },
    )

    toolchain = plan.add(INSTALL_TOOLCHAIN, "command", {"create": TOOLCHAIN_INSTALLERS[client.toolchain]})

    ownership = plan.add(
        SET_REPO_OWNERSHIP,
        "command",
        {"create": f"chown -R {user}:{user} {repo}"},
        depends_on=[clone, account],
    )

    build = plan.add(
        BUILD,
        "command",
        {
            "create": script(f"cd {repo}", variant.build.format(**fmt)),
            "triggers": [source.url, source.branch],
        },
        depends_on=[toolchain, ownership],
    )

    installed = build
    if variant.install:
        installed = plan.add(
            INSTALL_BINARY,
            "command",
            {
                "create": script(f"mkdir -p {BIN_DIR}", variant.install.format(**fmt)),
                "triggers": [source.url, source.branch],
            },
            depends_on=[build],
        )

    copy = plan.add(COPY_START_SCRIPT, "copy", {"local_path": local_script, "remote_path": remote_script})
    chmod = plan.add(
        CHMOD_START_SCRIPT,
        "command",
        {"create": f"chmod +x {remote_script}"},
        depends_on=[copy],
    )

    service = plan.add(
        SERVICE_UNIT,
        "service",
        {"service_type": variant.service_type, "network": spec.network},
        depends_on=[installed, chmod],
    )

    plan.add(
        FINALIZE_OWNERSHIP,
        "command",
        {
            "create": script(
                f"chown -R {user}:{user} {spec.data_dir}",
                f"chown -h {user}:{user} {BIN_DIR}/{variant.binary}",
                f"chown {user}:{user} {remote_script}",
            ),
        },
        depends_on=[service],
    )

    return plan
