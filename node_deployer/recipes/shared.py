from __future__ import annotations

import pulumi

from ..constants import BIN_DIR, JWT_FILE, REPOS_DIR, SCRIPTS_DIR, SHARED_DIR, SHARED_GROUP
from ..plan import Plan
from .common import script

CREATE_SHARED_DIR = "create-shared-dir"
CREATE_BIN_DIR = "create-bin-dir"
CREATE_SCRIPTS_DIR = "create-scripts-dir"
CREATE_REPOS_DIR = "create-repos-dir"
CREATE_SHARED_GROUP = "create-shared-group"
WRITE_JWT_SECRET = "write-jwt-secret"
RESTRICT_JWT_SECRET = "restrict-jwt-secret"


def shared_plan(scope: str, jwt_secret: pulumi.Input[str]) -> Plan:
    """
    Host-wide prerequisites of a source-deployed node.

    The JWT is written once from stdin so the secret never appears on a
    command line, then made readable by the shared group only.
    """
    plan = Plan(scope)

    shared = plan.add(CREATE_SHARED_DIR, "command", {"create": f"mkdir -p {SHARED_DIR}"})
    plan.add(CREATE_BIN_DIR, "command", {"create": f"mkdir -p {BIN_DIR}"})
    plan.add(CREATE_SCRIPTS_DIR, "command", {"create": f"mkdir -p {SCRIPTS_DIR}"})
    plan.add(CREATE_REPOS_DIR, "command", {"create": f"mkdir -p {REPOS_DIR}"})
    group = plan.add(
        CREATE_SHARED_GROUP,
        "command",
        {"create": f"getent group {SHARED_GROUP} >/dev/null || groupadd --system {SHARED_GROUP}"},
    )

    jwt = plan.add(
        WRITE_JWT_SECRET,
        "command",
        {
            "create": script("umask 077", f"cat > {JWT_FILE}"),
            "delete": f"rm -f {JWT_FILE}",
            "stdin": jwt_secret,
        },
        depends_on=[shared],
    )
    plan.add(
        RESTRICT_JWT_SECRET,
        "command",
        {
            "create": script(
                f"chgrp -R {SHARED_GROUP} {SHARED_DIR}",
                f"chmod 0640 {JWT_FILE}",
            ),
        },
        depends_on=[jwt, group],
    )

    return plan
