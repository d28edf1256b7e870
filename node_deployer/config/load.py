import os

import pulumi

from ..catalog import CATALOG, lookup
from .models import (
    ClientSelection,
    Config,
    Connection,
    DeploymentType,
    KubernetesSpec,
    NodeSpec,
    RepoSpec,
    Role,
    RollupClientName,
    WorkloadSpec,
)

DEPLOY_TYPE_ENV = "DEPLOY_TYPE"
DRY_RUN = "dry-run"


def _read_private_key_from_path(path: str) -> pulumi.Output[str]:
    expanded = os.path.expanduser(path)
    if not os.path.isfile(expanded):
        raise FileNotFoundError(f"sshPrivateKeyPath does not exist: {expanded}")

    with open(expanded, "r", encoding="utf-8") as f:
        data = f.read()

    # Keep it secret inside Pulumi even though it was loaded locally
    return pulumi.Output.secret(data)


def _env_deploy_type() -> tuple[str, DeploymentType, bool]:
    raw = os.environ.get(DEPLOY_TYPE_ENV, "").strip().lower()
    if not raw:
        raise ValueError(f"Missing env var: {DEPLOY_TYPE_ENV} (one of source, binary, docker, kubernetes, dry-run)")
    if raw == DRY_RUN:
        return raw, DeploymentType.SOURCE, True
    try:
        return raw, DeploymentType(raw), False
    except ValueError:
        valid = [t.value for t in DeploymentType] + [DRY_RUN]
        raise ValueError(f"{DEPLOY_TYPE_ENV} must be one of {valid}. Got: {raw!r}") from None


def _client_selection(c: pulumi.Config, role: Role, default: str, deployment_type: DeploymentType) -> ClientSelection:
    key = f"{role.value}Client"
    name = c.get(key) or default

    client = lookup(name)
    if client is None or CATALOG[client].role != role:
        valid = sorted(d.name.value for d in CATALOG.values() if d.role == role)
        raise ValueError(f"Invalid {key} {name!r}. Must be one of {valid}")

    repo_url = c.get(f"{client.value}RepoUrl")
    branch = c.get(f"{client.value}Branch")
    repo = None
    if repo_url or branch:
        descriptor = CATALOG[client]
        repo = RepoSpec(url=repo_url or descriptor.repo_url, branch=branch or descriptor.branch)

    workload = None
    if deployment_type == DeploymentType.KUBERNETES:
        workload = WorkloadSpec(**c.require_object(role.value))

    return ClientSelection(name=client.value, repo=repo, workload=workload)


def load_config() -> Config:
    """
    Reads stack config from Pulumi.<stack>.yaml + Pulumi secrets, and the
    deployment type from $DEPLOY_TYPE.

    SSH behavior (source, dry-run, kubeconfigPath):
      - Prefer sshPrivateKeyPath (read ~/.ssh/... at deploy time)
      - Fallback to sshPrivateKey (secret in Pulumi config)

    Required keys:
      - serverIP (source / dry-run)
      - jwtSecret (secret; every deployment type except dry-run)
      - execution, consensus (objects; kubernetes only)
    """
    c = pulumi.Config()
    stack = pulumi.get_stack()

    deploy_type, deployment_type, dry_run = _env_deploy_type()

    network = c.get("network") or "mainnet"
    replicas = int(c.get("replicas") or 1)
    if replicas < 1:
        raise ValueError(f"replicas must be >= 1, got {replicas}")
    if replicas > 1 and deployment_type == DeploymentType.SOURCE and not dry_run:
        raise ValueError(f"source deployments run one node per host, got replicas={replicas}")

    kubernetes_raw = c.get_object("kubernetes") or {}
    kubernetes = KubernetesSpec(
        namespace=kubernetes_raw.get("namespace"),
        kubeconfig=c.get_secret("kubeconfig"),
        kubeconfigPath=kubernetes_raw.get("kubeconfigPath"),
    )

    node = NodeSpec(
        name=c.get("nodeName") or "eth-node",
        network=network,
        deployment_type=deployment_type,
        execution=_client_selection(c, Role.EXECUTION, "reth", deployment_type),
        consensus=_client_selection(c, Role.CONSENSUS, "lighthouse", deployment_type),
        namespace=kubernetes.namespace,
    )

    rollup = c.get("rollupClient")
    if rollup is not None and rollup not in {r.value for r in RollupClientName}:
        raise ValueError(f"Invalid rollupClient {rollup!r}. Must be one of {sorted(r.value for r in RollupClientName)}")

    connection = None
    server_ip = c.get("serverIP")
    needs_ssh = deployment_type == DeploymentType.SOURCE or bool(kubernetes.kubeconfigPath)
    if needs_ssh and not server_ip:
        raise ValueError("Missing required config key: serverIP")
    if server_ip:
        ssh_private_key_path = c.get("sshPrivateKeyPath")
        if ssh_private_key_path:
            ssh_private_key = _read_private_key_from_path(ssh_private_key_path)
        else:
            ssh_private_key = c.require_secret("sshPrivateKey")
        connection = Connection(
            host=server_ip,
            user=c.get("serverUser") or "root",
            private_key=ssh_private_key,
        )

    jwt_secret = None if dry_run else c.require_secret("jwtSecret")

    return Config(
        stack=stack,
        deploy_type=deploy_type,
        deployment_type=deployment_type,
        dry_run=dry_run,
        node=node,
        replicas=replicas,
        rollup_client=rollup,
        connection=connection,
        jwt_secret=jwt_secret,
        kubernetes=kubernetes,
    )
