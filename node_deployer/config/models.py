from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pulumi


class Role(str, Enum):
    EXECUTION = "execution"
    CONSENSUS = "consensus"


class DeploymentType(str, Enum):
    SOURCE = "source"
    BINARY = "binary"
    DOCKER = "docker"
    KUBERNETES = "kubernetes"


class ClientName(str, Enum):
    RETH = "reth"
    GETH = "geth"
    NETHERMIND = "nethermind"
    LIGHTHOUSE = "lighthouse"
    PRYSM = "prysm"
    TEKU = "teku"
    LODESTAR = "lodestar"
    NIMBUS = "nimbus"


class RollupClientName(str, Enum):
    ALPHANET = "alphanet"


@dataclass(frozen=True)
class Connection:
    """SSH target shared by every remote command of one deployment."""
    host: str
    user: str
    private_key: pulumi.Input[str]
    port: int = 22


@dataclass(frozen=True)
class RepoSpec:
    url: str
    branch: str


@dataclass(frozen=True)
class WorkloadSpec:
    """
    Container settings for a kubernetes deployment of one client.

    Field names follow the stack config keys so the object can be built
    with WorkloadSpec(**c.require_object("execution")).
    """
    image: str
    command: list[str]
    configPath: str
    storageSize: str = "30Gi"
    storageClass: str = "standard"
    snapshotName: str | None = None
    rpcIngress: bool | None = None
    cpuRequest: str = "2"
    memoryRequest: str = "8Gi"
    cpuLimit: str = "4"
    memoryLimit: str = "16Gi"
    # execution extension extras (reth ExEx)
    environment: dict[str, str] | None = None
    extraStorageSize: str | None = None
    extraSnapshotName: str | None = None
    extraStoragePath: str = "/root/.local/share/exex"


@dataclass(frozen=True)
class ClientSelection:
    name: str
    repo: RepoSpec | None = None
    workload: WorkloadSpec | None = None


@dataclass(frozen=True)
class ClientSpec:
    """Everything a recipe needs to plan one client. Never mutated."""
    role: Role
    name: str
    network: str
    deployment_type: DeploymentType
    data_dir: str
    repo: RepoSpec | None = None
    workload: WorkloadSpec | None = None
    jwt_secret: pulumi.Input[str] | None = None
    instance: str = ""
    namespace: str | None = None


@dataclass(frozen=True)
class NodeSpec:
    name: str
    network: str
    deployment_type: DeploymentType
    execution: ClientSelection
    consensus: ClientSelection
    namespace: str | None = None


@dataclass(frozen=True)
class KubernetesSpec:
    namespace: str | None = None
    kubeconfig: pulumi.Output[str] | None = None
    kubeconfigPath: str | None = None


@dataclass(frozen=True)
class Config:
    """
    In-memory config for the Pulumi program, assembled once by load.py.

    Notes:
      - connection is None for kubernetes deployments without a server.
      - jwt_secret is a Pulumi secret shared by both clients of every node.
    """
    stack: str
    deploy_type: str
    deployment_type: DeploymentType
    dry_run: bool
    node: NodeSpec
    replicas: int
    rollup_client: str | None
    connection: Connection | None
    jwt_secret: pulumi.Output[str] | None
    kubernetes: KubernetesSpec
