import pulumi
import pulumi_kubernetes as k8s

from ..config.models import ClientSelection, ClientSpec, Connection, DeploymentType, NodeSpec, Role
from ..constants import DATA_ROOT
from ..recipes.shared import shared_plan
from .clients import ConsensusClientComponent, ExecutionClientComponent
from .remote import remote
from .resources import apply_plan


def replica_suffix(index: int) -> str:
    return f"-{index}"


def client_spec(
    node: NodeSpec,
    role: Role,
    selection: ClientSelection,
    *,
    jwt_secret: pulumi.Input[str] | None,
    instance: str = "",
) -> ClientSpec:
    return ClientSpec(
        role=role,
        name=selection.name,
        network=node.network,
        deployment_type=node.deployment_type,
        data_dir=f"{DATA_ROOT}/{node.network}/{selection.name}{instance}",
        repo=selection.repo,
        workload=selection.workload,
        jwt_secret=jwt_secret,
        instance=instance,
        namespace=node.namespace,
    )


class EthereumNode(pulumi.ComponentResource):
    """
    One execution client plus one consensus client sharing a JWT secret.

    Source deployments first provision the host-wide prerequisites
    (/data/shared, /data/bin, /data/scripts, /data/repos, jwt.hex); both
    clients wait on them. Kubernetes deployments hand the same secret value
    to both workloads instead.
    """

    def __init__(
        self,
        name: str,
        *,
        spec: NodeSpec,
        jwt_secret: pulumi.Input[str],
        connection: Connection | None = None,
        provider: k8s.Provider | None = None,
        instance: str = "",
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("node-deployer:node:EthereumNode", name, None, opts)

        self.node_name = name
        self.network = spec.network

        prerequisites: list[pulumi.Resource] = []
        if spec.deployment_type == DeploymentType.SOURCE:
            shared = apply_plan(
                shared_plan(f"{name}-shared", jwt_secret),
                parent=self,
                connection=connection,
            )
            prerequisites = list(shared.values())

        self.consensus = ConsensusClientComponent(
            f"{name}-consensus",
            spec=client_spec(spec, Role.CONSENSUS, spec.consensus, jwt_secret=jwt_secret, instance=instance),
            connection=connection,
            provider=provider,
            depends_on=prerequisites,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.execution = ExecutionClientComponent(
            f"{name}-execution",
            spec=client_spec(spec, Role.EXECUTION, spec.execution, jwt_secret=jwt_secret, instance=instance),
            connection=connection,
            provider=provider,
            depends_on=prerequisites,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs(
            {
                "nodeName": name,
                "network": spec.network,
                "executionClient": self.execution.client,
                "consensusClient": self.consensus.client,
            }
        )


def create_nodes(
    spec: NodeSpec,
    *,
    replicas: int,
    jwt_secret: pulumi.Input[str],
    connection: Connection | None = None,
    provider: k8s.Provider | None = None,
) -> list[EthereumNode]:
    """
    `replicas` structurally identical nodes.

    Each replica's names carry a suffix derived from its index alone
    (`{name}-0`, `{name}-1`, ...); a single replica keeps the bare names.
    Source deployments share one host, its checkouts and its systemd units,
    so they take exactly one replica.
    """
    if replicas < 1:
        raise ValueError(f"replicas must be >= 1, got {replicas}")
    if replicas > 1 and spec.deployment_type == DeploymentType.SOURCE:
        raise ValueError(f"source deployments run one node per host, got replicas={replicas}")

    if replicas == 1:
        return [EthereumNode(spec.name, spec=spec, jwt_secret=jwt_secret, connection=connection, provider=provider)]

    nodes = []
    for i in range(replicas):
        suffix = replica_suffix(i)
        nodes.append(
            EthereumNode(
                f"{spec.name}{suffix}",
                spec=spec,
                jwt_secret=jwt_secret,
                connection=connection,
                provider=provider,
                instance=suffix,
            )
        )
    return nodes


def dry_run(connection: Connection) -> pulumi.Resource:
    """Round-trip a no-op command to check SSH connectivity."""
    return remote("dry-run", connection=connection, create="echo 0", delete="echo 0")
