import pulumi

from node_deployer.config.load import load_config
from node_deployer.config.models import DeploymentType
from node_deployer.constants import DATA_ROOT
from node_deployer.components.node import create_nodes, dry_run
from node_deployer.components.rollup import RollupClientComponent
from node_deployer.providers.kubernetes import make_k8s_provider

# 1) load config
cfg = load_config()

if cfg.dry_run:
    # 2) check SSH connectivity only
    dry_run(cfg.connection)
    pulumi.export("deployType", cfg.deploy_type)
else:
    # 2) create k8s provider (kubernetes deployments only)
    k8s_provider = None
    if cfg.deployment_type == DeploymentType.KUBERNETES:
        k8s_provider = make_k8s_provider(kubernetes=cfg.kubernetes, connection=cfg.connection)

    # 3) create nodes
    nodes = create_nodes(
        cfg.node,
        replicas=cfg.replicas,
        jwt_secret=cfg.jwt_secret,
        connection=cfg.connection,
        provider=k8s_provider,
    )

    # 4) optional rollup client
    if cfg.rollup_client:
        RollupClientComponent(
            f"{cfg.node.name}-rollup",
            client=cfg.rollup_client,
            network=cfg.node.network,
            deployment_type=cfg.deployment_type,
            data_dir=f"{DATA_ROOT}/{cfg.node.network}/{cfg.rollup_client}",
            connection=cfg.connection,
        )

    # 5) export outputs
    pulumi.export("stack", cfg.stack)
    pulumi.export("deployType", cfg.deploy_type)
    pulumi.export("network", cfg.node.network)
    pulumi.export("executionClient", cfg.node.execution.name)
    pulumi.export("consensusClient", cfg.node.consensus.name)
    pulumi.export("nodeNames", [n.node_name for n in nodes])
