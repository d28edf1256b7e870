import pulumi

from ..config.models import Connection, DeploymentType
from ..recipes.rollup import rollup_plan
from .resources import apply_plan


class RollupClientComponent(pulumi.ComponentResource):
    """Layer-2 rollup client. Only the source start script is managed so far."""

    def __init__(
        self,
        name: str,
        *,
        client: str,
        network: str,
        deployment_type: DeploymentType,
        data_dir: str,
        connection: Connection | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("node-deployer:rollup:RollupClient", name, None, opts)

        self.client = client
        self.network = network

        plan = rollup_plan(client, network, deployment_type, data_dir, scope=name)
        self.resources = apply_plan(plan, parent=self, connection=connection)

        self.register_outputs({"client": client, "network": network})
