import pulumi
import pulumi_kubernetes as k8s

from ..catalog import resolve, supported
from ..config.models import ClientSpec, Connection, Role
from .resources import apply_plan


class _ClientComponent(pulumi.ComponentResource):
    role: Role
    type_token: str

    def __init__(
        self,
        name: str,
        *,
        spec: ClientSpec,
        connection: Connection | None = None,
        provider: k8s.Provider | None = None,
        depends_on: list[pulumi.Resource] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(self.type_token, name, None, opts)

        self.client = spec.name
        self.network = spec.network
        self.resources: dict[str, pulumi.Resource] = {}

        recipe = resolve(self.role, spec.name)
        if recipe is None:
            choices = ", ".join(c.value for c in supported(self.role))
            pulumi.log.warn(
                f"unsupported {self.role.value} client {spec.name!r} (expected one of: {choices}); "
                "nothing will be provisioned",
                resource=self,
            )
        else:
            plan = recipe.plan(spec, scope=name)
            self.resources = apply_plan(
                plan,
                parent=self,
                connection=connection,
                provider=provider,
                depends_on=depends_on,
            )

        self.register_outputs({"client": self.client, "network": self.network})


class ExecutionClientComponent(_ClientComponent):
    role = Role.EXECUTION
    type_token = "node-deployer:client:ExecutionClient"


class ConsensusClientComponent(_ClientComponent):
    role = Role.CONSENSUS
    type_token = "node-deployer:client:ConsensusClient"
