import pulumi
import pulumi_kubernetes as k8s

from ..config.models import Connection
from ..plan import KUBERNETES_KINDS, Plan
from .remote import copy_file, remote
from .service import ServiceDefinitionComponent

_KUBERNETES_RESOURCES = {
    "config_map": k8s.core.v1.ConfigMap,
    "secret": k8s.core.v1.Secret,
    "volume_claim": k8s.core.v1.PersistentVolumeClaim,
    "stateful_set": k8s.apps.v1.StatefulSet,
    "network_service": k8s.core.v1.Service,
}


def apply_plan(
    plan: Plan,
    *,
    parent: pulumi.Resource,
    connection: Connection | None = None,
    provider: k8s.Provider | None = None,
    depends_on: list[pulumi.Resource] | None = None,
) -> dict[str, pulumi.Resource]:
    """
    Register every step of a validated plan with the Pulumi engine.

    Resources are named `{plan.scope}-{step}`. Steps without predecessors
    wait on `depends_on`; every other step waits on its own predecessors
    only. Returns the registered resources by step name.
    """
    created: dict[str, pulumi.Resource] = {}

    for step in plan.order():
        name = f"{plan.scope}-{step.name}"
        deps = [created[d] for d in step.depends_on] if step.depends_on else list(depends_on or [])

        if step.kind in KUBERNETES_KINDS:
            created[step.name] = _KUBERNETES_RESOURCES[step.kind](
                name,
                **step.args,
                opts=pulumi.ResourceOptions(parent=parent, depends_on=deps, provider=provider),
            )
            continue

        if connection is None:
            raise ValueError(f"{name}: {step.kind} step needs an SSH connection (set serverIP)")

        opts = pulumi.ResourceOptions(parent=parent, depends_on=deps)
        if step.kind == "command":
            created[step.name] = remote(name, connection=connection, opts=opts, **step.args)
        elif step.kind == "copy":
            created[step.name] = copy_file(name, connection=connection, opts=opts, **step.args)
        elif step.kind == "service":
            created[step.name] = ServiceDefinitionComponent(name, connection=connection, opts=opts, **step.args)
        else:
            raise ValueError(f"{name}: unknown step kind {step.kind!r}")

    return created
