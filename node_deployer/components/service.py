import pulumi

from ..config.models import Connection
from ..recipes.common import script, unit_file_paths, unit_name
from .remote import copy_file, remote


class ServiceDefinitionComponent(pulumi.ComponentResource):
    """
    systemd unit `{service_type}.{network}` on the remote host.

    copy unit file -> enable -> start, each waiting on the previous one.
    Teardown runs stop, then disable. Two installs of the same unit name on
    one host are not coordinated.
    """

    def __init__(
        self,
        name: str,
        *,
        connection: Connection,
        service_type: str,
        network: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("node-deployer:systemd:ServiceDefinition", name, None, opts)

        self.service_type = service_type
        self.network = network
        self.unit = unit_name(service_type, network)

        local_path, remote_path = unit_file_paths(service_type, network)
        unit_file = copy_file(
            f"{name}-unit-file",
            connection=connection,
            local_path=local_path,
            remote_path=remote_path,
            opts=pulumi.ResourceOptions(parent=self),
        )

        enable = remote(
            f"{name}-enable",
            connection=connection,
            create=script("systemctl daemon-reload", f"systemctl enable {self.unit}"),
            delete=f"systemctl disable {self.unit}",
            opts=pulumi.ResourceOptions(parent=self, depends_on=[unit_file]),
        )

        remote(
            f"{name}-start",
            connection=connection,
            create=f"systemctl start {self.unit}",
            delete=f"systemctl stop {self.unit}",
            opts=pulumi.ResourceOptions(parent=self, depends_on=[enable]),
        )

        self.register_outputs({"unit": self.unit})
