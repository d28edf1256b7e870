import pulumi
from pulumi_command.remote import (
    Command,
    CommandArgs,
    ConnectionArgs,
    CopyToRemote,
    CopyToRemoteArgs,
)

from ..config.models import Connection


def connection_args(conn: Connection) -> ConnectionArgs:
    return ConnectionArgs(
        host=conn.host,
        user=conn.user,
        private_key=conn.private_key,
        port=conn.port,
    )


def remote(
    name: str,
    *,
    connection: Connection,
    create: pulumi.Input[str],
    update: pulumi.Input[str] | None = None,
    delete: pulumi.Input[str] | None = None,
    stdin: pulumi.Input[str] | None = None,
    triggers: list[str] | None = None,
    opts: pulumi.ResourceOptions | None = None,
) -> Command:
    return Command(
        name,
        CommandArgs(
            connection=connection_args(connection),
            create=create,
            update=update,
            delete=delete,
            stdin=stdin,
            triggers=triggers,
        ),
        opts=opts,
    )


def copy_file(
    name: str,
    *,
    connection: Connection,
    local_path: str,
    remote_path: str,
    opts: pulumi.ResourceOptions | None = None,
) -> CopyToRemote:
    return CopyToRemote(
        name,
        CopyToRemoteArgs(
            connection=connection_args(connection),
            source=pulumi.FileAsset(local_path),
            remote_path=remote_path,
        ),
        opts=opts,
    )
