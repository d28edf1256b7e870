"""
Client catalog.

One ClientDescriptor per supported client holds everything that differs
between clients; the source and kubernetes recipe templates are shared.
resolve() maps a (role, name) pair onto a ClientRecipe.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import pulumi

from .config.models import ClientName, ClientSpec, DeploymentType, Role
from .constants import (
    CONSENSUS_P2P_PORT,
    ENGINE_PORT,
    EXECUTION_METRICS_PORT,
    EXECUTION_P2P_PORT,
    RPC_PORT,
)
from .plan import Plan
from .recipes.kubernetes import kubernetes_plan
from .recipes.source import source_plan


@dataclass(frozen=True)
class BuildVariant:
    """
    How a client is built and run for one network.

    Command templates may use {repo}, {client} and {bin_dir}.
    """
    build: str
    binary: str
    service_type: str
    install: str | None = None


@dataclass(frozen=True)
class ClientDescriptor:
    name: ClientName
    role: Role
    repo_url: str
    branch: str
    toolchain: str
    default: BuildVariant
    p2p_port: int
    metrics_port: int
    rpc_port: int
    config_file: str
    config_mount: str
    data_mount: str
    engine_port: int | None = None
    variants: Mapping[str, BuildVariant] = field(default_factory=dict)

    def variant(self, network: str) -> BuildVariant:
        return self.variants.get(network, self.default)


_CARGO = "~/.cargo/bin/cargo install --locked"


def _reth_for(network: str) -> BuildVariant:
    # testnet builds sit beside the mainnet binary as reth-{network}
    return BuildVariant(
        build="~/.cargo/bin/cargo build --locked --release --bin reth",
        binary=f"reth-{network}",
        service_type="reth",
        install=f"install -m 0755 {{repo}}/target/release/reth {{bin_dir}}/reth-{network}",
    )


def _execution(name: ClientName, **kw) -> ClientDescriptor:
    return ClientDescriptor(
        name=name,
        role=Role.EXECUTION,
        p2p_port=EXECUTION_P2P_PORT,
        metrics_port=EXECUTION_METRICS_PORT,
        rpc_port=RPC_PORT,
        engine_port=ENGINE_PORT,
        config_file=f"{name.value}.toml",
        config_mount=f"/etc/{name.value}",
        **kw,
    )


def _consensus(name: ClientName, *, metrics_port: int, rpc_port: int, **kw) -> ClientDescriptor:
    return ClientDescriptor(
        name=name,
        role=Role.CONSENSUS,
        p2p_port=CONSENSUS_P2P_PORT,
        metrics_port=metrics_port,
        rpc_port=rpc_port,
        config_file=f"{name.value}.toml",
        config_mount=f"/etc/{name.value}",
        **kw,
    )


CATALOG: dict[ClientName, ClientDescriptor] = {
    d.name: d
    for d in [
        _execution(
            ClientName.RETH,
            repo_url="https://github.com/paradigmxyz/reth",
            branch="main",
            toolchain="rust",
            default=BuildVariant(
                build=f"{_CARGO} --path bin/reth --bin reth --root /data",
                binary="reth",
                service_type="reth",
            ),
            variants={
                "base": BuildVariant(
                    build=f'{_CARGO} --path crates/optimism/bin --bin op-reth --features "optimism" --root /data',
                    binary="op-reth",
                    service_type="op-reth",
                ),
                "sepolia": _reth_for("sepolia"),
                "holesky": _reth_for("holesky"),
            },
            data_mount="/root/.local/share/reth",
        ),
        _execution(
            ClientName.GETH,
            repo_url="https://github.com/ethereum/go-ethereum",
            branch="master",
            toolchain="go",
            default=BuildVariant(
                build="sudo -u {client} make geth",
                binary="geth",
                service_type="geth",
                install="install -m 0755 {repo}/build/bin/geth {bin_dir}/geth",
            ),
            data_mount="/root/.ethereum",
        ),
        _execution(
            ClientName.NETHERMIND,
            repo_url="https://github.com/NethermindEth/nethermind",
            branch="master",
            toolchain="dotnet",
            default=BuildVariant(
                build="sudo -u {client} dotnet publish src/Nethermind/Nethermind.Runner -c Release -o out",
                binary="nethermind",
                service_type="nethermind",
                install="ln -sfn {repo}/out/nethermind {bin_dir}/nethermind",
            ),
            data_mount="/nethermind/data",
        ),
        _consensus(
            ClientName.LIGHTHOUSE,
            repo_url="https://github.com/sigp/lighthouse",
            branch="stable",
            toolchain="rust",
            default=BuildVariant(
                build=f"{_CARGO} --path lighthouse --bin lighthouse --root /data",
                binary="lighthouse",
                service_type="lighthouse",
            ),
            metrics_port=5054,
            rpc_port=5052,
            data_mount="/root/.lighthouse",
        ),
        _consensus(
            ClientName.PRYSM,
            repo_url="https://github.com/prysmaticlabs/prysm",
            branch="develop",
            toolchain="go",
            default=BuildVariant(
                build="sudo -u {client} go build -o build/beacon-chain ./cmd/beacon-chain",
                binary="beacon-chain",
                service_type="prysm",
                install="install -m 0755 {repo}/build/beacon-chain {bin_dir}/beacon-chain",
            ),
            metrics_port=5054,
            rpc_port=5052,
            data_mount="/root/.eth2",
        ),
        _consensus(
            ClientName.TEKU,
            repo_url="https://github.com/Consensys/teku",
            branch="master",
            toolchain="java",
            default=BuildVariant(
                build="sudo -u {client} ./gradlew installDist",
                binary="teku",
                service_type="teku",
                install="ln -sfn {repo}/build/install/teku/bin/teku {bin_dir}/teku",
            ),
            metrics_port=5054,
            rpc_port=5051,
            data_mount="/opt/teku/data",
        ),
        _consensus(
            ClientName.LODESTAR,
            repo_url="https://github.com/ChainSafe/lodestar",
            branch="stable",
            toolchain="node",
            default=BuildVariant(
                build="sudo -u {client} yarn install && sudo -u {client} yarn run build",
                binary="lodestar",
                service_type="lodestar",
                install="ln -sfn {repo}/lodestar {bin_dir}/lodestar",
            ),
            metrics_port=5064,
            rpc_port=5062,
            data_mount="/data/lodestar",
        ),
        _consensus(
            ClientName.NIMBUS,
            repo_url="https://github.com/status-im/nimbus-eth2",
            branch="stable",
            toolchain="cmake",
            default=BuildVariant(
                build="sudo -u {client} make -j4 nimbus_beacon_node",
                binary="nimbus_beacon_node",
                service_type="nimbus",
                install="install -m 0755 {repo}/build/nimbus_beacon_node {bin_dir}/nimbus_beacon_node",
            ),
            metrics_port=5054,
            rpc_port=5052,
            data_mount="/home/user/nimbus-eth2/build/data",
        ),
    ]
}


@dataclass(frozen=True)
class ClientRecipe:
    descriptor: ClientDescriptor

    def plan(self, spec: ClientSpec, scope: str) -> Plan:
        if spec.deployment_type == DeploymentType.SOURCE:
            return source_plan(self.descriptor, spec, scope)
        if spec.deployment_type == DeploymentType.KUBERNETES:
            return kubernetes_plan(self.descriptor, spec, scope)
        pulumi.log.warn(
            f"{spec.deployment_type.value} deployment type not yet supported for {self.descriptor.name.value}; "
            "nothing will be provisioned"
        )
        return Plan(scope)


def lookup(name: str | ClientName) -> ClientName | None:
    try:
        return ClientName(name)
    except ValueError:
        return None


def resolve(role: Role, name: str | ClientName) -> ClientRecipe | None:
    """
    Recipe for a (role, client name) pair.

    Unknown names and names of the other role give None rather than an
    error; callers log and provision nothing.
    """
    client = lookup(name)
    if client is None:
        return None
    descriptor = CATALOG[client]
    if descriptor.role != role:
        return None
    return ClientRecipe(descriptor)


def supported(role: Role) -> list[ClientName]:
    return [d.name for d in CATALOG.values() if d.role == role]
