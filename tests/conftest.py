"""
Test fixtures.

Component tests run under Pulumi's mock runtime: every registered resource
is recorded by RecordingMocks instead of reaching an engine. Recipe and
plan tests need no runtime at all.
"""
from __future__ import annotations

from collections import Counter

import pulumi
import pytest

from node_deployer.catalog import CATALOG
from node_deployer.config.models import (
    ClientSelection,
    ClientSpec,
    Connection,
    DeploymentType,
    NodeSpec,
    Role,
    WorkloadSpec,
)

NETWORKS = ("mainnet", "holesky", "sepolia", "base")

COMMAND = "command:remote:Command"
COPY = "command:remote:CopyToRemote"
CONFIG_MAP = "kubernetes:core/v1:ConfigMap"
SECRET = "kubernetes:core/v1:Secret"
PVC = "kubernetes:core/v1:PersistentVolumeClaim"
STATEFUL_SET = "kubernetes:apps/v1:StatefulSet"
SERVICE = "kubernetes:core/v1:Service"


class RecordingMocks(pulumi.runtime.Mocks):
    def __init__(self) -> None:
        self.resources: list[pulumi.runtime.MockResourceArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        return [f"{args.name}_id", args.inputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}

    def names(self, typ: str) -> list[str]:
        return [r.name for r in self.resources if r.typ == typ]

    def of_type(self, typ: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ == typ]

    def duplicates(self) -> list[tuple[str, str]]:
        counts = Counter((r.typ, r.name) for r in self.resources)
        return [key for key, n in counts.items() if n > 1]


@pytest.fixture(autouse=True)
def project_dir(tmp_path, monkeypatch):
    """Project root holding the start scripts and unit files recipes copy."""
    root = tmp_path / "project"
    (root / "scripts").mkdir(parents=True)
    (root / "systemd").mkdir()
    for network in NETWORKS:
        for client in [*(c.value for c in CATALOG), "alphanet"]:
            (root / "scripts" / f"start_{client}_{network}.sh").write_text("#!/usr/bin/env bash\n")
        for descriptor in CATALOG.values():
            for variant in [descriptor.default, *descriptor.variants.values()]:
                (root / "systemd" / f"{variant.service_type}.{network}.service").write_text("[Unit]\n")
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def mocks() -> RecordingMocks:
    m = RecordingMocks()
    pulumi.runtime.set_mocks(m, project="node-deployer", stack="test", preview=False)
    return m


@pytest.fixture
def run_program(mocks):
    """Run `fn` as a Pulumi program and wait for every registration."""

    def run(fn):
        pulumi.runtime.test(fn)()

    return run


@pytest.fixture
def warnings(monkeypatch) -> list[str]:
    logged: list[str] = []
    monkeypatch.setattr(pulumi.log, "warn", lambda msg, *args, **kwargs: logged.append(msg))
    return logged


@pytest.fixture
def connection() -> Connection:
    return Connection(host="10.0.0.20", user="root", private_key="test-key")


@pytest.fixture
def toml_file(tmp_path):
    path = tmp_path / "client.toml"
    path.write_text('[stages.headers]\ndownloader_max_concurrent_requests = 100\n', encoding="utf-8")
    return str(path)


@pytest.fixture
def workload(toml_file) -> WorkloadSpec:
    return WorkloadSpec(
        image="ghcr.io/example/client:latest",
        command=["client", "node"],
        configPath=toml_file,
        storageSize="30Gi",
        storageClass="standard",
    )


@pytest.fixture
def make_client_spec(workload):
    def make(
        role: Role,
        name: str,
        deployment_type: DeploymentType = DeploymentType.SOURCE,
        network: str = "holesky",
        **kwargs,
    ) -> ClientSpec:
        kwargs.setdefault("workload", workload if deployment_type == DeploymentType.KUBERNETES else None)
        kwargs.setdefault("jwt_secret", "0x" + "ab" * 32)
        kwargs.setdefault("data_dir", f"/data/{network}/{name}")
        return ClientSpec(role=role, name=name, network=network, deployment_type=deployment_type, **kwargs)

    return make


@pytest.fixture
def make_node_spec(workload):
    def make(deployment_type: DeploymentType = DeploymentType.SOURCE, **kwargs) -> NodeSpec:
        wl = workload if deployment_type == DeploymentType.KUBERNETES else None
        kwargs.setdefault("execution", ClientSelection(name="reth", workload=wl))
        kwargs.setdefault("consensus", ClientSelection(name="lighthouse", workload=wl))
        return NodeSpec(name="eth-node", network="holesky", deployment_type=deployment_type, **kwargs)

    return make
