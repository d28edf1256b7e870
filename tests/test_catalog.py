import pytest

from node_deployer.catalog import CATALOG, ClientRecipe, lookup, resolve, supported
from node_deployer.config.models import ClientName, DeploymentType, Role

EXECUTION = ["reth", "geth", "nethermind"]
CONSENSUS = ["lighthouse", "prysm", "teku", "lodestar", "nimbus"]


def test_every_client_has_a_descriptor():
    assert set(CATALOG) == set(ClientName)


@pytest.mark.parametrize("name", EXECUTION)
def test_resolve_execution_clients(name):
    recipe = resolve(Role.EXECUTION, name)
    assert isinstance(recipe, ClientRecipe)
    assert recipe.descriptor.name.value == name
    assert recipe.descriptor.engine_port == 8551


@pytest.mark.parametrize("name", CONSENSUS)
def test_resolve_consensus_clients(name):
    recipe = resolve(Role.CONSENSUS, name)
    assert isinstance(recipe, ClientRecipe)
    assert recipe.descriptor.p2p_port == 9000
    assert recipe.descriptor.engine_port is None


def test_resolve_unknown_name_returns_none():
    assert resolve(Role.CONSENSUS, "gibberish") is None
    assert lookup("gibberish") is None


@pytest.mark.parametrize("role,name", [(Role.EXECUTION, "lighthouse"), (Role.CONSENSUS, "reth")])
def test_resolve_role_mismatch_returns_none(role, name):
    assert resolve(role, name) is None


def test_supported_lists_clients_per_role():
    assert [c.value for c in supported(Role.EXECUTION)] == EXECUTION
    assert [c.value for c in supported(Role.CONSENSUS)] == CONSENSUS


def test_reth_builds_op_reth_on_base():
    reth = CATALOG[ClientName.RETH]
    assert reth.variant("base").binary == "op-reth"
    assert reth.variant("holesky").binary == "reth"


@pytest.mark.parametrize("deployment_type", [DeploymentType.BINARY, DeploymentType.DOCKER])
def test_unsupported_deployment_type_warns_and_plans_nothing(deployment_type, make_client_spec, warnings):
    spec = make_client_spec(Role.EXECUTION, "reth", deployment_type)
    plan = resolve(Role.EXECUTION, "reth").plan(spec, scope="reth")

    assert len(plan) == 0
    assert len(warnings) == 1
    assert deployment_type.value in warnings[0]
