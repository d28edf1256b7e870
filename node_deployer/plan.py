"""
Provisioning plans.

A Plan is the explicit step graph of one recipe. Recipes build plans as
plain data; nothing touches the Pulumi engine until
node_deployer.components.resources.apply_plan registers them, so a plan can
be validated (acyclic, every predecessor declared, unique object names)
before any side effect.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from graphlib import CycleError, TopologicalSorter
from typing import Any, Iterator, Literal, Mapping

StepKind = Literal[
    "command",
    "copy",
    "service",
    "config_map",
    "secret",
    "volume_claim",
    "stateful_set",
    "network_service",
]

KUBERNETES_KINDS: frozenset[str] = frozenset(
    {"config_map", "secret", "volume_claim", "stateful_set", "network_service"}
)


class PlanError(ValueError):
    pass


@dataclass(frozen=True)
class Step:
    name: str
    kind: StepKind
    args: Mapping[str, Any]
    depends_on: tuple[str, ...] = ()


@dataclass
class Plan:
    scope: str
    steps: dict[str, Step] = field(default_factory=dict)

    def add(
        self,
        name: str,
        kind: StepKind,
        args: Mapping[str, Any],
        *,
        depends_on: list[str] | tuple[str, ...] = (),
    ) -> str:
        if name in self.steps:
            raise PlanError(f"{self.scope}: duplicate step {name!r}")
        self.steps[name] = Step(name=name, kind=kind, args=args, depends_on=tuple(depends_on))
        return name

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps.values())

    def __len__(self) -> int:
        return len(self.steps)

    def __contains__(self, name: object) -> bool:
        return name in self.steps

    def __getitem__(self, name: str) -> Step:
        return self.steps[name]

    def ancestors(self, name: str) -> set[str]:
        """All steps `name` depends on, directly or transitively."""
        seen: set[str] = set()
        stack = list(self.steps[name].depends_on)
        while stack:
            dep = stack.pop()
            if dep in seen:
                continue
            seen.add(dep)
            if dep in self.steps:
                stack.extend(self.steps[dep].depends_on)
        return seen

    def object_names(self) -> list[tuple[str, str | None, str]]:
        """(kind, namespace, name) of every declared Kubernetes object."""
        out = []
        for step in self:
            if step.kind in KUBERNETES_KINDS:
                meta = step.args["metadata"]
                out.append((step.kind, meta.get("namespace"), meta["name"]))
        return out

    def validate(self) -> None:
        for step in self:
            missing = [d for d in step.depends_on if d not in self.steps]
            if missing:
                raise PlanError(f"{self.scope}: step {step.name!r} depends on unknown steps {missing}")

        seen: set[tuple[str, str | None, str]] = set()
        for key in self.object_names():
            if key in seen:
                raise PlanError(f"{self.scope}: {key[0]} {key[2]!r} declared twice")
            seen.add(key)

    def order(self) -> list[Step]:
        """Steps in a validated dependency order."""
        self.validate()
        sorter = TopologicalSorter({s.name: s.depends_on for s in self})
        try:
            return [self.steps[n] for n in sorter.static_order()]
        except CycleError as e:
            raise PlanError(f"{self.scope}: dependency cycle {e.args[1]}") from e
