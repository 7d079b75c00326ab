"""Physical-law and safety checks on a solved circuit.

None of these raise: violations come back as strings or component ids and
the orchestrator folds them into the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from dcsim.circuit.admittance import Admittance
from dcsim.circuit.components import Component, ComponentType, RESISTIVE_TYPES
from dcsim.circuit.nodes import NodeMap

KCL_TOLERANCE_A = 0.001
KVL_TOLERANCE_V = 0.01
SHORT_CIRCUIT_LIMIT_A = 10.0


@dataclass
class LawCheck:
    """Outcome of a Kirchhoff law check."""
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)


def node_inflows(
    components: Sequence[Component],
    contributions: Sequence[Admittance],
    currents: dict[str, float],
    n_nodes: int,
) -> list[float]:
    """Net current entering each node from the components attached to it.

    A battery drives its current out of its ``from`` (positive) terminal
    into the node; a passive component draws its current from the ``from``
    node and returns it at the ``to`` node.
    """
    types = {c.id: c.type for c in components}
    inflow = [0.0] * n_nodes
    for adm in contributions:
        current = currents.get(adm.component_id, 0.0)
        sign = 1.0 if types.get(adm.component_id) == ComponentType.BATTERY else -1.0
        inflow[adm.from_node] += sign * current
        inflow[adm.to_node] -= sign * current
    return inflow


def validate_kcl(
    components: Sequence[Component],
    contributions: Sequence[Admittance],
    currents: dict[str, float],
    node_map: NodeMap,
    tolerance: float = KCL_TOLERANCE_A,
) -> LawCheck:
    """Kirchhoff's current law at every non-ground node."""
    inflow = node_inflows(components, contributions, currents, node_map.n_nodes)
    errors = []
    for node in range(1, node_map.n_nodes):
        total = inflow[node]
        if abs(total) > tolerance:
            errors.append(
                f"KCL violation at node {node_map.nodes[node]}: {total:.6f}A"
            )
    return LawCheck(is_valid=not errors, errors=errors)


def validate_kvl(
    components: Sequence[Component],
    currents: dict[str, float],
    tolerance: float = KVL_TOLERANCE_V,
) -> LawCheck:
    """Compare total battery EMF with the total resistive voltage drop.

    This is a whole-circuit balance, exact for a single series loop; parallel
    branches count their drops once each and will be reported.
    """
    total_emf = 0.0
    total_drop = 0.0
    for comp in components:
        if comp.type == ComponentType.BATTERY:
            total_emf += comp.emf
        elif comp.type in RESISTIVE_TYPES:
            total_drop += abs(currents.get(comp.id, 0.0) * comp.resistance)

    difference = abs(total_emf - total_drop)
    if difference > tolerance:
        return LawCheck(
            is_valid=False,
            errors=[f"KVL violation: voltage difference {difference:.6f}V"],
        )
    return LawCheck()


def detect_short_circuits(
    components: Sequence[Component],
    currents: dict[str, float],
    limit: float = SHORT_CIRCUIT_LIMIT_A,
) -> list[str]:
    """Ids of loads above the safety ceiling and fuses above their rating."""
    flagged = []
    for comp in components:
        current = abs(currents.get(comp.id, 0.0))
        if comp.type in (ComponentType.RESISTOR, ComponentType.BULB):
            if current > limit:
                flagged.append(comp.id)
        elif comp.type == ComponentType.FUSE:
            if current > comp.rating:
                flagged.append(comp.id)
    return flagged


def blown_fuses(
    components: Sequence[Component],
    currents: dict[str, float],
) -> set[str]:
    """Fuses that are blown after this tick.

    A fuse blows when ``|I|`` exceeds its rating and stays blown: a fuse the
    snapshot already marks blown carries no current and remains open.
    """
    blown = set()
    for comp in components:
        if comp.type != ComponentType.FUSE:
            continue
        if comp.properties.is_blown or abs(currents.get(comp.id, 0.0)) > comp.rating:
            blown.add(comp.id)
    return blown
