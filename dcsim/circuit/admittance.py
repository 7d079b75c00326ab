"""Per-component Norton equivalents for nodal analysis.

Each connected component becomes a conductance ``g`` between two nodes in
parallel with a current source ``i_s``. Only batteries carry a source:

    battery:                  g = 1/R_int,  i_s = V / R_int
    resistor, bulb, ammeter,
    wire, inductor, voltmeter g = 1/R
    switch                    g = 1/R when on, else 0
    fuse                      g = 1/R while intact, else 0
    capacitor                 g = 0  (open at DC steady state)

Endpoints are oriented so ``from_node`` is the terminal-1 side (battery
positive) and ``to_node`` the terminal-0 side (battery negative).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dcsim.circuit.components import Component, ComponentType, Connection
from dcsim.circuit.nodes import NodeMap


@dataclass(frozen=True)
class Admittance:
    """Norton contribution of a single component."""
    component_id: str
    from_node: int
    to_node: int
    conductance: float       # siemens
    current_source: float    # amps, driven into from_node


def resolve_terminals(
    component: Component,
    connections: Sequence[Connection],
) -> tuple[int, int] | None:
    """Return the component's (from, to) terminal indices, or None.

    Terminals are read from the connections that reference the component,
    in order, taking the first two distinct ones. Fewer than two
    referencing connections means the component is floating.
    """
    touching = [c for c in connections if c.touches(component.id)]
    if len(touching) < 2:
        return None

    seen: list[int] = []
    for conn in touching:
        terminal = conn.terminal_of(component.id)
        if terminal is not None and terminal not in seen:
            seen.append(terminal)
        if len(seen) == 2:
            break
    if len(seen) < 2:
        return None

    high, low = max(seen), min(seen)
    return high, low


def resolve_nodes(
    component: Component,
    connections: Sequence[Connection],
    node_map: NodeMap,
) -> tuple[int, int] | None:
    """Node indices of the component's (from, to) terminals, or None."""
    terminals = resolve_terminals(component, connections)
    if terminals is None:
        return None
    from_node = node_map.index_of(component.id, terminals[0])
    to_node = node_map.index_of(component.id, terminals[1])
    if from_node is None or to_node is None:
        return None
    return from_node, to_node


def norton_equivalent(component: Component) -> tuple[float, float]:
    """(conductance, current_source) for a component, ignoring topology."""
    if component.type == ComponentType.CAPACITOR or not component.is_conducting:
        return 0.0, 0.0

    resistance = component.resistance
    if resistance <= 0:
        return 0.0, 0.0

    g = 1.0 / resistance
    if component.type == ComponentType.BATTERY:
        return g, component.emf / resistance
    return g, 0.0


def component_admittance(
    component: Component,
    connections: Sequence[Connection],
    node_map: NodeMap,
) -> Admittance | None:
    """Admittance contribution for one component, None if unconnected."""
    nodes = resolve_nodes(component, connections, node_map)
    if nodes is None:
        return None

    g, i_s = norton_equivalent(component)
    return Admittance(
        component_id=component.id,
        from_node=nodes[0],
        to_node=nodes[1],
        conductance=g,
        current_source=i_s,
    )


def collect_admittances(
    components: Sequence[Component],
    connections: Sequence[Connection],
    node_map: NodeMap,
) -> list[Admittance]:
    """Contributions of every connected component, in snapshot order."""
    contributions = []
    for comp in components:
        adm = component_admittance(comp, connections, node_map)
        if adm is not None:
            contributions.append(adm)
    return contributions
