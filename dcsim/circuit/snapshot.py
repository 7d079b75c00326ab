"""Fold an analysis result into the next tick's snapshot."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from dcsim.circuit.analysis import CircuitResult, calculate_circuit_properties
from dcsim.circuit.components import Component, Connection
from dcsim.config import Settings


def apply_result(
    components: Sequence[Component],
    result: CircuitResult,
) -> tuple[Component, ...]:
    """Return new components with the result's updates merged in.

    Components the result has no update for come back unchanged (same
    object). The input sequence and its components are never modified.
    """
    folded = []
    for comp in components:
        update = result.component_updates.get(comp.id)
        if update is None:
            folded.append(comp)
            continue
        properties = replace(comp.properties, **update.as_properties())
        folded.append(replace(comp, properties=properties))
    return tuple(folded)


def run_ticks(
    components: Sequence[Component],
    connections: Sequence[Connection],
    voltage: float,
    ticks: int,
    settings: Settings | None = None,
) -> tuple[tuple[Component, ...], list[CircuitResult]]:
    """Run ``ticks`` consecutive analyses, feeding each result forward.

    Returns the final snapshot and the per-tick results.
    """
    snapshot = tuple(components)
    results = []
    for _ in range(ticks):
        result = calculate_circuit_properties(snapshot, connections, voltage, settings=settings)
        results.append(result)
        snapshot = apply_result(snapshot, result)
    return snapshot, results
