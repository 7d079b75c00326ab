"""DC circuit analysis entry point.

``calculate_circuit_properties`` runs one simulation tick:

1. Extract nodes and pick ground
2. Build each component's Norton equivalent
3. Stamp the conductance matrix (and reference floating islands)
4. Solve G·v = I by Gaussian elimination
5. Recover branch currents
6. Check KCL / KVL, short circuits and fuses
7. Account for power and per-component display values

The function is pure and never raises: degenerate topologies come back with
``status`` set, and unexpected errors become a zero result carrying the
message in ``validation_errors``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from dcsim.circuit.admittance import collect_admittances
from dcsim.circuit.branch_currents import calculate_branch_currents
from dcsim.circuit.components import Component, ComponentType, Connection, NodeKey
from dcsim.circuit.matrix import build_nodal_system, reference_floating_islands
from dcsim.circuit.nodes import extract_nodes
from dcsim.circuit.power import PowerAnalysis, calculate_power_analysis
from dcsim.circuit.properties import ComponentUpdate, calculate_component_updates
from dcsim.circuit.solver import gaussian_solve, with_ground
from dcsim.circuit.validators import (
    blown_fuses,
    detect_short_circuits,
    validate_kcl,
    validate_kvl,
)
from dcsim.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class AnalysisStatus(str, Enum):
    EMPTY = "empty"          # no components
    SOLVED = "solved"
    SINGULAR = "singular"    # matrix singular, voltages and currents zeroed
    FAILED = "failed"        # unexpected error, zero result


@dataclass(frozen=True)
class CircuitResult:
    """Everything one tick computes. Built fresh on every call and read-only."""
    total_voltage: float = 0.0
    total_current: float = 0.0
    total_resistance: float = 0.0
    total_power: float = 0.0
    is_short_circuit: bool = False
    fuse_blown: bool = False
    status: AnalysisStatus = AnalysisStatus.EMPTY
    component_updates: Mapping[str, ComponentUpdate] = field(default_factory=dict)
    node_voltages: Mapping[NodeKey, float] = field(default_factory=dict)
    kcl_valid: bool = True
    kvl_valid: bool = True
    validation_errors: tuple[str, ...] = ()
    short_circuit_components: tuple[str, ...] = ()
    power_analysis: PowerAnalysis = field(default_factory=PowerAnalysis)

    def __post_init__(self):
        # Read-only views over private copies
        for name in ("component_updates", "node_voltages"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def current_of(self, component_id: str) -> float:
        """Branch current of a component, 0 when it carries none."""
        update = self.component_updates.get(component_id)
        return update.current if update is not None else 0.0


def calculate_circuit_properties(
    components: Sequence[Component],
    connections: Sequence[Connection],
    voltage: float,
    *,
    settings: Settings | None = None,
) -> CircuitResult:
    """Analyse one snapshot.

    Args:
        components: immutable component snapshot
        connections: wires between component terminals
        voltage: nominal supply voltage shown by the caller, reported as
            ``total_voltage`` and used for the equivalent resistance
        settings: thresholds override (defaults to ``dcsim.config.settings``)
    """
    if not components:
        return CircuitResult(status=AnalysisStatus.EMPTY)

    cfg = settings or default_settings
    start = time.perf_counter()
    try:
        result = _analyse(components, connections, voltage, cfg)
    except Exception as exc:
        logger.exception("Circuit analysis failed")
        return CircuitResult(
            status=AnalysisStatus.FAILED,
            kcl_valid=False,
            kvl_valid=False,
            validation_errors=(f"Analysis error: {exc}",),
        )

    duration_ms = round((time.perf_counter() - start) * 1000, 3)
    logger.debug(
        "Analysed %d components over %d nodes: %s (%.3fms)",
        len(components),
        len(result.node_voltages),
        result.status.value,
        duration_ms,
        extra={
            "node_count": len(result.node_voltages),
            "status": result.status.value,
            "duration_ms": duration_ms,
        },
    )
    return result


def _analyse(
    components: Sequence[Component],
    connections: Sequence[Connection],
    voltage: float,
    cfg: Settings,
) -> CircuitResult:
    node_map = extract_nodes(components, connections)
    contributions = collect_admittances(components, connections, node_map)

    system = build_nodal_system(contributions, node_map.n_nodes)
    if cfg.reference_floating_islands:
        system = reference_floating_islands(system, contributions)
        if system.pinned:
            logger.debug("Referenced %d floating island(s) at 0 V", len(system.pinned))

    solution = gaussian_solve(system.g, system.i, cfg.pivot_tolerance)
    errors: list[str] = []
    if solution.singular:
        logger.warning(
            "Singular conductance matrix (%d nodes), falling back to zero",
            node_map.n_nodes,
            extra={"node_count": node_map.n_nodes, "status": AnalysisStatus.SINGULAR.value},
        )
        errors.append("Singular conductance matrix: node voltages and currents set to 0")
        status = AnalysisStatus.SINGULAR
    else:
        status = AnalysisStatus.SOLVED

    voltages = with_ground(solution, node_map.n_nodes)
    if solution.singular:
        currents = {adm.component_id: 0.0 for adm in contributions}
    else:
        currents = calculate_branch_currents(components, contributions, voltages)

    kcl = validate_kcl(components, contributions, currents, node_map, cfg.kcl_tolerance_a)
    kvl = validate_kvl(components, currents, cfg.kvl_tolerance_v)
    if not kcl.is_valid:
        logger.warning("KCL validation failed: %s", kcl.errors)
    if not kvl.is_valid:
        logger.warning("KVL validation failed: %s", kvl.errors)
    errors.extend(kcl.errors)
    errors.extend(kvl.errors)

    shorted = detect_short_circuits(components, currents, cfg.short_circuit_limit_a)
    blown = blown_fuses(components, currents)
    for fuse_id in sorted(blown):
        logger.info("Fuse %s blown", fuse_id, extra={"component_id": fuse_id})

    power = calculate_power_analysis(components, currents)
    updates = calculate_component_updates(
        components,
        contributions,
        currents,
        voltages,
        blown,
        full_brightness_w=cfg.bulb_full_brightness_w,
        frame_time_s=cfg.frame_time_s,
    )

    total_current = sum(
        abs(currents.get(c.id, 0.0))
        for c in components
        if c.type == ComponentType.BATTERY
    )
    if voltage > 0 and total_current > 0:
        total_resistance = voltage / total_current
    else:
        total_resistance = 0.0

    return CircuitResult(
        total_voltage=voltage,
        total_current=total_current,
        total_resistance=total_resistance,
        total_power=power.total_consumed,
        is_short_circuit=bool(shorted),
        fuse_blown=bool(blown),
        status=status,
        component_updates=updates,
        node_voltages={key: float(voltages[i]) for i, key in enumerate(node_map.nodes)},
        kcl_valid=kcl.is_valid,
        kvl_valid=kvl.is_valid,
        validation_errors=tuple(errors),
        short_circuit_components=tuple(shorted),
        power_analysis=power,
    )
