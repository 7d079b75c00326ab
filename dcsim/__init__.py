"""dcsim: steady-state DC analysis of interactive circuit snapshots."""

from dcsim.circuit.analysis import AnalysisStatus, CircuitResult, calculate_circuit_properties
from dcsim.circuit.checks import check_circuit, check_voltage
from dcsim.circuit.components import (
    Component,
    ComponentProperties,
    ComponentType,
    Connection,
    NodeKey,
    Position,
)
from dcsim.circuit.snapshot import apply_result, run_ticks

__all__ = [
    "AnalysisStatus",
    "CircuitResult",
    "Component",
    "ComponentProperties",
    "ComponentType",
    "Connection",
    "NodeKey",
    "Position",
    "apply_result",
    "calculate_circuit_properties",
    "check_circuit",
    "check_voltage",
    "run_ticks",
]
