"""Snapshot input checks.

Deterministic rules run on a snapshot before (or alongside) analysis:

  1. Property ranges per component type
  2. Terminal count (the solver consumes exactly two)
  3. Duplicate component / connection ids
  4. Connection targets (unknown component, bad terminal, self-loop)
  5. Wiring (floating components, extra terminals ignored)

The analysis engine never rejects a snapshot; callers decide what to do
with the issues.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from dcsim.circuit.admittance import resolve_terminals
from dcsim.circuit.components import Component, ComponentType, Connection


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class CheckIssue:
    code: str
    severity: Severity
    message: str
    field: str = ""
    component_ids: tuple[str, ...] = ()


@dataclass
class CheckReport:
    errors: list[CheckIssue] = field(default_factory=list)
    warnings: list[CheckIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class PropertyRule:
    minimum: float
    maximum: float
    required: bool = False


PROPERTY_RULES: dict[ComponentType, dict[str, PropertyRule]] = {
    ComponentType.BATTERY: {
        "voltage": PropertyRule(0.1, 1000.0, required=True),
        "resistance": PropertyRule(0.001, 100.0),
    },
    ComponentType.BULB: {
        "resistance": PropertyRule(0.1, 10_000.0, required=True),
    },
    ComponentType.RESISTOR: {
        "resistance": PropertyRule(0.001, 1_000_000.0, required=True),
    },
    ComponentType.CAPACITOR: {
        "capacitance": PropertyRule(0.001, 10_000.0, required=True),
        "charge": PropertyRule(0.0, 1000.0),
    },
    ComponentType.SWITCH: {
        "resistance": PropertyRule(0.001, 100.0),
    },
    ComponentType.FUSE: {
        "max_current": PropertyRule(0.1, 100.0, required=True),
        "resistance": PropertyRule(0.001, 100.0),
    },
    ComponentType.AMMETER: {
        "resistance": PropertyRule(0.001, 100.0),
    },
    ComponentType.VOLTMETER: {
        "resistance": PropertyRule(1000.0, 10_000_000.0),
    },
}

SUPPLY_VOLTAGE_MAX = 1000.0


def check_property_ranges(components: Sequence[Component]) -> list[CheckIssue]:
    """Numeric properties must lie inside the per-type range."""
    issues = []
    for idx, comp in enumerate(components):
        for name, rule in PROPERTY_RULES.get(comp.type, {}).items():
            value = getattr(comp.properties, name)
            where = f"components[{idx}].properties.{name}"
            if value is None:
                if rule.required:
                    issues.append(CheckIssue(
                        code="W_DEFAULT_PROPERTY",
                        severity=Severity.WARNING,
                        message=f"{comp.id}: {name} not set for {comp.type.value}, default used",
                        field=where,
                        component_ids=(comp.id,),
                    ))
                continue
            if not isinstance(value, (int, float)) or math.isnan(value):
                issues.append(CheckIssue(
                    code="E_PROPERTY_NOT_NUMBER",
                    severity=Severity.ERROR,
                    message=f"{comp.id}: {name} must be a valid number",
                    field=where,
                    component_ids=(comp.id,),
                ))
            elif not rule.minimum <= value <= rule.maximum:
                issues.append(CheckIssue(
                    code="E_PROPERTY_RANGE",
                    severity=Severity.ERROR,
                    message=(
                        f"{comp.id}: {name} must be between "
                        f"{rule.minimum:g} and {rule.maximum:g}, got {value:g}"
                    ),
                    field=where,
                    component_ids=(comp.id,),
                ))
    return issues


def check_terminals(components: Sequence[Component]) -> list[CheckIssue]:
    issues = []
    for idx, comp in enumerate(components):
        count = len(comp.terminals)
        if count < 2:
            issues.append(CheckIssue(
                code="E_TOO_FEW_TERMINALS",
                severity=Severity.ERROR,
                message=f"{comp.id}: component must have at least 2 terminals, has {count}",
                field=f"components[{idx}].terminals",
                component_ids=(comp.id,),
            ))
        elif count > 2:
            issues.append(CheckIssue(
                code="W_EXTRA_TERMINALS",
                severity=Severity.WARNING,
                message=f"{comp.id}: {count} terminals, only two are solved",
                field=f"components[{idx}].terminals",
                component_ids=(comp.id,),
            ))
    return issues


def check_duplicate_ids(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> list[CheckIssue]:
    issues = []
    dup_components = sorted(k for k, n in Counter(c.id for c in components).items() if n > 1)
    if dup_components:
        issues.append(CheckIssue(
            code="E_DUPLICATE_COMPONENT_ID",
            severity=Severity.ERROR,
            message=f"Duplicate component IDs found: {', '.join(dup_components)}",
            field="components",
            component_ids=tuple(dup_components),
        ))
    dup_connections = sorted(k for k, n in Counter(c.id for c in connections).items() if n > 1)
    if dup_connections:
        issues.append(CheckIssue(
            code="E_DUPLICATE_CONNECTION_ID",
            severity=Severity.ERROR,
            message=f"Duplicate connection IDs found: {', '.join(dup_connections)}",
            field="connections",
        ))
    return issues


def check_connection_targets(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> list[CheckIssue]:
    """Every connection must join two terminals of two existing components."""
    by_id = {c.id: c for c in components}
    issues = []
    for idx, conn in enumerate(connections):
        where = f"connections[{idx}]"
        if conn.from_component_id == conn.to_component_id:
            issues.append(CheckIssue(
                code="E_SELF_CONNECTION",
                severity=Severity.ERROR,
                message=f"{conn.id}: cannot connect component {conn.from_component_id} to itself",
                field=f"{where}.to_component_id",
                component_ids=(conn.from_component_id,),
            ))
        for side, comp_id, terminal in (
            ("from", conn.from_component_id, conn.from_terminal),
            ("to", conn.to_component_id, conn.to_terminal),
        ):
            comp = by_id.get(comp_id)
            if comp is None:
                issues.append(CheckIssue(
                    code="E_UNKNOWN_COMPONENT",
                    severity=Severity.ERROR,
                    message=f"{conn.id}: component with ID {comp_id} not found",
                    field=f"{where}.{side}_component_id",
                ))
            elif not 0 <= terminal < len(comp.terminals):
                issues.append(CheckIssue(
                    code="E_BAD_TERMINAL",
                    severity=Severity.ERROR,
                    message=f"{conn.id}: invalid terminal index {terminal} for component {comp_id}",
                    field=f"{where}.{side}_terminal",
                    component_ids=(comp_id,),
                ))
    return issues


def check_wiring(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> list[CheckIssue]:
    """Flag components the solver will leave out or only partly use."""
    issues = []
    for comp in components:
        terminals = {
            conn.terminal_of(comp.id) for conn in connections if conn.touches(comp.id)
        }
        if resolve_terminals(comp, connections) is None:
            issues.append(CheckIssue(
                code="W_FLOATING_COMPONENT",
                severity=Severity.WARNING,
                message=f"{comp.id}: not wired on two terminals, excluded from analysis",
                component_ids=(comp.id,),
            ))
        elif len(terminals) > 2:
            issues.append(CheckIssue(
                code="W_IGNORED_TERMINALS",
                severity=Severity.WARNING,
                message=(
                    f"{comp.id}: wired on {len(terminals)} terminals, "
                    "only the first two are solved"
                ),
                component_ids=(comp.id,),
            ))
    return issues


def check_voltage(voltage: float) -> list[CheckIssue]:
    """Supply voltage must be a number in 0..1000 V."""
    if not isinstance(voltage, (int, float)) or math.isnan(voltage):
        return [CheckIssue(
            code="E_VOLTAGE_NOT_NUMBER",
            severity=Severity.ERROR,
            message="Voltage must be a valid number",
            field="voltage",
        )]
    if not 0 <= voltage <= SUPPLY_VOLTAGE_MAX:
        return [CheckIssue(
            code="E_VOLTAGE_RANGE",
            severity=Severity.ERROR,
            message=f"Voltage must be between 0 and {SUPPLY_VOLTAGE_MAX:g} volts, got {voltage:g}",
            field="voltage",
        )]
    return []


def check_circuit(
    components: Sequence[Component],
    connections: Sequence[Connection],
) -> CheckReport:
    """Run every snapshot check and split the issues by severity."""
    issues = [
        *check_property_ranges(components),
        *check_terminals(components),
        *check_duplicate_ids(components, connections),
        *check_connection_targets(components, connections),
        *check_wiring(components, connections),
    ]
    return CheckReport(
        errors=[i for i in issues if i.severity == Severity.ERROR],
        warnings=[i for i in issues if i.severity == Severity.WARNING],
    )
