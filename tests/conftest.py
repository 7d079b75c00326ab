"""Shared test fixtures for dcsim engine and schema tests."""

from __future__ import annotations

import pytest

from dcsim.circuit.components import (
    Component,
    ComponentProperties,
    ComponentType,
    Connection,
)


# ======================================================================
# Snapshot builders (used by the fixtures below)
# ======================================================================

def _component(comp_id: str, comp_type: str | ComponentType, **props) -> Component:
    """Two-terminal component with the given properties."""
    return Component(id=comp_id, type=comp_type, properties=ComponentProperties(**props))


def _series_loop(battery: Component, *loads: Component) -> list[Connection]:
    """Wire ``battery`` (+) → load0 → load1 → ... → battery (-).

    Each load enters on terminal 0 and leaves on terminal 1.
    """
    chain = [battery, *loads, battery]
    connections = []
    for idx, (left, right) in enumerate(zip(chain, chain[1:])):
        connections.append(Connection(f"w{idx}", left.id, 1, right.id, 0))
    return connections


def _across(battery: Component, *loads: Component) -> list[Connection]:
    """Wire every load directly across the battery terminals."""
    connections = []
    for idx, load in enumerate(loads):
        connections.append(Connection(f"p{idx}a", battery.id, 1, load.id, 0))
        connections.append(Connection(f"p{idx}b", load.id, 1, battery.id, 0))
    return connections


# ======================================================================
# Circuit fixtures
# ======================================================================

@pytest.fixture
def battery() -> Component:
    """12 V source with 1 mΩ internal resistance."""
    return _component("bat", "battery", voltage=12.0, resistance=0.001)


@pytest.fixture
def series_circuit(battery) -> tuple[list[Component], list[Connection]]:
    """Battery driving a single 100 Ω resistor."""
    resistor = _component("r1", "resistor", resistance=100.0)
    return [battery, resistor], _series_loop(battery, resistor)


@pytest.fixture
def parallel_circuit(battery) -> tuple[list[Component], list[Connection]]:
    """100 Ω and 50 Ω resistors side by side across the battery."""
    r1 = _component("r1", "resistor", resistance=100.0)
    r2 = _component("r2", "resistor", resistance=50.0)
    return [battery, r1, r2], _across(battery, r1, r2)
