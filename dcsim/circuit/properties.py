"""Per-component outputs the UI renders after each tick.

Every component gets its current. On top of that:

- bulb: dissipated power and brightness (0..1, saturating at full power)
- fuse: blown state
- ammeter / voltmeter: reading (|I| / |V|)
- capacitor: accumulated charge, stored energy ½CV², RC time constant
- inductor: flux L·I, stored energy ½LI², L/R time constant
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Sequence

import numpy as np

from dcsim.circuit.admittance import Admittance
from dcsim.circuit.branch_currents import voltage_across
from dcsim.circuit.components import Component, ComponentType

FULL_BRIGHTNESS_W = 10.0
FRAME_TIME_S = 0.016


@dataclass(frozen=True)
class ComponentUpdate:
    """Computed values for one component. ``None`` means not applicable."""
    current: float = 0.0
    power: float | None = None
    brightness: float | None = None
    reading: float | None = None
    is_blown: bool | None = None
    charge: float | None = None
    energy: float | None = None
    magnetic_flux: float | None = None
    time_constant: float | None = None

    def as_properties(self) -> dict[str, Any]:
        """Fields to merge into ``ComponentProperties``."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def calculate_component_updates(
    components: Sequence[Component],
    contributions: Sequence[Admittance],
    currents: dict[str, float],
    node_voltages: np.ndarray,
    blown: set[str],
    full_brightness_w: float = FULL_BRIGHTNESS_W,
    frame_time_s: float = FRAME_TIME_S,
) -> dict[str, ComponentUpdate]:
    """Display values for every component after one solve, keyed by id."""
    by_id = {adm.component_id: adm for adm in contributions}
    updates = {}

    for comp in components:
        current = currents.get(comp.id, 0.0)
        adm = by_id.get(comp.id)
        voltage = voltage_across(adm, node_voltages) if adm is not None else 0.0

        if comp.type == ComponentType.BULB:
            power = current * current * comp.resistance
            updates[comp.id] = ComponentUpdate(
                current=current,
                power=power,
                brightness=min(1.0, power / full_brightness_w),
            )
        elif comp.type == ComponentType.FUSE:
            updates[comp.id] = ComponentUpdate(current=current, is_blown=comp.id in blown)
        elif comp.type == ComponentType.AMMETER:
            updates[comp.id] = ComponentUpdate(current=current, reading=abs(current))
        elif comp.type == ComponentType.VOLTMETER:
            updates[comp.id] = ComponentUpdate(current=current, reading=abs(voltage))
        elif comp.type == ComponentType.CAPACITOR:
            capacitance = comp.capacitance
            updates[comp.id] = ComponentUpdate(
                current=current,
                charge=max(0.0, comp.properties.charge + current * frame_time_s),
                energy=0.5 * capacitance * voltage ** 2,
                time_constant=comp.resistance * capacitance,
            )
        elif comp.type == ComponentType.INDUCTOR:
            inductance = comp.inductance
            resistance = comp.resistance
            updates[comp.id] = ComponentUpdate(
                current=current,
                magnetic_flux=inductance * current,
                energy=0.5 * inductance * current ** 2,
                time_constant=inductance / resistance if resistance > 0 else None,
            )
        else:
            updates[comp.id] = ComponentUpdate(current=current)

    return updates
