"""Power and efficiency accounting.

Batteries: P = V_emf · I, counted as generated when positive and as
consumed (charging) otherwise. Resistive components dissipate I²R.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from dcsim.circuit.components import Component, ComponentType, RESISTIVE_TYPES


@dataclass(frozen=True)
class PowerAnalysis:
    """Circuit-wide power balance."""
    total_generated: float = 0.0   # W
    total_consumed: float = 0.0    # W
    efficiency: float = 0.0        # % of generated power reaching loads
    power_factor: float = 0.0      # consumed / generated
    component_power: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "component_power", MappingProxyType(dict(self.component_power)))


def component_power(component: Component, current: float) -> float:
    """Power (W) for a single component carrying ``current``."""
    if component.type == ComponentType.BATTERY:
        return component.emf * current
    if component.type in RESISTIVE_TYPES:
        return current * current * component.resistance
    return 0.0


def calculate_power_analysis(
    components: Sequence[Component],
    currents: dict[str, float],
) -> PowerAnalysis:
    """Sum generated and consumed power and keep a per-component breakdown."""
    generated = 0.0
    consumed = 0.0
    breakdown: dict[str, float] = {}

    for comp in components:
        power = component_power(comp, currents.get(comp.id, 0.0))
        if comp.type == ComponentType.BATTERY:
            if power > 0:
                generated += power
            else:
                consumed += abs(power)
        else:
            consumed += power
        breakdown[comp.id] = power

    if generated > 0:
        ratio = consumed / generated
        efficiency, power_factor = ratio * 100.0, ratio
    else:
        efficiency, power_factor = 0.0, 0.0

    return PowerAnalysis(
        total_generated=generated,
        total_consumed=consumed,
        efficiency=efficiency,
        power_factor=power_factor,
        component_power=breakdown,
    )
