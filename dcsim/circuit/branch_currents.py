"""Branch currents from solved node voltages.

With ``dv = v_from - v_to`` across a component:

    battery          I = (V_emf - dv) / R_int   (positive: delivering)
    resistive types  I = dv / R                 (0 when open or R <= 0)
    capacitor        I = 0                      (DC steady state)

Components without a resolved contribution get no entry.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from dcsim.circuit.admittance import Admittance
from dcsim.circuit.components import Component, ComponentType, RESISTIVE_TYPES


def branch_current(component: Component, dv: float) -> float:
    """Current through a single component given its terminal voltage."""
    if component.type == ComponentType.BATTERY:
        r_int = component.resistance
        if r_int <= 0:
            return 0.0
        return (component.emf - dv) / r_int

    if component.type in RESISTIVE_TYPES:
        if not component.is_conducting:
            return 0.0
        resistance = component.resistance
        return dv / resistance if resistance > 0 else 0.0

    return 0.0


def calculate_branch_currents(
    components: Sequence[Component],
    contributions: Sequence[Admittance],
    node_voltages: np.ndarray,
) -> dict[str, float]:
    """Map component id → current (A) for every connected component."""
    by_id = {c.id: c for c in components}
    currents: dict[str, float] = {}
    for adm in contributions:
        comp = by_id.get(adm.component_id)
        if comp is None:
            continue
        currents[adm.component_id] = branch_current(comp, voltage_across(adm, node_voltages))
    return currents


def voltage_across(adm: Admittance, node_voltages: np.ndarray) -> float:
    """Signed voltage ``v_from - v_to`` for a contribution."""
    return float(node_voltages[adm.from_node] - node_voltages[adm.to_node])
