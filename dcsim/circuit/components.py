"""Circuit snapshot value types.

Components, connections and node keys are immutable: the UI hands the engine
a fresh snapshot each tick and gets a new one back via ``snapshot.apply_result``.
Only the first two terminals of a component are consumed by the solver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ComponentType(str, Enum):
    BATTERY = "battery"
    RESISTOR = "resistor"
    BULB = "bulb"
    SWITCH = "switch"
    FUSE = "fuse"
    WIRE = "wire"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"
    AMMETER = "ammeter"
    VOLTMETER = "voltmeter"


# Types modelled as a plain conductance 1/R (switch and fuse only while closed/intact)
RESISTIVE_TYPES = frozenset({
    ComponentType.RESISTOR,
    ComponentType.BULB,
    ComponentType.FUSE,
    ComponentType.SWITCH,
    ComponentType.AMMETER,
    ComponentType.VOLTMETER,
    ComponentType.INDUCTOR,
    ComponentType.WIRE,
})

# Resistance used when a component does not specify one (ohms).
# Battery value is the internal resistance.
DEFAULT_RESISTANCE: dict[ComponentType, float] = {
    ComponentType.BATTERY: 0.001,
    ComponentType.RESISTOR: 100.0,
    ComponentType.BULB: 10.0,
    ComponentType.FUSE: 0.01,
    ComponentType.SWITCH: 0.001,
    ComponentType.WIRE: 0.001,
    ComponentType.AMMETER: 0.001,
    ComponentType.VOLTMETER: 1_000_000.0,
    ComponentType.INDUCTOR: 0.001,
    ComponentType.CAPACITOR: 1000.0,  # only used for the RC time constant
}

DEFAULT_BATTERY_VOLTAGE = 12.0
DEFAULT_FUSE_RATING_A = 1.0
DEFAULT_CAPACITANCE_F = 0.001
DEFAULT_INDUCTANCE_H = 0.001


@dataclass(frozen=True)
class Position:
    """Canvas coordinate of a component or terminal."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class ComponentProperties:
    """Typed property bag.

    Inputs are read by the solver. Outputs are written by analysis and only
    carried along so the UI can render them; ``is_blown`` and ``charge`` are
    both, since the next tick reads what the previous one wrote.
    """
    # Inputs
    resistance: float | None = None
    voltage: float | None = None
    is_on: bool = False
    is_blown: bool = False
    max_current: float | None = None
    capacitance: float | None = None
    inductance: float | None = None
    charge: float = 0.0
    # Outputs
    current: float | None = None
    power: float | None = None
    brightness: float | None = None
    reading: float | None = None
    energy: float | None = None
    magnetic_flux: float | None = None
    time_constant: float | None = None


@dataclass(frozen=True)
class Component:
    """A two-terminal circuit element on the canvas."""
    id: str
    type: ComponentType
    terminals: tuple[Position, ...] = (Position(), Position())
    properties: ComponentProperties = field(default_factory=ComponentProperties)
    position: Position = Position()

    def __post_init__(self) -> None:
        # Accept plain strings / lists from callers building snapshots by hand
        if not isinstance(self.type, ComponentType):
            object.__setattr__(self, "type", ComponentType(self.type))
        if not isinstance(self.terminals, tuple):
            object.__setattr__(self, "terminals", tuple(self.terminals))

    @property
    def resistance(self) -> float:
        """Resistance in ohms, falling back to the per-type default."""
        if self.properties.resistance is not None:
            return self.properties.resistance
        return DEFAULT_RESISTANCE[self.type]

    @property
    def emf(self) -> float:
        """Battery EMF in volts (0 for everything else)."""
        if self.type != ComponentType.BATTERY:
            return 0.0
        if self.properties.voltage is not None:
            return self.properties.voltage
        return DEFAULT_BATTERY_VOLTAGE

    @property
    def rating(self) -> float:
        """Fuse current rating in amps."""
        if self.properties.max_current is not None:
            return self.properties.max_current
        return DEFAULT_FUSE_RATING_A

    @property
    def capacitance(self) -> float:
        if self.properties.capacitance is not None:
            return self.properties.capacitance
        return DEFAULT_CAPACITANCE_F

    @property
    def inductance(self) -> float:
        if self.properties.inductance is not None:
            return self.properties.inductance
        return DEFAULT_INDUCTANCE_H

    @property
    def is_conducting(self) -> bool:
        """False for an open switch or a blown fuse."""
        if self.type == ComponentType.SWITCH:
            return self.properties.is_on
        if self.type == ComponentType.FUSE:
            return not self.properties.is_blown
        return True


@dataclass(frozen=True)
class Connection:
    """A wire from one component terminal to another."""
    id: str
    from_component_id: str
    from_terminal: int
    to_component_id: str
    to_terminal: int

    def terminal_of(self, component_id: str) -> int | None:
        """Terminal index this connection lands on for ``component_id``."""
        if self.from_component_id == component_id:
            return self.from_terminal
        if self.to_component_id == component_id:
            return self.to_terminal
        return None

    def touches(self, component_id: str) -> bool:
        return component_id in (self.from_component_id, self.to_component_id)


@dataclass(frozen=True, order=True)
class NodeKey:
    """One component terminal. Ordered by (component_id, terminal)."""
    component_id: str
    terminal: int

    def __str__(self) -> str:
        return f"{self.component_id}#{self.terminal}"
