from dataclasses import asdict

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from dcsim.circuit.analysis import AnalysisStatus, CircuitResult
from dcsim.circuit.checks import CheckIssue, CheckReport, Severity
from dcsim.circuit.components import (
    Component,
    ComponentProperties,
    ComponentType,
    Connection,
    Position,
)

# The canvas speaks camelCase JSON; engine names stay snake_case
CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class PositionSchema(BaseModel):
    model_config = CAMEL_CONFIG

    x: float = 0.0
    y: float = 0.0

    def to_model(self) -> Position:
        return Position(x=self.x, y=self.y)


class ComponentPropertiesSchema(BaseModel):
    model_config = CAMEL_CONFIG

    resistance: float | None = Field(default=None, ge=0)
    voltage: float | None = None
    is_on: bool = False
    is_blown: bool = False
    max_current: float | None = Field(default=None, gt=0)
    capacitance: float | None = Field(default=None, gt=0)
    inductance: float | None = Field(default=None, gt=0)
    charge: float = 0.0
    # Outputs of the previous tick, carried through untouched
    current: float | None = None
    power: float | None = None
    brightness: float | None = None
    reading: float | None = None
    energy: float | None = None
    magnetic_flux: float | None = None
    time_constant: float | None = None

    def to_model(self) -> ComponentProperties:
        return ComponentProperties(**self.model_dump())


class ComponentSchema(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    type: ComponentType
    position: PositionSchema = Field(default_factory=PositionSchema)
    terminals: list[PositionSchema] = Field(
        default_factory=lambda: [PositionSchema(), PositionSchema()]
    )
    properties: ComponentPropertiesSchema = Field(default_factory=ComponentPropertiesSchema)

    def to_model(self) -> Component:
        return Component(
            id=self.id,
            type=self.type,
            terminals=tuple(t.to_model() for t in self.terminals),
            properties=self.properties.to_model(),
            position=self.position.to_model(),
        )


class ConnectionSchema(BaseModel):
    model_config = CAMEL_CONFIG

    id: str
    from_component_id: str
    from_terminal: int = Field(ge=0)
    to_component_id: str
    to_terminal: int = Field(ge=0)

    def to_model(self) -> Connection:
        return Connection(
            id=self.id,
            from_component_id=self.from_component_id,
            from_terminal=self.from_terminal,
            to_component_id=self.to_component_id,
            to_terminal=self.to_terminal,
        )


class CircuitSnapshot(BaseModel):
    """One tick's request: the canvas state plus the nominal supply voltage."""
    model_config = CAMEL_CONFIG

    components: list[ComponentSchema] = []
    connections: list[ConnectionSchema] = []
    voltage: float = Field(default=12.0, ge=0, le=1000)

    def to_components(self) -> tuple[Component, ...]:
        return tuple(c.to_model() for c in self.components)

    def to_connections(self) -> tuple[Connection, ...]:
        return tuple(c.to_model() for c in self.connections)


class ComponentUpdateSchema(BaseModel):
    model_config = CAMEL_CONFIG

    current: float = 0.0
    power: float | None = None
    brightness: float | None = None
    reading: float | None = None
    is_blown: bool | None = None
    charge: float | None = None
    energy: float | None = None
    magnetic_flux: float | None = None
    time_constant: float | None = None


class PowerAnalysisSchema(BaseModel):
    model_config = CAMEL_CONFIG

    total_generated: float
    total_consumed: float
    efficiency: float  # percent
    power_factor: float
    component_power: dict[str, float]  # component_id -> W


class CircuitResultResponse(BaseModel):
    model_config = CAMEL_CONFIG

    total_voltage: float
    total_current: float
    total_resistance: float
    total_power: float
    is_short_circuit: bool
    fuse_blown: bool
    status: AnalysisStatus
    updated_component_properties: dict[str, ComponentUpdateSchema]
    node_voltages: dict[str, float]  # "component_id#terminal" -> V
    kcl_valid: bool
    kvl_valid: bool
    validation_errors: list[str] = []
    short_circuit_components: list[str] = []
    power_analysis: PowerAnalysisSchema

    @classmethod
    def from_result(cls, result: CircuitResult) -> "CircuitResultResponse":
        power = result.power_analysis
        return cls(
            total_voltage=result.total_voltage,
            total_current=result.total_current,
            total_resistance=result.total_resistance,
            total_power=result.total_power,
            is_short_circuit=result.is_short_circuit,
            fuse_blown=result.fuse_blown,
            status=result.status,
            updated_component_properties={
                cid: ComponentUpdateSchema(**asdict(update))
                for cid, update in result.component_updates.items()
            },
            node_voltages={str(key): v for key, v in result.node_voltages.items()},
            kcl_valid=result.kcl_valid,
            kvl_valid=result.kvl_valid,
            validation_errors=list(result.validation_errors),
            short_circuit_components=list(result.short_circuit_components),
            power_analysis=PowerAnalysisSchema(
                total_generated=power.total_generated,
                total_consumed=power.total_consumed,
                efficiency=power.efficiency,
                power_factor=power.power_factor,
                component_power=dict(power.component_power),
            ),
        )


class CheckIssueSchema(BaseModel):
    model_config = CAMEL_CONFIG

    code: str
    severity: Severity
    message: str
    field: str = ""
    component_ids: list[str] = []


class CheckReportResponse(BaseModel):
    model_config = CAMEL_CONFIG

    is_valid: bool
    errors: list[CheckIssueSchema] = []
    warnings: list[CheckIssueSchema] = []

    @classmethod
    def from_report(cls, report: CheckReport) -> "CheckReportResponse":
        return cls(
            is_valid=report.is_valid,
            errors=[_issue_schema(i) for i in report.errors],
            warnings=[_issue_schema(i) for i in report.warnings],
        )


def _issue_schema(issue: CheckIssue) -> CheckIssueSchema:
    return CheckIssueSchema(
        code=issue.code,
        severity=issue.severity,
        message=issue.message,
        field=issue.field,
        component_ids=list(issue.component_ids),
    )
