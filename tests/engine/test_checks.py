"""Tests for dcsim.circuit.checks: snapshot input rules."""

from __future__ import annotations

import pytest

from dcsim.circuit.checks import (
    Severity,
    check_circuit,
    check_connection_targets,
    check_duplicate_ids,
    check_property_ranges,
    check_terminals,
    check_voltage,
    check_wiring,
)
from dcsim.circuit.components import Component, ComponentProperties, Connection, Position


def _component(comp_id, comp_type, **props):
    return Component(id=comp_id, type=comp_type, properties=ComponentProperties(**props))


def _series_loop(battery, *loads):
    """Battery (+) through each load in turn and back to battery (-)."""
    chain = [battery, *loads, battery]
    return [
        Connection(f"w{idx}", left.id, 1, right.id, 0)
        for idx, (left, right) in enumerate(zip(chain, chain[1:]))
    ]


def _codes(issues):
    return [issue.code for issue in issues]


class TestPropertyRanges:

    def test_valid_values_pass(self):
        comps = [
            _component("b", "battery", voltage=9.0, resistance=0.5),
            _component("r", "resistor", resistance=1_000.0),
            _component("f", "fuse", max_current=2.0),
            _component("v", "voltmeter", resistance=1e6),
        ]
        assert check_property_ranges(comps) == []

    @pytest.mark.parametrize("comp_type,prop,value", [
        ("battery", "voltage", 2000.0),
        ("battery", "voltage", 0.01),
        ("resistor", "resistance", 2e6),
        ("bulb", "resistance", 0.01),
        ("switch", "resistance", 500.0),
        ("fuse", "max_current", 0.05),
        ("ammeter", "resistance", 101.0),
        ("voltmeter", "resistance", 10.0),
        ("capacitor", "capacitance", 1e5),
    ])
    def test_out_of_range(self, comp_type, prop, value):
        issues = check_property_ranges([_component("x", comp_type, **{prop: value})])
        assert _codes(issues) == ["E_PROPERTY_RANGE"]
        assert issues[0].severity == Severity.ERROR
        assert issues[0].field == f"components[0].properties.{prop}"
        assert issues[0].component_ids == ("x",)

    def test_nan_rejected(self):
        issues = check_property_ranges([_component("r", "resistor", resistance=float("nan"))])
        assert _codes(issues) == ["E_PROPERTY_NOT_NUMBER"]

    def test_missing_required_property_warns(self):
        issues = check_property_ranges([_component("b", "battery")])
        assert _codes(issues) == ["W_DEFAULT_PROPERTY"]
        assert issues[0].severity == Severity.WARNING

    def test_unchecked_types_pass(self):
        assert check_property_ranges([_component("w", "wire", resistance=1e9)]) == []


class TestStructure:

    def test_too_few_terminals(self):
        comp = Component(id="r", type="resistor", terminals=(Position(),))
        assert _codes(check_terminals([comp])) == ["E_TOO_FEW_TERMINALS"]

    def test_extra_terminals_warn(self):
        comp = Component(id="r", type="resistor", terminals=(Position(),) * 3)
        issues = check_terminals([comp])
        assert _codes(issues) == ["W_EXTRA_TERMINALS"]
        assert issues[0].severity == Severity.WARNING

    def test_duplicate_ids(self):
        comps = [_component("a", "resistor"), _component("a", "bulb")]
        conns = [Connection("c", "a", 0, "b", 0), Connection("c", "a", 1, "b", 1)]
        issues = check_duplicate_ids(comps, conns)
        assert _codes(issues) == ["E_DUPLICATE_COMPONENT_ID", "E_DUPLICATE_CONNECTION_ID"]
        assert issues[0].component_ids == ("a",)

    def test_self_connection(self):
        comps = [_component("r", "resistor")]
        issues = check_connection_targets(comps, [Connection("c", "r", 0, "r", 1)])
        assert _codes(issues) == ["E_SELF_CONNECTION"]

    def test_unknown_component(self):
        comps = [_component("r", "resistor")]
        issues = check_connection_targets(comps, [Connection("c", "r", 0, "ghost", 0)])
        assert _codes(issues) == ["E_UNKNOWN_COMPONENT"]
        assert issues[0].field == "connections[0].to_component_id"

    def test_terminal_out_of_range(self):
        comps = [_component("a", "resistor"), _component("b", "resistor")]
        issues = check_connection_targets(comps, [Connection("c", "a", 2, "b", -1)])
        assert _codes(issues) == ["E_BAD_TERMINAL", "E_BAD_TERMINAL"]

    def test_floating_component_warns(self, series_circuit):
        comps, conns = series_circuit
        issues = check_wiring(comps + [_component("loose", "bulb")], conns)
        assert _codes(issues) == ["W_FLOATING_COMPONENT"]
        assert issues[0].component_ids == ("loose",)

    def test_third_wired_terminal_warns(self):
        triple = Component(id="t", type="resistor", terminals=(Position(),) * 3)
        others = [_component("a", "resistor"), _component("b", "resistor"),
                  _component("c", "resistor")]
        conns = [
            Connection("c1", "t", 0, "a", 0),
            Connection("c2", "t", 1, "b", 0),
            Connection("c3", "t", 2, "c", 0),
        ]
        issues = check_wiring([triple, *others], conns)
        assert "W_IGNORED_TERMINALS" in _codes(issues)


class TestCheckVoltage:

    @pytest.mark.parametrize("voltage", [0.0, 12.0, 1000.0])
    def test_in_range(self, voltage):
        assert check_voltage(voltage) == []

    @pytest.mark.parametrize("voltage", [-1.0, 1000.5])
    def test_out_of_range(self, voltage):
        assert _codes(check_voltage(voltage)) == ["E_VOLTAGE_RANGE"]

    def test_nan(self):
        assert _codes(check_voltage(float("nan"))) == ["E_VOLTAGE_NOT_NUMBER"]


class TestCheckCircuit:

    def test_clean_series_circuit(self, battery):
        resistor = _component("r1", "resistor", resistance=100.0)
        report = check_circuit([battery, resistor], _series_loop(battery, resistor))
        assert report.is_valid
        assert report.errors == []
        assert report.warnings == []

    def test_errors_and_warnings_split(self, battery):
        resistor = _component("r1", "resistor", resistance=5e6)
        conns = _series_loop(battery, resistor) + [Connection("bad", "r1", 0, "ghost", 0)]
        report = check_circuit([battery, resistor, _component("loose", "wire")], conns)
        assert not report.is_valid
        assert _codes(report.errors) == ["E_PROPERTY_RANGE", "E_UNKNOWN_COMPONENT"]
        assert _codes(report.warnings) == ["W_FLOATING_COMPONENT"]
