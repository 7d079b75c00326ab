"""Tests for dcsim.circuit.validators: Kirchhoff checks, shorts and fuses."""

from __future__ import annotations

import pytest

from dcsim.circuit.admittance import collect_admittances
from dcsim.circuit.validators import (
    blown_fuses,
    detect_short_circuits,
    node_inflows,
    validate_kcl,
    validate_kvl,
)
from dcsim.circuit.components import Component, ComponentProperties
from dcsim.circuit.nodes import extract_nodes


def _component(comp_id, comp_type, **props):
    return Component(id=comp_id, type=comp_type, properties=ComponentProperties(**props))


def _series_topology(series_circuit):
    comps, conns = series_circuit
    node_map = extract_nodes(comps, conns)
    return comps, collect_admittances(comps, conns, node_map), node_map


class TestKCL:

    def test_balanced_currents_pass(self, series_circuit):
        comps, contributions, node_map = _series_topology(series_circuit)
        # Resistor is oriented ground -> node 1, so its current reads negative
        currents = {"bat": 0.12, "r1": -0.12}
        check = validate_kcl(comps, contributions, currents, node_map)
        assert check.is_valid
        assert check.errors == []

    def test_inflows_cancel(self, series_circuit):
        comps, contributions, node_map = _series_topology(series_circuit)
        inflow = node_inflows(comps, contributions, {"bat": 0.12, "r1": -0.12}, node_map.n_nodes)
        assert inflow == [pytest.approx(0.0), pytest.approx(0.0)]

    def test_imbalance_reported_per_node(self, series_circuit):
        comps, contributions, node_map = _series_topology(series_circuit)
        check = validate_kcl(comps, contributions, {"bat": 0.5, "r1": 0.0}, node_map)
        assert not check.is_valid
        assert check.errors == ["KCL violation at node bat#1: 0.500000A"]

    def test_tolerance(self, series_circuit):
        comps, contributions, node_map = _series_topology(series_circuit)
        currents = {"bat": 0.1205, "r1": -0.12}
        assert validate_kcl(comps, contributions, currents, node_map).is_valid
        assert not validate_kcl(comps, contributions, currents, node_map, tolerance=1e-4).is_valid


class TestKVL:

    def test_series_drop_matches_emf(self, series_circuit):
        comps, _ = series_circuit
        assert validate_kvl(comps, {"bat": 0.12, "r1": -0.12}).is_valid

    def test_mismatch_reported(self, series_circuit):
        comps, _ = series_circuit
        check = validate_kvl(comps, {"bat": 0.1, "r1": -0.1})
        assert not check.is_valid
        assert check.errors == ["KVL violation: voltage difference 2.000000V"]

    def test_parallel_branches_flagged(self, parallel_circuit):
        comps, _ = parallel_circuit
        # Each branch drops the full 12 V, so the whole-circuit sum is 24 V
        assert not validate_kvl(comps, {"bat": 0.36, "r1": -0.12, "r2": -0.24}).is_valid


class TestShortCircuits:

    def test_load_over_limit(self):
        comps = [
            _component("r", "resistor"),
            _component("l", "bulb"),
            _component("b", "battery"),
        ]
        flagged = detect_short_circuits(comps, {"r": -11.0, "l": 9.0, "b": 50.0})
        assert flagged == ["r"]

    def test_custom_limit(self):
        comps = [_component("l", "bulb")]
        assert detect_short_circuits(comps, {"l": 2.0}, limit=1.0) == ["l"]

    def test_fuse_over_rating(self):
        comps = [_component("f", "fuse", max_current=0.5)]
        assert detect_short_circuits(comps, {"f": 0.6}) == ["f"]
        assert detect_short_circuits(comps, {"f": 0.4}) == []


class TestBlownFuses:

    def test_blows_above_rating(self):
        comps = [_component("f", "fuse", max_current=1.0)]
        assert blown_fuses(comps, {"f": -1.5}) == {"f"}

    def test_exactly_at_rating_holds(self):
        comps = [_component("f", "fuse", max_current=1.0)]
        assert blown_fuses(comps, {"f": 1.0}) == set()

    def test_blown_fuse_stays_blown(self):
        comps = [_component("f", "fuse", max_current=1.0, is_blown=True)]
        assert blown_fuses(comps, {}) == {"f"}

    def test_default_rating_is_one_amp(self):
        comps = [_component("f", "fuse")]
        assert blown_fuses(comps, {"f": 1.01}) == {"f"}

    def test_other_types_ignored(self):
        comps = [_component("r", "resistor")]
        assert blown_fuses(comps, {"r": 100.0}) == set()
