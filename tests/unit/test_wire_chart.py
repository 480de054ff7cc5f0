"""
Unit tests for the wire-gauge chart
"""

from decimal import Decimal

import pytest

from pump_estimator_core.engine.wire_chart import WIRE_CHART, lookup_wire_gauge


@pytest.mark.unit
class TestLookupWireGauge:
    """Test chart resolution by voltage, horsepower and pump setting"""

    @pytest.mark.parametrize(
        "voltage,hp,ps,expected",
        [
            (480, 5, 590, "#14"),
            (480, 5, 591, "#12"),
            (480, 7.5, 420, "#14"),
            (480, 7.5, 421, "#12"),
            (480, 7.5, 681, "#10"),
            (480, 10, 500, "#12"),
            (480, 15, 240, "#10"),
            (480, 15, 241, "#8"),
            (480, 40, 800, "#2"),
            (480, 60, 2000, "#2"),
            (480, 75, 100, "#1"),
            (240, 5, 230, "#12"),
            (240, 5, 300, "#10"),
            (240, 5, 590, "#8"),
            (240, 5, 591, "#6"),
            (240, 7.5, 260, "#10"),
            (240, 10, 761, "#3"),
            (240, 15, 650, "#3"),
            (240, 30, 411, "#1"),
        ],
    )
    def test_chart_boundaries(self, voltage, hp, ps, expected):
        """Each step's max pump setting is inclusive"""
        assert lookup_wire_gauge(voltage, hp, ps) == expected

    def test_fractional_hp_uses_next_tier(self):
        """A 6 HP motor falls into the 7.5 HP tier"""
        assert lookup_wire_gauge(480, 6, 421) == "#12"

    def test_accepts_decimal_and_float_inputs(self):
        assert lookup_wire_gauge(Decimal("240"), Decimal("5"), Decimal("300")) == "#10"
        assert lookup_wire_gauge(240.0, 5.0, 300.0) == "#10"

    @pytest.mark.parametrize("voltage", [120, 208, 240.5])
    def test_unknown_voltage_returns_none(self, voltage):
        assert lookup_wire_gauge(voltage, 5, 300) is None

    def test_hp_above_chart_returns_none(self):
        assert lookup_wire_gauge(480, 100, 300) is None
        assert lookup_wire_gauge(240, 40, 300) is None

    def test_tiers_are_ordered_by_hp(self):
        for voltage, tiers in WIRE_CHART.items():
            limits = [max_hp for max_hp, _ in tiers]
            assert limits == sorted(limits), f"{voltage}V tiers out of order"
