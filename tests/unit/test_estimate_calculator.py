"""
Unit tests for the estimate calculator
"""

from decimal import Decimal

import pytest

from pump_estimator_core.engine.catalog import FALLBACK_PRICES, BUNDLE_FALLBACKS, Catalog, CatalogMaterial
from pump_estimator_core.engine.errors import (
    InvalidDischargePackage,
    InvalidNumericInput,
    NoMotorForHp,
    NoPipeForGpm,
    NoWireForSpec,
)
from pump_estimator_core.engine.estimate_calculator import (
    LINE_ITEM_COUNT,
    EstimateInput,
    _select_motor,
    calculate_estimate_line_items,
    calculate_total,
    format_quantity,
    motor_hp_from_name,
    sum_totals,
)

CALCULATOR_LOGGER = "pump_estimator_core.engine.estimate_calculator"


def _calculate(catalog, **values):
    return calculate_estimate_line_items(EstimateInput.build(**values), catalog)


def _fallback_warnings(caplog):
    return [
        record.getMessage()
        for record in caplog.records
        if record.name == CALCULATOR_LOGGER and record.levelname == "WARNING"
    ]


@pytest.mark.unit
class TestReferenceScenario:
    """60 GPM, 300 ft setting, 150 ft PWL, 60 psi, 240V, bundle A"""

    @pytest.fixture
    def result(self, sample_catalog, sample_inputs):
        return _calculate(sample_catalog, **sample_inputs)

    def test_sizing(self, result):
        assert result.pipe_name == '2" Pipe'
        assert result.total_friction_loss == Decimal("3")
        assert result.pressure_feet == Decimal("138")
        assert result.tdh == Decimal("291")
        assert Decimal("4.6988") < result.horsepower < Decimal("4.6989")
        assert result.motor_name == "5 HP Motor"
        assert result.wire_gauge == "#10"
        assert result.wire_quantity == Decimal("320")
        assert result.fallbacks == ()

    def test_line_items(self, result):
        rows = [(i.sort_order, i.description, i.quantity, i.rate, i.total) for i in result.line_items]
        assert rows == [
            (1, "5 HP 240V submersible pump capable of 60 GPM at 60 psi, 291 TDH set at 300 ft",
             "1", "0.00", "0.00"),
            (2, "Concrete pad", "1", "900.00", "900.00"),
            (3, "Labor to prep job", "2", "175.00", "350.00"),
            (4, "Labor to install submersible pump", "8", "395.00", "3160.00"),
            (5, "5 HP Motor", "1", "2581.86", "2581.86"),
            (6, "5 HP submersible pump", "1", "0.00", "0.00"),
            (7, '2" Pipe', "300", "11.08", "3324.00"),
            (8, "#10 FJ wire", "320", "3.95", "1264.00"),
            (9, "Sounding tube", "300", "1.00", "300.00"),
            (10, BUNDLE_FALLBACKS["A"][1], "1", "1700.00", "1700.00"),
            (11, "Ag sub pump startup", "1", "175.00", "175.00"),
        ]

    def test_total_amount(self, result):
        assert result.total_amount == "13754.86"

    def test_deterministic(self, sample_catalog, sample_inputs, result):
        assert _calculate(sample_catalog, **sample_inputs) == result


@pytest.mark.unit
class TestSelection:
    """Pipe and motor range matching"""

    @pytest.mark.parametrize(
        "gpm,pipe",
        [(30, '1.5" Pipe'), (54, '1.5" Pipe'), (55, '2" Pipe'), (70, '2" Pipe'), (71, '2.5" Pipe')],
    )
    def test_pipe_range_is_inclusive(self, sample_catalog, sample_inputs, gpm, pipe):
        sample_inputs.update(gpm=gpm, pumping_water_level=250)
        assert _calculate(sample_catalog, **sample_inputs).pipe_name == pipe

    @pytest.mark.parametrize("gpm", [29.5, 111, 9999])
    def test_no_pipe_for_gpm(self, sample_catalog, sample_inputs, gpm):
        sample_inputs["gpm"] = gpm
        with pytest.raises(NoPipeForGpm) as exc_info:
            _calculate(sample_catalog, **sample_inputs)
        assert exc_info.value.code == "NO_PIPE_FOR_GPM"

    def test_motor_max_is_inclusive(self, sample_catalog):
        assert _select_motor(sample_catalog, Decimal("5.5")).name == "5 HP Motor"
        assert _select_motor(sample_catalog, Decimal("3.5")).name == "3 HP Motor"

    def test_motor_min_is_exclusive(self):
        catalog = Catalog.from_rows(
            [CatalogMaterial(name="5 HP Motor", category="Motor", price=Decimal("2581.86"),
                             lookup_data={"hpMin": 3.5, "hpMax": 5.5})],
            [],
        )
        with pytest.raises(NoMotorForHp):
            _select_motor(catalog, Decimal("3.5"))
        assert _select_motor(catalog, Decimal("3.5001")).name == "5 HP Motor"

    def test_motor_gap_raises(self, sample_catalog):
        with pytest.raises(NoMotorForHp):
            _select_motor(sample_catalog, Decimal("5.505"))

    def test_motor_above_catalog_raises(self, sample_catalog, sample_inputs):
        sample_inputs.update(gpm=110, pressure_psi=200, pump_setting=800, pumping_water_level=700)
        with pytest.raises(NoMotorForHp):
            _calculate(sample_catalog, **sample_inputs)

    def test_motor_hp_from_name(self):
        assert motor_hp_from_name("7.5 HP Motor") == Decimal("7.5")
        assert motor_hp_from_name(" 10 HP Motor") == Decimal("10")
        assert motor_hp_from_name("Grundfos motor") is None


@pytest.mark.unit
class TestWireSelection:
    def test_480_volt_uses_its_chart(self, sample_catalog, sample_inputs):
        sample_inputs["voltage"] = 480
        assert _calculate(sample_catalog, **sample_inputs).wire_gauge == "#14"

    def test_unsupported_voltage(self, sample_catalog, sample_inputs):
        sample_inputs["voltage"] = 120
        with pytest.raises(NoWireForSpec):
            _calculate(sample_catalog, **sample_inputs)

    def test_missing_wire_row(self, make_catalog, sample_inputs):
        with pytest.raises(NoWireForSpec) as exc_info:
            _calculate(make_catalog(exclude={"#10"}), **sample_inputs)
        assert exc_info.value.context["gauge"] == "#10"


@pytest.mark.unit
class TestFallbacks:
    """Missing fixed-price rows use defaults and are reported"""

    def test_missing_bundle_b(self, make_catalog, sample_inputs, caplog):
        sample_inputs["discharge_package"] = "B"
        with caplog.at_level("WARNING", logger=CALCULATOR_LOGGER):
            result = _calculate(make_catalog(exclude={"Bundle B"}), **sample_inputs)

        warnings = _fallback_warnings(caplog)
        assert len(warnings) == 1
        assert "Bundle B" in warnings[0]
        assert "1450.00" in warnings[0]

        bundle = result.line_items[9]
        assert bundle.rate == "1450.00"
        assert bundle.description == BUNDLE_FALLBACKS["B"][1]
        assert result.fallbacks == ("bundle_b",)

    def test_missing_concrete_and_labor(self, make_catalog, sample_inputs, caplog):
        catalog = make_catalog(exclude={"Concrete Pad", "Prep Job Labor"})
        with caplog.at_level("WARNING", logger=CALCULATOR_LOGGER):
            result = _calculate(catalog, **sample_inputs)

        warnings = _fallback_warnings(caplog)
        assert len(warnings) == 2
        assert any("Concrete Pad" in message for message in warnings)
        assert any("Prep Job Labor" in message for message in warnings)

        assert result.line_items[1].rate == str(FALLBACK_PRICES["concrete_pad"])
        assert result.line_items[2].rate == "175.00"
        assert set(result.fallbacks) == {"concrete_pad", "prep_labor"}
        assert len(result.line_items) == LINE_ITEM_COUNT

    def test_fallback_prices_override(self, make_catalog, sample_inputs):
        inputs = EstimateInput.build(**sample_inputs)
        result = calculate_estimate_line_items(
            inputs, make_catalog(exclude={"Concrete Pad"}), fallback_prices={"concrete_pad": "950.00"}
        )
        assert result.line_items[1].total == "950.00"

    def test_no_warning_when_catalog_complete(self, sample_catalog, sample_inputs, caplog):
        with caplog.at_level("WARNING", logger=CALCULATOR_LOGGER):
            _calculate(sample_catalog, **sample_inputs)
        assert _fallback_warnings(caplog) == []

    def test_total_uses_displayed_rate(self, make_catalog, sample_inputs):
        inputs = EstimateInput.build(**sample_inputs)
        result = calculate_estimate_line_items(
            inputs, make_catalog(exclude={"Sounding Tube"}), fallback_prices={"sounding_tube": "1.005"}
        )

        sounding = result.line_items[8]
        assert (sounding.quantity, sounding.rate, sounding.total) == ("300", "1.01", "303.00")
        for item in result.line_items:
            assert item.total == calculate_total(item.quantity, item.rate)


@pytest.mark.unit
class TestEstimateInput:
    """Input normalization and validation"""

    def test_package_is_normalized(self, sample_inputs):
        sample_inputs["discharge_package"] = " c "
        assert EstimateInput.build(**sample_inputs).discharge_package == "C"

    def test_floats_become_exact_decimals(self, sample_inputs):
        sample_inputs["gpm"] = 60.1
        assert EstimateInput.build(**sample_inputs).gpm == Decimal("60.1")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("gpm", 0),
            ("gpm", -5),
            ("gpm", "abc"),
            ("gpm", float("nan")),
            ("pump_setting", float("inf")),
            ("pressure_psi", None),
            ("prep_time_hours", -1),
            ("voltage", True),
        ],
    )
    def test_invalid_numbers(self, sample_inputs, field, value):
        sample_inputs[field] = value
        with pytest.raises(InvalidNumericInput) as exc_info:
            EstimateInput.build(**sample_inputs)
        assert exc_info.value.code == "INVALID_NUMERIC_INPUT"

    def test_zero_hours_allowed(self, sample_catalog, sample_inputs):
        sample_inputs.update(prep_time_hours=0, install_time_hours=0, start_time_hours=0)
        result = _calculate(sample_catalog, **sample_inputs)
        assert result.line_items[2].total == "0.00"
        assert result.line_items[2].quantity == "0"

    @pytest.mark.parametrize("package", ["D", "", None, "AB"])
    def test_invalid_package(self, sample_inputs, package):
        sample_inputs["discharge_package"] = package
        with pytest.raises(InvalidDischargePackage):
            EstimateInput.build(**sample_inputs)


@pytest.mark.unit
class TestMoneyHelpers:
    def test_calculate_total_rounds_half_up(self):
        assert calculate_total("3", "0.335") == "1.01"
        assert calculate_total(Decimal("2.5"), Decimal("175")) == "437.50"

    @pytest.mark.parametrize("quantity,rate", [("abc", "1"), ("1", "NaN"), (None, "2")])
    def test_calculate_total_junk_is_zero(self, quantity, rate):
        assert calculate_total(quantity, rate) == "0.00"

    def test_sum_totals_skips_junk(self):
        assert sum_totals(["1.10", "2.20", None, "bad"]) == "3.30"

    def test_format_quantity(self):
        assert format_quantity(Decimal("300.000")) == "300"
        assert format_quantity(Decimal("2.50")) == "2.5"
        assert format_quantity(Decimal("1E+2")) == "100"
