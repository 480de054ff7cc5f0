"""
Estimate Calculator
Pump sizing (TDH, horsepower), catalog matching and the 11 priced line items
"""
import logging
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, List, Mapping, Optional, Tuple

from .catalog import (
    BUNDLE_FALLBACKS,
    CONCRETE_PAD_NAME,
    FALLBACK_PRICES,
    INSTALL_LABOR_NAME,
    PREP_LABOR_NAME,
    SOUNDING_TUBE_NAME,
    STARTUP_LABOR_NAME,
    Catalog,
    CatalogMaterial,
    MaterialCategory,
    to_decimal,
)
from .errors import (
    InvalidDischargePackage,
    InvalidNumericInput,
    NoMotorForHp,
    NoPipeForGpm,
    NoWireForSpec,
)
from .wire_chart import lookup_wire_gauge

logger = logging.getLogger(__name__)

# Hydraulic constants
PSI_TO_FEET = Decimal("2.3")
HP_CONVERSION = Decimal("0.746")
PUMP_EFFICIENCY = Decimal("0.70")
HP_DIVISOR = Decimal("3960")
WIRE_SERVICE_MARGIN_FT = Decimal("20")

LINE_ITEM_COUNT = 11
DISCHARGE_PACKAGES = ("A", "B", "C")

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")
_ZERO_TOTAL = "0.00"
_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class EstimateInput:
    """Hydraulic and electrical parameters for one calculation"""
    gpm: Decimal
    pump_setting: Decimal
    pumping_water_level: Decimal
    pressure_psi: Decimal
    voltage: Decimal
    prep_time_hours: Decimal
    install_time_hours: Decimal
    start_time_hours: Decimal
    discharge_package: str

    @classmethod
    def build(cls, **values: Any) -> "EstimateInput":
        """
        Normalize raw numbers to Decimal and validate them.

        Raises:
            InvalidNumericInput: non-numeric, non-finite or out-of-range value
            InvalidDischargePackage: package not in A/B/C
        """
        positive = ("gpm", "pump_setting", "pumping_water_level", "pressure_psi", "voltage")
        non_negative = ("prep_time_hours", "install_time_hours", "start_time_hours")

        normalized = {}
        for name in positive + non_negative:
            if name not in values or values[name] is None:
                raise InvalidNumericInput(f"Missing value for {name}", field=name)
            try:
                number = to_decimal(values[name])
            except (TypeError, ArithmeticError):
                raise InvalidNumericInput(
                    f"Value for {name} is not a number", field=name, value=values[name]
                )
            if not number.is_finite():
                raise InvalidNumericInput(f"Value for {name} is not finite", field=name)
            if name in positive and number <= 0:
                raise InvalidNumericInput(f"Value for {name} must be positive", field=name)
            if name in non_negative and number < 0:
                raise InvalidNumericInput(f"Value for {name} must not be negative", field=name)
            normalized[name] = number

        package = str(values.get("discharge_package") or "").strip().upper()
        if package not in DISCHARGE_PACKAGES:
            raise InvalidDischargePackage(
                f"Unknown discharge package '{values.get('discharge_package')}'",
                allowed="/".join(DISCHARGE_PACKAGES),
            )

        return cls(discharge_package=package, **normalized)


@dataclass(frozen=True)
class CalculatedLineItem:
    """One priced row of an estimate; numbers are decimal strings"""
    sort_order: int
    description: str
    quantity: str
    rate: str
    total: str
    notes: Optional[str] = None
    is_taxable: bool = False


@dataclass(frozen=True)
class CalculationResult:
    line_items: Tuple[CalculatedLineItem, ...]
    pipe_name: str
    total_friction_loss: Decimal
    pressure_feet: Decimal
    tdh: Decimal
    horsepower: Decimal
    motor_name: str
    wire_gauge: str
    wire_quantity: Decimal
    fallbacks: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_amount(self) -> str:
        return sum_totals(item.total for item in self.line_items)


def format_quantity(value: Decimal) -> str:
    """Plain decimal text without exponent or trailing zeros"""
    if value == value.to_integral_value():
        return str(value.quantize(_UNITS))
    return format(value.normalize(), "f")


def format_money(value: Decimal) -> str:
    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def calculate_total(quantity: Any, rate: Any) -> str:
    """quantity x rate rounded half-up to cents; NaN or junk operands give 0.00"""
    try:
        qty = to_decimal(quantity)
        unit_rate = to_decimal(rate)
    except (TypeError, ArithmeticError):
        logger.error(f"Non-numeric line item operands: quantity={quantity!r} rate={rate!r}")
        return _ZERO_TOTAL
    if not qty.is_finite() or not unit_rate.is_finite():
        return _ZERO_TOTAL
    return format_money(qty * unit_rate)


def sum_totals(totals) -> str:
    """Sum decimal-string totals to 2 places"""
    amount = Decimal("0")
    for total in totals:
        try:
            value = to_decimal(total if total is not None else 0)
        except (TypeError, ArithmeticError):
            continue
        if value.is_finite():
            amount += value
    return format_money(amount)


def motor_hp_from_name(name: str) -> Optional[Decimal]:
    """Leading numeric token of a motor name ("7.5 HP Motor" -> 7.5)"""
    match = _LEADING_NUMBER.match(name or "")
    if not match:
        return None
    return Decimal(match.group(1))


def _strip_motor_suffix(name: str) -> str:
    return name.replace(" Motor", "")


def _select_pipe(catalog: Catalog, gpm: Decimal) -> CatalogMaterial:
    for pipe in catalog.materials(MaterialCategory.PIPE):
        gpm_min = pipe.lookup_decimal("gpmMin")
        gpm_max = pipe.lookup_decimal("gpmMax")
        if gpm_min is None or gpm_max is None:
            continue
        if gpm_min <= gpm <= gpm_max:
            return pipe
    raise NoPipeForGpm(
        f"No active pipe material found for GPM {format_quantity(gpm)}",
        gpm=format_quantity(gpm),
    )


def _select_motor(catalog: Catalog, hp: Decimal) -> CatalogMaterial:
    for motor in catalog.materials(MaterialCategory.MOTOR):
        hp_min = motor.lookup_decimal("hpMin")
        hp_max = motor.lookup_decimal("hpMax")
        if hp_min is None or hp_max is None:
            continue
        if hp_min < hp <= hp_max:
            return motor
    raise NoMotorForHp(
        f"No active motor material found for calculated HP {format_money(hp)}",
        hp=format_money(hp),
    )


def _select_wire(catalog: Catalog, inputs: EstimateInput, motor: CatalogMaterial) -> Tuple[str, CatalogMaterial]:
    motor_hp = motor_hp_from_name(motor.name)
    gauge = None
    if motor_hp is not None:
        gauge = lookup_wire_gauge(inputs.voltage, motor_hp, inputs.pump_setting)

    if not gauge:
        raise NoWireForSpec(
            f"Could not determine wire size for {motor.name}, "
            f"{format_quantity(inputs.pump_setting)} ft PS, {format_quantity(inputs.voltage)}V",
            motor=motor.name,
            voltage=format_quantity(inputs.voltage),
        )

    wire = catalog.material(MaterialCategory.WIRE, gauge)
    if wire is None:
        raise NoWireForSpec(
            f"No active wire material found for determined size {gauge}",
            gauge=gauge,
        )
    return gauge, wire


def _fixed_price(
    key: str,
    found: Optional[Decimal],
    label: str,
    defaults: Mapping[str, Decimal],
    fallbacks: List[str],
) -> Decimal:
    if found is not None:
        return found
    default = to_decimal(defaults[key])
    logger.warning(f"Catalog row '{label}' not found, using default {format_money(default)}")
    fallbacks.append(key)
    return default


def calculate_estimate_line_items(
    inputs: EstimateInput,
    catalog: Catalog,
    fallback_prices: Optional[Mapping[str, Any]] = None,
) -> CalculationResult:
    """
    Size the pump, motor, pipe and wire and price the 11 estimate lines.

    Args:
        inputs: Validated estimate parameters
        catalog: Snapshot of active materials and labor rates
        fallback_prices: Overrides for FALLBACK_PRICES entries

    Returns:
        CalculationResult with exactly 11 line items

    Raises:
        NoPipeForGpm, NoMotorForHp, NoWireForSpec, InvalidNumericInput
    """
    defaults = dict(FALLBACK_PRICES)
    if fallback_prices:
        defaults.update(fallback_prices)

    with localcontext() as ctx:
        ctx.prec = 28

        # Pipe and total friction loss
        pipe = _select_pipe(catalog, inputs.gpm)
        friction_loss = pipe.lookup_decimal("frictionLoss") or Decimal("0")
        tfl = (friction_loss * inputs.pump_setting).quantize(_UNITS, rounding=ROUND_HALF_UP)

        # Pressure in feet of head
        pressure_feet = (inputs.pressure_psi * PSI_TO_FEET).quantize(_UNITS, rounding=ROUND_HALF_UP)

        tdh = inputs.pumping_water_level + tfl + pressure_feet

        # Horsepower
        denominator = PUMP_EFFICIENCY * HP_DIVISOR
        if denominator.is_zero():
            raise InvalidNumericInput("Denominator is zero during HP calculation")
        try:
            hp = (inputs.gpm * tdh * HP_CONVERSION) / denominator
        except InvalidOperation:
            raise InvalidNumericInput("Horsepower calculation produced an invalid value")
        if not hp.is_finite():
            raise InvalidNumericInput("Horsepower calculation produced an invalid value")

        motor = _select_motor(catalog, hp)
        gauge, wire = _select_wire(catalog, inputs, motor)
        wire_quantity = inputs.pump_setting + WIRE_SERVICE_MARGIN_FT

    logger.debug(
        f"Sized pump: pipe={pipe.name} tfl={tfl} pressure_ft={pressure_feet} "
        f"tdh={tdh} hp={hp:.4f} motor={motor.name} wire={gauge}"
    )

    fallbacks: List[str] = []

    concrete = catalog.material(MaterialCategory.CONCRETE, CONCRETE_PAD_NAME)
    sounding = catalog.material(MaterialCategory.SOUNDING_TUBE, SOUNDING_TUBE_NAME)
    prep = catalog.labor_rate(PREP_LABOR_NAME)
    install = catalog.labor_rate(INSTALL_LABOR_NAME)
    startup = catalog.labor_rate(STARTUP_LABOR_NAME)

    concrete_price = _fixed_price(
        "concrete_pad", concrete.price if concrete else None, CONCRETE_PAD_NAME, defaults, fallbacks
    )
    sounding_price = _fixed_price(
        "sounding_tube", sounding.price if sounding else None, SOUNDING_TUBE_NAME, defaults, fallbacks
    )
    prep_rate = _fixed_price(
        "prep_labor", prep.rate_per_hour if prep else None, PREP_LABOR_NAME, defaults, fallbacks
    )
    install_rate = _fixed_price(
        "install_labor", install.rate_per_hour if install else None, INSTALL_LABOR_NAME, defaults, fallbacks
    )
    startup_rate = _fixed_price(
        "startup_labor", startup.rate_per_hour if startup else None, STARTUP_LABOR_NAME, defaults, fallbacks
    )

    bundle_name = f"Bundle {inputs.discharge_package}"
    bundle = catalog.material(MaterialCategory.BUNDLE, bundle_name)
    if bundle is None:
        bundle_price, bundle_description = BUNDLE_FALLBACKS[inputs.discharge_package]
        logger.warning(
            f"Catalog row '{bundle_name}' not found, using default {format_money(bundle_price)}"
        )
        fallbacks.append(f"bundle_{inputs.discharge_package.lower()}")
    else:
        bundle_price = bundle.price
        bundle_description = bundle.description or bundle_name

    hp_label = _strip_motor_suffix(motor.name)
    ps_text = format_quantity(inputs.pump_setting)
    zero = format_money(Decimal("0"))

    def line(sort_order: int, description: str, quantity: Decimal, rate: Decimal) -> CalculatedLineItem:
        # Totals are priced at the cent rate shown on the line
        rate_text = format_money(rate)
        return CalculatedLineItem(
            sort_order=sort_order,
            description=description,
            quantity=format_quantity(quantity),
            rate=rate_text,
            total=calculate_total(quantity, rate_text),
        )

    header = (
        f"{hp_label} {format_quantity(inputs.voltage)}V submersible pump capable of "
        f"{format_quantity(inputs.gpm)} GPM at {format_quantity(inputs.pressure_psi)} psi, "
        f"{tdh.quantize(_UNITS, rounding=ROUND_HALF_UP)} TDH set at {ps_text} ft"
    )

    one = Decimal("1")
    line_items = (
        CalculatedLineItem(sort_order=1, description=header, quantity="1", rate=zero, total=zero),
        line(2, "Concrete pad", one, concrete_price),
        line(3, "Labor to prep job", inputs.prep_time_hours, prep_rate),
        line(4, "Labor to install submersible pump", inputs.install_time_hours, install_rate),
        line(5, motor.name, one, motor.price),
        CalculatedLineItem(
            sort_order=6, description=f"{hp_label} submersible pump", quantity="1", rate=zero, total=zero
        ),
        line(7, pipe.name, inputs.pump_setting, pipe.price),
        line(8, wire.description or f"{gauge} FJ wire", wire_quantity, wire.price),
        line(9, "Sounding tube", inputs.pump_setting, sounding_price),
        line(10, bundle_description, one, bundle_price),
        line(11, "Ag sub pump startup", inputs.start_time_hours, startup_rate),
    )

    return CalculationResult(
        line_items=line_items,
        pipe_name=pipe.name,
        total_friction_loss=tfl,
        pressure_feet=pressure_feet,
        tdh=tdh,
        horsepower=hp,
        motor_name=motor.name,
        wire_gauge=gauge,
        wire_quantity=wire_quantity,
        fallbacks=tuple(fallbacks),
    )
