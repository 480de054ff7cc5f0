"""
Submersible motor wire-size chart
Maps (voltage, motor HP, pump setting) to a copper drop-cable gauge
"""
from decimal import Decimal
from typing import Dict, Optional, Tuple, Union

Number = Union[int, float, Decimal]

# (max_ps_ft, gauge); a max of None covers every longer run
WireStep = Tuple[Optional[int], str]
# (max_hp, steps), tiers ordered by max_hp
WireTier = Tuple[Decimal, Tuple[WireStep, ...]]

WIRE_CHART: Dict[int, Tuple[WireTier, ...]] = {
    480: (
        (Decimal("5"), ((590, "#14"), (None, "#12"))),
        (Decimal("7.5"), ((420, "#14"), (680, "#12"), (None, "#10"))),
        (Decimal("10"), ((310, "#14"), (500, "#12"), (None, "#10"))),
        (Decimal("15"), ((240, "#10"), (None, "#8"))),
        (Decimal("20"), ((410, "#10"), (None, "#8"))),
        (Decimal("25"), ((530, "#8"), (None, "#6"))),
        (Decimal("30"), ((430, "#8"), (None, "#6"))),
        (Decimal("40"), ((790, "#4"), (None, "#2"))),
        (Decimal("50"), ((640, "#4"), (None, "#2"))),
        (Decimal("60"), ((None, "#2"),)),
        (Decimal("75"), ((None, "#1"),)),
    ),
    240: (
        (Decimal("5"), ((230, "#12"), (370, "#10"), (590, "#8"), (None, "#6"))),
        (Decimal("7.5"), ((260, "#10"), (420, "#8"), (None, "#6"))),
        (Decimal("10"), ((310, "#8"), (490, "#6"), (760, "#4"), (None, "#3"))),
        (Decimal("15"), ((330, "#6"), (520, "#4"), (650, "#3"), (None, "#2"))),
        (Decimal("20"), ((400, "#4"), (500, "#3"), (None, "#2"))),
        (Decimal("25"), ((320, "#4"), (400, "#3"), (None, "#2"))),
        (Decimal("30"), ((330, "#3"), (410, "#2"), (None, "#1"))),
    ),
}


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _voltage_key(voltage: Number) -> Optional[int]:
    v = _as_decimal(voltage)
    if v != v.to_integral_value():
        return None
    return int(v)


def lookup_wire_gauge(voltage: Number, motor_hp: Number, pump_setting: Number) -> Optional[str]:
    """
    Resolve the wire gauge label for a motor.

    Args:
        voltage: Supply voltage (240 or 480)
        motor_hp: Nameplate motor horsepower
        pump_setting: Pump depth in feet

    Returns:
        Gauge label such as "#6", or None when the chart has no entry
    """
    tiers = WIRE_CHART.get(_voltage_key(voltage))
    if not tiers:
        return None

    hp = _as_decimal(motor_hp)
    ps = _as_decimal(pump_setting)

    for max_hp, steps in tiers:
        if hp > max_hp:
            continue
        for max_ps, gauge in steps:
            if max_ps is None or ps <= max_ps:
                return gauge
        return None

    return None
