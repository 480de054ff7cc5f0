"""Calculation error taxonomy for the estimate calculator"""


class CalculationError(Exception):
    """Base class for deterministic, input-driven calculation failures"""

    code = "CALCULATION_ERROR"

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_detail(self) -> dict:
        """Render as an API error detail"""
        return {
            "code": self.code,
            "message": self.message,
            "hint": ", ".join(f"{k}={v}" for k, v in self.context.items()) or None,
        }


class NoPipeForGpm(CalculationError):
    code = "NO_PIPE_FOR_GPM"


class NoMotorForHp(CalculationError):
    code = "NO_MOTOR_FOR_HP"


class NoWireForSpec(CalculationError):
    code = "NO_WIRE_FOR_SPEC"


class InvalidNumericInput(CalculationError):
    code = "INVALID_NUMERIC_INPUT"


class InvalidDischargePackage(CalculationError):
    code = "INVALID_DISCHARGE_PACKAGE"
