"""Money helpers - rounding happens only when values leave the core"""

import math
from decimal import Decimal, ROUND_HALF_UP

from finance_gateway.domain.exceptions import InvalidArgumentError

CENT = Decimal("0.01")


def round_cents(value: float) -> float:
    """Round half-up to 2 decimal places for presentation"""
    return float(Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def require_finite(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number")
    if not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite")
    return float(value)


def require_positive(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be greater than zero")
    return value


def require_non_negative(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value < 0:
        raise InvalidArgumentError(f"{name} must not be negative")
    return value
