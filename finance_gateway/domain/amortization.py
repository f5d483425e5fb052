"""Fixed-installment loan amortization (Price / French method)"""

import math
from typing import List

from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.models import AmortizationRow, AmortizationSchedule
from finance_gateway.domain.money import require_non_negative, require_positive

MAX_TERM_MONTHS = 600  # 50 years


def _validate_term(months: int) -> int:
    if isinstance(months, bool) or not isinstance(months, int):
        raise InvalidArgumentError("months must be an integer")
    if months <= 0:
        raise InvalidArgumentError("months must be greater than zero")
    if months > MAX_TERM_MONTHS:
        raise InvalidArgumentError(f"months must not exceed {MAX_TERM_MONTHS}")
    return months


def monthly_rate(annual_rate_percent: float) -> float:
    """Nominal annual percent -> monthly fraction"""
    return annual_rate_percent / 100 / 12


def calculate_monthly_payment(principal: float, annual_rate_percent: float, months: int) -> float:
    """
    Fixed monthly installment for a loan.

    payment = P * i * (1+i)^n / ((1+i)^n - 1), or P / n when the rate is zero.

    Raises:
        InvalidArgumentError: non-positive principal, term outside 1..600,
            negative or non-finite rate, or a rate that overflows the term
    """
    principal = require_positive("principal", principal)
    rate = require_non_negative("annual_rate_percent", annual_rate_percent)
    months = _validate_term(months)

    i = monthly_rate(rate)
    if i == 0:
        return principal / months

    try:
        growth = (1 + i) ** months
    except OverflowError:
        raise InvalidArgumentError("interest rate too high for the loan term")
    if growth == 1:
        # Rate below float resolution
        return principal / months

    payment = principal * i * growth / (growth - 1)
    if not math.isfinite(payment):
        raise InvalidArgumentError("loan terms produce a non-finite payment")
    return payment


def build_amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    months: int,
) -> AmortizationSchedule:
    """
    Month-by-month schedule for a fixed-installment loan.

    Values are kept in full precision; callers round when serializing.
    The final period pins the closing balance to zero to absorb float
    drift; its principal stays payment minus interest.

    Example:
        12000 at 12%/year over 12 months -> 1066.19/month, 794.23 interest
    """
    payment = calculate_monthly_payment(principal, annual_rate_percent, months)
    i = monthly_rate(float(annual_rate_percent))

    rows: List[AmortizationRow] = []
    balance = float(principal)
    for month in range(1, months + 1):
        interest = balance * i
        principal_paid = payment - interest
        balance -= principal_paid

        if month == months or balance < 0:
            balance = 0.0

        rows.append(
            AmortizationRow(
                month=month,
                payment=payment,
                interest=interest,
                principal=principal_paid,
                balance=balance,
            )
        )

    total_payment = payment * months
    return AmortizationSchedule(
        principal=float(principal),
        annual_rate_percent=float(annual_rate_percent),
        months=months,
        monthly_payment=payment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
        rows=rows,
    )
