"""Debt payoff simulator - month-by-month payment projection"""

import math
from datetime import date
from typing import List, Tuple, Union

from finance_gateway.domain.models import (
    AlternativeScenario,
    InsufficientPayment,
    PayoffSimulation,
    SimulationMonth,
)
from finance_gateway.domain.money import require_non_negative, require_positive
from finance_gateway.utils.date_utils import add_thirty_day_months

MAX_MONTHS = 360  # 30 years
DISPLAY_MONTHS = 24
SCENARIO_MULTIPLIERS = (1.1, 1.25, 1.5, 2.0)
MINIMUM_PAYMENT_MARGIN = 1.1
RECOMMENDED_MULTIPLIER = 1.5

SimulationOutcome = Union[PayoffSimulation, InsufficientPayment]


def _run_payoff(balance: float, rate_percent: float, payment: float, max_months: int) -> Tuple[int, float]:
    """Bare payoff loop: (months, total interest). No early-failure check."""
    month = 0
    total_interest = 0.0
    while balance > 0 and month < max_months:
        month += 1
        interest = balance * (rate_percent / 100)
        balance += interest
        total_interest += interest
        balance -= min(payment, balance)
    return month, total_interest


def build_alternative_scenarios(
    current_balance: float,
    monthly_interest_rate_percent: float,
    monthly_payment: float,
    baseline_total_paid: float,
    max_months: int = MAX_MONTHS,
) -> List[AlternativeScenario]:
    """Re-run the payoff at 1.1x, 1.25x, 1.5x and 2x the proposed payment"""
    scenarios = []
    for multiplier in SCENARIO_MULTIPLIERS:
        payment = monthly_payment * multiplier
        months, interest = _run_payoff(current_balance, monthly_interest_rate_percent, payment, max_months)
        total_paid = current_balance + interest
        scenarios.append(
            AlternativeScenario(
                monthly_payment=payment,
                months=months,
                years=round(months / 12, 1),
                total_paid=total_paid,
                savings=baseline_total_paid - total_paid,
            )
        )
    return scenarios


def _recommendation(monthly_payment: float, total_months: int) -> str:
    if total_months > DISPLAY_MONTHS:
        # Rule of thumb quoted to the user, not a re-run of the 1.5x scenario
        return (
            f"Consider raising the payment to {monthly_payment * RECOMMENDED_MULTIPLIER:.2f}/month "
            f"to pay off in {math.ceil(total_months / 3)} months."
        )
    return f"Excellent! Paying {monthly_payment:.2f}/month clears the debt in {total_months} months."


def simulate_payoff(
    current_balance: float,
    monthly_interest_rate_percent: float,
    monthly_payment: float,
    as_of: date,
    max_months: int = MAX_MONTHS,
) -> SimulationOutcome:
    """
    Simulate paying a debt with a fixed monthly amount.

    Each month interest is added first, then the payment (capped at the
    balance) is subtracted. Only the first month is checked for a payment
    that cannot cover interest; that case returns InsufficientPayment with
    a suggested minimum of ceil(interest * 1.1) instead of raising.

    Totals always reflect the full run; the breakdown is truncated to the
    first 24 months for display.

    Raises:
        InvalidArgumentError: negative balance, negative/non-finite rate, non-positive payment
    """
    balance = require_non_negative("current_balance", current_balance)
    rate = require_non_negative("monthly_interest_rate_percent", monthly_interest_rate_percent)
    monthly_payment = require_positive("monthly_payment", monthly_payment)
    starting_balance = balance

    breakdown: List[SimulationMonth] = []
    total_paid = 0.0
    total_interest = 0.0
    month = 0

    while balance > 0 and month < max_months:
        month += 1

        interest = balance * (rate / 100)
        if month == 1 and interest >= monthly_payment:
            # Cent rounding first so 100 * 1.1 stays 110 instead of ceiling to 111
            return InsufficientPayment(minimum_payment=math.ceil(round(interest * MINIMUM_PAYMENT_MARGIN, 2)))

        balance += interest
        total_interest += interest

        payment = min(monthly_payment, balance)
        balance -= payment
        total_paid += payment

        breakdown.append(
            SimulationMonth(
                month=month,
                payment=payment,
                interest=interest,
                principal=payment - interest,
                remaining_balance=max(0.0, balance),
            )
        )

    scenarios = build_alternative_scenarios(starting_balance, rate, monthly_payment, total_paid, max_months)

    return PayoffSimulation(
        monthly_payment=monthly_payment,
        total_months=month,
        total_years=round(month / 12, 1),
        total_paid=total_paid,
        total_interest=total_interest,
        payoff_date=add_thirty_day_months(as_of, month),
        monthly_breakdown=breakdown[:DISPLAY_MONTHS],
        alternative_scenarios=scenarios,
        recommendation=_recommendation(monthly_payment, month),
    )
