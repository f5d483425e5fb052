"""Unit tests for the debt payoff simulator"""

import math

import pytest
from datetime import date, timedelta
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.models import InsufficientPayment, PayoffSimulation
from finance_gateway.domain.simulator import DISPLAY_MONTHS, MAX_MONTHS, simulate_payoff

AS_OF = date(2024, 6, 15)


def test_payment_below_first_month_interest():
    """1000 at 10%/month accrues 100 interest; 50 cannot cover it"""
    outcome = simulate_payoff(1000, 10, 50, AS_OF)

    assert isinstance(outcome, InsufficientPayment)
    assert outcome.success is False
    assert outcome.minimum_payment == 110
    assert outcome.error


def test_payment_equal_to_interest_is_insufficient():
    outcome = simulate_payoff(1000, 10, 100, AS_OF)

    assert isinstance(outcome, InsufficientPayment)
    assert outcome.minimum_payment == 110


def test_interest_free_payoff():
    outcome = simulate_payoff(1000, 0, 100, AS_OF)

    assert isinstance(outcome, PayoffSimulation)
    assert outcome.success is True
    assert outcome.total_months == 10
    assert outcome.total_paid == 1000
    assert outcome.total_interest == 0
    assert outcome.total_years == 0.8
    assert outcome.payoff_date == AS_OF + timedelta(days=300)
    assert len(outcome.monthly_breakdown) == 10
    assert outcome.monthly_breakdown[-1].remaining_balance == 0
    assert outcome.recommendation.startswith("Excellent!")


def test_last_payment_is_capped_at_balance():
    outcome = simulate_payoff(1050, 0, 100, AS_OF)

    assert outcome.total_months == 11
    assert outcome.monthly_breakdown[-1].payment == pytest.approx(50)
    assert outcome.total_paid == pytest.approx(1050)


def test_payoff_with_interest():
    outcome = simulate_payoff(1000, 1, 100, AS_OF)

    first = outcome.monthly_breakdown[0]
    assert first.interest == pytest.approx(10)
    assert first.principal == pytest.approx(90)
    assert first.remaining_balance == pytest.approx(910)
    assert outcome.total_months == 11
    assert outcome.total_paid == pytest.approx(1000 + outcome.total_interest)


def test_breakdown_truncated_but_totals_complete():
    """Only 24 months are listed; totals cover the full 50-month run"""
    outcome = simulate_payoff(5000, 0, 100, AS_OF)

    assert outcome.total_months == 50
    assert len(outcome.monthly_breakdown) == DISPLAY_MONTHS
    assert outcome.total_paid == 5000


def test_long_payoff_recommends_one_and_a_half_times():
    outcome = simulate_payoff(5000, 0, 100, AS_OF)
    assert outcome.recommendation == "Consider raising the payment to 150.00/month to pay off in 17 months."


def test_alternative_scenarios():
    outcome = simulate_payoff(1000, 0, 100, AS_OF)
    scenarios = outcome.alternative_scenarios

    assert [s.monthly_payment for s in scenarios] == pytest.approx([110, 125, 150, 200])
    assert [s.months for s in scenarios] == [10, 8, 7, 5]
    assert all(s.total_paid == 1000 for s in scenarios)
    assert all(s.savings == 0 for s in scenarios)


def test_higher_payments_save_interest():
    outcome = simulate_payoff(10000, 2, 300, AS_OF)
    scenarios = outcome.alternative_scenarios

    months = [s.months for s in scenarios]
    assert months == sorted(months, reverse=True)
    assert all(s.months <= outcome.total_months for s in scenarios)
    assert all(s.savings > 0 for s in scenarios)
    savings = [s.savings for s in scenarios]
    assert savings == sorted(savings)


def test_only_first_month_is_checked():
    """A payment barely above the interest runs to the month cap instead of failing later"""
    outcome = simulate_payoff(1000, 1, 10.01, AS_OF)

    assert isinstance(outcome, PayoffSimulation)
    assert outcome.total_months == MAX_MONTHS


def test_max_months_is_configurable():
    outcome = simulate_payoff(1000, 0, 1, AS_OF, max_months=12)
    assert outcome.total_months == 12


@pytest.mark.parametrize(
    "balance,rate,payment",
    [
        (1000, 1, 0),
        (1000, 1, -50),
        (-1, 1, 50),
        (1000, -1, 50),
        (1000, math.nan, 50),
        (1000, 1, math.inf),
    ],
)
def test_invalid_inputs_raise(balance, rate, payment):
    with pytest.raises(InvalidArgumentError):
        simulate_payoff(balance, rate, payment, AS_OF)
