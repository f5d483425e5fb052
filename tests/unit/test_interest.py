"""Unit tests for the informal loan interest ledger"""

import pytest
from datetime import date, timedelta
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.interest import calculate_third_party_balance, summarize_third_party_balances
from finance_gateway.domain.models import Payment

START = date(2024, 1, 1)


def test_one_month_of_interest():
    """1000 at 10%/month after 30 days owes 1100"""
    balance = calculate_third_party_balance(1000, 10, START, [], START + timedelta(days=30))

    assert balance.months_elapsed == 1
    assert balance.accrued_interest == pytest.approx(100)
    assert balance.current_balance == pytest.approx(1100)
    assert balance.is_paid is False


def test_full_payment_clears_loan():
    as_of = START + timedelta(days=30)
    balance = calculate_third_party_balance(1000, 10, START, [Payment(1100, as_of)], as_of)

    assert balance.current_balance == 0
    assert balance.is_paid is True


def test_partial_month_accrues_nothing():
    balance = calculate_third_party_balance(1000, 10, START, [], START + timedelta(days=29))

    assert balance.months_elapsed == 0
    assert balance.current_balance == 1000


def test_interest_is_linear_on_original_principal():
    """No compounding: three months at 5% is 15% of principal"""
    payments = [Payment(200, START + timedelta(days=10))]
    balance = calculate_third_party_balance(1000, 5, START, payments, START + timedelta(days=95))

    assert balance.months_elapsed == 3
    assert balance.accrued_interest == pytest.approx(150)
    assert balance.total_paid == 200
    assert balance.current_balance == pytest.approx(950)


def test_as_of_before_start_counts_zero_months():
    balance = calculate_third_party_balance(1000, 10, START, [], START - timedelta(days=45))
    assert balance.months_elapsed == 0


def test_overpayment_does_not_go_negative():
    balance = calculate_third_party_balance(500, 0, START, [Payment(800, START)], START)

    assert balance.current_balance == 0
    assert balance.is_paid is True


def test_removing_a_payment_restores_balance():
    """Recomputing from the remaining payments gives back the earlier balance exactly"""
    as_of = START + timedelta(days=62)
    first = [Payment(300, START + timedelta(days=31))]
    before = calculate_third_party_balance(2000, 3, START, first, as_of)
    after = calculate_third_party_balance(2000, 3, START, first + [Payment(450.55, as_of)], as_of)
    restored = calculate_third_party_balance(2000, 3, START, first, as_of)

    assert after.current_balance < before.current_balance
    assert restored.current_balance == before.current_balance


@pytest.mark.parametrize(
    "principal,rate,payments",
    [
        (-1, 10, []),
        (1000, -0.5, []),
        (1000, float("nan"), []),
        (1000, 10, [Payment(-5, START)]),
    ],
)
def test_invalid_inputs_raise(principal, rate, payments):
    with pytest.raises(InvalidArgumentError):
        calculate_third_party_balance(principal, rate, START, payments, START)


def test_summary_totals():
    as_of = START + timedelta(days=30)
    balances = [
        calculate_third_party_balance(1000, 10, START, [Payment(100, as_of)], as_of),
        calculate_third_party_balance(500, 2, START, [], as_of),
    ]

    summary = summarize_third_party_balances(balances)

    assert summary["total_loans"] == 2
    assert summary["total_principal"] == 1500
    assert summary["total_interest"] == pytest.approx(110)
    assert summary["total_paid"] == 100
    assert summary["total_debt"] == pytest.approx(1000 + 510)


def test_summary_of_nothing():
    summary = summarize_third_party_balances([])
    assert summary["total_loans"] == 0
    assert summary["total_debt"] == 0
