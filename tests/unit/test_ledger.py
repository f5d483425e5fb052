"""Unit tests for balance side effects of transactions and payments"""

import pytest
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.ledger import (
    account_delta,
    apply_installment_payment,
    apply_loan_payment,
    card_delta,
)


def test_account_delta():
    assert account_delta("income", 100) == 100
    assert account_delta("expense", 100) == -100


def test_card_delta_moves_opposite_way():
    """Spending on a card raises what is owed"""
    assert card_delta("expense", 250) == 250
    assert card_delta("income", 250) == -250


@pytest.mark.parametrize("transaction_type,amount", [("transfer", 10), ("income", 0), ("expense", -5)])
def test_invalid_transaction_raises(transaction_type, amount):
    with pytest.raises(InvalidArgumentError):
        account_delta(transaction_type, amount)


def test_loan_payment_partial():
    assert apply_loan_payment(1000, 300) == (700, "active")


def test_loan_payment_overpay_clamps_to_zero():
    assert apply_loan_payment(100, 300) == (0, "paid")


def test_loan_payment_must_be_positive():
    with pytest.raises(InvalidArgumentError):
        apply_loan_payment(1000, 0)


def test_installment_payment():
    assert apply_installment_payment(0, 3, 1) == (1, "active")
    assert apply_installment_payment(2, 3, 1) == (3, "paid")


def test_installment_payment_capped():
    assert apply_installment_payment(2, 3, 5) == (3, "paid")


def test_installment_payment_needs_at_least_one():
    with pytest.raises(InvalidArgumentError):
        apply_installment_payment(0, 3, 0)
