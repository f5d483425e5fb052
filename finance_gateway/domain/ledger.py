"""Balance side effects of transactions and debt payments"""

from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.money import require_positive

TRANSACTION_TYPES = ("income", "expense")


def account_delta(transaction_type: str, amount: float) -> float:
    """Income adds to an account, expense takes from it"""
    if transaction_type not in TRANSACTION_TYPES:
        raise InvalidArgumentError(f"Unknown transaction type: {transaction_type}")
    amount = require_positive("amount", amount)
    return amount if transaction_type == "income" else -amount


def card_delta(transaction_type: str, amount: float) -> float:
    """Expense raises what is owed on a card, income (refund/payment) lowers it"""
    return -account_delta(transaction_type, amount)


def apply_loan_payment(remaining_amount: float, amount: float) -> tuple[float, str]:
    """(new remaining amount, status); the balance never goes below zero"""
    amount = require_positive("amount", amount)
    remaining = max(0.0, remaining_amount - amount)
    return remaining, "paid" if remaining == 0 else "active"


def apply_installment_payment(paid_installments: int, installments: int, installments_to_pay: int) -> tuple[int, str]:
    """(new paid count, status); paid count is capped at the number of installments"""
    if installments_to_pay <= 0:
        raise InvalidArgumentError("installments_to_pay must be greater than zero")
    paid = min(paid_installments + installments_to_pay, installments)
    return paid, "paid" if paid >= installments else "active"
