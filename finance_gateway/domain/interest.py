"""Simple-interest ledger for informal (third-party) loans"""

from datetime import date
from typing import Iterable, List

from finance_gateway.domain.models import Payment, ThirdPartyBalance
from finance_gateway.domain.money import require_non_negative
from finance_gateway.utils.date_utils import months_elapsed


def calculate_third_party_balance(
    principal: float,
    monthly_interest_percent: float,
    start_date: date,
    payments: Iterable[Payment],
    as_of: date,
) -> ThirdPartyBalance:
    """
    Current balance of an informal loan.

    Interest is linear in whole elapsed 30-day months and always charged
    on the original principal:

        accrued = principal * rate/100 * months_elapsed
        balance = max(0, principal + accrued - sum(payments))

    The balance is recomputed from every payment to date, never patched
    incrementally.
    """
    principal = require_non_negative("principal", principal)
    rate = require_non_negative("monthly_interest_percent", monthly_interest_percent)

    payments = list(payments)
    for payment in payments:
        require_non_negative("payment amount", payment.amount)

    months = months_elapsed(start_date, as_of)
    accrued = principal * (rate / 100) * months
    total_owed = principal + accrued
    total_paid = sum(p.amount for p in payments)
    current_balance = max(0.0, total_owed - total_paid)

    return ThirdPartyBalance(
        principal=principal,
        months_elapsed=months,
        accrued_interest=accrued,
        total_owed=total_owed,
        total_paid=total_paid,
        current_balance=current_balance,
        is_paid=current_balance <= 0,
    )


def summarize_third_party_balances(balances: List[ThirdPartyBalance]) -> dict:
    """Totals across several informal loans"""
    total_principal = sum(b.principal for b in balances)
    total_interest = sum(b.accrued_interest for b in balances)
    total_paid = sum(b.total_paid for b in balances)
    return {
        "total_loans": len(balances),
        "total_principal": total_principal,
        "total_interest": total_interest,
        "total_paid": total_paid,
        "total_debt": total_principal + total_interest - total_paid,
    }
