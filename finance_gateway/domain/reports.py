"""Aggregation rules and derived projections for reports and list endpoints"""

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple, TypeVar

from finance_gateway.domain.models import (
    BudgetUsage,
    CardFeePayment,
    CategorySpending,
    CreditorPayment,
    FixedExpenseStatus,
    TransactionRecord,
    UpcomingInstallment,
    VariableExpenseRecord,
)
from finance_gateway.utils.date_utils import DAYS_PER_MONTH, add_months, with_day

T = TypeVar("T")

UPCOMING_WINDOW_DAYS = 7
TOP_EXPENSES = 5
MONTH_KEYS = [f"{m:02d}" for m in range(1, 13)]
POTENTIAL_SAVINGS_SHARE = 0.5
DEFAULT_CATEGORY = "Other"


def sum_by_key(items: Iterable[T], key: Callable[[T], str], value: Callable[[T], float]) -> Dict[str, float]:
    """Sum values per key; keys keep first-seen order"""
    totals: Dict[str, float] = {}
    for item in items:
        k = key(item)
        totals[k] = totals.get(k, 0.0) + value(item)
    return totals


def split_income_expenses(transactions: Iterable[TransactionRecord]) -> Tuple[float, float]:
    income = 0.0
    expenses = 0.0
    for t in transactions:
        if t.type == "income":
            income += t.amount
        else:
            expenses += t.amount
    return income, expenses


def expenses_by_category(transactions: Iterable[TransactionRecord]) -> Dict[str, float]:
    return sum_by_key(
        (t for t in transactions if t.type == "expense"),
        key=lambda t: t.category,
        value=lambda t: t.amount,
    )


def transactions_by_month(transactions: Iterable[TransactionRecord]) -> Dict[str, float]:
    """Net amount per YYYY-MM (income positive, expense negative)"""
    return sum_by_key(
        transactions,
        key=lambda t: t.date.strftime("%Y-%m"),
        value=lambda t: t.amount if t.type == "income" else -t.amount,
    )


def _category(expense: VariableExpenseRecord) -> str:
    return expense.category or DEFAULT_CATEGORY


def variable_by_category(expenses: Iterable[VariableExpenseRecord]) -> Dict[str, float]:
    return sum_by_key(expenses, key=_category, value=lambda e: e.amount)


def variable_by_payment_type(expenses: Iterable[VariableExpenseRecord]) -> Dict[str, float]:
    return sum_by_key(expenses, key=lambda e: e.payment_type, value=lambda e: e.amount)


def budget_usage(category: str, amount: float, transactions: Iterable[TransactionRecord]) -> BudgetUsage:
    """Compare a budget limit with same-category expenses already filtered to its month"""
    spent = expenses_by_category(transactions).get(category, 0.0)
    return BudgetUsage(
        category=category,
        amount=amount,
        spent=spent,
        remaining=amount - spent,
        percentage=spent / amount * 100 if amount > 0 else 0.0,
    )


def goal_progress(current_amount: float, target_amount: float) -> Tuple[float, float]:
    """(progress percent, remaining amount)"""
    progress = current_amount / target_amount * 100 if target_amount > 0 else 0.0
    return progress, target_amount - current_amount


def is_goal_completed(current_amount: float, target_amount: float) -> bool:
    return current_amount >= target_amount


def fixed_expense_status(due_day: int, last_paid_date: date | None, today: date) -> FixedExpenseStatus:
    """
    Days until the next due day (30-day wrap) and overdue flag.

    A bill is overdue when it was never paid or its last payment falls in
    an earlier month than today.
    """
    days_until_due = due_day - today.day
    if days_until_due < 0:
        days_until_due += DAYS_PER_MONTH

    if last_paid_date is None:
        is_overdue = True
    else:
        is_overdue = (last_paid_date.year, last_paid_date.month) < (today.year, today.month)

    return FixedExpenseStatus(days_until_due=days_until_due, is_overdue=is_overdue)


def upcoming_fixed_expenses(expenses: Sequence[Tuple[int, float]], today: date) -> Dict[str, float]:
    """Bills (due_day, amount) falling due within the next week of this month"""
    upcoming = [amount for due_day, amount in expenses if 0 <= due_day - today.day <= UPCOMING_WINDOW_DAYS]
    return {
        "total": sum(amount for _, amount in expenses),
        "count": len(expenses),
        "upcoming_count": len(upcoming),
        "upcoming_amount": sum(upcoming),
    }


def remaining_installment_debt(installments: int, paid_installments: int, installment_amount: float) -> float:
    return (installments - paid_installments) * installment_amount


def upcoming_installments(
    purchase_id: str,
    description: str,
    purchase_date: date,
    installments: int,
    paid_installments: int,
    installment_amount: float,
    due_day: int,
) -> List[UpcomingInstallment]:
    """Unpaid installments, the k-th due k months after purchase on the card's due day"""
    return [
        UpcomingInstallment(
            purchase_id=purchase_id,
            description=description,
            installment_number=number,
            total_installments=installments,
            amount=installment_amount,
            due_date=with_day(add_months(purchase_date, number), due_day),
        )
        for number in range(paid_installments + 1, installments + 1)
    ]


def monthly_report(
    transactions: Sequence[TransactionRecord],
    variable_expenses: Sequence[VariableExpenseRecord],
    fixed_expense_amounts: Iterable[float],
    card_installment_amounts: Iterable[float],
) -> dict:
    """
    Summary of one month.

    Inputs must already be restricted to the month; fixed expenses and
    card installments are the currently active ones.
    """
    income, expenses = split_income_expenses(transactions)
    variable_total = sum(e.amount for e in variable_expenses)
    balance = income - expenses - variable_total

    top = sorted(variable_expenses, key=lambda e: e.amount, reverse=True)[:TOP_EXPENSES]

    return {
        "summary": {
            "income": income,
            "total_expenses": expenses + variable_total,
            "fixed_expenses": sum(fixed_expense_amounts),
            "variable_expenses": variable_total,
            "card_installments": sum(card_installment_amounts),
            "balance": balance,
            "savings_rate": round(balance / income * 100, 1) if income > 0 else 0.0,
        },
        "by_category": variable_by_category(variable_expenses),
        "by_payment_type": variable_by_payment_type(variable_expenses),
        "details": {
            "transactions": len(transactions),
            "variable_expenses": len(variable_expenses),
            "top_expenses": top,
        },
    }


def yearly_report(
    transactions: Iterable[TransactionRecord],
    variable_expenses: Iterable[VariableExpenseRecord],
) -> dict:
    """
    Twelve month buckets ("01".."12") with income, expenses, variable spend
    and the net of the month's transactions. Inputs must belong to one year.
    """
    transactions = list(transactions)
    by_month: Dict[str, Dict[str, float]] = {
        key: {"income": 0.0, "expenses": 0.0, "variable": 0.0, "net": 0.0} for key in MONTH_KEYS
    }

    for t in transactions:
        bucket = by_month[f"{t.date.month:02d}"]
        if t.type == "income":
            bucket["income"] += t.amount
        else:
            bucket["expenses"] += t.amount

    for e in variable_expenses:
        by_month[f"{e.date.month:02d}"]["variable"] += e.amount

    for month, net in transactions_by_month(transactions).items():
        by_month[month[5:]]["net"] = net

    total_income = sum(m["income"] for m in by_month.values())
    total_expenses = sum(m["expenses"] + m["variable"] for m in by_month.values())

    return {
        "summary": {
            "total_income": total_income,
            "total_expenses": total_expenses,
            "balance": total_income - total_expenses,
            "avg_monthly_income": total_income / 12,
            "avg_monthly_expenses": total_expenses / 12,
        },
        "by_month": by_month,
    }


def purchase_fee(total_amount: float, card_fee_percent: float) -> float:
    """Card fee is charged on the full purchase amount"""
    return total_amount * card_fee_percent / 100


def fee_share(total_fees: float, total_debt: float) -> float:
    """Fees as a percent of the debt still owed on a card"""
    return total_fees / total_debt * 100 if total_debt > 0 else 0.0


def estimated_interest(payment: CreditorPayment) -> float:
    """Interest part of an informal-loan payment, taken as amount times the monthly rate"""
    return payment.amount * payment.monthly_interest_percent / 100


def projected_annual_interest(balance: float, monthly_interest_percent: float) -> float:
    return balance * monthly_interest_percent / 100 * 12


def split_creditor_payments(principal: float, total_paid: float) -> Tuple[float, float]:
    """(principal paid, interest paid); payments cover principal first"""
    principal_paid = min(total_paid, principal)
    return principal_paid, total_paid - principal_paid


def fees_summary(
    card_fees: Sequence[CardFeePayment],
    creditor_payments: Sequence[CreditorPayment],
    open_balances: Iterable[Tuple[float, float]],
) -> dict:
    """
    Card fees and informal-loan interest paid during one year.

    Payments must already be restricted to the year. open_balances are
    (current balance, monthly rate percent) of the loans still open; they
    drive the projection of interest over the next twelve months, half of
    which is reported as the saving from paying those loans off faster.
    """
    by_month = {key: {"card_fees": 0.0, "third_party_interest": 0.0} for key in MONTH_KEYS}
    for fee in card_fees:
        by_month[f"{fee.date.month:02d}"]["card_fees"] += fee.fee_paid
    for payment in creditor_payments:
        by_month[f"{payment.date.month:02d}"]["third_party_interest"] += estimated_interest(payment)

    total_card_fees = sum(f.fee_paid for f in card_fees)
    total_interest = sum(estimated_interest(p) for p in creditor_payments)
    projected = sum(projected_annual_interest(balance, rate) for balance, rate in open_balances)

    return {
        "summary": {
            "total_card_fees": total_card_fees,
            "total_third_party_interest": total_interest,
            "total_fees": total_card_fees + total_interest,
            "projected_annual_interest": projected,
            "potential_savings": projected * POTENTIAL_SAVINGS_SHARE,
        },
        "by_month": by_month,
        "by_card": sum_by_key(card_fees, key=lambda f: f.card_label, value=lambda f: f.fee_paid),
        "by_creditor": sum_by_key(creditor_payments, key=lambda p: p.creditor, value=estimated_interest),
    }


def variable_expense_summary(
    month_expenses: Sequence[VariableExpenseRecord],
    window_expenses: Sequence[VariableExpenseRecord],
    budgets: Dict[str, float],
) -> dict:
    """
    This month's spending per category next to its recent monthly average.

    A category's average divides its window total by the number of distinct
    months in which it had any spending. budgets maps category to this
    month's limit. The yearly projection is None when nothing was spent.
    """
    month_totals = variable_by_category(month_expenses)
    counts = sum_by_key(month_expenses, key=_category, value=lambda e: 1)
    window_totals = variable_by_category(window_expenses)

    months_seen: Dict[str, Set[Tuple[int, int]]] = {}
    for e in window_expenses:
        months_seen.setdefault(_category(e), set()).add((e.date.year, e.date.month))

    categories = []
    for category in dict.fromkeys([*month_totals, *window_totals]):
        month_total = month_totals.get(category, 0.0)
        seen = months_seen.get(category)
        budget: Optional[float] = budgets.get(category)
        categories.append(
            CategorySpending(
                category=category,
                month_total=month_total,
                monthly_average=window_totals[category] / len(seen) if seen else 0.0,
                transaction_count=int(counts.get(category, 0)),
                budget=budget,
                budget_used=month_total / budget * 100 if budget else None,
            )
        )

    total_average = sum(c.monthly_average for c in categories)
    return {
        "categories": categories,
        "totals": {
            "this_month": sum(month_totals.values()),
            "monthly_average": total_average,
            "projection": total_average * 12 if total_average > 0 else None,
        },
    }
