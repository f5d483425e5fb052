"""Bills due in a month and alerts for payments coming up"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from finance_gateway.domain.models import Alert, Bill
from finance_gateway.utils.date_utils import add_months, with_day

ALERT_WINDOW_DAYS = 7
HIGH_PRIORITY_CARD_BILL = 1000
DEFAULT_LOAN_DUE_DAY = 15
SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}


def monthly_interest(balance: float, monthly_interest_percent: float) -> float:
    return balance * monthly_interest_percent / 100


def paid_in_month(last_paid_date: Optional[date], year: int, month: int) -> bool:
    return last_paid_date is not None and (last_paid_date.year, last_paid_date.month) == (year, month)


def card_bill(
    card_id: str, last_four_digits: str, due_day: int, installment_amounts: Sequence[float], year: int, month: int
) -> Optional[Bill]:
    """One installment of every active purchase; no bill for a card with nothing active"""
    if not installment_amounts:
        return None

    amount = sum(installment_amounts)
    return Bill(
        id=card_id,
        type="card",
        name=f"Card **** {last_four_digits}",
        description=f"{len(installment_amounts)} installments",
        amount=amount,
        due_date=with_day(date(year, month, 1), due_day),
        is_paid=False,
        priority="high" if amount > HIGH_PRIORITY_CARD_BILL else "medium",
    )


def third_party_bill(
    loan_id: str,
    creditor: str,
    balance: float,
    monthly_interest_percent: float,
    next_payment_date: Optional[date],
    year: int,
    month: int,
) -> Bill:
    """The month's interest on an informal loan; always high priority"""
    return Bill(
        id=loan_id,
        type="third_party",
        name=creditor,
        description=f"Interest: {monthly_interest_percent:g}%/month",
        amount=monthly_interest(balance, monthly_interest_percent),
        due_date=next_payment_date or date(year, month, DEFAULT_LOAN_DUE_DAY),
        is_paid=False,
        priority="high",
        total_debt=balance,
    )


def fixed_bill(
    expense_id: str,
    name: str,
    category: str,
    amount: float,
    due_day: int,
    last_paid_date: Optional[date],
    year: int,
    month: int,
    today: date,
) -> Bill:
    due_date = with_day(date(year, month, 1), due_day)
    is_paid = paid_in_month(last_paid_date, year, month)
    return Bill(
        id=expense_id,
        type="fixed",
        name=name,
        description=category,
        amount=amount,
        due_date=due_date,
        is_paid=is_paid,
        priority="urgent" if due_date < today and not is_paid else "low",
    )


def bills_overview(bills: Iterable[Bill], today: date) -> dict:
    """
    Bills ordered by due date and split into overdue, upcoming and paid.

    Only unpaid bills count towards the amount due.
    """
    ordered = sorted(bills, key=lambda b: b.due_date)
    overdue = [b for b in ordered if not b.is_paid and b.due_date < today]
    upcoming = [b for b in ordered if not b.is_paid and b.due_date >= today]
    paid = [b for b in ordered if b.is_paid]

    return {
        "summary": {
            "total_bills": len(ordered),
            "total_due": sum(b.amount for b in overdue + upcoming),
            "total_overdue": sum(b.amount for b in overdue),
            "overdue_count": len(overdue),
            "upcoming_count": len(upcoming),
            "paid_count": len(paid),
        },
        "overdue": overdue,
        "upcoming": upcoming,
        "paid": paid,
    }


def next_due_date(due_day: int, today: date) -> date:
    """This month's due day, or next month's once it has passed"""
    due = with_day(today, due_day)
    if due < today:
        due = with_day(add_months(today, 1), due_day)
    return due


def alert_severity(days_until: int) -> str:
    if days_until <= 2:
        return "critical"
    if days_until <= 5:
        return "warning"
    return "info"


def _due_message(days_until: int, amount: float) -> str:
    plural = "s" if days_until != 1 else ""
    return f"Due in {days_until} day{plural} - {amount:.2f}"


def card_alert(
    card_id: str, last_four_digits: str, due_day: int, installment_amounts: Sequence[float], today: date
) -> Optional[Alert]:
    if not installment_amounts:
        return None

    due = next_due_date(due_day, today)
    days_until = (due - today).days
    if days_until > ALERT_WINDOW_DAYS:
        return None

    amount = sum(installment_amounts)
    return Alert(
        id=card_id,
        type="card_due",
        severity=alert_severity(days_until),
        title=f"Card **** {last_four_digits}",
        message=_due_message(days_until, amount),
        amount=amount,
        due_date=due,
        days_until=days_until,
    )


def fixed_expense_alert(
    expense_id: str, name: str, amount: float, due_day: int, last_paid_date: Optional[date], today: date
) -> Optional[Alert]:
    """Bills already paid this month raise no alert"""
    if paid_in_month(last_paid_date, today.year, today.month):
        return None

    due = next_due_date(due_day, today)
    days_until = (due - today).days
    if days_until > ALERT_WINDOW_DAYS:
        return None

    return Alert(
        id=expense_id,
        type="fixed_expense_due",
        severity=alert_severity(days_until),
        title=name,
        message=_due_message(days_until, amount),
        amount=amount,
        due_date=due,
        days_until=days_until,
    )


def interest_alert(loan_id: str, creditor: str, balance: float, monthly_interest_percent: float) -> Alert:
    """Open informal loans always warn about the interest they accrue"""
    interest = monthly_interest(balance, monthly_interest_percent)
    return Alert(
        id=loan_id,
        type="third_party_interest",
        severity="warning",
        title=f"Interest: {creditor}",
        message=f"{interest:.2f} of interest this month ({monthly_interest_percent:g}%)",
        amount=interest,
        total_debt=balance,
    )


def sort_alerts(alerts: Iterable[Alert]) -> List[Alert]:
    """Most severe first; ties keep their original order"""
    return sorted(alerts, key=lambda a: SEVERITY_ORDER[a.severity])
