"""Bills to pay this month and alerts for what falls due soon"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import AlertOut, AlertsResponse, BillOut, BillsResponse, BillsSummary
from finance_gateway.api.v1.third_party_loans import loan_balance
from finance_gateway.api.dependencies import get_today, get_user_id
from finance_gateway.domain.alerts import (
    bills_overview,
    card_alert,
    card_bill,
    fixed_bill,
    fixed_expense_alert,
    interest_alert,
    sort_alerts,
    third_party_bill,
)
from finance_gateway.domain.models import Alert, Bill
from finance_gateway.domain.money import round_cents
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import (
    CardDebtRepository,
    FixedExpenseRepository,
    ThirdPartyLoanRepository,
)
from finance_gateway.infrastructure.observability.metrics import record_alerts

router = APIRouter()


def _installments(card) -> List[float]:
    return [p.installment_amount for p in card.purchases if p.status == "active"]


def _bill_out(bill: Bill) -> BillOut:
    return BillOut.model_validate(bill).model_copy(
        update={
            "amount": round_cents(bill.amount),
            "total_debt": round_cents(bill.total_debt) if bill.total_debt is not None else None,
        }
    )


def _alert_out(alert: Alert) -> AlertOut:
    return AlertOut.model_validate(alert).model_copy(
        update={
            "amount": round_cents(alert.amount),
            "total_debt": round_cents(alert.total_debt) if alert.total_debt is not None else None,
        }
    )


@router.get("/alerts/bills", response_model=BillsResponse)
def get_bills(
    month: Optional[int] = Query(None, ge=1, le=12, description="Defaults to the current month"),
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Card bills, informal-loan interest and fixed expenses for one month.

    Card and loan bills are never marked paid; a fixed expense is paid
    once its last payment falls in the month.
    """
    month = month or today.month
    year = year or today.year

    bills = []
    for card in CardDebtRepository(db).list(user_id):
        bill = card_bill(str(card.id), card.last_four_digits, card.due_day, _installments(card), year, month)
        if bill:
            bills.append(bill)
    for loan in ThirdPartyLoanRepository(db).list_active(user_id):
        bills.append(
            third_party_bill(
                str(loan.id),
                loan.creditor_name,
                loan_balance(loan, today).current_balance,
                loan.monthly_interest,
                loan.next_payment_date,
                year,
                month,
            )
        )
    for expense in FixedExpenseRepository(db).list_active(user_id):
        bills.append(
            fixed_bill(
                str(expense.id),
                expense.name,
                expense.category,
                expense.amount,
                expense.due_day,
                expense.last_paid_date,
                year,
                month,
                today,
            )
        )

    overview = bills_overview(bills, today)
    summary = overview["summary"]
    return BillsResponse(
        month=month,
        year=year,
        summary=BillsSummary(
            total_bills=summary["total_bills"],
            total_due=round_cents(summary["total_due"]),
            total_overdue=round_cents(summary["total_overdue"]),
            overdue_count=summary["overdue_count"],
            upcoming_count=summary["upcoming_count"],
            paid_count=summary["paid_count"],
        ),
        overdue=[_bill_out(b) for b in overview["overdue"]],
        upcoming=[_bill_out(b) for b in overview["upcoming"]],
        paid=[_bill_out(b) for b in overview["paid"]],
    )


@router.get("/alerts/active", response_model=AlertsResponse)
def get_active_alerts(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Card bills and fixed expenses due within a week, plus interest on every open informal loan"""
    alerts = []
    for card in CardDebtRepository(db).list(user_id):
        alerts.append(card_alert(str(card.id), card.last_four_digits, card.due_day, _installments(card), today))
    for expense in FixedExpenseRepository(db).list_active(user_id):
        alerts.append(
            fixed_expense_alert(
                str(expense.id), expense.name, expense.amount, expense.due_day, expense.last_paid_date, today
            )
        )
    for loan in ThirdPartyLoanRepository(db).list_active(user_id):
        alerts.append(
            interest_alert(
                str(loan.id), loan.creditor_name, loan_balance(loan, today).current_balance, loan.monthly_interest
            )
        )

    ordered = sort_alerts(a for a in alerts if a is not None)
    record_alerts(a.severity for a in ordered)

    return AlertsResponse(
        count=len(ordered),
        critical_count=sum(1 for a in ordered if a.severity == "critical"),
        warning_count=sum(1 for a in ordered if a.severity == "warning"),
        alerts=[_alert_out(a) for a in ordered],
    )
