"""Recurring monthly bills with due-date tracking"""

import uuid
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    FixedExpenseCreate,
    FixedExpenseOut,
    FixedExpenseSummary,
    FixedExpenseUpdate,
    MessageResponse,
)
from finance_gateway.api.dependencies import get_request_id, get_today, get_user_id
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import fixed_expense_status, upcoming_fixed_expenses
from finance_gateway.infrastructure.database.models import FixedExpense
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import FixedExpenseRepository
from finance_gateway.infrastructure.observability.logging import log_ledger_event
from finance_gateway.infrastructure.observability.metrics import record_payment

router = APIRouter()


def expense_out(expense: FixedExpense, today: date) -> FixedExpenseOut:
    status = fixed_expense_status(expense.due_day, expense.last_paid_date, today)
    return FixedExpenseOut.model_validate(expense).model_copy(
        update={"days_until_due": status.days_until_due, "is_overdue": status.is_overdue}
    )


def _get_expense_or_404(repo: FixedExpenseRepository, user_id: str, expense_id: uuid.UUID) -> FixedExpense:
    expense = repo.get(user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Fixed expense not found")
    return expense


@router.get("/fixed-expenses", response_model=List[FixedExpenseOut])
def list_fixed_expenses(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    return [expense_out(e, today) for e in FixedExpenseRepository(db).list(user_id)]


@router.get("/fixed-expenses/summary", response_model=FixedExpenseSummary)
def fixed_expense_summary(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Monthly total of active bills and those due within the next week"""
    active = FixedExpenseRepository(db).list_active(user_id)
    summary = upcoming_fixed_expenses([(e.due_day, e.amount) for e in active], today)
    return FixedExpenseSummary(
        total=round_cents(summary["total"]),
        count=summary["count"],
        upcoming_count=summary["upcoming_count"],
        upcoming_amount=round_cents(summary["upcoming_amount"]),
    )


@router.post("/fixed-expenses", response_model=FixedExpenseOut, status_code=201)
def create_fixed_expense(
    body: FixedExpenseCreate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    expense = FixedExpenseRepository(db).create(user_id, is_active=True, **body.model_dump())
    db.commit()
    return expense_out(expense, today)


@router.post("/fixed-expenses/{expense_id}/pay", response_model=FixedExpenseOut)
def pay_fixed_expense(
    expense_id: uuid.UUID,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Mark this month's bill as paid"""
    expense = _get_expense_or_404(FixedExpenseRepository(db), user_id, expense_id)
    expense.last_paid_date = today
    db.commit()

    record_payment("fixed_expense")
    log_ledger_event(get_request_id(request), user_id, "fixed_expense_paid", str(expense_id), expense.amount)
    return expense_out(expense, today)


@router.put("/fixed-expenses/{expense_id}", response_model=FixedExpenseOut)
def update_fixed_expense(
    expense_id: uuid.UUID,
    body: FixedExpenseUpdate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    expense = _get_expense_or_404(FixedExpenseRepository(db), user_id, expense_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(expense, field, value)
    db.commit()
    return expense_out(expense, today)


@router.delete("/fixed-expenses/{expense_id}", response_model=MessageResponse)
def delete_fixed_expense(expense_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = FixedExpenseRepository(db)
    expense = _get_expense_or_404(repo, user_id, expense_id)
    repo.delete(expense)
    db.commit()
    return MessageResponse(message="Fixed expense deleted")
