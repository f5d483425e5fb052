"""Day-to-day expenses tagged with a payment method"""

import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    CategorySpendingOut,
    MessageResponse,
    VariableExpenseCreate,
    VariableExpenseOut,
    VariableExpenseSummary,
    VariableExpenseTotals,
)
from finance_gateway.api.dependencies import get_today, get_user_id
from finance_gateway.config import settings
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import variable_expense_summary
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import BudgetRepository, VariableExpenseRepository
from finance_gateway.utils.date_utils import add_months, month_bounds, start_of_month

router = APIRouter()


@router.get("/variable-expenses", response_model=List[VariableExpenseOut])
def list_variable_expenses(
    start: Optional[date] = Query(None, description="Inclusive, defaults to the first day of this month"),
    end: Optional[date] = Query(None, description="Inclusive, defaults to the last day of this month"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    month_start, month_end = month_bounds(today.year, today.month)
    return VariableExpenseRepository(db).list_between(user_id, start or month_start, end or month_end)


@router.get("/variable-expenses/summary", response_model=VariableExpenseSummary)
def get_variable_expense_summary(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Spending per category this month next to its monthly average.

    The average covers the current month and the full months before it
    (three by default), with this month's budgets alongside.
    """
    repo = VariableExpenseRepository(db)
    month_start, month_end = month_bounds(today.year, today.month)
    window_start = start_of_month(add_months(today, -settings.spending_average_months))
    budgets = {b.category: b.amount for b in BudgetRepository(db).list_for_month(user_id, month_start)}

    summary = variable_expense_summary(
        repo.records_between(user_id, month_start, month_end),
        repo.records_between(user_id, window_start, month_end),
        budgets,
    )
    totals = summary["totals"]

    return VariableExpenseSummary(
        month=today.month,
        year=today.year,
        categories=[
            CategorySpendingOut.model_validate(c).model_copy(
                update={
                    "month_total": round_cents(c.month_total),
                    "monthly_average": round_cents(c.monthly_average),
                    "budget_used": round(c.budget_used, 1) if c.budget_used is not None else None,
                }
            )
            for c in summary["categories"]
        ],
        totals=VariableExpenseTotals(
            this_month=round_cents(totals["this_month"]),
            monthly_average=round_cents(totals["monthly_average"]),
            projection=round_cents(totals["projection"]) if totals["projection"] is not None else None,
        ),
    )


@router.post("/variable-expenses", response_model=VariableExpenseOut, status_code=201)
def create_variable_expense(
    body: VariableExpenseCreate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    fields = body.model_dump()
    fields["date"] = body.date or today
    expense = VariableExpenseRepository(db).create(user_id, **fields)
    db.commit()
    return expense


@router.delete("/variable-expenses/{expense_id}", response_model=MessageResponse)
def delete_variable_expense(expense_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = VariableExpenseRepository(db)
    expense = repo.get(user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Variable expense not found")

    repo.delete(expense)
    db.commit()
    return MessageResponse(message="Variable expense deleted")
