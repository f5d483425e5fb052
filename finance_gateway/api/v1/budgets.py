"""Monthly category budgets compared against actual spending"""

import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import BudgetCreate, BudgetOut, BudgetUpdate, MessageResponse
from finance_gateway.api.dependencies import get_today, get_user_id
from finance_gateway.domain.exceptions import DuplicateEntityError
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import budget_usage
from finance_gateway.infrastructure.database.models import Budget
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import BudgetRepository, TransactionRepository
from finance_gateway.utils.date_utils import month_bounds, parse_month, start_of_month

router = APIRouter()


def _month_or_400(value: Optional[str], today: date) -> date:
    if not value:
        return start_of_month(today)
    try:
        return parse_month(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid month: {value}")


def _budget_out(db: Session, user_id: str, budget: Budget) -> BudgetOut:
    """Attach spent/remaining/percentage from that month's expenses"""
    start, end = month_bounds(budget.month.year, budget.month.month)
    expenses = TransactionRepository(db).records_between(user_id, start, end, type="expense")
    usage = budget_usage(budget.category, budget.amount, expenses)
    return BudgetOut.model_validate(budget).model_copy(
        update={
            "spent": round_cents(usage.spent),
            "remaining": round_cents(usage.remaining),
            "percentage": round(usage.percentage, 1),
        }
    )


def _get_budget_or_404(repo: BudgetRepository, user_id: str, budget_id: uuid.UUID) -> Budget:
    budget = repo.get(user_id, budget_id)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")
    return budget


@router.get("/budgets", response_model=List[BudgetOut])
def list_budgets(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    month_start = _month_or_400(month, today)
    return [_budget_out(db, user_id, b) for b in BudgetRepository(db).list_for_month(user_id, month_start)]


@router.post("/budgets", response_model=BudgetOut, status_code=201)
def create_budget(
    body: BudgetCreate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    month_start = _month_or_400(body.month, today)
    try:
        budget = BudgetRepository(db).add(user_id, body.category, month_start, body.amount)
        db.commit()
    except DuplicateEntityError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    return _budget_out(db, user_id, budget)


@router.put("/budgets/{budget_id}", response_model=BudgetOut)
def update_budget(
    budget_id: uuid.UUID,
    body: BudgetUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    budget = _get_budget_or_404(BudgetRepository(db), user_id, budget_id)
    budget.amount = body.amount
    db.commit()
    return _budget_out(db, user_id, budget)


@router.delete("/budgets/{budget_id}", response_model=MessageResponse)
def delete_budget(budget_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = BudgetRepository(db)
    budget = _get_budget_or_404(repo, user_id, budget_id)
    repo.delete(budget)
    db.commit()
    return MessageResponse(message="Budget deleted")
