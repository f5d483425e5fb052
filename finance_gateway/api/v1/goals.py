"""Savings goals"""

import uuid
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import GoalContribution, GoalCreate, GoalOut, GoalUpdate, MessageResponse
from finance_gateway.api.dependencies import get_request_id, get_user_id
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import goal_progress, is_goal_completed
from finance_gateway.infrastructure.database.models import Goal
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import GoalRepository
from finance_gateway.infrastructure.observability.logging import log_ledger_event
from finance_gateway.infrastructure.observability.metrics import record_payment

router = APIRouter()


def goal_out(goal: Goal) -> GoalOut:
    progress, remaining = goal_progress(goal.current_amount, goal.target_amount)
    return GoalOut.model_validate(goal).model_copy(
        update={"progress": round(progress, 1), "remaining": round_cents(remaining)}
    )


def _get_goal_or_404(repo: GoalRepository, user_id: str, goal_id: uuid.UUID) -> Goal:
    goal = repo.get(user_id, goal_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.get("/goals", response_model=List[GoalOut])
def list_goals(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return [goal_out(goal) for goal in GoalRepository(db).list(user_id)]


@router.post("/goals", response_model=GoalOut, status_code=201)
def create_goal(body: GoalCreate, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    goal = GoalRepository(db).create(user_id, current_amount=0.0, status="active", **body.model_dump())
    db.commit()
    return goal_out(goal)


@router.post("/goals/{goal_id}/contribute", response_model=GoalOut)
def contribute_to_goal(
    goal_id: uuid.UUID,
    body: GoalContribution,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Add money to a goal; reaching the target completes it"""
    goal = _get_goal_or_404(GoalRepository(db), user_id, goal_id)

    goal.current_amount += body.amount
    if is_goal_completed(goal.current_amount, goal.target_amount):
        goal.status = "completed"
    db.commit()

    record_payment("goal")
    log_ledger_event(get_request_id(request), user_id, "goal_contribution", str(goal_id), body.amount)
    return goal_out(goal)


@router.put("/goals/{goal_id}", response_model=GoalOut)
def update_goal(
    goal_id: uuid.UUID,
    body: GoalUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    goal = _get_goal_or_404(GoalRepository(db), user_id, goal_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(goal, field, value)
    db.commit()
    return goal_out(goal)


@router.delete("/goals/{goal_id}", response_model=MessageResponse)
def delete_goal(goal_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = GoalRepository(db)
    goal = _get_goal_or_404(repo, user_id, goal_id)
    repo.delete(goal)
    db.commit()
    return MessageResponse(message="Goal deleted")
