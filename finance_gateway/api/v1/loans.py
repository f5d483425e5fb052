"""Fixed-installment loans with amortization schedules"""

import logging
import uuid
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    AmortizationResponse,
    AmortizationRowSchema,
    LoanCreate,
    LoanOut,
    LoanPaymentRequest,
    LoanPreviewRequest,
    MessageResponse,
)
from finance_gateway.api.dependencies import get_request_id, get_today, get_user_id
from finance_gateway.config import settings
from finance_gateway.domain.amortization import build_amortization_schedule, calculate_monthly_payment
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.ledger import apply_loan_payment
from finance_gateway.domain.models import AmortizationSchedule
from finance_gateway.domain.money import round_cents
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import LoanRepository
from finance_gateway.infrastructure.observability.logging import log_ledger_event
from finance_gateway.infrastructure.observability.metrics import record_payment
from finance_gateway.utils.date_utils import add_months

router = APIRouter()


def _schedule_response(schedule: AmortizationSchedule) -> AmortizationResponse:
    """Round at the boundary; only the first periods are listed"""
    return AmortizationResponse(
        principal=round_cents(schedule.principal),
        interest_rate=schedule.annual_rate_percent,
        term_months=schedule.months,
        monthly_payment=round_cents(schedule.monthly_payment),
        total_payment=round_cents(schedule.total_payment),
        total_interest=round_cents(schedule.total_interest),
        schedule=[
            AmortizationRowSchema(
                month=row.month,
                payment=round_cents(row.payment),
                interest=round_cents(row.interest),
                principal=round_cents(row.principal),
                balance=round_cents(row.balance),
            )
            for row in schedule.rows[: settings.schedule_preview_months]
        ],
    )


@router.post("/loans/preview", response_model=AmortizationResponse)
def preview_loan(body: LoanPreviewRequest):
    """Amortization schedule for hypothetical terms, nothing is stored"""
    try:
        schedule = build_amortization_schedule(body.principal, body.interest_rate, body.term_months)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _schedule_response(schedule)


@router.get("/loans", response_model=List[LoanOut])
def list_loans(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return LoanRepository(db).list(user_id)


@router.post("/loans", response_model=LoanOut, status_code=201)
def create_loan(
    body: LoanCreate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Create a loan; the installment comes from the annuity formula"""
    try:
        payment = calculate_monthly_payment(body.principal, body.interest_rate, body.term_months)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    start_date = body.start_date or today
    loan = LoanRepository(db).create(
        user_id,
        description=body.description,
        principal=body.principal,
        interest_rate=body.interest_rate,
        term_months=body.term_months,
        monthly_payment=round_cents(payment),
        remaining_amount=body.principal,
        start_date=start_date,
        end_date=add_months(start_date, body.term_months),
        status="active",
    )
    db.commit()
    return loan


@router.get("/loans/{loan_id}/schedule", response_model=AmortizationResponse)
def get_loan_schedule(loan_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    loan = LoanRepository(db).get(user_id, loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")

    schedule = build_amortization_schedule(loan.principal, loan.interest_rate, loan.term_months)
    return _schedule_response(schedule)


@router.post("/loans/{loan_id}/pay", response_model=LoanOut)
def pay_loan(
    loan_id: uuid.UUID,
    body: LoanPaymentRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Reduce the remaining amount; reaching zero marks the loan paid"""
    request_id = get_request_id(request)
    loan = LoanRepository(db).get(user_id, loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    if loan.status == "paid":
        raise HTTPException(status_code=400, detail="Loan is already paid")

    amount = body.amount or loan.monthly_payment
    try:
        loan.remaining_amount, loan.status = apply_loan_payment(loan.remaining_amount, amount)
        db.commit()
    except InvalidArgumentError as e:
        db.rollback()
        logging.warning(f"Invalid loan payment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    record_payment("loan")
    log_ledger_event(request_id, user_id, "loan_payment", str(loan_id), amount)
    return loan


@router.delete("/loans/{loan_id}", response_model=MessageResponse)
def delete_loan(loan_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = LoanRepository(db)
    loan = repo.get(user_id, loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")

    repo.delete(loan)
    db.commit()
    return MessageResponse(message="Loan deleted")
