"""Informal loans from friends/family - simple monthly interest"""

import uuid
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    MessageResponse,
    ThirdPartyLoanCreate,
    ThirdPartyLoanOut,
    ThirdPartyLoanUpdate,
    ThirdPartyPaymentCreate,
    ThirdPartyPaymentOut,
    ThirdPartyPaymentResult,
    ThirdPartySummary,
)
from finance_gateway.api.dependencies import get_request_id, get_today, get_user_id
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.interest import calculate_third_party_balance, summarize_third_party_balances
from finance_gateway.domain.models import Payment, ThirdPartyBalance
from finance_gateway.domain.money import round_cents
from finance_gateway.infrastructure.database.models import ThirdPartyLoan
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import ThirdPartyLoanRepository
from finance_gateway.infrastructure.observability.logging import log_ledger_event
from finance_gateway.infrastructure.observability.metrics import record_payment

router = APIRouter()

RECENT_PAYMENTS = 5


def loan_balance(loan: ThirdPartyLoan, as_of: date) -> ThirdPartyBalance:
    """Recompute from every payment recorded so far"""
    return calculate_third_party_balance(
        principal=loan.principal_amount,
        monthly_interest_percent=loan.monthly_interest,
        start_date=loan.start_date,
        payments=[Payment(amount=p.amount, date=p.payment_date) for p in loan.payments],
        as_of=as_of,
    )


def _refresh_snapshot(loan: ThirdPartyLoan, as_of: date) -> ThirdPartyBalance:
    balance = loan_balance(loan, as_of)
    loan.current_balance = balance.current_balance
    loan.status = "paid" if balance.is_paid else "active"
    return balance


def _recent_payments(loan: ThirdPartyLoan) -> list:
    # Payments appended in this session are not yet in relationship order
    return sorted(loan.payments, key=lambda p: p.payment_date, reverse=True)[:RECENT_PAYMENTS]


def _loan_out(loan: ThirdPartyLoan, as_of: date) -> ThirdPartyLoanOut:
    balance = loan_balance(loan, as_of)
    return ThirdPartyLoanOut.model_validate(loan).model_copy(
        update={
            "current_balance": round_cents(balance.current_balance),
            "accrued_interest": round_cents(balance.accrued_interest),
            "total_paid": round_cents(balance.total_paid),
            "months_since_start": balance.months_elapsed,
            "recent_payments": [ThirdPartyPaymentOut.model_validate(p) for p in _recent_payments(loan)],
        }
    )


def _get_loan_or_404(repo: ThirdPartyLoanRepository, user_id: str, loan_id: uuid.UUID) -> ThirdPartyLoan:
    loan = repo.get(user_id, loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.get("/third-party-loans", response_model=List[ThirdPartyLoanOut])
def list_third_party_loans(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Loans with interest accrued up to today"""
    return [_loan_out(loan, today) for loan in ThirdPartyLoanRepository(db).list(user_id)]


@router.get("/third-party-loans/summary", response_model=ThirdPartySummary)
def third_party_summary(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    balances = [loan_balance(loan, today) for loan in ThirdPartyLoanRepository(db).list_active(user_id)]
    summary = summarize_third_party_balances(balances)
    return ThirdPartySummary(
        total_loans=summary["total_loans"],
        total_principal=round_cents(summary["total_principal"]),
        total_interest=round_cents(summary["total_interest"]),
        total_paid=round_cents(summary["total_paid"]),
        total_debt=round_cents(summary["total_debt"]),
    )


@router.post("/third-party-loans", response_model=ThirdPartyLoanOut, status_code=201)
def create_third_party_loan(
    body: ThirdPartyLoanCreate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    fields = body.model_dump()
    fields["start_date"] = body.start_date or today
    loan = ThirdPartyLoanRepository(db).create(
        user_id,
        current_balance=body.principal_amount,
        status="active",
        **fields,
    )
    db.commit()
    return _loan_out(loan, today)


@router.put("/third-party-loans/{loan_id}", response_model=ThirdPartyLoanOut)
def update_third_party_loan(
    loan_id: uuid.UUID,
    body: ThirdPartyLoanUpdate,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    loan = _get_loan_or_404(ThirdPartyLoanRepository(db), user_id, loan_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(loan, field, value)
    if "monthly_interest" in body.model_fields_set:
        _refresh_snapshot(loan, today)

    db.commit()
    return _loan_out(loan, today)


@router.post("/third-party-loans/{loan_id}/pay", response_model=ThirdPartyPaymentResult)
def pay_third_party_loan(
    loan_id: uuid.UUID,
    body: ThirdPartyPaymentCreate,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Record a payment and re-derive the balance from all payments to date"""
    repo = ThirdPartyLoanRepository(db)
    loan = _get_loan_or_404(repo, user_id, loan_id)

    try:
        payment = repo.add_payment(loan, body.amount, body.payment_date or today, body.notes)
        balance = _refresh_snapshot(loan, today)
        db.commit()
    except InvalidArgumentError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    record_payment("third_party")
    log_ledger_event(get_request_id(request), user_id, "third_party_payment", str(loan_id), body.amount)
    return ThirdPartyPaymentResult(
        message="Payment recorded",
        payment_id=payment.id,
        new_balance=round_cents(balance.current_balance),
        is_paid=balance.is_paid,
    )


@router.delete("/third-party-loans/{loan_id}/payments/{payment_id}", response_model=ThirdPartyPaymentResult)
def delete_third_party_payment(
    loan_id: uuid.UUID,
    payment_id: uuid.UUID,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Undo a payment; the balance is re-derived exactly as before it was recorded"""
    repo = ThirdPartyLoanRepository(db)
    loan = _get_loan_or_404(repo, user_id, loan_id)
    payment = repo.get_payment(loan, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")

    repo.remove_payment(loan, payment)
    balance = _refresh_snapshot(loan, today)
    db.commit()

    log_ledger_event(get_request_id(request), user_id, "third_party_payment_deleted", str(loan_id))
    return ThirdPartyPaymentResult(
        message="Payment deleted",
        new_balance=round_cents(balance.current_balance),
        is_paid=balance.is_paid,
    )


@router.delete("/third-party-loans/{loan_id}", response_model=MessageResponse)
def delete_third_party_loan(loan_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = ThirdPartyLoanRepository(db)
    loan = _get_loan_or_404(repo, user_id, loan_id)
    repo.delete(loan)
    db.commit()
    return MessageResponse(message="Loan deleted")
