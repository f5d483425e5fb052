"""Transactions - posting and deleting keep linked balances in sync"""

import logging
import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import MessageResponse, TransactionCreate, TransactionOut, TransactionType
from finance_gateway.api.dependencies import get_request_id, get_today, get_user_id
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import (
    AccountRepository,
    CreditCardRepository,
    TransactionRepository,
)
from finance_gateway.infrastructure.observability.logging import log_ledger_event

router = APIRouter()


@router.get("/transactions", response_model=List[TransactionOut])
def list_transactions(
    type: Optional[TransactionType] = Query(None),
    start: Optional[date] = Query(None, description="Inclusive start date"),
    end: Optional[date] = Query(None, description="Inclusive end date"),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return TransactionRepository(db).list_filtered(user_id, type=type, start=start, end=end)


@router.post("/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(
    body: TransactionCreate,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Post an income or expense.

    The linked account balance moves by +amount (income) or -amount
    (expense); a linked credit card balance moves the opposite way.
    """
    if body.account_id and not AccountRepository(db).get(user_id, body.account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    if body.credit_card_id and not CreditCardRepository(db).get(user_id, body.credit_card_id):
        raise HTTPException(status_code=404, detail="Credit card not found")

    fields = body.model_dump()
    fields["date"] = body.date or today

    try:
        transaction = TransactionRepository(db).post(user_id, **fields)
        db.commit()
    except InvalidArgumentError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    log_ledger_event(get_request_id(request), user_id, f"transaction_{body.type}", str(transaction.id), body.amount)
    return transaction


@router.delete("/transactions/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: uuid.UUID,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Remove a transaction and reverse its effect on the linked balance"""
    repo = TransactionRepository(db)
    transaction = repo.get(user_id, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    try:
        repo.reverse(transaction)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to reverse transaction: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    log_ledger_event(get_request_id(request), user_id, "transaction_deleted", str(transaction_id))
    return MessageResponse(message="Transaction deleted")
