"""Accounts and credit cards - balances moved by transactions"""

import uuid
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    AccountCreate,
    AccountOut,
    CreditCardCreate,
    CreditCardOut,
    MessageResponse,
)
from finance_gateway.api.dependencies import get_user_id
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import AccountRepository, CreditCardRepository

router = APIRouter()


@router.get("/accounts", response_model=List[AccountOut])
def list_accounts(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return AccountRepository(db).list(user_id)


@router.post("/accounts", response_model=AccountOut, status_code=201)
def create_account(body: AccountCreate, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    account = AccountRepository(db).create(user_id, **body.model_dump())
    db.commit()
    return account


@router.delete("/accounts/{account_id}", response_model=MessageResponse)
def delete_account(account_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = AccountRepository(db)
    account = repo.get(user_id, account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")

    repo.delete(account)
    db.commit()
    return MessageResponse(message="Account deleted")


@router.get("/credit-cards", response_model=List[CreditCardOut])
def list_credit_cards(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return CreditCardRepository(db).list(user_id)


@router.post("/credit-cards", response_model=CreditCardOut, status_code=201)
def create_credit_card(body: CreditCardCreate, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    card = CreditCardRepository(db).create(user_id, **body.model_dump())
    db.commit()
    return card
