"""Card installment purchases grouped per card (last four digits)"""

import uuid
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    CardDebtOut,
    CardDebtSummary,
    CardDetailsResponse,
    CardPaymentOut,
    CardPaymentResult,
    CardPurchaseCreate,
    CardPurchaseOut,
    CardPurchasePayRequest,
    CardPurchaseResult,
    MessageResponse,
    UpcomingInstallmentSchema,
)
from finance_gateway.api.dependencies import get_request_id, get_today, get_user_id
from finance_gateway.config import settings
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.ledger import apply_installment_payment
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import purchase_fee, upcoming_installments
from finance_gateway.infrastructure.database.models import CardDebt
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import CardDebtRepository
from finance_gateway.infrastructure.observability.logging import log_ledger_event
from finance_gateway.infrastructure.observability.metrics import record_payment

router = APIRouter()


def _active_purchases(card: CardDebt) -> list:
    return [p for p in card.purchases if p.status == "active"]


def _card_out(card: CardDebt) -> CardDebtOut:
    active = _active_purchases(card)
    return CardDebtOut.model_validate(card).model_copy(
        update={
            "total_debt": round_cents(card.total_debt),
            "total_purchases": len(active),
            "total_installments_remaining": sum(p.installments - p.paid_installments for p in active),
        }
    )


def _get_card_or_404(repo: CardDebtRepository, user_id: str, card_id: uuid.UUID) -> CardDebt:
    card = repo.get(user_id, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.get("/card-debts", response_model=List[CardDebtOut])
def list_card_debts(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return [_card_out(card) for card in CardDebtRepository(db).list(user_id)]


@router.get("/card-debts/summary", response_model=CardDebtSummary)
def card_debt_summary(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Totals across cards; fees are charged on the full purchase amount"""
    cards = CardDebtRepository(db).list(user_id)
    active = [p for card in cards for p in _active_purchases(card)]
    return CardDebtSummary(
        total_debt=round_cents(sum(card.total_debt for card in cards)),
        total_cards=len(cards),
        total_purchases=len(active),
        total_fees=round_cents(sum(purchase_fee(p.total_amount, p.card_fee_percent) for p in active)),
    )


@router.get("/card-debts/{card_id}/details", response_model=CardDetailsResponse)
def card_details(card_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Card with every unpaid installment projected to its due date"""
    card = _get_card_or_404(CardDebtRepository(db), user_id, card_id)

    installments = []
    for purchase in _active_purchases(card):
        installments.extend(
            upcoming_installments(
                purchase_id=str(purchase.id),
                description=purchase.description,
                purchase_date=purchase.purchase_date,
                installments=purchase.installments,
                paid_installments=purchase.paid_installments,
                installment_amount=purchase.installment_amount,
                due_day=card.due_day,
            )
        )
    installments.sort(key=lambda i: i.due_date)

    return CardDetailsResponse(
        card=_card_out(card),
        installments=[UpcomingInstallmentSchema.model_validate(i) for i in installments],
    )


@router.post("/card-debts/purchase", response_model=CardPurchaseResult, status_code=201)
def create_card_purchase(
    body: CardPurchaseCreate,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Register a purchase on a card, creating the card on first use.

    The card is matched by its last four digits; the installment amount is
    the total split evenly across installments.
    """
    repo = CardDebtRepository(db)
    card = repo.get_by_digits(user_id, body.last_four_digits)
    if not card:
        card = repo.create(
            user_id,
            cardholder_name=body.cardholder_name,
            last_four_digits=body.last_four_digits,
            due_day=body.due_day or settings.default_card_due_day,
            total_debt=0.0,
        )

    purchase = repo.add_purchase(
        card,
        description=body.description,
        purchase_date=body.purchase_date or today,
        total_amount=body.total_amount,
        installments=body.installments,
        installment_amount=body.total_amount / body.installments,
        paid_installments=0,
        card_fee_percent=body.card_fee_percent,
        status="active",
    )
    repo.refresh_total(card)
    db.commit()

    log_ledger_event(get_request_id(request), user_id, "card_purchase", str(purchase.id), body.total_amount)
    return CardPurchaseResult(
        card=_card_out(card),
        purchase=CardPurchaseOut.model_validate(purchase),
        message="Purchase registered",
    )


@router.post("/card-debts/purchase/{purchase_id}/pay", response_model=CardPaymentResult)
def pay_card_purchase(
    purchase_id: uuid.UUID,
    body: CardPurchasePayRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Pay one or more installments; the purchase is paid once every installment is"""
    request_id = get_request_id(request)
    repo = CardDebtRepository(db)
    purchase = repo.get_purchase(user_id, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    if purchase.status == "paid":
        raise HTTPException(status_code=400, detail="Purchase is already paid")

    amount = body.amount or purchase.installment_amount * body.installments_to_pay
    try:
        purchase.paid_installments, purchase.status = apply_installment_payment(
            purchase.paid_installments, purchase.installments, body.installments_to_pay
        )
        payment = repo.add_payment(purchase, amount, body.fee_paid, today)
        repo.refresh_total(purchase.card_debt)
        db.commit()
    except InvalidArgumentError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    record_payment("card_purchase")
    log_ledger_event(request_id, user_id, "card_payment", str(purchase_id), amount)
    return CardPaymentResult(
        payment=CardPaymentOut.model_validate(payment),
        purchase=CardPurchaseOut.model_validate(purchase),
        message="Payment recorded",
    )


@router.delete("/card-debts/purchase/{purchase_id}", response_model=MessageResponse)
def delete_card_purchase(purchase_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    repo = CardDebtRepository(db)
    purchase = repo.get_purchase(user_id, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")

    card = purchase.card_debt
    repo.remove_purchase(purchase)
    repo.refresh_total(card)
    db.commit()
    return MessageResponse(message="Purchase deleted")


@router.delete("/card-debts/{card_id}", response_model=MessageResponse)
def delete_card_debt(card_id: uuid.UUID, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Delete a card together with its purchases and payments"""
    repo = CardDebtRepository(db)
    card = _get_card_or_404(repo, user_id, card_id)
    repo.delete(card)
    db.commit()
    return MessageResponse(message="Card deleted")
