"""Card fees and informal-loan interest - what debt costs the family"""

from datetime import date
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    CardFeesOut,
    CreditorInterestOut,
    FeeMonthBucket,
    FeesSummaryResponse,
    FeesTotals,
)
from finance_gateway.api.v1.third_party_loans import loan_balance
from finance_gateway.api.dependencies import get_today, get_user_id
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import (
    fee_share,
    fees_summary,
    projected_annual_interest,
    purchase_fee,
    remaining_installment_debt,
    split_creditor_payments,
)
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import CardDebtRepository, ThirdPartyLoanRepository

router = APIRouter()


def _rounded(values: Dict[str, float]) -> Dict[str, float]:
    return {key: round_cents(value) for key, value in values.items()}


@router.get("/fees/summary", response_model=FeesSummaryResponse)
def get_fees_summary(
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Fees and interest paid in a year, by month, card and creditor.

    The projection uses the live balance of every open informal loan.
    """
    year = year or today.year
    start, end = date(year, 1, 1), date(year, 12, 31)
    loans = ThirdPartyLoanRepository(db)

    report = fees_summary(
        CardDebtRepository(db).fee_payments_between(user_id, start, end),
        loans.payments_between(user_id, start, end),
        [(loan_balance(loan, today).current_balance, loan.monthly_interest) for loan in loans.list_active(user_id)],
    )

    return FeesSummaryResponse(
        year=year,
        summary=FeesTotals(**_rounded(report["summary"])),
        by_month={key: FeeMonthBucket(**_rounded(bucket)) for key, bucket in report["by_month"].items()},
        by_card=_rounded(report["by_card"]),
        by_creditor=_rounded(report["by_creditor"]),
    )


@router.get("/fees/cards", response_model=List[CardFeesOut])
def get_card_fees(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Fees of the active purchases on each card, most expensive card first"""
    cards = []
    for card in CardDebtRepository(db).list(user_id):
        active = [p for p in card.purchases if p.status == "active"]
        total_fees = sum(purchase_fee(p.total_amount, p.card_fee_percent) for p in active)
        total_debt = sum(
            remaining_installment_debt(p.installments, p.paid_installments, p.installment_amount) for p in active
        )
        cards.append(
            CardFeesOut(
                id=card.id,
                name=f"**** {card.last_four_digits}",
                cardholder=card.cardholder_name,
                total_debt=round_cents(total_debt),
                total_fees=round_cents(total_fees),
                fee_percentage=round(fee_share(total_fees, total_debt), 2),
                purchases_count=len(active),
            )
        )
    return sorted(cards, key=lambda c: c.total_fees, reverse=True)


@router.get("/fees/creditors", response_model=List[CreditorInterestOut])
def get_creditor_interest(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Interest already paid and projected for the next year, per informal loan"""
    creditors = []
    for loan in ThirdPartyLoanRepository(db).list(user_id):
        balance = loan_balance(loan, today)
        _, interest_paid = split_creditor_payments(loan.principal_amount, balance.total_paid)
        creditors.append(
            CreditorInterestOut(
                id=loan.id,
                creditor=loan.creditor_name,
                principal=loan.principal_amount,
                current_balance=round_cents(balance.current_balance),
                interest_rate=loan.monthly_interest,
                total_paid=round_cents(balance.total_paid),
                interest_paid=round_cents(interest_paid),
                projected_annual_interest=round_cents(
                    projected_annual_interest(balance.current_balance, loan.monthly_interest)
                ),
                status=loan.status,
                responsible_person=loan.responsible_person,
            )
        )
    return sorted(creditors, key=lambda c: c.projected_annual_interest, reverse=True)
