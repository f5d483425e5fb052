"""Debt payoff simulator over every debt the user owes"""

import logging
import time
import uuid
from datetime import date
from typing import List, Optional, Union
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_gateway.api.v1.schemas import (
    AlternativeScenarioSchema,
    DebtInfo,
    DebtOption,
    InsufficientPaymentResponse,
    SimulateRequest,
    SimulationMonthSchema,
    SimulationResponse,
    SimulationSchema,
)
from finance_gateway.api.v1.third_party_loans import loan_balance
from finance_gateway.api.dependencies import get_request_id, get_today, get_user_id
from finance_gateway.config import settings
from finance_gateway.domain.debts import CardDebtRef, DebtRef, LoanDebt, ThirdPartyDebt, debt_type_of, resolve_debt
from finance_gateway.domain.exceptions import InvalidArgumentError
from finance_gateway.domain.models import InsufficientPayment
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.simulator import simulate_payoff
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import (
    CardDebtRepository,
    LoanRepository,
    ThirdPartyLoanRepository,
)
from finance_gateway.infrastructure.observability.logging import log_simulation
from finance_gateway.infrastructure.observability.metrics import record_simulation

router = APIRouter()


def _load_debt(db: Session, user_id: str, debt_type: str, debt_id: uuid.UUID, today: date) -> Optional[DebtRef]:
    """Turn a stored debt into a DebtRef; None when it does not exist for this owner"""
    if debt_type == "loan":
        loan = LoanRepository(db).get(user_id, debt_id)
        if loan:
            return LoanDebt(loan.description, loan.remaining_amount, loan.interest_rate)
    elif debt_type == "thirdPartyLoan":
        loan = ThirdPartyLoanRepository(db).get(user_id, debt_id)
        if loan:
            balance = loan_balance(loan, today)
            return ThirdPartyDebt(loan.creditor_name, balance.current_balance, loan.monthly_interest)
    elif debt_type == "cardDebt":
        card = CardDebtRepository(db).get(user_id, debt_id)
        if card:
            return CardDebtRef(card.cardholder_name, card.last_four_digits, card.total_debt)
    return None


def _option(debt_id: uuid.UUID, debt: DebtRef) -> DebtOption:
    terms = resolve_debt(debt)
    return DebtOption(
        id=debt_id,
        type=debt_type_of(debt),
        name=terms.name,
        balance=round_cents(terms.balance),
        interest_rate=terms.monthly_rate_percent,
    )


@router.get("/debt-simulator/debts", response_model=List[DebtOption])
def list_simulatable_debts(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Open debts of every kind; interest_rate is monthly percent"""
    options = [
        _option(loan.id, LoanDebt(loan.description, loan.remaining_amount, loan.interest_rate))
        for loan in LoanRepository(db).list_unpaid(user_id)
    ]
    for loan in ThirdPartyLoanRepository(db).list_active(user_id):
        balance = loan_balance(loan, today)
        options.append(_option(loan.id, ThirdPartyDebt(loan.creditor_name, balance.current_balance, loan.monthly_interest)))
    for card in CardDebtRepository(db).list(user_id):
        if card.total_debt > 0:
            options.append(_option(card.id, CardDebtRef(card.cardholder_name, card.last_four_digits, card.total_debt)))
    return options


@router.post(
    "/debt-simulator/simulate",
    response_model=Union[SimulationResponse, InsufficientPaymentResponse],
)
def simulate(
    body: SimulateRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Simulate paying one debt with a fixed monthly amount.

    Flow:
    1. Resolve the debt into balance, monthly rate and name
    2. Run the month-by-month payoff
    3. Report the plan, or the minimum payment when the amount cannot
       cover the first month's interest
    """
    start_time = time.time()
    request_id = get_request_id(request)

    debt = _load_debt(db, user_id, body.debt_type, body.debt_id, today)
    if debt is None:
        raise HTTPException(status_code=404, detail="Debt not found")
    terms = resolve_debt(debt)

    try:
        outcome = simulate_payoff(
            current_balance=terms.balance,
            monthly_interest_rate_percent=terms.monthly_rate_percent,
            monthly_payment=body.monthly_payment,
            as_of=today,
            max_months=settings.simulation_max_months,
        )
    except InvalidArgumentError as e:
        logging.warning(f"Invalid simulation input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000

    if isinstance(outcome, InsufficientPayment):
        record_simulation(body.debt_type, success=False, total_months=None)
        log_simulation(request_id, user_id, body.debt_type, False, None, duration_ms)
        return InsufficientPaymentResponse(error=outcome.error, minimum_payment=outcome.minimum_payment)

    record_simulation(body.debt_type, success=True, total_months=outcome.total_months)
    log_simulation(request_id, user_id, body.debt_type, True, outcome.total_months, duration_ms)

    return SimulationResponse(
        debt_info=DebtInfo(
            name=terms.name,
            current_balance=round_cents(terms.balance),
            monthly_interest_rate=terms.monthly_rate_percent,
        ),
        simulation=SimulationSchema(
            monthly_payment=round_cents(outcome.monthly_payment),
            total_months=outcome.total_months,
            total_years=outcome.total_years,
            total_paid=round_cents(outcome.total_paid),
            total_interest=round_cents(outcome.total_interest),
            payoff_date=outcome.payoff_date,
            monthly_breakdown=[
                SimulationMonthSchema(
                    month=m.month,
                    payment=round_cents(m.payment),
                    interest=round_cents(m.interest),
                    principal=round_cents(m.principal),
                    remaining_balance=round_cents(m.remaining_balance),
                )
                for m in outcome.monthly_breakdown
            ],
        ),
        alternative_scenarios=[
            AlternativeScenarioSchema(
                monthly_payment=round_cents(s.monthly_payment),
                months=s.months,
                years=s.years,
                total_paid=round_cents(s.total_paid),
                savings=round_cents(s.savings),
            )
            for s in outcome.alternative_scenarios
        ],
        recommendation=outcome.recommendation,
    )
