"""Dashboard - balances, debt, financial health and goal progress at a glance"""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finance_gateway.api.v1.goals import goal_out
from finance_gateway.api.v1.schemas import DashboardResponse, DashboardSummary, HealthSchema, TransactionOut
from finance_gateway.api.v1.third_party_loans import loan_balance
from finance_gateway.api.dependencies import get_today, get_user_id
from finance_gateway.config import settings
from finance_gateway.domain.health import assess_transactions
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import expenses_by_category, split_income_expenses
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import (
    AccountRepository,
    CardDebtRepository,
    CreditCardRepository,
    GoalRepository,
    LoanRepository,
    ThirdPartyLoanRepository,
    TransactionRepository,
)
from finance_gateway.infrastructure.observability.metrics import record_health
from finance_gateway.utils.date_utils import add_months, start_of_month

router = APIRouter()

RECENT_TRANSACTIONS = 10


def window_start(today: date, months: int) -> date:
    """First day of the oldest month in a window of `months` calendar months ending today"""
    return start_of_month(add_months(today, -(months - 1)))


def total_debt(db: Session, user_id: str, today: date) -> float:
    """Everything still owed: bank loans, informal loans (with interest to date) and card installments"""
    loans = sum(loan.remaining_amount for loan in LoanRepository(db).list_unpaid(user_id))
    third_party = sum(
        loan_balance(loan, today).current_balance for loan in ThirdPartyLoanRepository(db).list_active(user_id)
    )
    cards = sum(card.total_debt for card in CardDebtRepository(db).list(user_id))
    return loans + third_party + cards


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    transactions = TransactionRepository(db)
    accounts = AccountRepository(db).list(user_id)
    credit_cards = CreditCardRepository(db).list(user_id)
    debt = total_debt(db, user_id, today)

    health_window = transactions.records_between(user_id, window_start(today, settings.health_window_months), today)
    income, expenses = split_income_expenses(health_window)
    health = assess_transactions(health_window, debt)
    record_health(health.status)

    category_window = transactions.records_between(
        user_id, window_start(today, settings.dashboard_window_months), today, type="expense"
    )
    goals = [g for g in GoalRepository(db).list(user_id) if g.status == "active"]

    return DashboardResponse(
        summary=DashboardSummary(
            total_balance=round_cents(sum(a.balance for a in accounts)),
            total_credit_used=round_cents(sum(c.current_balance for c in credit_cards)),
            total_credit_limit=round_cents(sum(c.limit for c in credit_cards)),
            total_debt=round_cents(debt),
            income=round_cents(income),
            expenses=round_cents(expenses),
            balance=round_cents(income - expenses),
        ),
        financial_health=HealthSchema(
            status=health.status,
            color=health.color,
            score=health.score,
            debt_ratio=round(health.debt_ratio, 1),
            savings_ratio=round(health.savings_ratio, 1) if health.savings_ratio is not None else None,
        ),
        expenses_by_category={k: round_cents(v) for k, v in expenses_by_category(category_window).items()},
        recent_transactions=[
            TransactionOut.model_validate(t) for t in transactions.list_filtered(user_id, limit=RECENT_TRANSACTIONS)
        ],
        goals=[goal_out(g) for g in goals],
    )
