"""Pydantic schemas for API request/response validation"""

import datetime
import uuid
from datetime import date
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    """Response model readable straight from ORM rows and dataclasses"""

    model_config = ConfigDict(from_attributes=True)


TransactionType = Literal["income", "expense"]
DebtType = Literal["loan", "thirdPartyLoan", "cardDebt"]


# Accounts & cards

class AccountCreate(BaseModel):
    """Request body for POST /v1/accounts"""

    name: str = Field(..., min_length=1)
    type: str = "checking"
    balance: float = 0.0


class AccountOut(ORMModel):
    id: uuid.UUID
    name: str
    type: str
    balance: float


class CreditCardCreate(BaseModel):
    """Request body for POST /v1/credit-cards"""

    name: str = Field(..., min_length=1)
    limit: float = Field(0.0, ge=0)
    current_balance: float = Field(0.0, ge=0)


class CreditCardOut(ORMModel):
    id: uuid.UUID
    name: str
    limit: float
    current_balance: float


# Transactions

class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    type: TransactionType
    category: str = Field(..., min_length=1)
    description: Optional[str] = None
    amount: float = Field(..., gt=0)
    date: Optional[datetime.date] = None
    account_id: Optional[uuid.UUID] = None
    credit_card_id: Optional[uuid.UUID] = None


class TransactionOut(ORMModel):
    id: uuid.UUID
    type: str
    category: str
    description: Optional[str]
    amount: float
    date: date
    account_id: Optional[uuid.UUID]
    credit_card_id: Optional[uuid.UUID]


# Loans

class LoanCreate(BaseModel):
    """Request body for POST /v1/loans"""

    description: Optional[str] = None
    principal: float = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0, description="Nominal annual rate in percent")
    term_months: int = Field(..., gt=0, le=600)
    start_date: Optional[date] = None


class LoanPreviewRequest(BaseModel):
    """Request body for POST /v1/loans/preview - validated by the amortization engine"""

    principal: float
    interest_rate: float
    term_months: int


class LoanPaymentRequest(BaseModel):
    """Amount defaults to the loan's monthly installment"""

    amount: Optional[float] = Field(None, gt=0)


class LoanOut(ORMModel):
    id: uuid.UUID
    description: Optional[str]
    principal: float
    interest_rate: float
    term_months: int
    monthly_payment: float
    remaining_amount: float
    start_date: date
    end_date: date
    status: str


class AmortizationRowSchema(BaseModel):
    month: int
    payment: float
    interest: float
    principal: float
    balance: float


class AmortizationResponse(BaseModel):
    """Schedule preview plus totals over the full term"""

    principal: float
    interest_rate: float
    term_months: int
    monthly_payment: float
    total_payment: float
    total_interest: float
    schedule: List[AmortizationRowSchema]


# Third-party loans

class ThirdPartyLoanCreate(BaseModel):
    """Request body for POST /v1/third-party-loans"""

    creditor_name: str = Field(..., min_length=1)
    creditor_phone: Optional[str] = None
    principal_amount: float = Field(..., gt=0)
    monthly_interest: float = Field(..., ge=0, description="Monthly rate in percent")
    start_date: Optional[date] = None
    next_payment_date: Optional[date] = None
    notes: Optional[str] = None
    responsible_person: str = "me"


class ThirdPartyLoanUpdate(BaseModel):
    """Only provided fields change; principal and start date are fixed"""

    creditor_name: Optional[str] = Field(None, min_length=1)
    creditor_phone: Optional[str] = None
    monthly_interest: Optional[float] = Field(None, ge=0)
    next_payment_date: Optional[date] = None
    notes: Optional[str] = None
    responsible_person: Optional[str] = None


class ThirdPartyPaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    payment_date: Optional[date] = None
    notes: Optional[str] = None


class ThirdPartyPaymentOut(ORMModel):
    id: uuid.UUID
    amount: float
    payment_date: date
    notes: Optional[str]


class ThirdPartyLoanOut(ORMModel):
    id: uuid.UUID
    creditor_name: str
    creditor_phone: Optional[str]
    principal_amount: float
    monthly_interest: float
    start_date: date
    next_payment_date: Optional[date]
    notes: Optional[str]
    responsible_person: str
    status: str
    current_balance: float
    accrued_interest: float = 0.0
    total_paid: float = 0.0
    months_since_start: int = 0
    recent_payments: List[ThirdPartyPaymentOut] = []


class ThirdPartyPaymentResult(BaseModel):
    message: str
    payment_id: Optional[uuid.UUID] = None
    new_balance: float
    is_paid: bool


class ThirdPartySummary(BaseModel):
    total_loans: int
    total_principal: float
    total_interest: float
    total_paid: float
    total_debt: float


# Card debts

class CardPurchaseCreate(BaseModel):
    """Request body for POST /v1/card-debts/purchase - creates the card on first use"""

    cardholder_name: str = Field(..., min_length=1)
    last_four_digits: str = Field(..., pattern=r"^\d{4}$")
    due_day: Optional[int] = Field(None, ge=1, le=31)
    description: str = Field(..., min_length=1)
    purchase_date: Optional[date] = None
    total_amount: float = Field(..., gt=0)
    installments: int = Field(1, ge=1)
    card_fee_percent: float = Field(0.0, ge=0)


class CardPurchasePayRequest(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    fee_paid: float = Field(0.0, ge=0)
    installments_to_pay: int = Field(1, ge=1)


class CardPurchaseOut(ORMModel):
    id: uuid.UUID
    description: str
    purchase_date: date
    total_amount: float
    installments: int
    installment_amount: float
    paid_installments: int
    card_fee_percent: float
    status: str


class CardPaymentOut(ORMModel):
    id: uuid.UUID
    amount: float
    fee_paid: float
    payment_date: date


class CardDebtOut(ORMModel):
    id: uuid.UUID
    cardholder_name: str
    last_four_digits: str
    due_day: int
    total_debt: float
    total_purchases: int = 0
    total_installments_remaining: int = 0
    purchases: List[CardPurchaseOut] = []


class CardPurchaseResult(BaseModel):
    card: CardDebtOut
    purchase: CardPurchaseOut
    message: str


class CardPaymentResult(BaseModel):
    payment: CardPaymentOut
    purchase: CardPurchaseOut
    message: str


class UpcomingInstallmentSchema(ORMModel):
    purchase_id: str
    description: str
    installment_number: int
    total_installments: int
    amount: float
    due_date: date


class CardDetailsResponse(BaseModel):
    card: CardDebtOut
    installments: List[UpcomingInstallmentSchema]


class CardDebtSummary(BaseModel):
    total_debt: float
    total_cards: int
    total_purchases: int
    total_fees: float


# Debt simulator

class SimulateRequest(BaseModel):
    """Request body for POST /v1/debt-simulator/simulate"""

    debt_type: DebtType
    debt_id: uuid.UUID
    monthly_payment: float


class DebtOption(BaseModel):
    id: uuid.UUID
    type: DebtType
    name: str
    balance: float
    interest_rate: float


class DebtInfo(BaseModel):
    name: str
    current_balance: float
    monthly_interest_rate: float


class SimulationMonthSchema(BaseModel):
    month: int
    payment: float
    interest: float
    principal: float
    remaining_balance: float


class SimulationSchema(BaseModel):
    monthly_payment: float
    total_months: int
    total_years: float
    total_paid: float
    total_interest: float
    payoff_date: date
    monthly_breakdown: List[SimulationMonthSchema]


class AlternativeScenarioSchema(BaseModel):
    monthly_payment: float
    months: int
    years: float
    total_paid: float
    savings: float


class SimulationResponse(BaseModel):
    success: Literal[True] = True
    debt_info: DebtInfo
    simulation: SimulationSchema
    alternative_scenarios: List[AlternativeScenarioSchema]
    recommendation: str


class InsufficientPaymentResponse(BaseModel):
    success: Literal[False] = False
    error: str
    minimum_payment: float


# Budgets

class BudgetCreate(BaseModel):
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    month: Optional[str] = Field(None, description="YYYY-MM, defaults to the current month")


class BudgetUpdate(BaseModel):
    amount: float = Field(..., gt=0)


class BudgetOut(ORMModel):
    id: uuid.UUID
    category: str
    month: date
    amount: float
    spent: float = 0.0
    remaining: float = 0.0
    percentage: float = 0.0


# Goals

class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0)
    deadline: date


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    target_amount: Optional[float] = Field(None, gt=0)
    deadline: Optional[date] = None
    status: Optional[Literal["active", "completed"]] = None


class GoalContribution(BaseModel):
    amount: float = Field(..., gt=0)


class GoalOut(ORMModel):
    id: uuid.UUID
    name: str
    target_amount: float
    current_amount: float
    deadline: date
    status: str
    progress: float = 0.0
    remaining: float = 0.0


# Fixed & variable expenses

class FixedExpenseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    due_day: int = Field(..., ge=1, le=31)
    category: str = "utility"


class FixedExpenseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    due_day: Optional[int] = Field(None, ge=1, le=31)
    category: Optional[str] = None
    is_active: Optional[bool] = None


class FixedExpenseOut(ORMModel):
    id: uuid.UUID
    name: str
    amount: float
    due_day: int
    category: str
    is_active: bool
    last_paid_date: Optional[date]
    days_until_due: int = 0
    is_overdue: bool = False


class FixedExpenseSummary(BaseModel):
    total: float
    count: int
    upcoming_count: int
    upcoming_amount: float


class VariableExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: Optional[datetime.date] = None
    category: str = "Other"
    payment_type: str = Field(..., min_length=1)


class VariableExpenseOut(ORMModel):
    id: uuid.UUID
    description: str
    amount: float
    date: date
    category: str
    payment_type: str


class CategorySpendingOut(ORMModel):
    category: str
    month_total: float
    monthly_average: float
    transaction_count: int
    budget: Optional[float] = None
    budget_used: Optional[float] = None


class VariableExpenseTotals(BaseModel):
    this_month: float
    monthly_average: float
    projection: Optional[float] = Field(None, description="Twelve times the monthly average; null when nothing was spent")


class VariableExpenseSummary(BaseModel):
    """This month per category against the average of the last months"""

    month: int
    year: int
    categories: List[CategorySpendingOut]
    totals: VariableExpenseTotals


# Reports

class ExpenseLine(ORMModel):
    description: str
    category: str
    payment_type: str
    amount: float
    date: date


class ReportPeriod(BaseModel):
    year: int
    month: int
    label: str


class MonthlySummary(BaseModel):
    income: float
    total_expenses: float
    fixed_expenses: float
    variable_expenses: float
    card_installments: float
    balance: float
    savings_rate: float


class MonthlyDetails(BaseModel):
    transactions: int
    variable_expenses: int
    top_expenses: List[ExpenseLine]


class MonthlyReportResponse(BaseModel):
    period: ReportPeriod
    summary: MonthlySummary
    by_category: Dict[str, float]
    by_payment_type: Dict[str, float]
    details: MonthlyDetails


class YearlySummary(BaseModel):
    total_income: float
    total_expenses: float
    balance: float
    avg_monthly_income: float
    avg_monthly_expenses: float


class MonthBucket(BaseModel):
    income: float
    expenses: float
    variable: float
    net: float = Field(..., description="Income minus expenses of the month's transactions")


class YearlyReportResponse(BaseModel):
    year: int
    summary: YearlySummary
    by_month: Dict[str, MonthBucket]


# Fees

class FeesTotals(BaseModel):
    total_card_fees: float
    total_third_party_interest: float
    total_fees: float
    projected_annual_interest: float
    potential_savings: float


class FeeMonthBucket(BaseModel):
    card_fees: float
    third_party_interest: float


class FeesSummaryResponse(BaseModel):
    """Card fees and informal-loan interest paid in a year"""

    year: int
    summary: FeesTotals
    by_month: Dict[str, FeeMonthBucket]
    by_card: Dict[str, float]
    by_creditor: Dict[str, float]


class CardFeesOut(BaseModel):
    id: uuid.UUID
    name: str
    cardholder: str
    total_debt: float
    total_fees: float
    fee_percentage: float
    purchases_count: int


class CreditorInterestOut(BaseModel):
    id: uuid.UUID
    creditor: str
    principal: float
    current_balance: float
    interest_rate: float
    total_paid: float
    interest_paid: float
    projected_annual_interest: float
    status: str
    responsible_person: str


# Alerts

class BillOut(ORMModel):
    id: str
    type: str
    name: str
    description: str
    amount: float
    due_date: date
    is_paid: bool
    priority: str
    total_debt: Optional[float] = None


class BillsSummary(BaseModel):
    total_bills: int
    total_due: float
    total_overdue: float
    overdue_count: int
    upcoming_count: int
    paid_count: int


class BillsResponse(BaseModel):
    month: int
    year: int
    summary: BillsSummary
    overdue: List[BillOut]
    upcoming: List[BillOut]
    paid: List[BillOut]


class AlertOut(ORMModel):
    id: str
    type: str
    severity: str
    title: str
    message: str
    amount: float
    due_date: Optional[date] = None
    days_until: Optional[int] = None
    total_debt: Optional[float] = None


class AlertsResponse(BaseModel):
    count: int
    critical_count: int
    warning_count: int
    alerts: List[AlertOut]


# Export

class ExportFormat(str, Enum):
    csv = "csv"
    json = "json"


class ExportPeriod(BaseModel):
    start: date
    end: date


class ExportResponse(BaseModel):
    """Raw records of a period, for backups and spreadsheets"""

    export_date: date
    period: ExportPeriod
    accounts: List[AccountOut]
    transactions: List[TransactionOut]
    variable_expenses: List[VariableExpenseOut]
    fixed_expenses: List[FixedExpenseOut]


# Dashboard

class HealthSchema(ORMModel):
    status: str
    color: str
    score: int
    debt_ratio: float
    savings_ratio: Optional[float]


class DashboardSummary(BaseModel):
    total_balance: float
    total_credit_used: float
    total_credit_limit: float
    total_debt: float
    income: float
    expenses: float
    balance: float


class DashboardResponse(BaseModel):
    summary: DashboardSummary
    financial_health: HealthSchema
    expenses_by_category: Dict[str, float]
    recent_transactions: List[TransactionOut]
    goals: List[GoalOut]


class MessageResponse(BaseModel):
    message: str
