"""Domain models - pure Python dataclasses exchanged with the calculation core"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class AmortizationRow:
    """One period of a fixed-installment loan"""

    month: int
    payment: float
    interest: float
    principal: float
    balance: float


@dataclass
class AmortizationSchedule:
    """Price-method schedule with aggregate totals"""

    principal: float
    annual_rate_percent: float
    months: int
    monthly_payment: float
    total_payment: float
    total_interest: float
    rows: List[AmortizationRow] = field(default_factory=list)


@dataclass
class Payment:
    """Money handed to a creditor on a given day"""

    amount: float
    date: date


@dataclass
class ThirdPartyBalance:
    """Snapshot of an informal loan after simple-interest accrual"""

    principal: float
    months_elapsed: int
    accrued_interest: float
    total_owed: float
    total_paid: float
    current_balance: float
    is_paid: bool


@dataclass
class SimulationMonth:
    """Single month of a payoff simulation"""

    month: int
    payment: float
    interest: float
    principal: float
    remaining_balance: float


@dataclass
class AlternativeScenario:
    """Same debt paid with a larger monthly payment"""

    monthly_payment: float
    months: int
    years: float
    total_paid: float
    savings: float


@dataclass
class PayoffSimulation:
    """Successful payoff simulation"""

    monthly_payment: float
    total_months: int
    total_years: float
    total_paid: float
    total_interest: float
    payoff_date: date
    monthly_breakdown: List[SimulationMonth]
    alternative_scenarios: List[AlternativeScenario]
    recommendation: str
    success: bool = True


@dataclass
class InsufficientPayment:
    """Payment does not cover the first month's interest"""

    minimum_payment: float
    error: str = "Payment is not enough to cover the monthly interest"
    success: bool = False


@dataclass
class HealthAssessment:
    """Output of the financial-health lookup"""

    status: str
    color: str
    score: int
    debt_ratio: float
    savings_ratio: Optional[float]
    total_income: float
    total_expenses: float
    total_debt: float


@dataclass
class TransactionRecord:
    """Transaction as seen by the aggregation rules"""

    type: str  # "income" or "expense"
    category: str
    amount: float
    date: date


@dataclass
class VariableExpenseRecord:
    """Day-to-day expense with a payment method"""

    description: str
    category: str
    payment_type: str
    amount: float
    date: date


@dataclass
class BudgetUsage:
    """Budget limit compared with what was actually spent"""

    category: str
    amount: float
    spent: float
    remaining: float
    percentage: float


@dataclass
class FixedExpenseStatus:
    """Due-date projection for a recurring bill"""

    days_until_due: int
    is_overdue: bool


@dataclass
class UpcomingInstallment:
    """Future card installment still to be paid"""

    purchase_id: str
    description: str
    installment_number: int
    total_installments: int
    amount: float
    due_date: date


@dataclass
class CardFeePayment:
    """Card fee charged together with an installment payment"""

    card_label: str
    fee_paid: float
    date: date


@dataclass
class CreditorPayment:
    """Payment to an informal creditor at the loan's monthly rate"""

    creditor: str
    amount: float
    monthly_interest_percent: float
    date: date


@dataclass
class CategorySpending:
    """This month's spending in a category next to its recent average"""

    category: str
    month_total: float
    monthly_average: float
    transaction_count: int
    budget: Optional[float] = None
    budget_used: Optional[float] = None


@dataclass
class Bill:
    """Something to pay in a given month"""

    id: str
    type: str  # card | third_party | fixed
    name: str
    description: str
    amount: float
    due_date: date
    is_paid: bool
    priority: str  # urgent | high | medium | low
    total_debt: Optional[float] = None


@dataclass
class Alert:
    """Payment falling due soon, or interest piling up"""

    id: str
    type: str  # card_due | fixed_expense_due | third_party_interest
    severity: str  # critical | warning | info
    title: str
    message: str
    amount: float
    due_date: Optional[date] = None
    days_until: Optional[int] = None
    total_debt: Optional[float] = None
