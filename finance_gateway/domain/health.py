"""Financial health scoring - debt ratio and savings ratio lookup"""

from typing import Iterable, Optional, Tuple

from finance_gateway.domain.models import HealthAssessment, TransactionRecord

CRITICAL = ("critical", "#8B0000", 1)
CONCERNING = ("concerning", "#FF4500", 2)
ATTENTION = ("attention", "#FFD700", 3)
CONTROLLED = ("controlled", "#90EE90", 4)
HEALTHY = ("healthy", "#228B22", 5)
SAVING = ("saving", "#87CEEB", 6)
EXCELLENT = ("excellent", "#0000CD", 7)


def calculate_debt_ratio(total_income: float, total_debt: float) -> float:
    """Debt as a percentage of income; 100 when there is debt but no income"""
    if total_income > 0:
        return total_debt * 100 / total_income
    return 100.0 if total_debt > 0 else 0.0


def calculate_savings_ratio(total_income: float, total_expenses: float) -> float:
    if total_income <= 0:
        return 0.0
    return (total_income - total_expenses) * 100 / total_income


def debt_band(debt_ratio: float) -> Optional[Tuple[str, str, int]]:
    """
    Map debt ratio to (status, color, score).

    Bands:
    - > 70:        critical
    - (50, 70]:    concerning
    - (30, 50]:    attention
    - [10, 30]:    controlled
    - (0, 10):     healthy
    - 0:           None, decided by the savings ratio
    """
    if debt_ratio > 70:
        return CRITICAL
    elif debt_ratio > 50:
        return CONCERNING
    elif debt_ratio > 30:
        return ATTENTION
    elif debt_ratio >= 10:
        return CONTROLLED
    elif debt_ratio > 0:
        return HEALTHY
    return None


def savings_band(savings_ratio: float) -> Tuple[str, str, int]:
    """Debt-free users: > 20% excellent, > 10% saving, otherwise healthy"""
    if savings_ratio > 20:
        return EXCELLENT
    elif savings_ratio > 10:
        return SAVING
    return HEALTHY


def classify_financial_health(total_income: float, total_expenses: float, total_debt: float) -> HealthAssessment:
    """Main entry point: ratios in, colored status out"""
    debt_ratio = calculate_debt_ratio(total_income, total_debt)
    band = debt_band(debt_ratio)

    savings_ratio = None
    if band is None:
        savings_ratio = calculate_savings_ratio(total_income, total_expenses)
        band = savings_band(savings_ratio)

    status, color, score = band
    return HealthAssessment(
        status=status,
        color=color,
        score=score,
        debt_ratio=debt_ratio,
        savings_ratio=savings_ratio,
        total_income=total_income,
        total_expenses=total_expenses,
        total_debt=total_debt,
    )


def assess_transactions(transactions: Iterable[TransactionRecord], total_debt: float) -> HealthAssessment:
    """Classify a window of transactions against outstanding debt"""
    transactions = list(transactions)
    income = sum(t.amount for t in transactions if t.type == "income")
    expenses = sum(t.amount for t in transactions if t.type == "expense")
    return classify_financial_health(income, expenses, total_debt)
