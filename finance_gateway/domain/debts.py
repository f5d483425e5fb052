"""Debt references resolved into the three scalars the simulator needs"""

from dataclasses import dataclass
from typing import Union


@dataclass
class DebtTerms:
    """Balance, monthly rate and display name of any debt"""

    balance: float
    monthly_rate_percent: float
    name: str


@dataclass
class LoanDebt:
    """Bank financing; rate is nominal per year"""

    description: str | None
    remaining_amount: float
    annual_rate_percent: float

    def terms(self) -> DebtTerms:
        return DebtTerms(
            balance=self.remaining_amount,
            monthly_rate_percent=self.annual_rate_percent / 12,
            name=self.description or "Financing",
        )


@dataclass
class ThirdPartyDebt:
    """Informal loan; rate is already monthly"""

    creditor_name: str
    current_balance: float
    monthly_interest_percent: float

    def terms(self) -> DebtTerms:
        return DebtTerms(
            balance=self.current_balance,
            monthly_rate_percent=self.monthly_interest_percent,
            name=f"Loan - {self.creditor_name}",
        )


@dataclass
class CardDebtRef:
    """Card installments carry no interest when paid on time"""

    cardholder_name: str
    last_four_digits: str
    total_debt: float

    def terms(self) -> DebtTerms:
        return DebtTerms(
            balance=self.total_debt,
            monthly_rate_percent=0.0,
            name=f"Card {self.cardholder_name} (****{self.last_four_digits})",
        )


DebtRef = Union[LoanDebt, ThirdPartyDebt, CardDebtRef]

DEBT_TYPES = {
    LoanDebt: "loan",
    ThirdPartyDebt: "thirdPartyLoan",
    CardDebtRef: "cardDebt",
}


def resolve_debt(debt: DebtRef) -> DebtTerms:
    return debt.terms()


def debt_type_of(debt: DebtRef) -> str:
    return DEBT_TYPES[type(debt)]
