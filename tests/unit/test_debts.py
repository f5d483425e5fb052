"""Unit tests for resolving debts into simulator terms"""

from finance_gateway.domain.debts import CardDebtRef, LoanDebt, ThirdPartyDebt, debt_type_of, resolve_debt


def test_loan_rate_is_converted_to_monthly():
    terms = resolve_debt(LoanDebt("Car", 12000, 12))

    assert terms.balance == 12000
    assert terms.monthly_rate_percent == 1.0
    assert terms.name == "Car"


def test_loan_without_description():
    assert resolve_debt(LoanDebt(None, 500, 6)).name == "Financing"


def test_third_party_rate_is_already_monthly():
    terms = resolve_debt(ThirdPartyDebt("Ana", 1100, 10))

    assert terms.monthly_rate_percent == 10
    assert terms.name == "Loan - Ana"


def test_card_debt_has_no_interest():
    terms = resolve_debt(CardDebtRef("Maria", "1234", 900))

    assert terms.monthly_rate_percent == 0
    assert terms.name == "Card Maria (****1234)"


def test_debt_types():
    assert debt_type_of(LoanDebt("Car", 1, 1)) == "loan"
    assert debt_type_of(ThirdPartyDebt("Ana", 1, 1)) == "thirdPartyLoan"
    assert debt_type_of(CardDebtRef("Maria", "1234", 1)) == "cardDebt"
