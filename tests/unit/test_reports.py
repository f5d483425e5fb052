"""Unit tests for aggregation rules and derived projections"""

import pytest
from datetime import date
from finance_gateway.domain.models import CardFeePayment, CreditorPayment, TransactionRecord, VariableExpenseRecord
from finance_gateway.domain.reports import (
    budget_usage,
    expenses_by_category,
    fee_share,
    fees_summary,
    fixed_expense_status,
    goal_progress,
    is_goal_completed,
    monthly_report,
    projected_annual_interest,
    purchase_fee,
    remaining_installment_debt,
    split_creditor_payments,
    split_income_expenses,
    sum_by_key,
    transactions_by_month,
    upcoming_fixed_expenses,
    upcoming_installments,
    variable_by_category,
    variable_by_payment_type,
    variable_expense_summary,
    yearly_report,
)

TODAY = date(2024, 6, 15)


def test_sum_by_key_keeps_first_seen_order():
    items = [("b", 1), ("a", 2), ("b", 3), ("c", 4)]
    totals = sum_by_key(items, key=lambda i: i[0], value=lambda i: i[1])

    assert list(totals) == ["b", "a", "c"]
    assert totals == {"b": 4, "a": 2, "c": 4}


def test_split_income_expenses(sample_transactions):
    assert split_income_expenses(sample_transactions) == (6000, 3200)


def test_expenses_by_category(sample_transactions):
    assert expenses_by_category(sample_transactions) == {"groceries": 1200, "rent": 2000}


def test_transactions_by_month():
    transactions = [
        TransactionRecord("income", "salary", 3000, date(2024, 5, 5)),
        TransactionRecord("expense", "rent", 1000, date(2024, 5, 10)),
        TransactionRecord("income", "salary", 3000, date(2024, 6, 5)),
    ]
    assert transactions_by_month(transactions) == {"2024-05": 2000, "2024-06": 3000}


def test_variable_groupings(sample_variable_expenses):
    by_category = variable_by_category(sample_variable_expenses)
    assert by_category == {"Food": 175, "Transport": 235, "Health": 80, "Other": 60}

    by_type = variable_by_payment_type(sample_variable_expenses)
    assert by_type == {"pix": 175, "debit": 200, "credit": 115, "cash": 60}


def test_budget_usage_over_limit(sample_transactions):
    usage = budget_usage("groceries", 1000, sample_transactions)

    assert usage.spent == 1200
    assert usage.remaining == -200
    assert usage.percentage == pytest.approx(120)


def test_budget_usage_without_spending(sample_transactions):
    usage = budget_usage("travel", 500, sample_transactions)

    assert usage.spent == 0
    assert usage.remaining == 500
    assert usage.percentage == 0


def test_goal_progress():
    assert goal_progress(250, 1000) == (25, 750)
    assert is_goal_completed(1000, 1000) is True
    assert is_goal_completed(999.99, 1000) is False


@pytest.mark.parametrize(
    "due_day,last_paid,days,overdue",
    [
        (20, None, 5, True),
        (15, date(2024, 6, 1), 0, False),
        (10, date(2024, 6, 1), 25, False),
        (10, date(2024, 5, 30), 25, True),
        # Same month of an earlier year is still overdue
        (20, date(2023, 6, 20), 5, True),
    ],
)
def test_fixed_expense_status(due_day, last_paid, days, overdue):
    status = fixed_expense_status(due_day, last_paid, TODAY)

    assert status.days_until_due == days
    assert status.is_overdue is overdue


def test_upcoming_fixed_expenses():
    """Due today through a week from today counts as upcoming"""
    summary = upcoming_fixed_expenses([(15, 100), (20, 50), (23, 30), (10, 200)], TODAY)

    assert summary == {"total": 380, "count": 4, "upcoming_count": 2, "upcoming_amount": 150}


def test_remaining_installment_debt():
    assert remaining_installment_debt(10, 3, 50) == 350


def test_upcoming_installments_fall_on_card_due_day():
    installments = upcoming_installments(
        purchase_id="p1",
        description="TV",
        purchase_date=date(2024, 1, 31),
        installments=3,
        paid_installments=1,
        installment_amount=100,
        due_day=10,
    )

    assert [i.installment_number for i in installments] == [2, 3]
    assert [i.due_date for i in installments] == [date(2024, 3, 10), date(2024, 4, 10)]
    assert all(i.total_installments == 3 and i.amount == 100 for i in installments)


def test_upcoming_installments_due_day_clamped_to_month_end():
    installments = upcoming_installments("p1", "Sofa", date(2024, 1, 5), 1, 0, 900, 31)
    assert installments[0].due_date == date(2024, 2, 29)


def test_monthly_report(sample_transactions, sample_variable_expenses):
    report = monthly_report(sample_transactions, sample_variable_expenses, [150, 90], [100, 250])
    summary = report["summary"]

    assert summary["income"] == 6000
    assert summary["variable_expenses"] == 550
    assert summary["total_expenses"] == 3750
    assert summary["fixed_expenses"] == 240
    assert summary["card_installments"] == 350
    assert summary["balance"] == 2250
    assert summary["savings_rate"] == 37.5

    top = report["details"]["top_expenses"]
    assert [e.description for e in top] == ["Gas", "Market", "Pharmacy", "Cinema", "Uber"]
    assert report["details"]["transactions"] == 5
    assert report["details"]["variable_expenses"] == 6


def test_monthly_report_without_income():
    report = monthly_report([], [], [], [])
    assert report["summary"]["savings_rate"] == 0
    assert report["details"]["top_expenses"] == []


def test_yearly_report(sample_transactions, sample_variable_expenses):
    extra = [TransactionRecord("income", "bonus", 1200, date(2024, 12, 20))]
    report = yearly_report(sample_transactions + extra, sample_variable_expenses)

    assert list(report["by_month"]) == [f"{m:02d}" for m in range(1, 13)]
    assert report["by_month"]["06"] == {"income": 6000, "expenses": 3200, "variable": 550, "net": 2800}
    assert report["by_month"]["12"]["income"] == 1200
    assert report["by_month"]["01"] == {"income": 0, "expenses": 0, "variable": 0, "net": 0}
    assert report["by_month"]["12"]["net"] == 1200

    summary = report["summary"]
    assert summary["total_income"] == 7200
    assert summary["total_expenses"] == 3750
    assert summary["balance"] == 3450
    assert summary["avg_monthly_income"] == 600
    assert summary["avg_monthly_expenses"] == pytest.approx(312.5)


def test_purchase_fee_and_share():
    assert purchase_fee(1200, 2.5) == 30
    assert fee_share(30, 600) == pytest.approx(5)
    assert fee_share(10, 0) == 0


def test_split_creditor_payments_covers_principal_first():
    assert split_creditor_payments(1000, 1300) == (1000, 300)
    assert split_creditor_payments(1000, 400) == (400, 0)


def test_projected_annual_interest():
    assert projected_annual_interest(1000, 5) == 600


def test_fees_summary():
    card_fees = [
        CardFeePayment("**** 1234", 12.5, date(2024, 3, 10)),
        CardFeePayment("**** 1234", 7.5, date(2024, 3, 25)),
        CardFeePayment("**** 9876", 5.0, date(2024, 7, 1)),
    ]
    creditor_payments = [
        CreditorPayment("Ana", 200, 10, date(2024, 3, 5)),
        CreditorPayment("Bruno", 500, 2, date(2024, 5, 5)),
    ]

    report = fees_summary(card_fees, creditor_payments, [(1000, 5)])

    assert report["summary"] == {
        "total_card_fees": 25,
        "total_third_party_interest": 30,
        "total_fees": 55,
        "projected_annual_interest": 600,
        "potential_savings": 300,
    }
    assert report["by_month"]["03"] == {"card_fees": 20, "third_party_interest": 20}
    assert report["by_month"]["05"] == {"card_fees": 0, "third_party_interest": 10}
    assert report["by_month"]["07"] == {"card_fees": 5, "third_party_interest": 0}
    assert report["by_card"] == {"**** 1234": 20, "**** 9876": 5}
    assert report["by_creditor"] == {"Ana": 20, "Bruno": 10}


def test_fees_summary_without_activity():
    report = fees_summary([], [], [])

    assert report["summary"]["total_fees"] == 0
    assert report["summary"]["potential_savings"] == 0
    assert len(report["by_month"]) == 12
    assert report["by_card"] == {}


def test_variable_expense_summary():
    month = [
        VariableExpenseRecord("Bakery", "Food", "pix", 25.0, date(2024, 6, 2)),
        VariableExpenseRecord("Market", "Food", "pix", 150.0, date(2024, 6, 12)),
        VariableExpenseRecord("Gas", "Transport", "debit", 200.0, date(2024, 6, 3)),
        VariableExpenseRecord("Cinema", "", "cash", 60.0, date(2024, 6, 14)),
    ]
    window = month + [
        VariableExpenseRecord("Market", "Food", "pix", 125.0, date(2024, 5, 20)),
        VariableExpenseRecord("Pharmacy", "Health", "credit", 80.0, date(2024, 4, 9)),
    ]

    summary = variable_expense_summary(month, window, {"Food": 350.0})
    categories = {c.category: c for c in summary["categories"]}

    assert [c.category for c in summary["categories"]] == ["Food", "Transport", "Other", "Health"]
    food = categories["Food"]
    assert (food.month_total, food.monthly_average, food.transaction_count) == (175, 150, 2)
    assert food.budget == 350
    assert food.budget_used == 50
    health = categories["Health"]
    assert (health.month_total, health.monthly_average, health.transaction_count) == (0, 80, 0)
    assert health.budget_used is None
    assert summary["totals"] == {"this_month": 435, "monthly_average": 490, "projection": 5880}


def test_variable_expense_summary_without_spending():
    summary = variable_expense_summary([], [], {})

    assert summary["categories"] == []
    assert summary["totals"]["projection"] is None
