"""Unit tests for monthly bills and due-date alerts"""

import pytest
from datetime import date
from finance_gateway.domain.alerts import (
    alert_severity,
    bills_overview,
    card_alert,
    card_bill,
    fixed_bill,
    fixed_expense_alert,
    interest_alert,
    next_due_date,
    sort_alerts,
    third_party_bill,
)
from finance_gateway.domain.models import Alert

TODAY = date(2024, 6, 15)


def test_card_bill_sums_one_installment_per_purchase():
    bill = card_bill("c1", "1234", 10, [500, 600], 2024, 6)

    assert bill.name == "Card **** 1234"
    assert bill.description == "2 installments"
    assert bill.amount == 1100
    assert bill.due_date == date(2024, 6, 10)
    assert bill.priority == "high"
    assert bill.is_paid is False


def test_card_bill_priority_and_empty_card():
    assert card_bill("c1", "1234", 10, [300], 2024, 6).priority == "medium"
    assert card_bill("c1", "1234", 10, [], 2024, 6) is None


def test_card_bill_due_day_clamped_to_month_end():
    assert card_bill("c1", "1234", 31, [300], 2024, 2).due_date == date(2024, 2, 29)


def test_third_party_bill_charges_monthly_interest():
    bill = third_party_bill("l1", "Ana", 1100, 10, None, 2024, 6)

    assert bill.amount == pytest.approx(110)
    assert bill.due_date == date(2024, 6, 15)
    assert bill.priority == "high"
    assert bill.total_debt == 1100
    assert bill.description == "Interest: 10%/month"


def test_third_party_bill_uses_next_payment_date():
    bill = third_party_bill("l1", "Ana", 1100, 10, date(2024, 6, 20), 2024, 6)

    assert bill.due_date == date(2024, 6, 20)


@pytest.mark.parametrize(
    "due_day,last_paid,expected_paid,expected_priority",
    [
        (10, None, False, "urgent"),
        (10, date(2024, 6, 10), True, "low"),
        (10, date(2024, 5, 10), False, "urgent"),
        (20, None, False, "low"),
    ],
)
def test_fixed_bill_status(due_day, last_paid, expected_paid, expected_priority):
    bill = fixed_bill("f1", "Rent", "Housing", 900, due_day, last_paid, 2024, 6, TODAY)

    assert bill.is_paid is expected_paid
    assert bill.priority == expected_priority
    assert bill.description == "Housing"


def test_bills_overview_splits_and_orders():
    bills = [
        card_bill("c1", "1234", 20, [300], 2024, 6),
        fixed_bill("f1", "Power", "Utilities", 90, 10, None, 2024, 6, TODAY),
        fixed_bill("f2", "Internet", "Utilities", 50, 5, date(2024, 6, 5), 2024, 6, TODAY),
        third_party_bill("l1", "Ana", 1000, 11, None, 2024, 6),
    ]

    overview = bills_overview(bills, TODAY)

    assert [b.id for b in overview["overdue"]] == ["f1"]
    assert [b.id for b in overview["upcoming"]] == ["l1", "c1"]
    assert [b.id for b in overview["paid"]] == ["f2"]
    summary = overview["summary"]
    assert summary["total_bills"] == 4
    assert summary["total_due"] == pytest.approx(500)
    assert summary["total_overdue"] == 90
    assert (summary["overdue_count"], summary["upcoming_count"], summary["paid_count"]) == (1, 2, 1)


def test_bills_overview_empty():
    overview = bills_overview([], TODAY)

    assert overview["summary"]["total_due"] == 0
    assert overview["upcoming"] == []


@pytest.mark.parametrize(
    "due_day,today,expected",
    [
        (20, TODAY, date(2024, 6, 20)),
        (15, TODAY, date(2024, 6, 15)),
        (10, TODAY, date(2024, 7, 10)),
        (5, date(2024, 1, 31), date(2024, 2, 5)),
        (31, date(2024, 4, 30), date(2024, 4, 30)),
    ],
)
def test_next_due_date(due_day, today, expected):
    assert next_due_date(due_day, today) == expected


@pytest.mark.parametrize(
    "days,expected",
    [(0, "critical"), (2, "critical"), (3, "warning"), (5, "warning"), (6, "info"), (7, "info")],
)
def test_alert_severity(days, expected):
    assert alert_severity(days) == expected


def test_card_alert_inside_window():
    alert = card_alert("c1", "1234", 17, [100, 50], TODAY)

    assert alert.type == "card_due"
    assert alert.severity == "critical"
    assert alert.days_until == 2
    assert alert.due_date == date(2024, 6, 17)
    assert alert.amount == 150
    assert alert.message == "Due in 2 days - 150.00"


def test_card_alert_a_week_ahead_is_info():
    assert card_alert("c1", "1234", 22, [100], TODAY).severity == "info"


@pytest.mark.parametrize(
    "due_day,installments",
    [
        (25, [100]),  # 10 days away
        (14, [100]),  # passed, next one in July
        (17, []),
    ],
)
def test_card_alert_skipped(due_day, installments):
    assert card_alert("c1", "1234", due_day, installments, TODAY) is None


def test_fixed_expense_alert_singular_day():
    alert = fixed_expense_alert("f1", "Power", 90, 16, None, TODAY)

    assert alert.type == "fixed_expense_due"
    assert alert.title == "Power"
    assert alert.severity == "critical"
    assert alert.message == "Due in 1 day - 90.00"


def test_fixed_expense_alert_paid_this_month():
    assert fixed_expense_alert("f1", "Power", 90, 16, date(2024, 6, 2), TODAY) is None


def test_fixed_expense_alert_paid_same_month_last_year():
    assert fixed_expense_alert("f1", "Power", 90, 16, date(2023, 6, 2), TODAY) is not None


def test_interest_alert_always_warns():
    alert = interest_alert("l1", "Ana", 1100, 10)

    assert alert.severity == "warning"
    assert alert.title == "Interest: Ana"
    assert alert.amount == pytest.approx(110)
    assert alert.message == "110.00 of interest this month (10%)"
    assert alert.total_debt == 1100
    assert alert.due_date is None


def test_sort_alerts_most_severe_first_and_stable():
    def make(alert_id, severity):
        return Alert(id=alert_id, type="card_due", severity=severity, title="t", message="m", amount=1)

    alerts = [make("a", "info"), make("b", "critical"), make("c", "warning"), make("d", "critical")]

    assert [a.id for a in sort_alerts(alerts)] == ["b", "d", "c", "a"]
