"""Monthly and yearly financial reports, and record export"""

import csv
import io
from datetime import date, timedelta
from typing import Dict, Optional
from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from finance_gateway.api.v1.fixed_expenses import expense_out
from finance_gateway.api.v1.schemas import (
    AccountOut,
    ExpenseLine,
    ExportFormat,
    ExportPeriod,
    ExportResponse,
    MonthBucket,
    MonthlyDetails,
    MonthlyReportResponse,
    MonthlySummary,
    ReportPeriod,
    TransactionOut,
    VariableExpenseOut,
    YearlyReportResponse,
    YearlySummary,
)
from finance_gateway.api.dependencies import get_today, get_user_id
from finance_gateway.config import settings
from finance_gateway.domain.money import round_cents
from finance_gateway.domain.reports import monthly_report, yearly_report
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.repositories import (
    AccountRepository,
    CardDebtRepository,
    FixedExpenseRepository,
    TransactionRepository,
    VariableExpenseRepository,
)
from finance_gateway.utils.date_utils import month_bounds

router = APIRouter()


def _rounded(values: Dict[str, float]) -> Dict[str, float]:
    return {key: round_cents(value) for key, value in values.items()}


@router.get("/reports/monthly/{year}/{month}", response_model=MonthlyReportResponse)
def get_monthly_report(
    year: int = Path(..., ge=1900, le=9999),
    month: int = Path(..., ge=1, le=12),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Income, spending and balance for one calendar month.

    Fixed expenses and card installments are the ones currently active,
    not a historical snapshot.
    """
    start, end = month_bounds(year, month)
    transactions = TransactionRepository(db).records_between(user_id, start, end)
    variable = VariableExpenseRepository(db).records_between(user_id, start, end)
    fixed_amounts = [e.amount for e in FixedExpenseRepository(db).list_active(user_id)]
    installment_amounts = [
        p.installment_amount
        for card in CardDebtRepository(db).list(user_id)
        for p in card.purchases
        if p.status == "active"
    ]

    report = monthly_report(transactions, variable, fixed_amounts, installment_amounts)
    summary = report["summary"]

    return MonthlyReportResponse(
        period=ReportPeriod(year=year, month=month, label=f"{start:%B %Y}"),
        summary=MonthlySummary(
            income=round_cents(summary["income"]),
            total_expenses=round_cents(summary["total_expenses"]),
            fixed_expenses=round_cents(summary["fixed_expenses"]),
            variable_expenses=round_cents(summary["variable_expenses"]),
            card_installments=round_cents(summary["card_installments"]),
            balance=round_cents(summary["balance"]),
            savings_rate=summary["savings_rate"],
        ),
        by_category=_rounded(report["by_category"]),
        by_payment_type=_rounded(report["by_payment_type"]),
        details=MonthlyDetails(
            transactions=report["details"]["transactions"],
            variable_expenses=report["details"]["variable_expenses"],
            top_expenses=[ExpenseLine.model_validate(e) for e in report["details"]["top_expenses"]],
        ),
    )


@router.get("/reports/yearly/{year}", response_model=YearlyReportResponse)
def get_yearly_report(
    year: int = Path(..., ge=1900, le=9999),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Twelve monthly buckets plus yearly totals and monthly averages"""
    start, end = date(year, 1, 1), date(year, 12, 31)
    report = yearly_report(
        TransactionRepository(db).records_between(user_id, start, end),
        VariableExpenseRepository(db).records_between(user_id, start, end),
    )

    return YearlyReportResponse(
        year=year,
        summary=YearlySummary(**_rounded(report["summary"])),
        by_month={key: MonthBucket(**_rounded(bucket)) for key, bucket in report["by_month"].items()},
    )


EXPORT_FIELDS = ["type", "description", "amount", "date", "category", "payment_type"]


def _export_period(year: Optional[int], month: Optional[int], today: date):
    if month:
        return month_bounds(year or today.year, month)
    if year:
        return date(year, 1, 1), date(year, 12, 31)
    return today - timedelta(days=settings.export_default_days), today


def _csv_export(transactions, variable_expenses) -> str:
    """Transactions then variable expenses, one row each"""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_FIELDS)
    writer.writeheader()
    for t in transactions:
        writer.writerow({
            "type": t.type,
            "description": t.description or "",
            "amount": t.amount,
            "date": t.date.isoformat(),
            "category": t.category,
            "payment_type": "",
        })
    for e in variable_expenses:
        writer.writerow({
            "type": "variable",
            "description": e.description,
            "amount": e.amount,
            "date": e.date.isoformat(),
            "category": e.category,
            "payment_type": e.payment_type,
        })
    return output.getvalue()


@router.get("/reports/export/{file_format}")
def export_records(
    file_format: ExportFormat,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Download the records of a period as an attachment.

    month (with year, defaulting to this year) exports one month, year
    alone exports that year, and no filter exports the last 365 days. CSV
    holds transactions and variable expenses; JSON adds accounts and fixed
    expenses.
    """
    start, end = _export_period(year, month, today)
    transactions = TransactionRepository(db).list_filtered(user_id, start=start, end=end)
    variable = VariableExpenseRepository(db).list_between(user_id, start, end)

    if file_format == ExportFormat.csv:
        return Response(
            content=_csv_export(transactions, variable),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": "attachment; filename=finance_export.csv"},
        )

    export = ExportResponse(
        export_date=today,
        period=ExportPeriod(start=start, end=end),
        accounts=[AccountOut.model_validate(a) for a in AccountRepository(db).list(user_id)],
        transactions=[TransactionOut.model_validate(t) for t in transactions],
        variable_expenses=[VariableExpenseOut.model_validate(e) for e in variable],
        fixed_expenses=[expense_out(e, today) for e in FixedExpenseRepository(db).list(user_id)],
    )
    return JSONResponse(
        content=export.model_dump(mode="json"),
        headers={"Content-Disposition": "attachment; filename=finance_export.json"},
    )
