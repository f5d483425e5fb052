"""Data access layer for finance entities - every query is scoped by owner"""

import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
from finance_gateway.infrastructure.database.models import (
    Account,
    Budget,
    CardDebt,
    CardPayment,
    CardPurchase,
    CreditCard,
    FixedExpense,
    Goal,
    Loan,
    ThirdPartyLoan,
    ThirdPartyPayment,
    Transaction,
    VariableExpense,
)
from finance_gateway.domain.exceptions import DuplicateEntityError
from finance_gateway.domain.ledger import account_delta, card_delta
from finance_gateway.domain.models import (
    CardFeePayment,
    CreditorPayment,
    TransactionRecord,
    VariableExpenseRecord,
)
from finance_gateway.domain.reports import remaining_installment_debt


class OwnedRepository:
    """CRUD shared by every user-owned table"""

    model = None
    # Must be an ordering expression (.asc()/.desc()); a bare column attribute binds to the repository
    order_by = None

    def __init__(self, db: Session):
        self.db = db

    def _query(self, user_id: str):
        return self.db.query(self.model).filter(self.model.user_id == user_id)

    def list(self, user_id: str) -> List:
        query = self._query(user_id)
        if self.order_by is not None:
            query = query.order_by(self.order_by)
        return query.all()

    def get(self, user_id: str, entity_id: uuid.UUID) -> Optional[object]:
        return self._query(user_id).filter(self.model.id == entity_id).first()

    def create(self, user_id: str, **fields):
        entity = self.model(user_id=user_id, **fields)
        self.db.add(entity)
        self.db.flush()  # Get ID without committing
        return entity

    def delete(self, entity) -> None:
        self.db.delete(entity)
        self.db.flush()


class AccountRepository(OwnedRepository):
    model = Account
    order_by = Account.created_at.asc()

    def apply_delta(self, account_id: uuid.UUID, delta: float) -> None:
        """Increment in SQL so concurrent postings don't overwrite each other"""
        self.db.execute(
            update(Account).where(Account.id == account_id).values(balance=Account.balance + delta)
        )


class CreditCardRepository(OwnedRepository):
    model = CreditCard
    order_by = CreditCard.created_at.asc()

    def apply_delta(self, card_id: uuid.UUID, delta: float) -> None:
        self.db.execute(
            update(CreditCard)
            .where(CreditCard.id == card_id)
            .values(current_balance=CreditCard.current_balance + delta)
        )


class TransactionRepository(OwnedRepository):
    model = Transaction

    def list_filtered(
        self,
        user_id: str,
        type: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Newest first, optionally restricted by type and inclusive date range"""
        query = self._query(user_id)
        if type:
            query = query.filter(Transaction.type == type)
        if start:
            query = query.filter(Transaction.date >= start)
        if end:
            query = query.filter(Transaction.date <= end)
        query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def records_between(
        self, user_id: str, start: date, end: date, type: Optional[str] = None
    ) -> List[TransactionRecord]:
        """Domain view of the transactions in an inclusive date range"""
        return [
            TransactionRecord(type=t.type, category=t.category, amount=t.amount, date=t.date)
            for t in self.list_filtered(user_id, type=type, start=start, end=end)
        ]

    def post(self, user_id: str, **fields) -> Transaction:
        """Create a transaction and move the linked account/card balance with it"""
        transaction = self.create(user_id, **fields)
        self._apply(transaction, sign=1)
        return transaction

    def reverse(self, transaction: Transaction) -> None:
        """Delete a transaction and undo its balance effect"""
        self._apply(transaction, sign=-1)
        self.delete(transaction)

    def _apply(self, transaction: Transaction, sign: int) -> None:
        if transaction.account_id:
            AccountRepository(self.db).apply_delta(
                transaction.account_id, sign * account_delta(transaction.type, transaction.amount)
            )
        if transaction.credit_card_id:
            CreditCardRepository(self.db).apply_delta(
                transaction.credit_card_id, sign * card_delta(transaction.type, transaction.amount)
            )


class LoanRepository(OwnedRepository):
    model = Loan
    order_by = Loan.start_date.asc()

    def list_unpaid(self, user_id: str) -> List[Loan]:
        return self._query(user_id).filter(Loan.status != "paid").all()


class ThirdPartyLoanRepository(OwnedRepository):
    model = ThirdPartyLoan
    order_by = ThirdPartyLoan.created_at.desc()

    def list_active(self, user_id: str) -> List[ThirdPartyLoan]:
        return self._query(user_id).filter(ThirdPartyLoan.status == "active").all()

    def add_payment(self, loan: ThirdPartyLoan, amount: float, payment_date: date, notes: str | None) -> ThirdPartyPayment:
        payment = ThirdPartyPayment(loan_id=loan.id, amount=amount, payment_date=payment_date, notes=notes)
        loan.payments.append(payment)
        self.db.flush()
        return payment

    def get_payment(self, loan: ThirdPartyLoan, payment_id: uuid.UUID) -> Optional[ThirdPartyPayment]:
        return next((p for p in loan.payments if p.id == payment_id), None)

    def remove_payment(self, loan: ThirdPartyLoan, payment: ThirdPartyPayment) -> None:
        loan.payments.remove(payment)
        self.db.flush()

    def payments_between(self, user_id: str, start: date, end: date) -> List[CreditorPayment]:
        """Payments across every loan of the owner, with each loan's creditor and rate"""
        rows = (
            self.db.query(ThirdPartyPayment, ThirdPartyLoan)
            .join(ThirdPartyLoan, ThirdPartyPayment.loan_id == ThirdPartyLoan.id)
            .filter(
                ThirdPartyLoan.user_id == user_id,
                ThirdPartyPayment.payment_date >= start,
                ThirdPartyPayment.payment_date <= end,
            )
            .order_by(ThirdPartyPayment.payment_date)
            .all()
        )
        return [
            CreditorPayment(
                creditor=loan.creditor_name,
                amount=payment.amount,
                monthly_interest_percent=loan.monthly_interest,
                date=payment.payment_date,
            )
            for payment, loan in rows
        ]


class CardDebtRepository(OwnedRepository):
    model = CardDebt
    order_by = CardDebt.updated_at.desc()

    def get_by_digits(self, user_id: str, last_four_digits: str) -> Optional[CardDebt]:
        return self._query(user_id).filter(CardDebt.last_four_digits == last_four_digits).first()

    def get_purchase(self, user_id: str, purchase_id: uuid.UUID) -> Optional[CardPurchase]:
        """Purchase lookup through its card so other owners' purchases stay invisible"""
        return (
            self.db.query(CardPurchase)
            .join(CardDebt)
            .filter(CardPurchase.id == purchase_id, CardDebt.user_id == user_id)
            .first()
        )

    def add_purchase(self, card: CardDebt, **fields) -> CardPurchase:
        purchase = CardPurchase(**fields)
        card.purchases.append(purchase)
        self.db.flush()
        return purchase

    def add_payment(self, purchase: CardPurchase, amount: float, fee_paid: float, payment_date: date) -> CardPayment:
        payment = CardPayment(amount=amount, fee_paid=fee_paid, payment_date=payment_date)
        purchase.payments.append(payment)
        self.db.flush()
        return payment

    def remove_purchase(self, purchase: CardPurchase) -> None:
        card = purchase.card_debt
        card.purchases.remove(purchase)
        self.db.flush()

    def fee_payments_between(self, user_id: str, start: date, end: date) -> List[CardFeePayment]:
        rows = (
            self.db.query(CardPayment, CardDebt.last_four_digits)
            .join(CardPurchase, CardPayment.purchase_id == CardPurchase.id)
            .join(CardDebt, CardPurchase.card_debt_id == CardDebt.id)
            .filter(
                CardDebt.user_id == user_id,
                CardPayment.payment_date >= start,
                CardPayment.payment_date <= end,
            )
            .order_by(CardPayment.payment_date)
            .all()
        )
        return [
            CardFeePayment(card_label=f"**** {digits}", fee_paid=payment.fee_paid, date=payment.payment_date)
            for payment, digits in rows
        ]

    def refresh_total(self, card: CardDebt) -> float:
        """Recompute the stored total from every active purchase"""
        card.total_debt = sum(
            remaining_installment_debt(p.installments, p.paid_installments, p.installment_amount)
            for p in card.purchases
            if p.status == "active"
        )
        self.db.flush()
        return card.total_debt


class BudgetRepository(OwnedRepository):
    model = Budget

    def list_for_month(self, user_id: str, month: date) -> List[Budget]:
        return self._query(user_id).filter(Budget.month == month).order_by(Budget.category).all()

    def find(self, user_id: str, category: str, month: date) -> Optional[Budget]:
        return self._query(user_id).filter(Budget.category == category, Budget.month == month).first()

    def add(self, user_id: str, category: str, month: date, amount: float) -> Budget:
        """One budget per category and month"""
        if self.find(user_id, category, month):
            raise DuplicateEntityError(f"Budget for {category} in {month:%Y-%m} already exists")
        return self.create(user_id, category=category, month=month, amount=amount)


class GoalRepository(OwnedRepository):
    model = Goal
    order_by = Goal.deadline.asc()


class FixedExpenseRepository(OwnedRepository):
    model = FixedExpense
    order_by = FixedExpense.due_day.asc()

    def list_active(self, user_id: str) -> List[FixedExpense]:
        return self._query(user_id).filter(FixedExpense.is_active.is_(True)).all()


class VariableExpenseRepository(OwnedRepository):
    model = VariableExpense

    def list_between(self, user_id: str, start: date, end: date) -> List[VariableExpense]:
        return (
            self._query(user_id)
            .filter(VariableExpense.date >= start, VariableExpense.date <= end)
            .order_by(VariableExpense.date.desc())
            .all()
        )

    def records_between(self, user_id: str, start: date, end: date) -> List[VariableExpenseRecord]:
        return [
            VariableExpenseRecord(
                description=e.description,
                category=e.category,
                payment_type=e.payment_type,
                amount=e.amount,
                date=e.date,
            )
            for e in self.list_between(user_id, start, end)
        ]
