"""SQLAlchemy ORM models for finance entities"""

import uuid
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Account(Base):
    """Bank account, wallet or cash box"""

    __tablename__ = "account"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="checking")
    balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CreditCard(Base):
    """Credit card with a running balance"""

    __tablename__ = "credit_card"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    limit = Column(Float, nullable=False, default=0.0)
    current_balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Transaction(Base):
    """Income or expense; source of truth for account and card balances"""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)  # income | expense
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    account_id = Column(Uuid, ForeignKey("account.id", ondelete="SET NULL"), nullable=True)
    credit_card_id = Column(Uuid, ForeignKey("credit_card.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Loan(Base):
    """Fixed-installment financing"""

    __tablename__ = "loan"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=True)
    principal = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)  # annual percent
    term_months = Column(Integer, nullable=False)
    monthly_payment = Column(Float, nullable=False)
    remaining_amount = Column(Float, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="active")  # active | paid
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ThirdPartyLoan(Base):
    """Informal loan with a flat monthly interest rate"""

    __tablename__ = "third_party_loan"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    creditor_name = Column(Text, nullable=False)
    creditor_phone = Column(Text, nullable=True)
    principal_amount = Column(Float, nullable=False)
    monthly_interest = Column(Float, nullable=False)  # percent per month
    current_balance = Column(Float, nullable=False)
    start_date = Column(Date, nullable=False)
    next_payment_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    responsible_person = Column(Text, nullable=False, default="me")
    status = Column(Text, nullable=False, default="active")  # active | paid
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship(
        "ThirdPartyPayment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="ThirdPartyPayment.payment_date.desc()",
    )


class ThirdPartyPayment(Base):
    """Payment towards an informal loan"""

    __tablename__ = "third_party_payment"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    loan_id = Column(Uuid, ForeignKey("third_party_loan.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("ThirdPartyLoan", back_populates="payments")


class CardDebt(Base):
    """Card identified by its last four digits, grouping installment purchases"""

    __tablename__ = "card_debt"
    __table_args__ = (UniqueConstraint("user_id", "last_four_digits", name="uq_card_debt_user_digits"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    cardholder_name = Column(Text, nullable=False)
    last_four_digits = Column(Text, nullable=False)
    due_day = Column(Integer, nullable=False, default=10)
    total_debt = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    purchases = relationship(
        "CardPurchase",
        back_populates="card_debt",
        cascade="all, delete-orphan",
        order_by="CardPurchase.purchase_date.desc()",
    )


class CardPurchase(Base):
    """Purchase split into equal installments"""

    __tablename__ = "card_purchase"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    card_debt_id = Column(Uuid, ForeignKey("card_debt.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=False)
    purchase_date = Column(Date, nullable=False)
    total_amount = Column(Float, nullable=False)
    installments = Column(Integer, nullable=False, default=1)
    installment_amount = Column(Float, nullable=False)
    paid_installments = Column(Integer, nullable=False, default=0)
    card_fee_percent = Column(Float, nullable=False, default=0.0)
    status = Column(Text, nullable=False, default="active")  # active | paid
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    card_debt = relationship("CardDebt", back_populates="purchases")
    payments = relationship(
        "CardPayment",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="CardPayment.payment_date.desc()",
    )


class CardPayment(Base):
    """Installment payment against a card purchase"""

    __tablename__ = "card_payment"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    purchase_id = Column(Uuid, ForeignKey("card_purchase.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    fee_paid = Column(Float, nullable=False, default=0.0)
    payment_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    purchase = relationship("CardPurchase", back_populates="payments")


class Budget(Base):
    """Spending limit for a category in one month"""

    __tablename__ = "budget"
    __table_args__ = (UniqueConstraint("user_id", "category", "month", name="uq_budget_user_category_month"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    category = Column(Text, nullable=False)
    month = Column(Date, nullable=False)  # first day of month
    amount = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Goal(Base):
    """Savings target"""

    __tablename__ = "goal"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    deadline = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="active")  # active | completed
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FixedExpense(Base):
    """Recurring monthly bill"""

    __tablename__ = "fixed_expense"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    due_day = Column(Integer, nullable=False)
    category = Column(Text, nullable=False, default="utility")
    is_active = Column(Boolean, nullable=False, default=True)
    last_paid_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class VariableExpense(Base):
    """Day-to-day spending with a payment method"""

    __tablename__ = "variable_expense"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    category = Column(Text, nullable=False, default="Other")
    payment_type = Column(Text, nullable=False)  # pix | debit | credit | cash
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
