"""Pytest fixtures for testing"""

import os

# Settings are read at import time; point them at the test database first
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_gateway.api.main import create_app
from finance_gateway.api.dependencies import get_today
from finance_gateway.infrastructure.database.models import Base
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.domain.models import TransactionRecord, VariableExpenseRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2024, 6, 15)
USER = {"X-User-ID": "family-1"}
OTHER_USER = {"X-User-ID": "family-2"}


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def client(db: Session, today: date) -> TestClient:
    """Create FastAPI test client with test database and a fixed calendar date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today
    return TestClient(app, headers=USER)


@pytest.fixture
def sample_transactions() -> list[TransactionRecord]:
    """One month of household income and spending"""
    return [
        TransactionRecord(type="income", category="salary", amount=5000.0, date=date(2024, 6, 5)),
        TransactionRecord(type="income", category="freelance", amount=1000.0, date=date(2024, 6, 20)),
        TransactionRecord(type="expense", category="groceries", amount=800.0, date=date(2024, 6, 7)),
        TransactionRecord(type="expense", category="rent", amount=2000.0, date=date(2024, 6, 10)),
        TransactionRecord(type="expense", category="groceries", amount=400.0, date=date(2024, 6, 21)),
    ]


@pytest.fixture
def sample_variable_expenses() -> list[VariableExpenseRecord]:
    return [
        VariableExpenseRecord("Bakery", "Food", "pix", 25.0, date(2024, 6, 2)),
        VariableExpenseRecord("Gas", "Transport", "debit", 200.0, date(2024, 6, 3)),
        VariableExpenseRecord("Pharmacy", "Health", "credit", 80.0, date(2024, 6, 9)),
        VariableExpenseRecord("Market", "Food", "pix", 150.0, date(2024, 6, 12)),
        VariableExpenseRecord("Cinema", "", "cash", 60.0, date(2024, 6, 14)),
        VariableExpenseRecord("Uber", "Transport", "credit", 35.0, date(2024, 6, 15)),
    ]
