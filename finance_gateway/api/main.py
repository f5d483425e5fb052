"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_gateway.api.v1 import (
    accounts,
    alerts,
    budgets,
    card_debts,
    dashboard,
    fees,
    fixed_expenses,
    goals,
    loans,
    reports,
    simulator,
    third_party_loans,
    transactions,
    variable_expenses,
)
from finance_gateway.infrastructure.database.session import init_db
from finance_gateway.infrastructure.observability.logging import setup_logging
from finance_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Gateway",
        description="Family finance tracking: debts, payoff simulation, budgets and reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(third_party_loans.router, prefix="/v1", tags=["third-party-loans"])
    app.include_router(card_debts.router, prefix="/v1", tags=["card-debts"])
    app.include_router(simulator.router, prefix="/v1", tags=["debt-simulator"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(fixed_expenses.router, prefix="/v1", tags=["fixed-expenses"])
    app.include_router(variable_expenses.router, prefix="/v1", tags=["variable-expenses"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(fees.router, prefix="/v1", tags=["fees"])
    app.include_router(alerts.router, prefix="/v1", tags=["alerts"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
