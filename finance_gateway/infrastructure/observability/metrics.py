"""Prometheus metrics for simulations, payments, alerts and financial health"""

from prometheus_client import Counter, Histogram

# Simulation metrics
simulation_counter = Counter(
    "finance_simulation_total",
    "Debt payoff simulations run",
    ["debt_type", "outcome"],  # outcome: payable | insufficient_payment
)

simulation_months_histogram = Histogram(
    "finance_simulation_months",
    "Months needed to pay off a simulated debt",
    buckets=[6, 12, 24, 36, 60, 120, 240, 360],
)

# Ledger metrics
payment_counter = Counter(
    "finance_payment_recorded_total",
    "Payments recorded",
    ["kind"],  # loan | third_party | card_purchase | fixed_expense | goal
)

# Health metrics
health_status_counter = Counter(
    "finance_health_status_total",
    "Financial health classifications",
    ["status"],
)

# Alert metrics
alert_counter = Counter(
    "finance_alert_raised_total",
    "Payment alerts raised",
    ["severity"],  # critical | warning | info
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(debt_type: str, success: bool, total_months: int | None) -> None:
    """Record outcome and payoff length of a simulation"""
    outcome = "payable" if success else "insufficient_payment"
    simulation_counter.labels(debt_type=debt_type, outcome=outcome).inc()
    if success and total_months is not None:
        simulation_months_histogram.observe(total_months)


def record_payment(kind: str) -> None:
    payment_counter.labels(kind=kind).inc()


def record_health(status: str) -> None:
    health_status_counter.labels(status=status).inc()


def record_alerts(severities) -> None:
    for severity in severities:
        alert_counter.labels(severity=severity).inc()
