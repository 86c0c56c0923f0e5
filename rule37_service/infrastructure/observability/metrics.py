"""Prometheus metrics for calculation volume, risk distribution and interest exposure"""

from prometheus_client import Counter, Histogram

from rule37_service.domain.models import CalculationSummary

# Calculation metrics
calculation_counter = Counter(
    "rule37_calculation_total",
    "Total Rule 37 ledger calculations",
    ["endpoint"],  # single | batch
)

rows_counter = Counter(
    "rule37_rows_total",
    "Interest rows emitted by risk category",
    ["risk_category"],  # AT_RISK | BREACHED
)

interest_counter = Counter(
    "rule37_interest_rupees_total",
    "Cumulative interest computed across calculations",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(summary: CalculationSummary, endpoint: str) -> None:
    """Record metrics for one ledger summary"""
    calculation_counter.labels(endpoint=endpoint).inc()

    for row in summary.details:
        rows_counter.labels(risk_category=row.risk_category.value).inc()

    interest_counter.inc(float(summary.total_interest))
