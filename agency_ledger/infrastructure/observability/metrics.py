"""Prometheus metrics for report volume, latency and budget overruns"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Report metrics
report_counter = Counter(
    "agency_report_total",
    "Total reports computed",
    ["report"],  # finance | monthly | annual | all_time | talent_budget | manager_budget | payroll
)

report_duration_histogram = Histogram(
    "agency_report_duration_seconds",
    "Report computation time",
    ["report"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Budget metrics
budget_usage_counter = Counter(
    "agency_budget_usage_total",
    "Talent budgets computed by usage band",
    ["band"],  # <50% | 50-90% | 90-100% | over
)

over_budget_counter = Counter(
    "agency_over_budget_total",
    "Talent budgets found over their annual ceiling",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(report: str, duration_seconds: float) -> None:
    report_counter.labels(report=report).inc()
    report_duration_histogram.labels(report=report).observe(duration_seconds)


def record_budget(used_percent: Decimal, over_budget: bool) -> None:
    """
    Record budget usage distribution for monitoring overspend.

    The over band follows the over_budget flag: a zero budget reports 0%
    used but is still over once anything is spent.
    """
    if over_budget:
        band = "over"
        over_budget_counter.inc()
    elif used_percent >= 90:
        band = "90-100%"
    elif used_percent >= 50:
        band = "50-90%"
    else:
        band = "<50%"

    budget_usage_counter.labels(band=band).inc()
