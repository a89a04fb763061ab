"""Prometheus metrics for allocation activity and request latency"""

from prometheus_client import Counter, Histogram

# Allocation metrics
allocation_counter = Counter(
    "savings_allocation_total",
    "Total allocations computed",
    ["outcome"],  # fully_allocated | remainder
)

allocation_duration_histogram = Histogram(
    "savings_allocation_duration_seconds",
    "Time spent ranking and allocating",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)

# Status store metrics
status_transition_counter = Counter(
    "savings_status_transitions_total",
    "Account status mutation requests",
    ["action", "status"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_allocation(remaining_cash, duration_seconds: float) -> None:
    """Record whether all cash found a capped slot"""
    outcome = "fully_allocated" if remaining_cash <= 0 else "remainder"
    allocation_counter.labels(outcome=outcome).inc()
    allocation_duration_histogram.observe(duration_seconds)


def record_status_change(action: str, status: str) -> None:
    status_transition_counter.labels(action=action, status=status).inc()
