"""Prometheus metrics for overspend detection, project lifecycle and notification delivery"""

from prometheus_client import Counter, Histogram

# Detection metrics
overspend_detected_counter = Counter(
    "household_overspend_detected_total",
    "Members whose statement charges exceeded the overspend threshold",
)

project_created_counter = Counter(
    "household_overspend_project_created_total",
    "Overspend projects created",
    ["outcome"],  # auto_created | pending_approval
)

member_error_counter = Counter(
    "household_statement_member_errors_total",
    "Per-member failures while processing a statement",
)

# Lifecycle metrics
project_approved_counter = Counter(
    "household_overspend_project_approved_total",
    "Overspend projects approved by a household owner",
)

project_status_counter = Counter(
    "household_overspend_project_status_changes_total",
    "Manual project status changes",
    ["status"],
)

payment_amount_histogram = Histogram(
    "household_overspend_payment_amount_dollars",
    "Payments recorded against overspend projects",
    buckets=[25, 50, 100, 250, 500, 1000, 2500],
)

# Notification webhook metrics
webhook_latency_histogram = Histogram(
    "notification_webhook_latency_seconds",
    "Notification webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "notification_webhook_failures_total",
    "Failed notification webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_project_created(auto_created: bool) -> None:
    """Record whether a new project activated immediately or awaits approval"""
    outcome = "auto_created" if auto_created else "pending_approval"
    project_created_counter.labels(outcome=outcome).inc()
