# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the mission participation service."""
from prometheus_client import Counter, Gauge, Histogram

PARTICIPATIONS_CREATED = Counter(
    "participations_created_total", "Total mission participations created", ["role"]
)
PARTICIPATIONS_TOTAL = Gauge(
    "participations_total", "Current participations by state", ["state"]
)
STATE_TRANSITIONS = Counter(
    "participation_transitions_total", "State machine transitions", ["event", "source"]
)
VALIDATION_FAILURES = Counter(
    "validation_failures_total", "Saves rejected by validation", ["entity"]
)
NOTIFICATIONS_SENT = Counter(
    "participation_notifications_sent_total", "Participant notifications handed off", ["kind"]
)
EMAILS_DISPATCHED = Counter(
    "emails_dispatched_total", "Admin emails handed to a delivery path", ["delivery"]
)
EMAIL_RECIPIENTS = Histogram(
    "email_recipients", "Recipients per dispatched email",
    buckets=[1, 10, 50, 100, 500, 1000, 5000],
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
