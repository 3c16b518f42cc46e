"""Application metrics (Prometheus).

All metrics are defined here so there is a single inventory of what the
service measures.  Modules import a metric and increment/observe it at the
point of action; /metrics exposes the default registry.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Learning workflow
# ---------------------------------------------------------------------------

LESSON_PROGRESS_UPDATES = Counter(
    "lesson_progress_updates_total",
    "Lesson progress submissions by resulting flag",
    ["completed"],  # "true" or "false"
)

COURSE_COMPLETIONS = Counter(
    "course_completions_total",
    "Enrollments that transitioned to COMPLETED",
)

CERTIFICATES_ISSUED = Counter(
    "certificates_issued_total",
    "Certificate issuance attempts by result",
    ["result"],  # "issued", "existing" or "failed"
)

ENROLLMENTS_CREATED = Counter(
    "enrollments_created_total",
    "New course enrollments",
)

PASSWORD_RESETS = Counter(
    "password_reset_events_total",
    "Password reset flow events",
    ["event"],  # "requested", "completed", "rejected"
)
