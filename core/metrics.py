"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License lifecycle metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued from purchases",
    ["tier", "source"],
)

licenses_revoked_total = Counter(
    "licenses_revoked_total",
    "Total licenses revoked",
    ["reason"],
)

license_transitions_total = Counter(
    "license_transitions_total",
    "Total subscription-driven license transitions",
    ["transition"],
)

# Activation metrics
activations_total = Counter(
    "activations_total",
    "Activation attempts by outcome",
    ["outcome"],
)

# Webhook metrics
webhook_events_total = Counter(
    "webhook_events_total",
    "Webhook deliveries by event type and outcome",
    ["event_type", "outcome"],
)

# Advisor metrics
advisor_requests_total = Counter(
    "advisor_requests_total",
    "Advisor requests by outcome",
    ["tier", "outcome"],
)

advisor_completion_duration_seconds = Histogram(
    "advisor_completion_duration_seconds",
    "Completion provider call duration in seconds",
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
