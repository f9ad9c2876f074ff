"""
Prometheus metrics for the license portal.

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

# License metrics
licenses_added_total = Counter(
    "licenses_added_total",
    "Total licenses added to the ledger",
    ["scope", "source"],
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total licenses activated",
    ["business_type"],
)

licenses_removed_total = Counter(
    "licenses_removed_total",
    "Total licenses removed",
)

license_seats_purchased_total = Counter(
    "license_seats_purchased_total",
    "Total seats credited by purchases",
    ["scope"],
)

# Notification metrics
emails_sent_total = Counter(
    "emails_sent_total",
    "Total emails handed to the provider",
    ["kind", "result"],
)

# Team metrics
team_invitations_total = Counter(
    "team_invitations_total",
    "Total team invitations created",
    ["role"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
