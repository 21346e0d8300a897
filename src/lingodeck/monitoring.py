"""Monitoring configuration for LingoDeck."""
from prometheus_client import Counter, start_http_server

# Progress store metrics
store_operations = Counter(
    "lingodeck_store_operations_total",
    "Total number of progress store operations",
    ["backend", "operation"],
)

store_errors = Counter(
    "lingodeck_store_errors_total",
    "Total number of progress store failures",
    ["backend", "operation"],
)

attempts_recorded = Counter(
    "lingodeck_attempts_recorded_total",
    "Total number of practice attempts recorded",
    ["correct"],
)

# Vendor API metrics
vendor_requests = Counter(
    "lingodeck_vendor_requests_total",
    "Total number of Google Cloud API requests",
    ["endpoint"],
)

vendor_errors = Counter(
    "lingodeck_vendor_errors_total",
    "Total number of failed Google Cloud API requests",
    ["endpoint", "error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
