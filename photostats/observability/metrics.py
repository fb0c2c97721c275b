"""Prometheus metric definitions for photostats self-instrumentation.

All metrics are module-level singletons registered with the default
prometheus_client registry.  Import them wherever instrumentation is needed.
"""

from prometheus_client import Counter, Gauge, Histogram, Info

# ---------------------------------------------------------------------------
# Histogram bucket definitions
# ---------------------------------------------------------------------------

REQUEST_DURATION_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0)
ASSEMBLY_DURATION_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0)

# ---------------------------------------------------------------------------
# Request-level metrics
# ---------------------------------------------------------------------------

REQUEST_DURATION = Histogram(
    "photostats_request_duration_seconds",
    "End-to-end request duration in seconds",
    labelnames=["endpoint"],
    buckets=REQUEST_DURATION_BUCKETS,
)

REQUESTS_TOTAL = Counter(
    "photostats_requests_total",
    "Total number of requests",
    labelnames=["endpoint", "status"],
)

REQUESTS_IN_PROGRESS = Gauge(
    "photostats_requests_in_progress",
    "Number of requests currently being processed",
    labelnames=["endpoint"],
)

# ---------------------------------------------------------------------------
# Report assembly metrics
# ---------------------------------------------------------------------------

REPORTS_TOTAL = Counter(
    "photostats_reports_total",
    "Total number of assembled diagnostics reports",
    labelnames=["status"],
)

REPORT_ASSEMBLY_DURATION = Histogram(
    "photostats_report_assembly_duration_seconds",
    "Time taken to assemble a diagnostics report in seconds",
    buckets=ASSEMBLY_DURATION_BUCKETS,
)

PROBE_FAILURES_TOTAL = Counter(
    "photostats_probe_failures_total",
    "Host probes that failed or timed out and fell back to a default",
    labelnames=["probe"],
)

# ---------------------------------------------------------------------------
# Health / info metrics
# ---------------------------------------------------------------------------

RECORD_STORE_HEALTHY = Gauge(
    "photostats_record_store_healthy",
    "Whether the photo record store answers queries (1=healthy, 0=unhealthy)",
)

APP_INFO = Info(
    "photostats",
    "photostats build information",
)
