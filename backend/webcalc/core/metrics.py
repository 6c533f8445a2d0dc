"""
Prometheus metrics configuration
"""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from prometheus_client.registry import REGISTRY

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Calculator Metrics
# ============================================================================

calculator_key_presses_total = Counter(
    'calculator_key_presses_total',
    'Total number of calculator input events',
    ['kind']  # digit, operator, equals, clear, percent, toggle_sign, unknown
)

calculator_evaluations_total = Counter(
    'calculator_evaluations_total',
    'Total number of evaluated operations',
    ['operator']
)

calculator_errors_total = Counter(
    'calculator_errors_total',
    'Total number of calculation errors surfaced to the user',
    ['error_type']
)

calculator_history_records_total = Counter(
    'calculator_history_records_total',
    'Total number of history records written'
)

calculator_open_windows = Gauge(
    'calculator_open_windows',
    'Number of calculator windows with state in the store'
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation', 'table']
)

db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation', 'table'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
)

db_connection_pool_size = Gauge(
    'db_connection_pool_size',
    'Database connection pool size',
    ['state']  # active, idle
)

db_connection_pool_overflow = Gauge(
    'db_connection_pool_overflow',
    'Database connection pool overflow'
)


def get_metrics() -> bytes:
    """Get metrics in Prometheus format"""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST
