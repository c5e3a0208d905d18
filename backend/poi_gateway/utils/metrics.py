"""
Prometheus metrics definitions for the upload gateway.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

origin_rejections_total = Counter(
    'origin_rejections_total',
    'Requests refused by the origin guard',
    ['preflight']
)

# Upload session metrics
uploads_initiated_total = Counter(
    'uploads_initiated_total',
    'Total upload sessions opened',
    ['folder']
)

uploads_completed_total = Counter(
    'uploads_completed_total',
    'Total upload sessions completed'
)

# Batch sync metrics
sync_items_total = Counter(
    'sync_items_total',
    'Batch sync outcomes per identifier',
    ['outcome']  # moved, skipped, error
)

object_move_duration_seconds = Histogram(
    'object_move_duration_seconds',
    'Copy-then-delete duration in seconds',
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0]
)

# Backend metrics
backend_requests_total = Counter(
    'backend_requests_total',
    'Total storage backend requests',
    ['operation', 'outcome']  # outcome: ok, error
)

backend_request_duration_seconds = Histogram(
    'backend_request_duration_seconds',
    'Storage backend request duration in seconds',
    ['operation'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)
