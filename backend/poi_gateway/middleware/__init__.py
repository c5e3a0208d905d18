"""
ASGI middleware.
"""
from poi_gateway.middleware.metrics_middleware import MetricsMiddleware
from poi_gateway.middleware.origin_guard import OriginGuardMiddleware, is_origin_allowed

__all__ = [
    "MetricsMiddleware",
    "OriginGuardMiddleware",
    "is_origin_allowed",
]
