"""
Middleware modules for the directory API.

- Correlation ID tracking so log lines and error bodies share a request ID
"""

from .correlation import CorrelationIdMiddleware, CorrelationLogFilter, correlation_id_ctx, request_id_ctx

__all__ = [
    "CorrelationIdMiddleware",
    "CorrelationLogFilter",
    "correlation_id_ctx",
    "request_id_ctx",
]
