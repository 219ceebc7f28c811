"""HTTP middleware."""

from .correlation import CorrelationMiddleware, get_correlation_id

__all__ = ["CorrelationMiddleware", "get_correlation_id"]
