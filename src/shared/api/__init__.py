"""
Shared API Layer
HTTP middleware shared by the service routers
"""
from shared.api.middleware import CorrelationIdMiddleware

__all__ = ["CorrelationIdMiddleware"]
