"""Middleware package."""
from rangevote.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
