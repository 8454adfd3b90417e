"""
Web framework integration.
"""

from .middleware import GridContextMiddleware

__all__ = ["GridContextMiddleware"]
