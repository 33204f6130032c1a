"""
Middleware package for the Property Marketplace API.
"""

from .validation import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
