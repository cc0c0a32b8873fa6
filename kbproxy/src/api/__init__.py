"""API package for the proxy.

This package contains the API endpoints, middleware and error handling.
"""

from .core import setup_api

__all__ = ["setup_api"]
