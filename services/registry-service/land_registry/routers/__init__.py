"""
API routers for land registry service endpoints.
"""

from . import health_router, records_router

__all__ = ["health_router", "records_router"]
