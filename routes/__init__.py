"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.reports import router as reports_router
from routes.dashboard import router as dashboard_router

__all__ = [
    "reports_router",
    "dashboard_router",
]
