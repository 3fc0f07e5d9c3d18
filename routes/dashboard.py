"""
Dashboard API routes.

Week-level fill-rate KPIs across all stores.
"""

from datetime import date
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.dashboard import DashboardSummary
from services.dashboard_service import get_dashboard_service
from services.week_service import week_for_date
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# SUMMARY ROUTES
# ===================

@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    day: Optional[date] = Query(None, description="Any date in the week (default: today)"),
    threshold: Optional[int] = Query(None, ge=0, le=100, description="Alert below this fill rate")
):
    """
    Get fill-rate KPIs for one week.

    Returns:
    - Mean fill rate across rows with orders
    - Stores reporting vs. total stores
    - Low fill-rate alerts sorted worst first
    """
    try:
        window = week_for_date(day) if day else None
        return get_dashboard_service().get_summary(window, threshold)

    except Exception as e:
        return handle_error(e)
