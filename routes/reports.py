"""
Report API routes.

Command surface of the weekly fill-rate report screen: scope and week
selection, search and paging, item edits and bulk workflows.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.report import (
    ClearResult,
    CopyResult,
    InitializeResult,
    PageRequest,
    RecomputeRequest,
    ReportItem,
    ReportItemCreate,
    ReportItemUpdate,
    ScopeRequest,
    SearchRequest,
    WeekRequest,
    WeekWindow,
)
from services.classification_service import fill_rate_class
from services.report_session_service import get_report_session_service
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


def _state() -> dict:
    session = get_report_session_service()
    return {
        "scope": session.scope,
        "stores": session.report_store.known_stores(),
        "window": session.window.model_dump(mode="json"),
        "search_term": session.view.search_term,
        "page": session.view.page,
    }


# ===================
# SELECTION ROUTES
# ===================

@router.post("/load")
async def load_reports():
    """
    Reload every report item from the database.

    New stores found in the data become selectable.
    """
    try:
        session = get_report_session_service()
        loaded = session.load()
        return {"loaded": loaded, **_state()}

    except Exception as e:
        return handle_error(e)


@router.get("/state")
async def get_state():
    """Current scope, week, search term and page."""
    return _state()


@router.get("/weeks", response_model=list[WeekWindow])
async def list_weeks(
    past: Optional[int] = Query(None, ge=0, le=52, description="Past weeks to offer"),
    future: Optional[int] = Query(None, ge=0, le=52, description="Future weeks to offer")
):
    """Week selector options: active week, past weeks, then future weeks."""
    session = get_report_session_service()
    return session.week_options(past, future)


@router.put("/scope")
async def select_scope(request: ScopeRequest):
    """Select one store, or 'all' for the cross-store view."""
    try:
        get_report_session_service().select_scope(request.store)
        return _state()

    except Exception as e:
        return handle_error(e)


@router.put("/week")
async def select_week(request: WeekRequest):
    """Activate the week containing the given date."""
    get_report_session_service().select_week(request.day)
    return _state()


@router.put("/search")
async def set_search(request: SearchRequest):
    """Set the search term. Always returns to page 1."""
    get_report_session_service().set_search(request.term)
    return _state()


@router.put("/page")
async def set_page(request: PageRequest):
    get_report_session_service().set_page(request.page)
    return _state()


# ===================
# VIEW ROUTES
# ===================

@router.get("/view")
async def get_view():
    """
    Current page of the active view.

    Store scope returns report items; 'all' returns per-SKU rollups.
    Each row carries its fill-rate display class.
    """
    try:
        session = get_report_session_service()
        page = session.render()

        payload = page.model_dump(mode="json")
        for row in payload["data"]:
            row["fill_rate_class"] = fill_rate_class(row["fill_rate"]).value

        return {"scope": session.scope, **payload}

    except Exception as e:
        return handle_error(e)


# ===================
# ITEM ROUTES
# ===================

@router.post("/items", response_model=ReportItem, status_code=201)
async def add_item(data: ReportItemCreate):
    """Add a SKU to the selected store for the active week."""
    try:
        return get_report_session_service().add_item(data)

    except Exception as e:
        return handle_error(e)


@router.put("/items/{item_id}", response_model=ReportItem)
async def edit_item(item_id: str, data: ReportItemUpdate):
    """Update provided fields; derived fields are recomputed."""
    try:
        return get_report_session_service().edit_item(item_id, data)

    except Exception as e:
        return handle_error(e)


@router.post("/items/{item_id}/recompute", response_model=ReportItem)
async def recompute_item(item_id: str, data: RecomputeRequest):
    """Set store order and delivered quantities for one row."""
    try:
        return get_report_session_service().recompute_row(
            item_id, data.store_order, data.delivered
        )

    except Exception as e:
        return handle_error(e)


@router.delete("/items/{item_id}", status_code=204)
async def delete_item(item_id: str):
    try:
        get_report_session_service().delete_item(item_id)
        return None

    except Exception as e:
        return handle_error(e)


# ===================
# BULK ROUTES
# ===================

@router.post("/bulk/initialize", response_model=InitializeResult)
async def initialize_week():
    """Seed the selected store's week with every catalog SKU it lacks."""
    try:
        return get_report_session_service().initialize_week()

    except Exception as e:
        return handle_error(e)


@router.post("/bulk/copy-previous", response_model=CopyResult)
async def copy_previous_week():
    """Copy the selected store's previous week into the active week."""
    try:
        return get_report_session_service().copy_previous_week()

    except Exception as e:
        return handle_error(e)


@router.post("/bulk/clear-store", response_model=ClearResult)
async def clear_store_week():
    """Delete the selected store's items for the active week."""
    try:
        return get_report_session_service().clear_store_week()

    except Exception as e:
        return handle_error(e)


@router.post("/bulk/clear-all", response_model=ClearResult)
async def clear_all_stores_week():
    """Delete every store's items for the active week."""
    try:
        return get_report_session_service().clear_all_stores_week()

    except Exception as e:
        return handle_error(e)
