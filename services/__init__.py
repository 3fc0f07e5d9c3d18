"""
Business logic services.

Each service handles one domain area.
"""

from services.report_gateway import ReportGateway, get_report_gateway
from services.catalog_service import CatalogService, get_catalog_service
from services.report_store import ReportStore
from services.bulk_workflow_service import BulkWorkflowService
from services.report_session_service import (
    ReportSessionService,
    get_report_session_service,
)
from services.dashboard_service import DashboardService, get_dashboard_service

__all__ = [
    "ReportGateway",
    "get_report_gateway",
    "CatalogService",
    "get_catalog_service",
    "ReportStore",
    "BulkWorkflowService",
    "ReportSessionService",
    "get_report_session_service",
    "DashboardService",
    "get_dashboard_service",
]
