"""
Pydantic schemas for validation and serialization.
"""

from models.base import BaseSchema, PaginatedResponse
from models.report import (
    ALL_STORES,
    ProductType,
    FillRateClass,
    WeekWindow,
    ReportItem,
    AggregatedItem,
    CatalogEntry,
    ReportItemCreate,
    ReportItemUpdate,
    RecomputeRequest,
    InitializeResult,
    CopyResult,
    ClearResult,
)
from models.dashboard import DashboardSummary, LowFillRateAlert

__all__ = [
    "BaseSchema",
    "PaginatedResponse",
    "ALL_STORES",
    "ProductType",
    "FillRateClass",
    "WeekWindow",
    "ReportItem",
    "AggregatedItem",
    "CatalogEntry",
    "ReportItemCreate",
    "ReportItemUpdate",
    "RecomputeRequest",
    "InitializeResult",
    "CopyResult",
    "ClearResult",
    "DashboardSummary",
    "LowFillRateAlert",
]
