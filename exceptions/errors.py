"""
Custom exception classes for the application.

Every error raised by the reporting core is an AppError subclass,
so routes can convert it to the standard JSON error body.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "REPORT_ITEM_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ConnectivityError(AppError):
    """Remote store unreachable or not ready (503). Safe to retry."""

    def __init__(
        self,
        message: str,
        code: str = "CONNECTIVITY_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=503,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# REPORT ITEM ERRORS
# ===================

class ReportItemNotFoundError(NotFoundError):
    """Report item no longer present in the remote store."""

    def __init__(self, item_id: str):
        super().__init__(
            resource="Report item",
            identifier=item_id,
            code="REPORT_ITEM_NOT_FOUND"
        )


class ReportItemExistsError(ConflictError):
    """SKU already reported for this store and week."""

    def __init__(self, store: str, sku: str, week_start_date: str):
        super().__init__(
            code="REPORT_ITEM_EXISTS",
            message=f"SKU {sku} already exists for {store} in this week",
            details={"store": store, "sku": sku, "week_start_date": week_start_date}
        )


class InvalidSKUError(ValidationError):
    """SKU contains characters other than letters, digits and hyphens."""

    def __init__(self, sku: str):
        super().__init__(
            code="INVALID_SKU",
            message="SKU may only contain letters, digits and hyphens",
            details={"sku": sku}
        )


class MissingFieldError(ValidationError):
    """Required report field is empty."""

    def __init__(self, field: str):
        super().__init__(
            code="MISSING_FIELD",
            message=f"{field} is required",
            details={"field": field}
        )


class StoreNotSelectedError(ValidationError):
    """Operation needs a single store but none (or the aggregate scope) is selected."""

    def __init__(self, operation: str):
        super().__init__(
            code="STORE_NOT_SELECTED",
            message=f"Select a store before running {operation}",
            details={"operation": operation}
        )


class SchemaNotReadyError(ConnectivityError):
    """Report relation missing or schema cache not yet reloaded."""

    def __init__(self, relation: str, details: Optional[dict] = None):
        super().__init__(
            code="SCHEMA_NOT_READY",
            message=f"Table {relation} is not available yet",
            details={"relation": relation, **(details or {})}
        )
