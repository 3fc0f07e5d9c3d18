"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ConnectivityError,
    DatabaseError,

    # Report items
    ReportItemNotFoundError,
    ReportItemExistsError,
    InvalidSKUError,
    MissingFieldError,
    StoreNotSelectedError,

    # Remote store
    SchemaNotReadyError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ConnectivityError",
    "DatabaseError",

    # Report items
    "ReportItemNotFoundError",
    "ReportItemExistsError",
    "InvalidSKUError",
    "MissingFieldError",
    "StoreNotSelectedError",

    # Remote store
    "SchemaNotReadyError",
]
