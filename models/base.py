"""
Base schemas shared by all models.
"""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class PaginatedResponse(BaseModel):
    """
    One page of a filtered list.

    Page totals sum the quantity columns of the rows on this page only.
    """
    data: list
    total: int
    page: int
    page_size: int
    total_pages: int
    start_index: int = 0
    end_index: int = 0
    page_store_order: Decimal = Decimal("0")
    page_delivered: Decimal = Decimal("0")
    page_undelivered: Decimal = Decimal("0")
