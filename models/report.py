"""
Weekly fill-rate report schemas.

One ReportItem is one store's order-vs-delivery record for one SKU
in one Monday-to-Sunday week.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import ConfigDict, Field, field_validator

from models.base import BaseSchema


# Virtual scope: roll every store up instead of showing one
ALL_STORES = "all"


class ProductType(str, Enum):
    """SKU material types."""
    FINISHED_GOODS = "Finished Goods"
    RAW_MATERIALS = "Raw Materials"
    PACKAGING = "Packaging"
    SEMI_FINISHED = "Semi-Finished"
    OTHERS = "Others"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "ProductType":
        """
        Normalize a catalog type label.

        Accepts either a display value ("Packaging") or one of the short
        catalog codes ("sku", "premix", "raw", "packaging", "semi-finished").
        """
        if not raw:
            return cls.OTHERS
        for member in cls:
            if member.value == raw:
                return member
        return {
            "sku": cls.FINISHED_GOODS,
            "finished goods": cls.FINISHED_GOODS,
            "premix": cls.RAW_MATERIALS,
            "raw": cls.RAW_MATERIALS,
            "raw materials": cls.RAW_MATERIALS,
            "packaging": cls.PACKAGING,
            "semi-finished": cls.SEMI_FINISHED,
        }.get(raw.strip().lower(), cls.OTHERS)


class FillRateClass(str, Enum):
    """Display class for a fill rate."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _to_decimal(v):
    """Round quantities to 2 decimal places."""
    if v is None:
        return v
    return round(Decimal(str(v)), 2)


class WeekWindow(BaseSchema):
    """Monday-to-Sunday reporting window. Immutable value object."""

    model_config = ConfigDict(frozen=True)

    week_start_date: date = Field(..., description="Monday")
    week_end_date: date = Field(..., description="Sunday")
    week_number: int = Field(..., ge=1, le=54)
    year: int

    @property
    def label(self) -> str:
        return f"Week {self.week_number}, {self.year} ({self.week_start_date} to {self.week_end_date})"


class ReportItem(BaseSchema):
    """
    Store performance record for one SKU in one week.

    Derived fields (undelivered, fill_rate, remarks) are only ever set by
    services.fill_rate_service.recompute.
    """

    id: Optional[str] = Field(None, description="Assigned by the database on first save")
    store: str
    sku: str
    description: str = ""
    type: ProductType = ProductType.FINISHED_GOODS
    um: str = ""
    price: Decimal = Field(Decimal("0"), ge=0)
    store_order: Decimal = Field(Decimal("0"), ge=0)
    delivered: Decimal = Field(Decimal("0"), ge=0)
    undelivered: Decimal = Field(Decimal("0"), ge=0)
    fill_rate: int = Field(0, ge=0, le=100)
    remarks: str = ""
    week_start_date: date
    week_end_date: date
    week_number: int
    year: int
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        """Rows may carry integer or UUID ids."""
        if v is None:
            return v
        return str(v)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, ProductType):
            return v
        return ProductType.from_raw(v)

    @field_validator("price", "store_order", "delivered", "undelivered", mode="before")
    @classmethod
    def round_quantity(cls, v):
        return _to_decimal(v)

    @field_validator("description", "um", "remarks", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    def in_window(self, window: WeekWindow) -> bool:
        """Exact match on the window's start and end dates."""
        return (
            self.week_start_date == window.week_start_date
            and self.week_end_date == window.week_end_date
        )

    def to_row(self) -> dict:
        """Column values for insert/update. Never sends id or created_at."""
        return {
            "store": self.store,
            "sku": self.sku,
            "description": self.description,
            "type": self.type.value,
            "um": self.um,
            "price": float(self.price),
            "store_order": float(self.store_order),
            "delivered": float(self.delivered),
            "undelivered": float(self.undelivered),
            "fill_rate": self.fill_rate,
            "remarks": self.remarks,
            "week_start_date": self.week_start_date.isoformat(),
            "week_end_date": self.week_end_date.isoformat(),
            "week_number": self.week_number,
            "year": self.year,
        }


class AggregatedItem(BaseSchema):
    """
    Cross-store rollup of one SKU within the active week.

    Never persisted. fill_rate is computed from the totals.
    """

    sku: str
    description: str = ""
    type: ProductType = ProductType.OTHERS
    um: str = ""
    price: Decimal = Decimal("0")
    total_store_order: Decimal = Decimal("0")
    total_delivered: Decimal = Decimal("0")
    total_undelivered: Decimal = Decimal("0")
    fill_rate: int = 0
    store_count: int = 0
    stores: list[str] = Field(default_factory=list)
    remarks: str = ""
    week_start_date: date
    week_end_date: date
    week_number: int
    year: int


class CatalogEntry(BaseSchema):
    """Read-only SKU catalog row."""

    sku: str
    description: str = ""
    um: str = ""
    price: Decimal = Decimal("0")
    type: ProductType = ProductType.OTHERS

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, ProductType):
            return v
        return ProductType.from_raw(v)

    @field_validator("price", mode="before")
    @classmethod
    def round_price(cls, v):
        return _to_decimal(v) if v is not None else Decimal("0")

    @field_validator("description", "um", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v


# ===================
# REQUEST SCHEMAS
# ===================

class ReportItemCreate(BaseSchema):
    """Add a SKU to the selected store's report for the active week."""

    sku: str = Field(..., min_length=1, max_length=50)
    description: str = ""
    type: ProductType = ProductType.FINISHED_GOODS
    um: str = ""
    price: Decimal = Field(Decimal("0"), ge=0)
    store_order: Decimal = Field(Decimal("0"), ge=0)
    delivered: Decimal = Field(Decimal("0"), ge=0)


class ReportItemUpdate(BaseSchema):
    """
    Edit a report item.

    All fields optional - only provided fields are updated.
    """

    description: Optional[str] = None
    type: Optional[ProductType] = None
    um: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    store_order: Optional[Decimal] = Field(None, ge=0)
    delivered: Optional[Decimal] = Field(None, ge=0)


class RecomputeRequest(BaseSchema):
    """New quantities for a single row."""

    store_order: Decimal = Field(..., ge=0)
    delivered: Decimal = Field(..., ge=0)


class ScopeRequest(BaseSchema):
    store: str = Field(..., min_length=1, description=f"Store name or '{ALL_STORES}'")


class WeekRequest(BaseSchema):
    day: date = Field(..., description="Any date inside the wanted week")


class SearchRequest(BaseSchema):
    term: str = ""


class PageRequest(BaseSchema):
    page: int = Field(..., ge=1)


# ===================
# RESULT SCHEMAS
# ===================

class InitializeResult(BaseSchema):
    """Outcome of seeding a week from the catalog."""
    inserted_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0


class CopyResult(BaseSchema):
    """Outcome of copying the previous week into the active one."""
    saved_count: int = 0
    failed_count: int = 0
    source_week_start_date: date


class ClearResult(BaseSchema):
    """Outcome of a bulk clear."""
    deleted_count: int = 0
    store: Optional[str] = None
    week_start_date: date
