"""
SKU catalog service.

Read-only access to the catalog used to seed a week's report items.
"""

from typing import Optional
import structlog

from config import get_supabase_client, settings
from models.report import CatalogEntry
from services.report_gateway import map_client_error

logger = structlog.get_logger(__name__)


class CatalogService:
    """Reads the SKU catalog ordered by SKU."""

    def __init__(self, client=None):
        self.db = client or get_supabase_client()
        self.table = settings.catalog_table

    def get_all(self) -> list[CatalogEntry]:
        """
        Get every catalog entry.

        Returns:
            Entries ordered by SKU, type labels normalized

        Raises:
            ConnectivityError: catalog unreachable or not ready (retryable)
            DatabaseError: any other failure
        """
        logger.debug("getting_catalog")

        try:
            result = (
                self.db.table(self.table)
                .select("sku, description, um, price, type")
                .order("sku")
                .execute()
            )

            entries = [CatalogEntry(**row) for row in result.data or []]

            logger.info("catalog_retrieved", count=len(entries))

            return entries

        except Exception as e:
            error = map_client_error(e, "select", self.table)
            logger.error("get_catalog_failed", code=error.code, error=str(e))
            raise error from e


# Singleton instance
_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Get or create CatalogService instance."""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service
