"""
Database connection management.

Provides the Supabase client singleton used by the report gateway
and the catalog service.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions import ConnectivityError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    The first call runs a one-row query on the report relation so a
    bad URL or key fails at startup rather than on the first user command.

    Raises:
        ConnectivityError: If connection fails
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )
        client.table(settings.reports_table).select("id").limit(1).execute()

        logger.info("supabase_connected", reports_table=settings.reports_table)
        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ConnectivityError(f"Failed to connect to Supabase: {e}") from e


def check_connection() -> dict:
    """
    Report and catalog row counts, or the connection error.

    Used by the startup log and the /health endpoint.
    """
    try:
        client = get_supabase_client()

        reports = client.table(settings.reports_table).select("id", count="exact").execute()
        catalog = client.table(settings.catalog_table).select("sku", count="exact").execute()

        return {
            "status": "healthy",
            "reports_count": reports.count,
            "catalog_count": catalog.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
