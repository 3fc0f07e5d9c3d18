"""
Report store: per-store caches of report items.

Holds two views per store:
- original: every item loaded or saved, across all weeks
- windowed: the items of `original` whose week matches the active window

`windowed` is always re-derived from `original` by filtering; it is never
edited directly. Caches change only after the gateway confirms a write,
so a failed call leaves both views untouched.

Calls are issued one at a time from a single control flow, so cache
writes for a store happen in the order their gateway calls complete.
"""

from typing import Optional
import structlog

from config import settings
from models.report import ALL_STORES, ReportItem, WeekWindow
from services.fill_rate_service import recompute
from services.report_gateway import ReportGateway, get_report_gateway
from services.week_service import parse_window
from utils.text_utils import is_valid_sku
from exceptions import InvalidSKUError, MissingFieldError, StoreNotSelectedError

logger = structlog.get_logger(__name__)


def validate_report_item(item: ReportItem) -> None:
    """
    Reject an item before any persistence call.

    Raises:
        MissingFieldError: store or sku empty
        StoreNotSelectedError: store is the aggregate scope
        InvalidSKUError: sku has characters other than letters, digits, hyphens
        ValidationError: week dates do not form a Monday-to-Sunday window
    """
    if not item.store:
        raise MissingFieldError("store")
    if item.store == ALL_STORES:
        raise StoreNotSelectedError("save")
    if not item.sku:
        raise MissingFieldError("sku")
    if not is_valid_sku(item.sku):
        raise InvalidSKUError(item.sku)
    parse_window(item.week_start_date, item.week_end_date)


class ReportStore:
    """
    Owns the original/windowed cache pair for every store.

    No other component mutates the caches; readers get copies.
    """

    def __init__(
        self,
        gateway: Optional[ReportGateway] = None,
        known_stores: Optional[list[str]] = None,
        window: Optional[WeekWindow] = None,
    ):
        self.gateway = gateway or get_report_gateway()
        self.window = window
        self._stores: list[str] = []
        self._original: dict[str, list[ReportItem]] = {}
        self._windowed: dict[str, list[ReportItem]] = {}

        stores = settings.known_stores if known_stores is None else known_stores
        for store in stores:
            self.register_store(store)

    # ===================
    # STORES
    # ===================

    def register_store(self, store: str) -> bool:
        """
        Register a store identifier.

        Returns:
            True if the store was not known before
        """
        if not store or store == ALL_STORES or store in self._original:
            return False
        self._stores.append(store)
        self._original[store] = []
        self._windowed[store] = []
        return True

    def known_stores(self) -> list[str]:
        """Stores in registration order."""
        return list(self._stores)

    # ===================
    # READ OPERATIONS
    # ===================

    def original_for(self, store: str) -> list[ReportItem]:
        return list(self._original.get(store, []))

    def windowed_for(self, store: str) -> list[ReportItem]:
        return list(self._windowed.get(store, []))

    def all_windowed(self) -> dict[str, list[ReportItem]]:
        """Windowed items of every store, keyed by store."""
        return {store: list(self._windowed[store]) for store in self._stores}

    def find(self, store: str, sku: str, window: WeekWindow) -> Optional[ReportItem]:
        """Cached item for (store, sku, window), if any."""
        for item in self._original.get(store, []):
            if item.sku == sku and item.in_window(window):
                return item
        return None

    def find_by_id(self, item_id: str, store: str) -> Optional[ReportItem]:
        for item in self._original.get(store, []):
            if item.id == item_id:
                return item
        return None

    # ===================
    # CACHE REBUILDS
    # ===================

    def load_all(self) -> int:
        """
        Reload every store's original cache from the remote store.

        Unknown stores found in the data are registered. Rows whose store
        is empty or the aggregate scope are skipped. On failure the
        previous caches are kept.

        Returns:
            Number of items loaded
        """
        logger.info("loading_all_report_items")

        items = self.gateway.select_all()

        for store in dict.fromkeys(item.store for item in items):
            if self.register_store(store):
                logger.info("store_discovered", store=store)

        grouped: dict[str, list[ReportItem]] = {store: [] for store in self._stores}
        skipped = 0
        for item in items:
            if item.store not in grouped:
                skipped += 1
                logger.warning(
                    "report_item_without_store_skipped",
                    item_id=item.id,
                    store=item.store,
                    sku=item.sku
                )
                continue
            grouped[item.store].append(item)

        self._original = grouped
        self._refilter_all()

        loaded = len(items) - skipped
        logger.info(
            "report_items_loaded",
            count=loaded,
            skipped=skipped,
            stores=len(self._stores)
        )
        return loaded

    def refilter_to_window(self, window: WeekWindow) -> None:
        """Make `window` active and re-derive every windowed view. Local only."""
        self.window = window
        self._refilter_all()

    def _refilter_all(self) -> None:
        self._windowed = {store: self._filter(store) for store in self._stores}

    def _refilter_store(self, store: str) -> None:
        self._windowed[store] = self._filter(store)

    def _filter(self, store: str) -> list[ReportItem]:
        if self.window is None:
            return []
        return [item for item in self._original.get(store, []) if item.in_window(self.window)]

    # ===================
    # WRITE OPERATIONS
    # ===================

    def upsert(self, item: ReportItem) -> ReportItem:
        """
        Save an item: update when it has an id, insert otherwise.

        The item is validated and recomputed first. The canonical row
        returned by the gateway replaces (or is appended to) the cache.

        Raises:
            ValidationError: before any remote call
            ConflictError, ConnectivityError, ReportItemNotFoundError: from the gateway
        """
        validate_report_item(item)
        item = recompute(item)

        if item.id:
            saved = self.gateway.update(item)
        else:
            saved = self.gateway.insert(item)

        self._apply_saved(saved)

        logger.info(
            "report_item_saved",
            item_id=saved.id,
            store=saved.store,
            sku=saved.sku,
            fill_rate=saved.fill_rate
        )
        return saved

    def _apply_saved(self, saved: ReportItem) -> None:
        self.register_store(saved.store)

        items = self._original[saved.store]
        for index, existing in enumerate(items):
            if saved.id is not None and existing.id == saved.id:
                items[index] = saved
                break
        else:
            items.append(saved)

        self._refilter_store(saved.store)

    def remove(self, item_id: str, store: str) -> None:
        """
        Delete an item remotely, then drop it from the store's caches.

        Raises:
            ReportItemNotFoundError, ConnectivityError: from the gateway
        """
        self.gateway.delete(item_id)

        self._original[store] = [
            item for item in self._original.get(store, []) if item.id != item_id
        ]
        self._refilter_store(store)

        logger.info("report_item_removed", item_id=item_id, store=store)

    def drop_window(self, window: WeekWindow, store: Optional[str] = None) -> int:
        """
        Drop cached items of a week after a remote bulk delete.

        Args:
            window: Week to drop
            store: Only this store; None for every store

        Returns:
            Number of cached items dropped
        """
        stores = [store] if store else list(self._stores)
        dropped = 0
        for name in stores:
            if name not in self._original:
                continue
            kept = [item for item in self._original[name] if not item.in_window(window)]
            dropped += len(self._original[name]) - len(kept)
            self._original[name] = kept
            self._refilter_store(name)
        return dropped
