# src/services/catalog_controller.py

"""Online/offline reconciliation for catalog and product loads."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from src.config.settings import Settings
from src.errors import NoDataAvailable, RemoteError, StoreError
from src.models.product import Product
from src.services.connectivity import ConnectivitySource
from src.sources.remote_source import RemoteSource
from src.storage.catalog_store import CatalogStore, ReadStatus, StoreRead

logger = logging.getLogger("catalog_browser.controller")

OFFLINE_ADVISORY = "Offline Mode - Showing cached data"
CONNECTION_ERROR_ADVISORY = "Using cached data due to connection error."
NO_PRODUCTS_OFFLINE = "No products available offline."
PRODUCT_NOT_CACHED = "Product not found in database."


class Provenance(Enum):
    """Where the data of a load result came from."""

    LIVE = "live"
    CACHED = "cached"


@dataclass
class CatalogResult:
    """Outcome of a successful catalog load."""

    products: list[Product]
    provenance: Provenance
    connected: bool
    advisory: str | None = None
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )
    write_failures: int = 0


@dataclass
class ItemResult:
    """Outcome of a successful single-product load."""

    product: Product
    provenance: Provenance
    connected: bool
    advisory: str | None = None
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )
    write_failures: int = 0


def _advisory(connected: bool) -> str:
    """Pick the user-facing message for a cached result."""
    return CONNECTION_ERROR_ADVISORY if connected else OFFLINE_ADVISORY


class CatalogController:
    """Decides between remote and cached data on every load.

    Remote data always wins when it can be obtained; a successful
    catalog fetch is written through to the cache before returning.
    Any failure short of "no data anywhere" resolves into a result
    tagged ``CACHED``; only :class:`~src.errors.NoDataAvailable`
    escapes to the caller.
    """

    def __init__(
        self,
        remote: RemoteSource,
        store: CatalogStore,
        connectivity: ConnectivitySource,
        item_write_through: bool | None = None,
    ) -> None:
        self._remote = remote
        self._store = store
        self._connectivity = connectivity
        self._item_write_through = (
            Settings.ITEM_WRITE_THROUGH
            if item_write_through is None
            else item_write_through
        )
        self.connected: bool | None = None
        self._unsubscribe = connectivity.subscribe(self._on_connectivity)

    def close(self) -> None:
        """Stop listening for connectivity changes."""
        self._unsubscribe()

    def _on_connectivity(self, connected: bool) -> None:
        self.connected = connected

    # ── Private helpers ──────────────────────────────────

    async def _ensure_schema(self) -> None:
        """Create the cache table; a broken cache never aborts a load."""
        try:
            await asyncio.to_thread(self._store.ensure_schema)
        except StoreError as exc:
            logger.error("Cache unavailable: %s", exc)

    async def _check_connectivity(self) -> bool:
        connected = await asyncio.to_thread(
            self._connectivity.is_connected
        )
        self.connected = connected
        return connected

    async def _write_through(self, products: list[Product]) -> int:
        """Cache each product in order; return the failure count.

        Later duplicates of an id are no-ops, so the first
        occurrence in a batch wins.
        """
        failures = 0
        inserted = 0
        for product in products:
            try:
                if await asyncio.to_thread(
                    self._store.upsert_if_absent, product
                ):
                    inserted += 1
            except StoreError as exc:
                failures += 1
                logger.warning(
                    "Could not cache product %d: %s", product.id, exc,
                )
        logger.info(
            "Write-through: %d new, %d already cached, %d failed",
            inserted,
            len(products) - inserted - failures,
            failures,
        )
        return failures

    # ── Catalog ──────────────────────────────────────────

    async def load_catalog(self) -> CatalogResult:
        """Load the full catalog, preferring live data."""
        await self._ensure_schema()
        errors: list[str] = []
        connected = await self._check_connectivity()

        if connected:
            try:
                products = await asyncio.to_thread(
                    self._remote.fetch_catalog
                )
            except RemoteError as exc:
                logger.error(
                    "Catalog fetch failed, falling back to cache: %s", exc,
                )
                errors.append(str(exc))
            else:
                failures = await self._write_through(products)
                return CatalogResult(
                    products=products,
                    provenance=Provenance.LIVE,
                    connected=True,
                    write_failures=failures,
                )

        cached: StoreRead = await asyncio.to_thread(self._store.read_all)
        if cached.status is ReadStatus.ERROR:
            logger.error("Cache read failed: %s", cached.error)
        # An unreadable cache is treated exactly like an empty one
        if cached.status is not ReadStatus.OK:
            logger.warning("No cached products to fall back on")
            raise NoDataAvailable(NO_PRODUCTS_OFFLINE)

        logger.info(
            "Serving %d cached products (%s)",
            len(cached.products),
            "remote failed" if connected else "offline",
        )
        return CatalogResult(
            products=cached.products,
            provenance=Provenance.CACHED,
            connected=connected,
            advisory=_advisory(connected),
            errors=errors,
        )

    # ── Single product ───────────────────────────────────

    async def load_item(self, product_id: int) -> ItemResult:
        """Load one product, preferring live data."""
        if self._item_write_through:
            await self._ensure_schema()
        errors: list[str] = []
        connected = await self._check_connectivity()

        if connected:
            try:
                product = await asyncio.to_thread(
                    self._remote.fetch_one, product_id
                )
            except RemoteError as exc:
                logger.warning(
                    "Product %d fetch failed, falling back to cache: %s",
                    product_id,
                    exc,
                )
                errors.append(str(exc))
            else:
                failures = 0
                if self._item_write_through:
                    failures = await self._write_through([product])
                return ItemResult(
                    product=product,
                    provenance=Provenance.LIVE,
                    connected=True,
                    write_failures=failures,
                )

        cached: StoreRead = await asyncio.to_thread(
            self._store.read_one, product_id
        )
        if cached.status is ReadStatus.ERROR:
            logger.error("Cache read failed: %s", cached.error)
        cached_product = cached.first
        # An unreadable cache is treated exactly like a missing row
        if cached.status is not ReadStatus.OK or cached_product is None:
            raise NoDataAvailable(PRODUCT_NOT_CACHED)

        logger.info("Serving cached product %d", product_id)
        return ItemResult(
            product=cached_product,
            provenance=Provenance.CACHED,
            connected=connected,
            advisory=_advisory(connected),
            errors=errors,
        )
