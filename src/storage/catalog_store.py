# src/storage/catalog_store.py

"""SQLite-backed write-once cache of catalog products.

The cache is a mirror of a read-only upstream: a row is written the first
time its id is seen and never refreshed afterwards.  The nested rating of
the wire format is flattened into ``rating_rate`` / ``rating_count``
columns here, and reassembled on the way out; no other module knows about
the storage layout.

The connection is opened on first use, so an unusable database path
surfaces as a failed read or write rather than at construction time.

Reads never raise.  ``read_all`` / ``read_one`` report an explicit
:class:`ReadStatus` so callers can decide what an unreadable store means
to them; ``list_all`` / ``get_by_id`` fold errors into empty / ``None``.
A row whose values cannot be converted back into a Product counts as an
unreadable store.  Writes raise :class:`~src.errors.StoreError`.
"""

import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from src.config.settings import Settings
from src.errors import StoreError
from src.models.product import Product, Rating

logger = logging.getLogger("catalog_browser.store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id           INTEGER PRIMARY KEY,
    title        TEXT,
    price        REAL,
    category     TEXT,
    description  TEXT,
    image        TEXT,
    rating_rate  REAL,
    rating_count INTEGER
);
"""

_COLUMNS = (
    "id, title, price, category, description, image, "
    "rating_rate, rating_count"
)

# Engine failures plus filesystem errors from opening the file
_ENGINE_ERRORS = (sqlite3.Error, OSError)

# Raised while turning a stored row back into a Product
_CONVERSION_ERRORS = (ValueError, TypeError)


class ReadStatus(Enum):
    """Outcome of a cache read."""

    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class StoreRead:
    """Result of a cache read, with the failure kept rather than raised."""

    status: ReadStatus
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    error: StoreError | None = None

    @property
    def first(self) -> Product | None:
        """The single product of a ``read_one``, if any."""
        return self.products[0] if self.products else None


def _row_to_product(row: tuple[object, ...]) -> Product:
    """Reassemble a flat storage row into a nested Product.

    Raises ``ValueError`` / ``TypeError`` for values that SQLite's
    loose column affinity let through but a Product cannot hold.
    """
    rate, count = row[6], row[7]
    return Product(
        id=int(str(row[0])),
        title=str(row[1] or ""),
        price=float(str(row[2] or 0)),
        category=str(row[3] or ""),
        description=str(row[4] or ""),
        image=str(row[5] or ""),
        rating=Rating(
            rate=float(str(rate)) if rate is not None else 0.0,
            count=int(str(count)) if count is not None else 0,
        ),
    )


def _product_to_row(product: Product) -> tuple[object, ...]:
    """Flatten a Product into storage column order."""
    return (
        product.id,
        product.title,
        product.price,
        product.category,
        product.description,
        product.image,
        product.rating.rate or 0.0,
        product.rating.count or 0,
    )


class CatalogStore:
    """Persistent keyed table of product records."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        self.path = db_path or Settings.CATALOG_DB_PATH
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        """Open the database on first use; caller holds the lock."""
        if self._conn is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self.path), check_same_thread=False,
            )
            logger.debug("CatalogStore opened at %s", self.path)
        return self._conn

    def close(self) -> None:
        """Close the database connection, if one was opened."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # ── Schema ───────────────────────────────────────────

    def ensure_schema(self) -> None:
        """Create the products table if it does not exist yet."""
        try:
            with self._lock:
                self._connection().executescript(_SCHEMA)
        except _ENGINE_ERRORS as exc:
            logger.error(
                "Schema initialisation failed: %s", exc, exc_info=True,
            )
            raise StoreError(f"Schema initialisation failed: {exc}") from exc

    # ── Writing ──────────────────────────────────────────

    def upsert_if_absent(self, product: Product) -> bool:
        """Insert *product* unless a row with its id already exists.

        Existing rows are left untouched.  Returns True when a row
        was inserted, False when the id was already cached.
        """
        try:
            with self._lock:
                conn = self._connection()
                cur = conn.execute(
                    f"INSERT INTO products ({_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?) "
                    "ON CONFLICT(id) DO NOTHING",
                    _product_to_row(product),
                )
                conn.commit()
                inserted = cur.rowcount == 1
        except _ENGINE_ERRORS as exc:
            logger.error(
                "Failed to cache product %s: %s",
                product.id,
                exc,
                exc_info=True,
            )
            raise StoreError(
                f"Failed to cache product {product.id}: {exc}"
            ) from exc

        if inserted:
            logger.debug("Cached product %d", product.id)
        else:
            logger.debug("Product %d already cached", product.id)
        return inserted

    # ── Reading ──────────────────────────────────────────

    def read_all(self) -> StoreRead:
        """Read every cached product, ordered by id."""
        try:
            with self._lock:
                rows = self._connection().execute(
                    f"SELECT {_COLUMNS} FROM products ORDER BY id"
                ).fetchall()
            products = [_row_to_product(r) for r in rows]
        except (*_ENGINE_ERRORS, *_CONVERSION_ERRORS) as exc:
            logger.warning("Failed to read products: %s", exc)
            return StoreRead(
                status=ReadStatus.ERROR,
                error=StoreError(f"Failed to read products: {exc}"),
            )

        logger.debug("Retrieved %d cached products", len(products))
        if not products:
            return StoreRead(status=ReadStatus.EMPTY)
        return StoreRead(status=ReadStatus.OK, products=products)

    def read_one(self, product_id: int) -> StoreRead:
        """Read a single cached product by id."""
        try:
            with self._lock:
                row = self._connection().execute(
                    f"SELECT {_COLUMNS} FROM products WHERE id = ?",
                    (product_id,),
                ).fetchone()
            product = _row_to_product(row) if row is not None else None
        except (*_ENGINE_ERRORS, *_CONVERSION_ERRORS) as exc:
            logger.warning(
                "Failed to read product %s: %s", product_id, exc,
            )
            return StoreRead(
                status=ReadStatus.ERROR,
                error=StoreError(
                    f"Failed to read product {product_id}: {exc}"
                ),
            )

        if product is None:
            return StoreRead(status=ReadStatus.EMPTY)
        return StoreRead(status=ReadStatus.OK, products=[product])

    def list_all(self) -> list[Product]:
        """Return all cached products, or ``[]`` if none are readable."""
        return self.read_all().products

    def get_by_id(self, product_id: int) -> Product | None:
        """Return the cached product with *product_id*, if any."""
        return self.read_one(product_id).first

    def count(self) -> int:
        """Number of cached products (0 when unreadable)."""
        try:
            with self._lock:
                row = self._connection().execute(
                    "SELECT COUNT(*) FROM products"
                ).fetchone()
        except _ENGINE_ERRORS as exc:
            logger.warning("Failed to count products: %s", exc)
            return 0
        return int(row[0]) if row else 0
