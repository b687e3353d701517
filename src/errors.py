# src/errors.py

"""Exception hierarchy for catalog loading."""


class CatalogError(Exception):
    """Base class for all catalog_browser errors."""


class RemoteError(CatalogError):
    """The remote catalog could not be reached or answered non-OK."""


class NotFound(RemoteError):
    """The remote catalog reports that a product does not exist."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} not found upstream")
        self.product_id = product_id


class StoreError(CatalogError):
    """The local cache engine failed."""


class NoDataAvailable(CatalogError):
    """Neither the remote source nor the cache could supply data."""
