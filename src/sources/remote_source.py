# src/sources/remote_source.py

"""HTTP adapter for the upstream product catalog API."""

import json
import logging
import time
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.errors import NotFound, RemoteError
from src.models.product import Product, Rating

logger = logging.getLogger("catalog_browser.remote")

# Statuses worth another attempt
_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


def parse_product(payload: dict[str, Any]) -> Product:
    """Build a Product from one upstream JSON object.

    Raises ``KeyError`` / ``TypeError`` / ``ValueError`` when the
    payload has no usable ``id``.  Missing rating fields default to 0.
    """
    raw_rating = payload.get("rating") or {}
    if not isinstance(raw_rating, dict):
        raw_rating = {}
    return Product(
        id=int(payload["id"]),
        title=str(payload.get("title") or ""),
        price=float(payload.get("price") or 0),
        category=str(payload.get("category") or ""),
        description=str(payload.get("description") or ""),
        image=str(payload.get("image") or ""),
        rating=Rating(
            rate=float(raw_rating.get("rate") or 0),
            count=int(raw_rating.get("count") or 0),
        ),
    )


class RemoteSource:
    """Fetches the catalog and single products from the upstream API.

    Has no side effects beyond the network call.  Every failure is
    reported as :class:`~src.errors.RemoteError` (or its subclass
    :class:`~src.errors.NotFound`).
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    # Cloudflare challenge page markers
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def _validate_response(self, text: str) -> bool:
        """Reject Cloudflare challenge pages and CAPTCHA interstitials."""
        if text.lstrip().startswith(("{", "[")) or not text.strip():
            return True
        lower = text.lower()
        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                logger.warning(
                    "Cloudflare challenge detected (marker: '%s')",
                    marker,
                )
                return False
        for keyword in self.settings.CAPTCHA_KEYWORDS:
            if keyword in lower:
                logger.warning("CAPTCHA keyword '%s' detected", keyword)
                return False
        return True

    def _fetch_get(self, url: str) -> str | None:
        """GET *url* with retries and return the response body.

        Returns ``None`` on a 404, which is final and never retried.
        Raises :class:`RemoteError` once every attempt has failed.
        """
        last_error = "no attempts made"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=self.settings.DEFAULT_HEADERS,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                last_error = str(exc)
                logger.warning(
                    "Request error on attempt %d for %s: %s",
                    attempt + 1,
                    url,
                    exc,
                    exc_info=True,
                )
                time.sleep(self.settings.RETRY_BACKOFF * (attempt + 1))
                continue

            if resp.status_code == 404:
                return None
            if resp.status_code == 200:
                if self._validate_response(resp.text):
                    return str(resp.text)
                last_error = "challenge page"
                time.sleep(self.settings.RETRY_BACKOFF * (attempt + 1))
                continue

            last_error = f"HTTP {resp.status_code}"
            logger.warning(
                "HTTP %d on attempt %d for %s",
                resp.status_code,
                attempt + 1,
                url,
            )
            if resp.status_code not in _RETRYABLE_STATUSES:
                break
            time.sleep(self.settings.RETRY_BACKOFF * (attempt + 1))

        if self.settings.CLOUDSCRAPER_FALLBACK:
            status, body = self._fetch_with_cloudscraper(url)
            if status == 404:
                return None
            if body is not None:
                return body

        raise RemoteError(f"GET {url} failed: {last_error}")

    def _fetch_with_cloudscraper(
        self, url: str,
    ) -> tuple[int, str | None]:
        """Last-resort GET through cloudscraper's challenge solver.

        Returns the status code (0 on transport failure) and the body
        of a usable 200 response.
        """
        logger.info(
            "curl_cffi exhausted, falling back to cloudscraper for %s", url,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            logger.error(
                "cloudscraper fallback also failed: %s", exc, exc_info=True,
            )
            return 0, None
        status = int(resp.status_code)
        text = str(resp.text)
        if status == 200 and self._validate_response(text):
            return status, text
        logger.warning("cloudscraper fallback got HTTP %d", status)
        return status, None

    def _get_json(self, url: str) -> Any:
        """Fetch *url* and decode its JSON body.

        Returns ``None`` for a 404 or an empty body.
        """
        body = self._fetch_get(url)
        if body is None or not body.strip():
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise RemoteError(f"Invalid JSON from {url}: {exc}") from exc

    # ── Public API ───────────────────────────────────────

    def fetch_catalog(self) -> list[Product]:
        """Fetch the full catalog, in upstream order."""
        url = f"{self.base_url}/products"
        data = self._get_json(url)
        if not isinstance(data, list):
            raise RemoteError(
                f"Expected a JSON array from {url}, "
                f"got {type(data).__name__}"
            )

        products: list[Product] = []
        dropped = 0
        for entry in data:
            try:
                products.append(parse_product(entry))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.debug("Dropped malformed catalog entry: %r", entry)
                dropped += 1
        if dropped:
            logger.info("Dropped %d malformed catalog entries", dropped)

        logger.info("Fetched %d products from %s", len(products), url)
        return products

    def fetch_one(self, product_id: int) -> Product:
        """Fetch a single product by id."""
        url = f"{self.base_url}/products/{product_id}"
        data = self._get_json(url)

        # Upstream answers 200 with an empty body for unknown ids
        if data is None:
            raise NotFound(product_id)
        if not isinstance(data, dict):
            raise RemoteError(
                f"Expected a JSON object from {url}, "
                f"got {type(data).__name__}"
            )
        try:
            product = parse_product(data)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RemoteError(
                f"Malformed product payload from {url}: {exc}"
            ) from exc

        logger.info("Fetched product %d from %s", product.id, url)
        return product
