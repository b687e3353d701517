# src/config/settings.py

"""Central configuration for the catalog_browser application."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Central configuration for the catalog_browser application."""

    # --- Remote catalog ---
    API_BASE_URL: str = os.getenv(
        "CATALOG_API_BASE_URL", "https://fakestoreapi.com"
    ).rstrip("/")
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Attempts per request
    RETRY_BACKOFF: float = 1.0          # Base sleep between attempts (secs)
    CLOUDSCRAPER_FALLBACK: bool = True  # Last-resort challenge solver

    # --- Connectivity ---
    CONNECTIVITY_PROBE_URL: str = os.getenv(
        "CATALOG_PROBE_URL", API_BASE_URL
    )
    CONNECTIVITY_TIMEOUT: int = 5

    # --- Reconciliation ---
    ITEM_WRITE_THROUGH: bool = _env_flag(
        "CATALOG_ITEM_WRITE_THROUGH", True
    )

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain;q=0.9, */*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
    }
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    CATALOG_DB_PATH: Path = Path(
        os.getenv("CATALOG_DB_PATH", str(DATA_DIR / "products.db"))
    )
    LOGS_DIR: Path = BASE_DIR / "logs"
