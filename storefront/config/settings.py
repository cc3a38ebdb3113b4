# storefront/config/settings.py

"""Central configuration for the storefront client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront client."""

    # --- Persistence ---
    CART_STORAGE_KEY: str = "cart-storage"
    WISHLIST_STORAGE_KEY: str = "wishlist-storage"
    REVIEW_STORAGE_KEY: str = "review-storage"
    STORAGE_BACKEND: str = os.getenv(
        "STOREFRONT_STORAGE_BACKEND", "json"
    )                                   # "json" | "sqlite" | "memory"
    BLOB_VERSION: int = 1               # Bumped on blob layout changes
    PERSIST_TIMEOUT: float = 5.0        # Seconds flush() waits for writes

    # --- Catalog ---
    CATALOG_URL: str = os.getenv("STOREFRONT_CATALOG_URL", "")
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Shop ---
    CURRENCY: str = os.getenv("STOREFRONT_CURRENCY", "LKR")
    DEFAULT_SORT: str = "name-asc"

    # --- Reviews ---
    MIN_RATING: int = 1
    MAX_RATING: int = 5
    MIN_REVIEW_LENGTH: int = 10         # Characters, after stripping

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("STOREFRONT_DATA_DIR", str(BASE_DIR / "data"))
    )
    CATALOG_PATH: Path = Path(
        os.getenv(
            "STOREFRONT_CATALOG_PATH",
            str(BASE_DIR / "storefront" / "config" / "catalog.json"),
        )
    )
    STORAGE_DB_NAME: str = "storefront.db"
    LOGS_DIR: Path = BASE_DIR / "logs"
