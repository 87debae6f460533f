"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .engine.offers import DEFAULT_SECTION_CATEGORIES
from .types import CATEGORIES

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_API_URL = "http://localhost:5001/api"


@dataclass
class APIConfig:
    base_url: str = DEFAULT_API_URL
    token: str = ""
    invite_id: str = ""
    timeout: float = 10.0


@dataclass
class InventoryConfig:
    expiring_days: int = 7
    categories: list[str] = field(default_factory=lambda: list(CATEGORIES))


@dataclass
class ShoppingConfig:
    currency: str = "₹"
    section_categories: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SECTION_CATEGORIES)
    )


@dataclass
class RemindersConfig:
    enabled: bool = False
    schedule: str = "0 8 * * *"
    low_stock: bool = True


@dataclass
class PantryConfig:
    api: APIConfig = field(default_factory=APIConfig)
    pantry: InventoryConfig = field(default_factory=InventoryConfig)
    shopping: ShoppingConfig = field(default_factory=ShoppingConfig)
    reminders: RemindersConfig = field(default_factory=RemindersConfig)


def load_config(path: str | Path | None = None) -> PantryConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The API URL and credentials can come from environment variables when
    the file leaves them empty.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    api = raw.get("api", {})
    pan = raw.get("pantry", {})
    shp = raw.get("shopping", {})
    rem = raw.get("reminders", {})

    # config file → environment variable → default
    base_url = api.get("base_url", "") or os.environ.get(
        "PANTRYPAL_API_URL", DEFAULT_API_URL
    )
    token = api.get("token", "") or os.environ.get("PANTRYPAL_TOKEN", "")
    invite_id = api.get("invite_id", "") or os.environ.get(
        "PANTRYPAL_INVITE_ID", ""
    )

    section_categories = {
        **DEFAULT_SECTION_CATEGORIES,
        **shp.get("section_categories", {}),
    }

    return PantryConfig(
        api=APIConfig(
            base_url=base_url.rstrip("/"),
            token=token,
            invite_id=invite_id,
            timeout=float(api.get("timeout", 10.0)),
        ),
        pantry=InventoryConfig(
            expiring_days=int(pan.get("expiring_days", 7)),
            categories=list(pan.get("categories", CATEGORIES)),
        ),
        shopping=ShoppingConfig(
            currency=shp.get("currency", "₹"),
            section_categories=section_categories,
        ),
        reminders=RemindersConfig(
            enabled=rem.get("enabled", False),
            schedule=rem.get("schedule", "0 8 * * *"),
            low_stock=rem.get("low_stock", True),
        ),
    )
