from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable

from pydantic import ValidationError

from agentcart.domain.models import (
    Product,
    ProductCategory,
    RawSearchProduct,
    Retailer,
    UserPreferences,
)

logger = logging.getLogger(__name__)

_DEFAULT_DELIVERY = "2-3 days"
_DEFAULT_MATCH_SCORE = 80.0

_RETAILER_PATTERNS: list[tuple[tuple[str, ...], Retailer]] = [
    (("amazon",), Retailer.AMAZON),
    (("walmart",), Retailer.WALMART),
    (("target",), Retailer.TARGET),
    (("best buy", "bestbuy"), Retailer.BESTBUY),
    (("ebay",), Retailer.EBAY),
    (("mercado",), Retailer.MERCADOLIBRE),
]

# Reihenfolge ist relevant: der erste Treffer gewinnt.
_CATEGORY_KEYWORDS: list[tuple[tuple[str, ...], ProductCategory]] = [
    (("tech", "electronic", "computer", "phone"), ProductCategory.TECHNOLOGY),
    (("food", "snack", "drink", "beverage", "catering"), ProductCategory.FOOD),
    (("home", "furniture", "kitchen", "decor"), ProductCategory.HOME),
    (("entertainment", "game", "music", "media"), ProductCategory.ENTERTAINMENT),
    (("tool", "hardware", "equip"), ProductCategory.TOOLS),
    (("badge", "lanyard", "tag", "wristband"), ProductCategory.BADGES),
    (("prize", "award", "gift", "trophy"), ProductCategory.PRIZES),
    (("station", "pen", "paper", "notebook"), ProductCategory.STATIONERY),
    (("projector", "screen", "speaker", "microphone"), ProductCategory.EQUIPMENT),
    (("banner", "led", "balloon", "light", "flower"), ProductCategory.DECORATIONS),
]


def normalize_retailer(raw: str) -> Retailer:
    lower = raw.lower()
    for patterns, retailer in _RETAILER_PATTERNS:
        if any(p in lower for p in patterns):
            return retailer
    return Retailer.OTHER


def normalize_category(raw: str) -> ProductCategory:
    lower = raw.lower()
    for keywords, category in _CATEGORY_KEYWORDS:
        if any(k in lower for k in keywords):
            return category
    try:
        return ProductCategory(raw)
    except ValueError:
        return ProductCategory.OTHER


def _coerce_price(value: float | str | None) -> float:
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        try:
            price = float(str(value).strip())
        except ValueError:
            return 0.0
    # NaN und negative Preise werden wie "unbekannt" behandelt
    if price != price or price < 0:
        return 0.0
    return price


def _clamp_match_score(value: float | None) -> float:
    score = value or _DEFAULT_MATCH_SCORE
    return min(100.0, max(0.0, score))


def normalize_products(
    raw_products: Iterable[RawSearchProduct],
    preferences: UserPreferences | None = None,
) -> list[Product]:
    """
    Wandelt Rohtreffer in Products um und filtert deaktivierte Händler heraus.
    IDs sind pro Aufruf eindeutig (web-<epoch-ms>-<index>-<zufall>).
    Treffer, aus denen kein gültiges Product entsteht, werden übersprungen.
    """
    disabled = set(preferences.disabled_retailers) if preferences else set()
    stamp = int(time.time() * 1000)

    products = []
    for index, raw in enumerate(raw_products):
        try:
            product = Product(
                id=f"web-{stamp}-{index}-{uuid.uuid4().hex[:4]}",
                name=raw.name or "Unnamed product",
                description=raw.description or "",
                price=_coerce_price(raw.price),
                retailer=normalize_retailer(raw.retailer),
                category=normalize_category(raw.category),
                delivery_estimate=raw.delivery_estimate or _DEFAULT_DELIVERY,
                match_score=_clamp_match_score(raw.match_score),
                rank_reason=raw.rank_reason or "",
                product_url=raw.product_url or None,
            )
        except ValidationError:
            logger.warning("Skipping search result that is not a valid product", exc_info=True)
            continue
        if product.retailer not in disabled:
            products.append(product)
    return products
