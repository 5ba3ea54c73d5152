"""
Heuristisches Produkt-Ranking.

Die Bewertung borgt sich das Vokabular von A*: f(n) = g(n) + h(n), wobei
g(n) der Match-Score der Suche ist und h(n) eine Schätzung aus Preis,
Lieferzeit und Händlervertrauen. Es gibt keine Graphsuche, nur die Formel.
Höheres f(n) = besseres Produkt für den Nutzer.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence

from agentcart.domain.models import Product, RankingWeights, Retailer, SortOption

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = RankingWeights()

# Händlervertrauen (0-100) nach Markenbekanntheit
RETAILER_TRUST: dict[str, int] = {
    Retailer.AMAZON: 92,
    Retailer.WALMART: 85,
    Retailer.TARGET: 82,
    Retailer.BESTBUY: 88,
    Retailer.EBAY: 70,
    Retailer.MERCADOLIBRE: 80,
    Retailer.OTHER: 50,
}
DEFAULT_TRUST = 50
DEFAULT_DELIVERY_DAYS = 7

_FIRST_NUMBER = re.compile(r"\d+")


def parse_delivery_days(estimate: str | None) -> int:
    """Erste Zahl im Freitext ("2-3 days" -> 2), sonst 7 Tage."""
    match = _FIRST_NUMBER.search(estimate or "")
    if match is None:
        return DEFAULT_DELIVERY_DAYS
    return int(match.group())


def _round2(value: float) -> float:
    # Half-up rounding, not Python's banker's rounding.
    return math.floor(value * 100 + 0.5) / 100


def compute_heuristic_score(
    product: Product,
    all_products: Sequence[Product],
    weights: RankingWeights = DEFAULT_WEIGHTS,
) -> float:
    g = product.match_score

    # Preis relativ zur Spanne aller positiven Preise. Gleiche Preise -> 100 für alle.
    prices = [p.price for p in all_products if p.price > 0]
    if prices:
        min_price = min(prices)
        price_range = (max(prices) - min_price) or 1
        price_score = 100 * (1 - (product.price - min_price) / price_range)
    else:
        price_score = 100.0

    days = parse_delivery_days(product.delivery_estimate)
    delivery_score = max(0, 100 - days * 15)

    trust_score = RETAILER_TRUST.get(product.retailer, DEFAULT_TRUST)

    h = (
        weights.price_competitiveness * price_score
        + weights.delivery_speed * delivery_score
        + weights.retailer_trust * trust_score
    )
    f = weights.match_score * g + h * (1 - weights.match_score)
    return _round2(f)


# ---------------------------------------------------------------------------
# Quicksort (Hoare), absteigend nach Score
# ---------------------------------------------------------------------------


def _partition(items: list[tuple[Product, float]], low: int, high: int) -> int:
    pivot = items[(low + high) // 2][1]
    i = low - 1
    j = high + 1
    while True:
        i += 1
        while items[i][1] > pivot:
            i += 1
        j -= 1
        while items[j][1] < pivot:
            j -= 1
        if i >= j:
            return j
        items[i], items[j] = items[j], items[i]


def _quicksort(items: list[tuple[Product, float]], low: int, high: int) -> None:
    """
    Sortiert in-place. Pivot ist immer das mittlere Element, daher
    deterministisch, aber O(n²) im schlechtesten Fall. Rekursion nur in die
    kleinere Hälfte, die größere wird iterativ abgearbeitet.
    """
    while low < high:
        p = _partition(items, low, high)
        if p - low < high - p:
            _quicksort(items, low, p)
            low = p + 1
        else:
            _quicksort(items, p + 1, high)
            high = p


def rank_products(
    products: Sequence[Product],
    sort_by: SortOption | str = SortOption.BEST_MATCH,
    weights: RankingWeights | None = None,
) -> list[Product]:
    """
    Liefert eine neue, sortierte Liste; die Eingabe bleibt unverändert.

    Preis- und Liefersortierung sind stabil. best-match bewertet jedes Produkt
    gegen die komplette Kandidatenmenge und sortiert per Quicksort absteigend.
    Unbekannte Sortieroptionen liefern die Eingabereihenfolge.
    """
    if len(products) <= 1:
        return list(products)

    if sort_by == SortOption.PRICE_LOW:
        return sorted(products, key=lambda p: p.price)
    if sort_by == SortOption.PRICE_HIGH:
        return sorted(products, key=lambda p: p.price, reverse=True)
    if sort_by == SortOption.DELIVERY:
        return sorted(products, key=lambda p: parse_delivery_days(p.delivery_estimate))
    if sort_by != SortOption.BEST_MATCH:
        logger.debug("Unknown sort option %r, keeping input order", sort_by)
        return list(products)

    weights = weights or DEFAULT_WEIGHTS
    scored = [(p, compute_heuristic_score(p, products, weights)) for p in products]
    _quicksort(scored, 0, len(scored) - 1)
    return [p for p, _ in scored]


def _sort_score(
    product: Product,
    sort_by: SortOption | str,
    candidates: Sequence[Product],
) -> float:
    if sort_by == SortOption.PRICE_LOW:
        return -product.price
    if sort_by == SortOption.PRICE_HIGH:
        return product.price
    if sort_by == SortOption.BEST_MATCH:
        return compute_heuristic_score(product, candidates)
    return -parse_delivery_days(product.delivery_estimate)


def insert_sorted(
    sorted_products: Sequence[Product],
    new_product: Product,
    all_products: Sequence[Product],
    sort_by: SortOption | str = SortOption.BEST_MATCH,
    consistent_scoring: bool = False,
) -> list[Product]:
    """
    Fügt ein Produkt per binärer Suche in eine bereits sortierte Liste ein,
    z.B. beim schrittweisen Nachladen von Suchergebnissen.

    Das neue Produkt landet vor dem ersten Element mit echt kleinerem Score,
    also hinter allen gleich bewerteten.

    Bei best-match wird das neue Produkt gegen all_products + [new_product]
    bewertet, die vorhandenen gegen all_products allein. Mit
    consistent_scoring=True werden alle gegen dieselbe erweiterte Menge bewertet.
    """
    result = list(sorted_products)
    extended = [*all_products, new_product]
    new_score = _sort_score(new_product, sort_by, extended)
    existing_candidates = extended if consistent_scoring else all_products

    low, high = 0, len(result)
    while low < high:
        mid = (low + high) // 2
        if _sort_score(result[mid], sort_by, existing_candidates) >= new_score:
            low = mid + 1
        else:
            high = mid

    result.insert(low, new_product)
    return result
