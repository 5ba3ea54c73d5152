from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence

from agentcart.domain.models import (
    Product,
    RawSearchProduct,
    SearchBatch,
    SearchRequest,
    SortOption,
    UserPreferences,
)
from agentcart.domain.ports import ExternalApiError, InvalidSearchError, ProductSearchPort
from agentcart.services.product_normalizer import normalize_products
from agentcart.services.ranking import insert_sorted, rank_products
from agentcart.services.search_markers import extract_search_markers
from agentcart.services.search_session import SearchSession

logger = logging.getLogger(__name__)

_DEFAULT_USER_CONTEXT = "Shopping"


def resolve_queries(request: SearchRequest) -> list[str]:
    """
    Explizite Suchbegriffe haben Vorrang, sonst werden die [SEARCH: ...]-Marker
    aus dem Agenten-Text gelesen.

    Raises:
        InvalidSearchError: Wenn kein nicht-leerer Suchbegriff übrig bleibt.
    """
    queries = [q for q in request.queries if q.strip()]
    if not queries and request.text:
        queries = extract_search_markers(request.text)
    if not queries:
        raise InvalidSearchError("At least one search query is required.")
    return queries


class SearchService:
    """
    Orchestriert eine Produktsuche: Cache zuerst, dann die externe Quelle.

    Ergebnisse kommen schrittweise als SearchBatch: gecachte Teilergebnisse
    sofort, danach das vollständige Ergebnis. Fehler der Quelle führen nicht
    zum Abbruch, es bleibt beim gecachten Stand.
    """

    def __init__(
        self,
        source: ProductSearchPort,
        session: SearchSession,
        max_queries: int = 4,
        default_country: str = "us",
        default_currency: str = "USD",
    ) -> None:
        self._source = source
        self._session = session
        self._max_queries = max_queries
        self._default_country = default_country
        self._default_currency = default_currency

    async def iter_search(
        self,
        queries: Sequence[str],
        user_context: str | None = None,
        preferences: UserPreferences | None = None,
        sort_by: SortOption = SortOption.BEST_MATCH,
    ) -> AsyncIterator[SearchBatch]:
        limited = [q.strip() for q in queries if q.strip()][: self._max_queries]
        if not limited:
            return

        cache = self._session.cache
        combined_key = "|".join(sorted(limited))
        for query in limited:
            self._session.history.add(query)

        # 1. Kombinierter Treffer: sofort fertig
        cached = cache.get(combined_key)
        if cached is not None:
            yield self._batch(limited, cached, preferences, sort_by, from_cache=True)
            return

        # 2. Einzelne Suchbegriffe aus dem Cache bedienen
        cached_results: list[RawSearchProduct] = []
        uncached: list[str] = []
        for query in limited:
            hit = cache.get(query)
            if hit is not None:
                cached_results.extend(hit)
            else:
                uncached.append(query)

        if not uncached:
            cache.set(combined_key, cached_results)
            yield self._batch(limited, cached_results, preferences, sort_by, from_cache=True)
            return

        shown: list[Product] = []
        if cached_results:
            partial = self._batch(
                limited, cached_results, preferences, sort_by, from_cache=True, complete=False
            )
            shown = partial.products
            yield partial

        # 3. Rest aus der externen Quelle
        country = (preferences.country if preferences else None) or self._default_country
        currency = (preferences.currency if preferences else None) or self._default_currency
        try:
            fetched = await self._source.search(
                queries=uncached,
                user_context=user_context or _DEFAULT_USER_CONTEXT,
                country=country,
                currency=currency,
            )
        except ExternalApiError as e:
            logger.warning("Product search failed for %s, serving cached results: %s", uncached, e)
            yield SearchBatch(queries=limited, products=shown, from_cache=True, complete=True)
            return

        new_products = normalize_products(fetched, preferences)

        cache.set(combined_key, [*cached_results, *fetched])
        for query in uncached:
            # Näherung: jeder Suchbegriff bekommt das gesamte Ergebnis
            cache.set(query, fetched)

        if shown:
            products = shown
            for product in new_products:
                products = insert_sorted(products, product, products, sort_by)
        else:
            products = rank_products(new_products, sort_by)
        yield SearchBatch(queries=limited, products=products, from_cache=False, complete=True)

    async def search(
        self,
        queries: Sequence[str],
        user_context: str | None = None,
        preferences: UserPreferences | None = None,
        sort_by: SortOption = SortOption.BEST_MATCH,
    ) -> SearchBatch:
        last = SearchBatch(queries=[], products=[], from_cache=False, complete=True)
        async for batch in self.iter_search(queries, user_context, preferences, sort_by):
            last = batch
        return last

    @staticmethod
    def _batch(
        queries: list[str],
        raw_products: list[RawSearchProduct],
        preferences: UserPreferences | None,
        sort_by: SortOption,
        from_cache: bool,
        complete: bool = True,
    ) -> SearchBatch:
        products = rank_products(normalize_products(raw_products, preferences), sort_by)
        return SearchBatch(
            queries=queries, products=products, from_cache=from_cache, complete=complete
        )
