# src/agentcart/adapters/static_catalog.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter

from agentcart.domain.models import RawSearchProduct
from agentcart.domain.ports import ProductSearchPort

logger = logging.getLogger(__name__)

_CATALOG_ADAPTER = TypeAdapter(list[RawSearchProduct])


class StaticCatalogAdapter(ProductSearchPort):
    """
    Offline-Quelle über eine feste Produktliste.
    Wird verwendet, wenn keine Product-Search-Function konfiguriert ist.
    """

    def __init__(self, catalog: Iterable[RawSearchProduct] = (), limit_per_query: int = 5) -> None:
        self._catalog = list(catalog)
        self._limit = limit_per_query

    @classmethod
    def from_json_file(cls, path: str | Path, limit_per_query: int = 5) -> StaticCatalogAdapter:
        """
        Lädt den Katalog aus einer JSON-Liste von Rohtreffern.

        Raises:
            OSError: Datei nicht lesbar.
            pydantic.ValidationError: Inhalt ist keine gültige Produktliste.
        """
        catalog = _CATALOG_ADAPTER.validate_json(Path(path).read_bytes())
        logger.info("Loaded %d catalog products from %s", len(catalog), path)
        return cls(catalog, limit_per_query=limit_per_query)

    def __len__(self) -> int:
        return len(self._catalog)

    async def search(
        self,
        queries: list[str],
        user_context: str,
        country: str,
        currency: str,
    ) -> list[RawSearchProduct]:
        results: list[RawSearchProduct] = []
        for query in queries:
            terms = query.lower().split()
            matches = [p for p in self._catalog if p not in results and self._matches(p, terms)]
            results.extend(matches[: self._limit])
        return results

    @staticmethod
    def _matches(product: RawSearchProduct, terms: list[str]) -> bool:
        haystack = " ".join(
            part for part in (product.name, product.description, product.category) if part
        ).lower()
        return any(term in haystack for term in terms)
