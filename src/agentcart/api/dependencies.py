# src/agentcart/api/dependencies.py
import logging
from functools import lru_cache

import httpx
from fastapi import Depends, Security

from agentcart.adapters.product_search_function import ProductSearchFunctionAdapter
from agentcart.adapters.static_catalog import StaticCatalogAdapter
from agentcart.core.config import Settings, get_settings
from agentcart.core.security import get_tenant_id
from agentcart.domain.ports import ProductSearchPort
from agentcart.services.search_service import SearchService
from agentcart.services.search_session import SearchSession, SearchSessionRegistry

logger = logging.getLogger(__name__)


# Shared HTTP Client (Connection Pooling)
@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": "AgentCartSearch/1.0"},
        follow_redirects=True,
    )


@lru_cache
def get_static_catalog_adapter(path: str = "") -> StaticCatalogAdapter:
    if not path:
        logger.warning(
            "No product search URL or static catalog configured, searches return no products"
        )
        return StaticCatalogAdapter()
    return StaticCatalogAdapter.from_json_file(path)


def get_search_source(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ProductSearchPort:
    """Product-Search-Function, falls konfiguriert, sonst der Offline-Katalog."""
    if not settings.product_search_url:
        return get_static_catalog_adapter(settings.static_catalog_path)
    return ProductSearchFunctionAdapter(
        http_client=client,
        url=settings.product_search_url,
        api_key=settings.product_search_api_key,
        timeout=settings.product_search_timeout_seconds,
    )


# Singleton Session Registry (Initialisiert beim ersten Zugriff)
_session_registry: SearchSessionRegistry | None = None


def get_session_registry(
    settings: Settings = Depends(get_settings),
) -> SearchSessionRegistry:
    global _session_registry
    if _session_registry is None:
        _session_registry = SearchSessionRegistry(
            cache_max_size=settings.search_cache_max_size,
            cache_ttl_seconds=settings.search_cache_ttl_seconds,
            history_max_size=settings.search_history_max_size,
        )
    return _session_registry


def get_search_session(
    tenant_id: str = Security(get_tenant_id),
    registry: SearchSessionRegistry = Depends(get_session_registry),
) -> SearchSession:
    return registry.get(tenant_id)


def get_search_service(
    source: ProductSearchPort = Depends(get_search_source),
    session: SearchSession = Depends(get_search_session),
    settings: Settings = Depends(get_settings),
) -> SearchService:
    return SearchService(
        source=source,
        session=session,
        max_queries=settings.max_queries_per_search,
        default_country=settings.default_country,
        default_currency=settings.default_currency,
    )
