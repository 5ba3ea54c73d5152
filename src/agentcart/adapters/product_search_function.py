# src/agentcart/adapters/product_search_function.py
from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from agentcart.core.metrics import EXTERNAL_API_COUNT, EXTERNAL_API_DURATION
from agentcart.domain.models import RawSearchProduct
from agentcart.domain.ports import ExternalApiError, ProductSearchPort

logger = logging.getLogger(__name__)

_SOURCE = "product_search_function"

# ---------------------------------------------------------------------------
# Internes Rohdaten-Schema der Function-Response
# ---------------------------------------------------------------------------


class _FunctionResponse(BaseModel):
    products: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None


# ---------------------------------------------------------------------------
# Adapter-Implementierung
# ---------------------------------------------------------------------------


class ProductSearchFunctionAdapter(ProductSearchPort):
    """
    Adapter für die Product-Search-Function (Websuche + KI-Extraktion).
    Ein Aufruf deckt alle Suchbegriffe ab; die Function liefert camelCase-Rohdaten.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str,
        api_key: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._client = http_client
        self._url = url
        self._api_key = api_key
        self._timeout = timeout

    async def search(
        self,
        queries: list[str],
        user_context: str,
        country: str,
        currency: str,
    ) -> list[RawSearchProduct]:
        payload = {
            "queries": queries,
            "userContext": user_context,
            "country": country,
            "currency": currency,
        }
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        started = time.perf_counter()
        try:
            response = await self._client.post(
                self._url, json=payload, headers=headers, timeout=self._timeout
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise ExternalApiError(_SOURCE, str(e)) from e
        except httpx.RequestError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise ExternalApiError(_SOURCE, f"Connection error: {e}") from e
        finally:
            EXTERNAL_API_DURATION.labels(source=_SOURCE).observe(time.perf_counter() - started)

        try:
            raw = _FunctionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise ExternalApiError(_SOURCE, f"Invalid response body: {e}") from e

        EXTERNAL_API_COUNT.labels(source=_SOURCE, status="success").inc()
        if raw.error:
            logger.warning("Product search function reported: %s", raw.error)

        products = []
        for item in raw.products:
            try:
                products.append(RawSearchProduct.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed product in search results", exc_info=True)
        return products
