# src/agentcart/domain/ports.py
from abc import ABC, abstractmethod

from agentcart.domain.models import RawSearchProduct


class ProductSearchPort(ABC):
    """
    Abstrakte Schnittstelle für externe Produktsuchen.
    Jeder Adapter MUSS dieses Interface implementieren.
    Die Orchestrierung kennt ausschließlich dieses Interface.
    """

    @abstractmethod
    async def search(
        self,
        queries: list[str],
        user_context: str,
        country: str,
        currency: str,
    ) -> list[RawSearchProduct]:
        """
        Sucht Produkte für mehrere Suchbegriffe in einem Aufruf.

        Raises:
            ExternalApiError: Bei Kommunikationsproblemen mit der externen Quelle.
        """
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class ExternalApiError(Exception):
    def __init__(self, source: str, detail: str):
        super().__init__(f"External API error from '{source}': {detail}")
        self.source = source
        self.detail = detail


class InvalidSearchError(ValueError):
    """Die Anfrage enthält keinen verwertbaren Suchbegriff."""
