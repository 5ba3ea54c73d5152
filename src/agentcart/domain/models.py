# src/agentcart/domain/models.py
from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


class Retailer(StrEnum):
    AMAZON = "amazon"
    WALMART = "walmart"
    TARGET = "target"
    BESTBUY = "bestbuy"
    EBAY = "ebay"
    MERCADOLIBRE = "mercadolibre"
    OTHER = "other"


class ProductCategory(StrEnum):
    TECHNOLOGY = "technology"
    FOOD = "food"
    HOME = "home"
    ENTERTAINMENT = "entertainment"
    TOOLS = "tools"
    SNACKS = "snacks"
    BADGES = "badges"
    TECH = "tech"
    DECORATIONS = "decorations"
    PRIZES = "prizes"
    STATIONERY = "stationery"
    EQUIPMENT = "equipment"
    OTHER = "other"


class SortOption(StrEnum):
    BEST_MATCH = "best-match"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    DELIVERY = "delivery"


class RankingWeights(BaseModel):
    """
    Gewichte der heuristischen Bewertung.
    match_score wirkt als Blend-Faktor gegen die drei übrigen Gewichte,
    die als absolute Multiplikatoren verwendet werden (keine Normalisierung).
    """

    match_score: float = Field(default=0.40, ge=0)
    price_competitiveness: float = Field(default=0.25, ge=0)
    delivery_speed: float = Field(default=0.20, ge=0)
    retailer_trust: float = Field(default=0.15, ge=0)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Aggregate: Product
# Normalisiertes, händlerunabhängiges Produktmodell. Der Ranker liest es nur.
# ---------------------------------------------------------------------------


class Product(BaseModel):
    id: str
    name: str = Field(min_length=1, max_length=512)
    description: str = ""
    price: float = Field(ge=0)
    retailer: Retailer = Retailer.OTHER
    category: ProductCategory = ProductCategory.OTHER
    delivery_estimate: str = "2-3 days"
    match_score: float = Field(default=80, ge=0, le=100)
    image_url: str | None = None
    rank_reason: str | None = None
    product_url: str | None = None
    # Suchbegriff, der dieses Produkt geliefert hat
    search_group: str | None = None

    model_config = {"frozen": True}


class RawSearchProduct(BaseModel):
    """
    Rohdaten eines Treffers, wie sie die Product-Search-Function liefert (camelCase).
    Alle Felder tolerant, die Normalisierung übernimmt product_normalizer.
    """

    name: str
    description: str | None = None
    price: float | str | None = None
    retailer: str = "other"
    category: str = "other"
    delivery_estimate: str | None = Field(default=None, alias="deliveryEstimate")
    match_score: float | None = Field(default=None, alias="matchScore")
    rank_reason: str | None = Field(default=None, alias="rankReason")
    product_url: str | None = Field(default=None, alias="productUrl")

    model_config = {"populate_by_name": True, "frozen": True}


class UserPreferences(BaseModel):
    country: str | None = None
    currency: str | None = None
    disabled_retailers: list[Retailer] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Cache / History
# ---------------------------------------------------------------------------


class CacheStats(BaseModel):
    size: int
    max_size: int
    ttl_seconds: float
    frequent_queries: list[str]
    recent_queries: list[str]


class SearchHistoryEntry(BaseModel):
    query: str
    timestamp: float

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# API Request/Response Schemas
# ---------------------------------------------------------------------------


class SearchRequest(BaseModel):
    queries: list[str] = Field(default_factory=list)
    text: str | None = Field(
        default=None, description="Agenten-Antwort mit [SEARCH: ...]-Markern"
    )
    user_context: str | None = Field(default=None, max_length=2048)
    sort_by: SortOption = SortOption.BEST_MATCH
    preferences: UserPreferences | None = None


class SearchBatch(BaseModel):
    queries: list[str]
    products: list[Product]
    from_cache: bool
    complete: bool


class HistoryResponse(BaseModel):
    queries: list[str]


class RankRequest(BaseModel):
    products: list[Product]
    sort_by: SortOption = SortOption.BEST_MATCH
    weights: RankingWeights | None = None


class InsertRequest(BaseModel):
    sorted_products: list[Product]
    new_product: Product
    all_products: list[Product] | None = None
    sort_by: SortOption = SortOption.BEST_MATCH
    consistent_scoring: bool = False

    @model_validator(mode="after")
    def default_all_products(self) -> InsertRequest:
        if self.all_products is None:
            self.all_products = list(self.sorted_products)
        return self


class ScoreRequest(BaseModel):
    product: Product
    all_products: list[Product] = Field(min_length=1)
    weights: RankingWeights | None = None


class ScoreResponse(BaseModel):
    product_id: str
    score: float
