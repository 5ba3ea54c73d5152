from typing import Annotated

from fastapi import APIRouter, Security

from agentcart.core.security import get_tenant_id
from agentcart.domain.models import (
    InsertRequest,
    Product,
    RankRequest,
    ScoreRequest,
    ScoreResponse,
)
from agentcart.services.ranking import (
    DEFAULT_WEIGHTS,
    compute_heuristic_score,
    insert_sorted,
    rank_products,
)

router = APIRouter(prefix="/ranking", tags=["Ranking"])

TenantDep = Annotated[str, Security(get_tenant_id)]


@router.post("/rank", response_model=list[Product])
async def rank(tenant_id: TenantDep, payload: RankRequest) -> list[Product]:
    return rank_products(payload.products, payload.sort_by, payload.weights)


@router.post("/insert", response_model=list[Product])
async def insert(tenant_id: TenantDep, payload: InsertRequest) -> list[Product]:
    """
    Fügt ein nachgeladenes Produkt in eine bereits sortierte Liste ein.
    Ohne all_products gilt die sortierte Liste als Kandidatenmenge.
    """
    return insert_sorted(
        payload.sorted_products,
        payload.new_product,
        payload.all_products or [],
        payload.sort_by,
        consistent_scoring=payload.consistent_scoring,
    )


@router.post("/score", response_model=ScoreResponse)
async def score(tenant_id: TenantDep, payload: ScoreRequest) -> ScoreResponse:
    value = compute_heuristic_score(
        payload.product, payload.all_products, payload.weights or DEFAULT_WEIGHTS
    )
    return ScoreResponse(product_id=payload.product.id, score=value)
