# src/agentcart/api/v1/router.py
from fastapi import APIRouter

from agentcart.api.v1 import ranking, search

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(search.router)
api_router.include_router(ranking.router)
