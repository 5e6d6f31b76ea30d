"""API v1 router aggregator."""

from fastapi import APIRouter

from aso_combos.api.v1 import combos

api_router = APIRouter()

api_router.include_router(combos.router, prefix="/combos", tags=["Combos"])
