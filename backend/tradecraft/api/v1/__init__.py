"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from tradecraft.api.v1.endpoints import chart, indicators, market

router = APIRouter()

# Include all endpoint routers
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
router.include_router(chart.router, prefix="/chart", tags=["Chart"])
