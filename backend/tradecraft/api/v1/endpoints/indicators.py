"""
Indicator API Endpoints

Endpoints for derived indicator series.
"""

from fastapi import APIRouter, Depends

from tradecraft.schemas.indicators import ChartSeriesOutput, ChartSeriesRequest
from tradecraft.services.indicators import IndicatorService, get_indicator_service

router = APIRouter()


@router.post("/series", response_model=ChartSeriesOutput)
async def calculate_series(
    request: ChartSeriesRequest,
    service: IndicatorService = Depends(get_indicator_service),
):
    """
    Calculate EMA, MACD and RSI series for the given candles.

    Only visible indicator configs are computed. Values inside the warm-up
    region are null; crossover events are listed per source.
    """
    return await service.execute(request)
