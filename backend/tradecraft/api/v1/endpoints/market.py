"""
Market Data API Endpoints

Endpoints for fetching candles.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from tradecraft.core.config import settings
from tradecraft.schemas.market import MarketDataResponse, Timeframe
from tradecraft.services.market_data import (
    CandleFetchError,
    CandleSourceInterface,
    get_candle_source,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/candles", response_model=MarketDataResponse)
async def get_candles(
    symbol: Optional[str] = Query(default=None, description="Trading pair, e.g. BTCUSDT"),
    timeframe: Timeframe = Timeframe.D1,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    candle_source: CandleSourceInterface = Depends(get_candle_source),
):
    """
    Get OHLCV candles for a symbol.
    """
    symbol = (symbol or settings.default_symbol).upper().strip()
    limit = limit or settings.candle_limit

    try:
        candles = await candle_source.fetch_candles(symbol, timeframe.value, limit)
    except CandleFetchError as e:
        logger.warning(f"Candle request failed for {symbol} {timeframe.value}: {e.message}")
        raise HTTPException(
            status_code=502,
            detail=e.to_dict(),
        )

    return MarketDataResponse(symbol=symbol, timeframe=timeframe.value, candles=candles)
