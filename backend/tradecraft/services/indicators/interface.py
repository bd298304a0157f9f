"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from tradecraft.services.base import BaseService
from tradecraft.schemas.chart import VisualizationState
from tradecraft.schemas.indicators import ChartSeriesRequest, ChartSeriesOutput


class IndicatorServiceInterface(BaseService[ChartSeriesRequest, ChartSeriesOutput]):
    """
    Indicator Engine Service Contract.

    INPUT: ChartSeriesRequest
        - candles: time-ordered candles
        - indicators: active indicator configs (invisible ones are skipped)

    OUTPUT: ChartSeriesOutput
        - Derived series aligned with the candles
        - Crossover events per indicator
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: ChartSeriesRequest) -> ChartSeriesOutput:
        """Calculate series for every visible indicator."""
        pass

    @abstractmethod
    async def calculate_for_state(self, state: VisualizationState) -> ChartSeriesOutput:
        """Calculate series for the candles and indicators of a chart state."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
