"""
Chart Command Engine Implementation

State machine over VisualizationState. Synchronous commands go through the
pure `reduce_state` reducer; SET_SYMBOL, SET_TIMEFRAME and LOAD_CANDLES also
suspend on a candle reload before the next command starts.
"""

import logging
from typing import Callable, Optional, Sequence

from tradecraft.core.config import settings
from tradecraft.schemas.chart import (
    DEFAULT_INDICATOR_PARAMS,
    AddAnnotationCommand,
    AddIndicatorCommand,
    ChartCommand,
    FocusRangeCommand,
    HighlightPoint,
    HighlightPointsCommand,
    HighlightRegionCommand,
    IndicatorConfig,
    LoadCandlesCommand,
    SetSymbolCommand,
    SetTimeframeCommand,
    UpdateIndicatorParamsCommand,
    VisualizationState,
)
from tradecraft.services.chart.interface import (
    BatchResult,
    ChartBatch,
    ChartEngineInterface,
    StatePublisher,
)
from tradecraft.services.chart.validator import validate_commands
from tradecraft.services.market_data.interface import CandleSourceInterface

logger = logging.getLogger(__name__)


# =============================================================================
# REDUCER
# =============================================================================


def _set_symbol(state: VisualizationState, command: SetSymbolCommand) -> VisualizationState:
    return state.model_copy(update={"symbol": command.symbol})


def _set_timeframe(state: VisualizationState, command: SetTimeframeCommand) -> VisualizationState:
    return state.model_copy(update={"timeframe": command.timeframe})


def _add_indicator(state: VisualizationState, command: AddIndicatorCommand) -> VisualizationState:
    if command.params is not None:
        params = dict(command.params)
    else:
        params = dict(DEFAULT_INDICATOR_PARAMS[command.indicator])

    config = IndicatorConfig(name=command.indicator, params=params, visible=True)

    # Upsert: replace in place, append only if the name is new
    if state.get_indicator(command.indicator) is not None:
        indicators = [config if i.name == command.indicator else i for i in state.indicators]
    else:
        indicators = [*state.indicators, config]

    return state.model_copy(update={"indicators": indicators})


def _update_indicator_params(
    state: VisualizationState, command: UpdateIndicatorParamsCommand
) -> VisualizationState:
    if state.get_indicator(command.indicator) is None:
        return state

    indicators = [
        i.model_copy(update={"params": dict(command.params)}) if i.name == command.indicator else i
        for i in state.indicators
    ]
    return state.model_copy(update={"indicators": indicators})


def _highlight_points(state: VisualizationState, command: HighlightPointsCommand) -> VisualizationState:
    return state.model_copy(update={"highlights": [*state.highlights, *command.points]})


def _highlight_region(state: VisualizationState, command: HighlightRegionCommand) -> VisualizationState:
    # A region is rendered as its two boundary markers
    region = command.region
    points = [
        HighlightPoint(
            time=region.from_time,
            pane=region.pane,
            label=f"Start: {region.label}" if region.label else None,
        ),
        HighlightPoint(
            time=region.to_time,
            pane=region.pane,
            label=f"End: {region.label}" if region.label else None,
        ),
    ]
    return state.model_copy(update={"highlights": [*state.highlights, *points]})


def _add_annotation(state: VisualizationState, command: AddAnnotationCommand) -> VisualizationState:
    return state.model_copy(update={"annotations": [*state.annotations, command.annotation]})


def _focus_range(state: VisualizationState, command: FocusRangeCommand) -> VisualizationState:
    return state.model_copy(
        update={"visible_from": command.range.from_time, "visible_to": command.range.to_time}
    )


def _clear_highlights(state: VisualizationState, command: ChartCommand) -> VisualizationState:
    return state.model_copy(update={"highlights": [], "annotations": []})


def _clear_indicators(state: VisualizationState, command: ChartCommand) -> VisualizationState:
    return state.model_copy(update={"indicators": []})


def _no_change(state: VisualizationState, command: ChartCommand) -> VisualizationState:
    return state


_REDUCERS: dict[str, Callable[[VisualizationState, ChartCommand], VisualizationState]] = {
    "SET_SYMBOL": _set_symbol,
    "SET_TIMEFRAME": _set_timeframe,
    "LOAD_CANDLES": _no_change,
    "ADD_INDICATOR": _add_indicator,
    "UPDATE_INDICATOR_PARAMS": _update_indicator_params,
    "HIGHLIGHT_POINTS": _highlight_points,
    "HIGHLIGHT_REGION": _highlight_region,
    "ADD_ANNOTATION": _add_annotation,
    "FOCUS_RANGE": _focus_range,
    "CLEAR_HIGHLIGHTS": _clear_highlights,
    "CLEAR_INDICATORS": _clear_indicators,
}


def reduce_state(state: VisualizationState, command: ChartCommand) -> VisualizationState:
    """Apply the synchronous part of a command. Pure: returns a new state."""
    return _REDUCERS[command.type](state, command)


# =============================================================================
# ENGINE
# =============================================================================


class ChartCommandEngine(ChartEngineInterface):
    """
    Chart Command Engine.

    Applies commands one at a time; the only suspension points are candle
    reloads. A failed reload keeps the previous candles and sets
    `load_error`; the rest of the batch still runs.
    """

    def __init__(
        self,
        candle_source: CandleSourceInterface,
        candle_limit: Optional[int] = None,
    ):
        self._candle_source = candle_source
        self._candle_limit = candle_limit or settings.candle_limit

    @property
    def name(self) -> str:
        return "ChartCommandEngine"

    async def execute(
        self, input_data: ChartBatch, publish: Optional[StatePublisher] = None
    ) -> BatchResult:
        report = validate_commands(input_data.actions)
        state = await self.apply_commands(input_data.state, report.commands, publish)

        logger.info(
            f"Chart batch applied: {report.accepted_count} accepted, "
            f"{report.rejected_count} rejected"
        )
        return BatchResult(state=state, report=report)

    async def apply_commands(
        self,
        state: VisualizationState,
        commands: Sequence[ChartCommand],
        publish: Optional[StatePublisher] = None,
    ) -> VisualizationState:
        for command in commands:
            state = await self.apply(state, command, publish)
            if publish is not None:
                publish(state)
        return state

    async def apply(
        self,
        state: VisualizationState,
        command: ChartCommand,
        publish: Optional[StatePublisher] = None,
    ) -> VisualizationState:
        state = reduce_state(state, command)

        if isinstance(command, SetSymbolCommand):
            return await self._reload(state, command.symbol, state.timeframe.value, publish=publish)
        if isinstance(command, SetTimeframeCommand):
            return await self._reload(state, state.symbol, command.timeframe.value, publish=publish)
        if isinstance(command, LoadCandlesCommand):
            return await self._reload(
                state,
                command.symbol,
                command.timeframe,
                start=command.from_time,
                end=command.to_time,
                publish=publish,
            )
        return state

    async def _reload(
        self,
        state: VisualizationState,
        symbol: str,
        timeframe: str,
        start: Optional[float] = None,
        end: Optional[float] = None,
        publish: Optional[StatePublisher] = None,
    ) -> VisualizationState:
        """Replace candles, or keep the old ones and flag the error."""
        if publish is not None:
            publish(state.model_copy(update={"is_loading": True}))

        try:
            candles = await self._candle_source.fetch_candles(
                symbol, timeframe, self._candle_limit, start, end
            )
        except Exception as e:
            # Reload failures never abort the batch
            logger.error(f"Error loading candles for {symbol} {timeframe}: {e}")
            return state.model_copy(update={"is_loading": False, "load_error": str(e)})

        logger.info(f"Loaded {len(candles)} candles for {symbol} {timeframe}")
        return state.model_copy(
            update={"candles": candles, "is_loading": False, "load_error": None}
        )

    async def health_check(self) -> bool:
        return await self._candle_source.health_check()
