"""
CONTRACT 2: Chart Commands & Visualization State

Input: untrusted command payloads (LLM tool calls, lesson options)
Output: VisualizationState

Commands form a closed tagged union keyed on `type`. Payloads are validated
strictly: no string/bool to number coercion, no NaN/Infinity, closed value
sets for timeframe, indicator and pane. Unknown extra fields are ignored.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, StrictInt, StrictStr, TypeAdapter
from pydantic.alias_generators import to_camel

from tradecraft.schemas.market import Candle, Timeframe


# =============================================================================
# ENUMS & PRIMITIVES
# =============================================================================


class IndicatorType(str, Enum):
    MACD = "MACD"
    RSI = "RSI"
    EMA = "EMA"


class PaneType(str, Enum):
    PRICE = "price"
    INDICATOR = "indicator"


FiniteFloat = Annotated[float, Field(strict=True, allow_inf_nan=False)]

# Integers stay integers; bools and numeric strings are rejected.
Number = Union[StrictInt, FiniteFloat]

COMMAND_TYPES = (
    "SET_SYMBOL",
    "SET_TIMEFRAME",
    "LOAD_CANDLES",
    "ADD_INDICATOR",
    "UPDATE_INDICATOR_PARAMS",
    "HIGHLIGHT_POINTS",
    "HIGHLIGHT_REGION",
    "ADD_ANNOTATION",
    "FOCUS_RANGE",
    "CLEAR_HIGHLIGHTS",
    "CLEAR_INDICATORS",
)

DEFAULT_INDICATOR_PARAMS: dict[IndicatorType, dict[str, int]] = {
    IndicatorType.MACD: {"fast": 12, "slow": 26, "signal": 9},
    IndicatorType.RSI: {"period": 14},
    IndicatorType.EMA: {"period": 20},
}


class ChartModel(BaseModel):
    """Base for chart wire models: camelCase on the wire, immutable."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


# =============================================================================
# SHARED PAYLOADS
# =============================================================================


class HighlightPoint(ChartModel):
    """Marker on a single candle (price pane) or indicator value."""

    time: Number
    price: Optional[Number] = None
    pane: Optional[PaneType] = None
    label: Optional[StrictStr] = None


class HighlightRegion(ChartModel):
    from_time: Number
    to_time: Number
    pane: Optional[PaneType] = None
    label: Optional[StrictStr] = None


class Annotation(ChartModel):
    """Text label pinned to a point in time."""

    time: Number
    price: Optional[Number] = None
    text: StrictStr
    pane: Optional[PaneType] = None


class TimeRange(ChartModel):
    from_time: Number
    to_time: Number


# =============================================================================
# COMMANDS
# =============================================================================


class SetSymbolCommand(ChartModel):
    type: Literal["SET_SYMBOL"]
    symbol: StrictStr


class SetTimeframeCommand(ChartModel):
    type: Literal["SET_TIMEFRAME"]
    timeframe: Timeframe


class LoadCandlesCommand(ChartModel):
    """Reload candles; `from`/`to` are passed through to the candle source."""

    type: Literal["LOAD_CANDLES"]
    symbol: StrictStr
    timeframe: StrictStr
    from_time: Optional[Number] = Field(default=None, alias="from")
    to_time: Optional[Number] = Field(default=None, alias="to")


class AddIndicatorCommand(ChartModel):
    type: Literal["ADD_INDICATOR"]
    indicator: IndicatorType
    params: Optional[dict[StrictStr, Number]] = None


class UpdateIndicatorParamsCommand(ChartModel):
    type: Literal["UPDATE_INDICATOR_PARAMS"]
    indicator: IndicatorType
    params: dict[StrictStr, Number]


class HighlightPointsCommand(ChartModel):
    type: Literal["HIGHLIGHT_POINTS"]
    points: list[HighlightPoint]


class HighlightRegionCommand(ChartModel):
    type: Literal["HIGHLIGHT_REGION"]
    region: HighlightRegion


class AddAnnotationCommand(ChartModel):
    type: Literal["ADD_ANNOTATION"]
    annotation: Annotation


class FocusRangeCommand(ChartModel):
    type: Literal["FOCUS_RANGE"]
    range: TimeRange


class ClearHighlightsCommand(ChartModel):
    type: Literal["CLEAR_HIGHLIGHTS"]


class ClearIndicatorsCommand(ChartModel):
    type: Literal["CLEAR_INDICATORS"]


ChartCommand = Annotated[
    Union[
        SetSymbolCommand,
        SetTimeframeCommand,
        LoadCandlesCommand,
        AddIndicatorCommand,
        UpdateIndicatorParamsCommand,
        HighlightPointsCommand,
        HighlightRegionCommand,
        AddAnnotationCommand,
        FocusRangeCommand,
        ClearHighlightsCommand,
        ClearIndicatorsCommand,
    ],
    Field(discriminator="type"),
]

chart_command_adapter: TypeAdapter = TypeAdapter(ChartCommand)

# Commands that suspend on a candle reload.
RELOAD_COMMAND_TYPES = frozenset({"SET_SYMBOL", "SET_TIMEFRAME", "LOAD_CANDLES"})


class CommandRejection(ChartModel):
    """Diagnostic record for a command dropped by the validator."""

    index: Optional[int] = Field(
        default=None, description="Position in the batch; None when the batch itself is malformed"
    )
    command_type: Optional[str] = None
    errors: list[str] = Field(default_factory=list)


class LessonOption(ChartModel):
    """
    Named, pre-validated command batch triggered by a single user gesture.
    Sent by: LLM (parsed leniently) / frontend (validated strictly)
    """

    id: StrictStr
    title: StrictStr
    description: Optional[StrictStr] = None
    actions: list[ChartCommand] = Field(default_factory=list)


# =============================================================================
# VISUALIZATION STATE
# =============================================================================


class IndicatorConfig(ChartModel):
    """Active indicator. At most one config per `name` in a state."""

    name: IndicatorType
    params: dict[str, Number] = Field(default_factory=dict)
    visible: bool = True


class VisualizationState(ChartModel):
    """
    Canonical chart state.

    Written only by the chart command engine; read by the renderer,
    the indicator service and the prompt context builder.
    """

    symbol: str = "BTCUSDT"
    timeframe: Timeframe = Timeframe.D1
    candles: list[Candle] = Field(default_factory=list)
    indicators: list[IndicatorConfig] = Field(default_factory=list)
    highlights: list[HighlightPoint] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)
    visible_from: Optional[Number] = None
    visible_to: Optional[Number] = None
    is_loading: bool = False
    load_error: Optional[str] = None

    def get_indicator(self, name: IndicatorType) -> Optional[IndicatorConfig]:
        """Return the active config for `name`, if any."""
        for config in self.indicators:
            if config.name == name:
                return config
        return None
