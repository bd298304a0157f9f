# tests/test_validator.py
import pytest

from tradecraft.schemas.chart import (
    AddIndicatorCommand,
    ClearHighlightsCommand,
    HighlightPointsCommand,
    IndicatorType,
    LoadCandlesCommand,
    PaneType,
    SetTimeframeCommand,
)
from tradecraft.schemas.market import Timeframe
from tradecraft.services.base import ValidationError
from tradecraft.services.chart.validator import (
    CommandRejectedError,
    parse_lesson_option,
    parse_lesson_options,
    validate_command,
    validate_commands,
)


class TestValidateCommand:
    def test_accepts_add_indicator(self):
        command = validate_command(
            {"type": "ADD_INDICATOR", "indicator": "MACD", "params": {"fast": 12, "slow": 26, "signal": 9}}
        )

        assert isinstance(command, AddIndicatorCommand)
        assert command.indicator == IndicatorType.MACD
        assert command.params == {"fast": 12, "slow": 26, "signal": 9}

    def test_integers_stay_integers(self):
        command = validate_command({"type": "HIGHLIGHT_POINTS", "points": [{"time": 100, "price": 1.5}]})

        assert isinstance(command.points[0].time, int)
        assert command.points[0].price == 1.5

    def test_accepts_camel_case_load_candles(self):
        command = validate_command(
            {"type": "LOAD_CANDLES", "symbol": "ETHUSDT", "timeframe": "4h", "from": 1000, "to": 2000}
        )

        assert isinstance(command, LoadCandlesCommand)
        assert command.from_time == 1000
        assert command.to_time == 2000

    def test_extra_fields_are_ignored(self):
        command = validate_command({"type": "CLEAR_HIGHLIGHTS", "reason": "cleanup"})
        assert isinstance(command, ClearHighlightsCommand)

    def test_null_optional_field_is_treated_as_absent(self):
        command = validate_command(
            {"type": "HIGHLIGHT_POINTS", "points": [{"time": 1, "price": None, "label": None}]}
        )
        assert command.points[0].price is None

    def test_timeframe_enum(self):
        command = validate_command({"type": "SET_TIMEFRAME", "timeframe": "4h"})

        assert isinstance(command, SetTimeframeCommand)
        assert command.timeframe == Timeframe.H4

    def test_pane_enum(self):
        command = validate_command(
            {"type": "HIGHLIGHT_POINTS", "points": [{"time": 1, "pane": "indicator"}]}
        )

        assert isinstance(command, HighlightPointsCommand)
        assert command.points[0].pane == PaneType.INDICATOR

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "DELETE_EVERYTHING"},
            {"indicator": "RSI"},
            {"type": None},
            {"type": 5},
        ],
    )
    def test_rejects_unknown_or_missing_type(self, payload):
        with pytest.raises(CommandRejectedError):
            validate_command(payload)

    @pytest.mark.parametrize("payload", ["SET_SYMBOL", 42, None, ["ADD_INDICATOR"]])
    def test_rejects_non_objects(self, payload):
        with pytest.raises(CommandRejectedError) as exc_info:
            validate_command(payload)
        assert exc_info.value.command_type is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "SET_SYMBOL"},
            {"type": "SET_SYMBOL", "symbol": 123},
            {"type": "SET_TIMEFRAME", "timeframe": "15m"},
            {"type": "ADD_INDICATOR", "indicator": "BOLLINGER"},
            {"type": "ADD_INDICATOR", "indicator": "RSI", "params": {"period": "14"}},
            {"type": "ADD_INDICATOR", "indicator": "RSI", "params": {"period": True}},
            {"type": "ADD_INDICATOR", "indicator": "RSI", "params": {"period": float("nan")}},
            {"type": "ADD_INDICATOR", "indicator": "RSI", "params": {"period": float("inf")}},
            {"type": "UPDATE_INDICATOR_PARAMS", "indicator": "RSI"},
            {"type": "HIGHLIGHT_POINTS", "points": [{"time": "2024-01-01"}]},
            {"type": "HIGHLIGHT_POINTS", "points": [{"time": 1, "pane": "volume"}]},
            {"type": "HIGHLIGHT_POINTS", "points": "all"},
            {"type": "HIGHLIGHT_REGION", "region": {"fromTime": 1}},
            {"type": "ADD_ANNOTATION", "annotation": {"time": 1, "text": 42}},
            {"type": "FOCUS_RANGE", "range": {"fromTime": 1, "toTime": "later"}},
            {"type": "LOAD_CANDLES", "symbol": "BTCUSDT"},
        ],
    )
    def test_rejects_malformed_fields(self, payload):
        with pytest.raises(CommandRejectedError) as exc_info:
            validate_command(payload)

        assert exc_info.value.command_type == payload["type"]
        assert exc_info.value.errors

    def test_rejection_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            validate_command({"type": "NOPE"})


class TestValidateCommands:
    def test_drops_invalid_elements_and_keeps_order(self):
        report = validate_commands(
            [
                {"type": "ADD_INDICATOR", "indicator": "RSI"},
                {"type": "ADD_INDICATOR", "indicator": "VWAP"},
                {"type": "CLEAR_HIGHLIGHTS"},
                "garbage",
            ]
        )

        assert [c.type for c in report.commands] == ["ADD_INDICATOR", "CLEAR_HIGHLIGHTS"]
        assert report.accepted_count == 2
        assert report.rejected_count == 2
        assert [r.index for r in report.rejections] == [1, 3]
        assert report.rejections[0].command_type == "ADD_INDICATOR"

    @pytest.mark.parametrize("payload", [None, "ADD_INDICATOR", {"type": "CLEAR_INDICATORS"}, 7])
    def test_non_array_batch(self, payload):
        report = validate_commands(payload)

        assert report.commands == []
        assert report.rejected_count == 1
        assert report.rejections[0].index is None

    def test_empty_batch(self):
        report = validate_commands([])

        assert report.commands == []
        assert report.rejections == []


class TestLessonOptions:
    def test_lenient_parse(self):
        options = parse_lesson_options(
            [
                {
                    "id": "macd-cross",
                    "title": "Find MACD crossovers",
                    "description": "Highlight signal line crossings",
                    "actions": [
                        {"type": "ADD_INDICATOR", "indicator": "MACD"},
                        {"type": "DRAW_TRENDLINE"},
                    ],
                },
                {"id": 1, "title": "bad id"},
                {"id": "no-title"},
                "not an option",
            ]
        )

        assert len(options) == 1
        assert options[0].id == "macd-cross"
        assert [a.type for a in options[0].actions] == ["ADD_INDICATOR"]

    def test_missing_actions_gives_empty_list(self):
        option = parse_lesson_option({"id": "intro", "title": "Intro"})

        assert option is not None
        assert option.actions == []
        assert option.description is None

    def test_non_string_description_is_dropped(self):
        option = parse_lesson_option({"id": "a", "title": "A", "description": 5, "actions": []})
        assert option.description is None

    def test_non_list_payload(self):
        assert parse_lesson_options(None) == []
        assert parse_lesson_options({"id": "a"}) == []
