# tests/test_llm_contract.py
import json

from tradecraft.schemas.chart import IndicatorConfig, IndicatorType, VisualizationState
from tradecraft.schemas.market import Timeframe
from tradecraft.services.llm import (
    EMIT_CHART_ACTIONS_TOOL_NAME,
    STARTER_LESSONS,
    SYSTEM_PROMPT,
    build_chart_context_block,
    build_emit_chart_actions_tool,
    get_starter_lesson,
    parse_tool_call_arguments,
)


def _collect_refs(node, refs):
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            refs.append(ref)
        for value in node.values():
            _collect_refs(value, refs)
    elif isinstance(node, list):
        for value in node:
            _collect_refs(value, refs)
    return refs


class TestToolCallParsing:
    def test_parses_actions_and_lessons(self):
        arguments = json.dumps(
            {
                "actions": [
                    {"type": "ADD_INDICATOR", "indicator": "MACD"},
                    {"type": "HIGHLIGHT_POINTS", "points": [{"time": 1704067200, "pane": "indicator"}]},
                    {"type": "EXPLODE"},
                ],
                "lessonOptions": [
                    {
                        "id": "rsi-levels",
                        "title": "RSI overbought/oversold",
                        "actions": [{"type": "ADD_INDICATOR", "indicator": "RSI"}],
                    },
                    {"title": "missing id"},
                ],
            }
        )

        result = parse_tool_call_arguments(arguments)

        assert [a.type for a in result.actions] == ["ADD_INDICATOR", "HIGHLIGHT_POINTS"]
        assert result.report.rejected_count == 1
        assert result.report.rejections[0].index == 2
        assert [o.id for o in result.lesson_options] == ["rsi-levels"]

    def test_accepts_decoded_object(self):
        result = parse_tool_call_arguments({"actions": [{"type": "CLEAR_INDICATORS"}]})
        assert [a.type for a in result.actions] == ["CLEAR_INDICATORS"]

    def test_strips_code_fence(self):
        arguments = '```json\n{"actions": [{"type": "CLEAR_HIGHLIGHTS"}]}\n```'
        result = parse_tool_call_arguments(arguments)
        assert [a.type for a in result.actions] == ["CLEAR_HIGHLIGHTS"]

    def test_invalid_json(self):
        result = parse_tool_call_arguments('{"actions": [')

        assert result.actions == []
        assert result.lesson_options == []
        assert result.report.rejected_count == 1
        assert result.report.rejections[0].index is None

    def test_non_object_json(self):
        result = parse_tool_call_arguments("[1, 2, 3]")

        assert result.actions == []
        assert result.report.rejected_count == 1

    def test_missing_actions(self):
        result = parse_tool_call_arguments("{}")

        assert result.actions == []
        assert result.report.rejections == []


class TestToolDefinition:
    def test_shape(self):
        tool = build_emit_chart_actions_tool()

        assert tool["type"] == "function"
        assert tool["function"]["name"] == EMIT_CHART_ACTIONS_TOOL_NAME
        parameters = tool["function"]["parameters"]
        assert parameters["required"] == ["actions"]
        assert set(parameters["properties"]) == {"actions", "lessonOptions"}
        assert parameters["properties"]["lessonOptions"]["items"]["required"] == ["id", "title", "actions"]

    def test_refs_resolve_against_parameters(self):
        parameters = build_emit_chart_actions_tool()["function"]["parameters"]
        definitions = parameters.get("$defs", {})

        refs = _collect_refs(parameters["properties"], [])
        assert refs
        for ref in refs:
            assert ref.startswith("#/$defs/")
            assert ref.split("/")[-1] in definitions

    def test_schema_lists_every_command(self):
        tool_json = json.dumps(build_emit_chart_actions_tool())
        for command_type in ["SET_SYMBOL", "LOAD_CANDLES", "HIGHLIGHT_REGION", "CLEAR_INDICATORS"]:
            assert command_type in tool_json

    def test_is_json_serializable(self):
        json.dumps(build_emit_chart_actions_tool())


class TestChartContext:
    def test_empty_chart(self):
        block = build_chart_context_block(VisualizationState())

        assert "[Current Chart Context]" in block
        assert "Symbol: BTCUSDT" in block
        assert "Timeframe: 1d" in block
        assert "Active Indicators: None" in block
        assert "Visible Range: Full history" in block

    def test_indicators_and_range(self):
        state = VisualizationState(
            symbol="ETHUSDT",
            timeframe=Timeframe.H4,
            indicators=[
                IndicatorConfig(name=IndicatorType.MACD, params={"fast": 12, "slow": 26, "signal": 9}),
                IndicatorConfig(name=IndicatorType.RSI, params={"period": 14}),
            ],
            visible_from=100,
            visible_to=200,
        )
        block = build_chart_context_block(state)

        assert 'Active Indicators: MACD({"fast":12,"slow":26,"signal":9}), RSI({"period":14})' in block
        assert "Visible Range: 100 - 200" in block


def test_system_prompt_mentions_tool():
    assert EMIT_CHART_ACTIONS_TOOL_NAME in SYSTEM_PROMPT


def test_starter_lessons():
    assert [lesson.id for lesson in STARTER_LESSONS] == ["add-macd", "add-rsi", "add-ema"]
    assert get_starter_lesson("add-ema").actions[0].params == {"period": 20}
    assert get_starter_lesson("unknown") is None
