"""
emit_chart_actions Tool Call Parsing

Turns the raw `arguments` of an emit_chart_actions tool call into validated
chart commands and lesson options. Model output is untrusted: malformed JSON
produces an empty result with a diagnostic, never an exception.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Union

from tradecraft.schemas.chart import ChartCommand, CommandRejection, LessonOption
from tradecraft.services.chart.validator import (
    ValidationReport,
    parse_lesson_options,
    validate_commands,
)

logger = logging.getLogger(__name__)


@dataclass
class ToolCallResult:
    actions: list[ChartCommand] = field(default_factory=list)
    lesson_options: list[LessonOption] = field(default_factory=list)
    report: ValidationReport = field(default_factory=ValidationReport)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _rejected(message: str) -> ToolCallResult:
    report = ValidationReport(rejections=[CommandRejection(index=None, errors=[message])])
    return ToolCallResult(report=report)


def parse_tool_call_arguments(arguments: Union[str, dict[str, Any]]) -> ToolCallResult:
    """
    Parse emit_chart_actions arguments.

    Args:
        arguments: JSON string as sent by the model, or an already-decoded dict

    Returns:
        ToolCallResult with the commands that passed validation, the lesson
        options that survived lenient parsing and the validator report.
    """
    if isinstance(arguments, str):
        try:
            arguments = json.loads(_strip_code_fence(arguments))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse tool call arguments as JSON: {e}")
            return _rejected(f"arguments are not valid JSON: {e.msg}")

    if not isinstance(arguments, dict):
        logger.error(f"Tool call arguments must be an object, got {type(arguments).__name__}")
        return _rejected(f"arguments must be an object, got {type(arguments).__name__}")

    report = validate_commands(arguments.get("actions") or [])
    lesson_options = parse_lesson_options(arguments.get("lessonOptions"))

    logger.info(
        f"Tool call parsed: {report.accepted_count} actions, "
        f"{report.rejected_count} rejected, {len(lesson_options)} lesson options"
    )
    return ToolCallResult(actions=report.commands, lesson_options=lesson_options, report=report)
