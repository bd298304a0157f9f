"""
Chart Command Validator

The only trust boundary between the LLM and the chart state. Converts
loosely-typed payloads into typed commands and fails closed: a command that
does not conform is rejected as a whole, never repaired or guessed at.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from tradecraft.schemas.chart import (
    COMMAND_TYPES,
    ChartCommand,
    CommandRejection,
    LessonOption,
    chart_command_adapter,
)
from tradecraft.services.base import ValidationError

logger = logging.getLogger(__name__)


class CommandRejectedError(ValidationError):
    """A single command payload failed validation."""

    def __init__(self, command_type: Optional[str], errors: list[str]):
        self.command_type = command_type
        self.errors = errors
        super().__init__(
            "CommandValidator",
            f"Rejected {command_type or 'command'}: {'; '.join(errors)}",
            {"command_type": command_type, "errors": errors},
        )


@dataclass
class ValidationReport:
    """Accepted commands (original order) plus rejection diagnostics."""

    commands: list[ChartCommand] = field(default_factory=list)
    rejections: list[CommandRejection] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.commands)

    @property
    def rejected_count(self) -> int:
        return len(self.rejections)


def _format_errors(exc: PydanticValidationError) -> list[str]:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        errors.append(f"{location}: {err['msg']}")
    return errors


def validate_command(payload: Any) -> ChartCommand:
    """
    Validate one command payload.

    Raises:
        CommandRejectedError: payload is not an object, has an unknown or
            missing `type`, or its fields do not match that type.
    """
    if not isinstance(payload, dict):
        raise CommandRejectedError(
            None, [f"command must be an object, got {type(payload).__name__}"]
        )

    command_type = payload.get("type")
    if not isinstance(command_type, str) or command_type not in COMMAND_TYPES:
        raise CommandRejectedError(
            command_type if isinstance(command_type, str) else None,
            [f"type: unknown command type {command_type!r}"],
        )

    try:
        return chart_command_adapter.validate_python(payload)
    except PydanticValidationError as e:
        raise CommandRejectedError(command_type, _format_errors(e)) from e


def validate_commands(payload: Any) -> ValidationReport:
    """
    Validate a batch element by element. Never raises.

    Invalid elements are dropped and recorded; a payload that is not an
    array yields no commands and a single rejection.
    """
    report = ValidationReport()

    if not isinstance(payload, (list, tuple)):
        rejection = CommandRejection(
            index=None,
            errors=[f"actions must be an array, got {type(payload).__name__}"],
        )
        report.rejections.append(rejection)
        logger.warning(f"Invalid command batch skipped: {rejection.errors[0]}")
        return report

    for index, item in enumerate(payload):
        try:
            report.commands.append(validate_command(item))
        except CommandRejectedError as e:
            report.rejections.append(
                CommandRejection(index=index, command_type=e.command_type, errors=e.errors)
            )
            logger.warning(f"Invalid command skipped at index {index}: {e.message}")

    return report


def parse_lesson_option(payload: Any) -> Optional[LessonOption]:
    """
    Lenient parse of one LLM-generated lesson option.

    Returns None when `id` or `title` is not a string; invalid actions are
    dropped individually.
    """
    if not isinstance(payload, dict):
        logger.warning(f"Lesson option skipped: expected object, got {type(payload).__name__}")
        return None

    option_id = payload.get("id")
    title = payload.get("title")
    if not isinstance(option_id, str) or not isinstance(title, str):
        logger.warning(f"Lesson option skipped: missing id/title ({option_id!r}, {title!r})")
        return None

    description = payload.get("description")
    report = validate_commands(payload.get("actions") or [])

    return LessonOption(
        id=option_id,
        title=title,
        description=description if isinstance(description, str) else None,
        actions=report.commands,
    )


def parse_lesson_options(payload: Any) -> list[LessonOption]:
    """Parse a list of lesson options, keeping the ones that survive."""
    if not isinstance(payload, (list, tuple)):
        return []

    options = []
    for item in payload:
        option = parse_lesson_option(item)
        if option is not None:
            options.append(option)
    return options
