"""
Chart Session API Endpoints

Endpoints for driving a chart session: untrusted LLM command batches,
pre-validated lesson options, derived series and the prompt context.
"""

from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from tradecraft.schemas.chart import (
    ChartModel,
    CommandRejection,
    LessonOption,
    VisualizationState,
)
from tradecraft.schemas.indicators import ChartSeriesOutput
from tradecraft.schemas.market import Timeframe
from tradecraft.services.chart import (
    ChartSession,
    ChartSessionStore,
    SessionNotFoundError,
    ValidationReport,
    get_session_store,
)
from tradecraft.services.indicators import IndicatorService, get_indicator_service
from tradecraft.services.llm import (
    STARTER_LESSONS,
    SYSTEM_PROMPT,
    build_chart_context_block,
    build_emit_chart_actions_tool,
    parse_tool_call_arguments,
)

router = APIRouter()


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================


class SessionResponse(ChartModel):
    session_id: str
    state: VisualizationState


class ActionsRequest(ChartModel):
    """Raw command batch; validated element by element."""

    actions: Any = Field(default=None)


class BatchResponse(ChartModel):
    state: VisualizationState
    accepted_count: int
    rejected_count: int
    rejections: list[CommandRejection] = Field(default_factory=list)


class ToolCallRequest(ChartModel):
    """`arguments` of an emit_chart_actions call, as a JSON string or object."""

    arguments: Union[str, dict[str, Any]]


class ToolCallResponse(BatchResponse):
    lesson_options: list[LessonOption] = Field(default_factory=list)


class ContextResponse(ChartModel):
    system_prompt: str
    context: str


def _batch_response(state: VisualizationState, report: ValidationReport) -> BatchResponse:
    return BatchResponse(
        state=state,
        accepted_count=report.accepted_count,
        rejected_count=report.rejected_count,
        rejections=report.rejections,
    )


def get_session(
    session_id: str,
    store: ChartSessionStore = Depends(get_session_store),
) -> ChartSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


# =============================================================================
# SESSIONS
# =============================================================================


@router.post("/sessions", response_model=SessionResponse)
async def create_session(
    symbol: Optional[str] = Query(default=None),
    timeframe: Optional[Timeframe] = Query(default=None),
    load: bool = Query(default=True, description="Load candles before returning"),
    store: ChartSessionStore = Depends(get_session_store),
):
    """
    Create a chart session.

    The initial candle load goes through the engine, so a failed load is
    reported in `state.loadError` rather than as an HTTP error.
    """
    session = store.create(symbol.upper().strip() if symbol else None, timeframe)
    if load:
        await session.load_candles()
    return SessionResponse(session_id=session.id, state=session.state)


@router.get("/sessions/{session_id}", response_model=VisualizationState)
async def get_session_state(session: ChartSession = Depends(get_session)):
    """Current state of a session (reflects an in-flight reload)."""
    return session.state


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    store: ChartSessionStore = Depends(get_session_store),
):
    try:
        store.delete(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return {"deleted": session_id}


# =============================================================================
# COMMANDS
# =============================================================================


@router.post("/sessions/{session_id}/actions", response_model=BatchResponse)
async def apply_actions(
    request: ActionsRequest,
    session: ChartSession = Depends(get_session),
):
    """
    Apply an untrusted command batch.

    Invalid commands are dropped and listed in `rejections`; the remaining
    commands are applied in order.
    """
    result = await session.run_actions(request.actions)
    return _batch_response(result.state, result.report)


@router.post("/sessions/{session_id}/lessons", response_model=BatchResponse)
async def run_lesson(
    lesson: LessonOption,
    session: ChartSession = Depends(get_session),
):
    """Apply a lesson option. The body is validated strictly (422 on failure)."""
    state = await session.run_lesson(lesson)
    return BatchResponse(state=state, accepted_count=len(lesson.actions), rejected_count=0)


@router.post("/sessions/{session_id}/tool-call", response_model=ToolCallResponse)
async def apply_tool_call(
    request: ToolCallRequest,
    session: ChartSession = Depends(get_session),
):
    """Parse emit_chart_actions arguments and apply the valid actions."""
    result = parse_tool_call_arguments(request.arguments)
    state = await session.run_commands(result.actions)
    return ToolCallResponse(
        state=state,
        accepted_count=result.report.accepted_count,
        rejected_count=result.report.rejected_count,
        rejections=result.report.rejections,
        lesson_options=result.lesson_options,
    )


# =============================================================================
# DERIVED DATA
# =============================================================================


@router.get("/sessions/{session_id}/series", response_model=ChartSeriesOutput)
async def get_session_series(
    session: ChartSession = Depends(get_session),
    service: IndicatorService = Depends(get_indicator_service),
):
    """Derived series for the session's visible indicators."""
    return await service.calculate_for_state(session.state)


@router.get("/sessions/{session_id}/context", response_model=ContextResponse)
async def get_session_context(session: ChartSession = Depends(get_session)):
    """System prompt and chart context block for the next LLM turn."""
    return ContextResponse(
        system_prompt=SYSTEM_PROMPT,
        context=build_chart_context_block(session.state),
    )


@router.get("/lessons/starter", response_model=list[LessonOption])
async def get_starter_lessons():
    return STARTER_LESSONS


@router.get("/tool")
async def get_tool_definition():
    """emit_chart_actions tool definition for the LLM request."""
    return build_emit_chart_actions_tool()
