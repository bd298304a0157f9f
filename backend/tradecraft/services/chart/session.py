"""
Chart Sessions

One VisualizationState per session, kept in memory and dropped with the
session. Batches on the same session are queued: a new batch waits on the
session lock until the in-flight batch (including any pending reload) has
finished. asyncio.Lock wakes waiters in FIFO order.
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from tradecraft.core.config import settings
from tradecraft.schemas.chart import (
    ChartCommand,
    LessonOption,
    LoadCandlesCommand,
    VisualizationState,
)
from tradecraft.schemas.market import Timeframe
from tradecraft.services.base import NotFoundError
from tradecraft.services.chart.interface import BatchResult, ChartBatch, ChartEngineInterface

logger = logging.getLogger(__name__)


class SessionNotFoundError(NotFoundError):
    """No chart session with the given id."""

    def __init__(self, session_id: str):
        super().__init__("ChartSessionStore", f"Unknown chart session: {session_id}")
        self.session_id = session_id


def create_default_state(
    symbol: Optional[str] = None, timeframe: Optional[Timeframe] = None
) -> VisualizationState:
    """Initial state for a new session."""
    return VisualizationState(
        symbol=symbol or settings.default_symbol,
        timeframe=timeframe or Timeframe(settings.default_timeframe),
    )


class ChartSession:
    """Single-writer holder of one chart state."""

    def __init__(self, session_id: str, state: VisualizationState, engine: ChartEngineInterface):
        self.id = session_id
        self.state = state
        self.created_at = datetime.now(timezone.utc)
        self._engine = engine
        self._lock = asyncio.Lock()

    def _publish(self, state: VisualizationState) -> None:
        self.state = state

    @property
    def is_busy(self) -> bool:
        """True while a batch is being applied."""
        return self._lock.locked()

    async def run_actions(self, actions: Any) -> BatchResult:
        """Validate and apply an untrusted batch (LLM output)."""
        async with self._lock:
            result = await self._engine.execute(
                ChartBatch(state=self.state, actions=actions), publish=self._publish
            )
            self.state = result.state
            return result

    async def run_commands(self, commands: Sequence[ChartCommand]) -> VisualizationState:
        """Apply commands that already passed validation."""
        async with self._lock:
            self.state = await self._engine.apply_commands(
                self.state, commands, publish=self._publish
            )
            return self.state

    async def run_lesson(self, lesson: LessonOption) -> VisualizationState:
        """Apply the pre-validated actions of a lesson option."""
        logger.info(f"Session {self.id}: running lesson '{lesson.id}' ({len(lesson.actions)} actions)")
        return await self.run_commands(lesson.actions)

    async def load_candles(self) -> VisualizationState:
        """Load candles for the current symbol/timeframe."""
        async with self._lock:
            command = LoadCandlesCommand(
                type="LOAD_CANDLES",
                symbol=self.state.symbol,
                timeframe=self.state.timeframe.value,
            )
            self.state = await self._engine.apply_commands(
                self.state, [command], publish=self._publish
            )
            return self.state


class ChartSessionStore:
    """In-memory session registry; the oldest session is evicted when full."""

    def __init__(self, engine: ChartEngineInterface, max_sessions: Optional[int] = None):
        self._engine = engine
        self._max_sessions = max_sessions or settings.max_chart_sessions
        self._sessions: "OrderedDict[str, ChartSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(
        self, symbol: Optional[str] = None, timeframe: Optional[Timeframe] = None
    ) -> ChartSession:
        while len(self._sessions) >= self._max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted chart session {evicted_id}")

        session = ChartSession(
            session_id=uuid.uuid4().hex,
            state=create_default_state(symbol, timeframe),
            engine=self._engine,
        )
        self._sessions[session.id] = session
        logger.info(f"Created chart session {session.id} ({session.state.symbol} {session.state.timeframe.value})")
        return session

    def get(self, session_id: str) -> ChartSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"Deleted chart session {session_id}")

    def list_ids(self) -> list[str]:
        return list(self._sessions.keys())


# Singleton instance management
_session_store: Optional[ChartSessionStore] = None


def get_session_store() -> ChartSessionStore:
    """Get or create the session store singleton."""
    global _session_store
    if _session_store is None:
        from tradecraft.services.chart.engine import ChartCommandEngine
        from tradecraft.services.market_data import get_candle_source

        _session_store = ChartSessionStore(ChartCommandEngine(get_candle_source()))
    return _session_store
