"""
Chart Command Engine Interface

Defines the contract for applying chart commands to a visualization state.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from tradecraft.services.base import BaseService
from tradecraft.schemas.chart import ChartCommand, VisualizationState
from tradecraft.services.chart.validator import ValidationReport

# Receives intermediate states (e.g. isLoading=true while a reload is pending)
StatePublisher = Callable[[VisualizationState], None]


@dataclass
class ChartBatch:
    """Untrusted command batch together with the state it applies to."""

    state: VisualizationState
    actions: Any


@dataclass
class BatchResult:
    """Resulting state plus validator diagnostics."""

    state: VisualizationState
    report: ValidationReport


class ChartEngineInterface(BaseService[ChartBatch, BatchResult]):
    """
    Chart Command Engine Contract.

    INPUT: ChartBatch
        - state: current VisualizationState
        - actions: raw command payloads (validated here)

    OUTPUT: BatchResult
        - state: state after applying every valid command, in order
        - report: accepted commands and rejection diagnostics

    Commands run strictly one after another; a reload suspends the batch
    until it completes or fails. Nothing raises past this boundary.
    """

    @property
    def name(self) -> str:
        return "ChartCommandEngine"

    @abstractmethod
    async def execute(
        self, input_data: ChartBatch, publish: Optional[StatePublisher] = None
    ) -> BatchResult:
        """Validate then apply an untrusted batch."""
        pass

    @abstractmethod
    async def apply_commands(
        self,
        state: VisualizationState,
        commands: Sequence[ChartCommand],
        publish: Optional[StatePublisher] = None,
    ) -> VisualizationState:
        """Apply already-validated commands (e.g. lesson actions)."""
        pass

    @abstractmethod
    async def apply(
        self,
        state: VisualizationState,
        command: ChartCommand,
        publish: Optional[StatePublisher] = None,
    ) -> VisualizationState:
        """Apply a single validated command."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
