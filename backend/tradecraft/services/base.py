"""
Service Base Classes

Every chart-engine component (indicator engine, command engine) exposes one
async `execute` entry point over a typed input/output pair, plus a health
probe used by the API.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for services.

    A service:
    - Accepts one input contract (a schema model or batch)
    - Returns one output contract
    - Reports whether its dependencies are reachable
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging and error reports."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Run the service on one input.

        Args:
            input_data: Input conforming to InputT

        Returns:
            Output conforming to OutputT
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form for HTTP error bodies."""
        return {"service": self.service_name, "message": self.message, "details": self.details}


class ValidationError(ServiceError):
    """Input failed schema validation."""
    pass


class ExternalAPIError(ServiceError):
    """Upstream data provider call failed."""
    pass


class NotFoundError(ServiceError):
    """Requested resource does not exist."""
    pass
