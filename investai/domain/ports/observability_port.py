"""
Port (interface) for tracing handlers attached to agent runs.
Infrastructure adapters (e.g. LangfuseObservabilityHandler) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any


class IObservabilityHandler(ABC):
    @abstractmethod
    def as_callback(self) -> Any:
        """Return the framework-native callback passed in the graph run config."""
        ...

    @abstractmethod
    def flush(self) -> None:
        """Send buffered traces; called once at application shutdown."""
        ...
