"""
Port (interface) for language model providers.
Infrastructure adapters (e.g. BedrockChatAdapter) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from investai.domain.entities.tool_spec import ToolSpec


class ILanguageModel(ABC):
    @abstractmethod
    async def ainvoke(self, messages: list[Any]) -> Any:
        """Invoke the model asynchronously and return a response message."""
        ...

    @abstractmethod
    def bind_tools(self, tools: list[ToolSpec], tool_choice: str = "required") -> "ILanguageModel":
        """Return a new model instance with the given tools bound for function-calling.

        tool_choice="required" asks the provider to always answer with a tool call.
        """
        ...

    @abstractmethod
    def ensure_credentials(self) -> None:
        """Raise ConfigurationError if the provider cannot be reached for lack of credentials."""
        ...
