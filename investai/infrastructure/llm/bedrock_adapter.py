"""
Infrastructure adapter: Amazon Bedrock (ChatBedrockConverse) → ILanguageModel.

All langchain_aws / boto3 details are confined here.
bind_tools() renders each ToolSpec's pydantic schema as an OpenAI-style function
definition and returns a new BedrockChatAdapter wrapping the tool-bound Runnable
so the ILanguageModel contract is preserved throughout.
"""

import os
from typing import Any

import boto3
from langchain_aws import ChatBedrockConverse
from langchain_core.utils.function_calling import convert_to_openai_tool

from investai.domain.entities.tool_spec import ToolSpec
from investai.domain.errors import ConfigurationError
from investai.domain.ports.llm_port import ILanguageModel

# Bedrock's Converse API spells "a tool must be chosen" as "any".
_TOOL_CHOICE = {"required": "any", "auto": "auto"}


class BedrockChatAdapter(ILanguageModel):
    """Wraps ChatBedrockConverse and exposes the ILanguageModel interface."""

    MODEL_ID = "us.amazon.nova-pro-v1:0"

    def __init__(
        self,
        model_id: str | None = None,
        region: str | None = None,
        _runnable: Any = None,
    ) -> None:
        """
        Args:
            model_id:  Bedrock model id; defaults to BEDROCK_MODEL_ID or MODEL_ID.
            region:    AWS region; defaults to AWS_DEFAULT_REGION or us-east-1.
            _runnable: Optional pre-configured Runnable (used internally by
                       bind_tools to wrap the tool-bound model without re-constructing
                       ChatBedrockConverse). Pass nothing for normal instantiation.
        """
        self._region = region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1")
        self._model_id = model_id or os.environ.get("BEDROCK_MODEL_ID", self.MODEL_ID)
        if _runnable is not None:
            self._llm = _runnable
        else:
            self._llm = ChatBedrockConverse(
                model=self._model_id,
                temperature=0.0,
                region_name=self._region,
            )

    async def ainvoke(self, messages: list[Any]) -> Any:
        return await self._llm.ainvoke(messages)

    def bind_tools(self, tools: list[ToolSpec], tool_choice: str = "required") -> "BedrockChatAdapter":
        """Return a new adapter that has the given tools bound for function-calling."""
        definitions = [self._to_tool_definition(spec) for spec in tools]
        bound = self._llm.bind_tools(definitions, tool_choice=_TOOL_CHOICE.get(tool_choice, tool_choice))
        return BedrockChatAdapter(model_id=self._model_id, region=self._region, _runnable=bound)

    def ensure_credentials(self) -> None:
        """Resolve the AWS credential chain without calling Bedrock.

        Raises:
            ConfigurationError: if no credentials can be found.
        """
        if boto3.Session(region_name=self._region).get_credentials() is None:
            raise ConfigurationError(
                "AWS credentials for Amazon Bedrock are not configured. Please set "
                "AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY or AWS_PROFILE in your environment."
            )

    @staticmethod
    def _to_tool_definition(spec: ToolSpec) -> dict:
        definition = convert_to_openai_tool(spec.input_schema)
        definition["function"]["name"] = spec.name
        definition["function"]["description"] = spec.description
        return definition
