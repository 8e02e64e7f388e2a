"""
Shared stubs for the agent tests.

The language model and the financial data gateway are replaced by in-process
fakes implementing the domain ports, so no network or AWS credentials are needed.
"""

import itertools
from typing import Any, Callable, Union

import pytest
from langchain_core.messages import AIMessage

from investai.application.agent.graph import build_agent_graph
from investai.application.use_cases.run_agent import RunAgentUseCase
from investai.domain.entities.market_data import (
    HistoricalPrices,
    HistoricalRecord,
    NewsItem,
    SearchResults,
    StockInsights,
    SymbolMatch,
)
from investai.domain.errors import ConfigurationError
from investai.domain.ports.financial_data_port import IFinancialDataProvider
from investai.domain.ports.llm_port import ILanguageModel
from investai.infrastructure.entrypoints.tool_registry import create_tool_registry

_ids = itertools.count(1)


def tool_call_message(name: str, args: dict, text: str = "") -> AIMessage:
    """An assistant message requesting a single tool call."""
    return AIMessage(
        content=text,
        tool_calls=[{"name": name, "args": args, "id": f"call_{next(_ids)}", "type": "tool_call"}],
    )


def answer_message(answer: str, steps: list[dict] | None = None) -> AIMessage:
    return tool_call_message("answer", {"steps": steps or [], "answer": answer})


Decision = Union[AIMessage, Exception, Callable[[list], AIMessage]]


class ScriptedLanguageModel(ILanguageModel):
    """Replays a fixed list of decisions; the last one repeats once the script runs out."""

    def __init__(self, decisions: list[Decision], has_credentials: bool = True) -> None:
        self._decisions = list(decisions)
        self._has_credentials = has_credentials
        self.calls: list[list] = []
        self.bound_tools: list = []
        self.tool_choice: str | None = None

    async def ainvoke(self, messages: list[Any]) -> Any:
        self.calls.append(list(messages))
        index = min(len(self.calls), len(self._decisions)) - 1
        decision = self._decisions[index]
        if isinstance(decision, Exception):
            raise decision
        if callable(decision):
            return decision(messages)
        return decision

    def bind_tools(self, tools, tool_choice: str = "required") -> "ScriptedLanguageModel":
        self.bound_tools = list(tools)
        self.tool_choice = tool_choice
        return self

    def ensure_credentials(self) -> None:
        if not self._has_credentials:
            raise ConfigurationError("AWS credentials for Amazon Bedrock are not configured.")


class RecordingDataProvider(IFinancialDataProvider):
    """Returns canned market data and records every call."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.calls: list[tuple] = []
        self._fail_with = fail_with

    def historical(self, symbol: str, since: str) -> HistoricalPrices:
        self.calls.append(("historical", symbol, since))
        if self._fail_with is not None:
            raise self._fail_with
        return HistoricalPrices(
            symbol=symbol,
            since=since,
            records=[
                HistoricalRecord("2024-01-02", 187.15, 188.44, 183.89, 185.64, 82488700),
                HistoricalRecord("2024-01-03", 184.22, 185.88, 183.43, 184.25, 58414500),
            ],
        )

    def search(self, query: str) -> SearchResults:
        self.calls.append(("search", query))
        if self._fail_with is not None:
            raise self._fail_with
        return SearchResults(
            query=query,
            quotes=[SymbolMatch("AAPL", "Apple Inc.", "NMS", "EQUITY")],
            news=[NewsItem("Apple unveils new chips", "Reuters", "https://example.com/a", None)],
        )

    def insights(self, symbol: str) -> StockInsights:
        self.calls.append(("insights", symbol))
        if self._fail_with is not None:
            raise self._fail_with
        return StockInsights(
            symbol=symbol,
            recommendation="buy",
            recommendation_mean=1.9,
            analyst_count=38,
            target_mean_price=245.0,
            target_high_price=300.0,
            target_low_price=180.0,
            current_price=227.5,
            sector="Technology",
            industry="Consumer Electronics",
            summary="Apple designs smartphones.",
        )


@pytest.fixture
def provider() -> RecordingDataProvider:
    return RecordingDataProvider()


@pytest.fixture
def make_use_case(provider):
    """Build a RunAgentUseCase around a ScriptedLanguageModel and the recording provider."""

    def _make(llm: ScriptedLanguageModel, max_steps: int = 5, data=None, tool_timeout: float = 5.0):
        registry = create_tool_registry(data or provider)
        graph = build_agent_graph(llm, registry, tool_timeout=tool_timeout)
        return RunAgentUseCase(graph, llm, max_steps=max_steps)

    return _make
