"""
Tool definitions — Infrastructure entrypoint / Composition Root.

Pydantic input schemas are an infrastructure concern (they are rendered to JSON
schema for the model provider) and must NOT appear in the application or
domain layers. This module binds each application use-case to a tool callable
and registers it, together with the terminal ``answer`` tool, in the registry
passed to build_agent_graph().

Field names mirror the public tool contract (``histqueryOptions`` included) since
the model addresses them verbatim.
"""

import dataclasses

from pydantic import BaseModel, ConfigDict, Field

from investai.application.services.tool_registry import ToolRegistry, ToolRegistryBuilder
from investai.application.use_cases.get_historical_prices import GetHistoricalPricesUseCase
from investai.application.use_cases.get_stock_insights import GetStockInsightsUseCase
from investai.application.use_cases.search_stock import SearchStockUseCase
from investai.domain.ports.financial_data_port import IFinancialDataProvider

ANSWER_TOOL_NAME = "answer"


class _StrictInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class HistoricalPricesInput(_StrictInput):
    query: str = Field(description="Stock symbol")
    histqueryOptions: str = Field(description="Starting date")


class StockSearchInput(_StrictInput):
    searchquery: str = Field(description="Stock symbol")


class StockInsightsInput(_StrictInput):
    stock: str = Field(description="Stock symbol")


class AnswerStep(_StrictInput):
    calculation: str
    reasoning: str


class AnswerInput(_StrictInput):
    steps: list[AnswerStep]
    answer: str


def create_tool_registry(provider: IFinancialDataProvider) -> ToolRegistry:
    """Build the immutable registry of the four tools with injected use-case dependencies.

    Args:
        provider: IFinancialDataProvider implementation (e.g. YFinanceFinancialDataProvider).

    Returns:
        ToolRegistry holding three callable data tools and the terminal answer tool.
    """
    historical_uc = GetHistoricalPricesUseCase(provider)
    search_uc = SearchStockUseCase(provider)
    insights_uc = GetStockInsightsUseCase(provider)

    def historicalprices(query: str, histqueryOptions: str) -> dict:
        return dataclasses.asdict(historical_uc.execute(query, since=histqueryOptions))

    def stock_search(searchquery: str) -> dict:
        return dataclasses.asdict(search_uc.execute(searchquery))

    def stock_insights(stock: str) -> dict:
        return dataclasses.asdict(insights_uc.execute(stock))

    return (
        ToolRegistryBuilder()
        .register(
            "historicalprices",
            "Get past prices of a stock from today until a user specified date",
            HistoricalPricesInput,
            historicalprices,
        )
        .register(
            "stock_search",
            "Retrieves relevant news about a stock",
            StockSearchInput,
            stock_search,
        )
        .register(
            "stock_insights",
            "Get the insights of a stock",
            StockInsightsInput,
            stock_insights,
        )
        # no invoke function - choosing it terminates the agent loop
        .register(
            ANSWER_TOOL_NAME,
            "A tool for providing the final answer.",
            AnswerInput,
        )
        .build()
    )
