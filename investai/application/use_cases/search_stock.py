"""
Use-case: look up symbols and recent news matching a free-text query.
Depends only on Domain ports and entities — no infrastructure imports.
"""

from investai.domain.entities.market_data import SearchResults
from investai.domain.ports.financial_data_port import IFinancialDataProvider


class SearchStockUseCase:
    def __init__(self, provider: IFinancialDataProvider) -> None:
        self._provider = provider

    def execute(self, query: str) -> SearchResults:
        """Search quotes and news for *query* (a ticker or company name).

        Unlike the price use-cases the query is not uppercased, since company
        names are matched as typed.
        """
        if not query or not query.strip():
            raise ValueError("search query must be a non-empty string")
        return self._provider.search(query.strip())
