"""
Port (interface) for financial data providers.
Infrastructure adapters (e.g. YFinanceFinancialDataProvider) must implement this interface.
"""

from abc import ABC, abstractmethod

from investai.domain.entities.market_data import HistoricalPrices, SearchResults, StockInsights


class IFinancialDataProvider(ABC):
    @abstractmethod
    def historical(self, symbol: str, since: str) -> HistoricalPrices:
        """Daily OHLCV records for *symbol* from *since* (YYYY-MM-DD) until today."""
        ...

    @abstractmethod
    def search(self, query: str) -> SearchResults: ...

    @abstractmethod
    def insights(self, symbol: str) -> StockInsights: ...
