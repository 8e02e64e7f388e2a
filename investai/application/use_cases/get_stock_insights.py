"""
Use-case: retrieve analyst insights for a given symbol.
Depends only on Domain ports and entities — no infrastructure imports.
"""

from investai.domain.entities.market_data import StockInsights
from investai.domain.ports.financial_data_port import IFinancialDataProvider


class GetStockInsightsUseCase:
    def __init__(self, provider: IFinancialDataProvider) -> None:
        self._provider = provider

    def execute(self, symbol: str) -> StockInsights:
        """Fetch insights for *symbol* (uppercased).

        Raises:
            ValueError: if *symbol* is blank.
            Any exception propagated from the IFinancialDataProvider on API failure.
        """
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be a non-empty string")
        return self._provider.insights(symbol.upper().strip())
