"""
Use-case: retrieve historical OHLCV stock prices from a start date until today.
Depends only on Domain ports and entities — no infrastructure imports.
"""

from datetime import date

from investai.domain.entities.market_data import HistoricalPrices
from investai.domain.ports.financial_data_port import IFinancialDataProvider


class GetHistoricalPricesUseCase:
    def __init__(self, provider: IFinancialDataProvider) -> None:
        self._provider = provider

    def execute(self, symbol: str, since: str) -> HistoricalPrices:
        """Fetch daily prices for *symbol* starting at *since*.

        Args:
            symbol: Ticker symbol (case-insensitive).
            since:  ISO-8601 start date (YYYY-MM-DD).

        Raises:
            ValueError: if *symbol* is blank or *since* is not a past ISO date.
            Any exception propagated from IFinancialDataProvider on API failure.
        """
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be a non-empty string")
        try:
            start = date.fromisoformat(since.strip())
        except (AttributeError, ValueError) as exc:
            raise ValueError(f"start date must be YYYY-MM-DD, got {since!r}") from exc
        if start > date.today():
            raise ValueError(f"start date {since!r} is in the future")
        return self._provider.historical(symbol.upper().strip(), since=start.isoformat())
