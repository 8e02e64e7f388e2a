"""
Infrastructure adapter: yfinance → IFinancialDataProvider.
All yfinance-specific details (Ticker.history(), Ticker.info, Search) are confined here;
the rest of the codebase depends only on IFinancialDataProvider.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import yfinance as yf

from investai.domain.entities.market_data import (
    HistoricalPrices,
    HistoricalRecord,
    NewsItem,
    SearchResults,
    StockInsights,
    SymbolMatch,
)
from investai.domain.ports.financial_data_port import IFinancialDataProvider

logger = logging.getLogger(__name__)

_PRICE_COLUMNS = ["Open", "High", "Low", "Close"]


class YFinanceFinancialDataProvider(IFinancialDataProvider):
    """Fetches stock market data from Yahoo Finance via the yfinance library."""

    def __init__(self, max_results: int = 8, news_count: int = 8, timeout: float = 10.0) -> None:
        """
        Args:
            timeout: HTTP timeout in seconds passed to yfinance requests.
        """
        self._max_results = max_results
        self._news_count = news_count
        self._timeout = timeout

    def historical(self, symbol: str, since: str) -> HistoricalPrices:
        logger.debug("yfinance history symbol=%s since=%s", symbol, since)
        history = yf.Ticker(symbol).history(start=since, interval="1d", timeout=self._timeout)
        if not history.empty:
            # Yahoo leaves NaN gaps on halted or partial days; such rows carry no price.
            history = history.dropna(subset=_PRICE_COLUMNS).fillna({"Volume": 0})

        if history.empty:
            raise ValueError(f"No historical data available for symbol: {symbol!r}")

        records = [
            HistoricalRecord(
                date=day.strftime("%Y-%m-%d"),
                open=round(float(row["Open"]), 4),
                high=round(float(row["High"]), 4),
                low=round(float(row["Low"]), 4),
                close=round(float(row["Close"]), 4),
                volume=int(row["Volume"]),
            )
            for day, row in history.iterrows()
        ]
        return HistoricalPrices(symbol=symbol, since=since, records=records)

    def search(self, query: str) -> SearchResults:
        logger.debug("yfinance search query=%s", query)
        result = yf.Search(
            query,
            max_results=self._max_results,
            news_count=self._news_count,
            timeout=self._timeout,
        )

        quotes = [
            SymbolMatch(
                symbol=quote["symbol"],
                name=quote.get("longname") or quote.get("shortname"),
                exchange=quote.get("exchange"),
                quote_type=quote.get("quoteType"),
            )
            for quote in result.quotes
            if quote.get("symbol")
        ]
        news = [
            NewsItem(
                title=item.get("title", ""),
                publisher=item.get("publisher"),
                link=item.get("link"),
                published_at=_epoch_to_iso(item.get("providerPublishTime")),
            )
            for item in result.news
        ]
        return SearchResults(query=query, quotes=quotes, news=news)

    def insights(self, symbol: str) -> StockInsights:
        logger.debug("yfinance info symbol=%s", symbol)
        info = yf.Ticker(symbol).info
        if not info or not (info.get("quoteType") or info.get("symbol")):
            raise ValueError(f"No insight data available for symbol: {symbol!r}")

        analyst_count = info.get("numberOfAnalystOpinions")
        return StockInsights(
            symbol=symbol,
            recommendation=info.get("recommendationKey"),
            recommendation_mean=info.get("recommendationMean"),
            analyst_count=int(analyst_count) if analyst_count is not None else None,
            target_mean_price=info.get("targetMeanPrice"),
            target_high_price=info.get("targetHighPrice"),
            target_low_price=info.get("targetLowPrice"),
            current_price=info.get("currentPrice") or info.get("regularMarketPrice"),
            sector=info.get("sector"),
            industry=info.get("industry"),
            summary=info.get("longBusinessSummary"),
        )


def _epoch_to_iso(value: Optional[int]) -> Optional[str]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc).isoformat()
