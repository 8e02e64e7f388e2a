"""
Domain entities for market data returned by the financial data gateway.
Zero external dependencies — pure Python dataclasses only.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class HistoricalRecord:
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass(frozen=True)
class HistoricalPrices:
    symbol: str
    since: str
    records: list[HistoricalRecord]


@dataclass(frozen=True)
class SymbolMatch:
    symbol: str
    name: Optional[str]
    exchange: Optional[str]
    quote_type: Optional[str]


@dataclass(frozen=True)
class NewsItem:
    title: str
    publisher: Optional[str]
    link: Optional[str]
    published_at: Optional[str]


@dataclass(frozen=True)
class SearchResults:
    query: str
    quotes: list[SymbolMatch] = field(default_factory=list)
    news: list[NewsItem] = field(default_factory=list)


@dataclass(frozen=True)
class StockInsights:
    """Qualitative snapshot of analyst sentiment for a symbol."""

    symbol: str
    recommendation: Optional[str]
    recommendation_mean: Optional[float]
    analyst_count: Optional[int]
    target_mean_price: Optional[float]
    target_high_price: Optional[float]
    target_low_price: Optional[float]
    current_price: Optional[float]
    sector: Optional[str]
    industry: Optional[str]
    summary: Optional[str]
