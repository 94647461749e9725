"""
Quote providers for historical daily prices.

Provides a pluggable interface for fetching a symbol's prices over a period.
Every provider is total: retrieval failures resolve to synthetic fallback
quotes instead of errors.
"""

from stocksim.data.providers.base import DataProviderError, QuoteProvider
from stocksim.data.providers.csv_provider import CsvQuoteProvider
from stocksim.data.providers.fallback import estimate_dividend_per_share, synthesize_quote
from stocksim.data.providers.yahoo_provider import YahooChartProvider

__all__ = [
    "DataProviderError",
    "QuoteProvider",
    "CsvQuoteProvider",
    "YahooChartProvider",
    "estimate_dividend_per_share",
    "synthesize_quote",
]
