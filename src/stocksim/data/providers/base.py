"""
Abstract base class for quote providers.

Defines the interface that all price sources implement. Subclasses only
describe how to retrieve a real quote; the base class guarantees that
callers always receive a quote, substituting a synthetic one whenever
retrieval fails.
"""

import logging
import random
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from stocksim.data.providers.fallback import estimate_dividend_per_share, synthesize_quote
from stocksim.models import PricePoint, PriceQuote


logger = logging.getLogger(__name__)


class DataProviderError(Exception):
    """Raised when a quote provider cannot produce a usable quote."""
    pass


class QuoteProvider(ABC):
    """
    Abstract base class for historical quote providers.

    Implementations provide get_quote(), which may raise DataProviderError.
    fetch_quote() is the public entry point and never raises.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the provider.

        Args:
            rng: Random generator used for dividend estimates and fallback
                quotes (defaults to a fresh unseeded generator)
        """
        self._rng = rng or random.Random()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this provider."""
        pass

    @abstractmethod
    def get_quote(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
    ) -> PriceQuote:
        """
        Retrieve a real quote for a symbol.

        Args:
            symbol: Ticker symbol
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            PriceQuote with is_fallback=False

        Raises:
            DataProviderError: If the data cannot be fetched or is unusable
        """
        pass

    def fetch_quote(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
    ) -> PriceQuote:
        """
        Get a quote for a symbol, falling back to synthetic prices on failure.

        Every DataProviderError raised by get_quote() becomes a fallback
        quote here.

        Args:
            symbol: Ticker symbol
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            PriceQuote (is_fallback=True when retrieval failed)
        """
        try:
            return self.get_quote(symbol, start_date, end_date)
        except DataProviderError as e:
            logger.warning(f"{self.name}: using fallback quote for {symbol}: {e}")
            return synthesize_quote(symbol, self._rng, reason=str(e))

    def build_quote(
        self,
        symbol: str,
        series: list[PricePoint],
    ) -> PriceQuote:
        """
        Build a real quote from a cleaned price series.

        Non-finite points are dropped. Open and close are the first and last
        remaining points; the dividend is estimated from the open price.

        Raises:
            DataProviderError: If the series holds no prices
        """
        series = [p for p in series if p.price.is_finite()]
        if not series:
            raise DataProviderError(f"No valid prices for {symbol} in the requested period")

        open_price = series[0].price
        return PriceQuote(
            symbol=symbol,
            open_price=open_price,
            close_price=series[-1].price,
            dividend_per_share=estimate_dividend_per_share(open_price, self._rng),
            series=tuple(series),
            is_fallback=False,
        )
