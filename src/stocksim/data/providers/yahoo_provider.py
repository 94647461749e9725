"""
Yahoo Finance chart provider implementation.

Uses the public Yahoo Finance v8 chart endpoint to fetch daily closing
prices for exchange-qualified symbols (B3 symbols by default, e.g. PETR4.SA).
"""

import decimal
import logging
import random
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional

import requests

from stocksim.models import PricePoint, PriceQuote, SimulationSettings
from stocksim.data.providers.base import DataProviderError, QuoteProvider


logger = logging.getLogger(__name__)


class YahooChartProvider(QuoteProvider):
    """
    Quote provider backed by the Yahoo Finance chart API.

    Features:
    - Appends the market suffix to bare symbols (PETR4 -> PETR4.SA)
    - Extends the end boundary by one day so the last day is included
    - Skips null closes when picking open/close prices and building the series
    - Single attempt per symbol; failures resolve to a fallback quote
    """

    DEFAULT_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"

    # Some Yahoo edges reject requests without a browser user agent
    HEADERS = {"User-Agent": "Mozilla/5.0"}

    SECONDS_PER_DAY = 24 * 3600

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        market_suffix: str = ".SA",
        timeout: float = 20.0,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize Yahoo chart provider.

        Args:
            base_url: Chart endpoint without the trailing symbol
            market_suffix: Exchange suffix appended to bare symbols
            timeout: Request timeout (seconds)
            rng: Random generator for dividend estimates and fallbacks
        """
        super().__init__(rng=rng)
        self._base_url = base_url.rstrip("/")
        self._market_suffix = market_suffix
        self._timeout = timeout

    @classmethod
    def from_settings(
        cls,
        settings: SimulationSettings,
        rng: Optional[random.Random] = None,
    ) -> "YahooChartProvider":
        """Create a provider configured from SimulationSettings."""
        return cls(
            base_url=settings.base_url,
            market_suffix=settings.market_suffix,
            timeout=settings.timeout,
            rng=rng,
        )

    @property
    def name(self) -> str:
        return "YahooFinance"

    def normalize_symbol(self, symbol: str) -> str:
        """Return the exchange-qualified form of a symbol."""
        symbol = symbol.upper().strip()
        suffix = self._market_suffix.upper()
        if suffix and not symbol.endswith(suffix):
            symbol = f"{symbol}{suffix}"
        return symbol

    @staticmethod
    def to_epoch_seconds(day: date) -> int:
        """Unix seconds of a calendar day at UTC midnight."""
        return int(datetime.combine(day, time.min, tzinfo=timezone.utc).timestamp())

    def build_params(self, start_date: date, end_date: date) -> dict:
        """
        Query parameters for a daily chart request.

        period2 is pushed one full day past end_date so the end date's
        candle is not cut off at midnight.
        """
        return {
            "period1": self.to_epoch_seconds(start_date),
            "period2": self.to_epoch_seconds(end_date) + self.SECONDS_PER_DAY,
            "interval": "1d",
        }

    def get_quote(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
    ) -> PriceQuote:
        """
        Fetch daily closes for a symbol and build a quote.

        Uses endpoint: {base_url}/{symbol}.SA?period1={start}&period2={end+1d}&interval=1d

        Args:
            symbol: Ticker symbol (with or without market suffix)
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            PriceQuote built from the first and last valid closes

        Raises:
            DataProviderError: On request failure or unusable response
        """
        qualified = self.normalize_symbol(symbol)
        url = f"{self._base_url}/{requests.utils.quote(qualified)}"
        payload = self._make_request(url, self.build_params(start_date, end_date))

        series = self._parse_series(qualified, payload)
        logger.debug(f"{qualified}: {len(series)} valid daily closes")
        return self.build_quote(symbol, series)

    def _make_request(self, url: str, params: dict) -> Any:
        """
        Make a single HTTP request to the chart API.

        Args:
            url: API endpoint URL
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            DataProviderError: On request failure
        """
        try:
            response = requests.get(
                url, params=params, headers=self.HEADERS, timeout=self._timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise DataProviderError("Request timeout")
        except requests.exceptions.RequestException as e:
            raise DataProviderError(f"Request failed: {e}")
        except ValueError as e:
            raise DataProviderError(f"Invalid JSON response from Yahoo Finance: {e}")

    def _parse_series(self, symbol: str, payload: Any) -> list[PricePoint]:
        """
        Extract the non-null daily closes from a chart payload.

        Expected shape:
            {"chart": {"result": [{"timestamp": [...],
                                   "indicators": {"quote": [{"close": [...]}]}}]}}

        Raises:
            DataProviderError: If the payload shape is invalid
        """
        try:
            result = payload["chart"]["result"][0]
            timestamps = result["timestamp"]
            closes = result["indicators"]["quote"][0]["close"]
        except (KeyError, IndexError, TypeError) as e:
            raise DataProviderError(f"Invalid response from Yahoo Finance for {symbol}: {e!r}")

        if not isinstance(timestamps, list) or not isinstance(closes, list):
            raise DataProviderError(f"Invalid response from Yahoo Finance for {symbol}")
        if not timestamps or not closes:
            raise DataProviderError(f"Empty price history for {symbol}")
        if len(timestamps) != len(closes):
            raise DataProviderError(
                f"Misaligned response for {symbol}: "
                f"{len(timestamps)} timestamps, {len(closes)} closes"
            )

        series = []
        for ts, close in zip(timestamps, closes):
            if close is None:
                continue
            try:
                price = Decimal(str(close))
                day = datetime.fromtimestamp(int(ts), tz=timezone.utc).date()
            except (TypeError, ValueError, OverflowError, OSError, decimal.InvalidOperation) as e:
                raise DataProviderError(f"Invalid price point for {symbol}: {e!r}")
            if price.is_finite():
                series.append(PricePoint(date=day, price=price))

        return series
