"""
Pytest fixtures for the portfolio return simulator tests.

Provides common test data and utilities used across test modules.
"""

import random
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from stocksim.data.providers.base import DataProviderError, QuoteProvider
from stocksim.models import PricePoint, PriceQuote, SimulationRequest


@pytest.fixture
def sample_quote() -> PriceQuote:
    """Quote with open 10.00, close 12.00 and dividend 0.50 per share."""
    return PriceQuote(
        symbol="PETR4",
        open_price=Decimal("10.00"),
        close_price=Decimal("12.00"),
        dividend_per_share=Decimal("0.50"),
        series=(
            PricePoint(date=date(2024, 1, 2), price=Decimal("10.00")),
            PricePoint(date=date(2024, 1, 3), price=Decimal("11.20")),
            PricePoint(date=date(2024, 1, 4), price=Decimal("12.00")),
        ),
        is_fallback=False,
    )


@pytest.fixture
def sample_quotes(sample_quote: PriceQuote) -> dict[str, PriceQuote]:
    """Real-looking quotes for a few B3 symbols."""
    return {
        "PETR4": sample_quote,
        "VALE3": PriceQuote(
            symbol="VALE3",
            open_price=Decimal("68.40"),
            close_price=Decimal("61.75"),
            dividend_per_share=Decimal("1.20"),
        ),
        "ITUB4": PriceQuote(
            symbol="ITUB4",
            open_price=Decimal("33.10"),
            close_price=Decimal("35.02"),
            dividend_per_share=Decimal("0.00"),
        ),
    }


@pytest.fixture
def sample_request() -> SimulationRequest:
    """Three-symbol request with one unfunded symbol."""
    return SimulationRequest(
        symbols=("PETR4", "VALE3", "ITUB4"),
        start_date=date(2024, 1, 2),
        end_date=date(2024, 6, 28),
        allocations={
            "PETR4": Decimal("1000"),
            "VALE3": Decimal("5000"),
        },
    )


@pytest.fixture
def static_provider():
    """
    Factory fixture for providers serving fixed quotes.

    Symbols missing from the mapping raise DataProviderError, so they
    resolve to fallback quotes. Requested symbols are recorded in `calls`.

    Usage:
        def test_something(static_provider, sample_quotes):
            provider = static_provider(sample_quotes)
    """

    class StaticQuoteProvider(QuoteProvider):
        def __init__(self, quotes, rng=None):
            super().__init__(rng=rng or random.Random(7))
            self.quotes = quotes
            self.calls: list[str] = []

        @property
        def name(self) -> str:
            return "Static"

        def get_quote(self, symbol, start_date, end_date):
            self.calls.append(symbol)
            if symbol not in self.quotes:
                raise DataProviderError(f"No data for {symbol}")
            return self.quotes[symbol]

    def _create(quotes, rng=None):
        return StaticQuoteProvider(quotes, rng=rng)

    return _create


# =============================================================================
# Yahoo Finance Fixtures
# =============================================================================


@pytest.fixture
def sample_chart_payload() -> dict:
    """
    Sample Yahoo Finance chart response.

    Format matches the v8 chart endpoint:
    https://query1.finance.yahoo.com/v8/finance/chart/{symbol}

    Timestamps are 2024-01-02 to 2024-01-05 at 12:00 UTC; the first and
    last closes are missing.
    """
    return {
        "chart": {
            "result": [
                {
                    "meta": {"currency": "BRL", "symbol": "PETR4.SA"},
                    "timestamp": [1704196800, 1704283200, 1704369600, 1704456000],
                    "indicators": {
                        "quote": [
                            {
                                "open": [None, 30.1, 30.9, None],
                                "close": [None, 30.5, 31.0, None],
                                "volume": [None, 41200300, 38900100, None],
                            }
                        ]
                    },
                }
            ],
            "error": None,
        }
    }


@pytest.fixture
def mock_chart_response():
    """
    Factory fixture for creating mock chart API responses.

    Usage:
        def test_something(mock_chart_response):
            response = mock_chart_response(status_code=200, json_data={...})
    """

    def _create_response(status_code: int = 200, json_data=None, invalid_json=False):
        mock_response = MagicMock()
        mock_response.status_code = status_code

        if invalid_json:
            mock_response.json.side_effect = ValueError("Expecting value")
        else:
            mock_response.json.return_value = json_data if json_data is not None else {}

        if status_code >= 400:
            mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error"
            )
        else:
            mock_response.raise_for_status.return_value = None

        return mock_response

    return _create_response


@pytest.fixture
def sample_prices_csv(tmp_path: Path) -> Path:
    """Offline prices file with two symbols and a missing close."""
    path = tmp_path / "prices.csv"
    path.write_text(
        "date,symbol,close\n"
        "2024-01-02,PETR4,10.00\n"
        "2024-01-03,PETR4,\n"
        "2024-01-04,PETR4,11.50\n"
        "2024-01-05,PETR4,12.00\n"
        "2024-01-08,PETR4,12.40\n"
        "2024-01-02,VALE3.SA,70.00\n"
        "2024-01-05,VALE3.SA,63.00\n"
    )
    return path
