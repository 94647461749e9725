"""
Offline quote provider backed by a local price file.

Reads a CSV (or Parquet) file with columns date, symbol, close and serves
quotes from it, so simulations can run without network access.
"""

import random
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pandas as pd

from stocksim.models import PricePoint, PriceQuote
from stocksim.data.providers.base import DataProviderError, QuoteProvider
from stocksim.data.schemas import PRICES_SCHEMA


class CsvQuoteProvider(QuoteProvider):
    """
    Quote provider reading daily closes from a file loaded once at startup.

    Symbols are matched case-insensitively, with or without the market
    suffix (PETR4 matches rows for PETR4 or PETR4.SA).
    """

    def __init__(
        self,
        file_path: str | Path,
        market_suffix: str = ".SA",
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the provider and load the price file.

        Args:
            file_path: Path to CSV/Parquet file with columns: date, symbol, close
            market_suffix: Exchange suffix ignored when matching symbols
            rng: Random generator for dividend estimates and fallbacks

        Raises:
            DataProviderError: If the file cannot be loaded or is invalid
        """
        super().__init__(rng=rng)
        self._file_path = Path(file_path)
        self._market_suffix = market_suffix.upper()
        self._prices = self._load(self._file_path)

    @property
    def name(self) -> str:
        return f"CSV({self._file_path.name})"

    def _strip_suffix(self, symbol: str) -> str:
        symbol = symbol.upper().strip()
        if self._market_suffix and symbol.endswith(self._market_suffix):
            symbol = symbol[: -len(self._market_suffix)]
        return symbol

    def _load(self, file_path: Path) -> pd.DataFrame:
        if not file_path.exists():
            raise DataProviderError(f"File not found: {file_path}")

        try:
            if file_path.suffix.lower() == ".parquet":
                df = pd.read_parquet(file_path)
            else:
                df = pd.read_csv(file_path)
        except Exception as e:
            raise DataProviderError(f"Failed to load price file {file_path}: {e}")

        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = PRICES_SCHEMA.missing_columns(df.columns.tolist())
        if missing:
            raise DataProviderError(
                f"File {file_path} is missing required columns: {missing}"
            )

        try:
            df["date"] = pd.to_datetime(df["date"]).dt.date
            df["close"] = pd.to_numeric(df["close"], errors="coerce")
        except (ValueError, TypeError) as e:
            raise DataProviderError(f"Invalid values in price file {file_path}: {e}")
        df["symbol"] = df["symbol"].astype(str).map(self._strip_suffix)

        return df.sort_values(["symbol", "date"]).reset_index(drop=True)

    def get_quote(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
    ) -> PriceQuote:
        """
        Build a quote from file rows within [start_date, end_date].

        Raises:
            DataProviderError: If the symbol has no valid prices in range
        """
        key = self._strip_suffix(symbol)
        df = self._prices
        rows = df[
            (df["symbol"] == key)
            & (df["date"] >= start_date)
            & (df["date"] <= end_date)
        ].dropna(subset=["close"])

        series = [
            PricePoint(date=row.date, price=Decimal(str(row.close)))
            for row in rows.itertuples(index=False)
        ]
        return self.build_quote(symbol, series)
