"""
Data module for the portfolio return simulator.

Provides the symbol catalog used for display names and the quote providers
used to retrieve historical prices.
"""

from stocksim.data.catalog import (
    CatalogError,
    SymbolCatalog,
    load_catalog,
    DEFAULT_SYMBOLS,
)
from stocksim.data.schemas import PRICES_SCHEMA

__all__ = [
    "CatalogError",
    "SymbolCatalog",
    "load_catalog",
    "DEFAULT_SYMBOLS",
    "PRICES_SCHEMA",
]
