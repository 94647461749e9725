"""
Symbol catalog for name lookup.

Maps ticker symbols to company display names. The catalog is loaded once
and only read afterwards; the simulator uses it to label positions, and the
CLI uses it to search for symbols.
"""

import json
from pathlib import Path
from typing import Iterable, Optional

from stocksim.models import SymbolInfo


class CatalogError(Exception):
    """Raised when a symbol catalog cannot be loaded."""
    pass


# Built-in catalog of liquid B3 (Brazil) listings - symbol to company name
DEFAULT_SYMBOLS = {
    # Energy
    "PETR3": "Petrobras ON", "PETR4": "Petrobras PN",
    "PRIO3": "PetroRio ON", "CSAN3": "Cosan ON",
    "UGPA3": "Ultrapar ON", "VBBR3": "Vibra Energia ON",

    # Materials
    "VALE3": "Vale ON", "GGBR4": "Gerdau PN", "CSNA3": "CSN ON",
    "USIM5": "Usiminas PNA", "SUZB3": "Suzano ON", "KLBN11": "Klabin Unit",
    "BRKM5": "Braskem PNA",

    # Financials
    "ITUB4": "Itaú Unibanco PN", "BBDC4": "Bradesco PN", "BBDC3": "Bradesco ON",
    "BBAS3": "Banco do Brasil ON", "SANB11": "Santander Brasil Unit",
    "B3SA3": "B3 ON", "BBSE3": "BB Seguridade ON", "ITSA4": "Itaúsa PN",
    "BPAC11": "BTG Pactual Unit",

    # Utilities
    "ELET3": "Eletrobras ON", "ELET6": "Eletrobras PNB", "EGIE3": "Engie Brasil ON",
    "CMIG4": "Cemig PN", "TAEE11": "Taesa Unit", "SBSP3": "Sabesp ON",
    "CPLE6": "Copel PNB", "EQTL3": "Equatorial ON",

    # Consumer
    "ABEV3": "Ambev ON", "LREN3": "Lojas Renner ON", "MGLU3": "Magazine Luiza ON",
    "ASAI3": "Assaí ON", "CRFB3": "Carrefour Brasil ON", "NTCO3": "Natura ON",
    "RENT3": "Localiza ON", "JBSS3": "JBS ON", "BRFS3": "BRF ON",

    # Industrials, health, telecom, technology
    "WEGE3": "WEG ON", "EMBR3": "Embraer ON", "RAIL3": "Rumo ON",
    "CCRO3": "CCR ON", "RDOR3": "Rede D'Or ON", "HAPV3": "Hapvida ON",
    "RADL3": "Raia Drogasil ON", "VIVT3": "Telefônica Brasil ON",
    "TIMS3": "TIM ON", "TOTS3": "Totvs ON",
}


class SymbolCatalog:
    """
    Read-only mapping from ticker symbol to SymbolInfo.

    Lookups are case-insensitive on the symbol.
    """

    def __init__(self, records: Iterable[SymbolInfo]):
        self._records: dict[str, SymbolInfo] = {}
        for record in records:
            self._records.setdefault(record.symbol.upper().strip(), record)

    @classmethod
    def default(cls) -> "SymbolCatalog":
        """Catalog built from DEFAULT_SYMBOLS."""
        return cls(
            SymbolInfo(symbol=symbol, display_name=name)
            for symbol, name in DEFAULT_SYMBOLS.items()
        )

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, symbol: str) -> bool:
        return symbol.upper().strip() in self._records

    def get(self, symbol: str) -> Optional[SymbolInfo]:
        """Catalog record for a symbol, or None if unknown."""
        return self._records.get(symbol.upper().strip())

    def display_name(self, symbol: str) -> str:
        """Display name for a symbol, falling back to the symbol itself."""
        record = self.get(symbol)
        if record is None or not record.display_name:
            return symbol
        return record.display_name

    def search(self, query: str) -> list[SymbolInfo]:
        """
        Find records matching a query.

        An exact symbol match comes first, followed by records whose name
        contains the query (case-insensitive), in catalog order.

        Args:
            query: Symbol or part of a company name

        Returns:
            List of matching SymbolInfo records (empty if none)
        """
        query = query.strip()
        if not query:
            return []

        matches = []
        exact = self.get(query)
        if exact is not None:
            matches.append(exact)

        needle = query.lower()
        for record in self._records.values():
            if record is exact:
                continue
            if needle in record.display_name.lower():
                matches.append(record)

        return matches


def load_catalog(file_path: Optional[str | Path] = None) -> SymbolCatalog:
    """
    Load a symbol catalog from a JSON file.

    Two layouts are accepted:
        {"stocks": [{"stock": "PETR4", "name": "Petrobras PN"}, ...]}
        [{"symbol": "PETR4", "display_name": "Petrobras PN"}, ...]

    Args:
        file_path: Path to the JSON file (None returns the built-in catalog)

    Returns:
        SymbolCatalog

    Raises:
        CatalogError: If the file cannot be read or has an unexpected layout
    """
    if file_path is None:
        return SymbolCatalog.default()

    file_path = Path(file_path)
    if not file_path.exists():
        raise CatalogError(f"Catalog file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Failed to load catalog {file_path}: {e}")

    entries = raw.get("stocks") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise CatalogError(f"Catalog {file_path} must contain a list of symbols")

    records = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise CatalogError(f"Invalid catalog entry: {entry!r}")
        symbol = entry.get("symbol") or entry.get("stock")
        if not symbol:
            raise CatalogError(f"Catalog entry without a symbol: {entry!r}")
        name = entry.get("display_name") or entry.get("name") or str(symbol)
        records.append(SymbolInfo(symbol=str(symbol).upper().strip(), display_name=str(name)))

    return SymbolCatalog(records)
