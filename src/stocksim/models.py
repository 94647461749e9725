"""
Core data models for the portfolio return simulator.

This module defines the request, quote, and result structures that flow
through a simulation run. All monetary quantities use Decimal for precision,
and every entity is immutable once created: a run builds fresh quotes and
results and never mutates them afterwards.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class SimulationStatus(Enum):
    """Run state observed by callers of the simulation engine."""
    IDLE = "IDLE"
    RUNNING = "RUNNING"


class ActionType(Enum):
    """Types of logged actions for the decision log."""
    CONFIG_LOADED = "CONFIG_LOADED"
    SIMULATION_STARTED = "SIMULATION_STARTED"
    QUOTE_FALLBACK_USED = "QUOTE_FALLBACK_USED"
    SIMULATION_COMPLETED = "SIMULATION_COMPLETED"


@dataclass(frozen=True)
class SymbolInfo:
    """
    Catalog record for a tradable symbol.

    Attributes:
        symbol: Ticker symbol as shown to users (e.g. "PETR4")
        display_name: Human-readable company name
    """
    symbol: str
    display_name: str


@dataclass(frozen=True)
class SimulationRequest:
    """
    A finished, caller-validated simulation request.

    Attributes:
        symbols: Distinct ticker symbols in the order the caller chose them
        start_date: First calendar day of the period
        end_date: Last calendar day of the period (inclusive)
        allocations: Cash amount to invest per symbol; missing entries mean zero
    """
    symbols: tuple[str, ...]
    start_date: date
    end_date: date
    allocations: dict[str, Decimal] = field(default_factory=dict)

    def allocation_for(self, symbol: str) -> Decimal:
        """Cash allocated to a symbol, zero when none was given."""
        return self.allocations.get(symbol) or Decimal("0")

    @property
    def total_allocation(self) -> Decimal:
        """Sum of allocations over the requested symbols."""
        return sum((self.allocation_for(s) for s in self.symbols), Decimal("0"))


@dataclass(frozen=True)
class PricePoint:
    """A single daily closing price."""
    date: date
    price: Decimal


@dataclass(frozen=True)
class PriceQuote:
    """
    Prices for one symbol over the requested period.

    Attributes:
        symbol: Ticker symbol the quote was requested for
        open_price: First valid closing price in the period
        close_price: Last valid closing price in the period
        dividend_per_share: Estimated dividend per share (heuristic, not real data)
        series: Chronological daily prices with missing points removed
        is_fallback: True when the quote is synthetic because retrieval failed
        fallback_reason: Why retrieval failed, for fallback quotes
    """
    symbol: str
    open_price: Optional[Decimal]
    close_price: Optional[Decimal]
    dividend_per_share: Optional[Decimal] = Decimal("0")
    series: tuple[PricePoint, ...] = ()
    is_fallback: bool = False
    fallback_reason: Optional[str] = None


@dataclass(frozen=True)
class PositionResult:
    """
    Simulated outcome of one allocation.

    Monetary and percentage fields are rounded to 2 decimal places.

    Attributes:
        symbol: Ticker symbol
        display_name: Catalog name, or the symbol itself when unknown
        invested_amount: Cash allocated to the position
        open_price: Price used to buy shares (after guarding)
        close_price: Price used to value shares at the end (after guarding)
        shares_held: Whole shares bought with the allocation
        open_value: shares_held * open_price
        close_value: shares_held * close_price
        dividend_value: shares_held * dividend_per_share
        appreciation_profit: close_value - open_value
        total_profit: appreciation_profit + dividend_value
        profit_percent: Total return on open_value, in percent
        series: Daily price history backing the quote
        is_fallback: Whether the underlying quote was synthetic
    """
    symbol: str
    display_name: str
    invested_amount: Decimal
    open_price: Decimal
    close_price: Decimal
    shares_held: int
    open_value: Decimal
    close_value: Decimal
    dividend_value: Decimal
    appreciation_profit: Decimal
    total_profit: Decimal
    profit_percent: Decimal
    series: tuple[PricePoint, ...] = ()
    is_fallback: bool = False


@dataclass(frozen=True)
class PortfolioSummary:
    """
    Portfolio totals across all positions.

    total_profit_percent is computed from the summed values, so it is a
    value-weighted return rather than an average of position returns.
    """
    total_invested: Decimal
    total_open_value: Decimal
    total_close_value: Decimal
    total_dividend_value: Decimal
    total_appreciation_profit: Decimal
    total_profit: Decimal
    total_profit_percent: Decimal
    num_positions: int = 0
    num_fallback: int = 0


@dataclass(frozen=True)
class SimulationSettings:
    """
    Runtime settings for price retrieval and logging.

    Attributes:
        base_url: Daily chart endpoint of the quote source
        market_suffix: Exchange suffix appended to bare symbols
        timeout: HTTP timeout in seconds
        seed: Seed for the random generator (None for nondeterministic runs)
        catalog_path: JSON symbol catalog to use instead of the built-in one
        decision_log_path: JSONL audit log path (None disables it)
    """
    base_url: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    market_suffix: str = ".SA"
    timeout: float = 20.0
    seed: Optional[int] = None
    catalog_path: Optional[str] = None
    decision_log_path: Optional[str] = None


@dataclass
class DecisionLogEntry:
    """
    Entry for the append-only decision log.

    Attributes:
        timestamp: When the action occurred
        action_type: Type of action
        run_id: Simulation run involved (if applicable)
        details: JSON-serializable details dictionary
    """
    timestamp: datetime
    action_type: ActionType
    run_id: Optional[str]
    details: dict

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        run_id: Optional[str],
        details: dict,
    ) -> "DecisionLogEntry":
        """Factory method with auto-generated timestamp."""
        return cls(
            timestamp=datetime.now(),
            action_type=action_type,
            run_id=run_id,
            details=details,
        )
