"""
Simulation engine for historical portfolio returns.

Runs one simulation per request:
1. For each requested symbol, in the caller's order, fetch a quote
2. Compute the position result from the allocation and the quote
3. Publish the ordered results and return to idle

Symbols are independent. A symbol whose prices cannot be retrieved is
simulated with a fallback quote and never aborts the run.
"""

import logging
import uuid
from typing import Callable, Optional

from stocksim.data.catalog import SymbolCatalog
from stocksim.data.providers.base import QuoteProvider
from stocksim.logging.decision_log import DecisionLogger
from stocksim.models import PositionResult, SimulationRequest, SimulationStatus
from stocksim.simulation.aggregate import aggregate
from stocksim.simulation.position import compute_position


logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Orchestrates quote retrieval and position calculation for a request.

    The engine expects a request that the caller has already validated.
    Its status is RUNNING while a run is in progress and IDLE otherwise;
    `results` holds the ordered results of the last completed run.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        catalog: Optional[SymbolCatalog] = None,
        decision_logger: Optional[DecisionLogger] = None,
        status_callback: Optional[Callable[[SimulationStatus], None]] = None,
    ):
        """
        Initialize the engine.

        Args:
            provider: Quote provider used for every symbol
            catalog: Symbol catalog for display names (built-in if None)
            decision_logger: Optional audit log for runs and fallbacks
            status_callback: Called with the new status on every transition
        """
        self.provider = provider
        self.catalog = catalog if catalog is not None else SymbolCatalog.default()
        self.decision_logger = decision_logger
        self._status_callback = status_callback
        self._status = SimulationStatus.IDLE
        self._results: tuple[PositionResult, ...] = ()

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status == SimulationStatus.RUNNING

    @property
    def results(self) -> tuple[PositionResult, ...]:
        return self._results

    def _set_status(self, status: SimulationStatus) -> None:
        self._status = status
        if self._status_callback is not None:
            self._status_callback(status)

    def run(self, request: SimulationRequest) -> tuple[PositionResult, ...]:
        """
        Simulate every symbol of a request.

        Args:
            request: Validated simulation request

        Returns:
            Position results in the same order as request.symbols
        """
        if not request.symbols:
            self._results = ()
            return self._results

        run_id = str(uuid.uuid4())
        self._set_status(SimulationStatus.RUNNING)
        logger.info(
            f"Simulating {len(request.symbols)} symbols "
            f"from {request.start_date} to {request.end_date} using {self.provider.name}"
        )
        if self.decision_logger:
            self.decision_logger.log_simulation_started(run_id, request, self.provider.name)

        try:
            results = []
            for symbol in request.symbols:
                results.append(self._simulate_symbol(run_id, request, symbol))
            self._results = tuple(results)
        finally:
            self._set_status(SimulationStatus.IDLE)

        summary = aggregate(self._results)
        logger.info(
            f"Simulation complete: {summary.num_positions} positions, "
            f"{summary.num_fallback} fallback, total return {summary.total_profit_percent}%"
        )
        if self.decision_logger:
            self.decision_logger.log_simulation_completed(run_id, self._results, summary)

        return self._results

    def _simulate_symbol(
        self,
        run_id: str,
        request: SimulationRequest,
        symbol: str,
    ) -> PositionResult:
        quote = self.provider.fetch_quote(symbol, request.start_date, request.end_date)
        if quote.is_fallback and self.decision_logger:
            self.decision_logger.log_quote_fallback(run_id, symbol, quote.fallback_reason)

        return compute_position(
            symbol=symbol,
            display_name=self.catalog.display_name(symbol),
            invested_amount=request.allocation_for(symbol),
            quote=quote,
        )


def run_simulation(
    request: SimulationRequest,
    provider: QuoteProvider,
    catalog: Optional[SymbolCatalog] = None,
) -> tuple[PositionResult, ...]:
    """
    Convenience function to run a single simulation.

    Args:
        request: Validated simulation request
        provider: Quote provider
        catalog: Symbol catalog for display names

    Returns:
        Ordered position results
    """
    engine = SimulationEngine(provider=provider, catalog=catalog)
    return engine.run(request)
