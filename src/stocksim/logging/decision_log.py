"""
Append-only decision logging for the portfolio return simulator.

Simulation runs, their inputs and every fallback quote are logged with
timestamps so a run can be audited afterwards.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from stocksim.models import (
    ActionType,
    DecisionLogEntry,
    PortfolioSummary,
    PositionResult,
    SimulationRequest,
    SimulationSettings,
)


class DecisionLogger:
    """
    JSONL audit trail of simulation runs.

    Entries are only ever appended; one line per action, written in the
    order the actions happen.
    """

    def __init__(self, log_path: str | Path):
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: DecisionLogEntry) -> None:
        """Append one entry to the log file."""
        line = json.dumps(_entry_to_record(entry), cls=DecimalEncoder)
        with open(self.log_path, "a") as f:
            f.write(line + "\n")

    def log_config_loaded(
        self,
        settings: SimulationSettings,
        config_path: Optional[str | Path] = None,
    ) -> None:
        """Log the settings a run was configured with."""
        details = {
            "config_path": str(config_path) if config_path else None,
            "base_url": settings.base_url,
            "market_suffix": settings.market_suffix,
            "timeout": settings.timeout,
            "seed": settings.seed,
            "catalog_path": settings.catalog_path,
        }
        self.log(DecisionLogEntry.create(ActionType.CONFIG_LOADED, None, details))

    def log_simulation_started(
        self,
        run_id: str,
        request: SimulationRequest,
        provider_name: str,
    ) -> None:
        """
        Log the start of a simulation run.

        Args:
            run_id: Identifier of the run
            request: Request being simulated
            provider_name: Name of the quote provider in use
        """
        details = {
            "provider": provider_name,
            "symbols": list(request.symbols),
            "start_date": request.start_date.isoformat(),
            "end_date": request.end_date.isoformat(),
            "allocations": {s: str(request.allocation_for(s)) for s in request.symbols},
        }
        self.log(DecisionLogEntry.create(ActionType.SIMULATION_STARTED, run_id, details))

    def log_quote_fallback(
        self,
        run_id: str,
        symbol: str,
        reason: Optional[str],
    ) -> None:
        """Log that a symbol was simulated with a synthetic quote."""
        details = {
            "symbol": symbol,
            "reason": reason,
        }
        self.log(DecisionLogEntry.create(ActionType.QUOTE_FALLBACK_USED, run_id, details))

    def log_simulation_completed(
        self,
        run_id: str,
        results: tuple[PositionResult, ...],
        summary: PortfolioSummary,
    ) -> None:
        """
        Log completion of a simulation run.

        Args:
            run_id: Identifier of the run
            results: Position results of the run
            summary: Portfolio totals of the run
        """
        details = {
            "num_positions": summary.num_positions,
            "fallback_symbols": [r.symbol for r in results if r.is_fallback],
            "total_open_value": str(summary.total_open_value),
            "total_profit": str(summary.total_profit),
            "total_profit_percent": str(summary.total_profit_percent),
        }
        self.log(DecisionLogEntry.create(ActionType.SIMULATION_COMPLETED, run_id, details))

    def read_log(self, run_id: Optional[str] = None) -> list[DecisionLogEntry]:
        """
        Read entries back in file order.

        Args:
            run_id: Only return entries of this run (config entries have none)

        Returns:
            List of DecisionLogEntry objects, empty if the file does not exist
        """
        if not self.log_path.exists():
            return []

        with open(self.log_path, "r") as f:
            entries = [_record_to_entry(json.loads(line)) for line in f if line.strip()]

        if run_id is not None:
            entries = [e for e in entries if e.run_id == run_id]
        return entries


def _entry_to_record(entry: DecisionLogEntry) -> dict[str, Any]:
    return {
        "timestamp": entry.timestamp.isoformat(),
        "action_type": entry.action_type.value,
        "run_id": entry.run_id,
        "details": entry.details,
    }


def _record_to_entry(record: dict[str, Any]) -> DecisionLogEntry:
    return DecisionLogEntry(
        timestamp=datetime.fromisoformat(record["timestamp"]),
        action_type=ActionType(record["action_type"]),
        run_id=record.get("run_id"),
        details=record.get("details") or {},
    )


class DecimalEncoder(json.JSONEncoder):
    """Serialize Decimal as string and dates as ISO 8601."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


_global_logger: Optional[DecisionLogger] = None


def get_logger(log_path: Optional[str | Path] = None) -> DecisionLogger:
    """
    Return the process-wide decision logger.

    Passing a path (re)binds the logger to that file. Without a path the
    current logger is returned, created at output/decision_log.jsonl if none
    exists yet.
    """
    global _global_logger

    if log_path is not None:
        _global_logger = DecisionLogger(log_path)
    elif _global_logger is None:
        _global_logger = DecisionLogger("output/decision_log.jsonl")
    return _global_logger
