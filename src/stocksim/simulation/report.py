"""
Presentation helpers for simulation results.

Builds tables, text summaries and JSON-ready documents from position
results and portfolio totals. Nothing here is written to disk.
"""

import json
from typing import Iterable

import pandas as pd

from stocksim.logging.decision_log import DecimalEncoder
from stocksim.models import PortfolioSummary, PositionResult, SimulationRequest


RESULT_COLUMNS = [
    "symbol",
    "name",
    "invested",
    "open_price",
    "close_price",
    "shares",
    "open_value",
    "close_value",
    "dividends",
    "appreciation",
    "total_profit",
    "profit_pct",
    "fallback",
]


def results_to_dataframe(results: Iterable[PositionResult]) -> pd.DataFrame:
    """
    Convert position results to a DataFrame, one row per position.

    Args:
        results: Position results in display order

    Returns:
        DataFrame with RESULT_COLUMNS
    """
    rows = [
        {
            "symbol": r.symbol,
            "name": r.display_name,
            "invested": float(r.invested_amount),
            "open_price": float(r.open_price),
            "close_price": float(r.close_price),
            "shares": r.shares_held,
            "open_value": float(r.open_value),
            "close_value": float(r.close_value),
            "dividends": float(r.dividend_value),
            "appreciation": float(r.appreciation_profit),
            "total_profit": float(r.total_profit),
            "profit_pct": float(r.profit_percent),
            "fallback": r.is_fallback,
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def series_to_dataframe(result: PositionResult) -> pd.DataFrame:
    """Daily price history of a position as a date-indexed DataFrame."""
    df = pd.DataFrame(
        [{"date": p.date, "price": float(p.price)} for p in result.series],
        columns=["date", "price"],
    )
    return df.set_index("date")


def format_summary(summary: PortfolioSummary) -> list[str]:
    """
    Format portfolio totals as text lines.

    Args:
        summary: Portfolio totals

    Returns:
        Lines ready to print
    """
    lines = [
        "Portfolio Summary",
        "=" * 40,
        f"  Positions:           {summary.num_positions}",
        f"  Invested:            {summary.total_invested:,.2f}",
        f"  Value at start:      {summary.total_open_value:,.2f}",
        f"  Value at end:        {summary.total_close_value:,.2f}",
        f"  Dividends (est.):    {summary.total_dividend_value:,.2f}",
        f"  Appreciation:        {summary.total_appreciation_profit:+,.2f}",
        f"  Total profit:        {summary.total_profit:+,.2f}",
        f"  Total return:        {summary.total_profit_percent:+.2f}%",
    ]
    if summary.num_fallback:
        lines.append(
            f"  Note: {summary.num_fallback} position(s) use simulated prices "
            "because market data was unavailable"
        )
    return lines


def simulation_to_dict(
    request: SimulationRequest,
    results: Iterable[PositionResult],
    summary: PortfolioSummary,
    include_series: bool = False,
) -> dict:
    """
    Build a JSON-ready document for a completed simulation.

    Decimal values are kept as Decimal; serialize with to_json() or
    json.dumps(..., cls=DecimalEncoder).

    Args:
        request: Simulated request
        results: Position results
        summary: Portfolio totals
        include_series: Include each position's daily price history

    Returns:
        Dictionary with request, positions and summary sections
    """
    positions = []
    for r in results:
        position = {
            "symbol": r.symbol,
            "display_name": r.display_name,
            "invested_amount": r.invested_amount,
            "open_price": r.open_price,
            "close_price": r.close_price,
            "shares_held": r.shares_held,
            "open_value": r.open_value,
            "close_value": r.close_value,
            "dividend_value": r.dividend_value,
            "appreciation_profit": r.appreciation_profit,
            "total_profit": r.total_profit,
            "profit_percent": r.profit_percent,
            "is_fallback": r.is_fallback,
        }
        if include_series:
            position["series"] = [{"date": p.date, "price": p.price} for p in r.series]
        positions.append(position)

    return {
        "request": {
            "symbols": list(request.symbols),
            "start_date": request.start_date,
            "end_date": request.end_date,
            "allocations": {s: request.allocation_for(s) for s in request.symbols},
        },
        "positions": positions,
        "summary": {
            "total_invested": summary.total_invested,
            "total_open_value": summary.total_open_value,
            "total_close_value": summary.total_close_value,
            "total_dividend_value": summary.total_dividend_value,
            "total_appreciation_profit": summary.total_appreciation_profit,
            "total_profit": summary.total_profit,
            "total_profit_percent": summary.total_profit_percent,
            "num_positions": summary.num_positions,
            "num_fallback": summary.num_fallback,
        },
    }


def to_json(document: dict, indent: int = 2) -> str:
    """Serialize a simulation document, writing Decimals as strings."""
    return json.dumps(document, cls=DecimalEncoder, indent=indent)
