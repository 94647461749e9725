"""
Portfolio-level totals.
"""

from decimal import Decimal
from typing import Iterable

from stocksim.models import PortfolioSummary, PositionResult
from stocksim.simulation.position import return_percent, round_money


def aggregate(positions: Iterable[PositionResult]) -> PortfolioSummary:
    """
    Sum position results into portfolio totals.

    The portfolio return is derived from the summed values, not averaged
    from position returns. Sums are exact; only the final totals are
    rounded. An empty input gives all-zero totals.

    Args:
        positions: Position results of one simulation

    Returns:
        PortfolioSummary
    """
    positions = list(positions)

    def total(field: str) -> Decimal:
        return sum((getattr(p, field) for p in positions), Decimal("0"))

    open_value = total("open_value")
    close_value = total("close_value")
    dividend_value = total("dividend_value")

    return PortfolioSummary(
        total_invested=round_money(total("invested_amount")),
        total_open_value=round_money(open_value),
        total_close_value=round_money(close_value),
        total_dividend_value=round_money(dividend_value),
        total_appreciation_profit=round_money(total("appreciation_profit")),
        total_profit=round_money(total("total_profit")),
        total_profit_percent=round_money(return_percent(open_value, close_value, dividend_value)),
        num_positions=len(positions),
        num_fallback=sum(1 for p in positions if p.is_fallback),
    )
