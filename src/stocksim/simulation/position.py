"""
Per-position return calculations.

Turns one allocation and its price quote into whole shares held, start and
end values, an estimated dividend amount and the resulting profit.
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional

from stocksim.models import PositionResult, PriceQuote


CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    """Round a monetary or percentage value to 2 decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def guard_prices(
    open_price: Optional[Decimal],
    close_price: Optional[Decimal],
) -> tuple[Decimal, Decimal]:
    """
    Replace degenerate prices so later divisions are safe.

    A missing, non-finite or non-positive open price becomes 1. A missing,
    non-finite or non-positive close price becomes the (guarded) open price,
    which keeps the position at zero appreciation instead of discarding it.

    Returns:
        Tuple of (open_price, close_price)
    """
    if open_price is None or not open_price.is_finite() or open_price <= 0:
        open_price = Decimal("1")
    if close_price is None or not close_price.is_finite() or close_price <= 0:
        close_price = open_price
    return open_price, close_price


def return_percent(open_value: Decimal, close_value: Decimal, dividend_value: Decimal) -> Decimal:
    """Total return in percent, 0 when nothing was invested."""
    if open_value == 0:
        return Decimal("0")
    return ((close_value + dividend_value) / open_value - 1) * HUNDRED


def compute_position(
    symbol: str,
    display_name: str,
    invested_amount: Decimal,
    quote: PriceQuote,
) -> PositionResult:
    """
    Compute the simulated outcome of investing an amount in one symbol.

    Shares are whole (floor of amount / open price); leftover cash is not
    tracked. Rounding to 2 decimal places happens only when the result is
    built.

    Args:
        symbol: Ticker symbol
        display_name: Name to show for the position
        invested_amount: Cash allocated (non-negative)
        quote: Prices for the period

    Returns:
        PositionResult
    """
    open_price, close_price = guard_prices(quote.open_price, quote.close_price)
    dividend_per_share = quote.dividend_per_share or Decimal("0")
    invested_amount = invested_amount or Decimal("0")

    shares_held = int((invested_amount / open_price).to_integral_value(rounding=ROUND_FLOOR))
    shares_held = max(shares_held, 0)

    open_value = shares_held * open_price
    close_value = shares_held * close_price
    dividend_value = shares_held * dividend_per_share
    appreciation_profit = close_value - open_value
    total_profit = appreciation_profit + dividend_value
    profit_percent = return_percent(open_value, close_value, dividend_value)

    return PositionResult(
        symbol=symbol,
        display_name=display_name,
        invested_amount=invested_amount,
        open_price=round_money(open_price),
        close_price=round_money(close_price),
        shares_held=shares_held,
        open_value=round_money(open_value),
        close_value=round_money(close_value),
        dividend_value=round_money(dividend_value),
        appreciation_profit=round_money(appreciation_profit),
        total_profit=round_money(total_profit),
        profit_percent=round_money(profit_percent),
        series=quote.series,
        is_fallback=quote.is_fallback,
    )
