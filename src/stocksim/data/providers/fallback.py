"""
Synthetic quotes and dividend estimates.

Neither value is derived from real market records: the dividend estimate is
a placeholder heuristic and fallback quotes only keep a simulation going
when a symbol's prices cannot be retrieved.
"""

import random
from decimal import Decimal
from typing import Optional

from stocksim.models import PriceQuote


# Fallback open price range
FALLBACK_MIN_PRICE = 20.0
FALLBACK_MAX_PRICE = 100.0

# Fallback period return range (-10% to +40%)
FALLBACK_MIN_RETURN = -0.10
FALLBACK_MAX_RETURN = 0.40

# Dividend estimate as a fraction of the open price (0% to 5%)
MAX_DIVIDEND_YIELD = 0.05


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def estimate_dividend_per_share(open_price: Decimal, rng: random.Random) -> Decimal:
    """
    Estimate a per-share dividend as 0-5% of the open price.

    Args:
        open_price: Opening price of the period
        rng: Random generator

    Returns:
        Non-negative estimated dividend per share
    """
    if open_price is None or open_price <= 0:
        return Decimal("0")
    return open_price * _to_decimal(rng.uniform(0.0, MAX_DIVIDEND_YIELD))


def synthesize_quote(
    symbol: str,
    rng: random.Random,
    reason: Optional[str] = None,
) -> PriceQuote:
    """
    Create a synthetic quote for a symbol whose data is unavailable.

    The open price is drawn from [20, 100] and the close price applies a
    return drawn from [-10%, +40%]. The series is always empty.

    Args:
        symbol: Ticker symbol
        rng: Random generator
        reason: Description of the retrieval failure

    Returns:
        PriceQuote with is_fallback=True
    """
    open_price = _to_decimal(rng.uniform(FALLBACK_MIN_PRICE, FALLBACK_MAX_PRICE))
    period_return = _to_decimal(rng.uniform(FALLBACK_MIN_RETURN, FALLBACK_MAX_RETURN))
    close_price = open_price * (1 + period_return)

    return PriceQuote(
        symbol=symbol,
        open_price=open_price,
        close_price=close_price,
        dividend_per_share=estimate_dividend_per_share(open_price, rng),
        series=(),
        is_fallback=True,
        fallback_reason=reason,
    )
