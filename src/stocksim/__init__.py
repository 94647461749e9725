"""
Historical Portfolio Return Simulator (stocksim)

Estimates what a hypothetical portfolio would have returned over a past
period: whole shares bought at the period's opening price, valued at its
closing price, plus an estimated dividend amount. Results are reported per
position and aggregated across the portfolio.

Price retrieval never aborts a run; a symbol whose data cannot be fetched
gets a synthetic fallback quote instead.
"""

__version__ = "0.1.0"
__author__ = "stocksim contributors"
