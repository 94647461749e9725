"""
Decision logging module for the portfolio return simulator.

Provides append-only decision logging for auditing simulation runs.
"""

from stocksim.logging.decision_log import (
    DecimalEncoder,
    DecisionLogger,
    get_logger,
)

__all__ = [
    "DecimalEncoder",
    "DecisionLogger",
    "get_logger",
]
