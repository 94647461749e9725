"""
Simulation module for the portfolio return simulator.

Provides the per-position calculator, the portfolio aggregator and the
engine that runs a request end to end.
"""

from stocksim.simulation.aggregate import aggregate
from stocksim.simulation.engine import SimulationEngine, run_simulation
from stocksim.simulation.position import compute_position, guard_prices, round_money
from stocksim.simulation.report import (
    format_summary,
    results_to_dataframe,
    simulation_to_dict,
)

__all__ = [
    "aggregate",
    "SimulationEngine",
    "run_simulation",
    "compute_position",
    "guard_prices",
    "round_money",
    "format_summary",
    "results_to_dataframe",
    "simulation_to_dict",
]
