"""
Command-line interface for the portfolio return simulator.

Provides commands for:
- run: Simulate a portfolio over a past period
- search: Look up symbols in the catalog
"""

import logging
import random
import sys
from typing import Optional

import click

from stocksim.config import (
    ConfigurationError,
    RequestValidationError,
    build_request,
    default_period,
    load_settings,
    load_simulation_request,
    parse_allocation,
)
from stocksim.data.catalog import CatalogError, load_catalog
from stocksim.data.providers import CsvQuoteProvider, DataProviderError, YahooChartProvider
from stocksim.logging import get_logger
from stocksim.simulation import SimulationEngine, aggregate, format_summary, results_to_dataframe
from stocksim.simulation.report import simulation_to_dict, to_json


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version="0.1.0", prog_name="stocksim")
def main():
    """
    Historical portfolio return simulator.

    Estimates what buying whole shares at the start of a past period would
    have returned by its end, including an estimated dividend amount.
    """
    pass


@main.command()
@click.option(
    "--symbol", "-s", "symbols",
    multiple=True,
    help="Ticker symbol to include (repeatable, order is kept)",
)
@click.option(
    "--amount", "-a", "amounts",
    multiple=True,
    help="Investment per symbol as SYMBOL=AMOUNT (repeatable)",
)
@click.option("--start", type=str, default=None, help="Start date (YYYY-MM-DD). Defaults to 30 days ago.")
@click.option("--end", type=str, default=None, help="End date (YYYY-MM-DD). Defaults to today.")
@click.option(
    "--request", "-r", "request_file",
    type=click.Path(exists=True),
    default=None,
    help="YAML file with symbols, dates and allocations (replaces the options above)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to settings YAML file",
)
@click.option(
    "--prices", "-p",
    type=click.Path(exists=True),
    default=None,
    help="Offline prices CSV (date, symbol, close) instead of Yahoo Finance",
)
@click.option("--catalog", type=click.Path(exists=True), default=None, help="Symbol catalog JSON file")
@click.option("--seed", type=int, default=None, help="Random seed for dividend estimates and fallbacks")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option("--series", is_flag=True, help="Include daily price history in JSON output")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def run(
    symbols: tuple[str, ...],
    amounts: tuple[str, ...],
    start: Optional[str],
    end: Optional[str],
    request_file: Optional[str],
    config: Optional[str],
    prices: Optional[str],
    catalog: Optional[str],
    seed: Optional[int],
    as_json: bool,
    series: bool,
    verbose: bool,
):
    """
    Simulate a portfolio over a past period.

    Buys whole shares of each symbol at the first close of the period and
    values them at the last close. Symbols without market data are
    simulated with random prices and flagged in the output.
    """
    _configure_logging(verbose)

    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    try:
        if request_file:
            request = load_simulation_request(request_file)
        else:
            default_start, default_end = default_period()
            allocations = dict(parse_allocation(text) for text in amounts)
            request = build_request(
                symbols,
                start or default_start,
                end or default_end,
                allocations,
            )
    except RequestValidationError as e:
        click.echo(f"Invalid request: {e}", err=True)
        sys.exit(1)
    except ConfigurationError as e:
        click.echo(f"Error loading request: {e}", err=True)
        sys.exit(1)

    try:
        symbol_catalog = load_catalog(catalog or settings.catalog_path)
    except CatalogError as e:
        click.echo(f"Error loading catalog: {e}", err=True)
        sys.exit(1)

    rng = random.Random(seed if seed is not None else settings.seed)
    if prices:
        try:
            provider = CsvQuoteProvider(prices, market_suffix=settings.market_suffix, rng=rng)
        except DataProviderError as e:
            click.echo(f"Error loading prices: {e}", err=True)
            sys.exit(1)
    else:
        provider = YahooChartProvider.from_settings(settings, rng=rng)

    decision_logger = None
    if settings.decision_log_path:
        decision_logger = get_logger(settings.decision_log_path)
        decision_logger.log_config_loaded(settings, config)

    engine = SimulationEngine(
        provider=provider,
        catalog=symbol_catalog,
        decision_logger=decision_logger,
    )
    results = engine.run(request)
    summary = aggregate(results)

    if as_json:
        document = simulation_to_dict(request, results, summary, include_series=series)
        click.echo(to_json(document))
        return

    click.echo(f"Simulation {request.start_date} to {request.end_date} ({provider.name})")
    click.echo("")
    click.echo(results_to_dataframe(results).to_string(index=False))
    click.echo("")
    for line in format_summary(summary):
        click.echo(line)


@main.command()
@click.argument("query")
@click.option("--catalog", type=click.Path(exists=True), default=None, help="Symbol catalog JSON file")
def search(query: str, catalog: Optional[str]):
    """
    Search the symbol catalog by symbol or company name.
    """
    try:
        symbol_catalog = load_catalog(catalog)
    except CatalogError as e:
        click.echo(f"Error loading catalog: {e}", err=True)
        sys.exit(1)

    matches = symbol_catalog.search(query)
    if not matches:
        click.echo(f"No symbols found for {query!r}.", err=True)
        sys.exit(1)

    for record in matches:
        click.echo(f"{record.symbol:<8} {record.display_name}")


if __name__ == "__main__":
    main()
