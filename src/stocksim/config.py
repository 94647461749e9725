"""
Configuration loading and request assembly for the portfolio return simulator.

This module loads runtime settings from YAML files, .env files and
environment variables, and builds validated SimulationRequest objects from
caller input. The simulation engine assumes requests were validated here.
"""

import os
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import yaml
from dotenv import dotenv_values

from stocksim.models import SimulationRequest, SimulationSettings


# .env file name, resolved against the working directory at load time
DEFAULT_ENV_FILE = ".env"

# Environment variables and the settings field each one overrides
ENV_SETTINGS = {
    "STOCKSIM_BASE_URL": "base_url",
    "STOCKSIM_MARKET_SUFFIX": "market_suffix",
    "STOCKSIM_TIMEOUT": "timeout",
    "STOCKSIM_SEED": "seed",
    "STOCKSIM_CATALOG": "catalog_path",
    "STOCKSIM_DECISION_LOG": "decision_log_path",
}

# Default simulation window when the caller gives no dates
DEFAULT_LOOKBACK_DAYS = 30


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


class RequestValidationError(ConfigurationError):
    """Raised when a simulation request is incomplete or inconsistent."""
    pass


def load_settings(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> SimulationSettings:
    """
    Load simulation settings from multiple sources with priority.

    Sources are checked in this order (later sources override earlier):
    1. YAML settings file (if given)
    2. .env file (defaults to .env in the working directory)
    3. Environment variables (STOCKSIM_*)

    Args:
        config_path: Path to a YAML settings file
        env_file: Path to .env file

    Returns:
        SimulationSettings

    Raises:
        ConfigurationError: If a source cannot be read or a value is invalid
    """
    raw: dict[str, Any] = {}

    # 1. YAML settings file
    if config_path:
        yaml_config = _load_yaml(Path(config_path))
        settings_section = yaml_config.get("settings", yaml_config)
        if not isinstance(settings_section, dict):
            raise ConfigurationError("settings section must be a mapping")
        for key in ENV_SETTINGS.values():
            if key in settings_section:
                raw[key] = settings_section[key]

    # 2. .env file
    env_path = Path(env_file) if env_file else Path.cwd() / DEFAULT_ENV_FILE
    if env_path.exists():
        env_values = dotenv_values(env_path)
        for env_name, key in ENV_SETTINGS.items():
            if env_values.get(env_name):
                raw[key] = env_values[env_name]

    # 3. Environment variables (highest priority)
    for env_name, key in ENV_SETTINGS.items():
        if os.environ.get(env_name):
            raw[key] = os.environ[env_name]

    return _parse_settings(raw)


def _load_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
    return loaded


def _parse_settings(raw: dict[str, Any]) -> SimulationSettings:
    """
    Parse and validate raw settings into SimulationSettings.

    Raises:
        ConfigurationError: If a value is invalid
    """
    defaults = SimulationSettings()

    try:
        timeout = float(raw.get("timeout", defaults.timeout))
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid timeout value: {raw.get('timeout')}")
    if timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {timeout}")

    seed = raw.get("seed")
    if seed is not None:
        try:
            seed = int(seed)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid seed value: {seed}")

    base_url = str(raw.get("base_url", defaults.base_url)).strip()
    if not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"base_url must be an http(s) URL, got {base_url!r}")

    catalog_path = raw.get("catalog_path")
    decision_log_path = raw.get("decision_log_path")

    return SimulationSettings(
        base_url=base_url,
        market_suffix=str(raw.get("market_suffix", defaults.market_suffix)).strip(),
        timeout=timeout,
        seed=seed,
        catalog_path=str(catalog_path) if catalog_path else None,
        decision_log_path=str(decision_log_path) if decision_log_path else None,
    )


def build_request(
    symbols: Iterable[str],
    start_date: Any,
    end_date: Any,
    allocations: Optional[Mapping[str, Any]] = None,
) -> SimulationRequest:
    """
    Build and validate a simulation request from caller input.

    Symbols are upper-cased and de-duplicated, keeping the first occurrence
    so the caller's order is preserved.

    Args:
        symbols: Ticker symbols in the order chosen by the caller
        start_date: Start date (date or YYYY-MM-DD string)
        end_date: End date (date or YYYY-MM-DD string)
        allocations: Amount to invest per symbol

    Returns:
        Validated SimulationRequest

    Raises:
        RequestValidationError: If the request is empty or inconsistent
    """
    ordered: list[str] = []
    for symbol in symbols:
        symbol = str(symbol).upper().strip()
        if symbol and symbol not in ordered:
            ordered.append(symbol)

    if not ordered:
        raise RequestValidationError("Select at least one symbol")

    if start_date is None or end_date is None:
        raise RequestValidationError("Both start_date and end_date are required")
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")
    if start >= end:
        raise RequestValidationError(
            f"start_date must be before end_date, got {start} >= {end}"
        )

    parsed: dict[str, Decimal] = {}
    for symbol, amount in (allocations or {}).items():
        key = str(symbol).upper().strip()
        value = _parse_decimal(amount, f"allocation for {key}", min_val=Decimal("0"))
        if key not in ordered:
            raise RequestValidationError(
                f"Allocation given for {key}, which is not among the selected symbols"
            )
        parsed[key] = value

    request = SimulationRequest(
        symbols=tuple(ordered),
        start_date=start,
        end_date=end,
        allocations=parsed,
    )
    if request.total_allocation == 0:
        raise RequestValidationError("Set an investment amount for at least one symbol")

    return request


def load_simulation_request(request_path: str | Path) -> SimulationRequest:
    """
    Load a simulation request from a YAML file.

    Expected layout:
        symbols: [PETR4, VALE3]
        start_date: 2024-01-02
        end_date: 2024-06-28
        allocations:
          PETR4: 1000
          VALE3: 500

    Raises:
        RequestValidationError: If required fields are missing or invalid
        ConfigurationError: If the file cannot be read
    """
    raw = _load_yaml(Path(request_path))

    for field in ("symbols", "start_date", "end_date"):
        if field not in raw:
            raise RequestValidationError(f"Missing required request field: {field}")

    symbols = raw["symbols"]
    if isinstance(symbols, str):
        symbols = [symbols]
    if not isinstance(symbols, list):
        raise RequestValidationError("symbols must be a list")

    allocations = raw.get("allocations") or {}
    if not isinstance(allocations, dict):
        raise RequestValidationError("allocations must be a mapping of symbol to amount")

    return build_request(symbols, raw["start_date"], raw["end_date"], allocations)


def parse_allocation(text: str) -> tuple[str, Decimal]:
    """
    Parse a SYMBOL=AMOUNT pair.

    Raises:
        RequestValidationError: If the text is not a valid pair
    """
    symbol, sep, amount = text.partition("=")
    symbol = symbol.upper().strip()
    if not sep or not symbol:
        raise RequestValidationError(f"Invalid allocation {text!r}. Use SYMBOL=AMOUNT")
    return symbol, _parse_decimal(amount.strip(), f"allocation for {symbol}", min_val=Decimal("0"))


def default_period(today: Optional[date] = None) -> tuple[date, date]:
    """Default simulation window: the last 30 days ending today."""
    end = today or date.today()
    return end - timedelta(days=DEFAULT_LOOKBACK_DAYS), end


def _parse_date(value: Any, field_name: str) -> date:
    """
    Parse a date value from various formats.

    Raises:
        RequestValidationError: If the date cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            pass

    raise RequestValidationError(
        f"Invalid date format for {field_name}: {value}. Expected YYYY-MM-DD"
    )


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Decimal | None = None,
) -> Decimal:
    """
    Parse a decimal value with optional lower bound.

    Raises:
        RequestValidationError: If the value is invalid or out of range
    """
    if value is None or value == "":
        return Decimal("0")

    try:
        decimal_value = Decimal(str(value))
    except Exception:
        raise RequestValidationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise RequestValidationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise RequestValidationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    return decimal_value
