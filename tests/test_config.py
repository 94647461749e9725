"""
Tests for settings loading and request assembly.
"""

from datetime import date
from decimal import Decimal

import pytest

from stocksim.config import (
    ENV_SETTINGS,
    ConfigurationError,
    RequestValidationError,
    build_request,
    default_period,
    load_settings,
    load_simulation_request,
    parse_allocation,
)
from stocksim.models import SimulationSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove STOCKSIM_* variables so the host environment cannot leak in."""
    for env_name in ENV_SETTINGS:
        monkeypatch.delenv(env_name, raising=False)


class TestLoadSettings:
    """Tests for the load_settings function."""

    def test_defaults(self, tmp_path):
        settings = load_settings(env_file=tmp_path / "missing.env")

        assert settings == SimulationSettings()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "settings:\n"
            "  market_suffix: .US\n"
            "  timeout: 5\n"
            "  seed: 42\n"
            "  decision_log_path: out/log.jsonl\n"
        )

        settings = load_settings(path, env_file=tmp_path / "missing.env")

        assert settings.market_suffix == ".US"
        assert settings.timeout == 5.0
        assert settings.seed == 42
        assert settings.decision_log_path == "out/log.jsonl"

    def test_env_file_overrides_yaml(self, tmp_path):
        yaml_path = tmp_path / "settings.yaml"
        yaml_path.write_text("timeout: 5\n")
        env_path = tmp_path / ".env"
        env_path.write_text("STOCKSIM_TIMEOUT=7.5\nSTOCKSIM_SEED=9\n")

        settings = load_settings(yaml_path, env_file=env_path)

        assert settings.timeout == 7.5
        assert settings.seed == 9

    def test_environment_overrides_env_file(self, tmp_path, monkeypatch):
        env_path = tmp_path / ".env"
        env_path.write_text("STOCKSIM_MARKET_SUFFIX=.US\n")
        monkeypatch.setenv("STOCKSIM_MARKET_SUFFIX", ".L")

        settings = load_settings(env_file=env_path)

        assert settings.market_suffix == ".L"

    def test_env_file_found_in_current_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("STOCKSIM_SEED=17\n")
        monkeypatch.chdir(tmp_path)

        settings = load_settings()

        assert settings.seed == 17

    def test_missing_yaml_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("settings: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_settings(path)

    @pytest.mark.parametrize(
        "env_name,value",
        [
            ("STOCKSIM_TIMEOUT", "soon"),
            ("STOCKSIM_TIMEOUT", "0"),
            ("STOCKSIM_SEED", "abc"),
            ("STOCKSIM_BASE_URL", "ftp://example.test"),
        ],
    )
    def test_invalid_values(self, tmp_path, monkeypatch, env_name, value):
        monkeypatch.setenv(env_name, value)

        with pytest.raises(ConfigurationError):
            load_settings(env_file=tmp_path / "missing.env")


class TestBuildRequest:
    """Tests for the build_request function."""

    def test_valid_request(self):
        request = build_request(
            ["petr4", "VALE3"],
            "2024-01-02",
            "2024-06-28",
            {"PETR4": "1000", "vale3": 500},
        )

        assert request.symbols == ("PETR4", "VALE3")
        assert request.start_date == date(2024, 1, 2)
        assert request.end_date == date(2024, 6, 28)
        assert request.allocations == {"PETR4": Decimal("1000"), "VALE3": Decimal("500")}
        assert request.total_allocation == Decimal("1500")

    def test_duplicates_removed_keeping_order(self):
        request = build_request(
            ["VALE3", "PETR4", "vale3"],
            date(2024, 1, 2),
            date(2024, 6, 28),
            {"PETR4": 1},
        )

        assert request.symbols == ("VALE3", "PETR4")
        assert request.allocation_for("VALE3") == Decimal("0")

    def test_empty_symbols_rejected(self):
        with pytest.raises(RequestValidationError, match="at least one symbol"):
            build_request([], "2024-01-02", "2024-06-28", {})

    def test_missing_dates_rejected(self):
        with pytest.raises(RequestValidationError, match="required"):
            build_request(["PETR4"], None, "2024-06-28", {"PETR4": 1})

    @pytest.mark.parametrize(
        "start,end",
        [("2024-06-28", "2024-01-02"), ("2024-01-02", "2024-01-02")],
    )
    def test_inverted_dates_rejected(self, start, end):
        with pytest.raises(RequestValidationError, match="before"):
            build_request(["PETR4"], start, end, {"PETR4": 1})

    def test_bad_date_format(self):
        with pytest.raises(RequestValidationError, match="Invalid date format"):
            build_request(["PETR4"], "02/01/2024", "2024-06-28", {"PETR4": 1})

    def test_zero_total_rejected(self):
        with pytest.raises(RequestValidationError, match="investment amount"):
            build_request(["PETR4", "VALE3"], "2024-01-02", "2024-06-28", {"PETR4": 0})

    def test_negative_allocation_rejected(self):
        with pytest.raises(RequestValidationError, match=">= 0"):
            build_request(["PETR4"], "2024-01-02", "2024-06-28", {"PETR4": "-10"})

    def test_allocation_for_unselected_symbol_rejected(self):
        with pytest.raises(RequestValidationError, match="not among the selected"):
            build_request(["PETR4"], "2024-01-02", "2024-06-28", {"PETR4": 1, "VALE3": 1})


class TestLoadSimulationRequest:
    """Tests for the load_simulation_request function."""

    def test_load_request(self, tmp_path):
        path = tmp_path / "request.yaml"
        path.write_text(
            "symbols: [PETR4, VALE3]\n"
            "start_date: 2024-01-02\n"
            "end_date: 2024-06-28\n"
            "allocations:\n"
            "  PETR4: 1000\n"
            "  VALE3: 500.50\n"
        )

        request = load_simulation_request(path)

        assert request.symbols == ("PETR4", "VALE3")
        assert request.start_date == date(2024, 1, 2)
        assert request.allocation_for("VALE3") == Decimal("500.5")

    def test_missing_field(self, tmp_path):
        path = tmp_path / "request.yaml"
        path.write_text("symbols: [PETR4]\nstart_date: 2024-01-02\n")

        with pytest.raises(RequestValidationError, match="end_date"):
            load_simulation_request(path)


class TestParseAllocation:
    """Tests for the parse_allocation function."""

    def test_valid_pair(self):
        assert parse_allocation("petr4=1000.50") == ("PETR4", Decimal("1000.50"))

    @pytest.mark.parametrize("text", ["PETR4", "=100", "PETR4=abc", "PETR4=-5"])
    def test_invalid_pairs(self, text):
        with pytest.raises(RequestValidationError):
            parse_allocation(text)


class TestDefaultPeriod:
    """Tests for the default_period function."""

    def test_last_thirty_days(self):
        assert default_period(date(2024, 3, 31)) == (date(2024, 3, 1), date(2024, 3, 31))
