"""
Tests for result presentation helpers.
"""

import json
from datetime import date
from decimal import Decimal

from stocksim.models import PriceQuote
from stocksim.simulation.aggregate import aggregate
from stocksim.simulation.position import compute_position
from stocksim.simulation.report import (
    RESULT_COLUMNS,
    format_summary,
    results_to_dataframe,
    series_to_dataframe,
    simulation_to_dict,
    to_json,
)


class TestResultsToDataframe:
    """Tests for the results_to_dataframe function."""

    def test_one_row_per_position(self, sample_quote):
        results = [
            compute_position("PETR4", "Petrobras PN", Decimal("1000"), sample_quote),
            compute_position("VALE3", "Vale ON", Decimal("0"), sample_quote),
        ]

        df = results_to_dataframe(results)

        assert list(df.columns) == RESULT_COLUMNS
        assert list(df["symbol"]) == ["PETR4", "VALE3"]
        assert df.loc[0, "shares"] == 100
        assert df.loc[0, "profit_pct"] == 25.0

    def test_empty_results(self):
        df = results_to_dataframe([])

        assert df.empty
        assert list(df.columns) == RESULT_COLUMNS

    def test_series_dataframe(self, sample_quote):
        result = compute_position("PETR4", "Petrobras PN", Decimal("1000"), sample_quote)

        df = series_to_dataframe(result)

        assert list(df.index) == [date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4)]
        assert df["price"].iloc[-1] == 12.0


class TestFormatSummary:
    """Tests for the format_summary function."""

    def test_summary_lines(self, sample_quote):
        summary = aggregate([compute_position("PETR4", "PETR4", Decimal("1000"), sample_quote)])

        text = "\n".join(format_summary(summary))

        assert "Total profit:        +250.00" in text
        assert "Total return:        +25.00%" in text
        assert "simulated prices" not in text

    def test_fallback_note(self):
        quote = PriceQuote(
            symbol="XPTO3",
            open_price=Decimal("50"),
            close_price=Decimal("45"),
            is_fallback=True,
        )
        summary = aggregate([compute_position("XPTO3", "XPTO3", Decimal("1000"), quote)])

        lines = format_summary(summary)

        assert "-10.00%" in lines[9]
        assert "1 position(s) use simulated prices" in lines[-1]


class TestSimulationToDict:
    """Tests for the JSON document builder."""

    def test_document_round_trips_through_json(self, sample_quote, sample_request):
        results = [compute_position("PETR4", "Petrobras PN", Decimal("1000"), sample_quote)]
        summary = aggregate(results)

        document = json.loads(to_json(simulation_to_dict(sample_request, results, summary)))

        assert document["request"]["symbols"] == ["PETR4", "VALE3", "ITUB4"]
        assert document["request"]["start_date"] == "2024-01-02"
        assert document["request"]["allocations"]["ITUB4"] == "0"
        assert document["positions"][0]["total_profit"] == "250.00"
        assert document["positions"][0]["shares_held"] == 100
        assert "series" not in document["positions"][0]
        assert document["summary"]["total_profit_percent"] == "25.00"

    def test_series_included_on_request(self, sample_quote, sample_request):
        results = [compute_position("PETR4", "Petrobras PN", Decimal("1000"), sample_quote)]

        document = simulation_to_dict(sample_request, results, aggregate(results), include_series=True)

        assert document["positions"][0]["series"][0] == {
            "date": date(2024, 1, 2),
            "price": Decimal("10.00"),
        }
