"""
Column layout of the offline price file.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnSchema:
    """One column of a price file."""
    name: str
    dtype: str  # pandas dtype after parsing
    nullable: bool = False


@dataclass(frozen=True)
class FileSchema:
    """Columns a price file must provide. Extra columns are ignored."""
    name: str
    columns: tuple[ColumnSchema, ...]

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def missing_columns(self, present: list[str]) -> list[str]:
        """Return the schema columns absent from `present`, in schema order."""
        available = {str(c).strip().lower() for c in present}
        return [name for name in self.column_names if name not in available]


# One row per symbol and trading day; blank closes are skipped
PRICES_SCHEMA = FileSchema(
    name="daily_closes",
    columns=(
        ColumnSchema(name="date", dtype="datetime64[ns]"),
        ColumnSchema(name="symbol", dtype="object"),
        ColumnSchema(name="close", dtype="float64", nullable=True),
    ),
)
