"""Input adapters that load and normalize raw statistic tables."""

from .normalize import (
    NormalizationReport,
    attach_participation,
    build_rookie_records,
    deduplicate_season_rows,
    normalize_roster,
    passes_participation,
)
from .tables import (
    RookieSubstitute,
    StatRow,
    load_records_from_csv,
    load_reference_csv,
    load_rookie_csv,
    load_roster_csv,
    load_stat_csv,
    load_supplementary_csv,
    normalize_name,
    rows_to_records,
    validate_reference,
)

__all__ = [
    "NormalizationReport",
    "RookieSubstitute",
    "StatRow",
    "attach_participation",
    "build_rookie_records",
    "deduplicate_season_rows",
    "load_records_from_csv",
    "load_reference_csv",
    "load_rookie_csv",
    "load_roster_csv",
    "load_stat_csv",
    "load_supplementary_csv",
    "normalize_name",
    "normalize_roster",
    "passes_participation",
    "rows_to_records",
    "validate_reference",
]
