"""LODES bulk dataset descriptors, locations and readers."""

from census_join.lodes.dataset import (
    BASE_URL,
    LATEST_YEAR,
    UNAVAILABLE,
    AvailabilityGap,
    DataUnavailable,
    LodesDataset,
    LodesEdition,
    LodesJobType,
    LodesKind,
    OdPart,
    WorkplaceSegment,
    locate,
    validate_availability,
)
from census_join.lodes.reader import read_lodes_rows

__all__ = [
    "BASE_URL",
    "LATEST_YEAR",
    "UNAVAILABLE",
    "AvailabilityGap",
    "DataUnavailable",
    "LodesDataset",
    "LodesEdition",
    "LodesJobType",
    "LodesKind",
    "OdPart",
    "WorkplaceSegment",
    "locate",
    "read_lodes_rows",
    "validate_availability",
]
