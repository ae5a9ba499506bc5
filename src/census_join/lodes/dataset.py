"""LODES bulk dataset descriptors and remote file locations.

LODES (LEHD Origin-Destination Employment Statistics) files are published
per state as gzipped CSVs following the naming conventions in the LODES
technical documentation:
https://lehd.ces.census.gov/data/lodes/LODES8/LODESTechDoc8.1.pdf
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from census_join.core.geoid import Geoid, GeoLevel
from census_join.data.constants import (
    FIPS_STATES,
    LODES_BASE_URL,
    get_state_abbrev,
    get_state_name,
    normalize_state,
)

BASE_URL = LODES_BASE_URL
LATEST_YEAR = 2021


class DataUnavailable(ValueError):
    """LODES data is known to be missing for a state and year."""

    def __init__(self, state_fips: str, year: int):
        self.state_fips = state_fips
        self.year = year
        super().__init__(
            f"LODES data is not available in {year} for "
            f"{get_state_name(state_fips)} (code {state_fips})"
        )


class LodesEdition(Enum):
    """LODES releases; each is built on one TIGER/Line vintage."""

    LODES5 = "LODES5"
    LODES7 = "LODES7"
    LODES8 = "LODES8"

    @property
    def tiger_year(self) -> int:
        """TIGER/Line year whose block GEOIDs this edition uses."""
        years = {
            LodesEdition.LODES5: 2009,
            LodesEdition.LODES7: 2010,
            LodesEdition.LODES8: 2020,
        }
        return years[self]


class LodesJobType(Enum):
    JT00 = "JT00"
    JT01 = "JT01"
    JT02 = "JT02"
    JT03 = "JT03"
    JT04 = "JT04"
    JT05 = "JT05"

    @property
    def description(self) -> str:
        descriptions = {
            LodesJobType.JT00: "All Jobs",
            LodesJobType.JT01: "Primary Jobs",
            LodesJobType.JT02: "All Private Jobs",
            LodesJobType.JT03: "Private Primary Jobs",
            LodesJobType.JT04: "All Federal Jobs",
            LodesJobType.JT05: "Federal Primary Jobs",
        }
        return descriptions[self]


class OdPart(Enum):
    """Origin-Destination file part: in-state residents or out-of-state."""

    MAIN = "main"
    AUX = "aux"


class WorkplaceSegment(Enum):
    """Worker segments for WAC and RAC files."""

    S000 = "S000"
    SA01 = "SA01"
    SA02 = "SA02"
    SA03 = "SA03"
    SE01 = "SE01"
    SE02 = "SE02"
    SE03 = "SE03"
    SI01 = "SI01"
    SI02 = "SI02"
    SI03 = "SI03"

    @property
    def description(self) -> str:
        descriptions = {
            WorkplaceSegment.S000: "Total number of jobs",
            WorkplaceSegment.SA01: "Jobs of workers age 29 or younger",
            WorkplaceSegment.SA02: "Jobs for workers age 30 to 54",
            WorkplaceSegment.SA03: "Jobs for workers age 55 or older",
            WorkplaceSegment.SE01: "Jobs with earnings $1250/month or less",
            WorkplaceSegment.SE02: "Jobs with earnings $1251/month to $3333/month",
            WorkplaceSegment.SE03: "Jobs with earnings greater than $3333/month",
            WorkplaceSegment.SI01: "Jobs in Goods Producing industry sectors",
            WorkplaceSegment.SI02: "Jobs in Trade, Transportation, and Utilities industry sectors",
            WorkplaceSegment.SI03: "Jobs in All Other Services industry sectors",
        }
        return descriptions[self]


class LodesKind(Enum):
    OD = "od"
    RAC = "rac"
    WAC = "wac"


@dataclass(frozen=True)
class AvailabilityGap:
    """Inclusive range of years with no LODES data for a state."""

    state_fips: str
    first_year: int
    last_year: int

    def covers(self, year: int, state_fips: str) -> bool:
        return self.state_fips == state_fips and self.first_year <= year <= self.last_year


# From the LODES technical documentation. Add new gaps here.
UNAVAILABLE: List[AvailabilityGap] = [
    AvailabilityGap("05", 2002, 2002),  # Arkansas
    AvailabilityGap("33", 2002, 2002),  # New Hampshire
    AvailabilityGap("04", 2002, 2003),  # Arizona
    AvailabilityGap("28", 2002, 2003),  # Mississippi
    AvailabilityGap("11", 2002, 2009),  # District of Columbia
    AvailabilityGap("25", 2002, 2010),  # Massachusetts
    AvailabilityGap("02", 2017, 2020),  # Alaska
    AvailabilityGap("05", 2019, 2020),  # Arkansas
    AvailabilityGap("28", 2019, 2020),  # Mississippi
]


def validate_availability(year: int, state: Union[str, Geoid]) -> None:
    """
    Check that LODES publishes data for a state in a year.

    Args:
        year: Data year
        state: State name, abbreviation, FIPS code, or any GEOID in the state

    Raises:
        DataUnavailable: If the state/year combination is a known gap
        ValueError: If the state is not recognized
    """
    if isinstance(state, Geoid):
        state_fips = state.state_fips
    else:
        state_fips = normalize_state(state)

    for gap in UNAVAILABLE:
        if gap.covers(year, state_fips):
            raise DataUnavailable(state_fips, year)


@dataclass(frozen=True)
class LodesDataset:
    """
    Describes one family of LODES files.

    Origin-Destination (OD) files are split into parts; Residence and
    Workplace Area Characteristic (RAC/WAC) files into worker segments.
    Use the ``od``, ``rac`` and ``wac`` constructors.
    """

    kind: LodesKind
    edition: LodesEdition
    job_type: LodesJobType
    year: int
    od_part: Optional[OdPart] = None
    segment: Optional[WorkplaceSegment] = None

    def __post_init__(self):
        if self.kind is LodesKind.OD:
            if self.od_part is None or self.segment is not None:
                raise ValueError("OD datasets require an od_part and no segment")
        elif self.segment is None or self.od_part is not None:
            raise ValueError(f"{self.kind.value.upper()} datasets require a segment and no od_part")

    @classmethod
    def od(
        cls,
        year: int = LATEST_YEAR,
        od_part: OdPart = OdPart.MAIN,
        job_type: LodesJobType = LodesJobType.JT00,
        edition: LodesEdition = LodesEdition.LODES8,
    ) -> "LodesDataset":
        return cls(LodesKind.OD, edition, job_type, year, od_part=od_part)

    @classmethod
    def rac(
        cls,
        year: int = LATEST_YEAR,
        segment: WorkplaceSegment = WorkplaceSegment.S000,
        job_type: LodesJobType = LodesJobType.JT00,
        edition: LodesEdition = LodesEdition.LODES8,
    ) -> "LodesDataset":
        return cls(LodesKind.RAC, edition, job_type, year, segment=segment)

    @classmethod
    def wac(
        cls,
        year: int = LATEST_YEAR,
        segment: WorkplaceSegment = WorkplaceSegment.S000,
        job_type: LodesJobType = LodesJobType.JT00,
        edition: LodesEdition = LodesEdition.LODES8,
    ) -> "LodesDataset":
        return cls(LodesKind.WAC, edition, job_type, year, segment=segment)

    @property
    def dataset_directory(self) -> str:
        return self.kind.value

    @property
    def tiger_year(self) -> int:
        """TIGER/Line year to download complementary geometries from."""
        return self.edition.tiger_year

    @property
    def geocode_column(self) -> str:
        """Column holding the block GEOID that rows are keyed by."""
        if self.kind is LodesKind.RAC:
            return "h_geocode"
        return "w_geocode"

    def _file_fields(self) -> str:
        if self.kind is LodesKind.OD:
            assert self.od_part is not None
            return f"{self.od_part.value}_{self.job_type.value}"
        assert self.segment is not None
        return f"{self.segment.value}_{self.job_type.value}"

    def description(self) -> str:
        if self.kind is LodesKind.OD:
            assert self.od_part is not None
            return (
                f"{self.year} {self.edition.value} {self.od_part.value} Origin-Destination data, "
                f"{self.job_type.description} totals are associated with both a home "
                "Census Block and a work Census Block"
            )
        assert self.segment is not None
        if self.kind is LodesKind.RAC:
            area, block = "Residence", "home"
        else:
            area, block = "Workplace", "work"
        return (
            f"{self.year} {self.edition.value} {self.segment.value} {area} Area Characteristic "
            f"data, {self.job_type.description} are totaled by {block} Census Block"
        )

    def create_uri(self, geoid: Geoid) -> str:
        """
        Build the URI of this dataset's file for the state containing geoid.

        Raises:
            DataUnavailable: If LODES has no data for the state in this year
            ValueError: If the GEOID's state code is not a known state
        """
        state_fips = geoid.state_fips
        if state_fips not in FIPS_STATES:
            raise ValueError(f"Unknown state FIPS code: {state_fips}")
        validate_availability(self.year, state_fips)

        state_code = get_state_abbrev(state_fips).lower()
        filename = f"{state_code}_{self.kind.value}_{self._file_fields()}_{self.year}.csv.gz"
        return "/".join(
            [BASE_URL, self.edition.value, state_code, self.dataset_directory, filename]
        )

    def output_filename(self, wildcard: Optional[GeoLevel] = None) -> str:
        """Name for an output file of this dataset aggregated to ``wildcard``."""
        out_res = wildcard or GeoLevel.BLOCK
        part = self.od_part if self.kind is LodesKind.OD else self.segment
        assert part is not None
        return (
            f"{self.edition.value}_{self.kind.value}_{self.year}_"
            f"{self.job_type.value}_{part.value}_{out_res.value}.csv"
        )


def locate(dataset: LodesDataset, geoid: Geoid) -> str:
    """Return the URI of a LODES file for the state containing geoid."""
    return dataset.create_uri(geoid)
