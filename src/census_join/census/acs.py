"""American Community Survey (ACS) API queries and response parsing.

Reference: https://www.census.gov/data/developers/data-sets/acs-5year.html
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from census_join.core.geoid import Geoid, GeoidError, GeoLevel
from census_join.data.constants import CENSUS_API_BASE
from census_join.ops.join import AttributeRow, AttributeValue


class AcsType(Enum):
    """ACS estimate period."""

    ONE_YEAR = "acs1"
    FIVE_YEAR = "acs5"

    @property
    def years(self) -> int:
        return 1 if self is AcsType.ONE_YEAR else 5

    @classmethod
    def from_years(cls, years: int) -> "AcsType":
        if years == 1:
            return cls.ONE_YEAR
        if years == 5:
            return cls.FIVE_YEAR
        raise ValueError(f"unknown acs type {years}")


@dataclass(frozen=True)
class AcsQuery:
    """
    A Census Data API query for ACS estimates.

    Either a single region (``geoid``), or every region of the ``wildcard``
    level, optionally restricted to those inside ``geoid``:

    >>> AcsQuery(2020, AcsType.FIVE_YEAR, ("B01001_001E",),
    ...          geoid=Geoid.parse("08"), wildcard=GeoLevel.COUNTY).geography_params()
    {'for': 'county:*', 'in': 'state:08'}
    """

    year: int
    acs_type: AcsType
    get: Tuple[str, ...]
    geoid: Optional[Geoid] = None
    wildcard: Optional[GeoLevel] = None
    token: Optional[str] = None

    def __post_init__(self):
        if not self.get:
            raise ValueError("ACS query requires at least one variable")
        if self.geoid is None and self.wildcard is None:
            raise ValueError("ACS query requires a geoid, a wildcard level, or both")
        if (
            self.geoid is not None
            and self.wildcard is not None
            and not self.geoid.level.is_ancestor_of(self.wildcard)
        ):
            raise ValueError(
                f"wildcard {self.wildcard.label} is not contained in "
                f"{self.geoid.level.label} geographies"
            )

    @property
    def result_level(self) -> GeoLevel:
        """Level of the GEOIDs in the response."""
        if self.wildcard is not None:
            return self.wildcard
        assert self.geoid is not None
        return self.geoid.level

    @property
    def api_base(self) -> str:
        return f"{CENSUS_API_BASE}/{self.year}/acs/{self.acs_type.value}"

    def geography_params(self) -> Dict[str, str]:
        """Build the ``for``/``in`` geography predicates."""
        if self.wildcard is not None:
            params = {"for": f"{self.wildcard.api_name}:*"}
            if self.geoid is not None:
                params["in"] = _predicates(self.geoid)
            return params

        assert self.geoid is not None
        level = self.geoid.level
        last = level.component_types[-1].encode(self.geoid.components[-1])
        params = {"for": f"{level.api_name}:{last}"}
        parent = self.geoid.parent()
        if parent is not None:
            params["in"] = _predicates(parent)
        return params

    def params(self) -> Dict[str, str]:
        params = {"get": ",".join(self.get), **self.geography_params()}
        if self.token:
            params["key"] = self.token
        return params

    def url(self) -> str:
        return f"{self.api_base}?{urlencode(self.params())}"


def _predicates(geoid: Geoid) -> str:
    # Place GEOIDs hang off the state, so every level's components map
    # directly onto API predicates (e.g., "state:08 county:059")
    return " ".join(
        f"{ct.api_name}:{ct.encode(v)}"
        for ct, v in zip(geoid.level.component_types, geoid.components)
    )


def _coerce(value: Any) -> Union[float, str, None]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return str(value)


def parse_acs_response(
    data: Sequence[Sequence[Any]],
    query: AcsQuery,
) -> Tuple[List[AttributeRow], List[str]]:
    """
    Parse a Census Data API JSON table into attribute rows.

    The first row is the header; geography columns (state, county, ...) are
    decoded into a GEOID and the requested variables become attribute values
    in query order. Numeric strings become floats.

    Returns:
        Tuple of (rows, error messages for records that could not be parsed)

    Raises:
        ValueError: If the header lacks a geography or requested column
    """
    if not data:
        raise ValueError("empty ACS response")

    header = list(data[0])
    level = query.result_level
    geo_columns = [ct.api_name for ct in level.component_types]
    missing = [c for c in list(geo_columns) + list(query.get) if c not in header]
    if missing:
        raise ValueError(f"ACS response is missing columns: {', '.join(missing)}")

    geo_index = [header.index(c) for c in geo_columns]
    value_index = [(header.index(name), name) for name in query.get]

    rows: List[AttributeRow] = []
    errors: List[str] = []
    for n, record in enumerate(data[1:], start=1):
        try:
            geoid = Geoid.from_components(level, [str(record[i]) for i in geo_index])
            values = [AttributeValue(name, _coerce(record[i])) for i, name in value_index]
        except (GeoidError, IndexError) as e:
            errors.append(f"ACS row {n} could not be parsed: {e}")
            continue
        rows.append((geoid, values))

    return rows, errors
