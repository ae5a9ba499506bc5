"""
census-join: Census GEOIDs and statistical/boundary joins for Python.

Parse and navigate Census geographic identifiers, then join ACS estimates
or LODES employment counts with TIGER/Line boundaries.

Supports:
- GEOIDs for states, counties, county subdivisions, places, tracts,
  block groups and blocks
- ACS 1-Year and 5-Year Estimates via the Census Data API
- LODES Origin-Destination, Residence and Workplace Area Characteristics
"""

from census_join.census.acs import AcsQuery, AcsType, parse_acs_response
from census_join.core.fips import ComponentType, GeoidError, MalformedComponent
from census_join.core.geoid import (
    BlockGeoid,
    BlockGroupGeoid,
    CensusTractGeoid,
    CountyGeoid,
    CountySubdivisionGeoid,
    Geoid,
    GeoLevel,
    NotAnAncestor,
    PlaceGeoid,
    StateGeoid,
    UnsupportedLength,
)
from census_join.core.pipeline import CensusJoin, JoinResponse, run_acs_tiger, run_lodes_tiger
from census_join.data.constants import (
    FIPS_STATES,
    STATE_ABBREVS,
    get_state_abbrev,
    get_state_name,
    normalize_state,
)
from census_join.data.downloader import DownloadError
from census_join.data.tiger import TigerUriBuilder
from census_join.lodes import (
    DataUnavailable,
    LodesDataset,
    LodesEdition,
    LodesJobType,
    LodesKind,
    OdPart,
    WorkplaceSegment,
    locate,
    read_lodes_rows,
    validate_availability,
)
from census_join.ops import (
    AttributeValue,
    JoinedRow,
    JoinResult,
    NumericAggregation,
    aggregate,
    aggregate_by_level,
    partition_chunks,
    run_join,
)

__version__ = "0.1.0"
__all__ = [
    # Main API
    "CensusJoin",
    "JoinResponse",
    "run_acs_tiger",
    "run_lodes_tiger",
    # GEOIDs
    "Geoid",
    "GeoLevel",
    "ComponentType",
    "StateGeoid",
    "CountyGeoid",
    "CountySubdivisionGeoid",
    "PlaceGeoid",
    "CensusTractGeoid",
    "BlockGroupGeoid",
    "BlockGeoid",
    # Exceptions
    "GeoidError",
    "MalformedComponent",
    "UnsupportedLength",
    "NotAnAncestor",
    "DataUnavailable",
    "DownloadError",
    # Join and aggregation
    "AttributeValue",
    "JoinedRow",
    "JoinResult",
    "NumericAggregation",
    "aggregate",
    "aggregate_by_level",
    "partition_chunks",
    "run_join",
    # ACS
    "AcsQuery",
    "AcsType",
    "parse_acs_response",
    # TIGER/Line
    "TigerUriBuilder",
    # LODES
    "LodesDataset",
    "LodesEdition",
    "LodesJobType",
    "LodesKind",
    "OdPart",
    "WorkplaceSegment",
    "locate",
    "read_lodes_rows",
    "validate_availability",
    # States
    "FIPS_STATES",
    "STATE_ABBREVS",
    "normalize_state",
    "get_state_name",
    "get_state_abbrev",
]
