"""Data sources for census-join."""

from census_join.data.constants import FIPS_STATES, STATE_ABBREVS, normalize_state
from census_join.data.tiger import TigerUriBuilder, read_geometries

__all__ = [
    "TigerUriBuilder",
    "read_geometries",
    "FIPS_STATES",
    "STATE_ABBREVS",
    "normalize_state",
]
