"""Census Data API queries for census-join."""

from census_join.census.acs import AcsQuery, AcsType, parse_acs_response

__all__ = [
    "AcsQuery",
    "AcsType",
    "parse_acs_response",
]
