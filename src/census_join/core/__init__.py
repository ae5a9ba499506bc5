"""Core GEOID model for census-join."""

from census_join.core.fips import ComponentType, GeoidError, MalformedComponent
from census_join.core.geoid import Geoid, GeoLevel, NotAnAncestor, UnsupportedLength

__all__ = [
    "ComponentType",
    "Geoid",
    "GeoLevel",
    "GeoidError",
    "MalformedComponent",
    "NotAnAncestor",
    "UnsupportedLength",
]
