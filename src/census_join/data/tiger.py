"""TIGER/Line shapefile locations and GEOID extraction."""

from pathlib import Path
from typing import Iterable, List, Tuple

import geopandas as gpd

from census_join.core.geoid import Geoid, GeoLevel
from census_join.data.constants import TIGER_BASE_URL

# Directory and layer name of each level's shapefile within a TIGER vintage
TIGER_LAYERS = {
    GeoLevel.STATE: ("STATE", "state"),
    GeoLevel.COUNTY: ("COUNTY", "county"),
    GeoLevel.COUNTY_SUBDIVISION: ("COUSUB", "cousub"),
    GeoLevel.PLACE: ("PLACE", "place"),
    GeoLevel.TRACT: ("TRACT", "tract"),
    GeoLevel.BLOCK_GROUP: ("BG", "bg"),
    GeoLevel.BLOCK: ("TABBLOCK", "tabblock"),
}

# Levels published as a single national file rather than one per state
NATIONAL_LEVELS = {GeoLevel.STATE, GeoLevel.COUNTY}

GEOID_COLUMNS = ["GEOID", "GEOID20", "GEOID10"]


class TigerUriBuilder:
    """
    Builds TIGER/Line download URLs for a vintage year.

    Layout:
    - 2010: TIGER2010/TRACT/2010/tl_2010_08_tract10.zip
    - 2011-2019: TIGER2019/TRACT/tl_2019_08_tract.zip
    - 2020+: as above, with blocks in TABBLOCK20/tl_2020_08_tabblock20.zip
    """

    def __init__(self, year: int):
        """
        Args:
            year: TIGER/Line vintage

        Raises:
            ValueError: For vintages before 2010, which use a per-state layout
        """
        if year < 2010:
            raise ValueError(f"TIGER/Line vintage {year} is not supported (2010 or later)")
        self.year = year

    def uri(self, level: GeoLevel, state_fips: str) -> str:
        """Return the URL of the shapefile holding ``level`` geometries for a state."""
        directory, layer = TIGER_LAYERS[level]
        scope = "us" if level in NATIONAL_LEVELS else state_fips

        if self.year == 2010:
            return (
                f"{TIGER_BASE_URL}/TIGER2010/{directory}/2010/"
                f"tl_2010_{scope}_{layer}10.zip"
            )
        if level is GeoLevel.BLOCK:
            if self.year >= 2020:
                directory, layer = "TABBLOCK20", "tabblock20"
            else:
                layer = "tabblock10"
        return f"{TIGER_BASE_URL}/TIGER{self.year}/{directory}/tl_{self.year}_{scope}_{layer}.zip"

    def uri_for_geoid(self, geoid: Geoid) -> str:
        return self.uri(geoid.level, geoid.state_fips)

    def uris_for(self, geoids: Iterable[Geoid]) -> List[str]:
        """Distinct shapefile URLs covering the given GEOIDs, in first-seen order."""
        seen = {}
        for geoid in geoids:
            seen.setdefault(self.uri_for_geoid(geoid), None)
        return list(seen)


def read_geometries(shapefile_dir: Path) -> List[Tuple[Geoid, object]]:
    """
    Read (GEOID, geometry) pairs from an extracted TIGER/Line shapefile.

    Args:
        shapefile_dir: Directory containing the .shp file (from download extraction)

    Raises:
        FileNotFoundError: If the directory contains no shapefile
        ValueError: If no GEOID column is present or a GEOID cannot be parsed
    """
    shp_files = sorted(shapefile_dir.glob("*.shp"))
    if not shp_files:
        raise FileNotFoundError(f"No shapefile found in {shapefile_dir}")

    gdf = gpd.read_file(shp_files[0])

    geoid_column = next((c for c in GEOID_COLUMNS if c in gdf.columns), None)
    if geoid_column is None:
        raise ValueError(f"No GEOID column in {shp_files[0].name} (columns: {list(gdf.columns)})")

    return [
        (Geoid.parse(str(value)), geometry)
        for value, geometry in zip(gdf[geoid_column], gdf.geometry)
    ]
