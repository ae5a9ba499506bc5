"""Helper functions for functional tests with mocked HTTP responses.

This module provides helper functions for creating mock data:
- TIGER/Line tract shapefiles
- ACS API JSON tables
- Gzipped LODES WAC files

All mock data uses synthetic but realistic data for Washington DC.
"""

import gzip
import io
import re
import tempfile
import zipfile
from pathlib import Path

import geopandas as gpd
from shapely.geometry import Polygon

# DC FIPS code
DC_STATE_FIPS = "11"
DC_COUNTY_FIPS = "11001"

# Approximate location of the White House
WHITE_HOUSE_LON = -77.0365
WHITE_HOUSE_LAT = 38.8977

# Tracts with geometries in the mocked TIGER/Line file
TEST_TRACT_GEOIDS = ["11001006202", "11001006203", "11001010800"]

# Tract the ACS API returns but TIGER/Line does not contain
MISSING_TRACT_GEOID = "11001009999"

TIGER_TRACT_URL = "https://www2.census.gov/geo/tiger/TIGER2020/TRACT/tl_2020_11_tract.zip"
LODES_WAC_URL = "https://lehd.ces.census.gov/data/lodes/LODES8/dc/wac/dc_wac_S000_JT00_2021.csv.gz"
ACS_PATTERN = re.compile(r".*api\.census\.gov/data/\d+/acs/acs5.*")


def create_dc_tracts_gdf() -> gpd.GeoDataFrame:
    """Create synthetic DC tract polygons laid out left to right."""
    tracts = []
    for i, _ in enumerate(TEST_TRACT_GEOIDS):
        x = WHITE_HOUSE_LON + i * 0.01
        tracts.append(
            Polygon(
                [
                    (x, WHITE_HOUSE_LAT),
                    (x + 0.01, WHITE_HOUSE_LAT),
                    (x + 0.01, WHITE_HOUSE_LAT + 0.01),
                    (x, WHITE_HOUSE_LAT + 0.01),
                ]
            )
        )

    return gpd.GeoDataFrame(
        {
            "GEOID": TEST_TRACT_GEOIDS,
            "STATEFP": [DC_STATE_FIPS] * len(TEST_TRACT_GEOIDS),
            "COUNTYFP": ["001"] * len(TEST_TRACT_GEOIDS),
            "TRACTCE": [g[5:] for g in TEST_TRACT_GEOIDS],
            "ALAND": [50000] * len(TEST_TRACT_GEOIDS),
        },
        geometry=tracts,
        crs="EPSG:4269",
    )


def create_shapefile_zip(gdf: gpd.GeoDataFrame, name: str) -> bytes:
    """Create a ZIP file containing a shapefile from a GeoDataFrame."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Write shapefile
        shp_path = Path(tmpdir) / f"{name}.shp"
        gdf.to_file(shp_path)

        # Create ZIP
        zip_buffer = io.BytesIO()
        with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for ext in [".shp", ".shx", ".dbf", ".prj", ".cpg"]:
                file_path = Path(tmpdir) / f"{name}{ext}"
                if file_path.exists():
                    zf.write(file_path, f"{name}{ext}")

        return zip_buffer.getvalue()


def create_tract_zip() -> bytes:
    return create_shapefile_zip(create_dc_tracts_gdf(), f"tl_2020_{DC_STATE_FIPS}_tract")


def create_acs_api_response(variables: list[str], tracts: list[str]) -> list:
    """Create ACS API JSON response format."""
    header = ["NAME"] + variables + ["state", "county", "tract"]

    rows = [header]
    for n, tract in enumerate(tracts):
        name = f"Census Tract {tract[5:]}, DC"
        values = [str(1000 * (n + 1) + i) for i, _ in enumerate(variables)]
        rows.append([name] + values + [tract[:2], tract[2:5], tract[5:]])

    return rows


def create_lodes_wac_gz(rows: list[tuple[str, int, int]]) -> bytes:
    """Create a gzipped WAC file from (block GEOID, C000, CA01) tuples."""
    lines = ["w_geocode,C000,CA01,createdate"]
    lines += [f"{block},{c000},{ca01},20230321" for block, c000, ca01 in rows]
    return gzip.compress(("\n".join(lines) + "\n").encode())
