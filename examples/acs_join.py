"""Example of joining ACS (American Community Survey) estimates with tract boundaries.

Runs a wildcard query for every census tract in Jefferson County, CO and
attaches the TIGER/Line polygon of each tract.

Set CENSUS_API_KEY to raise the Census Data API rate limit.
"""

import asyncio
import os

from census_join import AcsQuery, AcsType, Geoid, GeoLevel, run_acs_tiger

query = AcsQuery(
    year=2020,
    acs_type=AcsType.FIVE_YEAR,
    get=(
        "B01001_001E",  # Total population
        "B19013_001E",  # Median household income
    ),
    geoid=Geoid.parse("08059"),  # Jefferson County, CO
    wildcard=GeoLevel.TRACT,
    token=os.environ.get("CENSUS_API_KEY"),
)

print("=" * 60)
print("ACS query")
print("=" * 60)
print(query.url())
print()

response = asyncio.run(run_acs_tiger(query))
print(response.summary())

for error in response.source_errors + response.tiger_errors + response.join_errors:
    print(f"  ! {error}")

gdf = response.to_geodataframe()
income = gdf[gdf["variable"] == "B19013_001E"]
print()
print("Highest median household income:")
print(income.nlargest(5, "value")[["geoid", "value"]].to_string(index=False))

gdf.to_file("jefferson_tracts.geojson", driver="GeoJSON")
print("\nWrote jefferson_tracts.geojson")
