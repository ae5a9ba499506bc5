"""Example of rolling LODES workplace job counts up to block groups.

LODES files are keyed by census block; here they are summed into block
groups and joined with the matching TIGER/Line polygons.
"""

import asyncio

from census_join import Geoid, GeoLevel, LodesDataset, WorkplaceSegment, run_lodes_tiger

dataset = LodesDataset.wac(year=2021, segment=WorkplaceSegment.SE03)
region = Geoid.parse("11001")  # District of Columbia

print(dataset.description())
print(f"Source: {dataset.create_uri(region)}")
print()

response = asyncio.run(
    run_lodes_tiger(dataset, [region], wildcard=GeoLevel.BLOCK_GROUP, columns=["C000"])
)
print(response.summary())

df = response.to_dataframe()
print(df.sort_values("value", ascending=False).head(10)[["geoid", "value"]].to_string(index=False))

output = dataset.output_filename(GeoLevel.BLOCK_GROUP)
df.to_csv(output, index=False)
print(f"\nWrote {output}")
