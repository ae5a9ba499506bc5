"""Main CensusJoin class - joins ACS and LODES data with TIGER/Line geometries."""

import logging
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import geopandas as gpd
import pandas as pd

from census_join.census.acs import AcsQuery
from census_join.core.geoid import Geoid, GeoidError, GeoLevel
from census_join.data.downloader import (
    ACSDataDownloader,
    DownloadError,
    LODESDownloader,
    TIGERDownloader,
)
from census_join.data.tiger import TigerUriBuilder
from census_join.lodes.dataset import DataUnavailable, LodesDataset
from census_join.lodes.reader import read_lodes_rows
from census_join.ops.aggregation import NumericAggregation, aggregate_by_level
from census_join.ops.join import AttributeRow, AttributeValue, JoinedRow, run_join

logger = logging.getLogger(__name__)

# TIGER/Line geometries are published in NAD83
TIGER_CRS = "EPSG:4269"

# Levels a LODES block can be rolled up to
LODES_LEVELS = {
    GeoLevel.BLOCK,
    GeoLevel.BLOCK_GROUP,
    GeoLevel.TRACT,
    GeoLevel.COUNTY,
    GeoLevel.STATE,
}


@dataclass
class JoinResponse:
    """Joined rows plus the three independent error lists."""

    join_dataset: List[JoinedRow] = field(default_factory=list)
    source_errors: List[str] = field(default_factory=list)
    tiger_errors: List[str] = field(default_factory=list)
    join_errors: List[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"found {len(self.join_dataset)} responses, "
            f"{len(self.source_errors)}/{len(self.tiger_errors)}/{len(self.join_errors)} errors"
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per joined value, with geometry as WKT."""
        records = [
            {
                "geoid": str(row.geoid),
                "level": row.geoid.level.value,
                "variable": row.value.name,
                "value": row.value.value,
                "geometry": getattr(row.geometry, "wkt", row.geometry),
            }
            for row in self.join_dataset
        ]
        return pd.DataFrame(records, columns=["geoid", "level", "variable", "value", "geometry"])

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """One row per joined value, keeping shapely geometries."""
        return gpd.GeoDataFrame(
            {
                "geoid": [str(row.geoid) for row in self.join_dataset],
                "level": [row.geoid.level.value for row in self.join_dataset],
                "variable": [row.value.name for row in self.join_dataset],
                "value": [row.value.value for row in self.join_dataset],
            },
            geometry=[row.geometry for row in self.join_dataset],
            crs=TIGER_CRS,
        )


def _contains(region: Geoid, geoid: Geoid) -> bool:
    try:
        return geoid.truncate_to(region.level) == region
    except GeoidError:
        return False


class CensusJoin:
    """
    Main interface for census-join.

    All methods are async; downloads run concurrently.

    Example usage:
        >>> joiner = CensusJoin()
        >>> query = AcsQuery(2020, AcsType.FIVE_YEAR, ("B01001_001E",),
        ...                  geoid=Geoid.parse("08"), wildcard=GeoLevel.COUNTY)
        >>> response = await joiner.acs_tiger(query)
        >>> print(response.summary())
    """

    def __init__(
        self,
        work_dir: Optional[Path] = None,
        timeout: int = 300,
        retries: int = 3,
        max_concurrent: int = 4,
        progress: bool = True,
    ):
        """
        Initialize CensusJoin.

        Args:
            work_dir: Directory for shapefile downloads. Defaults to a temporary
                directory removed after each run.
            timeout: Request timeout in seconds
            retries: Retry attempts for failed downloads
            max_concurrent: Maximum concurrent TIGER/Line downloads
            progress: Show download progress bars
        """
        self.work_dir = work_dir
        self.progress = progress
        self._tiger = TIGERDownloader(timeout=timeout, retries=retries, max_concurrent=max_concurrent)
        self._acs = ACSDataDownloader(timeout=timeout, retries=retries)
        self._lodes = LODESDownloader(timeout=timeout, retries=retries)

    async def close(self):
        """Close all async sessions."""
        await self._tiger.close()
        await self._acs.close()
        await self._lodes.close()

    @contextmanager
    def _download_dir(self) -> Iterator[Path]:
        if self.work_dir is not None:
            self.work_dir.mkdir(parents=True, exist_ok=True)
            yield self.work_dir
        else:
            with tempfile.TemporaryDirectory(prefix="census-join-") as tmp:
                yield Path(tmp)

    async def _join_with_tiger(
        self,
        rows: List[AttributeRow],
        builder: TigerUriBuilder,
        source_errors: List[str],
    ) -> JoinResponse:
        with self._download_dir() as dest_dir:
            chunks = await self._tiger.fetch_chunks(
                builder,
                [geoid for geoid, _ in rows],
                dest_dir,
                progress=self.progress,
            )
        result = run_join(rows, chunks)
        response = JoinResponse(
            join_dataset=result.joined_rows,
            source_errors=source_errors,
            tiger_errors=result.geometry_errors,
            join_errors=result.join_errors,
        )
        logger.info(response.summary())
        return response

    async def acs_tiger(self, query: AcsQuery) -> JoinResponse:
        """
        Run an ACS query and join its rows with TIGER/Line geometries.

        The GEOIDs in the ACS response decide which shapefiles are
        downloaded; geometries come from the TIGER/Line vintage of the
        query year.

        Raises:
            DownloadError: If the ACS request itself fails
            ValueError: If no TIGER/Line vintage exists for the query year
        """
        builder = TigerUriBuilder(query.year)
        rows, acs_errors = await self._acs.fetch(query)
        return await self._join_with_tiger(rows, builder, acs_errors)

    async def lodes_tiger(
        self,
        dataset: LodesDataset,
        geoids: Sequence[Geoid],
        wildcard: Optional[GeoLevel] = None,
        aggregation: NumericAggregation = NumericAggregation.SUM,
        columns: Optional[Sequence[str]] = None,
    ) -> JoinResponse:
        """
        Download LODES files for the given regions and join with geometries.

        LODES rows are keyed by census block. Rows outside ``geoids`` are
        dropped, the rest are rolled up to ``wildcard`` with ``aggregation``.

        Args:
            dataset: LODES file family
            geoids: Regions of interest; one file is downloaded per state
            wildcard: Output level (defaults to block)
            aggregation: Reduction used when blocks collapse onto one GEOID
            columns: Measures to keep (defaults to all)

        Raises:
            ValueError: If the wildcard level is not above blocks, or the
                edition has no supported TIGER/Line vintage
        """
        level = wildcard or GeoLevel.BLOCK
        if level not in LODES_LEVELS:
            raise ValueError(f"LODES blocks cannot be aggregated to {level.label}")
        builder = TigerUriBuilder(dataset.tiger_year)

        source_errors: List[str] = []
        states: Dict[Geoid, None] = {}
        for geoid in geoids:
            states.setdefault(geoid.to_state(), None)

        block_rows = []
        for state in states:
            try:
                uri = dataset.create_uri(state)
                data = await self._lodes.fetch(uri)
            except (DataUnavailable, DownloadError) as e:
                source_errors.append(str(e))
                continue

            # EOFError: truncated gzip stream
            try:
                state_rows, errors = read_lodes_rows(data, dataset)
            except (ValueError, OSError, EOFError, pd.errors.ParserError) as e:
                logger.warning("Could not read LODES file %s: %s", uri, e)
                source_errors.append(f"{uri}: {e}")
                continue
            source_errors.extend(errors)
            for block, values in state_rows:
                if not any(_contains(region, block) for region in geoids):
                    continue
                if columns is not None:
                    values = {k: v for k, v in values.items() if k in columns}
                block_rows.append((block, values))

        aggregated, agg_errors = aggregate_by_level(block_rows, level, aggregation)
        source_errors.extend(agg_errors)
        rows: List[AttributeRow] = [
            (geoid, [AttributeValue(name, value) for name, value in values.items()])
            for geoid, values in aggregated
        ]
        return await self._join_with_tiger(rows, builder, source_errors)


async def run_acs_tiger(query: AcsQuery, **kwargs) -> JoinResponse:
    """Run ``CensusJoin.acs_tiger`` with a short-lived client."""
    joiner = CensusJoin(**kwargs)
    try:
        return await joiner.acs_tiger(query)
    finally:
        await joiner.close()


async def run_lodes_tiger(
    dataset: LodesDataset,
    geoids: Sequence[Geoid],
    wildcard: Optional[GeoLevel] = None,
    aggregation: NumericAggregation = NumericAggregation.SUM,
    columns: Optional[Sequence[str]] = None,
    **kwargs,
) -> JoinResponse:
    """Run ``CensusJoin.lodes_tiger`` with a short-lived client."""
    joiner = CensusJoin(**kwargs)
    try:
        return await joiner.lodes_tiger(dataset, geoids, wildcard, aggregation, columns)
    finally:
        await joiner.close()
