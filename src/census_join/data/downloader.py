"""Download TIGER/Line shapefiles, ACS API tables and LODES files."""

import asyncio
import logging
import zipfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

import aiohttp
from tqdm import tqdm

from census_join.census.acs import AcsQuery, parse_acs_response
from census_join.core.geoid import Geoid
from census_join.data.tiger import TigerUriBuilder, read_geometries
from census_join.ops.join import AttributeRow, GeometryChunk

logger = logging.getLogger(__name__)

USER_AGENT = "census-join/0.1.0"


class DownloadError(Exception):
    """Error downloading a file."""

    def __init__(self, url: str, status_code: int, message: str = ""):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to download {url}: HTTP {status_code}. {message}")


def _extract_zip(zip_path: Path, extract_dir: Path) -> None:
    """Extract a zip file and clean up."""
    extract_dir.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(zip_path, "r") as zf:
        zf.extractall(extract_dir)
    zip_path.unlink()


class _Downloader:
    """Shared aiohttp session handling and retrying GETs."""

    def __init__(self, timeout: int = 300, retries: int = 3):
        """
        Args:
            timeout: Request timeout in seconds
            retries: Number of attempts for requests failing at the connection level
        """
        self.timeout = timeout
        self.retries = retries
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_bytes(self, url: str, params: Optional[dict] = None) -> bytes:
        """
        GET a URL and return the response body.

        Raises:
            DownloadError: On HTTP errors, or when every attempt fails to connect
        """
        session = await self._get_session()
        for attempt in range(self.retries):
            try:
                async with session.get(url, params=params) as response:
                    if response.status == 404:
                        raise DownloadError(url, 404, "File not found")
                    if response.status >= 400:
                        text = await response.text()
                        raise DownloadError(url, response.status, text[:200])
                    return await response.read()
            except aiohttp.ClientError as e:
                logger.warning("Request to %s failed (attempt %d): %s", url, attempt + 1, e)
                if attempt == self.retries - 1:
                    raise DownloadError(url, 0, str(e)) from e
        raise DownloadError(url, 0, "no attempts made")


class TIGERDownloader(_Downloader):
    """
    Downloads TIGER/Line shapefiles from the Census Bureau.

    Each shapefile is one geometry chunk. Chunks are downloaded concurrently
    and a failed chunk is reported as an error message instead of aborting
    the others.
    """

    def __init__(self, timeout: int = 300, retries: int = 3, max_concurrent: int = 4):
        """
        Args:
            timeout: Request timeout in seconds
            retries: Number of retry attempts for failed downloads
            max_concurrent: Maximum concurrent downloads
        """
        super().__init__(timeout=timeout, retries=retries)
        self.max_concurrent = max_concurrent

    async def download_and_extract(self, url: str, dest_dir: Path) -> Path:
        """
        Download a ZIP file and extract it.

        Returns:
            Path to extracted directory
        """
        dest_dir.mkdir(parents=True, exist_ok=True)

        filename = Path(urlparse(url).path).name
        zip_path = dest_dir / filename
        extract_dir = dest_dir / filename.replace(".zip", "")

        content = await self._get_bytes(url)
        zip_path.write_bytes(content)

        # Extract (run in executor to not block event loop)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _extract_zip, zip_path, extract_dir)
        return extract_dir

    async def fetch_chunk(self, url: str, dest_dir: Path) -> List[Tuple[Geoid, object]]:
        """Download one shapefile and read its (GEOID, geometry) pairs."""
        extract_dir = await self.download_and_extract(url, dest_dir)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, read_geometries, extract_dir)

    async def fetch_chunks(
        self,
        builder: TigerUriBuilder,
        geoids: Iterable[Geoid],
        dest_dir: Path,
        progress: bool = True,
    ) -> List[GeometryChunk]:
        """
        Download every shapefile needed to cover ``geoids``.

        Args:
            builder: URI builder for the TIGER/Line vintage
            geoids: GEOIDs that need geometries
            dest_dir: Working directory for downloads
            progress: Show a progress bar

        Returns:
            One chunk per shapefile: its (GEOID, geometry) pairs, or an error message
        """
        urls = builder.uris_for(geoids)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def download(url: str) -> GeometryChunk:
            async with semaphore:
                try:
                    return await self.fetch_chunk(url, dest_dir)
                except Exception as e:
                    logger.warning("TIGER/Line chunk %s failed: %s", url, e)
                    return f"failed to load TIGER/Line geometries from {url}: {e}"

        logger.info("Downloading %d TIGER/Line file(s)", len(urls))
        with tqdm(total=len(urls), desc="Downloading TIGER/Line", disable=not progress) as pbar:

            async def tracked(url: str) -> GeometryChunk:
                chunk = await download(url)
                pbar.update(1)
                return chunk

            return list(await asyncio.gather(*[tracked(url) for url in urls]))


class ACSDataDownloader(_Downloader):
    """Runs ACS queries against the Census Data API."""

    def __init__(self, timeout: int = 120, retries: int = 3):
        super().__init__(timeout=timeout, retries=retries)

    async def fetch(self, query: AcsQuery) -> Tuple[List[AttributeRow], List[str]]:
        """
        Run an ACS query.

        Returns:
            Tuple of (rows, error messages for unparseable records)

        Raises:
            DownloadError: If the request fails
            ValueError: If the response is not a Census API table
        """
        session = await self._get_session()
        async with session.get(query.api_base, params=query.params()) as response:
            if response.status >= 400:
                error_msg = await response.text()
                raise DownloadError(
                    query.api_base,
                    response.status,
                    f"Invalid API request. Check variable names. {error_msg}",
                )
            # The API answers with a JSON table but not always a JSON content type
            data = await response.json(content_type=None)

        rows, errors = parse_acs_response(data, query)
        logger.info("ACS query returned %d row(s), %d error(s)", len(rows), len(errors))
        return rows, errors


class LODESDownloader(_Downloader):
    """Downloads gzipped LODES CSV files."""

    async def fetch(self, uri: str) -> bytes:
        """
        Download a LODES file.

        Raises:
            DownloadError: If the file is missing or the request fails
        """
        logger.info("Downloading LODES file %s", uri)
        return await self._get_bytes(uri)
