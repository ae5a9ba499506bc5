"""Tests for TIGER/Line download locations."""

import pytest

from census_join import Geoid, GeoLevel, TigerUriBuilder

BASE = "https://www2.census.gov/geo/tiger"


class TestTigerUriBuilder:
    def test_state_level_files(self):
        builder = TigerUriBuilder(2020)
        assert builder.uri(GeoLevel.TRACT, "08") == f"{BASE}/TIGER2020/TRACT/tl_2020_08_tract.zip"
        assert builder.uri(GeoLevel.BLOCK_GROUP, "08") == f"{BASE}/TIGER2020/BG/tl_2020_08_bg.zip"
        assert builder.uri(GeoLevel.PLACE, "08") == f"{BASE}/TIGER2020/PLACE/tl_2020_08_place.zip"
        assert builder.uri(GeoLevel.COUNTY_SUBDIVISION, "08") == (
            f"{BASE}/TIGER2020/COUSUB/tl_2020_08_cousub.zip"
        )

    def test_national_files(self):
        builder = TigerUriBuilder(2019)
        assert builder.uri(GeoLevel.COUNTY, "08") == f"{BASE}/TIGER2019/COUNTY/tl_2019_us_county.zip"
        assert builder.uri(GeoLevel.STATE, "08") == f"{BASE}/TIGER2019/STATE/tl_2019_us_state.zip"

    def test_blocks(self):
        assert TigerUriBuilder(2020).uri(GeoLevel.BLOCK, "11") == (
            f"{BASE}/TIGER2020/TABBLOCK20/tl_2020_11_tabblock20.zip"
        )
        assert TigerUriBuilder(2015).uri(GeoLevel.BLOCK, "11") == (
            f"{BASE}/TIGER2015/TABBLOCK/tl_2015_11_tabblock10.zip"
        )

    def test_2010_layout(self):
        assert TigerUriBuilder(2010).uri(GeoLevel.TRACT, "08") == (
            f"{BASE}/TIGER2010/TRACT/2010/tl_2010_08_tract10.zip"
        )

    def test_unsupported_vintage(self):
        with pytest.raises(ValueError, match="2009"):
            TigerUriBuilder(2009)

    def test_uris_for_dedupes(self):
        builder = TigerUriBuilder(2020)
        geoids = [
            Geoid.parse("08059009838"),
            Geoid.parse("08031000100"),
            Geoid.parse("11001006202"),
            Geoid.parse("08059"),
            Geoid.parse("06037"),
        ]
        assert builder.uris_for(geoids) == [
            f"{BASE}/TIGER2020/TRACT/tl_2020_08_tract.zip",
            f"{BASE}/TIGER2020/TRACT/tl_2020_11_tract.zip",
            f"{BASE}/TIGER2020/COUNTY/tl_2020_us_county.zip",
        ]
