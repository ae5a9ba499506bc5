"""Tests for LODES dataset descriptors, URIs and file parsing."""

import gzip

import pytest

from census_join import (
    DataUnavailable,
    Geoid,
    GeoLevel,
    LodesDataset,
    LodesEdition,
    LodesJobType,
    LodesKind,
    OdPart,
    WorkplaceSegment,
    locate,
    read_lodes_rows,
    validate_availability,
)

BASE = "https://lehd.ces.census.gov/data/lodes"
JEFFERSON_CO = Geoid.parse("08059")


class TestLodesUri:
    def test_wac_defaults(self):
        uri = LodesDataset.wac().create_uri(JEFFERSON_CO)
        assert uri == f"{BASE}/LODES8/co/wac/co_wac_S000_JT00_2021.csv.gz"

    def test_rac(self):
        dataset = LodesDataset.rac(
            year=2019, segment=WorkplaceSegment.SE01, job_type=LodesJobType.JT01
        )
        assert dataset.create_uri(JEFFERSON_CO) == (
            f"{BASE}/LODES8/co/rac/co_rac_SE01_JT01_2019.csv.gz"
        )

    def test_od(self):
        dataset = LodesDataset.od(year=2015, od_part=OdPart.AUX, edition=LodesEdition.LODES7)
        assert locate(dataset, Geoid.parse("06037")) == (
            f"{BASE}/LODES7/ca/od/ca_od_aux_JT00_2015.csv.gz"
        )

    def test_any_geoid_in_state_gives_same_file(self):
        dataset = LodesDataset.wac()
        assert dataset.create_uri(Geoid.parse("080590098381001")) == dataset.create_uri(
            Geoid.parse("08")
        )

    def test_unknown_state(self):
        with pytest.raises(ValueError, match="Unknown state FIPS code: 03"):
            LodesDataset.wac().create_uri(Geoid.parse("03"))

    def test_unavailable_state_year(self):
        with pytest.raises(DataUnavailable) as exc_info:
            LodesDataset.wac(year=2002).create_uri(Geoid.parse("05"))
        assert str(exc_info.value) == "LODES data is not available in 2002 for Arkansas (code 05)"
        assert exc_info.value.state_fips == "05"

    def test_available_state_year(self):
        uri = LodesDataset.wac(year=2015).create_uri(Geoid.parse("05"))
        assert uri.endswith("ar_wac_S000_JT00_2015.csv.gz")


class TestAvailability:
    @pytest.mark.parametrize(
        "state,year",
        [("AR", 2002), ("Arkansas", 2019), ("05", 2020), ("DC", 2009), ("MA", 2010), ("AK", 2018)],
    )
    def test_gaps(self, state, year):
        with pytest.raises(DataUnavailable):
            validate_availability(year, state)

    @pytest.mark.parametrize("state,year", [("AR", 2003), ("DC", 2010), ("MA", 2011), ("CO", 2002)])
    def test_available(self, state, year):
        validate_availability(year, state)

    def test_geoid_argument(self):
        with pytest.raises(DataUnavailable):
            validate_availability(2003, Geoid.parse("04013"))

    def test_unknown_state(self):
        with pytest.raises(ValueError, match="Unknown state"):
            validate_availability(2015, "Atlantis")


class TestLodesDataset:
    def test_kind_requires_matching_field(self):
        with pytest.raises(ValueError):
            LodesDataset(LodesKind.OD, LodesEdition.LODES8, LodesJobType.JT00, 2021)
        with pytest.raises(ValueError):
            LodesDataset(
                LodesKind.WAC,
                LodesEdition.LODES8,
                LodesJobType.JT00,
                2021,
                od_part=OdPart.MAIN,
            )

    def test_tiger_year(self):
        assert LodesDataset.wac(edition=LodesEdition.LODES7).tiger_year == 2010
        assert LodesDataset.wac().tiger_year == 2020

    def test_output_filename(self):
        dataset = LodesDataset.wac()
        assert dataset.output_filename(GeoLevel.TRACT) == "LODES8_wac_2021_JT00_S000_tract.csv"
        assert dataset.output_filename() == "LODES8_wac_2021_JT00_S000_block.csv"
        od = LodesDataset.od(year=2019, od_part=OdPart.AUX, job_type=LodesJobType.JT02)
        assert od.output_filename(GeoLevel.COUNTY) == "LODES8_od_2019_JT02_aux_county.csv"

    def test_description(self):
        assert "Workplace Area Characteristic" in LodesDataset.wac().description()
        assert "Residence" in LodesDataset.rac().description()
        assert "Origin-Destination" in LodesDataset.od().description()


def _csv(header, *rows):
    return "\n".join([",".join(header)] + [",".join(r) for r in rows]) + "\n"


class TestReadLodesRows:
    def test_gzipped_wac(self):
        data = gzip.compress(
            _csv(
                ["w_geocode", "C000", "CA01", "createdate"],
                ["080590098381001", "10", "2", "20230321"],
                ["080590098381002", "5", "", "20230321"],
            ).encode()
        )
        rows, errors = read_lodes_rows(data, LodesDataset.wac())

        assert errors == []
        assert rows == [
            (Geoid.parse("080590098381001"), {"C000": 10.0, "CA01": 2.0}),
            (Geoid.parse("080590098381002"), {"C000": 5.0, "CA01": 0.0}),
        ]

    def test_rac_keyed_by_home_block(self):
        data = _csv(["h_geocode", "C000", "createdate"], ["080590098381001", "3", "20230321"])
        rows, _ = read_lodes_rows(data.encode(), LodesDataset.rac())
        assert rows[0][0] == Geoid.parse("080590098381001")

    def test_od_keyed_by_work_block(self):
        data = _csv(
            ["w_geocode", "h_geocode", "S000", "createdate"],
            ["080590098381001", "080310001001000", "4", "20230321"],
        )
        rows, _ = read_lodes_rows(data.encode(), LodesDataset.od())
        assert rows == [(Geoid.parse("080590098381001"), {"S000": 4.0})]

    def test_bad_geocode_reported(self):
        data = _csv(
            ["w_geocode", "C000", "createdate"],
            ["08059009", "1", "20230321"],
            ["080590098381001", "2", "20230321"],
        )
        rows, errors = read_lodes_rows(data.encode(), LodesDataset.wac())

        assert len(rows) == 1
        assert len(errors) == 1
        assert "08059009" in errors[0]

    def test_missing_geocode_column(self):
        data = _csv(["C000"], ["1"])
        with pytest.raises(ValueError, match="w_geocode"):
            read_lodes_rows(data.encode(), LodesDataset.wac())
