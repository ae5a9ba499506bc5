"""Read LODES CSV files into GEOID-keyed numeric rows."""

import io
from typing import Dict, List, Tuple

import pandas as pd

from census_join.core.geoid import Geoid, GeoidError
from census_join.lodes.dataset import LodesDataset

# Non-measure columns present in LODES files
ID_COLUMNS = {"w_geocode", "h_geocode", "createdate"}


def read_lodes_rows(
    data: bytes,
    dataset: LodesDataset,
) -> Tuple[List[Tuple[Geoid, Dict[str, float]]], List[str]]:
    """
    Parse a LODES file into (block GEOID, {column: value}) rows.

    Args:
        data: File contents, gzipped as published or already decompressed
        dataset: Descriptor of the file, which selects the GEOID column

    Returns:
        Tuple of (rows, error messages for rows with unparseable GEOIDs)

    Raises:
        ValueError: If the GEOID column is missing
    """
    compression = "gzip" if data[:2] == b"\x1f\x8b" else None
    geocode = dataset.geocode_column
    df = pd.read_csv(
        io.BytesIO(data),
        compression=compression,
        dtype={"w_geocode": str, "h_geocode": str, "createdate": str},
    )
    if geocode not in df.columns:
        raise ValueError(f"LODES file has no {geocode} column")

    measures = [c for c in df.columns if c not in ID_COLUMNS]
    numeric = df[measures].apply(pd.to_numeric, errors="coerce").fillna(0.0)

    rows = []
    errors = []
    for raw, values in zip(df[geocode], numeric.to_dict(orient="records")):
        try:
            geoid = Geoid.parse(str(raw))
        except GeoidError as e:
            errors.append(f"LODES {geocode} {raw!r} could not be parsed: {e}")
            continue
        rows.append((geoid, {k: float(v) for k, v in values.items()}))

    return rows, errors
