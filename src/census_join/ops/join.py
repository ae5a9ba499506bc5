"""Join statistical rows against TIGER/Line geometries by GEOID.

Attribute rows and geometries are fetched independently, so the join never
fails as a whole on partial mismatches. Problems are collected into error
lists returned alongside the joined rows:

- geometry errors: geometry chunks that failed to download or were malformed
- join errors: attribute rows with no geometry for their GEOID

Geometries without a matching attribute row are dropped; the statistical
dataset decides which regions are reported.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from census_join.core.geoid import Geoid

# Geometry objects are opaque here (shapely geometries in practice)
Geometry = Any
GeometryPair = Tuple[Geoid, Geometry]

# One independently downloaded batch: its pairs, or the reason it failed
GeometryChunk = Union[Sequence[GeometryPair], BaseException, str]


@dataclass(frozen=True)
class AttributeValue:
    """One named measurement from a statistical row."""

    name: str
    value: Union[float, str, None]


AttributeRow = Tuple[Geoid, Sequence[AttributeValue]]


@dataclass(frozen=True)
class JoinedRow:
    """A single attribute value with its region's geometry."""

    geoid: Geoid
    geometry: Geometry
    value: AttributeValue


@dataclass
class JoinResult:
    """Joined rows plus the errors collected while producing them."""

    joined_rows: List[JoinedRow] = field(default_factory=list)
    geometry_errors: List[str] = field(default_factory=list)
    join_errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.geometry_errors or self.join_errors)


def partition_chunks(
    chunks: Iterable[GeometryChunk],
) -> Tuple[List[GeometryPair], List[str]]:
    """
    Flatten geometry chunks into pairs and per-chunk error messages.

    Never raises: a failed or malformed chunk becomes one error message and
    the remaining chunks are still processed.
    """
    pairs: List[GeometryPair] = []
    errors: List[str] = []

    for index, chunk in enumerate(chunks):
        if isinstance(chunk, BaseException):
            errors.append(f"geometry chunk {index} failed: {chunk}")
            continue
        if isinstance(chunk, str):
            errors.append(chunk)
            continue

        chunk_pairs = []
        try:
            for pair in chunk:
                geoid, geometry = pair
                if not isinstance(geoid, Geoid):
                    raise TypeError(f"expected a Geoid, found {type(geoid).__name__}")
                chunk_pairs.append((geoid, geometry))
        except Exception as e:
            errors.append(f"geometry chunk {index} is malformed: {e}")
            continue
        pairs.extend(chunk_pairs)

    return pairs, errors


def dataset_with_geometries(
    rows: Iterable[AttributeRow],
    geometries: Iterable[GeometryPair],
) -> Tuple[List[Tuple[Geoid, Geometry, Sequence[AttributeValue]]], List[str]]:
    """
    Match each attribute row to the geometry with an equal GEOID.

    Matching is exact: a tract row never matches a county geometry. When a
    GEOID has several geometries (overlapping chunks), the first one wins.

    Returns:
        Tuple of ((geoid, geometry, values) triples, join error messages)
    """
    lookup: Dict[Geoid, Geometry] = {}
    for geoid, geometry in geometries:
        lookup.setdefault(geoid, geometry)

    joined = []
    errors = []
    for geoid, values in rows:
        if geoid not in lookup:
            errors.append(f"no geometry found for Geoid {geoid.describe()}")
            continue
        joined.append((geoid, lookup[geoid], values))
    return joined, errors


def run_join(
    attribute_rows: Iterable[AttributeRow],
    geometry_chunks: Iterable[GeometryChunk],
) -> JoinResult:
    """
    Join attribute rows with chunked geometries.

    Each attribute value fans out into its own ``JoinedRow``, so a row with
    three measurements produces three joined rows sharing one geometry.

    Args:
        attribute_rows: (GEOID, values) pairs, one per statistical row
        geometry_chunks: Geometry download results, one per chunk

    Returns:
        JoinResult with joined rows, geometry errors and join errors
    """
    pairs, geometry_errors = partition_chunks(geometry_chunks)
    joined, join_errors = dataset_with_geometries(attribute_rows, pairs)

    joined_rows = [
        JoinedRow(geoid=geoid, geometry=geometry, value=value)
        for geoid, geometry, values in joined
        for value in values
    ]
    return JoinResult(
        joined_rows=joined_rows,
        geometry_errors=geometry_errors,
        join_errors=join_errors,
    )
