"""Numeric aggregation of measurements that collapse onto one GEOID."""

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from census_join.core.geoid import Geoid, GeoidError, GeoLevel

# A source row: GEOID plus named numeric measurements (e.g., LODES job counts)
NumericRow = Tuple[Geoid, Mapping[str, float]]


class NumericAggregation(Enum):
    """Reduction applied when several source rows map to one output GEOID."""

    SUM = "sum"
    MEAN = "mean"

    def aggregate(self, values: Iterable[float]) -> float:
        """
        Reduce a sequence of values in a single pass.

        Both aggregations return 0.0 for an empty sequence.
        """
        total = 0.0
        count = 0
        for value in values:
            total += value
            count += 1

        if self is NumericAggregation.SUM:
            return total
        if count == 0:
            return 0.0
        return total / count


def aggregate(policy: NumericAggregation, values: Iterable[float]) -> float:
    """Functional form of ``NumericAggregation.aggregate``."""
    return policy.aggregate(values)


def aggregate_by_level(
    rows: Iterable[NumericRow],
    level: GeoLevel,
    aggregation: NumericAggregation = NumericAggregation.SUM,
) -> Tuple[List[Tuple[Geoid, Dict[str, float]]], List[str]]:
    """
    Roll rows up to a coarser geographic level.

    Each row's GEOID is truncated to ``level`` and every column is reduced
    with ``aggregation``. Output keeps the order in which each target GEOID
    was first seen.

    Args:
        rows: (GEOID, {column: value}) pairs
        level: Target level; must be each GEOID's own level or an ancestor
        aggregation: Reduction applied per column

    Returns:
        Tuple of (aggregated rows, error messages for rows that could not be
        truncated to ``level``)
    """
    groups: Dict[Geoid, Dict[str, List[float]]] = {}
    errors: List[str] = []

    for geoid, values in rows:
        try:
            target = geoid.truncate_to(level)
        except GeoidError as e:
            errors.append(f"cannot aggregate {geoid.describe()}: {e}")
            continue
        columns = groups.setdefault(target, {})
        for name, value in values.items():
            columns.setdefault(name, []).append(value)

    result = [
        (geoid, {name: aggregation.aggregate(vals) for name, vals in columns.items()})
        for geoid, columns in groups.items()
    ]
    return result, errors
