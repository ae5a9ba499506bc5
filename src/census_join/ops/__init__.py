"""Aggregation and join operations over GEOID-keyed data."""

from census_join.ops.aggregation import NumericAggregation, aggregate, aggregate_by_level
from census_join.ops.join import (
    AttributeValue,
    JoinedRow,
    JoinResult,
    dataset_with_geometries,
    partition_chunks,
    run_join,
)

__all__ = [
    "NumericAggregation",
    "aggregate",
    "aggregate_by_level",
    "AttributeValue",
    "JoinedRow",
    "JoinResult",
    "dataset_with_geometries",
    "partition_chunks",
    "run_join",
]
