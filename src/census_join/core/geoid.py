"""GEOID parsing and manipulation utilities."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple, Type

from census_join.core.fips import ComponentType, ComponentValue, GeoidError


class UnsupportedLength(GeoidError):
    """GEOID string length does not correspond to any geographic level."""

    def __init__(self, length: int, value: Optional[str] = None):
        self.length = length
        self.value = value
        suffix = f": {value!r}" if value is not None else ""
        super().__init__(f"unsupported GEOID type with length {length}{suffix}")


class NotAnAncestor(GeoidError):
    """Target level is not reachable by truncating the source level."""

    def __init__(self, source: "GeoLevel", target: "GeoLevel", message: Optional[str] = None):
        self.source = source
        self.target = target
        super().__init__(
            message or f"{target.label} not a parent type of {source.label}, cannot truncate geoid."
        )


class GeoLevel(Enum):
    """Geographic hierarchy levels.

    The hierarchy is a forest rather than a chain: places hang directly off
    states, and county subdivisions and tracts are siblings under counties.
    """

    STATE = "state"
    COUNTY = "county"
    COUNTY_SUBDIVISION = "county_subdivision"
    PLACE = "place"
    TRACT = "tract"
    BLOCK_GROUP = "block_group"
    BLOCK = "block"

    @property
    def geoid_length(self) -> int:
        """Return the canonical GEOID length for this level."""
        return self.geoid_lengths[0]

    @property
    def geoid_lengths(self) -> Tuple[int, ...]:
        """Return every GEOID length accepted for this level."""
        # Block numbers are 4 digits, or 5 in the 16-digit form
        if self is GeoLevel.BLOCK:
            return (15, 16)
        return (sum(c.width for c in self.component_types),)

    @property
    def component_types(self) -> Tuple[ComponentType, ...]:
        """Return the components of a GEOID at this level, root first."""
        return _COMPONENTS[self]

    @property
    def parent(self) -> Optional["GeoLevel"]:
        """Return the immediate parent level, or None for states."""
        return _PARENTS.get(self)

    @property
    def ancestors(self) -> List["GeoLevel"]:
        """Return all ancestor levels, nearest first."""
        result = []
        level = self.parent
        while level is not None:
            result.append(level)
            level = level.parent
        return result

    def is_ancestor_of(self, other: "GeoLevel") -> bool:
        return self in other.ancestors

    @property
    def label(self) -> str:
        """Human readable name (e.g., "census tract")."""
        if self is GeoLevel.TRACT:
            return "census tract"
        return self.value.replace("_", " ")

    @property
    def api_name(self) -> str:
        """Geography predicate name used by the Census Data API."""
        return self.component_types[-1].api_name

    @classmethod
    def from_geoid_length(cls, length: int) -> "GeoLevel":
        """
        Determine GeoLevel from GEOID length.

        Raises:
            UnsupportedLength: If no level uses this length
        """
        for level in cls:
            if length in level.geoid_lengths:
                return level
        raise UnsupportedLength(length)


_COMPONENTS: Dict[GeoLevel, Tuple[ComponentType, ...]] = {
    GeoLevel.STATE: (ComponentType.STATE,),
    GeoLevel.COUNTY: (ComponentType.STATE, ComponentType.COUNTY),
    GeoLevel.COUNTY_SUBDIVISION: (
        ComponentType.STATE,
        ComponentType.COUNTY,
        ComponentType.COUNTY_SUBDIVISION,
    ),
    GeoLevel.PLACE: (ComponentType.STATE, ComponentType.PLACE),
    GeoLevel.TRACT: (ComponentType.STATE, ComponentType.COUNTY, ComponentType.TRACT),
    GeoLevel.BLOCK_GROUP: (
        ComponentType.STATE,
        ComponentType.COUNTY,
        ComponentType.TRACT,
        ComponentType.BLOCK_GROUP,
    ),
    GeoLevel.BLOCK: (
        ComponentType.STATE,
        ComponentType.COUNTY,
        ComponentType.TRACT,
        ComponentType.BLOCK,
    ),
}

# Block's parent is the tract, not the block group: the Census Bureau does not
# guarantee that a block's first digit names its block group.
_PARENTS: Dict[GeoLevel, GeoLevel] = {
    GeoLevel.COUNTY: GeoLevel.STATE,
    GeoLevel.COUNTY_SUBDIVISION: GeoLevel.COUNTY,
    GeoLevel.PLACE: GeoLevel.STATE,
    GeoLevel.TRACT: GeoLevel.COUNTY,
    GeoLevel.BLOCK_GROUP: GeoLevel.TRACT,
    GeoLevel.BLOCK: GeoLevel.TRACT,
}


@dataclass(frozen=True)
class Geoid:
    """
    A parsed GEOID at one geographic level.

    Each level is its own frozen dataclass, so equality and hashing only ever
    match GEOIDs of the same level:

    >>> Geoid.parse("080590098381")
    BlockGroupGeoid(state=8, county=59, tract=9838, block_group=1)
    >>> str(Geoid.parse("08059").parent())
    '08'
    """

    level: ClassVar[GeoLevel]

    def __post_init__(self):
        if type(self) is Geoid:
            raise TypeError("Geoid is abstract, use Geoid.parse or a level-specific subclass")
        for component_type, value in zip(self.level.component_types, self.components):
            component_type.validate(value)

    @classmethod
    def parse(cls, value: str) -> "Geoid":
        """
        Parse a GEOID string, dispatching on its length.

        Args:
            value: GEOID digits (2, 5, 7, 10, 11, 12, 15 or 16 characters)

        Raises:
            UnsupportedLength: If the length matches no level
            MalformedComponent: If a segment is not a digit string
        """
        try:
            level = GeoLevel.from_geoid_length(len(value))
        except UnsupportedLength:
            raise UnsupportedLength(len(value), value) from None

        segments = []
        offset = 0
        for component_type in level.component_types[:-1]:
            segments.append(value[offset : offset + component_type.width])
            offset += component_type.width
        # The last segment takes the remainder (4 or 5 digit blocks)
        segments.append(value[offset:])

        geoid = Geoid.from_components(level, segments)
        if cls is not Geoid and not isinstance(geoid, cls):
            raise GeoidError(f"expected a {cls.level.label} GEOID, found: {value}")
        return geoid

    @staticmethod
    def from_components(level: GeoLevel, values: Sequence[str]) -> "Geoid":
        """
        Build a GEOID from separate component strings.

        The Census Data API returns geographies as one column per component
        (e.g., state="08", county="059"), which this decodes.

        Raises:
            ValueError: If the number of values does not match the level
            MalformedComponent: If a value is not a digit string
        """
        component_types = level.component_types
        if len(values) != len(component_types):
            raise GeoidError(
                f"for {level.label} geoid, expected {len(component_types)} components, "
                f"found: {','.join(values)}"
            )
        decoded = [ct.decode(v) for ct, v in zip(component_types, values)]
        return Geoid.from_level(level, *decoded)

    @staticmethod
    def from_level(level: GeoLevel, *components: ComponentValue) -> "Geoid":
        """Build the GEOID variant for a level from typed components."""
        return _VARIANTS[level](*components)

    @property
    def components(self) -> Tuple[ComponentValue, ...]:
        """Component values, root first."""
        return tuple(getattr(self, f.name) for f in fields(self))

    @property
    def geoid_string(self) -> str:
        """Canonical zero-padded GEOID string."""
        return "".join(
            ct.encode(v) for ct, v in zip(self.level.component_types, self.components)
        )

    @property
    def state_fips(self) -> str:
        return ComponentType.STATE.encode(self.components[0])

    def __str__(self) -> str:
        return self.geoid_string

    def describe(self) -> str:
        """Return a label such as "census tract=08059009838"."""
        return f"{self.level.label}={self.geoid_string}"

    def truncate_to(self, target: GeoLevel) -> "Geoid":
        """
        Truncate this GEOID to a coarser level.

        GEOIDs are hierarchical, so dropping trailing components yields the
        containing region. Only levels on this GEOID's own branch are
        reachable: a tract truncates to a county or state but never to a
        place.

        Raises:
            NotAnAncestor: If target is neither this level nor an ancestor
        """
        if target is self.level:
            return self
        if target not in self.level.ancestors:
            raise NotAnAncestor(self.level, target)
        prefix = self.components[: len(target.component_types)]
        return Geoid.from_level(target, *prefix)

    def parent(self) -> Optional["Geoid"]:
        """
        Return the containing GEOID one level up.

        States have no parent; None signifies "no geographic restriction".
        Blocks return their tract, not a block group.
        """
        parent_level = self.level.parent
        if parent_level is None:
            return None
        return self.truncate_to(parent_level)

    def to_state(self) -> "Geoid":
        return self.truncate_to(GeoLevel.STATE)

    def to_county(self) -> "Geoid":
        return self._project(GeoLevel.COUNTY)

    def to_census_tract(self) -> "Geoid":
        return self._project(GeoLevel.TRACT)

    def _project(self, target: GeoLevel) -> "Geoid":
        if target is not self.level and target not in self.level.ancestors:
            raise NotAnAncestor(
                self.level,
                target,
                f"{self.level.label} geoid does not contain a {target.label} geoid",
            )
        return self.truncate_to(target)


@dataclass(frozen=True)
class StateGeoid(Geoid):
    level: ClassVar[GeoLevel] = GeoLevel.STATE

    state: int


@dataclass(frozen=True)
class CountyGeoid(Geoid):
    level: ClassVar[GeoLevel] = GeoLevel.COUNTY

    state: int
    county: int


@dataclass(frozen=True)
class CountySubdivisionGeoid(Geoid):
    level: ClassVar[GeoLevel] = GeoLevel.COUNTY_SUBDIVISION

    state: int
    county: int
    county_subdivision: int


@dataclass(frozen=True)
class PlaceGeoid(Geoid):
    level: ClassVar[GeoLevel] = GeoLevel.PLACE

    state: int
    place: int


@dataclass(frozen=True)
class CensusTractGeoid(Geoid):
    level: ClassVar[GeoLevel] = GeoLevel.TRACT

    state: int
    county: int
    tract: int


@dataclass(frozen=True)
class BlockGroupGeoid(Geoid):
    level: ClassVar[GeoLevel] = GeoLevel.BLOCK_GROUP

    state: int
    county: int
    tract: int
    block_group: int


@dataclass(frozen=True)
class BlockGeoid(Geoid):
    """Census block. The block number is kept as its raw digit string."""

    level: ClassVar[GeoLevel] = GeoLevel.BLOCK

    state: int
    county: int
    tract: int
    block: str

    def truncate_to(self, target: GeoLevel) -> Geoid:
        """
        Truncate this block GEOID, additionally allowing block groups.

        The block group is taken as the first digit of the block number.
        This matches how block numbers are assigned in practice but is not
        guaranteed by Census Bureau guidance, which is why ``parent()``
        returns the tract instead.
        """
        if target is GeoLevel.BLOCK_GROUP:
            return BlockGroupGeoid(self.state, self.county, self.tract, int(self.block[0]))
        return super().truncate_to(target)


_VARIANTS: Dict[GeoLevel, Type[Geoid]] = {
    GeoLevel.STATE: StateGeoid,
    GeoLevel.COUNTY: CountyGeoid,
    GeoLevel.COUNTY_SUBDIVISION: CountySubdivisionGeoid,
    GeoLevel.PLACE: PlaceGeoid,
    GeoLevel.TRACT: CensusTractGeoid,
    GeoLevel.BLOCK_GROUP: BlockGroupGeoid,
    GeoLevel.BLOCK: BlockGeoid,
}
