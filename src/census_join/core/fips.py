"""Fixed-width FIPS component codec.

Every GEOID is a concatenation of zero-padded numeric components:

- State: 2 digits (e.g., "08" for Colorado)
- County: 3 digits (e.g., "059" for Jefferson)
- County subdivision: 5 digits
- Place: 5 digits
- Tract: 6 digits (e.g., "009838")
- Block group: 1 digit
- Block: 4 digits, or 5 in the 16-digit form

Blocks are the exception: the block number is kept as its raw digit string
since its leading digit carries meaning (see ``Geoid.truncate_to``).
"""

import re
from enum import Enum
from typing import Union

ComponentValue = Union[int, str]

_DIGITS = re.compile(r"[0-9]+")


class GeoidError(ValueError):
    """Base class for GEOID decoding and navigation errors."""


class MalformedComponent(GeoidError):
    """A GEOID segment is not a valid digit string for its component type."""

    def __init__(self, component: "ComponentType", value: object, reason: str = ""):
        self.component = component
        self.value = value
        detail = f": {reason}" if reason else ""
        super().__init__(f"malformed {component.label} component {value!r}{detail}")


class ComponentType(Enum):
    """Atomic GEOID segments and their encoded widths."""

    STATE = "state"
    COUNTY = "county"
    COUNTY_SUBDIVISION = "county_subdivision"
    PLACE = "place"
    TRACT = "tract"
    BLOCK_GROUP = "block_group"
    BLOCK = "block"

    @property
    def width(self) -> int:
        """Return the encoded width of this component."""
        widths = {
            ComponentType.STATE: 2,
            ComponentType.COUNTY: 3,
            ComponentType.COUNTY_SUBDIVISION: 5,
            ComponentType.PLACE: 5,
            ComponentType.TRACT: 6,
            ComponentType.BLOCK_GROUP: 1,
            ComponentType.BLOCK: 4,
        }
        return widths[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @property
    def api_name(self) -> str:
        """Column/predicate name used by the Census Data API."""
        return self.label

    def encode(self, value: ComponentValue) -> str:
        """
        Encode a component to its canonical zero-padded string.

        Raises:
            MalformedComponent: If the value cannot be represented in this width
        """
        self.validate(value)
        if self is ComponentType.BLOCK:
            return str(value)
        return str(value).zfill(self.width)

    def decode(self, segment: str) -> ComponentValue:
        """
        Decode a GEOID segment.

        Returns an int for numeric components and the raw digit string for
        blocks.

        Raises:
            MalformedComponent: If the segment is not an unsigned integer
        """
        if not isinstance(segment, str) or not _DIGITS.fullmatch(segment):
            raise MalformedComponent(self, segment, "expected an unsigned integer")
        if self is ComponentType.BLOCK:
            return segment
        return int(segment)

    def validate(self, value: ComponentValue) -> None:
        """Check a typed component value against this component's width."""
        if self is ComponentType.BLOCK:
            if not isinstance(value, str) or not _DIGITS.fullmatch(value):
                raise MalformedComponent(self, value, "block must be a digit string")
            if len(value) not in (self.width, self.width + 1):
                raise MalformedComponent(self, value, "block must have 4 or 5 digits")
            return

        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise MalformedComponent(self, value, "expected an integer")
        if value < 0:
            raise MalformedComponent(self, value, "negative value")
        if value >= 10**self.width:
            raise MalformedComponent(self, value, f"does not fit in {self.width} digits")
