"""Schema model shared by inference, enum detection and data production.

A schema is a tree of ``SchemaState`` nodes, one per JSON position:

- Initial: nothing observed yet (fold accumulator only)
- Indefinite: incompatible shapes were merged
- Null / Nullable: null observed, alone or next to a consistent shape
- Boolean, Number, String: leaves carrying their refined type
- Array: element schema plus observed length extremes
- Object: keys seen in every sample (required) and in some (optional)

All nodes are frozen dataclasses; trees are never mutated once built.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple, Union


class StringType:
    """Base class for the refined string types."""


@dataclass(frozen=True)
class UnknownString(StringType):
    """Fallback string type that keeps the raw samples it was built from."""
    strings_seen: Tuple[str, ...] = ()
    chars_seen: Tuple[str, ...] = ()
    min_length: Optional[int] = None
    max_length: Optional[int] = None


@dataclass(frozen=True)
class IsoDate(StringType):
    pass


@dataclass(frozen=True)
class DateTimeISO8601(StringType):
    pass


@dataclass(frozen=True)
class DateTimeRFC2822(StringType):
    pass


@dataclass(frozen=True)
class UUID(StringType):
    pass


@dataclass(frozen=True)
class Email(StringType):
    pass


@dataclass(frozen=True)
class Url(StringType):
    pass


@dataclass(frozen=True)
class Hostname(StringType):
    pass


@dataclass(frozen=True)
class EnumString(StringType):
    """Closed set of string literals."""
    variants: FrozenSet[str] = frozenset()


class NumberType:
    """Base class for numeric ranges."""


@dataclass(frozen=True)
class Integer(NumberType):
    min: int
    max: int


@dataclass(frozen=True)
class Float(NumberType):
    min: float
    max: float


class SchemaState:
    """Base class for every schema node."""


@dataclass(frozen=True)
class Initial(SchemaState):
    pass


@dataclass(frozen=True)
class Indefinite(SchemaState):
    pass


@dataclass(frozen=True)
class Null(SchemaState):
    pass


@dataclass(frozen=True)
class Nullable(SchemaState):
    inner: SchemaState


@dataclass(frozen=True)
class Boolean(SchemaState):
    pass


@dataclass(frozen=True)
class Number(SchemaState):
    number_type: NumberType


@dataclass(frozen=True)
class String(SchemaState):
    string_type: StringType


@dataclass(frozen=True)
class Array(SchemaState):
    min_length: int
    max_length: int
    schema: SchemaState


@dataclass(frozen=True)
class Object(SchemaState):
    required: Dict[str, SchemaState] = field(default_factory=dict)
    optional: Dict[str, SchemaState] = field(default_factory=dict)


JsonValue = Union[Dict[str, 'JsonValue'], list, str, bool, int, float, None]
