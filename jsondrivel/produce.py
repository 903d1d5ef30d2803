"""Synthetic JSON generation from inferred schemas.

The producer walks a schema tree top-down and samples one value per node,
respecting numeric ranges, string lengths, enumerations, nullability and
optional keys. A ``random.Random`` is threaded through every call; each
array element gets its own child generator seeded from its parent, so
elements are independent and a fixed seed reproduces the output.
"""

import random
import uuid
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Optional

from faker import Faker

from jsondrivel.schema import (
    UUID,
    Array,
    Boolean,
    DateTimeISO8601,
    DateTimeRFC2822,
    Email,
    EnumString,
    Float,
    Hostname,
    Indefinite,
    Initial,
    Integer,
    IsoDate,
    Null,
    Nullable,
    Number,
    Object,
    SchemaState,
    String,
    StringType,
    UnknownString,
    Url,
)

DEFAULT_MAX_STRING_LENGTH = 32
DATE_RANGE_START = datetime(1970, 1, 1, tzinfo=timezone.utc)
DATE_RANGE_END = datetime(2037, 12, 31, tzinfo=timezone.utc)


class DataProducer:
    """Generates JSON values that satisfy a schema tree."""

    def __init__(self, repeat_n: int = 1):
        """Initialize the producer.

        Args:
            repeat_n: Number of elements to generate when the root is an array
        """
        self.repeat_n = repeat_n
        self.fake = Faker()

    def _faker(self, rng: random.Random) -> Faker:
        # Keeps faker output a pure function of the caller's random stream
        self.fake.seed_instance(rng.getrandbits(64))
        return self.fake

    def _date_time(self, rng: random.Random) -> datetime:
        # Fixed bounds; faker's default range ends at the current time
        return self._faker(rng).date_time_between(DATE_RANGE_START, DATE_RANGE_END, tzinfo=timezone.utc)

    def produce(self, schema: SchemaState, rng: random.Random, depth: int = 0) -> Any:
        """Produces a value for a schema node.

        Args:
            schema: The node to sample
            rng: Random source for this branch
            depth: Distance from the document root

        Returns:
            A JSON-compatible Python value
        """
        if isinstance(schema, (Initial, Null, Indefinite)):
            return None
        if isinstance(schema, Nullable):
            if rng.random() < 0.5:
                return None
            return self.produce(schema.inner, rng, depth)
        if isinstance(schema, Boolean):
            return rng.random() < 0.5
        if isinstance(schema, Number):
            return self._produce_number(schema, rng)
        if isinstance(schema, String):
            return self._produce_string(schema.string_type, rng)
        if isinstance(schema, Array):
            return self._produce_array(schema, rng, depth)
        if isinstance(schema, Object):
            return self._produce_object(schema, rng, depth)
        raise TypeError(f"Unexpected schema node {schema!r}")

    def _produce_number(self, schema: Number, rng: random.Random) -> int | float:
        number_type = schema.number_type
        if number_type.min == number_type.max:
            return number_type.min
        if isinstance(number_type, Integer):
            return rng.randint(number_type.min, number_type.max)
        if isinstance(number_type, Float):
            return rng.uniform(number_type.min, number_type.max)
        raise TypeError(f"Unexpected number type {number_type!r}")

    def _produce_string(self, string_type: StringType, rng: random.Random) -> str:
        if isinstance(string_type, UUID):
            return str(uuid.UUID(int=rng.getrandbits(128), version=4))
        if isinstance(string_type, IsoDate):
            return self._faker(rng).date_between(DATE_RANGE_START.date(), DATE_RANGE_END.date()).isoformat()
        if isinstance(string_type, DateTimeISO8601):
            date_time = self._date_time(rng)
            return date_time.isoformat(timespec='milliseconds')
        if isinstance(string_type, DateTimeRFC2822):
            date_time = self._date_time(rng)
            return format_datetime(date_time)
        if isinstance(string_type, Email):
            return self._faker(rng).free_email()
        if isinstance(string_type, Hostname):
            fake = self._faker(rng)
            return f"{fake.domain_word()}.{fake.tld()}"
        if isinstance(string_type, Url):
            fake = self._faker(rng)
            return f"https://{fake.domain_word()}.{fake.tld()}/{fake.word().lower()}"
        if isinstance(string_type, EnumString):
            return rng.choice(sorted(string_type.variants))
        if isinstance(string_type, UnknownString):
            return self._produce_unknown_string(string_type, rng)
        raise TypeError(f"Unexpected string type {string_type!r}")

    def _produce_unknown_string(self, string_type: UnknownString, rng: random.Random) -> str:
        lower = string_type.min_length if string_type.min_length is not None else 0
        if string_type.max_length is not None:
            upper = string_type.max_length
        else:
            upper = max(lower, DEFAULT_MAX_STRING_LENGTH)
        length = rng.randint(lower, upper) if lower != upper else lower

        if length == 0:
            return ''
        if not string_type.chars_seen:
            # Nothing observed; any string of the right length will do
            return self._faker(rng).pystr(min_chars=length, max_chars=length)
        # Drawing with replacement approximates the observed character distribution
        return ''.join(rng.choice(string_type.chars_seen) for _ in range(length))

    def _produce_array(self, schema: Array, rng: random.Random, depth: int) -> list:
        if isinstance(schema.schema, (Indefinite, Initial)):
            return []

        if depth == 0 and self.repeat_n > 1:
            n_elements = self.repeat_n
        elif schema.min_length != schema.max_length:
            n_elements = rng.randint(schema.min_length, schema.max_length)
        else:
            n_elements = schema.min_length

        seeds = [rng.getrandbits(64) for _ in range(n_elements)]
        return [self.produce(schema.schema, random.Random(seed), depth + 1) for seed in seeds]

    def _produce_object(self, schema: Object, rng: random.Random, depth: int) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in schema.required.items():
            result[key] = self.produce(value, rng, depth + 1)
        for key, value in schema.optional.items():
            if rng.random() < 0.5:
                result[key] = self.produce(value, rng, depth + 1)
        return result


def produce(
    schema: SchemaState,
    repeat_n: int = 1,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> Any:
    """Produces a synthetic JSON value from a schema.

    Args:
        schema: The schema to generate data for
        repeat_n: Number of elements to generate when the root is an array
        seed: Seed for a fresh random source, ignored when rng is given
        rng: Random source to draw from

    Returns:
        A JSON-compatible Python value
    """
    if rng is None:
        rng = random.Random(seed)
    return DataProducer(repeat_n=repeat_n).produce(schema, rng)
