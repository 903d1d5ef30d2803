"""Schema inference for JSON data.

This module provides the core inference logic used by:
- describe: Infer a schema and render it as an indented description
- json-schema: Infer a schema and export it as a JSON Schema document
- produce: Infer a schema and generate synthetic data from it

Each JSON value is turned into a schema tree, and trees are combined with
``merge``, an associative and commutative join with ``Initial`` as its
identity. Folding any number of documents therefore yields the same
bounds and required/optional split regardless of grouping.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Any, Dict, List, Optional, Sequence

from jsondrivel.enum_inference import EnumInference, infer_enum
from jsondrivel.schema import (
    Array,
    Boolean,
    Float,
    Indefinite,
    Initial,
    Integer,
    Null,
    Nullable,
    Number,
    Object,
    SchemaState,
    String,
    UnknownString,
)
from jsondrivel.string_inference import classify_number, classify_string

logger = logging.getLogger(__name__)


def _min_optional(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None:
        return right
    if right is None:
        return left
    return min(left, right)


def _max_optional(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None:
        return right
    if right is None:
        return left
    return max(left, right)


class SchemaInferrer:
    """Infers schema trees from JSON values and folds them together."""

    def __init__(self, enum_inference: Optional[EnumInference] = None, max_workers: int = 1):
        """Initialize the schema inferrer.

        Args:
            enum_inference: Thresholds for promoting strings to enums, or None to skip
            max_workers: Number of threads used to fold chunks of documents
        """
        self.enum_inference = enum_inference
        self.max_workers = max(1, max_workers)

    def merge(self, first: SchemaState, second: SchemaState) -> SchemaState:
        """Merges two schema states into one that describes both.

        Args:
            first: The accumulated schema
            second: The schema to fold in

        Returns:
            The joined schema. Incompatible kinds yield Indefinite.
        """
        if isinstance(first, Initial):
            return second
        if isinstance(second, Initial):
            return first
        if isinstance(first, Indefinite):
            return second
        if isinstance(second, Indefinite):
            return first

        if isinstance(first, String) and isinstance(second, String):
            return String(self._merge_string_types(first.string_type, second.string_type))

        if isinstance(first, Number) and isinstance(second, Number):
            return Number(self._merge_number_types(first.number_type, second.number_type))

        if isinstance(first, Boolean) and isinstance(second, Boolean):
            return first

        if isinstance(first, Array) and isinstance(second, Array):
            return Array(
                min_length=min(first.min_length, second.min_length),
                max_length=max(first.max_length, second.max_length),
                schema=self.merge(first.schema, second.schema),
            )

        if isinstance(first, Object) and isinstance(second, Object):
            return self.fold_object_types(first, second)

        return self._merge_nullability(first, second)

    def _merge_nullability(self, first: SchemaState, second: SchemaState) -> SchemaState:
        """Handles every pairing that involves Null or Nullable, else Indefinite."""
        if isinstance(first, Null) and isinstance(second, Null):
            return first
        if isinstance(first, Null) and isinstance(second, Nullable):
            return second
        if isinstance(first, Nullable) and isinstance(second, Null):
            return first
        if isinstance(second, Null):
            return Nullable(first)
        if isinstance(first, Null):
            return Nullable(second)
        if isinstance(first, Nullable) and isinstance(second, Nullable):
            return Nullable(self.merge(first.inner, second.inner))
        if isinstance(first, Nullable):
            return Nullable(self.merge(first.inner, second))
        if isinstance(second, Nullable):
            return Nullable(self.merge(first, second.inner))
        return Indefinite()

    def _merge_string_types(self, first, second):
        """Joins two string types.

        Two unknown strings pool their samples. An unknown string absorbs a
        recognized format, since the format no longer holds for every sample.
        Two different recognized formats degrade to an empty unknown string.
        """
        first_unknown = isinstance(first, UnknownString)
        second_unknown = isinstance(second, UnknownString)
        if first_unknown and second_unknown:
            return UnknownString(
                strings_seen=first.strings_seen + second.strings_seen,
                chars_seen=first.chars_seen + second.chars_seen,
                min_length=_min_optional(first.min_length, second.min_length),
                max_length=_max_optional(first.max_length, second.max_length),
            )
        if first_unknown:
            return first
        if second_unknown:
            return second
        if first == second:
            return first
        return UnknownString()

    def _merge_number_types(self, first, second):
        if isinstance(first, Integer) and isinstance(second, Integer):
            return Integer(min=min(first.min, second.min), max=max(first.max, second.max))
        return Float(
            min=min(float(first.min), float(second.min)),
            max=max(float(first.max), float(second.max)),
        )

    def fold_object_types(self, first: Object, second: Object) -> Object:
        """Merges two object schemas key by key.

        A key stays required only when both sides require it. Keys seen on
        one side only, or optional on either side, become optional. Keys
        present on both sides have their schemas merged.

        Args:
            first: The accumulated object schema
            second: The object schema to fold in

        Returns:
            The folded object schema
        """
        required: Dict[str, SchemaState] = {}
        optional: Dict[str, SchemaState] = {}

        ordered_keys = list(first.required) + list(first.optional)
        ordered_keys += [k for k in list(second.required) + list(second.optional)
                         if k not in first.required and k not in first.optional]

        for key in ordered_keys:
            left = first.required.get(key, first.optional.get(key))
            right = second.required.get(key, second.optional.get(key))
            if left is not None and right is not None:
                merged = self.merge(left, right)
            else:
                merged = left if left is not None else right
            if key in first.required and key in second.required:
                required[key] = merged
            else:
                optional[key] = merged

        return Object(required=required, optional=optional)

    def infer(self, value: Any) -> SchemaState:
        """Infers the schema of a single JSON value.

        Args:
            value: Parsed JSON value

        Returns:
            Schema tree describing the value
        """
        if value is None:
            return Null()
        if isinstance(value, bool):
            return Boolean()
        if isinstance(value, (int, float)):
            return Number(classify_number(value))
        if isinstance(value, str):
            return String(classify_string(value))
        if isinstance(value, list):
            element_schema = reduce(self.merge, (self.infer(item) for item in value), Initial())
            if isinstance(element_schema, Initial):
                element_schema = Indefinite()
            return Array(min_length=len(value), max_length=len(value), schema=element_schema)
        if isinstance(value, dict):
            return Object(
                required={key: self.infer(item) for key, item in value.items()},
                optional={},
            )
        # Not a JSON type; treat it the way mixed kinds are treated
        return Indefinite()

    def _fold_chunk(self, values: Sequence[Any]) -> SchemaState:
        return reduce(self.merge, (self.infer(value) for value in values), Initial())

    def infer_from_json_values(self, values: Sequence[Any]) -> SchemaState:
        """Infers one schema that describes every value in a sequence.

        With more than one worker the values are split into contiguous
        chunks that are folded concurrently, each from its own Initial
        accumulator; the partial schemas are then folded in chunk order.

        Args:
            values: List of parsed JSON values

        Returns:
            The unified schema, with enum inference applied when configured
        """
        values = list(values)
        if self.max_workers > 1 and len(values) > 1:
            chunk_size = -(-len(values) // self.max_workers)
            chunks = [values[i:i + chunk_size] for i in range(0, len(values), chunk_size)]
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                partials: List[SchemaState] = list(executor.map(self._fold_chunk, chunks))
            schema = reduce(self.merge, partials, Initial())
            logger.debug("Folded %d values in %d chunks", len(values), len(chunks))
        else:
            schema = self._fold_chunk(values)
            logger.debug("Folded %d values", len(values))

        if isinstance(schema, Initial):
            schema = Indefinite()
        if self.enum_inference is not None:
            schema = infer_enum(schema, self.enum_inference)
        return schema


# Convenience functions for direct use

def infer(value: Any) -> SchemaState:
    """Infers the schema of a single JSON document.

    Args:
        value: Parsed JSON value

    Returns:
        Schema tree describing the document
    """
    return SchemaInferrer().infer(value)


def merge(first: SchemaState, second: SchemaState) -> SchemaState:
    """Joins two schema states; see SchemaInferrer.merge."""
    return SchemaInferrer().merge(first, second)


def infer_many(
    values: Sequence[Any],
    enum_inference: Optional[EnumInference] = None,
    max_workers: int = 1
) -> SchemaState:
    """Infers one schema from many JSON documents.

    Args:
        values: List of parsed JSON values
        enum_inference: Thresholds for enum promotion, applied once after folding
        max_workers: Number of threads used to fold chunks of documents

    Returns:
        The unified schema
    """
    inferrer = SchemaInferrer(enum_inference=enum_inference, max_workers=max_workers)
    return inferrer.infer_from_json_values(values)
