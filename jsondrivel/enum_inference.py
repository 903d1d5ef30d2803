"""Enum promotion for inferred string leaves.

Runs once over a finished schema tree. Every unknown string whose pooled
samples repeat often enough is replaced by a closed set of its literals.
"""

import logging
from dataclasses import dataclass

from jsondrivel.schema import Array, EnumString, Nullable, Object, SchemaState, String, UnknownString

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnumInference:
    """Thresholds for enum promotion.

    Attributes:
        max_unique_ratio: Largest distinct/total sample ratio that still counts as an enum
        min_sample_size: Fewest samples needed before promoting
    """
    max_unique_ratio: float = 0.1
    min_sample_size: int = 1


def _promote(string_type: UnknownString, options: EnumInference) -> EnumString | None:
    n_samples = len(string_type.strings_seen)
    if n_samples == 0 or n_samples < options.min_sample_size:
        return None
    variants = frozenset(string_type.strings_seen)
    unique_ratio = len(variants) / n_samples
    if unique_ratio > options.max_unique_ratio:
        return None
    logger.debug("Promoting %d samples to enum with %d variants", n_samples, len(variants))
    return EnumString(variants=variants)


def infer_enum(schema: SchemaState, options: EnumInference) -> SchemaState:
    """Rewrites unknown strings that look like enumerations.

    Args:
        schema: A fully merged schema tree
        options: Promotion thresholds

    Returns:
        A new tree; nodes that are not promoted are returned unchanged
    """
    if isinstance(schema, String):
        if isinstance(schema.string_type, UnknownString):
            promoted = _promote(schema.string_type, options)
            if promoted is not None:
                return String(promoted)
        return schema
    if isinstance(schema, Nullable):
        return Nullable(infer_enum(schema.inner, options))
    if isinstance(schema, Array):
        return Array(
            min_length=schema.min_length,
            max_length=schema.max_length,
            schema=infer_enum(schema.schema, options),
        )
    if isinstance(schema, Object):
        return Object(
            required={key: infer_enum(value, options) for key, value in schema.required.items()},
            optional={key: infer_enum(value, options) for key, value in schema.optional.items()},
        )
    return schema
