"""
Renders an inferred schema tree as an indented, human-readable description.
"""

from typing import List

from jsondrivel.schema import (
    UUID,
    Array,
    Boolean,
    DateTimeISO8601,
    DateTimeRFC2822,
    Email,
    EnumString,
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

INDENT = '  '

STRING_LABELS = {
    IsoDate: 'date',
    DateTimeISO8601: 'datetime - ISO 8601',
    DateTimeRFC2822: 'datetime - RFC 2822',
    UUID: 'uuid',
    Email: 'email',
    Url: 'url',
    Hostname: 'hostname',
}


def _range(low, high) -> str:
    return f"{low}" if low == high else f"{low}-{high}"


class DrivelToTextConverter:
    """
    Class to describe a schema tree as indented text.
    """

    def describe_string(self, string_type: StringType) -> str:
        if isinstance(string_type, EnumString):
            return f"string (enum: {', '.join(sorted(string_type.variants))})"
        if isinstance(string_type, UnknownString):
            if string_type.min_length is None and string_type.max_length is None:
                return 'string'
            low = string_type.min_length if string_type.min_length is not None else 0
            high = string_type.max_length if string_type.max_length is not None else '?'
            return f"string ({_range(low, high)})"
        return f"string ({STRING_LABELS[type(string_type)]})"

    def describe_object(self, schema: Object, depth: int) -> str:
        if not schema.required and not schema.optional:
            return '{}'
        lines: List[str] = []
        padding = INDENT * (depth + 1)
        for key, value in schema.required.items():
            lines.append(f'{padding}"{key}": {self.describe_node(value, depth + 1)}')
        for key, value in schema.optional.items():
            lines.append(f'{padding}"{key}" (optional): {self.describe_node(value, depth + 1)}')
        return '{\n' + ',\n'.join(lines) + '\n' + INDENT * depth + '}'

    def describe_array(self, schema: Array, depth: int) -> str:
        element = self.describe_node(schema.schema, depth + 1)
        return ('[\n' + INDENT * (depth + 1) + element + '\n' + INDENT * depth + ']'
                + f" ({_range(schema.min_length, schema.max_length)})")

    def describe_node(self, schema: SchemaState, depth: int = 0) -> str:
        """
        Describe a single node; containers recurse with one more level of indentation.
        """
        if isinstance(schema, (Initial, Indefinite)):
            return 'unknown type'
        if isinstance(schema, Null):
            return 'null'
        if isinstance(schema, Nullable):
            return 'nullable ' + self.describe_node(schema.inner, depth)
        if isinstance(schema, Boolean):
            return 'boolean'
        if isinstance(schema, Number):
            label = 'int' if isinstance(schema.number_type, Integer) else 'float'
            return f"{label} ({_range(schema.number_type.min, schema.number_type.max)})"
        if isinstance(schema, String):
            return self.describe_string(schema.string_type)
        if isinstance(schema, Array):
            return self.describe_array(schema, depth)
        if isinstance(schema, Object):
            return self.describe_object(schema, depth)
        raise ValueError(f"Schema contains unexpected node {schema!r}")


def describe(schema: SchemaState) -> str:
    """
    Describe a schema tree as indented text.

    :param schema: The schema tree to describe.
    :return: The description, without a trailing newline.
    """
    return DrivelToTextConverter().describe_node(schema)
