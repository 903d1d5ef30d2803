""" Exports inferred schema trees as JSON Schema documents. """

from typing import Any, Dict

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

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

# JSON Schema has no rfc2822 format; the adapter reads this name back
STRING_FORMATS = {
    IsoDate: 'date',
    DateTimeISO8601: 'date-time',
    DateTimeRFC2822: 'rfc2822',
    UUID: 'uuid',
    Email: 'email',
    Url: 'uri',
    Hostname: 'hostname',
}


class DrivelToJsonSchemaConverter:

    def convert_string(self, string_type: StringType) -> Dict[str, Any]:
        """
        Convert a string type to a JSON schema string with format, enum or length constraints.
        """
        json_type: Dict[str, Any] = {'type': 'string'}
        if isinstance(string_type, EnumString):
            json_type['enum'] = sorted(string_type.variants)
        elif isinstance(string_type, UnknownString):
            if string_type.min_length is not None:
                json_type['minLength'] = string_type.min_length
            if string_type.max_length is not None:
                json_type['maxLength'] = string_type.max_length
        else:
            json_type['format'] = STRING_FORMATS[type(string_type)]
        return json_type

    def convert_number(self, schema: Number) -> Dict[str, Any]:
        number_type = schema.number_type
        return {
            'type': 'integer' if isinstance(number_type, Integer) else 'number',
            'minimum': number_type.min,
            'maximum': number_type.max,
        }

    def convert_nullable(self, schema: Nullable) -> Dict[str, Any]:
        """
        Convert a nullable node by widening the inner type, or with anyOf when the inner type is not a single type name.
        """
        inner = self.convert_schema(schema.inner)
        if isinstance(inner.get('type'), str):
            inner['type'] = [inner['type'], 'null']
            if 'enum' in inner:
                inner['enum'] = inner['enum'] + [None]
            return inner
        return {'anyOf': [inner, {'type': 'null'}]}

    def convert_array(self, schema: Array) -> Dict[str, Any]:
        return {
            'type': 'array',
            'items': self.convert_schema(schema.schema),
            'minItems': schema.min_length,
            'maxItems': schema.max_length,
        }

    def convert_object(self, schema: Object) -> Dict[str, Any]:
        """
        Convert an object node; only keys seen in every sample are listed as required.
        """
        properties = {}
        for key, value in schema.required.items():
            properties[key] = self.convert_schema(value)
        for key, value in schema.optional.items():
            properties[key] = self.convert_schema(value)
        json_type: Dict[str, Any] = {'type': 'object', 'properties': properties}
        if schema.required:
            json_type['required'] = sorted(schema.required)
        return json_type

    def convert_schema(self, schema: SchemaState) -> Dict[str, Any]:
        if isinstance(schema, (Initial, Indefinite)):
            return {}
        if isinstance(schema, Null):
            return {'type': 'null'}
        if isinstance(schema, Nullable):
            return self.convert_nullable(schema)
        if isinstance(schema, Boolean):
            return {'type': 'boolean'}
        if isinstance(schema, Number):
            return self.convert_number(schema)
        if isinstance(schema, String):
            return self.convert_string(schema.string_type)
        if isinstance(schema, Array):
            return self.convert_array(schema)
        if isinstance(schema, Object):
            return self.convert_object(schema)
        raise ValueError(f"Schema contains unexpected node {schema!r}")

    def convert(self, schema: SchemaState) -> Dict[str, Any]:
        """
        Convert the root schema node to a JSON schema document.
        """
        json_schema: Dict[str, Any] = {'$schema': JSON_SCHEMA_DIALECT}
        json_schema.update(self.convert_schema(schema))
        return json_schema


def convert_drivel_to_json_schema(schema: SchemaState) -> Dict[str, Any]:
    """
    Convert an inferred schema tree to a JSON schema document.

    :param schema: The schema tree to export.
    :return: The JSON schema document as a dict.
    """
    return DrivelToJsonSchemaConverter().convert(schema)
