import json
import os
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsondrivel.driveltojsons import convert_drivel_to_json_schema
from jsondrivel.jsonschematodrivel import (
    InvalidSchemaError,
    JsonSchemaToDrivelConverter,
    ParseSchemaError,
    SchemaValidationError,
    UnsupportedFeatureError,
    convert_json_schema_to_drivel,
    parse_json_schema,
)
from jsondrivel.schema import (
    UUID,
    Array,
    Boolean,
    DateTimeRFC2822,
    EnumString,
    Float,
    Indefinite,
    Integer,
    IsoDate,
    Null,
    Nullable,
    Number,
    Object,
    String,
    UnknownString,
)


class TestJsonSchemaToDrivel(unittest.TestCase):

    def test_object_with_required_and_optional(self):
        json_schema = {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "age": {"type": "integer", "minimum": 0, "maximum": 120},
                "nick": {"type": "string", "minLength": 1, "maxLength": 8},
                "active": {"type": "boolean"},
            },
            "required": ["id", "age"],
        }
        self.assertEqual(parse_json_schema(json_schema), Object(
            required={"id": String(UUID()), "age": Number(Integer(0, 120))},
            optional={
                "nick": String(UnknownString(min_length=1, max_length=8)),
                "active": Boolean(),
            },
        ))

    def test_plain_string(self):
        self.assertEqual(parse_json_schema({"type": "string"}), String(UnknownString()))

    def test_type_list_with_null(self):
        schema = parse_json_schema({"type": ["integer", "null"], "minimum": 1, "maximum": 5})
        self.assertEqual(schema, Nullable(Number(Integer(1, 5))))

    def test_any_of_with_null(self):
        schema = parse_json_schema({"anyOf": [{"type": "string", "format": "date"}, {"type": "null"}]})
        self.assertEqual(schema, Nullable(String(IsoDate())))

    def test_one_of_single_option(self):
        self.assertEqual(parse_json_schema({"oneOf": [{"type": "boolean"}]}), Boolean())

    def test_only_null(self):
        self.assertEqual(parse_json_schema({"type": "null"}), Null())
        self.assertEqual(parse_json_schema({"type": ["null"]}), Null())

    def test_exclusive_integer_bounds(self):
        schema = parse_json_schema({"type": "integer", "exclusiveMinimum": 0, "exclusiveMaximum": 10})
        self.assertEqual(schema, Number(Integer(1, 9)))

    def test_draft4_exclusive_flags(self):
        schema = parse_json_schema({"type": "integer", "minimum": 0, "exclusiveMinimum": True,
                                    "maximum": 10, "exclusiveMaximum": False})
        self.assertEqual(schema, Number(Integer(1, 10)))

    def test_exclusive_number_bounds(self):
        schema = parse_json_schema({"type": "number", "exclusiveMinimum": 0.0, "maximum": 1})
        self.assertEqual(schema.number_type.max, 1.0)
        self.assertGreater(schema.number_type.min, 0.0)

    def test_integer_bounds_are_tightened(self):
        schema = parse_json_schema({"type": "integer", "minimum": 0.5, "maximum": 3.5})
        self.assertEqual(schema, Number(Integer(1, 3)))

    def test_default_number_window(self):
        self.assertEqual(parse_json_schema({"type": "integer"}), Number(Integer(0, 1000)))
        self.assertEqual(parse_json_schema({"type": "integer", "minimum": 5}), Number(Integer(5, 1005)))
        self.assertEqual(parse_json_schema({"type": "number", "maximum": 0}), Number(Float(-1000.0, 0.0)))

    def test_enum(self):
        schema = parse_json_schema({"type": "string", "enum": ["a", "b"]})
        self.assertEqual(schema, String(EnumString(frozenset({"a", "b"}))))
        schema = parse_json_schema({"enum": ["x"]})
        self.assertEqual(schema, String(EnumString(frozenset({"x"}))))

    def test_nullable_enum(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": ["string", "null"], "enum": ["a", None]})
        self.assertEqual(schema, Nullable(String(EnumString(frozenset({"a"})))))
        self.assertEqual(converter.warnings, [])

    def test_array(self):
        schema = parse_json_schema({"type": "array", "items": {"type": "boolean"}, "minItems": 1, "maxItems": 3})
        self.assertEqual(schema, Array(1, 3, Boolean()))
        schema = parse_json_schema({"type": "array", "items": {"type": "boolean"}, "minItems": 7})
        self.assertEqual(schema, Array(7, 7, Boolean()))
        schema = parse_json_schema({"type": "array", "items": {"type": "boolean"}})
        self.assertEqual(schema, Array(0, 5, Boolean()))

    def test_true_schema_is_indefinite(self):
        schema = parse_json_schema({"type": "object", "properties": {"any": True}, "required": ["any"]})
        self.assertEqual(schema, Object(required={"any": Indefinite()}, optional={}))

    def test_rfc2822_round_trip(self):
        json_schema = convert_drivel_to_json_schema(String(DateTimeRFC2822()))
        self.assertEqual(parse_json_schema(json_schema), String(DateTimeRFC2822()))


class TestJsonSchemaReferences(unittest.TestCase):

    def test_local_reference(self):
        json_schema = {
            "$defs": {"name": {"type": "string", "maxLength": 5}},
            "type": "object",
            "properties": {"n": {"$ref": "#/$defs/name"}},
            "required": ["n"],
        }
        self.assertEqual(parse_json_schema(json_schema), Object(
            required={"n": String(UnknownString(max_length=5))}, optional={}))

    def test_file_reference(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with open(os.path.join(temp_dir, 'common.json'), 'w', encoding='utf-8') as f:
                json.dump({"definitions": {"flag": {"type": "boolean"}}}, f)
            main_path = os.path.join(temp_dir, 'main.json')
            with open(main_path, 'w', encoding='utf-8') as f:
                json.dump({"type": "array", "items": {"$ref": "common.json#/definitions/flag"},
                           "maxItems": 2}, f)
            schema, warnings = convert_json_schema_to_drivel(main_path)
        self.assertEqual(schema, Array(0, 2, Boolean()))
        self.assertEqual(warnings, [])

    def test_recursive_reference(self):
        json_schema = {
            "$defs": {"node": {"type": "object", "properties": {"next": {"$ref": "#/$defs/node"}}}},
            "$ref": "#/$defs/node",
        }
        with self.assertRaises(UnsupportedFeatureError):
            parse_json_schema(json_schema)

    def test_unresolvable_reference(self):
        with self.assertRaises(InvalidSchemaError):
            parse_json_schema({"$ref": "#/$defs/missing"})


class TestJsonSchemaErrors(unittest.TestCase):

    def test_missing_type(self):
        with self.assertRaises(InvalidSchemaError) as context:
            parse_json_schema({"type": "object", "properties": {"a": {"minimum": 1}}})
        self.assertEqual(context.exception.path, "#/properties/a")

    def test_not_an_object(self):
        with self.assertRaises(InvalidSchemaError):
            parse_json_schema(["string"])

    def test_unknown_type(self):
        with self.assertRaises(InvalidSchemaError):
            parse_json_schema({"type": "decimal"})

    def test_contradicting_constraints(self):
        with self.assertRaises(SchemaValidationError):
            parse_json_schema({"type": "string", "minLength": 5, "maxLength": 2})
        with self.assertRaises(SchemaValidationError):
            parse_json_schema({"type": "number", "minimum": 5, "maximum": 2})
        with self.assertRaises(SchemaValidationError):
            parse_json_schema({"type": "array", "items": True, "minItems": 5, "maxItems": 2})
        with self.assertRaises(SchemaValidationError):
            parse_json_schema({"type": "integer", "exclusiveMinimum": 1, "exclusiveMaximum": 2})

    def test_unsupported_features(self):
        with self.assertRaises(UnsupportedFeatureError):
            parse_json_schema({"allOf": [{"type": "string"}]})
        with self.assertRaises(UnsupportedFeatureError):
            parse_json_schema({"type": ["string", "integer"]})
        with self.assertRaises(UnsupportedFeatureError):
            parse_json_schema({"anyOf": [{"type": "string"}, {"type": "integer"}]})
        with self.assertRaises(UnsupportedFeatureError):
            parse_json_schema({"type": "array", "items": [{"type": "string"}]})
        with self.assertRaises(UnsupportedFeatureError):
            parse_json_schema({"enum": [1, 2]})

    def test_errors_share_a_base(self):
        for error_class in [InvalidSchemaError, UnsupportedFeatureError, SchemaValidationError]:
            self.assertTrue(issubclass(error_class, ParseSchemaError))

    def test_invalid_json_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, 'broken.json')
            with open(path, 'w', encoding='utf-8') as f:
                f.write('{"type": ')
            with self.assertRaises(InvalidSchemaError):
                convert_json_schema_to_drivel(path)


class TestJsonSchemaWarnings(unittest.TestCase):

    def test_ignored_keyword_is_reported(self):
        converter = JsonSchemaToDrivelConverter()
        with self.assertLogs('jsondrivel.jsonschematodrivel', level='WARNING'):
            schema = converter.convert({"type": "string", "pattern": "^a"})
        self.assertEqual(schema, String(UnknownString()))
        self.assertEqual(converter.warnings, ["Unsupported keyword 'pattern' ignored at #"])

    def test_ignored_keyword_on_type_list_is_reported_once(self):
        converter = JsonSchemaToDrivelConverter()
        converter.convert({"type": ["string", "null"], "pattern": "^a"})
        self.assertEqual(len(converter.warnings), 1)

    def test_unknown_format(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": "string", "format": "ipv4", "maxLength": 15})
        self.assertEqual(schema, String(UnknownString(max_length=15)))
        self.assertEqual(len(converter.warnings), 1)

    def test_array_without_items(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": "array"})
        self.assertEqual(schema, Array(0, 5, Indefinite()))
        self.assertEqual(len(converter.warnings), 1)

    def test_required_without_property(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": "object", "properties": {}, "required": ["ghost"]})
        self.assertEqual(schema, Object(required={}, optional={}))
        self.assertEqual(len(converter.warnings), 1)

    def test_enum_on_number_is_reported(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": "integer", "enum": [1, 2]})
        self.assertEqual(schema, Number(Integer(0, 1000)))
        self.assertEqual(converter.warnings, ["Unsupported keyword 'enum' ignored for type 'integer' at #"])

    def test_enum_on_nullable_number_is_reported(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": ["number", "null"], "enum": [1.5, None]})
        self.assertEqual(schema, Nullable(Number(Float(0.0, 1000.0))))
        self.assertEqual(len(converter.warnings), 1)

    def test_untyped_enum_with_null_is_nullable(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"enum": ["a", None]})
        self.assertEqual(schema, Nullable(String(EnumString(frozenset({"a"})))))
        self.assertEqual(converter.warnings, [])

    def test_null_enum_member_outside_nullable_type(self):
        converter = JsonSchemaToDrivelConverter()
        schema = converter.convert({"type": "string", "enum": ["a", None]})
        self.assertEqual(schema, String(EnumString(frozenset({"a"}))))
        self.assertEqual(len(converter.warnings), 1)


if __name__ == '__main__':
    unittest.main()
