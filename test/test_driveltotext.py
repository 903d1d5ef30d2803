import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsondrivel.driveltotext import describe
from jsondrivel.schema import (
    UUID,
    Array,
    DateTimeISO8601,
    EnumString,
    Float,
    Indefinite,
    Null,
    Number,
    Object,
    String,
    UnknownString,
)
from jsondrivel.schema_inference import infer, infer_many


class TestDescribe(unittest.TestCase):

    def test_object_with_array(self):
        schema = infer({"name": "John", "age": 30, "tags": ["a", "bb"]})
        expected = (
            '{\n'
            '  "name": string (4),\n'
            '  "age": int (30),\n'
            '  "tags": [\n'
            '    string (1-2)\n'
            '  ] (2)\n'
            '}'
        )
        self.assertEqual(describe(schema), expected)

    def test_optional_and_nullable_keys(self):
        schema = infer_many([{"a": 1, "b": None}, {"a": 2, "b": "x"}, {"a": 3}])
        expected = (
            '{\n'
            '  "a": int (1-3),\n'
            '  "b" (optional): nullable string (1)\n'
            '}'
        )
        self.assertEqual(describe(schema), expected)

    def test_array_of_objects(self):
        schema = infer([{"id": 1}, {"id": 2}])
        expected = (
            '[\n'
            '  {\n'
            '    "id": int (1-2)\n'
            '  }\n'
            '] (2)'
        )
        self.assertEqual(describe(schema), expected)

    def test_leaves(self):
        self.assertEqual(describe(Number(Float(0.5, 1.5))), 'float (0.5-1.5)')
        self.assertEqual(describe(String(UUID())), 'string (uuid)')
        self.assertEqual(describe(String(DateTimeISO8601())), 'string (datetime - ISO 8601)')
        self.assertEqual(describe(String(EnumString(frozenset({"on", "off"})))), 'string (enum: off, on)')
        self.assertEqual(describe(String(UnknownString())), 'string')
        self.assertEqual(describe(Null()), 'null')
        self.assertEqual(describe(Indefinite()), 'unknown type')
        self.assertEqual(describe(infer(True)), 'boolean')

    def test_empty_containers(self):
        self.assertEqual(describe(Object()), '{}')
        self.assertEqual(describe(infer([])), '[\n  unknown type\n] (0)')

    def test_mixed_array_is_unknown(self):
        self.assertEqual(describe(infer(["a", 1])), '[\n  unknown type\n] (2)')

    def test_length_range_for_array(self):
        self.assertEqual(describe(Array(1, 3, Null())), '[\n  null\n] (1-3)')


if __name__ == '__main__':
    unittest.main()
