""" JSON Schema to drivel schema converter. """

# pylint: disable=too-many-return-statements, too-many-branches

import json
import logging
import math
import os
import urllib
from typing import Any, Dict, List, Tuple
from urllib.parse import ParseResult, unquote, urlparse

import jsonpointer
import requests
from jsonpointer import JsonPointerException

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

logger = logging.getLogger(__name__)

STRING_FORMATS = {
    'date': IsoDate,
    'date-time': DateTimeISO8601,
    'rfc2822': DateTimeRFC2822,
    'uuid': UUID,
    'email': Email,
    'uri': Url,
    'url': Url,
    'hostname': Hostname,
}

# Recognized keywords that have no counterpart in the schema model
IGNORED_KEYWORDS = [
    'const', 'default', 'multipleOf', 'uniqueItems', 'pattern', 'additionalProperties',
    'patternProperties', 'propertyNames', 'minProperties', 'maxProperties', 'contains',
    'minContains', 'maxContains', 'prefixItems', 'additionalItems', 'unevaluatedItems',
    'unevaluatedProperties', 'dependentRequired', 'dependentSchemas', 'dependencies',
    'if', 'then', 'else', 'contentEncoding', 'contentMediaType',
]

DEFAULT_NUMBER_WINDOW = 1000
DEFAULT_MAX_ITEMS = 5


class ParseSchemaError(Exception):
    """Exception raised when a JSON Schema cannot be converted."""

    def __init__(self, message: str, path: str = "#"):
        self.message = message
        self.path = path
        super().__init__(f"{message} at {path}")


class InvalidSchemaError(ParseSchemaError):
    """A required field is missing or has the wrong type."""


class UnsupportedFeatureError(ParseSchemaError):
    """The schema uses a construct that cannot be represented."""


class SchemaValidationError(ParseSchemaError):
    """The schema's constraints contradict each other."""


class JsonSchemaToDrivelConverter:
    """
    Converts JSON schema to a drivel schema tree.

    Attributes:
    warnings: Messages about keywords that were ignored during conversion.
    content_cache: A dictionary for caching fetched URLs.
    max_recursion_depth: The maximum nesting depth followed through references.

    """

    def __init__(self) -> None:
        self.warnings: List[str] = []
        self.content_cache: Dict[str, str] = {}
        self.max_recursion_depth = 40

    def warn(self, message: str, path: str) -> None:
        """
        Record a non-fatal conversion issue.
        """
        warning = f"{message} at {path}"
        self.warnings.append(warning)
        logger.warning(warning)

    def warn_ignored_keywords(self, node: dict, path: str) -> None:
        for keyword in IGNORED_KEYWORDS:
            if keyword in node:
                self.warn(f"Unsupported keyword '{keyword}' ignored", path)

    def fetch_content(self, url: str | ParseResult):
        """
        Fetches the content from the specified URL.

        Args:
            url (str or ParseResult): The URL to fetch the content from.

        Returns:
            str: The fetched content.

        Raises:
            requests.RequestException: If there is an error while making the HTTP request.
            UnsupportedFeatureError: If the URL scheme cannot be fetched.

        """
        if isinstance(url, str):
            parsed_url = urlparse(url)
        else:
            parsed_url = url

        if parsed_url.geturl() in self.content_cache:
            return self.content_cache[parsed_url.geturl()]
        scheme = parsed_url.scheme

        if scheme in ['http', 'https']:
            response = requests.get(parsed_url.geturl(), timeout=30)
            response.raise_for_status()
            self.content_cache[parsed_url.geturl()] = response.text
            return response.text

        if scheme == 'file':
            file_path = parsed_url.netloc
            if not file_path:
                file_path = parsed_url.path
            # On Windows, a file URL might start with a '/' but it's not part of the actual path
            if os.name == 'nt' and file_path.startswith('/'):
                file_path = file_path[1:]
            with open(file_path, 'r', encoding='utf-8') as file:
                text = file.read()
                self.content_cache[parsed_url.geturl()] = text
                return text

        raise UnsupportedFeatureError(f"Unsupported URL scheme '{scheme}'", parsed_url.geturl())

    def compose_uri(self, base_uri: str, url: ParseResult) -> str:
        if url.scheme:
            return url.geturl()
        if base_uri.startswith('file'):
            parsed_file_uri = urlparse(base_uri)
            directory = os.path.dirname(
                parsed_file_uri.netloc if parsed_file_uri.netloc else parsed_file_uri.path)
            return f'file://{os.path.join(directory, url.path)}'
        if not base_uri:
            raise UnsupportedFeatureError(f"Relative reference '{url.geturl()}' without a base URI")
        return urllib.parse.urljoin(base_uri, url.path)

    def resolve_reference(self, node: dict, path: str, base_uri: str, json_doc: dict) -> Tuple[Any, dict, str]:
        """
        Resolve a JSON Pointer reference or a JSON $ref reference.

        Args:
            node (dict): The JSON schema node containing the reference.
            path (str): Location of the node, for error messages.
            base_uri (str): The base URI of the JSON document.
            json_doc (dict): The JSON document containing the reference.

        Returns:
            Tuple: The resolved schema, the document it lives in and that document's URI.

        """
        ref = node['$ref']
        if not isinstance(ref, str):
            raise InvalidSchemaError("$ref must be a string", path)
        url = urlparse(ref)
        try:
            if url.scheme or url.path:
                document_uri = self.compose_uri(base_uri, url)
                content = self.fetch_content(document_uri)
                try:
                    json_doc = json.loads(content)
                except json.JSONDecodeError as e:
                    raise InvalidSchemaError(f"Error decoding JSON from {ref}", path) from e
                base_uri = document_uri
            resolved = json_doc
            if url.fragment:
                resolved = jsonpointer.resolve_pointer(json_doc, unquote(url.fragment))
        except JsonPointerException as e:
            raise InvalidSchemaError(f"Cannot resolve reference '{ref}'", path) from e
        return resolved, json_doc, base_uri

    def convert(self, json_schema: Any, base_uri: str = '') -> SchemaState:
        """
        Convert a JSON schema document to a schema tree.
        """
        return self.convert_node(json_schema, '#', base_uri, json_schema, [])

    def convert_node(self, node: Any, path: str, base_uri: str, json_doc: Any,
                     ref_stack: List[str], nullable: bool = False) -> SchemaState:
        """
        Convert a single JSON schema node.

        Args:
            node: The JSON schema node.
            path: JSON pointer of the node, for messages.
            base_uri: URI of the document the node lives in.
            json_doc: The document the node lives in, for local references.
            ref_stack: References currently being expanded.
            nullable: Whether an enclosing type list already admits null.

        """
        if len(ref_stack) > self.max_recursion_depth:
            raise UnsupportedFeatureError("Reference nesting too deep", path)
        if node is True:
            return Indefinite()
        if not isinstance(node, dict):
            raise InvalidSchemaError("Schema must be an object", path)

        if '$ref' in node:
            ref_key = f"{base_uri}|{node['$ref']}"
            if ref_key in ref_stack:
                raise UnsupportedFeatureError(f"Recursive reference '{node['$ref']}'", path)
            resolved, ref_doc, ref_base = self.resolve_reference(node, path, base_uri, json_doc)
            return self.convert_node(resolved, path, ref_base, ref_doc, ref_stack + [ref_key], nullable)

        for keyword in ['allOf', 'not']:
            if keyword in node:
                raise UnsupportedFeatureError(f"'{keyword}' is not supported", path)
        for keyword in ['anyOf', 'oneOf']:
            if keyword in node:
                return self.convert_union(node[keyword], f"{path}/{keyword}", base_uri, json_doc, ref_stack)

        if 'type' not in node:
            if 'enum' in node:
                self.warn_ignored_keywords(node, path)
                values = node['enum']
                if not nullable and isinstance(values, list) and None in values:
                    return Nullable(self.convert_string(node, path, nullable=True))
                return self.convert_string(node, path, nullable)
            raise InvalidSchemaError("Schema must have a 'type' field", path)

        json_type = node['type']
        if isinstance(json_type, list):
            return self.convert_type_list(node, json_type, path, base_uri, json_doc, ref_stack)
        self.warn_ignored_keywords(node, path)
        if not isinstance(json_type, str):
            raise InvalidSchemaError("Type field must be a string or a list of strings", path)
        if 'enum' in node and json_type != 'string':
            self.warn(f"Unsupported keyword 'enum' ignored for type '{json_type}'", path)

        if json_type == 'null':
            return Null()
        if json_type == 'boolean':
            return Boolean()
        if json_type == 'string':
            return self.convert_string(node, path, nullable)
        if json_type in ['integer', 'number']:
            return self.convert_number(node, path, json_type == 'integer')
        if json_type == 'array':
            return self.convert_array(node, path, base_uri, json_doc, ref_stack)
        if json_type == 'object':
            return self.convert_object(node, path, base_uri, json_doc, ref_stack)
        raise InvalidSchemaError(f"Unknown type '{json_type}'", path)

    def convert_type_list(self, node: dict, types: list, path: str, base_uri: str,
                          json_doc: Any, ref_stack: List[str]) -> SchemaState:
        """
        Convert a list of type names; only a single type plus 'null' is representable.
        """
        if not all(isinstance(t, str) for t in types):
            raise InvalidSchemaError("Type list must only contain strings", path)
        non_null_types = [t for t in types if t != 'null']
        if not non_null_types:
            return Null()
        if len(non_null_types) > 1:
            raise UnsupportedFeatureError(f"Union of types {non_null_types} is not supported", path)
        single = dict(node)
        single['type'] = non_null_types[0]
        if len(non_null_types) == len(types):
            return self.convert_node(single, path, base_uri, json_doc, ref_stack)
        inner = self.convert_node(single, path, base_uri, json_doc, ref_stack, nullable=True)
        return inner if isinstance(inner, (Null, Nullable)) else Nullable(inner)

    def convert_union(self, options: Any, path: str, base_uri: str, json_doc: Any,
                      ref_stack: List[str]) -> SchemaState:
        """
        Convert anyOf/oneOf; only a single schema alongside {"type": "null"} is representable.
        """
        if not isinstance(options, list) or not options:
            raise InvalidSchemaError("Combinator must be a non-empty list", path)
        non_null = [o for o in options if not (isinstance(o, dict) and o.get('type') == 'null')]
        if len(non_null) > 1:
            raise UnsupportedFeatureError("Unions beyond a nullable type are not supported", path)
        if not non_null:
            return Null()
        inner = self.convert_node(non_null[0], f"{path}/{options.index(non_null[0])}",
                                  base_uri, json_doc, ref_stack)
        if len(non_null) == len(options):
            return inner
        return inner if isinstance(inner, (Null, Nullable)) else Nullable(inner)

    def _length(self, node: dict, keyword: str, path: str) -> int | None:
        value = node.get(keyword)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidSchemaError(f"'{keyword}' must be an integer", path)
        if value < 0:
            raise SchemaValidationError(f"'{keyword}' must not be negative", path)
        return value

    def convert_string(self, node: dict, path: str, nullable: bool = False) -> SchemaState:
        if 'enum' in node:
            return String(self.convert_enum(node['enum'], path, nullable))

        min_length = self._length(node, 'minLength', path)
        max_length = self._length(node, 'maxLength', path)
        if min_length is not None and max_length is not None and min_length > max_length:
            raise SchemaValidationError("'minLength' is greater than 'maxLength'", path)

        string_format = node.get('format')
        if string_format is not None:
            if string_format in STRING_FORMATS:
                if min_length is not None or max_length is not None:
                    self.warn(f"Length constraints ignored for format '{string_format}'", path)
                return String(STRING_FORMATS[string_format]())
            self.warn(f"Unsupported format '{string_format}' treated as plain string", path)
        return String(UnknownString(min_length=min_length, max_length=max_length))

    def convert_enum(self, values: Any, path: str, nullable: bool) -> StringType:
        if not isinstance(values, list):
            raise InvalidSchemaError("'enum' must be a list", path)
        variants = [v for v in values if v is not None]
        if len(variants) != len(values) and not nullable:
            self.warn("Null enum member ignored", path)
        if not all(isinstance(v, str) for v in variants):
            raise UnsupportedFeatureError("Only string enums are supported", path)
        if not variants:
            raise SchemaValidationError("'enum' must contain at least one value", path)
        return EnumString(variants=frozenset(variants))

    def _bound(self, node: dict, keyword: str, path: str):
        value = node.get(keyword)
        if value is None or isinstance(value, bool):
            return None
        if not isinstance(value, (int, float)):
            raise InvalidSchemaError(f"'{keyword}' must be a number", path)
        return value

    def convert_number(self, node: dict, path: str, integer: bool) -> SchemaState:
        """
        Convert integer and number types, folding exclusive bounds into inclusive ones.
        """
        low = self._bound(node, 'minimum', path)
        high = self._bound(node, 'maximum', path)

        exclusive_low = self._bound(node, 'exclusiveMinimum', path)
        if node.get('exclusiveMinimum') is True and low is not None:
            exclusive_low, low = low, None
        if exclusive_low is not None:
            if integer:
                exclusive_low = math.floor(exclusive_low) + 1
            else:
                exclusive_low = math.nextafter(exclusive_low, math.inf)
            low = exclusive_low if low is None else max(low, exclusive_low)

        exclusive_high = self._bound(node, 'exclusiveMaximum', path)
        if node.get('exclusiveMaximum') is True and high is not None:
            exclusive_high, high = high, None
        if exclusive_high is not None:
            if integer:
                exclusive_high = math.ceil(exclusive_high) - 1
            else:
                exclusive_high = math.nextafter(exclusive_high, -math.inf)
            high = exclusive_high if high is None else min(high, exclusive_high)

        if low is None and high is None:
            low, high = 0, DEFAULT_NUMBER_WINDOW
        elif low is None:
            low = high - DEFAULT_NUMBER_WINDOW
        elif high is None:
            high = low + DEFAULT_NUMBER_WINDOW

        if integer:
            low, high = math.ceil(low), math.floor(high)
        if low > high:
            raise SchemaValidationError("'minimum' is greater than 'maximum'", path)
        if integer:
            return Number(Integer(min=int(low), max=int(high)))
        return Number(Float(min=float(low), max=float(high)))

    def convert_array(self, node: dict, path: str, base_uri: str, json_doc: Any,
                      ref_stack: List[str]) -> SchemaState:
        min_items = self._length(node, 'minItems', path)
        max_items = self._length(node, 'maxItems', path)
        min_items = min_items if min_items is not None else 0
        if max_items is None:
            max_items = max(min_items, DEFAULT_MAX_ITEMS)
        if min_items > max_items:
            raise SchemaValidationError("'minItems' is greater than 'maxItems'", path)

        items = node.get('items')
        if items is None:
            self.warn("Array without 'items' produces empty arrays", path)
            element: SchemaState = Indefinite()
        elif isinstance(items, list):
            raise UnsupportedFeatureError("Tuple-style 'items' is not supported", path)
        else:
            element = self.convert_node(items, f"{path}/items", base_uri, json_doc, ref_stack)
        return Array(min_length=min_items, max_length=max_items, schema=element)

    def convert_object(self, node: dict, path: str, base_uri: str, json_doc: Any,
                       ref_stack: List[str]) -> SchemaState:
        properties = node.get('properties', {})
        if not isinstance(properties, dict):
            raise InvalidSchemaError("'properties' must be an object", path)
        required_names = node.get('required', [])
        if not isinstance(required_names, list) or not all(isinstance(n, str) for n in required_names):
            raise InvalidSchemaError("'required' must be a list of strings", path)

        for name in required_names:
            if name not in properties:
                self.warn(f"Required property '{name}' has no schema and is ignored", path)

        required: Dict[str, SchemaState] = {}
        optional: Dict[str, SchemaState] = {}
        for name, prop in properties.items():
            prop_path = f"{path}/properties/{jsonpointer.escape(name)}"
            converted = self.convert_node(prop, prop_path, base_uri, json_doc, ref_stack)
            if name in required_names:
                required[name] = converted
            else:
                optional[name] = converted
        return Object(required=required, optional=optional)


def parse_json_schema(json_schema: Any, base_uri: str = '') -> SchemaState:
    """
    Parse a JSON schema document into a schema tree.

    :param json_schema: The JSON schema document.
    :param base_uri: URI used to resolve relative references.
    :return: The schema tree. Warnings are logged.
    """
    return JsonSchemaToDrivelConverter().convert(json_schema, base_uri)


def convert_json_schema_to_drivel(json_schema_file: str) -> Tuple[SchemaState, List[str]]:
    """
    Load a JSON schema file and convert it to a schema tree.

    :param json_schema_file: Path to the JSON schema file.
    :return: The schema tree and the list of conversion warnings.
    """
    with open(json_schema_file, 'r', encoding='utf-8') as f:
        try:
            json_schema = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidSchemaError(f"Schema file is not valid JSON: {e}") from e
    converter = JsonSchemaToDrivelConverter()
    schema = converter.convert(json_schema, f"file://{os.path.abspath(json_schema_file)}")
    return schema, converter.warnings
