"""Infers schemas from JSON files and turns them into descriptions, JSON Schema or synthetic data.

This module provides:
- describe: Infer a schema and write an indented description
- json-schema: Infer a schema and write it as a JSON Schema document
- produce: Infer a schema and write synthetic documents that resemble the input
- produce-from-schema: Read a JSON Schema document and write synthetic documents
"""

import json
import logging
import os
import random
from typing import Any, List, Tuple

from jsondrivel.driveltojsons import convert_drivel_to_json_schema
from jsondrivel.driveltotext import describe
from jsondrivel.enum_inference import EnumInference
from jsondrivel.jsonschematodrivel import convert_json_schema_to_drivel
from jsondrivel.produce import DataProducer, produce
from jsondrivel.schema import SchemaState
from jsondrivel.schema_inference import infer_many

logger = logging.getLogger(__name__)


def convert_json_to_description(
    input_files: List[str],
    output_file: str,
    infer_enum: bool = False,
    enum_max_uniq: float = 0.1,
    enum_min_n: int = 1
) -> None:
    """Infers a schema from JSON files and writes a human-readable description.

    Args:
        input_files: List of JSON or JSON Lines file paths to analyze
        output_file: Output path for the description
        infer_enum: Detect string fields with a small vocabulary
        enum_max_uniq: Maximum ratio of distinct to total samples for an enum
        enum_min_n: Minimum number of samples before a field can become an enum
    """
    schema, _ = infer_schema_from_files(input_files, infer_enum, enum_max_uniq, enum_min_n)
    _write_text(output_file, describe(schema) + '\n')


def convert_json_to_json_schema(
    input_files: List[str],
    json_schema_file: str,
    infer_enum: bool = False,
    enum_max_uniq: float = 0.1,
    enum_min_n: int = 1
) -> None:
    """Infers a schema from JSON files and writes it as a JSON Schema document.

    Args:
        input_files: List of JSON or JSON Lines file paths to analyze
        json_schema_file: Output path for the JSON Schema
        infer_enum: Detect string fields with a small vocabulary
        enum_max_uniq: Maximum ratio of distinct to total samples for an enum
        enum_min_n: Minimum number of samples before a field can become an enum
    """
    schema, _ = infer_schema_from_files(input_files, infer_enum, enum_max_uniq, enum_min_n)
    _write_text(json_schema_file, json.dumps(convert_drivel_to_json_schema(schema), indent=2) + '\n')


def produce_from_json(
    input_files: List[str],
    output_file: str,
    repeat_n: int = 1,
    seed: int | None = None,
    infer_enum: bool = False,
    enum_max_uniq: float = 0.1,
    enum_min_n: int = 1
) -> None:
    """Infers a schema from JSON files and writes synthetic data shaped like the input.

    A single input document yields a single output document; when the
    document is an array, `repeat_n` sets its length. Several input
    documents (JSON Lines) yield `repeat_n` output documents as JSON Lines.

    Args:
        input_files: List of JSON or JSON Lines file paths to analyze
        output_file: Output path for the generated data
        repeat_n: Number of records to generate
        seed: Seed for reproducible output
        infer_enum: Detect string fields with a small vocabulary
        enum_max_uniq: Maximum ratio of distinct to total samples for an enum
        enum_min_n: Minimum number of samples before a field can become an enum
    """
    schema, multi_document = infer_schema_from_files(input_files, infer_enum, enum_max_uniq, enum_min_n)
    _write_produced(schema, output_file, repeat_n, seed, multi_document)


def produce_from_json_schema(
    json_schema_file: str,
    output_file: str,
    repeat_n: int = 1,
    seed: int | None = None
) -> None:
    """Reads a JSON Schema document and writes synthetic data that satisfies it.

    Args:
        json_schema_file: Path to the JSON Schema document
        output_file: Output path for the generated data
        repeat_n: Number of records to generate
        seed: Seed for reproducible output
    """
    schema, warnings = convert_json_schema_to_drivel(json_schema_file)
    if warnings:
        logger.info("Schema converted with %d warning(s)", len(warnings))
    _write_produced(schema, output_file, repeat_n, seed, multi_document=False)


def infer_schema_from_files(
    input_files: List[str],
    infer_enum: bool = False,
    enum_max_uniq: float = 0.1,
    enum_min_n: int = 1
) -> Tuple[SchemaState, bool]:
    """Loads JSON files and infers one schema for all documents in them.

    Args:
        input_files: List of JSON or JSON Lines file paths
        infer_enum: Detect string fields with a small vocabulary
        enum_max_uniq: Maximum ratio of distinct to total samples for an enum
        enum_min_n: Minimum number of samples before a field can become an enum

    Returns:
        The schema, and whether the input held more than one document
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    values = _load_json_values(input_files)
    if not values:
        raise ValueError("No valid JSON data found in input files")

    enum_inference = EnumInference(enum_max_uniq, enum_min_n) if infer_enum else None
    return infer_many(values, enum_inference=enum_inference), len(values) > 1


def _write_produced(schema: SchemaState, output_file: str, repeat_n: int,
                    seed: int | None, multi_document: bool) -> None:
    if multi_document:
        # One record per line, each from its own random stream
        rng = random.Random(seed)
        producer = DataProducer()
        seeds = [rng.getrandbits(64) for _ in range(max(repeat_n, 1))]
        lines = [json.dumps(producer.produce(schema, random.Random(s))) for s in seeds]
        _write_text(output_file, '\n'.join(lines) + '\n')
    else:
        _write_text(output_file, json.dumps(produce(schema, repeat_n, seed=seed), indent=2) + '\n')


def _write_text(output_file: str, text: str) -> None:
    # Ensure output directory exists
    output_dir = os.path.dirname(output_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(text)


def _load_json_values(input_files: List[str]) -> List[Any]:
    """Loads JSON values from files.

    Each file holds either a single JSON document or JSON Lines. A root-level
    array is one document, not a list of documents.

    Args:
        input_files: List of file paths

    Returns:
        List of parsed JSON values
    """
    values: List[Any] = []

    for file_path in input_files:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read().strip()

        if not content:
            continue

        # Try parsing as a single JSON document first
        try:
            values.append(json.loads(content))
            continue
        except json.JSONDecodeError:
            pass

        # Try parsing as JSON Lines (JSONL)
        for line_number, line in enumerate(content.split('\n'), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                values.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {file_path} at line {line_number}: {e.msg}") from e

    return values
