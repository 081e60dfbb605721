"""
JSON Schema validation for structured clinical payloads.

Schemas live in services/schemas/ as versioned JSON files
(medications_v1.json...).
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft202012Validator

from ehrcloud.services.validation.results import ValidationResult

SCHEMA_DIR = Path(__file__).parent.parent / "schemas"

# Limit the number of reported errors
MAX_ERRORS = 10


class SchemaNotFoundError(Exception):
    """The requested JSON schema file does not exist."""


@lru_cache(maxsize=16)
def load_schema(name: str, version: str = "v1") -> Dict[str, Any]:
    """
    Load and cache a schema.

    Raises:
        SchemaNotFoundError: no such file
    """
    path = SCHEMA_DIR / f"{name}_{version}.json"
    if not path.exists():
        raise SchemaNotFoundError(f"Schema not found: {path}")
    with open(path, encoding="utf-8") as f:
        schema = json.load(f)
    Draft202012Validator.check_schema(schema)
    return schema


def validate_document(name: str, data: Any, field_name: str, version: str = "v1") -> ValidationResult:
    """
    Validate data against a named schema.

    Each violation is reported on "<field_name>.<json path>".
    """
    validator = Draft202012Validator(load_schema(name, version))
    result = ValidationResult()
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    for error in errors[:MAX_ERRORS]:
        path = ".".join(str(p) for p in error.absolute_path)
        result.add(f"{field_name}.{path}" if path else field_name, error.message)
    return result


def validate_medications(medications: Any) -> ValidationResult:
    return validate_document("medications", medications, "medications")
