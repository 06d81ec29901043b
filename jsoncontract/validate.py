"""Validates JSON instances against JSON Schema draft-4 schemas.

This module provides the public validation interface: validation against
stored schemas or schema objects, a non-raising result form, and validation
of JSON, JSON array and JSON Lines files.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from jsoncontract import schemavalidator
from jsoncontract.constants import ARRAY, INFINITY, INVALID_JSON, SCHEMA_NOT_FOUND
from jsoncontract.errors import DataInvalid, JsonContractError, SchemaInvalid, ValidationFailed
from jsoncontract.schemastore import SchemaStore, SchemaStoreError

logger = logging.getLogger(__name__)

_default_store = SchemaStore()


def default_store() -> SchemaStore:
    """Returns the store used when no ``store`` option is given."""
    return _default_store


def add_schema(key: str, schema: Any) -> str:
    """Adds a schema to the default store."""
    return _default_store.add_schema(key, schema)


def load_schemas(path: str) -> List[str]:
    """Loads every schema file below ``path`` into the default store."""
    return _default_store.load_schemas(path)


class ValidationResult:
    """Result of validating a JSON instance against a schema."""

    def __init__(self, is_valid: bool, errors: List[JsonContractError] = None, instance_path: str = None):
        self.is_valid = is_valid
        self.errors = errors or []
        self.instance_path = instance_path

    def __str__(self) -> str:
        if self.is_valid:
            return f"✓ Valid" + (f": {self.instance_path}" if self.instance_path else "")
        else:
            prefix = f"{self.instance_path}: " if self.instance_path else ""
            return f"✗ Invalid: {prefix}" + "; ".join(str(e) for e in self.errors)

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'instance': self.instance_path,
            'valid': self.is_valid,
            'errors': [e.to_dict() for e in self.errors],
        }


def validate(schema_key: str, data: Any, store: Optional[SchemaStore] = None, **options) -> Any:
    """Validates ``data`` against the schema stored under ``schema_key``.

    Args:
        schema_key: Key, id or file URI of a stored schema
        data: The JSON value to validate
        store: The schema store, the default store if not given
        **options: allowed_errors, default_schema_ver, base_uri (the key if not given)

    Returns:
        The data, if it is valid

    Raises:
        ValidationFailed: If the schema is unknown or the data is invalid
    """
    store = store if store is not None else _default_store
    try:
        schema = store.get(schema_key)
    except SchemaStoreError:
        raise ValidationFailed([SchemaInvalid(SCHEMA_NOT_FOUND, detail=schema_key)]) from None
    options.setdefault('base_uri', schema_key)
    return schemavalidator.validate(schema, data, store=store, **options)


def validate_with_schema(schema: Any, data: Any, parse_json: bool = False,
                         store: Optional[SchemaStore] = None, **options) -> Any:
    """Validates ``data`` against ``schema``.

    Args:
        schema: The schema object, or JSON text if ``parse_json`` is set
        data: The JSON value, or JSON text if ``parse_json`` is set
        parse_json: Parse ``schema`` and ``data`` from JSON text first
        store: Schemas available to remote references
        **options: allowed_errors, default_schema_ver, base_uri

    Returns:
        The (parsed) data, if it is valid

    Raises:
        ValidationFailed: If the data is invalid
        json.JSONDecodeError: If ``parse_json`` is set and a text is not JSON
    """
    if parse_json:
        if isinstance(schema, (str, bytes)):
            schema = json.loads(schema)
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
    store = store if store is not None else _default_store
    return schemavalidator.validate(schema, data, store=store, **options)


def validate_instance(instance: Any, schema: Any, **options) -> ValidationResult:
    """Validates a JSON instance against a schema without raising.

    Args:
        instance: The JSON value to validate
        schema: The schema object
        **options: See ``validate_with_schema``

    Returns:
        ValidationResult with validation status and any errors
    """
    try:
        validate_with_schema(schema, instance, **options)
        return ValidationResult(is_valid=True)
    except ValidationFailed as e:
        return ValidationResult(is_valid=False, errors=e.errors)


def _load_instances(instance_file: str, schema: Any) -> Tuple[List[Any], List[str], List[ValidationResult]]:
    with open(instance_file, 'r', encoding='utf-8') as f:
        content = f.read().strip()

    instances = []
    instance_paths = []
    unparsable = []

    # Check if schema expects an array at the root
    schema_is_array = isinstance(schema, dict) and schema.get('type') == ARRAY

    try:
        data = json.loads(content)
        if isinstance(data, list) and not schema_is_array:
            # Schema expects individual items, validate each array element
            instances = data
            instance_paths = [f"{instance_file}[{i}]" for i in range(len(data))]
        else:
            instances = [data]
            instance_paths = [instance_file]
    except json.JSONDecodeError:
        # Try as JSONL
        for i, line in enumerate(content.split('\n')):
            line = line.strip()
            if not line:
                continue
            line_path = f"{instance_file}:{i+1}"
            try:
                instances.append(json.loads(line))
                instance_paths.append(line_path)
            except json.JSONDecodeError as e:
                logger.warning("%s is not valid JSON: %s", line_path, e)
                unparsable.append(ValidationResult(
                    is_valid=False, errors=[DataInvalid(INVALID_JSON, line, detail=e.msg)], instance_path=line_path))
    return instances, instance_paths, unparsable


def validate_file(instance_file: str,
                  schema_file: str,
                  all_errors: bool = False,
                  store: Optional[SchemaStore] = None) -> List[ValidationResult]:
    """Validates JSON instance file(s) against a schema file.

    Args:
        instance_file: Path to JSON file (single object, array, or JSONL)
        schema_file: Path to the schema file
        all_errors: Collect every error instead of stopping at the first one
        store: Schemas available to remote references

    Returns:
        List of ValidationResult for each instance in the file
    """
    with open(schema_file, 'r', encoding='utf-8') as f:
        schema = json.load(f)
    base_uri = Path(schema_file).resolve().as_uri()

    instances, instance_paths, results = _load_instances(instance_file, schema)
    allowed_errors: Union[int, str] = INFINITY if all_errors else 0
    for instance, path in zip(instances, instance_paths):
        result = validate_instance(instance, schema, store=store, base_uri=base_uri,
                                   allowed_errors=allowed_errors)
        result.instance_path = path
        results.append(result)
    return results


def validate_json_instances(
    input_files: List[str],
    schema_file: str,
    all_errors: bool = False,
    store: Optional[SchemaStore] = None,
    verbose: bool = False
) -> Tuple[int, int, List[ValidationResult]]:
    """Validates multiple JSON instance files against a schema.

    Args:
        input_files: List of JSON file paths to validate
        schema_file: Path to schema file
        all_errors: Collect every error per instance
        store: Schemas available to remote references
        verbose: Whether to print validation results

    Returns:
        Tuple of (valid_count, invalid_count, results)
    """
    valid_count = 0
    invalid_count = 0
    all_results = []

    for input_file in input_files:
        results = validate_file(input_file, schema_file, all_errors=all_errors, store=store)
        for result in results:
            if result.is_valid:
                valid_count += 1
            else:
                invalid_count += 1
            if verbose:
                print(result)
        all_results.extend(results)

    return valid_count, invalid_count, all_results


# Command entry point for jsoncontract CLI
def validate_command(
    input: List[str],
    schema: str,
    schemas_dir: str = None,
    all_errors: bool = False,
    json_output: bool = False,
    quiet: bool = False
) -> None:
    """Validates JSON instances against a JSON Schema.

    Args:
        input: List of JSON files to validate
        schema: Path to the schema file
        schemas_dir: Directory of schemas available to remote references
        all_errors: Report every error per instance, not only the first
        json_output: Print a JSON report instead of one line per instance
        quiet: Suppress output, exit with code 0 if valid, 1 if invalid
    """
    store = SchemaStore()
    if schemas_dir:
        store.load_schemas(schemas_dir)

    valid_count, invalid_count, results = validate_json_instances(
        input_files=input,
        schema_file=schema,
        all_errors=all_errors,
        store=store,
        verbose=not quiet and not json_output
    )

    if json_output and not quiet:
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    elif not quiet:
        total = valid_count + invalid_count
        print(f"\nValidation summary: {valid_count}/{total} instances valid")

    if invalid_count > 0:
        sys.exit(1)
