"""In-memory store of schemas addressable by key, id or file URI."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List
from urllib.parse import urldefrag

from jsoncontract.common import is_json_object
from jsoncontract.constants import ID, SCHEMA_FILE_PATTERN

logger = logging.getLogger(__name__)


class SchemaStoreError(KeyError):
    """Raised when a schema key is not present in the store."""


def normalize_key(key: str) -> str:
    """Strips an empty or trailing fragment so ``x.json#`` and ``x.json`` are the same key."""
    uri, fragment = urldefrag(key)
    return key if fragment else uri


class SchemaStore:
    """Schemas keyed by name or URI."""

    def __init__(self):
        self._schemas: Dict[str, Any] = {}

    def add_schema(self, key: str, schema: Any) -> str:
        """Adds ``schema`` under ``key`` (and under its ``id`` when it has one).

        Args:
            key: The key to store the schema under
            schema: The parsed schema object

        Returns:
            The normalized key
        """
        if not is_json_object(schema):
            raise TypeError(f"Schema for '{key}' must be an object, got {type(schema).__name__}")
        key = normalize_key(key)
        self._schemas[key] = schema
        schema_id = schema.get(ID)
        if isinstance(schema_id, str) and schema_id:
            self._schemas[normalize_key(schema_id)] = schema
        logger.debug("Added schema %s", key)
        return key

    def get(self, key: str) -> Any:
        """Returns the schema stored under ``key``.

        Raises:
            SchemaStoreError: If there is no such schema
        """
        try:
            return self._schemas[normalize_key(key)]
        except KeyError:
            raise SchemaStoreError(key) from None

    def remove_schema(self, key: str) -> None:
        self._schemas.pop(normalize_key(key), None)

    def clear(self) -> None:
        self._schemas.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def load_schemas(self, path: str) -> List[str]:
        """Loads every ``*.json`` file below ``path`` (or the single file ``path``).

        Each schema is stored under its file URI and, if present, its ``id``.
        Files that are not valid JSON objects are skipped with a warning.

        Args:
            path: A directory or a single schema file

        Returns:
            The keys the schemas were stored under
        """
        root = Path(path)
        files = [root] if root.is_file() else sorted(root.rglob(SCHEMA_FILE_PATTERN))
        keys = []
        skipped = 0
        for file in files:
            try:
                with open(file, 'r', encoding='utf-8') as f:
                    schema = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Skipping schema file %s: %s", file, e)
                skipped += 1
                continue
            if not is_json_object(schema):
                logger.warning("Skipping schema file %s: not a JSON object", file)
                skipped += 1
                continue
            key = self.add_schema(file.resolve().as_uri(), schema)
            keys.append(key)
            schema_id = schema.get(ID)
            if isinstance(schema_id, str) and schema_id:
                keys.append(normalize_key(schema_id))
        logger.debug("Loaded %d of %d schema file(s) from %s", len(files) - skipped, len(files), os.fspath(path))
        return keys
