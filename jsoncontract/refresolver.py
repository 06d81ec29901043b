"""Resolves ``$ref`` references of JSON schemas.

References are resolved against the current resolution scope. Documents are
looked up in this resolver's own documents (the root schema and every
subschema that declares an ``id``), then in the schema store, then in the
content cache, and finally fetched from disk or over HTTP(S).
"""

import contextlib
import json
import logging
import os
from typing import Any, Dict, Iterator, Optional, Tuple
from urllib.parse import unquote, urldefrag, urljoin, urlparse

import jsonpointer
import requests
from jsonpointer import JsonPointerException

from jsoncontract.common import is_json_object
from jsoncontract.constants import ID, REMOTE_FETCH_TIMEOUT
from jsoncontract.schemastore import SchemaStore

logger = logging.getLogger(__name__)


class RefResolutionError(Exception):
    """Raised when a reference cannot be resolved."""


class RefResolver:
    """Resolves JSON references relative to a stack of resolution scopes."""

    def __init__(self,
                 base_uri: str = '',
                 root_schema: Any = None,
                 store: Optional[SchemaStore] = None,
                 content_cache: Optional[Dict[str, Any]] = None):
        """
        Args:
            base_uri: URI of the root schema document
            root_schema: The root schema document
            store: Schemas addressable by URI before anything is fetched
            content_cache: Fetched documents by URI, may be shared between resolvers
        """
        self.base_uri = base_uri
        self.store = store if store is not None else SchemaStore()
        self.content_cache = content_cache if content_cache is not None else {}
        self._documents: Dict[str, Any] = {urldefrag(base_uri)[0]: root_schema}
        self._scopes = [base_uri]

    @classmethod
    def from_schema(cls, schema: Any, base_uri: str = '', store: Optional[SchemaStore] = None) -> 'RefResolver':
        """Creates a resolver for ``schema``, scoped at its ``id`` when it has one."""
        if is_json_object(schema) and isinstance(schema.get(ID), str):
            base_uri = urljoin(base_uri, schema[ID])
        return cls(base_uri, schema, store)

    def isolated(self, schema: Any) -> 'RefResolver':
        """Returns a resolver that treats ``schema`` as the document at the current scope."""
        return RefResolver(self.resolution_scope, schema, self.store, self.content_cache)

    @property
    def resolution_scope(self) -> str:
        return self._scopes[-1]

    def expand(self, ref: str) -> str:
        """Returns ``ref`` as an absolute reference in the current scope."""
        return urljoin(self.resolution_scope, ref)

    @contextlib.contextmanager
    def in_scope(self, scope: str) -> Iterator[str]:
        """Enters ``scope`` (relative to the current one) for the duration of the block."""
        self._scopes.append(urljoin(self.resolution_scope, scope))
        try:
            yield self.resolution_scope
        finally:
            self._scopes.pop()

    def in_schema_scope(self, schema: Dict[str, Any]):
        """Enters the scope declared by the ``id`` of ``schema``, registering it as a document."""
        scope = urljoin(self.resolution_scope, schema[ID])
        self._documents.setdefault(urldefrag(scope)[0], schema)
        return self.in_scope(scope)

    def resolve(self, ref: str) -> Tuple[str, Any]:
        """Resolves ``ref`` in the current scope.

        Args:
            ref: The reference, e.g. ``#/definitions/a`` or ``other.json#/b``

        Returns:
            Tuple of the absolute reference and the referenced schema

        Raises:
            RefResolutionError: If the document cannot be loaded or the pointer does not resolve
        """
        url = self.expand(ref)
        uri, fragment = urldefrag(url)
        document = self.resolve_document(uri)
        logger.debug("Resolved %s to %s", ref, url)
        return url, self.resolve_fragment(document, fragment)

    def resolve_document(self, uri: str) -> Any:
        if uri in self._documents:
            return self._documents[uri]
        if uri in self.store:
            return self.store.get(uri)
        if uri in self.content_cache:
            return self.content_cache[uri]
        document = self.fetch_content(uri)
        self.content_cache[uri] = document
        return document

    @staticmethod
    def resolve_fragment(document: Any, fragment: str) -> Any:
        try:
            return jsonpointer.resolve_pointer(document, unquote(fragment))
        except JsonPointerException as e:
            raise RefResolutionError(f"Unresolvable JSON pointer '{fragment}': {e}") from e

    def fetch_content(self, uri: str) -> Any:
        """Fetches and parses the JSON document at ``uri``.

        Args:
            uri: An http(s) or file URI, or a file path

        Returns:
            The parsed document

        Raises:
            RefResolutionError: If the document cannot be fetched or parsed
        """
        parsed_url = urlparse(uri)
        scheme = parsed_url.scheme
        try:
            if scheme in ['http', 'https']:
                logger.debug("Fetching remote schema %s", uri)
                response = requests.get(uri, timeout=REMOTE_FETCH_TIMEOUT)
                # Raises an HTTPError if the response status code is 4XX/5XX
                response.raise_for_status()
                return response.json()
            if scheme == 'file' or (not scheme and parsed_url.path):
                file_path = unquote(parsed_url.path) if scheme == 'file' else uri
                logger.debug("Reading schema file %s", file_path)
                with open(os.path.normpath(file_path), 'r', encoding='utf-8') as file:
                    return json.load(file)
        except (requests.RequestException, OSError, ValueError) as e:
            raise RefResolutionError(f"Unable to load {uri}: {e}") from e
        raise RefResolutionError(f"Unsupported URI scheme in {uri!r}")
