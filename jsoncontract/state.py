"""Validation state threaded through every checker.

The state holds the schema currently being matched, the path from the
document root to the value currently being matched, the collected errors and
the policy that decides whether an error stops the validation.
"""

import contextlib
from typing import Any, FrozenSet, Iterator, List, Optional

from jsoncontract.common import PathSegment
from jsoncontract.constants import DEFAULT_SCHEMA_VER
from jsoncontract.errors import (CollectingErrorHandler, DataInvalid, ErrorHandler,
                                 FailFastErrorHandler, JsonContractError, SchemaInvalid)


class ValidationState:
    """Mutable context for one top-level validation call."""

    def __init__(self,
                 root_schema: Any,
                 error_handler: Optional[ErrorHandler] = None,
                 resolver=None,
                 default_schema_ver: str = DEFAULT_SCHEMA_VER):
        self.root_schema = root_schema
        self.current_schema = root_schema
        self.path: List[PathSegment] = []
        # references followed since the current value was entered
        self.refs: FrozenSet[str] = frozenset()
        self.errors: List[JsonContractError] = []
        self.error_handler = error_handler if error_handler is not None else CollectingErrorHandler()
        self.resolver = resolver
        self.default_schema_ver = default_schema_ver

    def set_current_schema(self, schema: Any) -> 'ValidationState':
        self.current_schema = schema
        return self

    def push_path(self, segment: PathSegment) -> 'ValidationState':
        self.path.append(segment)
        return self

    def pop_path(self) -> 'ValidationState':
        self.path.pop()
        return self

    @contextlib.contextmanager
    def descend(self, segment: PathSegment, schema: Any = None) -> Iterator['ValidationState']:
        """Pushes ``segment`` (and optionally switches the current schema) for the
        duration of the block. Both are restored however the block exits, as is
        the reference chain, which starts empty for the child value."""
        previous_schema = self.current_schema
        previous_refs = self.refs
        self.push_path(segment)
        self.refs = frozenset()
        if schema is not None:
            self.set_current_schema(schema)
        try:
            yield self
        finally:
            self.pop_path()
            self.refs = previous_refs
            self.set_current_schema(previous_schema)

    @contextlib.contextmanager
    def following(self, ref: str) -> Iterator['ValidationState']:
        """Adds ``ref`` to the reference chain of the current value for the duration of the block."""
        previous_refs = self.refs
        self.refs = previous_refs | {ref}
        try:
            yield self
        finally:
            self.refs = previous_refs

    def isolated(self, schema: Any) -> 'ValidationState':
        """Returns a fresh fail-fast state rooted at ``schema`` with an empty path."""
        resolver = self.resolver.isolated(schema) if self.resolver is not None else None
        trial = ValidationState(schema,
                                error_handler=FailFastErrorHandler(),
                                resolver=resolver,
                                default_schema_ver=self.default_schema_ver)
        trial.refs = self.refs
        return trial

    def report_data_invalid(self, error: str, value: Any, detail: Any = None) -> 'ValidationState':
        """Reports that ``value`` violates the current schema. May raise ``ValidationFailed``."""
        self.error_handler.handle(
            DataInvalid(error, value, self.path, self.current_schema, detail), self.errors)
        return self

    def report_schema_invalid(self, error: str, detail: Any = None) -> 'ValidationState':
        """Reports that the current schema is malformed. May raise ``ValidationFailed``."""
        self.error_handler.handle(
            SchemaInvalid(error, self.path, self.current_schema, detail), self.errors)
        return self
