"""Recursion driver for schema validation.

Resolves references, picks the validator for the schema version and
validates nested (schema, value) pairs on behalf of the keyword validators.
"""

import logging
from typing import Any, Optional, Union

from jsoncontract.common import is_json_object
from jsoncontract.constants import (CIRCULAR_REF, DEFAULT_ALLOWED_ERRORS, DEFAULT_SCHEMA_VER,
                                    DRAFT4_URIS, ID, INVALID_SCHEMA, REF, SCHEMA, SCHEMA_UNSUPPORTED,
                                    UNRESOLVABLE_REF)
from jsoncontract.draft4validator import Draft4Validator
from jsoncontract.errors import CollectingErrorHandler, ErrorHandler, ValidationFailed
from jsoncontract.refresolver import RefResolutionError, RefResolver
from jsoncontract.schemastore import SchemaStore
from jsoncontract.state import ValidationState

logger = logging.getLogger(__name__)


def validate_with_state(schema: Any, value: Any, state: ValidationState) -> ValidationState:
    """Validates ``value`` against ``schema`` and returns the updated state.

    Args:
        schema: The (sub)schema to validate against
        value: The JSON value to validate
        state: The validation state

    Returns:
        The validation state
    """
    if not is_json_object(schema):
        return state.report_schema_invalid(INVALID_SCHEMA, detail=schema)
    if state.resolver is None:
        state.resolver = RefResolver.from_schema(state.root_schema)
    if isinstance(schema.get(REF), str):
        return _validate_ref(schema[REF], value, state)
    if isinstance(schema.get(ID), str) and schema is not state.root_schema:
        with state.resolver.in_schema_scope(schema):
            return _dispatch(schema, value, state)
    return _dispatch(schema, value, state)


def _validate_ref(ref: str, value: Any, state: ValidationState) -> ValidationState:
    url = state.resolver.expand(ref)
    # a reference revisited before any nested value was entered never terminates
    if url in state.refs:
        return state.report_schema_invalid(CIRCULAR_REF, detail=ref)
    try:
        url, resolved = state.resolver.resolve(ref)
    except RefResolutionError as e:
        logger.debug("Unable to resolve %s: %s", ref, e)
        return state.report_schema_invalid(UNRESOLVABLE_REF, detail=ref)
    with state.resolver.in_scope(url), state.following(url):
        return validate_with_state(resolved, value, state)


def _dispatch(schema: dict, value: Any, state: ValidationState) -> ValidationState:
    version = schema.get(SCHEMA, state.default_schema_ver)
    if not isinstance(version, str) or version not in DRAFT4_URIS:
        return state.report_schema_invalid(SCHEMA_UNSUPPORTED, detail=version)
    previous_schema = state.current_schema
    state.set_current_schema(schema)
    try:
        return _DRAFT4.check_value(value, schema, state)
    finally:
        state.set_current_schema(previous_schema)


_DRAFT4 = Draft4Validator(validate_with_state)


def new_state(schema: Any,
              allowed_errors: Union[int, str, None] = DEFAULT_ALLOWED_ERRORS,
              default_schema_ver: Optional[str] = None,
              store: Optional[SchemaStore] = None,
              base_uri: str = '',
              error_handler: Optional[ErrorHandler] = None) -> ValidationState:
    """Creates the state for validating against the root ``schema``.

    The default schema version is the root's ``$schema`` when present, then
    ``default_schema_ver``, then draft-4.
    """
    if is_json_object(schema) and isinstance(schema.get(SCHEMA), str):
        default_schema_ver = schema[SCHEMA]
    return ValidationState(schema,
                           error_handler=error_handler or CollectingErrorHandler(allowed_errors),
                           resolver=RefResolver.from_schema(schema, base_uri=base_uri, store=store),
                           default_schema_ver=default_schema_ver or DEFAULT_SCHEMA_VER)


def validate(schema: Any, value: Any, **options) -> Any:
    """Validates ``value`` against the root ``schema``.

    Args:
        schema: The root schema
        value: The JSON value to validate
        **options: See ``new_state``

    Returns:
        The value, if it is valid

    Raises:
        ValidationFailed: With every collected error, if the value is invalid
    """
    state = new_state(schema, **options)
    state = validate_with_state(schema, value, state)
    if state.errors:
        raise ValidationFailed(state.errors)
    return value
