"""Validates JSON values against the keywords of a JSON Schema draft-4 object.

The validator walks the keywords of one schema object in document order and
checks the value against each of them. Nested values (object members, array
items, dependency schemas, schema members of a union type) are handed back
to the recursion driver, which resolves references and picks the validator
for the nested schema.

Keywords that only modify another keyword (``additionalItems``,
``exclusiveMinimum``, ``exclusiveMaximum``) and the legacy ``required`` flag
have no effect of their own; they are read from the current schema by
``items``, ``minimum``/``maximum`` and ``properties``.
"""

import math
import re
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Dict, List

from jsoncontract.common import (is_array, is_equal, is_integer, is_json_object, is_null,
                                 is_number, is_string, is_boolean)
from jsoncontract.constants import (ANY, ARRAY, BOOLEAN, INTEGER, INVALID_PATTERN,
                                    MISSING_DEPENDENCY, MISSING_REQUIRED_PROPERTY,
                                    NO_EXTRA_ITEMS_ALLOWED, NO_EXTRA_PROPERTIES_ALLOWED, NO_MATCH,
                                    NOT_DIVISIBLE, NOT_ENOUGH_ITEMS, NOT_IN_RANGE, NOT_UNIQUE, NULL,
                                    NUMBER, OBJECT, STRING, WRONG_LENGTH, WRONG_SIZE, WRONG_TYPE,
                                    WRONG_TYPE_DEPENDENCY, WRONG_TYPE_ITEMS, Keyword)
from jsoncontract.errors import ValidationFailed
from jsoncontract.state import ValidationState

# Recursion driver signature: (schema, value, state) -> state
Driver = Callable[[Any, Any, ValidationState], ValidationState]

_NOT_FOUND = object()

_TYPE_PREDICATES: Dict[str, Callable[[Any], bool]] = {
    STRING: is_string,
    NUMBER: is_number,
    INTEGER: is_integer,
    BOOLEAN: is_boolean,
    OBJECT: is_json_object,
    ARRAY: is_array,
    NULL: is_null,
    ANY: lambda value: True,
}


class Draft4Validator:
    """Checks a value against the keywords of a single draft-4 schema object."""

    def __init__(self, validate_with_state: Driver):
        """Initialize the validator.

        Args:
            validate_with_state: The recursion driver used for nested values
        """
        self.validate_with_state = validate_with_state
        self._checkers: Dict[Keyword, Callable[[Any, Any, ValidationState], ValidationState]] = {
            Keyword.TYPE: self._check_type,
            Keyword.PROPERTIES: self._check_properties,
            Keyword.PATTERN_PROPERTIES: self._check_pattern_properties,
            Keyword.ADDITIONAL_PROPERTIES: self._check_additional_properties,
            Keyword.ITEMS: self._check_items,
            Keyword.ADDITIONAL_ITEMS: self._companion,
            Keyword.REQUIRED: self._companion,
            Keyword.DEPENDENCIES: self._check_dependencies,
            Keyword.MINIMUM: self._check_minimum,
            Keyword.MAXIMUM: self._check_maximum,
            Keyword.EXCLUSIVE_MINIMUM: self._companion,
            Keyword.EXCLUSIVE_MAXIMUM: self._companion,
            Keyword.MIN_ITEMS: self._check_min_items,
            Keyword.MAX_ITEMS: self._check_max_items,
            Keyword.UNIQUE_ITEMS: self._check_unique_items,
            Keyword.PATTERN: self._check_pattern,
            Keyword.MIN_LENGTH: self._check_min_length,
            Keyword.MAX_LENGTH: self._check_max_length,
            Keyword.ENUM: self._check_enum,
            Keyword.FORMAT: self._check_format,
            Keyword.MULTIPLE_OF: self._check_multiple_of,
        }
        missing = set(Keyword) - set(self._checkers)
        if missing:
            raise RuntimeError(f"No checker for keywords: {sorted(k.value for k in missing)}")

    def check_value(self, value: Any, schema: Dict[str, Any], state: ValidationState) -> ValidationState:
        """Goes through the keywords of ``schema`` and validates ``value`` against them.

        Args:
            value: The JSON value to validate
            schema: The schema object whose keywords are checked
            state: The validation state; its current schema must be ``schema``

        Returns:
            The validation state. Violations are reported through the state.
        """
        for name, attribute in schema.items():
            keyword = Keyword.lookup(name)
            if keyword is None:
                continue
            state = self._checkers[keyword](value, attribute, state)
        return state

    def _descend(self, segment, value: Any, schema: Any, state: ValidationState) -> ValidationState:
        """Validates a nested value with ``segment`` pushed onto the path."""
        with state.descend(segment, schema):
            return self.validate_with_state(schema, value, state)

    def _companion(self, value: Any, attribute: Any, state: ValidationState) -> ValidationState:
        # read by the keyword it modifies
        return state

    # type

    def _check_type(self, value: Any, declared_type: Any, state: ValidationState) -> ValidationState:
        if self.is_type_valid(value, declared_type, state):
            return state
        return state.report_data_invalid(WRONG_TYPE, value, detail=declared_type)

    def is_type_valid(self, value: Any, declared_type: Any, state: ValidationState) -> bool:
        """Checks a value against a type name or a union of types.

        Args:
            value: The JSON value to check
            declared_type: A type name, or a list of type names and schemas
            state: The validation state, used to build trial states for schema members

        Returns:
            True if the value is of the declared type
        """
        if isinstance(declared_type, str):
            predicate = _TYPE_PREDICATES.get(declared_type)
            return predicate(value) if predicate is not None else True
        if is_array(declared_type):
            return self._check_union_type(value, declared_type, state)
        return True

    def _check_union_type(self, value: Any, union_type: List[Any], state: ValidationState) -> bool:
        return any(self._matches_union_member(value, member, state) for member in union_type)

    def _matches_union_member(self, value: Any, member: Any, state: ValidationState) -> bool:
        if not is_json_object(member):
            return self.is_type_valid(value, member, state)
        trial = state.isolated(member)
        try:
            self.validate_with_state(member, value, trial)
        except ValidationFailed:
            return False
        return not trial.errors

    # objects

    def _check_properties(self, value: Any, properties: Dict[str, Any], state: ValidationState) -> ValidationState:
        if not is_json_object(value):
            return state
        for name, property_schema in properties.items():
            if name in value:
                state = self._descend(name, value[name], property_schema, state)
            elif is_json_object(property_schema) and property_schema.get(Keyword.REQUIRED.value) is True:
                state = state.report_data_invalid(MISSING_REQUIRED_PROPERTY, value, detail=name)
        return state

    def _check_pattern_properties(self, value: Any, pattern_properties: Dict[str, Any],
                                  state: ValidationState) -> ValidationState:
        if not is_json_object(value):
            return state
        for name, member in value.items():
            for pattern, pattern_schema in pattern_properties.items():
                matched = _search(pattern, name)
                if matched is None:
                    state = state.report_schema_invalid(INVALID_PATTERN, detail=pattern)
                elif matched:
                    state = self._descend(name, member, pattern_schema, state)
        return state

    def _check_additional_properties(self, value: Any, additional_properties: Any,
                                     state: ValidationState) -> ValidationState:
        if not is_json_object(value) or additional_properties is True:
            return state
        extras = self.get_additional_properties(value, state.current_schema)
        if additional_properties is False:
            for name in extras:
                with state.descend(name):
                    state = state.report_data_invalid(NO_EXTRA_PROPERTIES_ALLOWED, value, detail=name)
            return state
        for name in extras:
            state = self._descend(name, value[name], additional_properties, state)
        return state

    @staticmethod
    def get_additional_properties(value: Dict[str, Any], schema: Dict[str, Any]) -> List[str]:
        """Returns the member names of ``value`` covered neither by ``properties``
        nor by any ``patternProperties`` pattern of ``schema``, in document order."""
        properties = schema.get(Keyword.PROPERTIES.value) or {}
        patterns = list((schema.get(Keyword.PATTERN_PROPERTIES.value) or {}).keys())
        extras = []
        for name in value:
            if name in properties:
                continue
            if any(_search(pattern, name) for pattern in patterns):
                continue
            extras.append(name)
        return extras

    # arrays

    def _check_items(self, value: Any, items: Any, state: ValidationState) -> ValidationState:
        if not is_array(value):
            return state
        if is_json_object(items):
            for index, item in enumerate(value):
                state = self._descend(index, item, items, state)
            return state
        if is_array(items):
            return self._check_items_array(value, items, state)
        return state.report_schema_invalid(WRONG_TYPE_ITEMS, detail=items)

    def _check_items_array(self, value: List[Any], items: List[Any], state: ValidationState) -> ValidationState:
        extra = len(value) - len(items)
        if extra < 0:
            return state.report_data_invalid(NOT_ENOUGH_ITEMS, value)
        schemas = list(items)
        if extra > 0:
            additional_items = state.current_schema.get(Keyword.ADDITIONAL_ITEMS.value, _NOT_FOUND)
            if additional_items is False:
                return state.report_data_invalid(NO_EXTRA_ITEMS_ALLOWED, value)
            if additional_items is not _NOT_FOUND and additional_items is not True:
                schemas.extend([additional_items] * extra)
        # trailing items without a schema are not checked
        for index, (item, item_schema) in enumerate(zip(value, schemas)):
            state = self._descend(index, item, item_schema, state)
        return state

    def _check_min_items(self, value: Any, min_items: Any, state: ValidationState) -> ValidationState:
        if is_array(value) and len(value) < min_items:
            return state.report_data_invalid(WRONG_SIZE, value)
        return state

    def _check_max_items(self, value: Any, max_items: Any, state: ValidationState) -> ValidationState:
        if is_array(value) and len(value) > max_items:
            return state.report_data_invalid(WRONG_SIZE, value)
        return state

    def _check_unique_items(self, value: Any, unique_items: Any, state: ValidationState) -> ValidationState:
        if not is_array(value) or unique_items is not True:
            return state
        for index, item in enumerate(value):
            for other in value[index + 1:]:
                if is_equal(item, other):
                    return state.report_data_invalid(NOT_UNIQUE, value, detail=item)
        return state

    # dependencies

    def _check_dependencies(self, value: Any, dependencies: Dict[str, Any], state: ValidationState) -> ValidationState:
        if not is_json_object(value):
            return state
        for name, dependency in dependencies.items():
            if name in value:
                state = self._check_dependency_value(value, dependency, state)
        return state

    def _check_dependency_value(self, value: Dict[str, Any], dependency: Any, state: ValidationState) -> ValidationState:
        if is_string(dependency):
            if dependency not in value:
                return state.report_data_invalid(MISSING_DEPENDENCY, value, detail=dependency)
            return state
        if is_json_object(dependency):
            previous_schema = state.current_schema
            state.set_current_schema(dependency)
            try:
                state = self.validate_with_state(dependency, value, state)
            finally:
                state.set_current_schema(previous_schema)
            return state
        if is_array(dependency):
            for name in dependency:
                state = self._check_dependency_value(value, name, state)
            return state
        return state.report_schema_invalid(WRONG_TYPE_DEPENDENCY, detail=dependency)

    # numbers

    def _check_minimum(self, value: Any, minimum: Any, state: ValidationState) -> ValidationState:
        if not is_number(value):
            return state
        if state.current_schema.get(Keyword.EXCLUSIVE_MINIMUM.value) is True:
            valid = value > minimum
        else:
            valid = value >= minimum
        return state if valid else state.report_data_invalid(NOT_IN_RANGE, value)

    def _check_maximum(self, value: Any, maximum: Any, state: ValidationState) -> ValidationState:
        if not is_number(value):
            return state
        if state.current_schema.get(Keyword.EXCLUSIVE_MAXIMUM.value) is True:
            valid = value < maximum
        else:
            valid = value <= maximum
        return state if valid else state.report_data_invalid(NOT_IN_RANGE, value)

    def _check_multiple_of(self, value: Any, multiple_of: Any, state: ValidationState) -> ValidationState:
        if not is_number(value):
            return state
        if is_multiple_of(value, multiple_of):
            return state
        return state.report_data_invalid(NOT_DIVISIBLE, value, detail=multiple_of)

    # strings

    def _check_pattern(self, value: Any, pattern: str, state: ValidationState) -> ValidationState:
        if not is_string(value):
            return state
        matched = _search(pattern, value)
        if matched is None:
            return state.report_schema_invalid(INVALID_PATTERN, detail=pattern)
        return state if matched else state.report_data_invalid(NO_MATCH, value, detail=pattern)

    def _check_min_length(self, value: Any, min_length: Any, state: ValidationState) -> ValidationState:
        if is_string(value) and len(value) < min_length:
            return state.report_data_invalid(WRONG_LENGTH, value)
        return state

    def _check_max_length(self, value: Any, max_length: Any, state: ValidationState) -> ValidationState:
        if is_string(value) and len(value) > max_length:
            return state.report_data_invalid(WRONG_LENGTH, value)
        return state

    # any type

    def _check_enum(self, value: Any, enum: List[Any], state: ValidationState) -> ValidationState:
        if any(is_equal(value, candidate) for candidate in enum):
            return state
        return state.report_data_invalid(NOT_IN_RANGE, value)

    def _check_format(self, value: Any, format_name: Any, state: ValidationState) -> ValidationState:
        # format is advisory and never rejects
        return state


def is_multiple_of(value: Any, divisor: Any) -> bool:
    """Returns True if ``value / divisor`` is an integer.

    A divisor of 0 never divides. Two ints use the integer remainder. Anything
    involving a float is compared exactly on the shortest decimal form of each
    operand, so ``0.3`` is a multiple of ``0.1`` without any tolerance.
    """
    if divisor == 0:
        return False
    if is_integer(value) and is_integer(divisor):
        return value % divisor == 0
    if any(isinstance(n, float) and not math.isfinite(n) for n in (value, divisor)):
        return False
    quotient = _exact(value) / _exact(divisor)
    return quotient.denominator == 1


def _exact(number: Any) -> Fraction:
    if isinstance(number, float):
        return Fraction(Decimal(repr(number)))
    return Fraction(number)


def _search(pattern: str, text: str):
    """Unanchored regular expression search. Returns None for an invalid pattern."""
    try:
        return re.search(pattern, text) is not None
    except re.error:
        return None
