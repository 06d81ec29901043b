"""
Common utility functions for jsoncontract.
"""

from typing import Any, Iterable, Union

from jsonpointer import JsonPointer

PathSegment = Union[str, int]


def is_json_object(value: Any) -> bool:
    """Returns True if the value is a JSON object."""
    return isinstance(value, dict)


def is_array(value: Any) -> bool:
    """Returns True if the value is a JSON array."""
    return isinstance(value, list)


def is_null(value: Any) -> bool:
    """Returns True if the value is JSON null."""
    return value is None


def is_number(value: Any) -> bool:
    """Returns True for JSON numbers. Booleans are not numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """Returns True for integral JSON numbers as parsed (``1`` but not ``1.0``)."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    """Returns True if the value is a JSON string."""
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    """Returns True if the value is a JSON boolean."""
    return isinstance(value, bool)


def json_type_name(value: Any) -> str:
    """Returns the JSON kind of a value for messages."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, int):
        return 'integer'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__


def is_equal(value1: Any, value2: Any) -> bool:
    """
    Structural JSON equality.

    Two values are equal if they are of the same JSON kind and:
    - both are null; or
    - both are booleans, numbers or strings with the same value (numbers
      compare numerically, so ``1`` equals ``1.0``); or
    - both are arrays with the same length and pairwise equal items in order; or
    - both are objects with the same number of members and every member of
      the first has an equal member of the same name in the second.
    """
    if is_json_object(value1) and is_json_object(value2):
        return _compare_objects(value1, value2)
    if is_array(value1) and is_array(value2):
        return _compare_lists(value1, value2)
    if is_number(value1) and is_number(value2):
        return value1 == value2
    if json_type_name(value1) != json_type_name(value2):
        return False
    return value1 == value2


def _compare_lists(value1: list, value2: list) -> bool:
    if len(value1) != len(value2):
        return False
    return all(is_equal(item1, item2) for item1, item2 in zip(value1, value2))


def _compare_objects(value1: dict, value2: dict) -> bool:
    if len(value1) != len(value2):
        return False
    for name, member1 in value1.items():
        if name not in value2:
            return False
        if not is_equal(member1, value2[name]):
            return False
    return True


def format_path(path: Iterable[PathSegment]) -> str:
    """Formats a list of path segments as a JSON pointer fragment, e.g. ``#/a/0/b``."""
    return '#' + JsonPointer.from_parts(list(path)).path
