"""Error records and error-handling policies for schema validation.

Violations are reported as ``DataInvalid`` (the value does not satisfy the
schema) or ``SchemaInvalid`` (the schema itself is malformed). Whether a
report stops the validation or is collected is decided by the
``ErrorHandler`` installed in the validation state.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from jsoncontract.common import PathSegment, format_path
from jsoncontract.constants import DEFAULT_ALLOWED_ERRORS, INFINITY


class JsonContractError(Exception):
    """Base class for a single validation error."""

    def __init__(self, error: str, path: Sequence[PathSegment] = (), schema: Any = None, detail: Any = None):
        self.error = error
        self.path = list(path)
        self.schema = schema
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.detail is not None:
            return f"{self.error} ({self.detail!r}) at {format_path(self.path)}"
        return f"{self.error} at {format_path(self.path)}"

    def to_dict(self) -> Dict[str, Any]:
        """Returns a JSON-serializable description of the error."""
        result = {
            'error': self.error,
            'path': format_path(self.path),
        }
        if self.detail is not None:
            result['detail'] = self.detail
        return result


class DataInvalid(JsonContractError):
    """The validated value does not satisfy the schema."""

    def __init__(self, error: str, value: Any, path: Sequence[PathSegment] = (), schema: Any = None, detail: Any = None):
        self.value = value
        super().__init__(error, path, schema, detail)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['kind'] = 'data_invalid'
        result['value'] = self.value
        return result


class SchemaInvalid(JsonContractError):
    """The schema is malformed for a keyword that requires a specific shape."""

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['kind'] = 'schema_invalid'
        return result


class ValidationFailed(Exception):
    """Raised when validation stops; carries every error collected so far."""

    def __init__(self, errors: List[JsonContractError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))


class ErrorHandler:
    """Decides what happens when a checker reports an error."""

    def handle(self, error: JsonContractError, errors: List[JsonContractError]) -> None:
        """Records ``error`` into ``errors`` or raises ``ValidationFailed``."""
        raise NotImplementedError


class CollectingErrorHandler(ErrorHandler):
    """Collects errors until more than ``allowed_errors`` were reported.

    ``allowed_errors=0`` stops at the first error, ``None`` or ``'infinity'``
    never stops and leaves the decision to the caller.
    """

    def __init__(self, allowed_errors: Union[int, str, None] = DEFAULT_ALLOWED_ERRORS):
        if allowed_errors == INFINITY:
            allowed_errors = None
        if allowed_errors is not None and allowed_errors < 0:
            raise ValueError(f"allowed_errors must not be negative, got {allowed_errors}")
        self.allowed_errors: Optional[int] = allowed_errors

    def handle(self, error: JsonContractError, errors: List[JsonContractError]) -> None:
        errors.append(error)
        if self.allowed_errors is not None and len(errors) > self.allowed_errors:
            raise ValidationFailed(errors)


class FailFastErrorHandler(CollectingErrorHandler):
    """Stops the validation at the first error."""

    def __init__(self):
        super().__init__(allowed_errors=0)
