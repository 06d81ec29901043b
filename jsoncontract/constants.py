"""Constants for the jsoncontract package.

Keyword names, type names, error kinds and option defaults shared by the
validator, the recursion driver and the command line.
"""

from enum import Enum


class Keyword(str, Enum):
    """Schema keywords understood by the draft-4 validator."""

    TYPE = 'type'
    PROPERTIES = 'properties'
    PATTERN_PROPERTIES = 'patternProperties'
    ADDITIONAL_PROPERTIES = 'additionalProperties'
    ITEMS = 'items'
    ADDITIONAL_ITEMS = 'additionalItems'
    REQUIRED = 'required'
    DEPENDENCIES = 'dependencies'
    MINIMUM = 'minimum'
    MAXIMUM = 'maximum'
    EXCLUSIVE_MINIMUM = 'exclusiveMinimum'
    EXCLUSIVE_MAXIMUM = 'exclusiveMaximum'
    MIN_ITEMS = 'minItems'
    MAX_ITEMS = 'maxItems'
    UNIQUE_ITEMS = 'uniqueItems'
    PATTERN = 'pattern'
    MIN_LENGTH = 'minLength'
    MAX_LENGTH = 'maxLength'
    ENUM = 'enum'
    FORMAT = 'format'
    MULTIPLE_OF = 'multipleOf'

    @classmethod
    def lookup(cls, name):
        """Returns the keyword for a schema key, or None for unknown keys."""
        return _KEYWORDS_BY_NAME.get(name)


_KEYWORDS_BY_NAME = {keyword.value: keyword for keyword in Keyword}

# Keys handled by the recursion driver rather than the keyword dispatcher
REF = '$ref'
SCHEMA = '$schema'
ID = 'id'

# Type names
STRING = 'string'
NUMBER = 'number'
INTEGER = 'integer'
BOOLEAN = 'boolean'
OBJECT = 'object'
ARRAY = 'array'
NULL = 'null'
ANY = 'any'

# Data errors
WRONG_TYPE = 'wrong_type'
MISSING_REQUIRED_PROPERTY = 'missing_required_property'
NO_EXTRA_PROPERTIES_ALLOWED = 'no_extra_properties_allowed'
NO_EXTRA_ITEMS_ALLOWED = 'no_extra_items_allowed'
NOT_ENOUGH_ITEMS = 'not_enough_items'
MISSING_DEPENDENCY = 'missing_dependency'
WRONG_SIZE = 'wrong_size'
NOT_UNIQUE = 'not_unique'
NO_MATCH = 'no_match'
WRONG_LENGTH = 'wrong_length'
NOT_IN_RANGE = 'not_in_range'
NOT_DIVISIBLE = 'not_divisible'
INVALID_JSON = 'invalid_json'

# Schema errors
WRONG_TYPE_ITEMS = 'wrong_type_items'
WRONG_TYPE_DEPENDENCY = 'wrong_type_dependency'
INVALID_PATTERN = 'invalid_pattern'
SCHEMA_UNSUPPORTED = 'schema_unsupported'
UNRESOLVABLE_REF = 'unresolvable_ref'
CIRCULAR_REF = 'circular_ref'
SCHEMA_NOT_FOUND = 'schema_not_found'
INVALID_SCHEMA = 'invalid_schema'

# Schema versions
DRAFT4 = 'http://json-schema.org/draft-04/schema#'
DRAFT4_URIS = frozenset({
    DRAFT4,
    'http://json-schema.org/draft-04/schema',
    'https://json-schema.org/draft-04/schema#',
    'https://json-schema.org/draft-04/schema',
})

# Option defaults
DEFAULT_SCHEMA_VER = DRAFT4
DEFAULT_ALLOWED_ERRORS = 0
INFINITY = 'infinity'
REMOTE_FETCH_TIMEOUT = 30
SCHEMA_FILE_PATTERN = '*.json'
