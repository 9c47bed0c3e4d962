"""
JDL Type Mapping - translate JDL primitive types into Dart types.

Enum names declared in the schema pass through unchanged (the enum's own
name becomes the emitted type). Known primitives are looked up
case-insensitively; anything else falls back to String. None of these
functions raise.
"""

import re
from typing import Dict, List, Optional

# ---------------------------------------------------------------------------
# JDL primitive -> Dart type table
# ---------------------------------------------------------------------------

DART_STRING = 'String'
DART_DATETIME = 'DateTime'
DART_DURATION = 'Duration'
DART_BINARY = 'Uint8List'
DART_JSON = 'Map<String, dynamic>'

PRIMITIVE_TYPE_MAP = {
    # strings / id-like
    'string': DART_STRING,
    'uuid': DART_STRING,
    'textblob': DART_STRING,

    'boolean': 'bool',

    'integer': 'int',
    'long': 'int',
    'short': 'int',
    'byte': 'int',

    'float': 'double',
    'double': 'double',
    'bigdecimal': 'double',
    'decimal': 'double',

    'localdate': DART_DATETIME,
    'instant': DART_DATETIME,
    'zoneddatetime': DART_DATETIME,
    'localdatetime': DART_DATETIME,
    'datetime': DART_DATETIME,

    'duration': DART_DURATION,

    'blob': DART_BINARY,
    'anyblob': DART_BINARY,
    'imageblob': DART_BINARY,

    # not standard JDL but common in hand-written schemas
    'json': DART_JSON,
    'object': DART_JSON,
}

NUMERIC_TYPES = frozenset({
    'integer', 'long', 'short', 'byte', 'float', 'double', 'bigdecimal', 'decimal',
})
DATE_TYPES = frozenset({
    'localdate', 'instant', 'zoneddatetime', 'localdatetime', 'datetime',
})
BOOLEAN_TYPES = frozenset({'boolean'})
BLOB_TYPES = frozenset({'blob', 'anyblob', 'imageblob'})
DURATION_TYPES = frozenset({'duration'})
JSON_TYPES = frozenset(k for k, v in PRIMITIVE_TYPE_MAP.items() if v == DART_JSON)

CATEGORIES = ('enum', 'bool', 'number', 'date', 'duration', 'blob', 'json', 'string')

_RE_LIST_MARKER = re.compile(r'^\s*List\s*<\s*(\w+)\s*>\s*$')


def _normalize(jdl_type) -> str:
    """Normalize a JDL type token for table lookup (trimmed, lower-cased)."""
    if jdl_type is None:
        return ''
    return str(jdl_type).strip().lower()


def is_enum_type(jdl_type, enums: Optional[Dict[str, List[str]]] = None) -> bool:
    """Whether jdl_type names a declared enum (exact, case-sensitive)."""
    if not jdl_type or not enums:
        return False
    return isinstance(jdl_type, str) and jdl_type in enums


def is_boolean_type(jdl_type, enums=None) -> bool:
    return category_of(jdl_type, enums) == 'bool'


def is_numeric_type(jdl_type, enums=None) -> bool:
    """Whether the type maps to a Dart int or double."""
    return category_of(jdl_type, enums) == 'number'


def is_date_type(jdl_type, enums=None) -> bool:
    return category_of(jdl_type, enums) == 'date'


def is_blob_type(jdl_type, enums=None) -> bool:
    """Whether the type maps to binary content (Uint8List). TextBlob is a string."""
    return category_of(jdl_type, enums) == 'blob'


def category_of(jdl_type, enums: Optional[Dict[str, List[str]]] = None) -> str:
    """Classify a JDL type into one coarse category.

    Checks run in a fixed order: enum, bool, number, date, duration,
    blob, json, and 'string' for everything else (uuid, textblob,
    unrecognized tokens).
    """
    if is_enum_type(jdl_type, enums):
        return 'enum'

    key = _normalize(jdl_type)
    if key in BOOLEAN_TYPES:
        return 'bool'
    if key in NUMERIC_TYPES:
        return 'number'
    if key in DATE_TYPES:
        return 'date'
    if key in DURATION_TYPES:
        return 'duration'
    if key in BLOB_TYPES:
        return 'blob'
    if key in JSON_TYPES:
        return 'json'
    return 'string'


def map_type(jdl_type, enums: Optional[Dict[str, List[str]]] = None) -> str:
    """Return the Dart type for a JDL type.

    Args:
        jdl_type: JDL type token, e.g. 'Long', ' localdate ', 'Status'
            or a list marker such as 'List<Status>'.
        enums: Enum table from the parser ({EnumName: [values]}).

    Returns:
        The enum name for enum types, the mapped primitive for known
        tokens, 'String' otherwise.
    """
    if is_enum_type(jdl_type, enums):
        return jdl_type

    if isinstance(jdl_type, str):
        list_match = _RE_LIST_MARKER.match(jdl_type)
        if list_match:
            return f"List<{map_type(list_match.group(1), enums)}>"

    return PRIMITIVE_TYPE_MAP.get(_normalize(jdl_type), DART_STRING)
