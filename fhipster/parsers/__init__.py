from .jdl_parser import JDLParser, parse_jdl
from .relationship_mapping import (
    RelationshipMappingError,
    expected_inverse_type,
    normalize_rel_type,
    normalize_relationships,
    to_kind,
)
from .type_mapping import (
    category_of,
    is_blob_type,
    is_boolean_type,
    is_date_type,
    is_enum_type,
    is_numeric_type,
    map_type,
)
from .parser_manager import ParserManager, UnsupportedSchemaError

__all__ = [
    'JDLParser', 'parse_jdl',
    'normalize_relationships', 'normalize_rel_type', 'to_kind', 'expected_inverse_type',
    'RelationshipMappingError',
    'map_type', 'category_of',
    'is_enum_type', 'is_boolean_type', 'is_numeric_type', 'is_date_type', 'is_blob_type',
    'ParserManager', 'UnsupportedSchemaError',
]
