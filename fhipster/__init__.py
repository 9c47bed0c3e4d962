"""Parse JDL schemas into the entity graph consumed by the FHipster Flutter templates."""

from .parsers import (
    JDLParser,
    ParserManager,
    RelationshipMappingError,
    UnsupportedSchemaError,
    category_of,
    map_type,
    normalize_relationships,
    parse_jdl,
)
from .logging_config import configure_logging

__version__ = '0.1.0'

__all__ = [
    'JDLParser', 'ParserManager', 'parse_jdl', 'normalize_relationships',
    'map_type', 'category_of',
    'RelationshipMappingError', 'UnsupportedSchemaError',
    'configure_logging',
]
