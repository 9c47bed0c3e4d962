import pytest

from fhipster.parsers.type_mapping import (
    CATEGORIES,
    PRIMITIVE_TYPE_MAP,
    category_of,
    is_blob_type,
    is_boolean_type,
    is_date_type,
    is_enum_type,
    is_numeric_type,
    map_type,
)

ENUMS = {'Status': ['ACTIVE', 'INACTIVE'], 'Boolean': ['YES', 'NO']}

SAMPLE_TYPES = [
    'String', 'Integer', 'Long', 'Short', 'Byte', 'Float', 'Double', 'BigDecimal', 'Decimal',
    'Boolean', 'LocalDate', 'Instant', 'ZonedDateTime', 'LocalDateTime', 'DateTime',
    'Duration', 'Blob', 'AnyBlob', 'ImageBlob', 'TextBlob', 'UUID', 'Json', 'Object',
    'Status', 'status', 'Unknown', '', '   ', 'List<Status>', None, 42,
]


@pytest.mark.parametrize('jdl_type,expected', [
    ('String', 'String'),
    ('Integer', 'int'),
    ('Long', 'int'),
    ('BigDecimal', 'double'),
    ('Float', 'double'),
    ('Boolean', 'bool'),
    ('LocalDate', 'DateTime'),
    ('ZonedDateTime', 'DateTime'),
    ('Duration', 'Duration'),
    ('Blob', 'Uint8List'),
    ('ImageBlob', 'Uint8List'),
    ('TextBlob', 'String'),
    ('UUID', 'String'),
    ('Json', 'Map<String, dynamic>'),
])
def test_map_primitive_types(jdl_type, expected):
    assert map_type(jdl_type) == expected


def test_map_type_is_case_insensitive_and_trimmed():
    assert map_type('  bigdecimal ') == 'double'
    assert map_type('INSTANT') == 'DateTime'


def test_map_type_defaults_to_string():
    """Unknown, empty and non-string tokens all map to String"""
    for token in ('Money', '', '   ', None, 42, object()):
        assert map_type(token, {}) == 'String'


def test_enum_passes_through():
    assert map_type('Status', ENUMS) == 'Status'
    assert category_of('Status', ENUMS) == 'enum'
    assert is_enum_type('Status', ENUMS)


def test_enum_match_is_case_sensitive():
    assert not is_enum_type('status', ENUMS)
    assert map_type('status', ENUMS) == 'String'
    assert category_of('status', ENUMS) == 'string'


def test_enum_wins_over_primitive_with_same_name():
    assert map_type('Boolean', ENUMS) == 'Boolean'
    assert category_of('Boolean', ENUMS) == 'enum'
    assert not is_boolean_type('Boolean', ENUMS)


def test_list_marker_maps_inner_type():
    assert map_type('List<Status>', ENUMS) == 'List<Status>'
    assert map_type('List<Long>', ENUMS) == 'List<int>'


@pytest.mark.parametrize('jdl_type,expected', [
    ('Boolean', 'bool'),
    ('Long', 'number'),
    ('decimal', 'number'),
    ('Instant', 'date'),
    ('Duration', 'duration'),
    ('AnyBlob', 'blob'),
    ('TextBlob', 'string'),
    ('Object', 'json'),
    ('UUID', 'string'),
    ('Whatever', 'string'),
])
def test_category_of(jdl_type, expected):
    assert category_of(jdl_type) == expected


def test_every_table_key_has_a_known_category():
    for key in PRIMITIVE_TYPE_MAP:
        assert category_of(key) in CATEGORIES


@pytest.mark.parametrize('jdl_type', SAMPLE_TYPES)
@pytest.mark.parametrize('enums', [{}, ENUMS])
def test_predicates_agree_with_category(jdl_type, enums):
    """At most one predicate holds and it matches category_of"""
    predicates = {
        'enum': is_enum_type,
        'bool': is_boolean_type,
        'number': is_numeric_type,
        'date': is_date_type,
        'blob': is_blob_type,
    }
    held = [cat for cat, predicate in predicates.items() if predicate(jdl_type, enums)]
    assert len(held) <= 1

    category = category_of(jdl_type, enums)
    if held:
        assert category == held[0]
    else:
        assert category in ('duration', 'json', 'string')
