import json
import os

import pytest

from fhipster.parsers.parser_manager import ParserManager, UnsupportedSchemaError


def test_detect_jdl(fixtures_dir):
    """Test detecting a JDL project"""
    manager = ParserManager()
    assert manager.detect_schema_format(os.path.join(fixtures_dir, 'jdl_project')) == 'jdl'


def test_detect_unknown(fixtures_dir):
    manager = ParserManager()
    assert manager.detect_schema_format(os.path.join(fixtures_dir, 'empty_project')) == 'unknown'
    assert manager.detect_schema_format(os.path.join(fixtures_dir, 'does_not_exist')) == 'unknown'


def test_find_schema_files_in_path_order(fixtures_dir):
    manager = ParserManager()
    files = manager.find_schema_files(os.path.join(fixtures_dir, 'jdl_project'))
    assert [os.path.basename(f) for f in files] == ['garage.jh', 'enums.jdl']


def test_parse_schema_across_files(fixtures_dir, field_of):
    """Enums from one file apply to entities declared in another"""
    manager = ParserManager(add_missing_inverse=False)
    result = manager.parse_schema(os.path.join(fixtures_dir, 'jdl_project'))

    assert result['enums'] == {'Status': ['ACTIVE', 'INACTIVE']}
    assert result['warnings'] == []

    car = result['entities']['Car']
    assert [f['name'] for f in car][:3] == ['id', 'name', 'status']
    assert [f['name'] for f in car][-5:] == [
        'lastModifiedDate', 'lastModifiedBy', 'createdDate', 'createdBy', 'driver']

    driver = field_of(result, 'Car', 'driver')
    assert driver['rel_kind'] == 'M2O'
    assert driver['target_entity_model'] == 'DriverModel'
    assert driver['inverse'] == {'entity': 'Driver', 'field_name': 'cars'}
    assert field_of(result, 'Driver', 'cars')['inverse'] == {'entity': 'Car', 'field_name': 'driver'}


def test_parse_schema_without_jdl_raises(fixtures_dir):
    manager = ParserManager()
    with pytest.raises(UnsupportedSchemaError):
        manager.parse_schema(os.path.join(fixtures_dir, 'empty_project'))


def test_parse_file(fixtures_dir):
    manager = ParserManager()
    result = manager.parse_file(os.path.join(fixtures_dir, 'jdl_project', 'enums.jdl'))
    assert result['entities'] == {}
    assert result['enums']['Status'] == ['ACTIVE', 'INACTIVE']


def test_parse_missing_file_raises(fixtures_dir):
    manager = ParserManager()
    with pytest.raises(UnsupportedSchemaError):
        manager.parse_file(os.path.join(fixtures_dir, 'missing.jdl'))


def test_parse_text_unknown_entity_reports_warning():
    result = ParserManager().parse_text('entity Car { }\nrelationship ManyToOne { Car to Foo }')
    assert result['entities'] == {'Car': [{
        'name': 'id', 'type': 'Long', 'is_relationship': False, 'required': False, 'nullable': True,
    }]}
    assert len(result['warnings']) == 1
    assert 'Foo' in result['warnings'][0]


def test_custom_extensions_and_suffix(tmp_path):
    (tmp_path / 'model.schema').write_text('entity A { }\nentity B { }\nrelationship OneToOne { A to B }')
    manager = ParserManager(extensions=['.schema'], model_suffix='Entity')
    result = manager.parse_schema(str(tmp_path))
    assert result['entities']['A'][-1]['target_entity_model'] == 'BEntity'


def test_to_json_round_trip():
    manager = ParserManager()
    result = manager.parse_text('enum S { A }\nentity A { s S }\nentity B { }\nrelationship ManyToMany { A to B }')
    assert json.loads(manager.to_json(result)) == result
