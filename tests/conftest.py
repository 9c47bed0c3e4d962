import os

import pytest

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'fixtures')


@pytest.fixture
def fixtures_dir():
    """Path to the fixture projects"""
    return FIXTURES_DIR


@pytest.fixture
def field_of():
    """Lookup helper: field_of(result_or_entities, 'Car', 'driver')"""
    def _field_of(data, entity, name):
        entities = data['entities'] if 'entities' in data else data
        return next((f for f in entities[entity] if f['name'] == name), None)
    return _field_of
