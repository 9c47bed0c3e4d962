"""
Relationship Mapping - normalize relationship metadata on parsed entities.

Works in place on the entity table produced by the JDL parser. It does not
re-create relationships the parser already materialized; it standardizes
the relationship type, marks collection/single cardinality and links each
relationship field to the inverse field on its target entity.

After normalization every relationship field also carries:
    rel_kind             'O2O' | 'M2O' | 'O2M' | 'M2M'
    is_collection        True for O2M and M2M
    cardinality          {'self': 'one'|'many', 'target': 'one'|'many'}
    target_entity_model  '<Target>Model'
    inverse              {'entity': ..., 'field_name': ...}, only when found

Inverse links are name pairs, never object references, so the structure
stays JSON-serializable.
"""

import logging
from typing import Dict, List, Mapping, Optional

from .naming import DEFAULT_MODEL_SUFFIX, lc_first, model_class_name, pluralize

logger = logging.getLogger(__name__)


class RelationshipMappingError(ValueError):
    """Raised when the entity table does not have the expected shape."""
    pass


ONE_TO_ONE = 'OneToOne'
MANY_TO_ONE = 'ManyToOne'
ONE_TO_MANY = 'OneToMany'
MANY_TO_MANY = 'ManyToMany'

_REL_TYPE_ALIASES = {
    'onetoone': ONE_TO_ONE, 'one-to-one': ONE_TO_ONE, 'one_to_one': ONE_TO_ONE, 'o2o': ONE_TO_ONE,
    'manytoone': MANY_TO_ONE, 'many-to-one': MANY_TO_ONE, 'many_to_one': MANY_TO_ONE, 'm2o': MANY_TO_ONE,
    'onetomany': ONE_TO_MANY, 'one-to-many': ONE_TO_MANY, 'one_to_many': ONE_TO_MANY, 'o2m': ONE_TO_MANY,
    'manytomany': MANY_TO_MANY, 'many-to-many': MANY_TO_MANY, 'many_to_many': MANY_TO_MANY, 'm2m': MANY_TO_MANY,
}

_REL_KINDS = {
    ONE_TO_ONE: 'O2O',
    MANY_TO_ONE: 'M2O',
    ONE_TO_MANY: 'O2M',
    MANY_TO_MANY: 'M2M',
}

_INVERSE_TYPES = {
    ONE_TO_ONE: ONE_TO_ONE,
    MANY_TO_ONE: ONE_TO_MANY,
    ONE_TO_MANY: MANY_TO_ONE,
    MANY_TO_MANY: MANY_TO_MANY,
}

COLLECTION_KINDS = frozenset({'O2M', 'M2M'})


# ---------------------------------------------------------------------------
# Relationship type helpers
# ---------------------------------------------------------------------------

def canonical_rel_type(token) -> Optional[str]:
    """Return the canonical relationship type for token, or None if unknown.

    Accepts any casing plus hyphenated, underscored and abbreviated
    spellings: 'one-to-many', 'ONETOMANY', 'o2m' -> 'OneToMany'.
    """
    if token is None:
        return None
    return _REL_TYPE_ALIASES.get(str(token).strip().lower())


def normalize_rel_type(token) -> str:
    """Canonicalize a relationship type, defaulting to ManyToOne."""
    return canonical_rel_type(token) or MANY_TO_ONE


def to_kind(rel_type) -> str:
    """Short tag for a relationship type: 'OneToMany' -> 'O2M'."""
    return _REL_KINDS[normalize_rel_type(rel_type)]


def expected_inverse_type(rel_type) -> str:
    """Relationship type the other side of rel_type must have."""
    return _INVERSE_TYPES[normalize_rel_type(rel_type)]


def is_collection_type(rel_type) -> bool:
    return to_kind(rel_type) in COLLECTION_KINDS


def cardinality_of(rel_type) -> Dict[str, str]:
    kind = to_kind(rel_type)
    return {
        'self': 'many' if kind in COLLECTION_KINDS else 'one',
        'target': 'one' if kind in ('O2M', 'O2O') else 'many',
    }


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def _check_entities(entities) -> None:
    if not isinstance(entities, Mapping):
        raise RelationshipMappingError(
            f"entities must be a mapping of entity name to field list, got {type(entities).__name__}")
    for entity_name, fields in entities.items():
        if not isinstance(fields, list):
            raise RelationshipMappingError(
                f"Fields of entity '{entity_name}' must be a list, got {type(fields).__name__}")
        for field in fields:
            if not isinstance(field, dict) or not field.get('is_relationship'):
                continue
            if not field.get('name') or not field.get('target_entity'):
                raise RelationshipMappingError(
                    f"Relationship field on '{entity_name}' is missing 'name' or 'target_entity': {field!r}")


def _relationship_fields(fields: List) -> List[Dict]:
    return [f for f in fields if isinstance(f, dict) and f.get('is_relationship')]


def annotate_relationship_field(field: Dict, model_suffix: str = DEFAULT_MODEL_SUFFIX) -> Dict:
    """Set the derived metadata on one relationship field (in place)."""
    field['relationship_type'] = normalize_rel_type(field.get('relationship_type'))
    kind = to_kind(field['relationship_type'])
    field['rel_kind'] = kind
    field['is_collection'] = kind in COLLECTION_KINDS
    field['cardinality'] = cardinality_of(field['relationship_type'])
    field['target_entity_model'] = model_class_name(field['target_entity'], model_suffix)

    if not isinstance(field.get('required'), bool):
        field['required'] = False
    if not isinstance(field.get('nullable'), bool):
        field['nullable'] = not field['required']
    return field


def find_inverse_field(entities: Mapping[str, List[Dict]], current_entity: str,
                       field: Dict) -> Optional[Dict]:
    """Find the field on field's target entity that mirrors field.

    A candidate must be a relationship field of the expected inverse type
    that targets current_entity. With several candidates, prefer the one
    named like lc_first(current_entity), then its plural, then the first
    declared.
    """
    target_fields = entities.get(field.get('target_entity')) or []
    expected = expected_inverse_type(field.get('relationship_type'))

    candidates = [
        g for g in _relationship_fields(target_fields)
        if g is not field
        and normalize_rel_type(g.get('relationship_type')) == expected
        and g.get('target_entity') == current_entity
    ]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    singular = lc_first(current_entity)
    plural = pluralize(singular)
    for wanted in (singular, plural):
        for candidate in candidates:
            if candidate.get('name') == wanted:
                return candidate
    return candidates[0]


def suggest_inverse_field_name(current_entity: str, field: Dict) -> str:
    """Name for a synthesized inverse field on the target entity.

    ManyToOne and ManyToMany sources get the plural of the source entity,
    OneToMany and OneToOne sources get the singular.
    """
    rel_type = normalize_rel_type(field.get('relationship_type'))
    name = lc_first(current_entity)
    if rel_type in (MANY_TO_ONE, MANY_TO_MANY):
        return pluralize(name)
    return name


def add_inverse_field(target_fields: List[Dict], name: str, relationship_type: str,
                      target_entity: str, model_suffix: str = DEFAULT_MODEL_SUFFIX) -> Optional[Dict]:
    """Append a relationship field unless one with this name already exists.

    Returns the new field, or None when the name is taken.
    """
    if any(isinstance(f, dict) and f.get('name') == name for f in target_fields):
        return None
    rel_type = normalize_rel_type(relationship_type)
    new_field = {
        'name': name,
        'type': 'relationship',
        'is_relationship': True,
        'relationship_type': rel_type,
        'target_entity': target_entity,
        'declared_type': f"List<{target_entity}>" if is_collection_type(rel_type) else target_entity,
        'required': False,
        'nullable': True,
    }
    target_fields.append(annotate_relationship_field(new_field, model_suffix))
    return new_field


def normalize_relationships(entities: Dict[str, List[Dict]], add_missing_inverse: bool = False,
                            model_suffix: str = DEFAULT_MODEL_SUFFIX) -> Dict[str, List[Dict]]:
    """Normalize relationship fields of every entity in place.

    Args:
        entities: Entity table {EntityName: [field, ...]} from the parser.
        add_missing_inverse: Synthesize an inverse field on the target
            entity when none is found. Off by default, in which case
            field counts never change.
        model_suffix: Suffix of the emitted model class name.

    Returns:
        The same entities mapping.

    Raises:
        RelationshipMappingError: entities does not have the parser's shape.
    """
    _check_entities(entities)

    # Pass 1: annotate every relationship field so inverse matching sees
    # canonical types on both sides.
    for fields in entities.values():
        for field in _relationship_fields(fields):
            annotate_relationship_field(field, model_suffix)

    # Pass 2: link inverses. Iterate over snapshots since synthesized
    # inverses are appended to the lists being walked.
    for entity_name in list(entities):
        for field in list(_relationship_fields(entities[entity_name])):
            target_name = field['target_entity']
            if target_name not in entities:
                logger.debug("Skipping inverse lookup for %s.%s: unknown entity %s",
                             entity_name, field['name'], target_name)
                continue

            inverse = find_inverse_field(entities, entity_name, field)
            if inverse is None and add_missing_inverse:
                add_inverse_field(
                    entities[target_name],
                    name=suggest_inverse_field_name(entity_name, field),
                    relationship_type=expected_inverse_type(field['relationship_type']),
                    target_entity=entity_name,
                    model_suffix=model_suffix,
                )
                inverse = find_inverse_field(entities, entity_name, field)

            if inverse is None:
                continue

            field['inverse'] = {'entity': target_name, 'field_name': inverse['name']}
            if not inverse.get('inverse'):
                inverse['inverse'] = {'entity': entity_name, 'field_name': field['name']}

    return entities
