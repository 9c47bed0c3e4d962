"""
JDL Parser - Extract entities, enums and relationships from JDL text.

Uses regex-based parsing with brace counting, in three fixed phases:
enum blocks, entity blocks, then relationship blocks (relationships can
only be resolved once every entity exists). Parsing is best effort:
malformed fragments are left out of the result and relationships that
reference unknown entities are skipped with a warning. Nothing here
raises on bad input.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from .base import BaseSchemaParser, extract_block_body, line_number_at, strip_comments
from .naming import default_field_name
from .relationship_mapping import canonical_rel_type, expected_inverse_type, is_collection_type

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

# enum Status { ACTIVE, INACTIVE(Not active) }; the body is taken by brace counting
_RE_ENUM = re.compile(r'\benum\s+(?P<name>[A-Za-z_]\w*)\s*(?=\{)')

# Parenthetical descriptions on enum values
_RE_PAREN = re.compile(r'\([^)]*\)')

# Enum value separators
_RE_ENUM_SEP = re.compile(r'[,;\n]')

# @EnableAudit @dto(mapstruct) entity Order(jhi_order) {
# Header only. Validators such as pattern(/[0-9]{3}/) may nest braces in the body.
_RE_ENTITY = re.compile(
    r'(?P<annotations>(?:@[A-Za-z_]\w*(?:\s*\([^)]*\))?\s*)*)'
    r'\bentity\s+(?P<name>[A-Za-z_]\w*)\s*'
    r'(?:\(\s*\w*\s*\)\s*)?'                 # optional table name
    r'(?=\{)'
)

_RE_AUDIT = re.compile(r'@EnableAudit\b', re.IGNORECASE)

# Field line: fieldName Type [modifiers...]
_RE_FIELD = re.compile(
    r'^(?P<name>[A-Za-z_]\w*)\s+'
    r'(?P<type>[A-Za-z_][\w<>]*)'
    r'(?:\s+(?P<modifiers>.*))?$'
)

_RE_REQUIRED = re.compile(r'\brequired\b', re.IGNORECASE)

# Commas outside parentheses split fields declared on one line
_RE_FIELD_SEP = re.compile(r',(?![^()]*\))')

# relationship OneToMany {
_RE_RELATIONSHIP = re.compile(r'\brelationship\s+(?P<kind>[A-Za-z_-]+)\s*(?=\{)')

# Declarations inside a relationship block are separated by newlines or by
# commas outside of {...} / (...) field declarations.
_RE_DECL_SEP = re.compile(r'\n|,(?![^{}()]*[)}])')

# From[(field)|{field(display) required}] to To[...] [required|with x|id]*
_RE_REL_DECL = re.compile(
    r'^(?P<from>[A-Za-z_]\w*)\s*'
    r'(?:\(\s*(?P<from_paren>\w*)\s*\)|\{(?P<from_brace>[^{}]*)\})?'
    r'\s+to\s+'
    r'(?P<to>[A-Za-z_]\w*)\s*'
    r'(?:\(\s*(?P<to_paren>\w*)\s*\)|\{(?P<to_brace>[^{}]*)\})?'
    r'(?P<modifiers>(?:\s+(?:required|id|with\s+\w+))*)'
    r'\s*;?$'
)

# Brace field declaration: field, field(displayField), field(displayField) required
_RE_BRACE_FIELD = re.compile(r'^(?P<name>[A-Za-z_]\w*)(?:\s*\([^)]*\))?(?P<rest>.*)$')

# Audit fields in emission order
AUDIT_FIELDS = (
    ('lastModifiedDate', 'Instant'),
    ('lastModifiedBy', 'String'),
    ('createdDate', 'Instant'),
    ('createdBy', 'String'),
)

ID_FIELD_TYPE = 'Long'


def _primitive_field(name: str, jdl_type: str, required: bool = False) -> Dict:
    return {
        'name': name,
        'type': jdl_type,
        'is_relationship': False,
        'required': required,
        'nullable': not required,
    }


def _has_field(fields: List[Dict], name: str) -> bool:
    return any(f['name'] == name for f in fields)


class JDLParser(BaseSchemaParser):
    """Parse JDL schema text into the entity/enum graph."""

    FILE_EXTENSIONS = ['.jdl', '.jh']

    def parse_text(self, text: str) -> Dict:
        """Parse JDL text.

        Args:
            text: Raw JDL source. None or empty text yields an empty result.

        Returns:
            {'entities': {Name: [field, ...]},
             'enums': {Name: [value, ...]},
             'warnings': [message, ...]}
        """
        self.warnings = []
        stripped = strip_comments(text or '')

        enums = self._parse_enums(stripped)
        entities = self._parse_entities(stripped)
        self._parse_relationships(stripped, entities)

        logger.debug("Parsed %d entities, %d enums", len(entities), len(enums))
        return self.make_schema_result(entities, enums)

    # ------------------------------------------------------------------
    # Phase 1: enums
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_enums(text: str) -> Dict[str, List[str]]:
        enums: Dict[str, List[str]] = {}
        for match in _RE_ENUM.finditer(text):
            body, body_start, _ = extract_block_body(text, match.end())
            if body_start == -1:
                logger.debug("Unterminated enum block %s at line %d",
                             match.group('name'), line_number_at(text, match.start()))
                continue
            body = _RE_PAREN.sub('', body)
            values = [v.strip() for v in _RE_ENUM_SEP.split(body)]
            enums[match.group('name')] = [v for v in values if v]
        return enums

    # ------------------------------------------------------------------
    # Phase 2: entities
    # ------------------------------------------------------------------

    def _parse_entities(self, text: str) -> Dict[str, List[Dict]]:
        entities: Dict[str, List[Dict]] = {}
        for match in _RE_ENTITY.finditer(text):
            name = match.group('name')
            body, body_start, _ = extract_block_body(text, match.end())
            if body_start == -1:
                logger.debug("Unterminated entity block %s at line %d",
                             name, line_number_at(text, match.start('name')))
                continue
            fields = self._parse_fields(body)

            if not _has_field(fields, 'id'):
                fields.insert(0, _primitive_field('id', ID_FIELD_TYPE))

            if _RE_AUDIT.search(match.group('annotations') or ''):
                for audit_name, audit_type in AUDIT_FIELDS:
                    if _has_field(fields, audit_name):
                        continue
                    audit_field = _primitive_field(audit_name, audit_type)
                    audit_field['is_audit'] = True
                    audit_field['read_only'] = True
                    fields.append(audit_field)

            if name in entities:
                self.warn("Entity %s declared more than once (line %d); merging fields",
                          name, line_number_at(text, match.start('name')))
                existing = entities[name]
                existing.extend(f for f in fields if not _has_field(existing, f['name']))
                continue
            entities[name] = fields
        return entities

    @staticmethod
    def _parse_fields(body: str) -> List[Dict]:
        fields: List[Dict] = []
        for raw_line in body.splitlines():
            for chunk in _RE_FIELD_SEP.split(raw_line):
                line = chunk.strip()
                if not line:
                    continue
                match = _RE_FIELD.match(line)
                if not match:
                    logger.debug("Ignoring unparsable field line: %r", line)
                    continue
                if _has_field(fields, match.group('name')):
                    continue
                required = bool(_RE_REQUIRED.search(match.group('modifiers') or ''))
                fields.append(_primitive_field(match.group('name'), match.group('type'), required))
        return fields

    # ------------------------------------------------------------------
    # Phase 3: relationships
    # ------------------------------------------------------------------

    def _parse_relationships(self, text: str, entities: Dict[str, List[Dict]]) -> None:
        for match in _RE_RELATIONSHIP.finditer(text):
            body, body_start, _ = extract_block_body(text, match.end())
            if body_start == -1:
                logger.debug("Unterminated relationship block at line %d",
                             line_number_at(text, match.start()))
                continue

            kind_token = match.group('kind')
            rel_type = canonical_rel_type(kind_token)
            if rel_type is None:
                self.warn("Unknown relationship type '%s' (line %d). Skipping block",
                          kind_token, line_number_at(text, match.start()))
                continue

            for chunk in _RE_DECL_SEP.split(body):
                declaration = ' '.join(chunk.split())
                if not declaration:
                    continue
                decl = self._parse_declaration(declaration)
                if decl is None:
                    logger.debug("Ignoring unparsable relationship declaration: %r", declaration)
                    continue
                self._apply_relationship(entities, rel_type, declaration, *decl)

    @staticmethod
    def _parse_declaration(declaration: str) -> Optional[Tuple[str, Optional[str], str, Optional[str], bool]]:
        """Split 'A{b} to B{c} required' into (from, from_field, to, to_field, required)."""
        match = _RE_REL_DECL.match(declaration)
        if not match:
            return None

        required = bool(_RE_REQUIRED.search(match.group('modifiers') or ''))
        from_field = match.group('from_paren') or None
        to_field = match.group('to_paren') or None

        if match.group('from_brace') is not None:
            brace_field = _RE_BRACE_FIELD.match(match.group('from_brace').strip())
            if brace_field:
                from_field = brace_field.group('name')
                required = required or bool(_RE_REQUIRED.search(brace_field.group('rest')))
        if match.group('to_brace') is not None:
            brace_field = _RE_BRACE_FIELD.match(match.group('to_brace').strip())
            if brace_field:
                to_field = brace_field.group('name')

        return match.group('from'), from_field, match.group('to'), to_field, required

    def _apply_relationship(self, entities: Dict[str, List[Dict]], rel_type: str, declaration: str,
                            from_entity: str, from_field: Optional[str],
                            to_entity: str, to_field: Optional[str], required: bool) -> None:
        missing = [name for name in (from_entity, to_entity) if name not in entities]
        if missing:
            self.warn("Relationship involves undefined entity %s. Skipping: relationship %s { %s }",
                      ', '.join(missing), rel_type, declaration)
            return

        self._add_relationship_field(
            entities[from_entity],
            name=from_field or default_field_name(to_entity, is_collection_type(rel_type)),
            rel_type=rel_type,
            target=to_entity,
            required=required,
        )

        inverse_type = expected_inverse_type(rel_type)
        self._add_relationship_field(
            entities[to_entity],
            name=to_field or default_field_name(from_entity, is_collection_type(inverse_type)),
            rel_type=inverse_type,
            target=from_entity,
            required=False,
        )

    @staticmethod
    def _add_relationship_field(fields: List[Dict], name: str, rel_type: str,
                                target: str, required: bool) -> None:
        if _has_field(fields, name):
            return
        fields.append({
            'name': name,
            'type': 'relationship',
            'is_relationship': True,
            'relationship_type': rel_type,
            'target_entity': target,
            'declared_type': f"List<{target}>" if is_collection_type(rel_type) else target,
            'required': required,
            'nullable': not required,
        })


def parse_jdl(jdl_text: str) -> Dict:
    """Parse JDL text into {'entities', 'enums', 'warnings'}.

    Each call uses its own parser, so no state is shared between calls.
    """
    return JDLParser().parse_text(jdl_text)
