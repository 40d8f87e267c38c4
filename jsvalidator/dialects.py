"""
Schema dialects.

A dialect is read-only configuration shared by the resolver, the JSON Pointer
walker and the keyword validator: the identifier keyword, whether identifiers
re-base ``$ref`` resolution, and which keywords hold subschemas.
"""

from typing import Any, Dict, FrozenSet, Optional, Type

from jsvalidator.errors import UnknownSpecification


def _search_table(value, kv_value, arr_value) -> Dict[str, FrozenSet[str]]:
    return {
        'value': frozenset(value),
        'kv_value': frozenset(kv_value),
        'arr_value': frozenset(arr_value),
    }


class Dialect:
    """Base dialect. Subclasses override the class attributes."""

    name = ''
    meta_schema = ''
    ID = 'id'
    using_id_with_ref = True
    # keys holding one subschema, a mapping of subschemas, or an array of subschemas
    SEARCH_ID = _search_table(
        value=['additionalItems', 'items', 'additionalProperties', 'not'],
        kv_value=['properties', 'patternProperties', 'dependencies', 'definitions'],
        arr_value=['items', 'allOf', 'anyOf', 'oneOf'],
    )
    boolean_schemas = False
    numeric_exclusive_limits = False
    keywords_since_draft6 = False
    conditionals = False
    nullable = False

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'

    def schema_id(self, schema: Any) -> Optional[str]:
        """The identifier a schema node declares, if it is a plain string."""
        if isinstance(schema, dict):
            identifier = schema.get(self.ID)
            if isinstance(identifier, str):
                return identifier
        return None


class Draft4(Dialect):
    name = 'Draft4'
    meta_schema = 'http://json-schema.org/draft-04/schema#'


class Draft6(Dialect):
    name = 'Draft6'
    meta_schema = 'http://json-schema.org/draft-06/schema#'
    ID = '$id'
    SEARCH_ID = _search_table(
        value=['additionalItems', 'items', 'additionalProperties', 'not', 'contains', 'propertyNames'],
        kv_value=['properties', 'patternProperties', 'dependencies', 'definitions'],
        arr_value=['items', 'allOf', 'anyOf', 'oneOf'],
    )
    boolean_schemas = True
    numeric_exclusive_limits = True
    keywords_since_draft6 = True


class Draft7(Draft6):
    name = 'Draft7'
    meta_schema = 'http://json-schema.org/draft-07/schema#'
    SEARCH_ID = _search_table(
        value=['additionalItems', 'items', 'additionalProperties', 'not', 'contains', 'propertyNames',
               'if', 'then', 'else'],
        kv_value=['properties', 'patternProperties', 'dependencies', 'definitions'],
        arr_value=['items', 'allOf', 'anyOf', 'oneOf'],
    )
    conditionals = True


class OAS30(Dialect):
    """OpenAPI 3.0 schema objects. Identifiers do not re-base references."""

    name = 'OAS30'
    meta_schema = 'https://spec.openapis.org/oas/3.0/schema/2019-04-02'
    using_id_with_ref = False
    SEARCH_ID = _search_table(
        value=['items', 'additionalProperties', 'not'],
        kv_value=['properties'],
        arr_value=['allOf', 'anyOf', 'oneOf'],
    )
    nullable = True


KNOWN_SPECIFICATIONS: Dict[str, Type[Dialect]] = {
    dialect.name: dialect for dialect in (Draft4, Draft6, Draft7, OAS30)
}

SPECIFICATIONS: Dict[str, str] = {
    dialect.meta_schema: dialect.name for dialect in KNOWN_SPECIFICATIONS.values()
}


def get_dialect(specification: str) -> Dialect:
    """
    Returns a dialect instance for a specification name (case-insensitive).

    Raises:
        UnknownSpecification: If no dialect has that name.
    """
    for name, dialect in KNOWN_SPECIFICATIONS.items():
        if name.lower() == (specification or '').lower():
            return dialect()
    raise UnknownSpecification(f'unknown specification {specification}')


def schema_specification(schema: Any) -> Optional[str]:
    """
    Detects the specification name of a schema document.

    The '$schema' meta-schema URI wins; an OpenAPI document is recognized by
    its 'openapi' version (e.g. '3.0.3' -> 'OAS30').
    """
    if not isinstance(schema, dict):
        return None
    meta_schema = schema.get('$schema')
    specification = SPECIFICATIONS.get(meta_schema) if isinstance(meta_schema, str) else None
    if specification is None and isinstance(meta_schema, str) and not meta_schema.endswith('#'):
        specification = SPECIFICATIONS.get(meta_schema + '#')

    if specification is None and schema.get('openapi'):
        versions = str(schema['openapi']).split('.')
        if len(versions) >= 2:
            specification = 'OAS' + versions[0] + versions[1]
    return specification
