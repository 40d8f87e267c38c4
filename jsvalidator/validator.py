"""Validates JSON instances against JSON Schema documents.

This module provides the entry point that ties the pieces together: it loads
a schema from a resource, selects the dialect from the declared meta-schema,
optionally checks the schema against the bundled meta-schema, and owns the
URIResolver used for every $ref met during validation.
"""

import glob
import json
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

from jsvalidator import typeclassifier
from jsvalidator.contentdecode import decode_content
from jsvalidator.dialects import SPECIFICATIONS, get_dialect, schema_specification
from jsvalidator.errors import InvalidSchema, UnknownSpecification
from jsvalidator.keywords import KeywordValidator, ValidationError
from jsvalidator.resourcefetch import DEFAULT_TIMEOUT, FetchResult, get_resource, read_file
from jsvalidator.uriresolver import URIResolver
from jsvalidator.uriutil import canonical_uri, path_to_uri, resource_uri

logger = logging.getLogger(__name__)

SCHEMAS_DIR = os.path.join(os.path.dirname(__file__), 'schemas')


class SchemaValidator:
    """Validates instances against one root schema."""

    def __init__(self,
                 schema: Any = None,
                 resource: Optional[str] = None,
                 base_uri: Optional[str] = None,
                 specification: Optional[str] = None,
                 validate_schema: bool = True,
                 strict: bool = True,
                 scheme_handlers: Optional[Dict[str, Callable[[str], FetchResult]]] = None,
                 user_agent_get: Optional[Callable[[str], FetchResult]] = None,
                 allow_network: bool = True,
                 timeout: float = DEFAULT_TIMEOUT):
        """Initialize the validator from a schema or a schema resource.

        Args:
            schema: The decoded root schema
            resource: URI or local path of the root schema, used when schema is not given
            base_uri: Base URI of the root schema, defaults to the resource or the root id
            specification: Dialect name (Draft4, Draft6, Draft7, OAS30), detected when omitted
            validate_schema: Check the schema against its bundled meta-schema
            strict: Whether type checks trust native types only
            scheme_handlers: Per-scheme fetch callables
            user_agent_get: Replacement for the built-in HTTP(S) transport
            allow_network: Allow the built-in HTTP(S) transport
            timeout: Timeout for the built-in transport

        Raises:
            ValueError: If neither schema nor resource is given
            UnknownSpecification: If no dialect can be selected
            InvalidSchema: If the schema does not conform to its meta-schema
        """
        fetch_options = {
            'scheme_handlers': scheme_handlers,
            'user_agent_get': user_agent_get,
            'allow_network': allow_network,
            'timeout': timeout,
        }
        if resource:
            resource = resource_uri(resource)
        if schema is None and resource:
            schema = resource_schema(resource, **fetch_options)
        if schema is None:
            raise ValueError('resource or schema must be specified')

        specification = specification or schema_specification(schema)
        if not specification:
            raise UnknownSpecification('unknown specification')
        self.dialect = get_dialect(specification)

        if validate_schema:
            result, errors = validate_resource_schema(schema, self.dialect.name)
            if not result:
                raise InvalidSchema("invalid schema:\n" + "\n".join(str(e) for e in errors), errors)

        if base_uri is None:
            base_uri = resource or self.dialect.schema_id(schema) or ''

        self.schema = schema
        self.strict = strict
        self.resolver = URIResolver(self.dialect, schema, base_uri, **fetch_options)
        self.keywords = KeywordValidator(self.dialect, self.resolver, strict)

    @property
    def base_uri(self) -> str:
        return self.resolver.base_uri

    def validate(self, instance: Any, ref: Optional[str] = None) -> Tuple[bool, List[ValidationError]]:
        """Validates an instance against the root schema or a subschema of it.

        Args:
            instance: The decoded JSON value
            ref: Optional reference (e.g. '#/components/schemas/Pet') selecting the subschema

        Returns:
            Tuple of (is_valid, errors)
        """
        if ref is None:
            errors = self.keywords.validate(instance, self.schema, self.base_uri)
        else:
            scope, subschema = self.resolve(ref)
            errors = self.keywords.validate(instance, subschema, scope, resolved=True)
        return not errors, errors

    def resolve(self, ref: str, scope: Optional[str] = None) -> Tuple[str, Any]:
        """Resolves a reference relative to a scope (the base URI by default)."""
        return self.resolver.resolve_ref(ref, self.base_uri if scope is None else scope)

    def is_type(self, value: Any, type_name: str) -> bool:
        return typeclassifier.is_type(value, type_name, self.strict)

    def detect_type(self, value: Any) -> str:
        return typeclassifier.detect_type(value, self.strict)


def resource_schema(resource: str,
                    scheme_handlers: Optional[Dict[str, Callable[[str], FetchResult]]] = None,
                    user_agent_get: Optional[Callable[[str], FetchResult]] = None,
                    allow_network: bool = True,
                    timeout: float = DEFAULT_TIMEOUT) -> Any:
    """Fetches and decodes the document at a resource URI or local path."""
    uri = resource_uri(resource)
    content, content_type = get_resource(uri, scheme_handlers=scheme_handlers, user_agent_get=user_agent_get,
                                         allow_network=allow_network, timeout=timeout)
    return decode_content(content, content_type, uri)


def read_specification(specification: str) -> Optional[Any]:
    """Reads the bundled meta-schema of a specification, None if none is bundled."""
    schema_filepath = os.path.join(SCHEMAS_DIR, specification.lower() + '.json')
    if not os.path.exists(schema_filepath):
        return None
    content, mime_type = read_file(schema_filepath)
    return decode_content(content, mime_type, schema_filepath)


def validate_resource_schema(schema_to_validate: Any, specification: str) -> Tuple[bool, List[ValidationError]]:
    """Validates a schema against the bundled meta-schema of its specification.

    Specifications without a bundled meta-schema pass unchecked.
    """
    meta_schema = read_specification(specification)
    if meta_schema is None:
        logger.debug('No bundled meta-schema for %s, skipping the schema check', specification)
        return True, []

    meta_specification = SPECIFICATIONS.get(meta_schema.get('$schema'), specification)
    validator = SchemaValidator(schema=meta_schema, specification=meta_specification, validate_schema=False)
    return validator.validate(schema_to_validate)


def validate_resource(resource: str, **options) -> Tuple[bool, List[ValidationError]]:
    """Validates the schema at a resource against its meta-schema."""
    schema_to_validate = resource_schema(resource, **options)
    specification = schema_specification(schema_to_validate)
    if not specification:
        raise UnknownSpecification(f'unknown specification of resource {resource}')
    get_dialect(specification)
    return validate_resource_schema(schema_to_validate, specification)


def validate_paths(globs: List[str], **options) -> Dict[str, Tuple[bool, List[ValidationError]]]:
    """Validates every schema file matching the glob patterns against its meta-schema."""
    results = {}
    for pattern in globs:
        for path in sorted(glob.glob(pattern)):
            results[path] = validate_resource(path_to_uri(path), **options)
    return results


def validate_instance_file(instance_file: str,
                           schema_resource: str,
                           specification: Optional[str] = None,
                           ref: Optional[str] = None,
                           strict: bool = True,
                           **options) -> Tuple[bool, List[ValidationError]]:
    """Validates the JSON or YAML document in a file against a schema resource."""
    validator = SchemaValidator(resource=schema_resource, specification=specification, strict=strict, **options)
    instance = resource_schema(instance_file, **options)
    return validator.validate(instance, ref=ref)


# Command entry points for the jsvalidator CLI

def validate(input: List[str], schema: str, specification: Optional[str] = None, ref: Optional[str] = None,
             loose: bool = False, offline: bool = False, quiet: bool = False) -> None:
    """Validates instance files against a schema and exits with 1 if any is invalid."""
    validator = SchemaValidator(resource=schema, specification=specification, strict=not loose,
                                allow_network=not offline)
    invalid_count = 0
    for instance_file in input:
        instance = resource_schema(instance_file, allow_network=not offline)
        result, errors = validator.validate(instance, ref=ref)
        if not result:
            invalid_count += 1
        if not quiet:
            if result:
                print(f"✓ Valid: {instance_file}")
            else:
                print(f"✗ Invalid: {instance_file}: " + "; ".join(str(e) for e in errors))

    if not quiet:
        total = len(input)
        print(f"\nValidation summary: {total - invalid_count}/{total} instances valid")

    if invalid_count > 0:
        sys.exit(1)


def check_schemas(input: List[str], quiet: bool = False) -> None:
    """Validates schema files against their meta-schemas and exits with 1 if any is invalid."""
    results = validate_paths(input)
    invalid_count = 0
    for path, (result, errors) in results.items():
        if not result:
            invalid_count += 1
        if not quiet:
            print(f"✓ Valid: {path}" if result else f"✗ Invalid: {path}: " + "; ".join(str(e) for e in errors))
    if invalid_count > 0:
        sys.exit(1)


def resolve(input: str, ref: str, specification: Optional[str] = None, offline: bool = False) -> None:
    """Prints the scope and the subschema a reference resolves to."""
    validator = SchemaValidator(resource=input, specification=specification, validate_schema=False,
                                allow_network=not offline)
    scope, subschema = validator.resolve(ref)
    print(canonical_uri(scope))
    print(json.dumps(subschema, indent=2))


def detect_type(input: str, loose: bool = False) -> None:
    """Prints the JSON Schema type of the document in a file."""
    print(typeclassifier.detect_type(resource_schema(input, allow_network=False), strict=not loose))
