"""Validates JSON instances keyword by keyword.

This module walks a schema and an instance side by side. References are
handed to the URIResolver, which returns the subschema together with the
scope that relative references inside it resolve against. Type checks are
delegated to the type classifier so that strict and loose typing apply to
every keyword consistently.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from jsonpointer import escape

from jsvalidator import typeclassifier
from jsvalidator.uriutil import resolve_uri


class ValidationError:
    """A single violation found while validating an instance."""

    def __init__(self, message: str, instance_path: str = "#", schema_path: str = "#"):
        self.message = message
        self.instance_path = instance_path
        self.schema_path = schema_path

    def __str__(self) -> str:
        return f"{self.message} at {self.instance_path}"

    def __repr__(self) -> str:
        return (f"ValidationError(message={self.message!r}, instance_path={self.instance_path!r}, "
                f"schema_path={self.schema_path!r})")

    def __eq__(self, other) -> bool:
        return isinstance(other, ValidationError) and \
            (self.message, self.instance_path, self.schema_path) == \
            (other.message, other.instance_path, other.schema_path)


def json_equal(a: Any, b: Any) -> bool:
    """JSON equality: booleans never equal numbers, 1 equals 1.0."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(json_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (dict, list)) or isinstance(b, (dict, list)):
        return False
    return a == b


def _join(path: str, token: Any) -> str:
    return f"{path}/{escape(str(token))}"


class KeywordValidator:
    """Validates instances against schemas of one dialect."""

    def __init__(self, dialect, resolver, strict: bool = True):
        """
        Args:
            dialect: The dialect the schemas are written in.
            resolver: The URIResolver for $ref resolution.
            strict: Whether type checks trust native types only.
        """
        self.dialect = dialect
        self.resolver = resolver
        self.strict = strict
        self.keywords = {
            'type': self._validate_type,
            'enum': self._validate_enum,
            'allOf': self._validate_all_of,
            'anyOf': self._validate_any_of,
            'oneOf': self._validate_one_of,
            'not': self._validate_not,
            'properties': self._validate_properties,
            'patternProperties': self._validate_pattern_properties,
            'additionalProperties': self._validate_additional_properties,
            'required': self._validate_required,
            'minProperties': self._validate_min_properties,
            'maxProperties': self._validate_max_properties,
            'dependencies': self._validate_dependencies,
            'items': self._validate_items,
            'minItems': self._validate_min_items,
            'maxItems': self._validate_max_items,
            'uniqueItems': self._validate_unique_items,
            'minimum': self._validate_minimum,
            'maximum': self._validate_maximum,
            'multipleOf': self._validate_multiple_of,
            'minLength': self._validate_min_length,
            'maxLength': self._validate_max_length,
            'pattern': self._validate_pattern,
        }
        if dialect.keywords_since_draft6:
            self.keywords.update({
                'const': self._validate_const,
                'contains': self._validate_contains,
                'propertyNames': self._validate_property_names,
                'exclusiveMinimum': self._validate_exclusive_minimum,
                'exclusiveMaximum': self._validate_exclusive_maximum,
            })
        if dialect.conditionals:
            self.keywords['if'] = self._validate_if

    def validate(self, instance: Any, schema: Any, scope: str = '', resolved: bool = False) -> List[ValidationError]:
        """Validates an instance against a schema found at the given scope.

        Args:
            instance: The decoded JSON value
            schema: The schema node
            scope: The resolution scope of the schema node
            resolved: True if the scope came from the resolver and already
                includes the schema's own identifier

        Returns:
            List of violations (empty if valid)
        """
        return self._validate(instance, schema, scope, "#", "#", resolved)

    def is_valid(self, instance: Any, schema: Any, scope: str = '') -> bool:
        return not self.validate(instance, schema, scope)

    def _validate(self, instance: Any, schema: Any, scope: str, path: str, schema_path: str,
                  resolved: bool = False) -> List[ValidationError]:
        if isinstance(schema, bool) and self.dialect.boolean_schemas:
            if schema:
                return []
            return [ValidationError("False schema does not allow any value", path, schema_path)]
        if not isinstance(schema, dict):
            return []

        # the resolver hands back scopes that already include the target's identifier
        if self.dialect.using_id_with_ref and not resolved:
            identifier = self.dialect.schema_id(schema)
            if identifier is not None:
                scope = resolve_uri(identifier, scope)

        ref = schema.get('$ref')
        if isinstance(ref, str):
            ref_scope, ref_schema = self.resolver.resolve_ref(ref, scope)
            return self._validate(instance, ref_schema, ref_scope, path, _join(schema_path, '$ref'), True)

        if self.dialect.nullable and instance is None and schema.get('nullable') is True:
            return []

        errors: List[ValidationError] = []
        for keyword, check in self.keywords.items():
            if keyword in schema:
                errors.extend(check(instance, schema[keyword], schema, scope, path, _join(schema_path, keyword)))
        return errors

    def _is_number(self, instance: Any) -> bool:
        return typeclassifier.is_number(instance, self.strict)

    def _validate_type(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        types = value if isinstance(value, list) else [value]
        for type_name in types:
            if self.dialect.nullable and type_name == 'null':
                continue
            if typeclassifier.is_type(instance, type_name, self.strict):
                return []
        actual = typeclassifier.detect_type(instance, self.strict)
        expected = types[0] if len(types) == 1 else types
        return [ValidationError(f"Expected type {expected}, got {actual}", path, schema_path)]

    def _validate_enum(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if any(json_equal(instance, option) for option in value):
            return []
        return [ValidationError(f"Value {instance!r} is not one of {value}", path, schema_path)]

    def _validate_const(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if json_equal(instance, value):
            return []
        return [ValidationError(f"Value {instance!r} does not equal const {value!r}", path, schema_path)]

    def _validate_all_of(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        errors = []
        for i, subschema in enumerate(value):
            errors.extend(self._validate(instance, subschema, scope, path, _join(schema_path, i)))
        return errors

    def _validate_any_of(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        for i, subschema in enumerate(value):
            if not self._validate(instance, subschema, scope, path, _join(schema_path, i)):
                return []
        return [ValidationError("Value does not match any schema of anyOf", path, schema_path)]

    def _validate_one_of(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        matches = [i for i, subschema in enumerate(value)
                   if not self._validate(instance, subschema, scope, path, _join(schema_path, i))]
        if len(matches) == 1:
            return []
        if not matches:
            return [ValidationError("Value does not match any schema of oneOf", path, schema_path)]
        return [ValidationError(f"Value matches more than one schema of oneOf: {matches}", path, schema_path)]

    def _validate_not(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if self._validate(instance, value, scope, path, schema_path):
            return []
        return [ValidationError("Value must not match the schema of not", path, schema_path)]

    def _validate_if(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not self._validate(instance, value, scope, path, schema_path):
            if 'then' in schema:
                return self._validate(instance, schema['then'], scope, path, schema_path[:-len('if')] + 'then')
        elif 'else' in schema:
            return self._validate(instance, schema['else'], scope, path, schema_path[:-len('if')] + 'else')
        return []

    def _validate_properties(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, dict) or not isinstance(value, dict):
            return []
        errors = []
        for name, subschema in value.items():
            if name in instance:
                errors.extend(self._validate(instance[name], subschema, scope,
                                             _join(path, name), _join(schema_path, name)))
        return errors

    def _validate_pattern_properties(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, dict) or not isinstance(value, dict):
            return []
        errors = []
        for pattern, subschema in value.items():
            regex = re.compile(pattern)
            for name, item in instance.items():
                if regex.search(str(name)):
                    errors.extend(self._validate(item, subschema, scope,
                                                 _join(path, name), _join(schema_path, pattern)))
        return errors

    def _validate_additional_properties(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, dict) or value is True:
            return []
        properties = schema.get('properties', {})
        patterns = [re.compile(p) for p in schema.get('patternProperties', {})]
        extras = [name for name in instance
                  if name not in properties and not any(p.search(str(name)) for p in patterns)]
        if value is False:
            return [ValidationError(f"Additional property '{name}' is not allowed", _join(path, name), schema_path)
                    for name in extras]
        errors = []
        for name in extras:
            errors.extend(self._validate(instance[name], value, scope, _join(path, name), schema_path))
        return errors

    def _validate_required(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, dict):
            return []
        return [ValidationError(f"Missing required property '{name}'", path, schema_path)
                for name in value if name not in instance]

    def _validate_min_properties(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, dict) and len(instance) < value:
            return [ValidationError(f"Object has fewer than {value} properties", path, schema_path)]
        return []

    def _validate_max_properties(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, dict) and len(instance) > value:
            return [ValidationError(f"Object has more than {value} properties", path, schema_path)]
        return []

    def _validate_dependencies(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, dict):
            return []
        errors = []
        for name, dependency in value.items():
            if name not in instance:
                continue
            if isinstance(dependency, list):
                errors.extend(ValidationError(f"Property '{name}' requires property '{required}'", path,
                                              _join(schema_path, name))
                              for required in dependency if required not in instance)
            else:
                errors.extend(self._validate(instance, dependency, scope, path, _join(schema_path, name)))
        return errors

    def _validate_property_names(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, dict):
            return []
        errors = []
        for name in instance:
            errors.extend(self._validate(name, value, scope, _join(path, name), schema_path))
        return errors

    def _validate_items(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, list):
            return []
        errors = []
        if isinstance(value, list):
            for i, (item, subschema) in enumerate(zip(instance, value)):
                errors.extend(self._validate(item, subschema, scope, _join(path, i), _join(schema_path, i)))
            additional = schema.get('additionalItems', True)
            if len(instance) > len(value) and additional is not True:
                additional_path = schema_path[:-len('items')] + 'additionalItems'
                if additional is False:
                    errors.append(ValidationError(
                        f"Array has {len(instance)} items, only {len(value)} allowed", path, additional_path))
                else:
                    for i in range(len(value), len(instance)):
                        errors.extend(self._validate(instance[i], additional, scope, _join(path, i), additional_path))
        else:
            for i, item in enumerate(instance):
                errors.extend(self._validate(item, value, scope, _join(path, i), schema_path))
        return errors

    def _validate_contains(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not isinstance(instance, list):
            return []
        if any(not self._validate(item, value, scope, _join(path, i), schema_path) for i, item in enumerate(instance)):
            return []
        return [ValidationError("Array does not contain an item matching the contains schema", path, schema_path)]

    def _validate_min_items(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, list) and len(instance) < value:
            return [ValidationError(f"Array has fewer than {value} items", path, schema_path)]
        return []

    def _validate_max_items(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, list) and len(instance) > value:
            return [ValidationError(f"Array has more than {value} items", path, schema_path)]
        return []

    def _validate_unique_items(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not value or not isinstance(instance, list):
            return []
        for i, item in enumerate(instance):
            for j in range(i + 1, len(instance)):
                if json_equal(item, instance[j]):
                    return [ValidationError(f"Array items {i} and {j} are equal", path, schema_path)]
        return []

    def _validate_minimum(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not self._is_number(instance):
            return []
        number = typeclassifier.to_number(instance)
        exclusive = schema.get('exclusiveMinimum') is True and not self.dialect.numeric_exclusive_limits
        if number < value or (exclusive and number == value):
            qualifier = "greater than" if exclusive else "greater than or equal to"
            return [ValidationError(f"Value {instance} must be {qualifier} {value}", path, schema_path)]
        return []

    def _validate_maximum(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not self._is_number(instance):
            return []
        number = typeclassifier.to_number(instance)
        exclusive = schema.get('exclusiveMaximum') is True and not self.dialect.numeric_exclusive_limits
        if number > value or (exclusive and number == value):
            qualifier = "less than" if exclusive else "less than or equal to"
            return [ValidationError(f"Value {instance} must be {qualifier} {value}", path, schema_path)]
        return []

    def _validate_exclusive_minimum(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not self._is_number(instance) or isinstance(value, bool):
            return []
        if typeclassifier.to_number(instance) <= value:
            return [ValidationError(f"Value {instance} must be greater than {value}", path, schema_path)]
        return []

    def _validate_exclusive_maximum(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not self._is_number(instance) or isinstance(value, bool):
            return []
        if typeclassifier.to_number(instance) >= value:
            return [ValidationError(f"Value {instance} must be less than {value}", path, schema_path)]
        return []

    def _validate_multiple_of(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if not self._is_number(instance):
            return []
        number = typeclassifier.to_number(instance)
        if isinstance(number, float) and not math.isfinite(number):
            return [ValidationError(f"Value {instance} is not a multiple of {value}", path, schema_path)]
        if isinstance(number, int) and isinstance(value, int) and not isinstance(value, bool):
            remainder = number % value
        else:
            try:
                remainder = Decimal(str(number)) % Decimal(str(value))
            except InvalidOperation:
                remainder = Decimal(1)
        if remainder != 0:
            return [ValidationError(f"Value {instance} is not a multiple of {value}", path, schema_path)]
        return []

    def _validate_min_length(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, str) and len(instance) < value:
            return [ValidationError(f"String is shorter than {value} characters", path, schema_path)]
        return []

    def _validate_max_length(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, str) and len(instance) > value:
            return [ValidationError(f"String is longer than {value} characters", path, schema_path)]
        return []

    def _validate_pattern(self, instance, value, schema, scope, path, schema_path) -> List[ValidationError]:
        if isinstance(instance, str) and not re.search(value, instance):
            return [ValidationError(f"String {instance!r} does not match pattern {value!r}", path, schema_path)]
        return []


def validate_json_against_schema(instance: Any, schema: Dict[str, Any], dialect, resolver,
                                 strict: bool = True) -> List[str]:
    """Validates a JSON instance and returns the violations as messages.

    Args:
        instance: The JSON value to validate
        schema: The schema
        dialect: The dialect of the schema
        resolver: The URIResolver owning the schema
        strict: Whether type checks trust native types only

    Returns:
        List of validation error messages (empty if valid)
    """
    validator = KeywordValidator(dialect, resolver, strict)
    return [str(e) for e in validator.validate(instance, schema, resolver.base_uri)]
