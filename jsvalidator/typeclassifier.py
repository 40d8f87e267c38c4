"""
Classifies decoded JSON/YAML values against the JSON Schema type vocabulary.

Strict mode trusts the native Python type the decoder produced. Loose mode
additionally accepts values that only look like the type: numeric-looking
strings count as numbers, and 0, 1, '' and None count as booleans. Loose mode
is meant for dialects and configurations that tolerate ambiguous encodings;
conformance testing uses strict mode.
"""

import math
import re
from typing import Any, Callable, Dict

from jsvalidator.errors import UnknownTypeDetected

# Lexical number forms accepted by loose mode: optional surrounding whitespace,
# sign, integer/decimal/exponent forms, and the infinity/nan spellings.
NUMBER_PATTERN = re.compile(
    r'^\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)\s*$',
    re.IGNORECASE
)


def round_half_away(value: float) -> int:
    """Round half away from zero: 0.5 -> 1, -0.5 -> -1, 2.5 -> 3."""
    return int(value + (0.5 if value >= 0 else -0.5))


def is_native_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def looks_like_number(value: Any) -> bool:
    """True if the value is a native number or a string that reads as one."""
    if is_native_number(value):
        return True
    if isinstance(value, str):
        return bool(NUMBER_PATTERN.match(value))
    return False


def to_number(value: Any) -> float | int:
    """Numeric value of something that passed looks_like_number."""
    if is_native_number(value):
        return value
    return float(value.strip())


def is_array(value: Any, strict: bool = True) -> bool:
    return isinstance(value, list)


def is_object(value: Any, strict: bool = True) -> bool:
    return isinstance(value, dict)


def is_null(value: Any, strict: bool = True) -> bool:
    return value is None


def is_ref(value: Any, strict: bool = True) -> bool:
    """Opaque values the decoder handed over that are not plain JSON nodes."""
    return not isinstance(value, (dict, list, str, int, float, bool)) and value is not None


def is_bool(value: Any, strict: bool = True) -> bool:
    if isinstance(value, bool):
        return True
    if strict:
        return False
    if value is None or value == '':
        return True
    return looks_like_number(value) and to_number(value) in (0, 1)


def is_number(value: Any, strict: bool = True) -> bool:
    if is_native_number(value):
        return True
    if strict:
        return False
    return looks_like_number(value)


def is_integer(value: Any, strict: bool = True) -> bool:
    if not is_number(value, strict):
        return False
    if isinstance(value, int):
        # exact, and may be too large for float arithmetic
        return True
    number = to_number(value)
    if not math.isfinite(number):
        return False
    return round_half_away(number) == number


def is_string(value: Any, strict: bool = True) -> bool:
    if value is None or isinstance(value, (bool, dict, list)):
        return False
    if strict:
        return isinstance(value, str)
    return isinstance(value, (str, int, float))


TYPE_MAP: Dict[str, Callable[[Any, bool], bool]] = {
    'array': is_array,
    'boolean': is_bool,
    'integer': is_integer,
    'number': is_number,
    'object': is_object,
    'null': is_null,
    'string': is_string,
    '_ref': is_ref,
}

# detect_type relies on this order: integer before number, string last
TYPE_LIST = ['array', 'object', 'null', '_ref', 'integer', 'number', 'boolean', 'string']


def is_type(value: Any, type_name: str, strict: bool = True) -> bool:
    """
    Check whether a value belongs to a JSON Schema type.

    Args:
        value (Any): The decoded value.
        type_name (str): One of the JSON Schema primitive type names.
        strict (bool): Trust native types only when True.

    Returns:
        bool: False for unknown type names.
    """
    check = TYPE_MAP.get(type_name)
    if check is None:
        return False
    return check(value, strict)


def detect_type(value: Any, strict: bool = True) -> str:
    """Return the first matching type name in TYPE_LIST order."""
    for type_name in TYPE_LIST:
        if TYPE_MAP[type_name](value, strict):
            return type_name
    raise UnknownTypeDetected(f'Unknown type detected for value of Python type {type(value).__name__}')
