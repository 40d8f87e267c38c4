"""
JSON Schema reference resolution and validation.

The public names below are imported on first access, so importing the package
alone does not pull in requests or yaml.
"""

import importlib

from jsvalidator._version import __version__

_exports = {
    "validator": ["SchemaValidator", "validate_resource", "validate_paths", "validate_instance_file"],
    "uriresolver": ["URIResolver"],
    "keywords": ["KeywordValidator", "ValidationError"],
    "pointer": ["JSONPointer"],
    "dialects": ["get_dialect", "schema_specification"],
    "resourcefetch": ["get_resource"],
    "contentdecode": ["decode_content"],
    "typeclassifier": ["is_type", "detect_type"],
}

_origins = {name: module for module, names in _exports.items() for name in names}

__all__ = sorted(_origins) + ["__version__"]


def __getattr__(name):
    module = _origins.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(importlib.import_module(f"{__name__}.{module}"), name)
    globals()[name] = value
    return value


def __dir__():
    return __all__
