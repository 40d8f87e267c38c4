"""Exceptions raised by jsvalidator."""


class JSONSchemaValidatorError(Exception):
    """Base exception for jsvalidator."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ResourceError(JSONSchemaValidatorError):
    """A schema resource could not be fetched."""

    def __init__(self, message: str, uri: str = ''):
        self.uri = uri
        super().__init__(message)


class UnsupportedScheme(ResourceError):
    """The URI scheme has no registered handler and no built-in support."""


class ResourceNotFound(ResourceError):
    """A local file does not exist."""


class PermissionDenied(ResourceError):
    """A local file exists but cannot be read."""


class UnknownFormat(ResourceError):
    """A local file extension is not .json, .yml or .yaml."""


class NoTransportAvailable(ResourceError):
    """A network URI was requested while network access is disabled."""


class ResourceFetchError(ResourceError):
    """The network transport failed to deliver the resource."""


class UnsupportedContent(JSONSchemaValidatorError):
    """Content could be decoded neither as JSON nor as YAML."""

    def __init__(self, message: str, resource: str = ''):
        self.resource = resource
        super().__init__(message)


class PointerResolutionError(JSONSchemaValidatorError):
    """A JSON Pointer does not address a value in the target document."""

    def __init__(self, message: str, pointer: str = ''):
        self.pointer = pointer
        super().__init__(message)


class UnknownSpecification(JSONSchemaValidatorError):
    """No dialect matches the requested or declared specification."""


class InvalidSchema(JSONSchemaValidatorError):
    """The schema does not conform to its meta-schema."""

    def __init__(self, message: str, errors=None):
        self.errors = errors or []
        super().__init__(message)


class UnknownTypeDetected(RuntimeError):
    """No JSON type matched a decoded value. Indicates a decoder/classifier mismatch."""
