"""JSON Pointer walking with resolution scope tracking."""

from typing import Any

from jsonpointer import EndOfList, JsonPointer, JsonPointerException

from jsvalidator.errors import PointerResolutionError
from jsvalidator.uriutil import resolve_uri


class JSONPointer:
    """
    A position inside a schema document together with the resolution scope
    that applies there.

    Walking into an object that declares the dialect's identifier keyword
    re-bases the scope on that identifier.
    """

    def __init__(self, scope: str, value: Any, dialect):
        self.scope = scope
        self.value = value
        self.dialect = dialect

    def get(self, pointer: str) -> 'JSONPointer':
        """
        Walks a JSON Pointer from the current position.

        Args:
            pointer (str): An unescaped JSON Pointer such as '/definitions/a~1b'.
                The empty pointer addresses the current value.

        Returns:
            JSONPointer: The position the pointer addresses.

        Raises:
            PointerResolutionError: If a reference token does not exist.
        """
        if pointer == '':
            return JSONPointer(self.scope, self.value, self.dialect)
        try:
            json_pointer = JsonPointer(pointer)
        except JsonPointerException as e:
            raise PointerResolutionError(f'Invalid JSON pointer "{pointer}" in {self.scope}: {e}', pointer) from e

        value = self.value
        scope = self.scope
        for part in json_pointer.parts:
            if not isinstance(value, (dict, list)):
                raise PointerResolutionError(
                    f'Can not resolve "{part}" of JSON pointer "{pointer}" in {self.scope}: not a container', pointer)
            try:
                value = json_pointer.walk(value, part)
            except JsonPointerException as e:
                raise PointerResolutionError(
                    f'Can not resolve JSON pointer "{pointer}" in {self.scope}: {e}', pointer) from e
            if isinstance(value, EndOfList):
                raise PointerResolutionError(f'JSON pointer "{pointer}" points past the end of an array', pointer)
            scope = self._rebase(scope, value)
        return JSONPointer(scope, value, self.dialect)

    def _rebase(self, scope: str, value: Any) -> str:
        if not self.dialect.using_id_with_ref:
            return scope
        identifier = self.dialect.schema_id(value)
        if identifier is None:
            return scope
        return resolve_uri(identifier, scope)

