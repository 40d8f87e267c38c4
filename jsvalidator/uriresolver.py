"""
Resolves $ref URIs to the subschemas they denote.

The resolver keeps a cache from canonical URI to schema node. The root schema
seeds it under its base URI, every fetched document is stored under its
document URI, every identifier found by id discovery under its absolute URI,
and every resolved fragment under the fragmented URI. Once a URI is cached it
is never fetched or decoded again.

The scope returned with a node already includes the identifier that node
declares, including the identifier of a document root.

A resolver belongs to one validation run and is not thread-safe.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote

from jsvalidator.contentdecode import decode_content
from jsvalidator.errors import PointerResolutionError
from jsvalidator.pointer import JSONPointer
from jsvalidator.resourcefetch import DEFAULT_TIMEOUT, FetchResult, get_resource
from jsvalidator.uriutil import canonical_uri, resolve_uri, split_fragment

logger = logging.getLogger(__name__)


class URIResolver:
    """Resolves references for one root schema under one dialect."""

    def __init__(self,
                 dialect,
                 schema: Any,
                 base_uri: str = '',
                 scheme_handlers: Optional[Dict[str, Callable[[str], FetchResult]]] = None,
                 user_agent_get: Optional[Callable[[str], FetchResult]] = None,
                 allow_network: bool = True,
                 timeout: float = DEFAULT_TIMEOUT) -> None:
        """
        Args:
            dialect: The dialect configuration (identifier keyword, id tracking, traversal table).
            schema: The root schema document.
            base_uri (str): The URI the root schema was loaded from, '' if unknown.
            scheme_handlers (dict): Per-scheme fetch callables, see get_resource.
            user_agent_get (callable): Replaces the built-in HTTP(S) transport.
            allow_network (bool): Allow the built-in HTTP(S) transport.
            timeout (float): Timeout for the built-in transport.
        """
        self.dialect = dialect
        self.base_uri = canonical_uri(base_uri or '')
        self.scheme_handlers = scheme_handlers or {}
        self.user_agent_get = user_agent_get
        self.allow_network = allow_network
        self.timeout = timeout
        self.cache: Dict[str, Any] = {self.base_uri: schema}
        # scope narrowed by pointer walks, so cached fragments resolve to the same scope again
        self.scopes: Dict[str, str] = {}

        if self.dialect.using_id_with_ref:
            self.cache_id(self.base_uri, schema)

    def resolve_ref(self, ref: str, scope: str = '') -> Tuple[str, Any]:
        """Resolves a $ref value against the scope it appears in."""
        return self.resolve(resolve_uri(ref, scope))

    def resolve(self, origin_uri: str) -> Tuple[str, Any]:
        """
        Resolves an absolute (possibly fragmented) URI.

        Args:
            origin_uri (str): The URI to resolve.

        Returns:
            tuple: (scope, subschema). The scope is the base for relative
            references inside the subschema.

        Raises:
            ResourceError: If the document can not be fetched.
            UnsupportedContent: If the document can not be decoded.
            PointerResolutionError: If the fragment does not address a node.
        """
        key = canonical_uri(origin_uri)
        if key in self.cache:
            logger.debug('Cache hit for %s', key)
            return self.scopes.get(key, key), self.cache[key]

        document_uri, _ = split_fragment(key)
        schema = self.cache_resolve(document_uri)
        return self.fragment_resolve(key, schema)

    def cache_resolve(self, uri: str) -> Any:
        """Returns the document at a fragment-less URI, fetching and decoding it once."""
        if uri in self.cache:
            return self.cache[uri]

        content, content_type = get_resource(
            uri,
            scheme_handlers=self.scheme_handlers,
            user_agent_get=self.user_agent_get,
            allow_network=self.allow_network,
            timeout=self.timeout)
        schema = decode_content(content, content_type, uri)
        self.cache[uri] = schema

        if self.dialect.using_id_with_ref:
            self.cache_id(uri, schema)
        return schema

    def fragment_resolve(self, uri: str, schema: Any) -> Tuple[str, Any]:
        """Evaluates the fragment of a URI as a JSON Pointer into its document."""
        if uri in self.cache:
            return self.scopes.get(uri, uri), self.cache[uri]

        document_uri, fragment = split_fragment(uri)
        try:
            fragment = unquote(fragment, encoding='utf-8', errors='strict')
        except UnicodeDecodeError as e:
            raise PointerResolutionError(f'Fragment of {uri} is not UTF-8', fragment) from e
        if fragment == '':
            return self.scopes.get(uri, uri), schema

        # a document root that declares an identifier re-bases the whole walk
        root_scope = self.scopes.get(document_uri, uri)
        pointer = JSONPointer(root_scope, schema, self.dialect).get(fragment)
        self.cache[uri] = pointer.value
        self.scopes[uri] = pointer.scope
        return pointer.scope, pointer.value

    def cache_id(self, uri: str, schema: Any) -> None:
        """
        Indexes every identifier in a document so that references to it resolve
        without walking a pointer.
        """
        scopes = [uri]
        self._cache_id_dfs(schema, scopes)

        identifier = self.dialect.schema_id(schema)
        if identifier is not None:
            root_scope = resolve_uri(identifier, uri)
            if root_scope != uri:
                self.scopes[uri] = root_scope

    def _cache_id_dfs(self, schema: Any, scopes: List[str]) -> None:
        if not isinstance(schema, dict):
            return

        identifier = self.dialect.schema_id(schema)
        if identifier is not None:
            uri = resolve_uri(identifier, scopes[-1])
            logger.debug('Found identifier %s', uri)
            self.cache[uri] = schema
            scopes.append(uri)

        search = self.dialect.SEARCH_ID
        for key, value in schema.items():
            if key in search['value'] and isinstance(value, dict):
                self._cache_id_dfs(value, scopes)
            if key in search['arr_value'] and isinstance(value, list):
                for item in value:
                    self._cache_id_dfs(item, scopes)
            if key in search['kv_value'] and isinstance(value, dict):
                for item in value.values():
                    self._cache_id_dfs(item, scopes)

        if identifier is not None:
            scopes.pop()
