"""
URI helpers used by the resolver and the fetcher.

Reference resolution follows RFC 3986 section 5.2 for every scheme, including
custom schemes served through scheme handlers (``urllib.parse.urljoin`` only
joins schemes listed in ``uses_relative``).
"""

import os
from pathlib import Path
from typing import Tuple
from urllib.parse import urlsplit, urlunsplit
from urllib.request import url2pathname


def remove_dot_segments(path: str) -> str:
    """Remove '.' and '..' segments from a URI path (RFC 3986, 5.2.4)."""
    if not path or ('.' not in path):
        return path
    output: list[str] = []
    for segment in path.split('/'):
        if segment == '.':
            continue
        if segment == '..':
            if len(output) > 1 or (output and output[0] != ''):
                output.pop()
            continue
        output.append(segment)
    result = '/'.join(output)
    if path.startswith('/') and not result.startswith('/'):
        result = '/' + result
    if path.endswith(('/.', '/..')) and not result.endswith('/'):
        result += '/'
    return result


def canonical_uri(uri: str) -> str:
    """Canonical string form of a URI. An empty trailing fragment is dropped."""
    if not uri:
        return ''
    return urlunsplit(urlsplit(uri))


def resolve_uri(ref: str, base: str = '') -> str:
    """
    Resolve a URI reference against a base URI.

    Args:
        ref (str): The reference, absolute or relative.
        base (str): The base URI. An empty base leaves the reference as is.

    Returns:
        str: The canonical form of the target URI.
    """
    if not base:
        return canonical_uri(ref)
    r = urlsplit(ref)
    if r.scheme:
        return urlunsplit((r.scheme, r.netloc, remove_dot_segments(r.path), r.query, r.fragment))
    b = urlsplit(base)
    if r.netloc:
        netloc, path, query = r.netloc, remove_dot_segments(r.path), r.query
    else:
        netloc = b.netloc
        if not r.path:
            path = b.path
            query = r.query if r.query else b.query
        else:
            if r.path.startswith('/'):
                path = remove_dot_segments(r.path)
            elif b.netloc and not b.path:
                path = remove_dot_segments('/' + r.path)
            else:
                path = remove_dot_segments(b.path[:b.path.rfind('/') + 1] + r.path)
            query = r.query
    return urlunsplit((b.scheme, netloc, path, query, r.fragment))


def split_fragment(uri: str) -> Tuple[str, str]:
    """Split a URI into its fragment-less document URI and its raw fragment."""
    parts = urlsplit(uri)
    return urlunsplit(parts._replace(fragment='')), parts.fragment


def uri_scheme(uri: str) -> str:
    return urlsplit(uri).scheme


def path_to_uri(path: str | os.PathLike) -> str:
    """Convert a local file path to an absolute file:// URI."""
    return Path(path).resolve().as_uri()


def uri_to_path(uri: str) -> str:
    """Convert a file:// URI to a local file path."""
    return url2pathname(urlsplit(uri).path)


def resource_uri(resource: str) -> str:
    """
    Normalize a resource argument to a URI. Anything without a scheme (or with
    a single-letter Windows drive 'scheme') is treated as a local file path.
    """
    scheme = uri_scheme(resource)
    if not scheme or len(scheme) == 1:
        return path_to_uri(resource)
    return canonical_uri(resource)
