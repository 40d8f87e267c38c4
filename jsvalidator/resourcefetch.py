"""
Fetches the raw content of schema resources.

Scheme handlers registered by the caller always win. Without one, ``file``
URIs are read from disk and ``http``/``https`` URIs go through the network
transport (``requests`` unless an override is supplied).
"""

import logging
import os
from typing import Callable, Dict, Optional, Tuple

import requests

from jsvalidator.errors import (NoTransportAvailable, PermissionDenied, ResourceFetchError, ResourceNotFound,
                                UnknownFormat, UnsupportedScheme)
from jsvalidator.uriutil import canonical_uri, uri_scheme, uri_to_path

logger = logging.getLogger(__name__)

FetchResult = Tuple[str | bytes, Optional[str]]
SchemeHandler = Callable[[str], FetchResult]

FILE_SUFFIX_TO_MIME_TYPE = {
    'yaml': 'text/vnd.yaml',
    'yml': 'text/vnd.yaml',
    'json': 'application/json'
}

DEFAULT_TIMEOUT = 30


def http_get(uri: str, timeout: float = DEFAULT_TIMEOUT) -> FetchResult:
    """
    Fetches a resource over HTTP(S).

    Args:
        uri (str): The absolute URI to fetch.
        timeout (float): Seconds to wait for the server.

    Returns:
        tuple: The response text and the Content-Type header (or None).

    Raises:
        ResourceFetchError: If the request fails or returns a 4XX/5XX status.
    """
    try:
        response = requests.get(uri, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ResourceFetchError(f'Can not get uri {uri}: {e}', uri) from e
    return response.text, response.headers.get('Content-Type')


def read_file(path: str) -> FetchResult:
    """
    Reads a local schema file.

    The content type is derived from the file extension only.

    Raises:
        ResourceNotFound: If the file does not exist.
        PermissionDenied: If the file cannot be read.
        UnknownFormat: If the extension is not .json, .yml or .yaml.
    """
    if not os.path.exists(path):
        raise ResourceNotFound(f'File {path} does not exists', path)
    if not os.access(path, os.R_OK):
        raise PermissionDenied(f'File {path} does not have read permission', path)

    suffix = os.path.splitext(path)[1].lstrip('.').lower()
    mime_type = FILE_SUFFIX_TO_MIME_TYPE.get(suffix)
    if mime_type is None:
        raise UnknownFormat(f'Unknown file format of {path}', path)

    try:
        with open(path, 'rb') as file:
            content = file.read()
    except PermissionError as e:
        raise PermissionDenied(f'File {path} does not have read permission', path) from e
    return content, mime_type


def get_resource(uri: str,
                 scheme_handlers: Optional[Dict[str, SchemeHandler]] = None,
                 user_agent_get: Optional[SchemeHandler] = None,
                 allow_network: bool = True,
                 timeout: float = DEFAULT_TIMEOUT) -> FetchResult:
    """
    Fetches the content of a resource and a content-type hint.

    Args:
        uri (str): The absolute URI of the resource.
        scheme_handlers (dict): Maps a URI scheme to a callable taking the URI
            and returning (content, content_type).
        user_agent_get (callable): Replaces the built-in HTTP(S) transport.
        allow_network (bool): When False and no override is given, http(s)
            URIs without a scheme handler fail with NoTransportAvailable.
        timeout (float): Timeout for the built-in transport.

    Returns:
        tuple: (content, content_type or None)
    """
    uri = canonical_uri(uri)
    scheme = uri_scheme(uri)
    scheme_handlers = scheme_handlers or {}

    if scheme in scheme_handlers:
        logger.debug('Fetching %s through the %s scheme handler', uri, scheme)
        return scheme_handlers[scheme](uri)
    if scheme == 'file':
        logger.debug('Reading %s', uri)
        return read_file(uri_to_path(uri))
    if scheme in ('http', 'https'):
        if user_agent_get is not None:
            logger.debug('Fetching %s through the user agent override', uri)
            return user_agent_get(uri)
        if not allow_network:
            raise NoTransportAvailable(f'Network access is disabled, can not get uri {uri}', uri)
        logger.debug('Downloading %s', uri)
        return http_get(uri, timeout=timeout)
    raise UnsupportedScheme(f'Unsupported scheme of uri {uri}', uri)

