"""Decodes fetched schema content as JSON or YAML."""

import json
import logging
import re
from typing import Any, Optional

import yaml

from jsvalidator.errors import UnsupportedContent

logger = logging.getLogger(__name__)

YAML_BOOL_TAG = 'tag:yaml.org,2002:bool'
YAML_TIMESTAMP_TAG = 'tag:yaml.org,2002:timestamp'


class SchemaLoader(yaml.SafeLoader):
    """
    SafeLoader that keeps YAML 1.1 timestamps and yes/no/on/off as strings.

    Only true/false resolve to booleans, so every scalar decodes to one of the
    kinds the type classifier knows.
    """


SchemaLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (YAML_BOOL_TAG, YAML_TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
SchemaLoader.add_implicit_resolver(
    YAML_BOOL_TAG,
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF'))


def json_decode(content: str | bytes) -> Any:
    return json.loads(content)


def yaml_decode(content: str | bytes) -> Any:
    return yaml.load(content, Loader=SchemaLoader)


def decode_content(content: str | bytes, content_type: Optional[str], resource: str) -> Any:
    """
    Decodes the content of a resource.

    The content type hint selects the decoder. If there is no hint, or the
    hinted decoder fails, JSON is tried first and YAML second.

    Args:
        content (str | bytes): The raw content.
        content_type (str): The content type hint, may be None.
        resource (str): Label of the resource for error messages.

    Returns:
        Any: The decoded document.

    Raises:
        UnsupportedContent: If the content is neither JSON nor YAML.
    """
    try:
        text = content.decode('utf-8-sig') if isinstance(content, bytes) else content
    except UnicodeDecodeError as e:
        raise UnsupportedContent(f'Resource {resource} is not UTF-8 text', resource) from e
    if not text.strip():
        raise UnsupportedContent(f'Resource {resource} is empty', resource)

    if content_type:
        decoder = None
        if 'yaml' in content_type:
            decoder = yaml_decode
        elif 'json' in content_type:
            decoder = json_decode
        if decoder is not None:
            try:
                return decoder(text)
            except (ValueError, yaml.YAMLError) as e:
                logger.debug('Decoding %s as %s failed, guessing the format: %s', resource, content_type, e)

    # guess
    try:
        return json_decode(text)
    except ValueError:
        pass
    try:
        return yaml_decode(text)
    except yaml.YAMLError as e:
        raise UnsupportedContent(
            f'Unsupported mime type {content_type} of resource {resource}', resource) from e
