"""
Parsing helpers for `bookstack://` resource URIs.

The registry only decides which resource handles a URI; handlers receive the
concrete URI and pull their parameters out of it with these functions.
"""

from __future__ import annotations

import logging
from typing import List
from urllib.parse import unquote, urlparse

from ..errors import ValidationError

logger = logging.getLogger(__name__)

SCHEME = "bookstack"


def parse_bookstack_uri(uri: str) -> List[str]:
    """
    Split a `bookstack://` URI into its path components.

    `urlparse` puts the first segment of `bookstack://books/5` into `netloc`,
    so the path is rebuilt from both parts.
    """
    parsed = urlparse(uri)
    if parsed.scheme != SCHEME:
        raise ValidationError(f"Invalid URI scheme in '{uri}', expected '{SCHEME}://'")

    full_path = f"{parsed.netloc}{parsed.path}" if parsed.netloc else parsed.path
    components = [part for part in full_path.split("/") if part]
    if not components:
        raise ValidationError(f"Empty path in URI: {uri}")
    return components


def extract_path_parameter(uri: str, expected_path: List[str], parameter_name: str) -> str:
    """
    Return the URL-decoded segment that follows `expected_path`.
    """
    components = parse_bookstack_uri(uri)
    prefix = components[: len(expected_path)]
    if prefix != expected_path or len(components) <= len(expected_path):
        raise ValidationError(
            f"Missing {parameter_name} in URI '{uri}', expected "
            f"'{SCHEME}://{'/'.join(expected_path)}/<{parameter_name}>'"
        )
    return unquote(components[len(expected_path)])


def extract_id(uri: str, collection: str) -> int:
    raw = extract_path_parameter(uri, [collection], "id")
    if not raw.isdigit() or int(raw) < 1:
        raise ValidationError(f"Invalid id '{raw}' in URI '{uri}'")
    return int(raw)
