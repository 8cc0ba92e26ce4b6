from __future__ import annotations

import re
from typing import List, Optional, Pattern

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


class UriPattern:
    """
    A resource URI pattern, compiled once at registration.

    Patterns without `{` match by string equality. Each `{name}` placeholder
    matches one or more characters other than `/`; everything else must match
    literally.
    """

    __slots__ = ("pattern", "variables", "_regex")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.variables: List[str] = []
        self._regex: Optional[Pattern[str]] = None

        if "{" not in pattern:
            return

        parts = []
        pos = 0
        for match in _PLACEHOLDER.finditer(pattern):
            parts.append(re.escape(pattern[pos:match.start()]))
            parts.append("([^/]+)")
            self.variables.append(match.group(1))
            pos = match.end()
        parts.append(re.escape(pattern[pos:]))
        self._regex = re.compile("".join(parts))

    @property
    def is_template(self) -> bool:
        return self._regex is not None

    def matches(self, uri: str) -> bool:
        if self._regex is None:
            return uri == self.pattern
        return self._regex.fullmatch(uri) is not None

    def __repr__(self) -> str:
        return f"UriPattern({self.pattern!r})"
