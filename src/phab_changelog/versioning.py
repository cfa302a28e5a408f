"""
Semantic version validation.

Only the syntax of https://semver.org is checked. A single leading ``v``
or ``=`` is accepted and stripped, the same way tags such as ``v1.2.3`` are
commonly written.
"""

from __future__ import annotations

import re
from typing import Optional


_PREFIX_RE = re.compile(r"^[=v]")


_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def valid_version(version: Optional[str]) -> Optional[str]:
    """Return the normalised version if ``version`` is valid semver, else None.

    >>> valid_version("v1.2.3")
    '1.2.3'
    >>> valid_version("1.2") is None
    True
    """
    if not isinstance(version, str):
        return None
    candidate = _PREFIX_RE.sub("", version.strip(), count=1)
    if _SEMVER_RE.match(candidate):
        return candidate
    return None


def is_patch_version(version: Optional[str]) -> bool:
    """Return True if ``version`` is valid semver with a non-zero patch number."""
    normalised = valid_version(version)
    if normalised is None:
        return False
    match = _SEMVER_RE.match(normalised)
    return match is not None and match.group(3) != "0"
