"""Dotted numeric version comparison.

Only versions made of integer components separated by dots are supported.
Qualifiers such as ``1.0-rc1`` or ``2.0.0-SNAPSHOT`` raise
:class:`UnsupportedVersionError`.
"""

from functools import cmp_to_key
from typing import Iterable, List, Tuple

from .errors import UnsupportedVersionError


def parse_version(version: str) -> Tuple[int, ...]:
    """Split a version on dots into integers."""
    tokens = []
    for token in version.split("."):
        if not token.isdecimal():
            raise UnsupportedVersionError(version, token)
        tokens.append(int(token))
    return tuple(tokens)


def compare(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is lower, equal or greater than ``b``.

    Components are compared numerically left to right. When one version is a
    prefix of the other the longer one is greater, so ``1.2 < 1.2.0``.
    """
    left, right = parse_version(a), parse_version(b)
    for x, y in zip(left, right):
        if x != y:
            return -1 if x < y else 1
    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


version_key = cmp_to_key(compare)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Sort versions in ascending order; the maximum is the last element."""
    return sorted(versions, key=version_key)


def max_version(versions: Iterable[str]) -> str:
    ordered = sort_versions(versions)
    if not ordered:
        raise ValueError("max_version() arg is an empty sequence")
    return ordered[-1]
