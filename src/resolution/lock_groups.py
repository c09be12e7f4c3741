"""Version lock group definitions.

Every package in a lock group is forced onto the highest version of the
group present in a resolution. Groups are plain data evaluated in list order;
a package belongs to the first group that includes it.
"""

import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import LockGroupConfigError
from .models import LockGroupPattern

DEFAULT_LOCK_GROUPS: List[Mapping[str, str]] = [
    {
        "name": "play-services",
        "match": r"com\.google\.android\.gms:.*",
        "exclude": r"com\.google\.android\.gms:strict-version-matcher-plugin",
    },
    {
        "name": "firebase",
        "match": r"com\.google\.firebase:firebase-.*",
        "exclude": r"com\.google\.firebase:firebase-jobdispatcher(-with-gcm-dep)?",
    },
    {
        # multidex is versioned independently of the support libraries.
        "name": "android-support",
        "match": r"com\.android\.support:.*",
        "exclude": r"com\.android\.support:multidex(-instrumentation)?",
    },
]


def _compile(expression: Optional[str], field: str, name: str) -> Optional["re.Pattern[str]"]:
    if expression is None or expression == "":
        return None
    try:
        return re.compile(expression)
    except re.error as exc:
        raise LockGroupConfigError(f"Lock group '{name}': invalid {field} expression: {exc}") from exc


def build_lock_group(entry: Mapping[str, Any], index: int = 0) -> LockGroupPattern:
    """Create a :class:`LockGroupPattern` from ``{name, match, exclude}``."""
    if not isinstance(entry, Mapping):
        raise LockGroupConfigError(f"Lock group #{index} must be a mapping")
    name = str(entry.get("name") or f"group-{index}")
    match = _compile(entry.get("match"), "match", name)
    if match is None:
        raise LockGroupConfigError(f"Lock group '{name}' has no match expression")
    return LockGroupPattern(name=name, match=match, exclude=_compile(entry.get("exclude"), "exclude", name))


def load_lock_groups(
    entries: Optional[Iterable[Union[Mapping[str, Any], LockGroupPattern]]] = None,
) -> List[LockGroupPattern]:
    """Build lock groups in declaration order; None selects the defaults."""
    if entries is None:
        entries = DEFAULT_LOCK_GROUPS
    groups = []
    for index, entry in enumerate(entries):
        groups.append(entry if isinstance(entry, LockGroupPattern) else build_lock_group(entry, index))
    return groups


def owner_index(group_artifact: str, groups: Sequence[LockGroupPattern]) -> Optional[int]:
    """Index of the first group that includes ``group_artifact``, if any."""
    for index, group in enumerate(groups):
        if group.includes(group_artifact):
            return index
    return None
