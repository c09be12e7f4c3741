"""Data models for artifact resolution and version reconciliation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Coordinate:
    """Parsed package specifier ``group:artifact[:version][@type]``."""
    group: str
    artifact: str
    version: Optional[str]
    type: Optional[str]
    raw: str


@dataclass(frozen=True)
class ResolvedArtifact:
    """A concrete artifact produced by a repository resolver."""
    group: str
    artifact: str
    version: str
    type: str
    file: Path

    @property
    def group_artifact(self) -> str:
        return f"{self.group}:{self.artifact}"

    def coordinate(self, version: Optional[str] = None) -> str:
        """Render ``group:artifact:version@type``, optionally with another version."""
        return f"{self.group}:{self.artifact}:{version or self.version}@{self.type}"


@dataclass(frozen=True)
class ResolverResult:
    """Outcome of one call into a repository resolver."""
    resolved_files: FrozenSet[Path] = frozenset()
    resolved_artifacts: FrozenSet[ResolvedArtifact] = frozenset()


@dataclass(frozen=True)
class LockGroupPattern:
    """A family of packages whose versions are forced to agree.

    ``match`` and ``exclude`` are applied with ``fullmatch`` to ``group:artifact``.
    """
    name: str
    match: "re.Pattern[str]"
    exclude: Optional["re.Pattern[str]"] = None

    def includes(self, group_artifact: str) -> bool:
        if not self.match.fullmatch(group_artifact):
            return False
        return not (self.exclude is not None and self.exclude.fullmatch(group_artifact))


class ResolutionPlan:
    """Deduplicated, insertion-ordered set of ``group:artifact:version@type`` keys."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    def add(self, key: str) -> bool:
        """Insert ``key``; returns False when it was already present."""
        if key in self._entries:
            return False
        self._entries[key] = key
        return True

    def keys(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ResolutionPlan({self.keys()!r})"


def _split_coordinate(coordinate: str) -> Tuple[str, str]:
    """Split ``group:artifact:version@type`` into ``group:artifact@type`` and the version."""
    body, _, type_ = coordinate.partition("@")
    parts = body.split(":")
    version = parts[2] if len(parts) > 2 else ""
    name = ":".join(parts[:2])
    return (f"{name}@{type_}" if type_ else name), version


@dataclass(frozen=True)
class ModificationRecord:
    """A version override applied by the reconciler."""
    original: str
    modified: str

    @property
    def package(self) -> str:
        return _split_coordinate(self.original)[0]

    @property
    def original_version(self) -> str:
        return _split_coordinate(self.original)[1]

    @property
    def new_version(self) -> str:
        return _split_coordinate(self.modified)[1]

    def __str__(self) -> str:
        return f"{self.package}: {self.original_version} --> {self.new_version}"


@dataclass(frozen=True)
class ResolutionReport:
    """Final classification of a run: copied, missing and modified."""
    copied: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()
    modified: Tuple[ModificationRecord, ...] = ()

    @property
    def has_missing(self) -> bool:
        return bool(self.missing)


@dataclass(frozen=True)
class FallbackResult:
    """Output of the two-pass fallback search.

    ``packages_to_copy`` maps the specifier used for the final pass to the
    specifier originally requested by the user.
    """
    packages_to_copy: Dict[str, str] = field(default_factory=dict)
    first_pass: ResolverResult = field(default_factory=ResolverResult)
    final_pass: ResolverResult = field(default_factory=ResolverResult)


@dataclass(frozen=True)
class ReconcileResult:
    """Plan and version overrides produced by the version lock pass."""
    plan: ResolutionPlan
    modifications: Tuple[ModificationRecord, ...] = ()
