"""In-memory resolver backed by a fixed artifact catalogue."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .. import coordinates
from ..models import ResolvedArtifact, ResolverResult
from ..versions import sort_versions
from .base import RepositoryResolver


class InMemoryResolver(RepositoryResolver):
    """Resolve against a list of known artifacts without any I/O.

    A specifier without a type matches ``default_types`` in order; one without
    a version matches the highest catalogued version.
    """

    def __init__(self, artifacts: Iterable[ResolvedArtifact],
                 default_types: Sequence[str] = ("aar", "jar")):
        self._artifacts: List[ResolvedArtifact] = list(artifacts)
        self._default_types = tuple(default_types)
        self.calls: List[List[str]] = []

    @classmethod
    def from_coordinates(cls, specs: Iterable[str], root: Path = Path("."), **kwargs) -> "InMemoryResolver":
        """Build a catalogue from ``group:artifact:version@type`` strings.

        Backing files are named the way Maven repositories name them:
        ``artifact-version.type`` under ``root``.
        """
        artifacts = []
        for spec in specs:
            coordinate = coordinates.parse(spec)
            if coordinate is None or coordinate.version is None:
                raise ValueError(f"Catalogue entry needs group, artifact and version: {spec}")
            type_ = coordinate.type or "jar"
            artifacts.append(ResolvedArtifact(
                group=coordinate.group,
                artifact=coordinate.artifact,
                version=coordinate.version,
                type=type_,
                file=root / f"{coordinate.artifact}-{coordinate.version}.{type_}",
            ))
        return cls(artifacts, **kwargs)

    def _lookup(self, spec: str) -> Optional[ResolvedArtifact]:
        coordinate = coordinates.parse(spec)
        if coordinate is None:
            return None
        matches = [a for a in self._artifacts
                   if a.group == coordinate.group and a.artifact == coordinate.artifact]
        if coordinate.version is not None:
            matches = [a for a in matches if a.version == coordinate.version]
        elif matches:
            latest = sort_versions({a.version for a in matches})[-1]
            matches = [a for a in matches if a.version == latest]
        types = (coordinate.type,) if coordinate.type else self._default_types
        for type_ in types:
            for artifact in matches:
                if artifact.type == type_:
                    return artifact
        return None

    def resolve(self, specifiers: Iterable[str]) -> ResolverResult:
        specs = list(specifiers)
        self.calls.append(specs)
        found: Dict[str, ResolvedArtifact] = {}
        for spec in specs:
            artifact = self._lookup(spec)
            if artifact is not None:
                found[artifact.coordinate()] = artifact
        return ResolverResult(
            resolved_files=frozenset(a.file for a in found.values()),
            resolved_artifacts=frozenset(found.values()),
        )
