"""Maven repository resolver for direct (non-transitive) artifact lookups."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from packaging import version as pkg_version

try:
    from ...common import http_client
    from ...common.logging_utils import extra_context, is_debug_enabled, safe_url
    from ...constants import Constants
except Exception:  # ImportError or relative depth issues when imported as "resolution..."
    from common import http_client
    from common.logging_utils import extra_context, is_debug_enabled, safe_url
    from constants import Constants
from .. import coordinates
from ..models import Coordinate, ResolvedArtifact, ResolverResult
from .base import RepositoryResolver
from .repositories import Repository, parse_repository

logger = logging.getLogger(__name__)

# POM packaging values that are published as a jar file.
_JAR_PACKAGINGS = {"bundle", "maven-plugin", "eclipse-plugin", "jar"}


def _local_name(tag: str) -> str:
    """Strip an XML namespace from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for child in elem:
        if _local_name(child.tag) == name and child.text and child.text.strip():
            return child.text.strip()
    return None


def _child(elem: ET.Element, name: str) -> Optional[ET.Element]:
    for child in elem:
        if _local_name(child.tag) == name:
            return child
    return None


def pick_metadata_version(root: ET.Element) -> Optional[str]:
    """Pick the version to use from a parsed maven-metadata.xml.

    ``<release>`` wins, then ``<latest>``, then the highest listed version.
    Element namespaces are ignored.
    """
    versioning = _child(root, "versioning")
    if versioning is None:
        return None
    for tag in ("release", "latest"):
        text = _child_text(versioning, tag)
        if text:
            return text
    versions_elem = _child(versioning, "versions")
    if versions_elem is None:
        return None
    candidates = [v.text.strip() for v in versions_elem
                  if _local_name(v.tag) == "version" and v.text and v.text.strip()]
    parsed = []
    for v in candidates:
        try:
            parsed.append((pkg_version.Version(v), v))
        except pkg_version.InvalidVersion:
            continue  # Skip versions packaging cannot order
    if parsed:
        return max(parsed)[1]
    return candidates[-1] if candidates else None


def packaging_to_type(packaging: Optional[str]) -> str:
    """Map a POM ``<packaging>`` value onto the artifact file extension."""
    if not packaging:
        return Constants.DEFAULT_PACKAGING
    packaging = packaging.strip().lower()
    if packaging in _JAR_PACKAGINGS:
        return "jar"
    return packaging


class MavenRepositoryResolver(RepositoryResolver):
    """Locate artifacts in Maven layout repositories.

    Repositories are searched in order and the first one holding the artifact
    wins. Remote artifacts are downloaded into ``staging_dir``; local ones are
    returned in place. Only the requested artifacts are fetched, dependencies
    declared in their POMs are not followed.
    """

    def __init__(self, repositories: Sequence[Union[Repository, str]],
                 staging_dir: Optional[Union[str, Path]] = None):
        self.repositories: List[Repository] = [
            r if isinstance(r, Repository) else parse_repository(r) for r in repositories
        ]
        self._staging_dir = Path(staging_dir) if staging_dir else None
        self._owns_staging = False

    @property
    def staging_dir(self) -> Path:
        if self._staging_dir is None:
            self._staging_dir = Path(tempfile.mkdtemp(prefix="aarfetch-"))
            self._owns_staging = True
        return self._staging_dir

    def close(self) -> None:
        """Remove the staging directory if this resolver created it."""
        if self._owns_staging and self._staging_dir is not None:
            shutil.rmtree(self._staging_dir, ignore_errors=True)
            self._staging_dir = None
            self._owns_staging = False

    def __enter__(self) -> "MavenRepositoryResolver":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @staticmethod
    def _base_path(group: str, artifact: str) -> str:
        return f"{group.replace('.', '/')}/{artifact}"

    def _read_text(self, repo: Repository, relative: str) -> Optional[str]:
        location = repo.artifact_location(relative)
        if repo.is_local:
            try:
                with open(location, "r", encoding="utf-8") as fh:
                    return fh.read()
            except OSError:
                return None
        status, text = http_client.fetch_text(location)
        if status != 200 or not text:
            return None
        return text

    def _parse_xml(self, text: Optional[str], what: str) -> Optional[ET.Element]:
        if not text:
            return None
        try:
            return ET.fromstring(text)
        except ET.ParseError:
            logger.debug("Unparseable %s", what)
            return None

    def latest_version(self, group: str, artifact: str) -> Optional[str]:
        """Return the version advertised by the first repository with metadata."""
        relative = f"{self._base_path(group, artifact)}/maven-metadata.xml"
        for repo in self.repositories:
            root = self._parse_xml(self._read_text(repo, relative), "maven-metadata.xml")
            if root is None:
                continue
            picked = pick_metadata_version(root)
            if picked:
                if is_debug_enabled(logger):
                    logger.debug("Resolved %s:%s to %s", group, artifact, picked, extra=extra_context(
                        event="resolve_version", component="maven_resolver", action="latest_version",
                        target=safe_url(repo.url), outcome="found"
                    ))
                return picked
        return None

    def artifact_type(self, group: str, artifact: str, version: str) -> Optional[str]:
        """Read the artifact type from the POM; None when no repository has it."""
        relative = f"{self._base_path(group, artifact)}/{version}/{artifact}-{version}.pom"
        for repo in self.repositories:
            text = self._read_text(repo, relative)
            if text is None:
                continue
            root = self._parse_xml(text, "POM")
            packaging = _child_text(root, "packaging") if root is not None else None
            return packaging_to_type(packaging)
        return None

    def _fetch(self, repo: Repository, coordinate: Coordinate, version: str, type_: str) -> Optional[Path]:
        filename = f"{coordinate.artifact}-{version}.{type_}"
        relative = f"{self._base_path(coordinate.group, coordinate.artifact)}/{version}/{filename}"
        location = repo.artifact_location(relative)
        if repo.is_local:
            path = Path(location)
            return path if path.is_file() else None
        dest_dir = self.staging_dir / coordinate.group
        os.makedirs(dest_dir, exist_ok=True)
        dest = dest_dir / filename
        if dest.is_file():
            return dest
        if http_client.download_file(location, str(dest)):
            return dest
        return None

    def resolve_one(self, spec: str) -> Optional[ResolvedArtifact]:
        """Resolve a single specifier, or return None if it cannot be found."""
        coordinate = coordinates.parse(spec)
        if coordinate is None:
            logger.debug("Skipping incomplete package specifier: %s", spec)
            return None
        version = coordinate.version or self.latest_version(coordinate.group, coordinate.artifact)
        if not version:
            logger.debug("No version available for %s", spec)
            return None
        type_ = coordinate.type or self.artifact_type(coordinate.group, coordinate.artifact, version)
        if not type_:
            logger.debug("No POM found for %s", spec)
            return None
        for repo in self.repositories:
            path = self._fetch(repo, coordinate, version, type_)
            if path is not None:
                if is_debug_enabled(logger):
                    logger.debug("Resolved %s", spec, extra=extra_context(
                        event="resolve_artifact", component="maven_resolver", action="resolve",
                        target=safe_url(repo.url), outcome="found"
                    ))
                return ResolvedArtifact(
                    group=coordinate.group,
                    artifact=coordinate.artifact,
                    version=version,
                    type=type_,
                    file=path,
                )
        logger.debug("Artifact not found in any repository: %s", spec)
        return None

    def resolve(self, specifiers: Iterable[str]) -> ResolverResult:
        found: Dict[str, ResolvedArtifact] = {}
        for spec in specifiers:
            artifact = self.resolve_one(spec)
            if artifact is not None:
                found[artifact.coordinate()] = artifact
        logger.info("Resolved %d artifact(s) from %d repositories", len(found), len(self.repositories))
        return ResolverResult(
            resolved_files=frozenset(a.file for a in found.values()),
            resolved_artifacts=frozenset(found.values()),
        )
