"""Package specifier parsing and versionless key derivation.

Specifiers use the Maven dependency notation ``group:artifact[:version][@type]``.
Two kinds of versionless keys exist: ``group:artifact`` for coordinates and
the bare artifact name for files, since a file name carries no group. Joins
between requested packages and files on disk use the bare artifact name.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Set, Union

from .models import Coordinate


def parse(specifier: str) -> Optional[Coordinate]:
    """Parse a specifier, returning None when group or artifact is absent.

    Incomplete specifiers such as ``com.example`` are not errors; they simply
    take no part in versionless matching.
    """
    raw = specifier
    body = specifier.strip()
    type_ = None
    if "@" in body:
        body, type_ = body.rsplit("@", 1)
        type_ = type_.strip() or None
    parts = body.split(":")
    if len(parts) < 2:
        return None
    group, artifact = parts[0].strip(), parts[1].strip()
    if not group or not artifact:
        return None
    version = parts[2].strip() if len(parts) > 2 and parts[2].strip() else None
    return Coordinate(group=group, artifact=artifact, version=version, type=type_, raw=raw)


def versionless_key(coordinate: Coordinate) -> str:
    """Return ``group:artifact``."""
    return f"{coordinate.group}:{coordinate.artifact}"


def artifact_key(coordinate: Coordinate) -> str:
    """Return the key comparable with :func:`versionless_name_from_filename`."""
    return coordinate.artifact


def has_explicit_type(specifier: str) -> bool:
    return "@" in specifier


def with_type(specifier: str, type_: str) -> str:
    """Append an ``@type`` qualifier to a specifier."""
    return f"{specifier}@{type_}"


def versionless_name_from_filename(filename: str) -> Optional[str]:
    """Strip everything from the last hyphen of a file name.

    ``my-package-1.2.3.aar`` becomes ``my-package``. Names without a hyphen
    carry no version and yield None.

    Known limitation: the version is located by the last hyphen only, so a
    classifier suffix (``foo-1.0-sources.jar``) or an unversioned file whose
    artifact name contains hyphens produces a wrong key.
    """
    name = os.path.basename(filename)
    index = name.rfind("-")
    if index < 0:
        return None
    return name[:index]


def versionless_names(files: Iterable[Union[str, Path]]) -> Set[str]:
    """Versionless names for a collection of files; unversioned files are ignored."""
    names = set()
    for f in files:
        name = versionless_name_from_filename(str(f))
        if name is not None:
            names.add(name)
    return names


def versionless_artifacts_by_package(specifiers: Iterable[str]) -> Dict[str, str]:
    """Map each well formed specifier to its artifact name, preserving order."""
    by_package: Dict[str, str] = {}
    for spec in specifiers:
        coordinate = parse(spec)
        if coordinate is not None:
            by_package[spec] = artifact_key(coordinate)
    return by_package
