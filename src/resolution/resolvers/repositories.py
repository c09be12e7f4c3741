"""Repository locations searched by the Maven resolver."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import unquote, urlsplit

try:
    from ...constants import Constants
except Exception:  # ImportError or relative depth issues when imported as "resolution..."
    from constants import Constants
from ..errors import RepositoryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Repository:
    """A Maven repository root, either remote (http/https) or on local disk."""
    url: str
    local_path: Optional[Path] = None

    @property
    def is_local(self) -> bool:
        return self.local_path is not None

    def artifact_location(self, relative: str) -> str:
        """Return a URL or filesystem path for a path relative to the root."""
        if self.local_path is not None:
            return str(self.local_path.joinpath(*relative.split("/")))
        return f"{self.url.rstrip('/')}/{relative}"


def parse_repository(uri: str) -> Repository:
    """Build a :class:`Repository` from a URI or a plain directory path.

    Raises:
        RepositoryError: for empty values and unsupported schemes
    """
    value = (uri or "").strip()
    if not value:
        raise RepositoryError("Empty repository URI")
    parts = urlsplit(value)
    scheme = parts.scheme.lower()
    if scheme in ("http", "https"):
        return Repository(url=value.rstrip("/"))
    if scheme == "file":
        path = Path(unquote(parts.path))
        return Repository(url=path.as_uri() if path.is_absolute() else value, local_path=path)
    # Windows drive letters parse as one letter schemes.
    if scheme == "" or len(scheme) == 1:
        path = Path(os.path.expanduser(value)).absolute()
        return Repository(url=path.as_uri(), local_path=path)
    raise RepositoryError(f"Unsupported repository scheme '{scheme}' in {value}")


def split_repository_list(value: Optional[str]) -> List[str]:
    """Split a semicolon separated repository list, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(Constants.LIST_SEPARATOR) if item.strip()]


def default_repositories(
    user_repositories: Iterable[str] = (),
    android_home: Optional[str] = None,
    include_maven_local: bool = True,
) -> List[Repository]:
    """Return the ordered search list.

    User repositories come first, then the Android SDK local repositories
    that exist, Google's Maven repository, the local Maven cache and finally
    Maven Central. Duplicates keep their first position.
    """
    ordered: List[Repository] = [parse_repository(u) for u in user_repositories]
    if android_home:
        for relative in Constants.ANDROID_SDK_REPOSITORIES:
            path = Path(android_home) / relative
            if path.is_dir():
                ordered.append(Repository(url=path.absolute().as_uri(), local_path=path.absolute()))
            else:
                logger.debug("Android SDK repository not present: %s", path)
    ordered.append(Repository(url=Constants.GOOGLE_MAVEN_URL))
    if include_maven_local:
        local = Path(os.path.expanduser(Constants.MAVEN_LOCAL_DIR))
        if local.is_dir():
            ordered.append(Repository(url=local.as_uri(), local_path=local))
    ordered.append(Repository(url=Constants.MAVEN_CENTRAL_URL))

    unique: List[Repository] = []
    seen = set()
    for repo in ordered:
        if repo.url in seen:
            continue
        seen.add(repo.url)
        unique.append(repo)
    return unique
