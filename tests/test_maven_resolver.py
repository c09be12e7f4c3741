"""Tests for the Maven layout repository resolver."""

import xml.etree.ElementTree as ET
from unittest.mock import patch

import pytest

from src.resolution.resolvers.maven import (
    MavenRepositoryResolver,
    packaging_to_type,
    pick_metadata_version,
)

POM_AAR = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.example</groupId>
  <artifactId>widget</artifactId>
  <version>1.0</version>
  <packaging>aar</packaging>
</project>
"""

POM_NO_PACKAGING = """<project><groupId>com.example</groupId><artifactId>util</artifactId></project>"""

METADATA = """<metadata>
  <groupId>com.example</groupId>
  <artifactId>widget</artifactId>
  <versioning>
    <release>1.0</release>
    <versions><version>0.9</version><version>1.0</version></versions>
  </versioning>
</metadata>
"""


def write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def local_repo(tmp_path):
    """A local Maven repository with an aar, a jar and a srcaar-only package."""
    root = tmp_path / "m2repository"
    base = root / "com" / "example"
    write(base / "widget" / "maven-metadata.xml", METADATA)
    write(base / "widget" / "1.0" / "widget-1.0.pom", POM_AAR)
    write(base / "widget" / "1.0" / "widget-1.0.aar", b"aar")
    write(base / "util" / "2.1" / "util-2.1.pom", POM_NO_PACKAGING)
    write(base / "util" / "2.1" / "util-2.1.jar", b"jar")
    write(base / "native" / "3.0" / "native-3.0.srcaar", b"srcaar")
    return root


class TestMetadataHelpers:
    """Parsing of maven-metadata.xml and POM packaging."""

    def test_release_wins(self):
        assert pick_metadata_version(ET.fromstring(METADATA)) == "1.0"

    def test_highest_listed_version_without_release(self):
        root = ET.fromstring(
            "<metadata><versioning><versions>"
            "<version>1.9</version><version>1.10</version><version>1.2</version>"
            "</versions></versioning></metadata>"
        )
        assert pick_metadata_version(root) == "1.10"

    def test_namespaced_release(self):
        root = ET.fromstring(
            '<metadata xmlns="http://maven.apache.org/METADATA/1.1.0">'
            "<versioning><release>2.0</release></versioning></metadata>"
        )
        assert pick_metadata_version(root) == "2.0"

    def test_namespaced_versions_list(self):
        root = ET.fromstring(
            '<metadata xmlns="http://maven.apache.org/METADATA/1.1.0"><versioning><versions>'
            "<version>1.9</version><version>1.10</version>"
            "</versions></versioning></metadata>"
        )
        assert pick_metadata_version(root) == "1.10"

    def test_no_versioning(self):
        assert pick_metadata_version(ET.fromstring("<metadata/>")) is None

    @pytest.mark.parametrize("packaging,expected", [
        (None, "jar"),
        ("bundle", "jar"),
        ("aar", "aar"),
        (" AAR ", "aar"),
        ("jar", "jar"),
    ])
    def test_packaging_to_type(self, packaging, expected):
        assert packaging_to_type(packaging) == expected


class TestLocalRepository:
    """Resolution against a repository on disk."""

    def test_resolves_using_pom_packaging(self, local_repo):
        resolver = MavenRepositoryResolver([str(local_repo)])

        result = resolver.resolve(["com.example:widget:1.0", "com.example:util:2.1"])

        coords = sorted(a.coordinate() for a in result.resolved_artifacts)
        assert coords == ["com.example:util:2.1@jar", "com.example:widget:1.0@aar"]
        files = {f.name for f in result.resolved_files}
        assert files == {"widget-1.0.aar", "util-2.1.jar"}

    def test_version_from_metadata(self, local_repo):
        artifact = MavenRepositoryResolver([str(local_repo)]).resolve_one("com.example:widget")
        assert artifact.version == "1.0"
        assert artifact.file == local_repo / "com" / "example" / "widget" / "1.0" / "widget-1.0.aar"

    def test_version_from_namespaced_metadata(self, local_repo):
        base = local_repo / "com" / "example" / "util"
        write(base / "maven-metadata.xml",
              '<metadata xmlns="http://maven.apache.org/METADATA/1.1.0">'
              "<versioning><latest>2.1</latest></versioning></metadata>")

        artifact = MavenRepositoryResolver([str(local_repo)]).resolve_one("com.example:util")

        assert artifact.version == "2.1"
        assert artifact.type == "jar"

    def test_explicit_type(self, local_repo):
        resolver = MavenRepositoryResolver([local_repo.as_uri()])

        assert resolver.resolve_one("com.example:native:3.0") is None
        artifact = resolver.resolve_one("com.example:native:3.0@srcaar")
        assert artifact.type == "srcaar"
        assert artifact.file.name == "native-3.0.srcaar"

    def test_unresolvable_entries_are_omitted(self, local_repo):
        result = MavenRepositoryResolver([str(local_repo)]).resolve(
            ["com.example", "com.example:ghost:1.0", "com.example:widget:1.0"]
        )
        assert [a.artifact for a in result.resolved_artifacts] == ["widget"]

    def test_first_repository_wins(self, local_repo, tmp_path):
        other = tmp_path / "other"
        write(other / "com" / "example" / "widget" / "1.0" / "widget-1.0.pom", POM_AAR)
        write(other / "com" / "example" / "widget" / "1.0" / "widget-1.0.aar", b"other")

        artifact = MavenRepositoryResolver([str(other), str(local_repo)]).resolve_one("com.example:widget:1.0")

        assert artifact.file.read_bytes() == b"other"


class TestRemoteRepository:
    """Resolution over HTTP with the client helpers patched out."""

    @patch("src.resolution.resolvers.maven.http_client.download_file")
    @patch("src.resolution.resolvers.maven.http_client.fetch_text")
    def test_downloads_into_staging(self, mock_get, mock_download, tmp_path):
        def fake_get(url):
            if url.endswith("widget-1.0.pom"):
                return 200, POM_AAR
            return 404, ""

        def fake_download(url, dest):
            with open(dest, "wb") as fh:
                fh.write(b"aar")
            return True

        mock_get.side_effect = fake_get
        mock_download.side_effect = fake_download
        staging = tmp_path / "staging"

        resolver = MavenRepositoryResolver(["https://repo.example.com/maven/"], staging_dir=staging)
        artifact = resolver.resolve_one("com.example:widget:1.0")

        mock_download.assert_called_once_with(
            "https://repo.example.com/maven/com/example/widget/1.0/widget-1.0.aar",
            str(staging / "com.example" / "widget-1.0.aar"),
        )
        assert artifact.file == staging / "com.example" / "widget-1.0.aar"
        assert artifact.type == "aar"

    @patch("src.resolution.resolvers.maven.http_client.download_file")
    @patch("src.resolution.resolvers.maven.http_client.fetch_text")
    def test_missing_pom_means_not_found(self, mock_get, mock_download, tmp_path):
        mock_get.return_value = (404, "")

        resolver = MavenRepositoryResolver(["https://repo.example.com/maven"], staging_dir=tmp_path)

        assert resolver.resolve_one("com.example:widget:1.0") is None
        mock_download.assert_not_called()

    def test_owned_staging_dir_removed_on_close(self):
        with MavenRepositoryResolver(["https://repo.example.com/maven"]) as resolver:
            staging = resolver.staging_dir
            assert staging.is_dir()
        assert not staging.exists()
