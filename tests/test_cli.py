"""Tests for argument parsing, settings precedence and the CLI entry point."""

import json
from unittest.mock import patch

import pytest

from src import aarfetch
from src.args import parse_args
from src.cli_config import build_settings, load_config_file
from src.constants import ExitCodes
from src.resolution.errors import UnsupportedVersionError
from src.resolution.models import ModificationRecord, ResolutionPlan, ResolutionReport
from src.resolution.service import PipelineOutcome


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PACKAGES_TO_COPY", "MAVEN_REPOS", "TARGET_DIR", "ANDROID_HOME"):
        monkeypatch.delenv(name, raising=False)


def outcome(missing=()):
    report = ResolutionReport(
        copied=("widget-1.0.jar",),
        missing=tuple(missing),
        modified=(ModificationRecord("g:a:1.0@aar", "g:a:1.1@aar"),),
    )
    return PipelineOutcome(report=report, plan=ResolutionPlan())


class TestArgs:
    """Argument parsing."""

    def test_defaults(self):
        ns = parse_args([])
        assert ns.PACKAGES == []
        assert ns.REPOS == []
        assert ns.LOG_LEVEL == "INFO"
        assert ns.DRY_RUN is False

    def test_repeatable_options(self):
        ns = parse_args(["-p", "g:a:1.0", "-p", "g:b:2.0", "-r", "https://a", "-t", "libs",
                         "--loglevel", "debug"])
        assert ns.PACKAGES == ["g:a:1.0", "g:b:2.0"]
        assert ns.REPOS == ["https://a"]
        assert ns.TARGET_DIR == "libs"
        assert ns.LOG_LEVEL == "DEBUG"


class TestSettings:
    """Precedence between CLI, environment and config file."""

    def test_cli_wins(self):
        args = parse_args(["--packages", "g:a:1.0;g:b:2.0", "-t", "cli-dir"])
        env = {"PACKAGES_TO_COPY": "env:pkg:1.0", "TARGET_DIR": "env-dir"}

        settings = build_settings(args, env=env, config={"target_dir": "cfg-dir"})

        assert settings.packages == ["g:a:1.0", "g:b:2.0"]
        assert settings.target_dir == "cli-dir"

    def test_environment_before_config(self):
        env = {"PACKAGES_TO_COPY": "g:a:1.0;;g:b:2.0", "TARGET_DIR": "env-dir", "MAVEN_REPOS": "https://env"}
        config = {"packages": ["cfg:pkg:1.0"], "target_dir": "cfg-dir", "repositories": ["https://cfg"]}

        settings = build_settings(parse_args(["-r", "https://cli"]), env=env, config=config)

        assert settings.packages == ["g:a:1.0", "g:b:2.0"]
        assert settings.target_dir == "env-dir"
        assert settings.repositories == ["https://cli", "https://env", "https://cfg"]

    def test_config_only(self):
        config = {
            "packages": ["g:a:1.0", "g:a:1.0"],
            "target_dir": "cfg-dir",
            "lock_groups": [{"name": "x", "match": "g:.*"}],
            "fallback_type": "zip",
            "maven_local": False,
        }

        settings = build_settings(parse_args([]), env={}, config=config)

        assert settings.packages == ["g:a:1.0"]
        assert settings.lock_groups == [{"name": "x", "match": "g:.*"}]
        assert settings.fallback_type == "zip"
        assert settings.include_maven_local is False

    @pytest.mark.parametrize("value,expected", [
        ("false", False),
        ("False", False),
        ("no", False),
        ("0", False),
        (0, False),
        ("true", True),
        (True, True),
        ("maybe", True),
    ])
    def test_maven_local_flag_parsing(self, value, expected):
        settings = build_settings(parse_args([]), env={}, config={"maven_local": value})
        assert settings.include_maven_local is expected

    def test_files_extend_cli_packages(self):
        settings = build_settings(parse_args(["-p", "g:a:1.0"]), ["g:b:2.0"], env={})
        assert settings.packages == ["g:a:1.0", "g:b:2.0"]


class TestConfigFile:
    """YAML and JSON config loading."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "aarfetch.yml"
        path.write_text("packages:\n  - g:a:1.0\ntarget_dir: libs\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"packages": ["g:a:1.0"], "target_dir": "libs"}

    def test_json(self, tmp_path):
        path = tmp_path / "aarfetch.json"
        path.write_text(json.dumps({"repositories": ["https://a"]}), encoding="utf-8")
        assert load_config_file(str(path)) == {"repositories": ["https://a"]}

    def test_missing_or_invalid(self, tmp_path):
        assert load_config_file(None) == {}
        assert load_config_file(str(tmp_path / "nope.yml")) == {}
        bad = tmp_path / "bad.yml"
        bad.write_text("- just\n- a list\n", encoding="utf-8")
        assert load_config_file(str(bad)) == {}


class TestMain:
    """Exit codes and output of the entry point."""

    def test_no_packages_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            aarfetch.main(["-t", "libs"])
        assert exc_info.value.code == ExitCodes.FILE_ERROR.value

    def test_no_target_dir_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            aarfetch.main(["-p", "g:a:1.0"])
        assert exc_info.value.code == ExitCodes.FILE_ERROR.value

    @patch("src.aarfetch.run")
    def test_success_prints_report(self, mock_run, capsys):
        mock_run.return_value = outcome()

        with pytest.raises(SystemExit) as exc_info:
            aarfetch.main(["-p", "g:a:1.0", "-t", "libs"])

        assert exc_info.value.code == ExitCodes.SUCCESS.value
        out = capsys.readouterr().out
        assert "Copied artifacts:" in out
        assert "g:a@aar: 1.0 --> 1.1" in out
        settings = mock_run.call_args[0][0]
        assert settings.packages == ["g:a:1.0"]
        assert settings.target_dir == "libs"

    @patch("src.aarfetch.run")
    def test_missing_with_error_flag(self, mock_run):
        mock_run.return_value = outcome(missing=["g:ghost:1.0"])

        with pytest.raises(SystemExit) as exc_info:
            aarfetch.main(["-p", "g:ghost:1.0", "-t", "libs", "--error-on-missing", "-q"])

        assert exc_info.value.code == ExitCodes.EXIT_WARNINGS.value

    @patch("src.aarfetch.run")
    def test_resolution_error_is_config_error(self, mock_run):
        mock_run.side_effect = UnsupportedVersionError("1.0-beta", "0-beta")

        with pytest.raises(SystemExit) as exc_info:
            aarfetch.main(["-p", "g:a:1.0", "-t", "libs"])

        assert exc_info.value.code == ExitCodes.CONFIG_ERROR.value

    @patch("src.aarfetch.run")
    def test_json_output(self, mock_run, tmp_path):
        mock_run.return_value = outcome()
        out = tmp_path / "report.json"

        with pytest.raises(SystemExit):
            aarfetch.main(["-p", "g:a:1.0", "-n", "-q", "-o", str(out)])

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["copied"] == ["widget-1.0.jar"]
        assert data["modified"][0]["new_version"] == "1.1"
        assert mock_run.call_args[1] == {"dry_run": True}

    def test_load_pkgs_file(self, tmp_path):
        path = tmp_path / "packages.txt"
        path.write_text("# comment\ng:a:1.0\n\n g:b:2.0 \n", encoding="utf-8")
        assert aarfetch.load_pkgs_file(str(path)) == ["g:a:1.0", "g:b:2.0"]

    def test_load_pkgs_file_missing(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            aarfetch.load_pkgs_file(str(tmp_path / "nope.txt"))
        assert exc_info.value.code == ExitCodes.FILE_ERROR.value
