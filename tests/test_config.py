"""Tests for runner configuration and go version requirements."""
import pytest
from pydantic import ValidationError

from gomod_runner.core.errors import ConfigError, UnsupportedVersionError
from gomod_runner.runner.config import RunnerConfig, VersionRequirement, parse_go_version


@pytest.mark.parametrize(
    "output,expected",
    [
        ("go version go1.14.9 linux/amd64", (1, 14, 9)),
        ("go version go1.16 darwin/arm64", (1, 16, 0)),
        ("go version go1.21.3 windows/amd64", (1, 21, 3)),
        ("go version devel +b7a85e0003 linux/amd64", None),
        ("not go at all", None),
    ],
)
def test_parse_go_version(output, expected):
    assert parse_go_version(output) == expected


def test_strict_requirement_accepts_same_series():
    VersionRequirement().check("go version go1.14.9 linux/amd64")
    VersionRequirement().check("go version go1.14.15 darwin/amd64")


@pytest.mark.parametrize(
    "output",
    [
        "go version go1.15.2 linux/amd64",
        "go version go1.13.8 linux/amd64",
        "go version go1.140.1 linux/amd64",
        "go version go1.14 linux/amd64",
        "go version devel +b7a85e0003 linux/amd64",
    ],
)
def test_strict_requirement_rejects_and_names_detected_version(output):
    """Test: mismatching output fails and is quoted verbatim in the error."""
    with pytest.raises(UnsupportedVersionError) as exc_info:
        VersionRequirement().check(output)

    assert output in str(exc_info.value)
    assert "Requires go1.14.x" in str(exc_info.value)
    assert exc_info.value.detected == output


def test_allow_newer_accepts_later_releases():
    requirement = VersionRequirement(series="1.14", allow_newer=True)
    requirement.check("go version go1.14.2 linux/amd64")
    requirement.check("go version go1.15.2 linux/amd64")
    requirement.check("go version go2.0 linux/amd64")


def test_allow_newer_rejects_older_and_unparseable():
    requirement = VersionRequirement(series="1.16", allow_newer=True)

    with pytest.raises(UnsupportedVersionError) as exc_info:
        requirement.check("go version go1.15.9 linux/amd64")
    assert "Requires go1.16.x or newer" in str(exc_info.value)

    with pytest.raises(UnsupportedVersionError):
        requirement.check("go version devel +b7a85e0003 linux/amd64")


def test_series_accepts_go_prefix():
    assert VersionRequirement(series="go1.21").series == "1.21"


@pytest.mark.parametrize("series", ["1", "1.14.2", "one.two", ""])
def test_series_rejects_malformed(series):
    with pytest.raises(ValidationError):
        VersionRequirement(series=series)


def test_runner_config_defaults():
    config = RunnerConfig(mod_dir=".bingo")
    assert config.go_cmd == "go"
    assert config.insecure is False
    assert config.verbose is False
    assert config.version.series == "1.14"
    assert config.version.allow_newer is False


@pytest.mark.parametrize("field", ["go_cmd", "mod_dir"])
def test_runner_config_rejects_empty(field):
    values = {"go_cmd": "go", "mod_dir": ".bingo"}
    values[field] = "  "
    with pytest.raises(ValidationError):
        RunnerConfig(**values)


def test_runner_config_save_load(tmp_path):
    path = tmp_path / "conf" / "runner.json"
    original = RunnerConfig(
        go_cmd="/usr/local/go/bin/go",
        mod_dir="tools/.bingo",
        insecure=True,
        verbose=True,
        version=VersionRequirement(series="1.15", allow_newer=True),
    )

    original.save(path)
    loaded = RunnerConfig.load(path)

    assert loaded == original


def test_runner_config_load_invalid_raises_config_error(tmp_path):
    path = tmp_path / "runner.json"
    path.write_text('{"go_cmd": "go", "mod_dir": ""}')

    with pytest.raises(ConfigError) as exc_info:
        RunnerConfig.load(path)

    assert str(exc_info.value).startswith(f"Invalid config file {path}: ")
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_runner_config_load_missing_raises_config_error(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        RunnerConfig.load(tmp_path / "missing.json")

    assert isinstance(exc_info.value.__cause__, FileNotFoundError)
