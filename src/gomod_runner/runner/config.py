"""Runner configuration and go version requirements."""
import re
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gomod_runner.core.errors import ConfigError, UnsupportedVersionError

_GO_VERSION_RE = re.compile(r"^go version go(\d+)\.(\d+)(?:\.(\d+))?")


def parse_go_version(output: str) -> Optional[Tuple[int, int, int]]:
    """Extract (major, minor, patch) from ``go version`` output.

    Examples:
        go version go1.14.9 linux/amd64 -> (1, 14, 9)
        go version go1.16 darwin/arm64 -> (1, 16, 0)
        go version devel +b7a85e0003 -> None
    """
    match = _GO_VERSION_RE.match(output.strip())
    if not match:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)


class VersionRequirement(BaseModel):
    """Which go toolchain versions a runner accepts.

    By default only the exact ``series`` is accepted (any patch release).
    With ``allow_newer`` any release at or above the series is accepted.
    """

    series: str = Field(default="1.14", description="Required major.minor, e.g. 1.14")
    allow_newer: bool = Field(default=False, description="Accept releases newer than series")

    @field_validator("series")
    @classmethod
    def validate_series(cls, v: str) -> str:
        """Ensure series is a two-part numeric version."""
        v = v.strip()
        if v.startswith("go"):
            v = v[2:]
        if not re.fullmatch(r"\d+\.\d+", v):
            raise ValueError(f"series must look like '1.14'; got '{v}'")
        return v

    @property
    def label(self) -> str:
        if self.allow_newer:
            return f"go{self.series}.x or newer"
        return f"go{self.series}.x"

    @property
    def minimum(self) -> Tuple[int, int]:
        major, minor = self.series.split(".")
        return int(major), int(minor)

    def check(self, output: str) -> None:
        """Validate ``go version`` output.

        Raises:
            UnsupportedVersionError: If the version is not accepted
        """
        if not self.allow_newer:
            if output.startswith(f"go version go{self.series}."):
                return
            raise UnsupportedVersionError(output, self.label)

        parsed = parse_go_version(output)
        if parsed is None or parsed[:2] < self.minimum:
            raise UnsupportedVersionError(output, self.label)


class RunnerConfig(BaseModel):
    """Everything needed to construct a Runner."""

    go_cmd: str = Field(default="go", description="Path or name of the go binary")
    mod_dir: str = Field(..., description="Directory holding the separate go.mod")
    insecure: bool = Field(default=False, description="Pass -insecure to go get")
    verbose: bool = Field(default=False, description="Include command lines in errors")
    version: VersionRequirement = Field(default_factory=VersionRequirement)

    @field_validator("go_cmd", "mod_dir")
    @classmethod
    def validate_nonempty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "go_cmd": "go",
                "mod_dir": ".bingo",
                "insecure": False,
                "verbose": False,
                "version": {"series": "1.14", "allow_newer": False},
            }
        }
    )

    def save(self, path: Path) -> None:
        """Write config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))

    @classmethod
    def load(cls, path: Path) -> "RunnerConfig":
        """Load config from JSON file.

        Raises:
            ConfigError: If the file cannot be read or does not validate
        """
        path = Path(path)
        try:
            return cls.model_validate_json(path.read_text())
        except (OSError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e
