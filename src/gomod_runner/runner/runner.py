"""Runner: run module-aware go commands against a separate go.mod."""
import logging
import posixpath
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from gomod_runner.core.errors import (
    CommandCancelledError,
    CommandError,
    ModDirError,
    ToolError,
)
from gomod_runner.runner.config import RunnerConfig, VersionRequirement
from gomod_runner.runner.context import RunContext
from gomod_runner.runner.executor import execute

logger = logging.getLogger(__name__)

MOD_FILE = "go.mod"


class GetUpdatePolicy(str, Enum):
    """Update flag appended to ``go get``."""

    NO_UPDATE = ""
    UPDATE = "-u"
    UPDATE_PATCH = "-u=patch"


def build_get_args(
    policy: GetUpdatePolicy,
    packages: Sequence[str],
    insecure: bool = False,
) -> List[str]:
    """Assemble ``go get -d`` arguments; flags always precede packages."""
    args = ["get", "-d"]
    if insecure:
        args.append("-insecure")
    policy = GetUpdatePolicy(policy)
    if policy is not GetUpdatePolicy.NO_UPDATE:
        args.append(policy.value)
    args.extend(packages)
    return args


def module_path(current_module: str, mod_dir: str) -> str:
    """Module name for a go.mod created in ``mod_dir``.

    Examples:
        ("github.com/org/repo", ".bingo") -> github.com/org/repo/.bingo
        ("example.com/mod", "tools/./mod") -> example.com/mod/tools/mod
    """
    rel = Path(mod_dir).as_posix().lstrip("/")
    return posixpath.normpath(posixpath.join(current_module, rel))


class Runner:
    """Runs go commands against the go.mod kept in ``mod_dir``.

    Build one with ``create_runner()``, which validates the go version and
    bootstraps go.mod. Methods are synchronous and must not be called
    concurrently on one instance.
    """

    def __init__(
        self,
        go_cmd: str,
        mod_dir: str,
        insecure: bool = False,
        verbose: bool = False,
    ):
        self.go_cmd = go_cmd
        self.mod_dir = str(mod_dir)
        self.insecure = insecure
        self.verbose = verbose

    def __repr__(self) -> str:
        return (
            f"Runner(go_cmd={self.go_cmd!r}, mod_dir={self.mod_dir!r}, "
            f"insecure={self.insecure}, verbose={self.verbose})"
        )

    @property
    def mod_file(self) -> Path:
        return Path(self.mod_dir) / MOD_FILE

    def _exec_go(self, *args: str, ctx: Optional[RunContext] = None) -> str:
        return execute(self.go_cmd, args, cwd=None, ctx=ctx, verbose=self.verbose)

    def _exec_go_in_mod_dir(self, *args: str, ctx: Optional[RunContext] = None) -> str:
        return execute(self.go_cmd, args, cwd=self.mod_dir, ctx=ctx, verbose=self.verbose)

    def get_d(
        self,
        policy: GetUpdatePolicy,
        *packages: str,
        ctx: Optional[RunContext] = None,
    ) -> None:
        """Run 'go get -d' against the separate go.mod with given packages.

        Args:
            policy: Whether to also update existing requirements
            packages: Package specifiers, typically "name@version"
            ctx: Cancellation/deadline token

        Raises:
            CommandError: If go exits non-zero or cannot be run
        """
        self._exec_go_in_mod_dir(
            *build_get_args(policy, packages, insecure=self.insecure), ctx=ctx
        )

    def install(self, *packages: str, ctx: Optional[RunContext] = None) -> None:
        """Run 'go install' against the separate go.mod with given packages."""
        self._exec_go_in_mod_dir("install", *packages, ctx=ctx)

    def mod_tidy(self, ctx: Optional[RunContext] = None) -> None:
        """Run 'go mod tidy' against the separate go.mod."""
        self._exec_go_in_mod_dir("mod", "tidy", ctx=ctx)


def _check_version(runner: Runner, requirement: VersionRequirement, ctx: Optional[RunContext]) -> None:
    try:
        version = runner._exec_go("version", ctx=ctx)
    except CommandCancelledError:
        raise
    except CommandError as e:
        raise ToolError(f"exec go to detect the version: {e}") from e

    requirement.check(version)
    logger.debug(f"Detected {version}")


def _ensure_mod_file(runner: Runner, ctx: Optional[RunContext]) -> None:
    mod_dir = Path(runner.mod_dir)
    try:
        mod_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ModDirError(f"create moddir {mod_dir}: {e}", str(mod_dir)) from e

    mod_file = runner.mod_file
    try:
        mod_file.stat()
        return
    except FileNotFoundError:
        pass
    except OSError as e:
        raise ModDirError(f"stat module file {mod_file}: {e}", str(mod_file)) from e

    current = runner._exec_go("list", "-m", ctx=ctx)
    name = module_path(current, runner.mod_dir)
    logger.info(f"Initializing {mod_file} as module {name}")
    runner._exec_go_in_mod_dir("mod", "init", name, ctx=ctx)


def create_runner(
    mod_dir: str,
    go_cmd: str = "go",
    insecure: bool = False,
    verbose: bool = False,
    requirement: Optional[VersionRequirement] = None,
    ctx: Optional[RunContext] = None,
) -> Runner:
    """Check go version compatibility, create go.mod in mod_dir if missing,
    and return a Runner.

    Args:
        mod_dir: Directory for the separate go.mod (created if missing)
        go_cmd: Path or name of the go binary
        insecure: Pass -insecure to 'go get'
        verbose: Include command lines in errors from non-zero exits
        requirement: Accepted go versions (default: exactly go1.14.x)
        ctx: Cancellation/deadline token for the bootstrap commands

    Returns:
        Configured Runner

    Raises:
        ToolError: If 'go version' cannot be run
        UnsupportedVersionError: If the go version is not accepted
        ModDirError: If mod_dir or go.mod cannot be prepared
        CommandError: If 'go list -m' or 'go mod init' fails
    """
    runner = Runner(go_cmd=go_cmd, mod_dir=str(mod_dir), insecure=insecure, verbose=verbose)
    _check_version(runner, requirement or VersionRequirement(), ctx)
    _ensure_mod_file(runner, ctx)
    return runner


def runner_from_config(config: RunnerConfig, ctx: Optional[RunContext] = None) -> Runner:
    """Same as create_runner, taking a RunnerConfig."""
    return create_runner(
        mod_dir=config.mod_dir,
        go_cmd=config.go_cmd,
        insecure=config.insecure,
        verbose=config.verbose,
        requirement=config.version,
        ctx=ctx,
    )
