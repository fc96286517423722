"""gomod-runner CLI - Command line interface for gomod-runner."""
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from gomod_runner import __version__
from gomod_runner.core.errors import (
    CommandCancelledError,
    CommandError,
    ConfigError,
    ModDirError,
    ToolError,
    UnsupportedVersionError,
)
from gomod_runner.runner import (
    GetUpdatePolicy,
    RunContext,
    RunnerConfig,
    runner_from_config,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(name)s: %(message)s",
)
logger = logging.getLogger("gomod_runner")


def _build_config(
    config_file: Optional[Path],
    go_cmd: Optional[str],
    mod_dir: Optional[str],
    insecure: bool,
    verbose: bool,
    go_version: Optional[str],
    allow_newer: bool,
) -> RunnerConfig:
    data = {}
    if config_file is not None:
        data = RunnerConfig.load(config_file).model_dump()

    if go_cmd:
        data["go_cmd"] = go_cmd
    if mod_dir:
        data["mod_dir"] = mod_dir
    if insecure:
        data["insecure"] = True
    if verbose:
        data["verbose"] = True
    version = dict(data.get("version") or {})
    if go_version:
        version["series"] = go_version
    if allow_newer:
        version["allow_newer"] = True
    data["version"] = version
    data.setdefault("mod_dir", ".gomod")

    try:
        return RunnerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _run(ctx_obj: dict, action) -> None:
    """Construct the runner, apply ``action`` and map failures to exit codes.

    Exit codes:
        0: Success
        1: Command failed
        3: Unsupported go version
        4: Module directory error
        5: Cancelled or timed out
    """
    config: RunnerConfig = ctx_obj["config"]
    run_ctx = RunContext(timeout=ctx_obj["timeout"])
    try:
        runner = runner_from_config(config, ctx=run_ctx)
        action(runner, run_ctx)
        sys.exit(0)

    except UnsupportedVersionError as e:
        logger.error(str(e))
        sys.exit(3)

    except ModDirError as e:
        logger.error(f"Module directory error: {str(e)}")
        sys.exit(4)

    except CommandCancelledError as e:
        logger.error(f"Cancelled: {str(e)}")
        sys.exit(5)

    except (CommandError, ToolError) as e:
        click.echo(str(e).rstrip("\n"), err=True)
        sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="gomod-runner")
@click.option(
    "--go",
    "go_cmd",
    envvar="GOMOD_RUNNER_GO",
    default=None,
    help="Path or name of the go binary (default: go)",
)
@click.option(
    "--mod-dir",
    envvar="GOMOD_RUNNER_MOD_DIR",
    default=None,
    help="Directory holding the separate go.mod (default: .gomod)",
)
@click.option("--insecure", is_flag=True, help="Pass -insecure to go get")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and full command lines in errors")
@click.option(
    "--go-version",
    default=None,
    help="Required go release series, e.g. 1.14",
)
@click.option(
    "--allow-newer",
    is_flag=True,
    help="Accept go releases newer than --go-version",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path),
    default=None,
    help="JSON runner configuration; flags override it",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds before running go commands are killed",
)
@click.pass_context
def main(
    ctx: click.Context,
    go_cmd: Optional[str],
    mod_dir: Optional[str],
    insecure: bool,
    verbose: bool,
    go_version: Optional[str],
    allow_newer: bool,
    config_file: Optional[Path],
    timeout: Optional[float],
):
    """gomod-runner - run go get/install/mod tidy against a separate go.mod.

    Exit codes:
        7: Configuration file error
    """
    if verbose:
        logging.getLogger("gomod_runner").setLevel(logging.DEBUG)

    if config_file is not None and not config_file.exists():
        logger.error(f"Config file not found: {config_file}")
        sys.exit(7)

    try:
        config = _build_config(
            config_file, go_cmd, mod_dir, insecure, verbose, go_version, allow_newer
        )
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(7)

    ctx.obj = {"config": config, "timeout": timeout}


@main.command()
@click.pass_obj
def init(obj: dict):
    """Check the go version and create go.mod in the module directory.

    Examples:
        gomod-runner --mod-dir .bingo init
    """
    def action(runner, run_ctx):
        click.echo(f"[OK] Module file: {runner.mod_file}")

    _run(obj, action)


@main.command()
@click.option("--update", "-u", "update", flag_value=GetUpdatePolicy.UPDATE.value, help="Update to latest versions")
@click.option(
    "--update-patch",
    "update",
    flag_value=GetUpdatePolicy.UPDATE_PATCH.value,
    help="Update to latest patch releases",
)
@click.argument("packages", nargs=-1, required=True)
@click.pass_obj
def get(obj: dict, update: Optional[str], packages: Tuple[str, ...]):
    """Run 'go get -d' for PACKAGES.

    Examples:
        gomod-runner get github.com/golangci/golangci-lint/cmd/golangci-lint@v1.26.0
        gomod-runner get --update-patch golang.org/x/tools/cmd/goimports
    """
    policy = GetUpdatePolicy(update or "")

    def action(runner, run_ctx):
        runner.get_d(policy, *packages, ctx=run_ctx)
        click.echo(f"[OK] Fetched: {' '.join(packages)}")

    _run(obj, action)


@main.command()
@click.argument("packages", nargs=-1, required=True)
@click.pass_obj
def install(obj: dict, packages: Tuple[str, ...]):
    """Run 'go install' for PACKAGES."""
    def action(runner, run_ctx):
        runner.install(*packages, ctx=run_ctx)
        click.echo(f"[OK] Installed: {' '.join(packages)}")

    _run(obj, action)


@main.command()
@click.pass_obj
def tidy(obj: dict):
    """Run 'go mod tidy' on the module file."""
    def action(runner, run_ctx):
        runner.mod_tidy(ctx=run_ctx)
        click.echo(f"[OK] Tidied: {runner.mod_file}")

    _run(obj, action)


if __name__ == "__main__":
    main()
