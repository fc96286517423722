"""Runner: go toolchain commands against a separate module file."""
from gomod_runner.runner.config import RunnerConfig, VersionRequirement, parse_go_version
from gomod_runner.runner.context import RunContext
from gomod_runner.runner.runner import (
    GetUpdatePolicy,
    Runner,
    build_get_args,
    create_runner,
    module_path,
    runner_from_config,
)

__all__ = [
    "GetUpdatePolicy",
    "Runner",
    "RunnerConfig",
    "RunContext",
    "VersionRequirement",
    "build_get_args",
    "create_runner",
    "module_path",
    "parse_go_version",
    "runner_from_config",
]
