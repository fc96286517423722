"""Core exception types for gomod-runner."""
from typing import Optional, Sequence


class GomodRunnerError(Exception):
    """Base exception for all gomod-runner errors."""
    pass


class ConfigError(GomodRunnerError):
    """Raised when runner configuration is invalid or cannot be loaded."""
    pass


class ToolError(GomodRunnerError):
    """Raised when the go binary cannot be queried for its version."""
    pass


class UnsupportedVersionError(GomodRunnerError):
    """Raised when the detected go version does not satisfy the requirement."""

    def __init__(self, detected: str, required: str):
        self.detected = detected
        self.required = required
        super().__init__(f"found unsupported go version: {detected}. Requires {required}")


class ModDirError(GomodRunnerError):
    """Raised when the module directory or its go.mod cannot be prepared."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)


class CommandError(GomodRunnerError):
    """Raised when a go subcommand fails.

    Carries both the short message (the captured output) and the full
    diagnostic detail (command line, output, cause). ``str()`` picks one:

    - controlled failure (non-zero exit), not verbose: the output, verbatim
    - controlled failure, verbose: the detail
    - uncontrolled failure (could not start, cancelled): always the detail
    """

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        output: str,
        cause: str,
        controlled: bool = True,
        verbose: bool = False,
        returncode: Optional[int] = None,
    ):
        self.command = command
        self.cmd_args = list(args)
        self.output = output
        self.cause = cause
        self.controlled = controlled
        self.verbose = verbose
        self.returncode = returncode
        super().__init__(self.message if self._terse else self.detail)

    @property
    def _terse(self) -> bool:
        return self.controlled and not self.verbose

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.cmd_args])

    @property
    def message(self) -> str:
        return self.output

    @property
    def detail(self) -> str:
        return (
            f"error while running command '{self.command_line}'; "
            f"out: {self.output}; err: {self.cause}"
        )

    def __str__(self) -> str:
        return self.message if self._terse else self.detail


class CommandCancelledError(CommandError):
    """Raised when the run context is cancelled or its deadline passes."""

    def __init__(self, command: str, args: Sequence[str], output: str, cause: str):
        super().__init__(command, args, output, cause, controlled=False)
