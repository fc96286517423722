"""Subprocess execution shared by every runner operation."""
import logging
import signal
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Sequence, Union

from gomod_runner.core.errors import CommandCancelledError, CommandError
from gomod_runner.runner.context import RunContext

logger = logging.getLogger(__name__)

# How often a running child is checked against its context
POLL_INTERVAL = 0.05


def _read_output(buf) -> str:
    buf.seek(0)
    return buf.read().decode("utf-8", errors="replace")


def _signal_name(signum: int) -> str:
    """Lower-case signal description, e.g. 9 -> killed, 15 -> terminated."""
    try:
        name = signal.strsignal(signum)
    except ValueError:
        name = None
    return name.lower() if name else str(signum)


def _exit_cause(returncode: int) -> str:
    if returncode < 0:
        return f"signal: {_signal_name(-returncode)}"
    return f"exit status {returncode}"


def execute(
    command: str,
    args: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    ctx: Optional[RunContext] = None,
    verbose: bool = False,
) -> str:
    """Run ``command`` with ``args`` and return its combined output.
    
    Args:
        command: Executable name or path
        args: Arguments passed to the executable
        cwd: Directory to run in; empty or None inherits the caller's cwd
        ctx: Cancellation/deadline token; None never fires
        verbose: Whether non-zero exits report the full command line
    
    Returns:
        Combined stdout and stderr with trailing newlines stripped
    
    Raises:
        CommandError: Non-zero exit, or the command could not be started
        CommandCancelledError: ctx fired before or during the run
    """
    ctx = ctx or RunContext.background()
    args = list(args)
    cwd = str(cwd) if cwd else None
    command_line = " ".join([command, *args])

    reason = ctx.err()
    if reason is not None:
        raise CommandCancelledError(command, args, "", reason)

    # A file rather than a pipe: the child can never block on a full buffer
    # while we poll the context.
    with tempfile.TemporaryFile() as buf:
        logger.debug(f"Running '{command_line}' in {cwd or '.'}")
        try:
            proc = subprocess.Popen(
                [command, *args],
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=buf,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            raise CommandError(
                command, args, _read_output(buf), str(e), controlled=False
            ) from e

        with proc:
            try:
                while proc.poll() is None:
                    if ctx.wait(POLL_INTERVAL):
                        reason = ctx.err()
                        logger.debug(f"Killing '{command_line}': {reason}")
                        proc.kill()
                        proc.wait()
                        raise CommandCancelledError(
                            command, args, _read_output(buf), reason
                        )
            except BaseException:
                # Never leave the child running behind an interrupt.
                if proc.poll() is None:
                    proc.kill()
                    proc.wait()
                raise
            returncode = proc.returncode

        output = _read_output(buf)

    if returncode != 0:
        raise CommandError(
            command,
            args,
            output,
            _exit_cause(returncode),
            controlled=True,
            verbose=verbose,
            returncode=returncode,
        )

    return output.rstrip("\n")
