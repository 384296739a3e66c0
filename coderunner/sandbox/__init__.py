import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from coderunner.errors import CommandError

_logger = logging.getLogger("coderunner.sandbox")

DEFAULT_SHELL = "/bin/sh"


@dataclass
class CommandResult:
    command: str
    output: str
    success: bool
    returncode: int | None = None
    error: CommandError | None = None


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"


def _log_execution(command: str, cwd: Path | None, success: bool, returncode: int | None, duration_ms: int) -> None:
    _logger.info(
        "Command execution: cwd=%s success=%s rc=%s duration=%dms command=%r",
        cwd, success, returncode, duration_ms, command[:200]
    )


def run_command(command: str, cwd: Path | None = None, shell: str = DEFAULT_SHELL) -> CommandResult:
    """Run one command line through the shell and wait for it to finish.

    stdout and stderr are buffered separately. On success only stdout is
    returned; on a non-zero exit or a spawn failure the output is stdout, a
    newline, then stderr, and the result carries a ``CommandError``.
    """
    start_time = time.time()

    try:
        proc = subprocess.run(
            [shell, "-c", command],
            cwd=cwd,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        duration_ms = int((time.time() - start_time) * 1000)
        _log_execution(command, cwd, False, None, duration_ms)
        _logger.warning("could not start %r: %s", command, e)
        return CommandResult(
            command=command,
            output="\n",
            success=False,
            error=CommandError(detail=str(e), command=command),
        )

    duration_ms = int((time.time() - start_time) * 1000)
    stdout = proc.stdout.decode("utf-8", errors="replace")
    stderr = proc.stderr.decode("utf-8", errors="replace")
    success = proc.returncode == 0
    _log_execution(command, cwd, success, proc.returncode, duration_ms)

    if success:
        return CommandResult(command=command, output=stdout, success=True, returncode=0)

    return CommandResult(
        command=command,
        output=f"{stdout}\n{stderr}",
        success=False,
        returncode=proc.returncode,
        error=CommandError(
            detail=_describe_exit(proc.returncode),
            returncode=proc.returncode,
            command=command,
        ),
    )


def compose_command(base: str, arguments: dict[str, str]) -> str:
    """Append argument values to ``base`` in insertion order, space separated."""
    command = base
    for value in arguments.values():
        command = f"{command} {value}"
    return command
