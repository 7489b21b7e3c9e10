"""External command execution helpers.

Build tools and SpotBugs are run through these coroutines so that every
invocation gets the same working-directory, environment and output-capture
handling.
"""

import asyncio
import os
import shlex
import time
from dataclasses import dataclass
from pathlib import Path

from spotscan.core.exceptions.errors import CommandError
from spotscan.core.logger.logger import log_command_output


@dataclass
class CommandResult:
    """Result of an external command.

    Attributes:
        command: The executed command and its arguments.
        return_code: Exit status of the command.
        output: Combined standard output and standard error.
        duration_seconds: Time taken by the command.
    """

    command: list[str]
    return_code: int
    output: str
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.return_code == 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)


def command_environment(overrides: dict[str, str] | None = None) -> dict[str, str]:
    """Return the inherited environment with tool-specific overrides applied."""
    env = os.environ.copy()
    if overrides:
        env.update(overrides)
    return env


async def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    timeout: int | None = None,
) -> CommandResult:
    """Run a command and capture its combined output.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        env: Environment variables. Inherits the current environment if None.
        timeout: Maximum duration in seconds, or None to wait forever.

    Returns:
        CommandResult with the exit status and output.

    Raises:
        CommandError: If the command can't be started or times out.
    """
    command_line = shlex.join(cmd)
    start_time = time.time()

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=cwd,
            env=env if env is not None else command_environment(),
        )
    except OSError as e:
        raise CommandError(
            f"Command couldn't be executed: {e}",
            exit_code=1,
            command=command_line,
        ) from e

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        raise CommandError(
            f"Command timed out after {timeout} seconds",
            exit_code=-1,
            command=command_line,
        ) from e

    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    log_command_output(command_line, output)

    return CommandResult(
        command=list(cmd),
        return_code=process.returncode or 0,
        output=output,
        duration_seconds=time.time() - start_time,
    )


async def run_checked(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    timeout: int | None = None,
) -> CommandResult:
    """Run a command, raising CommandError on a non-zero exit status."""
    result = await run_command(cmd, cwd=cwd, env=env, timeout=timeout)

    if not result.success:
        raise CommandError(
            "Command returned a non zero exit status",
            exit_code=result.return_code,
            output=result.output,
            command=result.command_line,
        )

    return result


async def run_with_text_error_detection(
    cmd: list[str],
    error_text: str,
    message: str,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    timeout: int | None = None,
) -> CommandResult:
    """Run a command that may report failure in its output only.

    Some wrapper scripts (grailsw) exit with status 0 even when the build
    fails; the presence of ``error_text`` in the output is treated as failure.

    Raises:
        CommandError: On non-zero exit or when ``error_text`` is printed.
    """
    result = await run_checked(cmd, cwd=cwd, env=env, timeout=timeout)

    if error_text in result.output:
        raise CommandError(
            message,
            exit_code=1,
            output=result.output,
            command=result.command_line,
        )

    return result
