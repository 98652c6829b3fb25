"""Synchronous execution of VCS commands."""

import subprocess
from pathlib import Path
from typing import Protocol

from common.env import env
from common.logger import get_logger

from .errors import CommandFailure, CommandTimeout

logger = get_logger(__name__)


class CommandRunner(Protocol):
    """Callable that runs a command and returns its combined output."""

    def __call__(self, args: list[str], cwd: Path) -> str: ...


def run_command(args: list[str], cwd: Path, timeout: float | None = None) -> str:
    """
    Run a command in a working directory and capture stdout and stderr.

    Args:
        args: Command and arguments
        cwd: Working directory
        timeout: Seconds to wait, defaults to CODE_CRITIC_COMMAND_TIMEOUT

    Returns:
        Combined stdout and stderr as text

    Raises:
        CommandTimeout: If the command does not finish in time
        CommandFailure: If the command cannot be started or exits non-zero
    """
    if timeout is None:
        timeout = env.command_timeout()

    logger.debug(f"Running {' '.join(args)} in {cwd}", extra={"markup": False})
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandTimeout(
            f"Command did not finish within {timeout} seconds: {' '.join(args)}"
        ) from e
    except OSError as e:
        raise CommandFailure(f"Unable to run {' '.join(args)}: {e}") from e

    if result.returncode != 0:
        raise CommandFailure(
            f"Command failed with exit status {result.returncode}: {' '.join(args)}\n"
            f"{result.stdout}",
            output=result.stdout,
        )
    return result.stdout
