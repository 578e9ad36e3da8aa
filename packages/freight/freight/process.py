"""Blocking child-process execution with inherited standard streams."""

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .errors import ToolSpawnError

logger = logging.getLogger(__name__)

Command = Sequence[Union[str, Path]]

# Takes an argument vector, returns the raw exit status.
ProcessRunner = Callable[[List[str]], int]


def format_command(cmd: Command) -> str:
    """Render an argument vector for log and error messages."""
    return " ".join(str(part) for part in cmd)


def run_process(cmd: Command, cwd: Optional[Path] = None) -> int:
    """
    Run a command to completion and return its exit status.

    stdin, stdout and stderr are inherited from the calling process, so the
    child's output goes straight to the terminal. A non-zero exit status is
    returned, not raised; deciding what it means is up to the caller.

    Raises:
        ToolSpawnError: The program could not be started (missing binary,
            permission problem, or another OS-level spawn failure).
    """
    argv = [str(part) for part in cmd]
    logger.debug(f"Running: {format_command(argv)}")

    try:
        process = subprocess.Popen(argv, cwd=cwd)
    except OSError as e:
        raise ToolSpawnError(argv[0], e) from e

    return_code = process.wait()
    logger.debug(f"{argv[0]} exited with status {return_code}")
    return return_code
