"""
Program runner for the integration harness.

Runs a program to completion and captures its combined output. Commands are
logged at debug level; failures are only raised by :func:`require_success`,
so tests can also assert on expected failures.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from cabalkit.core.exceptions import ProgramFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """Outcome of running a program."""

    command: List[str]
    exit_code: int
    output: str
    cwd: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def require_success(result: Result) -> Result:
    """
    Return ``result`` if the program succeeded.

    Raises:
        ProgramFailedError: If the exit code is non-zero
    """
    if not result.succeeded:
        logger.error(f"Command failed: {' '.join(result.command)}\n{result.output}")
        raise ProgramFailedError(result)
    return result


class ProgramRunner:
    """
    Runs programs for the harness.

    Example:
        >>> runner = ProgramRunner(timeout=600)
        >>> result = runner.run("ghc-pkg", ["list"])
        >>> result.succeeded
        True
    """

    def __init__(
        self,
        environment: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
    ):
        """
        Args:
            environment: Extra environment variables for every program
            timeout: Seconds before a program is killed (None: no limit)
        """
        self.environment = dict(environment or {})
        self.timeout = timeout

    def run(
        self,
        program: Union[str, Path],
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        stdin: Optional[str] = None,
    ) -> Result:
        """
        Run a program and capture stdout and stderr together.

        Raises:
            OSError: If the program cannot be started
            subprocess.TimeoutExpired: If the program exceeds the timeout
        """
        command = [str(program), *args]
        cwd_str = str(cwd) if cwd is not None else None
        logger.debug(f"Running {' '.join(command)} (cwd={cwd_str or '.'})")

        env = None
        if self.environment:
            env = {**os.environ, **self.environment}

        completed = subprocess.run(
            command,
            cwd=cwd_str,
            env=env,
            input=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=self.timeout,
            check=False,
        )
        result = Result(
            command=command,
            exit_code=completed.returncode,
            output=completed.stdout or "",
            cwd=cwd_str,
        )
        logger.debug(f"Exit code {result.exit_code}: {' '.join(command)}")
        return result
