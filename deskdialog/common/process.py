"""External process execution for dialog backends."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Completed process outcome."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        """True when the process exited with status 0."""
        return self.returncode == 0


class ProcessRunner:
    """Run backend binaries and collect their output."""

    def command_run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> ExecResult:
        """
        Run command to completion.

        Args:
            command: Binary name or path.
            args: Argument tokens.
            cwd: Optional working directory.
            env: Optional environment for the child.

        Returns:
            Exit status and captured output.

        Raises:
            OSError: If the command cannot be launched.
        """
        argv: list[str] = [command, *args]
        logger.debug("exec: %s", argv)
        completed = subprocess.run(
            argv,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            check=False,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
        )
        return ExecResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def process_spawn(
        self,
        command: str,
        args: Sequence[str],
        new_session: bool = False,
    ) -> subprocess.Popen[bytes]:
        """
        Start command without waiting for it.

        Args:
            command: Binary name or path.
            args: Argument tokens.
            new_session: Run the child in its own session and process group.

        Returns:
            Handle of the running process.
        """
        argv: list[str] = [command, *args]
        logger.debug("spawn: %s", argv)
        return subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=new_session,
        )

    def processGroup_terminate(self, process: subprocess.Popen[bytes]) -> None:
        """
        Send SIGTERM to the process group led by a spawned process.

        Args:
            process: Handle returned by process_spawn(new_session=True).
        """
        if process.poll() is not None:
            return
        logger.debug("terminate process group %d", process.pid)
        try:
            os.killpg(process.pid, signal.SIGTERM)
        except ProcessLookupError:
            return
