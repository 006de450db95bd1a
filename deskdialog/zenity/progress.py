"""
zenity progress bar driven through named pipes.

`zenity --progress` reads its state from stdin: integer lines set the
percentage and lines starting with `#` replace the label. A relay shell
process feeds zenity's stdin from a progress FIFO and, once zenity exits
(completion or cancel), writes a sentinel into a second completion FIFO.
A daemon waiter thread blocks on the completion FIFO, then marks the
handle closed and removes both FIFOs.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

from deskdialog.common.process import ProcessRunner
from deskdialog.common.settings import settings

logger = logging.getLogger(__name__)

__all__ = ["ZenityProgressBar", "RELAY_SCRIPT"]

# $1 progress FIFO, $2 completion FIFO, remaining args are the zenity argv.
# fd 3 keeps the progress FIFO open so zenity never sees EOF between writes.
RELAY_SCRIPT = (
    'exec 3<>"$1"; done_fifo="$2"; shift 2; '
    '"$@" <&3; '
    f'echo {settings.PROGRESS_SENTINEL} > "$done_fifo"'
)


class ZenityProgressBar:
    """Pipe-relay zenity progress dialog on the 0..100 scale."""

    def __init__(
        self,
        runner: ProcessRunner,
        zenity_args: Sequence[str],
        autoclose: bool = False,
    ) -> None:
        """
        Create FIFOs, start relay and waiter.

        Args:
            runner: Process runner used to spawn the relay.
            zenity_args: Arguments for `zenity`, starting with `--progress`.
            autoclose: zenity closes itself at 100.
        """
        self._runner: ProcessRunner = runner
        self.autoclose: bool = autoclose
        self._progress: int = 0
        self._alive: bool = True
        self._lock: threading.Lock = threading.Lock()

        self._dir: Path = Path(tempfile.mkdtemp(prefix=settings.FIFO_DIR_PREFIX))
        self.progress_path: Path = self._dir / "progress"
        self.done_path: Path = self._dir / "done"
        os.mkfifo(self.progress_path)
        os.mkfifo(self.done_path)

        # Held read-write so early writes are buffered until the relay attaches.
        self._fd: Optional[int] = os.open(self.progress_path, os.O_RDWR | os.O_NONBLOCK)
        # Held read-write so the waiter never blocks in open() and a sentinel
        # written by close() stays buffered until the waiter reads it.
        self._done_fd: Optional[int] = os.open(self.done_path, os.O_RDWR | os.O_NONBLOCK)

        self._relay: Any = runner.process_spawn(
            settings.RELAY_SHELL,
            [
                "-c",
                RELAY_SCRIPT,
                "deskdialog-relay",
                str(self.progress_path),
                str(self.done_path),
                settings.ZENITY_BINARY,
                *zenity_args,
            ],
            new_session=True,
        )

        self._waiter: threading.Thread = threading.Thread(
            target=self._completion_wait, name="zenity-progress-waiter", daemon=True
        )
        self._waiter.start()

    def _completion_wait(self) -> None:
        try:
            with open(self.done_path, "r") as done:
                token = done.readline().strip()
            logger.debug("zenity progress finished: %r", token)
        except OSError as error:
            logger.debug("zenity progress completion FIFO unavailable: %s", error)
        finally:
            self._shutdown()

    def _shutdown(self) -> None:
        with self._lock:
            self._alive = False
            for fd in (self._fd, self._done_fd):
                if fd is not None:
                    os.close(fd)
            self._fd = None
            self._done_fd = None
        shutil.rmtree(self._dir, ignore_errors=True)

    def _line_write(self, line: str) -> None:
        with self._lock:
            if not self._alive or self._fd is None:
                return
            try:
                os.write(self._fd, (line + "\n").encode())
            except BlockingIOError:
                logger.debug("zenity progress pipe full, dropped %r", line)

    def labelText_set(self, text: str) -> None:
        """Replace the dialog label."""
        self._line_write(settings.PROGRESS_LABEL_PREFIX + " ".join(text.splitlines()))

    def progress_set(self, n: int) -> None:
        """
        Set percentage.

        Args:
            n: Value on the 0..100 scale.
        """
        if not self._alive:
            return
        value = int(n)
        self._line_write(str(value))
        self._progress = value
        if self.autoclose and value >= settings.ZENITY_PROGRESS_SCALE:
            # zenity exits on its own; the waiter removes the FIFOs.
            self._alive = False

    def progress_get(self) -> int:
        """Return last percentage set."""
        return self._progress

    def close(self) -> None:
        """Terminate the dialog and release the waiter."""
        with self._lock:
            self._alive = False
        if self._relay is not None:
            self._runner.processGroup_terminate(self._relay)
            self._relay = None
        with self._lock:
            # None once the waiter has already shut down.
            if self._done_fd is not None:
                try:
                    os.write(self._done_fd, (settings.PROGRESS_SENTINEL + "\n").encode())
                except BlockingIOError:
                    logger.debug("zenity completion pipe full, waiter already signalled")
        self._waiter.join(timeout=1.0)

    def isAlive_check(self) -> bool:
        """Return True until zenity exits or close() is called."""
        return self._alive

    def waiter_join(self, timeout: Optional[float] = None) -> None:
        """Block until the completion waiter has finished."""
        self._waiter.join(timeout)

    @property
    def relay(self) -> Optional[subprocess.Popen[bytes]]:
        """Relay process handle, None after close()."""
        return self._relay
