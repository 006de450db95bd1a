"""kdialog progress bar driven over D-Bus."""

from __future__ import annotations

import logging
from typing import Optional

from deskdialog.common.process import ProcessRunner

logger = logging.getLogger(__name__)


class KDialogProgressBar:
    """
    Remote-controlled kdialog progress dialog.

    `kdialog --progressbar` detaches and prints a D-Bus service name and
    object path. Every mutation is a separate `qdbus` call addressed to that
    pair. The progress value is cached locally and never read back, so it
    reflects the last value set even if the window was closed externally.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        service: str,
        path: str,
        size: int,
        autoclose: bool = False,
        qdbus_command: str = "qdbus",
    ) -> None:
        """
        Initialize progress bar handle.

        Args:
            runner: Process runner used for qdbus calls.
            service: D-Bus service printed by kdialog.
            path: D-Bus object path printed by kdialog.
            size: Maximum progress value.
            autoclose: Close when progress reaches size.
            qdbus_command: qdbus binary name.
        """
        self._runner: ProcessRunner = runner
        self.service: str = service
        self.path: str = path
        self.size: int = size
        self.autoclose: bool = autoclose
        self._qdbus: str = qdbus_command
        self._progress: int = 0
        self._alive: bool = True

    @classmethod
    def fromReference_create(
        cls,
        runner: ProcessRunner,
        reference: str,
        size: int,
        autoclose: bool = False,
        qdbus_command: str = "qdbus",
    ) -> Optional["KDialogProgressBar"]:
        """
        Build handle from kdialog's `<service> <path>` output.

        Returns:
            Handle, or None if the reference is malformed.
        """
        parts = reference.split()
        if len(parts) < 2:
            logger.warning("Unexpected kdialog progressbar reference: %r", reference)
            return None
        return cls(runner, parts[0], parts[1], size, autoclose, qdbus_command)

    def _call(self, *args: str) -> None:
        result = self._runner.command_run(self._qdbus, [self.service, self.path, *args])
        if not result.ok:
            logger.debug("qdbus %s failed, dialog is gone: %s", args[0], result.stderr.strip())
            self._alive = False

    def labelText_set(self, text: str) -> None:
        """Replace the dialog label."""
        if not self._alive:
            return
        self._call("setLabelText", text)

    def progress_set(self, n: int) -> None:
        """
        Set progress value.

        Args:
            n: New value on the 0..size scale.
        """
        if not self._alive:
            return
        self._call("Set", "", "value", str(int(n)))
        self._progress = int(n)
        if self.autoclose and n >= self.size:
            self.close()

    def progress_get(self) -> int:
        """Return last value set."""
        return self._progress

    def close(self) -> None:
        """Close the dialog; further calls are no-ops."""
        if not self._alive:
            return
        self._alive = False
        self._call("close")

    def isAlive_check(self) -> bool:
        """Return True until the dialog has been closed or a qdbus call failed."""
        return self._alive
