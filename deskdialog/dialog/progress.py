"""Backend-independent progress bar handle."""

from __future__ import annotations

from typing import Protocol

from deskdialog.common.settings import settings
from deskdialog.common.types import Backend


class ProgressBar(Protocol):
    """Contract shared by the kdialog and zenity progress bars."""

    def labelText_set(self, text: str) -> None:
        """
        Replace the dialog label.

        Args:
            text: New label.
        """

    def progress_set(self, n: int) -> None:
        """
        Set progress value on the bar's own scale.

        Args:
            n: New value.
        """

    def progress_get(self) -> int:
        """
        Return the last value set.

        Returns:
            Cached progress value.
        """

    def close(self) -> None:
        """Close the dialog."""

    def isAlive_check(self) -> bool:
        """
        Return True while the dialog is open.

        Returns:
            Liveness flag.
        """


class DialogProgressBar:
    """
    Progress bar on the caller's 0..size scale.

    kdialog receives values unchanged. zenity only understands 0..100, so
    values are mapped with `n * 100 // size` (rounded down).
    """

    def __init__(self, backend: Backend, inner: ProgressBar, size: int, autoclose: bool) -> None:
        """
        Wrap a backend progress bar.

        Args:
            backend: Backend that created `inner`.
            inner: Backend progress bar.
            size: Caller's maximum value.
            autoclose: Close when progress reaches size.
        """
        self.backend: Backend = backend
        self.inner: ProgressBar = inner
        self.size: int = size
        self.autoclose: bool = autoclose
        self._progress: int = 0
        self._closed: bool = False

    def labelText_set(self, text: str) -> None:
        if not self.isAlive_check():
            return
        self.inner.labelText_set(text)

    def progress_set(self, n: int) -> None:
        """
        Set progress.

        Args:
            n: Value on the 0..size scale.
        """
        if not self.isAlive_check():
            return
        if self.backend is Backend.ZENITY:
            self.inner.progress_set(int(n) * settings.ZENITY_PROGRESS_SCALE // self.size)
        else:
            self.inner.progress_set(int(n))
        self._progress = int(n)
        if self.autoclose and n >= self.size:
            self._closed = True

    def progress_get(self) -> int:
        """Return last value set, on the caller's scale."""
        return self._progress

    def close(self) -> None:
        self._closed = True
        self.inner.close()

    def isAlive_check(self) -> bool:
        return not self._closed and self.inner.isAlive_check()
