"""Backend-independent dialogs, detection and progress handles."""

from deskdialog.dialog.detect import backend_resolve, binary_find
from deskdialog.dialog.progress import DialogProgressBar, ProgressBar
from deskdialog.dialog.unified import Dialog, default_get, preferredBackend_get, preferredBackend_override

__all__ = [
    "Dialog",
    "DialogProgressBar",
    "ProgressBar",
    "backend_resolve",
    "binary_find",
    "default_get",
    "preferredBackend_get",
    "preferredBackend_override",
]
