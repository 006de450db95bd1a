"""
deskdialog: desktop dialogs through kdialog or zenity
Message boxes, prompts, pickers and progress bars without caring which
dialog backend is installed
"""

__version__ = "1.0.0"
__author__ = "deskdialog contributors"

from deskdialog.common.types import (  # noqa: E402
    Answer,
    Backend,
    Color,
    DialogOptions,
    FileSelectionOptions,
)
from deskdialog.dialog.detect import backend_resolve  # noqa: E402
from deskdialog.dialog.progress import DialogProgressBar, ProgressBar  # noqa: E402
from deskdialog.dialog.unified import (  # noqa: E402
    Dialog,
    default_get,
    preferredBackend_get,
    preferredBackend_override,
)
from deskdialog.notify.notifier import NotificationOptions, Notifier  # noqa: E402

__all__ = [
    "Answer",
    "Backend",
    "Color",
    "Dialog",
    "DialogOptions",
    "DialogProgressBar",
    "FileSelectionOptions",
    "NotificationOptions",
    "Notifier",
    "ProgressBar",
    "backend_resolve",
    "default_get",
    "preferredBackend_get",
    "preferredBackend_override",
]
