"""
Unified dialog entry point.

`Dialog` routes every operation to the kdialog or zenity adapter selected for
it and normalizes the outcome, so callers get the same result contract from
both backends. A process-wide default instance is created on first use via
backend detection; `preferredBackend_override` replaces its backend.

The default instance is shared and not thread-safe: serialize overrides with
any dialog calls running on other threads.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from deskdialog.common.options import optionMapping_get
from deskdialog.common.process import ProcessRunner
from deskdialog.common.settings import settings
from deskdialog.common.types import Answer, Backend, Color, DialogOptions, FileSelectionOptions
from deskdialog.dialog import normalize
from deskdialog.dialog.detect import backend_resolve
from deskdialog.dialog.progress import DialogProgressBar
from deskdialog.kdialog.backend import KDialogBackend
from deskdialog.zenity.backend import FormField, ZenityBackend, ZenityListOptions

logger = logging.getLogger(__name__)

__all__ = [
    "Dialog",
    "default_get",
    "preferredBackend_get",
    "preferredBackend_override",
]

DialogOptionsLike = Union[DialogOptions, Mapping[str, Any], None]

KDIALOG_DATE_FORMAT = "dd MM yyyy"
ZENITY_DATE_FORMAT = "%d %m %Y"
KDIALOG_COLOR_FORMAT = "%d %d %d"


def kdialogOptions_get(options: DialogOptionsLike) -> dict[str, Any]:
    """Unified options as kdialog options (same names)."""
    return optionMapping_get(options)


def zenityOptions_get(options: DialogOptionsLike, **overrides: Any) -> dict[str, Any]:
    """
    Unified options as zenity options.

    `geometry` becomes width/height; keyword overrides replace caller values.
    """
    mapping = optionMapping_get(options)
    geometry = mapping.pop("geometry", None)
    if geometry is not None:
        mapping["width"], mapping["height"] = geometry
    mapping.update(overrides)
    return mapping


class Dialog:
    """Backend-independent dialogs."""

    def __init__(
        self,
        backend: Backend,
        runner: Optional[ProcessRunner] = None,
        qdbus_command: str = "qdbus",
    ) -> None:
        """
        Initialize dialog context.

        Args:
            backend: KDIALOG or ZENITY.
            runner: Process runner shared by both adapters.
            qdbus_command: qdbus binary for kdialog progress bars.

        Raises:
            ValueError: If backend is Backend.NONE.
        """
        self._runner: ProcessRunner = runner or ProcessRunner()
        self.kdialog: KDialogBackend = KDialogBackend(self._runner, qdbus_command=qdbus_command)
        self.zenity: ZenityBackend = ZenityBackend(self._runner)
        self.backend: Backend = Backend.ZENITY
        self.backend_set(backend)

    @classmethod
    def detected_create(
        cls,
        runner: Optional[ProcessRunner] = None,
        preferred: Optional[str] = None,
        qdbus_command: str = "qdbus",
    ) -> "Dialog":
        """Create a context for the detected (or preferred) backend."""
        runner = runner or ProcessRunner()
        backend = backend_resolve(runner, preferred=preferred)
        logger.debug("Using %s backend", backend.value)
        return cls(backend, runner=runner, qdbus_command=qdbus_command)

    def backend_set(self, backend: Union[Backend, str]) -> None:
        """
        Select backend, bypassing detection.

        Raises:
            ValueError: If backend is unknown or NONE.
        """
        if isinstance(backend, str):
            backend = Backend.fromName_get(backend)
        if backend is Backend.NONE:
            raise ValueError("A dialog backend must be kdialog or zenity")
        self.backend = backend

    @property
    def _isKdialog(self) -> bool:
        return self.backend is Backend.KDIALOG

    # =========================================================================
    # Questions
    # =========================================================================

    def yesNo_ask(self, text: str, options: DialogOptionsLike = None) -> bool:
        """Return True if "Yes" was selected."""
        if self._isKdialog:
            return self.kdialog.yesNo_ask(text, kdialogOptions_get(options))
        return self.zenity.question_ask(text, zenityOptions_get(options)).lower() == "yes"

    def yesNoCancel_ask(self, text: str, options: DialogOptionsLike = None) -> Answer:
        if self._isKdialog:
            return self.kdialog.yesNoCancel_ask(text, kdialogOptions_get(options))
        label = self.zenity.question_ask(
            text, zenityOptions_get(options, extra_buttons=["Cancel"])
        )
        return normalize.answer_fromLabel(label)

    def warningYesNo_ask(self, text: str, options: DialogOptionsLike = None) -> bool:
        if self._isKdialog:
            return self.kdialog.warningYesNo_ask(text, kdialogOptions_get(options))
        label = self.zenity.warning_show(
            text, zenityOptions_get(options, ok_label="Yes", extra_buttons=["No"])
        )
        return normalize.answer_fromLabel(label) is Answer.YES

    def warningYesNoCancel_ask(self, text: str, options: DialogOptionsLike = None) -> Answer:
        if self._isKdialog:
            return self.kdialog.warningYesNoCancel_ask(text, kdialogOptions_get(options))
        label = self.zenity.warning_show(
            text, zenityOptions_get(options, ok_label="Yes", extra_buttons=["No", "Cancel"])
        )
        return normalize.answer_fromLabel(label)

    def warningContinueCancel_ask(self, text: str, options: DialogOptionsLike = None) -> bool:
        """Return True if "Continue" was selected."""
        if self._isKdialog:
            return self.kdialog.warningContinueCancel_ask(text, kdialogOptions_get(options))
        label = self.zenity.warning_show(
            text, zenityOptions_get(options, ok_label="Continue", extra_buttons=["Cancel"])
        )
        return normalize.answer_fromLabel(label) is Answer.YES

    # =========================================================================
    # Messages
    # =========================================================================

    def warning_show(self, text: str, options: DialogOptionsLike = None) -> bool:
        """Show a warning; True when acknowledged with the ok button."""
        if self._isKdialog:
            return self.kdialog.sorry_show(text, kdialogOptions_get(options))
        return self.zenity.warning_show(text, zenityOptions_get(options)) == "yes"

    def error_show(self, text: str, options: DialogOptionsLike = None) -> bool:
        if self._isKdialog:
            return self.kdialog.error_show(text, kdialogOptions_get(options))
        return self.zenity.error_show(text, zenityOptions_get(options)) == "yes"

    def info_show(self, text: str, options: DialogOptionsLike = None) -> bool:
        if self._isKdialog:
            return self.kdialog.msgBox_show(text, kdialogOptions_get(options))
        return self.zenity.info_show(text, zenityOptions_get(options)) == "yes"

    # =========================================================================
    # Prompts
    # =========================================================================

    def input_prompt(
        self, text: str, init: Optional[str] = None, options: DialogOptionsLike = None
    ) -> Optional[str]:
        if self._isKdialog:
            return self.kdialog.inputBox_prompt(text, init, kdialogOptions_get(options))
        return self.zenity.entry_prompt(text, init, options=zenityOptions_get(options))

    def password_prompt(self, text: str, options: DialogOptionsLike = None) -> Optional[str]:
        """
        Ask for a password.

        zenity's password dialog has no caption, so `text` becomes the
        window title unless one is given.
        """
        if self._isKdialog:
            return self.kdialog.password_prompt(text, kdialogOptions_get(options))
        zenity_options = zenityOptions_get(options)
        zenity_options.setdefault("title", text)
        return self.zenity.password_prompt(options=zenity_options)

    def newPassword_prompt(self, text: str, options: DialogOptionsLike = None) -> Optional[str]:
        """
        Ask for a new password with confirmation.

        kdialog confirms natively. zenity shows a two-field form and asks
        again until both entries match or the user cancels.
        """
        if self._isKdialog:
            return self.kdialog.newPassword_prompt(text, kdialogOptions_get(options))
        zenity_options = zenityOptions_get(options)
        zenity_options.setdefault("title", text)
        fields = [
            FormField("password", "New Password"),
            FormField("password", "Confirm"),
        ]
        separator = settings.FORM_SEPARATOR
        return normalize.newPassword_confirm(
            lambda caption: self.zenity.form_prompt(
                fields, text=caption, separator=separator, options=zenity_options
            ),
            separator=separator,
        )

    def textBox_show(self, file_path: str, options: DialogOptionsLike = None) -> bool:
        """Display a text file; True when closed with the ok button."""
        if self._isKdialog:
            return self.kdialog.textBox_show(file_path, kdialogOptions_get(options))
        shown = self.zenity.textInfo_show(
            filename=file_path, editable=False, options=zenityOptions_get(options)
        )
        return shown is not None

    def textBoxInput_prompt(
        self, text: str, init: Optional[str] = None, options: DialogOptionsLike = None
    ) -> Optional[str]:
        """Multi-line text prompt."""
        if self._isKdialog:
            return self.kdialog.textInputBox_prompt(text, init, kdialogOptions_get(options))
        zenity_options = zenityOptions_get(options)
        zenity_options.setdefault("title", text)
        if not init:
            return self.zenity.textInfo_show(editable=True, options=zenity_options)
        # zenity text-info can only be seeded from a file.
        handle, path = tempfile.mkstemp(prefix=settings.FIFO_DIR_PREFIX, suffix=".txt")
        try:
            with os.fdopen(handle, "w") as seed:
                seed.write(init)
            return self.zenity.textInfo_show(filename=path, editable=True, options=zenity_options)
        finally:
            os.unlink(path)

    # =========================================================================
    # Selections
    # =========================================================================

    def combo_select(
        self, text: str, items: Sequence[str], options: DialogOptionsLike = None
    ) -> Optional[str]:
        if self._isKdialog:
            return self.kdialog.comboBox_select(text, items, None, kdialogOptions_get(options))
        return self.zenity.form_prompt(
            [FormField("combo", text, tuple(items))], options=zenityOptions_get(options)
        )

    def menu_select(
        self, text: str, items: Sequence[str], options: DialogOptionsLike = None
    ) -> Optional[str]:
        """Pick one item; returns its label."""
        if self._isKdialog:
            tag = self.kdialog.menu_select(text, items, None, kdialogOptions_get(options))
            return normalize.menuLabel_get(items, tag)
        selected = self.zenity.list_select(
            text,
            ["", ""],
            [("FALSE", item) for item in items],
            mode="radiolist",
            list_options=ZenityListOptions(hide_header=True),
            options=zenityOptions_get(options),
        )
        return selected or None

    def checklist_select(
        self,
        text: str,
        items: Sequence[str],
        selected: Iterable[str] = (),
        options: DialogOptionsLike = None,
    ) -> Optional[list[str]]:
        """
        Pick any number of items.

        Args:
            text: Caption.
            items: Entries.
            selected: Labels checked initially.

        Returns:
            Checked labels in item order, or None if cancelled.
        """
        initial = normalize.checklistSelection_build(items, selected)
        if self._isKdialog:
            checked = self.kdialog.checklist_select(
                text, items, initial, kdialogOptions_get(options)
            )
            if checked is None:
                return None
            return normalize.checklistLabels_get(items, checked)
        out = self.zenity.list_select(
            text,
            ["", ""],
            [("TRUE" if initial[tag] else "FALSE", item) for tag, item in enumerate(items, start=1)],
            mode="checklist",
            list_options=ZenityListOptions(hide_header=True, separator=settings.LIST_SEPARATOR),
            options=zenityOptions_get(options),
        )
        if out is None:
            return None
        return [label for label in out.split(settings.LIST_SEPARATOR) if label]

    # =========================================================================
    # Notifications
    # =========================================================================

    def passiveNotification_show(
        self,
        text: str,
        timeout: int,
        icon: Optional[str] = None,
        options: DialogOptionsLike = None,
    ) -> None:
        """
        Show a passive notification without waiting.

        The timeout has no effect through zenity; prefer Notifier for more
        control.
        """
        if self._isKdialog:
            self.kdialog.passivePopup_show(text, timeout, icon, kdialogOptions_get(options))
            return
        zenity_options = zenityOptions_get(options)
        zenity_options.setdefault("timeout", 0)
        self.zenity.notification_show(text, icon, zenity_options)

    # =========================================================================
    # Files
    # =========================================================================

    def fileSelection_get(
        self,
        start_dir: str,
        filters: Optional[Sequence[str]] = None,
        mode: Optional[FileSelectionOptions] = None,
        options: DialogOptionsLike = None,
    ) -> Optional[Union[str, list[str]]]:
        """
        Pick a file, several files, or a directory.

        Returns:
            Path, list of paths when `mode.multiple`, or None if cancelled.

        Raises:
            ValueError: If `multiple` is combined with `save` or `directory`.
        """
        mode = mode or FileSelectionOptions()
        if mode.multiple and (mode.save or mode.directory):
            raise ValueError("`multiple` is mutually exclusive with `save` and `directory`.")

        if self._isKdialog:
            kdialog_options = kdialogOptions_get(options)
            if mode.save:
                return self.kdialog.saveFilename_get(start_dir, filters, kdialog_options)
            if mode.directory:
                return self.kdialog.existingDirectory_get(start_dir, kdialog_options)
            out = self.kdialog.openFilename_get(
                start_dir, filters, mode.multiple, kdialog_options
            )
        else:
            out = self.zenity.fileSelection_get(
                start_dir,
                filters,
                mode,
                separator=settings.LIST_SEPARATOR if mode.multiple else None,
                options=zenityOptions_get(options),
            )

        if out is None or not mode.multiple:
            return out
        return [path for path in out.split("\n") if path]

    # =========================================================================
    # Progress
    # =========================================================================

    def progressBar_create(
        self,
        text: str,
        size: int,
        autoclose: bool = False,
        options: DialogOptionsLike = None,
    ) -> Optional[DialogProgressBar]:
        """
        Open a progress bar on a 0..size scale.

        kdialog's bar is a separate process and outlives this program.
        zenity's bar keeps running while this program is alive: set
        `autoclose` and call close() when done. zenity bars run on 0..100, so
        values are mapped down with integer division.

        Raises:
            ValueError: If size is not positive.
        """
        if size <= 0:
            raise ValueError("Progress bar size must be positive")
        if self._isKdialog:
            inner = self.kdialog.progressBar_create(
                text, size, autoclose, kdialogOptions_get(options)
            )
            if inner is None:
                return None
            return DialogProgressBar(Backend.KDIALOG, inner, size, autoclose)
        zenity_bar = self.zenity.progress_create(
            text, 0, autoclose=autoclose, options=zenityOptions_get(options)
        )
        return DialogProgressBar(Backend.ZENITY, zenity_bar, size, autoclose)

    # =========================================================================
    # Values
    # =========================================================================

    def color_get(
        self, default: Optional[Sequence[int]] = None, options: DialogOptionsLike = None
    ) -> Optional[Color]:
        """
        Pick a color.

        Args:
            default: Initial (r, g, b), components 0..255.

        Returns:
            Selected Color, or None if cancelled.

        Raises:
            ValueError: If default does not have exactly three components.
        """
        initial = normalize.colorComponents_validate(default)
        if self._isKdialog:
            out = self.kdialog.color_get(
                KDIALOG_COLOR_FORMAT,
                initial.hex_get() if initial else None,
                kdialogOptions_get(options),
            )
            return normalize.colorFromKdialog_parse(out)
        out = self.zenity.colorSelection_get(
            initial.rgb_get() if initial else None, False, zenityOptions_get(options)
        )
        return normalize.colorFromZenity_parse(out)

    def slider_get(
        self,
        text: str,
        minimum: int,
        maximum: int,
        step: int,
        options: DialogOptionsLike = None,
    ) -> Optional[int]:
        """Pick an integer in [minimum, maximum]."""
        if self._isKdialog:
            value = self.kdialog.slider_get(
                text, minimum, maximum, step, kdialogOptions_get(options)
            )
        else:
            value = self.zenity.scale_get(
                text,
                minimum,
                maximum,
                step,
                normalize.sliderDefault_get(minimum, maximum),
                zenityOptions_get(options),
            )
        return normalize.value_clamp(value, minimum, maximum)

    def calendar_get(self, text: str, options: DialogOptionsLike = None) -> Optional[date]:
        if self._isKdialog:
            out = self.kdialog.calendar_get(text, KDIALOG_DATE_FORMAT, kdialogOptions_get(options))
        else:
            out = self.zenity.calendar_get(
                text, format=ZENITY_DATE_FORMAT, options=zenityOptions_get(options)
            )
        return normalize.calendarDate_parse(out)


_default: Optional[Dialog] = None


def default_get() -> Dialog:
    """Return the process-wide Dialog, detecting the backend on first use."""
    global _default
    if _default is None:
        _default = Dialog.detected_create()
    return _default


def preferredBackend_override(backend: Union[Backend, str]) -> None:
    """
    Force the default Dialog onto a backend, bypassing detection.

    Consider constructing a Dialog directly instead.
    """
    global _default
    if _default is None:
        _default = Dialog(Backend.fromName_get(backend) if isinstance(backend, str) else backend)
    else:
        _default.backend_set(backend)


def preferredBackend_get() -> Backend:
    """Return the default Dialog's backend."""
    return default_get().backend
