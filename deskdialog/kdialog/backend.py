"""kdialog backend adapter.

Message boxes (sorry, error, msgbox, ...) return True when closed with the
"Ok" button and False otherwise (for example when escape was pressed).
Prompts return None when the user cancelled.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from deskdialog.common.options import OptionStyle, options_translate
from deskdialog.common.process import ExecResult, ProcessRunner
from deskdialog.common.settings import settings
from deskdialog.common.text import firstInteger_get, home_expand, output_clean
from deskdialog.common.types import Answer
from deskdialog.kdialog.progress import KDialogProgressBar

logger = logging.getLogger(__name__)

KDIALOG_STYLE = OptionStyle()

POPUP_ICONS = ("dialog-information", "dialog-error", "dialog-warning")

ICON_CONTEXTS = (
    "All",
    "Actions",
    "Applications",
    "Devices",
    "MimeTypes",
    "Animation",
    "Category",
    "Emblem",
    "Emote",
    "Place",
    "FileSystem",
    "StatusIcon",
    "International",
)


@dataclass
class KDialogOptions:
    """Options understood by every kdialog dialog"""
    geometry: Optional[tuple[int, int]] = None
    default: Optional[str] = None
    title: Optional[str] = None
    icon: Optional[str] = None
    ok_label: Optional[str] = None
    yes_label: Optional[str] = None
    no_label: Optional[str] = None
    cancel_label: Optional[str] = None
    continue_label: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)


KDialogOptionsLike = Union[KDialogOptions, Mapping[str, Any], None]


def answer_fromCode(code: int) -> Answer:
    """Map a three-way dialog exit status onto an Answer."""
    if code == 0:
        return Answer.YES
    if code == 1:
        return Answer.NO
    return Answer.CANCEL


def fileFilter_build(filters: Optional[Sequence[str]]) -> str:
    """Join filter lines and append the catch-all filter."""
    lines = list(filters or [])
    lines.append("File (*.*)")
    return "\n".join(lines)


class KDialogBackend:
    """Run dialogs through kdialog."""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        qdbus_command: str = "qdbus",
    ) -> None:
        """
        Initialize kdialog adapter.

        Args:
            runner: Process runner; a default runner when omitted.
            qdbus_command: Binary used to drive progress bars.
        """
        self._runner: ProcessRunner = runner or ProcessRunner()
        self._qdbus_command: str = qdbus_command

    def _execute(self, args: list[str], options: KDialogOptionsLike) -> ExecResult:
        argv = args + options_translate(options, KDIALOG_STYLE)
        return self._runner.command_run(settings.KDIALOG_BINARY, argv)

    def _text(self, args: list[str], options: KDialogOptionsLike) -> Optional[str]:
        out = self._execute(args, options)
        if out.returncode == 1:
            return None
        return output_clean(out.stdout)

    # =========================================================================
    # Questions
    # =========================================================================

    def yesNo_ask(self, text: str, options: KDialogOptionsLike = None) -> bool:
        """Return True if the "Yes" button was selected."""
        return self._execute(["--yesno", text], options).ok

    def yesNoCancel_ask(self, text: str, options: KDialogOptionsLike = None) -> Answer:
        """Ask a yes/no/cancel question."""
        return answer_fromCode(self._execute(["--yesnocancel", text], options).returncode)

    def warningYesNo_ask(self, text: str, options: KDialogOptionsLike = None) -> bool:
        """Return True if the "Yes" button was selected."""
        return self._execute(["--warningyesno", text], options).ok

    def warningContinueCancel_ask(self, text: str, options: KDialogOptionsLike = None) -> bool:
        """Return True if the "Continue" button was selected."""
        return self._execute(["--warningcontinuecancel", text], options).ok

    def warningYesNoCancel_ask(self, text: str, options: KDialogOptionsLike = None) -> Answer:
        """Ask a yes/no/cancel question with a warning icon."""
        return answer_fromCode(
            self._execute(["--warningyesnocancel", text], options).returncode
        )

    # =========================================================================
    # Message boxes
    # =========================================================================

    def sorry_show(self, text: str, options: KDialogOptionsLike = None) -> bool:
        return self._execute(["--sorry", text], options).ok

    def detailedSorry_show(
        self, text: str, details: str, options: KDialogOptionsLike = None
    ) -> bool:
        return self._execute(["--detailedsorry", text, details], options).ok

    def error_show(self, text: str, options: KDialogOptionsLike = None) -> bool:
        return self._execute(["--error", text], options).ok

    def detailedError_show(
        self, text: str, details: str, options: KDialogOptionsLike = None
    ) -> bool:
        return self._execute(["--detailederror", text, details], options).ok

    def msgBox_show(self, text: str, options: KDialogOptionsLike = None) -> bool:
        return self._execute(["--msgbox", text], options).ok

    def imgBox_show(self, file_path: str, options: KDialogOptionsLike = None) -> bool:
        return self._execute(["--imgbox", home_expand(file_path)], options).ok

    def textBox_show(self, file_path: str, options: KDialogOptionsLike = None) -> bool:
        return self._execute(["--textbox", home_expand(file_path)], options).ok

    # =========================================================================
    # Prompts
    # =========================================================================

    def inputBox_prompt(
        self, text: str, init: Optional[str] = None, options: KDialogOptionsLike = None
    ) -> Optional[str]:
        return self._text(["--inputbox", text, init or ""], options)

    def imgInputBox_prompt(
        self, file_path: str, init: Optional[str] = None, options: KDialogOptionsLike = None
    ) -> Optional[str]:
        return self._text(["--imginputbox", home_expand(file_path), init or ""], options)

    def password_prompt(self, text: str, options: KDialogOptionsLike = None) -> Optional[str]:
        return self._text(["--password", text], options)

    def newPassword_prompt(self, text: str, options: KDialogOptionsLike = None) -> Optional[str]:
        """Ask for a new password; kdialog asks for confirmation itself."""
        return self._text(["--newpassword", text], options)

    def textInputBox_prompt(
        self, text: str, init: Optional[str] = None, options: KDialogOptionsLike = None
    ) -> Optional[str]:
        """Multi-line text prompt; any non-zero status means cancelled."""
        out = self._execute(["--textinputbox", text, init or ""], options)
        if not out.ok:
            return None
        return output_clean(out.stdout)

    # =========================================================================
    # Lists
    # =========================================================================

    def comboBox_select(
        self,
        text: str,
        items: Sequence[str],
        default: Optional[str] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        """Return the selected item text."""
        args = ["--combobox", text, *items]
        if default is not None:
            args.extend(["--default", default])
        return self._text(args, options)

    def menu_select(
        self,
        text: str,
        items: Sequence[str],
        default: Optional[int] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[int]:
        """
        Show a menu of items.

        Args:
            text: Menu caption.
            items: Menu entries; tagged 1..N.
            default: Tag of the entry selected initially.

        Returns:
            1-based tag of the chosen entry, or None if cancelled.
        """
        args = ["--menu", text]
        for tag, item in enumerate(items, start=1):
            args.extend([str(tag), item])
        if default is not None:
            args.extend(["--default", str(default)])
        out = self._execute(args, options)
        if out.returncode == 1:
            return None
        return firstInteger_get(out.stdout)

    def checklist_select(
        self,
        text: str,
        items: Sequence[str],
        selected: Optional[Mapping[int, bool]] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[dict[int, bool]]:
        """
        Show a checklist.

        Args:
            text: Caption.
            items: Entries; tagged 1..N.
            selected: Tags checked initially, as `{tag: True}`.

        Returns:
            `{tag: checked}` for every tag 1..N, or None if cancelled.
        """
        selected = selected or {}
        args = ["--checklist", text]
        for tag, item in enumerate(items, start=1):
            args.extend([str(tag), item, "on" if selected.get(tag) else "off"])
        out = self._execute(args, options)
        if out.returncode == 1:
            return None
        chosen = {int(match) for match in re.findall(r"\d+", out.stdout)}
        return {tag: tag in chosen for tag in range(1, len(items) + 1)}

    def radioList_select(
        self,
        text: str,
        items: Sequence[str],
        selected: Optional[int] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[int]:
        """
        Show a radio list.

        Returns:
            1-based tag of the chosen item, or None if cancelled.
        """
        args = ["--radiolist", text]
        for tag, item in enumerate(items, start=1):
            args.extend([str(tag), item, "on" if tag == selected else "off"])
        out = self._execute(args, options)
        if out.returncode == 1:
            return None
        return firstInteger_get(out.stdout)

    # =========================================================================
    # Popups
    # =========================================================================

    def passivePopup_show(
        self,
        text: str,
        timeout: int,
        icon: Optional[str] = None,
        options: KDialogOptionsLike = None,
    ) -> None:
        """Show a passive popup; returns without waiting for it."""
        args = ["--passivepopup", text, str(timeout)]
        if icon is not None:
            if icon not in POPUP_ICONS:
                logger.debug("Non-standard passive popup icon: %s", icon)
            args.extend(["--icon", icon])
        argv = args + options_translate(options, KDIALOG_STYLE)
        self._runner.process_spawn(settings.KDIALOG_BINARY, argv)

    # =========================================================================
    # Files
    # =========================================================================

    def openFilename_get(
        self,
        start_dir: str,
        filters: Optional[Sequence[str]] = None,
        multiple: bool = False,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        """Pick file(s) to open; multiple paths come back newline separated."""
        args = ["--getopenfilename", home_expand(start_dir), fileFilter_build(filters)]
        if multiple:
            args.extend(["--multiple", "--separate-output"])
        return self._text(args, options)

    def saveFilename_get(
        self,
        start_dir: str,
        filters: Optional[Sequence[str]] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        args = ["--getsavefilename", home_expand(start_dir), fileFilter_build(filters)]
        return self._text(args, options)

    def existingDirectory_get(
        self, start_dir: str, options: KDialogOptionsLike = None
    ) -> Optional[str]:
        return self._text(["--getexistingdirectory", home_expand(start_dir)], options)

    def openUrl_get(
        self,
        start_dir: str,
        filters: Optional[Sequence[str]] = None,
        multiple: bool = False,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        args = ["--getopenurl", home_expand(start_dir), fileFilter_build(filters)]
        if multiple:
            args.extend(["--multiple", "--separate-output"])
        return self._text(args, options)

    def saveUrl_get(
        self,
        start_dir: str,
        filters: Optional[Sequence[str]] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        args = ["--getsaveurl", home_expand(start_dir), fileFilter_build(filters)]
        return self._text(args, options)

    def icon_get(
        self, context: Optional[str] = None, options: KDialogOptionsLike = None
    ) -> Optional[str]:
        """Pick an icon name from a theme context (All by default)."""
        context = context or "All"
        if context not in ICON_CONTEXTS:
            raise ValueError(f"Unknown icon context '{context}'")
        return self._text(["--geticon", context], options)

    # =========================================================================
    # Values
    # =========================================================================

    def color_get(
        self,
        format: Optional[str] = None,
        default: Optional[str] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        """
        Pick a color.

        Args:
            format: printf-style output format accepting %x and %d, such as
                `"#%02x%02x%02x"` or `"R: %3d, G: %3d, B: %3d"`.
            default: Initial color in HTML hex notation (`"#FFFFFF"`).

        Returns:
            Formatted color, or None if cancelled.
        """
        args = ["--getcolor"]
        if format is not None:
            args.extend(["--format", format])
        if default is not None:
            args.extend(["--default", default])
        return self._text(args, options)

    def slider_get(
        self,
        text: str,
        minimum: int,
        maximum: int,
        step: int,
        options: KDialogOptionsLike = None,
    ) -> Optional[int]:
        out = self._execute(
            ["--slider", text, str(minimum), str(maximum), str(step)], options
        )
        if out.returncode == 1:
            return None
        return firstInteger_get(out.stdout)

    def calendar_get(
        self,
        text: str,
        format: Optional[str] = None,
        options: KDialogOptionsLike = None,
    ) -> Optional[str]:
        """
        Pick a date.

        kdialog's calendar exits with status 0 when the dialog is cancelled,
        the reverse of every other kdialog dialog.

        Args:
            format: Qt-style date format; kdialog defaults to "ddd MMM d yyyy".

        Returns:
            Formatted date, or None if cancelled.
        """
        args = ["--calendar", text]
        if format is not None:
            args.extend(["--dateformat", format])
        out = self._execute(args, options)
        if out.returncode == 0:
            return None
        return output_clean(out.stdout)

    # =========================================================================
    # Progress
    # =========================================================================

    def progressBar_create(
        self,
        text: str,
        size: int,
        autoclose: bool = False,
        options: KDialogOptionsLike = None,
    ) -> Optional[KDialogProgressBar]:
        """
        Open a progress dialog.

        The dialog is a separate process and stays open after this program
        exits unless closed.

        Returns:
            Remote-control handle, or None if kdialog failed.
        """
        out = self._execute(["--progressbar", text, str(size)], options)
        if out.returncode == 1:
            return None
        return KDialogProgressBar.fromReference_create(
            self._runner,
            output_clean(out.stdout),
            size,
            autoclose=autoclose,
            qdbus_command=self._qdbus_command,
        )
