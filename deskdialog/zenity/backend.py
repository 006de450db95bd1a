"""zenity backend adapter.

Message and question dialogs return the label of the button that closed
them: an extra button's own label (zenity prints it), otherwise "yes" for
the ok button, "no" for the cancel button or window close, and "cancel"
for any other exit status (timeouts, errors).
Prompts return None when zenity exits with a non-zero status.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from deskdialog.common.options import OptionStyle, optionMapping_get, options_translate
from deskdialog.common.process import ExecResult, ProcessRunner
from deskdialog.common.settings import settings
from deskdialog.common.text import firstInteger_get, home_expand, output_clean
from deskdialog.common.types import FileSelectionOptions
from deskdialog.zenity.progress import ZenityProgressBar

logger = logging.getLogger(__name__)

ZENITY_STYLE = OptionStyle(
    repeated_keys=frozenset({"extra_buttons", "hidden_columns"}),
    renames={
        "extra_buttons": "--extra-button",
        "hidden_columns": "--hide-column",
    },
)

FORM_FIELD_KINDS = ("entry", "password", "calendar", "combo", "list")


@dataclass
class ZenityOptions:
    """General zenity window options"""
    title: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    timeout: Optional[int] = None
    ok_label: Optional[str] = None
    cancel_label: Optional[str] = None
    window_icon: Optional[str] = None
    modal: Optional[bool] = None
    extra_buttons: Optional[list[str]] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ZenityListOptions:
    """Options specific to `zenity --list`"""
    hide_header: Optional[bool] = None
    hidden_columns: Optional[list[int]] = None
    print_column: Optional[Union[int, str]] = None
    multiple: Optional[bool] = None
    separator: Optional[str] = None


@dataclass(frozen=True)
class FormField:
    """One `zenity --forms` field"""
    kind: str
    name: str
    values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in FORM_FIELD_KINDS:
            raise ValueError(
                f"Unsupported form field '{self.kind}'. Supported: {', '.join(FORM_FIELD_KINDS)}."
            )


ZenityOptionsLike = Union[ZenityOptions, Mapping[str, Any], None]


def zenityOptions_get(options: Any) -> dict[str, Any]:
    """
    Normalize options for zenity.

    zenity has no geometry flag; `geometry=(w, h)` becomes width and height.
    """
    mapping = optionMapping_get(options)
    geometry = mapping.pop("geometry", None)
    if geometry is not None:
        mapping.setdefault("width", geometry[0])
        mapping.setdefault("height", geometry[1])
    return mapping


def buttonLabel_get(out: ExecResult) -> str:
    """Return the label of the button that closed a message dialog."""
    pressed = output_clean(out.stdout)
    if pressed:
        return pressed
    if out.returncode == 0:
        return "yes"
    if out.returncode == 1:
        return "no"
    return "cancel"


def fileFilter_get(pattern: str) -> str:
    """
    Convert a Qt style filter into zenity's `NAME | PATTERN...` form.

    "Images (*.png *.jpg)" becomes "Images | *.png *.jpg"; anything else is
    passed through.
    """
    match = re.fullmatch(r"\s*(.*?)\s*\((.+)\)\s*", pattern)
    if match is None:
        return pattern
    return f"{match.group(1)} | {match.group(2)}"


class ZenityBackend:
    """Run dialogs through zenity."""

    def __init__(self, runner: Optional[ProcessRunner] = None) -> None:
        """
        Initialize zenity adapter.

        Args:
            runner: Process runner; a default runner when omitted.
        """
        self._runner: ProcessRunner = runner or ProcessRunner()

    def _argv(self, args: list[str], options: ZenityOptionsLike) -> list[str]:
        return args + options_translate(zenityOptions_get(options), ZENITY_STYLE)

    def _execute(self, args: list[str], options: ZenityOptionsLike) -> ExecResult:
        return self._runner.command_run(settings.ZENITY_BINARY, self._argv(args, options))

    def _text(self, args: list[str], options: ZenityOptionsLike) -> Optional[str]:
        out = self._execute(args, options)
        if not out.ok:
            return None
        return output_clean(out.stdout)

    # =========================================================================
    # Messages
    # =========================================================================

    def question_ask(self, text: str, options: ZenityOptionsLike = None) -> str:
        """Ask a question; returns the pressed button label."""
        return buttonLabel_get(self._execute(["--question", "--text", text], options))

    def warning_show(self, text: str, options: ZenityOptionsLike = None) -> str:
        return buttonLabel_get(self._execute(["--warning", "--text", text], options))

    def error_show(self, text: str, options: ZenityOptionsLike = None) -> str:
        return buttonLabel_get(self._execute(["--error", "--text", text], options))

    def info_show(self, text: str, options: ZenityOptionsLike = None) -> str:
        return buttonLabel_get(self._execute(["--info", "--text", text], options))

    # =========================================================================
    # Prompts
    # =========================================================================

    def entry_prompt(
        self,
        text: str,
        init: Optional[str] = None,
        hide_text: bool = False,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        args = ["--entry", "--text", text]
        if init is not None:
            args.extend(["--entry-text", init])
        if hide_text:
            args.append("--hide-text")
        return self._text(args, options)

    def password_prompt(
        self, username: bool = False, options: ZenityOptionsLike = None
    ) -> Optional[str]:
        """Password prompt; with `username` the output is `user|password`."""
        args = ["--password"]
        if username:
            args.append("--username")
        return self._text(args, options)

    def form_prompt(
        self,
        fields: Sequence[FormField],
        text: Optional[str] = None,
        separator: Optional[str] = None,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        """
        Show a form.

        Args:
            fields: Form fields in display order.
            text: Form caption.
            separator: Output separator; zenity uses `|` by default.

        Returns:
            Field values joined by the separator, or None if cancelled.
        """
        args = ["--forms"]
        if text is not None:
            args.extend(["--text", text])
        for item in fields:
            args.extend([f"--add-{item.kind}", item.name])
            if item.kind in ("combo", "list"):
                args.extend([f"--{item.kind}-values", "|".join(item.values)])
        if separator is not None:
            args.extend(["--separator", separator])
        return self._text(args, options)

    def textInfo_show(
        self,
        filename: Optional[str] = None,
        editable: bool = False,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        """Display text, optionally editable; returns the final text."""
        args = ["--text-info"]
        if filename is not None:
            args.extend(["--filename", home_expand(filename)])
        if editable:
            args.append("--editable")
        return self._text(args, options)

    # =========================================================================
    # Lists
    # =========================================================================

    def list_select(
        self,
        text: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        mode: Optional[str] = None,
        list_options: Optional[ZenityListOptions] = None,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        """
        Show a list dialog.

        Args:
            text: Caption.
            columns: Column headers.
            rows: Row cells; for radiolist/checklist the first cell is
                TRUE or FALSE.
            mode: None, "radiolist" or "checklist".
            list_options: List specific flags.

        Returns:
            Selected rows' printed column joined by the separator, or None.
        """
        if mode not in (None, "radiolist", "checklist"):
            raise ValueError(f"Unsupported list mode '{mode}'")
        args = ["--list", "--text", text]
        if mode is not None:
            args.append(f"--{mode}")
        for column in columns:
            args.extend(["--column", column])
        for row in rows:
            if len(row) != len(columns):
                raise ValueError("Every row must have one cell per column")
            args.extend(row)
        args.extend(options_translate(list_options, ZENITY_STYLE))
        return self._text(args, options)

    # =========================================================================
    # Files
    # =========================================================================

    def fileSelection_get(
        self,
        start_dir: str,
        filters: Optional[Sequence[str]] = None,
        mode: Optional[FileSelectionOptions] = None,
        separator: Optional[str] = None,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        """
        Pick file(s) or a directory.

        Raises:
            ValueError: If `multiple` is combined with `save` or `directory`.
        """
        mode = mode or FileSelectionOptions()
        if mode.multiple and (mode.save or mode.directory):
            raise ValueError("`multiple` is mutually exclusive with `save` and `directory`.")
        start = home_expand(start_dir)
        # zenity treats a path without a trailing slash as a file name to preselect.
        if os.path.isdir(start) and not start.endswith("/"):
            start += "/"
        args = ["--file-selection", "--filename", start]
        for pattern in filters or []:
            args.extend(["--file-filter", fileFilter_get(pattern)])
        if mode.multiple:
            args.append("--multiple")
        if mode.directory:
            args.append("--directory")
        if mode.save:
            args.append("--save")
        if separator is not None:
            args.extend(["--separator", separator])
        return self._text(args, options)

    # =========================================================================
    # Values
    # =========================================================================

    def colorSelection_get(
        self,
        initial: Optional[str] = None,
        show_palette: bool = False,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        """Pick a color; zenity prints `rgb(r,g,b)`."""
        args = ["--color-selection"]
        if initial is not None:
            args.extend(["--color", initial])
        if show_palette:
            args.append("--show-palette")
        return self._text(args, options)

    def scale_get(
        self,
        text: str,
        minimum: int,
        maximum: int,
        step: int,
        value: Optional[int] = None,
        options: ZenityOptionsLike = None,
    ) -> Optional[int]:
        args = [
            "--scale",
            "--text",
            text,
            "--min-value",
            str(minimum),
            "--max-value",
            str(maximum),
            "--step",
            str(step),
        ]
        if value is not None:
            args.extend(["--value", str(value)])
        out = self._execute(args, options)
        if not out.ok:
            return None
        return firstInteger_get(out.stdout)

    def calendar_get(
        self,
        text: str,
        day: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        format: Optional[str] = None,
        options: ZenityOptionsLike = None,
    ) -> Optional[str]:
        """
        Pick a date.

        Args:
            format: strftime-style output format.
        """
        args = ["--calendar", "--text", text]
        for flag, value in (("--day", day), ("--month", month), ("--year", year)):
            if value is not None:
                args.extend([flag, str(value)])
        if format is not None:
            args.extend(["--date-format", format])
        return self._text(args, options)

    # =========================================================================
    # Notifications and progress
    # =========================================================================

    def notification_show(
        self, text: str, icon: Optional[str] = None, options: ZenityOptionsLike = None
    ) -> None:
        """Show a tray notification; returns without waiting for it."""
        args = ["--notification", "--text", text]
        if icon is not None:
            args.extend(["--icon", icon])
        self._runner.process_spawn(settings.ZENITY_BINARY, self._argv(args, options))

    def progress_create(
        self,
        text: str,
        percentage: int = 0,
        autoclose: bool = False,
        pulsate: bool = False,
        no_cancel: bool = False,
        options: ZenityOptionsLike = None,
    ) -> ZenityProgressBar:
        """
        Open a progress dialog on the 0..100 scale.

        The dialog keeps running while this program is alive; set `autoclose`
        or call close() when done.
        """
        args = ["--progress", "--text", text, "--percentage", str(int(percentage))]
        if autoclose:
            args.append("--auto-close")
        if pulsate:
            args.append("--pulsate")
        if no_cancel:
            args.append("--no-cancel")
        return ZenityProgressBar(self._runner, self._argv(args, options), autoclose=autoclose)
