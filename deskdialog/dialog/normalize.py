"""
Result normalization.

Pure helpers reconciling kdialog and zenity outcome encodings into the
unified result contract: Answer for three-way questions, item labels for
selections, Color for colors and datetime.date for dates.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable, Iterable, Mapping, Optional, Sequence

from deskdialog.common.settings import settings
from deskdialog.common.types import Answer, Color

logger = logging.getLogger(__name__)

__all__ = [
    "answer_fromLabel",
    "calendarDate_parse",
    "checklistLabels_get",
    "checklistSelection_build",
    "colorComponents_validate",
    "colorFromKdialog_parse",
    "colorFromZenity_parse",
    "menuLabel_get",
    "newPassword_confirm",
    "sliderDefault_get",
    "value_clamp",
]


def answer_fromLabel(label: str) -> Answer:
    """
    Map a zenity button label onto an Answer.

    Args:
        label: Label returned by the zenity adapter ("yes", "no", or the
            text of an extra button).

    Returns:
        YES for "yes", NO for "no", CANCEL otherwise.
    """
    normalized = label.strip().lower()
    if normalized == "yes":
        return Answer.YES
    if normalized == "no":
        return Answer.NO
    return Answer.CANCEL


def menuLabel_get(items: Sequence[str], tag: Optional[int]) -> Optional[str]:
    """Resolve a 1-based kdialog tag to its item label."""
    if tag is None or not 1 <= tag <= len(items):
        return None
    return items[tag - 1]


def checklistSelection_build(items: Sequence[str], selected: Iterable[str]) -> dict[int, bool]:
    """
    Build kdialog's `{tag: checked}` input from a set of labels.

    Args:
        items: Checklist entries.
        selected: Labels checked initially.

    Returns:
        Mapping for every tag 1..N.
    """
    chosen = set(selected)
    return {tag: item in chosen for tag, item in enumerate(items, start=1)}


def checklistLabels_get(items: Sequence[str], checked: Mapping[int, bool]) -> list[str]:
    """Resolve kdialog's `{tag: checked}` output into labels, in item order."""
    return [item for tag, item in enumerate(items, start=1) if checked.get(tag)]


def colorComponents_validate(default: Optional[Sequence[int]]) -> Optional[Color]:
    """
    Validate a color default.

    Raises:
        ValueError: If default does not have exactly three components in 0..255.
    """
    if default is None:
        return None
    if len(default) != 3:
        raise ValueError("default is expected to have size 3")
    if any(not 0 <= int(component) <= 255 for component in default):
        raise ValueError("color components must be in the range 0-255")
    r, g, b = (int(component) for component in default)
    return Color(r, g, b)


def colorFromKdialog_parse(text: Optional[str]) -> Optional[Color]:
    """Parse kdialog `"%d %d %d"` color output."""
    if not text:
        return None
    numbers = re.findall(r"\d+", text)
    if len(numbers) < 3:
        logger.warning("Unexpected kdialog color output: %r", text)
        return None
    return Color(int(numbers[0]), int(numbers[1]), int(numbers[2]))


def colorFromZenity_parse(text: Optional[str]) -> Optional[Color]:
    """Parse zenity `rgb(r,g,b)` / `rgba(r,g,b,a)` output."""
    if not text:
        return None
    match = re.search(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)", text)
    if match is None:
        logger.warning("Unexpected zenity color output: %r", text)
        return None
    return Color(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def calendarDate_parse(text: Optional[str]) -> Optional[date]:
    """
    Parse day/month/year calendar output.

    Both backends are asked for "day month year" ordering, so "05 03 2024"
    parses to date(2024, 3, 5).
    """
    if not text:
        return None
    match = re.search(r"(\d+) (\d+) (\d+)", text)
    if match is None:
        logger.warning("Unexpected calendar output: %r", text)
        return None
    day, month, year = (int(part) for part in match.groups())
    return date(year, month, day)


def sliderDefault_get(minimum: int, maximum: int) -> int:
    """
    Initial zenity scale value.

    Reproduces floor(min / max); for most ranges this is 0, not a midpoint.
    A zero maximum yields the minimum.
    """
    if maximum == 0:
        return minimum
    return minimum // maximum


def value_clamp(value: Optional[int], minimum: int, maximum: int) -> Optional[int]:
    """Clamp a numeric dialog result into [minimum, maximum]."""
    if value is None:
        return None
    return max(minimum, min(maximum, value))


def newPassword_confirm(
    prompt: Callable[[str], Optional[str]],
    separator: str = settings.FORM_SEPARATOR,
) -> Optional[str]:
    """
    Ask for a new password twice until both entries match.

    Args:
        prompt: Shows a two-field password form with the given caption and
            returns the field values joined by `separator`, or None if the
            user cancelled.
        separator: Form output separator.

    Returns:
        The confirmed password, or None if cancelled.
    """
    text = settings.NEW_PASSWORD_TEXT
    while True:
        out = prompt(text)
        if out is None:
            return None
        # Output is `first + separator + second`, and matching entries may contain the separator.
        half, odd = divmod(len(out) - len(separator), 2)
        if not odd and half >= 0 and out[half:half + len(separator)] == separator:
            if out[:half] == out[half + len(separator):]:
                return out[:half]
        logger.debug("New password entries did not match; asking again")
        text = settings.PASSWORD_MISMATCH_TEXT
