"""
Option translation.

Turns an open option mapping into command-line tokens. Each backend supplies
an `OptionStyle` describing how list values are emitted and which keys map to
differently named flags; every other key falls back to the generic
underscore-to-hyphen rule.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

__all__ = [
    "OptionStyle",
    "flag_name",
    "optionMapping_get",
    "options_translate",
]


@dataclass(frozen=True)
class OptionStyle:
    """Per-backend flag conventions."""

    repeated_keys: frozenset[str] = frozenset()
    renames: Mapping[str, str] = field(default_factory=dict)
    join_separator: str = ","


DEFAULT_STYLE = OptionStyle()


def flag_name(key: str) -> str:
    """
    Render option key as a long flag.

    Args:
        key: Option key, e.g. `ok_label`.

    Returns:
        Flag, e.g. `--ok-label`.
    """
    return "--" + key.replace("_", "-")


def optionMapping_get(options: Any) -> dict[str, Any]:
    """
    Normalize an options value into a plain mapping.

    Dataclass options contribute their set fields; their `extra` mapping is
    merged last so callers can pass flags the dataclass does not name.

    Args:
        options: None, a mapping, or an options dataclass.

    Returns:
        Mapping of option name to value, without None values.
    """
    if options is None:
        return {}
    if isinstance(options, Mapping):
        return {key: value for key, value in options.items() if value is not None}
    if dataclasses.is_dataclass(options) and not isinstance(options, type):
        result: dict[str, Any] = {}
        extra: Mapping[str, Any] = {}
        for item in dataclasses.fields(options):
            value = getattr(options, item.name)
            if item.name == "extra":
                extra = value or {}
            elif value is not None:
                result[item.name] = value
        for key, value in extra.items():
            if value is not None:
                result[key] = value
        return result
    raise TypeError(f"Unsupported options type: {type(options).__name__}")


def options_translate(options: Any, style: Optional[OptionStyle] = None) -> list[str]:
    """
    Translate options into argument tokens.

    Args:
        options: None, a mapping, or an options dataclass.
        style: Backend conventions; generic rules when omitted.

    Returns:
        Argument tokens, each key's tokens contiguous.

    Raises:
        TypeError: If a value has an unsupported type.
    """
    style = style or DEFAULT_STYLE
    tokens: list[str] = []
    for key, value in optionMapping_get(options).items():
        flag = style.renames.get(key) or flag_name(key)
        if key == "geometry":
            width, height = value
            tokens.extend([flag, f"{int(width)}x{int(height)}"])
        elif isinstance(value, bool):
            if value:
                tokens.append(flag)
        elif isinstance(value, (list, tuple)):
            if key in style.repeated_keys:
                for item in value:
                    tokens.extend([flag, str(item)])
            else:
                tokens.extend([flag, style.join_separator.join(str(item) for item in value)])
        elif isinstance(value, (str, int, float)):
            tokens.extend([flag, str(value)])
        else:
            raise TypeError(f"Unsupported value for option '{key}': {type(value).__name__}")
    return tokens
