"""Common types and data structures for deskdialog"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Backend(Enum):
    """Dialog backends"""
    KDIALOG = "kdialog"
    ZENITY = "zenity"
    NONE = "none"

    @classmethod
    def fromName_get(cls, name: str) -> "Backend":
        """
        Resolve backend from its binary name

        Args:
            name: Backend name, case-insensitive

        Returns:
            Matching backend

        Raises:
            ValueError: If name is not a known backend
        """
        normalized = name.strip().lower()
        for backend in cls:
            if backend.value == normalized:
                return backend
        raise ValueError(f"Unsupported backend '{name}'. Supported: kdialog, zenity, none.")


class Answer(Enum):
    """Outcome of a three-way question"""
    YES = "yes"
    NO = "no"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Color:
    """RGB triple, components in 0..255"""
    r: int
    g: int
    b: int

    def hex_get(self) -> str:
        """Return HTML hex notation (#RRGGBB)"""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def rgb_get(self) -> str:
        """Return CSS rgb() notation"""
        return f"rgb({self.r},{self.g},{self.b})"


@dataclass
class DialogOptions:
    """Backend-agnostic dialog options"""
    title: Optional[str] = None
    geometry: Optional[Tuple[int, int]] = None  # (width, height)
    ok_label: Optional[str] = None
    cancel_label: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FileSelectionOptions:
    """Picker mode flags; `multiple` excludes `save` and `directory`"""
    multiple: bool = False
    directory: bool = False
    save: bool = False
