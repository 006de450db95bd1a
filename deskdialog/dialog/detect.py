"""
Backend detection.

Resolves which dialog backend to use, in priority order:

1. explicit preference (caller, CLI flag, or config file)
2. the only installed binary, if exactly one of kdialog/zenity is found
3. `DESKDIALOG_PREFERRED` when both are installed
4. `XDG_CURRENT_DESKTOP` heuristic (KDE-like vs GNOME/GTK-like)
5. zenity, with a warning
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from deskdialog.common.process import ProcessRunner
from deskdialog.common.settings import settings
from deskdialog.common.types import Backend

logger = logging.getLogger(__name__)

__all__ = ["binary_find", "backend_resolve", "desktopBackend_get"]


def binary_find(runner: ProcessRunner, name: str) -> bool:
    """
    Return True if `whereis` reports a path for the binary.

    Never raises: a failed probe counts as not found.

    Args:
        runner: Process runner.
        name: Binary name.

    Returns:
        True if the binary was located.
    """
    try:
        result = runner.command_run(settings.LOCATE_BINARY, [name])
    except OSError as error:
        logger.debug("Binary probe for %s failed: %s", name, error)
        return False
    if not result.ok:
        return False
    location = result.stdout.strip()
    prefix = f"{name}:"
    if location.startswith(prefix):
        location = location[len(prefix):]
    return location.strip() != ""


def desktopBackend_get(desktop: Optional[str]) -> Optional[Backend]:
    """
    Map an XDG_CURRENT_DESKTOP value onto a backend.

    Args:
        desktop: Colon-separated desktop names, e.g. "ubuntu:GNOME".

    Returns:
        Backend suited to the desktop, or None if unrecognized.
    """
    if not desktop:
        return None
    names = [name.strip().lower() for name in desktop.split(":")]
    if any(name in settings.KDE_DESKTOPS for name in names):
        return Backend.KDIALOG
    if any(name in settings.GTK_DESKTOPS for name in names):
        return Backend.ZENITY
    return None


def backend_resolve(
    runner: Optional[ProcessRunner] = None,
    environ: Optional[Mapping[str, str]] = None,
    preferred: Optional[str] = None,
) -> Backend:
    """
    Resolve the preferred dialog backend.

    Args:
        runner: Process runner used for binary probes.
        environ: Environment mapping; os.environ when omitted.
        preferred: Explicit backend name; bypasses detection.

    Returns:
        Selected backend (never Backend.NONE from detection).
    """
    if preferred:
        return Backend.fromName_get(preferred)

    runner = runner or ProcessRunner()
    env = os.environ if environ is None else environ

    kdialog_found = binary_find(runner, settings.KDIALOG_BINARY)
    zenity_found = binary_find(runner, settings.ZENITY_BINARY)
    logger.debug("Backend probe: kdialog=%s zenity=%s", kdialog_found, zenity_found)

    if not (kdialog_found or zenity_found):
        logger.warning("deskdialog depends on either zenity or kdialog being installed")
    elif kdialog_found and not zenity_found:
        return Backend.KDIALOG
    elif zenity_found and not kdialog_found:
        return Backend.ZENITY
    else:
        override = env.get(settings.PREFERRED_ENV, "").strip().lower()
        if override in (Backend.KDIALOG.value, Backend.ZENITY.value):
            return Backend.fromName_get(override)
        if override:
            logger.debug("Ignoring unrecognized %s=%s", settings.PREFERRED_ENV, override)

        desktop_backend = desktopBackend_get(env.get(settings.DESKTOP_ENV))
        if desktop_backend is not None:
            return desktop_backend

    logger.warning(
        "deskdialog is unsure which backend this desktop prefers; "
        "defaulting to zenity, even if it is not installed"
    )
    return Backend.ZENITY
