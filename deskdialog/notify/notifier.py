"""Desktop notifications through notify-send."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from deskdialog.common.options import OptionStyle, optionMapping_get, options_translate
from deskdialog.common.process import ProcessRunner
from deskdialog.common.settings import settings
from deskdialog.common.text import firstInteger_get
from deskdialog.dialog.detect import binary_find

logger = logging.getLogger(__name__)

URGENCIES = ("low", "normal", "critical")

NOTIFY_STYLE = OptionStyle()


@dataclass
class NotificationOptions:
    """notify-send options"""
    urgency: Optional[str] = None
    expire_time: Optional[int] = None
    icon: Optional[str] = None
    category: Optional[Union[str, Sequence[str]]] = None
    transient: Optional[bool] = None
    wait: Optional[bool] = None
    actions: Optional[Sequence[str]] = None
    extra: dict[str, Any] = field(default_factory=dict)


class Notifier:
    """
    Wrapper around `notify-send`.

    notify() returns 0 when the notification is closed or expires, otherwise
    the 1-based index of the action button that was pressed. With actions or
    `wait` set, notify-send blocks until the notification is dismissed.
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        app_name: str = "deskdialog",
        probe: bool = True,
    ) -> None:
        """
        Initialize notifier.

        Args:
            runner: Process runner; a default runner when omitted.
            app_name: Default application name shown by the notification server.
            probe: Warn once if notify-send is not installed.
        """
        self._runner: ProcessRunner = runner or ProcessRunner()
        self.app_name: str = app_name
        if probe and not binary_find(self._runner, settings.NOTIFY_BINARY):
            logger.warning(
                "Unable to find %s binary; notifications will not function as expected",
                settings.NOTIFY_BINARY,
            )

    def arguments_build(
        self,
        summary: str,
        body: Optional[str] = None,
        options: Union[NotificationOptions, Mapping[str, Any], None] = None,
        app_name: Optional[str] = None,
    ) -> list[str]:
        """
        Build notify-send argument tokens.

        Raises:
            ValueError: If urgency is not low, normal or critical.
        """
        mapping = optionMapping_get(options)
        urgency = mapping.get("urgency")
        if urgency is not None and urgency not in URGENCIES:
            raise ValueError(f"urgency must be one of {', '.join(URGENCIES)}, got '{urgency}'")
        actions = mapping.pop("actions", None) or []

        args = ["--app-name", app_name or self.app_name]
        for index, action in enumerate(actions, start=1):
            args.extend(["--action", f"{index}={action}"])
        args.extend(options_translate(mapping, NOTIFY_STYLE))
        args.append(summary)
        if body is not None:
            args.append(body)
        return args

    def notify(
        self,
        summary: str,
        body: Optional[str] = None,
        options: Union[NotificationOptions, Mapping[str, Any], None] = None,
        app_name: Optional[str] = None,
    ) -> int:
        """
        Send a notification.

        Args:
            summary: Notification summary line.
            body: Optional body text.
            options: notify-send options.
            app_name: Application name; the notifier default when omitted.

        Returns:
            0 if closed or expired, else the index of the pressed action.
        """
        out = self._runner.command_run(
            settings.NOTIFY_BINARY, self.arguments_build(summary, body, options, app_name)
        )
        if not out.stdout.strip():
            return 0
        return firstInteger_get(out.stdout) or 0
