"""deskdialog command-line interface"""

import argparse
import sys
from pathlib import Path
from typing import Any, Callable, NoReturn, Optional, Sequence

from deskdialog import __version__
from deskdialog.common.config import Config, ConfigLoader
from deskdialog.common.log_setup import logging_setup
from deskdialog.common.settings import settings
from deskdialog.common.types import Answer, Color, DialogOptions, FileSelectionOptions
from deskdialog.dialog.detect import backend_resolve
from deskdialog.dialog.unified import Dialog
from deskdialog.notify.notifier import NotificationOptions, Notifier

EXIT_OK = 0
EXIT_CANCELLED = 1
EXIT_ERROR = 2


def arguments_parse(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments

    Args:
        argv: Argument list; sys.argv[1:] when omitted.

    Returns:
        Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="deskdialog",
        description="Show desktop dialogs through kdialog or zenity",
    )

    parser.add_argument("--version", action="version", version=f"deskdialog {__version__}")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: search standard locations)",
    )

    parser.add_argument(
        "--backend",
        type=str,
        choices=["kdialog", "zenity"],
        default=None,
        help="Dialog backend to use (overrides config and detection)",
    )

    parser.add_argument("--title", type=str, default=None, help="Dialog window title")

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging (overrides config)"
    )
    parser.add_argument(
        "--info", action="store_true", help="Enable info logging (overrides config)"
    )
    parser.add_argument(
        "--warning", action="store_true", help="Enable warning logging (overrides config)"
    )
    parser.add_argument(
        "--error", action="store_true", help="Enable error logging (overrides config)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("detect", help="Print the backend that would be used")

    for name, help_text in (
        ("yesno", "Yes/No question"),
        ("yesnocancel", "Yes/No/Cancel question"),
        ("info", "Information message"),
        ("warning", "Warning message"),
        ("error", "Error message"),
        ("password", "Password prompt"),
        ("newpassword", "New password prompt with confirmation"),
        ("calendar", "Date picker"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("text")

    command = commands.add_parser("input", help="Text entry")
    command.add_argument("text")
    command.add_argument("--init", default=None, help="Initial text")

    for name, help_text in (
        ("menu", "Pick one item"),
        ("checklist", "Pick any number of items"),
        ("combo", "Pick one item from a drop-down"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("text")
        command.add_argument("items", nargs="+")
        if name == "checklist":
            command.add_argument(
                "--selected", action="append", default=[], help="Item checked initially"
            )

    command = commands.add_parser("file", help="File or directory picker")
    command.add_argument("start_dir", nargs="?", default="~")
    command.add_argument("--filter", action="append", default=[], dest="filters")
    mode = command.add_mutually_exclusive_group()
    mode.add_argument("--multiple", action="store_true")
    mode.add_argument("--directory", action="store_true")
    mode.add_argument("--save", action="store_true")

    command = commands.add_parser("color", help="Color picker")
    command.add_argument("--default", type=int, nargs=3, metavar=("R", "G", "B"))

    command = commands.add_parser("slider", help="Integer slider")
    command.add_argument("text")
    command.add_argument("--min", type=int, default=0, dest="minimum")
    command.add_argument("--max", type=int, default=100, dest="maximum")
    command.add_argument("--step", type=int, default=1)

    command = commands.add_parser("popup", help="Passive notification")
    command.add_argument("text")
    command.add_argument("--timeout", type=int, default=5)
    command.add_argument("--icon", default=None)

    command = commands.add_parser("notify", help="Desktop notification via notify-send")
    command.add_argument("summary")
    command.add_argument("body", nargs="?", default=None)
    command.add_argument("--urgency", choices=["low", "normal", "critical"], default=None)
    command.add_argument("--expire-time", type=int, default=None, dest="expire_time")
    command.add_argument("--icon", default=None)
    command.add_argument("--action", action="append", default=[], dest="actions")
    command.add_argument("--app-name", default=None, dest="app_name")

    return parser.parse_args(argv)


def logLevelOverride_get(args: argparse.Namespace) -> Optional[str]:
    """
    Resolve explicit log level override flags.

    Args:
        args: Parsed CLI args.

    Returns:
        Selected log level or None.
    """
    if args.error:
        return "ERROR"
    if args.warning:
        return "WARNING"
    if args.info:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return None


def config_resolve(args: argparse.Namespace) -> Config:
    """
    Load config and apply command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Effective configuration.
    """
    config = ConfigLoader.configOrDefault_load(Path(args.config) if args.config else None)
    if args.backend:
        config.backend.preferred = args.backend
    log_level = logLevelOverride_get(args)
    if log_level is not None:
        config.logging.level = log_level
    return config


def result_emit(result: Any) -> int:
    """
    Print a dialog result and map it onto an exit status.

    None, False and Answer.CANCEL count as cancelled.

    Args:
        result: Dialog result.

    Returns:
        Process exit status.
    """
    if result is None or result is False or result is Answer.CANCEL:
        if result is Answer.CANCEL:
            print(result.value)
        return EXIT_CANCELLED
    if result is True:
        return EXIT_OK
    if isinstance(result, Answer):
        print(result.value)
        return EXIT_OK if result is Answer.YES else EXIT_CANCELLED
    if isinstance(result, list):
        for item in result:
            print(item)
        return EXIT_OK
    if isinstance(result, Color):
        print(f"{result.r} {result.g} {result.b}")
        return EXIT_OK
    print(result)
    return EXIT_OK


def command_dispatch(args: argparse.Namespace, dialog: Dialog, config: Config) -> int:
    """
    Run the selected subcommand.

    Args:
        args: Parsed CLI args.
        dialog: Dialog context.
        config: Effective configuration.

    Returns:
        Process exit status.
    """
    options = DialogOptions(title=args.title)
    simple: dict[str, Callable[..., Any]] = {
        "yesno": dialog.yesNo_ask,
        "yesnocancel": dialog.yesNoCancel_ask,
        "info": dialog.info_show,
        "warning": dialog.warning_show,
        "error": dialog.error_show,
        "password": dialog.password_prompt,
        "newpassword": dialog.newPassword_prompt,
        "calendar": dialog.calendar_get,
    }

    if args.command == "detect":
        print(dialog.backend.value)
        return EXIT_OK
    if args.command in simple:
        return result_emit(simple[args.command](args.text, options))
    if args.command == "input":
        return result_emit(dialog.input_prompt(args.text, args.init, options))
    if args.command == "menu":
        return result_emit(dialog.menu_select(args.text, args.items, options))
    if args.command == "combo":
        return result_emit(dialog.combo_select(args.text, args.items, options))
    if args.command == "checklist":
        return result_emit(
            dialog.checklist_select(args.text, args.items, args.selected, options)
        )
    if args.command == "file":
        mode = FileSelectionOptions(
            multiple=args.multiple, directory=args.directory, save=args.save
        )
        return result_emit(dialog.fileSelection_get(args.start_dir, args.filters, mode, options))
    if args.command == "color":
        return result_emit(dialog.color_get(args.default, options))
    if args.command == "slider":
        return result_emit(
            dialog.slider_get(args.text, args.minimum, args.maximum, args.step, options)
        )
    if args.command == "popup":
        dialog.passiveNotification_show(args.text, args.timeout, args.icon, options)
        return EXIT_OK
    if args.command == "notify":
        notifier = Notifier(app_name=config.notify.app_name)
        pressed = notifier.notify(
            args.summary,
            args.body,
            NotificationOptions(
                urgency=args.urgency,
                expire_time=args.expire_time,
                icon=args.icon,
                actions=args.actions or None,
            ),
            app_name=args.app_name,
        )
        print(pressed)
        return EXIT_OK
    raise ValueError(f"Unknown command '{args.command}'")


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Main entry point for the deskdialog command"""
    args = arguments_parse(argv)

    try:
        config = config_resolve(args)
        settings.initialize(config)
        logging_setup(config.logging)

        backend = backend_resolve(preferred=config.backend.preferred)
        dialog = Dialog(backend, qdbus_command=config.backend.qdbus_command)
        sys.exit(command_dispatch(args, dialog, config))

    except KeyboardInterrupt:
        sys.exit(EXIT_CANCELLED)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
