"""Output and path helpers shared by the backends"""

import os
import re


def output_clean(text: str) -> str:
    """Strip trailing newlines from process output"""
    return text.rstrip("\r\n")


def home_expand(path: str) -> str:
    """
    Replace a leading `~` with the HOME environment value

    Args:
        path: File system path

    Returns:
        Path with home expanded; unchanged if HOME is unset
    """
    home = os.environ.get("HOME")
    if not home:
        return path
    return re.sub(r"^~", lambda _match: home, path)


def firstInteger_get(text: str) -> int | None:
    """Return the first integer found in text, or None"""
    match = re.search(r"-?\d+", text)
    if match is None:
        return None
    return int(match.group(0))
