"""Pytest configuration and shared fixtures for deskdialog tests

This module provides a scripted process runner so backend adapters can be
exercised without kdialog, zenity, qdbus or notify-send installed.
"""

import logging
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest

from deskdialog.common.config import Config, ConfigLoader
from deskdialog.common.process import ExecResult, ProcessRunner
from deskdialog.common.settings import settings


class FakeProcess:
    """Stand-in for a spawned subprocess.Popen"""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.returncode: Optional[int] = None

    def poll(self) -> Optional[int]:
        return self.returncode


class FakeRunner(ProcessRunner):
    """Process runner that records calls and replays scripted results

    Results queued with reply() are returned in order; when the queue is
    empty, `handler` (if set) computes the result, otherwise exit 0 with no
    output is returned.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.spawned: list[tuple[str, list[str]]] = []
        self.terminated: list[FakeProcess] = []
        self.handler: Optional[Callable[[str, list[str]], ExecResult]] = None
        self._replies: list[ExecResult] = []

    def reply(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        """Queue one result"""
        self._replies.append(ExecResult(returncode, stdout, stderr))
        return self

    def command_run(self, command, args, cwd=None, env=None) -> ExecResult:
        self.calls.append((command, list(args)))
        if self._replies:
            return self._replies.pop(0)
        if self.handler is not None:
            return self.handler(command, list(args))
        return ExecResult(0, "", "")

    def process_spawn(self, command, args, new_session=False) -> FakeProcess:
        self.spawned.append((command, list(args)))
        return FakeProcess(pid=10000 + len(self.spawned))

    def processGroup_terminate(self, process) -> None:
        self.terminated.append(process)

    @property
    def last_args(self) -> list[str]:
        """Arguments of the most recent command_run call"""
        return self.calls[-1][1]


@pytest.fixture
def runner() -> FakeRunner:
    """Fresh scripted process runner"""
    return FakeRunner()


@pytest.fixture
def sample_config() -> Config:
    """Load the sample configuration shipped at the repository root"""
    config_path = Path(__file__).parent.parent / "config.yml"
    if not config_path.exists():
        pytest.skip("config.yml not found - required for this test")
    return ConfigLoader.config_load(config_path)


@pytest.fixture
def reset_settings() -> Generator[None, None, None]:
    """Reset settings singleton between tests"""
    settings._config = None
    yield
    settings._config = None


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)
