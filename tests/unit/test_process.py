"""Unit tests for the process runner"""

import subprocess

import pytest

from deskdialog.common import process
from deskdialog.common.process import ExecResult, ProcessRunner


class TestCommandRun:
    """Blocking command execution"""

    @pytest.fixture
    def recorded(self, monkeypatch):
        """Replace subprocess.run and record its keyword arguments"""
        seen = {}

        def run(argv, **kwargs):
            seen["argv"] = argv
            seen.update(kwargs)
            return subprocess.CompletedProcess(argv, 1, stdout="out\n", stderr=None)

        monkeypatch.setattr(process.subprocess, "run", run)
        return seen

    def test_stdin_not_inherited(self, recorded):
        """Test dialogs that read stdin get an empty one instead of the terminal"""
        ProcessRunner().command_run("zenity", ["--text-info"])
        assert recorded["stdin"] is subprocess.DEVNULL

    def test_result_captured(self, recorded):
        """Test argv, exit status and output are carried into the result"""
        result = ProcessRunner().command_run("zenity", ["--list"], env={"LANG": "C"})
        assert recorded["argv"] == ["zenity", "--list"]
        assert recorded["env"] == {"LANG": "C"}
        assert recorded["capture_output"] is True
        assert result == ExecResult(1, "out\n", "")
        assert result.ok is False
