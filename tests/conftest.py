"""
Shared test fixtures for the fex test suite.

Provides a fake shell that replays recorded backend output, a settings
file on disk, and a controllable clock for the orchestrator.
"""

import pytest
import toml

from fex.utils import helpers
from fex.utils.helpers import CommandOutput


class FakeShell:
    """Stands in for exec_command_full: replays canned output by command prefix."""

    def __init__(self):
        self.responses: list[tuple[str, CommandOutput]] = []
        self.calls: list[str] = []

    def add(self, prefix: str, stdout: str = "", stderr: str = "", returncode: int = 0):
        self.responses.append((prefix, CommandOutput(stdout, stderr, returncode)))

    def __call__(self, cmd: str) -> CommandOutput:
        self.calls.append(cmd)
        for prefix, output in self.responses:
            if cmd.startswith(prefix):
                return output
        # Behave like sh when the tool is missing
        return CommandOutput("", "sh: 1: not found\n", 127)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000


@pytest.fixture
def fake_shell(monkeypatch):
    """Route every provider command through a FakeShell."""
    shell = FakeShell()
    monkeypatch.setattr(helpers, "exec_command_full", shell)
    return shell


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "search": {"debounce_ms": 250},
        "ui": {"poll_interval_ms": 16},
        "provider": {"default": "flatpak"},
        "logging": {"level": "DEBUG"},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
