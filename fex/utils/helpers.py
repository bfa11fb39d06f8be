"""
Helper utilities for fex.

Provides common functions used across providers and the front-end:
- Shell escaping and command execution for backend tools
- Executable probing
- Install command execution
- Settings loading
- Logging setup
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

import toml
from loguru import logger

# Characters that would end or alter a quoted shell argument
_SHELL_SPECIAL = "'\"\\`$"


class CommandOutput(NamedTuple):
    """Captured result of a shell command."""
    stdout: str
    stderr: str
    returncode: int


def escape_query(query: str) -> str:
    """
    Escape shell special characters in a query string.

    Each of ' " \\ ` $ is prefixed with a backslash. Nothing else changes.

    Example:
        escape_query("it's") -> "it\\'s"
    """
    return "".join("\\" + c if c in _SHELL_SPECIAL else c for c in query)


def exec_command_full(cmd: str) -> CommandOutput:
    """
    Run a command through sh and capture its output.

    Args:
        cmd: Shell command line

    Returns:
        CommandOutput(stdout, stderr, returncode). returncode is -1 if
        the shell could not be started.
    """
    logger.debug(f"exec: {cmd}")
    try:
        result = subprocess.run(
            ["sh", "-c", cmd],
            stdin=subprocess.DEVNULL,
            capture_output=True,
        )
    except (OSError, subprocess.SubprocessError):
        logger.exception(f"Failed to run: {cmd}")
        return CommandOutput("", "", -1)

    return CommandOutput(
        result.stdout.decode("utf-8", errors="replace"),
        result.stderr.decode("utf-8", errors="replace"),
        result.returncode,
    )


def exec_command(cmd: str) -> str:
    """Run a command through sh and return its stdout ("" on failure)."""
    return exec_command_full(cmd).stdout


def command_exists(executable: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(executable) is not None


def run_install(command: str) -> bool:
    """
    Run an install command with the terminal attached.

    Args:
        command: Shell command from Provider.install_command()

    Returns:
        True if the command exited with status 0
    """
    logger.info(f"Running install command: {command}")
    try:
        result = subprocess.run(command, shell=True)
    except OSError:
        logger.exception(f"Failed to execute install command: {command}")
        return False
    return result.returncode == 0


def _config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def _state_home() -> Path:
    return Path(os.environ.get("XDG_STATE_HOME") or Path.home() / ".local" / "state")


def default_settings_path() -> Path:
    return _config_home() / "fex" / "settings.toml"


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load fex settings from TOML file.

    Args:
        settings_path: Override for the settings file location

    Returns:
        Dictionary containing settings with defaults applied

    Example settings structure:
        {
            "search": {"debounce_ms": 400},
            "ui": {"poll_interval_ms": 16},
            "provider": {"default": ""},
            "logging": {"level": "WARNING"}
        }
    """
    defaults = {
        "search": {
            "debounce_ms": 400,
        },
        "ui": {
            "poll_interval_ms": 16,
        },
        "provider": {
            "default": "",
        },
        "logging": {
            "level": "WARNING",
        },
    }

    settings_path = Path(settings_path) if settings_path else default_settings_path()

    if not settings_path.exists():
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}")
        return defaults

    return _check_settings(_deep_merge(defaults, loaded), defaults, settings_path)


def _check_settings(settings: Dict, defaults: Dict, settings_path: Path) -> Dict:
    """Replace values whose type (or log level name) is wrong with the default."""
    for section, values in defaults.items():
        if not isinstance(settings.get(section), dict):
            logger.warning(f"{settings_path}: [{section}] is not a table, using defaults")
            settings[section] = values
            continue
        for key, default in values.items():
            value = settings[section].get(key)
            if type(value) is not type(default):
                logger.warning(
                    f"{settings_path}: {section}.{key} = {value!r} is not a {type(default).__name__}, "
                    f"using {default!r}"
                )
                settings[section][key] = default

    level = settings["logging"]["level"]
    try:
        logger.level(level.upper())
    except ValueError:
        logger.warning(f"{settings_path}: unknown log level {level!r}, using {defaults['logging']['level']!r}")
        settings["logging"]["level"] = defaults["logging"]["level"]

    return settings


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> Path:
    """
    Route loguru output to a log file.

    curses owns the terminal while fex runs, so the default stderr sink
    is removed.

    Returns:
        Path of the log file in use
    """
    log_file = Path(log_file) if log_file else _state_home() / "fex" / "fex.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_file),
        level=level.upper(),
        rotation="1 MB",
        retention=3,
        enqueue=True,
    )
    return log_file

