# fex Utilities Package
"""
Utility functions for fex.
"""

from .helpers import escape_query, exec_command, command_exists, load_settings, run_install

__all__ = ["escape_query", "exec_command", "command_exists", "load_settings", "run_install"]
