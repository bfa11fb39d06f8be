# fex Panels Package
"""
fex panels - Terminal front-end.
"""

from .terminal import TerminalPanel

__all__ = ["TerminalPanel"]
