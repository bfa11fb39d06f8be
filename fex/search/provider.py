"""
Provider contract - The data model and interface every backend implements.

A provider wraps one package-manager tool. It probes for the tool's
executable, turns a query into a ranked SearchResult, and builds the
shell command that installs a chosen Package.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass
class Package:
    """A single package reported by a backend."""
    name: str
    version: str = ""
    description: str = ""
    source: str = ""  # repository, remote or formula type
    installed: bool = False


@dataclass
class SearchResult:
    """Output of one provider search: ranked packages and an optional error."""
    packages: list[Package] = field(default_factory=list)
    error: Optional[str] = None


class SourceColor(Enum):
    """Display category for a package source label."""
    CYAN = "cyan"
    GREEN = "green"
    YELLOW = "yellow"
    MAGENTA = "magenta"
    BLUE = "blue"
    LIGHT_BLUE = "light_blue"
    LIGHT_GREEN = "light_green"
    RED = "red"
    WHITE = "white"


# Arch-style repository colors, shared by the pacman family
DEFAULT_SOURCE_COLORS = {
    "core": SourceColor.CYAN,
    "extra": SourceColor.GREEN,
    "community": SourceColor.YELLOW,
    "multilib": SourceColor.MAGENTA,
    "aur": SourceColor.LIGHT_BLUE,
}


class Provider(ABC):
    """Base class for all package-manager backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Lowercase registry key (e.g. "pacman")."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the backend's executable exists on this host."""
        ...

    @abstractmethod
    def search(self, query: str) -> SearchResult:
        """Return ranked results for the query. Never raises."""
        ...

    @abstractmethod
    def install_command(self, package: Package) -> str:
        """Return the shell command that installs the package."""
        ...

    def source_color(self, source: str) -> SourceColor:
        return DEFAULT_SOURCE_COLORS.get(source, SourceColor.WHITE)
