"""
Providers - One CommandLineProvider subclass per package-manager tool.
"""

from .apk import ApkProvider
from .apt import AptProvider
from .aur import ParuProvider, YayProvider
from .brew import BrewProvider, ZerobrewProvider
from .dnf import DnfProvider
from .flatpak import FlatpakProvider
from .nix import NixProvider
from .pacman import PacmanProvider
from .snap import SnapProvider
from .xbps import XbpsProvider
from .zypper import ZypperProvider

__all__ = [
    "ApkProvider",
    "AptProvider",
    "BrewProvider",
    "DnfProvider",
    "FlatpakProvider",
    "NixProvider",
    "PacmanProvider",
    "ParuProvider",
    "SnapProvider",
    "XbpsProvider",
    "YayProvider",
    "ZerobrewProvider",
    "ZypperProvider",
]
