# fex Package
"""
Interactive package search for the terminal.

Type a query, browse live results from the host's package manager
(pacman, paru, yay, apt, dnf, brew, nix, flatpak, snap, ...) and install
the selected package with the backend's own install command.
"""

__version__ = "0.1.0"
