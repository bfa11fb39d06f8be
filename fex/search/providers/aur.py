"""
AUR helper providers - paru and yay.

Both wrap pacman and print the same -Ss / -Si formats, extended with AUR
results (source "aur"). The AUR RPC rejects short or broad queries; the
helpers report that on stdout or stderr, so stderr is kept for the
search command.
"""

from typing import Iterator, Optional

from ..provider import Package
from .base import CommandLineProvider
from .pacman import parse_si_output, parse_ss_output

TOO_MANY_RESULTS = "Too many results! Try a more specific search."


class AurHelperProvider(CommandLineProvider):
    """Shared behaviour for pacman-compatible AUR helpers."""

    capture_stderr = True
    error_signatures = {
        "Query arg too small": TOO_MANY_RESULTS,
        "Too many package results": TOO_MANY_RESULTS,
    }

    def parse_output(self, output: str) -> Iterator[Package]:
        return parse_ss_output(output)

    def info_failed(self, stdout: str, returncode: int) -> bool:
        return returncode != 0

    def parse_info(self, output: str) -> Optional[Package]:
        return parse_si_output(output, installed_markers=("Install Reason", "Installed Size"))


class ParuProvider(AurHelperProvider):
    name = "paru"
    executables = ("paru",)
    search_command = "paru -Ss '{query}'"
    info_command = "paru -Si '{query}'"
    install_template = "paru -S {name}"


class YayProvider(AurHelperProvider):
    name = "yay"
    executables = ("yay",)
    search_command = "yay -Ss '{query}'"
    info_command = "yay -Si '{query}'"
    install_template = "yay -S {name}"
