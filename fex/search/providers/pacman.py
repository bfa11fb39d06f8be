"""
Pacman Provider - Arch Linux official repositories.

Search output comes in two-line records:

    extra/ripgrep 14.1.0-1 [installed]
        A search tool that combines the usability of ag with the raw speed of grep

The AUR helpers (paru, yay) print the same format, so the parsers here
are shared with them.
"""

from typing import Iterator, Optional

from ...utils import helpers
from ..provider import Package
from .base import CommandLineProvider, field_value

INFO_FIELDS = {
    "Repository": "source",
    "Name": "name",
    "Version": "version",
    "Description": "description",
}


def parse_ss_output(output: str) -> Iterator[Package]:
    """Parse `-Ss` output: a "repo/name version [installed]" line, then an indented description."""
    current = None

    for line in output.splitlines():
        if not line:
            continue

        if not line.startswith((" ", "\t")):
            if current is not None:
                yield current
                current = None

            source, slash, rest = line.partition("/")
            if not slash or " " not in rest:
                continue
            name, _, after_name = rest.partition(" ")
            fields = after_name.split()
            current = Package(
                name=name,
                version=fields[0] if fields else "",
                source=source,
                installed="[installed]" in line or "[Installed]" in line,
            )
        elif current is not None:
            desc = line.lstrip()
            if desc:
                current.description = desc

    if current is not None:
        yield current


def parse_si_output(output: str, installed_markers: tuple[str, ...] = ()) -> Optional[Package]:
    """
    Parse `-Si` key/value output into a Package.

    Args:
        output: Text of the info command
        installed_markers: Substrings whose presence marks the package installed

    Returns:
        Package, or None if no Name field was found
    """
    package = Package(name="")
    for line in output.splitlines():
        for key, attr in INFO_FIELDS.items():
            value = field_value(line, key)
            if value is not None:
                setattr(package, attr, value)
                break
        else:
            if any(marker in line for marker in installed_markers):
                package.installed = True

    return package if package.name else None


class PacmanProvider(CommandLineProvider):
    """Search the sync databases with pacman -Ss."""

    name = "pacman"
    executables = ("pacman",)
    search_command = "pacman -Ss '{query}'"
    info_command = "pacman -Si '{query}'"
    install_template = "sudo pacman -S {name}"

    def parse_output(self, output: str) -> Iterator[Package]:
        return parse_ss_output(output)

    def info_failed(self, stdout: str, returncode: int) -> bool:
        return "error:" in stdout

    def parse_info(self, output: str) -> Optional[Package]:
        return parse_si_output(output)

    def exact_match(self, escaped: str) -> Optional[Package]:
        package = super().exact_match(escaped)
        if package is not None:
            # -Si doesn't report local state; ask the local database
            local = helpers.exec_command(f"pacman -Q '{escaped}' 2>/dev/null")
            package.installed = bool(local) and "error:" not in local
        return package
