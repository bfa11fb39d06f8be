"""
Flatpak Provider - Flathub and other configured remotes.

`flatpak search` output is tab separated after a header row:

    Name  Description  Application ID  Version  Branch  Remotes

The application ID is the install name and the first listed remote is
the source, which the install command needs. An app offered by several
remotes is listed once.
"""

from typing import Iterator, Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider


class FlatpakProvider(CommandLineProvider):
    name = "flatpak"
    executables = ("flatpak",)
    search_command = "flatpak search '{query}'"
    installed_command = "flatpak list --columns=application"
    header_lines = 1
    default_source = "flathub"
    install_template = "flatpak install {source} {name}"

    def parse_output(self, output: str) -> Iterator[Package]:
        seen = set()
        for package in super().parse_output(output):
            if package.name in seen:
                continue
            seen.add(package.name)
            yield package

    def parse_line(self, line: str) -> Optional[Package]:
        cols = line.split("\t")
        if len(cols) < 3:
            return None

        remotes = cols[5].split() if len(cols) > 5 else []
        return Package(
            name=cols[2].strip(),
            version=cols[3].strip() if len(cols) > 3 else "",
            description=cols[1].strip(),
            source=remotes[0] if remotes else self.default_source,
        )

    def source_color(self, source: str) -> SourceColor:
        return SourceColor.BLUE
