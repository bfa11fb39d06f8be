"""
Snap Provider - Snapcraft store.

`snap find` prints a space-padded table with a header row:

    Name     Version  Publisher  Notes  Summary
    ripgrep  12.1.0   bugsbunny  -      Fast line-oriented search tool

Columns are separated by runs of two or more spaces.
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider


class SnapProvider(CommandLineProvider):
    name = "snap"
    executables = ("snap",)
    search_command = "snap find '{query}'"
    installed_command = "snap list"
    header_lines = 1
    default_source = "snap"
    install_template = "sudo snap install {name}"

    def parse_line(self, line: str) -> Optional[Package]:
        cols = [c for c in line.split("  ") if c]
        if len(cols) < 2:
            return None

        if len(cols) > 4:
            description = "  ".join(cols[4:]).strip()
        elif len(cols) > 3:
            description = cols[3].strip()
        else:
            description = ""

        return Package(
            name=cols[0].strip(),
            version=cols[1].strip(),
            description=description,
            source=self.default_source,
        )

    def parse_installed(self, output: str) -> set[str]:
        installed = set()
        for line in output.splitlines()[1:]:
            fields = line.split()
            if fields:
                installed.add(fields[0])
        return installed

    def source_color(self, source: str) -> SourceColor:
        return SourceColor.YELLOW
