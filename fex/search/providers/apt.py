"""
APT Provider - Debian and Ubuntu.

`apt-cache search` prints "name - description" per line and has no
installed marker, so dpkg-query supplies the installed set.
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider


class AptProvider(CommandLineProvider):
    name = "apt"
    executables = ("apt-cache",)
    search_command = "apt-cache search '{query}'"
    installed_command = "dpkg-query -W -f='${Package}\\n'"
    default_source = "apt"
    install_template = "sudo apt install {name}"

    def parse_line(self, line: str) -> Optional[Package]:
        name, sep, description = line.partition(" - ")
        if not sep:
            return None
        return Package(name=name, description=description, source=self.default_source)

    def source_color(self, source: str) -> SourceColor:
        return SourceColor.YELLOW
