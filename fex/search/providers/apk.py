"""
APK Provider - Alpine Linux.

`apk search -v` prints "name-version - description". The version starts
at the last hyphen that is followed by a digit, since names themselves
may contain hyphens (py3-requests-2.31.0-r1).
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider, split_name_version


class ApkProvider(CommandLineProvider):
    name = "apk"
    executables = ("apk",)
    search_command = "apk search -v '{query}'"
    installed_command = "apk info"
    default_source = "alpine"
    install_template = "sudo apk add {name}"

    def parse_line(self, line: str) -> Optional[Package]:
        name_version, sep, description = line.partition(" - ")
        if not sep:
            return None
        name, version = split_name_version(name_version)
        return Package(
            name=name,
            version=version,
            description=description,
            source=self.default_source,
        )

    def source_color(self, source: str) -> SourceColor:
        if source == "community":
            return SourceColor.YELLOW
        return SourceColor.BLUE
