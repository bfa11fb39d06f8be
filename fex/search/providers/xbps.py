"""
XBPS Provider - Void Linux.

`xbps-query -Rs` marks each line with its install state:

    [*] ripgrep-14.1.0_1  Fast line-oriented search tool
    [-] ripgrep-all-0.10.6_1  Search tool for PDFs, E-Books, ...

Void versions always follow the last hyphen.
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider, split_name_version

_MARKERS = {"[*]": True, "[-]": False}


class XbpsProvider(CommandLineProvider):
    name = "xbps"
    executables = ("xbps-query",)
    search_command = "xbps-query -Rs '{query}'"
    default_source = "void"
    install_template = "sudo xbps-install {name}"

    def skip_line(self, line: str) -> bool:
        return len(line) < 5 or line[:3] not in _MARKERS

    def parse_line(self, line: str) -> Optional[Package]:
        installed = _MARKERS[line[:3]]
        rest = line[4:]

        name_version, sep, description = rest.partition("  ")
        name, version = split_name_version(name_version.rstrip(), digit_required=False)
        return Package(
            name=name,
            version=version,
            description=description.lstrip() if sep else "",
            source=self.default_source,
            installed=installed,
        )

    def source_color(self, source: str) -> SourceColor:
        return SourceColor.GREEN
