"""
DNF Provider - Fedora and RHEL derivatives.

Result lines are indented "name.arch<spaces>description"; section
banners ("Matched fields: ...", "Updating and loading repositories")
are skipped. rpm supplies the installed set.
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider

_NOISE = ("Matched fields:", "Updating", "Repositories")


class DnfProvider(CommandLineProvider):
    name = "dnf"
    executables = ("dnf",)
    search_command = "dnf search '{query}'"
    installed_command = "rpm -qa --qf '%{NAME}\\n'"
    default_source = "fedora"
    install_template = "sudo dnf install {name}"

    def skip_line(self, line: str) -> bool:
        return not line.startswith(" ") or any(noise in line for noise in _NOISE)

    def parse_line(self, line: str) -> Optional[Package]:
        parts = line.split(None, 1)
        name_arch = parts[0]
        if "." not in name_arch:
            return None

        return Package(
            name=name_arch.rsplit(".", 1)[0],
            description=parts[1].strip() if len(parts) > 1 else "",
            source=self.default_source,
        )

    def source_color(self, source: str) -> SourceColor:
        return {
            "fedora": SourceColor.BLUE,
            "updates": SourceColor.GREEN,
            "@System": SourceColor.CYAN,
        }.get(source, SourceColor.YELLOW)
