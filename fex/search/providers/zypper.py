"""
Zypper Provider - openSUSE.

`zypper --quiet search` prints a pipe-delimited table:

    S  | Name    | Summary                  | Type
    ---+---------+--------------------------+--------
    i+ | ripgrep | A search tool            | package

An "i" or "i+" status column marks installed packages.
`zypper info` supplies the exact-name match.
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider, field_value

INFO_FIELDS = {
    "Repository": "source",
    "Name": "name",
    "Version": "version",
    "Summary": "description",
}


class ZypperProvider(CommandLineProvider):
    name = "zypper"
    executables = ("zypper",)
    search_command = "zypper --quiet search '{query}'"
    info_command = "zypper --quiet info '{query}'"
    default_source = "zypper"
    install_template = "sudo zypper install {name}"
    exact_match_key = ("name",)

    def skip_line(self, line: str) -> bool:
        if "Name" in line and "Summary" in line:
            return True
        return line.startswith("---") or "--+" in line

    def parse_line(self, line: str) -> Optional[Package]:
        fields = [f.strip() for f in line.split("|")]
        if len(fields) < 3:
            return None
        return Package(
            name=fields[1],
            description=fields[2],
            source=fields[3] if len(fields) > 3 else self.default_source,
            installed=fields[0] in ("i", "i+"),
        )

    def info_failed(self, stdout: str, returncode: int) -> bool:
        return "not found" in stdout

    def parse_info(self, output: str) -> Optional[Package]:
        package = Package(name="")
        for line in output.splitlines():
            installed = field_value(line, "Installed")
            if installed is not None:
                package.installed = "Yes" in installed
                continue
            for key, attr in INFO_FIELDS.items():
                value = field_value(line, key)
                if value is not None:
                    setattr(package, attr, value)
                    break
        return package if package.name else None

    def source_color(self, source: str) -> SourceColor:
        return {
            "repo-oss": SourceColor.GREEN,
            "repo-non-oss": SourceColor.YELLOW,
            "repo-update": SourceColor.BLUE,
            "repo-update-non-oss": SourceColor.MAGENTA,
        }.get(source, SourceColor.CYAN)
