"""
Homebrew providers - brew and zerobrew.

`brew search --desc` groups results under section headers:

    ==> Formulae
    ripgrep: Search tool like grep and The Silver Searcher
    ==> Casks
    ripgrep-gui: (Ripgrep GUI) Graphical front-end

The section decides the source ("formula" or "cask"), and casks need
`--cask` to install. zerobrew is driven through the same brew commands.
"""

from typing import Iterator, Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider

# Lines of `brew info` that never hold the description
_INFO_NOISE = ("=", "http", "Installed", "From:", "License:")


class BrewProvider(CommandLineProvider):
    """Search Homebrew formulae and casks."""

    name = "brew"
    executables = ("brew",)
    search_command = "brew search --desc '{query}'"
    info_command = "brew info '{query}'"
    installed_command = ("brew list --formula", "brew list --cask")
    default_source = "formula"
    exact_match_key = ("name",)

    def parse_output(self, output: str) -> Iterator[Package]:
        source = self.default_source
        for line in output.splitlines():
            if not line:
                continue
            if "==> Formulae" in line:
                source = "formula"
                continue
            if "==> Casks" in line:
                source = "cask"
                continue
            if line.startswith("=") or line.startswith("No "):
                continue

            name, sep, description = line.partition(": ")
            yield Package(
                name=name.strip() if sep else line.strip(),
                description=description if sep else "",
                source=source,
            )

    def info_failed(self, stdout: str, returncode: int) -> bool:
        return "Error:" in stdout

    def parse_info(self, output: str) -> Optional[Package]:
        lines = output.splitlines()
        header = lines[0].removeprefix("==> ")
        name, sep, details = header.partition(": ")
        if not sep:
            return None

        version = ""
        if details.startswith("stable "):
            version = details.split()[1].rstrip(",")

        description = next(
            (l for l in lines[1:] if l and not l.startswith(_INFO_NOISE)),
            "",
        )
        return Package(
            name=name,
            version=version,
            description=description,
            source=self.default_source,
        )

    def install_command(self, package: Package) -> str:
        if package.source == "cask":
            return f"brew install --cask {package.name}"
        return f"brew install {package.name}"

    def source_color(self, source: str) -> SourceColor:
        if source == "cask":
            return SourceColor.MAGENTA
        return SourceColor.LIGHT_GREEN


class ZerobrewProvider(BrewProvider):
    """Homebrew-compatible installs on hosts that ship zerobrew."""

    name = "zerobrew"
    executables = ("zerobrew",)
