"""
Nix Provider - nixpkgs through nix-env.

Output columns are space padded:

    nixpkgs.ripgrep  ripgrep-14.1.0  Utility that combines the usability of ...

The attribute path (minus "nixpkgs.") is the install name. nix-env has
no cheap installed listing for the channel, so packages are never
marked installed.
"""

from typing import Optional

from ..provider import Package, SourceColor
from .base import CommandLineProvider, split_name_version


class NixProvider(CommandLineProvider):
    name = "nix"
    executables = ("nix", "nix-env")
    search_command = "nix-env -qaP --description '.*{query}.*'"
    default_source = "nixpkgs"
    install_template = "nix-env -iA nixpkgs.{name}"

    def parse_line(self, line: str) -> Optional[Package]:
        parts = line.split(None, 2)
        if len(parts) < 2:
            return None
        attr, name_version = parts[0], parts[1]
        _, version = split_name_version(name_version)
        return Package(
            name=attr.removeprefix("nixpkgs."),
            version=version,
            description=parts[2].strip() if len(parts) > 2 else "",
            source=self.default_source,
        )

    def source_color(self, source: str) -> SourceColor:
        return {
            "nixpkgs": SourceColor.BLUE,
            "nixos": SourceColor.CYAN,
        }.get(source, SourceColor.MAGENTA)
