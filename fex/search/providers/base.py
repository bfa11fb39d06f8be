"""
Command-line provider - Shared search pipeline for tool-backed providers.

Every backend follows the same steps: escape the query, run the tool's
search command, parse its output, look up an exact-name match, mark
installed packages, merge and rank. Subclasses describe their tool with
class attributes and override only the parsing hooks their output
format needs.
"""

from typing import Iterator, Optional

from loguru import logger

from ...utils import helpers
from ..provider import Package, Provider, SearchResult
from ..ranking import rank_packages


def field_value(line: str, key: str) -> Optional[str]:
    """Return the value of a "Key   : value" line, or None if the line is for another key."""
    label, sep, value = line.partition(":")
    if sep and label.strip() == key:
        return value.strip()
    return None


def split_name_version(name_version: str, digit_required: bool = True) -> tuple[str, str]:
    """
    Split "name-version" at the last hyphen.

    Args:
        name_version: e.g. "py3-requests-2.31.0-r1"
        digit_required: Only split at a hyphen followed by a digit

    Returns:
        (name, version). version is "" when no split point exists.
    """
    for i in range(len(name_version) - 1, 0, -1):
        if name_version[i] != "-":
            continue
        if digit_required and not name_version[i + 1:i + 2].isdigit():
            continue
        return name_version[:i], name_version[i + 1:]
    return name_version, ""


def installed_from_lines(output: str) -> set[str]:
    """Build an installed set from one-name-per-line output."""
    return {line.strip() for line in output.splitlines() if line.strip()}


class CommandLineProvider(Provider):
    """
    Provider backed by a package tool's text output.

    Subclasses override parse_line() for line-oriented output, or
    parse_output() for multi-line records. The defaults parse nothing.

    Class attributes:
        executables: Any of these on PATH makes the provider available
        search_command: Template, {query} is replaced by the escaped query
        info_command: Optional exact-name lookup template
        installed_command: Optional command(s) listing installed packages
        header_lines: Leading lines of search output to skip
        default_source: Source label when the output has none
        install_template: Install command, {name} and {source} available
        exact_match_key: Package fields that identify a duplicate exact match
        capture_stderr: Keep stderr of the search command (for error_signatures)
        error_signatures: Output substrings mapped to a user-facing error
    """

    executables: tuple[str, ...] = ()
    search_command: str = ""
    info_command: Optional[str] = None
    installed_command: Optional[str | tuple[str, ...]] = None
    header_lines: int = 0
    default_source: str = ""
    install_template: str = ""
    exact_match_key: tuple[str, ...] = ("name", "source")
    capture_stderr: bool = False
    error_signatures: dict[str, str] = {}

    def is_available(self) -> bool:
        return any(helpers.command_exists(exe) for exe in self.executables)

    def search(self, query: str) -> SearchResult:
        if not query:
            return SearchResult()

        escaped = helpers.escape_query(query)

        stdout, stderr = self._run_search(escaped)
        error = self.detect_error(stdout, stderr)
        if error:
            return SearchResult(error=error)

        packages = [p for p in self.parse_output(stdout) if p.name]

        exact = self.exact_match(escaped) if self.info_command else None
        if exact is not None and not exact.name:
            exact = None

        if self.installed_command and (packages or exact):
            installed = self.installed_names()
            for package in packages + ([exact] if exact else []):
                package.installed = package.installed or package.name in installed

        if exact is not None:
            packages = self.merge_exact_match(packages, exact)

        return SearchResult(packages=rank_packages(packages, query))

    def install_command(self, package: Package) -> str:
        return self.install_template.format(name=package.name, source=package.source)

    # -- pipeline steps -------------------------------------------------

    def _run_search(self, escaped: str) -> tuple[str, str]:
        cmd = self.search_command.format(query=escaped)
        if self.capture_stderr:
            out = helpers.exec_command_full(cmd)
            return out.stdout, out.stderr
        return helpers.exec_command(cmd + " 2>/dev/null"), ""

    def detect_error(self, stdout: str, stderr: str) -> Optional[str]:
        """Map a recognised failure signature in the output to a message."""
        for signature, message in self.error_signatures.items():
            if signature in stdout or signature in stderr:
                logger.debug(f"{self.name}: matched error signature {signature!r}")
                return message
        return None

    def parse_output(self, output: str) -> Iterator[Package]:
        """Parse search output one line at a time (override for multi-line records)."""
        lines = output.splitlines()[self.header_lines:]
        for line in lines:
            if not line.strip() or self.skip_line(line):
                continue
            package = self.parse_line(line)
            if package is not None:
                yield package

    def skip_line(self, line: str) -> bool:
        """Return True for header or noise lines."""
        return False

    def parse_line(self, line: str) -> Optional[Package]:
        """Turn one line of search output into a Package, or None to drop it."""
        return None

    def exact_match(self, escaped: str) -> Optional[Package]:
        """Run info_command for the literal query and parse the result."""
        out = helpers.exec_command_full(self.info_command.format(query=escaped) + " 2>/dev/null")
        if not out.stdout or self.info_failed(out.stdout, out.returncode):
            return None
        return self.parse_info(out.stdout)

    def info_failed(self, stdout: str, returncode: int) -> bool:
        return False

    def parse_info(self, output: str) -> Optional[Package]:
        return None

    def installed_names(self) -> set[str]:
        """Run installed_command once and collect installed package names."""
        commands = self.installed_command
        if isinstance(commands, str):
            commands = (commands,)
        installed: set[str] = set()
        for cmd in commands:
            installed |= self.parse_installed(helpers.exec_command(cmd + " 2>/dev/null"))
        return installed

    def parse_installed(self, output: str) -> set[str]:
        return installed_from_lines(output)

    def merge_exact_match(self, packages: list[Package], exact: Package) -> list[Package]:
        """Put the exact match first unless the search already found it."""
        key = self._match_key(exact)
        if any(self._match_key(p) == key for p in packages):
            return packages
        return [exact] + packages

    def _match_key(self, package: Package) -> tuple:
        return tuple(getattr(package, attr) for attr in self.exact_match_key)

