"""
fex - command line entry point.

Usage:
    fex                  Auto-detect a package manager and start searching
    fex -p flatpak       Use a specific provider
    fex -l               List providers available on this system
"""

import sys
from typing import Optional

import click
from loguru import logger

from . import __version__
from .panels.terminal import TerminalPanel
from .search.provider import Provider
from .search.registry import ProviderRegistry
from .services.orchestrator import SearchOrchestrator
from .utils.helpers import load_settings, setup_logging


def resolve_provider(registry: ProviderRegistry, name: Optional[str], default: str = "") -> Provider:
    """
    Pick the provider to search with, exiting with a message if there is none.

    Args:
        registry: Provider registry
        name: Provider requested on the command line
        default: Provider named in settings, tried before auto-detection
    """
    if name:
        provider = registry.create(name)
        if provider is None:
            click.echo(f"Unknown provider '{name}'. Use -l to list available providers.", err=True)
            sys.exit(1)
        if not provider.is_available():
            click.echo(f"Provider '{name}' is not available on this system.", err=True)
            sys.exit(1)
        return provider

    if default:
        provider = registry.create(default)
        if provider is not None and provider.is_available():
            return provider
        logger.warning(f"Configured default provider '{default}' is not usable, auto-detecting")

    provider = registry.auto_detect()
    if provider is None:
        click.echo("No supported package manager found.", err=True)
        sys.exit(1)
    return provider


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="fex")
@click.option("--provider", "-p", "provider_name", metavar="PROVIDER", default=None,
              help="Use a specific package provider.")
@click.option("--list", "-l", "list_providers", is_flag=True,
              help="List available providers and exit.")
@click.option("--debug", is_flag=True, help="Write debug logging to the log file.")
def main(provider_name: Optional[str], list_providers: bool, debug: bool) -> None:
    """A TUI package search tool."""
    settings = load_settings()
    setup_logging("DEBUG" if debug else settings["logging"]["level"])

    registry = ProviderRegistry()

    if list_providers:
        available = registry.list_available()
        if not available:
            click.echo("No supported package managers found.")
            return
        click.echo("Available providers:")
        for name, _ in available:
            click.echo(f"  {name}")
        return

    provider = resolve_provider(registry, provider_name, settings["provider"]["default"])
    logger.info(f"Using provider: {provider.name}")

    orchestrator = SearchOrchestrator(provider, debounce_ms=settings["search"]["debounce_ms"])
    TerminalPanel(orchestrator, poll_interval_ms=settings["ui"]["poll_interval_ms"]).run()


if __name__ == "__main__":
    main()
