"""
Provider Registry - Lookup and auto-detection of package-manager backends.

The auto-detect order is fixed: AUR helpers first, then native distro
managers, then the universal managers as a fallback. New backends are
added by inserting them into PROVIDER_CLASSES at the right position.
"""

from typing import Optional

from loguru import logger

from .provider import Provider
from .providers import (
    ApkProvider,
    AptProvider,
    BrewProvider,
    DnfProvider,
    FlatpakProvider,
    NixProvider,
    PacmanProvider,
    ParuProvider,
    SnapProvider,
    XbpsProvider,
    YayProvider,
    ZerobrewProvider,
    ZypperProvider,
)

# paru → yay → pacman → xbps → zerobrew → brew → dnf → apk → zypper → nix → apt → snap → flatpak
PROVIDER_CLASSES = (
    ParuProvider,
    YayProvider,
    PacmanProvider,
    XbpsProvider,
    ZerobrewProvider,
    BrewProvider,
    DnfProvider,
    ApkProvider,
    ZypperProvider,
    NixProvider,
    AptProvider,
    SnapProvider,
    FlatpakProvider,
)


class ProviderRegistry:
    """Holds one instance of every provider, in auto-detect priority order."""

    def __init__(self, provider_classes=PROVIDER_CLASSES):
        self._providers: list[Provider] = [cls() for cls in provider_classes]

    def names(self) -> list[str]:
        return [p.name for p in self._providers]

    def create(self, name: str) -> Optional[Provider]:
        """
        Look up a provider by exact name.

        Returns:
            The provider, or None for an unknown name. Availability is
            not checked.
        """
        for provider in self._providers:
            if provider.name == name:
                return provider
        return None

    def auto_detect(self) -> Optional[Provider]:
        """Return the first available provider in priority order, or None."""
        for provider in self._providers:
            if provider.is_available():
                logger.debug(f"Auto-detected provider: {provider.name}")
                return provider
        logger.debug("No provider available")
        return None

    def list_available(self) -> list[tuple[str, Provider]]:
        """Return (name, provider) for every available provider, in priority order."""
        return [(p.name, p) for p in self._providers if p.is_available()]
