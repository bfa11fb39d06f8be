"""
Search package - Provider contract, backends, ranking and registry.

Each package manager is a Provider that shells out to its tool and
normalizes the output into ranked Package records.
"""

from .provider import Package, Provider, SearchResult, SourceColor
from .ranking import rank_packages
from .registry import PROVIDER_CLASSES, ProviderRegistry

__all__ = [
    "Package",
    "Provider",
    "SearchResult",
    "SourceColor",
    "rank_packages",
    "PROVIDER_CLASSES",
    "ProviderRegistry",
]
