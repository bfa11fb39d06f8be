"""
Relevance ranking for search results.

Packages are ordered around the query, case-insensitively:
  1. exact name match
  2. name starts with the query
  3. name contains the query (shorter names first)
  4. alphabetical by name, then by source

Backends return their matches in whatever order the tool prints them,
so every provider runs its list through rank_packages() before returning.
"""

from .provider import Package


def _relevance_key(package: Package, query: str) -> tuple:
    name = package.name.lower()
    contains = query in name
    return (
        name != query,
        not name.startswith(query),
        not contains,
        len(package.name) if contains else 0,
        name,
        package.source.lower(),
    )


def rank_packages(packages: list[Package], query: str) -> list[Package]:
    """
    Sort packages by relevance to the query.

    Args:
        packages: Packages to rank (not modified)
        query: The search query string

    Returns:
        New list in relevance order. Duplicates are kept.
    """
    q = query.lower()
    return sorted(packages, key=lambda p: _relevance_key(p, q))
