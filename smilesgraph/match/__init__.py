"""Substructure matching."""

from smilesgraph.match.substructure import (
    SubstructureMatcher,
    count_matches,
    has_substructure,
    substructure_search,
)

__all__ = [
    "SubstructureMatcher",
    "count_matches",
    "has_substructure",
    "substructure_search",
]
