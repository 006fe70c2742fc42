"""Ring detection and analysis."""

from smilesgraph.rings.detection import (
    find_all_rings,
    find_ring_systems,
    ring_bond_keys,
    ring_membership_counts,
)

__all__ = [
    "find_all_rings",
    "find_ring_systems",
    "ring_bond_keys",
    "ring_membership_counts",
]
