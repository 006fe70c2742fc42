"""
Ring detection algorithms.

This module finds the rings (cycles) of a molecular graph. The ring set is
a cycle basis built from a depth-first spanning forest and then reduced
towards the Smallest Set of Smallest Rings (SSSR).

These algorithms are used by aromaticity perception, canonical ranking and
the descriptors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from smilesgraph.types import Ring

if TYPE_CHECKING:
    from smilesgraph.types import Molecule

logger = logging.getLogger(__name__)

_Edge = tuple[int, int]


def _edge(a: int, b: int) -> _Edge:
    return (a, b) if a < b else (b, a)


def _spanning_forest(mol: "Molecule") -> tuple[list[int], list[int], set[int]]:
    """Depth-first spanning forest of the molecule.

    Returns:
        Tuple of (parent, depth, tree_bonds). Roots have parent -1.
    """
    n = mol.num_atoms
    parent = [-1] * n
    depth = [-1] * n
    tree_bonds: set[int] = set()

    for root in range(n):
        if depth[root] >= 0:
            continue
        depth[root] = 0
        stack = [(root, iter(mol.atoms[root].bond_indices))]

        while stack:
            atom_idx, bond_iter = stack[-1]
            for bond_idx in bond_iter:
                neighbor = mol.bonds[bond_idx].other_atom(atom_idx)
                if depth[neighbor] < 0:
                    parent[neighbor] = atom_idx
                    depth[neighbor] = depth[atom_idx] + 1
                    tree_bonds.add(bond_idx)
                    stack.append((neighbor, iter(mol.atoms[neighbor].bond_indices)))
                    break
            else:
                stack.pop()

    return parent, depth, tree_bonds


def _fundamental_cycle(
    a: int,
    b: int,
    parent: list[int],
    depth: list[int],
) -> frozenset[_Edge]:
    """Close the non-tree edge a-b through the tree paths to the common ancestor."""
    edges = {_edge(a, b)}
    while depth[a] > depth[b]:
        edges.add(_edge(a, parent[a]))
        a = parent[a]
    while depth[b] > depth[a]:
        edges.add(_edge(b, parent[b]))
        b = parent[b]
    while a != b:
        edges.add(_edge(a, parent[a]))
        edges.add(_edge(b, parent[b]))
        a = parent[a]
        b = parent[b]
    return frozenset(edges)


def _order_cycle(edges: frozenset[_Edge]) -> tuple[int, ...] | None:
    """Walk an edge set as a single simple cycle.

    The walk starts at the lowest atom index and heads towards the smaller
    of its two neighbours.

    Returns:
        Atom indices in cyclic order, or None if the edges do not form
        exactly one simple cycle.
    """
    adj: dict[int, list[int]] = {}
    for a, b in edges:
        adj.setdefault(a, []).append(b)
        adj.setdefault(b, []).append(a)

    if len(adj) < 3 or any(len(nbrs) != 2 for nbrs in adj.values()):
        return None

    start = min(adj)
    order = [start]
    prev, current = start, min(adj[start])
    while current != start:
        order.append(current)
        first, second = adj[current]
        prev, current = current, (second if first == prev else first)

    if len(order) != len(adj):
        return None
    return tuple(order)


def _reduce_cycles(cycles: list[frozenset[_Edge]]) -> list[frozenset[_Edge]]:
    """Shrink a cycle basis by pairwise symmetric differences.

    For rings sharing a bond, the larger ring is replaced by the symmetric
    difference of the two edge sets whenever that is one simple cycle
    strictly smaller than the larger ring. The largest ring is examined
    first and partners are tried in index order; replacements that
    duplicate an existing ring's atoms are rejected. Each replacement is a
    basis exchange, so the result still spans the cycle space.
    """
    rings = list(cycles)
    changed = True
    while changed:
        changed = False
        atom_sets = {_atoms_of(r) for r in rings}
        order = sorted(range(len(rings)), key=lambda k: (-len(rings[k]), k))
        for i in order:
            for j in range(len(rings)):
                if i == j or not rings[i] & rings[j]:
                    continue
                candidate = rings[i] ^ rings[j]
                if len(candidate) >= len(rings[i]):
                    continue
                if _atoms_of(candidate) in atom_sets:
                    continue
                if _order_cycle(candidate) is None:
                    continue
                rings[i] = candidate
                changed = True
                break
            if changed:
                break
    return rings


def _atoms_of(edges: frozenset[_Edge]) -> frozenset[int]:
    return frozenset(atom for edge in edges for atom in edge)


def find_all_rings(mol: "Molecule") -> list[Ring]:
    """Find a minimal cycle basis of the molecule.

    Each bond not in the depth-first spanning forest yields one fundamental
    cycle. The cycles are then reduced pairwise so fused systems are
    described by their small rings. The number of rings always equals the
    cyclomatic number (bonds - atoms + components).

    Exact SSSR is not guaranteed for highly bridged polycycles; the result
    is deterministic for a given input.

    Args:
        mol: Molecule to analyze.

    Returns:
        Rings ordered by size, then by their sorted atom indices.

    Example:
        >>> mol = parse("c1ccc2ccccc2c1")  # naphthalene
        >>> [r.size for r in find_all_rings(mol)]
        [6, 6]
    """
    if mol.num_bonds == 0:
        return []

    parent, depth, tree_bonds = _spanning_forest(mol)

    cycles: list[frozenset[_Edge]] = []
    seen: set[frozenset[int]] = set()
    for bond in mol.bonds:
        if bond.idx in tree_bonds:
            continue
        cycle = _fundamental_cycle(bond.atom1_idx, bond.atom2_idx, parent, depth)
        atoms = _atoms_of(cycle)
        if atoms not in seen:
            seen.add(atoms)
            cycles.append(cycle)

    rings: list[Ring] = []
    for cycle in _reduce_cycles(cycles):
        ordered = _order_cycle(cycle)
        assert ordered is not None
        rings.append(Ring(ordered))

    rings.sort(key=lambda r: (r.size, sorted(r.atoms)))
    logger.debug("Found %d rings in %d atoms", len(rings), mol.num_atoms)
    return rings


def ring_bond_keys(mol: "Molecule") -> frozenset[_Edge]:
    """Bonds that lie on any cycle, as sorted atom pairs.

    Uses Tarjan's bridge-finding algorithm (iterative); every bond that is
    not a bridge is a ring bond. O(V+E).
    """
    n = mol.num_atoms
    discovery = [-1] * n
    low = [0] * n
    bridges: set[int] = set()
    counter = 0

    for root in range(n):
        if discovery[root] >= 0:
            continue
        discovery[root] = low[root] = counter
        counter += 1
        stack = [(root, -1, iter(mol.atoms[root].bond_indices))]

        while stack:
            atom_idx, via_bond, bond_iter = stack[-1]
            descended = False
            for bond_idx in bond_iter:
                if bond_idx == via_bond:
                    continue
                neighbor = mol.bonds[bond_idx].other_atom(atom_idx)
                if discovery[neighbor] < 0:
                    discovery[neighbor] = low[neighbor] = counter
                    counter += 1
                    stack.append((neighbor, bond_idx, iter(mol.atoms[neighbor].bond_indices)))
                    descended = True
                    break
                low[atom_idx] = min(low[atom_idx], discovery[neighbor])

            if descended:
                continue

            stack.pop()
            if stack:
                parent_idx = stack[-1][0]
                low[parent_idx] = min(low[parent_idx], low[atom_idx])
                if low[atom_idx] > discovery[parent_idx]:
                    bridges.add(via_bond)

    return frozenset(bond.key for bond in mol.bonds if bond.idx not in bridges)


def ring_membership_counts(
    mol: "Molecule",
    rings: Sequence[Ring] | None = None,
) -> dict[int, int]:
    """Number of rings each atom belongs to.

    Args:
        mol: Molecule to analyze.
        rings: Precomputed rings (found with find_all_rings if None).

    Returns:
        Dict mapping every atom index to its ring count.

    Example:
        >>> mol = parse("c1ccc2ccccc2c1")  # naphthalene
        >>> counts = ring_membership_counts(mol)
        >>> counts[3]  # bridgehead carbon
        2
    """
    if rings is None:
        rings = find_all_rings(mol)

    counts = {i: 0 for i in range(mol.num_atoms)}
    for ring in rings:
        for atom_idx in ring.atoms:
            counts[atom_idx] += 1
    return counts


def find_ring_systems(rings: Sequence[Ring]) -> list[list[Ring]]:
    """Group rings into fused ring systems.

    Two rings are considered fused if they share at least 2 atoms (a bond).
    Spiro rings, which share a single atom, stay separate.

    Args:
        rings: Rings as returned by find_all_rings.

    Returns:
        List of ring systems, each containing fused rings, ordered by the
        first ring of each system.
    """
    if not rings:
        return []

    n = len(rings)
    parent = list(range(n))

    def find(x: int) -> int:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(x: int, y: int) -> None:
        px, py = find(x), find(y)
        if px != py:
            parent[max(px, py)] = min(px, py)

    atom_sets = [ring.atom_set for ring in rings]
    for i in range(n):
        for j in range(i + 1, n):
            if len(atom_sets[i] & atom_sets[j]) >= 2:
                union(i, j)

    systems: dict[int, list[Ring]] = {}
    for i in range(n):
        systems.setdefault(find(i), []).append(rings[i])

    return list(systems.values())
