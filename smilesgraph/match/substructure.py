"""
Substructure matching.

This module implements a backtracking subgraph-isomorphism search of a
pattern graph against a target molecule. Patterns are written in SMILES
syntax with two extensions: the wildcard atom (``*``) and the any bond
(``~``).

Matching rules:
    - A bare organic atom constrains element and aromaticity
      (``C`` aliphatic, ``c`` aromatic).
    - A bracket atom also constrains charge, and hydrogen count and
      isotope when they are written.
    - A wildcard atom matches any atom.
    - ``~`` matches any bond; an aromatic pattern bond matches only an
      aromatic bond; a single bond that is not between two aromatic pattern
      atoms matches a single or an aromatic bond.

Both the target and the pattern go through perceive_aromaticity, so
``c1ccccc1`` finds benzene written in Kekulé form and ``C1=CC=CC=C1``
finds it written in lower case.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, Union

from smilesgraph.elements import AtomCategory, BondOrder
from smilesgraph.parser import parse_pattern
from smilesgraph.transform import AromaticityResult, perceive_aromaticity

if TYPE_CHECKING:
    from smilesgraph.types import Atom, Bond, Molecule

logger = logging.getLogger(__name__)

PatternLike = Union["Molecule", str]


def _build_pattern_adj(pattern: "Molecule") -> dict[int, list[tuple[int, int]]]:
    """Build adjacency list for pattern: atom_idx -> [(neighbor_idx, bond_idx), ...]"""
    adj: dict[int, list[tuple[int, int]]] = {i: [] for i in range(pattern.num_atoms)}
    for bond in pattern.bonds:
        adj[bond.atom1_idx].append((bond.atom2_idx, bond.idx))
        adj[bond.atom2_idx].append((bond.atom1_idx, bond.idx))
    return adj


def _match_order(pattern: "Molecule") -> list[int]:
    """Order pattern atoms for the search.

    Each connected part of the pattern starts at its highest-degree atom;
    the rest follow in breadth-first order, so every later atom has a
    neighbour that is already mapped.
    """
    n = pattern.num_atoms
    placed = [False] * n
    order: list[int] = []
    by_degree = sorted(range(n), key=lambda i: (-pattern.atoms[i].degree, i))

    for root in by_degree:
        if placed[root]:
            continue
        placed[root] = True
        queue = [root]
        head = 0
        while head < len(queue):
            atom_idx = queue[head]
            head += 1
            order.append(atom_idx)
            nbrs = sorted(
                pattern.atoms[atom_idx].neighbors(pattern),
                key=lambda i: (-pattern.atoms[i].degree, i),
            )
            for nbr in nbrs:
                if not placed[nbr]:
                    placed[nbr] = True
                    queue.append(nbr)

    return order


def _atom_matches(
    mol_atom: "Atom",
    pattern_atom: "Atom",
    mol_is_aromatic: bool,
    pattern_is_aromatic: bool,
) -> bool:
    """Check whether a target atom satisfies a pattern atom."""
    if pattern_atom.is_wildcard:
        if pattern_atom.category is AtomCategory.ORGANIC:
            return True
    else:
        if pattern_atom.atomic_number != mol_atom.atomic_number:
            return False
        if pattern_is_aromatic != mol_is_aromatic:
            return False

    if pattern_atom.category is AtomCategory.BRACKET:
        if pattern_atom.charge != mol_atom.charge:
            return False
        if (
            pattern_atom.hydrogens_specified
            and pattern_atom.explicit_hydrogens != mol_atom.total_hydrogens
        ):
            return False
        if pattern_atom.isotope is not None and pattern_atom.isotope != mol_atom.isotope:
            return False

    return True


def _bond_matches(
    mol_bond: "Bond",
    pattern_bond: "Bond",
    aromaticity: AromaticityResult,
    pattern_aromaticity: AromaticityResult,
) -> bool:
    """Check whether a target bond satisfies a pattern bond."""
    if pattern_bond.is_any:
        return True

    mol_aromatic = aromaticity.is_aromatic_bond(mol_bond.atom1_idx, mol_bond.atom2_idx)
    a1, a2 = pattern_bond.atom1_idx, pattern_bond.atom2_idx
    if pattern_aromaticity.is_aromatic_bond(a1, a2):
        order = BondOrder.AROMATIC
    else:
        order = pattern_bond.order

    if order is BondOrder.AROMATIC:
        return mol_aromatic

    if order is BondOrder.SINGLE:
        if mol_aromatic:
            return not (
                pattern_aromaticity.is_aromatic_atom(a1)
                and pattern_aromaticity.is_aromatic_atom(a2)
            )
        return mol_bond.order is BondOrder.SINGLE

    return not mol_aromatic and mol_bond.order is order


class SubstructureMatcher:
    """Reusable matcher for one pattern.

    Example:
        >>> matcher = SubstructureMatcher("C=O")
        >>> matcher.has_match(parse("CC(=O)O"))
        True
    """

    def __init__(self, pattern: PatternLike) -> None:
        """Initialize matcher.

        Args:
            pattern: Pattern molecule or pattern text.

        Raises:
            ParseError: If pattern text cannot be parsed.
        """
        if isinstance(pattern, str):
            pattern = parse_pattern(pattern)
        self._pattern = pattern
        self._pattern_aromaticity = perceive_aromaticity(pattern)
        self._adj = _build_pattern_adj(pattern)
        self._order = _match_order(pattern)

    @property
    def pattern(self) -> "Molecule":
        return self._pattern

    def iter_matches(
        self,
        mol: "Molecule",
        aromaticity: AromaticityResult | None = None,
    ) -> Iterator[tuple[int, ...]]:
        """Yield every mapping of the pattern into mol.

        Each mapping is a tuple of target atom indices in pattern-atom
        order. Mappings that differ only by a permutation of the same
        target atoms are all yielded.
        """
        pattern = self._pattern
        if pattern.num_atoms == 0:
            yield ()
            return
        if mol.num_atoms == 0:
            return

        if aromaticity is None:
            aromaticity = perceive_aromaticity(mol)

        order = self._order
        adj = self._adj
        pattern_aromaticity = self._pattern_aromaticity
        mapping: dict[int, int] = {}
        used: set[int] = set()

        def candidates(pattern_idx: int) -> list[int]:
            for nbr_idx, _ in adj[pattern_idx]:
                if nbr_idx in mapping:
                    return mol.neighbors(mapping[nbr_idx])
            return list(range(mol.num_atoms))

        def feasible(pattern_idx: int, mol_idx: int) -> bool:
            if not _atom_matches(
                mol.atoms[mol_idx],
                pattern.atoms[pattern_idx],
                aromaticity.is_aromatic_atom(mol_idx),
                pattern_aromaticity.is_aromatic_atom(pattern_idx),
            ):
                return False
            for nbr_idx, bond_idx in adj[pattern_idx]:
                if nbr_idx not in mapping:
                    continue
                mol_bond = mol.get_bond_between(mol_idx, mapping[nbr_idx])
                if mol_bond is None:
                    return False
                if not _bond_matches(
                    mol_bond, pattern.bonds[bond_idx], aromaticity, pattern_aromaticity
                ):
                    return False
            return True

        def backtrack(depth: int) -> Iterator[tuple[int, ...]]:
            if depth == len(order):
                yield tuple(mapping[i] for i in range(pattern.num_atoms))
                return

            pattern_idx = order[depth]
            for mol_idx in candidates(pattern_idx):
                if mol_idx in used or not feasible(pattern_idx, mol_idx):
                    continue
                mapping[pattern_idx] = mol_idx
                used.add(mol_idx)
                yield from backtrack(depth + 1)
                used.discard(mol_idx)
                del mapping[pattern_idx]

        yield from backtrack(0)

    def matches(
        self,
        mol: "Molecule",
        *,
        uniquify: bool = True,
        aromaticity: AromaticityResult | None = None,
    ) -> list[tuple[int, ...]]:
        """All matches of the pattern in mol.

        Args:
            mol: The molecule to search in.
            uniquify: If True (default), return only one match per unique
                set of molecule atoms.
            aromaticity: Precomputed aromaticity of mol (optional).
        """
        results: list[tuple[int, ...]] = []
        seen: set[frozenset[int]] = set()
        for match in self.iter_matches(mol, aromaticity):
            if uniquify:
                atom_set = frozenset(match)
                if atom_set in seen:
                    continue
                seen.add(atom_set)
            results.append(match)

        logger.debug("Pattern with %d atoms: %d matches", self._pattern.num_atoms, len(results))
        return results

    def has_match(
        self,
        mol: "Molecule",
        aromaticity: AromaticityResult | None = None,
    ) -> bool:
        """Check for at least one match, stopping at the first one found."""
        return next(self.iter_matches(mol, aromaticity), None) is not None


def substructure_search(
    mol: "Molecule",
    pattern: PatternLike,
    *,
    uniquify: bool = True,
    aromaticity: AromaticityResult | None = None,
) -> list[tuple[int, ...]]:
    """Find all matches of a pattern in a molecule.

    Args:
        mol: The molecule to search in.
        pattern: The pattern to search for (molecule or text).
        uniquify: If True (default), return only one match per unique set
            of molecule atoms. If False, return all permutations of matches.
        aromaticity: Optional precomputed aromaticity of mol. Pass this
            when doing multiple searches on the same molecule.

    Returns:
        List of tuples, where each tuple contains the molecule atom
        indices that match the pattern atoms (in pattern atom order).

    Example:
        >>> mol = parse("c1ccccc1CCO")
        >>> substructure_search(mol, "CO")
        [(7, 8)]
    """
    return SubstructureMatcher(pattern).matches(
        mol, uniquify=uniquify, aromaticity=aromaticity
    )


def has_substructure(
    mol: "Molecule",
    pattern: PatternLike,
    aromaticity: AromaticityResult | None = None,
) -> bool:
    """Check if a molecule contains a pattern.

    This is more efficient than substructure_search when you only
    need to know if a match exists.

    Example:
        >>> has_substructure(parse("CCO"), "O")
        True
    """
    return SubstructureMatcher(pattern).has_match(mol, aromaticity)


def count_matches(
    mol: "Molecule",
    pattern: PatternLike,
    aromaticity: AromaticityResult | None = None,
) -> int:
    """Count unique matches of a pattern in a molecule."""
    return len(SubstructureMatcher(pattern).matches(mol, aromaticity=aromaticity))
