"""
Canonical atom ranking.

This module assigns every atom a canonical rank by iterative partition
refinement, so that graph-isomorphic molecules receive the same ranking
up to automorphism regardless of the order in which their atoms were
written. The writer turns these ranks into canonical SMILES.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Sequence

from smilesgraph.config import DEFAULT_CANON_CONFIG, CanonConfig
from smilesgraph.elements import BondOrder
from smilesgraph.rings import ring_bond_keys
from smilesgraph.transform import AromaticityResult, perceive_aromaticity

if TYPE_CHECKING:
    from smilesgraph.types import Molecule

logger = logging.getLogger(__name__)


# =============================================================================
# Data structures for canonicalization
# =============================================================================

@dataclass(frozen=True, slots=True)
class CanonicalRank:
    """Dense canonical rank of every atom.

    Ranks run from 0 to n-1 and are a total order: no two atoms share a
    rank. Index with an atom index to get its rank.

    Attributes:
        ranks: Rank of each atom, indexed by atom index.
    """

    ranks: tuple[int, ...]

    def __getitem__(self, atom_idx: int) -> int:
        return self.ranks[atom_idx]

    def __len__(self) -> int:
        return len(self.ranks)

    def __iter__(self) -> Iterator[int]:
        return iter(self.ranks)

    def order(self) -> list[int]:
        """Atom indices sorted by ascending rank."""
        return sorted(range(len(self.ranks)), key=self.ranks.__getitem__)

    def as_list(self) -> list[int]:
        return list(self.ranks)


@dataclass(slots=True)
class _CanonAtom:
    """Internal atom representation for canonicalization."""
    atom_idx: int
    invariant: tuple[int, ...]
    nbrs: list[tuple[int, int]]  # (bond order, neighbour index)


# =============================================================================
# Partition refinement
# =============================================================================

def _dense_classes(keys: Sequence[tuple]) -> list[int]:
    """Number keys densely in sorted order; equal keys share a class."""
    index = {key: i for i, key in enumerate(sorted(set(keys)))}
    return [index[key] for key in keys]


def _refine(
    atoms: list[_CanonAtom],
    classes: list[int],
    max_iterations: int,
) -> list[int]:
    """Refine classes by neighbour classes until the partition is stable."""
    n_classes = len(set(classes))
    for _ in range(max_iterations):
        keys = [
            (
                classes[a.atom_idx],
                tuple(sorted((order, classes[nbr]) for order, nbr in a.nbrs)),
            )
            for a in atoms
        ]
        refined = _dense_classes(keys)
        n_refined = len(set(refined))
        classes = refined
        if n_refined == n_classes:
            return classes
        n_classes = n_refined

    logger.warning(
        "Canonical refinement stopped after %d iterations without a stable partition",
        max_iterations,
    )
    return classes


def _break_ties(
    atoms: list[_CanonAtom],
    classes: list[int],
    max_iterations: int,
) -> list[int]:
    """Split tied classes until every atom is alone in its class.

    The lowest tied class is split by promoting its member with the lowest
    atom index, then refinement resumes.
    """
    n_atoms = len(atoms)
    while len(set(classes)) < n_atoms:
        counts: dict[int, int] = {}
        for cls in classes:
            counts[cls] = counts.get(cls, 0) + 1
        tied = min(cls for cls, count in counts.items() if count > 1)
        chosen = min(i for i in range(n_atoms) if classes[i] == tied)

        keys = [
            (cls, 1 if cls == tied and i != chosen else 0)
            for i, cls in enumerate(classes)
        ]
        classes = _refine(atoms, _dense_classes(keys), max_iterations)

    return classes


# =============================================================================
# Public API
# =============================================================================

class Canonicalizer:
    """Compute canonical atom ordering for a molecule.

    The initial invariant of each atom is (atomic number, charge, isotope,
    degree, aromatic flag, ring bond count, total hydrogens). Each refinement
    round extends the current class of every atom with the sorted
    (bond order, neighbour class) pairs of its neighbours and renumbers the
    classes densely in sorted order.

    Example:
        >>> from smilesgraph import parse
        >>> mol = parse("OCC")
        >>> ranks = Canonicalizer(mol).compute_ranks()
        >>> ranks.order()
        [2, 1, 0]
    """

    def __init__(
        self,
        mol: Molecule,
        aromaticity: AromaticityResult | None = None,
        config: CanonConfig | None = None,
    ) -> None:
        """Initialize canonicalizer.

        Args:
            mol: Molecule to canonicalize.
            aromaticity: Precomputed aromaticity (perceived if None).
            config: Refinement settings.
        """
        self._mol = mol
        self._aromaticity = aromaticity
        self._config = config or DEFAULT_CANON_CONFIG

    def compute_ranks(self, break_ties: bool = True) -> CanonicalRank:
        """Compute canonical ranks for all atoms.

        Args:
            break_ties: Whether to break remaining ties (default True).
                Without tie breaking, symmetry-equivalent atoms share a rank.

        Returns:
            CanonicalRank. Lower rank = earlier in canonical ordering.
        """
        if self._mol.num_atoms == 0:
            return CanonicalRank(())

        atoms = self._build_canon_atoms()
        max_iterations = self._config.max_iterations

        classes = _dense_classes([a.invariant for a in atoms])
        classes = _refine(atoms, classes, max_iterations)
        if break_ties:
            classes = _break_ties(atoms, classes, max_iterations)

        logger.debug(
            "Canonical ranks for %d atoms: %d classes",
            len(atoms),
            len(set(classes)),
        )
        return CanonicalRank(tuple(classes))

    def _build_canon_atoms(self) -> list[_CanonAtom]:
        """Build internal atom representations."""
        mol = self._mol
        aromaticity = self._aromaticity
        if aromaticity is None:
            aromaticity = perceive_aromaticity(mol)
        ring_bonds = ring_bond_keys(mol)

        atoms: list[_CanonAtom] = []
        for atom in mol.atoms:
            nbrs: list[tuple[int, int]] = []
            for bond in atom.get_bonds(mol):
                nbr = bond.other_atom(atom.idx)
                if aromaticity.is_aromatic_bond(atom.idx, nbr):
                    order = int(BondOrder.AROMATIC)
                else:
                    order = int(bond.order)
                nbrs.append((order, nbr))

            invariant = (
                atom.atomic_number,
                atom.charge,
                atom.isotope or 0,
                atom.degree,
                int(aromaticity.is_aromatic_atom(atom.idx)),
                sum(1 for bond in atom.get_bonds(mol) if bond.key in ring_bonds),
                atom.total_hydrogens,
            )
            atoms.append(_CanonAtom(atom.idx, invariant, nbrs))

        return atoms


def canonical_ranks(
    mol: Molecule,
    aromaticity: AromaticityResult | None = None,
    config: CanonConfig | None = None,
) -> CanonicalRank:
    """Compute canonical ranks for a molecule.

    This is a convenience function that creates a Canonicalizer
    and computes ranks with default settings.

    Args:
        mol: Molecule to rank.
        aromaticity: Precomputed aromaticity (optional).
        config: Refinement settings (optional).

    Returns:
        CanonicalRank mapping atom index to rank.

    Example:
        >>> mol = parse("C(C)CC")
        >>> ranks = canonical_ranks(mol)
        >>> first_atom = ranks.order()[0]
    """
    return Canonicalizer(mol, aromaticity, config).compute_ranks()
