"""
Aromaticity perception.

This module classifies rings, atoms and bonds as aromatic based on Hückel's
rule (4n+2 π electrons).

The algorithm works ring by ring over the candidate rings (5, 6 and 7
members) of the ring basis, with handling of:
- Heteroatoms donating a lone pair (pyrrole N, furan O, thiophene S)
- Exocyclic double bonds to O, N and S (pyridones, tropone)
- Charged atoms (cyclopentadienide, tropylium, pyridinium)
- Fused 5/7 pairs whose shared perimeter is aromatic (azulene)

Perception never modifies the Molecule; the result is a separate,
immutable AromaticityResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Sequence

from smilesgraph.elements import AROMATIC_SUBSET, BondOrder
from smilesgraph.rings import find_all_rings
from smilesgraph.types import Ring

if TYPE_CHECKING:
    from smilesgraph.types import Molecule

logger = logging.getLogger(__name__)

CANDIDATE_RING_SIZES: frozenset[int] = frozenset({5, 6, 7})

# Exocyclic double bond partners that pull the π electron out of the ring
_ELECTRON_STEALERS: frozenset[int] = frozenset({7, 8, 16})

_NITROGEN_GROUP: frozenset[int] = frozenset({7, 15, 33})
_OXYGEN_GROUP: frozenset[int] = frozenset({8, 16, 34, 52})


class ElectronDonorType(IntEnum):
    """π electrons an atom donates to a ring.

    NONE marks an atom that cannot take part in a conjugated ring
    (sp3 centres, exocyclic C=C, triple bonds).
    """

    NONE = -1
    VACANT = 0  # empty p orbital
    ONE = 1
    TWO = 2     # lone pair


@dataclass(frozen=True, slots=True)
class AromaticityResult:
    """Aromaticity flags derived from a molecule.

    Attributes:
        rings: All rings of the molecule, each carrying its aromatic flag.
        aromatic_atoms: Indices of aromatic atoms.
        aromatic_bonds: Aromatic bonds as sorted atom pairs.
    """

    rings: tuple[Ring, ...]
    aromatic_atoms: frozenset[int]
    aromatic_bonds: frozenset[tuple[int, int]]

    @property
    def aromatic_rings(self) -> tuple[Ring, ...]:
        return tuple(ring for ring in self.rings if ring.is_aromatic)

    def is_aromatic_atom(self, atom_idx: int) -> bool:
        return atom_idx in self.aromatic_atoms

    def is_aromatic_bond(self, atom1_idx: int, atom2_idx: int) -> bool:
        if atom1_idx > atom2_idx:
            atom1_idx, atom2_idx = atom2_idx, atom1_idx
        return (atom1_idx, atom2_idx) in self.aromatic_bonds


def get_atom_donor_type(
    atom_idx: int,
    mol: "Molecule",
    ring_bonds: frozenset[tuple[int, int]],
) -> ElectronDonorType:
    """Classify the π contribution of a ring atom.

    Args:
        atom_idx: Atom index.
        mol: Parent molecule.
        ring_bonds: Keys of all bonds lying on a ring.

    Returns:
        ElectronDonorType for the atom.
    """
    atom = mol.atoms[atom_idx]
    if atom.is_wildcard:
        return ElectronDonorType.ONE
    # Only elements with a lower case SMILES form can be written aromatic
    if atom.element_symbol.lower() not in AROMATIC_SUBSET:
        return ElectronDonorType.NONE

    atomic_num = atom.atomic_number

    has_ring_double = False
    has_aromatic = False
    exo_partner: int | None = None

    for bond in atom.get_bonds(mol):
        if bond.order is BondOrder.TRIPLE:
            return ElectronDonorType.NONE
        if bond.order is BondOrder.AROMATIC:
            has_aromatic = True
        elif bond.order is BondOrder.DOUBLE:
            if bond.key in ring_bonds:
                has_ring_double = True
            elif exo_partner is None:
                exo_partner = mol.atoms[bond.other_atom(atom_idx)].atomic_number
            else:
                return ElectronDonorType.NONE

    if exo_partner is not None:
        # C=O, C=N and C=S keep the ring carbon sp2 but take its electron
        if atomic_num == 6 and exo_partner in _ELECTRON_STEALERS and not has_ring_double:
            return ElectronDonorType.VACANT
        return ElectronDonorType.NONE

    if has_ring_double:
        return ElectronDonorType.ONE

    if has_aromatic:
        return _aromatic_atom_donor_type(atom_idx, mol)

    return _saturated_atom_donor_type(atom_idx, mol)


def _aromatic_atom_donor_type(atom_idx: int, mol: "Molecule") -> ElectronDonorType:
    """Donor type of an atom written in lower case (aromatic bonds only)."""
    atom = mol.atoms[atom_idx]
    atomic_num = atom.atomic_number
    charge = atom.charge

    if atomic_num in (5, 13):
        return ElectronDonorType.VACANT

    if atomic_num in (6, 14):
        if charge < 0:
            return ElectronDonorType.TWO
        if charge > 0:
            return ElectronDonorType.VACANT
        return ElectronDonorType.ONE

    if atomic_num in _NITROGEN_GROUP:
        if charge > 0:
            return ElectronDonorType.ONE
        if charge < 0 or atom.total_hydrogens > 0 or atom.degree >= 3:
            return ElectronDonorType.TWO
        return ElectronDonorType.ONE

    if atomic_num in _OXYGEN_GROUP:
        if charge > 0:
            return ElectronDonorType.ONE
        return ElectronDonorType.TWO

    return ElectronDonorType.ONE


def _saturated_atom_donor_type(atom_idx: int, mol: "Molecule") -> ElectronDonorType:
    """Donor type of an atom with only single ring bonds."""
    atom = mol.atoms[atom_idx]
    atomic_num = atom.atomic_number
    charge = atom.charge
    valence = mol.bond_valence(atom_idx) + atom.total_hydrogens

    if atomic_num in (6, 14):
        if charge == -1 and valence == 3:
            return ElectronDonorType.TWO
        if charge == 1 and valence == 3:
            return ElectronDonorType.VACANT
        return ElectronDonorType.NONE

    if atomic_num == 5 and charge == 0 and valence == 3:
        return ElectronDonorType.VACANT

    if atomic_num in _NITROGEN_GROUP:
        if (charge == 0 and valence == 3) or (charge == -1 and valence == 2):
            return ElectronDonorType.TWO
        return ElectronDonorType.NONE

    if atomic_num in _OXYGEN_GROUP:
        if charge == 0 and valence == 2:
            return ElectronDonorType.TWO
        return ElectronDonorType.NONE

    return ElectronDonorType.NONE


def apply_huckel(electrons: int) -> bool:
    """Check Hückel's rule: 4n+2 π electrons, n >= 0."""
    return electrons >= 2 and electrons % 4 == 2


def _count_electrons(
    atoms: Sequence[int] | frozenset[int],
    donors: dict[int, ElectronDonorType],
) -> int | None:
    total = 0
    for atom_idx in atoms:
        donor = donors[atom_idx]
        if donor is ElectronDonorType.NONE:
            return None
        total += int(donor)
    return total


class AromaticityPerceiver:
    """Hückel-based aromaticity perception.

    1. Find all rings (cycle basis)
    2. For each ring atom, compute its electron donor type
    3. For each candidate ring (5, 6 or 7 atoms), check Hückel's rule
    4. For non-aromatic candidate pairs sharing a single bond, check the
       combined perimeter

    Atoms and bonds written aromatic in the input stay aromatic whether or
    not their ring passes.
    """

    def perceive(
        self,
        mol: "Molecule",
        rings: Sequence[Ring] | None = None,
    ) -> AromaticityResult:
        """Perceive aromaticity.

        Args:
            mol: Molecule to analyze (not modified).
            rings: Precomputed rings (found with find_all_rings if None).

        Returns:
            AromaticityResult with flagged rings and aromatic atom/bond sets.
        """
        if rings is None:
            rings = find_all_rings(mol)

        ring_bonds: frozenset[tuple[int, int]] = frozenset().union(
            *(ring.bond_keys() for ring in rings)
        )

        donors: dict[int, ElectronDonorType] = {}
        for ring in rings:
            for atom_idx in ring.atoms:
                if atom_idx not in donors:
                    donors[atom_idx] = get_atom_donor_type(atom_idx, mol, ring_bonds)

        aromatic_flags = [False] * len(rings)
        for i, ring in enumerate(rings):
            if ring.size not in CANDIDATE_RING_SIZES:
                continue
            electrons = _count_electrons(ring.atoms, donors)
            if electrons is not None and apply_huckel(electrons):
                aromatic_flags[i] = True

        self._perceive_fused_pairs(rings, donors, aromatic_flags)

        flagged = tuple(
            ring.with_aromatic(flag) for ring, flag in zip(rings, aromatic_flags)
        )

        aromatic_atoms = {atom.idx for atom in mol.atoms if atom.is_aromatic}
        aromatic_bonds = {bond.key for bond in mol.bonds if bond.is_aromatic}
        for ring in flagged:
            if ring.is_aromatic:
                aromatic_atoms.update(ring.atoms)
                aromatic_bonds.update(ring.bond_keys())

        result = AromaticityResult(
            rings=flagged,
            aromatic_atoms=frozenset(aromatic_atoms),
            aromatic_bonds=frozenset(aromatic_bonds),
        )
        logger.debug(
            "Aromaticity: %d of %d rings aromatic, %d aromatic atoms",
            len(result.aromatic_rings),
            len(flagged),
            len(result.aromatic_atoms),
        )
        return result

    def _perceive_fused_pairs(
        self,
        rings: Sequence[Ring],
        donors: dict[int, ElectronDonorType],
        aromatic_flags: list[bool],
    ) -> None:
        """Mark non-aromatic candidate rings whose fused perimeter is aromatic."""
        pending = [
            i for i, ring in enumerate(rings)
            if not aromatic_flags[i] and ring.size in CANDIDATE_RING_SIZES
        ]
        for pos, i in enumerate(pending):
            for j in pending[pos + 1:]:
                shared = rings[i].bond_keys() & rings[j].bond_keys()
                if len(shared) != 1:
                    continue
                perimeter = rings[i].atom_set | rings[j].atom_set
                electrons = _count_electrons(perimeter, donors)
                if electrons is not None and apply_huckel(electrons):
                    aromatic_flags[i] = True
                    aromatic_flags[j] = True


def perceive_aromaticity(
    mol: "Molecule",
    rings: Sequence[Ring] | None = None,
) -> AromaticityResult:
    """Perceive aromaticity in a molecule.

    Convenience function using the default AromaticityPerceiver.

    Args:
        mol: Molecule to analyze.
        rings: Precomputed rings (optional).

    Returns:
        AromaticityResult.

    Example:
        >>> mol = parse("C1=CC=CC=C1")  # Kekulé benzene
        >>> result = perceive_aromaticity(mol)
        >>> len(result.aromatic_rings)
        1
    """
    return AromaticityPerceiver().perceive(mol, rings)
