"""
Simple molecular descriptors.

Read-only aggregations over a parsed Molecule and its ring and aromaticity
data: molecular weight, hydrogen-bond donors and acceptors, rotatable
bonds, an additive LogP estimate and the Lipinski rule of five.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from smilesgraph.elements import BondOrder, Element
from smilesgraph.rings import ring_bond_keys
from smilesgraph.transform import AromaticityResult, perceive_aromaticity

if TYPE_CHECKING:
    from smilesgraph.types import Molecule

logger = logging.getLogger(__name__)

HYDROGEN_MASS: Final[float] = 1.008

# Lipinski rule of five thresholds
MAX_MOLECULAR_WEIGHT: Final[float] = 500.0
MAX_LOGP: Final[float] = 5.0
MAX_HBD: Final[int] = 5
MAX_HBA: Final[int] = 10

# Additive LogP contributions per heavy atom: (atomic number, aromatic) -> value
_LOGP_ATOM: Final[dict[tuple[int, bool], float]] = {
    (6, False): 0.15,
    (6, True): 0.29,
    (7, False): -0.71,
    (7, True): -0.49,
    (8, False): -0.43,
    (8, True): 0.03,
    (9, False): 0.42,
    (15, False): 0.29,
    (16, False): 0.64,
    (16, True): 0.61,
    (17, False): 0.66,
    (35, False): 0.86,
    (53, False): 1.05,
}
_LOGP_H_ON_CARBON: Final[float] = 0.12
_LOGP_H_ON_HETERO: Final[float] = -0.20
_LOGP_DEFAULT: Final[float] = 0.0

_DONOR_ACCEPTOR_ELEMENTS: Final[frozenset[int]] = frozenset({7, 8})


def molecular_weight(mol: "Molecule") -> float:
    """Average molecular weight including implicit and explicit hydrogens.

    Example:
        >>> round(molecular_weight(parse("CCO")), 2)
        46.07
    """
    total = 0.0
    for atom in mol.atoms:
        if atom.is_wildcard:
            continue
        element = Element.from_atomic_number(atom.atomic_number)
        if element is not None:
            total += element.mass
        total += atom.total_hydrogens * HYDROGEN_MASS
    return total


def hydrogen_bond_donors(mol: "Molecule") -> int:
    """Number of N and O atoms carrying at least one hydrogen."""
    return sum(
        1 for atom in mol.atoms
        if atom.atomic_number in _DONOR_ACCEPTOR_ELEMENTS and atom.total_hydrogens > 0
    )


def hydrogen_bond_acceptors(mol: "Molecule") -> int:
    """Number of N and O atoms."""
    return sum(1 for atom in mol.atoms if atom.atomic_number in _DONOR_ACCEPTOR_ELEMENTS)


def rotatable_bonds(mol: "Molecule", aromaticity: AromaticityResult | None = None) -> int:
    """Count single, non-ring bonds between two non-terminal heavy atoms."""
    if aromaticity is None:
        aromaticity = perceive_aromaticity(mol)
    ring_keys = ring_bond_keys(mol)

    count = 0
    for bond in mol.bonds:
        if bond.order is not BondOrder.SINGLE or bond.key in ring_keys:
            continue
        if aromaticity.is_aromatic_bond(bond.atom1_idx, bond.atom2_idx):
            continue
        a1 = mol.atoms[bond.atom1_idx]
        a2 = mol.atoms[bond.atom2_idx]
        if a1.atomic_number == 1 or a2.atomic_number == 1:
            continue
        if mol.heavy_degree(a1.idx) < 2 or mol.heavy_degree(a2.idx) < 2:
            continue
        count += 1
    return count


def estimate_logp(mol: "Molecule", aromaticity: AromaticityResult | None = None) -> float:
    """Octanol/water LogP from additive atom and hydrogen contributions.

    A coarse estimate: each heavy atom contributes by element and
    aromaticity, each hydrogen by whether it sits on carbon.
    """
    if aromaticity is None:
        aromaticity = perceive_aromaticity(mol)

    logp = 0.0
    for atom in mol.atoms:
        if atom.is_wildcard:
            continue
        atomic_num = atom.atomic_number
        key = (atomic_num, aromaticity.is_aromatic_atom(atom.idx))
        logp += _LOGP_ATOM.get(key, _LOGP_ATOM.get((atomic_num, False), _LOGP_DEFAULT))
        h_value = _LOGP_H_ON_CARBON if atomic_num == 6 else _LOGP_H_ON_HETERO
        logp += atom.total_hydrogens * h_value
    return logp


def lipinski_violations(mol: "Molecule") -> list[str]:
    """Names of the rule-of-five criteria the molecule violates."""
    aromaticity = perceive_aromaticity(mol)
    violations: list[str] = []
    if molecular_weight(mol) > MAX_MOLECULAR_WEIGHT:
        violations.append("molecular_weight")
    if estimate_logp(mol, aromaticity) > MAX_LOGP:
        violations.append("logp")
    if hydrogen_bond_donors(mol) > MAX_HBD:
        violations.append("hbd")
    if hydrogen_bond_acceptors(mol) > MAX_HBA:
        violations.append("hba")
    logger.debug("Lipinski violations: %s", violations)
    return violations


def passes_lipinski(mol: "Molecule") -> bool:
    """Rule of five: at most one criterion may be violated."""
    return len(lipinski_violations(mol)) <= 1
