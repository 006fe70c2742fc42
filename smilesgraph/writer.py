"""
SMILES string writer.

This module provides functionality for converting Molecule objects back
to SMILES strings, using canonical atom ordering for reproducible output.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final, Union

from smilesgraph.canon import CanonicalRank, canonical_ranks
from smilesgraph.elements import (
    AROMATIC_ORGANIC_SUBSET,
    ORGANIC_SUBSET,
    BondOrder,
    implicit_hydrogens,
)
from smilesgraph.parser import parse
from smilesgraph.transform import AromaticityResult, perceive_aromaticity

if TYPE_CHECKING:
    from smilesgraph.types import Atom, Bond, Molecule

logger = logging.getLogger(__name__)

_MAX_RING_NUMBER: Final[int] = 99

_WHITE, _GREY, _BLACK = 0, 1, 2


class SmilesWriter:
    """SMILES string writer with canonical traversal.

    The traversal algorithm:
    1. Start from the lowest-ranked atom in each component
    2. Depth-first search visiting neighbours in ascending rank
    3. A first pass finds the ring-closure bonds; a second pass writes text
    4. Ring digits reuse the lowest number not currently open

    Both passes use an explicit stack, so arbitrarily long chains are safe.

    Example:
        >>> from smilesgraph import parse
        >>> mol = parse("C(C)CC")
        >>> writer = SmilesWriter(mol)
        >>> writer.to_smiles()
        'CCCC'
    """

    def __init__(
        self,
        mol: Molecule,
        ranks: CanonicalRank | None = None,
        aromaticity: AromaticityResult | None = None,
    ) -> None:
        """Initialize writer.

        Args:
            mol: Molecule to write.
            ranks: Pre-computed canonical ranks (computed if None).
            aromaticity: Pre-computed aromaticity (perceived if None).
        """
        self._mol = mol
        self._aromaticity = aromaticity if aromaticity is not None else perceive_aromaticity(mol)
        self._ranks = ranks if ranks is not None else canonical_ranks(mol, self._aromaticity)

    def to_smiles(self) -> str:
        """Generate canonical SMILES string.

        Components are written in ascending rank of their first atom and
        joined with '.'.
        """
        ranks = self._ranks
        starts = [
            min(comp, key=lambda a: ranks[a])
            for comp in self._mol.connected_components()
        ]
        starts.sort(key=lambda a: ranks[a])

        return ".".join(self._write_component(start) for start in starts)

    def _sorted_neighbors(self, atom_idx: int) -> list[tuple[int, int]]:
        """(neighbour, bond index) pairs in ascending neighbour rank."""
        mol = self._mol
        pairs = [
            (mol.bonds[b].other_atom(atom_idx), b)
            for b in mol.atoms[atom_idx].bond_indices
        ]
        pairs.sort(key=lambda p: self._ranks[p[0]])
        return pairs

    def _write_component(self, start: int) -> str:
        """Write SMILES for the connected component containing start."""
        children, closures = self._find_tree(start)
        return self._emit(start, children, closures)

    def _find_tree(
        self,
        start: int,
    ) -> tuple[dict[int, list[tuple[int, int]]], dict[int, list[int]]]:
        """Phase 1: depth-first tree and ring-closure bonds.

        Returns:
            Tuple of (children, closures): tree children per atom in visit
            order, and ring-closure bond indices per atom.
        """
        colors: dict[int, int] = {start: _GREY}
        children: dict[int, list[tuple[int, int]]] = {start: []}
        closures: dict[int, list[int]] = {start: []}

        stack = [(start, -1, iter(self._sorted_neighbors(start)))]
        while stack:
            atom_idx, in_bond, nbr_iter = stack[-1]
            for nbr, bond_idx in nbr_iter:
                if bond_idx == in_bond:
                    continue
                color = colors.get(nbr, _WHITE)
                if color == _WHITE:
                    colors[nbr] = _GREY
                    children[atom_idx].append((nbr, bond_idx))
                    children[nbr] = []
                    closures[nbr] = []
                    stack.append((nbr, bond_idx, iter(self._sorted_neighbors(nbr))))
                    break
                if color == _GREY:
                    # Back edge to an atom still on the stack
                    closures[nbr].append(bond_idx)
                    closures[atom_idx].append(bond_idx)
            else:
                colors[atom_idx] = _BLACK
                stack.pop()

        return children, closures

    def _emit(
        self,
        start: int,
        children: dict[int, list[tuple[int, int]]],
        closures: dict[int, list[int]],
    ) -> str:
        """Phase 2: walk the tree and build the text."""
        mol = self._mol
        out: list[str] = []
        open_digits: dict[int, int] = {}  # bond index -> ring number
        in_use: set[int] = set()

        # Items are either literal text or an atom index to visit
        stack: list[str | int] = [start]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(item)
                continue

            atom_idx = item
            out.append(self._atom_to_smiles(mol.atoms[atom_idx]))

            closing = [b for b in closures[atom_idx] if b in open_digits]
            opening = [b for b in closures[atom_idx] if b not in open_digits]
            opening.sort(key=lambda b: self._ranks[mol.bonds[b].other_atom(atom_idx)])

            released: list[int] = []
            for bond_idx in closing:
                digit = open_digits.pop(bond_idx)
                out.append(self._bond_to_smiles(mol.bonds[bond_idx]))
                out.append(_ring_number_to_smiles(digit))
                released.append(digit)

            for bond_idx in opening:
                digit = _lowest_free(in_use)
                in_use.add(digit)
                open_digits[bond_idx] = digit
                out.append(_ring_number_to_smiles(digit))

            in_use.difference_update(released)

            kids = children[atom_idx]
            pending: list[str | int] = []
            for i, (nbr, bond_idx) in enumerate(kids):
                bond_text = self._bond_to_smiles(mol.bonds[bond_idx])
                if i + 1 < len(kids):
                    pending.extend(("(", bond_text, nbr, ")"))
                else:
                    pending.extend((bond_text, nbr))
            stack.extend(reversed(pending))

        return "".join(out)

    def _is_aromatic_atom(self, atom: Atom) -> bool:
        return self._aromaticity.is_aromatic_atom(atom.idx)

    def _effective_order(self, bond: Bond) -> BondOrder:
        if self._aromaticity.is_aromatic_bond(bond.atom1_idx, bond.atom2_idx):
            return BondOrder.AROMATIC
        return bond.order

    def _atom_to_smiles(self, atom: Atom) -> str:
        """Convert atom to SMILES string."""
        is_aromatic = self._is_aromatic_atom(atom)

        if atom.is_wildcard:
            symbol = "*"
        elif is_aromatic:
            symbol = atom.element_symbol.lower()
        else:
            symbol = atom.element_symbol

        if not self._needs_brackets(atom, is_aromatic):
            return symbol

        parts = ["["]
        if atom.isotope is not None:
            parts.append(str(atom.isotope))
        parts.append(symbol)

        hydrogens = atom.total_hydrogens
        if hydrogens > 0:
            parts.append("H")
            if hydrogens > 1:
                parts.append(str(hydrogens))

        if atom.charge > 0:
            parts.append("+")
            if atom.charge > 1:
                parts.append(str(atom.charge))
        elif atom.charge < 0:
            parts.append("-")
            if atom.charge < -1:
                parts.append(str(-atom.charge))

        parts.append("]")
        return "".join(parts)

    def _needs_brackets(self, atom: Atom, is_aromatic: bool) -> bool:
        """Check if atom needs bracket notation.

        An atom is written bare only when it is in the organic subset,
        carries no charge or isotope, and its hydrogen count is exactly what
        the organic-subset valence rules would imply.
        """
        if atom.charge != 0 or atom.isotope is not None:
            return True

        if atom.is_wildcard:
            return atom.total_hydrogens != 0

        if is_aromatic:
            if atom.element_symbol.lower() not in AROMATIC_ORGANIC_SUBSET:
                return True
        elif atom.element_symbol not in ORGANIC_SUBSET:
            return True

        bond_valence = sum(
            self._effective_order(bond).valence for bond in atom.get_bonds(self._mol)
        )
        expected = implicit_hydrogens(atom.atomic_number, bond_valence, is_aromatic)
        return atom.total_hydrogens != expected

    def _bond_to_smiles(self, bond: Bond) -> str:
        """Convert bond to SMILES string.

        Single bonds between aromatic atoms need an explicit '-' to
        distinguish them from implicit aromatic bonds.
        """
        if bond.is_any:
            return "~"

        order = self._effective_order(bond)
        both_aromatic = (
            self._aromaticity.is_aromatic_atom(bond.atom1_idx)
            and self._aromaticity.is_aromatic_atom(bond.atom2_idx)
        )

        if order is BondOrder.AROMATIC:
            return "" if both_aromatic else ":"
        if order is BondOrder.SINGLE:
            return "-" if both_aromatic else ""
        return order.symbol


def _lowest_free(in_use: set[int]) -> int:
    digit = 1
    while digit in in_use:
        digit += 1
    if digit > _MAX_RING_NUMBER:
        raise ValueError(f"More than {_MAX_RING_NUMBER} ring closures open at once")
    return digit


def _ring_number_to_smiles(n: int) -> str:
    """Format ring closure number."""
    if n < 10:
        return str(n)
    return f"%{n}"


def canonical_smiles(mol_or_smiles: Union[Molecule, str]) -> str:
    """Generate canonical SMILES.

    Args:
        mol_or_smiles: Molecule object or SMILES text.

    Returns:
        Canonical SMILES string. Any two inputs denoting the same molecular
        graph produce identical text.

    Example:
        >>> canonical_smiles("OCC")
        'CCO'
        >>> canonical_smiles("C1=CC=CC=C1")
        'c1ccccc1'
    """
    mol = parse(mol_or_smiles) if isinstance(mol_or_smiles, str) else mol_or_smiles
    smiles = SmilesWriter(mol).to_smiles()
    logger.debug("Canonical SMILES: %s", smiles)
    return smiles
