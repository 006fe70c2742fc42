"""
Core molecular data types.

This module defines the fundamental data structures for representing
molecules: Atom, Bond, Molecule and Ring. All of them are immutable once
constructed; MoleculeBuilder is the only way to assemble a Molecule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from smilesgraph.elements import (
    AtomCategory,
    BondOrder,
    Element,
    get_atomic_number,
    implicit_hydrogens,
)


@dataclass(frozen=True, slots=True)
class Bond:
    """Represents a chemical bond between two atoms.

    Attributes:
        idx: Unique index of this bond in the molecule.
        atom1_idx: Index of the source atom (the one written first).
        atom2_idx: Index of the target atom.
        order: Bond order.
        is_ring_closure: Whether the bond was written as a ring-closure digit.
        is_any: Pattern wildcard bond (~), matches any target bond.
    """

    idx: int
    atom1_idx: int
    atom2_idx: int
    order: BondOrder = BondOrder.SINGLE
    is_ring_closure: bool = False
    is_any: bool = False

    def other_atom(self, atom_idx: int) -> int:
        """Get the index of the atom on the other end of this bond.

        Raises:
            ValueError: If atom_idx is not part of this bond.
        """
        if atom_idx == self.atom1_idx:
            return self.atom2_idx
        if atom_idx == self.atom2_idx:
            return self.atom1_idx
        raise ValueError(f"Atom {atom_idx} not in bond {self.idx}")

    @property
    def key(self) -> tuple[int, int]:
        """Unordered atom pair as a sorted tuple."""
        if self.atom1_idx < self.atom2_idx:
            return (self.atom1_idx, self.atom2_idx)
        return (self.atom2_idx, self.atom1_idx)

    @property
    def is_aromatic(self) -> bool:
        return self.order is BondOrder.AROMATIC

    def __contains__(self, atom_idx: int) -> bool:
        """Check if atom is part of this bond."""
        return atom_idx in (self.atom1_idx, self.atom2_idx)


@dataclass(frozen=True, slots=True)
class Atom:
    """Represents an atom in a molecule.

    Attributes:
        idx: Creation order of this atom; doubles as its identity.
        symbol: Element symbol, lower case for aromatic atoms, "*" for wildcards.
        charge: Formal charge.
        isotope: Mass number, or None for natural abundance.
        is_aromatic: Whether the atom was written as aromatic.
        explicit_hydrogens: Hydrogen count written inside brackets.
        implicit_hydrogens: Hydrogens implied by the organic-subset valence rules.
        category: Whether the atom was a bare organic atom or a bracket atom.
        bond_indices: Indices of bonds connected to this atom.
        is_wildcard: Pattern atom matching any element.
        hydrogens_specified: Whether a hydrogen count was written (patterns).
    """

    idx: int
    symbol: str
    charge: int = 0
    isotope: int | None = None
    is_aromatic: bool = False
    explicit_hydrogens: int = 0
    implicit_hydrogens: int = 0
    category: AtomCategory = AtomCategory.ORGANIC
    bond_indices: tuple[int, ...] = ()
    is_wildcard: bool = False
    hydrogens_specified: bool = False

    @property
    def atomic_number(self) -> int:
        """Get the atomic number for this element (0 for wildcards)."""
        return get_atomic_number(self.symbol)

    @property
    def element(self) -> Element | None:
        return Element.from_symbol(self.symbol)

    @property
    def element_symbol(self) -> str:
        """Element symbol in its canonical capitalisation."""
        if self.is_wildcard:
            return "*"
        return self.symbol.capitalize()

    @property
    def total_hydrogens(self) -> int:
        return self.explicit_hydrogens + self.implicit_hydrogens

    @property
    def degree(self) -> int:
        """Number of explicit bonds to this atom."""
        return len(self.bond_indices)

    def neighbors(self, mol: "Molecule") -> Iterator[int]:
        """Iterate over indices of neighboring atoms."""
        for bond_idx in self.bond_indices:
            yield mol.bonds[bond_idx].other_atom(self.idx)

    def get_bonds(self, mol: "Molecule") -> Iterator[Bond]:
        """Iterate over bonds connected to this atom."""
        for bond_idx in self.bond_indices:
            yield mol.bonds[bond_idx]


@dataclass(frozen=True, slots=True)
class Molecule:
    """Represents a molecular structure.

    A molecule is an ordered sequence of atoms (index = identity) and the
    bonds between them, possibly spread over several disconnected
    fragments. Instances are immutable; build them with MoleculeBuilder or
    the parser.

    Attributes:
        atoms: Atoms in creation order.
        bonds: Bonds in creation order.
        source: The text the molecule was parsed from, if any.

    Example:
        >>> builder = MoleculeBuilder()
        >>> c1 = builder.add_atom("C")
        >>> c2 = builder.add_atom("C")
        >>> builder.add_bond(c1, c2)
        0
        >>> len(builder.build())
        2
    """

    atoms: tuple[Atom, ...] = ()
    bonds: tuple[Bond, ...] = ()
    source: str | None = field(default=None, compare=False)

    def __len__(self) -> int:
        """Return number of atoms."""
        return len(self.atoms)

    def __iter__(self) -> Iterator[Atom]:
        """Iterate over atoms."""
        return iter(self.atoms)

    def __getitem__(self, idx: int) -> Atom:
        """Get atom by index."""
        return self.atoms[idx]

    @property
    def num_atoms(self) -> int:
        return len(self.atoms)

    @property
    def num_bonds(self) -> int:
        return len(self.bonds)

    def neighbors(self, atom_idx: int) -> list[int]:
        """Indices of atoms bonded to atom_idx, in bond creation order."""
        return list(self.atoms[atom_idx].neighbors(self))

    def get_bond_between(self, atom1_idx: int, atom2_idx: int) -> Bond | None:
        """Find the bond between two atoms, or None."""
        for bond_idx in self.atoms[atom1_idx].bond_indices:
            bond = self.bonds[bond_idx]
            if atom2_idx in bond and atom1_idx != atom2_idx:
                return bond
        return None

    def bond_valence(self, atom_idx: int) -> int:
        """Sum of bond valences incident to an atom (aromatic bonds count 1)."""
        return sum(
            self.bonds[b].order.valence for b in self.atoms[atom_idx].bond_indices
        )

    def heavy_degree(self, atom_idx: int) -> int:
        """Number of bonded neighbours that are not hydrogen."""
        return sum(
            1 for nbr in self.atoms[atom_idx].neighbors(self)
            if self.atoms[nbr].atomic_number != 1
        )

    def connected_components(self) -> list[list[int]]:
        """Find connected components in the molecule.

        Returns:
            List of components, each being a sorted list of atom indices,
            ordered by their lowest atom index.
        """
        visited: set[int] = set()
        components: list[list[int]] = []

        for start in range(len(self.atoms)):
            if start in visited:
                continue

            component: list[int] = []
            stack = [start]
            visited.add(start)

            while stack:
                atom_idx = stack.pop()
                component.append(atom_idx)

                for neighbor in self.atoms[atom_idx].neighbors(self):
                    if neighbor not in visited:
                        visited.add(neighbor)
                        stack.append(neighbor)

            components.append(sorted(component))

        return components

    @property
    def is_connected(self) -> bool:
        """Check if molecule is a single connected component."""
        return len(self.connected_components()) <= 1


@dataclass(frozen=True, slots=True)
class Ring:
    """A cycle of atoms derived from a Molecule.

    Attributes:
        atoms: Atom indices in cyclic order.
        is_aromatic: Whether the ring was classified as aromatic.
    """

    atoms: tuple[int, ...]
    is_aromatic: bool = False

    def __len__(self) -> int:
        return len(self.atoms)

    def __iter__(self) -> Iterator[int]:
        return iter(self.atoms)

    def __contains__(self, atom_idx: object) -> bool:
        return atom_idx in self.atoms

    @property
    def size(self) -> int:
        return len(self.atoms)

    @property
    def atom_set(self) -> frozenset[int]:
        return frozenset(self.atoms)

    def bond_keys(self) -> frozenset[tuple[int, int]]:
        """Ring bonds as sorted atom pairs."""
        n = len(self.atoms)
        return frozenset(
            tuple(sorted((self.atoms[i], self.atoms[(i + 1) % n])))
            for i in range(n)
        )

    def with_aromatic(self, is_aromatic: bool) -> "Ring":
        """Copy of this ring with a different aromatic flag."""
        return Ring(self.atoms, is_aromatic)


class MoleculeBuilder:
    """Mutable staging area used to assemble an immutable Molecule.

    Atoms and bonds are appended in order; build() freezes them, computing
    implicit hydrogens for organic-subset atoms.
    """

    __slots__ = ("_atoms", "_bonds", "_adjacency")

    def __init__(self) -> None:
        self._atoms: list[dict] = []
        self._bonds: list[Bond] = []
        self._adjacency: list[list[int]] = []

    def __len__(self) -> int:
        return len(self._atoms)

    def add_atom(
        self,
        symbol: str,
        *,
        charge: int = 0,
        isotope: int | None = None,
        is_aromatic: bool = False,
        explicit_hydrogens: int = 0,
        category: AtomCategory = AtomCategory.ORGANIC,
        is_wildcard: bool = False,
        hydrogens_specified: bool = False,
    ) -> int:
        """Add an atom and return its index."""
        idx = len(self._atoms)
        self._atoms.append({
            "symbol": symbol,
            "charge": charge,
            "isotope": isotope,
            "is_aromatic": is_aromatic,
            "explicit_hydrogens": explicit_hydrogens,
            "category": category,
            "is_wildcard": is_wildcard,
            "hydrogens_specified": hydrogens_specified,
        })
        self._adjacency.append([])
        return idx

    def is_aromatic(self, atom_idx: int) -> bool:
        return self._atoms[atom_idx]["is_aromatic"]

    def has_bond(self, atom1_idx: int, atom2_idx: int) -> bool:
        for bond_idx in self._adjacency[atom1_idx]:
            if atom2_idx in self._bonds[bond_idx]:
                return True
        return False

    def add_bond(
        self,
        atom1_idx: int,
        atom2_idx: int,
        *,
        order: BondOrder = BondOrder.SINGLE,
        is_ring_closure: bool = False,
        is_any: bool = False,
    ) -> int:
        """Add a bond between two existing atoms.

        Raises:
            IndexError: If atom indices are out of bounds.
            ValueError: For a self-bond or a second bond between the same pair.
        """
        n = len(self._atoms)
        if not (0 <= atom1_idx < n and 0 <= atom2_idx < n):
            raise IndexError(f"Atom index out of bounds: {atom1_idx}, {atom2_idx}")
        if atom1_idx == atom2_idx:
            raise ValueError(f"Atom {atom1_idx} cannot bond to itself")
        if self.has_bond(atom1_idx, atom2_idx):
            raise ValueError(f"Atoms {atom1_idx} and {atom2_idx} are already bonded")

        idx = len(self._bonds)
        self._bonds.append(Bond(
            idx=idx,
            atom1_idx=atom1_idx,
            atom2_idx=atom2_idx,
            order=order,
            is_ring_closure=is_ring_closure,
            is_any=is_any,
        ))
        self._adjacency[atom1_idx].append(idx)
        self._adjacency[atom2_idx].append(idx)
        return idx

    def build(self, source: str | None = None) -> Molecule:
        """Freeze the staged atoms and bonds into a Molecule."""
        atoms: list[Atom] = []
        for idx, fields in enumerate(self._atoms):
            bond_indices = tuple(self._adjacency[idx])
            implicit = 0
            if fields["category"] is AtomCategory.ORGANIC and not fields["is_wildcard"]:
                bond_valence = sum(self._bonds[b].order.valence for b in bond_indices)
                implicit = implicit_hydrogens(
                    get_atomic_number(fields["symbol"]),
                    bond_valence,
                    fields["is_aromatic"],
                )
            atoms.append(Atom(
                idx=idx,
                implicit_hydrogens=implicit,
                bond_indices=bond_indices,
                **fields,
            ))
        return Molecule(atoms=tuple(atoms), bonds=tuple(self._bonds), source=source)
