"""
Path-based molecular fingerprints.

Every linear path of up to ``max_path`` bonds (and every single atom) is
written as a fragment string, hashed, and folded into a fixed-size bit
vector. Fragment strings are built from atom and bond labels only and read
in whichever direction sorts first, so the fingerprint does not depend on
the order in which atoms were written.

Each fragment is encoded at two levels of detail:

* element layer: element symbol (lower case when aromatic), formal charge
  and ring membership, e.g. ``c:cR`` or ``C-O``;
* topology layer: only aromaticity and ring membership of the atoms, so
  molecules with the same skeleton but different heteroatoms share bits.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from smilesgraph.config import DEFAULT_FINGERPRINT_CONFIG, FingerprintConfig
from smilesgraph.elements import BondOrder
from smilesgraph.transform import AromaticityResult, perceive_aromaticity

if TYPE_CHECKING:
    from smilesgraph.types import Molecule

logger = logging.getLogger(__name__)

_ELEMENT_LAYER = "E"
_TOPOLOGY_LAYER = "T"


@dataclass(frozen=True, slots=True)
class Fingerprint:
    """Fixed-size bit vector stored as the set of its on bits.

    Attributes:
        n_bits: Size of the bit vector.
        bits: Positions of the set bits.
    """

    n_bits: int
    bits: frozenset[int] = frozenset()

    def __len__(self) -> int:
        """Number of set bits."""
        return len(self.bits)

    def __contains__(self, bit: object) -> bool:
        return bit in self.bits

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.bits))

    def _check_compatible(self, other: "Fingerprint") -> None:
        if self.n_bits != other.n_bits:
            raise ValueError(
                f"Fingerprint sizes differ: {self.n_bits} and {other.n_bits}"
            )

    def __and__(self, other: "Fingerprint") -> "Fingerprint":
        self._check_compatible(other)
        return Fingerprint(self.n_bits, self.bits & other.bits)

    def __or__(self, other: "Fingerprint") -> "Fingerprint":
        self._check_compatible(other)
        return Fingerprint(self.n_bits, self.bits | other.bits)

    def to_bitstring(self) -> str:
        """Render as a string of '0' and '1', bit 0 first."""
        return "".join("1" if i in self.bits else "0" for i in range(self.n_bits))

    @property
    def density(self) -> float:
        """Fraction of bits that are set."""
        return len(self.bits) / self.n_bits


def _atom_labels(
    mol: "Molecule",
    aromaticity: AromaticityResult,
) -> tuple[list[str], list[str]]:
    """Element-layer and topology-layer label of every atom."""
    ring_atoms: set[int] = set()
    for ring in aromaticity.rings:
        ring_atoms.update(ring.atoms)

    element_labels: list[str] = []
    topology_labels: list[str] = []
    for atom in mol.atoms:
        is_aromatic = aromaticity.is_aromatic_atom(atom.idx)
        ring_flag = "R" if atom.idx in ring_atoms else ""

        symbol = atom.element_symbol.lower() if is_aromatic else atom.element_symbol
        charge = f"{atom.charge:+d}" if atom.charge else ""
        element_labels.append(f"{symbol}{charge}{ring_flag}")
        topology_labels.append(f"{'a' if is_aromatic else 'A'}{ring_flag}")

    return element_labels, topology_labels


def _bond_label(mol: "Molecule", bond_idx: int, aromaticity: AromaticityResult) -> str:
    bond = mol.bonds[bond_idx]
    if bond.is_any:
        return "~"
    if aromaticity.is_aromatic_bond(bond.atom1_idx, bond.atom2_idx):
        return ":"
    if bond.order is BondOrder.SINGLE:
        return "-"
    return bond.order.symbol


def _fragment_hash(layer: str, fragment: str, n_bits: int) -> int:
    digest = hashlib.blake2b(
        f"{layer}|{fragment}".encode("utf-8"), digest_size=8
    ).digest()
    return int.from_bytes(digest, "big") % n_bits


def enumerate_paths(mol: "Molecule", max_path: int) -> Iterator[tuple[int, ...]]:
    """Yield every simple path of 1 to max_path bonds as an atom sequence.

    Each path is yielded once per direction.
    """
    for start in range(mol.num_atoms):
        stack: list[tuple[int, ...]] = [(start,)]
        while stack:
            path = stack.pop()
            if len(path) > 1:
                yield path
            if len(path) - 1 >= max_path:
                continue
            for nbr in mol.neighbors(path[-1]):
                if nbr not in path:
                    stack.append(path + (nbr,))


def _encode_path(
    path: tuple[int, ...],
    labels: list[str],
    bond_labels: dict[tuple[int, int], str],
) -> str:
    """Path text read in the direction that sorts first."""
    def render(atoms: tuple[int, ...]) -> str:
        parts = [labels[atoms[0]]]
        for a, b in zip(atoms, atoms[1:]):
            parts.append(bond_labels[(a, b) if a < b else (b, a)])
            parts.append(labels[b])
        return "".join(parts)

    return min(render(path), render(path[::-1]))


def calculate_fingerprint(
    mol: "Molecule",
    config: FingerprintConfig | None = None,
    aromaticity: AromaticityResult | None = None,
) -> Fingerprint:
    """Compute the path fingerprint of a molecule.

    Args:
        mol: Molecule to fingerprint.
        config: Path lengths and vector size (defaults apply if None).
        aromaticity: Precomputed aromaticity (perceived if None).

    Returns:
        Fingerprint. An empty molecule gives an empty fingerprint.

    Example:
        >>> fp = calculate_fingerprint(parse("CCO"))
        >>> fp.n_bits
        1024
    """
    config = config or DEFAULT_FINGERPRINT_CONFIG
    if mol.num_atoms == 0:
        return Fingerprint(config.n_bits)

    if aromaticity is None:
        aromaticity = perceive_aromaticity(mol)

    element_labels, topology_labels = _atom_labels(mol, aromaticity)
    layers = ((_ELEMENT_LAYER, element_labels), (_TOPOLOGY_LAYER, topology_labels))
    bond_labels = {
        bond.key: _bond_label(mol, bond.idx, aromaticity) for bond in mol.bonds
    }

    bits: set[int] = set()
    for layer, labels in layers:
        for label in labels:
            bits.add(_fragment_hash(layer, label, config.n_bits))

    n_paths = 0
    for path in enumerate_paths(mol, config.max_path):
        if len(path) - 1 < config.min_path:
            continue
        n_paths += 1
        for layer, labels in layers:
            fragment = _encode_path(path, labels, bond_labels)
            bits.add(_fragment_hash(layer, fragment, config.n_bits))

    logger.debug("Fingerprint: %d paths, %d bits set", n_paths, len(bits))
    return Fingerprint(config.n_bits, frozenset(bits))
