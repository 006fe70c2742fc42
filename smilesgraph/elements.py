"""
Chemical elements and constants.

This module provides element data, periodic table information, and the
bond/atom enumerations used throughout the library. All tables are built
once at import time and are read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar, Final, FrozenSet


class BondOrder(IntEnum):
    """Bond order enumeration."""

    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    AROMATIC = 4

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def valence(self) -> int:
        """Valence units consumed by this bond on each endpoint.

        Aromatic bonds count their sigma component only; the shared pi
        electron is accounted for per atom.
        """
        if self is BondOrder.AROMATIC:
            return 1
        return int(self)

    @property
    def symbol(self) -> str:
        """SMILES bond symbol."""
        return _BOND_SYMBOLS[self]


_BOND_SYMBOLS: Final[dict[BondOrder, str]] = {
    BondOrder.SINGLE: "-",
    BondOrder.DOUBLE: "=",
    BondOrder.TRIPLE: "#",
    BondOrder.AROMATIC: ":",
}

BOND_SYMBOL_ORDERS: Final[dict[str, BondOrder]] = {
    "-": BondOrder.SINGLE,
    "/": BondOrder.SINGLE,
    "\\": BondOrder.SINGLE,
    "=": BondOrder.DOUBLE,
    "#": BondOrder.TRIPLE,
    ":": BondOrder.AROMATIC,
}


class AtomCategory(Enum):
    """How an atom was written in the input."""

    ORGANIC = "organic"
    BRACKET = "bracket"


@dataclass(frozen=True, slots=True)
class Element:
    """Immutable element data.

    Attributes:
        atomic_number: Atomic number (proton count).
        symbol: Element symbol (e.g., "C", "Cl").
        name: Full element name.
        mass: Standard atomic weight.
        valences: Allowed valences in ascending order (empty if none apply).
    """

    atomic_number: int
    symbol: str
    name: str
    mass: float
    valences: tuple[int, ...] = ()

    # Class-level registry
    _by_symbol: ClassVar[dict[str, "Element"]] = {}
    _by_number: ClassVar[dict[int, "Element"]] = {}

    def __post_init__(self) -> None:
        Element._by_symbol[self.symbol] = self
        Element._by_number[self.atomic_number] = self

    @classmethod
    def from_symbol(cls, symbol: str) -> "Element | None":
        """Look up element by symbol (lower case aromatic forms accepted)."""
        if symbol in cls._by_symbol:
            return cls._by_symbol[symbol]
        return cls._by_symbol.get(symbol.capitalize())

    @classmethod
    def from_atomic_number(cls, num: int) -> "Element | None":
        """Look up element by atomic number."""
        return cls._by_number.get(num)

    @property
    def default_valence(self) -> int | None:
        """Lowest allowed valence, used for implicit hydrogens."""
        return self.valences[0] if self.valences else None


_ELEMENTS_DATA: Final[list[tuple[int, str, str, float, tuple[int, ...]]]] = [
    # (atomic_number, symbol, name, mass, valences)
    (1, "H", "Hydrogen", 1.008, (1,)),
    (2, "He", "Helium", 4.0026, ()),
    (3, "Li", "Lithium", 6.94, (1,)),
    (4, "Be", "Beryllium", 9.0122, (2,)),
    (5, "B", "Boron", 10.81, (3,)),
    (6, "C", "Carbon", 12.011, (4,)),
    (7, "N", "Nitrogen", 14.007, (3, 5)),
    (8, "O", "Oxygen", 15.999, (2,)),
    (9, "F", "Fluorine", 18.998, (1,)),
    (10, "Ne", "Neon", 20.180, ()),
    (11, "Na", "Sodium", 22.990, (1,)),
    (12, "Mg", "Magnesium", 24.305, (2,)),
    (13, "Al", "Aluminum", 26.982, (3,)),
    (14, "Si", "Silicon", 28.085, (4,)),
    (15, "P", "Phosphorus", 30.974, (3, 5)),
    (16, "S", "Sulfur", 32.06, (2, 4, 6)),
    (17, "Cl", "Chlorine", 35.45, (1, 3, 5, 7)),
    (18, "Ar", "Argon", 39.948, ()),
    (19, "K", "Potassium", 39.098, (1,)),
    (20, "Ca", "Calcium", 40.078, (2,)),
    (21, "Sc", "Scandium", 44.956, ()),
    (22, "Ti", "Titanium", 47.867, ()),
    (23, "V", "Vanadium", 50.942, ()),
    (24, "Cr", "Chromium", 51.996, ()),
    (25, "Mn", "Manganese", 54.938, ()),
    (26, "Fe", "Iron", 55.845, ()),
    (27, "Co", "Cobalt", 58.933, ()),
    (28, "Ni", "Nickel", 58.693, ()),
    (29, "Cu", "Copper", 63.546, ()),
    (30, "Zn", "Zinc", 65.38, (2,)),
    (31, "Ga", "Gallium", 69.723, (3,)),
    (32, "Ge", "Germanium", 72.630, (4,)),
    (33, "As", "Arsenic", 74.922, (3, 5)),
    (34, "Se", "Selenium", 78.971, (2, 4, 6)),
    (35, "Br", "Bromine", 79.904, (1, 3, 5, 7)),
    (36, "Kr", "Krypton", 83.798, ()),
    (37, "Rb", "Rubidium", 85.468, (1,)),
    (38, "Sr", "Strontium", 87.62, (2,)),
    (39, "Y", "Yttrium", 88.906, ()),
    (40, "Zr", "Zirconium", 91.224, ()),
    (41, "Nb", "Niobium", 92.906, ()),
    (42, "Mo", "Molybdenum", 95.95, ()),
    (43, "Tc", "Technetium", 98.0, ()),
    (44, "Ru", "Ruthenium", 101.07, ()),
    (45, "Rh", "Rhodium", 102.91, ()),
    (46, "Pd", "Palladium", 106.42, ()),
    (47, "Ag", "Silver", 107.87, ()),
    (48, "Cd", "Cadmium", 112.41, ()),
    (49, "In", "Indium", 114.82, (3,)),
    (50, "Sn", "Tin", 118.71, (4,)),
    (51, "Sb", "Antimony", 121.76, (3, 5)),
    (52, "Te", "Tellurium", 127.60, (2, 4, 6)),
    (53, "I", "Iodine", 126.90, (1, 3, 5, 7)),
    (54, "Xe", "Xenon", 131.29, ()),
    (55, "Cs", "Cesium", 132.91, (1,)),
    (56, "Ba", "Barium", 137.33, (2,)),
    (57, "La", "Lanthanum", 138.91, ()),
    (58, "Ce", "Cerium", 140.12, ()),
    (59, "Pr", "Praseodymium", 140.91, ()),
    (60, "Nd", "Neodymium", 144.24, ()),
    (61, "Pm", "Promethium", 145.0, ()),
    (62, "Sm", "Samarium", 150.36, ()),
    (63, "Eu", "Europium", 151.96, ()),
    (64, "Gd", "Gadolinium", 157.25, ()),
    (65, "Tb", "Terbium", 158.93, ()),
    (66, "Dy", "Dysprosium", 162.50, ()),
    (67, "Ho", "Holmium", 164.93, ()),
    (68, "Er", "Erbium", 167.26, ()),
    (69, "Tm", "Thulium", 168.93, ()),
    (70, "Yb", "Ytterbium", 173.05, ()),
    (71, "Lu", "Lutetium", 174.97, ()),
    (72, "Hf", "Hafnium", 178.49, ()),
    (73, "Ta", "Tantalum", 180.95, ()),
    (74, "W", "Tungsten", 183.84, ()),
    (75, "Re", "Rhenium", 186.21, ()),
    (76, "Os", "Osmium", 190.23, ()),
    (77, "Ir", "Iridium", 192.22, ()),
    (78, "Pt", "Platinum", 195.08, ()),
    (79, "Au", "Gold", 196.97, ()),
    (80, "Hg", "Mercury", 200.59, ()),
    (81, "Tl", "Thallium", 204.38, (3,)),
    (82, "Pb", "Lead", 207.2, (4,)),
    (83, "Bi", "Bismuth", 208.98, (3, 5)),
    (84, "Po", "Polonium", 209.0, (2,)),
    (85, "At", "Astatine", 210.0, (1,)),
    (86, "Rn", "Radon", 222.0, ()),
    (87, "Fr", "Francium", 223.0, (1,)),
    (88, "Ra", "Radium", 226.0, (2,)),
    (89, "Ac", "Actinium", 227.0, ()),
    (90, "Th", "Thorium", 232.04, ()),
    (91, "Pa", "Protactinium", 231.04, ()),
    (92, "U", "Uranium", 238.03, ()),
    (93, "Np", "Neptunium", 237.0, ()),
    (94, "Pu", "Plutonium", 244.0, ()),
    (95, "Am", "Americium", 243.0, ()),
    (96, "Cm", "Curium", 247.0, ()),
    (97, "Bk", "Berkelium", 247.0, ()),
    (98, "Cf", "Californium", 251.0, ()),
    (99, "Es", "Einsteinium", 252.0, ()),
    (100, "Fm", "Fermium", 257.0, ()),
    (101, "Md", "Mendelevium", 258.0, ()),
    (102, "No", "Nobelium", 259.0, ()),
    (103, "Lr", "Lawrencium", 266.0, ()),
    (104, "Rf", "Rutherfordium", 267.0, ()),
    (105, "Db", "Dubnium", 268.0, ()),
    (106, "Sg", "Seaborgium", 269.0, ()),
    (107, "Bh", "Bohrium", 270.0, ()),
    (108, "Hs", "Hassium", 277.0, ()),
    (109, "Mt", "Meitnerium", 278.0, ()),
    (110, "Ds", "Darmstadtium", 281.0, ()),
    (111, "Rg", "Roentgenium", 282.0, ()),
    (112, "Cn", "Copernicium", 285.0, ()),
    (113, "Nh", "Nihonium", 286.0, ()),
    (114, "Fl", "Flerovium", 289.0, ()),
    (115, "Mc", "Moscovium", 290.0, ()),
    (116, "Lv", "Livermorium", 293.0, ()),
    (117, "Ts", "Tennessine", 294.0, ()),
    (118, "Og", "Oganesson", 294.0, ()),
]

ELEMENTS: Final[tuple[Element, ...]] = tuple(
    Element(num, sym, name, mass, valences)
    for num, sym, name, mass, valences in _ELEMENTS_DATA
)

# Daylight "organic subset" - atoms that can appear without brackets
ORGANIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I",
})

# Aromatic element symbols allowed in lowercase SMILES form
AROMATIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "b", "c", "n", "o", "p", "s", "as", "se",
})

# Aromatic symbols that may appear outside brackets
AROMATIC_ORGANIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "b", "c", "n", "o", "p", "s",
})

# Two-letter elements in organic subset (need special handling in tokenizer)
TWO_LETTER_ORGANIC: Final[FrozenSet[str]] = frozenset({"Cl", "Br"})

# Aromatic atoms that spend one valence unit on the ring pi bond
PI_BONDING_AROMATIC: Final[FrozenSet[int]] = frozenset({5, 6, 7, 15, 33})

_CARBON_GROUP: Final[FrozenSet[int]] = frozenset({6, 14, 32, 50, 82})
_BORON_GROUP: Final[FrozenSet[int]] = frozenset({5, 13, 31, 49, 81})


def get_atomic_number(symbol: str) -> int:
    """Get atomic number for an element symbol.

    Args:
        symbol: Element symbol (e.g., "C", "cl", "Cl"). "*" maps to 0.

    Returns:
        Atomic number, or 0 if not found.
    """
    elem = Element.from_symbol(symbol)
    return elem.atomic_number if elem else 0


def is_known_element(symbol: str) -> bool:
    """Check whether symbol names an element in the periodic table."""
    return symbol in Element._by_symbol


def is_organic_symbol(symbol: str) -> bool:
    """Check if symbol is in the organic subset."""
    return symbol in ORGANIC_SUBSET or symbol in AROMATIC_ORGANIC_SUBSET


def is_aromatic_symbol(symbol: str) -> bool:
    """Check if symbol represents an aromatic atom."""
    return symbol in AROMATIC_SUBSET


def max_valence(atomic_num: int, charge: int = 0) -> int | None:
    """Charge-adjusted maximum valence for an element.

    Returns None for elements without a valence model (metals, noble
    gases), which are not valence-checked.
    """
    elem = Element.from_atomic_number(atomic_num)
    if elem is None or not elem.valences:
        return None
    if atomic_num in _CARBON_GROUP:
        return elem.valences[-1] - abs(charge)
    if atomic_num in _BORON_GROUP:
        return elem.valences[-1] - charge
    if charge == 0:
        return elem.valences[-1]
    return max(0, elem.valences[0] + charge)


def implicit_hydrogens(atomic_num: int, bond_valence: int, is_aromatic: bool) -> int:
    """Implicit hydrogen count for a bare organic-subset atom.

    Args:
        atomic_num: Atomic number.
        bond_valence: Sum of incident bond valences (aromatic bonds count 1).
        is_aromatic: Whether the atom was written in lower case.

    Returns:
        Number of implicit hydrogens (never negative).
    """
    elem = Element.from_atomic_number(atomic_num)
    if elem is None or not elem.valences:
        return 0

    if is_aromatic:
        used = bond_valence + (1 if atomic_num in PI_BONDING_AROMATIC else 0)
        return max(0, elem.valences[0] - used)

    for valence in elem.valences:
        if valence >= bond_valence:
            return valence - bond_valence
    return 0
