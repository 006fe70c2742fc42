"""
smilesgraph - Pure Python SMILES graph library.

A zero-dependency library for parsing SMILES into immutable molecular
graphs, perceiving rings and aromaticity, writing canonical SMILES,
matching substructures and comparing path fingerprints.

    >>> from smilesgraph import parse, canonical_smiles
    >>> mol = parse("OCC")
    >>> canonical_smiles(mol)
    'CCO'

Submodules:
    smilesgraph.rings       - Ring detection (cycle basis)
    smilesgraph.transform   - Aromaticity perception
    smilesgraph.match       - Substructure search
    smilesgraph.api         - Functional interface over text and molecules
    smilesgraph.descriptors - Molecular weight, LogP, Lipinski
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Core types
from smilesgraph.types import Atom, Bond, Molecule, MoleculeBuilder, Ring

# Configuration
from smilesgraph.config import CanonConfig, FingerprintConfig, ParseLimits

# Parsing and writing
from smilesgraph.tokenizer import Token, TokenKind, tokenize
from smilesgraph.parser import parse, parse_pattern, SmilesParser
from smilesgraph.writer import canonical_smiles, SmilesWriter
from smilesgraph.canon import canonical_ranks, Canonicalizer, CanonicalRank

# Fingerprints
from smilesgraph.fingerprint import Fingerprint, calculate_fingerprint
from smilesgraph.similarity import tanimoto

# Exceptions
from smilesgraph.exceptions import (
    ChemError,
    InvalidAtomSymbolError,
    InvalidValenceError,
    ParseError,
    PatternParseError,
    ResourceLimitExceeded,
    RingError,
    SmilesSyntaxError,
    UnbalancedBracketError,
    UnclosedRingError,
    UnexpectedCharacterError,
    UnknownElementError,
    ValenceError,
)

# Element data
from smilesgraph.elements import Element, BondOrder, AtomCategory, ORGANIC_SUBSET, AROMATIC_SUBSET

# Functional interface
from smilesgraph.api import (
    calculate_molecular_fingerprint,
    calculate_similarity,
    calculate_smiles_similarity,
    clear_caches,
    contains_substructure,
    find_all_rings,
    generate_canonical_smiles,
    identify_aromatic_rings,
    normalize_smiles,
    parse_smiles,
    validate_smiles,
)

# Submodules
from smilesgraph import api, descriptors, match, rings, transform

__all__ = [
    # Types
    "Atom", "Bond", "Molecule", "MoleculeBuilder", "Ring",
    # Configuration
    "CanonConfig", "FingerprintConfig", "ParseLimits",
    # Parsing
    "Token", "TokenKind", "tokenize", "parse", "parse_pattern", "SmilesParser",
    # Writing
    "canonical_smiles", "SmilesWriter",
    # Canonicalization
    "canonical_ranks", "Canonicalizer", "CanonicalRank",
    # Fingerprints
    "Fingerprint", "calculate_fingerprint", "tanimoto",
    # Exceptions
    "ChemError", "ParseError", "SmilesSyntaxError", "UnbalancedBracketError",
    "UnexpectedCharacterError", "InvalidAtomSymbolError", "UnknownElementError",
    "RingError", "UnclosedRingError", "ResourceLimitExceeded", "PatternParseError",
    "ValenceError", "InvalidValenceError",
    # Elements
    "Element", "BondOrder", "AtomCategory", "ORGANIC_SUBSET", "AROMATIC_SUBSET",
    # Functional interface
    "validate_smiles", "normalize_smiles", "parse_smiles", "generate_canonical_smiles",
    "find_all_rings", "identify_aromatic_rings", "contains_substructure",
    "calculate_molecular_fingerprint", "calculate_similarity",
    "calculate_smiles_similarity", "clear_caches",
    # Submodules
    "api", "descriptors", "match", "rings", "transform",
]
