"""
High-level functional interface.

Thin wrappers over the parser, ring perception, aromaticity, canonical
writer, matcher and fingerprint modules. Text inputs go through a small
read-through cache; molecules are immutable, so cached objects are shared
safely between callers.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Final

from smilesgraph.exceptions import ParseError, PatternParseError
from smilesgraph.fingerprint import Fingerprint, calculate_fingerprint
from smilesgraph.match import SubstructureMatcher
from smilesgraph.parser import parse, parse_pattern
from smilesgraph.rings import find_all_rings as _find_all_rings
from smilesgraph.similarity import tanimoto
from smilesgraph.transform import perceive_aromaticity
from smilesgraph.types import Molecule, Ring
from smilesgraph.writer import SmilesWriter

logger = logging.getLogger(__name__)

_CACHE_SIZE: Final[int] = 1024


@lru_cache(maxsize=_CACHE_SIZE)
def _parse_cached(smiles: str) -> Molecule:
    logger.debug("Parse cache miss: %r", smiles)
    return parse(smiles)


@lru_cache(maxsize=_CACHE_SIZE)
def _normalize_cached(smiles: str) -> str:
    return generate_canonical_smiles(_parse_cached(smiles))


@lru_cache(maxsize=_CACHE_SIZE)
def _fingerprint_cached(smiles: str) -> Fingerprint:
    return calculate_fingerprint(_parse_cached(smiles))


def clear_caches() -> None:
    """Empty the parse, canonicalization and fingerprint caches."""
    _parse_cached.cache_clear()
    _normalize_cached.cache_clear()
    _fingerprint_cached.cache_clear()


def validate_smiles(smiles: str) -> bool:
    """Check whether text is valid SMILES.

    Example:
        >>> validate_smiles("C=C(C)O")
        True
        >>> validate_smiles("C(")
        False
    """
    try:
        _parse_cached(smiles)
    except ParseError:
        return False
    return True


def normalize_smiles(smiles: str) -> str:
    """Canonical form of SMILES text.

    Raises:
        ParseError: If the text is not valid SMILES.
    """
    return _normalize_cached(smiles)


def parse_smiles(smiles: str) -> Molecule:
    """Parse SMILES text into a Molecule.

    Raises:
        ParseError: If the text is not valid SMILES.
    """
    return _parse_cached(smiles)


def generate_canonical_smiles(mol: Molecule) -> str:
    """Canonical SMILES of a molecule."""
    return SmilesWriter(mol).to_smiles()


def find_all_rings(mol: Molecule) -> list[Ring]:
    """Ring basis of a molecule (see smilesgraph.rings.find_all_rings)."""
    return _find_all_rings(mol)


def identify_aromatic_rings(mol: Molecule) -> list[Ring]:
    """Rings classified as aromatic, each with its aromatic flag set."""
    return list(perceive_aromaticity(mol).aromatic_rings)


def contains_substructure(mol: Molecule, pattern: str) -> bool:
    """Check whether mol contains the pattern.

    Raises:
        PatternParseError: If the pattern text cannot be parsed.
    """
    try:
        pattern_mol = parse_pattern(pattern)
    except ParseError as exc:
        raise PatternParseError(
            f"Invalid pattern: {exc.message}", pattern, exc.position
        ) from exc
    return SubstructureMatcher(pattern_mol).has_match(mol)


def calculate_molecular_fingerprint(mol: Molecule) -> Fingerprint:
    """Path fingerprint with the default settings."""
    return calculate_fingerprint(mol)


def calculate_similarity(mol1: Molecule, mol2: Molecule) -> float:
    """Tanimoto similarity of two molecules' fingerprints, in [0, 1]."""
    return tanimoto(calculate_fingerprint(mol1), calculate_fingerprint(mol2))


def calculate_smiles_similarity(smiles1: str, smiles2: str) -> float:
    """Tanimoto similarity of two SMILES texts.

    Raises:
        ParseError: If either text is not valid SMILES.

    Example:
        >>> calculate_smiles_similarity("CCO", "CCO")
        1.0
    """
    return tanimoto(_fingerprint_cached(smiles1), _fingerprint_cached(smiles2))
