"""Tests for the functional interface."""

import pytest

import smilesgraph
from smilesgraph import (
    Molecule,
    ParseError,
    PatternParseError,
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


@pytest.fixture(autouse=True)
def fresh_caches():
    clear_caches()
    yield
    clear_caches()


class TestValidation:
    """Test validate_smiles and normalize_smiles."""

    def test_valid(self, complex_smiles):
        assert validate_smiles("C=C(C)O")
        for smiles in complex_smiles:
            assert validate_smiles(smiles)

    def test_invalid(self, invalid_smiles):
        assert not validate_smiles("C(")
        for smiles in invalid_smiles:
            assert not validate_smiles(smiles), smiles

    def test_normalize(self):
        assert normalize_smiles("OCC") == "CCO"
        assert normalize_smiles("C1=CC=CC=C1") == "c1ccccc1"

    def test_normalize_invalid(self):
        with pytest.raises(ParseError):
            normalize_smiles("C(")


class TestParsing:
    """Test parse_smiles and generate_canonical_smiles."""

    def test_parse(self):
        mol = parse_smiles("CCO")
        assert isinstance(mol, Molecule)
        assert mol.num_atoms == 3

    def test_parse_is_cached(self):
        assert parse_smiles("CCO") is parse_smiles("CCO")

    def test_clear_caches(self):
        first = parse_smiles("CCO")
        clear_caches()
        second = parse_smiles("CCO")
        assert first is not second
        assert first == second

    def test_parse_invalid(self):
        with pytest.raises(ParseError):
            parse_smiles("C1CC")

    def test_generate(self):
        assert generate_canonical_smiles(parse_smiles("OCC")) == "CCO"


class TestRingsAndAromaticity:
    """Test ring and aromatic ring queries."""

    def test_find_all_rings(self):
        rings = find_all_rings(parse_smiles("c1ccc2ccccc2c1"))
        assert [r.size for r in rings] == [6, 6]

    def test_identify_aromatic_rings(self):
        rings = identify_aromatic_rings(parse_smiles("C1=CC=CC=C1"))
        assert len(rings) == 1
        assert rings[0].is_aromatic

    def test_no_aromatic_rings(self):
        assert identify_aromatic_rings(parse_smiles("C1CCCCC1")) == []

    def test_mixed(self):
        rings = identify_aromatic_rings(parse_smiles("C1CCCCC1c1ccccc1"))
        assert len(rings) == 1
        assert rings[0].atom_set == frozenset(range(6, 12))


class TestSubstructure:
    """Test contains_substructure."""

    def test_contains(self):
        assert contains_substructure(parse_smiles("CCO"), "O")
        assert not contains_substructure(parse_smiles("CCC"), "O")

    def test_kekule_pattern(self):
        assert contains_substructure(parse_smiles("C1=CC=CC=C1"), "C1=CC=CC=C1")
        assert contains_substructure(parse_smiles("c1ccccc1"), "C1=CC=CC=C1")

    def test_any_bond_pattern(self):
        assert contains_substructure(parse_smiles("CC=O"), "C~O")

    def test_invalid_pattern(self):
        with pytest.raises(PatternParseError) as exc_info:
            contains_substructure(parse_smiles("CCO"), "C(")
        assert isinstance(exc_info.value.__cause__, ParseError)
        assert exc_info.value.smiles == "C("


class TestSimilarity:
    """Test fingerprint and similarity wrappers."""

    def test_fingerprint(self):
        fp = calculate_molecular_fingerprint(parse_smiles("CCO"))
        assert fp.n_bits == 1024

    def test_similarity_identical(self):
        mol = parse_smiles("CC(=O)O")
        assert calculate_similarity(mol, mol) == 1.0

    def test_smiles_similarity(self):
        assert calculate_smiles_similarity("CCO", "CCO") == 1.0
        assert calculate_smiles_similarity("CCO", "CCC") > 0.4

    def test_smiles_similarity_order_independent(self):
        assert calculate_smiles_similarity("OCC", "CCO") == 1.0

    def test_smiles_similarity_invalid(self):
        with pytest.raises(ParseError):
            calculate_smiles_similarity("CCO", "C(")


def test_package_exports():
    assert smilesgraph.__version__ == "0.1.0"
    for name in smilesgraph.__all__:
        assert hasattr(smilesgraph, name), name
