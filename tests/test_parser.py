"""Tests for the SMILES parser.

This module tests the smilesgraph SMILES parser with various test cases
derived from common molecules and edge cases. Uses RDKit as reference
for atom and bond counts.
"""

import pytest

from smilesgraph import parse, parse_pattern, Molecule, ParseLimits
from smilesgraph.elements import AtomCategory, BondOrder
from smilesgraph.exceptions import (
    InvalidValenceError,
    ParseError,
    ResourceLimitExceeded,
    SmilesSyntaxError,
    UnbalancedBracketError,
    UnclosedRingError,
    UnexpectedCharacterError,
    UnknownElementError,
    ValenceError,
)

from conftest import rdkit_atom_count, rdkit_bond_count


class TestBasicParsing:
    """Test basic SMILES parsing functionality."""

    def test_parse_returns_molecule(self):
        """parse() should return a Molecule object."""
        mol = parse("C")
        assert isinstance(mol, Molecule)

    def test_empty_string(self):
        """Empty text is the empty molecule."""
        mol = parse("")
        assert mol.num_atoms == 0
        assert mol.num_bonds == 0

    def test_single_carbon(self):
        """Parse single carbon atom."""
        mol = parse("C")
        assert len(mol.atoms) == 1
        assert mol.atoms[0].symbol == "C"
        assert mol.atoms[0].atomic_number == 6
        assert mol.atoms[0].implicit_hydrogens == 4

    def test_simple_chain(self, simple_smiles):
        """Parse simple chain molecules."""
        for smiles in simple_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles)
            assert mol.num_bonds == rdkit_bond_count(smiles)

    def test_ethanol(self):
        """Atoms are indexed in order of appearance."""
        mol = parse("CCO")
        assert [a.symbol for a in mol.atoms] == ["C", "C", "O"]
        assert [b.key for b in mol.bonds] == [(0, 1), (1, 2)]
        assert [a.total_hydrogens for a in mol.atoms] == [3, 2, 1]

    def test_bond_orders(self):
        """Explicit bond symbols set the bond order."""
        assert parse("C=C").bonds[0].order is BondOrder.DOUBLE
        assert parse("C#N").bonds[0].order is BondOrder.TRIPLE
        assert parse("C-C").bonds[0].order is BondOrder.SINGLE
        assert parse("CC").bonds[0].order is BondOrder.SINGLE

    def test_two_letter_symbols(self):
        """Cl and Br are single atoms."""
        mol = parse("ClCBr")
        assert [a.symbol for a in mol.atoms] == ["Cl", "C", "Br"]

    def test_source_is_kept(self):
        mol = parse("CCO")
        assert mol.source == "CCO"

    def test_stereo_marks_ignored(self):
        """Directional bonds and chirality parse as plain structure."""
        mol = parse("F/C=C/F")
        assert [b.order for b in mol.bonds] == [
            BondOrder.SINGLE, BondOrder.DOUBLE, BondOrder.SINGLE
        ]
        mol = parse("[C@@H](F)(Cl)Br")
        assert mol.atoms[0].total_hydrogens == 1


class TestBranches:
    """Test branch handling."""

    def test_isobutane(self):
        """Branch atoms bond to the atom before '('."""
        mol = parse("CC(C)C")
        assert mol.num_atoms == 4
        assert sorted(mol.neighbors(1)) == [0, 2, 3]

    def test_nested_branches(self):
        mol = parse("CC(C(C)C)C")
        assert sorted(mol.neighbors(1)) == [0, 2, 5]
        assert sorted(mol.neighbors(2)) == [1, 3, 4]

    def test_branch_bond_symbol(self):
        """A bond symbol may start a branch."""
        mol = parse("CC(=O)O")
        bond = mol.get_bond_between(1, 2)
        assert bond is not None
        assert bond.order is BondOrder.DOUBLE

    def test_complex_molecules(self, complex_smiles):
        """Atom and bond counts agree with RDKit."""
        for smiles in complex_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles), smiles
            assert mol.num_bonds == rdkit_bond_count(smiles), smiles


class TestRingClosures:
    """Test ring closure handling."""

    def test_cyclopropane(self):
        mol = parse("C1CC1")
        assert mol.num_bonds == 3
        closure = mol.get_bond_between(0, 2)
        assert closure is not None
        assert closure.is_ring_closure

    def test_ring_smiles(self, ring_smiles):
        for smiles in ring_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles)
            assert mol.num_bonds == rdkit_bond_count(smiles)

    def test_high_ring_numbers(self, high_ring_closure_smiles):
        """%nn closures work like single digits."""
        for smiles in high_ring_closure_smiles:
            mol = parse(smiles)
            assert mol.num_bonds == 3

    def test_ring_number_reuse(self):
        """A closed ring number may be opened again."""
        mol = parse("C1CC1C1CC1")
        assert mol.num_atoms == 6
        assert mol.num_bonds == 7

    def test_closure_bond_on_opening_side(self):
        mol = parse("C=1CCCCC1")
        assert mol.get_bond_between(0, 5).order is BondOrder.DOUBLE

    def test_closure_bond_on_closing_side(self):
        mol = parse("C1CCCCC=1")
        assert mol.get_bond_between(0, 5).order is BondOrder.DOUBLE

    def test_matching_closure_bonds(self):
        mol = parse("C=1CCCCC=1")
        assert mol.get_bond_between(0, 5).order is BondOrder.DOUBLE


class TestAromaticInput:
    """Test lower case aromatic atoms."""

    def test_benzene(self):
        mol = parse("c1ccccc1")
        assert all(a.is_aromatic for a in mol.atoms)
        assert all(b.order is BondOrder.AROMATIC for b in mol.bonds)
        assert all(a.total_hydrogens == 1 for a in mol.atoms)

    def test_aromatic_smiles(self, aromatic_smiles):
        for smiles in aromatic_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles)
            assert mol.num_bonds == rdkit_bond_count(smiles)

    def test_pyrrole_nh(self):
        mol = parse("c1cc[nH]c1")
        nitrogen = mol.atoms[3]
        assert nitrogen.symbol == "n"
        assert nitrogen.total_hydrogens == 1

    def test_pyridine_nitrogen_has_no_hydrogen(self):
        mol = parse("c1ccncc1")
        assert mol.atoms[3].total_hydrogens == 0

    def test_aromatic_to_aliphatic_bond_is_single(self):
        mol = parse("Cc1ccccc1")
        assert mol.bonds[0].order is BondOrder.SINGLE

    def test_explicit_single_between_aromatic_atoms(self):
        """Biphenyl linker written with '-' stays single."""
        mol = parse("c1ccccc1-c1ccccc1")
        assert mol.get_bond_between(5, 6).order is BondOrder.SINGLE


class TestBracketAtoms:
    """Test bracket atom properties."""

    def test_charge(self, charged_smiles):
        for smiles in charged_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles)

    def test_ammonium(self):
        atom = parse("[NH4+]").atoms[0]
        assert atom.charge == 1
        assert atom.explicit_hydrogens == 4
        assert atom.implicit_hydrogens == 0
        assert atom.category is AtomCategory.BRACKET

    def test_multiple_charge_forms(self):
        assert parse("[O--]").atoms[0].charge == -2
        assert parse("[O-2]").atoms[0].charge == -2
        assert parse("[Fe+3]").atoms[0].charge == 3

    def test_isotope(self, isotope_smiles):
        for smiles in isotope_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == rdkit_atom_count(smiles)
        assert parse("[13CH4]").atoms[0].isotope == 13

    def test_bracket_without_hydrogens(self):
        """Bracket atoms never receive implicit hydrogens."""
        atom = parse("[C]").atoms[0]
        assert atom.total_hydrogens == 0
        assert not atom.hydrogens_specified

    def test_bracket_atoms(self, bracket_atom_smiles):
        for smiles in bracket_atom_smiles:
            mol = parse(smiles)
            assert mol.num_atoms == 1

    def test_atom_class_ignored(self):
        atom = parse("[CH3:1]C").atoms[0]
        assert atom.explicit_hydrogens == 3

    def test_wildcard(self):
        mol = parse("*C")
        assert mol.atoms[0].is_wildcard
        assert mol.atoms[0].atomic_number == 0


class TestDisconnected:
    """Test '.' separated components."""

    def test_components(self, multi_component_smiles):
        for smiles in multi_component_smiles:
            mol = parse(smiles)
            assert len(mol.connected_components()) == smiles.count(".") + 1

    def test_no_bond_across_dot(self):
        mol = parse("C.C")
        assert mol.num_atoms == 2
        assert mol.num_bonds == 0
        assert not mol.is_connected


class TestErrors:
    """Test rejection of malformed input."""

    def test_invalid_smiles_rejected(self, invalid_smiles):
        for smiles in invalid_smiles:
            with pytest.raises(ParseError):
                parse(smiles)

    def test_unclosed_branch_offset(self):
        with pytest.raises(SmilesSyntaxError) as exc_info:
            parse("C(")
        assert exc_info.value.offset == 1

    def test_unmatched_close(self):
        with pytest.raises(SmilesSyntaxError) as exc_info:
            parse("C)")
        assert exc_info.value.offset == 1

    def test_empty_branch(self):
        with pytest.raises(SmilesSyntaxError, match="Empty branch"):
            parse("C()C")

    def test_unclosed_ring(self):
        with pytest.raises(UnclosedRingError) as exc_info:
            parse("C1CC")
        assert exc_info.value.ring_index == 1
        assert exc_info.value.position == 1

    def test_lowest_unclosed_ring_reported(self):
        with pytest.raises(UnclosedRingError) as exc_info:
            parse("C3CC2CC")
        assert exc_info.value.ring_index == 2

    def test_self_closure(self):
        with pytest.raises(SmilesSyntaxError):
            parse("C11")

    def test_duplicate_bond(self):
        with pytest.raises(SmilesSyntaxError, match="already bonded"):
            parse("C12CC12")

    def test_conflicting_closure_bonds(self):
        with pytest.raises(SmilesSyntaxError, match="Conflicting"):
            parse("C=1CCCCC-1")

    def test_unbalanced_brackets(self):
        with pytest.raises(UnbalancedBracketError):
            parse("[CH4")
        with pytest.raises(UnbalancedBracketError):
            parse("C]")

    def test_unknown_element(self):
        with pytest.raises(UnknownElementError) as exc_info:
            parse("[Xx]")
        assert exc_info.value.symbol == "Xx"

    def test_unexpected_character(self):
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            parse("C$C")
        assert exc_info.value.offset == 1

    def test_any_bond_outside_pattern(self):
        with pytest.raises(UnexpectedCharacterError):
            parse("C~C")

    def test_bond_at_end(self):
        with pytest.raises(SmilesSyntaxError) as exc_info:
            parse("CC=")
        assert exc_info.value.offset == 2

    def test_error_message_has_caret(self):
        with pytest.raises(ParseError) as exc_info:
            parse("C$C")
        assert "C$C" in str(exc_info.value)
        assert " ^" in str(exc_info.value)


class TestValence:
    """Test maximum valence checks."""

    def test_pentavalent_carbon(self):
        with pytest.raises(InvalidValenceError) as exc_info:
            parse("C(C)(C)(C)(C)C")
        err = exc_info.value
        assert err.atom_index == 0
        assert err.expected_valence == 4
        assert err.actual_valence == 5

    def test_invalid_valence_is_both_kinds(self):
        with pytest.raises(ValenceError):
            parse("O=O=O")
        with pytest.raises(ParseError):
            parse("O=O=O")

    def test_bracket_hydrogens_count(self):
        with pytest.raises(InvalidValenceError):
            parse("[CH5]")

    def test_valid_charged_atoms(self):
        parse("C[N+](C)(C)C")
        parse("C[N+](=O)[O-]")
        parse("[NH4+]")

    def test_hypervalent_sulfur_and_phosphorus(self):
        parse("CS(=O)(=O)C")
        parse("OP(=O)(O)O")

    def test_aromatic_valence(self):
        parse("O=c1cccc[nH]1")
        parse("c1ccccc1")

    def test_metals_not_checked(self):
        parse("[Fe](C)(C)(C)(C)(C)C")


class TestLimits:
    """Test parser resource bounds."""

    def test_max_length(self):
        with pytest.raises(ResourceLimitExceeded) as exc_info:
            parse("C" * 20, ParseLimits(max_length=10))
        assert exc_info.value.limit == "max_length"
        assert exc_info.value.value == 10
        assert exc_info.value.actual == 20
        assert exc_info.value.position == 10
        assert "20" in str(exc_info.value)

    def test_max_branch_depth(self):
        with pytest.raises(ResourceLimitExceeded) as exc_info:
            parse("C(C(C(C)))", ParseLimits(max_branch_depth=2))
        assert exc_info.value.limit == "max_branch_depth"
        assert exc_info.value.actual == 3
        assert exc_info.value.position == 5

    def test_branch_depth_within_limit(self):
        mol = parse("C(C(C))", ParseLimits(max_branch_depth=2))
        assert mol.num_atoms == 3

    def test_max_ring_closures(self):
        with pytest.raises(ResourceLimitExceeded) as exc_info:
            parse("C12CC12", ParseLimits(max_ring_closures=1))
        assert exc_info.value.limit == "max_ring_closures"
        assert exc_info.value.value == 1
        assert exc_info.value.actual == 2


class TestPatternParsing:
    """Test parse_pattern."""

    def test_any_bond(self):
        mol = parse_pattern("C~O")
        assert mol.bonds[0].is_any

    def test_no_valence_check(self):
        mol = parse_pattern("C(C)(C)(C)(C)C")
        assert mol.num_atoms == 6
