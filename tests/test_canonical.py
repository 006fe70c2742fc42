"""Tests for canonical ranking and canonical SMILES output.

The writer's output is checked against RDKit: RDKit's canonical form of
our output must equal RDKit's canonical form of the input.
"""

import pytest

from smilesgraph import (
    CanonConfig,
    Canonicalizer,
    SmilesWriter,
    canonical_ranks,
    canonical_smiles,
    parse,
)
from smilesgraph.writer import _lowest_free, _ring_number_to_smiles

from conftest import rdkit_canonical, rdkit_renumbered


class TestCanonicalRanks:
    """Test atom ranking."""

    def test_ranks_are_permutation(self):
        mol = parse("CC(C)Cc1ccc(cc1)C(C)C(=O)O")
        ranks = canonical_ranks(mol)
        assert sorted(ranks) == list(range(mol.num_atoms))

    def test_ethanol_order(self):
        ranks = canonical_ranks(parse("OCC"))
        assert ranks.order() == [2, 1, 0]
        assert ranks.as_list() == [2, 1, 0]

    def test_empty(self):
        assert len(canonical_ranks(parse(""))) == 0

    def test_symmetry_classes_without_tie_break(self):
        ranks = Canonicalizer(parse("c1ccccc1")).compute_ranks(break_ties=False)
        assert set(ranks) == {0}

    def test_propane_ends_tied(self):
        ranks = Canonicalizer(parse("CCC")).compute_ranks(break_ties=False)
        assert ranks[0] == ranks[2]
        assert ranks[1] != ranks[0]

    def test_tie_break_picks_lowest_index(self):
        ranks = canonical_ranks(parse("CCC"))
        assert ranks[0] == 0
        assert ranks[2] == 1

    def test_iteration_cap(self):
        """A tiny cap still yields a total order."""
        mol = parse("CCCCCCCCCC")
        ranks = Canonicalizer(mol, config=CanonConfig(max_iterations=1)).compute_ranks()
        assert sorted(ranks) == list(range(mol.num_atoms))


class TestCanonicalSmiles:
    """Test canonical SMILES text."""

    @pytest.mark.parametrize(
        "smiles,expected",
        [
            ("OCC", "CCO"),
            ("C(O)C", "CCO"),
            ("C1=CC=CC=C1", "c1ccccc1"),
            ("c1ccccc1", "c1ccccc1"),
            ("C1CCCCC1", "C1CCCCC1"),
            ("c1ccccc1C", "Cc1ccccc1"),
            ("OC(C)=O", "CC(=O)O"),
            ("O.C", "C.O"),
            ("[Cl-].[Na+]", "[Na+].[Cl-]"),
            ("[NH4+]", "[NH4+]"),
            ("[13CH4]", "[13CH4]"),
            ("C1=CNC=C1", "c1cc[nH]c1"),
            ("C", "C"),
            ("", ""),
        ],
    )
    def test_expected_output(self, smiles, expected):
        assert canonical_smiles(smiles) == expected

    @pytest.mark.parametrize(
        "variants",
        [
            ["CCO", "OCC", "C(O)C"],
            ["c1ccccc1", "C1=CC=CC=C1", "C=1C=CC=CC=1"],
            ["Cc1ccccc1", "c1ccc(C)cc1", "c1cc(C)ccc1"],
            ["c1ccncc1", "n1ccccc1", "C1=CC=NC=C1"],
            ["c1ccc2ccccc2c1", "c1cc2ccccc2cc1", "C1=CC=C2C=CC=CC2=C1"],
            ["CC(=O)OC1=CC=CC=C1C(=O)O", "CC(=O)Oc1ccccc1C(=O)O", "OC(=O)c1ccccc1OC(C)=O"],
            ["CC(C)Cc1ccc(cc1)C(C)C(=O)O", "OC(=O)C(C)c1ccc(CC(C)C)cc1"],
            ["[NH4+].[Cl-]", "[Cl-].[NH4+]"],
        ],
    )
    def test_input_order_invariance(self, variants):
        outputs = {canonical_smiles(s) for s in variants}
        assert len(outputs) == 1

    def test_idempotent(self, complex_smiles):
        for smiles in complex_smiles:
            once = canonical_smiles(smiles)
            assert canonical_smiles(once) == once, smiles

    def test_accepts_molecule(self):
        mol = parse("OCC")
        assert canonical_smiles(mol) == "CCO"
        assert SmilesWriter(mol).to_smiles() == "CCO"


BRIDGED_SMILES = [
    "C1CC2CCC1C2",  # norbornane
    "C1CC2CCC1CC2",  # bicyclo[2.2.2]octane
    "CC12CCC(CC1)CC2O",
    "C1C2CC3CC1CC(C2)C3",  # adamantane
    "OC1C2CC3CC1CC(C2)C3",  # 2-adamantanol
    "CC1(C)C2CCC1(C)C(=O)C2",  # camphor
]


class TestAtomOrderInvariance:
    """Shuffled atom orders of one molecule give one canonical string."""

    @pytest.mark.parametrize("smiles", BRIDGED_SMILES + ["CN1C=NC2=C1C(=O)N(C(=O)N2C)C"])
    def test_shuffled_inputs(self, smiles):
        outputs = {canonical_smiles(rdkit_renumbered(smiles, seed)) for seed in range(25)}
        assert outputs == {canonical_smiles(smiles)}

    @pytest.mark.parametrize("smiles", BRIDGED_SMILES)
    def test_bridged_idempotent(self, smiles):
        once = canonical_smiles(smiles)
        assert canonical_smiles(once) == once

    def test_adamantanol_written_two_ways(self):
        assert canonical_smiles("OC1C2CC3CC1CC(C2)C3") == canonical_smiles(
            "C1C2CC3CC(C2)CC1C3O"
        )


class TestRoundTrip:
    """Output denotes the same molecule as the input."""

    def test_complex(self, complex_smiles):
        for smiles in complex_smiles:
            assert rdkit_canonical(canonical_smiles(smiles)) == rdkit_canonical(smiles), smiles

    def test_charged(self, charged_smiles):
        for smiles in charged_smiles:
            assert rdkit_canonical(canonical_smiles(smiles)) == rdkit_canonical(smiles), smiles

    def test_isotopes(self, isotope_smiles):
        for smiles in isotope_smiles:
            assert rdkit_canonical(canonical_smiles(smiles)) == rdkit_canonical(smiles), smiles

    def test_rings(self, ring_smiles):
        for smiles in ring_smiles:
            assert rdkit_canonical(canonical_smiles(smiles)) == rdkit_canonical(smiles), smiles

    def test_multi_component(self, multi_component_smiles):
        for smiles in multi_component_smiles:
            assert rdkit_canonical(canonical_smiles(smiles)) == rdkit_canonical(smiles), smiles

    def test_high_ring_closures(self, high_ring_closure_smiles):
        for smiles in high_ring_closure_smiles:
            assert canonical_smiles(smiles) == "C1CC1"

    @pytest.mark.parametrize(
        "smiles",
        [
            "c1ccccc1-c1ccccc1",
            "O=C1C=CC=CN1",
            "c1ccc2[nH]ccc2c1",
            "C#N",
            "CS(=O)(=O)C",
            "FC(F)(F)Cl",
            "C1CC2CCC1C2",
            "c1ccsc1",
            "c1ccoc1",
        ],
    )
    def test_assorted(self, smiles):
        assert rdkit_canonical(canonical_smiles(smiles)) == rdkit_canonical(smiles)


class TestRingNumbers:
    """Test ring digit allocation helpers."""

    def test_lowest_free(self):
        assert _lowest_free(set()) == 1
        assert _lowest_free({1, 2, 4}) == 3

    def test_exhausted(self):
        with pytest.raises(ValueError):
            _lowest_free(set(range(1, 100)))

    def test_formatting(self):
        assert _ring_number_to_smiles(7) == "7"
        assert _ring_number_to_smiles(10) == "%10"
        assert _ring_number_to_smiles(42) == "%42"

    def test_fused_rings_use_two_digits(self):
        smiles = canonical_smiles("C1=CC=C2C=CC=CC2=C1")
        assert "1" in smiles and "2" in smiles
