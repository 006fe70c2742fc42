"""Test configuration and fixtures for smilesgraph tests."""

import random

import pytest

# RDKit is used as reference for atom, bond and ring counts
from rdkit import Chem


def rdkit_mol(smiles: str) -> Chem.Mol:
    """Parse with RDKit, failing loudly on invalid input."""
    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit could not parse: {smiles}")
    return mol


def rdkit_canonical(smiles: str) -> str:
    """Get RDKit canonical SMILES (no stereochemistry) for comparison.

    Args:
        smiles: Input SMILES string.

    Returns:
        RDKit's canonical SMILES.
    """
    return Chem.MolToSmiles(rdkit_mol(smiles), canonical=True, isomericSmiles=False)


def rdkit_renumbered(smiles: str, seed: int) -> str:
    """Write the molecule with its atoms in a shuffled order.

    The result is a non-canonical SMILES for the same graph, so each seed
    gives a different input text for one molecule.
    """
    mol = rdkit_mol(smiles)
    order = list(range(mol.GetNumAtoms()))
    random.Random(seed).shuffle(order)
    shuffled = Chem.RenumberAtoms(mol, order)
    return Chem.MolToSmiles(shuffled, canonical=False, isomericSmiles=False)


def rdkit_atom_count(smiles: str) -> int:
    """Get number of heavy atoms from RDKit for comparison."""
    return rdkit_mol(smiles).GetNumAtoms()


def rdkit_bond_count(smiles: str) -> int:
    """Get number of bonds from RDKit for comparison."""
    return rdkit_mol(smiles).GetNumBonds()


def rdkit_ring_sizes(smiles: str) -> list[int]:
    """Sorted SSSR ring sizes from RDKit."""
    mol = rdkit_mol(smiles)  # keep the Mol alive while its RingInfo is read
    return sorted(len(ring) for ring in mol.GetRingInfo().AtomRings())


@pytest.fixture
def simple_smiles() -> list[str]:
    """Basic valid SMILES strings for smoke testing."""
    return [
        "C",
        "CC",
        "CCC",
        "CCCC",
        "CCO",
        "C=C",
        "C#C",
        "C=O",
        "C#N",
    ]


@pytest.fixture
def aromatic_smiles() -> list[str]:
    """Aromatic SMILES strings."""
    return [
        "c1ccccc1",
        "c1cnccc1",
        "c1ccncc1",
        "n1ccccc1",
        "c1ccc2ccccc2c1",
        "c1cc2ccccc2cc1",
    ]


@pytest.fixture
def ring_smiles() -> list[str]:
    """SMILES with ring closures."""
    return [
        "C1CC1",
        "C1CCC1",
        "C1CCCC1",
        "C1CCCCC1",
        "C1CC2CCCCC2C1",
        "C12CC1CC2",
    ]


@pytest.fixture
def charged_smiles() -> list[str]:
    """SMILES with charged atoms."""
    return [
        "[O-]",
        "[NH4+]",
        "[Na+]",
        "[Cl-]",
        "[O-]C=O",
        "[NH4+].[Cl-]",
        "[Na+].[Cl-]",
        "CC([O-])=O",
        "C[N+](=O)[O-]",
    ]


@pytest.fixture
def isotope_smiles() -> list[str]:
    """SMILES with isotopes."""
    return [
        "[2H]",
        "[13C]",
        "[14C]",
        "[2H]C([2H])([2H])[2H]",
        "C[13C](C)(C)C",
        "[35Cl]",
    ]


@pytest.fixture
def bracket_atom_smiles() -> list[str]:
    """SMILES with bracket atoms."""
    return [
        "[CH4]",
        "[CH3]",
        "[CH2]",
        "[NH3]",
        "[NH2]",
        "[OH]",
        "[SH]",
        "[Cu]",
        "[Fe]",
        "[Pt]",
    ]


@pytest.fixture
def multi_component_smiles() -> list[str]:
    """SMILES with multiple disconnected components."""
    return [
        "[Na+].[Cl-]",
        "O.O",
        "CO.OC",
        "[Na+].[Cl-].[NH4+].[Cl-]",
        "c1ccccc1.c1ccccc1",
    ]


@pytest.fixture
def high_ring_closure_smiles() -> list[str]:
    """SMILES with high ring closure numbers."""
    return [
        "C%10CC%10",
        "C%11CC%11",
        "C%99CC%99",
    ]


@pytest.fixture
def complex_smiles() -> list[str]:
    """Complex real-world molecules."""
    return [
        # Aspirin
        "CC(=O)OC1=CC=CC=C1C(=O)O",
        # Caffeine
        "CN1C=NC2=C1C(=O)N(C(=O)N2C)C",
        # Ibuprofen
        "CC(C)Cc1ccc(cc1)C(C)C(=O)O",
        # Acetaminophen
        "CC(=O)Nc1ccc(O)cc1",
        # Ethanol
        "CCO",
        # Benzene
        "c1ccccc1",
        # Naphthalene
        "c1ccc2ccccc2c1",
        # Indole
        "c1ccc2[nH]ccc2c1",
        # Cyclohexane
        "C1CCCCC1",
    ]


@pytest.fixture
def invalid_smiles() -> list[str]:
    """Malformed SMILES that must be rejected."""
    return [
        "C(",
        "C)",
        "C()C",
        "C1CC",
        "[CH4",
        "C]",
        "[Xx]",
        "C$C",
        "CC=",
        "=C",
        "C==C",
        "C=.C",
        "C11",
        "C(C)(C)(C)(C)C",
        "O=O=O",
    ]
