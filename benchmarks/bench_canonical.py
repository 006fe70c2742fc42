#!/usr/bin/env python3
"""
Benchmark script comparing canonical SMILES speed between RDKit and smilesgraph.

Usage:
    python benchmarks/bench_canonical.py [--extended]

Options:
    --extended    Also time parsing, ring perception and fingerprints per molecule
"""

import sys
import os
import time
from dataclasses import dataclass
from typing import Callable, Optional

# Ensure local smilesgraph is used (not installed version)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Test molecules with varying complexity
TEST_MOLECULES = {
    "small_ether": "CCOCC",
    "medium_drug": "CC(C)Cc1ccc(cc1)C(C)C(=O)O",  # Ibuprofen
    "caffeine": "CN1C=NC2=C1C(=O)N(C(=O)N2C)C",
    "drug_like": "Cc1ccc(cc1Nc2nccc(n2)c3cccnc3)NC(=O)c4ccc(cc4)CN5CCN(CC5)C",  # Imatinib
    "polycyclic": "c1ccc2cc3cc4ccccc4cc3cc2c1",  # Tetracene
}

DEFAULT_MOLECULE = TEST_MOLECULES["drug_like"]

ITERATIONS = 500
EXTENDED_ITERATIONS = 200


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    label: str
    time_seconds: float
    iterations: int
    num_atoms: int

    @property
    def time_per_call_ms(self) -> float:
        return (self.time_seconds / self.iterations) * 1000

    @property
    def time_per_atom_us(self) -> float:
        """Microseconds per atom per call."""
        return (self.time_seconds / self.iterations / self.num_atoms) * 1_000_000


def _time(label: str, func: Callable[[], object], iterations: int, num_atoms: int) -> BenchmarkResult:
    func()  # warmup
    start = time.perf_counter()
    for _ in range(iterations):
        func()
    end = time.perf_counter()
    return BenchmarkResult(label, end - start, iterations, num_atoms)


def benchmark_rdkit(smiles: str, iterations: int) -> BenchmarkResult:
    """Benchmark RDKit parse + canonical SMILES."""
    from rdkit import Chem

    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit failed to parse SMILES: {smiles}")

    return _time(
        "rdkit",
        lambda: Chem.MolToSmiles(Chem.MolFromSmiles(smiles)),
        iterations,
        mol.GetNumAtoms(),
    )


def benchmark_smilesgraph(smiles: str, iterations: int) -> BenchmarkResult:
    """Benchmark smilesgraph parse + canonical SMILES."""
    from smilesgraph import canonical_smiles, parse

    num_atoms = parse(smiles).num_atoms
    return _time("smilesgraph", lambda: canonical_smiles(smiles), iterations, num_atoms)


def benchmark_stages(smiles: str, iterations: int) -> list[BenchmarkResult]:
    """Time each smilesgraph stage separately."""
    from smilesgraph import calculate_fingerprint, canonical_ranks, parse
    from smilesgraph.rings import find_all_rings
    from smilesgraph.transform import perceive_aromaticity

    mol = parse(smiles)
    n = mol.num_atoms
    aromaticity = perceive_aromaticity(mol)
    return [
        _time("parse", lambda: parse(smiles), iterations, n),
        _time("rings", lambda: find_all_rings(mol), iterations, n),
        _time("aromaticity", lambda: perceive_aromaticity(mol), iterations, n),
        _time("ranks", lambda: canonical_ranks(mol, aromaticity), iterations, n),
        _time("fingerprint", lambda: calculate_fingerprint(mol, aromaticity=aromaticity), iterations, n),
    ]


def run_single_benchmark():
    """Run basic single-molecule benchmark."""
    print("=" * 70)
    print("Canonical SMILES Benchmark: RDKit vs smilesgraph")
    print("=" * 70)
    print(f"\nTest molecule ({len(DEFAULT_MOLECULE)} chars):")
    print(f"  {DEFAULT_MOLECULE}")
    print(f"\nIterations: {ITERATIONS}")
    print("-" * 70)

    rdkit_result: Optional[BenchmarkResult] = None
    ours: Optional[BenchmarkResult] = None

    print("\nRunning RDKit benchmark...", end=" ", flush=True)
    try:
        rdkit_result = benchmark_rdkit(DEFAULT_MOLECULE, ITERATIONS)
        print("done")
        print(f"  Time: {rdkit_result.time_seconds:.3f}s ({rdkit_result.time_per_call_ms:.3f}ms per call)")
    except ImportError:
        print("SKIPPED (rdkit not installed)")

    print("\nRunning smilesgraph benchmark...", end=" ", flush=True)
    ours = benchmark_smilesgraph(DEFAULT_MOLECULE, ITERATIONS)
    print("done")
    print(f"  Time: {ours.time_seconds:.3f}s ({ours.time_per_call_ms:.3f}ms per call)")

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    if rdkit_result:
        ratio = ours.time_seconds / rdkit_result.time_seconds
        if ratio < 1:
            print(f"smilesgraph is {1/ratio:.2f}x FASTER than RDKit")
        else:
            print(f"smilesgraph is {ratio:.2f}x SLOWER than RDKit")
    else:
        print("Could not compare (rdkit missing)")


def run_extended_benchmark():
    """Per-stage timings for every test molecule."""
    print("=" * 90)
    print("EXTENDED smilesgraph Benchmark")
    print("=" * 90)
    print(f"\nIterations per stage: {EXTENDED_ITERATIONS}")

    header = f"{'Molecule':<14} {'Atoms':>6}" + "".join(
        f" {stage:>12}" for stage in ("parse", "rings", "aromaticity", "ranks", "fingerprint")
    )
    print(header + "   (ms/call)")
    print("-" * 90)

    for name, smiles in TEST_MOLECULES.items():
        results = benchmark_stages(smiles, EXTENDED_ITERATIONS)
        row = f"{name:<14} {results[0].num_atoms:>6}"
        row += "".join(f" {r.time_per_call_ms:>12.4f}" for r in results)
        print(row)


def main():
    if "--extended" in sys.argv or "-e" in sys.argv:
        run_extended_benchmark()
    else:
        run_single_benchmark()
        print("\n" + "-" * 70)
        print("TIP: Run with --extended for per-stage timings")


if __name__ == "__main__":
    main()
