"""Fingerprint similarity."""

from __future__ import annotations

from smilesgraph.fingerprint import Fingerprint


def tanimoto(a: Fingerprint, b: Fingerprint) -> float:
    """Tanimoto coefficient |A & B| / |A | B| of two fingerprints.

    Two empty fingerprints are identical, with similarity 1.0.

    Raises:
        ValueError: If the fingerprints have different sizes.

    Example:
        >>> fp = calculate_fingerprint(parse("CCO"))
        >>> tanimoto(fp, fp)
        1.0
    """
    if a.n_bits != b.n_bits:
        raise ValueError(f"Fingerprint sizes differ: {a.n_bits} and {b.n_bits}")

    union = len(a.bits | b.bits)
    if union == 0:
        return 1.0
    return len(a.bits & b.bits) / union
