"""
Tunable limits and defaults.

Every public operation that consumes one of these settings accepts an
optional override; the module-level defaults are used otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class ParseLimits:
    """Bounds enforced while tokenizing and parsing untrusted text.

    Attributes:
        max_length: Maximum number of characters accepted.
        max_branch_depth: Maximum nesting depth of parentheses.
        max_ring_closures: Maximum number of simultaneously open ring closures.
    """

    max_length: int = 10_000
    max_branch_depth: int = 256
    max_ring_closures: int = 1_000


@dataclass(frozen=True, slots=True)
class FingerprintConfig:
    """Path fingerprint parameters.

    Attributes:
        min_path: Shortest path length (in bonds) that is encoded.
        max_path: Longest path length (in bonds) that is encoded.
        n_bits: Size of the bit vector.
    """

    min_path: int = 1
    max_path: int = 7
    n_bits: int = 1024

    def __post_init__(self) -> None:
        if self.n_bits <= 0:
            raise ValueError(f"n_bits must be positive, got {self.n_bits}")
        if not 1 <= self.min_path <= self.max_path:
            raise ValueError(
                f"Invalid path range: min_path={self.min_path}, max_path={self.max_path}"
            )


@dataclass(frozen=True, slots=True)
class CanonConfig:
    """Canonical ranking parameters.

    Attributes:
        max_iterations: Cap on refinement rounds per refinement pass.
    """

    max_iterations: int = 100


DEFAULT_PARSE_LIMITS: Final[ParseLimits] = ParseLimits()
DEFAULT_FINGERPRINT_CONFIG: Final[FingerprintConfig] = FingerprintConfig()
DEFAULT_CANON_CONFIG: Final[CanonConfig] = CanonConfig()
