"""Aromaticity perception."""

from smilesgraph.transform.aromaticity import (
    AromaticityPerceiver,
    AromaticityResult,
    ElectronDonorType,
    apply_huckel,
    get_atom_donor_type,
    perceive_aromaticity,
)

__all__ = [
    "AromaticityPerceiver",
    "AromaticityResult",
    "ElectronDonorType",
    "apply_huckel",
    "get_atom_donor_type",
    "perceive_aromaticity",
]
