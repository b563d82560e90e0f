"""Target/decoy composition and intensity of MSD groups."""

from typing import Iterable

import numpy as np

from protein_resolver.graph import ProteinGraph
from protein_resolver.models import MsdGroup


def median(values: Iterable[float]) -> float:
    """Median of the values; even counts average the two central values.

    Returns 0.0 for no values.
    """
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def count_target_decoy(msd_groups: list[MsdGroup], graph: ProteinGraph) -> None:
    """Count target and decoy proteins of every MSD group.

    The decoy flag comes from the database record of each protein.
    """
    for group in msd_groups:
        n_decoy = sum(1 for i in group.proteins if graph.proteins[i].is_decoy)
        group.number_of_decoy = n_decoy
        group.number_of_target = len(group.proteins) - n_decoy
        group.number_of_target_plus_decoy = group.number_of_target + group.number_of_decoy


def compute_msd_intensity(msd_groups: list[MsdGroup], graph: ProteinGraph) -> None:
    """Set each group's intensity to the median of its experimental peptide intensities."""
    for group in msd_groups:
        group.intensity = median(
            graph.peptides[i].intensity for i in group.peptides if graph.peptides[i].experimental
        )
