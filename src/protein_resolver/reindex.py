"""
Compact reindexing of the nodes that belong to an MSD group.

Nodes that are only part of an ISD group (never reached through observed
peptides) are excluded from the compact numbering and get the sentinel
value, which equals the number of reachable nodes.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from protein_resolver.graph import ProteinGraph
from protein_resolver.models import MsdGroup


@dataclass
class Reindexing:
    """
    Old -> new index tables for proteins and peptides.

    Attributes:
        proteins: For every protein node its compact index or the sentinel
        peptides: For every peptide node its compact index or the sentinel
        compact_proteins: New -> old protein index
        compact_peptides: New -> old peptide index
    """

    proteins: np.ndarray
    peptides: np.ndarray
    compact_proteins: list[int]
    compact_peptides: list[int]

    @property
    def protein_sentinel(self) -> int:
        return len(self.compact_proteins)

    @property
    def peptide_sentinel(self) -> int:
        return len(self.compact_peptides)

    def is_reachable_protein(self, old_index: int) -> bool:
        return bool(self.proteins[old_index] != self.protein_sentinel)

    def is_reachable_peptide(self, old_index: int) -> bool:
        return bool(self.peptides[old_index] != self.peptide_sentinel)


def _compact(n_nodes: int, order: list[int]) -> np.ndarray:
    table = np.full(n_nodes, len(order), dtype=np.int64)
    table[order] = np.arange(len(order), dtype=np.int64)
    return table


def reindex_nodes(graph: ProteinGraph, msd_groups: list[MsdGroup]) -> Reindexing:
    """Number MSD members consecutively, following MSD order then member order."""
    compact_proteins = [i for group in msd_groups for i in group.proteins]
    compact_peptides = [i for group in msd_groups for i in group.peptides]

    return Reindexing(
        proteins=_compact(len(graph.proteins), compact_proteins),
        peptides=_compact(len(graph.peptides), compact_peptides),
        compact_proteins=compact_proteins,
        compact_peptides=compact_peptides,
    )
