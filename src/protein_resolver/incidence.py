"""
Sparse incidence matrix of the reachable part of a run.

Rows are experimental peptides, columns are proteins, both in compact
(reindexed) order. Values are 1 where the peptide links to the protein.
"""

from dataclasses import dataclass

import numpy as np
from scipy import sparse

from protein_resolver.graph import ProteinGraph
from protein_resolver.reindex import Reindexing


@dataclass
class IncidenceMatrix:
    """
    Peptide x protein incidence of the reachable nodes.

    Attributes:
        matrix: scipy sparse CSR matrix
        peptides: Old peptide index of every row
        proteins: Old protein index of every column
    """

    matrix: sparse.csr_matrix
    peptides: list[int]
    proteins: list[int]

    @property
    def shape(self) -> tuple[int, int]:
        """(n_peptides, n_proteins)"""
        return self.matrix.shape

    def peptides_per_protein(self) -> np.ndarray:
        """Number of identifying peptides of each protein."""
        return np.asarray(self.matrix.sum(axis=0)).ravel().astype(np.int64)

    def proteins_per_peptide(self) -> np.ndarray:
        """Number of reachable proteins each peptide links to."""
        return np.asarray(self.matrix.sum(axis=1)).ravel().astype(np.int64)

    def unique_peptide_mask(self) -> np.ndarray:
        """Rows whose peptide links to exactly one protein."""
        return self.proteins_per_peptide() == 1

    def proteins_with_unique_peptide(self) -> np.ndarray:
        """Boolean mask over columns: protein owns at least one unique peptide."""
        unique_rows = self.matrix[self.unique_peptide_mask(), :]
        return np.asarray(unique_rows.sum(axis=0)).ravel() > 0

    def peptide_signatures(self) -> list[frozenset[int]]:
        """Identifying-peptide set (compact row indices) of every column."""
        csc = self.matrix.tocsc()
        return [
            frozenset(csc.indices[csc.indptr[j] : csc.indptr[j + 1]].tolist())
            for j in range(csc.shape[1])
        ]

    @classmethod
    def from_graph(cls, graph: ProteinGraph, reindexing: Reindexing) -> "IncidenceMatrix":
        """Build the matrix over reachable experimental peptides and reachable proteins."""
        rows = []
        cols = []
        row_peptides = []
        for pep_idx in reindexing.compact_peptides:
            peptide = graph.peptides[pep_idx]
            if not peptide.experimental:
                continue
            row = len(row_peptides)
            row_peptides.append(pep_idx)
            for prot_idx in peptide.proteins:
                if reindexing.is_reachable_protein(prot_idx):
                    rows.append(row)
                    cols.append(int(reindexing.proteins[prot_idx]))

        data = np.ones(len(rows), dtype=np.float64)
        matrix = sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(len(row_peptides), len(reindexing.compact_proteins)),
        )
        # Ensure binary
        matrix.data = np.ones_like(matrix.data)
        return cls(matrix=matrix, peptides=row_peptides, proteins=list(reindexing.compact_proteins))
