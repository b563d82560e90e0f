"""
Protein/peptide graph nodes, group records and per-run results.

Nodes live in plain lists and reference each other by integer index, so
groups and reindexing tables never hold live references into the graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Sequence

import numpy as np

from protein_resolver.evidence import ConsensusMap, FastaEntry, PeptideIdentification


class ProteinType(Enum):
    """Identifiability of a protein given the observed peptides."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    PRIMARY_INDISTINGUISHABLE = "primary_indistinguishable"
    SECONDARY_INDISTINGUISHABLE = "secondary_indistinguishable"

    @property
    def is_primary(self) -> bool:
        return self in (ProteinType.PRIMARY, ProteinType.PRIMARY_INDISTINGUISHABLE)


class InputType(Enum):
    """Kind of evidence a run was resolved from."""

    PEPTIDE_IDENT = "peptide_ident"
    CONSENSUS = "consensus"


class TheoreticalEntry(NamedTuple):
    """Database protein with its in-silico peptides, as loaded before any run."""

    fasta_entry: FastaEntry
    weight: float
    coverage: float
    peptides: frozenset[str]


@dataclass
class ProteinEntry:
    """
    Protein node.

    Attributes:
        fasta_entry: Database record the node was created from
        weight: Monoisotopic weight in Da
        coverage: Sequence coverage in percent
        peptides: Indices of linked peptide nodes
        protein_type: Classification, None while unresolved
        indis: Indices of indistinguishable fellow proteins
        isd_group: Coarse group index
        msd_group: Fine group index, None when never reached by observed peptides
        number_of_experimental_peptides: Linked peptides that were observed
    """

    fasta_entry: FastaEntry
    weight: float = 0.0
    coverage: float = 0.0
    peptides: set[int] = field(default_factory=set)
    protein_type: ProteinType | None = None
    indis: list[int] = field(default_factory=list)
    isd_group: int | None = None
    msd_group: int | None = None
    number_of_experimental_peptides: int = 0

    @property
    def accession(self) -> str:
        return self.fasta_entry.identifier

    @property
    def is_decoy(self) -> bool:
        return self.fasta_entry.is_decoy


@dataclass
class PeptideEntry:
    """
    Peptide node, theoretical until matched against an identification.

    ``peptide_identification`` and ``peptide_hit`` are positional indices into
    the evidence source of the run (see ``evidence.get_peptide_hit``).
    """

    sequence: str
    proteins: set[int] = field(default_factory=set)
    experimental: bool = False
    intensity: float = 0.0
    peptide_identification: int | None = None
    peptide_hit: int | None = None
    origin: str = ""
    isd_group: int | None = None
    msd_group: int | None = None


@dataclass
class IsdGroup:
    """Connected component over all (theoretical and observed) edges."""

    index: int
    proteins: list[int] = field(default_factory=list)
    peptides: list[int] = field(default_factory=list)
    msd_groups: list[int] = field(default_factory=list)


@dataclass
class MsdGroup:
    """Connected component over observed edges, nested in one ISD group."""

    index: int
    isd_group: int
    proteins: list[int] = field(default_factory=list)
    peptides: list[int] = field(default_factory=list)
    number_of_decoy: int = 0
    number_of_target: int = 0
    number_of_target_plus_decoy: int = 0
    intensity: float = 0.0  # median of the peptide intensities


@dataclass
class ResolverResult:
    """Everything computed for one run."""

    identifier: str
    input_type: InputType
    protein_entries: list[ProteinEntry]
    peptide_entries: list[PeptideEntry]
    isd_groups: list[IsdGroup]
    msd_groups: list[MsdGroup]
    reindexed_proteins: np.ndarray
    reindexed_peptides: np.ndarray
    compact_proteins: list[int] = field(default_factory=list)
    compact_peptides: list[int] = field(default_factory=list)
    evidence: ConsensusMap | Sequence[PeptideIdentification] | None = None

    @property
    def protein_sentinel(self) -> int:
        """Reindex value of proteins outside every MSD group."""
        return len(self.compact_proteins)

    @property
    def peptide_sentinel(self) -> int:
        return len(self.compact_peptides)

    @property
    def n_isd_groups(self) -> int:
        return len(self.isd_groups)

    @property
    def n_msd_groups(self) -> int:
        return len(self.msd_groups)

    def proteins_of_type(self, *types: ProteinType) -> list[ProteinEntry]:
        return [p for p in self.protein_entries if p.protein_type in types]

    def experimental_peptides(self) -> list[PeptideEntry]:
        return [p for p in self.peptide_entries if p.experimental]
