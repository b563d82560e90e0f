"""
Protein resolver entry points.

Load the theoretical node set once, then resolve any number of evidence
sources against it. Every run works on its own copy of the database graph
and appends one ResolverResult.

Example:
    >>> from protein_resolver import ProteinResolver, read_fasta
    >>>
    >>> resolver = ProteinResolver()
    >>> resolver.set_fasta_entries(read_fasta("db.fasta"))
    >>> result = resolver.resolve_id(peptide_identifications)
    >>> print(f"{result.n_msd_groups} MSD groups")
"""

from __future__ import annotations

from typing import Iterable, Sequence

from loguru import logger

from protein_resolver.classify import apply_classification, classify_proteins
from protein_resolver.config import ResolverConfig
from protein_resolver.digestion import theoretical_entries
from protein_resolver.evidence import ConsensusMap, FastaEntry, PeptideIdentification
from protein_resolver.graph import (
    Observation,
    ProteinGraph,
    include_evidence,
    observations_from_consensus,
    observations_from_identifications,
)
from protein_resolver.models import InputType, ProteinType, ResolverResult, TheoreticalEntry
from protein_resolver.partition import build_isd_groups, build_msd_groups
from protein_resolver.reindex import reindex_nodes
from protein_resolver.statistics import compute_msd_intensity, count_target_decoy


class ProteinResolver:
    """Computes ISD/MSD groups and protein classifications per evidence source."""

    def __init__(self, config: ResolverConfig | None = None):
        self.config = (config or ResolverConfig()).validate()
        self._theoretical: ProteinGraph | None = None
        self._results: list[ResolverResult] = []

    @property
    def results(self) -> tuple[ResolverResult, ...]:
        return tuple(self._results)

    @property
    def is_loaded(self) -> bool:
        return self._theoretical is not None

    def set_protein_data(self, entries: Iterable[TheoreticalEntry]) -> None:
        """Load the theoretical protein/peptide node set shared by all runs."""
        self._theoretical = ProteinGraph.from_theoretical(entries)
        logger.info(
            f"Loaded {len(self._theoretical.proteins):,} proteins and "
            f"{len(self._theoretical.peptides):,} theoretical peptides"
        )

    def set_fasta_entries(self, fasta_entries: Iterable[FastaEntry]) -> None:
        """Digest database records with the configured enzyme and load them."""
        self.set_protein_data(theoretical_entries(fasta_entries, self.config))

    def clear_results(self) -> None:
        """Drop all accumulated results and the loaded node set."""
        self._results.clear()
        self._theoretical = None

    def resolve_id(
        self,
        peptide_identifications: Sequence[PeptideIdentification],
        identifier: str | None = None,
    ) -> ResolverResult:
        """Resolve protein groups from a list of peptide identifications."""
        if identifier is None:
            identifier = next((p.identifier for p in peptide_identifications if p.identifier), "")
        return self._resolve(
            observations_from_identifications(peptide_identifications),
            InputType.PEPTIDE_IDENT,
            peptide_identifications,
            identifier,
        )

    def resolve_consensus(
        self,
        consensus: ConsensusMap,
        identifier: str | None = None,
    ) -> ResolverResult:
        """Resolve protein groups from a consensus map; intensities come from the features."""
        if identifier is None:
            identifier = consensus.identifier
        return self._resolve(
            observations_from_consensus(consensus),
            InputType.CONSENSUS,
            consensus,
            identifier,
        )

    def _resolve(
        self,
        observations: Iterable[Observation],
        input_type: InputType,
        evidence: ConsensusMap | Sequence[PeptideIdentification],
        identifier: str,
    ) -> ResolverResult:
        identifier = identifier or f"run_{len(self._results)}"
        if self._theoretical is None:
            logger.warning(f"No protein data loaded, run {identifier} has no proteins")
            graph = ProteinGraph([], [])
        else:
            graph = self._theoretical.copy()

        stats = include_evidence(graph, observations)
        logger.info(
            f"[{identifier}] {stats.observations:,} observations: "
            f"{stats.matched_theoretical:,} theoretical peptides confirmed, "
            f"{stats.added_peptides:,} peptides added, {len(stats.dropped):,} sequences dropped"
        )

        isd_groups = build_isd_groups(graph)
        msd_groups = build_msd_groups(graph, isd_groups)
        reindexing = reindex_nodes(graph, msd_groups)

        apply_classification(graph, classify_proteins(graph, reindexing))
        count_target_decoy(msd_groups, graph)
        compute_msd_intensity(msd_groups, graph)

        result = ResolverResult(
            identifier=identifier,
            input_type=input_type,
            protein_entries=graph.proteins,
            peptide_entries=graph.peptides,
            isd_groups=isd_groups,
            msd_groups=msd_groups,
            reindexed_proteins=reindexing.proteins,
            reindexed_peptides=reindexing.peptides,
            compact_proteins=reindexing.compact_proteins,
            compact_peptides=reindexing.compact_peptides,
            evidence=evidence,
        )
        n_primary = len(
            result.proteins_of_type(ProteinType.PRIMARY, ProteinType.PRIMARY_INDISTINGUISHABLE)
        )
        logger.info(
            f"[{identifier}] {len(isd_groups):,} ISD groups, {len(msd_groups):,} MSD groups, "
            f"{len(reindexing.compact_proteins):,} reachable proteins ({n_primary:,} primary)"
        )

        self._results.append(result)
        return result
