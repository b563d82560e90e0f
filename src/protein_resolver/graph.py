"""
Protein-peptide graph construction.

The theoretical graph is built once from the database; every run works on
its own copy and overlays the observed peptides of one evidence source.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field, replace
from operator import attrgetter
from typing import Iterable, Iterator, Sequence

from loguru import logger

from protein_resolver.annotate import annotate_peptides, proteins_by_peptide
from protein_resolver.evidence import ConsensusMap, PeptideIdentification
from protein_resolver.models import PeptideEntry, ProteinEntry, TheoreticalEntry


@dataclass(frozen=True, slots=True)
class Observation:
    """One observed peptide, with provenance into its evidence source."""

    sequence: str
    identification: int
    hit: int
    intensity: float = 0.0
    origin: str = ""
    accessions: tuple[str, ...] = ()


@dataclass
class IncludeStats:
    """Bookkeeping of one evidence pass."""

    observations: int = 0
    matched_theoretical: int = 0
    added_peptides: int = 0
    dropped: list[str] = field(default_factory=list)

    @property
    def experimental_peptides(self) -> int:
        return self.matched_theoretical + self.added_peptides


class ProteinGraph:
    """
    Protein and peptide nodes addressed by index.

    Peptide nodes are unique by sequence and kept sorted by sequence so that
    ``find_peptide`` can binary search them.
    """

    def __init__(self, proteins: list[ProteinEntry], peptides: list[PeptideEntry]):
        self.proteins = proteins
        self.peptides = peptides

    @classmethod
    def from_theoretical(cls, entries: Iterable[TheoreticalEntry]) -> "ProteinGraph":
        """Build the database graph; duplicate peptide sequences share one node."""
        proteins = []
        links: dict[str, set[int]] = {}
        for prot_idx, entry in enumerate(entries):
            proteins.append(
                ProteinEntry(
                    fasta_entry=entry.fasta_entry,
                    weight=entry.weight,
                    coverage=entry.coverage,
                )
            )
            for sequence in entry.peptides:
                links.setdefault(sequence, set()).add(prot_idx)

        peptides = [PeptideEntry(sequence=seq, proteins=links[seq]) for seq in sorted(links)]
        for pep_idx, peptide in enumerate(peptides):
            for prot_idx in peptide.proteins:
                proteins[prot_idx].peptides.add(pep_idx)
        return cls(proteins, peptides)

    def __len__(self) -> int:
        return len(self.proteins) + len(self.peptides)

    def copy(self) -> "ProteinGraph":
        """Independent snapshot; database records are immutable and shared."""
        proteins = [replace(p, peptides=set(p.peptides), indis=list(p.indis)) for p in self.proteins]
        peptides = [replace(p, proteins=set(p.proteins)) for p in self.peptides]
        return ProteinGraph(proteins, peptides)

    @property
    def not_found(self) -> int:
        """Sentinel returned by ``find_peptide`` on a miss."""
        return len(self.peptides)

    def find_peptide(self, sequence: str) -> int:
        """Return the index of the peptide node, or ``not_found``."""
        idx = bisect_left(self.peptides, sequence, key=attrgetter("sequence"))
        if idx < len(self.peptides) and self.peptides[idx].sequence == sequence:
            return idx
        return self.not_found

    def accession_index(self) -> dict[str, list[int]]:
        index: dict[str, list[int]] = {}
        for prot_idx, protein in enumerate(self.proteins):
            index.setdefault(protein.accession, []).append(prot_idx)
        return index

    def add_peptides(self, links: dict[str, set[int]]) -> None:
        """Insert new peptide nodes linked to the given proteins.

        All new nodes are appended first and the collection is sorted once;
        peptide indices stored on the proteins are remapped afterwards.
        """
        if not links:
            return
        for sequence, proteins in links.items():
            self.peptides.append(PeptideEntry(sequence=sequence, proteins=set(proteins)))

        order = sorted(range(len(self.peptides)), key=lambda i: self.peptides[i].sequence)
        new_index = {old: new for new, old in enumerate(order)}
        self.peptides = [self.peptides[i] for i in order]

        for protein in self.proteins:
            protein.peptides = {new_index[i] for i in protein.peptides}
        for pep_idx, peptide in enumerate(self.peptides):
            for prot_idx in peptide.proteins:
                self.proteins[prot_idx].peptides.add(pep_idx)


def observations_from_identifications(
    peptide_identifications: Sequence[PeptideIdentification],
) -> Iterator[Observation]:
    """Yield the top hit of every identification."""
    for ident_idx, ident in enumerate(peptide_identifications):
        if not ident.hits:
            continue
        hit = ident.hits[0]
        yield Observation(
            sequence=hit.unmodified_sequence,
            identification=ident_idx,
            hit=0,
            origin=ident.identifier,
            accessions=tuple(hit.accessions),
        )


def observations_from_consensus(consensus: ConsensusMap) -> Iterator[Observation]:
    """Yield the top hit of every identification on every feature.

    Provenance is (feature index, identification index on the feature).
    """
    for feature_idx, feature in enumerate(consensus.features):
        for ident_idx, ident in enumerate(feature.peptide_identifications):
            if not ident.hits:
                continue
            hit = ident.hits[0]
            origin = ident.identifier
            if not origin and ident.map_index is not None:
                origin = consensus.column_headers.get(ident.map_index, "")
            yield Observation(
                sequence=hit.unmodified_sequence,
                identification=feature_idx,
                hit=ident_idx,
                intensity=feature.intensity,
                origin=origin,
                accessions=tuple(hit.accessions),
            )


def _link_unknown_peptides(
    graph: ProteinGraph,
    observations: list[Observation],
) -> dict[str, set[int]]:
    """Find database proteins containing observed peptides the digest missed."""
    unknown: dict[str, set[str]] = {}
    for obs in observations:
        if graph.find_peptide(obs.sequence) == graph.not_found:
            unknown.setdefault(obs.sequence, set()).update(obs.accessions)
    if not unknown:
        return {}

    matches = proteins_by_peptide(
        annotate_peptides(
            unknown,
            {i: p.fasta_entry.sequence for i, p in enumerate(graph.proteins)},
        )
    )
    accession_index = graph.accession_index()

    links = {}
    for sequence, accessions in unknown.items():
        proteins = matches.get(sequence, set())
        named = {i for acc in accessions for i in accession_index.get(acc, [])}
        if named & proteins:
            proteins = named & proteins
        if proteins:
            links[sequence] = proteins
    return links


def include_evidence(graph: ProteinGraph, observations: Iterable[Observation]) -> IncludeStats:
    """
    Overlay observed peptides onto the graph.

    Known sequences are promoted to experimental. Unknown sequences are
    inserted as new nodes linked to every protein containing them;
    observations matching no protein are dropped.

    Intensities of repeated observations are summed once per evidence item
    (a consensus feature seen in several maps counts once); provenance
    points at the first observation.
    """
    observations = [obs for obs in observations if obs.sequence]
    stats = IncludeStats(observations=len(observations))

    links = _link_unknown_peptides(graph, observations)
    graph.add_peptides(links)
    stats.added_peptides = len(links)

    applied: set[tuple[str, int]] = set()

    for obs in observations:
        pep_idx = graph.find_peptide(obs.sequence)
        if pep_idx == graph.not_found or not graph.peptides[pep_idx].proteins:
            if obs.sequence not in stats.dropped:
                logger.debug(f"No database protein contains {obs.sequence}, skipping")
                stats.dropped.append(obs.sequence)
            continue

        peptide = graph.peptides[pep_idx]
        if not peptide.experimental:
            peptide.experimental = True
            peptide.peptide_identification = obs.identification
            peptide.peptide_hit = obs.hit
            peptide.origin = obs.origin
            if obs.sequence not in links:
                stats.matched_theoretical += 1
        if (obs.sequence, obs.identification) not in applied:
            applied.add((obs.sequence, obs.identification))
            peptide.intensity += obs.intensity

    return stats
