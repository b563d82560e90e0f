"""
Protein identifiability classification.

A reachable protein is primary when one of its experimental peptides links
to no other reachable protein. Proteins whose identifying-peptide sets are
equal cannot be told apart and are marked indistinguishable; the group is
primary-indistinguishable when any member is primary.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from protein_resolver.graph import ProteinGraph
from protein_resolver.incidence import IncidenceMatrix
from protein_resolver.models import ProteinType
from protein_resolver.reindex import Reindexing


@dataclass
class Classification:
    """Labels keyed by old protein index; only reachable proteins appear."""

    types: dict[int, ProteinType] = field(default_factory=dict)
    indis: dict[int, list[int]] = field(default_factory=dict)
    experimental_peptides: dict[int, int] = field(default_factory=dict)

    def count(self, protein_type: ProteinType) -> int:
        return sum(1 for t in self.types.values() if t is protein_type)


def classify_proteins(graph: ProteinGraph, reindexing: Reindexing) -> Classification:
    """Compute the classification of every reindexed protein."""
    incidence = IncidenceMatrix.from_graph(graph, reindexing)
    result = Classification()
    if not incidence.proteins:
        return result

    has_unique = incidence.proteins_with_unique_peptide()
    n_peptides = incidence.peptides_per_protein()
    for col, prot_idx in enumerate(incidence.proteins):
        result.types[prot_idx] = ProteinType.PRIMARY if has_unique[col] else ProteinType.SECONDARY
        result.experimental_peptides[prot_idx] = int(n_peptides[col])

    by_signature: dict[frozenset[int], list[int]] = {}
    for col, signature in enumerate(incidence.peptide_signatures()):
        if signature:
            by_signature.setdefault(signature, []).append(incidence.proteins[col])

    for members in by_signature.values():
        if len(members) < 2:
            continue
        primary = any(result.types[i] is ProteinType.PRIMARY for i in members)
        label = (
            ProteinType.PRIMARY_INDISTINGUISHABLE if primary
            else ProteinType.SECONDARY_INDISTINGUISHABLE
        )
        for prot_idx in members:
            result.types[prot_idx] = label
            result.indis[prot_idx] = [other for other in members if other != prot_idx]

    return result


def apply_classification(graph: ProteinGraph, classification: Classification) -> None:
    """Write the labels onto the protein nodes in one pass."""
    for prot_idx, protein in enumerate(graph.proteins):
        protein.protein_type = classification.types.get(prot_idx)
        protein.indis = list(classification.indis.get(prot_idx, []))
        protein.number_of_experimental_peptides = classification.experimental_peptides.get(
            prot_idx, 0
        )

    logger.debug(
        f"Classified {len(classification.types)} proteins: "
        f"{classification.count(ProteinType.PRIMARY)} primary, "
        f"{classification.count(ProteinType.SECONDARY)} secondary, "
        f"{sum(1 for v in classification.indis.values() if v)} indistinguishable"
    )
