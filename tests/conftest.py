"""Shared fixtures for the protein resolver tests."""

import pytest

from protein_resolver import (
    ConsensusFeature,
    ConsensusMap,
    FastaEntry,
    PeptideHit,
    PeptideIdentification,
    TheoreticalEntry,
)


def make_entries(layout: dict[str, set[str]], decoys: set[str] = frozenset()) -> list[TheoreticalEntry]:
    """Theoretical entries from accession -> peptides; sequences are the joined peptides."""
    return [
        TheoreticalEntry(
            fasta_entry=FastaEntry(
                identifier=accession,
                sequence="".join(sorted(peptides)),
                is_decoy=accession in decoys,
            ),
            weight=0.0,
            coverage=0.0,
            peptides=frozenset(peptides),
        )
        for accession, peptides in layout.items()
    ]


def make_consensus(intensities: dict[str, float]) -> ConsensusMap:
    """One feature per peptide with the given intensity."""
    return ConsensusMap(
        features=[
            ConsensusFeature(
                intensity=intensity,
                peptide_identifications=[PeptideIdentification(hits=[PeptideHit(sequence)])],
            )
            for sequence, intensity in intensities.items()
        ]
    )


def make_identifications(sequences: list[str], run: str = "run1") -> list[PeptideIdentification]:
    return [PeptideIdentification(hits=[PeptideHit(seq)], identifier=run) for seq in sequences]


@pytest.fixture
def two_protein_entries():
    """ProteinA -> PEP1, PEP2; ProteinB -> PEP2, PEP3."""
    return make_entries({"ProteinA": {"PEP1", "PEP2"}, "ProteinB": {"PEP2", "PEP3"}})
