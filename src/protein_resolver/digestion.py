"""
In-silico digestion of database proteins.

Produces the theoretical peptide sets the resolver graph is built from:
- Trypsin specificity (cleaves after K/R, blocked by P unless "Trypsin/P")
- Missed cleavages
- Peptide length filtering
"""

from typing import Iterable

import numpy as np
from loguru import logger

from protein_resolver.config import ResolverConfig
from protein_resolver.evidence import FastaEntry
from protein_resolver.models import TheoreticalEntry

# Monoisotopic residue masses (Da)
AA_MASSES = {
    "G": 57.021464,
    "A": 71.037114,
    "S": 87.032028,
    "P": 97.052764,
    "V": 99.068414,
    "T": 101.047679,
    "C": 103.009185,
    "L": 113.084064,
    "I": 113.084064,
    "N": 114.042927,
    "D": 115.026943,
    "Q": 128.058578,
    "K": 128.094963,
    "E": 129.042593,
    "M": 131.040485,
    "H": 137.058912,
    "F": 147.068414,
    "U": 150.953636,
    "R": 156.101111,
    "Y": 163.063329,
    "W": 186.079313,
    "O": 237.147727,
}
H2O_MASS = 18.010564684


def cleavage_sites(sequence: str, enzyme: str = "Trypsin") -> list[int]:
    """Positions after which the enzyme cuts, framed by -1 and the last index."""
    sites = [-1]
    for i, aa in enumerate(sequence[:-1]):
        if aa in "KR" and (enzyme == "Trypsin/P" or sequence[i + 1] != "P"):
            sites.append(i)
    sites.append(len(sequence) - 1)
    return sites


def digest_spans(
    sequence: str,
    enzyme: str = "Trypsin",
    missed_cleavages: int = 2,
    min_length: int = 6,
    max_length: int = 40,
) -> list[tuple[int, int]]:
    """Return (start, end) spans of all peptides passing the length filter."""
    if not sequence:
        return []
    sites = cleavage_sites(sequence, enzyme)
    spans = []
    for mc in range(missed_cleavages + 1):
        for i in range(len(sites) - mc - 1):
            start = sites[i] + 1
            end = sites[i + mc + 1] + 1
            if min_length <= end - start <= max_length:
                spans.append((start, end))
    return spans


def digest(
    sequence: str,
    enzyme: str = "Trypsin",
    missed_cleavages: int = 2,
    min_length: int = 6,
    max_length: int = 40,
) -> set[str]:
    """Digest a protein sequence into its unique peptides.

    Example:
        >>> sorted(digest("PEPTIDEKRPROTEINK", missed_cleavages=0, min_length=4))
        ['OTEINK', 'PEPTIDEK']
    """
    return {
        sequence[start:end]
        for start, end in digest_spans(sequence, enzyme, missed_cleavages, min_length, max_length)
    }


def monoisotopic_weight(sequence: str) -> float:
    """Monoisotopic weight of an unmodified sequence; unknown residues are ignored."""
    if not sequence:
        return 0.0
    return sum(AA_MASSES.get(aa, 0.0) for aa in sequence) + H2O_MASS


def sequence_coverage(length: int, spans: Iterable[tuple[int, int]]) -> float:
    """Percentage of residues covered by at least one span."""
    if length == 0:
        return 0.0
    covered = np.zeros(length, dtype=bool)
    for start, end in spans:
        covered[start:end] = True
    return 100.0 * covered.sum() / length


def theoretical_entries(
    fasta_entries: Iterable[FastaEntry],
    config: ResolverConfig | None = None,
) -> list[TheoreticalEntry]:
    """Digest database records into the theoretical node set of the resolver."""
    config = config or ResolverConfig()
    entries = []
    for fasta_entry in fasta_entries:
        sequence = fasta_entry.sequence
        spans = digest_spans(
            sequence,
            enzyme=config.enzyme,
            missed_cleavages=config.missed_cleavages,
            min_length=config.min_length,
            max_length=config.max_length,
        )
        entries.append(
            TheoreticalEntry(
                fasta_entry=fasta_entry,
                weight=monoisotopic_weight(sequence),
                coverage=sequence_coverage(len(sequence), spans),
                peptides=frozenset(sequence[start:end] for start, end in spans),
            )
        )

    n_peptides = len({pep for entry in entries for pep in entry.peptides})
    logger.info(f"Digested {len(entries):,} proteins into {n_peptides:,} unique peptides")
    return entries
