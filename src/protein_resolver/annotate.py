"""
Peptide-to-protein matching using Aho-Corasick multi-pattern search.

Used to link experimentally observed peptides that the digestion did not
produce (semi-specific cleavage, more missed cleavages) to every database
protein containing them.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

import ahocorasick_rs


@dataclass(frozen=True, slots=True)
class PeptideAnnotation:
    """A single peptide-protein match."""

    peptide: str
    protein: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return len(self.peptide)


def annotate_peptides(
    peptides: Iterable[str],
    proteins: Mapping[int, str],
) -> list[PeptideAnnotation]:
    """
    Find every occurrence of the peptides in the protein sequences.

    All peptides are searched simultaneously in each protein sequence;
    overlapping occurrences are reported.

    Args:
        peptides: Peptide sequences to search for
        proteins: Protein index -> protein sequence

    Returns:
        List of PeptideAnnotation, one per occurrence

    Example:
        >>> matches = annotate_peptides(["GVFRR", "DTHK"], {0: "MRGVFRRDTHKSEQ"})
        >>> sorted(m.peptide for m in matches)
        ['DTHK', 'GVFRR']
    """
    keywords = sorted(set(peptides))
    if not keywords:
        return []

    ac = ahocorasick_rs.AhoCorasick(keywords)

    annotations = []
    for protein, sequence in proteins.items():
        for idx, start, end in ac.find_matches_as_indexes(sequence, overlapping=True):
            annotations.append(
                PeptideAnnotation(peptide=keywords[idx], protein=protein, start=start, end=end)
            )
    return annotations


def proteins_by_peptide(annotations: Iterable[PeptideAnnotation]) -> dict[str, set[int]]:
    """Collapse annotations to peptide -> set of protein indices."""
    result: dict[str, set[int]] = {}
    for ann in annotations:
        result.setdefault(ann.peptide, set()).add(ann.protein)
    return result
