"""
Evidence records consumed by the resolver.

These are the narrow interfaces to the surrounding tooling: sequence
database records, peptide identifications and consensus features. Their
file formats are owned by the readers in ``fasta.py`` and ``io.py``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from protein_resolver.models import PeptideEntry

_MODIFICATION = re.compile(r"\([^)]*\)|\[[^\]]*\]")


@dataclass(frozen=True, slots=True)
class FastaEntry:
    """A protein record from a sequence database."""

    identifier: str
    sequence: str
    description: str = ""
    is_decoy: bool = False


@dataclass
class PeptideHit:
    """A candidate peptide for one spectrum."""

    sequence: str
    accessions: list[str] = field(default_factory=list)
    score: float = 0.0

    @property
    def unmodified_sequence(self) -> str:
        return strip_modifications(self.sequence)


@dataclass
class PeptideIdentification:
    """
    Ranked peptide hits for one spectrum.

    Attributes:
        hits: Candidate hits, best first
        identifier: Run or file the identification originates from
        map_index: Input map the identification belongs to (consensus input)
    """

    hits: list[PeptideHit] = field(default_factory=list)
    identifier: str = ""
    map_index: int | None = None


@dataclass
class ConsensusFeature:
    """A quantified feature annotated with peptide identifications."""

    intensity: float
    peptide_identifications: list[PeptideIdentification] = field(default_factory=list)
    unique_id: str = ""


@dataclass
class ConsensusMap:
    """Collection of consensus features plus the names of the input maps."""

    features: list[ConsensusFeature] = field(default_factory=list)
    column_headers: dict[int, str] = field(default_factory=dict)
    identifier: str = ""

    def __len__(self) -> int:
        return len(self.features)

    def __getitem__(self, index: int) -> ConsensusFeature:
        return self.features[index]

    def __iter__(self):
        return iter(self.features)


def strip_modifications(sequence: str) -> str:
    """Remove bracketed modifications and flank markers.

    ``_PEPTIDE_`` and ``K.PEPTIDE.R`` flanks are dropped; all other
    characters are kept so the result matches the stored peptide key.

    Example:
        >>> strip_modifications("_PEPM(Oxidation)TIDEC[+57.02]K_")
        'PEPMTIDECK'
    """
    sequence = _MODIFICATION.sub("", sequence).strip("_")
    parts = sequence.split(".")
    if len(parts) == 3:
        sequence = parts[1]
    return sequence.replace(".", "").upper()


def _require_provenance(peptide: PeptideEntry) -> tuple[int, int]:
    if peptide.peptide_identification is None or peptide.peptide_hit is None:
        raise ValueError(
            f"Peptide {peptide.sequence} is theoretical only and has no identification"
        )
    return peptide.peptide_identification, peptide.peptide_hit


def get_peptide_identification(
    evidence: ConsensusMap | Sequence[PeptideIdentification],
    peptide: PeptideEntry,
) -> PeptideIdentification:
    """Return the identification an experimental peptide was derived from.

    For a consensus map the provenance indices are (feature, identification);
    for a list of identifications they are (identification, hit).

    Raises:
        ValueError: If the peptide was never observed
    """
    first, second = _require_provenance(peptide)
    if isinstance(evidence, ConsensusMap):
        return evidence[first].peptide_identifications[second]
    return evidence[first]


def get_peptide_hit(
    evidence: ConsensusMap | Sequence[PeptideIdentification],
    peptide: PeptideEntry,
) -> PeptideHit:
    """Return the peptide hit an experimental peptide was derived from.

    Consensus features only contribute their top hit, so the hit of a
    consensus-derived peptide is always the first one.
    """
    first, second = _require_provenance(peptide)
    if isinstance(evidence, ConsensusMap):
        return evidence[first].peptide_identifications[second].hits[0]
    return evidence[first].hits[second]
