"""
protein_resolver - protein inference by ISD/MSD group resolution.

This package provides tools for:
- Building the protein-peptide graph from a digested sequence database
- Overlaying observed peptides from identifications or consensus features
- Partitioning the graph into ISD groups (all edges) and MSD groups
  (observed edges only)
- Classifying proteins as primary, secondary or indistinguishable

Example:
    >>> from protein_resolver import ProteinResolver, read_fasta
    >>>
    >>> resolver = ProteinResolver()
    >>> resolver.set_fasta_entries(read_fasta("db.fasta"))
    >>> result = resolver.resolve_consensus(consensus_map)
    >>> [group.intensity for group in result.msd_groups]
"""

from protein_resolver.config import ResolverConfig, load_config
from protein_resolver.evidence import (
    ConsensusFeature,
    ConsensusMap,
    FastaEntry,
    PeptideHit,
    PeptideIdentification,
    get_peptide_hit,
    get_peptide_identification,
)
from protein_resolver.fasta import read_fasta
from protein_resolver.models import (
    InputType,
    IsdGroup,
    MsdGroup,
    PeptideEntry,
    ProteinEntry,
    ProteinType,
    ResolverResult,
    TheoreticalEntry,
)
from protein_resolver.resolver import ProteinResolver

__all__ = [
    "ConsensusFeature",
    "ConsensusMap",
    "FastaEntry",
    "InputType",
    "IsdGroup",
    "MsdGroup",
    "PeptideEntry",
    "PeptideHit",
    "PeptideIdentification",
    "ProteinEntry",
    "ProteinResolver",
    "ProteinType",
    "ResolverConfig",
    "ResolverResult",
    "TheoreticalEntry",
    "get_peptide_hit",
    "get_peptide_identification",
    "load_config",
    "read_fasta",
]

__version__ = "0.1.0"
