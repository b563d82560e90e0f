"""
CLI tool to resolve protein groups from identification or consensus tables.

This tool:
1. Reads a FASTA database and digests it into theoretical peptides
2. Reads one or more evidence tables (identifications or consensus features)
3. Resolves ISD/MSD groups and classifies proteins for every table
4. Writes group, protein and peptide tables per run
"""

from dataclasses import dataclass
from pathlib import Path

import cyclopts
from loguru import logger

from protein_resolver.config import load_config
from protein_resolver.export import write_result
from protein_resolver.fasta import read_fasta
from protein_resolver.io import read_consensus, read_identifications
from protein_resolver.models import ProteinType, ResolverResult
from protein_resolver.resolver import ProteinResolver

app = cyclopts.App(
    name="protein-resolver",
    help="Resolve ISD/MSD protein groups from peptide evidence",
)


@dataclass
class RunSummary:
    """Statistics of one resolved run."""

    identifier: str
    isd_groups: int
    msd_groups: int
    reachable_proteins: int
    experimental_peptides: int
    primary: int
    secondary: int
    primary_indistinguishable: int
    secondary_indistinguishable: int
    decoy_proteins: int

    @classmethod
    def from_result(cls, result: ResolverResult) -> "RunSummary":
        def count(protein_type: ProteinType) -> int:
            return len(result.proteins_of_type(protein_type))

        return cls(
            identifier=result.identifier,
            isd_groups=result.n_isd_groups,
            msd_groups=result.n_msd_groups,
            reachable_proteins=len(result.compact_proteins),
            experimental_peptides=len(result.compact_peptides),
            primary=count(ProteinType.PRIMARY),
            secondary=count(ProteinType.SECONDARY),
            primary_indistinguishable=count(ProteinType.PRIMARY_INDISTINGUISHABLE),
            secondary_indistinguishable=count(ProteinType.SECONDARY_INDISTINGUISHABLE),
            decoy_proteins=sum(g.number_of_decoy for g in result.msd_groups),
        )


def _setup_file_logging(log_path: Path) -> None:
    """Configure loguru to also log to a file."""
    logger.add(
        log_path,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
        level="INFO",
        mode="w",
    )


def _log_summary(summary: RunSummary) -> None:
    logger.info("=" * 60)
    logger.info(f"PROTEIN RESOLVER SUMMARY: {summary.identifier}")
    logger.info("=" * 60)
    logger.info(f"ISD groups:                  {summary.isd_groups:,}")
    logger.info(f"MSD groups:                  {summary.msd_groups:,}")
    logger.info(f"Proteins in MSD groups:      {summary.reachable_proteins:,}")
    logger.info(f"Experimental peptides:       {summary.experimental_peptides:,}")
    logger.info("-" * 60)
    logger.info(f"  Primary:                     {summary.primary:,}")
    logger.info(f"  Secondary:                   {summary.secondary:,}")
    logger.info(f"  Primary indistinguishable:   {summary.primary_indistinguishable:,}")
    logger.info(f"  Secondary indistinguishable: {summary.secondary_indistinguishable:,}")
    logger.info(f"  Decoy proteins:              {summary.decoy_proteins:,}")
    logger.info("=" * 60)


def run_resolver(
    fasta_path: Path,
    evidence_paths: list[Path],
    output_dir: Path,
    consensus: bool = False,
    config_defaults: Path | None = None,
    **overrides,
) -> list[RunSummary]:
    """Resolve every evidence table against one FASTA database.

    Args:
        fasta_path: FASTA database
        evidence_paths: Identification or consensus tables, one run each
        output_dir: Directory for the result tables
        consensus: Read the tables as consensus features
        config_defaults: Optional JSON config file
        **overrides: Config values taking precedence over the file

    Returns:
        One RunSummary per evidence table
    """
    config = load_config(config_defaults, **overrides)
    logger.info(f"Reading FASTA from {fasta_path}")
    fasta_entries = read_fasta(fasta_path, decoy_prefix=config.decoy_prefix)
    logger.info(f"Proteins in database: {len(fasta_entries):,}")

    resolver = ProteinResolver(config)
    resolver.set_fasta_entries(fasta_entries)

    summaries = []
    for path in evidence_paths:
        if consensus:
            result = resolver.resolve_consensus(read_consensus(path), identifier=path.stem)
        else:
            result = resolver.resolve_id(read_identifications(path), identifier=path.stem)
        write_result(result, output_dir)
        summary = RunSummary.from_result(result)
        _log_summary(summary)
        summaries.append(summary)
    return summaries


@app.default
def main(
    fasta: Path,
    evidence: list[Path],
    output_dir: Path = Path("protein-resolver-out"),
    consensus: bool = False,
    config: Path | None = None,
    log: Path | None = None,
    enzyme: str | None = None,
    missed_cleavages: int | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    decoy_prefix: str | None = None,
) -> None:
    """Resolve protein groups for one or more evidence tables.

    Args:
        fasta: Path to FASTA database file
        evidence: Identification tables (or consensus tables with --consensus)
        output_dir: Output directory for the result tables
        consensus: Treat evidence tables as consensus features
        config: JSON file with default resolver settings
        log: Log file path (default: protein_resolver.log in output directory)
        enzyme: Digestion enzyme (Trypsin or Trypsin/P)
        missed_cleavages: Maximum missed cleavages
        min_length: Minimum peptide length
        max_length: Maximum peptide length
        decoy_prefix: Accession prefix of decoy proteins
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    if log is None:
        log = output_dir / "protein_resolver.log"

    _setup_file_logging(log)
    logger.info(f"Logging to {log}")

    run_resolver(
        fasta_path=fasta,
        evidence_paths=evidence,
        output_dir=output_dir,
        consensus=consensus,
        config_defaults=config,
        enzyme=enzyme,
        missed_cleavages=missed_cleavages,
        min_length=min_length,
        max_length=max_length,
        decoy_prefix=decoy_prefix,
    )
    logger.info("Done!")


if __name__ == "__main__":
    app()
