"""Tabular export of resolver results."""

from pathlib import Path

import pandas as pd
from loguru import logger

from protein_resolver.models import ResolverResult


def msd_groups_to_dataframe(result: ResolverResult) -> pd.DataFrame:
    """One row per MSD group.

    Returns:
        DataFrame with columns: msd_group, isd_group, proteins, peptides,
        n_proteins, n_peptides, n_target, n_decoy, n_target_plus_decoy, intensity
    """
    rows = []
    for group in result.msd_groups:
        rows.append(
            {
                "msd_group": group.index,
                "isd_group": group.isd_group,
                "proteins": ";".join(
                    result.protein_entries[i].accession for i in group.proteins
                ),
                "peptides": ";".join(result.peptide_entries[i].sequence for i in group.peptides),
                "n_proteins": len(group.proteins),
                "n_peptides": len(group.peptides),
                "n_target": group.number_of_target,
                "n_decoy": group.number_of_decoy,
                "n_target_plus_decoy": group.number_of_target_plus_decoy,
                "intensity": group.intensity,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "msd_group",
            "isd_group",
            "proteins",
            "peptides",
            "n_proteins",
            "n_peptides",
            "n_target",
            "n_decoy",
            "n_target_plus_decoy",
            "intensity",
        ],
    )


def proteins_to_dataframe(result: ResolverResult) -> pd.DataFrame:
    """One row per protein that belongs to an MSD group, in compact order."""
    rows = []
    for new_idx, old_idx in enumerate(result.compact_proteins):
        protein = result.protein_entries[old_idx]
        rows.append(
            {
                "index": new_idx,
                "accession": protein.accession,
                "description": protein.fasta_entry.description,
                "protein_type": protein.protein_type.value if protein.protein_type else None,
                "indistinguishable": ";".join(
                    result.protein_entries[i].accession for i in protein.indis
                ),
                "isd_group": protein.isd_group,
                "msd_group": protein.msd_group,
                "n_experimental_peptides": protein.number_of_experimental_peptides,
                "weight": protein.weight,
                "coverage": protein.coverage,
                "decoy": protein.is_decoy,
            }
        )
    return pd.DataFrame(rows)


def peptides_to_dataframe(result: ResolverResult) -> pd.DataFrame:
    """One row per experimental peptide, in compact order."""
    rows = []
    for new_idx, old_idx in enumerate(result.compact_peptides):
        peptide = result.peptide_entries[old_idx]
        rows.append(
            {
                "index": new_idx,
                "sequence": peptide.sequence,
                "proteins": ";".join(
                    sorted(result.protein_entries[i].accession for i in peptide.proteins)
                ),
                "n_proteins": len(peptide.proteins),
                "isd_group": peptide.isd_group,
                "msd_group": peptide.msd_group,
                "intensity": peptide.intensity,
                "origin": peptide.origin,
            }
        )
    return pd.DataFrame(rows)


def write_result(result: ResolverResult, output_dir: Path) -> list[Path]:
    """Write the group, protein and peptide tables of a run as TSV files."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tables = {
        "msd_groups": msd_groups_to_dataframe(result),
        "proteins": proteins_to_dataframe(result),
        "peptides": peptides_to_dataframe(result),
    }
    paths = []
    for name, df in tables.items():
        path = output_dir / f"{result.identifier}_{name}.tsv"
        df.to_csv(path, sep="\t", index=False)
        logger.info(f"Wrote {len(df):,} rows to {path}")
        paths.append(path)
    return paths
