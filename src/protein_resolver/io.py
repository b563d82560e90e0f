"""
Tabular evidence readers.

Identification tables have one row per identification with the columns
``sequence`` and ``proteins`` (semicolon-joined accessions) and optionally
``score`` and ``run``. Consensus tables additionally carry ``feature`` (rows
sharing a value form one consensus feature) and ``intensity``.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from loguru import logger

from protein_resolver.evidence import (
    ConsensusFeature,
    ConsensusMap,
    PeptideHit,
    PeptideIdentification,
)


def read_table(path: Path) -> pd.DataFrame:
    """Load a parquet, CSV or tab-separated table."""
    path = Path(path)
    if path.suffix == ".parquet":
        df = pd.read_parquet(path)
    elif path.suffix == ".csv":
        df = pd.read_csv(path)
    else:
        df = pd.read_csv(path, sep="\t")
    logger.info(f"Read {path}: {df.shape[0]:,} rows")
    return df


def _check_columns(df: pd.DataFrame, required: tuple[str, ...]) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"Evidence table is missing columns: {', '.join(missing)}")


def _drop_missing_sequences(df: pd.DataFrame) -> pd.DataFrame:
    missing = df["sequence"].isna()
    if missing.any():
        logger.warning(f"Skipping {int(missing.sum()):,} rows without a peptide sequence")
    return df[~missing]


def _hit(row) -> PeptideHit:
    proteins = row.get("proteins")
    accessions = [] if pd.isna(proteins) else [a for a in str(proteins).split(";") if a]
    score = row.get("score", 0.0)
    return PeptideHit(
        sequence=str(row["sequence"]),
        accessions=accessions,
        score=0.0 if pd.isna(score) else float(score),
    )


def identifications_from_dataframe(df: pd.DataFrame) -> list[PeptideIdentification]:
    _check_columns(df, ("sequence", "proteins"))
    df = _drop_missing_sequences(df)
    has_run = "run" in df.columns
    return [
        PeptideIdentification(hits=[_hit(row)], identifier=str(row["run"]) if has_run else "")
        for row in df.to_dict("records")
    ]


def consensus_from_dataframe(df: pd.DataFrame, identifier: str = "") -> ConsensusMap:
    _check_columns(df, ("sequence", "proteins", "feature", "intensity"))
    df = _drop_missing_sequences(df)
    runs = sorted(df["run"].astype(str).unique()) if "run" in df.columns else []
    map_index = {run: i for i, run in enumerate(runs)}

    features = []
    for feature_id, rows in df.groupby("feature", sort=False):
        identifications = [
            PeptideIdentification(
                hits=[_hit(row)],
                map_index=map_index.get(str(row["run"])) if runs else None,
            )
            for row in rows.to_dict("records")
        ]
        features.append(
            ConsensusFeature(
                intensity=float(rows["intensity"].iloc[0]),
                peptide_identifications=identifications,
                unique_id=str(feature_id),
            )
        )
    return ConsensusMap(
        features=features,
        column_headers={i: run for run, i in map_index.items()},
        identifier=identifier,
    )


def read_identifications(path: Path) -> list[PeptideIdentification]:
    """Read an identification table into PeptideIdentification records."""
    return identifications_from_dataframe(read_table(path))


def read_consensus(path: Path) -> ConsensusMap:
    """Read a consensus table into a ConsensusMap named after the file."""
    return consensus_from_dataframe(read_table(path), identifier=Path(path).stem)
