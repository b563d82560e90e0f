"""FASTA reading."""

import gzip
from pathlib import Path

from protein_resolver.evidence import FastaEntry


def read_fasta(filepath: str | Path, decoy_prefix: str = "DECOY_") -> list[FastaEntry]:
    """Read a FASTA file into database records.

    Args:
        filepath: Path to FASTA file (can be gzipped)
        decoy_prefix: Identifier prefix marking decoy records

    Returns:
        List of FastaEntry in file order; the identifier is the first word
        of the header
    """
    entries = []
    header = None
    sequence: list[str] = []

    def flush():
        if header is None:
            return
        identifier, _, description = header.partition(" ")
        entries.append(
            FastaEntry(
                identifier=identifier,
                sequence="".join(sequence),
                description=description.strip(),
                is_decoy=bool(decoy_prefix) and identifier.startswith(decoy_prefix),
            )
        )

    path = Path(filepath)
    opener = gzip.open if path.suffix == ".gz" else open

    with opener(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            if line.startswith(">"):
                flush()
                header = line[1:]
                sequence = []
            else:
                sequence.append(line)
        flush()

    return entries
