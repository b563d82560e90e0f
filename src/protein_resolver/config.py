"""
Resolver configuration.

Defaults can be stored in a JSON file; explicitly passed values take
precedence over the file, the file over the built-in defaults.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

ENZYMES = ("Trypsin", "Trypsin/P")


@dataclass
class ResolverConfig:
    """
    Settings for the in-silico digestion feeding the theoretical graph.

    Attributes:
        enzyme: "Trypsin" (no cleavage before P) or "Trypsin/P"
        missed_cleavages: Maximum number of missed cleavages
        min_length: Minimum peptide length
        max_length: Maximum peptide length
        decoy_prefix: Accession prefix marking decoy database records
    """

    enzyme: str = "Trypsin"
    missed_cleavages: int = 2
    min_length: int = 6
    max_length: int = 40
    decoy_prefix: str = "DECOY_"

    def validate(self) -> "ResolverConfig":
        if self.enzyme not in ENZYMES:
            raise ValueError(f"Unknown enzyme: {self.enzyme}. Expected one of {', '.join(ENZYMES)}")
        if self.missed_cleavages < 0:
            raise ValueError(f"missed_cleavages must be >= 0, got {self.missed_cleavages}")
        if self.min_length < 1:
            raise ValueError(f"min_length must be >= 1, got {self.min_length}")
        if self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) is larger than max_length ({self.max_length})"
            )
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Path) -> None:
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(config_defaults: Path | None = None, **overrides) -> ResolverConfig:
    """
    Load a ResolverConfig from a JSON defaults file and explicit overrides.

    Args:
        config_defaults: Optional JSON file with default parameters
        **overrides: Values taking precedence; None means "not given"

    Returns:
        Validated ResolverConfig

    Raises:
        FileNotFoundError: If the defaults file does not exist
        ValueError: For unknown keys or inconsistent values
    """
    defaults = {}
    if config_defaults:
        if not config_defaults.exists():
            raise FileNotFoundError(f"Config defaults file not found: {config_defaults}")
        with open(config_defaults) as f:
            defaults = json.load(f)

    known = {f.name for f in fields(ResolverConfig)}
    unknown = (set(defaults) | set(overrides)) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    values = dict(defaults)
    values.update({key: value for key, value in overrides.items() if value is not None})
    return ResolverConfig(**values).validate()
