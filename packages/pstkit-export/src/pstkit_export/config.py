"""Configuration model for the pstkit-export pipeline.

Provides ``ExportContext``, the immutable per-run configuration, with
sensible defaults.  Supports loading overrides from YAML or JSON files via
the ``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ExportContext(BaseModel):
    """All run parameters.  Created once at startup; read-only thereafter."""

    model_config = ConfigDict(frozen=True)

    # --- Input / Output ---
    input_file: str = "data/enron.pst"
    output_directory: str = "data"

    # --- Strategy ---
    strategy: str = "eml"
    plaintext_only: bool = False

    # --- Header Repair ---
    max_repair_attempts: int = Field(default=10, ge=0)

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @classmethod
    def from_file(cls, path: str) -> ExportContext:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Keys present in the file override the
        corresponding defaults; keys not present retain their defaults.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install pyyaml"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
