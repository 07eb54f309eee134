"""Configuration model for the emlkit conversion pipeline.

Provides ``EmlConverterConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel


class EmlConverterConfig(BaseModel):
    """All tunable parameters with sensible defaults."""

    # --- Identity ---
    parser_version: str = "emlkit:1.0.0"

    # --- Content Selection / Decoding ---
    prefer_html: bool = True
    default_charset: str = "utf-8"

    # --- Security / Resource Limits ---
    max_file_size_mb: int = 50

    # --- Placeholders ---
    placeholder_subject: str = "No Subject"
    placeholder_sender: str = "Unknown Sender"
    placeholder_recipient: str = "Unknown Recipient"
    placeholder_date: str = "Unknown Date"
    placeholder_body: str = "No message content found"

    # --- Batch / Output ---
    stop_on_error: bool = False
    merged_filename: str = "merged-emails.md"
    archive_filename: str = "converted-emails.zip"

    # --- Logging / PII Safety ---
    log_sample_data: bool = False

    @classmethod
    def from_file(cls, path: str | pathlib.Path) -> EmlConverterConfig:
        """Load overrides from a ``.yaml`` / ``.yml`` or ``.json`` file.

        Keys missing from the file keep their defaults.  An empty file
        yields the default configuration.
        """
        file_path = pathlib.Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()
        text = file_path.read_text(encoding="utf-8")

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install emlkit[yaml]"
                ) from exc
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text) if text.strip() else None
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        return cls.model_validate(data or {})
