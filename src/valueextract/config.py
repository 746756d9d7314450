"""Configuration loading for valueextract.

Loads form parser limits from YAML so deployments can tune how much of a
request body is held in memory.
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

MiB = 1024 * 1024


class FormParseConfig(BaseModel):
    """Size limits applied when a form source parses a request body.

    Attributes:
        max_form_memory_size: Largest non-file field, in bytes, held in memory.
            File parts larger than werkzeug's spill threshold go to temporary files.
        max_content_length: Largest accepted request body, in bytes.
        max_form_parts: Largest number of multipart parts accepted.
    """

    max_form_memory_size: int = Field(default=1 * MiB, gt=0)
    max_content_length: int = Field(default=16 * MiB, gt=0)
    max_form_parts: int = Field(default=1000, gt=0)


class ValueExtractConfig(BaseModel):
    """Root configuration for valueextract.

    Attributes:
        form: Form body parser limits.
    """

    form: FormParseConfig = Field(default_factory=FormParseConfig)


def load_config(path: Path) -> ValueExtractConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        ValueExtractConfig with form parser limits.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If a limit is not a positive integer.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return ValueExtractConfig(form=FormParseConfig(**(data.get("form") or {})))
