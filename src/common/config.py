"""Shared configuration utilities."""

from pathlib import Path

import yaml


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the document is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data
