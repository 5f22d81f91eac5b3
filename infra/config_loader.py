# infra/config_loader.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from infra.config import ClientRunConfig


def _load_raw(path: Path) -> dict:
    """
    Load a raw dict from a YAML or JSON file.
    """
    text = path.read_text(encoding="utf-8")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        raw = yaml.safe_load(text) or {}
    elif suffix == ".json":
        raw = json.loads(text)
    else:
        raise ValueError(f"Unsupported config format: {path} (use .yaml/.yml or .json)")

    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return raw


def load_client_config(path: Union[str, Path]) -> ClientRunConfig:
    """
    Load a ClientRunConfig from the given YAML/JSON file.

    Example:
        cfg = load_client_config('config/asset_client.yml')
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Config file not found: {p}")

    raw = _load_raw(p)
    try:
        return ClientRunConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed for {p}:\n{exc}") from exc
