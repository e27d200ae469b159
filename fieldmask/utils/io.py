"""Utility helpers for I/O operations."""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, TextIO

import yaml


def read_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML file and return its content as a dictionary."""
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def parse_records(content: str) -> List[Any]:
    """Split ``content`` into records.

    Accepts a JSON array, a single JSON document or JSON Lines.
    """
    stripped = content.strip()
    if not stripped:
        return []
    if stripped.startswith("[") and stripped.endswith("]"):
        return json.loads(stripped)
    try:
        return [json.loads(stripped)]
    except json.JSONDecodeError:
        return [json.loads(line) for line in content.splitlines() if line.strip()]


def write_records(records: Iterable[Any], out: TextIO) -> None:
    """Write one JSON document per line."""
    for rec in records:
        out.write(json.dumps(rec, ensure_ascii=False, default=str))
        out.write("\n")


__all__ = ["read_yaml", "parse_records", "write_records"]
