"""Atomic file I/O utilities for pclock."""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_yaml(path: Path) -> Any:
    """Read a YAML file, returning None if missing or empty."""
    text = read_text(path)
    if not text.strip():
        return None
    return yaml.safe_load(text)


def dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _atomic_write(path: Path, content: str, suffix: str = ".tmp") -> None:
    """Atomic write with file locking: temp file + flock + rename."""
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        # mkstemp creates 0600; keep the permissions of the file being replaced
        if path.exists():
            os.chmod(temp_path, path.stat().st_mode & 0o7777)
        os.rename(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic JSON write (replaces the whole file)."""
    _atomic_write(path, dump_json(data), suffix=".json")


def create_json_exclusive(path: Path, data: dict[str, Any]) -> None:
    """Create a new JSON file. Raises FileExistsError if it already exists."""
    with open(path, "x", encoding="utf-8") as f:
        f.write(dump_json(data))
