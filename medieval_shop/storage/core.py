"""Storage initialization and path helpers."""

import re
from pathlib import Path

_data_dir: Path | None = None


def safe_id(visitor_id: str) -> str:
    """Convert an opaque visitor id to a filesystem-safe file stem.

    "abc/../123" → "abc-123"
    """
    text = re.sub(r"[^A-Za-z0-9_-]+", "-", visitor_id.strip())
    text = text.strip("-")
    return text or "anonymous"


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    players_dir().mkdir(exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def players_dir() -> Path:
    return data_dir() / "players"
