from __future__ import annotations

from pathlib import Path


def resolve_path(path: Path | str) -> Path:
    """Absolute, canonical form of a store file path (relative paths resolve against the cwd)."""
    return Path(path).expanduser().resolve()


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def tmp_path_for(path: Path) -> Path:
    # Sibling of the target so the final replace stays on one filesystem.
    return path.with_name(path.name + ".tmp")
