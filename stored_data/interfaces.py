from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class FileSystem(Protocol):
    """
    The file operations a store needs. Every call is a suspension point.
    """

    async def exists(self, path: Path) -> bool: ...

    async def make_dirs(self, path: Path) -> None:
        """Create `path` and any missing parents (no error if it exists)."""
        ...

    async def read_text(self, path: Path, encoding: str) -> str: ...

    async def write_text(self, path: Path, text: str, encoding: str) -> None:
        """Replace the file content in one step."""
        ...


class DocumentStore(Protocol):
    """
    A single JSON document persisted at a fixed path, exposed as a live `data` value.
    """

    data: Any
    file_path: Path

    async def write(self) -> None:
        """Validate (if enabled) and persist the current data."""
        ...

    async def reload(self) -> None:
        """Refresh data in place from the file."""
        ...

    async def reset(self, new_value: Any = None) -> None:
        """Replace data in place with `new_value` (or the default) and persist it."""
        ...
