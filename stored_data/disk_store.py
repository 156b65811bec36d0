from __future__ import annotations

import asyncio
import os
from pathlib import Path

from .interfaces import FileSystem
from .paths import ensure_dir, tmp_path_for


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    tmp_path = tmp_path_for(path)
    try:
        with tmp_path.open("w", encoding=encoding) as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class DiskFileSystem(FileSystem):
    """
    Local-disk FileSystem.

    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    Errors (permission denied, missing file, ...) propagate unchanged as OSError.
    """

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(path.exists)

    async def make_dirs(self, path: Path) -> None:
        await asyncio.to_thread(ensure_dir, path)

    async def read_text(self, path: Path, encoding: str) -> str:
        return await asyncio.to_thread(path.read_text, encoding=encoding)

    async def write_text(self, path: Path, text: str, encoding: str) -> None:
        await asyncio.to_thread(atomic_write_text, path, text, encoding=encoding)
