"""Atomic text write with fsync for project files."""

from __future__ import annotations

import os
import uuid
from pathlib import Path


def atomic_write_text(final_path: Path, text: str, temp_prefix: str) -> None:
    """Write text to final_path atomically: temp -> fsync -> rename -> fsync dir.

    Temp file is created next to final_path so rename is atomic. Parent
    folders are created. On failure, temp is removed.

    Args:
        final_path: Destination path.
        text: Content, written as UTF-8 with LF newlines.
        temp_prefix: Prefix for temp filename, e.g. "controller" or "generator".
    """
    folder = final_path.parent
    folder.mkdir(parents=True, exist_ok=True)
    temp_path = folder / f".{temp_prefix}.{os.getpid()}.{uuid.uuid4().hex[:8]}.tmp"
    content_bytes = text.encode("utf-8")
    try:
        fd = os.open(
            str(temp_path),
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            0o644,
        )
        try:
            os.write(fd, content_bytes)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(temp_path, final_path)
        try:
            dir_fd = os.open(str(folder), os.O_RDONLY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)
        except OSError:
            pass  # e.g. Windows: directory fsync best-effort
    finally:
        if temp_path.exists():
            temp_path.unlink(missing_ok=True)
