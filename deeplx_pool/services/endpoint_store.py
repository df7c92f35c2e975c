"""File-backed endpoint list plus the in-memory pool of validated endpoints."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Iterable

from deeplx_pool.core.errors import EndpointStoreError
from deeplx_pool.core.logging import structured_log
from deeplx_pool.core.telemetry import record_store_write_failure, set_pool_size


class EndpointStore:
    """
    Owns the persisted URL file and the live pool.

    The file holds canonical candidates (one per line); the pool holds the subset
    that passed probing in this incarnation. The pool is only ever replaced whole.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._write_lock = Lock()
        self._pool: tuple[str, ...] = ()

    def load(self) -> list[str]:
        """Return non-blank lines of the file; a missing file is created empty."""
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()
            structured_log(
                "INFO",
                "Endpoint file did not exist; created empty",
                operation="store.load",
                metadata={"path": str(self.path)},
            )
            return []
        # Undecodable bytes become U+FFFD; such lines fail probing like any other garbage
        try:
            content = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise EndpointStoreError(str(self.path), str(e)) from e
        return [line.strip() for line in content.splitlines() if line.strip()]

    def save(self, urls: Iterable[str]) -> bool:
        """
        Overwrite the file via temp file + rename so a crash keeps the old list.
        Returns False (and logs) on failure instead of raising.
        """
        data = "\n".join(urls)
        with self._write_lock:
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                    dir=self.path.parent,
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, self.path)
            except OSError as e:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                record_store_write_failure()
                structured_log(
                    "ERROR",
                    f"Failed to persist endpoint list: {e}",
                    operation="store.save",
                    metadata={"path": str(self.path)},
                    error={"type": type(e).__name__, "message": str(e)},
                )
                return False
        structured_log(
            "INFO",
            "Persisted endpoint list",
            operation="store.save",
            metadata={"path": str(self.path), "count": data.count("\n") + 1 if data else 0},
        )
        return True

    def replace_pool(self, urls: Iterable[str]) -> None:
        self._pool = tuple(urls)
        set_pool_size(len(self._pool))

    def snapshot(self) -> list[str]:
        """Point-in-time copy of the live pool."""
        return list(self._pool)

    def __len__(self) -> int:
        return len(self._pool)
