"""JSON-file document collection shared by the concrete stores.

One file per collection, holding a JSON object keyed by document id.
Every read and every read-modify-write holds an inter-process file lock
whose acquisition timeout is the per-call store timeout; expiry and I/O
failures surface as StoreUnavailableError.  Writes go to a temp file
that is atomically renamed over the collection.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from storefront.domain.exceptions import StoreUnavailableError


class JsonCollection:

    def __init__(self, file_path: Path, timeout: float = 5.0) -> None:
        self._file_path = file_path
        self._timeout = timeout
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = FileLock(str(file_path) + ".lock", timeout=timeout)
        self._ensure_file()

    @property
    def name(self) -> str:
        return self._file_path.stem

    def read(self) -> dict[str, dict]:
        """Return a snapshot of every document."""
        with self._locked():
            return self._load_raw()

    @contextmanager
    def update(self) -> Iterator[dict[str, dict]]:
        """Hold the lock across a read-modify-write of the collection.

        Changes made to the yielded dict are written back when the block
        exits normally; an exception inside the block discards them.
        """
        with self._locked():
            documents = self._load_raw()
            yield documents
            self._persist_raw(documents)

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self._lock.acquire()
        except Timeout as exc:
            raise StoreUnavailableError(
                f"Timed out after {self._timeout}s waiting for the '{self.name}' store"
            ) from exc
        try:
            yield
        finally:
            self._lock.release()

    def _load_raw(self) -> dict[str, dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailableError(f"Cannot read the '{self.name}' store: {exc}") from exc

    def _persist_raw(self, documents: dict[str, dict]) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(documents, fh, indent=2)
                fh.write("\n")
            os.replace(tmp_name, self._file_path)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write the '{self.name}' store: {exc}") from exc

    def _ensure_file(self) -> None:
        with self._locked():
            if not self._file_path.exists():
                self._persist_raw({})
