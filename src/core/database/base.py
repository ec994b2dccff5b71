"""
Covenant Bot - Document Store Base Module
=========================================

Whole-document JSON persistence with serialized read-modify-write.

DESIGN:
    Each document is a mapping of id -> record. Readers get a deep
    snapshot; writers mutate the live mapping inside mutate() and the
    whole document is written back when the block exits cleanly.
"""

import copy
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from src.core.logger import logger


# =============================================================================
# Helper Functions
# =============================================================================

def _safe_json_loads(value: Optional[str], name: str) -> Dict[str, Any]:
    """Parse a document body, returning an empty mapping on error."""
    if not value or not value.strip():
        return {}
    try:
        data = json.loads(value)
    except (json.JSONDecodeError, ValueError):
        logger.warning("Corrupted JSON Document", [
            ("Document", name),
            ("Preview", value[:50]),
        ])
        return {}
    if not isinstance(data, dict):
        logger.warning("Unexpected JSON Document Shape", [
            ("Document", name),
            ("Type", type(data).__name__),
        ])
        return {}
    return data


# =============================================================================
# JSON Document
# =============================================================================

class JsonDocument:
    """
    One JSON document held in memory and mirrored to disk.

    DESIGN:
        The re-entrant lock serializes mutations so two read-modify-write
        cycles on the same document never interleave, including the
        write-back. A failed write is logged and swallowed: memory keeps
        the new state and the next successful write catches disk up.

    Attributes:
        name: Document name used in logs.
        path: File backing the document, None for memory-only.
    """

    def __init__(self, name: str, path: Optional[Path] = None) -> None:
        self.name = name
        self.path = path
        self._lock = threading.RLock()
        self._data: Dict[str, Any] = self._load()

    # =========================================================================
    # Disk I/O
    # =========================================================================

    def _load(self) -> Dict[str, Any]:
        """Load the document from disk, empty if missing or unreadable."""
        if self.path is None or not self.path.exists():
            return {}
        try:
            body = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Document Load Failed", [
                ("Document", self.name),
                ("Path", str(self.path)),
                ("Error", str(e)[:100]),
            ])
            return {}
        return _safe_json_loads(body, self.name)

    def _save(self) -> bool:
        """Write the whole document atomically. Returns False on failure."""
        if self.path is None:
            return True

        body = json.dumps(self._data, indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(body)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error("Document Save Failed", [
                ("Document", self.name),
                ("Path", str(self.path)),
                ("Error", str(e)[:100]),
            ])
            return False
        return True

    # =========================================================================
    # Access
    # =========================================================================

    def read(self) -> Dict[str, Any]:
        """Return a deep snapshot of the whole document."""
        with self._lock:
            return copy.deepcopy(self._data)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return a copy of one record, or None."""
        with self._lock:
            record = self._data.get(key)
            return copy.deepcopy(record) if record is not None else None

    @property
    def lock(self) -> "threading.RLock":
        """Document lock, for holding several documents at once."""
        return self._lock

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    @contextmanager
    def mutate(self) -> Iterator[Dict[str, Any]]:
        """
        Mutate the document and write it back on clean exit.

        If the block raises, the in-memory document is rolled back to its
        state before the block and nothing is written.
        """
        with self._lock:
            before = copy.deepcopy(self._data)
            try:
                yield self._data
            except BaseException:
                self._data = before
                raise
            if self._data != before:
                self._save()


__all__ = ["JsonDocument", "_safe_json_loads"]
