"""
Covenant Bot - Store Manager
============================

Owns the five JSON documents and composes the per-domain operations.

DESIGN:
    One Store is built at startup and passed to every service. A store
    built without a data directory keeps everything in memory, which
    is what tests use.
"""

from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from src.core.logger import logger
from src.core.constants import (
    DIVORCES_FILE,
    MARRIAGES_FILE,
    MUTES_FILE,
    PROPOSALS_FILE,
    WARNINGS_FILE,
)
from src.core.database.base import JsonDocument
from src.core.database.marriages import MarriagesMixin
from src.core.database.mutes import MutesMixin
from src.core.database.pending import PendingMixin
from src.core.database.warnings import WarningsMixin


# =============================================================================
# Store
# =============================================================================

class Store(
    WarningsMixin,
    MarriagesMixin,
    PendingMixin,
    MutesMixin,
):
    """
    Persistent store of whole JSON documents.

    DESIGN: Each document serializes its own mutations. transaction()
    holds every document lock in a fixed order so a multi-document
    check-then-act (accepting a proposal, for instance) cannot
    interleave with another one.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None) -> None:
        self.data_dir: Optional[Path] = Path(data_dir) if data_dir is not None else None

        if self.data_dir is not None:
            self.data_dir.mkdir(parents=True, exist_ok=True)

        self.warnings = self._document("warnings", WARNINGS_FILE)
        self.marriages = self._document("marriages", MARRIAGES_FILE)
        self.proposals = self._document("proposals", PROPOSALS_FILE)
        self.divorces = self._document("divorces", DIVORCES_FILE)
        self.mutes = self._document("mutes", MUTES_FILE)

        logger.tree("Store Initialized", [
            ("Path", str(self.data_dir) if self.data_dir else "memory"),
            ("Warned Members", str(len(self.warnings))),
            ("Marriage Links", str(len(self.marriages))),
            ("Pending Proposals", str(len(self.proposals))),
            ("Pending Divorces", str(len(self.divorces))),
            ("Active Mutes", str(len(self.mutes))),
        ], emoji="🗄️")

    def _document(self, name: str, filename: str) -> JsonDocument:
        path = self.data_dir / filename if self.data_dir is not None else None
        return JsonDocument(name, path)

    @property
    def documents(self) -> tuple:
        return (self.warnings, self.marriages, self.proposals, self.divorces, self.mutes)

    @contextmanager
    def transaction(self) -> Iterator["Store"]:
        """Hold every document lock for a multi-document check-then-act."""
        with ExitStack() as stack:
            for document in self.documents:
                stack.enter_context(document.lock)
            yield self


__all__ = ["Store"]
