"""Linear undo/redo over whole-document snapshots."""

from __future__ import annotations

import logging

from models.document import Snapshot

logger = logging.getLogger(__name__)


class History_Manager:
    """Simple undo/redo stack. Unbounded; a new push drops the redo branch."""

    def __init__(self) -> None:
        self._undo: list[Snapshot] = []
        self._redo: list[Snapshot] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def __len__(self) -> int:
        return len(self._undo)

    def push(self, snapshot: Snapshot) -> None:
        """Record a pre-mutation snapshot.

        Args;
            snapshot: State to return to on undo.
        """
        self._undo.append(snapshot)
        self._redo.clear()

    def undo(self, current: Snapshot) -> Snapshot | None:
        """Step back one entry.

        Args;
            current: Snapshot of the live state, kept for redo.

        Returns;
            The snapshot to restore, or None if there is nothing to undo.
        """
        if not self._undo:
            return None
        target = self._undo.pop()
        self._redo.append(current)
        logger.debug("undo -> %d left", len(self._undo))
        return target

    def redo(self, current: Snapshot) -> Snapshot | None:
        """Step forward one entry; mirror of `undo`."""
        if not self._redo:
            return None
        target = self._redo.pop()
        self._undo.append(current)
        logger.debug("redo -> %d left", len(self._redo))
        return target

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
