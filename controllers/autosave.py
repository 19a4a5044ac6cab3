"""Debounced draft autosave."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, Protocol

from disk.drafts import Draft_Store
from disk.storage import Parse_Error, parse_document
from models.document import Document

logger = logging.getLogger(__name__)

DRAFT_KEY: Final = "constellationDraft"
DEFAULT_DELAY_MS: Final = 400


class Scheduler(Protocol):
    """Timer host; `tk.Misc` satisfies this."""

    def after(self, ms: int, func: Callable[[], None]) -> Any: ...
    def after_cancel(self, id: Any) -> None: ...


class Autosaver:
    """Trailing-edge debounce: each change restarts the timer, only the last one writes."""

    def __init__(
        self,
        scheduler: Scheduler,
        store: Draft_Store,
        serialize: Callable[[], str],
        *,
        delay_ms: int = DEFAULT_DELAY_MS,
        key: str = DRAFT_KEY,
        enabled: bool = True,
    ) -> None:
        self.scheduler = scheduler
        self.store = store
        self.serialize = serialize
        self.delay_ms = delay_ms
        self.key = key
        self.enabled = enabled
        self.available = True
        self._token: Any = None

    @property
    def pending(self) -> bool:
        return self._token is not None

    def on_change(self, dirty: bool) -> None:
        """Editor listener; only document changes reschedule."""
        if dirty:
            self.schedule()

    def schedule(self) -> None:
        if not self.enabled:
            return
        self.cancel()
        self._token = self.scheduler.after(self.delay_ms, self._fire)

    def cancel(self) -> None:
        if self._token is None:
            return
        token, self._token = self._token, None
        self.scheduler.after_cancel(token)

    def close(self) -> None:
        """Teardown: drop any pending write."""
        self.cancel()

    def _fire(self) -> None:
        self._token = None
        self.flush()

    def flush(self) -> bool:
        """Write the draft now. Failures disable autosave for this cycle only."""
        try:
            self.store.set(self.key, self.serialize())
        except (OSError, ValueError) as xcp:
            if self.available:
                logger.warning("autosave unavailable: %s", xcp)
            self.available = False
            return False
        self.available = True
        logger.debug("draft written (%s)", self.key)
        return True

    def restore(self) -> Document | None:
        """Read back the last draft, or None if missing or unreadable."""
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError) as xcp:
            logger.warning("could not read draft: %s", xcp)
            return None
        if raw is None:
            return None
        try:
            return parse_document(raw)
        except Parse_Error as xcp:
            logger.warning("ignoring corrupt draft: %s", xcp)
            return None

    def discard(self) -> None:
        try:
            self.store.remove(self.key)
        except (OSError, ValueError) as xcp:
            logger.warning("could not remove draft: %s", xcp)
