"""Durable chat history stored as one JSON blob in a key-value slot.

The slot is any ``MutableMapping``; the UI passes NiceGUI's
``app.storage.user``, tests pass a plain dict.
"""

import json
import logging
import os
from collections.abc import MutableMapping, Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from src.models import Session

logger = logging.getLogger(__name__)

HISTORY_STORAGE_KEY = os.getenv("HISTORY_STORAGE_KEY", "pdf-qa-chat-history")

_sessions_adapter = TypeAdapter(list[Session])


class HistoryStore:
    """Saves and loads the session list.

    Saving never raises and loading never fails: the in-memory history
    stays authoritative when the slot is unavailable or corrupt.
    """

    def __init__(
        self,
        slot: MutableMapping[str, Any],
        key: str = HISTORY_STORAGE_KEY,
    ) -> None:
        self._slot = slot
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, sessions: Sequence[Session]) -> None:
        """Serialize the full list into the slot."""
        try:
            self._slot[self._key] = _sessions_adapter.dump_json(list(sessions)).decode()
        except Exception:
            logger.exception(f"Failed to save chat history ({len(sessions)} sessions)")

    def load(self) -> list[Session]:
        """Read the slot back into validated Session records.

        Returns:
            Saved sessions in stored order; an empty list when the slot is
            missing, unreadable, or not a JSON array. Entries that fail
            validation are dropped.
        """
        try:
            raw = self._slot.get(self._key)
        except Exception:
            logger.exception("Failed to read chat history")
            return []
        if raw is None:
            return []

        try:
            entries = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
        except ValueError as e:
            logger.warning(f"Discarding corrupt chat history: {e}")
            return []

        if not isinstance(entries, list):
            logger.warning(f"Discarding chat history of type {type(entries).__name__}")
            return []

        sessions: list[Session] = []
        for index, entry in enumerate(entries):
            try:
                sessions.append(Session.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed session at index {index}: {e}")
        return sessions
