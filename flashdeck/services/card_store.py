"""
Card Store - durable CRUD over the flashcard collection.

The whole collection is one JSON array stored under a single key of a
key-value medium. Every mutation is a full read-modify-write, which is
fine for personal vocabulary lists and not meant to scale further.
"""

import json
import sqlite3
import time
import uuid
from typing import Any, Callable, List, Optional

from ..config import Config
from ..models import Flashcard, FlashcardFormData, FlashcardUpdate
from ..utils.logger import get_logger
from .storage import BaseStorage

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


class CardStore:
    """
    Owns the persisted flashcard list.

    Callers only ever receive copies of stored cards.

    Usage:
        store = CardStore(JSONFileStorage("data/flashdeck_storage.json"))
        card = store.create(FlashcardFormData(word="cat", translation="кот"))
        store.update(card.id, FlashcardUpdate(translation="кошка"))
        store.delete(card.id)
    """

    def __init__(
        self,
        storage: BaseStorage,
        key: Optional[str] = None,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ):
        """
        Initialize the card store.

        Args:
            storage: Key-value medium holding the collection
            key: Key of the collection (defaults to Config.STORAGE_KEY)
            clock: Returns the current time in epoch milliseconds
            id_factory: Returns a fresh unique card id
        """
        self.storage = storage
        self.key = key or Config.STORAGE_KEY
        self._clock = clock
        self._id_factory = id_factory
        self.last_load_degraded: bool = False

    # ==================== Persistence round-trip ====================

    def _load_entries(self) -> List[Any]:
        """
        Read the stored array.

        Entries that parse become ``Flashcard`` objects; the rest are kept
        exactly as read so a later write puts them back untouched.
        Unreadable or unparseable data degrades to an empty collection.
        """
        self.last_load_degraded = False

        try:
            raw = self.storage.get_item(self.key)
        except (OSError, ValueError, sqlite3.Error) as e:
            logger.warning("Storage unreadable, treating collection as empty: %s", e)
            self.last_load_degraded = True
            return []

        if not raw:
            return []

        try:
            data: Any = json.loads(raw)
        except ValueError as e:
            logger.warning("Stored collection is not valid JSON, treating as empty: %s", e)
            self.last_load_degraded = True
            return []

        if not isinstance(data, list):
            logger.warning("Stored collection is not a JSON array, treating as empty")
            self.last_load_degraded = True
            return []

        entries: List[Any] = []
        for position, entry in enumerate(data):
            if not isinstance(entry, dict):
                logger.warning("Skipping stored entry %d: not an object", position)
                entries.append(entry)
                continue
            try:
                entries.append(Flashcard.from_dict(entry))
            except ValueError as e:
                logger.warning("Skipping stored entry %d: %s", position, e)
                entries.append(entry)
        return entries

    def _load(self) -> List[Flashcard]:
        return [entry for entry in self._load_entries() if isinstance(entry, Flashcard)]

    def _save(self, entries: List[Any]) -> None:
        payload = json.dumps(
            [entry.to_dict() if isinstance(entry, Flashcard) else entry for entry in entries],
            ensure_ascii=False,
        )
        self.storage.set_item(self.key, payload)

    # ==================== CRUD ====================

    def list_all(self) -> List[Flashcard]:
        """Full collection in stored order. Never raises on bad data."""
        return self._load()

    def get(self, card_id: str) -> Optional[Flashcard]:
        """Card with the given id, or None."""
        for card in self._load():
            if card.id == card_id:
                return card
        return None

    def create(self, data: FlashcardFormData) -> Flashcard:
        """
        Append a new card with a fresh id and creation time.

        Args:
            data: Card fields (validated by the caller)

        Returns:
            The stored card
        """
        entries = self._load_entries()
        existing_ids = {entry.id for entry in entries if isinstance(entry, Flashcard)}

        card_id = self._id_factory()
        while card_id in existing_ids:
            card_id = self._id_factory()

        card = Flashcard.from_form(card_id, self._clock(), data)
        entries.append(card)
        self._save(entries)

        logger.info("Created card %s (%r)", card.id, card.word)
        return card.copy()

    def update(self, card_id: str, changes: FlashcardUpdate) -> Optional[Flashcard]:
        """
        Merge the provided fields over an existing card.

        Args:
            card_id: Id of the card to change
            changes: Fields to replace; unset fields are kept

        Returns:
            The updated card, or None if no card has that id
        """
        entries = self._load_entries()

        for index, entry in enumerate(entries):
            if isinstance(entry, Flashcard) and entry.id == card_id:
                updated = entry.merged(changes)
                entries[index] = updated
                self._save(entries)
                logger.info("Updated card %s: %s", card_id, ", ".join(changes.provided()) or "no fields")
                return updated.copy()

        logger.debug("Update skipped, no card %s", card_id)
        return None

    def delete(self, card_id: str) -> bool:
        """
        Remove the card with the given id.

        Entries that could not be read are never removed.

        Returns:
            True if a card was removed
        """
        entries = self._load_entries()
        remaining = [
            entry for entry in entries
            if not (isinstance(entry, Flashcard) and entry.id == card_id)
        ]

        if len(remaining) == len(entries):
            logger.debug("Delete skipped, no card %s", card_id)
            return False

        self._save(remaining)
        logger.info("Deleted card %s", card_id)
        return True

    def count(self) -> int:
        return len(self._load())
