"""
Card Lifecycle Controller - turns user intents into card store calls.

Owns the transient UI state: whether the card form is open, which card
(if any) is being edited, and the current search/category filter.
"""

from enum import Enum
from typing import Callable, List, Optional

from ..models import Flashcard, FlashcardFormData, FlashcardUpdate
from ..utils.logger import get_logger
from . import collection
from .card_store import CardStore

logger = get_logger(__name__)


class ControllerState(Enum):
    """Form visibility."""
    BROWSING = "browsing"
    EDITING = "editing"


class CardLifecycleController:
    """
    Mediates between the UI and the card store.

    Every store call is followed by a refresh of the displayed snapshot,
    after which registered listeners are notified.

    Usage:
        controller = CardLifecycleController(CardStore(storage))
        controller.on_change(view.render)
        controller.request_create()
        controller.submit_form(FlashcardFormData(word="cat", translation="кот"))
    """

    def __init__(self, store: CardStore):
        """
        Initialize the controller in the browsing state.

        Args:
            store: Card store for this application session
        """
        self.store = store
        self.state: ControllerState = ControllerState.BROWSING
        self.editing_card: Optional[Flashcard] = None
        self.search_text: str = ""
        self.category: str = ""

        self._cards: List[Flashcard] = store.list_all()
        self._change_callbacks: List[Callable[[], None]] = []

    # ==================== Observers ====================

    def on_change(self, callback: Callable[[], None]) -> None:
        """
        Register a callback for state or snapshot changes.

        Args:
            callback: Function to call after every change
        """
        self._change_callbacks.append(callback)

    def _notify_change(self) -> None:
        """Notify all registered callbacks of a change."""
        for callback in self._change_callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Change listener %r failed", callback)

    def refresh(self) -> None:
        """Reload the snapshot from the store."""
        self._cards = self.store.list_all()
        if self.category and self.category not in collection.distinct_categories(self._cards):
            self.category = ""
        self._notify_change()

    # ==================== Snapshot views ====================

    @property
    def form_visible(self) -> bool:
        return self.state == ControllerState.EDITING

    @property
    def cards(self) -> List[Flashcard]:
        """Copy of the full snapshot in stored order."""
        return [card.copy() for card in self._cards]

    @property
    def visible_cards(self) -> List[Flashcard]:
        """Snapshot after search/category filtering, newest first."""
        return collection.visible_cards(self.cards, self.search_text, self.category)

    @property
    def categories(self) -> List[str]:
        return collection.sorted_categories(self._cards)

    @property
    def storage_degraded(self) -> bool:
        """Whether the last snapshot came from an unreadable medium."""
        return self.store.last_load_degraded

    def find(self, card_id: str) -> Optional[Flashcard]:
        for card in self._cards:
            if card.id == card_id:
                return card.copy()
        return None

    # ==================== Filters ====================

    def set_search_text(self, text: str) -> None:
        self.search_text = text or ""
        self._notify_change()

    def set_category(self, category: str) -> None:
        self.category = category or ""
        self._notify_change()

    # ==================== Intents ====================

    def request_create(self) -> None:
        """Open an empty form for a new card."""
        self.editing_card = None
        self.state = ControllerState.EDITING
        self._notify_change()

    def request_edit(self, card_id: str) -> bool:
        """
        Open the form for an existing card.

        Returns:
            False (and nothing changes) if the id is not in the snapshot
        """
        card = self.find(card_id)
        if card is None:
            logger.debug("Edit ignored, no card %s in snapshot", card_id)
            return False

        self.editing_card = card
        self.state = ControllerState.EDITING
        self._notify_change()
        return True

    def submit_form(self, data: FlashcardFormData) -> Optional[Flashcard]:
        """
        Store the submitted form and return to browsing.

        Updates the card being edited, or creates a new one. The form
        closes even if the edited card no longer exists. A failed write
        leaves the form open with its input so the user can retry.

        Args:
            data: Validated form fields

        Returns:
            The stored card, or None if the edited card had vanished

        Raises:
            StorageError: the medium rejected the write
        """
        editing = self.editing_card
        if editing is not None:
            result = self.store.update(editing.id, FlashcardUpdate.from_form(data))
            if result is None:
                logger.warning("Card %s disappeared while being edited; changes dropped", editing.id)
        else:
            result = self.store.create(data)

        self.editing_card = None
        self.state = ControllerState.BROWSING
        self.refresh()
        return result

    def cancel_form(self) -> None:
        """Close the form and discard in-progress input."""
        self.editing_card = None
        self.state = ControllerState.BROWSING
        self._notify_change()

    def request_delete(self, card_id: str) -> bool:
        """
        Delete a card (confirmation happens in the UI).

        Returns:
            Whether a card was removed
        """
        try:
            return self.store.delete(card_id)
        finally:
            self.refresh()
