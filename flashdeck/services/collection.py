"""Derived views over a card snapshot: categories, search filter, ordering."""

from typing import Iterable, List, Set

from ..models import Flashcard
from ..utils.parsing import TextParser


def distinct_categories(cards: Iterable[Flashcard]) -> Set[str]:
    """Every non-empty category present in ``cards``."""
    return {card.category for card in cards if card.category}


def sorted_categories(cards: Iterable[Flashcard]) -> List[str]:
    """Distinct categories in alphabetical order, for dropdowns."""
    return sorted(distinct_categories(cards), key=str.casefold)


def matches(card: Flashcard, search_text: str = "", category: str = "") -> bool:
    """
    Whether a card passes the search and category filters.

    The search text matches ``word`` or ``translation`` as a
    case-insensitive substring. The category must match exactly.
    """
    if search_text and not (
        TextParser.contains_casefold(card.word, search_text)
        or TextParser.contains_casefold(card.translation, search_text)
    ):
        return False
    if category and card.category != category:
        return False
    return True


def filter_cards(cards: Iterable[Flashcard], search_text: str = "", category: str = "") -> List[Flashcard]:
    return [card for card in cards if matches(card, search_text, category)]


def sort_cards(cards: Iterable[Flashcard]) -> List[Flashcard]:
    """Most recently created first; ties keep their input order."""
    return sorted(cards, key=lambda card: card.created_at, reverse=True)


def visible_cards(cards: Iterable[Flashcard], search_text: str = "", category: str = "") -> List[Flashcard]:
    """The cards to render: ``sort_cards(filter_cards(...))``."""
    return sort_cards(filter_cards(cards, search_text, category))
