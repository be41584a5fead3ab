"""Flet views for FlashDeck."""

from .card_form import CardFormView
from .card_tile import FlashcardTile
from .library import LibraryView
from .settings import SettingsView

__all__ = ["CardFormView", "FlashcardTile", "LibraryView", "SettingsView"]
