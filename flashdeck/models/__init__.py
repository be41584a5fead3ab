"""Models module."""

from .card import (
    EDITABLE_FIELDS,
    Flashcard,
    FlashcardFormData,
    FlashcardUpdate,
    validate_form_data,
)

__all__ = [
    'EDITABLE_FIELDS',
    'Flashcard',
    'FlashcardFormData',
    'FlashcardUpdate',
    'validate_form_data',
]
