"""Data models for FlashDeck."""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from ..utils.parsing import TextParser

# Attribute name -> JSON key in the persisted array
_JSON_KEYS = {
    "id": "id",
    "word": "word",
    "transcription": "transcription",
    "translation": "translation",
    "category": "category",
    "image_url": "imageUrl",
    "created_at": "createdAt",
}

EDITABLE_FIELDS = ("word", "transcription", "translation", "category", "image_url")


@dataclass
class FlashcardFormData:
    """User-editable card fields, as collected by the card form."""

    word: str
    translation: str
    transcription: str = ""
    category: str = ""
    image_url: str = ""

    def cleaned(self) -> "FlashcardFormData":
        """Copy with every field stripped and NFC-normalized."""
        return FlashcardFormData(
            **{name: TextParser.clean_field(getattr(self, name)) for name in EDITABLE_FIELDS}
        )


@dataclass
class FlashcardUpdate:
    """
    Partial update for an existing card.

    ``None`` means "not provided": the stored value is kept. An empty
    string is a provided value and clears an optional field.
    """

    word: Optional[str] = None
    transcription: Optional[str] = None
    translation: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_form(cls, data: FlashcardFormData) -> "FlashcardUpdate":
        """Full replacement of every editable field."""
        return cls(**{name: getattr(data, name) for name in EDITABLE_FIELDS})

    def provided(self) -> Dict[str, str]:
        """Only the fields that carry a value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class Flashcard:
    """A persisted word/translation record."""

    id: str
    word: str
    translation: str
    created_at: int
    transcription: str = ""
    category: str = ""
    image_url: str = ""

    @classmethod
    def from_form(cls, card_id: str, created_at: int, data: FlashcardFormData) -> "Flashcard":
        return cls(
            id=card_id,
            word=data.word,
            translation=data.translation,
            created_at=created_at,
            transcription=data.transcription,
            category=data.category,
            image_url=data.image_url,
        )

    def merged(self, changes: FlashcardUpdate) -> "Flashcard":
        """New record with the provided fields of ``changes`` applied."""
        return replace(self, **changes.provided())

    def to_form(self) -> FlashcardFormData:
        return FlashcardFormData(**{name: getattr(self, name) for name in EDITABLE_FIELDS})

    def copy(self) -> "Flashcard":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys of the stored JSON array."""
        return {key: getattr(self, attr) for attr, key in _JSON_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flashcard":
        """
        Build a card from a stored JSON object.

        Only ``id`` is required. Missing text fields become empty strings,
        a missing ``createdAt`` becomes 0 and unknown keys are ignored.

        Raises:
            ValueError: the object has no ``id``, or ``createdAt`` is not a
                finite number (numeric strings are accepted).
        """
        if data.get("id") in (None, ""):
            raise ValueError("missing required field 'id'")

        return cls(
            id=str(data["id"]),
            word=str(data.get("word") or ""),
            translation=str(data.get("translation") or ""),
            created_at=_parse_timestamp(data.get("createdAt", 0)),
            transcription=str(data.get("transcription") or ""),
            category=str(data.get("category") or ""),
            image_url=str(data.get("imageUrl") or ""),
        )


def _parse_timestamp(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"invalid createdAt: {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"invalid createdAt: {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"invalid createdAt: {value!r}")
    return int(number)


def validate_form_data(data: FlashcardFormData) -> Dict[str, str]:
    """
    Check the required card fields before submission.

    Returns:
        Field name -> error message; empty when the data is valid
    """
    errors: Dict[str, str] = {}
    if not data.word.strip():
        errors["word"] = "Word is required"
    if not data.translation.strip():
        errors["translation"] = "Translation is required"
    return errors
