"""Text parsing utilities for consistent text processing across the application."""

import re
import unicodedata


class TextParser:
    """
    Centralized text parsing utilities.

    Single source of truth for normalising card fields and deriving
    file names from card words.
    """

    # Whitespace normalization pattern
    WHITESPACE_PATTERN = re.compile(r'\s+')

    # Anything that is not safe inside a file name on Windows, macOS or Linux
    UNSAFE_FILENAME_PATTERN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

    MAX_FILENAME_LENGTH = 80

    @classmethod
    def normalize_unicode(cls, text: str) -> str:
        """
        Normalize text to NFC form for consistent Unicode handling.

        Prevents issues with characters like é being represented as
        either a single codepoint (NFC) or base + combining accent (NFD).

        Args:
            text: Input text

        Returns:
            NFC-normalized text
        """
        if not text:
            return ""
        return unicodedata.normalize('NFC', str(text))

    @classmethod
    def clean_field(cls, text: str) -> str:
        """Strip surrounding whitespace and NFC-normalize a form field."""
        return cls.normalize_unicode(text).strip()

    @classmethod
    def contains_casefold(cls, haystack: str, needle: str) -> bool:
        """Case-insensitive substring test."""
        return needle.casefold() in (haystack or "").casefold()

    @classmethod
    def safe_filename(cls, text: str, fallback: str = "card") -> str:
        """
        Derive a filesystem-safe file stem from free text.

        Args:
            text: Source text, usually a card's word
            fallback: Stem to use when nothing safe remains

        Returns:
            File stem without extension
        """
        text = cls.normalize_unicode(text)
        text = cls.UNSAFE_FILENAME_PATTERN.sub('', text)
        text = cls.WHITESPACE_PATTERN.sub('_', text.strip())
        text = text.strip('._')[:cls.MAX_FILENAME_LENGTH]
        return text or fallback
