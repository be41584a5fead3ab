"""
Collection exchange - CSV export and import of flashcards.

Files are pipe-separated UTF-8 with a BOM, so decks open cleanly in a
spreadsheet, can be edited there and loaded back.
"""

from pathlib import Path
from typing import Iterable, List, Union

import pandas as pd

from ..models import Flashcard, FlashcardFormData
from ..utils.logger import get_logger
from ..utils.parsing import TextParser
from .card_store import CardStore

logger = get_logger(__name__)

CSV_SEPARATOR = "|"
CSV_ENCODING = "utf-8-sig"

# CSV column -> card attribute
COLUMNS = {
    "Word": "word",
    "Transcription": "transcription",
    "Translation": "translation",
    "Category": "category",
    "ImageUrl": "image_url",
    "CreatedAt": "created_at",
    "Id": "id",
}

REQUIRED_COLUMNS = ("Word", "Translation")


class ExchangeError(Exception):
    """A CSV file could not be read or written."""


def cards_to_dataframe(cards: Iterable[Flashcard]) -> pd.DataFrame:
    """One row per card, columns in export order."""
    rows = [{column: getattr(card, attr) for column, attr in COLUMNS.items()} for card in cards]
    return pd.DataFrame(rows, columns=list(COLUMNS))


def export_csv(cards: Iterable[Flashcard], csv_path: Union[str, Path]) -> Path:
    """
    Write cards to a pipe-separated CSV file.

    Args:
        cards: Cards to export, written in the given order
        csv_path: Target file

    Returns:
        Path of the written file

    Raises:
        ExchangeError: the file could not be written
    """
    csv_path = Path(csv_path)
    df = cards_to_dataframe(cards)

    try:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(csv_path, sep=CSV_SEPARATOR, index=False, encoding=CSV_ENCODING)
    except OSError as e:
        logger.error("Error saving CSV %s: %s", csv_path, e)
        raise ExchangeError(f"Could not write {csv_path}: {e}") from e

    logger.info("Exported %d cards to %s", len(df), csv_path)
    return csv_path


def read_csv(csv_path: Union[str, Path]) -> List[FlashcardFormData]:
    """
    Parse a card CSV into form data.

    Only Word and Translation columns are required. Rows where either is
    blank are skipped.

    Raises:
        ExchangeError: unreadable file or missing required columns
    """
    csv_path = Path(csv_path)

    try:
        df = pd.read_csv(
            csv_path,
            sep=CSV_SEPARATOR,
            encoding=CSV_ENCODING,
            dtype=str,
            keep_default_na=False,
        )
    except (OSError, ValueError, pd.errors.ParserError) as e:
        logger.error("Error loading CSV %s: %s", csv_path, e)
        raise ExchangeError(f"Could not read {csv_path}: {e}") from e

    df.columns = df.columns.str.strip()
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ExchangeError(f"{csv_path} is missing column(s): {', '.join(missing)}")

    forms: List[FlashcardFormData] = []
    for position, row in df.iterrows():
        data = FlashcardFormData(
            word=TextParser.clean_field(row.get("Word", "")),
            translation=TextParser.clean_field(row.get("Translation", "")),
            transcription=TextParser.clean_field(row.get("Transcription", "")),
            category=TextParser.clean_field(row.get("Category", "")),
            image_url=TextParser.clean_field(row.get("ImageUrl", "")),
        )
        if not data.word or not data.translation:
            logger.warning("Skipping CSV row %d: word and translation are required", position + 2)
            continue
        forms.append(data)
    return forms


def import_csv(store: CardStore, csv_path: Union[str, Path]) -> int:
    """
    Create one card per valid CSV row.

    Imported cards get new ids and creation times.

    Returns:
        Number of cards created
    """
    imported = 0
    for data in read_csv(csv_path):
        store.create(data)
        imported += 1

    logger.info("Imported %d cards from %s", imported, csv_path)
    return imported
