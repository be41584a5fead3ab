"""
FlashDeck: Flashcard GUI
------------------------

Run with ``python main_ui.py`` or ``flet run main_ui.py``.
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path for absolute imports
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import flet as ft

from flashdeck.app import main


if __name__ == "__main__":
    ft.run(main)
