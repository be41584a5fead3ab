"""FlashDeck - vocabulary flashcard manager"""

__version__ = "1.0.0"
__author__ = "FlashDeck Team"

from .config import Config, SettingsManager
from .models import Flashcard, FlashcardFormData, FlashcardUpdate
from .services import CardLifecycleController, CardStore, create_storage

__all__ = [
    'Config',
    'SettingsManager',
    'Flashcard',
    'FlashcardFormData',
    'FlashcardUpdate',
    'CardLifecycleController',
    'CardStore',
    'create_storage',
]
