"""Tests for the card collection view-model."""

from flashdeck.models import Flashcard
from flashdeck.services import collection


def card(card_id, word, translation, created_at, category=""):
    return Flashcard(id=card_id, word=word, translation=translation, created_at=created_at, category=category)


CARDS = [
    card("1", "cat", "кот", 100, "Animals"),
    card("2", "bread", "хлеб", 300, "Food"),
    card("3", "Dog", "собака", 200, "Animals"),
    card("4", "run", "бежать", 50),
]


class TestCategories:

    def test_distinct_categories(self):
        assert collection.distinct_categories(CARDS[:2]) == {"Animals", "Food"}

    def test_empty_category_is_not_listed(self):
        assert "" not in collection.distinct_categories(CARDS)

    def test_sorted_categories(self):
        cards = CARDS + [card("5", "x", "y", 1, "verbs")]
        assert collection.sorted_categories(cards) == ["Animals", "Food", "verbs"]


class TestFilter:

    def test_empty_filters_keep_everything(self):
        assert collection.filter_cards(CARDS, "", "") == CARDS

    def test_category_is_exact(self):
        result = collection.filter_cards(CARDS[:2], "", "Animals")
        assert [c.id for c in result] == ["1"]
        assert collection.filter_cards(CARDS, "", "animals") == []

    def test_search_matches_word_case_insensitively(self):
        assert [c.id for c in collection.filter_cards(CARDS, "dOG")] == ["3"]

    def test_search_matches_translation(self):
        assert [c.id for c in collection.filter_cards(CARDS, "ХЛЕ")] == ["2"]

    def test_search_and_category_combine(self):
        assert [c.id for c in collection.filter_cards(CARDS, "d", "Animals")] == ["3"]
        assert collection.filter_cards(CARDS, "bread", "Animals") == []


class TestSort:

    def test_newest_first(self):
        assert [c.id for c in collection.sort_cards(CARDS)] == ["2", "3", "1", "4"]

    def test_ties_keep_input_order(self):
        cards = [card("a", "x", "y", 5), card("b", "x", "y", 5), card("c", "x", "y", 9)]
        assert [c.id for c in collection.sort_cards(cards)] == ["c", "a", "b"]

    def test_visible_cards(self):
        assert [c.id for c in collection.visible_cards(CARDS, "", "Animals")] == ["3", "1"]

    def test_input_is_not_modified(self):
        cards = list(CARDS)
        collection.visible_cards(cards)
        assert cards == CARDS
