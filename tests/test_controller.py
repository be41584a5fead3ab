"""
Tests for CardLifecycleController

Tests cover:
- Form state transitions
- Create / edit / delete intents reaching the store
- Filter state and derived views
- Change notifications
"""

import pytest

from flashdeck.models import FlashcardFormData
from flashdeck.services import CardLifecycleController, CardStore, ControllerState, StorageError


class TestInitialState:

    def test_starts_browsing_with_store_snapshot(self, store, cat_form):
        store.create(cat_form)
        controller = CardLifecycleController(store)

        assert controller.state == ControllerState.BROWSING
        assert controller.form_visible is False
        assert controller.editing_card is None
        assert [c.word for c in controller.cards] == ["cat"]

    def test_degraded_store_is_reported(self, memory_storage):
        memory_storage.set_item("flashcards", "{oops")
        controller = CardLifecycleController(CardStore(memory_storage))
        assert controller.cards == []
        assert controller.storage_degraded is True


class TestCreateFlow:

    def test_request_create_opens_empty_form(self, controller):
        controller.request_create()
        assert controller.state == ControllerState.EDITING
        assert controller.editing_card is None

    def test_submit_creates_and_closes_form(self, controller, cat_form):
        controller.request_create()
        card = controller.submit_form(cat_form)

        assert card.word == "cat"
        assert controller.state == ControllerState.BROWSING
        assert [c.id for c in controller.cards] == [card.id]

    def test_cancel_discards(self, controller, store):
        controller.request_create()
        controller.cancel_form()
        assert controller.form_visible is False
        assert store.list_all() == []


class TestEditFlow:

    def test_request_edit_known_card(self, controller, cat_form):
        card = controller.submit_form(cat_form)
        assert controller.request_edit(card.id) is True
        assert controller.state == ControllerState.EDITING
        assert controller.editing_card.id == card.id

    def test_request_edit_unknown_card_is_noop(self, controller):
        assert controller.request_edit("missing") is False
        assert controller.state == ControllerState.BROWSING
        assert controller.editing_card is None

    def test_submit_updates_edited_card(self, controller, store, cat_form):
        card = controller.submit_form(cat_form)
        controller.request_edit(card.id)

        result = controller.submit_form(
            FlashcardFormData(word="cat", translation="кошка", transcription="/kæt/", category="Animals")
        )

        assert result.id == card.id
        assert result.created_at == card.created_at
        assert store.get(card.id).translation == "кошка"
        assert len(store.list_all()) == 1
        assert controller.editing_card is None
        assert controller.form_visible is False

    def test_submit_can_clear_optional_fields(self, controller, store, cat_form):
        card = controller.submit_form(cat_form)
        controller.request_edit(card.id)
        controller.submit_form(FlashcardFormData(word="cat", translation="кот"))
        assert store.get(card.id).category == ""

    def test_vanished_card_still_closes_form(self, controller, store, cat_form):
        card = controller.submit_form(cat_form)
        controller.request_edit(card.id)
        store.delete(card.id)

        result = controller.submit_form(FlashcardFormData(word="x", translation="y"))

        assert result is None
        assert controller.state == ControllerState.BROWSING
        assert controller.editing_card is None
        assert store.list_all() == []

    def test_editing_card_is_a_snapshot(self, controller, store, cat_form):
        card = controller.submit_form(cat_form)
        controller.request_edit(card.id)
        controller.editing_card.word = "mutated"
        assert store.get(card.id).word == "cat"


class TestDelete:

    def test_request_delete(self, controller, cat_form, bread_form):
        cat = controller.submit_form(cat_form)
        bread = controller.submit_form(bread_form)

        assert controller.request_delete(cat.id) is True
        assert [c.id for c in controller.cards] == [bread.id]

    def test_request_delete_missing(self, controller):
        assert controller.request_delete("missing") is False
        assert controller.state == ControllerState.BROWSING

    def test_delete_does_not_change_form_state(self, controller, cat_form):
        card = controller.submit_form(cat_form)
        controller.request_create()
        controller.request_delete(card.id)
        assert controller.form_visible is True


class TestFilters:

    def test_visible_cards_follow_filters(self, controller, cat_form, bread_form):
        controller.submit_form(cat_form)
        controller.submit_form(bread_form)

        assert [c.word for c in controller.visible_cards] == ["bread", "cat"]

        controller.set_category("Animals")
        assert [c.word for c in controller.visible_cards] == ["cat"]

        controller.set_category("")
        controller.set_search_text("ХЛЕБ")
        assert [c.word for c in controller.visible_cards] == ["bread"]

    def test_categories(self, controller, cat_form, bread_form):
        controller.submit_form(bread_form)
        controller.submit_form(cat_form)
        assert controller.categories == ["Animals", "Food"]

    def test_category_resets_when_last_card_leaves(self, controller, cat_form, bread_form):
        cat = controller.submit_form(cat_form)
        controller.submit_form(bread_form)
        controller.set_category("Animals")

        controller.request_delete(cat.id)

        assert controller.category == ""
        assert [c.word for c in controller.visible_cards] == ["bread"]


class TestNotifications:

    def test_listeners_fire_on_every_change(self, controller, cat_form):
        calls = []
        controller.on_change(lambda: calls.append(controller.state))

        controller.request_create()
        controller.submit_form(cat_form)
        controller.set_search_text("c")

        assert calls == [
            ControllerState.EDITING,
            ControllerState.BROWSING,
            ControllerState.BROWSING,
        ]

    def test_failing_listener_does_not_break_others(self, controller):
        calls = []

        def broken():
            raise RuntimeError("boom")

        controller.on_change(broken)
        controller.on_change(lambda: calls.append(True))
        controller.request_create()
        assert calls == [True]

    def test_storage_error_propagates_and_form_stays_open(self, store, cat_form, monkeypatch):
        controller = CardLifecycleController(store)

        def fail(key, value):
            raise StorageError("disk full")

        monkeypatch.setattr(store.storage, "set_item", fail)
        controller.request_create()

        with pytest.raises(StorageError):
            controller.submit_form(cat_form)
        assert controller.form_visible is True
        assert controller.state == ControllerState.EDITING

    def test_failed_edit_keeps_card_being_edited(self, controller, store, cat_form, monkeypatch):
        card = controller.submit_form(cat_form)
        controller.request_edit(card.id)

        def fail(key, value):
            raise StorageError("read-only")

        monkeypatch.setattr(store.storage, "set_item", fail)

        with pytest.raises(StorageError):
            controller.submit_form(FlashcardFormData(word="kitten", translation="котёнок"))
        assert controller.form_visible is True
        assert controller.editing_card.id == card.id
        assert store.get(card.id).word == "cat"
