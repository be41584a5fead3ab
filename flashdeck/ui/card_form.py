"""
Card Form - create or edit a flashcard
--------------------------------------

Collects the card fields, checks that word and translation are present
and hands clean data to the submit callback.
"""

from typing import Callable, Dict, Optional

import flet as ft

from flashdeck.models import EDITABLE_FIELDS, Flashcard, FlashcardFormData, validate_form_data
from flashdeck.ui.theme import DesignTokens, input_style, primary_button_style


class CardFormView:
    """Form panel used for both new and existing cards."""

    # field -> (label, hint)
    FIELDS: Dict[str, tuple] = {
        "word": ("Word", "Enter the word to learn"),
        "transcription": ("Transcription", "e.g., /ˈtrænskrɪpʃən/"),
        "translation": ("Translation", "Enter translation"),
        "category": ("Category (optional)", "e.g., Verbs, Food, Business"),
        "image_url": ("Image URL (optional)", "https://... or a local file path"),
    }

    def __init__(
        self,
        on_submit: Callable[[FlashcardFormData], None],
        on_cancel: Callable[[], None],
        initial: Optional[Flashcard] = None,
    ) -> None:
        """
        Initialize the form.

        Args:
            on_submit: Receives validated, cleaned form data
            on_cancel: Called when the user closes the form
            initial: Card being edited, or None for a new card
        """
        self._on_submit = on_submit
        self._on_cancel = on_cancel
        self.initial = initial
        self.is_edit: bool = initial is not None

        self._fields: Dict[str, ft.TextField] = {}
        self._errors: Dict[str, ft.Text] = {}
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        return self._container

    def _build_field(self, key: str, value: str) -> ft.Column:
        label, hint = self.FIELDS[key]
        field = ft.TextField(
            value=value,
            label=label,
            hint_text=hint,
            cursor_color=DesignTokens.ACCENT_PRIMARY_HOVER,
            **input_style(),
            on_change=lambda e, k=key: self._clear_error(k),
            on_submit=lambda _: self.submit(),
        )
        error = ft.Text("", size=12, color=DesignTokens.ACCENT_DANGER, visible=False)
        self._fields[key] = field
        self._errors[key] = error
        return ft.Column(controls=[field, error], spacing=2)

    def _build_view(self) -> ft.Container:
        initial_data = self.initial.to_form() if self.initial else None
        title = "Edit Flashcard" if self.is_edit else "Create New Flashcard"

        rows = [
            self._build_field(key, getattr(initial_data, key) if initial_data else "")
            for key in EDITABLE_FIELDS
        ]

        submit_button = ft.ElevatedButton(
            content=ft.Row(
                controls=[
                    ft.Icon(ft.Icons.SAVE_ROUNDED if self.is_edit else ft.Icons.ADD_ROUNDED, size=18),
                    ft.Text("Update Flashcard" if self.is_edit else "Create Flashcard", size=14),
                ],
                spacing=8,
                tight=True,
            ),
            style=primary_button_style(),
            on_click=lambda _: self.submit(),
        )

        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Row(
                        controls=[
                            ft.Text(title, size=20, weight=ft.FontWeight.W_600, color=DesignTokens.TEXT_PRIMARY),
                            ft.IconButton(
                                icon=ft.Icons.CLOSE_ROUNDED,
                                icon_color=DesignTokens.TEXT_TERTIARY,
                                on_click=lambda _: self._on_cancel(),
                            ),
                        ],
                        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    ),
                    *rows,
                    ft.Row(
                        controls=[
                            ft.TextButton(
                                content=ft.Text("Cancel", color=DesignTokens.TEXT_TERTIARY),
                                on_click=lambda _: self._on_cancel(),
                            ),
                            submit_button,
                        ],
                        alignment=ft.MainAxisAlignment.END,
                    ),
                ],
                spacing=DesignTokens.SPACING_MD,
            ),
            width=560,
            padding=DesignTokens.SPACING_LG,
            border_radius=DesignTokens.RADIUS_MD,
            bgcolor=DesignTokens.BG_CARD,
        )

    def _clear_error(self, key: str) -> None:
        error = self._errors[key]
        if error.visible:
            error.visible = False
            error.update()

    def collect(self) -> FlashcardFormData:
        """Current field values, trimmed and normalized."""
        values = {key: self._fields[key].value or "" for key in EDITABLE_FIELDS}
        return FlashcardFormData(**values).cleaned()

    def submit(self) -> None:
        """Validate and forward the form, or show field errors."""
        data = self.collect()
        errors = validate_form_data(data)

        if errors:
            for key, message in errors.items():
                self._errors[key].value = message
                self._errors[key].visible = True
            self._container.update()
            return

        self._on_submit(data)
