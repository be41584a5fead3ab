"""
Library View - Browse, Filter and Edit Flashcards
-------------------------------------------------

Shows the card grid with search and category filters, switches to the
card form for create/edit, and offers CSV import/export and per-card
image export.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import flet as ft

from flashdeck.config import SettingsManager
from flashdeck.models import FlashcardFormData
from flashdeck.services import (
    CardImageExporter,
    CardLifecycleController,
    ExchangeError,
    ExportError,
    StorageError,
    export_csv,
    import_csv,
)
from flashdeck.ui.card_form import CardFormView
from flashdeck.ui.card_tile import FlashcardTile
from flashdeck.ui.theme import (
    DesignTokens,
    close_dialog,
    input_style,
    open_dialog,
    primary_button_style,
    show_snackbar,
)

ALL_CATEGORIES = ""


class LibraryView:
    """
    Main card browsing view.

    Re-renders from the controller's snapshot every time the controller
    reports a change.
    """

    def __init__(self, page: ft.Page, controller: CardLifecycleController) -> None:
        """
        Initialize the Library view.

        Args:
            page: Flet page instance for updates
            controller: Card lifecycle controller for this session
        """
        self.page = page
        self.controller = controller
        self.settings = SettingsManager()

        # UI References
        self._search_field: Optional[ft.TextField] = None
        self._category_dropdown: Optional[ft.Dropdown] = None
        self._filter_row: Optional[ft.Row] = None
        self._body: Optional[ft.Container] = None
        self._count_text: Optional[ft.Text] = None
        self._form: Optional[CardFormView] = None
        self._degraded_notice_shown: bool = False

        self._container = self._build_view()
        self.controller.on_change(self.render)
        self.render()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    # ==================== Layout ====================

    def _build_view(self) -> ft.Container:
        self._body = ft.Container(expand=True)

        return ft.Container(
            content=ft.Column(
                controls=[
                    self._build_header(),
                    self._build_filters(),
                    self._body,
                ],
                spacing=DesignTokens.SPACING_MD,
                expand=True,
            ),
            expand=True,
            padding=DesignTokens.SPACING_LG,
        )

    def _build_header(self) -> ft.Container:
        self._count_text = ft.Text("", size=14, color=DesignTokens.TEXT_TERTIARY)

        return ft.Container(
            content=ft.Row(
                controls=[
                    ft.Column(
                        controls=[
                            ft.Text(
                                "Flashcards",
                                size=32,
                                weight=ft.FontWeight.W_700,
                                color=DesignTokens.TEXT_PRIMARY,
                            ),
                            self._count_text,
                        ],
                        spacing=6,
                    ),
                    ft.Container(expand=True),
                    ft.TextButton(
                        content=ft.Row(
                            [ft.Icon(ft.Icons.UPLOAD_FILE_ROUNDED, size=18), ft.Text("Import CSV")],
                            spacing=6,
                            tight=True,
                        ),
                        on_click=lambda _: self._show_import_dialog(),
                    ),
                    ft.TextButton(
                        content=ft.Row(
                            [ft.Icon(ft.Icons.TABLE_VIEW_ROUNDED, size=18), ft.Text("Export CSV")],
                            spacing=6,
                            tight=True,
                        ),
                        on_click=lambda _: self._export_csv(),
                    ),
                    ft.ElevatedButton(
                        content=ft.Row(
                            [ft.Icon(ft.Icons.ADD_ROUNDED, size=18), ft.Text("Create New Card")],
                            spacing=6,
                            tight=True,
                        ),
                        style=primary_button_style(),
                        on_click=lambda _: self.controller.request_create(),
                    ),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                vertical_alignment=ft.CrossAxisAlignment.START,
            ),
            padding=ft.Padding.only(bottom=DesignTokens.SPACING_SM),
        )

    def _build_filters(self) -> ft.Row:
        self._search_field = ft.TextField(
            value=self.controller.search_text,
            hint_text="Search cards...",
            prefix_icon=ft.Icons.SEARCH_ROUNDED,
            border_color=DesignTokens.BORDER,
            focused_border_color=DesignTokens.ACCENT_PRIMARY_HOVER,
            text_style=ft.TextStyle(color=DesignTokens.TEXT_PRIMARY),
            cursor_color=DesignTokens.ACCENT_PRIMARY_HOVER,
            dense=True,
            expand=True,
            on_change=lambda e: self.controller.set_search_text(e.control.value),
        )

        self._category_dropdown = ft.Dropdown(
            value=ALL_CATEGORIES,
            options=[],
            label="Category",
            **input_style(),
            dense=True,
            width=240,
            on_select=lambda e: self.controller.set_category(e.control.value or ALL_CATEGORIES),
        )

        self._filter_row = ft.Row(
            controls=[self._search_field, self._category_dropdown],
            spacing=DesignTokens.SPACING_MD,
        )
        return self._filter_row

    def _build_empty_state(self) -> ft.Container:
        """Build the welcome state when there are no cards at all."""
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(ft.Icons.STYLE_ROUNDED, size=64, color=DesignTokens.TEXT_TERTIARY),
                    ft.Text(
                        "Welcome to FlashDeck!",
                        size=24,
                        weight=ft.FontWeight.BOLD,
                        color=DesignTokens.TEXT_SECONDARY,
                    ),
                    ft.Text(
                        "Create your first flashcard to start learning.",
                        size=14,
                        color=DesignTokens.TEXT_TERTIARY,
                    ),
                    ft.Container(height=20),
                    ft.ElevatedButton(
                        content=ft.Text("Create First Card"),
                        style=primary_button_style(),
                        on_click=lambda _: self.controller.request_create(),
                    ),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=10,
            ),
            expand=True,
            alignment=ft.Alignment(0, 0),
        )

    def _build_no_matches(self) -> ft.Container:
        return ft.Container(
            content=ft.Text(
                "No flashcards match your search criteria.",
                size=14,
                color=DesignTokens.TEXT_TERTIARY,
            ),
            padding=DesignTokens.SPACING_XL,
            alignment=ft.Alignment(0, 0),
        )

    def _build_grid(self) -> ft.Column:
        style = self.settings.get_card_style()
        tiles: List[ft.Control] = [
            FlashcardTile(
                card,
                style,
                on_edit=self._on_edit,
                on_delete=self._on_delete,
                on_export=self._on_export,
            ).container
            for card in self.controller.visible_cards
        ]

        return ft.Column(
            controls=[
                ft.Row(
                    controls=tiles,
                    wrap=True,
                    spacing=DesignTokens.SPACING_LG,
                    run_spacing=DesignTokens.SPACING_LG,
                ),
            ],
            scroll=ft.ScrollMode.AUTO,
            expand=True,
        )

    # ==================== Rendering ====================

    def _refresh_categories(self) -> None:
        categories = self.controller.categories
        self._category_dropdown.options = [ft.dropdown.Option(key=ALL_CATEGORIES, text="All Categories")] + [
            ft.dropdown.Option(key=category, text=category) for category in categories
        ]
        self._category_dropdown.value = self.controller.category
        self._category_dropdown.visible = bool(categories)

    def render(self) -> None:
        """Rebuild the body from the controller state."""
        total = len(self.controller.cards)
        self._count_text.value = f"{total} card{'s' if total != 1 else ''}"
        self._refresh_categories()

        if self.controller.form_visible:
            self._form = CardFormView(
                on_submit=self._on_form_submit,
                on_cancel=self.controller.cancel_form,
                initial=self.controller.editing_card,
            )
            self._filter_row.visible = False
            self._body.content = ft.Column(
                controls=[self._form.container],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                scroll=ft.ScrollMode.AUTO,
            )
        else:
            self._form = None
            self._filter_row.visible = total > 0
            if total == 0:
                self._body.content = self._build_empty_state()
            elif not self.controller.visible_cards:
                self._body.content = self._build_no_matches()
            else:
                self._body.content = self._build_grid()

        self.page.update()

        if self.controller.storage_degraded and not self._degraded_notice_shown:
            self._degraded_notice_shown = True
            show_snackbar(
                self.page,
                "Saved cards could not be read; showing an empty collection",
                error=True,
            )

    # ==================== Handlers ====================

    def _on_form_submit(self, data: FlashcardFormData) -> None:
        editing = self.controller.editing_card is not None
        try:
            result = self.controller.submit_form(data)
        except StorageError as e:
            show_snackbar(self.page, f"Could not save card: {e}", error=True)
            return

        if editing and result is None:
            show_snackbar(self.page, "This card no longer exists; changes were not saved", error=True)
        else:
            show_snackbar(self.page, "Card saved", icon=ft.Icons.CHECK_CIRCLE)

    def _on_edit(self, card_id: str) -> None:
        self.controller.request_edit(card_id)

    def _on_delete(self, card_id: str) -> None:
        if not self.settings.get("CONFIRM_DELETE", True):
            self._delete(card_id)
            return

        card = self.controller.find(card_id)
        if card is None:
            return

        def do_delete(e):
            close_dialog(self.page, dialog)
            self._delete(card_id)

        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text("Delete card?", weight=ft.FontWeight.W_600),
            content=ft.Text(
                f"Are you sure you want to delete \"{card.word}\"?",
                size=14,
                color=DesignTokens.TEXT_SECONDARY,
            ),
            actions=[
                ft.TextButton("Cancel", on_click=lambda _: close_dialog(self.page, dialog)),
                ft.ElevatedButton(
                    "Delete",
                    on_click=do_delete,
                    style=ft.ButtonStyle(
                        bgcolor=DesignTokens.ACCENT_DANGER,
                        color=DesignTokens.TEXT_PRIMARY,
                    ),
                ),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        open_dialog(self.page, dialog)

    def _delete(self, card_id: str) -> None:
        try:
            self.controller.request_delete(card_id)
        except StorageError as e:
            show_snackbar(self.page, f"Could not delete card: {e}", error=True)

    def _on_export(self, card_id: str) -> None:
        card = self.controller.find(card_id)
        if card is not None:
            self.page.run_task(self._export_card_async, card)

    async def _export_card_async(self, card) -> None:
        """Render the card to PNG without blocking the UI."""
        exporter = CardImageExporter(
            export_dir=self.settings.get("EXPORT_DIR"),
            style=self.settings.get_card_style(),
        )
        try:
            async with exporter:
                path = await exporter.export(card)
        except ExportError as e:
            show_snackbar(self.page, str(e), error=True)
            return
        show_snackbar(self.page, f"Saved {path.name}", icon=ft.Icons.IMAGE_ROUNDED)

    def _export_csv(self) -> None:
        export_dir = Path(self.settings.get("EXPORT_DIR"))
        target = export_dir / f"flashcards_{datetime.now():%Y%m%d_%H%M%S}.csv"
        try:
            export_csv(self.controller.visible_cards, target)
        except ExchangeError as e:
            show_snackbar(self.page, str(e), error=True)
            return
        show_snackbar(self.page, f"Exported to {target}", icon=ft.Icons.CHECK_CIRCLE)

    def _show_import_dialog(self) -> None:
        path_field = ft.TextField(
            label="CSV file path",
            hint_text="Word|Transcription|Translation|Category|ImageUrl",
            autofocus=True,
            width=420,
        )

        def do_import(e):
            close_dialog(self.page, dialog)
            self._import_csv(path_field.value or "")

        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text("Import cards from CSV", weight=ft.FontWeight.W_600),
            content=path_field,
            actions=[
                ft.TextButton("Cancel", on_click=lambda _: close_dialog(self.page, dialog)),
                ft.ElevatedButton("Import", on_click=do_import, style=primary_button_style()),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        open_dialog(self.page, dialog)

    def _import_csv(self, path: str) -> None:
        path = path.strip()
        if not path:
            return
        try:
            imported = import_csv(self.controller.store, Path(path).expanduser())
        except (ExchangeError, StorageError) as e:
            show_snackbar(self.page, str(e), error=True)
            return
        finally:
            self.controller.refresh()
        show_snackbar(self.page, f"Imported {imported} cards", icon=ft.Icons.CHECK_CIRCLE)
