"""
Card Tile - a single flippable flashcard
----------------------------------------

Front shows the word, transcription, category and picture; a click flips
to the translation. Edit, delete and export actions sit in the top-right
corner.
"""

from typing import Callable, Dict, Optional

import flet as ft

from flashdeck.models import Flashcard
from flashdeck.ui.theme import DesignTokens

BADGE_OPACITY = 0.2


class FlashcardTile:
    """
    Visual card bound to one Flashcard snapshot.

    Flip state is local to the tile; the card data itself is never
    modified here, actions are forwarded to the callbacks.
    """

    def __init__(
        self,
        card: Flashcard,
        style: Dict[str, str],
        on_edit: Callable[[str], None],
        on_delete: Callable[[str], None],
        on_export: Callable[[str], None],
    ) -> None:
        """
        Initialize the tile.

        Args:
            card: Card to display
            style: CARD_STYLE colours
            on_edit: Called with the card id
            on_delete: Called with the card id (confirmation is the caller's job)
            on_export: Called with the card id
        """
        self.card = card
        self.style = style
        self._on_edit = on_edit
        self._on_delete = on_delete
        self._on_export = on_export
        self.is_flipped: bool = False

        self._switcher: Optional[ft.AnimatedSwitcher] = None
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        return self._container

    def _build_view(self) -> ft.Container:
        self._switcher = ft.AnimatedSwitcher(
            content=self._build_front(),
            transition=ft.AnimatedSwitcherTransition.SCALE,
            duration=300,
            reverse_duration=200,
        )

        return ft.Container(
            content=ft.Stack(
                controls=[
                    self._switcher,
                    ft.Container(
                        content=self._build_actions(),
                        right=8,
                        top=8,
                    ),
                ],
            ),
            width=DesignTokens.CARD_WIDTH,
            height=DesignTokens.CARD_HEIGHT,
            border_radius=DesignTokens.RADIUS_MD,
            on_click=lambda _: self.flip(),
            ink=False,
        )

    def _build_actions(self) -> ft.Row:
        def action(icon: str, tooltip: str, handler: Callable[[str], None]) -> ft.IconButton:
            return ft.IconButton(
                icon=icon,
                icon_size=16,
                icon_color=ft.Colors.WHITE,
                tooltip=tooltip,
                bgcolor=ft.Colors.with_opacity(0.2, ft.Colors.BLACK),
                on_click=lambda _: handler(self.card.id),
            )

        return ft.Row(
            controls=[
                action(ft.Icons.DOWNLOAD_ROUNDED, "Export as image", self._on_export),
                action(ft.Icons.EDIT_ROUNDED, "Edit", self._on_edit),
                action(ft.Icons.DELETE_OUTLINE_ROUNDED, "Delete", self._on_delete),
            ],
            spacing=4,
        )

    def _category_badge(self, bgcolor: str, color: str) -> Optional[ft.Container]:
        if not self.card.category:
            return None
        return ft.Container(
            content=ft.Text(self.card.category, size=11, color=color),
            padding=ft.Padding.symmetric(horizontal=8, vertical=3),
            border_radius=10,
            bgcolor=bgcolor,
            left=10,
            top=12,
        )

    def _build_front(self) -> ft.Container:
        body = [
            ft.Text(
                self.card.word,
                size=24,
                weight=ft.FontWeight.BOLD,
                color=self.style["front_text"],
                text_align=ft.TextAlign.CENTER,
            ),
        ]
        if self.card.transcription:
            body.append(ft.Text(self.card.transcription, size=15, color=self.style["front_subtext"]))
        if self.card.image_url:
            body.append(
                ft.Image(
                    src=self.card.image_url,
                    height=70,
                    fit=ft.BoxFit.CONTAIN,
                    border_radius=6,
                )
            )

        layers = [
            ft.Container(
                content=ft.Column(
                    controls=body,
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    alignment=ft.MainAxisAlignment.CENTER,
                    spacing=6,
                ),
                alignment=ft.Alignment(0, 0),
                expand=True,
            ),
            ft.Container(
                content=ft.Text("Click to flip", size=11, color=ft.Colors.with_opacity(0.7, ft.Colors.WHITE)),
                bottom=10,
                left=0,
                right=0,
                alignment=ft.Alignment(0, 0),
            ),
        ]
        badge = self._category_badge(
            ft.Colors.with_opacity(BADGE_OPACITY, self.style["badge_bg"]), self.style["front_text"]
        )
        if badge:
            layers.append(badge)

        return ft.Container(
            key="front",
            content=ft.Stack(controls=layers, expand=True),
            width=DesignTokens.CARD_WIDTH,
            height=DesignTokens.CARD_HEIGHT,
            padding=DesignTokens.SPACING_MD,
            border_radius=DesignTokens.RADIUS_MD,
            gradient=ft.LinearGradient(
                begin=ft.Alignment(-1, -1),
                end=ft.Alignment(1, 1),
                colors=[self.style["front_start"], self.style["front_end"]],
            ),
        )

    def _build_back(self) -> ft.Container:
        layers = [
            ft.Container(
                content=ft.Column(
                    controls=[
                        ft.Text("Translation", size=14, color=self.style["back_label"]),
                        ft.Text(
                            self.card.translation,
                            size=22,
                            weight=ft.FontWeight.W_500,
                            color=self.style["back_text"],
                            text_align=ft.TextAlign.CENTER,
                        ),
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    alignment=ft.MainAxisAlignment.CENTER,
                    spacing=6,
                ),
                alignment=ft.Alignment(0, 0),
                expand=True,
            ),
            ft.Container(
                content=ft.Text("Click to flip back", size=11, color=self.style["back_label"]),
                bottom=10,
                left=0,
                right=0,
                alignment=ft.Alignment(0, 0),
            ),
        ]
        badge = self._category_badge(ft.Colors.GREY_200, ft.Colors.GREY_700)
        if badge:
            layers.append(badge)

        return ft.Container(
            key="back",
            content=ft.Stack(controls=layers, expand=True),
            width=DesignTokens.CARD_WIDTH,
            height=DesignTokens.CARD_HEIGHT,
            padding=DesignTokens.SPACING_MD,
            border_radius=DesignTokens.RADIUS_MD,
            bgcolor=self.style["back_bg"],
        )

    def flip(self) -> None:
        """Toggle between front and back."""
        self.is_flipped = not self.is_flipped
        self._switcher.content = self._build_back() if self.is_flipped else self._build_front()
        self._switcher.update()
