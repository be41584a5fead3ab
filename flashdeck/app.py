"""
FlashDeck application shell
---------------------------

Builds the storage stack from settings, then hosts the library and settings
pages behind a sidebar.
"""

import traceback
from pathlib import Path
from typing import List, NamedTuple

import flet as ft

from flashdeck import __version__
from flashdeck.config import Config, SettingsManager
from flashdeck.services import CardLifecycleController, CardStore, StorageBackend, create_storage
from flashdeck.ui.library import LibraryView
from flashdeck.ui.settings import SettingsView
from flashdeck.ui.theme import DesignTokens, use_palette
from flashdeck.utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class Destination(NamedTuple):
    """One sidebar destination."""
    label: str
    icon: str
    selected_icon: str
    container: ft.Container


def build_controller(settings: SettingsManager) -> CardLifecycleController:
    """
    Create the session's card store from the configured backend.

    Raises:
        ValueError: STORAGE_BACKEND names no known backend
    """
    backend = StorageBackend(settings.get("STORAGE_BACKEND", Config.STORAGE_BACKEND))
    path_key = "DB_FILE" if backend == StorageBackend.SQLITE else "STORAGE_FILE"
    path = settings.get(path_key)

    storage = create_storage(backend, Path(path) if path else None)
    logger.info("Cards stored with the %s backend (%s)", backend.value, path or "default path")
    return CardLifecycleController(CardStore(storage))


class FlashDeckApp:
    """Top-level window: sidebar on the left, current page on the right."""

    def __init__(self, page: ft.Page) -> None:
        self.page = page
        self.settings = SettingsManager()
        self._configure_window()

        self.controller = build_controller(self.settings)
        self.library = LibraryView(page, self.controller)
        self.settings_view = SettingsView(page)
        self.pages: List[Destination] = [
            Destination("Library", ft.Icons.STYLE_OUTLINED, ft.Icons.STYLE_ROUNDED, self.library.container),
            Destination("Settings", ft.Icons.SETTINGS_OUTLINED, ft.Icons.SETTINGS_ROUNDED, self.settings_view.container),
        ]

        self.content_area = ft.Container(
            content=self.pages[0].container,
            expand=True,
            bgcolor=DesignTokens.BG_CONTENT,
            border_radius=ft.BorderRadius.only(top_left=16, bottom_left=16),
        )
        page.add(
            ft.Row(
                [self._build_sidebar(), ft.VerticalDivider(width=1, color=DesignTokens.DIVIDER), self.content_area],
                spacing=0,
                expand=True,
            )
        )

    def _configure_window(self) -> None:
        dark = use_palette(self.settings.get("THEME_MODE", "dark")) == "dark"
        self.page.title = Config.APP_NAME
        self.page.theme_mode = ft.ThemeMode.DARK if dark else ft.ThemeMode.LIGHT
        self.page.theme = ft.Theme(color_scheme_seed=DesignTokens.ACCENT_PRIMARY, font_family=DesignTokens.FONT_SANS)
        self.page.bgcolor = DesignTokens.BG_PAGE
        self.page.padding = 0
        self.page.spacing = 0
        self.page.window.width = 1280
        self.page.window.height = 850
        self.page.window.min_width = 900
        self.page.window.min_height = 600

    def _build_sidebar(self) -> ft.Container:
        rail = ft.NavigationRail(
            selected_index=0,
            extended=True,
            min_extended_width=200,
            label_type=ft.NavigationRailLabelType.ALL,
            group_alignment=-0.9,
            bgcolor="transparent",
            destinations=[
                ft.NavigationRailDestination(
                    label=entry.label,
                    icon=entry.icon,
                    selected_icon=entry.selected_icon,
                    padding=ft.Padding.symmetric(vertical=8),
                )
                for entry in self.pages
            ],
            on_change=lambda e: self.show(e.control.selected_index),
        )

        brand = ft.Row(
            [
                ft.Icon(ft.Icons.STYLE_ROUNDED, color=DesignTokens.ACCENT_PRIMARY_HOVER, size=28),
                ft.Text(Config.APP_NAME, size=20, weight=ft.FontWeight.BOLD, color=DesignTokens.TEXT_PRIMARY),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=10,
        )

        return ft.Container(
            content=ft.Column(
                [
                    ft.Container(content=brand, padding=ft.Padding.only(top=20, bottom=10)),
                    ft.Divider(height=1, color=DesignTokens.DIVIDER),
                    ft.Container(content=rail, expand=True),
                    ft.Container(
                        content=ft.Text(f"v{__version__}", size=11, color=DesignTokens.TEXT_TERTIARY),
                        alignment=ft.Alignment(0, 0),
                        padding=ft.Padding.only(bottom=20),
                    ),
                ],
                spacing=0,
            ),
            width=220,
            bgcolor=DesignTokens.BG_SIDEBAR,
        )

    def show(self, index: int) -> None:
        """Switch the content area to the page at ``index``."""
        target = self.pages[index].container
        if self.content_area.content is target:
            return
        self.content_area.content = target
        self.page.update()


def _render_startup_error(page: ft.Page, details: str) -> None:
    page.add(
        ft.Container(
            content=ft.Column(
                [
                    ft.Text("FlashDeck could not start", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.RED_400),
                    ft.Text("Check the settings file and the log output.", size=12, color=DesignTokens.TEXT_SECONDARY),
                    ft.Container(
                        content=ft.Text(details, size=11, selectable=True, color=DesignTokens.TEXT_SECONDARY),
                        padding=10,
                        bgcolor=ft.Colors.with_opacity(0.08, DesignTokens.TEXT_PRIMARY),
                        border_radius=8,
                    ),
                ],
                spacing=10,
            ),
            padding=20,
        )
    )
    page.update()


def main(page: ft.Page) -> None:
    """Flet target: configure logging, then build the window."""
    setup_logger(SettingsManager().get("LOG_LEVEL"))
    try:
        FlashDeckApp(page)
    except Exception:
        logger.exception("FlashDeck failed to start")
        _render_startup_error(page, traceback.format_exc())


def run() -> None:
    """Console-script entry point."""
    ft.run(main)


if __name__ == "__main__":
    run()
