"""
Settings View - preferences page
--------------------------------

Edits the values kept by SettingsManager. Storage choices and the theme
are read at start-up, so they apply after a restart; the log level and
delete confirmation apply at once.
"""

from typing import Dict, Iterable, Optional, Tuple

import flet as ft

from flashdeck.config import SettingsManager
from flashdeck.services import StorageBackend
from flashdeck.ui.theme import DesignTokens, input_style, primary_button_style, show_snackbar
from flashdeck.utils.logger import setup_logger

# setting key -> (label, hint)
PATH_SETTINGS: Dict[str, Tuple[str, str]] = {
    "STORAGE_FILE": ("JSON storage file", "Used by the JSON backend"),
    "DB_FILE": ("SQLite database file", "Used by the SQLite backend"),
    "EXPORT_DIR": ("Export folder", "PNG and CSV exports go here"),
}

BACKEND_LABELS: Dict[str, str] = {
    StorageBackend.JSON.value: "JSON file",
    StorageBackend.SQLITE.value: "SQLite database",
    StorageBackend.MEMORY.value: "In memory (not saved)",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _dropdown(label: str, value: str, options: Iterable[Tuple[str, str]], width: int) -> ft.Dropdown:
    return ft.Dropdown(
        value=value,
        label=label,
        options=[ft.dropdown.Option(key=key, text=text) for key, text in options],
        width=width,
        **input_style(),
    )


class SettingsView:
    """Preferences page bound to the shared SettingsManager."""

    def __init__(self, page: ft.Page) -> None:
        self.page = page
        self.settings = SettingsManager()

        self._path_fields: Dict[str, ft.TextField] = {}
        self._backend: Optional[ft.Dropdown] = None
        self._log_level: Optional[ft.Dropdown] = None
        self._dark_mode: Optional[ft.Switch] = None
        self._confirm_delete: Optional[ft.Switch] = None

        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        return self._container

    # ==================== Layout ====================

    def _section(self, title: str, icon: str, note: str, controls: list) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Row(
                        [
                            ft.Icon(icon, size=20, color=DesignTokens.ACCENT_PRIMARY_HOVER),
                            ft.Text(title, size=16, weight=ft.FontWeight.W_600, color=DesignTokens.TEXT_PRIMARY),
                        ],
                        spacing=10,
                    ),
                    ft.Text(note, size=12, color=DesignTokens.TEXT_TERTIARY),
                    *controls,
                ],
                spacing=DesignTokens.SPACING_SM + 4,
            ),
            padding=DesignTokens.SPACING_LG,
            border_radius=DesignTokens.RADIUS_MD,
            bgcolor=DesignTokens.BG_CARD,
        )

    def _build_storage_section(self) -> ft.Container:
        self._backend = _dropdown(
            "Storage backend",
            self.settings.get("STORAGE_BACKEND"),
            BACKEND_LABELS.items(),
            width=300,
        )
        for key, (label, hint) in PATH_SETTINGS.items():
            self._path_fields[key] = ft.TextField(
                value=self.settings.get(key, ""),
                label=label,
                hint_text=hint,
                cursor_color=DesignTokens.ACCENT_PRIMARY_HOVER,
                **input_style(),
            )

        return self._section(
            "Storage",
            ft.Icons.STORAGE_ROUNDED,
            "Where cards are kept. Restart FlashDeck after changing these.",
            [self._backend, *self._path_fields.values()],
        )

    def _build_behaviour_section(self) -> ft.Container:
        self._dark_mode = ft.Switch(label="Dark theme (after restart)", value=self.settings.get("THEME_MODE") == "dark")
        self._confirm_delete = ft.Switch(
            label="Ask before deleting a card",
            value=bool(self.settings.get("CONFIRM_DELETE")),
        )
        self._log_level = _dropdown(
            "Log level",
            str(self.settings.get("LOG_LEVEL", "INFO")).upper(),
            ((level, level) for level in LOG_LEVELS),
            width=200,
        )

        return self._section(
            "Behaviour",
            ft.Icons.TUNE_ROUNDED,
            "Saved immediately. The theme changes on the next start.",
            [self._dark_mode, self._confirm_delete, self._log_level],
        )

    def _build_view(self) -> ft.Container:
        actions = ft.Row(
            controls=[
                ft.TextButton(
                    content=ft.Text("Reset to Defaults", color=DesignTokens.TEXT_TERTIARY),
                    on_click=lambda _: self.reset(),
                ),
                ft.ElevatedButton(
                    content=ft.Row(
                        [ft.Icon(ft.Icons.SAVE_ROUNDED, size=18), ft.Text("Save Settings")],
                        spacing=8,
                        tight=True,
                    ),
                    style=primary_button_style(),
                    on_click=lambda _: self.save(),
                ),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Text("Settings", size=28, weight=ft.FontWeight.W_700, color=DesignTokens.TEXT_PRIMARY),
                    ft.Text(str(self.settings.settings_file), size=12, color=DesignTokens.TEXT_TERTIARY),
                    ft.Container(height=DesignTokens.SPACING_SM),
                    self._build_storage_section(),
                    self._build_behaviour_section(),
                    actions,
                ],
                spacing=DesignTokens.SPACING_MD,
                scroll=ft.ScrollMode.AUTO,
                expand=True,
            ),
            expand=True,
            padding=DesignTokens.SPACING_LG,
        )

    # ==================== Actions ====================

    def save(self) -> None:
        paths = {key: (field.value or "").strip() for key, field in self._path_fields.items()}
        empty = [PATH_SETTINGS[key][0] for key, value in paths.items() if not value]
        if empty:
            show_snackbar(self.page, f"{', '.join(empty)} cannot be empty", error=True)
            return

        self.settings.update(
            STORAGE_BACKEND=self._backend.value or StorageBackend.JSON.value,
            THEME_MODE="dark" if self._dark_mode.value else "light",
            CONFIRM_DELETE=bool(self._confirm_delete.value),
            LOG_LEVEL=self._log_level.value or "INFO",
            **paths,
        )
        setup_logger(self.settings.get("LOG_LEVEL"))
        show_snackbar(self.page, "Settings saved", icon=ft.Icons.CHECK_CIRCLE)

    def reset(self) -> None:
        self.settings.reset()
        self._backend.value = self.settings.get("STORAGE_BACKEND")
        for key, field in self._path_fields.items():
            field.value = self.settings.get(key)
        self._dark_mode.value = self.settings.get("THEME_MODE") == "dark"
        self._confirm_delete.value = bool(self.settings.get("CONFIRM_DELETE"))
        self._log_level.value = self.settings.get("LOG_LEVEL")
        setup_logger(self.settings.get("LOG_LEVEL"))
        show_snackbar(self.page, "Settings reset to defaults", icon=ft.Icons.CHECK_CIRCLE)
