"""Colours, spacing and small Flet helpers shared by every FlashDeck view."""

from typing import Dict

import flet as ft


class DesignTokens:
    """
    Palette and spacing. Colour attributes hold the active palette;
    ``use_palette`` swaps them before any view is built.
    """
    BG_PAGE = "#121212"
    BG_SIDEBAR = "#161617"
    BG_CONTENT = "#1A1A1B"
    BG_CARD = "#242426"

    TEXT_PRIMARY = "#FFFFFF"
    TEXT_SECONDARY = "#B3B3B3"
    TEXT_TERTIARY = "#808080"

    BORDER = ft.Colors.WHITE_24
    DIVIDER = ft.Colors.WHITE_10

    ACCENT_PRIMARY = "#6366F1"
    ACCENT_PRIMARY_HOVER = "#818CF8"
    ACCENT_DANGER = "#E57373"

    SPACING_SM = 8
    SPACING_MD = 16
    SPACING_LG = 24
    SPACING_XL = 32

    RADIUS_SM = 8
    RADIUS_MD = 12

    # Flashcard tile in the library grid
    CARD_WIDTH = 300
    CARD_HEIGHT = 220

    FONT_SANS = "Inter, Roboto, Segoe UI, sans-serif"


LIGHT_PALETTE: Dict[str, str] = {
    "BG_PAGE": "#E5E7EB",
    "BG_SIDEBAR": "#F3F4F6",
    "BG_CONTENT": "#F9FAFB",
    "BG_CARD": "#FFFFFF",
    "TEXT_PRIMARY": "#111827",
    "TEXT_SECONDARY": "#4B5563",
    "TEXT_TERTIARY": "#6B7280",
    "BORDER": ft.Colors.BLACK_26,
    "DIVIDER": ft.Colors.BLACK_12,
}

# THEME_MODE value -> colour tokens; the class defaults are the dark palette
PALETTES: Dict[str, Dict[str, str]] = {
    "dark": {name: getattr(DesignTokens, name) for name in LIGHT_PALETTE},
    "light": LIGHT_PALETTE,
}


def use_palette(mode: str) -> str:
    """Load the colour tokens for ``mode`` (unknown modes fall back to dark)."""
    if mode not in PALETTES:
        mode = "dark"
    for name, value in PALETTES[mode].items():
        setattr(DesignTokens, name, value)
    return mode


def input_style() -> dict:
    """Shared TextField/Dropdown colours."""
    return dict(
        border_color=DesignTokens.BORDER,
        focused_border_color=DesignTokens.ACCENT_PRIMARY_HOVER,
        label_style=ft.TextStyle(color=DesignTokens.TEXT_TERTIARY),
        text_style=ft.TextStyle(color=DesignTokens.TEXT_PRIMARY),
    )


def primary_button_style() -> ft.ButtonStyle:
    """Main call-to-action button style."""
    return ft.ButtonStyle(
        color=ft.Colors.WHITE,
        bgcolor={
            ft.ControlState.DEFAULT: DesignTokens.ACCENT_PRIMARY,
            ft.ControlState.HOVERED: DesignTokens.ACCENT_PRIMARY_HOVER,
            ft.ControlState.DISABLED: ft.Colors.with_opacity(0.3, DesignTokens.ACCENT_PRIMARY),
        },
        padding=ft.Padding.symmetric(horizontal=20, vertical=14),
        shape=ft.RoundedRectangleBorder(radius=DesignTokens.RADIUS_SM),
    )


def show_snackbar(page: ft.Page, message: str, error: bool = False, icon: str = None) -> None:
    """Replace any visible snackbar with ``message``."""
    for stale in [ctrl for ctrl in page.overlay if isinstance(ctrl, ft.SnackBar)]:
        page.overlay.remove(stale)

    snackbar = ft.SnackBar(
        content=ft.Row(
            [
                ft.Icon(icon or (ft.Icons.ERROR_OUTLINE if error else ft.Icons.INFO_OUTLINE), color=ft.Colors.WHITE, size=18),
                ft.Text(message, color=ft.Colors.WHITE),
            ],
            spacing=10,
        ),
        bgcolor=ft.Colors.RED_700 if error else ft.Colors.GREEN_700,
        duration=4000 if error else 2500,
        open=True,
    )
    page.overlay.append(snackbar)
    page.update()


def close_dialog(page: ft.Page, dialog: ft.AlertDialog) -> None:
    dialog.open = False
    page.update()
    if dialog in page.overlay:
        page.overlay.remove(dialog)


def open_dialog(page: ft.Page, dialog: ft.AlertDialog) -> None:
    page.overlay.append(dialog)
    dialog.open = True
    page.update()
