"""Tests for the colour palettes."""

import pytest

from flashdeck.ui.theme import LIGHT_PALETTE, PALETTES, DesignTokens, input_style, use_palette


@pytest.fixture(autouse=True)
def restore_palette():
    yield
    use_palette("dark")


class TestPalettes:

    def test_light_palette_replaces_every_colour_token(self):
        assert use_palette("light") == "light"
        for name, value in LIGHT_PALETTE.items():
            assert getattr(DesignTokens, name) == value

    def test_dark_palette_restores_defaults(self):
        dark_text = PALETTES["dark"]["TEXT_PRIMARY"]
        use_palette("light")
        use_palette("dark")
        assert DesignTokens.TEXT_PRIMARY == dark_text
        assert DesignTokens.BG_CARD == PALETTES["dark"]["BG_CARD"]

    def test_unknown_mode_falls_back_to_dark(self):
        assert use_palette("sepia") == "dark"
        assert DesignTokens.BG_PAGE == PALETTES["dark"]["BG_PAGE"]

    def test_palettes_cover_the_same_tokens(self):
        assert set(PALETTES["dark"]) == set(PALETTES["light"])

    def test_inputs_follow_active_palette(self):
        use_palette("light")
        style = input_style()
        assert style["border_color"] == LIGHT_PALETTE["BORDER"]
        assert style["text_style"].color == LIGHT_PALETTE["TEXT_PRIMARY"]
