"""
Card Export - render a flashcard to a PNG file.

The image shows the front (word, transcription, category badge and the
card picture when there is one) above the back (translation). Colours
come from the CARD_STYLE setting so the file looks like the on-screen card.
"""

import asyncio
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from ..config import Config, SettingsManager
from ..fetchers import ImageFetcher, is_remote_url
from ..models import Flashcard
from ..utils.logger import get_logger
from ..utils.parsing import TextParser

logger = get_logger(__name__)

# Tried in order; Pillow's bundled font is the last resort
FONT_CANDIDATES = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")

RGBA = Tuple[int, int, int, int]

BADGE_OPACITY = 0.2


class ExportError(Exception):
    """The exported image could not be written."""


def _load_font(size: int) -> ImageFont.ImageFont:
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _color(value: str) -> RGBA:
    return ImageColor.getcolor(value, "RGBA")


class CardImageExporter:
    """
    Exports single cards as PNG files named after the card's word.

    Remote pictures are downloaded once into the cache directory and
    reused by later exports of the same card.
    """

    PADDING = 28

    def __init__(
        self,
        export_dir: Optional[Union[str, Path]] = None,
        cache_dir: Optional[Union[str, Path]] = None,
        style: Optional[Dict[str, str]] = None,
        fetcher: Optional[ImageFetcher] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ):
        """
        Initialize the exporter.

        Args:
            export_dir: Where PNG files go (defaults to Config.EXPORT_DIR)
            cache_dir: Where downloaded pictures are kept (defaults to Config.CACHE_DIR)
            style: Card colours (defaults to the CARD_STYLE setting)
            fetcher: Image downloader (created lazily when needed)
            width: Card width in pixels
            height: Height of each card side in pixels
        """
        self.export_dir = Path(export_dir or Config.EXPORT_DIR)
        self.cache_dir = Path(cache_dir or Config.CACHE_DIR)
        self.style = style or SettingsManager().get_card_style()
        self.width = width or Config.EXPORT_CARD_WIDTH
        self.height = height or Config.EXPORT_CARD_HEIGHT
        self._fetcher = fetcher

    @property
    def fetcher(self) -> ImageFetcher:
        """Lazy-load image fetcher."""
        if self._fetcher is None:
            self._fetcher = ImageFetcher()
        return self._fetcher

    async def close(self) -> None:
        if self._fetcher:
            await self._fetcher.close()
            self._fetcher = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ==================== Paths ====================

    def get_export_path(self, card: Flashcard) -> Path:
        """``<export dir>/<safe word>.png``, falling back to the card id."""
        stem = TextParser.safe_filename(card.word, fallback=TextParser.safe_filename(card.id))
        return self.export_dir / f"{stem}.png"

    def get_picture_cache_path(self, card: Flashcard) -> Path:
        return self.cache_dir / f"_img_{TextParser.safe_filename(card.id)}"

    # ==================== Picture ====================

    async def resolve_picture(self, card: Flashcard) -> Optional[Path]:
        """
        Local file holding the card's picture, downloading it if needed.

        Returns:
            Path to the picture, or None when the card has none or it
            cannot be obtained
        """
        source = card.image_url.strip()
        if not source:
            return None

        if is_remote_url(source):
            cached = self.get_picture_cache_path(card)
            if cached.exists() and cached.stat().st_size > 0:
                return cached
            if await self.fetcher.fetch(source, str(cached)):
                return cached
            logger.warning("Could not download picture for card %s, exporting without it", card.id)
            return None

        local = Path(source).expanduser()
        if local.is_file():
            return local
        logger.warning("Picture %s for card %s not found, exporting without it", source, card.id)
        return None

    def _open_picture(self, picture: Optional[Path]) -> Optional[Image.Image]:
        if picture is None:
            return None
        try:
            with Image.open(picture) as img:
                return img.convert("RGBA")
        except (OSError, UnidentifiedImageError) as e:
            logger.warning("Unreadable picture %s: %s", picture, e)
            return None

    # ==================== Rendering ====================

    def _fit_font(self, draw: ImageDraw.ImageDraw, text: str, size: int, min_size: int = 14) -> ImageFont.ImageFont:
        """Largest font up to ``size`` that fits the card width."""
        max_width = self.width - 2 * self.PADDING
        while True:
            font = _load_font(size)
            left, _, right, _ = draw.textbbox((0, 0), text, font=font)
            if right - left <= max_width or size <= min_size:
                return font
            size -= 2

    def _draw_centered(self, draw: ImageDraw.ImageDraw, text: str, y: int, font, fill: RGBA, top: int = 0) -> None:
        left, _, right, _ = draw.textbbox((0, 0), text, font=font)
        x = (self.width - (right - left)) // 2 - left
        draw.text((x, top + y), text, font=font, fill=fill)

    def _gradient(self) -> Image.Image:
        start = _color(self.style["front_start"])
        end = _color(self.style["front_end"])
        panel = Image.new("RGBA", (self.width, self.height))
        draw = ImageDraw.Draw(panel)
        for y in range(self.height):
            t = y / max(self.height - 1, 1)
            row = tuple(int(start[i] + (end[i] - start[i]) * t) for i in range(4))
            draw.line([(0, y), (self.width, y)], fill=row)
        return panel

    def _draw_badge(self, canvas: Image.Image, text: str, top: int) -> None:
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        font = _load_font(16)
        left, upper, right, lower = draw.textbbox((0, 0), text, font=font)
        x0, y0 = 16, top + 14
        box = (x0, y0, x0 + (right - left) + 20, y0 + (lower - upper) + 12)
        r, g, b, _ = _color(self.style["badge_bg"])
        draw.rounded_rectangle(box, radius=12, fill=(r, g, b, int(255 * BADGE_OPACITY)))
        draw.text((x0 + 10 - left, y0 + 6 - upper), text, font=font, fill=_color(self.style["front_text"]))
        canvas.alpha_composite(overlay)

    def render(self, card: Flashcard, picture: Optional[Path] = None) -> Image.Image:
        """
        Draw both sides of a card.

        Args:
            card: Card to draw
            picture: Optional local picture file

        Returns:
            RGB image of size (width, 2 * height)
        """
        canvas = Image.new("RGBA", (self.width, self.height * 2), _color(self.style["back_bg"]))
        canvas.paste(self._gradient(), (0, 0))
        draw = ImageDraw.Draw(canvas)

        # Front
        image = self._open_picture(picture)
        word_font = self._fit_font(draw, card.word, 48)
        word_y = int(self.height * 0.16) if image else int(self.height * 0.36)
        self._draw_centered(draw, card.word, word_y, word_font, _color(self.style["front_text"]))

        if card.transcription:
            self._draw_centered(
                draw, card.transcription, word_y + 64,
                self._fit_font(draw, card.transcription, 26),
                _color(self.style["front_subtext"]),
            )

        if image is not None:
            box = (self.width - 2 * self.PADDING, Config.EXPORT_PICTURE_HEIGHT)
            fitted = ImageOps.contain(image, box)
            x = (self.width - fitted.width) // 2
            y = self.height - self.PADDING - fitted.height
            canvas.alpha_composite(fitted, (x, y))

        if card.category:
            self._draw_badge(canvas, card.category, top=0)

        # Back
        draw = ImageDraw.Draw(canvas)
        top = self.height
        self._draw_centered(draw, "Translation", int(self.height * 0.30), _load_font(22),
                            _color(self.style["back_label"]), top=top)
        self._draw_centered(draw, card.translation, int(self.height * 0.44),
                            self._fit_font(draw, card.translation, 40),
                            _color(self.style["back_text"]), top=top)

        return canvas.convert("RGB")

    def render_to_file(self, card: Flashcard, picture: Optional[Path] = None) -> Path:
        """
        Render a card and save it as PNG.

        Raises:
            ExportError: the file could not be written
        """
        output_path = self.get_export_path(card)
        image = self.render(card, picture)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            image.save(output_path, format="PNG")
        except OSError as e:
            logger.error("Could not write %s: %s", output_path, e)
            raise ExportError(f"Could not write {output_path}: {e}") from e

        logger.info("Exported card %s to %s", card.id, output_path)
        return output_path

    async def export(self, card: Flashcard) -> Path:
        """
        Export a card, downloading its picture first if needed.

        Rendering runs in an executor so the UI stays responsive.

        Returns:
            Path of the written PNG
        """
        picture = await self.resolve_picture(card)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.render_to_file, card, picture)
