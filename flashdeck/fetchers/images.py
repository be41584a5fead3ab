"""Download card pictures referenced by an http(s) ``image_url``."""

import asyncio
import os
import uuid
from typing import Optional

import aiofiles
import aiohttp

from ..config import Config
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Leading bytes of the formats Pillow can place on an exported card
IMAGE_SIGNATURES = {
    b'\xff\xd8\xff': 'jpeg',
    b'\x89PNG': 'png',
    b'GIF8': 'gif',
}

# Statuses where retrying cannot help
PERMANENT_FAILURES = (400, 401, 403, 404, 410)


def detect_image_format(content: bytes) -> Optional[str]:
    """Format name from the file signature, or None for non-images."""
    if len(content or b"") < 4:
        return None
    for signature, name in IMAGE_SIGNATURES.items():
        if content.startswith(signature):
            return name
    if content.startswith(b'RIFF') and content[8:12] == b'WEBP':
        return 'webp'
    return None


def is_remote_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


class ImageFetcher:
    """
    Picture downloader with one pooled aiohttp session.

    Usage:
        async with ImageFetcher() as fetcher:
            ok = await fetcher.fetch(card.image_url, "data/cache/_img_123")
    """

    def __init__(self, retries: Optional[int] = None, timeout: Optional[int] = None):
        """
        Args:
            retries: Attempts per download (defaults to Config.RETRIES)
            timeout: Seconds per request (defaults to Config.IMAGE_TIMEOUT)
        """
        self.retries = retries or Config.RETRIES
        self.timeout = timeout or Config.IMAGE_TIMEOUT
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "ImageFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": f"{Config.APP_NAME}/1.0"},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _write_atomic(self, content: bytes, output_path: str) -> None:
        """Write next to the target and rename, so readers never see half a file."""
        directory = os.path.dirname(output_path) or "."
        os.makedirs(directory, exist_ok=True)
        temp_path = f"{output_path}.{uuid.uuid4().hex[:8]}.part"
        try:
            async with aiofiles.open(temp_path, 'wb') as f:
                await f.write(content)
            os.replace(temp_path, output_path)
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)

    async def _attempt(self, url: str, output_path: str) -> Optional[bool]:
        """
        One download attempt.

        Returns:
            True when saved, False when the failure is final, None to retry
        """
        async with self._ensure_session().get(url) as response:
            if response.status == 200:
                content = await response.read()
                if detect_image_format(content) is None:
                    logger.warning("%s is not an image (%d bytes)", url, len(content))
                    return False
                await self._write_atomic(content, output_path)
                return True
            if response.status in PERMANENT_FAILURES:
                logger.warning("Picture download failed with HTTP %d: %s", response.status, url)
                return False
            logger.warning("HTTP %d on %s", response.status, url)
            return None

    async def fetch(self, source: str, output_path: str) -> bool:
        """
        Save the picture at ``source`` to ``output_path``.

        Returns:
            Whether a valid image file was written
        """
        url = str(source).strip()
        if not is_remote_url(url):
            return False

        for attempt in range(1, self.retries + 1):
            try:
                outcome = await self._attempt(url, output_path)
            except asyncio.TimeoutError:
                logger.warning("Timeout downloading %s (attempt %d/%d)", url, attempt, self.retries)
                outcome = None
            except aiohttp.ClientError as e:
                logger.warning("Download error for %s (attempt %d/%d): %s", url, attempt, self.retries, e)
                outcome = None

            if outcome is not None:
                return outcome
            if attempt < self.retries:
                await asyncio.sleep(2 ** (attempt - 1))

        logger.warning("Giving up on %s after %d attempts", url, self.retries)
        return False
