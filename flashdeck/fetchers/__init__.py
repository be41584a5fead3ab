"""Network access for card pictures."""

from .images import ImageFetcher, detect_image_format, is_remote_url

__all__ = ["ImageFetcher", "detect_image_format", "is_remote_url"]
