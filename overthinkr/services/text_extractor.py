"""Screenshot text extraction.

Wraps Tesseract (through pytesseract) behind a single call that turns image
bytes into trimmed message text. Anything that prevents reading the image,
including an image with no recognizable text, is an UnreadableImageError.
"""

import asyncio
import io
import logging

import pytesseract
from PIL import Image, UnidentifiedImageError

from overthinkr.core.config import OCRConfig
from overthinkr.core.exceptions import UnreadableImageError


logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG", "WEBP", "GIF", "BMP")


class TextExtractor:
    """OCR component for chat screenshots."""

    def __init__(self, config: OCRConfig):
        self.language = config.language
        self.max_image_bytes = config.max_image_bytes
        if config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd

    def is_available(self) -> bool:
        """Whether the tesseract binary can be found."""
        try:
            pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError):
            return False
        return True

    async def extract_text(self, image_bytes: bytes) -> str:
        """Extract message text from a screenshot.

        Tesseract runs in a worker thread so the event loop stays free.

        Args:
            image_bytes: Raw uploaded image.

        Returns:
            Recognized text with surrounding whitespace removed.

        Raises:
            UnreadableImageError: Empty, oversized, undecodable or textless image,
                or the OCR engine failed.
        """
        image = self._open_image(image_bytes)
        try:
            text = await asyncio.to_thread(
                pytesseract.image_to_string, image, lang=self.language
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise UnreadableImageError(f"OCR failed: {e}") from e

        text = text.strip()
        if not text:
            raise UnreadableImageError("No text found in image")

        logger.info(
            f"OCR extracted {len(text)} chars from {image.width}x{image.height} image"
        )
        return text

    def _open_image(self, image_bytes: bytes) -> Image.Image:
        if not image_bytes:
            raise UnreadableImageError("Image data is empty")
        if len(image_bytes) > self.max_image_bytes:
            raise UnreadableImageError(
                f"Image is {len(image_bytes)} bytes, limit is {self.max_image_bytes}"
            )

        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise UnreadableImageError(f"Failed to decode image: {e}") from e

        if image.format not in SUPPORTED_FORMATS:
            raise UnreadableImageError(
                f"Unsupported image format: {image.format}. "
                f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
            )
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        return image
