"""Tests for TextExtractor and the POST /api/v1/ocr endpoint."""

import io

import pytest
import pytesseract
from fastapi.testclient import TestClient
from PIL import Image
from unittest.mock import patch

from overthinkr.core.config import OCRConfig
from overthinkr.core.dependencies import get_text_extractor, reset_dependencies
from overthinkr.core.exceptions import UnreadableImageError
from overthinkr.main import app
from overthinkr.services.text_extractor import TextExtractor


def create_test_image(fmt: str = "PNG", mode: str = "RGB", size=(120, 40)) -> bytes:
    """Create a small image and return its encoded bytes."""
    img = Image.new(mode, size, color="white")
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def extractor():
    return TextExtractor(OCRConfig())


class TestTextExtractor:
    @pytest.mark.asyncio
    async def test_extracts_trimmed_text(self, extractor):
        with patch(
            "overthinkr.services.text_extractor.pytesseract.image_to_string",
            return_value="\n  k.  \n\x0c",
        ) as ocr:
            text = await extractor.extract_text(create_test_image())

        assert text == "k."
        assert ocr.call_args.kwargs["lang"] == "eng"

    @pytest.mark.asyncio
    async def test_palette_image_converted(self, extractor):
        with patch(
            "overthinkr.services.text_extractor.pytesseract.image_to_string",
            return_value="hey",
        ) as ocr:
            await extractor.extract_text(create_test_image(fmt="GIF", mode="P"))

        image = ocr.call_args.args[0]
        assert image.mode == "RGB"

    @pytest.mark.asyncio
    async def test_no_text_found(self, extractor):
        with patch(
            "overthinkr.services.text_extractor.pytesseract.image_to_string",
            return_value="   \n",
        ):
            with pytest.raises(UnreadableImageError):
                await extractor.extract_text(create_test_image())

    @pytest.mark.asyncio
    async def test_ocr_engine_failure(self, extractor):
        with patch(
            "overthinkr.services.text_extractor.pytesseract.image_to_string",
            side_effect=pytesseract.TesseractError(1, "bad lang"),
        ):
            with pytest.raises(UnreadableImageError):
                await extractor.extract_text(create_test_image())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [b"", b"definitely not an image"])
    async def test_undecodable_bytes(self, extractor, data):
        with pytest.raises(UnreadableImageError):
            await extractor.extract_text(data)

    @pytest.mark.asyncio
    async def test_oversized_image(self):
        extractor = TextExtractor(OCRConfig(max_image_bytes=10))

        with pytest.raises(UnreadableImageError) as exc_info:
            await extractor.extract_text(create_test_image())
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_unsupported_format(self, extractor):
        with pytest.raises(UnreadableImageError):
            await extractor.extract_text(create_test_image(fmt="TIFF"))

    def test_unavailable_when_binary_missing(self, extractor):
        with patch(
            "overthinkr.services.text_extractor.pytesseract.get_tesseract_version",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            assert extractor.is_available() is False


class TestOCREndpoint:
    @pytest.fixture
    def client(self, extractor):
        reset_dependencies()
        app.dependency_overrides[get_text_extractor] = lambda: extractor
        yield TestClient(app)
        app.dependency_overrides.clear()
        reset_dependencies()

    def test_returns_extracted_text(self, client):
        with patch(
            "overthinkr.services.text_extractor.pytesseract.image_to_string",
            return_value="Sure.\n",
        ):
            response = client.post(
                "/api/v1/ocr",
                files={"image": ("chat.png", create_test_image(), "image/png")},
            )

        assert response.status_code == 200
        assert response.json() == {"text": "Sure."}

    def test_unreadable_image_is_422(self, client):
        response = client.post(
            "/api/v1/ocr",
            files={"image": ("chat.png", b"garbage", "image/png")},
        )

        assert response.status_code == 422
        assert response.json() == {
            "error": "unreadable_image",
            "message": "Failed to read image.",
        }

    def test_missing_upload_is_422(self, client):
        response = client.post("/api/v1/ocr")

        assert response.status_code == 422
