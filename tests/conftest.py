"""
Test configuration and fixtures for the Exam Paper Builder test suite.
"""

import os
import sys
from io import BytesIO
from unittest.mock import Mock

import pytest
from PIL import Image

# Add the project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.config import ConfigManager
from src.models.document_models import DocumentMetadata, ImageUpload, TextFormat
from src.parsing.text_blocks import build_blocks
from webapp.app_factory import create_app


def make_image_bytes(image_format="PNG", size=(40, 20)):
    """Encode a small solid image in the given Pillow format."""
    buffer = BytesIO()
    Image.new("RGB", size, color=(255, 255, 255)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def settings(tmp_path):
    """Application settings pointing at a temporary output directory."""
    return ConfigManager().override(
        output_dir=str(tmp_path / "output"),
        gemini_api_key="test-key",
        pdf_font_path="",
        max_images=4,
    )


@pytest.fixture
def app(settings):
    """Create test application."""
    app = create_app("testing", settings=settings)
    app.config.update({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG")


@pytest.fixture
def png_upload(png_bytes):
    return ImageUpload(filename="page1.png", content=png_bytes, mime_type="image/png")


@pytest.fixture
def metadata():
    return DocumentMetadata(
        school_name="Shashwat Public School",
        class_name="Class 8",
        subject="Science",
        exam_time="3 hours",
        total_marks="80",
    )


@pytest.fixture
def sample_blocks():
    """Two blocks: a question with two sub-points and a one-line question."""
    return build_blocks(
        ["Explain photosynthesis.\na) Define it\nb) Give an example", "What is gravity?"],
        TextFormat(),
    )


@pytest.fixture
def mock_ocr_service():
    """OCR service double that returns one text per pending image."""
    from src.services.ocr_service import BatchExtractionResult

    service = Mock()

    def extract_batch(images, locale, on_progress=None, max_workers=1):
        result = BatchExtractionResult()
        for index in sorted(images):
            result.texts[index] = f"Question from image {index + 1}\ni) first part"
        return result

    service.extract_batch.side_effect = extract_batch
    return service
