"""
OCR Service for exam question images using the Gemini generateContent API.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from io import BytesIO
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import base64
import os

import requests
from PIL import Image, UnidentifiedImageError

from src.constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_OCR_TIMEOUT,
    ENV_GEMINI_API_KEY,
    ENV_GEMINI_API_URL,
    ENV_GEMINI_MODEL,
    GEMINI_DEFAULT_BASE_URL,
    SUPPORTED_IMAGE_FORMATS,
)
from src.exceptions import ConfigurationError, ErrorCode, ExtractionError
from src.i18n.labels import Locale
from src.models.document_models import ImageUpload
from utils.logger import logger

OCR_PROMPTS: Dict[Locale, str] = {
    Locale.HINDI: """इस छवि से परीक्षा पेपर / प्रश्नों का टेक्स्ट निकालें।

निम्नलिखित निर्देशों का पालन करें:
1. प्रश्न संख्या, अंक और सभी फ़ॉर्मेटिंग बनाए रखें
2. प्रश्नों के बीच खाली रेखाएं बनाए रखें
3. सब-सेक्शन (जैसे a, b, c या i, ii, iii) और उनका स्वरूप बनाए रखें
4. केवल टेक्स्ट देना है, कोई अतिरिक्त टिप्पणी या व्याख्या नहीं
5. यदि परीक्षा का समय, पूर्णांक या विभाग दिखाई देता है, तो उसे भी शामिल करें

छवि में मौजूद सटीक टेक्स्ट दें, किसी भी प्रकार की अपनी व्याख्या या संपादन न करें।""",
    Locale.ENGLISH: """Extract the text of exam paper / questions from this image.

Follow these instructions:
1. Maintain question numbers, marks, and all formatting
2. Preserve blank lines between questions
3. Keep sub-sections (like a, b, c or i, ii, iii) and their structure
4. Provide text only, no additional comments or explanations
5. If exam time, total marks, or department is visible, include that too

Provide the exact text present in the image without any interpretation or editing of your own.""",
}

# (completed, total, image_index, success)
ProgressCallback = Callable[[int, int, int, bool], None]


@dataclass
class BatchExtractionResult:
    """Per-image outcome of a batch; both maps are keyed by image index."""
    texts: Dict[int, str] = field(default_factory=dict)
    errors: Dict[int, ExtractionError] = field(default_factory=dict)

    @property
    def all_succeeded(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict:
        return {
            "extracted": sorted(self.texts),
            "errors": {
                str(index): error.message for index, error in sorted(self.errors.items())
            },
        }


class GeminiOCRService:
    """Text extraction through a multimodal Gemini model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = DEFAULT_OCR_TIMEOUT,
        max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB,
        allow_no_key: bool = False,
    ):
        """
        Initialize with API key and endpoint settings.

        Args:
            api_key: Gemini API key
            model: Model name, e.g. gemini-1.5-flash
            base_url: API base URL
            timeout: Request timeout in seconds
            max_file_size_mb: Largest accepted image
            allow_no_key: If True, allows initialization without API key (extraction then fails per image)
        """
        self.api_key = api_key or os.getenv(ENV_GEMINI_API_KEY)

        if not self.api_key and not allow_no_key:
            raise ConfigurationError("Gemini API key not configured", config_key=ENV_GEMINI_API_KEY)

        self.model = model or os.getenv(ENV_GEMINI_MODEL, DEFAULT_GEMINI_MODEL)
        self.base_url = (base_url or os.getenv(ENV_GEMINI_API_URL, GEMINI_DEFAULT_BASE_URL)).rstrip("/")
        self.timeout = timeout
        self.max_file_size = max_file_size_mb * 1024 * 1024

        if self.api_key:
            logger.info(f"OCR service initialized with model {self.model}")
        else:
            logger.info("OCR service initialized without API key - extraction will be disabled")

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def validate_image(self, image_bytes: bytes) -> str:
        """
        Check size and decode the image.

        Args:
            image_bytes: Raw uploaded bytes

        Returns:
            str: MIME type detected from the image content

        Raises:
            ExtractionError: If the image is empty, too large or not PNG/JPEG
        """
        if not image_bytes:
            raise ExtractionError("Image is empty", error_code=ErrorCode.VALIDATION_ERROR)

        if len(image_bytes) > self.max_file_size:
            size_mb = len(image_bytes) / (1024 * 1024)
            raise ExtractionError(
                f"Image size ({size_mb:.1f}MB) exceeds {self.max_file_size // (1024 * 1024)}MB limit",
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        try:
            with Image.open(BytesIO(image_bytes)) as image:
                image_format = image.format
                image.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
            raise ExtractionError(
                "File is not a readable image",
                error_code=ErrorCode.VALIDATION_ERROR,
                original_error=e,
            )

        if image_format not in SUPPORTED_IMAGE_FORMATS:
            raise ExtractionError(
                f"Unsupported image format: {image_format}",
                error_code=ErrorCode.VALIDATION_ERROR,
            )
        return SUPPORTED_IMAGE_FORMATS[image_format]

    def _build_payload(self, image_bytes: bytes, mime_type: str, locale: Locale) -> Dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": OCR_PROMPTS[locale]},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image_bytes).decode("ascii"),
                            }
                        },
                    ]
                }
            ]
        }

    def _parse_response(self, response: requests.Response) -> str:
        if response.status_code != 200:
            error_msg = f"OCR request failed: {response.status_code}"
            try:
                error_details = response.json()
            except ValueError:
                error_details = None
            if isinstance(error_details, dict) and isinstance(error_details.get("error"), dict):
                error_msg = f"{error_msg} - {error_details['error'].get('message', '')}".rstrip(" -")
            raise ExtractionError(error_msg, status_code=response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise ExtractionError("OCR response is not valid JSON", original_error=e)

        if not isinstance(result, dict):
            raise ExtractionError(f"OCR response has unexpected type {type(result).__name__}")

        candidates = result.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            feedback = result.get("promptFeedback")
            block_reason = feedback.get("blockReason", "unknown") if isinstance(feedback, dict) else "unknown"
            raise ExtractionError(f"OCR model returned no candidates (block reason: {block_reason})")

        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        content = candidate.get("content")
        parts = (content.get("parts") if isinstance(content, dict) else None) or []
        if not isinstance(parts, list):
            raise ExtractionError("OCR response content has no parts")
        text = "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

        if not text.strip():
            raise ExtractionError("OCR completed but no text was extracted")
        return text

    def extract_text(self, image_bytes: bytes, mime_type: Optional[str], locale: Locale) -> str:
        """
        Extract the question text from one image.

        Args:
            image_bytes: Raw image content
            mime_type: Declared MIME type; the type detected from the content wins
            locale: Paper language, selects the prompt

        Returns:
            str: Extracted text with original line breaks

        Raises:
            ExtractionError: If validation, the request or the response fails
        """
        if not self.api_key:
            raise ExtractionError(
                "OCR service not available - API key not configured",
                error_code=ErrorCode.SERVICE_UNAVAILABLE,
            )

        detected_type = self.validate_image(image_bytes)
        if mime_type and mime_type != detected_type:
            logger.debug(f"Declared type {mime_type} differs from content, using {detected_type}")

        try:
            response = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self._build_payload(image_bytes, detected_type, locale),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"OCR request timed out after {self.timeout}s")
            raise ExtractionError(
                f"OCR request timed out after {self.timeout}s",
                error_code=ErrorCode.TIMEOUT_ERROR,
                original_error=e,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error during OCR: {str(e)}")
            raise ExtractionError(f"Network error during OCR: {str(e)}", original_error=e)

        text = self._parse_response(response)
        logger.info(f"OCR completed successfully. Extracted {len(text)} characters.")
        return text

    def _extract_one(self, index: int, image: ImageUpload, locale: Locale) -> str:
        try:
            text = self.extract_text(image.content, image.mime_type, locale)
        except ExtractionError as e:
            self._mark_failed(e, index, image)
            raise
        except Exception as e:
            logger.error(f"Unexpected OCR failure for image {index}: {str(e)}")
            error = ExtractionError(f"Unexpected OCR failure: {str(e)}", original_error=e)
            self._mark_failed(error, index, image)
            raise error from e
        logger.log_ocr_operation(image.filename, success=True, characters=len(text))
        return text

    def _mark_failed(self, error: ExtractionError, index: int, image: ImageUpload) -> None:
        error.image_index = index
        error.details["image_index"] = index
        logger.log_ocr_operation(image.filename, success=False)

    def extract_batch(
        self,
        images: Union[Sequence[ImageUpload], Mapping[int, ImageUpload]],
        locale: Locale,
        on_progress: Optional[ProgressCallback] = None,
        max_workers: int = 1,
    ) -> BatchExtractionResult:
        """
        Extract text from several images.

        Images are processed one after another unless ``max_workers`` is
        greater than one. Either way results are stored by image index, so
        completion order never changes the outcome. A failing image does not
        stop the others.

        Args:
            images: Images in upload order, or a mapping of index to image
            locale: Paper language
            on_progress: Called after each image with (completed, total, index, success)
            max_workers: Number of concurrent requests

        Returns:
            BatchExtractionResult: Texts and errors keyed by image index
        """
        items: Sequence[Tuple[int, ImageUpload]] = (
            sorted(images.items()) if isinstance(images, Mapping) else list(enumerate(images))
        )
        total = len(items)
        result = BatchExtractionResult()
        completed = 0

        def record(index: int, text: Optional[str], error: Optional[ExtractionError]) -> None:
            nonlocal completed
            completed += 1
            if error is None:
                result.texts[index] = text
            else:
                result.errors[index] = error
            if on_progress:
                on_progress(completed, total, index, error is None)

        if max_workers <= 1 or total <= 1:
            for index, image in items:
                try:
                    record(index, self._extract_one(index, image, locale), None)
                except ExtractionError as e:
                    record(index, None, e)
        else:
            with ThreadPoolExecutor(max_workers=min(max_workers, total)) as executor:
                futures = {
                    executor.submit(self._extract_one, index, image, locale): index
                    for index, image in items
                }
                for future in as_completed(futures):
                    index = futures[future]
                    try:
                        record(index, future.result(), None)
                    except ExtractionError as e:
                        record(index, None, e)

        logger.info(
            f"Batch OCR finished: {len(result.texts)} succeeded, {len(result.errors)} failed"
        )
        return result
