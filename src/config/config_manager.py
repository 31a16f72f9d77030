import os
from dataclasses import dataclass, replace
from typing import List

from dotenv import load_dotenv

from src.constants import (
    DEFAULT_DEBUG,
    DEFAULT_FONT_SIZE,
    DEFAULT_FOOTER_ATTRIBUTION,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_IMAGES,
    DEFAULT_OCR_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_SCHOOL_NAME,
    DIR_OUTPUT,
    ENV_DEBUG,
    ENV_DEFAULT_FONT_SIZE,
    ENV_DEFAULT_SCHOOL_NAME,
    ENV_FOOTER_ATTRIBUTION,
    ENV_GEMINI_API_KEY,
    ENV_GEMINI_API_URL,
    ENV_GEMINI_MODEL,
    ENV_HOST,
    ENV_LOG_LEVEL,
    ENV_MAX_FILE_SIZE_MB,
    ENV_MAX_IMAGES,
    ENV_OCR_TIMEOUT,
    ENV_OUTPUT_DIR,
    ENV_PDF_FONT_PATH,
    ENV_PORT,
    ENV_SECRET_KEY,
    GEMINI_DEFAULT_BASE_URL,
    SUPPORTED_IMAGE_EXTENSIONS,
)
from utils.logger import setup_logger

logger = setup_logger(__name__)


def _env_int(name: str, default: int) -> int:
    # Values copied from .env files sometimes carry trailing comments
    return int(os.getenv(name, str(default)).split('#')[0].strip())


@dataclass
class Config:
    """Configuration settings for the application."""
    # Core settings
    debug: bool
    log_level: str
    secret_key: str
    host: str
    port: int

    # Directory settings
    output_dir: str

    # Upload settings
    max_images: int
    max_file_size_mb: int
    supported_formats: List[str]

    # OCR settings
    gemini_api_key: str
    gemini_model: str
    gemini_api_url: str
    ocr_timeout: int

    # Paper settings
    default_school_name: str
    default_font_size: int
    pdf_font_path: str
    footer_attribution: str

class ConfigManager:
    """Manages application configuration."""

    _instance = None

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize configuration manager."""
        if self._initialized:
            return

        # Load environment variables from root .env file
        load_dotenv('.env', override=False)

        self.config = Config(
            # Core settings
            debug=os.getenv(ENV_DEBUG, DEFAULT_DEBUG).lower() == 'true',
            log_level=os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            secret_key=os.getenv(ENV_SECRET_KEY, os.urandom(24).hex()),
            host=os.getenv(ENV_HOST, DEFAULT_HOST),
            port=_env_int(ENV_PORT, int(DEFAULT_PORT)),

            # Directory settings
            output_dir=os.getenv(ENV_OUTPUT_DIR, DIR_OUTPUT),

            # Upload settings
            max_images=_env_int(ENV_MAX_IMAGES, DEFAULT_MAX_IMAGES),
            max_file_size_mb=_env_int(ENV_MAX_FILE_SIZE_MB, DEFAULT_MAX_FILE_SIZE_MB),
            supported_formats=list(SUPPORTED_IMAGE_EXTENSIONS),

            # OCR settings
            gemini_api_key=os.getenv(ENV_GEMINI_API_KEY, ''),
            gemini_model=os.getenv(ENV_GEMINI_MODEL, DEFAULT_GEMINI_MODEL),
            gemini_api_url=os.getenv(ENV_GEMINI_API_URL, GEMINI_DEFAULT_BASE_URL),
            ocr_timeout=_env_int(ENV_OCR_TIMEOUT, DEFAULT_OCR_TIMEOUT),

            # Paper settings
            default_school_name=os.getenv(ENV_DEFAULT_SCHOOL_NAME, DEFAULT_SCHOOL_NAME),
            default_font_size=_env_int(ENV_DEFAULT_FONT_SIZE, DEFAULT_FONT_SIZE),
            pdf_font_path=os.getenv(ENV_PDF_FONT_PATH, ''),
            footer_attribution=os.getenv(ENV_FOOTER_ATTRIBUTION, DEFAULT_FOOTER_ATTRIBUTION),
        )

        self._validate_config()

        if not self.config.gemini_api_key:
            logger.warning("GEMINI_API_KEY not configured - text extraction will be unavailable")

        self._initialized = True
        logger.debug("Configuration initialized successfully")

    def _validate_config(self) -> None:
        """Validate configuration settings."""
        if self.config.max_file_size_mb <= 0:
            logger.warning(f"Invalid max file size, using default of {DEFAULT_MAX_FILE_SIZE_MB}MB")
            self.config.max_file_size_mb = DEFAULT_MAX_FILE_SIZE_MB

        if self.config.max_images <= 0:
            logger.warning(f"Invalid max images, using default of {DEFAULT_MAX_IMAGES}")
            self.config.max_images = DEFAULT_MAX_IMAGES

        if self.config.default_font_size <= 0:
            logger.warning(f"Invalid default font size, using {DEFAULT_FONT_SIZE}pt")
            self.config.default_font_size = DEFAULT_FONT_SIZE

    def override(self, **values) -> Config:
        """Return a copy of the configuration with some fields replaced."""
        return replace(self.config, **values)
