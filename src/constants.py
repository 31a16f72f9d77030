"""
Application Constants

This module contains the hard-coded strings, defaults and layout numbers
used throughout the application.
"""

# Environment variable names
ENV_HOST = "HOST"
ENV_PORT = "PORT"
ENV_DEBUG = "DEBUG"
ENV_SECRET_KEY = "SECRET_KEY"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_GEMINI_API_KEY = "GEMINI_API_KEY"
ENV_GEMINI_MODEL = "GEMINI_MODEL"
ENV_GEMINI_API_URL = "GEMINI_API_URL"
ENV_OCR_TIMEOUT = "OCR_TIMEOUT"
ENV_MAX_IMAGES = "MAX_IMAGES"
ENV_MAX_FILE_SIZE_MB = "MAX_FILE_SIZE_MB"
ENV_DEFAULT_SCHOOL_NAME = "DEFAULT_SCHOOL_NAME"
ENV_DEFAULT_FONT_SIZE = "DEFAULT_FONT_SIZE"
ENV_PDF_FONT_PATH = "PDF_FONT_PATH"
ENV_FOOTER_ATTRIBUTION = "FOOTER_ATTRIBUTION"
ENV_OUTPUT_DIR = "OUTPUT_DIR"

# Default values
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "5000"
DEFAULT_DEBUG = "False"
DEFAULT_LOG_LEVEL = "INFO"

# OCR model
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_OCR_TIMEOUT = 60

# Upload limits
DEFAULT_MAX_IMAGES = 4
DEFAULT_MAX_FILE_SIZE_MB = 20
SUPPORTED_IMAGE_EXTENSIONS = [".png", ".jpg", ".jpeg"]
SUPPORTED_IMAGE_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg"}

# Paper defaults
DEFAULT_SCHOOL_NAME = "SHASHWAT PUBLIC SCHOOL"
DEFAULT_FONT_SIZE = 11
DEFAULT_FOOTER_ATTRIBUTION = "© All Rights Reserved. Shashwat Public School"

# Directory names
DIR_OUTPUT = "output"

# Page geometry (millimetres, A4 portrait)
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
PAGE_MARGIN_MM = 20.0

# Vertical layout (millimetres)
HEADER_HEIGHT_MM = 50.0
STUDENT_FIELDS_HEIGHT_MM = 15.0
INSTRUCTIONS_HEIGHT_MM = 15.0
HEADING_LINE_STEP_MM = 7.0
BODY_LINE_STEP_MM = 6.0
BLOCK_GAP_MM = 5.0
NEW_PAGE_TOP_OFFSET_MM = 20.0
FOOTER_PAGE_LABEL_OFFSET_MM = 15.0
FOOTER_ATTRIBUTION_OFFSET_MM = 10.0

# Left-aligned sub-points are indented by this prefix
SUB_POINT_INDENT = "   "

# Points per millimetre
POINTS_PER_MM = 72.0 / 25.4
