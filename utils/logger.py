"""
Unified Logging Configuration for the exam paper builder.

Every module gets its logger from ``setup_logger`` so console and file
output share one format, or uses the shared ``logger`` instance which also
keeps a few operation counters.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

def setup_logger(name: str, log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with proper configuration.

    Args:
        name: Name of the logger (usually __name__)
        log_file: Optional log file path. If not provided, logs to logs/app.log

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if log_level not in valid_levels:
            log_level = 'INFO'

        logger.setLevel(getattr(logging, log_level, logging.INFO))

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_formatter = logging.Formatter("%(levelname)s - %(message)s")

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(getattr(logging, log_level, logging.DEBUG))
        logger.addHandler(console_handler)

        if log_file is None:
            log_dir = Path(os.getenv("LOG_DIR", "logs"))
            log_dir.mkdir(exist_ok=True)
            log_file = log_dir / "app.log"

        # Windows keeps rotated files locked, so rotate by time there
        if sys.platform.startswith('win'):
            file_handler = TimedRotatingFileHandler(
                str(log_file),
                when='midnight',
                interval=1,
                backupCount=7,
                delay=True,
                encoding='utf-8'
            )
        else:
            file_handler = RotatingFileHandler(
                str(log_file),
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                delay=True,
                encoding='utf-8'
            )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(getattr(logging, log_level, logging.DEBUG))
        logger.addHandler(file_handler)

        logger.propagate = False

    return logger

class Logger:
    """Application logger with operation counters."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger with configuration."""
        if getattr(self, "_initialized", False):
            return

        self.logger = setup_logger("paper_builder", None)

        self.metrics = {
            "start_time": datetime.now(),
            "api_calls": 0,
            "ocr_operations": 0,
            "file_operations": 0,
            "exports": 0,
            "errors": 0,
            "warnings": 0,
        }

        self._initialized = True

    def debug(self, message: str, *args, **kwargs) -> None:
        """Log a debug message."""
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        """Log an info message."""
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        """Log a warning message."""
        self.log_metric("warnings")
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        """Log an error message."""
        self.log_metric("errors")
        self.logger.error(message, *args, **kwargs)

    def log_metric(self, metric_name: str, value: Any = 1) -> None:
        """Log a metric value."""
        if metric_name in self.metrics:
            if isinstance(self.metrics[metric_name], (int, float)):
                self.metrics[metric_name] += value
            else:
                self.metrics[metric_name] = value

    def get_metrics(self) -> Dict[str, Any]:
        """Snapshot of the counters with the uptime in seconds."""
        snapshot = dict(self.metrics)
        snapshot["uptime_seconds"] = (datetime.now() - self.metrics["start_time"]).total_seconds()
        snapshot["start_time"] = self.metrics["start_time"].isoformat()
        return snapshot

    def log_api_call(
        self, endpoint: str, method: str, status_code: int, duration: float
    ) -> None:
        """Log API call details.

        Args:
            endpoint: API endpoint
            method: HTTP method
            status_code: Response status code
            duration: Call duration in seconds
        """
        self.log_metric("api_calls")
        self.logger.info(
            f"API Call: {method} {endpoint} - Status: {status_code} - Duration: {duration:.2f}s"
        )

    def log_file_operation(
        self, operation: str, file_path: str, success: bool = True
    ) -> None:
        """Log file operation details."""
        self.log_metric("file_operations")
        if success:
            self.logger.debug(f"File {operation}: {file_path}")
        else:
            self.log_metric("errors")
            self.logger.error(f"Failed to {operation} file: {file_path}")

    def log_ocr_operation(
        self, image_name: str, success: bool = True, characters: Optional[int] = None
    ) -> None:
        """Log OCR operation details.

        Args:
            image_name: Name of the uploaded image
            success: Whether OCR was successful
            characters: Length of the extracted text if available
        """
        self.log_metric("ocr_operations")
        if success:
            if characters is not None:
                self.logger.info(f"OCR successful on {image_name} - {characters} characters")
            else:
                self.logger.info(f"OCR successful on {image_name}")
        else:
            self.log_metric("errors")
            self.logger.error(f"OCR failed on {image_name}")

    def log_export(self, file_name: str, pages: int) -> None:
        """Log a finished paper export."""
        self.log_metric("exports")
        self.logger.info(f"Exported {file_name} ({pages} page{'s' if pages != 1 else ''})")

# Create default logger instance
logger = Logger()
