"""
Utils package for common utilities.
"""

from utils.logger import Logger, logger, setup_logger

__all__ = ["Logger", "logger", "setup_logger"]
