"""
Webapp package for the Exam Paper Builder.

Contains the Flask application factory, the paper wizard routes and the
printable preview template.
"""

__version__ = "1.0.0"

from .app_factory import create_app

__all__ = ["create_app"]
