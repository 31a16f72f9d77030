"""
Exam Paper Builder - turns photographed exam questions into a printable paper.

This package provides functionality for:
- Extracting question text from uploaded images with a vision-language model
- Editing the extracted text as formatted question blocks
- Paginating the blocks and exporting the paper as PDF
"""

__version__ = "1.0.0"
__author__ = "Exam Paper Builder Team"
__license__ = "MIT"
