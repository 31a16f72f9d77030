"""
Parsing Package for the exam paper builder

Converts the raw text returned by the OCR model into ordered text blocks,
one per uploaded image.

Example:
    ```python
    from src.parsing import build_blocks

    blocks = build_blocks(["1. What is 2+2?\\na) 3\\nb) 4"])
    ```
"""

from src.parsing.text_blocks import build_blocks, join_block_text, split_lines

__all__ = ["build_blocks", "join_block_text", "split_lines"]
