"""Turn raw extracted text into the block/line document model.

One block is produced per source image, in upload order. Blank lines are
dropped; surviving lines keep their text exactly as extracted, including any
numbering the OCR model kept. The question label is added at render time.
"""
from typing import Iterable, List, Optional

from src.models.document_models import TextBlock, TextFormat, TextLine


def split_lines(raw_text: Optional[str]) -> List[str]:
    """Split on line boundaries and drop lines that are blank after trimming."""
    if not raw_text:
        return []
    return [line for line in raw_text.splitlines() if line.strip()]


def build_blocks(raw_texts: Iterable[str], default_format: Optional[TextFormat] = None) -> List[TextBlock]:
    """Build one ``TextBlock`` per raw text.

    Every line gets its own copy of ``default_format``, so calling this again
    with the same inputs discards any formatting edits made since.

    Args:
        raw_texts: Extracted text per image, in upload order
        default_format: Format copied onto every line

    Returns:
        List of blocks, same length as ``raw_texts``
    """
    default_format = default_format or TextFormat()
    blocks = []
    for index, raw_text in enumerate(raw_texts):
        lines = [TextLine(content=line, format=default_format.copy()) for line in split_lines(raw_text)]
        blocks.append(TextBlock(source_index=index, lines=lines))
    return blocks


def join_block_text(block: TextBlock) -> str:
    """Raw text equivalent of a block, one line per line."""
    return "\n".join(line.content for line in block.lines)
