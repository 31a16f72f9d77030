"""
Edit/preview mode controller.

Owns the block list of a paper and the two-state machine around it:

* ``READ_ONLY``: blocks are authoritative; single lines can be edited,
  reformatted or deleted directly.
* ``EDITING``: each block is represented by editor content produced by the
  rich-text adapter. Saving parses the content back into lines; cancelling
  rebuilds the blocks from the raw texts.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from src.exceptions import ContentParseError, EditModeError, NotFoundError, ValidationError
from src.models.document_models import TextBlock, TextFormat, TextLine, set_line_format
from src.parsing.text_blocks import build_blocks, join_block_text
from src.services.rich_text_adapter import RichTextAdapter
from utils.logger import logger


class EditMode(Enum):
    READ_ONLY = "read_only"
    EDITING = "editing"


class EditModeController:
    """Block state plus the read-only/editing transitions.

    Args:
        raw_texts: Extracted text per image; the reset source for cancel,
            never changed by a save
        default_format: Format copied onto every freshly built line
        adapter: Structured-content adapter, ``RichTextAdapter`` by default
    """

    def __init__(
        self,
        raw_texts: List[str],
        default_format: Optional[TextFormat] = None,
        adapter: Optional[RichTextAdapter] = None,
    ):
        self.raw_texts = list(raw_texts)
        # Plain text of the blocks as of the last save
        self.saved_texts = list(raw_texts)
        self.default_format = default_format or TextFormat()
        self.adapter = adapter or RichTextAdapter()

        self.blocks: List[TextBlock] = build_blocks(self.raw_texts, self.default_format)
        self.mode = EditMode.READ_ONLY
        self.contents: List[str] = []
        self.selected_block: Optional[int] = None

    @property
    def is_editing(self) -> bool:
        return self.mode is EditMode.EDITING

    def _require_mode(self, mode: EditMode, action: str) -> None:
        if self.mode is not mode:
            raise EditModeError(
                f"Cannot {action} while {self.mode.value.replace('_', '-')}",
                current_mode=self.mode.value,
            )

    def _block(self, block_index: int) -> TextBlock:
        if not 0 <= block_index < len(self.blocks):
            raise NotFoundError(
                f"Block {block_index} does not exist",
                resource_type="block",
                resource_id=str(block_index),
            )
        return self.blocks[block_index]

    def reset(self) -> List[TextBlock]:
        """Rebuild blocks from the raw texts, dropping every edit."""
        self.blocks = build_blocks(self.raw_texts, self.default_format)
        self.saved_texts = list(self.raw_texts)
        self.contents = []
        self.selected_block = None
        self.mode = EditMode.READ_ONLY
        return self.blocks

    # Read-only edits

    def edit_line_text(self, block_index: int, line_index: int, content: str) -> TextLine:
        """Replace the text of one line, keeping its format."""
        self._require_mode(EditMode.READ_ONLY, "edit a line")
        block = self._block(block_index)
        if not 0 <= line_index < len(block.lines):
            raise NotFoundError(
                f"Line {line_index} does not exist in block {block_index}",
                resource_type="line",
                resource_id=f"{block_index}/{line_index}",
            )
        if not isinstance(content, str):
            raise ValidationError("Line content must be a string", field="content")

        line = block.lines[line_index]
        block.lines[line_index] = TextLine(content=content, format=line.format)
        return block.lines[line_index]

    def delete_line(self, block_index: int, line_index: int) -> bool:
        """Delete one line; a block may end up empty. Out-of-range is a no-op."""
        self._require_mode(EditMode.READ_ONLY, "delete a line")
        block = self._block(block_index)
        if not 0 <= line_index < len(block.lines):
            return False
        del block.lines[line_index]
        return True

    def set_line_format(self, block_index: int, line_index: int, changes: Dict[str, Any]) -> bool:
        self._require_mode(EditMode.READ_ONLY, "format a line")
        return set_line_format(self._block(block_index), line_index, changes)

    # Editing mode

    def enter_editing(self) -> List[str]:
        """Snapshot every block into editor content."""
        self._require_mode(EditMode.READ_ONLY, "enter editing")
        self.contents = self.adapter.serialize_all(self.blocks)
        self.selected_block = None
        self.mode = EditMode.EDITING
        logger.debug(f"Entered editing mode with {len(self.contents)} block(s)")
        return list(self.contents)

    def select_block(self, block_index: int) -> None:
        self._require_mode(EditMode.EDITING, "select a block")
        self._block(block_index)
        self.selected_block = block_index

    def update_content(self, block_index: int, content: str) -> None:
        self._require_mode(EditMode.EDITING, "update editor content")
        self._block(block_index)
        if not isinstance(content, str):
            raise ValidationError("Editor content must be a string", field="content")
        self.contents[block_index] = content

    def save(self) -> List[TextBlock]:
        """Parse editor content back into lines and leave editing mode.

        A block whose content yields no lines, or cannot be parsed, keeps
        the lines it had before editing started.
        """
        self._require_mode(EditMode.EDITING, "save")

        for index, content in enumerate(self.contents):
            block = self.blocks[index]
            try:
                lines = self.adapter.deserialize(content, block, self.default_format.font_size)
            except ContentParseError as e:
                logger.warning(f"Keeping block {index} unchanged: {e.message}")
                continue

            if not lines:
                logger.warning(f"Editor content for block {index} has no paragraphs, keeping block")
                continue

            block.lines = lines

        self.saved_texts = [join_block_text(block) for block in self.blocks]
        self.contents = []
        self.selected_block = None
        self.mode = EditMode.READ_ONLY
        logger.info(f"Saved edits for {len(self.blocks)} block(s)")
        return self.blocks

    def cancel(self) -> List[TextBlock]:
        """Discard editor content and every edit since the blocks were built."""
        self._require_mode(EditMode.EDITING, "cancel")
        logger.info("Discarded edits, blocks rebuilt from extracted text")
        return self.reset()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "selected_block": self.selected_block,
            "default_format": self.default_format.to_dict(),
            "blocks": [block.to_dict() for block in self.blocks],
            "contents": list(self.contents) if self.is_editing else None,
        }
