"""Tests for the read-only/editing controller."""

import pytest

from src.exceptions import EditModeError, NotFoundError, ValidationError
from src.models.document_models import Alignment, TextFormat
from src.parsing.text_blocks import build_blocks
from src.services.edit_mode_controller import EditMode, EditModeController

RAW_TEXTS = ["Explain photosynthesis.\na) Define it\nb) Give an example", "What is gravity?"]


@pytest.fixture
def controller():
    return EditModeController(RAW_TEXTS, TextFormat(font_size=12))


class TestReadOnlyEdits:
    def test_starts_read_only_with_blocks(self, controller):
        assert controller.mode is EditMode.READ_ONLY
        assert len(controller.blocks) == 2
        assert controller.blocks[0].lines[0].format.font_size == 12

    def test_edit_line_text_keeps_format(self, controller):
        controller.set_line_format(0, 1, {"bold": True})
        line = controller.edit_line_text(0, 1, "a) Define photosynthesis")

        assert line.content == "a) Define photosynthesis"
        assert line.format.bold is True

    def test_edit_line_text_missing_line(self, controller):
        with pytest.raises(NotFoundError):
            controller.edit_line_text(0, 9, "text")
        with pytest.raises(NotFoundError):
            controller.edit_line_text(5, 0, "text")

    def test_edit_line_text_rejects_line_breaks(self, controller):
        with pytest.raises(ValidationError):
            controller.edit_line_text(0, 0, "two\nlines")

    def test_delete_line(self, controller):
        assert controller.delete_line(0, 2) is True
        assert [line.content for line in controller.blocks[0].lines] == [
            "Explain photosynthesis.",
            "a) Define it",
        ]
        assert controller.delete_line(0, 7) is False

    def test_block_can_become_empty(self, controller):
        assert controller.delete_line(1, 0) is True
        assert controller.blocks[1].lines == []

    def test_set_line_format_out_of_range(self, controller):
        assert controller.set_line_format(0, 10, {"italic": True}) is False

    def test_read_only_edits_rejected_while_editing(self, controller):
        controller.enter_editing()
        with pytest.raises(EditModeError):
            controller.edit_line_text(0, 0, "x")
        with pytest.raises(EditModeError):
            controller.delete_line(0, 0)
        with pytest.raises(EditModeError):
            controller.set_line_format(0, 0, {"bold": True})


class TestEditingMode:
    def test_enter_editing_serializes_blocks(self, controller):
        contents = controller.enter_editing()

        assert controller.is_editing
        assert len(contents) == 2
        assert "<strong>1. Explain photosynthesis.</strong>" in contents[0]

    def test_enter_editing_twice_is_rejected(self, controller):
        controller.enter_editing()
        with pytest.raises(EditModeError):
            controller.enter_editing()

    def test_save_and_cancel_require_editing(self, controller):
        with pytest.raises(EditModeError):
            controller.save()
        with pytest.raises(EditModeError):
            controller.cancel()

    def test_save_without_changes_keeps_blocks(self, controller):
        controller.set_line_format(0, 1, {"alignment": "center"})
        before = [block.to_dict() for block in controller.blocks]

        controller.enter_editing()
        controller.save()

        assert controller.mode is EditMode.READ_ONLY
        assert [block.to_dict() for block in controller.blocks] == before

    def test_save_applies_edited_content(self, controller):
        controller.enter_editing()
        controller.select_block(1)
        controller.update_content(
            1,
            '<p><strong>2. What is gravity?</strong></p>'
            '<p style="text-align: right; font-size: 10pt">(2 marks)</p>',
        )
        blocks = controller.save()

        assert [line.content for line in blocks[1].lines] == ["What is gravity?", "(2 marks)"]
        assert blocks[1].lines[1].format.alignment is Alignment.RIGHT
        assert blocks[1].lines[1].format.font_size == 10
        assert controller.selected_block is None
        assert controller.saved_texts[1] == "What is gravity?\n(2 marks)"
        assert controller.raw_texts == RAW_TEXTS

    def test_save_keeps_block_when_content_is_empty(self, controller):
        controller.enter_editing()
        controller.update_content(0, "")
        controller.update_content(1, "not html paragraphs")
        blocks = controller.save()

        assert len(blocks[0].lines) == 3
        assert [line.content for line in blocks[1].lines] == ["What is gravity?"]

    def test_cancel_rebuilds_from_raw_text(self, controller):
        controller.delete_line(0, 1)
        controller.enter_editing()
        controller.update_content(0, "<p>1. Changed</p>")
        controller.cancel()

        assert controller.mode is EditMode.READ_ONLY
        assert len(controller.blocks[0].lines) == 3
        assert controller.blocks[0].lines[0].content == "Explain photosynthesis."

    def test_cancel_after_save_returns_to_extracted_text(self, controller):
        controller.enter_editing()
        controller.update_content(0, "<p>1. Rewritten</p><p>new part</p>")
        controller.save()
        assert [line.content for line in controller.blocks[0].lines] == ["Rewritten", "new part"]

        controller.enter_editing()
        controller.cancel()

        assert controller.blocks == build_blocks(RAW_TEXTS, TextFormat(font_size=12))
        assert controller.saved_texts == RAW_TEXTS

    def test_select_and_update_require_editing(self, controller):
        with pytest.raises(EditModeError):
            controller.select_block(0)
        with pytest.raises(EditModeError):
            controller.update_content(0, "<p>x</p>")

    def test_update_unknown_block(self, controller):
        controller.enter_editing()
        with pytest.raises(NotFoundError):
            controller.update_content(3, "<p>x</p>")

    def test_to_dict_exposes_contents_only_while_editing(self, controller):
        assert controller.to_dict()["contents"] is None
        controller.enter_editing()
        data = controller.to_dict()
        assert data["mode"] == "editing"
        assert len(data["contents"]) == 2


def test_cancel_reproduces_freshly_built_blocks():
    controller = EditModeController(RAW_TEXTS)
    controller.set_line_format(0, 0, {"bold": True})
    controller.edit_line_text(1, 0, "Changed")
    controller.delete_line(0, 2)
    controller.enter_editing()
    controller.cancel()

    assert controller.blocks == build_blocks(RAW_TEXTS)


def test_save_strips_numbering_from_two_paragraphs():
    controller = EditModeController(RAW_TEXTS)
    controller.enter_editing()
    controller.update_content(0, "<p><strong>1. Rewritten heading</strong></p><p>&nbsp;&nbsp;a) only part</p>")
    controller.save()

    assert [line.content for line in controller.blocks[0].lines] == ["Rewritten heading", "a) only part"]


def test_save_keeps_bold_added_around_a_body_line():
    controller = EditModeController(RAW_TEXTS)
    contents = controller.enter_editing()
    controller.update_content(0, contents[0].replace("a) Define it", "<strong>a) Define it</strong>"))
    controller.save()

    assert controller.blocks[0].lines[1].content == "a) Define it"
    assert controller.blocks[0].lines[1].format.bold is True
    assert controller.blocks[0].lines[2].format.bold is False
