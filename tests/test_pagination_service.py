"""Tests for page layout and page command generation."""

import pytest

from src.constants import SUB_POINT_INDENT
from src.i18n.labels import Locale
from src.models.document_models import Alignment, DocumentMetadata, TextBlock, TextFormat, TextLine
from src.models.page_commands import DrawFooter, DrawHeader, DrawLine, NewPage
from src.parsing.text_blocks import build_blocks
from src.services.pagination_service import (
    PaginationService,
    body_start,
    count_pages,
    display_text,
    estimate_text_width,
    render,
    wrap_text,
)


def char_count(text, font_size, bold=False):
    """One millimetre per character, for predictable wrapping."""
    return float(len(text))


def lines_of(commands):
    return [command for command in commands if isinstance(command, DrawLine)]


class TestWrapText:
    def test_text_that_fits_is_unchanged(self):
        assert wrap_text("short line", 50, 11, measure=char_count) == ["short line"]

    def test_greedy_word_wrap(self):
        assert wrap_text("aaa bbb ccc", 7, 11, measure=char_count) == ["aaa bbb", "ccc"]

    def test_long_word_is_broken(self):
        assert wrap_text("abcdefghij", 4, 11, measure=char_count) == ["abcd", "efgh", "ij"]

    def test_leading_indent_survives(self):
        assert wrap_text("   aa bb", 5, 11, measure=char_count) == ["   aa", "bb"]


class TestEstimateTextWidth:
    def test_empty_text(self):
        assert estimate_text_width("", 11) == 0

    def test_scales_with_font_size(self):
        assert estimate_text_width("Question", 22) == pytest.approx(2 * estimate_text_width("Question", 11))

    def test_bold_is_wider(self):
        assert estimate_text_width("Question", 11, bold=True) > estimate_text_width("Question", 11)

    def test_combining_marks_add_no_width(self):
        assert estimate_text_width("क्", 11) == estimate_text_width("क", 11)


class TestDisplayText:
    def test_heading_and_sub_points(self):
        block = TextBlock(
            source_index=1,
            lines=[
                TextLine("What is gravity?"),
                TextLine("a) left"),
                TextLine("(2 marks)", TextFormat(alignment=Alignment.RIGHT)),
            ],
        )
        assert display_text(block, 0) == "2. What is gravity?"
        assert display_text(block, 1) == f"{SUB_POINT_INDENT}a) left"
        assert display_text(block, 2) == "(2 marks)"


class TestBodyStart:
    def test_student_fields_push_body_down(self, metadata):
        assert body_start(metadata) == 70
        metadata.has_student_fields = True
        assert body_start(metadata) == 85


class TestRender:
    def test_small_paper_layout(self, sample_blocks, metadata):
        commands = render(sample_blocks, metadata)

        assert isinstance(commands[0], DrawHeader)
        assert commands[0].height == 50
        assert isinstance(commands[-1], DrawFooter)
        assert not any(isinstance(command, NewPage) for command in commands)

        drawn = lines_of(commands)
        assert [line.text for line in drawn] == [
            "1. Explain photosynthesis.",
            f"{SUB_POINT_INDENT}a) Define it",
            f"{SUB_POINT_INDENT}b) Give an example",
            "2. What is gravity?",
        ]
        assert [line.y for line in drawn] == [70, 77, 83, 94]
        assert all(line.x == 20 for line in drawn)

        footer = commands[-1]
        assert footer.page_number == 1
        assert footer.page_label == "Page 1"
        assert footer.y == 282
        assert count_pages(commands) == 1

    def test_alignment_anchors(self, metadata):
        block = TextBlock(
            source_index=0,
            lines=[
                TextLine("Centred", TextFormat(alignment=Alignment.CENTER)),
                TextLine("Right", TextFormat(alignment=Alignment.RIGHT)),
            ],
        )
        center, right = lines_of(render([block], metadata))
        assert (center.x, center.align) == (105, Alignment.CENTER)
        assert (right.x, right.align) == (190, Alignment.RIGHT)

    def test_overflow_starts_new_page(self, metadata):
        text = "\n".join(f"line {n}" for n in range(40))
        commands = render(build_blocks([text]), metadata, measure=char_count)

        assert count_pages(commands) == 2
        new_page_at = commands.index(NewPage())
        assert isinstance(commands[new_page_at - 1], DrawFooter)
        assert commands[new_page_at - 1].page_number == 1

        first_on_page_two = commands[new_page_at + 1]
        assert first_on_page_two.text.strip() == "line 35"
        assert first_on_page_two.y == 40
        assert commands[new_page_at - 2].y == 275
        assert commands[-1].page_label == "Page 2"

    def test_long_line_is_wrapped(self, metadata):
        words = " ".join(["word"] * 100)
        block = build_blocks([words])[0]
        drawn = lines_of(render([block], metadata, measure=char_count))

        assert len(drawn) > 1
        assert all(len(line.text) <= 170 for line in drawn)
        assert " ".join(line.text for line in drawn) == f"1. {words}"
        assert [b.y - a.y for a, b in zip(drawn, drawn[1:])] == [7] * (len(drawn) - 1)

    def test_wrapped_sub_point_keeps_indent_on_every_line(self, metadata):
        words = " ".join(["part"] * 60)
        block = build_blocks([f"Question\n{words}"])[0]
        drawn = lines_of(render([block], metadata, measure=char_count))[1:]

        assert len(drawn) > 1
        assert all(line.text.startswith(SUB_POINT_INDENT) for line in drawn)
        assert all(len(line.text) <= 170 for line in drawn)
        assert " ".join(line.text[len(SUB_POINT_INDENT):] for line in drawn) == words

    def test_empty_paper(self, metadata):
        commands = render([], metadata)
        assert [type(command) for command in commands] == [DrawHeader, DrawFooter]

    def test_empty_block_only_adds_gap(self, metadata):
        blocks = [TextBlock(source_index=0), TextBlock(source_index=1, lines=[TextLine("Next")])]
        drawn = lines_of(render(blocks, metadata))
        assert drawn[0].text == "2. Next"
        assert drawn[0].y == 75

    def test_hindi_page_label(self, sample_blocks, metadata):
        metadata.locale = Locale.HINDI
        assert render(sample_blocks, metadata)[-1].page_label == "पृष्ठ 1"

    def test_render_is_deterministic_and_pure(self, sample_blocks, metadata):
        before = [block.to_dict() for block in sample_blocks]
        metadata_before = metadata.to_dict()

        first = render(sample_blocks, metadata)
        second = render(sample_blocks, metadata)

        assert first == second
        assert [block.to_dict() for block in sample_blocks] == before
        assert metadata.to_dict() == metadata_before

    def test_commands_hold_copies_of_formats(self, sample_blocks, metadata):
        drawn = lines_of(render(sample_blocks, metadata))
        sample_blocks[0].lines[0].format.bold = True
        assert drawn[0].format.bold is False


class TestPaginationService:
    def test_uses_configured_attribution(self, sample_blocks, metadata):
        service = PaginationService(attribution="Test School")
        commands = service.render(sample_blocks, metadata)
        assert commands[-1].attribution == "Test School"

    def test_commands_serialize(self, sample_blocks, metadata):
        commands = PaginationService().render(sample_blocks, metadata)
        data = [command.to_dict() for command in commands]
        assert data[0]["type"] == "draw_header"
        assert data[1] == {
            "type": "draw_line",
            "text": "1. Explain photosynthesis.",
            "x": 20,
            "y": 70,
            "align": "left",
            "format": {"bold": False, "italic": False, "font_size": 11, "alignment": "left"},
        }
        assert data[-1]["type"] == "draw_footer"


def test_two_question_paper_end_to_end(metadata):
    raw_texts = ["1. What is 2+2?\na) 3\nb) 4", "2. Capital of France?"]
    blocks = build_blocks(raw_texts, TextFormat())

    assert [len(block.lines) for block in blocks] == [3, 1]
    assert blocks[0].lines[0].content == "1. What is 2+2?"

    commands = render(blocks, metadata, page_height=1000)

    assert sum(isinstance(command, DrawHeader) for command in commands) == 1
    assert sum(isinstance(command, DrawFooter) for command in commands) == 1
    assert NewPage() not in commands
    drawn = lines_of(commands)
    assert len(drawn) == 4
    assert all(a.y < b.y for a, b in zip(drawn, drawn[1:]))
