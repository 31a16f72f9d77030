"""Tests for building blocks from extracted text."""

from src.models.document_models import Alignment, TextFormat
from src.parsing.text_blocks import build_blocks, join_block_text, split_lines


def test_split_lines_drops_blank_lines():
    raw = "Q1 What is matter?\n\n   \na) Solid\r\nb) Liquid\n"
    assert split_lines(raw) == ["Q1 What is matter?", "a) Solid", "b) Liquid"]


def test_split_lines_keeps_text_exactly():
    assert split_lines("  indented line  ") == ["  indented line  "]


def test_split_lines_empty_input():
    assert split_lines("") == []
    assert split_lines(None) == []


def test_build_blocks_one_block_per_text_in_order():
    blocks = build_blocks(["First\nsecond", "Third", ""])

    assert [block.source_index for block in blocks] == [0, 1, 2]
    assert [block.question_number for block in blocks] == [1, 2, 3]
    assert [line.content for line in blocks[0].lines] == ["First", "second"]
    assert blocks[2].lines == []


def test_build_blocks_copies_default_format_per_line():
    default = TextFormat(bold=True, font_size=14, alignment=Alignment.CENTER)
    blocks = build_blocks(["a\nb"], default)

    first, second = blocks[0].lines
    assert first.format == default
    assert first.format is not default
    assert first.format is not second.format

    first.format.bold = False
    assert second.format.bold is True
    assert default.bold is True


def test_build_blocks_is_deterministic():
    texts = ["1. Name the planets\ni) inner\nii) outer"]
    assert build_blocks(texts) == build_blocks(texts)


def test_join_block_text_round_trips_lines():
    block = build_blocks(["one\n\ntwo\nthree"])[0]
    assert join_block_text(block) == "one\ntwo\nthree"
