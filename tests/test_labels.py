"""Tests for locale parsing and label lookup."""

import dataclasses

import pytest

from src.exceptions import ValidationError
from src.i18n.labels import LabelSet, Locale, classes_for, labels_for, subjects_for


@pytest.mark.parametrize("value", ["hindi", "Hindi", " HINDI ", Locale.HINDI])
def test_locale_parse(value):
    assert Locale.parse(value) is Locale.HINDI


@pytest.mark.parametrize("value", ["french", "", None, 3])
def test_locale_parse_rejects_unknown(value):
    with pytest.raises(ValidationError) as exc_info:
        Locale.parse(value)
    assert exc_info.value.field == "language"


def test_every_locale_has_complete_labels():
    for locale in Locale:
        labels = labels_for(locale)
        assert isinstance(labels, LabelSet)
        for field in dataclasses.fields(LabelSet):
            if field.name != "instructions":
                assert getattr(labels, field.name), f"{locale.value}.{field.name} is empty"
        assert len(labels.steps) == 4


def test_printed_labels():
    assert labels_for(Locale.ENGLISH).total_marks == "Total Marks"
    assert labels_for(Locale.HINDI).total_marks == "पूर्णांक"
    assert labels_for(Locale.HINDI).page_text == "पृष्ठ"


def test_option_lists():
    assert classes_for(Locale.ENGLISH)[0] == "Class 1"
    assert classes_for(Locale.HINDI)[-1] == "कक्षा 12"
    assert "Mathematics" in subjects_for(Locale.ENGLISH)
    assert len(subjects_for(Locale.HINDI)) == len(subjects_for(Locale.ENGLISH))


def test_option_lists_are_copies():
    classes_for(Locale.ENGLISH).append("Class 13")
    assert "Class 13" not in classes_for(Locale.ENGLISH)


def test_labels_to_dict():
    data = labels_for(Locale.ENGLISH).to_dict()
    assert data["steps"] == ["Fill Details", "Upload Images", "Edit Questions", "Preview"]
    assert data["print_button"] == "Print Paper"
