"""Locale and label lookup."""

from .labels import LabelSet, Locale, classes_for, labels_for, subjects_for

__all__ = ["LabelSet", "Locale", "labels_for", "classes_for", "subjects_for"]
