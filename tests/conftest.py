# tests/conftest.py
import pytest

from captionline.captions import CaptionEditor, CaptionEntry


@pytest.fixture
def editor():
    """Empty editing session with default policy (no overlap, 0.01s gap, 0.1s floor)."""
    return CaptionEditor()


@pytest.fixture
def three_captions():
    return [
        CaptionEntry(start=0.0, end=2.0, text="First line", id="a"),
        CaptionEntry(start=3.0, end=5.0, text="Second line", id="b"),
        CaptionEntry(start=6.0, end=8.5, text="Third line", id="c"),
    ]


@pytest.fixture
def loaded_editor(editor, three_captions):
    editor.load(three_captions)
    editor.history.clear()
    return editor


def assert_ordered_and_disjoint(entries):
    for prev, nxt in zip(entries, entries[1:]):
        assert prev.start <= nxt.start
        assert prev.end <= nxt.start + 1e-9
    for entry in entries:
        assert entry.end > entry.start
