from __future__ import annotations

from .types import CaptionEntry, new_caption_id
from .overlap import OverlapPolicy, resolve_overlap
from .collection import CaptionCollection
from .history import EditHistory
from .editor import CaptionEditor, EditEvent

__all__ = [
    "CaptionEntry",
    "new_caption_id",
    "OverlapPolicy",
    "resolve_overlap",
    "CaptionCollection",
    "EditHistory",
    "CaptionEditor",
    "EditEvent",
]
