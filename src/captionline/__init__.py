from __future__ import annotations

from .config import CaptionEngineConfig
from .captions import CaptionCollection, CaptionEditor, CaptionEntry, EditHistory, OverlapPolicy
from .subtitles import CaptionStyle, export_captions, import_captions

__all__ = [
    "CaptionEngineConfig",
    "CaptionCollection",
    "CaptionEditor",
    "CaptionEntry",
    "EditHistory",
    "OverlapPolicy",
    "CaptionStyle",
    "export_captions",
    "import_captions",
]

__version__ = "0.1.0"
