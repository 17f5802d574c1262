from __future__ import annotations

from .style import CaptionStyle
from .srt_writer import captions_to_srt
from .vtt_writer import captions_to_vtt
from .ass_writer import captions_to_ass
from .json_writer import captions_to_json
from .srt_parser import parse_srt
from .vtt_parser import parse_vtt
from .json_parser import parse_json
from .formats import (
    FORMATS,
    CaptionFormat,
    ExportResult,
    batch_export,
    export_captions,
    format_from_filename,
    get_format,
    import_captions,
    preview_captions,
    read_captions,
    write_captions,
)

__all__ = [
    "CaptionStyle",
    "captions_to_srt",
    "captions_to_vtt",
    "captions_to_ass",
    "captions_to_json",
    "parse_srt",
    "parse_vtt",
    "parse_json",
    "FORMATS",
    "CaptionFormat",
    "ExportResult",
    "batch_export",
    "export_captions",
    "format_from_filename",
    "get_format",
    "import_captions",
    "preview_captions",
    "read_captions",
    "write_captions",
]
