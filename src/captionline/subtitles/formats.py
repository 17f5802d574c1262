from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from captionline.captions.types import CaptionEntry
from captionline.errors import UnsupportedFormat

from .ass_writer import captions_to_ass
from .json_parser import parse_json
from .json_writer import captions_to_json
from .srt_parser import parse_srt
from .srt_writer import captions_to_srt
from .style import CaptionStyle
from .text import ordered_entries
from .vtt_parser import parse_vtt
from .vtt_writer import captions_to_vtt

Encoder = Callable[[Iterable[CaptionEntry], Optional[CaptionStyle]], str]
Decoder = Callable[[str], List[CaptionEntry]]


@dataclass(frozen=True)
class CaptionFormat:
    name: str
    label: str
    extension: str
    mime_type: str
    encode: Encoder
    # ASS 只支持导出，decode 为 None
    decode: Optional[Decoder] = None

    @property
    def can_import(self) -> bool:
        return self.decode is not None


@dataclass(frozen=True)
class ExportResult:
    format: str
    content: str
    mime_type: str
    extension: str
    filename: str


FORMATS: Dict[str, CaptionFormat] = {
    "srt": CaptionFormat(
        name="srt",
        label="SubRip",
        extension=".srt",
        mime_type="application/x-subrip",
        encode=lambda entries, style: captions_to_srt(entries),
        decode=parse_srt,
    ),
    "vtt": CaptionFormat(
        name="vtt",
        label="WebVTT",
        extension=".vtt",
        mime_type="text/vtt",
        encode=captions_to_vtt,
        decode=parse_vtt,
    ),
    "ass": CaptionFormat(
        name="ass",
        label="Advanced SubStation Alpha",
        extension=".ass",
        mime_type="text/plain",
        encode=captions_to_ass,
    ),
    "json": CaptionFormat(
        name="json",
        label="JSON",
        extension=".json",
        mime_type="application/json",
        encode=captions_to_json,
        decode=parse_json,
    ),
}


def get_format(name: str) -> CaptionFormat:
    key = name.lower().lstrip(".")
    if key == "ssa":
        key = "ass"
    if key == "webvtt":
        key = "vtt"
    fmt = FORMATS.get(key)
    if fmt is None:
        raise UnsupportedFormat(name)
    return fmt


def format_from_filename(path: str | Path) -> CaptionFormat:
    suffix = Path(path).suffix
    if not suffix:
        raise UnsupportedFormat(str(path), reason="无法从文件扩展名推断字幕格式")
    return get_format(suffix)


def export_captions(
    entries: Iterable[CaptionEntry],
    fmt: str,
    style: Optional[CaptionStyle] = None,
    filename_stem: str = "captions",
) -> ExportResult:
    """把字幕序列化为指定格式，返回内容、建议 MIME 类型与文件名。"""
    caption_format = get_format(fmt)
    content = caption_format.encode(ordered_entries(entries), style)
    return ExportResult(
        format=caption_format.name,
        content=content,
        mime_type=caption_format.mime_type,
        extension=caption_format.extension,
        filename=f"{filename_stem}{caption_format.extension}",
    )


def import_captions(content: str, fmt: str) -> List[CaptionEntry]:
    """按调用方指定的格式解析文本（不做自动识别）。"""
    caption_format = get_format(fmt)
    if caption_format.decode is None:
        raise UnsupportedFormat(caption_format.name, reason="该格式仅支持导出")
    return caption_format.decode(content)


def preview_captions(
    entries: Iterable[CaptionEntry],
    fmt: str,
    style: Optional[CaptionStyle] = None,
    limit: int = 3,
) -> str:
    """导出预览：只序列化最前面的 limit 条字幕。"""
    head = ordered_entries(entries)[: max(limit, 0)]
    return export_captions(head, fmt, style=style).content


def batch_export(
    entries: Iterable[CaptionEntry],
    formats: Sequence[str],
    style: Optional[CaptionStyle] = None,
    filename_stem: str = "captions",
) -> List[ExportResult]:
    items = ordered_entries(entries)
    return [
        export_captions(items, fmt, style=style, filename_stem=filename_stem)
        for fmt in formats
    ]


def write_captions(
    entries: Iterable[CaptionEntry],
    path: str | Path,
    fmt: Optional[str] = None,
    style: Optional[CaptionStyle] = None,
) -> Path:
    out_path = Path(path).expanduser().resolve()
    caption_format = get_format(fmt) if fmt else format_from_filename(out_path)
    result = export_captions(entries, caption_format.name, style=style)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(result.content, encoding="utf-8")
    return out_path


def read_captions(path: str | Path, fmt: Optional[str] = None) -> List[CaptionEntry]:
    in_path = Path(path).expanduser().resolve()
    if not in_path.is_file():
        raise FileNotFoundError(f"字幕文件不存在: {in_path}")
    caption_format = get_format(fmt) if fmt else format_from_filename(in_path)
    content = in_path.read_text(encoding="utf-8-sig")
    return import_captions(content, caption_format.name)
