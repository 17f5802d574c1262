from __future__ import annotations

"""
Web 层与字幕引擎之间的集成点。

负责把上传内容解码为文本、按格式导入并整理成编辑会话，
Web 路由本身只处理请求参数与响应。
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import os

from captionline.config import CaptionEngineConfig
from captionline.captions import CaptionEditor, CaptionEntry
from captionline.errors import InvalidFormat
from captionline.subtitles import CaptionStyle, format_from_filename, get_format, import_captions


def get_engine_config() -> CaptionEngineConfig:
    return CaptionEngineConfig.from_env()


def get_max_upload_bytes() -> int:
    """
    上传大小上限，通过 CAPTIONLINE_WEB_MAX_UPLOAD_MB 控制（默认 10 MB）。
    """
    max_mb_env = os.getenv("CAPTIONLINE_WEB_MAX_UPLOAD_MB", "10")
    try:
        max_mb = int(max_mb_env)
    except ValueError:
        max_mb = 10
    return max_mb * 1024 * 1024


def decode_upload(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidFormat("上传文件不是 UTF-8 文本") from exc


def load_upload(
    filename: str,
    raw: bytes,
    source_format: Optional[str] = None,
    config: Optional[CaptionEngineConfig] = None,
) -> CaptionEditor:
    """
    将上传的字幕文件导入为一个新的编辑会话。

    未显式指定格式时按文件扩展名推断；导入时会统一做时长与重叠整理。
    """
    config = config or get_engine_config()
    caption_format = get_format(source_format) if source_format else format_from_filename(filename)
    entries = import_captions(decode_upload(raw), caption_format.name)
    editor = CaptionEditor.from_config(config)
    editor.load(entries)
    return editor


def build_style(
    font_family: str = "Arial, sans-serif",
    font_size: int = 24,
    position: str = "bottom",
    background_opacity: int = 80,
    text_color: str = "#ffffff",
    background_color: str = "#000000",
) -> CaptionStyle:
    return CaptionStyle(
        font_family=font_family,
        font_size=font_size,
        position=position,
        background_opacity=max(0, min(100, background_opacity)),
        text_color=text_color,
        background_color=background_color,
    )


def captions_payload(entries: List[CaptionEntry]) -> List[Dict[str, Any]]:
    return [
        {"index": index, **entry.to_dict()}
        for index, entry in enumerate(entries, start=1)
    ]


def download_name(filename: str, extension: str) -> str:
    stem = Path(filename).stem or "captions"
    return f"{stem}{extension}"
