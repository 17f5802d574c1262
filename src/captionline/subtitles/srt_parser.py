from __future__ import annotations

import re
from typing import List, Optional

from captionline.captions.types import CaptionEntry
from captionline.timecode import code_to_seconds

from .text import normalize_newlines, strip_bom, unescape_entities

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
SRT_TIMING_RE = re.compile(
    r"^(\d{2,}:\d{2}:\d{2},\d{3})\s*-->\s*(\d{2,}:\d{2}:\d{2},\d{3})\s*$"
)


def parse_srt(content: str, language: Optional[str] = "en-US") -> List[CaptionEntry]:
    """
    解析 SRT 文本。

    以空行切分块，每块第二行必须严格匹配 "HH:MM:SS,mmm --> HH:MM:SS,mmm"，
    其余行拼接为字幕文本。不符合格式的块直接跳过，不会中断整个导入。
    """
    text = normalize_newlines(strip_bom(content)).strip()
    if not text:
        return []

    items: List[CaptionEntry] = []
    for block in _BLOCK_SPLIT_RE.split(text):
        lines = block.strip().split("\n")
        if len(lines) < 3:
            continue
        match = SRT_TIMING_RE.match(lines[1].strip())
        if not match:
            continue
        items.append(
            CaptionEntry(
                start=code_to_seconds(match.group(1), "srt"),
                end=code_to_seconds(match.group(2), "srt"),
                text=unescape_entities("\n".join(lines[2:])),
                language=language,
            )
        )
    return items
