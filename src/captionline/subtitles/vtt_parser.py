from __future__ import annotations

import re
from typing import List, Optional

from captionline.captions.types import CaptionEntry
from captionline.timecode import code_to_seconds

from .text import normalize_newlines, strip_bom, unescape_entities
from .vtt_writer import STYLED_CLASS

_VTT_CODE = r"(?:\d{2,}:)?\d{2}:\d{2}\.\d{3}"
VTT_TIMING_RE = re.compile(rf"({_VTT_CODE})\s*-->\s*({_VTT_CODE})")
_STYLED_WRAPPER_RE = re.compile(
    rf"^<c\.{STYLED_CLASS}>(.*)</c>$",
    re.DOTALL,
)


def _clean_cue_text(text: str) -> str:
    match = _STYLED_WRAPPER_RE.match(text)
    if match:
        text = match.group(1)
    return unescape_entities(text)


def parse_vtt(content: str, language: Optional[str] = "en-US") -> List[CaptionEntry]:
    """
    解析 WebVTT 文本。

    第一条 "-->" 行之前的内容（WEBVTT 头、STYLE / NOTE 块）全部跳过；
    之后每条时间行吸收其后的非空行作为文本，直到空行或文件结束。
    """
    lines = normalize_newlines(strip_bom(content)).split("\n")
    i = 0
    while i < len(lines) and "-->" not in lines[i]:
        i += 1

    items: List[CaptionEntry] = []
    while i < len(lines):
        line = lines[i]
        i += 1
        if "-->" not in line:
            continue
        match = VTT_TIMING_RE.search(line)
        if not match:
            continue
        text_lines: List[str] = []
        while i < len(lines) and lines[i].strip() != "":
            text_lines.append(lines[i])
            i += 1
        if not text_lines:
            continue
        items.append(
            CaptionEntry(
                start=code_to_seconds(match.group(1), "vtt"),
                end=code_to_seconds(match.group(2), "vtt"),
                text=_clean_cue_text("\n".join(text_lines)),
                language=language,
            )
        )
    return items
