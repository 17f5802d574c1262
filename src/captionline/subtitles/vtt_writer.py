from __future__ import annotations

from typing import Iterable, List, Optional

from captionline.captions.types import CaptionEntry
from captionline.timecode import seconds_to_code

from .style import CaptionStyle, rgba_string
from .text import collapse_blank_lines, escape_entities, exportable_entries

STYLED_CLASS = "styled"

_OUTLINE_SHADOW = "-1px -1px 0 #000, 1px -1px 0 #000, -1px 1px 0 #000, 1px 1px 0 #000"
_DROP_SHADOW = "2px 2px 4px rgba(0,0,0,0.5)"


def vtt_style_block(style: CaptionStyle) -> str:
    """根据样式配置生成 WebVTT 的 STYLE 块（作用于 ::cue(.styled)）。"""
    lines = [
        "STYLE",
        f"::cue(.{STYLED_CLASS}) {{",
        f"    font-family: {style.font_family};",
        f"    font-size: {style.font_size}px;",
        f"    font-weight: {style.font_weight};",
        f"    color: {style.text_color};",
        "    background-color: "
        f"{rgba_string(style.background_color, style.background_opacity / 100)};",
    ]
    shadows = []
    if style.text_outline:
        shadows.append(_OUTLINE_SHADOW)
    if style.text_shadow:
        shadows.append(_DROP_SHADOW)
    if shadows:
        lines.append(f"    text-shadow: {', '.join(shadows)};")
    lines.append("}")
    return "\n".join(lines)


def vtt_cue_settings(style: CaptionStyle) -> str:
    return f" line:{style.vtt_line}"


def captions_to_vtt(
    entries: Iterable[CaptionEntry],
    style: Optional[CaptionStyle] = None,
) -> str:
    """
    将字幕转换为 WebVTT 文本。

    传入 style 时：在头部之后插入一次 STYLE 块，每条 cue 追加位置设置，
    文本包裹在 <c.styled> 中；不传则输出最简 WebVTT。
    """
    parts: List[str] = ["WEBVTT\n\n"]
    if style is not None:
        parts.append(vtt_style_block(style) + "\n\n")

    settings = vtt_cue_settings(style) if style is not None else ""
    for index, entry in enumerate(exportable_entries(entries), start=1):
        start_ts = seconds_to_code(entry.start, "vtt")
        end_ts = seconds_to_code(entry.end, "vtt")
        text = escape_entities(collapse_blank_lines(entry.text))
        if style is not None:
            text = f"<c.{STYLED_CLASS}>{text}</c>"
        parts.append(f"{index}\n{start_ts} --> {end_ts}{settings}\n{text}\n\n")
    return "".join(parts).rstrip("\n")
