from __future__ import annotations

from typing import Iterable, Optional

from captionline.captions.types import CaptionEntry
from captionline.timecode import seconds_to_code

from .style import CaptionStyle, ass_alpha, ass_color
from .text import exportable_entries, normalize_newlines

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
    "OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, "
    "ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, "
    "Alignment, MarginL, MarginR, MarginV, Encoding"
)
EVENT_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"


def ass_style_line(style: CaptionStyle) -> str:
    """
    由样式配置计算唯一的 Default 样式行。

    颜色从 #RRGGBB 转为 ASS 的 &HAABBGGRR；背景色的 alpha
    按 (100 - 不透明度) * 2.55 四舍五入得到。
    """
    primary = ass_color(style.text_color, 0, fallback="#ffffff")
    back = ass_color(
        style.background_color,
        ass_alpha(style.background_opacity),
        fallback="#000000",
    )
    bold = "-1" if style.is_bold else "0"
    outline = "2" if style.text_outline else "0"
    shadow = "2" if style.text_shadow else "0"
    fields = [
        "Default",
        style.primary_font,
        str(style.font_size),
        primary,
        "&H000000FF",
        "&H00000000",
        back,
        bold,
        "0",
        "0",
        "0",
        "100",
        "100",
        "0",
        "0",
        "1",
        outline,
        shadow,
        str(style.ass_alignment),
        "10",
        "10",
        "10",
        "1",
    ]
    return "Style: " + ",".join(fields)


def escape_ass_text(text: str) -> str:
    # ASS 中需要对特殊字符进行转义，换行使用 \N
    return (
        normalize_newlines(text)
        .replace("\\", r"\\")
        .replace("{", r"\{")
        .replace("}", r"\}")
        .replace("\n", r"\N")
    )


def captions_to_ass(
    entries: Iterable[CaptionEntry],
    style: Optional[CaptionStyle] = None,
    play_res_x: int = 1920,
    play_res_y: int = 1080,
    title: str = "Video Captions",
) -> str:
    """
    将字幕转换为 ASS 文本：固定的 [Script Info] 头、一个计算出的 Default 样式、
    以及每条字幕一行 Dialogue。ASS 只支持导出。
    """
    style = style or CaptionStyle()
    header_lines: list[str] = [
        "[Script Info]",
        f"Title: {title}",
        "ScriptType: v4.00+",
        "WrapStyle: 0",
        "ScaledBorderAndShadow: yes",
        "YCbCr Matrix: TV.601",
        f"PlayResX: {play_res_x}",
        f"PlayResY: {play_res_y}",
        "",
        "[V4+ Styles]",
        STYLE_FORMAT,
        ass_style_line(style),
        "",
        "[Events]",
        EVENT_FORMAT,
    ]

    event_lines: list[str] = []
    for entry in exportable_entries(entries):
        start_ts = seconds_to_code(entry.start, "ass")
        end_ts = seconds_to_code(entry.end, "ass")
        safe_text = escape_ass_text(entry.text)
        event_lines.append(
            f"Dialogue: 0,{start_ts},{end_ts},Default,,0,0,0,,{safe_text}"
        )

    lines = header_lines + event_lines
    return "\n".join(lines) + "\n"
