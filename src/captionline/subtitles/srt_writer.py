from __future__ import annotations

from typing import Iterable, List

from captionline.captions.types import CaptionEntry
from captionline.timecode import seconds_to_code

from .text import collapse_blank_lines, escape_entities, exportable_entries


def captions_to_srt(entries: Iterable[CaptionEntry]) -> str:
    """
    将字幕转换为 SRT 文本。

    序号从 1 开始连续编号（与字幕 id 无关），文本只做 & < > 转义，
    文本中的空白行会被去掉（空行是块分隔符），
    输出末尾不保留空行。
    """
    blocks: List[str] = []
    for index, entry in enumerate(exportable_entries(entries), start=1):
        start_ts = seconds_to_code(entry.start, "srt")
        end_ts = seconds_to_code(entry.end, "srt")
        text = escape_entities(collapse_blank_lines(entry.text))
        blocks.append(f"{index}\n{start_ts} --> {end_ts}\n{text}\n\n")
    return "".join(blocks).rstrip("\n")
