from __future__ import annotations

from typing import Iterable, List

from captionline.captions.types import CaptionEntry


def ordered_entries(entries: Iterable[CaptionEntry]) -> List[CaptionEntry]:
    return sorted(entries, key=lambda e: e.start)


def exportable_entries(entries: Iterable[CaptionEntry]) -> List[CaptionEntry]:
    """按开始时间排序，并跳过空白文本的字幕（SRT / VTT / ASS 不输出空条目）。"""
    return [e for e in ordered_entries(entries) if e.text and e.text.strip()]


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def escape_entities(text: str) -> str:
    # 只转义 & < >，& 必须最先处理
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def unescape_entities(text: str) -> str:
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text


def collapse_blank_lines(text: str) -> str:
    # SRT / VTT 以空行分隔块，字幕文本内部不能出现空白行
    lines = normalize_newlines(text).split("\n")
    return "\n".join(line for line in lines if line.strip())
