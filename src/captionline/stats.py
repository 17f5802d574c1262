from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from captionline.captions.overlap import find_overlaps
from captionline.captions.types import CaptionEntry

READING_WORDS_PER_MINUTE = 200
LONG_TEXT_LIMIT = 200


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


@dataclass
class CaptionStats:
    total_captions: int
    total_duration: float
    total_words: int
    average_duration: float
    # 按每分钟 200 词估算的阅读时长（秒）
    reading_time: float


def word_count(text: str) -> int:
    return len(text.split())


def validate_for_export(entries: Iterable[CaptionEntry]) -> ValidationReport:
    """
    导出前检查。

    错误：没有字幕、开始时间为负、结束时间不晚于开始时间；
    警告：空文本、文本过长、相邻字幕重叠。
    """
    items = sorted(entries, key=lambda e: e.start)
    report = ValidationReport()
    if not items:
        report.errors.append("没有可导出的字幕")
        return report

    for number, entry in enumerate(items, start=1):
        if not entry.text or not entry.text.strip():
            report.warnings.append(f"第 {number} 条字幕文本为空")
        if entry.start < 0:
            report.errors.append(f"第 {number} 条字幕开始时间为负数")
        if not entry.end > entry.start:
            report.errors.append(f"第 {number} 条字幕时间无效（结束时间不晚于开始时间）")
        if entry.text and len(entry.text) > LONG_TEXT_LIMIT:
            report.warnings.append(
                f"第 {number} 条字幕文本过长（{len(entry.text)} 个字符）"
            )

    for first, second in find_overlaps(items):
        report.warnings.append(f"第 {first + 1} 条与第 {second + 1} 条字幕时间重叠")
    return report


def export_statistics(entries: Iterable[CaptionEntry]) -> CaptionStats:
    items = list(entries)
    if not items:
        return CaptionStats(0, 0.0, 0, 0.0, 0.0)
    total_words = sum(word_count(e.text) for e in items)
    total_duration = max(e.end for e in items)
    average_duration = sum(e.duration for e in items) / len(items)
    reading_time = total_words / READING_WORDS_PER_MINUTE * 60
    return CaptionStats(
        total_captions=len(items),
        total_duration=total_duration,
        total_words=total_words,
        average_duration=average_duration,
        reading_time=reading_time,
    )
