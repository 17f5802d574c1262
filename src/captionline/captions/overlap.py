from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from captionline.errors import CaptionNotFound, WouldCollapseEntry

from .types import CaptionEntry

# 浮点比较容差，用于判断“相邻字幕首尾相接”之类的边界情况
EPSILON = 1e-9


@dataclass(frozen=True)
class OverlapPolicy:
    """
    重叠处理策略。

    gap 为与相邻字幕之间保留的最小间隔（默认 0.01 秒），
    min_duration 为单条字幕的最小时长（默认 0.1 秒）。
    """

    allow_overlap: bool = False
    gap: float = 0.01
    min_duration: float = 0.1

    def __post_init__(self) -> None:
        if self.gap < 0:
            raise ValueError("gap 不能为负数")
        if self.min_duration <= 0:
            raise ValueError("min_duration 必须大于 0")


def sort_entries(entries: Sequence[CaptionEntry]) -> List[CaptionEntry]:
    # 稳定排序：开始时间相同的条目保持原有相对顺序
    return sorted(entries, key=lambda e: e.start)


def resolve_overlap(
    entries: Sequence[CaptionEntry],
    changed_id: str,
    policy: OverlapPolicy,
) -> List[CaptionEntry]:
    """
    针对刚被修改（或新增）的字幕，按相邻字幕收紧其时间区间。

    算法：
      1. 按开始时间重新排序；
      2. 若开始时间早于前一条的结束时间，则移到 prev.end + gap；
      3. 若结束时间晚于后一条的开始时间，则收到 next.start - gap；
      4. 调整后时长不足 min_duration 时抛出 WouldCollapseEntry。

    返回新的有序列表，不修改传入序列。
    """
    ordered = sort_entries(entries)
    if policy.allow_overlap:
        return ordered

    index = next((i for i, e in enumerate(ordered) if e.id == changed_id), -1)
    if index < 0:
        raise CaptionNotFound(changed_id)

    entry = ordered[index]
    start = entry.start
    end = entry.end

    if index > 0:
        prev = ordered[index - 1]
        if start < prev.end - EPSILON:
            start = prev.end + policy.gap

    if index < len(ordered) - 1:
        nxt = ordered[index + 1]
        if end > nxt.start + EPSILON:
            end = nxt.start - policy.gap

    if end <= start or (end - start) < policy.min_duration - EPSILON:
        raise WouldCollapseEntry(entry.id, start, end)

    if start != entry.start or end != entry.end:
        ordered[index] = entry.with_timing(start, end)
    return ordered


def trim_overlaps(entries: Sequence[CaptionEntry], policy: OverlapPolicy) -> List[CaptionEntry]:
    """
    整体导入时使用：按开始时间排序后，把与后一条重叠的字幕结尾收紧到 next.start - gap。
    """
    ordered = sort_entries(entries)
    if policy.allow_overlap:
        return ordered
    for i in range(len(ordered) - 1):
        current = ordered[i]
        nxt = ordered[i + 1]
        if current.end > nxt.start + EPSILON:
            end = nxt.start - policy.gap
            if end <= current.start or (end - current.start) < policy.min_duration - EPSILON:
                raise WouldCollapseEntry(current.id, current.start, end)
            ordered[i] = current.with_timing(current.start, end)
    return ordered


def find_overlaps(entries: Sequence[CaptionEntry]) -> List[tuple[int, int]]:
    """返回有序列表中相互重叠的相邻条目下标对。"""
    pairs: List[tuple[int, int]] = []
    for i in range(len(entries) - 1):
        if entries[i].end > entries[i + 1].start + EPSILON:
            pairs.append((i, i + 1))
    return pairs
