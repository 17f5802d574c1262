from __future__ import annotations

import math
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from captionline.errors import CaptionNotFound, InvariantViolation

from .overlap import EPSILON, OverlapPolicy, sort_entries
from .types import CaptionEntry

Snapshot = Tuple[CaptionEntry, ...]


class CaptionCollection:
    """
    按开始时间升序排列的字幕集合，以 id 为键。

    对外只提供只读视图；增删改只能通过 CaptionEditor 进行，
    以保证排序与不重叠等不变量在每次编辑后都成立。
    """

    def __init__(self, entries: Iterable[CaptionEntry] = ()) -> None:
        self._entries: List[CaptionEntry] = sort_entries(list(entries))
        self._by_id: Dict[str, CaptionEntry] = {e.id: e for e in self._entries}

    @classmethod
    def from_entries(cls, entries: Iterable[CaptionEntry]) -> "CaptionCollection":
        return cls(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CaptionEntry]:
        return iter(tuple(self._entries))

    def __contains__(self, caption_id: object) -> bool:
        return caption_id in self._by_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CaptionCollection):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CaptionCollection({len(self._entries)} entries)"

    @property
    def entries(self) -> Snapshot:
        return tuple(self._entries)

    @property
    def total_duration(self) -> float:
        if not self._entries:
            return 0.0
        return max(e.end for e in self._entries)

    def ids(self) -> List[str]:
        return [e.id for e in self._entries]

    def get(self, caption_id: str) -> CaptionEntry:
        try:
            return self._by_id[caption_id]
        except KeyError:
            raise CaptionNotFound(caption_id) from None

    def find(self, caption_id: str) -> Optional[CaptionEntry]:
        return self._by_id.get(caption_id)

    def index_of(self, caption_id: str) -> int:
        for i, entry in enumerate(self._entries):
            if entry.id == caption_id:
                return i
        raise CaptionNotFound(caption_id)

    def neighbors(self, caption_id: str) -> Tuple[Optional[CaptionEntry], Optional[CaptionEntry]]:
        """返回 (前一条, 后一条)，不存在时为 None。"""
        index = self.index_of(caption_id)
        prev = self._entries[index - 1] if index > 0 else None
        nxt = self._entries[index + 1] if index < len(self._entries) - 1 else None
        return prev, nxt

    def at_time(self, time: float) -> Optional[CaptionEntry]:
        """返回覆盖给定时间点的字幕（允许重叠时取最先开始的一条）。"""
        for entry in self._entries:
            if entry.start > time:
                break
            if entry.contains(time):
                return entry
        return None

    def snapshot(self) -> Snapshot:
        # 条目不可变，元组拷贝即完整的结构化副本
        return tuple(self._entries)

    def copy(self) -> "CaptionCollection":
        clone = CaptionCollection.__new__(CaptionCollection)
        clone._entries = list(self._entries)
        clone._by_id = dict(self._by_id)
        return clone

    def validate(self, policy: Optional[OverlapPolicy] = None) -> None:
        """
        校验全部不变量，失败时抛出 InvariantViolation：
          - 按开始时间升序；
          - id 唯一；
          - 时间为有限数值，start >= 0 且 end > start；
          - 不允许重叠时，相邻条目满足 entry[i].end <= entry[i+1].start。
        """
        policy = policy or OverlapPolicy()
        seen: set[str] = set()
        prev: Optional[CaptionEntry] = None
        for entry in self._entries:
            if entry.id in seen:
                raise InvariantViolation(f"字幕 id 重复: {entry.id}")
            seen.add(entry.id)
            if not (math.isfinite(entry.start) and math.isfinite(entry.end)):
                raise InvariantViolation(f"字幕 {entry.id} 的时间不是有限数值")
            if entry.start < 0:
                raise InvariantViolation(f"字幕 {entry.id} 开始时间为负数")
            if not entry.end > entry.start:
                raise InvariantViolation(f"字幕 {entry.id} 结束时间不晚于开始时间")
            if prev is not None:
                if entry.start < prev.start:
                    raise InvariantViolation(f"字幕 {entry.id} 未按开始时间排序")
                if not policy.allow_overlap and prev.end > entry.start + EPSILON:
                    raise InvariantViolation(f"字幕 {prev.id} 与 {entry.id} 时间重叠")
            prev = entry
        if len(seen) != len(self._by_id):
            raise InvariantViolation("字幕索引与条目列表不一致")

    # 以下方法仅供 CaptionEditor 在工作副本上使用

    def _put(self, entry: CaptionEntry) -> None:
        if entry.id in self._by_id:
            self._entries = [entry if e.id == entry.id else e for e in self._entries]
        else:
            self._entries.append(entry)
        self._entries = sort_entries(self._entries)
        self._by_id[entry.id] = entry

    def _discard(self, caption_id: str) -> CaptionEntry:
        entry = self.get(caption_id)
        self._entries = [e for e in self._entries if e.id != caption_id]
        del self._by_id[caption_id]
        return entry

    def _reset(self, entries: Iterable[CaptionEntry]) -> None:
        self._entries = sort_entries(list(entries))
        self._by_id = {e.id: e for e in self._entries}
