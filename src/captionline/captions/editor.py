from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Sequence, Tuple

from captionline.errors import (
    InsufficientSelection,
    InvalidSplit,
    InvalidTiming,
    InvariantViolation,
    NonContiguousSelection,
    WouldCollapseEntry,
)

from .collection import CaptionCollection, Snapshot
from .history import EditHistory
from .overlap import EPSILON, OverlapPolicy, resolve_overlap, trim_overlaps
from .types import CaptionEntry, new_caption_id

if TYPE_CHECKING:
    from captionline.config import CaptionEngineConfig


@dataclass(frozen=True)
class EditEvent:
    """
    编辑完成后发给监听者的通知。

    kind 取值：add / delete / move / resize / text / split / merge /
    replace / load / clear / undo / redo。
    """

    kind: str
    ids: Tuple[str, ...] = ()


EditListener = Callable[[EditEvent], None]


class CaptionEditor:
    """
    字幕编辑会话：独占一个 CaptionCollection 与一份 EditHistory。

    每个编辑操作都先在工作副本上计算并校验，成功后再提交，
    同时把编辑前的状态压入历史（恰好一条快照）；失败时抛出异常，
    集合与历史都保持不变。

    单写者模型：同一时间只应有一个调用方（例如 UI 事件循环）在操作。
    """

    def __init__(
        self,
        entries: Iterable[CaptionEntry] = (),
        policy: Optional[OverlapPolicy] = None,
        history_capacity: int = 50,
        default_language: Optional[str] = None,
    ) -> None:
        self.policy = policy or OverlapPolicy()
        self.default_language = default_language
        self._history = EditHistory(capacity=history_capacity)
        self._listeners: List[EditListener] = []
        self._collection = CaptionCollection(entries)
        self._collection.validate(self.policy)

    @classmethod
    def from_config(
        cls,
        config: "CaptionEngineConfig",
        entries: Iterable[CaptionEntry] = (),
    ) -> "CaptionEditor":
        return cls(
            entries,
            policy=config.to_policy(),
            history_capacity=config.history_capacity,
            default_language=config.default_language,
        )

    # ------------------------------------------------------------------
    # 只读视图
    # ------------------------------------------------------------------

    @property
    def collection(self) -> CaptionCollection:
        # 返回副本，调用方无法绕过编辑操作修改内部状态
        return self._collection.copy()

    @property
    def history(self) -> EditHistory:
        return self._history

    def entries(self) -> Snapshot:
        return self._collection.entries

    def get(self, caption_id: str) -> CaptionEntry:
        return self._collection.get(caption_id)

    def __len__(self) -> int:
        return len(self._collection)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def undo_label(self) -> Optional[str]:
        return self._history.undo_label

    @property
    def redo_label(self) -> Optional[str]:
        return self._history.redo_label

    # ------------------------------------------------------------------
    # 通知
    # ------------------------------------------------------------------

    def subscribe(self, listener: EditListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EditListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: str, ids: Sequence[str] = ()) -> None:
        event = EditEvent(kind=kind, ids=tuple(ids))
        for listener in list(self._listeners):
            listener(event)

    def _commit(self, working: CaptionCollection, kind: str, ids: Sequence[str] = ()) -> None:
        working.validate(self.policy)
        self._history.push(self._collection.snapshot(), label=kind)
        self._collection = working
        self._notify(kind, ids)

    @staticmethod
    def _finite(value: float) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidTiming(value) from exc
        if not math.isfinite(number):
            raise InvalidTiming(value)
        return number

    def _normalize_timing(self, start: float, end: float) -> Tuple[float, float]:
        start = max(0.0, self._finite(start))
        end = self._finite(end)
        if end - start < self.policy.min_duration:
            end = start + self.policy.min_duration
        return start, end

    def _place(self, working: CaptionCollection, entry: CaptionEntry) -> CaptionEntry:
        working._put(entry)
        resolved = resolve_overlap(working.entries, entry.id, self.policy)
        working._reset(resolved)
        return working.get(entry.id)

    # ------------------------------------------------------------------
    # 编辑操作
    # ------------------------------------------------------------------

    def add(
        self,
        entry: Optional[CaptionEntry] = None,
        *,
        start: Optional[float] = None,
        end: Optional[float] = None,
        text: str = "",
        confidence: Optional[float] = None,
        language: Optional[str] = None,
    ) -> CaptionEntry:
        """
        新增一条字幕。

        可以直接传入 CaptionEntry，也可以只给出 start / end / text。
        id 缺失或与现有条目冲突时重新分配；时间按最小时长补齐后，
        再与相邻字幕做重叠处理。返回实际写入集合的条目。
        """
        if entry is None:
            if start is None:
                raise ValueError("新增字幕需要提供 entry 或 start")
            if end is None:
                end = start + self.policy.min_duration
            entry = CaptionEntry(
                start=start,
                end=end,
                text=text,
                confidence=confidence,
                language=language or self.default_language,
            )
        if not entry.id or entry.id in self._collection:
            entry = entry.with_id(new_caption_id())

        new_start, new_end = self._normalize_timing(entry.start, entry.end)
        entry = entry.with_timing(new_start, new_end)

        working = self._collection.copy()
        placed = self._place(working, entry)
        self._commit(working, "add", [placed.id])
        return placed

    def delete(self, caption_id: str) -> CaptionEntry:
        working = self._collection.copy()
        removed = working._discard(caption_id)
        self._commit(working, "delete", [caption_id])
        return removed

    def move(self, caption_id: str, new_start: float) -> CaptionEntry:
        """整体平移，保持时长不变；开始时间不小于 0。"""
        entry = self._collection.get(caption_id)
        duration = entry.duration
        start = max(0.0, self._finite(new_start))
        working = self._collection.copy()
        placed = self._place(working, entry.with_timing(start, start + duration))
        self._commit(working, "move", [caption_id])
        return placed

    def resize(self, caption_id: str, edge: str, new_time: float) -> CaptionEntry:
        """
        只调整开始或结束时间之一，另一端固定不动。

        edge="start" 时开始时间限制在 [0, end - min_duration]；
        edge="end" 时结束时间不小于 start + min_duration。
        重叠处理若需要移动固定的那一端，则抛出 WouldCollapseEntry。
        """
        entry = self._collection.get(caption_id)
        new_time = self._finite(new_time)
        min_duration = self.policy.min_duration
        if edge == "start":
            start = min(max(0.0, new_time), entry.end - min_duration)
            start = max(0.0, start)
            candidate = entry.with_timing(start, entry.end)
        elif edge == "end":
            end = max(new_time, entry.start + min_duration)
            candidate = entry.with_timing(entry.start, end)
        else:
            raise ValueError(f"edge 只能是 'start' 或 'end'，收到: {edge!r}")

        working = self._collection.copy()
        placed = self._place(working, candidate)
        if (edge == "start" and placed.end != candidate.end) or (
            edge == "end" and placed.start != candidate.start
        ):
            raise WouldCollapseEntry(caption_id, placed.start, placed.end)
        self._commit(working, "resize", [caption_id])
        return placed

    def set_text(self, caption_id: str, text: str) -> CaptionEntry:
        entry = self._collection.get(caption_id)
        if entry.text == text:
            return entry
        updated = entry.with_text(text)
        working = self._collection.copy()
        working._put(updated)
        self._commit(working, "text", [caption_id])
        return updated

    def split_at(self, caption_id: str, time: float) -> Tuple[CaptionEntry, CaptionEntry]:
        """
        在给定时间点把一条字幕拆成两条。

        文本按 已用时长 / 总时长 的比例，在最接近的词边界处切开；
        两条新字幕分别覆盖 [start, time) 与 [time, end)，原条目被原子替换。
        """
        entry = self._collection.get(caption_id)
        if not (entry.start < time < entry.end):
            raise InvalidSplit(caption_id, time, entry.start, entry.end)

        ratio = (time - entry.start) / entry.duration
        words = entry.text.split()
        boundary = int(math.floor(len(words) * ratio + 0.5))
        first_text = " ".join(words[:boundary])
        second_text = " ".join(words[boundary:])

        first = CaptionEntry(
            start=entry.start,
            end=time,
            text=first_text,
            confidence=entry.confidence,
            language=entry.language,
        )
        second = CaptionEntry(
            start=time,
            end=entry.end,
            text=second_text,
            confidence=entry.confidence,
            language=entry.language,
        )

        working = self._collection.copy()
        working._discard(caption_id)
        working._put(first)
        working._put(second)
        self._commit(working, "split", [caption_id, first.id, second.id])
        return first, second

    def merge_selection(self, caption_ids: Sequence[str]) -> CaptionEntry:
        """
        合并选中的字幕：按开始时间排序后以单个空格拼接文本，
        新条目覆盖 [最早开始, 最晚结束]，原条目被原子删除。
        不允许重叠时，区间内若还有未选中的字幕则抛出 NonContiguousSelection。
        """
        unique_ids = list(dict.fromkeys(caption_ids))
        if len(unique_ids) < 2:
            raise InsufficientSelection(len(unique_ids))

        selected = sorted(
            (self._collection.get(cid) for cid in unique_ids),
            key=lambda e: e.start,
        )
        start = min(e.start for e in selected)
        end = max(e.end for e in selected)
        if not self.policy.allow_overlap:
            chosen = set(unique_ids)
            for other in self._collection.entries:
                if other.id in chosen:
                    continue
                if other.start < end - EPSILON and other.end > start + EPSILON:
                    raise NonContiguousSelection(other.id)

        confidences = [e.confidence for e in selected if e.confidence is not None]
        merged = CaptionEntry(
            start=start,
            end=end,
            text=" ".join(e.text for e in selected),
            confidence=min(confidences) if confidences else None,
            language=selected[0].language,
        )

        working = self._collection.copy()
        for e in selected:
            working._discard(e.id)
        placed = self._place(working, merged)
        self._commit(working, "merge", unique_ids + [placed.id])
        return placed

    def replace_text(self, search: str, replacement: str, all: bool = False) -> int:
        """
        在所有字幕中做字面量查找替换（不是正则）。

        all=False 时每条字幕只替换第一次出现；all=True 时替换全部。
        返回替换次数；没有任何匹配时不产生历史记录。
        """
        if not search:
            return 0

        working = self._collection.copy()
        total = 0
        changed: List[str] = []
        for entry in self._collection.entries:
            count = entry.text.count(search)
            if count == 0:
                continue
            if all:
                new_text = entry.text.replace(search, replacement)
            else:
                new_text = entry.text.replace(search, replacement, 1)
                count = 1
            total += count
            if new_text != entry.text:
                working._put(entry.with_text(new_text))
                changed.append(entry.id)

        if not changed:
            return 0
        self._commit(working, "replace", changed)
        return total

    def load(self, entries: Iterable[CaptionEntry]) -> Snapshot:
        """
        用一组新字幕整体替换当前内容（导入场景）。

        每条字幕的开始时间修正为非负、时长补齐到最小时长；
        不允许重叠时，重叠条目的结尾收紧到下一条开始前。
        整个导入只记录一条历史，可以一次撤销。
        """
        normalized: List[CaptionEntry] = []
        seen: set[str] = set()
        for entry in entries:
            if not entry.id or entry.id in seen:
                entry = entry.with_id(new_caption_id())
            seen.add(entry.id)
            start, end = self._normalize_timing(entry.start, entry.end)
            normalized.append(entry.with_timing(start, end))

        working = CaptionCollection.from_entries(trim_overlaps(normalized, self.policy))
        self._commit(working, "load", working.ids())
        return working.entries

    def clear(self) -> None:
        if not len(self._collection):
            return
        ids = self._collection.ids()
        self._commit(CaptionCollection(), "clear", ids)

    # ------------------------------------------------------------------
    # 撤销 / 重做
    # ------------------------------------------------------------------

    def _restore(self, snapshot: Snapshot) -> CaptionCollection:
        restored = CaptionCollection(snapshot)
        try:
            restored.validate(self.policy)
        except InvariantViolation as exc:
            raise InvariantViolation(f"历史快照已损坏: {exc}") from exc
        return restored

    def undo(self) -> Snapshot:
        restored = self._restore(self._history.peek_undo())
        self._history.undo(self._collection.snapshot())
        self._collection = restored
        self._notify("undo", restored.ids())
        return restored.entries

    def redo(self) -> Snapshot:
        restored = self._restore(self._history.peek_redo())
        self._history.redo(self._collection.snapshot())
        self._collection = restored
        self._notify("redo", restored.ids())
        return restored.entries


__all__ = ["CaptionEditor", "EditEvent", "EditListener"]
