from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from captionline.errors import NothingToRedo, NothingToUndo

from .types import CaptionEntry

Snapshot = Tuple[CaptionEntry, ...]


@dataclass(frozen=True)
class HistoryRecord:
    entries: Snapshot
    label: str = ""


class EditHistory:
    """
    基于快照的撤销/重做历史。

    - past：可撤销的快照（编辑前状态），超过 capacity 时丢弃最旧的一条；
    - future：撤销后可重做的快照，任何新的编辑都会清空它。

    快照由不可变的 CaptionEntry 组成，因此保存元组即可，不会与当前状态互相引用出错。
    每次编辑的成本与字幕条数成正比（几百条规模下可忽略）。
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError("capacity 必须至少为 1")
        self.capacity = capacity
        self._past: List[HistoryRecord] = []
        self._future: List[HistoryRecord] = []

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    @property
    def undo_depth(self) -> int:
        return len(self._past)

    @property
    def redo_depth(self) -> int:
        return len(self._future)

    @property
    def undo_label(self) -> Optional[str]:
        return self._past[-1].label if self._past else None

    @property
    def redo_label(self) -> Optional[str]:
        return self._future[-1].label if self._future else None

    def push(self, snapshot: Snapshot, label: str = "") -> None:
        """记录一次编辑前的状态，并丢弃现有的重做分支。"""
        self._past.append(HistoryRecord(tuple(snapshot), label))
        while len(self._past) > self.capacity:
            self._past.pop(0)
        self._future.clear()

    def peek_undo(self) -> Snapshot:
        if not self._past:
            raise NothingToUndo()
        return self._past[-1].entries

    def peek_redo(self) -> Snapshot:
        if not self._future:
            raise NothingToRedo()
        return self._future[-1].entries

    def undo(self, current: Snapshot) -> Snapshot:
        """把当前状态移入重做分支，返回最近一次的历史快照。"""
        if not self._past:
            raise NothingToUndo()
        record = self._past.pop()
        self._future.append(HistoryRecord(tuple(current), record.label))
        return record.entries

    def redo(self, current: Snapshot) -> Snapshot:
        """把当前状态移回可撤销分支，返回下一条重做快照。"""
        if not self._future:
            raise NothingToRedo()
        record = self._future.pop()
        self._past.append(HistoryRecord(tuple(current), record.label))
        while len(self._past) > self.capacity:
            self._past.pop(0)
        return record.entries

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    def __len__(self) -> int:
        return len(self._past) + len(self._future)
