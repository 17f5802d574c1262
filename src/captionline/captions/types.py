from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


def new_caption_id() -> str:
    return f"cap_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class CaptionEntry:
    """
    单条字幕记录：一个时间区间加一段文本。

    条目本身不可变，时间轴或文本的修改都会生成新的实例，
    因此历史快照可以直接共享条目对象而不会互相影响。
    """

    start: float
    end: float
    text: str = ""
    id: str = field(default_factory=new_caption_id)
    # 识别来源的置信度（0.0 - 1.0），手动创建的字幕可以为空
    confidence: Optional[float] = None
    language: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.end - self.start

    def with_timing(self, start: float, end: float) -> "CaptionEntry":
        return replace(self, start=float(start), end=float(end))

    def with_text(self, text: str) -> "CaptionEntry":
        return replace(self, text=text)

    def with_id(self, caption_id: str) -> "CaptionEntry":
        return replace(self, id=caption_id)

    def contains(self, time: float) -> bool:
        return self.start <= time < self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "confidence": self.confidence,
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaptionEntry":
        caption_id = data.get("id") or new_caption_id()
        confidence = data.get("confidence")
        return cls(
            start=float(data["start"]),
            end=float(data["end"]),
            text=str(data.get("text") or ""),
            id=str(caption_id),
            confidence=float(confidence) if confidence is not None else None,
            language=data.get("language"),
        )
