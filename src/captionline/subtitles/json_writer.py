from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from captionline.captions.types import CaptionEntry
from captionline.timecode import seconds_to_code

from .style import CaptionStyle
from .text import ordered_entries

JSON_FORMAT_VERSION = "1.0"


def captions_to_payload(
    entries: Iterable[CaptionEntry],
    style: Optional[CaptionStyle] = None,
    generator: str = "captionline",
    exported_at: Optional[datetime] = None,
    default_language: str = "en-US",
) -> Dict[str, Any]:
    """
    构造 JSON 交换格式的数据结构（未序列化）。

    与其它格式不同，JSON 会保留空文本的字幕。
    """
    items = ordered_entries(entries)
    exported_at = exported_at or datetime.now(timezone.utc)
    duration = max((e.end for e in items), default=0.0)

    captions: List[Dict[str, Any]] = []
    for index, entry in enumerate(items, start=1):
        captions.append(
            {
                "index": index,
                "id": entry.id,
                "text": entry.text,
                "start": entry.start,
                "end": entry.end,
                "duration": round(entry.end - entry.start, 3),
                "startFormatted": seconds_to_code(entry.start, "srt"),
                "endFormatted": seconds_to_code(entry.end, "srt"),
                "language": entry.language or default_language,
                "confidence": entry.confidence,
            }
        )

    return {
        "metadata": {
            "title": "Video Captions",
            "generator": generator,
            "version": JSON_FORMAT_VERSION,
            "exportDate": exported_at.isoformat(),
            "totalCaptions": len(captions),
            "duration": duration,
        },
        "styling": style.to_dict() if style is not None else None,
        "captions": captions,
    }


def captions_to_json(
    entries: Iterable[CaptionEntry],
    style: Optional[CaptionStyle] = None,
    generator: str = "captionline",
    exported_at: Optional[datetime] = None,
    default_language: str = "en-US",
) -> str:
    payload = captions_to_payload(
        entries,
        style=style,
        generator=generator,
        exported_at=exported_at,
        default_language=default_language,
    )
    return json.dumps(payload, ensure_ascii=False, indent=2)
