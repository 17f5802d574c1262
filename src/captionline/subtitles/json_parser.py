from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Optional

from captionline.captions.types import CaptionEntry
from captionline.errors import InvalidFormat
from captionline.timecode import code_to_seconds

from .text import strip_bom


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _time_value(value: Any) -> Optional[float]:
    if isinstance(value, str) and value.strip():
        return code_to_seconds(value)
    return _number(value)


def _pick(item: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in item and item[key] is not None:
            return item[key]
    return None


def parse_json(content: str, language: Optional[str] = "en-US") -> List[CaptionEntry]:
    """
    解析 JSON 交换格式。

    根对象必须包含 captions 数组，否则抛出 InvalidFormat；
    每个元素需要 text / start / end（兼容 startTime / endTime），
    缺失必需字段的元素被跳过，id 与 language 缺省时自动补齐。
    """
    try:
        data = json.loads(strip_bom(content))
    except json.JSONDecodeError as exc:
        raise InvalidFormat(f"JSON 解析失败: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("captions"), list):
        raise InvalidFormat("JSON 缺少 captions 数组")

    items: List[CaptionEntry] = []
    for raw in data["captions"]:
        if not isinstance(raw, dict):
            continue
        text = raw.get("text")
        start = _time_value(_pick(raw, "start", "startTime"))
        end = _time_value(_pick(raw, "end", "endTime"))
        if not isinstance(text, str) or start is None or end is None:
            continue

        items.append(
            CaptionEntry.from_dict(
                {
                    "id": raw.get("id"),
                    "start": start,
                    "end": end,
                    "text": text,
                    "confidence": _number(raw.get("confidence")),
                    "language": raw.get("language") or language,
                }
            )
        )
    return items
