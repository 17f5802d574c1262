from __future__ import annotations

import math
import re
from typing import Literal

TimeFormat = Literal["srt", "vtt", "ass", "display"]

TIME_FORMATS = ("srt", "vtt", "ass", "display")

_FIELD_SPLIT_RE = re.compile(r"([:.,])")
_DIGITS_RE = re.compile(r"[0-9]+")


def _sanitize_seconds(seconds: float) -> float:
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return value


def _split_units(total_units: int, units_per_second: int) -> tuple[int, int, int, int]:
    frac = total_units % units_per_second
    total_seconds = total_units // units_per_second
    s = total_seconds % 60
    total_minutes = total_seconds // 60
    m = total_minutes % 60
    h = total_minutes // 60
    return h, m, s, frac


def seconds_to_code(seconds: float, fmt: str) -> str:
    """
    将秒数转换为指定格式的时间码。

    - srt     : HH:MM:SS,mmm
    - vtt     : HH:MM:SS.mmm
    - ass     : H:MM:SS.cc
    - display : MM:SS（不少于 1 小时时为 HH:MM:SS）

    负数、NaN 与无穷大一律按 0 处理。
    """
    key = fmt.lower()
    value = _sanitize_seconds(seconds)

    if key in {"srt", "vtt"}:
        h, m, s, ms = _split_units(int(round(value * 1000)), 1000)
        sep = "," if key == "srt" else "."
        return f"{h:02d}:{m:02d}:{s:02d}{sep}{ms:03d}"
    if key == "ass":
        h, m, s, cs = _split_units(int(round(value * 100)), 100)
        return f"{h:d}:{m:02d}:{s:02d}.{cs:02d}"
    if key == "display":
        h, m, s, _ = _split_units(int(value), 1)
        if h > 0:
            return f"{h:02d}:{m:02d}:{s:02d}"
        return f"{m:02d}:{s:02d}"
    raise ValueError(f"未知的时间码格式: {fmt}")


def _fraction(digits: str) -> float:
    if not digits:
        return 0.0
    return int(digits) / (10 ** len(digits))


def _parse_bare(code: str) -> float:
    try:
        value = float(code.replace(",", "."))
    except ValueError:
        return 0.0
    return _sanitize_seconds(value)


def code_to_seconds(code: str, fmt: str | None = None) -> float:
    """
    将时间码解析为秒数。

    对所有格式都同时接受 "." 与 "," 作为小数分隔符，并支持不完整写法：
      - 4 段：H:M:S.frac
      - 3 段：H:M:S 或 M:S.frac（按最后一个分隔符与字段取值区分）
      - 2 段：M:S 或 S.frac
    其它无法识别的内容按浮点数解析，仍失败则返回 0。

    fmt 仅用于与 seconds_to_code 对称，解析本身是宽松的。
    """
    if fmt is not None and fmt.lower() not in TIME_FORMATS:
        raise ValueError(f"未知的时间码格式: {fmt}")
    if code is None:
        return 0.0
    text = str(code).strip()
    if not text:
        return 0.0

    tokens = _FIELD_SPLIT_RE.split(text)
    fields = tokens[0::2]
    seps = tokens[1::2]
    if len(fields) < 2 or not all(_DIGITS_RE.fullmatch(f) for f in fields):
        return _parse_bare(text)

    # 小数分隔符只能出现在最后一段之前
    if any(sep in ".," for sep in seps[:-1]):
        return _parse_bare(text)

    nums = [int(f) for f in fields]
    last_sep = seps[-1]

    if len(fields) == 4:
        if last_sep == ":":
            return _parse_bare(text)
        h, m, s = nums[0], nums[1], nums[2]
        return h * 3600 + m * 60 + s + _fraction(fields[3])

    if len(fields) == 3:
        if last_sep == ":" and nums[2] < 60 and nums[0] < 60:
            return nums[0] * 3600 + nums[1] * 60 + nums[2]
        # 第三段不可能是秒数，视为 分:秒:小数
        return nums[0] * 60 + nums[1] + _fraction(fields[2])

    if len(fields) == 2:
        if last_sep == ":":
            return nums[0] * 60 + nums[1]
        return nums[0] + _fraction(fields[1])

    return _parse_bare(text)


__all__ = ["TimeFormat", "TIME_FORMATS", "seconds_to_code", "code_to_seconds"]
