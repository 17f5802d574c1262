from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from captionline.captions.overlap import OverlapPolicy


def _env_float(name: str, default: float) -> float:
    env_value = os.getenv(name, "").strip()
    if not env_value:
        return default
    try:
        return float(env_value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    env_value = os.getenv(name, "").strip()
    if not env_value:
        return default
    try:
        return int(env_value)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    env_value = os.getenv(name, "").strip().lower()
    if env_value in {"1", "true", "yes", "on"}:
        return True
    if env_value in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass
class CaptionEngineConfig:
    """
    字幕引擎配置。

    min_duration / overlap_gap 默认为 0.1 秒 / 0.01 秒，
    通过 to_policy() 转换为编辑器使用的 OverlapPolicy。
    """

    min_duration: float = 0.1
    overlap_gap: float = 0.01
    allow_overlap: bool = False
    history_capacity: int = 50
    default_language: str = "en-US"
    generator: str = "captionline"

    def to_policy(self) -> OverlapPolicy:
        return OverlapPolicy(
            allow_overlap=self.allow_overlap,
            gap=self.overlap_gap,
            min_duration=self.min_duration,
        )

    @classmethod
    def from_env(
        cls,
        min_duration: Optional[float] = None,
        overlap_gap: Optional[float] = None,
        allow_overlap: Optional[bool] = None,
        history_capacity: Optional[int] = None,
        default_language: Optional[str] = None,
        generator: Optional[str] = None,
    ) -> "CaptionEngineConfig":
        """
        显式传入的参数优先，其次读取环境变量，最后使用默认值：
          - CAPTIONLINE_MIN_DURATION
          - CAPTIONLINE_OVERLAP_GAP
          - CAPTIONLINE_ALLOW_OVERLAP
          - CAPTIONLINE_HISTORY_CAPACITY
          - CAPTIONLINE_DEFAULT_LANGUAGE
        非法取值会被忽略并回退到默认值。
        """
        defaults = cls()

        if min_duration is None:
            min_duration = _env_float("CAPTIONLINE_MIN_DURATION", defaults.min_duration)
        if min_duration <= 0:
            min_duration = defaults.min_duration

        if overlap_gap is None:
            overlap_gap = _env_float("CAPTIONLINE_OVERLAP_GAP", defaults.overlap_gap)
        if overlap_gap < 0:
            overlap_gap = defaults.overlap_gap

        if allow_overlap is None:
            allow_overlap = _env_bool("CAPTIONLINE_ALLOW_OVERLAP", defaults.allow_overlap)

        if history_capacity is None:
            history_capacity = _env_int(
                "CAPTIONLINE_HISTORY_CAPACITY", defaults.history_capacity
            )
        if history_capacity < 1:
            history_capacity = defaults.history_capacity

        if default_language is None:
            default_language = (
                os.getenv("CAPTIONLINE_DEFAULT_LANGUAGE", "").strip()
                or defaults.default_language
            )

        return cls(
            min_duration=min_duration,
            overlap_gap=overlap_gap,
            allow_overlap=allow_overlap,
            history_capacity=history_capacity,
            default_language=default_language,
            generator=generator or defaults.generator,
        )
