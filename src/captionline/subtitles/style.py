from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

# 字幕位置 -> (WebVTT line 设置, ASS Alignment)
POSITIONS: Dict[str, Tuple[str, int]] = {
    "top": ("10%", 8),
    "middle": ("50%", 5),
    "bottom": ("90%", 2),
}


@dataclass
class CaptionStyle:
    """
    导出时使用的样式配置。

    引擎只把它转换成 WebVTT STYLE 块 / ASS Style 行，不做任何渲染或校验；
    样式由调用方显式传入，而不是从界面状态中读取。
    """

    font_family: str = "Arial, sans-serif"
    font_size: int = 24
    font_weight: str = "normal"
    text_color: str = "#ffffff"
    background_color: str = "#000000"
    # 背景不透明度（百分比 0-100）
    background_opacity: int = 80
    position: str = "bottom"
    text_outline: bool = False
    text_shadow: bool = False

    @property
    def primary_font(self) -> str:
        return self.font_family.split(",")[0].strip() or "Arial"

    @property
    def is_bold(self) -> bool:
        return self.font_weight.lower() in {"bold", "bolder", "700", "800", "900"}

    @property
    def vtt_line(self) -> str:
        return POSITIONS.get(self.position, POSITIONS["bottom"])[0]

    @property
    def ass_alignment(self) -> int:
        return POSITIONS.get(self.position, POSITIONS["bottom"])[1]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def hex_to_rgb(color: str) -> Optional[Tuple[int, int, int]]:
    match = _HEX_COLOR_RE.match(color.strip())
    if not match:
        return None
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def ass_alpha(opacity_percent: float) -> int:
    """不透明度百分比 -> ASS alpha（00 为不透明，FF 为全透明）。"""
    opacity = min(max(float(opacity_percent), 0.0), 100.0)
    # 50% 对应 0x80
    return int(math.floor((100 - opacity) * 255 / 100 + 0.5))


def ass_color(color: str, alpha: int = 0, fallback: str = "#ffffff") -> str:
    """#RRGGBB -> &HAABBGGRR。"""
    rgb = hex_to_rgb(color) or hex_to_rgb(fallback) or (255, 255, 255)
    r, g, b = rgb
    return f"&H{alpha:02X}{b:02X}{g:02X}{r:02X}"


def rgba_string(color: str, alpha: float) -> str:
    rgb = hex_to_rgb(color) or (0, 0, 0)
    r, g, b = rgb
    return f"rgba({r}, {g}, {b}, {alpha:g})"
