from __future__ import annotations

"""
字幕引擎的异常体系。

所有异常都继承自 CaptionError（本身是 ValueError），
调用方（UI / CLI / Web）可以统一捕获后再决定如何展示给用户。
"""


class CaptionError(ValueError):
    """字幕引擎异常基类。"""


class CaptionNotFound(CaptionError, KeyError):
    def __init__(self, caption_id: str) -> None:
        super().__init__(f"字幕不存在: {caption_id}")
        self.caption_id = caption_id

    def __str__(self) -> str:
        # KeyError 默认会给消息加引号，这里保持与其它异常一致
        return self.args[0]


class InvalidSplit(CaptionError):
    def __init__(self, caption_id: str, time: float, start: float, end: float) -> None:
        super().__init__(
            f"拆分时间 {time:.3f}s 不在字幕 {caption_id} 的区间 ({start:.3f}, {end:.3f}) 内"
        )
        self.caption_id = caption_id
        self.time = time


class InsufficientSelection(CaptionError):
    def __init__(self, count: int) -> None:
        super().__init__(f"合并至少需要选择两条字幕，当前仅 {count} 条")
        self.count = count


class NonContiguousSelection(CaptionError):
    """合并区间内还有未被选中的字幕。"""

    def __init__(self, caption_id: str) -> None:
        super().__init__(f"合并区间内包含未选中的字幕: {caption_id}")
        self.caption_id = caption_id


class InvalidTiming(CaptionError):
    def __init__(self, value: object) -> None:
        super().__init__(f"时间值必须是有限的数字，收到: {value!r}")
        self.value = value


class WouldCollapseEntry(CaptionError):
    """
    重叠处理后字幕时长不足最小时长。

    这是硬失败：调用方的编辑要么完整生效，要么完全不生效。
    """

    def __init__(self, caption_id: str, start: float, end: float) -> None:
        super().__init__(
            f"字幕 {caption_id} 与相邻字幕重叠，调整后区间 [{start:.3f}, {end:.3f}] 过短"
        )
        self.caption_id = caption_id
        self.start = start
        self.end = end


class InvalidFormat(CaptionError):
    """导入内容缺少必需结构。"""


class UnsupportedFormat(CaptionError):
    def __init__(self, name: str, reason: str = "不支持的字幕格式") -> None:
        super().__init__(f"{reason}: {name}")
        self.name = name


class NothingToUndo(CaptionError):
    def __init__(self) -> None:
        super().__init__("没有可撤销的操作")


class NothingToRedo(CaptionError):
    def __init__(self) -> None:
        super().__init__("没有可重做的操作")


class InvariantViolation(CaptionError):
    """字幕集合（或历史快照）未通过不变量校验。"""


__all__ = [
    "CaptionError",
    "CaptionNotFound",
    "InvalidSplit",
    "InsufficientSelection",
    "NonContiguousSelection",
    "InvalidTiming",
    "WouldCollapseEntry",
    "InvalidFormat",
    "UnsupportedFormat",
    "NothingToUndo",
    "NothingToRedo",
    "InvariantViolation",
]
