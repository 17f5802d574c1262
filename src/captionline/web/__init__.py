from __future__ import annotations

"""
captionline Web 子模块

提供基于 FastAPI 的字幕转换与检查 API。
"""

from .app import app, create_app, main

__all__ = ["app", "create_app", "main"]
