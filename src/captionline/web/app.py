from __future__ import annotations

import os
from dataclasses import asdict

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response

from captionline import __version__
from captionline.env import load_dotenv_if_present
from captionline.errors import CaptionError
from captionline.stats import export_statistics, validate_for_export
from captionline.subtitles import FORMATS, export_captions, get_format
from .dependencies import (
    build_style,
    captions_payload,
    download_name,
    get_max_upload_bytes,
    load_upload,
)


def _read_upload(file: UploadFile) -> bytes:
    # 控制最大上传大小，避免误上传超大文件
    max_bytes = get_max_upload_bytes()
    chunks: list[bytes] = []
    copied = 0
    chunk_size = 1024 * 1024
    while True:
        chunk = file.file.read(chunk_size)
        if not chunk:
            break
        copied += len(chunk)
        if copied > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"上传文件过大，超过限制 {max_bytes // (1024 * 1024)} MB。",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def create_app() -> FastAPI:
    """
    创建并配置 FastAPI 应用。

    - 加载 .env 环境变量；
    - 注册健康检查、格式列表、格式转换与字幕检查接口。

    服务本身不保存任何文件，转换结果直接随响应返回。
    """
    load_dotenv_if_present()

    app = FastAPI(
        title="captionline Web",
        description="字幕格式转换与导出检查 API。",
        version=__version__,
    )

    @app.get("/health", response_class=JSONResponse)
    async def health() -> dict[str, str]:
        """
        简单健康检查，用于部署与监控。
        """
        return {"status": "ok"}

    @app.get("/api/formats", response_class=JSONResponse)
    async def list_formats() -> JSONResponse:
        return JSONResponse(
            {
                "formats": [
                    {
                        "name": fmt.name,
                        "label": fmt.label,
                        "extension": fmt.extension,
                        "mime_type": fmt.mime_type,
                        "can_import": fmt.can_import,
                    }
                    for fmt in FORMATS.values()
                ]
            }
        )

    @app.post("/api/convert")
    def convert_api(
        file: UploadFile = File(...),
        target: str = Form("srt"),
        source_format: str = Form(""),
        styled: bool = Form(False),
        font_family: str = Form("Arial, sans-serif"),
        font_size: int = Form(24),
        position: str = Form("bottom"),
        opacity: int = Form(80),
        replace_search: str = Form(""),
        replace_with: str = Form(""),
        replace_all: bool = Form(False),
    ) -> Response:
        """
        上传字幕文件并转换为目标格式，直接返回转换后的文件内容。
        """
        if not file.filename:
            raise HTTPException(status_code=400, detail="未选择要上传的文件。")

        raw = _read_upload(file)
        try:
            target_format = get_format(target)
            editor = load_upload(file.filename, raw, source_format.strip() or None)
            if replace_search:
                editor.replace_text(replace_search, replace_with, all=replace_all)
            style = build_style(
                font_family=font_family,
                font_size=font_size,
                position=position,
                background_opacity=opacity,
            )
            export_style = style if (styled or target_format.name == "ass") else None
            result = export_captions(editor.entries(), target_format.name, style=export_style)
        except CaptionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        filename = download_name(file.filename, result.extension)
        return Response(
            content=result.content,
            media_type=result.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/api/inspect", response_class=JSONResponse)
    def inspect_api(
        file: UploadFile = File(...),
        source_format: str = Form(""),
    ) -> JSONResponse:
        """
        解析上传的字幕文件，返回整理后的字幕列表、统计信息与导出检查结果。
        """
        if not file.filename:
            raise HTTPException(status_code=400, detail="未选择要上传的文件。")

        raw = _read_upload(file)
        try:
            editor = load_upload(file.filename, raw, source_format.strip() or None)
        except CaptionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        entries = list(editor.entries())
        report = validate_for_export(entries)
        return JSONResponse(
            {
                "input_name": file.filename,
                "total_count": len(entries),
                "captions": captions_payload(entries),
                "stats": asdict(export_statistics(entries)),
                "validation": {
                    "valid": report.valid,
                    "errors": report.errors,
                    "warnings": report.warnings,
                },
            }
        )

    return app


# 供 uvicorn 等 ASGI 服务器直接引用
app = create_app()


def main() -> None:
    """
    本地启动 Web 服务的入口。

    可通过环境变量控制监听地址与端口：
      - CAPTIONLINE_WEB_HOST（默认 127.0.0.1）
      - CAPTIONLINE_WEB_PORT（默认 8000）
    """
    try:
        import uvicorn  # type: ignore[import]
    except ImportError as exc:  # pragma: no cover - 提示信息即可
        print("启动失败：未安装 uvicorn。请使用 `pip install captionline[web]` 安装 Web 依赖。")
        raise SystemExit(1) from exc

    host = os.getenv("CAPTIONLINE_WEB_HOST", "127.0.0.1")
    port_str = os.getenv("CAPTIONLINE_WEB_PORT", "8000")
    try:
        port = int(port_str)
    except ValueError:
        port = 8000

    uvicorn.run("captionline.web.app:app", host=host, port=port, reload=False)
