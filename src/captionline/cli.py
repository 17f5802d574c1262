from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .env import load_dotenv_if_present
from .config import CaptionEngineConfig
from .captions import CaptionEditor
from .errors import CaptionError
from .stats import export_statistics, validate_for_export
from .subtitles import CaptionStyle, FORMATS, preview_captions, read_captions, write_captions


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="captionline",
        description="captionline: 字幕文件格式转换、批量替换与导出检查。",
    )
    parser.add_argument(
        "input",
        type=str,
        help="输入字幕文件路径（.srt / .vtt / .json）。",
    )
    parser.add_argument(
        "--from",
        dest="source_format",
        type=str,
        choices=[name for name, fmt in FORMATS.items() if fmt.can_import],
        default=None,
        help="输入格式（默认根据文件扩展名推断）。",
    )
    parser.add_argument(
        "--to",
        dest="target_format",
        type=str,
        choices=list(FORMATS),
        default="srt",
        help="输出格式：srt / vtt / ass / json（默认 srt）。",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="输出文件路径（默认: 与输入同目录同名，扩展名按输出格式）。",
    )
    parser.add_argument(
        "--replace",
        nargs=2,
        metavar=("SEARCH", "REPLACEMENT"),
        default=None,
        help="导出前对字幕文本做字面量替换（每条字幕仅替换第一次出现）。",
    )
    parser.add_argument(
        "--replace-all",
        action="store_true",
        help="配合 --replace 使用，替换每条字幕中的全部匹配。",
    )
    parser.add_argument(
        "--styled",
        action="store_true",
        help="在 VTT / JSON 中输出样式信息（ASS 总是包含样式行）。",
    )
    parser.add_argument(
        "--font",
        type=str,
        default="Arial, sans-serif",
        help="字体（默认: Arial, sans-serif）。",
    )
    parser.add_argument(
        "--font-size",
        type=int,
        default=24,
        help="字号（默认: 24）。",
    )
    parser.add_argument(
        "--position",
        type=str,
        choices=["top", "middle", "bottom"],
        default="bottom",
        help="字幕位置：top / middle / bottom。",
    )
    parser.add_argument(
        "--opacity",
        type=int,
        default=80,
        help="背景不透明度百分比（0-100，默认: 80）。",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="输出字幕统计与导出检查结果。",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="只打印前 3 条字幕的导出预览，不写文件。",
    )
    return parser


def _style_from_args(args: argparse.Namespace) -> CaptionStyle:
    return CaptionStyle(
        font_family=args.font,
        font_size=args.font_size,
        position=args.position,
        background_opacity=max(0, min(100, args.opacity)),
    )


def main(argv: list[str] | None = None) -> int:
    # 确保在解析参数和使用配置之前加载 .env 中的环境变量
    load_dotenv_if_present()
    if argv is None:
        argv = sys.argv[1:]

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    target_format = args.target_format
    style = _style_from_args(args)
    # ASS 始终需要样式行；VTT / JSON 仅在 --styled 时输出样式
    export_style = style if (args.styled or target_format == "ass") else None

    try:
        config = CaptionEngineConfig.from_env()
        editor = CaptionEditor.from_config(config)
        editor.load(read_captions(input_path, args.source_format))

        replaced = 0
        if args.replace:
            search, replacement = args.replace
            replaced = editor.replace_text(search, replacement, all=args.replace_all)

        entries = editor.entries()

        if args.preview:
            print(preview_captions(entries, target_format, style=export_style))
            return 0

        if args.output:
            output_path = Path(args.output)
        else:
            output_path = input_path.with_suffix(FORMATS[target_format].extension)
            if output_path.resolve() == input_path.resolve():
                output_path = input_path.with_name(
                    input_path.stem + ".converted" + FORMATS[target_format].extension
                )
        written = write_captions(entries, output_path, target_format, style=export_style)

        print("字幕导出完成")
        print(f"   输入: {input_path}")
        print(f"   输出: {written}")
        print(f"   条目数: {len(entries)}")
        if args.replace:
            print(f"   替换次数: {replaced}")

        if args.stats:
            stats = export_statistics(entries)
            report = validate_for_export(entries)
            print(f"   总时长: {stats.total_duration:.2f} 秒")
            print(f"   总词数: {stats.total_words}")
            print(f"   平均时长: {stats.average_duration:.2f} 秒")
            print(f"   阅读时长: {stats.reading_time:.1f} 秒")
            for error in report.errors:
                print(f"   [错误] {error}")
            for warning in report.warnings:
                print(f"   [警告] {warning}")
        return 0
    except KeyboardInterrupt:
        print("\n用户中断")
        return 1
    except (CaptionError, OSError) as exc:
        print(f"处理失败: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
