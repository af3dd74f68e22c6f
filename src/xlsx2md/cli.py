"""
命令行入口
配置 loguru 日志，解析参数并执行转换
"""

import argparse
import sys

from loguru import logger
from pydantic import ValidationError

from .config import get_settings
from .converter import MarkdownConverter
from .exceptions import Xlsx2MdError
from .models import ConvertRequest


def _configure_logging(level: str | None = None) -> None:
    """配置 loguru 日志"""
    settings = get_settings()

    # 移除默认 handler
    logger.remove()

    # 添加控制台输出
    logger.add(
        sys.stderr,
        format=settings.log_format,
        level=level or settings.log_level,
        colorize=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xlsx2md",
        description="Convert an .xlsx workbook into Markdown tables",
    )
    parser.add_argument("input", help="Input .xlsx file")
    parser.add_argument("output", help="Output .md file")
    parser.add_argument(
        "--no-metadata",
        action="store_true",
        help="Omit the document metadata section",
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    settings = get_settings()

    try:
        request = ConvertRequest(
            input_path=args.input,
            output_path=args.output,
            include_metadata=settings.include_metadata and not args.no_metadata,
        )
    except ValidationError as e:
        print(f"Invalid arguments: {e}")
        return 2

    converter = MarkdownConverter(
        include_metadata=request.include_metadata,
        timestamp_format=settings.timestamp_format,
    )
    try:
        result = converter.convert(request.input_path, request.output_path)
    except Xlsx2MdError as e:
        logger.error(f"转换失败 [{e.code.value}]: {e.message}")
        print(f"Error during conversion: {e.message}")
        return 1

    print(result.status_message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
