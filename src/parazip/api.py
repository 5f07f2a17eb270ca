"""
parazip 核心 API

根据命令分发到压缩或解压流程。CLI 和程序调用共用这一层。
"""

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .config import Options
from .errors import TargetNotFoundError, UsageError
from .model import CompressResult, ExtractResult
from .reader import extract_archive
from .writer import compress_path

ZIP_COMMANDS = ("zip", "compress", "z")
UNZIP_COMMANDS = ("unzip", "extract", "x")


def resolve_command(token: str) -> str:
    """将命令词（不区分大小写）归一为 'zip' 或 'unzip'"""
    command = token.strip().lower()
    if command in ZIP_COMMANDS:
        return "zip"
    if command in UNZIP_COMMANDS:
        return "unzip"
    raise UsageError(f"Unknown command: '{command}'")


def run(
    command: str,
    path: Union[str, Path],
    options: Optional[Options] = None,
) -> Union[CompressResult, ExtractResult]:
    """
    执行一次压缩或解压

    参数:
        command: 命令词，支持 zip/compress/z 和 unzip/extract/x
        path: 目标文件或目录
        options: 运行选项，None 使用默认值

    返回:
        CompressResult 或 ExtractResult
    """
    options = options or Options()
    target = Path(path)

    # 先检查路径，再识别命令
    if not target.exists():
        raise TargetNotFoundError(target)

    resolved = resolve_command(command)
    logger.debug(f"命令: {resolved}, 目标: {target}")

    if resolved == "zip":
        return compress_path(target, options)
    return extract_archive(target, options)


def format_duration(seconds: float) -> str:
    """格式化耗时，保留两位小数并自动选择单位"""
    if seconds >= 1:
        return f"{seconds:.2f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds * 1e6:.2f}µs"
