"""loguru 日志配置"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <blue>{elapsed}</blue> | <level>{level.icon} {level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {elapsed} | {level.icon} {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(level: str = "WARNING", log_file: Optional[str] = None):
    """配置 Loguru 日志系统

    控制台输出走 stderr，stdout 只保留结果行。

    Args:
        level: 控制台日志级别
        log_file: 可选的日志文件路径，记录 DEBUG 及以上

    Returns:
        配置好的 logger 实例
    """
    # 清除默认处理器
    logger.remove()

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            encoding="utf-8",
            format=FILE_FORMAT,
        )
        logger.debug(f"日志文件: {log_path}")

    return logger
