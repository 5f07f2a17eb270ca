"""
文件系统遍历模块

使用 os.scandir 做非递归的深度优先遍历，只返回普通文件。
遍历中的错误（权限拒绝、条目消失等）只记录日志，不中断扫描。
"""

import os
from pathlib import Path
from typing import List

from loguru import logger


def list_files(root) -> List[Path]:
    """
    枚举 root 下的所有普通文件

    目录不跟随符号链接进入；指向普通文件的符号链接按文件处理。

    参数:
        root: 起始根目录

    返回:
        按路径排序的文件列表
    """
    files: List[Path] = []
    stack: List[str] = [os.fspath(root)]

    while stack:
        current_dir = stack.pop()

        try:
            with os.scandir(current_dir) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                        elif entry.is_file():
                            files.append(Path(entry.path))
                    except OSError as e:
                        logger.debug(f"跳过条目 {entry.path}: {e}")
        except OSError as e:
            logger.debug(f"无法读取目录 {current_dir}: {e}")

    files.sort()
    return files
