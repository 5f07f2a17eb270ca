"""
并行读取模块

把文件列表分发到线程池，每个工作线程独立打开并完整读取一个文件，
产出 (相对名称, 字节) 对。所有任务结束后才返回（屏障），写入阶段随后在单线程中进行。
"""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from .config import READ_BUFFER_SIZE
from .errors import IngestError
from .model import IngestResult, SourceEntry


def get_default_workers() -> int:
    """默认工作线程数：可用 CPU 数"""
    return os.cpu_count() or 1


def entry_name(name: str) -> str:
    """把文件系统名称转成合法的 UTF-8 条目名，无法解码的字节替换为 U+FFFD"""
    return os.fsencode(name).decode("utf-8", "replace")


def relative_name(path: Path, root: Path) -> str:
    """计算相对 root 的条目名称，分隔符统一为 '/'"""
    return entry_name(Path(path).relative_to(root).as_posix())


def load_content(path, buffer_size: int = READ_BUFFER_SIZE) -> bytes:
    """读取单个文件的全部内容"""
    with open(path, "rb", buffering=buffer_size) as f:
        return f.read()


def _load_entry(path: Path, root: Path, buffer_size: int) -> SourceEntry:
    name = relative_name(path, root)
    return SourceEntry(name=name, data=load_content(path, buffer_size))


def ingest(
    paths: Sequence[Path],
    root: Path,
    workers: Optional[int] = None,
    fail_fast: bool = False,
    buffer_size: int = READ_BUFFER_SIZE,
) -> IngestResult:
    """
    并行读取一组文件

    参数:
        paths: 待读取的文件路径
        root: 计算相对名称的公共根目录
        workers: 线程数，None 表示使用可用 CPU 数
        fail_fast: True 时第一个失败即中止并抛出 IngestError；
            否则失败的条目被丢弃并记录在 skipped 中
        buffer_size: 每个文件的读缓冲大小

    返回:
        IngestResult，entries 按名称排序
    """
    result = IngestResult()
    if not paths:
        return result

    max_workers = workers or get_default_workers()
    root = Path(root)

    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        future_to_path = {
            executor.submit(_load_entry, Path(p), root, buffer_size): p
            for p in paths
        }

        for future in as_completed(future_to_path):
            path = future_to_path[future]
            try:
                result.entries.append(future.result())
            except (OSError, ValueError) as e:
                if fail_fast:
                    raise IngestError(str(path), e) from e
                logger.debug(f"跳过无法读取的文件 {path}: {e}")
                result.skipped.append(str(path))
    finally:
        # fail-fast 时取消尚未开始的任务
        executor.shutdown(wait=True, cancel_futures=fail_fast)

    result.entries.sort(key=lambda e: e.name)
    result.skipped.sort()
    logger.debug(
        f"读取完成: {len(result.entries)} 个文件, {result.total_bytes()} 字节, 跳过 {len(result.skipped)} 个"
    )
    return result
