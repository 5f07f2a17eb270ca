"""
压缩包解压模块

逐个条目解压到以压缩包名命名的同级目录。
无法安全解析到目标目录内的条目会被跳过，不抛出错误。
"""

from __future__ import annotations

import os
import shutil
import time
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Optional

from loguru import logger

from .config import READ_BUFFER_SIZE, Options
from .errors import ArchiveFormatError, FatalIOError
from .model import ExtractResult


def enclosed_name(name: str) -> Optional[PurePosixPath]:
    """
    将条目名称规范化为目标目录内的相对路径

    含 NUL、绝对路径、盘符或 '..' 越过根目录的名称返回 None。
    '\\' 也视为分隔符；'.' 段被忽略。
    """
    if not name or "\0" in name:
        return None
    normalized = name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts: list[str] = []
    for index, segment in enumerate(normalized.split("/")):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                return None
            parts.pop()
            continue
        # 只有首段的盘符前缀 (C:) 视为绝对路径
        if index == 0 and len(segment) >= 2 and segment[0].isalpha() and segment[1] == ":":
            return None
        parts.append(segment)

    if not parts:
        return None
    return PurePosixPath(*parts)


def extract_dir_for(path) -> Path:
    """解压目标目录：压缩包所在目录下的同名（去扩展名）文件夹"""
    path = Path(path)
    return path.parent / (path.stem or path.name)


def extract_archive(path, options: Optional[Options] = None) -> ExtractResult:
    """解压整个压缩包，返回解压结果"""
    options = options or Options()
    start = time.perf_counter()
    archive_path = Path(os.path.abspath(path))
    out_dir = extract_dir_for(archive_path)

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FatalIOError(f"cannot create {out_dir}: {e}") from e

    try:
        zf = zipfile.ZipFile(archive_path)
    except zipfile.BadZipFile as e:
        raise ArchiveFormatError(f"{archive_path}: {e}") from e
    except OSError as e:
        raise FatalIOError(f"cannot open {archive_path}: {e}") from e

    extracted = 0
    skipped: list[str] = []
    with zf:
        for info in zf.infolist():
            relative = enclosed_name(info.filename)
            if relative is None:
                logger.debug(f"跳过不安全的条目: {info.filename!r}")
                skipped.append(info.filename)
                continue

            target = out_dir.joinpath(*relative.parts)
            try:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                if target.exists() and not options.overwrite:
                    logger.debug(f"目标已存在，跳过: {target}")
                    skipped.append(info.filename)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst, READ_BUFFER_SIZE)
            except (zipfile.BadZipFile, zlib.error, EOFError) as e:
                raise ArchiveFormatError(f"{archive_path}: corrupt entry '{info.filename}': {e}") from e
            except OSError as e:
                raise FatalIOError(f"failed to extract '{info.filename}' to {target}: {e}") from e
            extracted += 1

    elapsed = time.perf_counter() - start
    if skipped:
        logger.warning(f"跳过 {len(skipped)} 个条目")
    logger.info(f"解压 {extracted} 个文件到 {out_dir}")
    return ExtractResult(output=out_dir, entries=extracted, skipped=skipped, elapsed=elapsed)
