"""
压缩包写入模块

ZipFile 不支持并发写入条目，所有压缩与序列化都在调用线程中顺序完成，
即使前面的读取阶段是并行的。
"""

import os
import time
import zipfile
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import WRITE_BUFFER_SIZE, Options
from .errors import ArchiveWriteError, FatalIOError, OutputExistsError, ParazipError
from .ingest import entry_name, ingest, load_content
from .model import CompressResult, SourceEntry
from .walk import list_files

ENTRY_PERMISSIONS = 0o644


def archive_name_for(path) -> Path:
    """计算输出压缩包路径：文件用 <stem>.zip，目录用 <目录名>.zip，与输入同级"""
    path = Path(path)
    stem = path.name if path.is_dir() else path.stem
    if not stem:
        raise ParazipError(f"cannot derive an archive name from '{path}'")
    return path.parent / f"{stem}.zip"


class ArchiveWriter:
    """顺序写入条目的 zip 写入器，只能在单个线程中使用"""

    def __init__(self, path, compression_level: int = 6, buffer_size: int = WRITE_BUFFER_SIZE):
        self.path = Path(path)
        self.compression_level = compression_level
        self.entries = 0
        self._finished = False
        try:
            self._stream = open(self.path, "wb", buffering=buffer_size)
        except OSError as e:
            raise ArchiveWriteError(f"cannot create {self.path}: {e}") from e
        try:
            self._zip = zipfile.ZipFile(
                self._stream,
                mode="w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=compression_level,
            )
        except Exception:
            self._stream.close()
            raise

    def add(self, entry: SourceEntry) -> None:
        """写入一个条目，写完即关闭，不可再次打开"""
        if self._finished:
            raise ArchiveWriteError(f"{self.path} is already finalized")
        info = zipfile.ZipInfo(entry.name, date_time=time.localtime()[:6])
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = ENTRY_PERMISSIONS << 16
        try:
            self._zip.writestr(info, entry.data, compresslevel=self.compression_level)
        except (OSError, UnicodeEncodeError) as e:
            raise ArchiveWriteError(f"failed to write '{entry.name}' to {self.path}: {e}") from e
        self.entries += 1

    def finish(self) -> None:
        """写入中央目录并刷新到磁盘"""
        if self._finished:
            return
        try:
            self._zip.close()
            self._stream.flush()
            os.fsync(self._stream.fileno())
        except OSError as e:
            raise ArchiveWriteError(f"failed to finalize {self.path}: {e}") from e
        finally:
            self._finished = True
            self._stream.close()

    def abort(self) -> None:
        """放弃写入，关闭底层文件"""
        if self._finished:
            return
        self._finished = True
        try:
            self._zip.close()
        except (OSError, ValueError) as e:
            logger.debug(f"关闭未完成的压缩包失败 {self.path}: {e}")
        finally:
            self._stream.close()

    def __enter__(self) -> "ArchiveWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()
        else:
            self.abort()


def compress_path(path, options: Optional[Options] = None) -> CompressResult:
    """
    压缩单个文件或整个目录

    目录模式下先列出文件并并行读取全部内容，再顺序写入；
    条目名称相对于目录的父目录，因此以目录名开头。
    """
    options = options or Options()
    start = time.perf_counter()
    # 不跟随符号链接，输出与输入路径本身同级
    source = Path(os.path.abspath(path))
    output = archive_name_for(source)

    if output.exists():
        if not options.overwrite:
            raise OutputExistsError(output)
        if source.is_file() and output.samefile(source):
            raise ParazipError(f"output '{output}' would overwrite the input file")
        logger.info(f"覆盖已存在的压缩包: {output}")

    skipped: list[str] = []
    if source.is_file():
        # 单文件模式：读取失败直接中止
        try:
            data = load_content(source, options.read_buffer_size)
        except OSError as e:
            raise FatalIOError(f"cannot read {source}: {e}") from e
        entries = [SourceEntry(name=entry_name(source.name), data=data)]
    else:
        files = list_files(source)
        logger.debug(f"发现 {len(files)} 个文件: {source}")
        result = ingest(
            files,
            source.parent,
            workers=options.workers,
            fail_fast=options.fail_fast,
            buffer_size=options.read_buffer_size,
        )
        entries = result.entries
        skipped = result.skipped
        if skipped:
            logger.warning(f"跳过 {len(skipped)} 个无法读取的文件")

    writer = ArchiveWriter(output, options.compression_level, options.write_buffer_size)
    try:
        with writer:
            for entry in entries:
                writer.add(entry)
    except BaseException:
        _remove_partial(output)
        raise

    elapsed = time.perf_counter() - start
    logger.info(f"写入 {writer.entries} 个条目到 {output}")
    return CompressResult(output=output, entries=writer.entries, skipped=skipped, elapsed=elapsed)


def _remove_partial(output: Path) -> None:
    try:
        output.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"无法删除不完整的压缩包 {output}: {e}")
