"""parazip - 并行读取、顺序写入的 zip 压缩/解压工具。

目录压缩时先用线程池并行读取所有文件内容，再在单线程中按顺序写入压缩包；
解压时逐条目写出，并跳过会逃出目标目录的条目。
"""

__version__ = "0.1.0"

from .api import format_duration, resolve_command, run
from .config import Options, load_config
from .ingest import ingest, load_content
from .reader import enclosed_name, extract_archive
from .walk import list_files
from .writer import ArchiveWriter, archive_name_for, compress_path

__all__ = [
    "ArchiveWriter",
    "Options",
    "archive_name_for",
    "compress_path",
    "enclosed_name",
    "extract_archive",
    "format_duration",
    "ingest",
    "list_files",
    "load_config",
    "load_content",
    "resolve_command",
    "run",
]
