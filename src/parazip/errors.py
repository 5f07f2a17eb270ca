"""parazip 异常定义"""

from __future__ import annotations


class ParazipError(Exception):
    """所有 parazip 错误的基类，CLI 统一映射为退出码 1"""


class UsageError(ParazipError):
    """参数不足或命令无法识别"""


class TargetNotFoundError(ParazipError):
    """目标路径不存在"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"'{path}' does not exist.")


class ConfigError(ParazipError):
    """配置文件无法读取或取值非法"""


class OutputExistsError(ParazipError):
    """输出已存在且禁止覆盖"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"'{path}' already exists (overwrite disabled).")


class FatalIOError(ParazipError):
    """流级别的 I/O 失败，整个操作中止"""


class ArchiveWriteError(FatalIOError):
    """创建、写入或收尾压缩包失败"""


class ArchiveFormatError(FatalIOError):
    """压缩包结构损坏或条目数据校验失败"""


class IngestError(FatalIOError):
    """fail-fast 模式下单个文件读取失败"""

    def __init__(self, path: str, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"{path}: {error}")
