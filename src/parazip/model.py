from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class SourceEntry:
    name: str  # 相对路径，统一使用 '/'
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class IngestResult:
    entries: list[SourceEntry] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def total_bytes(self) -> int:
        return sum(e.size for e in self.entries)


@dataclass
class CompressResult:
    output: Path
    entries: int
    skipped: list[str] = field(default_factory=list)
    elapsed: float = 0.0


@dataclass
class ExtractResult:
    output: Path
    entries: int
    skipped: list[str] = field(default_factory=list)
    elapsed: float = 0.0
