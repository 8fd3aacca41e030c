from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileNode:
    name: str
    path: str
    is_dir: bool
    children: list[FileNode] = field(default_factory=list)


@dataclass(frozen=True)
class TrashItem:
    name: str
    is_dir: bool
    path: str
