from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

Clock = Callable[[], int]


@runtime_checkable
class FileOpener(Protocol):
    def __call__(self, path: Path) -> None:
        ...
