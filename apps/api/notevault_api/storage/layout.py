from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from ..domain.exceptions import os_errors
from .paths import ASSETS_DIRNAME, NOTE_EXTENSION, TRASH_DIRNAME

NOTES_DIRNAME = "notes"


@dataclass(frozen=True)
class VaultLayout:
    root: Path
    notes_dir: Path
    assets_dir: Path
    trash_dir: Path

    @classmethod
    def at(cls, root: Path) -> VaultLayout:
        root = root.resolve()
        return cls(
            root=root,
            notes_dir=root / NOTES_DIRNAME,
            assets_dir=root / ASSETS_DIRNAME,
            trash_dir=root / TRASH_DIRNAME,
        )

    def ensure(self) -> VaultLayout:
        with os_errors("create vault layout"):
            for d in (self.root, self.notes_dir, self.assets_dir, self.trash_dir):
                d.mkdir(parents=True, exist_ok=True)
        return self

    def note_file(self, logical: str) -> Path:
        return self.notes_dir / PurePosixPath(logical + NOTE_EXTENSION)

    def note_dir(self, logical: str) -> Path:
        return self.notes_dir / PurePosixPath(logical)

    def note_target(self, logical: str, is_dir: bool) -> Path:
        return self.note_dir(logical) if is_dir else self.note_file(logical)

    def asset_folder(self, logical: str) -> Path:
        return self.assets_dir / PurePosixPath(logical)
