from __future__ import annotations

import logging

from ..domain.exceptions import AlreadyExists, NotFound, os_errors
from ..util import atomic_write_text
from .assets import AssetStore
from .layout import VaultLayout
from .paths import normalize_logical_path
from .trash import TrashManager

logger = logging.getLogger("notevault.vault")

PLACEHOLDER_BODY = "# "


class NoteStore:
    def __init__(self, layout: VaultLayout, assets: AssetStore, trash: TrashManager) -> None:
        self.layout = layout
        self.assets = assets
        self.trash = trash

    def load(self, path: str) -> str:
        abs_path = self.layout.note_file(normalize_logical_path(path))
        if not abs_path.exists():
            return ""
        with os_errors(f"load {path}"):
            return abs_path.read_text(encoding="utf-8")

    def save(self, path: str, content: str) -> None:
        logical = normalize_logical_path(path)
        with os_errors(f"save {logical}"):
            atomic_write_text(self.layout.note_file(logical), content)
        logger.debug("note_save", extra={"path": logical, "chars": len(content)})

    def create(self, path: str) -> str:
        logical = normalize_logical_path(path)
        abs_path = self.layout.note_file(logical)
        if abs_path.exists():
            raise AlreadyExists(f"note_exists: {logical}")
        with os_errors(f"create {logical}"):
            abs_path.parent.mkdir(parents=True, exist_ok=True)
            with abs_path.open("x", encoding="utf-8") as f:
                f.write(PLACEHOLDER_BODY)
        logger.debug("note_create", extra={"path": logical})
        return logical

    def create_folder(self, path: str) -> str:
        logical = normalize_logical_path(path)
        with os_errors(f"create folder {logical}"):
            self.layout.note_dir(logical).mkdir(parents=True, exist_ok=True)
        logger.debug("folder_create", extra={"path": logical})
        return logical

    def rename(self, old_path: str, new_path: str, is_dir: bool) -> str:
        """Rename a note or folder, then move its asset folder best-effort.

        The destination must not exist. A failure to move the asset folder is
        logged and does not undo the primary rename.
        """
        old = normalize_logical_path(old_path)
        new = normalize_logical_path(new_path)
        old_abs = self.layout.note_target(old, is_dir)
        new_abs = self.layout.note_target(new, is_dir)
        if not old_abs.exists():
            raise NotFound(f"item_not_found: {old}")
        if new_abs.exists():
            raise AlreadyExists(f"item_exists: {new}")

        with os_errors(f"rename {old} -> {new}"):
            new_abs.parent.mkdir(parents=True, exist_ok=True)
            old_abs.rename(new_abs)

        self.assets.cascade("rename", old, lambda: self.assets.move_folder(old, new))
        logger.debug("note_rename", extra={"old": old, "new": new, "is_dir": is_dir})
        return new

    def delete(self, path: str, is_dir: bool) -> str | None:
        return self.trash.soft_delete(path, is_dir)
