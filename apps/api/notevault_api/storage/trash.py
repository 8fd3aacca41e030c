from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..domain.entities import TrashItem
from ..domain.exceptions import InvalidPath, NotFound, os_errors
from ..domain.ports import Clock
from ..util import unix_now
from .assets import AssetStore
from .layout import VaultLayout
from .paths import normalize_logical_path, validate_entry_name

logger = logging.getLogger("notevault.vault")

SATELLITE_SUFFIX = ".assets"
RESTORED_PREFIX = "restored_"


def satellite_name(entry_name: str) -> str:
    return entry_name + SATELLITE_SUFFIX


def split_trash_name(entry_name: str) -> tuple[str, str]:
    """Split ``<stem>_<timestamp><ext>`` into ``(stem, ext)``.

    Everything after the last underscore is the timestamp segment; the
    extension is whatever follows the first dot inside that segment.
    """
    idx = entry_name.rfind("_")
    if idx < 0:
        return entry_name, ""
    stem, rest = entry_name[:idx], entry_name[idx:]
    dot = rest.find(".")
    return stem, rest[dot:] if dot >= 0 else ""


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


class TrashManager:
    """Soft-delete lifecycle over the flat ``.trash/`` directory.

    Entries lose their folder nesting; a note's asset folder travels along as
    a ``<entry>.assets`` sibling. Asset moves are best-effort.
    """

    def __init__(self, layout: VaultLayout, assets: AssetStore, clock: Clock = unix_now) -> None:
        self.layout = layout
        self.assets = assets
        self.clock = clock

    def soft_delete(self, path: str, is_dir: bool) -> str | None:
        logical = normalize_logical_path(path)
        source = self.layout.note_target(logical, is_dir)
        if not source.exists():
            return None

        entry = self._free_entry_name(source, is_dir)
        with os_errors(f"move {logical} to trash"):
            self.layout.trash_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(self.layout.trash_dir / entry))

        satellite = self.layout.trash_dir / satellite_name(entry)
        self.assets.cascade("soft_delete", logical, lambda: self.assets.detach_folder(logical, satellite))
        logger.debug("trash_delete", extra={"path": logical, "entry": entry, "is_dir": is_dir})
        return entry

    def list_items(self) -> list[TrashItem]:
        trash_dir = self.layout.trash_dir
        if not trash_dir.exists():
            return []
        with os_errors("list trash"):
            entries = sorted(trash_dir.iterdir(), key=lambda p: p.name)
        return [
            TrashItem(name=p.name, is_dir=p.is_dir(), path=p.name)
            for p in entries
            if not p.name.endswith(SATELLITE_SUFFIX)
        ]

    def purge_one(self, name: str) -> None:
        self._validate_entry(name)
        with os_errors(f"purge {name}"):
            _remove(self.layout.trash_dir / name)
            _remove(self.layout.trash_dir / satellite_name(name))
        logger.debug("trash_purge", extra={"entry": name})

    def purge_all(self) -> None:
        trash_dir = self.layout.trash_dir
        with os_errors("empty trash"):
            if trash_dir.exists():
                shutil.rmtree(trash_dir)
            trash_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("trash_empty")

    def restore(self, name: str) -> str:
        """Move a trash entry back to the notes root and return its logical path.

        An existing note is never overwritten: the restored name is prefixed
        with ``restored_`` until it is free. The satellite asset folder, if
        any, replaces whatever asset folder already sits at the new path.
        """
        self._validate_entry(name)
        entry = self.layout.trash_dir / name
        if not entry.exists():
            raise NotFound(f"trash_entry_not_found: {name}")

        is_dir = entry.is_dir()
        stem, ext = split_trash_name(name)
        restored = stem + ext
        while (self.layout.notes_dir / restored).exists():
            restored = RESTORED_PREFIX + restored

        with os_errors(f"restore {name}"):
            self.layout.notes_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(entry), str(self.layout.notes_dir / restored))

        logical = restored[: -len(ext)] if ext and not is_dir else restored
        satellite = self.layout.trash_dir / satellite_name(name)
        if satellite.is_dir():
            self.assets.cascade("restore", logical, lambda: self.assets.attach_folder(satellite, logical))
        logger.debug("trash_restore", extra={"entry": name, "path": logical})
        return logical

    def _validate_entry(self, name: str) -> None:
        validate_entry_name(name)
        # Satellites only travel with their primary entry.
        if name.endswith(SATELLITE_SUFFIX):
            raise InvalidPath(f"not_a_trash_entry: {name}")

    def _free_entry_name(self, source: Path, is_dir: bool) -> str:
        stem, ext = (source.name, "") if is_dir else (source.stem, source.suffix)
        stamp = str(self.clock())
        candidate = f"{stem}_{stamp}{ext}"
        idx = 2
        while self._taken(candidate):
            candidate = f"{stem}_{stamp}-{idx}{ext}"
            idx += 1
        return candidate

    def _taken(self, entry_name: str) -> bool:
        trash_dir = self.layout.trash_dir
        return (trash_dir / entry_name).exists() or (trash_dir / satellite_name(entry_name)).exists()
