from __future__ import annotations

import errno
import logging
import shutil
from pathlib import Path
from typing import Callable

from ..domain.exceptions import NotFound, os_errors
from ..domain.ports import FileOpener
from ..util import atomic_write_bytes
from .layout import VaultLayout
from .paths import ensure_under, normalize_logical_path, resolve_asset_reference, validate_entry_name

logger = logging.getLogger("notevault.vault")


class AssetStore:
    """Attachment folders mirroring note paths under ``assets/``.

    Note lifecycle is orchestrated by the note store and the trash manager;
    this class only exposes the folder moves they need.
    """

    def __init__(self, layout: VaultLayout, opener: FileOpener) -> None:
        self.layout = layout
        self.opener = opener

    def save_attachment(self, owner_path: str, file_name: str, data: bytes) -> Path:
        owner = normalize_logical_path(owner_path)
        validate_entry_name(file_name)
        target = self.layout.asset_folder(owner) / file_name
        with os_errors(f"save attachment {owner}/{file_name}"):
            atomic_write_bytes(target, data)
        logger.debug("asset_save", extra={"owner": owner, "file": file_name, "bytes": len(data)})
        return target

    def delete_orphan(self, reference: str) -> bool:
        physical = resolve_asset_reference(reference)
        abs_path = ensure_under(self.layout.assets_dir, self._anchored(physical))
        if not abs_path.is_file():
            return False
        with os_errors(f"delete asset {abs_path}"):
            abs_path.unlink()
        logger.debug("asset_delete", extra={"path": str(abs_path)})
        return True

    def open(self, reference: str) -> Path:
        physical = resolve_asset_reference(reference)
        abs_path = ensure_under(self.layout.root, self._anchored(physical))
        if not abs_path.exists():
            raise NotFound(f"file_not_found: {physical}")
        with os_errors(f"open {abs_path}"):
            self.opener(abs_path)
        return abs_path

    def garbage_collect_empty_dirs(self, root: Path | None = None) -> int:
        base = root if root is not None else self.layout.assets_dir
        removed = self._remove_empty_dirs(base)
        logger.debug("asset_gc", extra={"root": str(base), "removed": removed})
        return removed

    def _remove_empty_dirs(self, directory: Path) -> int:
        try:
            children = [c for c in directory.iterdir() if c.is_dir() and not c.is_symlink()]
        except OSError:
            return 0
        removed = 0
        for child in children:
            removed += self._remove_empty_dirs(child)
            try:
                if not any(child.iterdir()):
                    child.rmdir()
                    removed += 1
            except OSError as e:
                logger.debug("asset_gc_skip", extra={"path": str(child), "error": str(e)})
        return removed

    def cascade(self, op: str, logical: str, step: Callable[[], object]) -> bool:
        """Run a secondary asset-folder step; failures are logged, never raised."""
        try:
            step()
        except OSError as e:
            logger.warning("asset_cascade_failed", extra={"op": op, "path": logical, "error": str(e)})
            return False
        return True

    def move_folder(self, old_path: str, new_path: str) -> bool:
        return self.detach_folder(old_path, self.layout.asset_folder(new_path))

    def detach_folder(self, logical: str, target: Path) -> bool:
        """Move the asset folder of *logical* to *target*; False when there is none.

        Raises OSError so the caller decides whether the cascade is fatal.
        """
        source = self.layout.asset_folder(logical)
        if not source.is_dir():
            return False
        if target.exists():
            raise FileExistsError(errno.EEXIST, "asset folder already exists", str(target))
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(target))
        return True

    def attach_folder(self, source: Path, logical: str) -> Path:
        """Install *source* as the asset folder of *logical*, replacing any existing one."""
        target = self.layout.asset_folder(logical)
        if target.exists():
            shutil.rmtree(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(target))
        return target

    def _anchored(self, physical: str) -> Path:
        # Relative references are taken relative to the vault root.
        p = Path(physical)
        return p if p.is_absolute() else self.layout.root / p
