from __future__ import annotations

from pathlib import Path

from .domain.entities import FileNode
from .domain.ports import Clock, FileOpener
from .opener import open_with_default_app
from .storage.assets import AssetStore
from .storage.layout import VaultLayout
from .storage.notes import NoteStore
from .storage.trash import TrashManager
from .storage.tree import scan
from .util import unix_now


class Vault:
    """The notes, assets and trash trees under one root, wired together."""

    def __init__(
        self,
        vault_dir: Path,
        *,
        clock: Clock = unix_now,
        opener: FileOpener | None = None,
    ) -> None:
        self.layout = VaultLayout.at(vault_dir).ensure()
        self.assets = AssetStore(self.layout, opener or open_with_default_app)
        self.trash = TrashManager(self.layout, self.assets, clock)
        self.notes = NoteStore(self.layout, self.assets, self.trash)

    @property
    def vault_dir(self) -> Path:
        return self.layout.root

    def file_tree(self) -> list[FileNode]:
        return scan(self.layout.notes_dir)
