from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from ..domain.entities import FileNode
from .paths import ASSETS_DIRNAME, NOTE_EXTENSION, TRASH_DIRNAME

logger = logging.getLogger("notevault.vault")


def _is_hidden(name: str) -> bool:
    return name in (ASSETS_DIRNAME, TRASH_DIRNAME) or name.startswith(".")


def scan(root: Path, prefix: str = "") -> list[FileNode]:
    """Return the folder/note hierarchy below *root*.

    ``prefix`` is the logical path of *root* itself (empty for the notes
    root). Unreadable directories contribute no children.
    """
    try:
        entries = list(root.iterdir())
    except OSError as e:
        logger.warning("tree_scan_unreadable", extra={"path": str(root), "error": str(e)})
        return []

    nodes: list[FileNode] = []
    for entry in entries:
        name = entry.name
        if _is_hidden(name):
            continue
        is_dir = entry.is_dir()
        if not is_dir and not name.endswith(NOTE_EXTENSION):
            continue

        display_name = name if is_dir else name[: -len(NOTE_EXTENSION)]
        logical = PurePosixPath(prefix, display_name).as_posix() if prefix else display_name
        nodes.append(
            FileNode(
                name=display_name,
                path=logical,
                is_dir=is_dir,
                children=scan(entry, logical) if is_dir else [],
            )
        )

    nodes.sort(key=lambda n: (not n.is_dir, n.name))
    return nodes
