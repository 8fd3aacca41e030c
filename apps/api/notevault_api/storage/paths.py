from __future__ import annotations

from pathlib import Path, PurePosixPath
from urllib.parse import quote, unquote_to_bytes

from ..domain.exceptions import DecodeError, InvalidPath, SecurityRejected

NOTE_EXTENSION = ".md"
ASSETS_DIRNAME = "assets"
TRASH_DIRNAME = ".trash"

# Longer forms first: "asset://" is a prefix of "asset://localhost/".
ASSET_URL_PREFIXES = (
    "http://asset.localhost/",
    "https://asset.localhost/",
    "asset://localhost/",
    "asset://",
)
ASSET_URL_BASE = "asset://localhost/"


def resolve_asset_reference(reference: str) -> str:
    """Turn an attachment reference back into the physical path it points at.

    The first matching scheme prefix is stripped and the remainder is
    percent-decoded as UTF-8. The result is neither checked for existence nor
    for staying inside the vault; callers do that with :func:`ensure_under`.
    """
    path_str = reference
    for prefix in ASSET_URL_PREFIXES:
        if reference.startswith(prefix):
            path_str = reference[len(prefix) :]
            break
    try:
        return unquote_to_bytes(path_str).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"invalid utf-8 in reference: {reference}") from e


def asset_reference_for(path: Path | str) -> str:
    return ASSET_URL_BASE + quote(str(path), safe="")


def normalize_logical_path(path: str) -> str:
    if "\x00" in path:
        raise InvalidPath("path_contains_nul")

    cleaned = path.strip().replace("\\", "/")
    if not cleaned:
        raise InvalidPath("path_empty")

    p = PurePosixPath(cleaned)
    if not p.parts:
        raise InvalidPath("path_empty")
    if p.is_absolute():
        raise InvalidPath("path_absolute_not_allowed")
    if ".." in p.parts:
        raise InvalidPath("path_traversal_not_allowed")
    for part in p.parts:
        if part == ASSETS_DIRNAME or part.startswith("."):
            raise InvalidPath("path_reserved")

    return p.as_posix()


def validate_entry_name(name: str) -> str:
    if not name or "\x00" in name:
        raise InvalidPath("name_empty")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise InvalidPath("name_not_single_segment")
    return name


def ensure_under(root: Path, path: Path | str) -> Path:
    root_abs = root.resolve()
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = root_abs / candidate
    resolved = candidate.resolve()
    if resolved != root_abs and root_abs not in resolved.parents:
        raise SecurityRejected(f"path_outside_vault: {path}")
    return resolved
