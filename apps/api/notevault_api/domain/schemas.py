from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class FileNodeOut(BaseModel):
    name: str
    path: str
    is_dir: bool
    children: list[FileNodeOut] = Field(default_factory=list)


class FileTreeOut(BaseModel):
    items: list[FileNodeOut] = Field(default_factory=list)


class NoteOut(BaseModel):
    path: str
    content: str


class NoteSaveIn(BaseModel):
    content: str


class PathIn(BaseModel):
    path: str


class PathOut(BaseModel):
    ok: bool = True
    path: str


class ItemDeleteIn(BaseModel):
    path: str
    is_dir: bool = False


class ItemDeleteOut(BaseModel):
    ok: bool = True
    trash_name: Optional[str] = None


class ItemRenameIn(BaseModel):
    old_path: str
    new_path: str
    is_dir: bool = False


class AssetSavedOut(BaseModel):
    path: str
    reference: str


class AssetReferenceIn(BaseModel):
    reference: str


class AssetDeleteOut(BaseModel):
    ok: bool = True
    deleted: bool


class AssetGcOut(BaseModel):
    ok: bool = True
    removed: int


class TrashItemOut(BaseModel):
    name: str
    is_dir: bool
    path: str


class TrashListOut(BaseModel):
    items: list[TrashItemOut] = Field(default_factory=list)


class OkOut(BaseModel):
    ok: bool = True
