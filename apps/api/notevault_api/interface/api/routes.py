import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from notevault_api.dependencies import get_vault
from notevault_api.domain.exceptions import ErrorCode
from notevault_api.domain.schemas import (
    AssetDeleteOut,
    AssetGcOut,
    AssetReferenceIn,
    AssetSavedOut,
    FileNodeOut,
    FileTreeOut,
    ItemDeleteIn,
    ItemDeleteOut,
    ItemRenameIn,
    NoteOut,
    NoteSaveIn,
    OkOut,
    PathIn,
    PathOut,
    TrashItemOut,
    TrashListOut,
)
from notevault_api.storage.paths import asset_reference_for
from notevault_api.vault import Vault

router = APIRouter()
logger = logging.getLogger("notevault.api")

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.DECODE_ERROR: 400,
    ErrorCode.INVALID_PATH: 400,
    ErrorCode.SECURITY_REJECTED: 403,
    ErrorCode.IO_ERROR: 500,
}


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", "")


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/tree", response_model=FileTreeOut, operation_id="getFileTree")
def get_file_tree(vault: Vault = Depends(get_vault)):
    return FileTreeOut(items=[FileNodeOut(**asdict(n)) for n in vault.file_tree()])


@router.get("/notes/{note_path:path}", response_model=NoteOut, operation_id="loadNote")
def load_note(note_path: str, vault: Vault = Depends(get_vault)):
    return NoteOut(path=note_path, content=vault.notes.load(note_path))


@router.put("/notes/{note_path:path}", response_model=OkOut, operation_id="saveNote")
def save_note(note_path: str, payload: NoteSaveIn, request: Request, vault: Vault = Depends(get_vault)):
    vault.notes.save(note_path, payload.content)
    logger.info("note_save", extra={"rid": _rid(request), "path": note_path})
    return OkOut()


@router.post("/notes", response_model=PathOut, operation_id="createNote")
def create_note(payload: PathIn, request: Request, vault: Vault = Depends(get_vault)):
    path = vault.notes.create(payload.path)
    logger.info("note_create", extra={"rid": _rid(request), "path": path})
    return PathOut(path=path)


@router.post("/folders", response_model=PathOut, operation_id="createFolder")
def create_folder(payload: PathIn, request: Request, vault: Vault = Depends(get_vault)):
    path = vault.notes.create_folder(payload.path)
    logger.info("folder_create", extra={"rid": _rid(request), "path": path})
    return PathOut(path=path)


@router.post("/items/delete", response_model=ItemDeleteOut, operation_id="deleteItem")
def delete_item(payload: ItemDeleteIn, request: Request, vault: Vault = Depends(get_vault)):
    entry = vault.notes.delete(payload.path, payload.is_dir)
    logger.info("item_delete", extra={"rid": _rid(request), "path": payload.path, "entry": entry})
    return ItemDeleteOut(trash_name=entry)


@router.post("/items/rename", response_model=OkOut, operation_id="renameItem")
def rename_item(payload: ItemRenameIn, request: Request, vault: Vault = Depends(get_vault)):
    vault.notes.rename(payload.old_path, payload.new_path, payload.is_dir)
    logger.info("item_rename", extra={"rid": _rid(request), "old": payload.old_path, "new": payload.new_path})
    return OkOut()


@router.post("/assets", response_model=AssetSavedOut, operation_id="saveImage")
async def save_image(
    request: Request,
    note_path: str = Query(...),
    file_name: str = Query(...),
    vault: Vault = Depends(get_vault),
):
    payload = await request.body()
    path = await run_in_threadpool(vault.assets.save_attachment, note_path, file_name, payload)
    return AssetSavedOut(path=str(path), reference=asset_reference_for(path))


@router.post("/assets/gc", response_model=AssetGcOut, operation_id="gcUnusedAssets")
def gc_unused_assets(vault: Vault = Depends(get_vault)):
    return AssetGcOut(removed=vault.assets.garbage_collect_empty_dirs())


@router.post("/assets/open", response_model=OkOut, operation_id="openFile")
def open_file(payload: AssetReferenceIn, vault: Vault = Depends(get_vault)):
    vault.assets.open(payload.reference)
    return OkOut()


@router.post("/assets/delete", response_model=AssetDeleteOut, operation_id="deleteAsset")
def delete_asset(payload: AssetReferenceIn, request: Request, vault: Vault = Depends(get_vault)):
    deleted = vault.assets.delete_orphan(payload.reference)
    logger.info("asset_delete", extra={"rid": _rid(request), "deleted": deleted})
    return AssetDeleteOut(deleted=deleted)


@router.get("/trash", response_model=TrashListOut, operation_id="getTrashItems")
def get_trash_items(vault: Vault = Depends(get_vault)):
    return TrashListOut(items=[TrashItemOut(**asdict(item)) for item in vault.trash.list_items()])


@router.delete("/trash", response_model=OkOut, operation_id="emptyTrash")
def empty_trash(request: Request, vault: Vault = Depends(get_vault)):
    vault.trash.purge_all()
    logger.info("trash_empty", extra={"rid": _rid(request)})
    return OkOut()


@router.delete("/trash/{name}", response_model=OkOut, operation_id="deleteTrashItem")
def delete_trash_item(name: str, request: Request, vault: Vault = Depends(get_vault)):
    vault.trash.purge_one(name)
    logger.info("trash_purge", extra={"rid": _rid(request), "entry": name})
    return OkOut()


@router.post("/trash/{name}/restore", response_model=PathOut, operation_id="restoreTrashItem")
def restore_trash_item(name: str, request: Request, vault: Vault = Depends(get_vault)):
    path = vault.trash.restore(name)
    logger.info("trash_restore", extra={"rid": _rid(request), "entry": name, "path": path})
    return PathOut(path=path)
