from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(tmp_path, monkeypatch) -> TestClient:
    monkeypatch.setenv("VAULT_DIR", str(tmp_path / "vault"))
    monkeypatch.delenv("API_AUTH_MODE", raising=False)

    from main import create_app

    return TestClient(create_app())


def test_note_lifecycle_through_commands(client: TestClient) -> None:
    r = client.post("/notes", json={"path": "inbox/first"})
    assert r.status_code == 200
    assert r.json()["path"] == "inbox/first"

    r2 = client.post("/notes", json={"path": "inbox/first"})
    assert r2.status_code == 409
    assert r2.json()["code"] == "already_exists"

    assert client.put("/notes/inbox/first", json={"content": "hello"}).status_code == 200
    assert client.get("/notes/inbox/first").json() == {"path": "inbox/first", "content": "hello"}
    assert client.get("/notes/never/written").json()["content"] == ""

    tree = client.get("/tree").json()["items"]
    assert tree[0]["name"] == "inbox"
    assert tree[0]["children"][0] == {"name": "first", "path": "inbox/first", "is_dir": False, "children": []}

    r3 = client.post("/items/rename", json={"old_path": "inbox/first", "new_path": "done/first", "is_dir": False})
    assert r3.status_code == 200
    assert client.get("/notes/done/first").json()["content"] == "hello"


def test_folder_and_rename_conflicts(client: TestClient) -> None:
    assert client.post("/folders", json={"path": "a/b"}).status_code == 200
    assert client.post("/folders", json={"path": "a/b"}).status_code == 200
    client.put("/notes/x", json={"content": "x"})
    client.put("/notes/y", json={"content": "y"})

    r = client.post("/items/rename", json={"old_path": "x", "new_path": "y"})
    assert r.status_code == 409
    r2 = client.post("/items/rename", json={"old_path": "ghost", "new_path": "z"})
    assert r2.status_code == 404
    assert r2.json()["code"] == "not_found"


def test_reserved_paths_are_rejected(client: TestClient) -> None:
    r = client.post("/notes", json={"path": "../outside"})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_path"


def test_trash_commands(client: TestClient) -> None:
    client.put("/notes/doomed", json={"content": "bye"})
    client.post("/assets?note_path=doomed&file_name=pic.png", content=b"\x89PNG")

    r = client.post("/items/delete", json={"path": "doomed", "is_dir": False})
    assert r.status_code == 200
    entry = r.json()["trash_name"]
    assert entry.startswith("doomed_") and entry.endswith(".md")

    items = client.get("/trash").json()["items"]
    assert items == [{"name": entry, "is_dir": False, "path": entry}]

    r2 = client.post(f"/trash/{entry}/restore")
    assert r2.status_code == 200
    assert r2.json()["path"] == "doomed"
    assert client.get("/notes/doomed").json()["content"] == "bye"
    assert client.get("/trash").json()["items"] == []

    assert client.post(f"/trash/{entry}/restore").status_code == 404

    client.post("/items/delete", json={"path": "doomed"})
    [item] = client.get("/trash").json()["items"]
    assert client.delete(f"/trash/{item['name']}").status_code == 200
    assert client.get("/trash").json()["items"] == []

    client.put("/notes/again", json={"content": "1"})
    client.post("/items/delete", json={"path": "again"})
    assert client.delete("/trash").status_code == 200
    assert client.get("/trash").json()["items"] == []


def test_delete_missing_item_is_noop(client: TestClient) -> None:
    r = client.post("/items/delete", json={"path": "nothing", "is_dir": True})
    assert r.status_code == 200
    assert r.json()["trash_name"] is None


def test_asset_commands(client: TestClient) -> None:
    r = client.post("/assets?note_path=diary/today&file_name=%E4%B8%AD%E6%96%87.png", content=b"img")
    assert r.status_code == 200
    saved = r.json()
    assert saved["path"].endswith("中文.png")
    assert saved["reference"].startswith("asset://localhost/")

    r2 = client.post("/assets/delete", json={"reference": saved["reference"]})
    assert r2.json() == {"ok": True, "deleted": True}

    gc = client.post("/assets/gc").json()
    assert gc == {"ok": True, "removed": 2}


def test_delete_asset_outside_vault_is_rejected(client: TestClient, tmp_path) -> None:
    victim = tmp_path / "victim.txt"
    victim.write_text("keep", encoding="utf-8")
    r = client.post("/assets/delete", json={"reference": f"asset://localhost/{victim}"})
    assert r.status_code == 403
    assert r.json()["code"] == "security_rejected"
    assert victim.exists()


def test_bad_percent_encoding_is_a_client_error(client: TestClient) -> None:
    r = client.post("/assets/delete", json={"reference": "asset://localhost/%E4%B8.png"})
    assert r.status_code == 400
    assert r.json()["code"] == "decode_error"


def test_open_file_uses_injected_opener(client: TestClient, monkeypatch) -> None:
    opened = []
    monkeypatch.setattr("notevault_api.vault.open_with_default_app", opened.append)
    from notevault_api.dependencies import get_vault

    get_vault.cache_clear()
    saved = client.post("/assets?note_path=n&file_name=a.pdf", content=b"%PDF").json()

    assert client.post("/assets/open", json={"reference": saved["reference"]}).status_code == 200
    assert [str(p) for p in opened] == [saved["path"]]

    missing = client.post("/assets/open", json={"reference": "asset://localhost/nope.pdf"})
    assert missing.status_code == 404


def test_save_image_writes_off_the_event_loop(client: TestClient, monkeypatch) -> None:
    import asyncio

    from notevault_api.storage.assets import AssetStore

    original = AssetStore.save_attachment
    loop_running = []

    def recording_save(self, owner_path, file_name, data):
        try:
            asyncio.get_running_loop()
            loop_running.append(True)
        except RuntimeError:
            loop_running.append(False)
        return original(self, owner_path, file_name, data)

    monkeypatch.setattr(AssetStore, "save_attachment", recording_save)

    r = client.post("/assets?note_path=n&file_name=a.png", content=b"img")
    assert r.status_code == 200
    assert loop_running == [False]


def test_satellite_restore_is_rejected(client: TestClient) -> None:
    client.put("/notes/p", json={"content": "X"})
    client.post("/assets?note_path=p&file_name=a.png", content=b"1")
    entry = client.post("/items/delete", json={"path": "p"}).json()["trash_name"]

    r = client.post(f"/trash/{entry}.assets/restore")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_path"
    assert client.get("/tree").json() == {"items": []}
