import json

from catalogue.storage import (
    DurableStore,
    EncryptedFileMedium,
    JsonFileMedium,
    MemoryMedium,
    StoreError,
    open_store,
)


def test_get_returns_none_when_never_written(store):
    assert store.get("cart") is None


def test_set_and_get_round_trip(store, storage_path):
    store.set("cart", [{"product": {"id": 1}, "quantity": 2}])
    assert store.get("cart") == [{"product": {"id": 1}, "quantity": 2}]

    raw = json.loads(storage_path.read_text(encoding="utf-8"))
    assert list(raw) == ["test-shop:cart"]


def test_namespaces_share_medium_without_collision(storage_path):
    medium = JsonFileMedium(storage_path)
    first = DurableStore(medium, namespace="shop-a")
    second = DurableStore(medium, namespace="shop-b")
    first.set("cart", [1])
    second.set("cart", [2])
    assert first.get("cart") == [1]
    assert second.get("cart") == [2]


def test_unrelated_keys_survive_writes(storage_path):
    storage_path.write_text(json.dumps({"other-app:token": "abc"}), encoding="utf-8")
    store = DurableStore(JsonFileMedium(storage_path), namespace="shop")
    store.set("wishlist", [])
    raw = json.loads(storage_path.read_text(encoding="utf-8"))
    assert raw["other-app:token"] == "abc"


def test_corrupt_file_without_backup_reads_as_absent(storage_path):
    storage_path.write_text("{corrupt", encoding="utf-8")
    store = DurableStore(JsonFileMedium(storage_path, backups=0), namespace="shop")
    assert store.get("cart") is None


def test_corrupt_file_falls_back_to_backup(storage_path):
    store = DurableStore(JsonFileMedium(storage_path, backups=2), namespace="shop")
    store.set("cart", ["first"])
    store.set("cart", ["second"])
    storage_path.write_text("not-json", encoding="utf-8")
    assert store.get("cart") == ["first"]


def test_backup_files_rotate(storage_path):
    store = DurableStore(JsonFileMedium(storage_path, backups=2), namespace="shop")
    for value in ("alpha", "beta", "gamma"):
        store.set("cart", value)
    backups = sorted(p.name for p in storage_path.parent.glob("storage.json.bak*"))
    assert backups == ["storage.json.bak1", "storage.json.bak2"]


def test_remove_drops_only_that_key(store):
    store.set("cart", [1])
    store.set("wishlist", [2])
    store.remove("cart")
    assert store.get("cart") is None
    assert store.get("wishlist") == [2]


def test_write_failure_is_not_raised(caplog):
    class BrokenMedium(MemoryMedium):
        def write(self, data):
            raise StoreError("quota exceeded")

    store = DurableStore(BrokenMedium(), namespace="shop")
    store.set("cart", [1])
    assert store.get("cart") is None
    assert "quota exceeded" in caplog.text


def test_unserializable_value_is_not_raised():
    store = DurableStore(MemoryMedium(), namespace="shop")
    store.set("cart", {1, 2})
    assert store.get("cart") is None


def test_encrypted_medium_round_trip(tmp_path):
    path = tmp_path / "storage.enc"
    store = open_store(path, "shop", secret="secret-key")
    store.set("wishlist", [{"id": 3}])
    assert b"wishlist" not in path.read_bytes()
    assert store.get("wishlist") == [{"id": 3}]


def test_encrypted_medium_with_wrong_secret_reads_as_absent(tmp_path):
    path = tmp_path / "storage.enc"
    open_store(path, "shop", secret="right", backups=0).set("cart", [1])
    other = DurableStore(EncryptedFileMedium(path, "wrong", backups=0), "shop")
    assert other.get("cart") is None
