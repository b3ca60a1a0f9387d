from __future__ import annotations

import json
import os
import stat
import threading
from pathlib import Path

import pytest

from pescabot.catalog import default_catalog
from pescabot.errors import CorruptRecordError, PersistenceError
from pescabot.models import CatchStats, UserRecord, new_user_record
from pescabot.store import (
    RECORD_VERSION,
    JsonDirectoryBackend,
    MemoryBackend,
    UserRecordStore,
    restore_record,
    serialize_record,
)


def _store(tmp_path: Path) -> UserRecordStore:
    store = UserRecordStore(JsonDirectoryBackend(tmp_path / "users"), default_catalog())
    store.initialize()
    return store


def test_load_creates_and_persists_default_record(tmp_path: Path) -> None:
    store = _store(tmp_path)

    record = store.load("5511999999999@c.us")

    assert record == new_user_record(default_catalog())
    path = tmp_path / "users" / "5511999999999@c.us.json"
    assert path.exists()
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["version"] == RECORD_VERSION
    assert raw["equipped_rod"] == "Vara Básica"


def test_save_load_roundtrip_keeps_every_field(tmp_path: Path) -> None:
    store = _store(tmp_path)
    record = UserRecord(
        money=0,
        equipped_rod="Vara Avançada",
        inventory={"Salmão": 10**12, "Lata": 1},
        bait_count=0,
        stats=CatchStats(
            total_catches=10**12 + 1,
            common_caught=0,
            rare_caught=10**12,
            junk_caught=1,
        ),
    )

    store.save("U1", store.load("U1"))
    store.save("U1", record)

    assert store.load("U1") == record


def test_user_ids_are_encoded_into_safe_file_names(tmp_path: Path) -> None:
    store = _store(tmp_path)

    store.load("../fora")

    assert not (tmp_path / "fora.json").exists()
    assert (tmp_path / "users" / "..%2Ffora.json").exists()


def test_malformed_file_raises_and_is_not_overwritten(tmp_path: Path) -> None:
    store = _store(tmp_path)
    path = tmp_path / "users" / "U1.json"
    path.write_text("{ quebrado", encoding="utf-8")

    with pytest.raises(CorruptRecordError) as exc_info:
        store.load("U1")

    assert exc_info.value.user_id == "U1"
    assert path.read_text(encoding="utf-8") == "{ quebrado"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"inventory": {}, "equipped_rod": "Vara Básica"},
        {"money": -1, "inventory": {}, "equipped_rod": "Vara Básica"},
        {"money": "100", "inventory": {}, "equipped_rod": "Vara Básica"},
        {"money": True, "inventory": {}, "equipped_rod": "Vara Básica"},
        {"money": 10, "inventory": {"Carpa": 0}, "equipped_rod": "Vara Básica"},
        {"money": 10, "inventory": [], "equipped_rod": "Vara Básica"},
        {"money": 10, "inventory": {}, "equipped_rod": "Vara de Ouro"},
        {"money": 10, "inventory": {}, "equipped_rod": "Isca Comum"},
        {
            "money": 10,
            "inventory": {},
            "equipped_rod": "Vara Básica",
            "stats": {"total_catches": 2, "common_caught": 1},
        },
    ],
)
def test_invalid_payloads_are_corrupt(payload: object) -> None:
    with pytest.raises(ValueError):
        restore_record(payload, default_catalog())

    backend = MemoryBackend()
    backend.write("U1", json.dumps(payload).encode("utf-8"))
    store = UserRecordStore(backend, default_catalog())
    with pytest.raises(CorruptRecordError):
        store.load("U1")


def test_unreadable_backend_is_corrupt_not_absent() -> None:
    class _BrokenBackend(MemoryBackend):
        def read(self, key: str):
            raise PermissionError("sem acesso")

    store = UserRecordStore(_BrokenBackend(), default_catalog())

    with pytest.raises(CorruptRecordError):
        store.load("U1")


def test_legacy_record_from_original_bot_is_migrated() -> None:
    legacy = {
        "money": 230,
        "inventory": {"Tilápia": 2, "Lata": 1},
        "fishingRod": "Vara Intermediária",
        "bait": 3,
        "stats": {
            "totalFishing": 6,
            "commonFish": 4,
            "rareFish": 1,
            "junk": 0,
            "junkFish": None,
        },
    }

    record = restore_record(legacy, default_catalog())

    assert record.equipped_rod == "Vara Intermediária"
    assert record.bait_count == 3
    assert record.stats == CatchStats(
        total_catches=6, common_caught=4, rare_caught=1, junk_caught=1
    )
    assert serialize_record(record)["stats"]["junk_caught"] == 1


def test_failed_write_keeps_previous_file(tmp_path: Path, monkeypatch) -> None:
    store = _store(tmp_path)
    original = store.load("U1")
    richer = UserRecord(money=999, equipped_rod="Vara Básica")

    def _fail(*_args, **_kwargs):
        raise OSError("disco cheio")

    monkeypatch.setattr("pescabot.store.os.replace", _fail)
    with pytest.raises(PersistenceError):
        store.save("U1", richer)
    monkeypatch.undo()

    assert store.load("U1") == original
    assert list((tmp_path / "users").glob("*.tmp")) == []


def test_locked_serializes_same_user(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.load("U1")

    def _add_money() -> None:
        for _ in range(50):
            with store.locked("U1"):
                record = store.load("U1")
                store.save(
                    "U1",
                    UserRecord(
                        money=record.money + 1,
                        equipped_rod=record.equipped_rod,
                        inventory=record.inventory,
                        bait_count=record.bait_count,
                        stats=record.stats,
                    ),
                )

    threads = [threading.Thread(target=_add_money) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.load("U1").money == 100 + 4 * 50


def test_record_files_follow_umask_and_keep_existing_mode(tmp_path: Path) -> None:
    store = _store(tmp_path)
    umask = os.umask(0)
    os.umask(umask)

    store.load("U1")
    path = tmp_path / "users" / "U1.json"
    assert stat.S_IMODE(path.stat().st_mode) == 0o666 & ~umask

    path.chmod(0o640)
    store.save("U1", UserRecord(money=5, equipped_rod="Vara Básica"))
    assert stat.S_IMODE(path.stat().st_mode) == 0o640


def test_backend_write_failure_becomes_persistence_error() -> None:
    class _FullDisk(MemoryBackend):
        def write(self, key: str, data: bytes) -> None:
            raise OSError("disco cheio")

    store = UserRecordStore(_FullDisk(), default_catalog())

    with pytest.raises(PersistenceError) as exc_info:
        store.load("U1")

    assert exc_info.value.user_id == "U1"
