from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Protocol
from urllib.parse import quote

from pescabot.catalog import Catalog
from pescabot.errors import CorruptRecordError, PersistenceError
from pescabot.models import CatchStats, UserRecord, new_user_record

logger = logging.getLogger(__name__)

RECORD_VERSION = 1
RECORD_SUFFIX = ".json"

# chaves usadas pelos arquivos gravados pela versão original do bot
LEGACY_KEYS = {
    "fishingRod": "equipped_rod",
    "bait": "bait_count",
}
LEGACY_TOTAL_KEY = "totalFishing"


class StorageBackend(Protocol):
    def initialize(self) -> None: ...

    def read(self, key: str) -> Optional[bytes]: ...

    def write(self, key: str, data: bytes) -> None: ...


class MemoryBackend:
    def __init__(self) -> None:
        self.data: Dict[str, bytes] = {}

    def initialize(self) -> None:
        pass

    def read(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def write(self, key: str, data: bytes) -> None:
        self.data[key] = bytes(data)


def _record_file_mode(path: Path) -> int:
    # NamedTemporaryFile cria com 0600; mantém o modo atual ou segue a umask
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class JsonDirectoryBackend:
    """Um arquivo JSON por usuário dentro de um diretório."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def initialize(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        # ids do WhatsApp (5511...@c.us) continuam legíveis
        return self.base_dir / f"{quote(key, safe='@.+-_')}{RECORD_SUFFIX}"

    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        handle = tempfile.NamedTemporaryFile(
            dir=self.base_dir,
            prefix=f".{path.stem}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(handle.name, _record_file_mode(path))
            os.replace(handle.name, path)
        except Exception:
            Path(handle.name).unlink(missing_ok=True)
            raise


def serialize_record(record: UserRecord) -> Dict[str, object]:
    return {
        "version": RECORD_VERSION,
        "money": record.money,
        "inventory": dict(record.inventory),
        "equipped_rod": record.equipped_rod,
        "bait_count": record.bait_count,
        "stats": {
            "total_catches": record.stats.total_catches,
            "common_caught": record.stats.common_caught,
            "rare_caught": record.stats.rare_caught,
            "junk_caught": record.stats.junk_caught,
        },
    }


def _require_count(raw: object, label: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{label} deve ser inteiro, recebido {raw!r}")
    if raw < 0:
        raise ValueError(f"{label} não pode ser negativo ({raw})")
    return raw


def restore_inventory(raw_inventory: object) -> Dict[str, int]:
    if not isinstance(raw_inventory, dict):
        raise ValueError("inventory deve ser um objeto")
    inventory: Dict[str, int] = {}
    for name, quantity in raw_inventory.items():
        count = _require_count(quantity, f"inventory[{name!r}]")
        if count == 0:
            raise ValueError(f"inventory[{name!r}] não pode ser zero")
        inventory[name] = count
    return inventory


def restore_stats(raw_stats: object) -> CatchStats:
    if not isinstance(raw_stats, dict):
        raise ValueError("stats deve ser um objeto")
    if LEGACY_TOTAL_KEY in raw_stats:
        return restore_legacy_stats(raw_stats)
    stats = CatchStats(
        total_catches=_require_count(raw_stats.get("total_catches", 0), "total_catches"),
        common_caught=_require_count(raw_stats.get("common_caught", 0), "common_caught"),
        rare_caught=_require_count(raw_stats.get("rare_caught", 0), "rare_caught"),
        junk_caught=_require_count(raw_stats.get("junk_caught", 0), "junk_caught"),
    )
    if not stats.is_consistent():
        raise ValueError(f"total_catches não bate com as categorias: {stats}")
    return stats


def restore_legacy_stats(raw_stats: Dict[str, object]) -> CatchStats:
    # a versão antiga incrementava "junkFish" em vez de "junk" e gravava null,
    # então o lixo é deduzido do total
    total = _require_count(raw_stats.get(LEGACY_TOTAL_KEY), LEGACY_TOTAL_KEY)
    common = _require_count(raw_stats.get("commonFish", 0), "commonFish")
    rare = _require_count(raw_stats.get("rareFish", 0), "rareFish")
    junk = total - common - rare
    if junk < 0:
        raise ValueError(f"{LEGACY_TOTAL_KEY} menor que peixes contados ({total})")
    return CatchStats(
        total_catches=total,
        common_caught=common,
        rare_caught=rare,
        junk_caught=junk,
    )


def restore_equipped_rod(raw_rod: object, catalog: Catalog) -> str:
    if not isinstance(raw_rod, str):
        raise ValueError(f"equipped_rod deve ser texto, recebido {raw_rod!r}")
    item = catalog.shop_item(raw_rod)
    if item is None or not item.is_rod:
        raise ValueError(f"equipped_rod desconhecida: {raw_rod!r}")
    return raw_rod


def restore_record(raw: object, catalog: Catalog) -> UserRecord:
    """Reconstrói um UserRecord; qualquer inconsistência gera ValueError."""
    if not isinstance(raw, dict):
        raise ValueError("registro deve ser um objeto JSON")
    values = {LEGACY_KEYS.get(key, key): value for key, value in raw.items()}

    missing = [key for key in ("money", "inventory", "equipped_rod") if key not in values]
    if missing:
        raise ValueError(f"campos obrigatórios ausentes: {', '.join(missing)}")

    return UserRecord(
        money=_require_count(values["money"], "money"),
        inventory=restore_inventory(values["inventory"]),
        equipped_rod=restore_equipped_rod(values["equipped_rod"], catalog),
        bait_count=_require_count(values.get("bait_count", 0), "bait_count"),
        stats=restore_stats(values.get("stats", {})),
    )


class UserRecordStore:
    def __init__(self, backend: StorageBackend, catalog: Catalog) -> None:
        self.backend = backend
        self.catalog = catalog
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def initialize(self) -> None:
        self.backend.initialize()

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(user_id, threading.Lock())

    @contextmanager
    def locked(self, user_id: str) -> Iterator[None]:
        """Serializa load -> alteração -> save de um mesmo usuário."""
        with self._lock_for(user_id):
            yield

    def load(self, user_id: str) -> UserRecord:
        try:
            payload = self.backend.read(user_id)
        except OSError as exc:
            raise CorruptRecordError(user_id, f"falha de leitura: {exc}") from exc

        if payload is None:
            record = new_user_record(self.catalog)
            self.save(user_id, record)
            logger.info("Novo jogador registrado: %s", user_id)
            return record

        try:
            raw = json.loads(payload.decode("utf-8"))
            return restore_record(raw, self.catalog)
        except ValueError as exc:
            # JSONDecodeError e UnicodeDecodeError também são ValueError
            raise CorruptRecordError(user_id, str(exc)) from exc

    def save(self, user_id: str, record: UserRecord) -> None:
        data = json.dumps(serialize_record(record), indent=2, ensure_ascii=False)
        try:
            self.backend.write(user_id, data.encode("utf-8"))
        except OSError as exc:
            raise PersistenceError(user_id, str(exc)) from exc
