from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

USERS_DIR_NAME = "users"

ENV_DATA_DIR = "PESCABOT_DATA_DIR"
ENV_CATALOG = "PESCABOT_CATALOG"
ENV_SEED = "PESCABOT_SEED"
ENV_LOG_LEVEL = "PESCABOT_LOG_LEVEL"


def get_default_data_dir() -> Path:
    return Path(__file__).resolve().parent.parent / USERS_DIR_NAME


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    catalog_path: Optional[Path] = None
    seed: Optional[int] = None
    log_level: str = "INFO"


def _parse_seed(raw_seed: Optional[str]) -> Optional[int]:
    if raw_seed is None or not raw_seed.strip():
        return None
    try:
        return int(raw_seed)
    except ValueError as exc:
        raise ValueError(f"{ENV_SEED} deve ser um inteiro, recebido {raw_seed!r}") from exc


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        environ = os.environ

    raw_data_dir = environ.get(ENV_DATA_DIR, "").strip()
    raw_catalog = environ.get(ENV_CATALOG, "").strip()
    return Settings(
        data_dir=Path(raw_data_dir) if raw_data_dir else get_default_data_dir(),
        catalog_path=Path(raw_catalog) if raw_catalog else None,
        seed=_parse_seed(environ.get(ENV_SEED)),
        log_level=environ.get(ENV_LOG_LEVEL, "INFO").strip().upper() or "INFO",
    )
