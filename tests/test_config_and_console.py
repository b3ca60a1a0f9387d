from __future__ import annotations

import logging
from pathlib import Path

import pytest

import start_bot
from pescabot.config import Settings, get_default_data_dir, load_settings
from pescabot.log import setup_logger


def test_load_settings_defaults() -> None:
    settings = load_settings({})

    assert settings == Settings(data_dir=get_default_data_dir())
    assert settings.data_dir.name == "users"


def test_load_settings_from_environment(tmp_path: Path) -> None:
    settings = load_settings(
        {
            "PESCABOT_DATA_DIR": str(tmp_path / "jogadores"),
            "PESCABOT_CATALOG": str(tmp_path / "catalog.json"),
            "PESCABOT_SEED": "17",
            "PESCABOT_LOG_LEVEL": "debug",
        }
    )

    assert settings.data_dir == tmp_path / "jogadores"
    assert settings.catalog_path == tmp_path / "catalog.json"
    assert settings.seed == 17
    assert settings.log_level == "DEBUG"


def test_invalid_seed_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_settings({"PESCABOT_SEED": "abc"})


def test_setup_logger_does_not_duplicate_handlers() -> None:
    logger = setup_logger("DEBUG", name="pescabot.test")
    again = setup_logger("INFO", name="pescabot.test")

    assert logger is again
    assert len(again.handlers) == 1
    assert again.level == logging.INFO
    again.handlers.clear()


def test_split_sender() -> None:
    assert start_bot.split_sender("/pescar", "console") == ("console", "/pescar")
    assert start_bot.split_sender("@U2 /loja", "console") == ("U2", "/loja")
    assert start_bot.split_sender("@ /loja", "console") == ("console", "@ /loja")


def test_console_session(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("PESCABOT_DATA_DIR", str(tmp_path / "users"))
    monkeypatch.setenv("PESCABOT_SEED", "3")
    monkeypatch.setattr(start_bot, "colorama_init", lambda: None)
    monkeypatch.setattr(start_bot, "setup_logger", lambda level: None)
    lines = iter(["/inventario", "@U2 /comprar Isca Comum", "olá", "sair"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))

    start_bot.main(["--user", "U1"])

    output = capsys.readouterr().out
    assert "Dinheiro: R$ 100" in output
    assert "Isca Comum comprada! Iscas: 1" in output
    assert "Até a próxima pesca!" in output
    assert (tmp_path / "users" / "U1.json").exists()
    assert (tmp_path / "users" / "U2.json").exists()
