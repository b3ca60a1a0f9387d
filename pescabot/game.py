from __future__ import annotations

import logging
import random
from typing import Optional

from pescabot import economy, replies
from pescabot.catalog import Catalog, default_catalog, load_catalog
from pescabot.commands import (
    Buy,
    Command,
    Fish,
    Sell,
    ShowInventory,
    ShowRanking,
    ShowShop,
    Unknown,
    parse_command,
)
from pescabot.config import Settings
from pescabot.errors import CorruptRecordError, PersistenceError, PescaBotError
from pescabot.fishing import CatchResolver
from pescabot.models import UserRecord
from pescabot.store import JsonDirectoryBackend, UserRecordStore

logger = logging.getLogger(__name__)


class FishingGame:
    """Roteia comandos de chat para as operações do jogo e monta a resposta."""

    def __init__(self, catalog: Catalog, store: UserRecordStore, resolver: CatchResolver) -> None:
        self.catalog = catalog
        self.store = store
        self.resolver = resolver

    def handle_command(self, user_id: str, text: str) -> Optional[str]:
        command = parse_command(text)
        if command is None:
            return None
        if isinstance(command, ShowRanking):
            return replies.ranking_reply()

        try:
            with self.store.locked(user_id):
                record = self.store.load(user_id)
                return self._dispatch(user_id, record, command)
        except CorruptRecordError as exc:
            logger.error("Registro ilegível, nada foi alterado: %s", exc)
            return replies.failure_reply()
        except PersistenceError as exc:
            logger.error("Falha ao gravar, registro anterior mantido: %s", exc)
            return replies.failure_reply()
        except PescaBotError as exc:
            return replies.error_reply(exc)

    def _dispatch(self, user_id: str, record: UserRecord, command: Command) -> str:
        if isinstance(command, Fish):
            updated, result = economy.fish(record, self.resolver)
            self.store.save(user_id, updated)
            return replies.catch_reply(result)

        if isinstance(command, ShowInventory):
            return replies.inventory_reply(record)

        if isinstance(command, Sell):
            updated, sale = economy.sell_all(record, self.catalog)
            if not sale.nothing_to_sell:
                self.store.save(user_id, updated)
            return replies.sale_reply(sale)

        if isinstance(command, ShowShop):
            return replies.shop_reply(record, economy.shop_listing(record, self.catalog))

        if isinstance(command, Buy):
            updated, purchase = economy.buy_item(record, self.catalog, command.item_name)
            self.store.save(user_id, updated)
            return replies.purchase_reply(purchase)

        if isinstance(command, ShowRanking):
            return replies.ranking_reply()

        if isinstance(command, Unknown):
            return replies.help_reply()

        raise TypeError(f"Comando não suportado: {command!r}")


def create_game(settings: Settings) -> FishingGame:
    if settings.catalog_path is not None:
        catalog = load_catalog(settings.catalog_path)
        logger.info("Catálogo carregado de %s", settings.catalog_path)
    else:
        catalog = default_catalog()

    store = UserRecordStore(JsonDirectoryBackend(settings.data_dir), catalog)
    store.initialize()
    logger.info("Registros de jogadores em %s", settings.data_dir)

    resolver = CatchResolver(catalog, random.Random(settings.seed))
    return FishingGame(catalog, store, resolver)
