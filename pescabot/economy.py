from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Mapping, Tuple

from pescabot.catalog import Catalog
from pescabot.errors import (
    InsufficientFundsError,
    ItemNotFoundError,
    UnknownItemCategoryError,
)
from pescabot.fishing import CatchResolver
from pescabot.models import (
    CatchResult,
    PurchaseResult,
    SaleResult,
    ShopEntry,
    SoldItem,
    UserRecord,
)

logger = logging.getLogger(__name__)


def add_item(inventory: Mapping[str, int], name: str, quantity: int = 1) -> Dict[str, int]:
    if quantity <= 0:
        raise ValueError(f"Quantidade deve ser positiva: {quantity}")
    updated = dict(inventory)
    updated[name] = updated.get(name, 0) + quantity
    return updated


def remove_item(inventory: Mapping[str, int], name: str, quantity: int | None = None) -> Dict[str, int]:
    """Remove unidades de um item; sem quantidade, remove a entrada inteira."""
    current = inventory.get(name, 0)
    if current <= 0:
        raise KeyError(name)
    if quantity is None:
        quantity = current
    if quantity <= 0 or quantity > current:
        raise ValueError(f"Quantidade inválida para {name}: {quantity} (possui {current})")

    updated = dict(inventory)
    remaining = current - quantity
    if remaining:
        updated[name] = remaining
    else:
        del updated[name]
    return updated


def apply_catch(record: UserRecord, result: CatchResult) -> UserRecord:
    return replace(
        record,
        inventory=add_item(record.inventory, result.species),
        stats=record.stats.record(result.category),
    )


def fish(record: UserRecord, resolver: CatchResolver) -> Tuple[UserRecord, CatchResult]:
    result = resolver.resolve(record.equipped_rod)
    return apply_catch(record, result), result


def sell_all(record: UserRecord, catalog: Catalog) -> Tuple[UserRecord, SaleResult]:
    sold: List[SoldItem] = []
    inventory: Dict[str, int] = dict(record.inventory)

    for name, quantity in record.inventory.items():
        price = catalog.sale_price(name)
        if price is None:
            continue
        sold.append(SoldItem(name=name, quantity=quantity, unit_price=price))
        inventory = remove_item(inventory, name)

    if not sold:
        return record, SaleResult(sold=(), balance=record.money)

    result = SaleResult(sold=tuple(sold), balance=record.money)
    money = record.money + result.total
    logger.debug("Venda de %d item(ns) por %d.", len(sold), result.total)
    return (
        replace(record, money=money, inventory=inventory),
        replace(result, balance=money),
    )


def buy_item(record: UserRecord, catalog: Catalog, item_name: str) -> Tuple[UserRecord, PurchaseResult]:
    item = catalog.shop_item(item_name)
    if item is None:
        raise ItemNotFoundError(item_name)
    if record.money < item.price:
        raise InsufficientFundsError(item.name, item.price, record.money)

    money = record.money - item.price
    if item.is_rod:
        # a vara anterior não é lembrada; trocar de vara exige comprar de novo
        updated = replace(record, money=money, equipped_rod=item.name)
    elif item.is_bait:
        updated = replace(record, money=money, bait_count=record.bait_count + 1)
    else:
        raise UnknownItemCategoryError(item.name, item.category)

    logger.debug("Compra de %s por %d.", item.name, item.price)
    return updated, PurchaseResult(item=item, balance=updated.money, bait_count=updated.bait_count)


def shop_listing(record: UserRecord, catalog: Catalog) -> List[ShopEntry]:
    entries: List[ShopEntry] = []
    for item in catalog.shop_items.values():
        # sem memória de posse: uma vara só é "sua" enquanto está equipada
        equipped = item.is_rod and item.name == record.equipped_rod
        entries.append(ShopEntry(item=item, equipped=equipped))
    return entries
