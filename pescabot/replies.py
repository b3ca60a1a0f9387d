from __future__ import annotations

from typing import Iterable, List

from pescabot.errors import (
    InsufficientFundsError,
    ItemNotFoundError,
    PescaBotError,
    UnknownItemCategoryError,
)
from pescabot.models import (
    CatchCategory,
    CatchResult,
    PurchaseResult,
    SaleResult,
    ShopEntry,
    UserRecord,
)

CATEGORY_LABELS = {
    CatchCategory.COMMON: "comum",
    CatchCategory.RARE: "⭐ RARO ⭐",
    CatchCategory.JUNK: "lixo",
}

HELP_LINES = (
    "🎣 *Bot de Pesca - Ajuda*",
    "",
    "/pescar - Inicia uma pescaria",
    "/inventario - Mostra seus itens",
    "/vender - Vende todos os peixes",
    "/loja - Mostra itens para comprar",
    "/comprar [item] - Compra um item",
    "/ranking - Mostra o ranking",
    "",
    "Boa pescaria! 🎣",
)


def format_money(amount: int) -> str:
    return f"R$ {amount}"


def catch_reply(result: CatchResult) -> str:
    return "\n".join(
        [
            "🎣 *Pescaria Realizada!*",
            f"Você pescou: *{result.species}*",
            f"Tipo: {CATEGORY_LABELS[result.category]}",
            "",
            "Use /inventario para ver seus itens",
        ]
    )


def inventory_lines(inventory: dict) -> List[str]:
    if not inventory:
        return ["Nenhum item encontrado"]
    return [f"{name}: {quantity}" for name, quantity in inventory.items() if quantity > 0]


def inventory_reply(record: UserRecord) -> str:
    lines = [
        "💰 *Inventário*",
        f"Dinheiro: {format_money(record.money)}",
        f"Vara: {record.equipped_rod}",
        f"Iscas: {record.bait_count}",
        "",
        "*Itens:*",
    ]
    lines.extend(inventory_lines(record.inventory))
    lines.extend(["", "Use /vender para vender peixes"])
    return "\n".join(lines)


def sale_reply(result: SaleResult) -> str:
    if result.nothing_to_sell:
        return "❌ Nenhum peixe para vender!"
    sold = ", ".join(f"{item.name} ({item.quantity}x)" for item in result.sold)
    return "\n".join(
        [
            "💰 *Venda Realizada!*",
            f"Itens vendidos: {sold}",
            f"Total: {format_money(result.total)}",
            f"Saldo atual: {format_money(result.balance)}",
        ]
    )


def shop_reply(record: UserRecord, entries: Iterable[ShopEntry]) -> str:
    lines = [
        "🛒 *Loja de Pesca*",
        "",
        f"Seu saldo: {format_money(record.money)}",
        "",
        "*Itens disponíveis:*",
    ]
    for entry in entries:
        mark = "✅" if entry.equipped else "❌"
        suffix = " (equipada)" if entry.equipped else ""
        if entry.item.is_consumable:
            suffix = " (consumível)"
        lines.append(f"{mark} {entry.item.name} - {format_money(entry.item.price)}{suffix}")
    lines.extend(["", "Use /comprar [item] para comprar"])
    return "\n".join(lines)


def purchase_reply(result: PurchaseResult) -> str:
    if result.item.is_bait:
        return f"✅ {result.item.name} comprada! Iscas: {result.bait_count}"
    return f"✅ {result.item.name} comprada com sucesso!"


def ranking_reply() -> str:
    return "🏆 *Ranking em desenvolvimento*\nEm breve teremos um ranking global!"


def help_reply() -> str:
    return "\n".join(HELP_LINES)


def failure_reply() -> str:
    return "⚠️ Não foi possível acessar seus dados agora. Tente novamente mais tarde."


def error_reply(error: PescaBotError) -> str:
    if isinstance(error, ItemNotFoundError):
        return "❌ Item não encontrado na loja!"
    if isinstance(error, InsufficientFundsError):
        return (
            "❌ Saldo insuficiente!\n"
            f"{error.item_name} custa {format_money(error.price)}, "
            f"seu saldo é {format_money(error.balance)}."
        )
    if isinstance(error, UnknownItemCategoryError):
        return "❌ Não foi possível comprar o item"
    return failure_reply()
