from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

COMMAND_PREFIX = "/"


@dataclass(frozen=True)
class Fish:
    pass


@dataclass(frozen=True)
class ShowInventory:
    pass


@dataclass(frozen=True)
class Sell:
    pass


@dataclass(frozen=True)
class ShowShop:
    pass


@dataclass(frozen=True)
class Buy:
    item_name: str


@dataclass(frozen=True)
class ShowRanking:
    pass


@dataclass(frozen=True)
class Unknown:
    text: str


Command = Union[Fish, ShowInventory, Sell, ShowShop, Buy, ShowRanking, Unknown]

SIMPLE_COMMANDS = {
    "/pescar": Fish,
    "/inventario": ShowInventory,
    "/vender": Sell,
    "/loja": ShowShop,
    "/ranking": ShowRanking,
}
BUY_COMMAND = "/comprar"


def parse_command(text: str) -> Optional[Command]:
    """Converte o texto recebido em um comando; None se não for comando."""
    cleaned = text.strip()
    if not cleaned.startswith(COMMAND_PREFIX):
        return None

    token, *args = cleaned.split()
    token = token.lower()

    if token == BUY_COMMAND and args:
        # o nome do item mantém maiúsculas e acentos, como na loja
        return Buy(item_name=" ".join(args))
    command_type = SIMPLE_COMMANDS.get(token)
    if command_type is not None and not args:
        return command_type()
    return Unknown(text=cleaned)
