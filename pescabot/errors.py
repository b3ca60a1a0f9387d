from __future__ import annotations


class PescaBotError(Exception):
    """Base de todos os erros de dominio do bot de pesca."""


class CatalogError(PescaBotError, ValueError):
    pass


class ItemNotFoundError(PescaBotError):
    def __init__(self, item_name: str) -> None:
        super().__init__(f"Item não encontrado na loja: {item_name!r}")
        self.item_name = item_name


class InsufficientFundsError(PescaBotError):
    def __init__(self, item_name: str, price: int, balance: int) -> None:
        super().__init__(
            f"Saldo insuficiente para {item_name!r}: custa {price}, saldo {balance}"
        )
        self.item_name = item_name
        self.price = price
        self.balance = balance


class UnknownItemCategoryError(PescaBotError):
    def __init__(self, item_name: str, category: str) -> None:
        super().__init__(f"Item {item_name!r} não é vara nem isca ({category!r})")
        self.item_name = item_name
        self.category = category


class CorruptRecordError(PescaBotError):
    """O registro persistido existe mas não pode ser lido."""

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"Registro corrompido para {user_id!r}: {reason}")
        self.user_id = user_id
        self.reason = reason


class PersistenceError(PescaBotError):
    """Falha ao gravar o registro; o arquivo anterior continua intacto."""

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"Não foi possível gravar o registro de {user_id!r}: {reason}")
        self.user_id = user_id
        self.reason = reason
