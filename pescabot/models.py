from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Tuple

from pescabot.catalog import Catalog, ShopItem

STARTING_MONEY = 100


class CatchCategory(str, Enum):
    COMMON = "common"
    RARE = "rare"
    JUNK = "junk"


@dataclass(frozen=True)
class CatchStats:
    total_catches: int = 0
    common_caught: int = 0
    rare_caught: int = 0
    junk_caught: int = 0

    def record(self, category: CatchCategory) -> "CatchStats":
        counter = {
            CatchCategory.COMMON: "common_caught",
            CatchCategory.RARE: "rare_caught",
            CatchCategory.JUNK: "junk_caught",
        }[category]
        return replace(
            self,
            total_catches=self.total_catches + 1,
            **{counter: getattr(self, counter) + 1},
        )

    def is_consistent(self) -> bool:
        return self.total_catches == self.common_caught + self.rare_caught + self.junk_caught


@dataclass(frozen=True)
class UserRecord:
    """Estado persistido de um jogador. Nunca é alterado no lugar."""

    money: int
    equipped_rod: str
    inventory: Dict[str, int] = field(default_factory=dict)
    bait_count: int = 0
    stats: CatchStats = field(default_factory=CatchStats)


def new_user_record(catalog: Catalog) -> UserRecord:
    return UserRecord(
        money=STARTING_MONEY,
        equipped_rod=catalog.default_rod.name,
    )


@dataclass(frozen=True)
class CatchResult:
    category: CatchCategory
    species: str

    @property
    def is_rare(self) -> bool:
        return self.category is CatchCategory.RARE


@dataclass(frozen=True)
class SoldItem:
    name: str
    quantity: int
    unit_price: int

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class SaleResult:
    sold: Tuple[SoldItem, ...]
    balance: int

    @property
    def total(self) -> int:
        return sum(item.subtotal for item in self.sold)

    @property
    def nothing_to_sell(self) -> bool:
        return not self.sold


@dataclass(frozen=True)
class PurchaseResult:
    item: ShopItem
    balance: int
    bait_count: int


@dataclass(frozen=True)
class ShopEntry:
    item: ShopItem
    equipped: bool
