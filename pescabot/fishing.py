from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence, TypeVar

from pescabot.catalog import Catalog, CatchWeights
from pescabot.models import CatchCategory, CatchResult

T = TypeVar("T")


class RandomProvider(Protocol):
    """Subconjunto de random.Random usado nas rolagens de captura."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


class CatchResolver:
    def __init__(self, catalog: Catalog, rng: Optional[RandomProvider] = None) -> None:
        self.catalog = catalog
        self.rng = rng if rng is not None else random.Random()

    def effective_weights(self, equipped_rod: str) -> CatchWeights:
        # o bônus da vara só aumenta o peso comum; raro e lixo ficam intactos
        weights = self.catalog.weights
        return CatchWeights(
            common=weights.common + self.catalog.rod_bonus(equipped_rod),
            rare=weights.rare,
            junk=weights.junk,
        )

    def roll_category(self, equipped_rod: str) -> CatchCategory:
        weights = self.effective_weights(equipped_rod)
        roll = self.rng.random() * weights.total

        if roll < weights.common:
            return CatchCategory.COMMON
        if roll < weights.common + weights.rare:
            return CatchCategory.RARE
        return CatchCategory.JUNK

    def resolve(self, equipped_rod: str) -> CatchResult:
        category = self.roll_category(equipped_rod)
        pool = {
            CatchCategory.COMMON: self.catalog.common_species,
            CatchCategory.RARE: self.catalog.rare_species,
            CatchCategory.JUNK: self.catalog.junk_items,
        }[category]
        return CatchResult(category=category, species=self.rng.choice(pool))
