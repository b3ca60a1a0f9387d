from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from pescabot.errors import CatalogError

logger = logging.getLogger(__name__)

ROD_CATEGORY = "rod"
BAIT_CATEGORY = "bait"

COMMON_FISH: Tuple[str, ...] = ("Tilápia", "Sardinha", "Carpa", "Bagre")
RARE_FISH: Tuple[str, ...] = ("Dourado", "Salmão", "Atum", "Cherne")
JUNK_ITEMS: Tuple[str, ...] = ("Garrafa Plástica", "Lata", "Saco Plástico", "Pneu Velho")

DEFAULT_WEIGHTS = {"common": 70, "rare": 5, "junk": 25}

SALE_PRICES: Dict[str, int] = {
    "Tilápia": 10,
    "Sardinha": 8,
    "Carpa": 12,
    "Bagre": 15,
    "Dourado": 100,
    "Salmão": 120,
    "Atum": 150,
    "Cherne": 200,
}

DEFAULT_SHOP_ITEMS = {
    "Vara Básica": {"price": 0, "default_owned": True, "category": ROD_CATEGORY, "rod_bonus": 0},
    "Vara Intermediária": {"price": 500, "category": ROD_CATEGORY, "rod_bonus": 5},
    "Vara Avançada": {"price": 2000, "category": ROD_CATEGORY, "rod_bonus": 10},
    "Isca Comum": {"price": 5, "consumable": True, "category": BAIT_CATEGORY},
    "Isca Rara": {"price": 20, "consumable": True, "category": BAIT_CATEGORY},
}


@dataclass(frozen=True)
class CatchWeights:
    common: int
    rare: int
    junk: int

    @property
    def total(self) -> int:
        return self.common + self.rare + self.junk


@dataclass(frozen=True)
class ShopItem:
    name: str
    price: int
    category: str
    is_default_owned: bool = False
    is_consumable: bool = False
    rod_bonus: int = 0

    @property
    def is_rod(self) -> bool:
        return self.category == ROD_CATEGORY

    @property
    def is_bait(self) -> bool:
        return self.category == BAIT_CATEGORY


@dataclass(frozen=True)
class Catalog:
    """Configuração estática do jogo: pools de captura, pesos, preços e loja."""

    common_species: Tuple[str, ...]
    rare_species: Tuple[str, ...]
    junk_items: Tuple[str, ...]
    weights: CatchWeights
    prices: Mapping[str, int] = field(default_factory=dict)
    shop_items: Mapping[str, ShopItem] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # congela os mapeamentos para que nenhum componente altere o catálogo
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))
        object.__setattr__(self, "shop_items", MappingProxyType(dict(self.shop_items)))
        _validate(self)

    def sale_price(self, species: str) -> Optional[int]:
        """Preço de venda da espécie, ou None quando ela não é vendável."""
        return self.prices.get(species)

    def shop_item(self, name: str) -> Optional[ShopItem]:
        return self.shop_items.get(name)

    @property
    def default_rod(self) -> ShopItem:
        return next(item for item in self.shop_items.values() if item.is_default_owned)

    def rod_bonus(self, rod_name: str) -> int:
        item = self.shop_items.get(rod_name)
        if item is None or not item.is_rod:
            return 0
        return item.rod_bonus


def _validate(catalog: Catalog) -> None:
    for label, pool in (
        ("common_species", catalog.common_species),
        ("rare_species", catalog.rare_species),
        ("junk_items", catalog.junk_items),
    ):
        if not pool:
            raise CatalogError(f"Pool vazia no catálogo: {label}")

    weights = catalog.weights
    if min(weights.common, weights.rare, weights.junk) < 0 or weights.total <= 0:
        raise CatalogError(f"Pesos de captura inválidos: {weights}")

    for species, price in catalog.prices.items():
        if price <= 0:
            raise CatalogError(f"Preço de venda deve ser positivo: {species} ({price})")

    defaults = [item for item in catalog.shop_items.values() if item.is_default_owned]
    if len(defaults) != 1:
        raise CatalogError(
            f"O catálogo precisa de exatamente uma vara inicial (encontradas {len(defaults)})."
        )
    if not defaults[0].is_rod:
        raise CatalogError(f"O item inicial {defaults[0].name!r} não é uma vara.")

    for item in catalog.shop_items.values():
        if item.price < 0:
            raise CatalogError(f"Preço de loja negativo: {item.name} ({item.price})")
        if item.rod_bonus < 0:
            raise CatalogError(f"Bônus de vara negativo: {item.name} ({item.rod_bonus})")


def infer_category(item_name: str) -> str:
    lowered = item_name.lower()
    if "vara" in lowered:
        return ROD_CATEGORY
    if "isca" in lowered:
        return BAIT_CATEGORY
    return "other"


def build_shop_items(raw_items: Mapping[str, object]) -> Dict[str, ShopItem]:
    items: Dict[str, ShopItem] = {}
    for name, data in raw_items.items():
        if not isinstance(name, str) or not name.strip():
            logger.warning("Item de loja ignorado: nome inválido (%r).", name)
            continue
        if not isinstance(data, dict):
            logger.warning("Item de loja ignorado (%s): formato inválido.", name)
            continue
        if "price" not in data:
            logger.warning("Item de loja ignorado (%s): campo obrigatório ausente (price).", name)
            continue
        try:
            price = int(data["price"])
            rod_bonus = int(data.get("rod_bonus", 0))
        except (TypeError, ValueError):
            logger.warning("Item de loja ignorado (%s): valores numéricos inválidos.", name)
            continue

        raw_category = data.get("category")
        category = (
            raw_category.strip()
            if isinstance(raw_category, str) and raw_category.strip()
            else infer_category(name)
        )
        items[name] = ShopItem(
            name=name,
            price=price,
            category=category,
            is_default_owned=bool(data.get("default_owned", data.get("owned", False))),
            is_consumable=bool(data.get("consumable", False)),
            rod_bonus=rod_bonus,
        )
    return items


def default_catalog() -> Catalog:
    return Catalog(
        common_species=COMMON_FISH,
        rare_species=RARE_FISH,
        junk_items=JUNK_ITEMS,
        weights=CatchWeights(**DEFAULT_WEIGHTS),
        prices=SALE_PRICES,
        shop_items=build_shop_items(DEFAULT_SHOP_ITEMS),
    )


def _species_tuple(data: Dict[str, object], key: str, fallback: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = data.get(key)
    if raw is None:
        return fallback
    if not isinstance(raw, list):
        raise CatalogError(f"Campo {key!r} deve ser uma lista de nomes.")
    return tuple(name.strip() for name in raw if isinstance(name, str) and name.strip())


def load_catalog(path: Path) -> Catalog:
    """Carrega um catálogo JSON; campos ausentes usam os valores padrão."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Não foi possível ler o catálogo ({path}): {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogError(f"Catálogo com formato inválido ({path}).")

    raw_weights = data.get("weights", DEFAULT_WEIGHTS)
    if not isinstance(raw_weights, dict):
        raise CatalogError("Campo 'weights' deve ser um objeto.")
    try:
        weights = CatchWeights(
            common=int(raw_weights.get("common", DEFAULT_WEIGHTS["common"])),
            rare=int(raw_weights.get("rare", DEFAULT_WEIGHTS["rare"])),
            junk=int(raw_weights.get("junk", DEFAULT_WEIGHTS["junk"])),
        )
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"Pesos de captura inválidos: {exc}") from exc

    raw_prices = data.get("prices", SALE_PRICES)
    if not isinstance(raw_prices, dict):
        raise CatalogError("Campo 'prices' deve ser um objeto.")
    prices: Dict[str, int] = {}
    for species, raw_price in raw_prices.items():
        try:
            prices[species] = int(raw_price)
        except (TypeError, ValueError):
            logger.warning("Preço ignorado (%s): valor inválido %r.", species, raw_price)

    raw_shop = data.get("shop_items", DEFAULT_SHOP_ITEMS)
    if not isinstance(raw_shop, dict):
        raise CatalogError("Campo 'shop_items' deve ser um objeto.")

    return Catalog(
        common_species=_species_tuple(data, "common_species", COMMON_FISH),
        rare_species=_species_tuple(data, "rare_species", RARE_FISH),
        junk_items=_species_tuple(data, "junk_items", JUNK_ITEMS),
        weights=weights,
        prices=prices,
        shop_items=build_shop_items(raw_shop),
    )
