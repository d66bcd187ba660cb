"""Versioned starter food catalog seeding."""

import logging
from dataclasses import dataclass, replace
from uuid import NAMESPACE_URL, uuid5

from better_food_logs.domain.foods import Food
from better_food_logs.services.identity import food_signature
from better_food_logs.services.local_store import LocalStore
from better_food_logs.services.remote_store import RemoteStore

# Bump when STARTER_FOODS changes so local stores get refreshed.
STARTER_CATALOG_VERSION = "v1"

_CATALOG_NAMESPACE = uuid5(NAMESPACE_URL, "better-food-logs/starter-catalog")

_logger = logging.getLogger(__name__)


def _starter(  # noqa: PLR0913
    name: str,
    brand_name: str | None,
    serving_description: str,
    serving_mass_g: float | None,
    serving_volume_ml: float | None,
    calories: float,
    protein_g: float,
    fat_g: float,
    carbs_g: float,
    sugar_g: float,
    sodium_mg: float,
    cholesterol_mg: float,
) -> Food:
    food = Food(
        id="",
        name=name,
        brand_name=brand_name,
        serving_description=serving_description,
        serving_mass_g=serving_mass_g,
        serving_volume_ml=serving_volume_ml,
        calories=calories,
        protein_g=protein_g,
        fat_g=fat_g,
        carbs_g=carbs_g,
        sugar_g=sugar_g,
        sodium_mg=sodium_mg,
        cholesterol_mg=cholesterol_mg,
    )
    stable_id = str(uuid5(_CATALOG_NAMESPACE, food_signature(food)))
    return replace(food, id=stable_id)


STARTER_FOODS: tuple[Food, ...] = (
    _starter("Banana", None, "1 medium banana", 118, None, 105, 1.3, 0.4, 27, 14.4, 1, 0),
    _starter("Apple", None, "1 medium apple", 182, None, 95, 0.5, 0.3, 25, 19, 2, 0),
    _starter("Large Egg", None, "1 large egg", 50, None, 72, 6.3, 4.8, 0.4, 0.2, 71, 186),
    _starter("Chicken Breast", None, "100g cooked", 100, None, 165, 31, 3.6, 0, 0, 74, 85),
    _starter("White Rice", None, "1 cup cooked", 158, None, 205, 4.3, 0.4, 45, 0.1, 2, 0),
    _starter("Greek Yogurt", "Chobani", "1 container", 150, None, 80, 14, 0, 6, 4, 55, 5),
    _starter("Whole Milk", None, "1 cup", None, 244, 149, 7.7, 7.9, 11.7, 12.3, 105, 24),
    _starter("Rolled Oats", "Quaker", "1/2 cup dry", 40, None, 150, 5, 3, 27, 1, 0, 0),
    _starter("Peanut Butter", "Jif", "2 tbsp", 32, None, 190, 7, 16, 8, 3, 140, 0),
    _starter("Orange Juice", "Tropicana", "1 cup", None, 240, 110, 2, 0, 26, 22, 0, 0),
    _starter("Almonds", None, "1 oz (23 almonds)", 28, None, 164, 6, 14, 6, 1.2, 0, 0),
    _starter("Whole Wheat Bread", None, "1 slice", 32, None, 81, 4, 1.1, 13.8, 1.4, 146, 0),
)


@dataclass
class CatalogService:
    """Installs the starter catalog into the local and remote stores."""

    local_store: LocalStore
    remote_store: RemoteStore

    def ensure_local_seed(self) -> bool:
        """Seed local foods when empty or when the catalog version changed.

        User-created foods are kept on a version bump so existing local
        logs keep resolving.
        """
        foods = self.local_store.get_foods()
        installed = self.local_store.get_catalog_version()
        if foods and installed == STARTER_CATALOG_VERSION:
            return False
        starter_ids = {food.id for food in STARTER_FOODS}
        kept = [food for food in foods if food.id not in starter_ids]
        self.local_store.save_foods([*STARTER_FOODS, *kept])
        self.local_store.set_catalog_version(STARTER_CATALOG_VERSION)
        _logger.info(
            "Installed starter catalog %s locally (kept %s foods)",
            STARTER_CATALOG_VERSION,
            len(kept),
        )
        return True

    def ensure_remote_seed(self) -> bool:
        """Insert the starter catalog remotely when the remote has no foods."""
        has_foods = self.remote_store.has_foods()
        if has_foods is None or has_foods:
            return False
        inserted = self.remote_store.add_foods(list(STARTER_FOODS), keep_ids=True)
        if inserted:
            _logger.info("Installed starter catalog remotely: %s foods", len(inserted))
        return bool(inserted)
