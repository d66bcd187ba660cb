"""Supabase repository for foods and food logs."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from supabase import Client

from better_food_logs.domain.errors import RemoteStoreError
from better_food_logs.domain.foods import Food, FoodLog, FoodLogEntry
from better_food_logs.services.remote_store import FoodRepository

FOODS_TABLE = "foods"
LOGS_TABLE = "food_logs"
_NIL_UUID = "00000000-0000-0000-0000-000000000000"
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for foods and food logs.

    Every method raises on failure; callers decide whether to degrade.
    """

    client: Client

    def list_foods(self) -> list[Food]:
        """Return every remote food."""
        response = self.client.table(FOODS_TABLE).select("*").execute()
        return [food_from_row(row) for row in response.data or []]

    def list_foods_by_ids(self, food_ids: list[str]) -> list[Food]:
        """Return the remote foods whose ids are in the given list."""
        if not food_ids:
            return []
        response = (
            self.client.table(FOODS_TABLE).select("*").in_("id", food_ids).execute()
        )
        return [food_from_row(row) for row in response.data or []]

    def has_foods(self) -> bool:
        """Return True if the remote catalog holds at least one food."""
        response = self.client.table(FOODS_TABLE).select("id").limit(1).execute()
        return bool(response.data)

    def insert_foods(self, foods: list[Food], keep_ids: bool = False) -> list[Food]:
        """Insert foods in one batch and return the stored rows."""
        if not foods:
            return []
        payload = [food_to_row(food, include_id=keep_ids) for food in foods]
        response = self.client.table(FOODS_TABLE).insert(payload).execute()
        if not response.data:
            raise RemoteStoreError("Failed to insert foods")
        return [food_from_row(row) for row in response.data]

    def list_food_logs(self, user_id: str) -> list[FoodLog]:
        """Return a user's food logs, newest first, without foods attached."""
        response = (
            self.client.table(LOGS_TABLE)
            .select("id, user_id, food_id, servings_consumed, consumed_date")
            .eq("user_id", user_id)
            .order("consumed_date", desc=True)
            .execute()
        )
        return [log_from_row(row) for row in response.data or []]

    def list_log_food_refs(self, user_id: str) -> list[tuple[str, str]]:
        """Return (log id, food id) pairs for a user's logs."""
        response = (
            self.client.table(LOGS_TABLE)
            .select("id, food_id")
            .eq("user_id", user_id)
            .execute()
        )
        return [(str(row["id"]), str(row["food_id"])) for row in response.data or []]

    def insert_food_logs(self, entries: list[FoodLogEntry]) -> list[FoodLog]:
        """Insert food logs in one batch and return the stored rows."""
        if not entries:
            return []
        payload = [log_to_row(entry) for entry in entries]
        response = self.client.table(LOGS_TABLE).insert(payload).execute()
        if not response.data:
            raise RemoteStoreError("Failed to insert food logs")
        return [log_from_row(row) for row in response.data]

    def update_food_log(self, log_id: str, servings_consumed: float) -> FoodLog | None:
        """Update a log's servings; None if no row matched."""
        response = (
            self.client.table(LOGS_TABLE)
            .update({"servings_consumed": servings_consumed})
            .eq("id", log_id)
            .execute()
        )
        if not response.data:
            return None
        return log_from_row(response.data[0])

    def delete_food_log(self, log_id: str) -> bool:
        """Delete a log; False if no row matched."""
        response = self.client.table(LOGS_TABLE).delete().eq("id", log_id).execute()
        return bool(response.data)

    def delete_logs_for_foods(self, user_id: str, food_ids: list[str]) -> int:
        """Delete a user's logs referencing any of the food ids."""
        if not food_ids:
            return 0
        response = (
            self.client.table(LOGS_TABLE)
            .delete()
            .in_("food_id", food_ids)
            .eq("user_id", user_id)
            .execute()
        )
        return len(response.data or [])

    def delete_all_foods(self) -> None:
        """Delete every remote food."""
        self.client.table(FOODS_TABLE).delete().neq("id", _NIL_UUID).execute()

    def delete_all_logs(self) -> None:
        """Delete every remote food log."""
        self.client.table(LOGS_TABLE).delete().neq("id", _NIL_UUID).execute()


def food_to_row(food: Food, include_id: bool = True) -> dict[str, object]:
    """Convert a food into a remote row."""
    row: dict[str, object] = {
        "name": food.name,
        "brand_name": food.brand_name or None,
        "serving_description": food.serving_description,
        "serving_mass_g": food.serving_mass_g or None,
        "serving_volume_ml": food.serving_volume_ml or None,
        "calories": food.calories,
        "protein_g": food.protein_g,
        "fat_g": food.fat_g,
        "carbs_g": food.carbs_g,
        "sugar_g": food.sugar_g,
        "sodium_mg": food.sodium_mg,
        "cholesterol_mg": food.cholesterol_mg,
    }
    if include_id:
        row["id"] = food.id
    return row


def food_from_row(row: dict[str, object]) -> Food:
    """Parse a remote food row; null nutrients read as zero."""
    return Food(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        brand_name=row.get("brand_name") or None,
        serving_description=str(row.get("serving_description") or ""),
        serving_mass_g=_optional_float(row.get("serving_mass_g")),
        serving_volume_ml=_optional_float(row.get("serving_volume_ml")),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        sugar_g=float(row.get("sugar_g") or 0.0),
        sodium_mg=float(row.get("sodium_mg") or 0.0),
        cholesterol_mg=float(row.get("cholesterol_mg") or 0.0),
    )


def log_to_row(entry: FoodLogEntry) -> dict[str, object]:
    """Convert a food log entry into a remote row."""
    return {
        "user_id": entry.user_id,
        "food_id": entry.food_id,
        "servings_consumed": entry.servings_consumed,
        "consumed_date": ms_to_iso(entry.consumed_at_ms),
    }


def log_from_row(row: dict[str, object]) -> FoodLog:
    """Parse a remote food log row with its timestamp in epoch ms."""
    return FoodLog(
        id=str(row["id"]),
        user_id=str(row.get("user_id") or ""),
        food_id=str(row["food_id"]),
        servings_consumed=float(row.get("servings_consumed") or 0.0),
        consumed_at_ms=iso_to_ms(str(row["consumed_date"])),
    )


def ms_to_iso(value_ms: int) -> str:
    """Format epoch milliseconds as an ISO-8601 UTC string."""
    moment = _EPOCH + timedelta(milliseconds=value_ms)
    return moment.isoformat(timespec="milliseconds")


def iso_to_ms(value: str) -> int:
    """Parse an ISO-8601 string into epoch milliseconds."""
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return (moment - _EPOCH) // _MILLISECOND


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value) or None
