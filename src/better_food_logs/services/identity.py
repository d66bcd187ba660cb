"""Content-based identity for food records across stores."""

from better_food_logs.domain.foods import Food, FoodInput

_SEPARATOR = "\x1f"


def food_signature(food: Food | FoodInput) -> str:
    """Return a stable signature for the logical food.

    Two records with equal signatures are the same food regardless of
    their identifiers. Name, brand and serving description are compared
    case- and whitespace-insensitively; a missing mass counts as zero.
    """
    return _SEPARATOR.join(
        (
            _normalize(food.name),
            _normalize(food.brand_name),
            _normalize(food.serving_description),
            _mass_key(food.serving_mass_g),
        )
    )


def _normalize(value: str | None) -> str:
    return " ".join((value or "").split()).lower()


def _mass_key(value: float | None) -> str:
    # Exact round-trip text; 40, 40.0 and -0.0/0 collapse to one key.
    mass = float(value or 0.0)
    if mass == 0:
        return "0"
    if mass.is_integer():
        return str(int(mass))
    return repr(mass)
