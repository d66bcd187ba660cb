"""Validation, sanitizing and duplicate detection for food records."""

import math
import re
from collections.abc import Iterable

from better_food_logs.domain.foods import Food, FoodInput
from better_food_logs.domain.validation import ValidationResult

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
BRAND_MAX_LENGTH = 50
SERVING_MIN_LENGTH = 3
SERVING_MAX_LENGTH = 100
SERVING_SIZE_MIN = 0.1
SERVING_SIZE_MAX = 10000
CALORIES_MAX = 10000
DUPLICATE_MASS_TOLERANCE = 5

_NUTRIENT_LIMITS = (
    ("protein_g", "Protein", 1000),
    ("fat_g", "Fat", 1000),
    ("carbs_g", "Carbohydrates", 1000),
    ("sugar_g", "Sugar", 1000),
    ("sodium_mg", "Sodium", 100000),
    ("cholesterol_mg", "Cholesterol", 10000),
)

# Letters (any script), digits, whitespace and - ( ) & . , ' "
_TEXT_PATTERN = re.compile(r"^(?:[^\W_]|[\s\-()&.,'\"])+$")
_SERVING_PATTERN = re.compile(r"^(?:[^\W_]|[\s\-()&.,'\"/])+$")

_BLOCKED_WORDS = re.compile(
    r"\b(?:damn|hell|crap|shit|fuck|bitch|ass|bastard)(?:s|es|ed|ing|ty)?\b"
)

_STRONG_SPAM_PATTERNS = (
    re.compile(
        r"\b(?:buy now|click here|order now|act now|limited time offer"
        r"|visit (?:our|my) (?:site|website|store|page))\b",
        re.IGNORECASE,
    ),
    re.compile(r"(?:https?://|www\.)", re.IGNORECASE),
    re.compile(r"(.)\1{11,}"),
    re.compile(r"[A-Z][A-Z0-9\s!?$.,&'-]{49,}"),
)
_WEAK_SPAM_PATTERNS = (
    re.compile(r"(.)\1{7,}"),
    re.compile(r"[A-Z][A-Z\s]{8,}[!?$]"),
    re.compile(r"!{2,}|\${2,}"),
    re.compile(
        r"\b(?:sale|discount|cheap|deal|promo|coupon|bargain|giveaway"
        r"|free shipping)\b",
        re.IGNORECASE,
    ),
)
_WEAK_SPAM_THRESHOLD = 2


def validate_food(candidate: FoodInput) -> ValidationResult:
    """Validate a food candidate, collecting every violation."""
    errors: list[str] = []
    name = (candidate.name or "").strip()
    brand = (candidate.brand_name or "").strip()
    serving = (candidate.serving_description or "").strip()

    if not name:
        errors.append("Food name is required")
    elif len(name) < NAME_MIN_LENGTH:
        errors.append("Food name must be at least 2 characters long")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append("Food name must be less than 100 characters")
    elif not _TEXT_PATTERN.match(name):
        errors.append("Food name contains invalid characters")

    if brand:
        if len(brand) > BRAND_MAX_LENGTH:
            errors.append("Brand name must be less than 50 characters")
        elif not _TEXT_PATTERN.match(brand):
            errors.append("Brand name contains invalid characters")

    if not serving:
        errors.append("Serving description is required")
    elif len(serving) < SERVING_MIN_LENGTH:
        errors.append("Serving description must be at least 3 characters long")
    elif len(serving) > SERVING_MAX_LENGTH:
        errors.append("Serving description must be less than 100 characters")
    elif not _SERVING_PATTERN.match(serving):
        errors.append("Serving description contains invalid characters")

    errors.extend(_serving_size_errors(candidate))

    if candidate.calories is None:
        errors.append("Calories are required")
    elif candidate.calories < 0:
        errors.append("Calories cannot be negative")
    elif candidate.calories > CALORIES_MAX:
        errors.append("Calories must be less than 10,000 per serving")

    for field_name, label, ceiling in _NUTRIENT_LIMITS:
        value = getattr(candidate, field_name)
        if value is None:
            continue
        if value < 0:
            errors.append(f"{label} cannot be negative")
        elif value > ceiling:
            errors.append(f"{label} value is unreasonably high")

    text = " ".join(part for part in (name, brand, serving) if part)
    if contains_blocked_words(text):
        errors.append("Content contains inappropriate language")
    if is_spam(text):
        errors.append("Content appears to be spam or promotional")

    return ValidationResult(is_valid=not errors, errors=errors)


def _serving_size_errors(candidate: FoodInput) -> list[str]:
    errors: list[str] = []
    mass = candidate.serving_mass_g
    volume = candidate.serving_volume_ml
    # Providing both is accepted here; the form layer enforces one-of.
    if not mass and not volume:
        errors.append("Either serving mass (grams) or volume (ml) must be provided")
    if mass is not None:
        if mass < SERVING_SIZE_MIN:
            errors.append("Serving mass must be at least 0.1 grams")
        elif mass > SERVING_SIZE_MAX:
            errors.append("Serving mass must be less than 10,000 grams")
    if volume is not None:
        if volume < SERVING_SIZE_MIN:
            errors.append("Serving volume must be at least 0.1 ml")
        elif volume > SERVING_SIZE_MAX:
            errors.append("Serving volume must be less than 10,000 ml")
    return errors


def contains_blocked_words(text: str) -> bool:
    """Return True if the text contains a blocked word."""
    return bool(_BLOCKED_WORDS.search(text.lower()))


def spam_signals(text: str) -> tuple[int, int]:
    """Return the number of strong and weak spam signals in the text."""
    strong = sum(1 for pattern in _STRONG_SPAM_PATTERNS if pattern.search(text))
    weak = sum(1 for pattern in _WEAK_SPAM_PATTERNS if pattern.search(text))
    return strong, weak


def is_spam(text: str) -> bool:
    """Classify text as spam on one strong signal or two weak ones."""
    strong, weak = spam_signals(text)
    return strong > 0 or weak >= _WEAK_SPAM_THRESHOLD


def sanitize(text: str) -> str:
    """Trim and collapse internal whitespace."""
    return " ".join(text.split())


def format_number(value: object) -> float:
    """Parse a numeric value, defaulting to 0, rounded half-up to 2 places."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return math.floor(number * 100 + 0.5) / 100


def is_duplicate(candidate: FoodInput | Food, existing_foods: Iterable[Food]) -> bool:
    """Return True if the candidate matches an existing food.

    An exact normalized name and brand match is enough on its own. A name
    and serving description match also counts when the serving masses
    differ by less than five grams.
    """
    name = _normalize(candidate.name)
    brand = _normalize(candidate.brand_name)
    serving = _normalize(candidate.serving_description)
    mass = candidate.serving_mass_g or 0.0
    for food in existing_foods:
        if name != _normalize(food.name):
            continue
        if brand == _normalize(food.brand_name):
            return True
        if (
            serving == _normalize(food.serving_description)
            and abs(mass - (food.serving_mass_g or 0.0)) < DUPLICATE_MASS_TOLERANCE
        ):
            return True
    return False


def _normalize(value: str | None) -> str:
    return sanitize(value or "").lower()
