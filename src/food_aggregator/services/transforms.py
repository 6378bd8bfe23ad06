"""Pure mappers from provider payloads to canonical food records."""

import math
import re

from food_aggregator.domain.foods import (
    DataSource,
    FoodRecord,
    NutritionFacts,
    Serving,
    make_record_id,
)

KJ_PER_KCAL = 4.184
DEFAULT_SERVING_SIZE = 100.0
DEFAULT_SERVING_UNIT = "g"
UNKNOWN_NAME = "Unknown Product"

_QUANTITY_WITH_UNIT = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(fl\.?\s?oz|kg|g|ml|l|oz|lbs?|cups?|tbsp|tsp)\b",
    re.IGNORECASE,
)
_FIRST_NUMBER = re.compile(r"(\d+(?:[.,]\d+)?)")

# USDA reports nutrients by name; the first matching variant wins.
_USDA_NUTRIENT_NAMES: dict[str, tuple[str, ...]] = {
    "protein": ("protein",),
    "carbs": ("carbohydrate, by difference", "carbohydrates", "carbohydrate"),
    "fat": ("total lipid (fat)", "fat", "total fat"),
    "fiber": ("fiber, total dietary", "fiber"),
    "sugar": ("sugars, total including nlea", "sugars, total", "total sugars", "sugar"),
    "sodium": ("sodium, na", "sodium"),
}
_USDA_ENERGY_NAMES = (
    "energy",
    "energy (atwater general factors)",
    "energy (atwater specific factors)",
    "calories",
)


def round_half_up(value: float | None, digits: int = 0) -> float | None:
    """Round half away from zero; missing and non-finite values become None."""
    if value is None or not math.isfinite(value):
        return None
    scale = 10**digits
    return math.floor(abs(value) * scale + 0.5) / scale * (1 if value >= 0 else -1)


def _to_float(value: object) -> float | None:
    """Parse a provider number; missing, malformed and non-finite values are None."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).replace(",", "."))
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _scaled(value: float | None, ratio: float, digits: int = 1) -> float | None:
    if value is None:
        return None
    return round_half_up(value * ratio, digits)


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_serving_size(
    raw: object, default_unit: str = DEFAULT_SERVING_UNIT
) -> tuple[float, str]:
    """Parse a serving declaration such as ``"1 pouch (49 g) (49 g)"``.

    A quantity followed by a known unit is preferred over a bare leading
    number, so the example above yields ``(49.0, "g")``.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        size = _to_float(raw)
        if size is not None and size > 0:
            return size, default_unit
        return DEFAULT_SERVING_SIZE, default_unit
    if not isinstance(raw, str):
        return DEFAULT_SERVING_SIZE, default_unit

    match = _QUANTITY_WITH_UNIT.search(raw)
    if match:
        size = float(match.group(1).replace(",", "."))
        unit = re.sub(r"[.\s]+", " ", match.group(2).lower()).strip()
        if 0 < size < math.inf:
            return size, unit

    match = _FIRST_NUMBER.search(raw)
    if match:
        size = float(match.group(1).replace(",", "."))
        if 0 < size < math.inf:
            return size, default_unit
    return DEFAULT_SERVING_SIZE, default_unit


def transform_usda_food(food: dict[str, object]) -> FoodRecord:
    """Map an FDC search hit to a record, scaling per-100 g values to the serving."""
    by_name: dict[str, tuple[float, str]] = {}
    for nutrient in food.get("foodNutrients") or []:
        name = str(nutrient.get("nutrientName") or "").lower()
        value = _to_float(nutrient.get("value"))
        if name and value is not None and name not in by_name:
            by_name[name] = (value, str(nutrient.get("unitName") or "").lower())

    def lookup(names: tuple[str, ...]) -> float | None:
        for name in names:
            if name in by_name:
                return by_name[name][0]
        return None

    serving_size = _to_float(food.get("servingSize")) or DEFAULT_SERVING_SIZE
    serving_unit = _clean(food.get("servingSizeUnit")) or DEFAULT_SERVING_UNIT
    ratio = serving_size / 100

    fdc_id = str(food.get("fdcId"))
    return FoodRecord(
        id=make_record_id(DataSource.USDA, fdc_id),
        name=_clean(food.get("description")) or UNKNOWN_NAME,
        brand=_clean(food.get("brandOwner")) or _clean(food.get("brandName")),
        barcode=_clean(food.get("gtinUpc")),
        nutrition=NutritionFacts(
            calories_per_serving=_scaled(_usda_energy_kcal(by_name), ratio, 0),
            protein_grams=_scaled(lookup(_USDA_NUTRIENT_NAMES["protein"]), ratio),
            carbs_grams=_scaled(lookup(_USDA_NUTRIENT_NAMES["carbs"]), ratio),
            fat_grams=_scaled(lookup(_USDA_NUTRIENT_NAMES["fat"]), ratio),
            fiber_grams=_scaled(lookup(_USDA_NUTRIENT_NAMES["fiber"]), ratio),
            sugar_grams=_scaled(lookup(_USDA_NUTRIENT_NAMES["sugar"]), ratio),
            sodium_mg=_scaled(lookup(_USDA_NUTRIENT_NAMES["sodium"]), ratio),
        ),
        serving=Serving(size=serving_size, unit=serving_unit),
        source=DataSource.USDA,
        source_id=fdc_id,
        data_type=_clean(food.get("dataType")),
    )


def _usda_energy_kcal(by_name: dict[str, tuple[float, str]]) -> float | None:
    kilojoules = None
    for name in _USDA_ENERGY_NAMES:
        if name not in by_name:
            continue
        value, unit = by_name[name]
        if unit == "kj":
            kilojoules = kilojoules if kilojoules is not None else value
            continue
        return value
    if kilojoules is not None:
        return kilojoules / KJ_PER_KCAL
    return None


def transform_nutritionix_food(food: dict[str, object]) -> FoodRecord:
    """Map a Nutritionix item; its nutrients are already per serving."""

    def pick(*keys: str) -> float | None:
        for key in keys:
            value = _to_float(food.get(key))
            if value is not None:
                return value
        return None

    name = _clean(food.get("food_name")) or _clean(food.get("foodName")) or UNKNOWN_NAME
    source_id = _clean(food.get("nix_item_id")) or name
    photo = food.get("photo") if isinstance(food.get("photo"), dict) else {}
    return FoodRecord(
        id=make_record_id(DataSource.NUTRITIONIX, source_id),
        name=name,
        brand=_clean(food.get("brand_name")) or _clean(food.get("brandName")),
        barcode=_clean(food.get("upc")),
        nutrition=NutritionFacts(
            calories_per_serving=round_half_up(pick("nf_calories", "calories")),
            protein_grams=round_half_up(pick("nf_protein", "protein"), 1),
            carbs_grams=round_half_up(pick("nf_total_carbohydrate", "carbs"), 1),
            fat_grams=round_half_up(pick("nf_total_fat", "fat"), 1),
            fiber_grams=round_half_up(pick("nf_dietary_fiber", "fiber"), 1),
            sugar_grams=round_half_up(pick("nf_sugars", "sugar"), 1),
            sodium_mg=round_half_up(pick("nf_sodium", "sodium"), 1),
        ),
        serving=Serving(
            size=pick("serving_qty") or DEFAULT_SERVING_SIZE,
            unit=_clean(food.get("serving_unit")) or DEFAULT_SERVING_UNIT,
        ),
        source=DataSource.NUTRITIONIX,
        source_id=source_id,
        image_url=_clean(photo.get("thumb")) or _clean(photo.get("highres")),
        serving_weight_grams=pick("serving_weight_grams"),
    )


def transform_openfoodfacts_product(product: dict[str, object]) -> FoodRecord:
    """Map an OpenFoodFacts product to a record for its declared serving.

    ``*_serving`` nutriments are used as-is; otherwise ``*_100g`` values are
    scaled by ``serving / 100``. Energy reported only in kJ is converted.
    """
    nutriments = product.get("nutriments") or {}
    default_unit = _clean(product.get("serving_quantity_unit")) or DEFAULT_SERVING_UNIT
    quantity = _to_float(product.get("serving_quantity"))
    if quantity is not None and quantity > 0:
        serving_size, serving_unit = quantity, default_unit
    else:
        serving_size, serving_unit = parse_serving_size(
            product.get("serving_size") or product.get("quantity"), default_unit
        )
    ratio = serving_size / 100

    def per_serving(key: str, factor: float = 1.0) -> float | None:
        value = _to_float(nutriments.get(f"{key}_serving"))
        if value is not None:
            return value * factor
        value = _to_float(nutriments.get(f"{key}_100g"))
        if value is not None:
            return value * factor * ratio
        return None

    calories = per_serving("energy-kcal")
    if calories is None:
        calories = per_serving("energy", 1 / KJ_PER_KCAL)

    code = _clean(product.get("code")) or _clean(product.get("_id")) or ""
    return FoodRecord(
        id=make_record_id(DataSource.OPEN_FOOD_FACTS, code),
        name=_clean(product.get("product_name"))
        or _clean(product.get("generic_name"))
        or UNKNOWN_NAME,
        brand=_clean(product.get("brands")) or _clean(product.get("brand_owner")),
        barcode=_clean(product.get("code")),
        nutrition=NutritionFacts(
            calories_per_serving=round_half_up(calories),
            protein_grams=round_half_up(per_serving("proteins"), 1),
            carbs_grams=round_half_up(per_serving("carbohydrates"), 1),
            fat_grams=round_half_up(per_serving("fat"), 1),
            fiber_grams=round_half_up(per_serving("fiber"), 1),
            sugar_grams=round_half_up(per_serving("sugars"), 1),
            sodium_mg=round_half_up(per_serving("sodium", 1000), 1),
        ),
        serving=Serving(size=serving_size, unit=serving_unit),
        source=DataSource.OPEN_FOOD_FACTS,
        source_id=code,
        image_url=_clean(product.get("image_front_url")) or _clean(product.get("image_url")),
        ingredients=_clean(product.get("ingredients_text")),
        nutrition_grade=_clean(product.get("nutrition_grade_fr"))
        or _clean(product.get("nutrition_grade")),
        nova_group=_nova_group(product.get("nova_group")),
    )


def _nova_group(value: object) -> int | None:
    number = _to_float(value)
    return int(number) if number is not None else None


def transform_custom_food(row: dict[str, object]) -> FoodRecord:
    """Map a custom food row; values are stored per serving."""
    source_id = str(row.get("id"))
    return FoodRecord(
        id=make_record_id(DataSource.LOCAL, source_id),
        name=_clean(row.get("name")) or UNKNOWN_NAME,
        brand=_clean(row.get("brand")),
        barcode=_clean(row.get("barcode")),
        nutrition=NutritionFacts(
            calories_per_serving=_to_float(row.get("calories")),
            protein_grams=_to_float(row.get("protein_g")),
            carbs_grams=_to_float(row.get("carbs_g")),
            fat_grams=_to_float(row.get("fat_g")),
            fiber_grams=_to_float(row.get("fiber_g")),
            sugar_grams=_to_float(row.get("sugar_g")),
            sodium_mg=_to_float(row.get("sodium_mg")),
        ),
        serving=Serving(
            size=_to_float(row.get("serving_size")) or DEFAULT_SERVING_SIZE,
            unit=_clean(row.get("serving_unit")) or DEFAULT_SERVING_UNIT,
        ),
        source=DataSource.LOCAL,
        source_id=source_id,
    )
