"""Unit conversion between provider units and canonical grams/milliliters."""

from dataclasses import dataclass
from typing import Literal

UnitKind = Literal["mass", "volume", "unknown"]

_GRAMS_PER_OUNCE = 28.349523125
_GRAMS_PER_POUND = 453.59237
_ML_PER_TEASPOON = 4.92892159375
_ML_PER_TABLESPOON = 14.78676478125
_ML_PER_CUP = 236.5882365
_ML_PER_FLUID_OUNCE = 29.5735295625

MASS_UNITS: dict[str, float] = {
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "oz": _GRAMS_PER_OUNCE,
    "ounce": _GRAMS_PER_OUNCE,
    "ounces": _GRAMS_PER_OUNCE,
    "lb": _GRAMS_PER_POUND,
    "lbs": _GRAMS_PER_POUND,
    "pound": _GRAMS_PER_POUND,
    "pounds": _GRAMS_PER_POUND,
}

VOLUME_UNITS: dict[str, float] = {
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "tsp": _ML_PER_TEASPOON,
    "teaspoon": _ML_PER_TEASPOON,
    "teaspoons": _ML_PER_TEASPOON,
    "tbsp": _ML_PER_TABLESPOON,
    "tablespoon": _ML_PER_TABLESPOON,
    "tablespoons": _ML_PER_TABLESPOON,
    "cup": _ML_PER_CUP,
    "cups": _ML_PER_CUP,
    "floz": _ML_PER_FLUID_OUNCE,
    "fl-oz": _ML_PER_FLUID_OUNCE,
    "fl_oz": _ML_PER_FLUID_OUNCE,
    "fl oz": _ML_PER_FLUID_OUNCE,
    "fluid ounce": _ML_PER_FLUID_OUNCE,
    "fluid ounces": _ML_PER_FLUID_OUNCE,
}

# Approximate grams for one piece of common countable foods.
DEFAULT_PIECE_MASS_G: dict[str, float] = {
    "egg": 50.0,
    "slice bread": 28.0,
    "tortilla": 30.0,
    "taco": 100.0,
    "wing": 30.0,
    "shrimp": 12.0,
}


@dataclass(frozen=True)
class UnitInfo:
    """Resolved unit with its factor to the canonical base."""

    kind: UnitKind
    unit: str
    factor: float


@dataclass(frozen=True)
class BaseQuantity:
    """Quantity expressed in grams (mass) or milliliters (volume)."""

    value: float
    kind: UnitKind


@dataclass(frozen=True)
class Quantity:
    """Quantity expressed in a caller-chosen unit."""

    value: float
    unit: str | None


def normalize_unit(unit: str | None) -> UnitInfo | None:
    """Resolve a unit alias, or return None when it is not recognized."""
    if not unit:
        return None
    key = str(unit).strip().lower()
    if key in MASS_UNITS:
        return UnitInfo(kind="mass", unit=key, factor=MASS_UNITS[key])
    if key in VOLUME_UNITS:
        return UnitInfo(kind="volume", unit=key, factor=VOLUME_UNITS[key])
    return None


def to_base(quantity: float, unit: str | None) -> BaseQuantity:
    """Convert a quantity to grams or milliliters.

    Unknown units pass the quantity through unchanged with kind ``unknown``.
    """
    info = normalize_unit(unit)
    if info is None:
        return BaseQuantity(value=quantity, kind="unknown")
    return BaseQuantity(value=float(quantity) * info.factor, kind=info.kind)


def from_base(base_value: float, target_unit: str | None) -> Quantity:
    """Convert a grams/milliliters value back to ``target_unit``."""
    info = normalize_unit(target_unit)
    if info is None:
        return Quantity(value=base_value, unit=target_unit)
    return Quantity(value=base_value / info.factor, unit=target_unit)


def grams_per_piece_for(name: str | None) -> float | None:
    """Return approximate grams per piece for countable foods."""
    key = (name or "").lower()
    for piece, grams in DEFAULT_PIECE_MASS_G.items():
        if piece in key:
            return grams
    return None


def serving_grams(
    size: float,
    unit: str | None,
    name: str | None = None,
    weight_grams: float | None = None,
) -> float:
    """Return a grams-equivalent for a serving.

    Volumes count one milliliter as one gram. Unknown units use the
    provider-declared serving weight, then the per-piece map, and otherwise
    pass the size through.
    """
    base = to_base(size, unit)
    if base.kind != "unknown":
        return base.value
    if weight_grams is not None and weight_grams > 0:
        return weight_grams
    per_piece = grams_per_piece_for(name)
    if per_piece is not None:
        return size * per_piece
    return size
