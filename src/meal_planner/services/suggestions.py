"""Deterministic recipe suggestions for days without a saved plan.

The same (date, slot, candidate count) always yields the same index, so a
preview stays stable across repeated views without being stored. Different
dates or slots land on different indices with high probability.
"""

from collections.abc import Mapping

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000
_UINT32_RANGE = 0x100000000

# breakfast..snacks keep their historical offsets; the rest extend the table.
MEAL_TYPE_OFFSETS: dict[str, int] = {
    "breakfast": 0,
    "lunch": 100,
    "dinner": 200,
    "snacks": 300,
    "mid_morning": 400,
    "afternoon": 500,
    "pre-iftar": 600,
    "iftar": 700,
    "full-meal-taraweeh": 800,
    "snack-taraweeh": 900,
    "suhoor": 1000,
}


def hash_date(date_str: str) -> int:
    """Fold a date string into a non-negative 32-bit seed (h = h * 31 + c)."""
    value = 0
    for char in date_str:
        value = (value * 31 + ord(char)) & _INT32_MASK
    if value & _INT32_SIGN:
        value -= _UINT32_RANGE
    return abs(value)


def mix32(seed: int) -> int:
    """MurmurHash3 32-bit finalizer: avalanche a seed into a uniform uint32."""
    value = seed & _INT32_MASK
    value ^= value >> 16
    value = (value * 0x85EBCA6B) & _INT32_MASK
    value ^= value >> 13
    value = (value * 0xC2B2AE35) & _INT32_MASK
    value ^= value >> 16
    return value


def seeded_fraction(seed: int) -> float:
    """Map a seed to a float in [0, 1)."""
    return mix32(seed) / _UINT32_RANGE


def suggest_index(date_str: str, meal_type: str, candidate_count: int) -> int:
    """Return the suggested candidate index for a slot on a date."""
    if candidate_count <= 1:
        return 0
    seed = hash_date(date_str) + MEAL_TYPE_OFFSETS.get(meal_type, 0)
    return int(seeded_fraction(seed) * candidate_count)


def suggest_indices_for_date(
    date_str: str, candidate_counts: Mapping[str, int]
) -> dict[str, int]:
    """Return suggested indices for every slot on a date."""
    return {
        meal_type: suggest_index(date_str, meal_type, count)
        for meal_type, count in candidate_counts.items()
    }
