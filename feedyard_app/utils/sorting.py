"""
Sorting utilities for consistent pen ordering across listings and reports.
"""

from __future__ import annotations

import re
from typing import Any


def get_pen_sort_key(pen: Any, barn_field: str = "barn_id") -> tuple:
    """
    Return tuple (barn, number, letter_order, name) for natural pen ordering.

    Sorting order:
    1. Primary: barn (case-insensitive), pens without a barn last
    2. Secondary: first number in the pen name ("Pen 2" before "Pen 10")
    3. Tertiary: letter following that number ("3-A" before "3-B")

    Example: Pen 1 -> Pen 2-A -> Pen 2-B -> Pen 10 (same barn)

    Args:
        pen: Object with a 'name' attribute and a barn attribute
        barn_field: Name of the attribute holding the barn id (default: "barn_id")
    """
    name = getattr(pen, "name", "") or ""
    numbers = re.findall(r"\d+", name)
    number = int(numbers[0]) if numbers else 9999

    letter_match = re.search(r"\d+\s*[-_]?\s*([A-Za-z])\b", name)
    letter_order = ord(letter_match.group(1).upper()) if letter_match else 0

    barn = str(getattr(pen, barn_field, "") or "").strip().lower()
    # Empty barn sorts after every named barn
    barn_key = (1, "") if not barn else (0, barn)

    return (barn_key, number, letter_order, name.lower())
