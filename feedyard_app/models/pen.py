"""
Pen model.

Pens are maintained by the barn/pen screens; the ration engine only reads the
live head count and display name.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Pen:
    """A physical group of animals inside a barn."""

    id: str | None = None
    name: str = ""  # e.g. "Pen 3-B"
    barn_id: str = ""
    capacity: int = 0
    current_count: int = 0
    notes: str = ""
