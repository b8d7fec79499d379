"""
Business logic for the feed ration catalog.
"""

from __future__ import annotations

import copy
import logging
from typing import List, Optional

from ..config.limits import DUPLICATE_SUFFIX
from ..models import Ration
from ..repositories.assignment_repository import AssignmentRepository
from ..repositories.document_store import DocumentStore
from ..repositories.ration_repository import RationRepository
from ..utils.ids import new_id, utc_timestamp
from .validation import NotFoundError, ValidationError, require_number, require_text

_LOG = logging.getLogger(__name__)


class RationCatalog:
    """
    Named feed rations for one account.

    ``get`` returns ``None`` for an unknown id; callers treat that as
    "ration unavailable" rather than an error.
    """

    def __init__(self, store: DocumentStore, account_id: str) -> None:
        self._repo = RationRepository(store, account_id)
        self._assignments = AssignmentRepository(store, account_id)

    def list(self) -> List[Ration]:
        return self._repo.list_all()

    def list_active(self) -> List[Ration]:
        return [r for r in self._repo.list_all() if r.is_active]

    def get(self, ration_id: str) -> Optional[Ration]:
        if not ration_id:
            return None
        return self._repo.get(ration_id)

    def add(self, ration: Ration) -> Ration:
        self._validate(ration)
        now = utc_timestamp()
        ration.id = new_id("ration")
        ration.created_at = now
        ration.updated_at = now
        self._repo.save(ration)
        _LOG.info("Added ration %s (%s)", ration.id, ration.name)
        return ration

    def update(self, ration: Ration) -> Ration:
        if ration.id is None:
            raise ValidationError("Ration id must be set for update.")
        existing = self._repo.get(ration.id)
        if existing is None:
            raise NotFoundError(f"Ration {ration.id} not found.")
        self._validate(ration)
        ration.created_at = existing.created_at
        ration.updated_at = utc_timestamp()
        self._repo.save(ration)
        return ration

    def delete(self, ration_id: str) -> bool:
        """Delete a ration. Refused while any pen is actively fed with it."""
        in_use = [a for a in self._assignments.list_active() if a.ration_id == ration_id]
        if in_use:
            raise ValidationError(
                f"Cannot delete ration with active pen assignments ({len(in_use)} pen(s))."
            )
        if self._repo.get(ration_id) is None:
            return False
        self._repo.delete(ration_id)
        _LOG.info("Deleted ration %s", ration_id)
        return True

    def duplicate(self, ration_id: str) -> Optional[Ration]:
        original = self._repo.get(ration_id)
        if original is None:
            return None
        clone = copy.deepcopy(original)
        clone.id = None
        clone.name = f"{original.name}{DUPLICATE_SUFFIX}"
        return self.add(clone)

    def _validate(self, ration: Ration) -> None:
        ration.name = require_text(ration.name, "Ration name")
        ration.total_lbs_per_head = require_number(ration.total_lbs_per_head, "Total lbs per head")
        ration.cost_per_head = require_number(ration.cost_per_head, "Cost per head")
        for ing in ration.ingredients:
            require_number(ing.amount_lbs, f"Amount of {ing.feed_name or 'ingredient'}")
            require_number(ing.cost_per_lb, f"Cost per lb of {ing.feed_name or 'ingredient'}")
