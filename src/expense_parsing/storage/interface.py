"""Persistence collaborator for confirmed expenses."""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.expense import ExpenseRecord


class ExpenseStore(ABC):
    """Abstract interface for wherever confirmed expenses are written.

    The extraction core never writes on its own; a store is only called after
    the user confirms an extracted expense.
    """

    @abstractmethod
    async def save_expense(self, group_id: str, record: ExpenseRecord) -> str:
        """Persist *record* in *group_id* and return the new expense id."""
        pass
