# -*- coding: utf-8 -*-
"""
Salary lock guard.

A date is locked for a worker once a PAID or PARTIAL salary cycle covers it;
PENDING cycles lock nothing. Two predicates exist on purpose:

- ``is_locked``: closed window ``cycle_start <= d <= cycle_end``, used for
  attendance and expense mutations.
- ``is_locked_for_advance``: half-open window ``cycle_start <= d < cycle_end``,
  used for advances, so an advance can still be issued or edited on a locked
  cycle's last day.

Whether the advance asymmetry is wanted is still an open product question;
keep both until it is answered.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, Optional

from payroll.exceptions import RecordLocked

logger = logging.getLogger(__name__)


class SalaryLockGuard:
    def __init__(self, store):
        self.store = store

    # ---- predicates
    def locking_cycle(self, worker_id: int, on_date: date) -> Optional[Any]:
        return self.store.find_locking_cycle(worker_id, on_date, upper_inclusive=True)

    def advance_locking_cycle(self, worker_id: int, on_date: date) -> Optional[Any]:
        return self.store.find_locking_cycle(worker_id, on_date, upper_inclusive=False)

    def is_locked(self, worker_id: int, on_date: date) -> bool:
        return self.locking_cycle(worker_id, on_date) is not None

    def is_locked_for_advance(self, worker_id: int, on_date: date) -> bool:
        return self.advance_locking_cycle(worker_id, on_date) is not None

    # ---- assertions
    def assert_not_locked(self, worker_id: int, on_date: date, context: str = "record") -> None:
        self._raise_if(self.locking_cycle(worker_id, on_date), worker_id, on_date, context)

    def assert_advance_not_locked(self, worker_id: int, on_date: date) -> None:
        self._raise_if(self.advance_locking_cycle(worker_id, on_date), worker_id, on_date, "advance")

    @staticmethod
    def _raise_if(cycle: Optional[Any], worker_id: int, on_date: date, context: str) -> None:
        if cycle is None:
            return
        start, end = cycle.cycle_start.isoformat(), cycle.cycle_end.isoformat()
        logger.warning(
            "[lock] rejected %s change for worker=%s date=%s (cycle #%s %s..%s %s)",
            context, worker_id, on_date, cycle.id, start, end, cycle.status,
        )
        raise RecordLocked(
            f"Cannot modify or delete {context} record dated {on_date.isoformat()}: "
            f"salary cycle {start} to {end} is {str(cycle.status).lower()}",
            worker_id=worker_id, date=on_date, salary_id=cycle.id,
            cycle_start=cycle.cycle_start, cycle_end=cycle.cycle_end,
        )
