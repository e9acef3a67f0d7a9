# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from payroll.exceptions import InvalidDate, NotFound

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class CycleWindow:
    worker: Any
    last_cycle: Optional[Any]
    cycle_start: date
    cycle_end: date

    @property
    def is_first_cycle(self) -> bool:
        return self.last_cycle is None

    @property
    def is_empty(self) -> bool:
        return self.cycle_end < self.cycle_start


def resolve_cycle_window(store, worker_id: int, today: date, pay_date: Optional[date] = None,
                         for_update: bool = False) -> CycleWindow:
    """
    Next unpaid window for a worker: the day after the latest cycle's end (or
    the join date for a first cycle) through ``pay_date`` (default today).
    The window may come back empty; callers decide whether that is an error.
    """
    worker = store.find_worker(worker_id, for_update=for_update)
    if worker is None:
        raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)

    cycle_end = pay_date or today
    if cycle_end > today:
        raise InvalidDate(
            f"Pay date {cycle_end.isoformat()} is in the future",
            worker_id=worker_id, pay_date=cycle_end,
        )

    last = store.find_latest_cycle(worker_id)
    cycle_start = (last.cycle_end + ONE_DAY) if last is not None else worker.joined_at
    return CycleWindow(worker=worker, last_cycle=last, cycle_start=cycle_start, cycle_end=cycle_end)
