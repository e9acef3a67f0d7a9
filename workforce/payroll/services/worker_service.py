# -*- coding: utf-8 -*-
"""
Worker registry used by the payroll engine.

- ``wage`` / ``ot_rate`` are the current rates; every change appends a
  WageHistory row with its effective date. Existing attendance keeps its rate
  snapshot, so a change only reaches attendance recorded afterwards.
- A rate change may not take effect inside an existing salary cycle.
- Deactivation is immediate, or scheduled through ``inactive_from``: records
  dated on or after that day are refused, earlier ones can still be entered.
"""
from __future__ import annotations
import logging
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from payroll.exceptions import InvalidAmount, InvalidDate, NotFound, RecordLocked
from payroll.models import WageHistory, Worker
from payroll.repositories import salary_repository
from payroll.repositories import worker_repository as repo
from payroll.services.guards import get_worker_or_raise, lock_worker, require_not_future
from payroll.services.pay_calculator import money

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "phone", "wage", "ot_rate", "opening_balance", "is_active"}


def _non_negative(value: Any, label: str) -> Decimal:
    value = money(value)
    if value < 0:
        raise InvalidAmount(f"{label} cannot be negative", value=value)
    return value

@transaction.atomic
def create_worker(*, name: str, wage: Any, ot_rate: Any = 0, joined_at: Optional[date] = None,
                  opening_balance: Any = 0, phone: str = "", is_active: bool = True) -> Worker:
    joined_at = joined_at or timezone.localdate()
    require_not_future(joined_at, "Join")
    worker = repo.create({
        "name": name,
        "phone": phone or "",
        "wage": _non_negative(wage, "Wage"),
        "ot_rate": _non_negative(ot_rate, "OT rate"),
        "joined_at": joined_at,
        "opening_balance": money(opening_balance),
        "is_active": bool(is_active),
    })
    repo.create_wage_history({
        "worker_id": worker.id,
        "wage": worker.wage,
        "ot_rate": worker.ot_rate,
        "effective_from": joined_at,
        "reason": "Initial wage",
    })
    logger.info("[worker] created #%s %s wage=%s ot_rate=%s", worker.id, worker.name, worker.wage, worker.ot_rate)
    return worker

def _rate_effective_date(wage_changed: bool, ot_changed: bool,
                         wage_date: Optional[date], ot_date: Optional[date]) -> date:
    today = timezone.localdate()
    dates = []
    if wage_changed:
        dates.append(wage_date or today)
    if ot_changed:
        dates.append(ot_date or today)
    return min(dates)

@transaction.atomic
def update_worker(*, worker_id: int, wage_effective_date: Optional[date] = None,
                  ot_rate_effective_date: Optional[date] = None, **changes: Any) -> Worker:
    worker = lock_worker(worker_id)
    patch = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "wage" in patch:
        patch["wage"] = _non_negative(patch["wage"], "Wage")
    if "ot_rate" in patch:
        patch["ot_rate"] = _non_negative(patch["ot_rate"], "OT rate")
    if "opening_balance" in patch:
        patch["opening_balance"] = money(patch["opening_balance"])

    wage_changed = "wage" in patch and patch["wage"] != money(worker.wage)
    ot_changed = "ot_rate" in patch and patch["ot_rate"] != money(worker.ot_rate)
    if wage_changed or ot_changed:
        effective = _rate_effective_date(wage_changed, ot_changed, wage_effective_date, ot_rate_effective_date)
        covering = salary_repository.find_covering(worker_id, effective)
        if covering is not None:
            raise RecordLocked(
                f"Cannot change wage/OT rate from {effective.isoformat()}: salary cycle {covering.id} "
                f"({covering.cycle_start.isoformat()} to {covering.cycle_end.isoformat()}) covers that date",
                worker_id=worker_id, salary_id=covering.id, effective_from=effective,
            )
        repo.create_wage_history({
            "worker_id": worker_id,
            "wage": patch.get("wage", worker.wage),
            "ot_rate": patch.get("ot_rate", worker.ot_rate),
            "effective_from": effective,
            "reason": "Manual update",
        })
        logger.info("[worker] #%s rates changed from %s wage=%s ot_rate=%s", worker_id, effective,
                    patch.get("wage", worker.wage), patch.get("ot_rate", worker.ot_rate))
    return repo.save_fields(worker, patch)

def set_worker_active(*, worker_id: int, is_active: bool, effective_from: Optional[date] = None) -> Worker:
    """
    Activating clears any scheduled inactivation. Deactivating without
    ``effective_from`` is immediate; with it, only ``inactive_from`` is set.
    """
    worker = get_worker_or_raise(worker_id)
    if is_active:
        logger.info("[worker] #%s active=True", worker_id)
        return repo.save_fields(worker, {"is_active": True, "inactive_from": None})
    if effective_from is None:
        logger.info("[worker] #%s active=False", worker_id)
        return repo.save_fields(worker, {"is_active": False})
    if effective_from < worker.joined_at:
        raise InvalidDate("Inactivation date cannot be before the worker joined",
                          worker_id=worker_id, date=effective_from, joined_at=worker.joined_at)
    logger.info("[worker] #%s inactive from %s", worker_id, effective_from)
    return repo.save_fields(worker, {"inactive_from": effective_from})

def get_worker(worker_id: int) -> Worker:
    return get_worker_or_raise(worker_id)

def list_workers(active: Optional[bool] = None) -> QuerySet[Worker]:
    return repo.list_workers(active)

def get_wage_history(worker_id: int) -> List[WageHistory]:
    get_worker_or_raise(worker_id)
    return repo.list_wage_history(worker_id)

def get_rate_on(worker_id: int, on_date: date) -> WageHistory:
    get_worker_or_raise(worker_id)
    row = repo.rate_on(worker_id, on_date)
    if row is None:
        raise NotFound(f"No wage history for worker {worker_id} on {on_date.isoformat()}",
                       worker_id=worker_id, date=on_date)
    return row
