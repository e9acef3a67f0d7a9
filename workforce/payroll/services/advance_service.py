# -*- coding: utf-8 -*-
"""
Service for Advance.

Advances use the advance lock predicate (upper bound exclusive). An advance
already deducted by a salary cycle (``salary_id`` set) is locked whatever its
date, and so is a shortfall advance the engine created: it stays unlinked
until the next cycle folds it in, but the debt it carries is not editable.
The shortfall reason prefix is reserved for the engine.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, Optional

from django.db import transaction
from django.db.models import QuerySet

from payroll.exceptions import Conflict, NotFound, RecordLocked
from payroll.models import Advance, SHORTFALL_REASON_PREFIX
from payroll.repositories import advance_repository as repo
from payroll.selectors.filters import RecordFilter
from payroll.services.guards import (
    lock_guard, lock_worker, require_active, require_not_future, require_positive,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"date", "amount", "reason", "signature"}


def _get_or_raise(advance_id: int) -> Advance:
    obj = repo.get_or_none(advance_id)
    if obj is None:
        raise NotFound(f"Advance {advance_id} not found", advance_id=advance_id)
    return obj

def _assert_editable(obj: Advance) -> None:
    if obj.salary_id is not None:
        logger.warning("[advance] #%s already deducted by salary #%s", obj.id, obj.salary_id)
        raise RecordLocked(
            f"Advance {obj.id} was already deducted by salary cycle {obj.salary_id}",
            advance_id=obj.id, salary_id=obj.salary_id,
        )
    if obj.is_shortfall:
        logger.warning("[advance] #%s is a salary shortfall and cannot change", obj.id)
        raise RecordLocked(
            f"Advance {obj.id} carries a salary shortfall and cannot be changed",
            advance_id=obj.id,
        )

def _user_reason(reason: Optional[str]) -> str:
    reason = reason or ""
    if reason.startswith(SHORTFALL_REASON_PREFIX):
        raise Conflict(f"Reason cannot start with '{SHORTFALL_REASON_PREFIX}'", reason=reason)
    return reason

@transaction.atomic
def create_advance(*, worker_id: int, date: date, amount: Any, reason: str = "",
                   signature: Optional[str] = None) -> Advance:
    worker = lock_worker(worker_id)
    require_active(worker, "give advance", date)
    value = require_positive(amount)
    require_not_future(date, "Advance")
    reason = _user_reason(reason)
    lock_guard().assert_advance_not_locked(worker_id, date)

    obj = repo.create({
        "worker_id": worker_id,
        "date": date,
        "amount": value,
        "reason": reason,
        "signature": signature or None,
    })
    logger.info("[advance] worker=%s %s amount=%s", worker_id, date, value)
    return obj

@transaction.atomic
def update_advance(*, advance_id: int, **changes: Any) -> Advance:
    obj = _get_or_raise(advance_id)
    lock_worker(obj.worker_id)
    _assert_editable(obj)
    guard = lock_guard()
    guard.assert_advance_not_locked(obj.worker_id, obj.date)

    patch = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "amount" in patch:
        patch["amount"] = require_positive(patch["amount"])
    if "reason" in patch:
        patch["reason"] = _user_reason(patch["reason"])
    if patch.get("date") is not None and patch["date"] != obj.date:
        require_not_future(patch["date"], "Advance")
        guard.assert_advance_not_locked(obj.worker_id, patch["date"])
    else:
        patch.pop("date", None)
    return repo.save_fields(obj, patch)

@transaction.atomic
def delete_advance(*, advance_id: int) -> Advance:
    obj = _get_or_raise(advance_id)
    lock_worker(obj.worker_id)
    _assert_editable(obj)
    lock_guard().assert_advance_not_locked(obj.worker_id, obj.date)
    repo.delete(obj)
    logger.info("[advance] deleted #%s worker=%s %s", advance_id, obj.worker_id, obj.date)
    return obj

def get_advance(advance_id: int) -> Advance:
    return _get_or_raise(advance_id)

def list_advances(f: Optional[RecordFilter] = None) -> QuerySet[Advance]:
    return repo.filter_records(f)
