# -*- coding: utf-8 -*-
"""
Checks shared by the record services (attendance / advance / expense).
"""
from __future__ import annotations
from datetime import date
from typing import Any, Optional

from django.utils import timezone

from payroll.exceptions import InactiveWorker, InvalidAmount, InvalidDate, NotFound
from payroll.repositories import worker_repository
from payroll.repositories.store import DjangoRecordStore
from payroll.services.lock_guard import SalaryLockGuard
from payroll.services.pay_calculator import money


def lock_guard() -> SalaryLockGuard:
    return SalaryLockGuard(DjangoRecordStore())

def get_worker_or_raise(worker_id: int):
    worker = worker_repository.get_or_none(worker_id)
    if worker is None:
        raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)
    return worker

def lock_worker(worker_id: int):
    """
    Worker row under select_for_update. Record writes take it before the
    lock check so a salary payment cannot commit between check and write.
    Must be called inside a transaction.
    """
    worker = worker_repository.get_for_update(worker_id)
    if worker is None:
        raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)
    return worker

def require_active(worker, action: str, on_date: Optional[date] = None) -> None:
    if not worker.is_active:
        raise InactiveWorker(f"Cannot {action} for inactive worker {worker.id}", worker_id=worker.id)
    inactive_from = worker.inactive_from
    if on_date is not None and inactive_from is not None and on_date >= inactive_from:
        raise InactiveWorker(
            f"Cannot {action} on or after worker {worker.id}'s inactivation date ({inactive_from.isoformat()})",
            worker_id=worker.id, date=on_date, inactive_from=inactive_from,
        )

def require_not_future(on_date: date, label: str) -> None:
    if on_date > timezone.localdate():
        raise InvalidDate(f"{label} date cannot be in the future", date=on_date)

def require_positive(amount: Any, label: str = "Amount"):
    value = money(amount)
    if value <= 0:
        raise InvalidAmount(f"{label} must be greater than 0", amount=amount)
    return value
