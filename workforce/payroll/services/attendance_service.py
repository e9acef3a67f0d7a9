# -*- coding: utf-8 -*-
"""
Service for AttendanceRecord:
- wage / OT rate snapshot taken from the worker at creation, never rewritten
- every create / update / delete checked against the salary lock (closed window)
- writes hold the worker row lock from the lock check to the write
"""
from __future__ import annotations
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from django.db import transaction
from django.db.models import QuerySet

from payroll.exceptions import Conflict, InvalidAmount, InvalidDate, NotFound
from payroll.models import AttendanceRecord
from payroll.repositories import attendance_repository as repo
from payroll.selectors.filters import RecordFilter
from payroll.services.guards import (
    lock_guard, lock_worker, require_active, require_not_future,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"date", "status", "ot_units", "note"}


def _ot_units(value: Any) -> Decimal:
    units = Decimal(str(value if value is not None else 0))
    if units < 0:
        raise InvalidAmount("OT units cannot be negative", ot_units=value)
    return units

def _get_or_raise(attendance_id: int) -> AttendanceRecord:
    obj = repo.get_or_none(attendance_id)
    if obj is None:
        raise NotFound(f"Attendance record {attendance_id} not found", attendance_id=attendance_id)
    return obj

def _require_joined(worker, on_date: date) -> None:
    if on_date < worker.joined_at:
        raise InvalidDate("Cannot mark attendance before worker joined", date=on_date, joined_at=worker.joined_at)

@transaction.atomic
def create_attendance(*, worker_id: int, date: date, status: str, ot_units: Any = 0,
                      note: str = "") -> AttendanceRecord:
    worker = lock_worker(worker_id)
    require_active(worker, "mark attendance", date)
    require_not_future(date, "Attendance")
    _require_joined(worker, date)
    if repo.exists_on(worker_id, date):
        raise Conflict("Attendance for this date already exists", worker_id=worker_id, date=date)
    lock_guard().assert_not_locked(worker_id, date, "attendance")

    obj = repo.create({
        "worker_id": worker_id,
        "date": date,
        "status": status,
        "ot_units": _ot_units(ot_units),
        "note": note or "",
        "wage_at_time": worker.wage,
        "ot_rate_at_time": worker.ot_rate,
    })
    logger.info("[attendance] worker=%s %s %s ot=%s", worker_id, date, status, obj.ot_units)
    return obj

@transaction.atomic
def update_attendance(*, attendance_id: int, **changes: Any) -> AttendanceRecord:
    obj = _get_or_raise(attendance_id)
    worker = lock_worker(obj.worker_id)
    guard = lock_guard()
    guard.assert_not_locked(obj.worker_id, obj.date, "attendance")

    # snapshot fields and anything else not listed are dropped
    patch = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "ot_units" in patch:
        patch["ot_units"] = _ot_units(patch["ot_units"])
    if patch.get("date") is not None and patch["date"] != obj.date:
        new_date = patch["date"]
        require_not_future(new_date, "Attendance")
        _require_joined(worker, new_date)
        if repo.exists_on(obj.worker_id, new_date, exclude_id=obj.id):
            raise Conflict("Attendance for this date already exists", worker_id=obj.worker_id, date=new_date)
        guard.assert_not_locked(obj.worker_id, new_date, "attendance")
    else:
        patch.pop("date", None)

    return repo.save_fields(obj, patch)

@transaction.atomic
def delete_attendance(*, attendance_id: int) -> AttendanceRecord:
    obj = _get_or_raise(attendance_id)
    lock_worker(obj.worker_id)
    lock_guard().assert_not_locked(obj.worker_id, obj.date, "attendance")
    repo.delete(obj)
    logger.info("[attendance] deleted #%s worker=%s %s", attendance_id, obj.worker_id, obj.date)
    return obj

def get_attendance(attendance_id: int) -> AttendanceRecord:
    return _get_or_raise(attendance_id)

def list_attendance(f: Optional[RecordFilter] = None) -> QuerySet[AttendanceRecord]:
    return repo.filter_records(f)
