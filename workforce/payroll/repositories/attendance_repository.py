# -*- coding: utf-8 -*-
"""
Repository layer for AttendanceRecord (pure DB):
- queries by window / exact date
- create / update / delete
No business rules here; the service decides.
"""
from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from django.db import transaction
from django.db.models import QuerySet

from payroll.models import AttendanceRecord
from payroll.repositories import common
from payroll.selectors.filters import RecordFilter


def base_qs() -> QuerySet[AttendanceRecord]:
    return AttendanceRecord.objects.select_related("worker")

def get_or_none(attendance_id: int) -> Optional[AttendanceRecord]:
    return base_qs().filter(id=attendance_id).first()

def filter_records(f: Optional[RecordFilter] = None) -> QuerySet[AttendanceRecord]:
    return common.apply_record_filter(base_qs(), f).order_by("-date", "-id")

def in_window(worker_id: int, start: date, end: date) -> List[AttendanceRecord]:
    return list(
        AttendanceRecord.objects
        .filter(worker_id=worker_id, date__gte=start, date__lte=end)
        .order_by("date")
    )

def exists_on(worker_id: int, on_date: date, exclude_id: Optional[int] = None) -> bool:
    qs = AttendanceRecord.objects.filter(worker_id=worker_id, date=on_date)
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()

@transaction.atomic
def create(data: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord.objects.create(**data)

@transaction.atomic
def save_fields(obj: AttendanceRecord, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> AttendanceRecord:
    return common.save_fields(obj, patch, allowed)

@transaction.atomic
def delete(obj: AttendanceRecord) -> None:
    obj.delete()
