# -*- coding: utf-8 -*-
"""
Repository layer for Advance (pure DB).
"""
from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from django.db import transaction
from django.db.models import QuerySet, Sum

from payroll.models import Advance
from payroll.repositories import common
from payroll.selectors.filters import RecordFilter


def base_qs() -> QuerySet[Advance]:
    return Advance.objects.select_related("worker")

def get_or_none(advance_id: int) -> Optional[Advance]:
    return base_qs().filter(id=advance_id).first()

def filter_records(f: Optional[RecordFilter] = None) -> QuerySet[Advance]:
    return common.apply_record_filter(base_qs(), f).order_by("-date", "-id")

def in_window(worker_id: int, start: date, end: date) -> List[Advance]:
    return list(
        Advance.objects
        .filter(worker_id=worker_id, date__gte=start, date__lte=end)
        .order_by("date", "id")
    )

def on_date_with_reason_prefix(worker_id: int, on_date: date, prefix: str) -> List[Advance]:
    return list(
        Advance.objects
        .filter(worker_id=worker_id, date=on_date, reason__startswith=prefix)
        .order_by("id")
    )

def total_for_worker(worker_id: int, start: Optional[date] = None, end: Optional[date] = None):
    qs = Advance.objects.filter(worker_id=worker_id)
    if start:
        qs = qs.filter(date__gte=start)
    if end:
        qs = qs.filter(date__lte=end)
    return qs.aggregate(total=Sum("amount"))["total"]

@transaction.atomic
def create(data: Dict[str, Any]) -> Advance:
    return Advance.objects.create(**data)

@transaction.atomic
def save_fields(obj: Advance, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> Advance:
    return common.save_fields(obj, patch, allowed)

@transaction.atomic
def delete(obj: Advance) -> None:
    obj.delete()

def link_to_salary(advance_ids: Iterable[int], salary_id: int) -> int:
    ids = list(advance_ids)
    if not ids:
        return 0
    return Advance.objects.filter(id__in=ids, salary__isnull=True).update(salary_id=salary_id)
