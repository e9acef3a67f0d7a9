# -*- coding: utf-8 -*-
"""
Repository layer for Expense / ExpenseType (pure DB).
"""
from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from django.db import transaction
from django.db.models import QuerySet

from payroll.models import Expense, ExpenseType
from payroll.repositories import common
from payroll.selectors.filters import RecordFilter


def base_qs() -> QuerySet[Expense]:
    return Expense.objects.select_related("worker", "type")

def get_or_none(expense_id: int) -> Optional[Expense]:
    return base_qs().filter(id=expense_id).first()

def filter_records(f: Optional[RecordFilter] = None) -> QuerySet[Expense]:
    return common.apply_record_filter(base_qs(), f).order_by("-date", "-id")

def in_window(worker_id: int, start: date, end: date) -> List[Expense]:
    return list(
        Expense.objects
        .filter(worker_id=worker_id, date__gte=start, date__lte=end)
        .order_by("date", "id")
    )

@transaction.atomic
def create(data: Dict[str, Any]) -> Expense:
    return Expense.objects.create(**data)

@transaction.atomic
def save_fields(obj: Expense, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> Expense:
    return common.save_fields(obj, patch, allowed)

@transaction.atomic
def delete(obj: Expense) -> None:
    obj.delete()

# ============================
# Expense types
# ============================
def list_types() -> QuerySet[ExpenseType]:
    return ExpenseType.objects.all().order_by("name")

def get_type_or_none(type_id: int) -> Optional[ExpenseType]:
    return ExpenseType.objects.filter(id=type_id).first()

@transaction.atomic
def create_type(name: str) -> ExpenseType:
    return ExpenseType.objects.create(name=name)

def ensure_default_types(names: Iterable[str] = ("Food", "Other")) -> List[ExpenseType]:
    return [ExpenseType.objects.get_or_create(name=n)[0] for n in names]
