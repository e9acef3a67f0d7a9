# -*- coding: utf-8 -*-
"""
Service for Expense / ExpenseType. Mutations use the closed lock window and
hold the worker row lock from the lock check to the write.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, Optional

from django.db import transaction
from django.db.models import QuerySet

from payroll.exceptions import Conflict, NotFound
from payroll.models import Expense, ExpenseType
from payroll.repositories import expense_repository as repo
from payroll.selectors.filters import RecordFilter
from payroll.services.guards import (
    lock_guard, lock_worker, require_active, require_not_future, require_positive,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"date", "amount", "type_id", "note"}


def _get_or_raise(expense_id: int) -> Expense:
    obj = repo.get_or_none(expense_id)
    if obj is None:
        raise NotFound(f"Expense {expense_id} not found", expense_id=expense_id)
    return obj

def _type_or_raise(type_id: int) -> ExpenseType:
    t = repo.get_type_or_none(type_id)
    if t is None:
        raise NotFound(f"Expense type {type_id} not found", type_id=type_id)
    return t

@transaction.atomic
def create_expense(*, worker_id: int, date: date, amount: Any, type_id: int, note: str = "") -> Expense:
    worker = lock_worker(worker_id)
    require_active(worker, "add expense", date)
    value = require_positive(amount)
    require_not_future(date, "Expense")
    _type_or_raise(type_id)
    lock_guard().assert_not_locked(worker_id, date, "expense")

    obj = repo.create({
        "worker_id": worker_id,
        "date": date,
        "amount": value,
        "type_id": type_id,
        "note": note or "",
    })
    logger.info("[expense] worker=%s %s amount=%s type=%s", worker_id, date, value, type_id)
    return obj

@transaction.atomic
def update_expense(*, expense_id: int, **changes: Any) -> Expense:
    obj = _get_or_raise(expense_id)
    lock_worker(obj.worker_id)
    guard = lock_guard()
    guard.assert_not_locked(obj.worker_id, obj.date, "expense")

    patch = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
    if "amount" in patch:
        patch["amount"] = require_positive(patch["amount"])
    if "type_id" in patch:
        _type_or_raise(patch["type_id"])
    if "date" in patch and patch["date"] != obj.date:
        require_not_future(patch["date"], "Expense")
        guard.assert_not_locked(obj.worker_id, patch["date"], "expense")
    return repo.save_fields(obj, patch)

@transaction.atomic
def delete_expense(*, expense_id: int) -> Expense:
    obj = _get_or_raise(expense_id)
    lock_worker(obj.worker_id)
    lock_guard().assert_not_locked(obj.worker_id, obj.date, "expense")
    repo.delete(obj)
    logger.info("[expense] deleted #%s worker=%s %s", expense_id, obj.worker_id, obj.date)
    return obj

def get_expense(expense_id: int) -> Expense:
    return _get_or_raise(expense_id)

def list_expenses(f: Optional[RecordFilter] = None) -> QuerySet[Expense]:
    return repo.filter_records(f)

# ============================
# Expense types
# ============================
def list_expense_types() -> QuerySet[ExpenseType]:
    qs = repo.list_types()
    if not qs.exists():
        repo.ensure_default_types()
        logger.info("[expense] seeded default expense types")
    return repo.list_types()

def create_expense_type(*, name: str) -> ExpenseType:
    name = (name or "").strip()
    if repo.list_types().filter(name__iexact=name).exists():
        raise Conflict(f"Expense type '{name}' already exists", name=name)
    return repo.create_type(name)
