# -*- coding: utf-8 -*-
"""
Record store used by the settlement engine.

``RecordStore`` is the narrow set of queries/writes the engine needs. The
engine receives a store instance and never touches the ORM itself, so it can
be driven by ``DjangoRecordStore`` in production and by an in-memory fake in
unit tests.
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, TypeVar

from django.db import transaction

from payroll.models import Advance
from payroll.repositories import (
    advance_repository,
    attendance_repository,
    expense_repository,
    salary_repository,
    worker_repository,
)

T = TypeVar("T")


class RecordStore(Protocol):
    def with_transaction(self, fn: Callable[[], T]) -> T: ...

    # ---- reads
    def find_worker(self, worker_id: int, for_update: bool = False) -> Optional[Any]: ...
    def find_attendance(self, worker_id: int, start: date, end: date) -> List[Any]: ...
    def find_advances(self, worker_id: int, start: date, end: date) -> List[Any]: ...
    def find_advances_on(self, worker_id: int, on_date: date, reason_prefix: str) -> List[Any]: ...
    def find_expenses(self, worker_id: int, start: date, end: date) -> List[Any]: ...
    def find_latest_cycle(self, worker_id: int) -> Optional[Any]: ...
    def find_outstanding_cycles(self, worker_id: int) -> List[Any]: ...
    def find_cycle(self, salary_id: int, for_update: bool = False) -> Optional[Any]: ...
    def find_locking_cycle(self, worker_id: int, on_date: date, upper_inclusive: bool = True) -> Optional[Any]: ...
    def find_locking_cycles(self, worker_id: int) -> List[Any]: ...

    # ---- writes
    def create_advance(self, worker_id: int, on_date: date, amount: Decimal, reason: str) -> Any: ...
    def link_advances(self, advance_ids: Iterable[int], salary_id: int) -> int: ...
    def create_cycle(self, data: Dict[str, Any]) -> Any: ...
    def save_cycle(self, cycle: Any, changes: Dict[str, Any]) -> Any: ...
    def create_payment(self, salary_id: int, amount: Decimal, proof: Optional[str] = None) -> Any: ...
    def increment_worker_balance(self, worker_id: int, amount: Decimal) -> None: ...


class DjangoRecordStore:
    """RecordStore backed by the Django ORM and the default database."""

    def with_transaction(self, fn: Callable[[], T]) -> T:
        with transaction.atomic():
            return fn()

    # ---- reads
    def find_worker(self, worker_id: int, for_update: bool = False):
        if for_update:
            return worker_repository.get_for_update(worker_id)
        return worker_repository.get_or_none(worker_id)

    def find_attendance(self, worker_id: int, start: date, end: date):
        return attendance_repository.in_window(worker_id, start, end)

    def find_advances(self, worker_id: int, start: date, end: date):
        return advance_repository.in_window(worker_id, start, end)

    def find_advances_on(self, worker_id: int, on_date: date, reason_prefix: str):
        return advance_repository.on_date_with_reason_prefix(worker_id, on_date, reason_prefix)

    def find_expenses(self, worker_id: int, start: date, end: date):
        return expense_repository.in_window(worker_id, start, end)

    def find_latest_cycle(self, worker_id: int):
        return salary_repository.get_latest(worker_id)

    def find_outstanding_cycles(self, worker_id: int):
        return salary_repository.list_outstanding(worker_id)

    def find_cycle(self, salary_id: int, for_update: bool = False):
        if for_update:
            return salary_repository.get_for_update(salary_id)
        return salary_repository.get_or_none(salary_id)

    def find_locking_cycle(self, worker_id: int, on_date: date, upper_inclusive: bool = True):
        return salary_repository.find_locking_cycle(worker_id, on_date, upper_inclusive=upper_inclusive)

    def find_locking_cycles(self, worker_id: int):
        return salary_repository.list_locking(worker_id)

    # ---- writes
    def create_advance(self, worker_id: int, on_date: date, amount: Decimal, reason: str) -> Advance:
        return advance_repository.create({
            "worker_id": worker_id,
            "date": on_date,
            "amount": amount,
            "reason": reason,
        })

    def link_advances(self, advance_ids: Iterable[int], salary_id: int) -> int:
        return advance_repository.link_to_salary(advance_ids, salary_id)

    def create_cycle(self, data: Dict[str, Any]):
        return salary_repository.create(data)

    def save_cycle(self, cycle, changes: Dict[str, Any]):
        return salary_repository.save_fields(cycle, changes)

    def create_payment(self, salary_id: int, amount: Decimal, proof: Optional[str] = None):
        return salary_repository.create_payment(salary_id, amount, proof)

    def increment_worker_balance(self, worker_id: int, amount: Decimal) -> None:
        worker_repository.increment_balance(worker_id, amount)
