# -*- coding: utf-8 -*-
"""
Repository layer for SalaryCycle / SalaryPayment (pure DB):
- latest / outstanding / locking-cycle lookups
- zero-net cycles owe nothing and are left out of outstanding lists
- select_for_update on the single cycle row being paid
- no status transitions decided here
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from django.db.models import QuerySet
from django.utils import timezone

from payroll.models import SalaryCycle, SalaryPayment
from payroll.repositories import common
from payroll.selectors.filters import SalaryFilter

OUTSTANDING = (SalaryCycle.Status.PENDING, SalaryCycle.Status.PARTIAL)
LOCKING = (SalaryCycle.Status.PAID, SalaryCycle.Status.PARTIAL)


def base_qs() -> QuerySet[SalaryCycle]:
    return SalaryCycle.objects.select_related("worker")

def get_or_none(salary_id: int) -> Optional[SalaryCycle]:
    return base_qs().filter(id=salary_id).first()

def get_for_update(salary_id: int) -> Optional[SalaryCycle]:
    return SalaryCycle.objects.select_for_update().filter(id=salary_id).first()

def get_latest(worker_id: int) -> Optional[SalaryCycle]:
    return SalaryCycle.objects.filter(worker_id=worker_id).order_by("-cycle_end", "-id").first()

def list_outstanding(worker_id: int) -> List[SalaryCycle]:
    return list(
        SalaryCycle.objects
        .filter(worker_id=worker_id, status__in=OUTSTANDING)
        .exclude(net_pay=0)
        .order_by("cycle_end", "id")
    )

def list_locking(worker_id: int) -> List[SalaryCycle]:
    return list(
        SalaryCycle.objects
        .filter(worker_id=worker_id, status__in=LOCKING)
        .order_by("cycle_start", "id")
    )

def find_locking_cycle(worker_id: int, on_date: date, upper_inclusive: bool = True) -> Optional[SalaryCycle]:
    qs = SalaryCycle.objects.filter(worker_id=worker_id, status__in=LOCKING, cycle_start__lte=on_date)
    qs = qs.filter(cycle_end__gte=on_date) if upper_inclusive else qs.filter(cycle_end__gt=on_date)
    return qs.order_by("cycle_start").first()

def find_covering(worker_id: int, on_date: date) -> Optional[SalaryCycle]:
    """Any cycle, whatever its status, whose window contains ``on_date``."""
    return (
        SalaryCycle.objects
        .filter(worker_id=worker_id, cycle_start__lte=on_date, cycle_end__gte=on_date)
        .order_by("cycle_start")
        .first()
    )

def list_for_worker(worker_id: int, f: Optional[SalaryFilter] = None) -> QuerySet[SalaryCycle]:
    qs = base_qs().filter(worker_id=worker_id)
    if f is not None:
        if f.start_date:
            qs = qs.filter(cycle_start__gte=f.start_date)
        if f.end_date:
            qs = qs.filter(cycle_end__lte=f.end_date)
        if f.status:
            qs = qs.filter(status=f.status)
    return qs.order_by("-cycle_end", "-id")

def list_pending() -> QuerySet[SalaryCycle]:
    return base_qs().filter(status__in=OUTSTANDING).exclude(net_pay=0).order_by("status", "-cycle_end")

def create(data: Dict[str, Any]) -> SalaryCycle:
    return SalaryCycle.objects.create(**data)

def save_fields(obj: SalaryCycle, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> SalaryCycle:
    return common.save_fields(obj, patch, allowed)

def create_payment(salary_id: int, amount: Decimal, proof: Optional[str] = None) -> SalaryPayment:
    return SalaryPayment.objects.create(salary_id=salary_id, amount=amount, proof=proof, date=timezone.now())
