# -*- coding: utf-8 -*-
"""
Repository layer for Worker / WageHistory (pure DB).
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from django.db import transaction
from django.db.models import F, OuterRef, QuerySet, Subquery

from payroll.models import Advance, WageHistory, Worker
from payroll.repositories import common


def base_qs() -> QuerySet[Worker]:
    return Worker.objects.all()

def get_or_none(worker_id: int) -> Optional[Worker]:
    return base_qs().filter(id=worker_id).first()

def get_for_update(worker_id: int) -> Optional[Worker]:
    return Worker.objects.select_for_update().filter(id=worker_id).first()

def list_workers(active: Optional[bool] = None) -> QuerySet[Worker]:
    qs = base_qs()
    if active is not None:
        qs = qs.filter(is_active=active)
    return qs.order_by("-created_at", "-id")

def with_latest_advance() -> QuerySet[Worker]:
    latest = Advance.objects.filter(worker_id=OuterRef("pk")).order_by("-date", "-id")
    return base_qs().annotate(
        latest_advance_id=Subquery(latest.values("id")[:1]),
        latest_advance_date=Subquery(latest.values("date")[:1]),
        latest_advance_amount=Subquery(latest.values("amount")[:1]),
    ).order_by("-created_at", "-id")

@transaction.atomic
def create(data: Dict[str, Any]) -> Worker:
    return Worker.objects.create(**data)

@transaction.atomic
def save_fields(obj: Worker, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> Worker:
    return common.save_fields(obj, patch, allowed)

def increment_balance(worker_id: int, amount: Decimal) -> None:
    Worker.objects.filter(id=worker_id).update(balance=F("balance") + amount)

# ============================
# Wage history
# ============================
def create_wage_history(data: Dict[str, Any]) -> WageHistory:
    return WageHistory.objects.create(**data)

def list_wage_history(worker_id: int) -> List[WageHistory]:
    return list(WageHistory.objects.filter(worker_id=worker_id).order_by("-effective_from", "-id"))

def rate_on(worker_id: int, on_date: date) -> Optional[WageHistory]:
    return (
        WageHistory.objects
        .filter(worker_id=worker_id, effective_from__lte=on_date)
        .order_by("-effective_from", "-id")
        .first()
    )
