# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
from django.db.models import Model, QuerySet

from payroll.selectors.filters import RecordFilter


def apply_record_filter(qs: QuerySet, f: Optional[RecordFilter]) -> QuerySet:
    if f is None:
        return qs
    if f.worker_id:
        qs = qs.filter(worker_id=f.worker_id)
    lower, upper = f.date_bounds()
    if lower:
        qs = qs.filter(date__gte=lower)
    if upper:
        qs = qs.filter(date__lte=upper)
    return qs


def save_fields(obj: Model, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> Model:
    fields: List[str] = []
    for k, v in patch.items():
        if (allowed is None) or (k in allowed):
            setattr(obj, k, v)
            fields.append(k)
    if fields:
        if hasattr(obj, "updated_at"):
            fields.append("updated_at")
        obj.save(update_fields=fields)
    return obj
