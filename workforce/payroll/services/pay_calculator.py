# -*- coding: utf-8 -*-
"""
Pure pay arithmetic over already-loaded records.

Nothing here reads the database: callers pass attendance / advance / expense /
cycle rows (ORM instances or any object with the same attributes).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List

from payroll.models import AttendanceRecord, SalaryCycle

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HALF_DAY = Decimal("0.5")

OUTSTANDING_STATUSES = (SalaryCycle.Status.PENDING, SalaryCycle.Status.PARTIAL)


def money(value: Any) -> Decimal:
    """Coerce to Decimal and round to cents (half-up)."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _dec(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass(frozen=True)
class GrossPay:
    base_pay: Decimal = ZERO
    ot_pay: Decimal = ZERO
    gross_pay: Decimal = ZERO
    total_days: Decimal = Decimal("0")
    total_ot_units: Decimal = Decimal("0")


@dataclass(frozen=True)
class Deductions:
    total_advance: Decimal = ZERO
    total_expense: Decimal = ZERO
    advance_ids: List[int] = field(default_factory=list)


def compute_gross_pay(records: Iterable[Any]) -> GrossPay:
    """
    PRESENT pays a full day at the snapshotted wage, HALF pays half, ABSENT
    pays no base. Overtime is paid on every record whatever its status,
    ABSENT included.
    """
    base = Decimal("0")
    ot = Decimal("0")
    days = Decimal("0")
    ot_units = Decimal("0")

    for rec in records:
        wage = _dec(rec.wage_at_time)
        if rec.status == AttendanceRecord.Status.PRESENT:
            base += wage
            days += 1
        elif rec.status == AttendanceRecord.Status.HALF:
            base += wage * HALF_DAY
            days += HALF_DAY

        units = _dec(rec.ot_units)
        ot += units * _dec(rec.ot_rate_at_time)
        ot_units += units

    base_pay = money(base)
    ot_pay = money(ot)
    return GrossPay(
        base_pay=base_pay,
        ot_pay=ot_pay,
        gross_pay=base_pay + ot_pay,
        total_days=days,
        total_ot_units=ot_units,
    )


def compute_deductions(
    advances: Iterable[Any],
    expenses: Iterable[Any],
    carried_shortfalls: Iterable[Any] = (),
) -> Deductions:
    """
    Sum window advances and expenses plus shortfall advances carried over
    from the previous cycle's last day. An advance seen in both lists is
    counted once.
    """
    seen = set()
    total_adv = Decimal("0")
    ids: List[int] = []
    for adv in list(advances) + list(carried_shortfalls):
        if adv.id in seen:
            continue
        seen.add(adv.id)
        ids.append(adv.id)
        total_adv += _dec(adv.amount)

    total_exp = sum((_dec(e.amount) for e in expenses), Decimal("0"))
    return Deductions(total_advance=money(total_adv), total_expense=money(total_exp), advance_ids=ids)


def remaining_of(cycle: Any) -> Decimal:
    return money(cycle.net_pay) - money(cycle.total_paid)


def carry_forward_of(cycles: Iterable[Any]) -> Decimal:
    """Total still owed across PENDING / PARTIAL cycles."""
    return money(sum(
        (remaining_of(c) for c in cycles if c.status in OUTSTANDING_STATUSES),
        Decimal("0"),
    ))
