# -*- coding: utf-8 -*-
"""
Salary settlement engine.

- Breakdown of the next unpaid cycle (preview or strict)
- Cycle creation, with a shortfall advance when net pay goes negative
- Payment issuance against one cycle (PENDING -> PARTIAL -> PAID)
- Lump-sum allocation, oldest outstanding cycle first
- Paid periods / lock queries for the UI

All state lives in the record store passed in. Every write path runs inside
``store.with_transaction`` and takes row locks before reading what it is
about to change: always the worker row, then the cycle row when paying.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from django.utils import timezone

from payroll.exceptions import AlreadySettled, AmountExceeded, InvalidAmount, InvalidDate, NotFound
from payroll.models import SalaryCycle, SHORTFALL_REASON_PREFIX
from payroll.repositories.store import DjangoRecordStore, RecordStore
from payroll.services.cycle_resolver import CycleWindow, resolve_cycle_window
from payroll.services.lock_guard import SalaryLockGuard
from payroll.services.pay_calculator import (
    ZERO,
    carry_forward_of,
    compute_deductions,
    compute_gross_pay,
    money,
    remaining_of,
)

logger = logging.getLogger(__name__)

Status = SalaryCycle.Status


@dataclass
class Breakdown:
    cycle_start: date
    cycle_end: date
    total_days: Decimal = Decimal("0")
    total_ot_units: Decimal = Decimal("0")
    base_pay: Decimal = ZERO
    ot_pay: Decimal = ZERO
    gross_pay: Decimal = ZERO
    total_advance: Decimal = ZERO
    total_expense: Decimal = ZERO
    opening_balance: Decimal = ZERO
    net_pay: Decimal = ZERO
    unpaid_balance: Decimal = ZERO
    total_net_payable: Decimal = ZERO
    is_first_cycle: bool = False
    # advances counted in total_advance; linked to the cycle on creation
    advance_ids: List[int] = field(default_factory=list, repr=False)

    @classmethod
    def empty(cls, window: CycleWindow) -> "Breakdown":
        return cls(cycle_start=window.cycle_start, cycle_end=window.cycle_end,
                   is_first_cycle=window.is_first_cycle)


@dataclass(frozen=True)
class PaidPeriod:
    id: int
    start: date
    end: date
    status: str
    paid_amount: Decimal
    remaining_amount: Decimal


@dataclass(frozen=True)
class Allocation:
    salary: Any
    amount: Decimal


def shortfall_reason(cycle_start: date, cycle_end: date) -> str:
    return f"{SHORTFALL_REASON_PREFIX} for cycle {cycle_start.isoformat()} to {cycle_end.isoformat()}"


class SalaryEngine:
    def __init__(self, store: Optional[RecordStore] = None,
                 clock: Optional[Callable[[], date]] = None,
                 now: Optional[Callable[[], datetime]] = None):
        self.store = store if store is not None else DjangoRecordStore()
        self.clock = clock or timezone.localdate
        self.now = now or timezone.now
        self.locks = SalaryLockGuard(self.store)

    # ============================
    # Breakdown
    # ============================
    def calculate_breakdown(self, worker_id: int, pay_date: Optional[date] = None,
                            preview: bool = True) -> Breakdown:
        """
        Compute the next cycle's pay without writing anything.

        With ``preview`` an empty window (pay date before the cycle start)
        yields an all-zero breakdown; without it the window must be valid.
        """
        window = resolve_cycle_window(self.store, worker_id, self.clock(), pay_date)
        return self._breakdown_for(window, preview=preview)

    def _breakdown_for(self, window: CycleWindow, preview: bool) -> Breakdown:
        worker_id = window.worker.id
        if window.is_empty:
            if preview:
                return Breakdown.empty(window)
            raise InvalidDate(
                f"Cycle end {window.cycle_end.isoformat()} is before cycle start "
                f"{window.cycle_start.isoformat()}",
                worker_id=worker_id, cycle_start=window.cycle_start, cycle_end=window.cycle_end,
            )

        start, end = window.cycle_start, window.cycle_end
        gross = compute_gross_pay(self.store.find_attendance(worker_id, start, end))

        carried = []
        if window.last_cycle is not None:
            carried = self.store.find_advances_on(worker_id, window.last_cycle.cycle_end, SHORTFALL_REASON_PREFIX)
        deductions = compute_deductions(
            self.store.find_advances(worker_id, start, end),
            self.store.find_expenses(worker_id, start, end),
            carried,
        )

        opening = money(window.worker.opening_balance) if window.is_first_cycle else ZERO
        net_pay = gross.gross_pay - deductions.total_advance - deductions.total_expense + opening
        unpaid = self.carry_forward(worker_id)

        breakdown = Breakdown(
            cycle_start=start,
            cycle_end=end,
            total_days=gross.total_days,
            total_ot_units=gross.total_ot_units,
            base_pay=gross.base_pay,
            ot_pay=gross.ot_pay,
            gross_pay=gross.gross_pay,
            total_advance=deductions.total_advance,
            total_expense=deductions.total_expense,
            opening_balance=opening,
            net_pay=net_pay,
            unpaid_balance=unpaid,
            total_net_payable=net_pay + unpaid,
            is_first_cycle=window.is_first_cycle,
            advance_ids=deductions.advance_ids,
        )
        logger.debug("[salary] breakdown worker=%s %s..%s net=%s", worker_id, start, end, net_pay)
        return breakdown

    def carry_forward(self, worker_id: int) -> Decimal:
        return carry_forward_of(self.store.find_outstanding_cycles(worker_id))

    # ============================
    # Creation
    # ============================
    def create_salary(self, worker_id: int, pay_date: Optional[date] = None):
        return self.store.with_transaction(lambda: self._create_cycle(worker_id, pay_date))

    def _create_cycle(self, worker_id: int, pay_date: Optional[date]):
        # worker row lock serialises "latest cycle" reads per worker
        window = resolve_cycle_window(self.store, worker_id, self.clock(), pay_date, for_update=True)
        breakdown = self._breakdown_for(window, preview=False)

        if breakdown.net_pay < 0:
            self._compensate_shortfall(worker_id, breakdown)

        cycle = self.store.create_cycle({
            "worker_id": worker_id,
            "cycle_start": breakdown.cycle_start,
            "cycle_end": breakdown.cycle_end,
            "base_pay": breakdown.base_pay,
            "ot_pay": breakdown.ot_pay,
            "gross_pay": breakdown.gross_pay,
            "total_advance": breakdown.total_advance,
            "total_expense": breakdown.total_expense,
            "unpaid_balance": breakdown.unpaid_balance,
            "net_pay": max(ZERO, breakdown.net_pay),
            "total_paid": ZERO,
            "status": Status.PENDING,
        })
        self.store.link_advances(breakdown.advance_ids, cycle.id)
        logger.info(
            "[salary] created cycle #%s worker=%s %s..%s gross=%s net=%s",
            cycle.id, worker_id, cycle.cycle_start, cycle.cycle_end, cycle.gross_pay, cycle.net_pay,
        )
        return cycle

    def _compensate_shortfall(self, worker_id: int, breakdown: Breakdown):
        shortfall = abs(breakdown.net_pay)
        advance = self.store.create_advance(
            worker_id,
            breakdown.cycle_end,
            shortfall,
            shortfall_reason(breakdown.cycle_start, breakdown.cycle_end),
        )
        logger.info(
            "[salary] shortfall advance #%s worker=%s amount=%s on %s",
            advance.id, worker_id, shortfall, breakdown.cycle_end,
        )
        return advance

    # ============================
    # Payment
    # ============================
    def issue_salary(self, salary_id: int, amount: Any, proof: Optional[str] = None,
                     signature: Optional[str] = None):
        amount = self._positive_amount(amount)

        def _issue():
            cycle = self.store.find_cycle(salary_id)
            if cycle is None:
                raise NotFound(f"Salary record {salary_id} not found", salary_id=salary_id)
            # worker before cycle, the order record writes and pay_worker use
            self.store.find_worker(cycle.worker_id, for_update=True)
            cycle = self.store.find_cycle(salary_id, for_update=True)
            return self._apply_payment(cycle, amount, proof, signature)

        return self.store.with_transaction(_issue)

    def _apply_payment(self, cycle, amount: Decimal, proof: Optional[str], signature: Optional[str]):
        if cycle.status == Status.PAID:
            raise AlreadySettled(f"Salary {cycle.id} is already fully paid", salary_id=cycle.id)

        remaining = remaining_of(cycle)
        if amount > remaining:
            raise AmountExceeded(
                f"Cannot pay more than remaining amount: {remaining}",
                salary_id=cycle.id, amount=amount, remaining=remaining,
            )

        total_paid = money(cycle.total_paid) + amount
        changes: Dict[str, Any] = {
            "total_paid": total_paid,
            "status": Status.PAID if total_paid == money(cycle.net_pay) else Status.PARTIAL,
            "issued_at": self.now(),
        }
        if proof:
            changes["payment_proof"] = proof
        if signature:
            changes["signature"] = signature

        cycle = self.store.save_cycle(cycle, changes)
        self.store.create_payment(cycle.id, amount, proof)
        self.store.increment_worker_balance(cycle.worker_id, amount)
        logger.info(
            "[salary] paid %s on cycle #%s worker=%s -> %s (%s/%s)",
            amount, cycle.id, cycle.worker_id, cycle.status, cycle.total_paid, cycle.net_pay,
        )
        return cycle

    def pay_worker(self, worker_id: int, amount: Any, pay_date: Optional[date] = None,
                   proof: Optional[str] = None, signature: Optional[str] = None) -> List[Allocation]:
        """
        Spread one lump sum over the worker's outstanding cycles, oldest
        ``cycle_end`` first; whatever is left pays a freshly created cycle.
        All or nothing: any failure rolls back every allocation.
        """
        amount = self._positive_amount(amount)

        def _pay() -> List[Allocation]:
            if self.store.find_worker(worker_id, for_update=True) is None:
                raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)

            left = amount
            allocations: List[Allocation] = []
            for outstanding in self.store.find_outstanding_cycles(worker_id):
                if left <= 0:
                    break
                cycle = self.store.find_cycle(outstanding.id, for_update=True)
                due = remaining_of(cycle)
                if due <= 0:
                    continue
                part = min(left, due)
                cycle = self._apply_payment(cycle, part, proof, signature)
                allocations.append(Allocation(salary=cycle, amount=part))
                left -= part

            if left > 0:
                cycle = self._create_cycle(worker_id, pay_date)
                cycle = self._apply_payment(cycle, left, proof, signature)
                allocations.append(Allocation(salary=cycle, amount=left))

            logger.info("[salary] allocated %s for worker=%s over %d cycle(s)", amount, worker_id, len(allocations))
            return allocations

        return self.store.with_transaction(_pay)

    @staticmethod
    def _positive_amount(amount: Any) -> Decimal:
        try:
            value = money(amount)
        except (ArithmeticError, ValueError, TypeError):
            raise InvalidAmount(f"Invalid amount: {amount!r}", amount=amount)
        if value <= 0:
            raise InvalidAmount("Amount must be greater than 0", amount=amount)
        return value

    # ============================
    # Paid periods / locks
    # ============================
    def get_paid_periods(self, worker_id: int) -> List[PaidPeriod]:
        if self.store.find_worker(worker_id) is None:
            raise NotFound(f"Worker {worker_id} not found", worker_id=worker_id)
        return [
            PaidPeriod(
                id=c.id,
                start=c.cycle_start,
                end=c.cycle_end,
                status=str(c.status),
                paid_amount=money(c.total_paid),
                remaining_amount=remaining_of(c),
            )
            for c in self.store.find_locking_cycles(worker_id)
        ]

    def is_locked(self, worker_id: int, on_date: date) -> bool:
        return self.locks.is_locked(worker_id, on_date)

    def is_locked_for_advance(self, worker_id: int, on_date: date) -> bool:
        return self.locks.is_locked_for_advance(worker_id, on_date)
