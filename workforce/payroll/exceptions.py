# -*- coding: utf-8 -*-
"""
Domain errors for the payroll app.

Services and the settlement engine raise these; the view layer turns them
into HTTP responses through ``ERROR_HTTP_STATUS``. Database errors are not
wrapped here and reach the caller unchanged.
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_DATE = "invalid_date"
    INACTIVE_WORKER = "inactive_worker"
    AMOUNT_EXCEEDED = "amount_exceeded"
    INVALID_AMOUNT = "invalid_amount"
    RECORD_LOCKED = "record_locked"
    ALREADY_SETTLED = "already_settled"
    CONFLICT = "conflict"


ERROR_HTTP_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_DATE: 400,
    ErrorKind.INACTIVE_WORKER: 400,
    ErrorKind.AMOUNT_EXCEEDED: 400,
    ErrorKind.INVALID_AMOUNT: 400,
    ErrorKind.RECORD_LOCKED: 409,
    ErrorKind.ALREADY_SETTLED: 409,
    ErrorKind.CONFLICT: 409,
}


class PayrollError(Exception):
    kind: ErrorKind = ErrorKind.CONFLICT

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def http_status(self) -> int:
        return ERROR_HTTP_STATUS[self.kind]

    def as_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.kind.value}


class NotFound(PayrollError):
    kind = ErrorKind.NOT_FOUND


class InvalidDate(PayrollError):
    kind = ErrorKind.INVALID_DATE


class InactiveWorker(PayrollError):
    kind = ErrorKind.INACTIVE_WORKER


class AmountExceeded(PayrollError):
    kind = ErrorKind.AMOUNT_EXCEEDED


class InvalidAmount(PayrollError):
    kind = ErrorKind.INVALID_AMOUNT


class RecordLocked(PayrollError):
    kind = ErrorKind.RECORD_LOCKED


class AlreadySettled(PayrollError):
    kind = ErrorKind.ALREADY_SETTLED


class Conflict(PayrollError):
    kind = ErrorKind.CONFLICT
