# views/utils.py
"""
Shared tooling for the payroll API views:
- drf-spectacular parameter / response helpers
- translation of PayrollError into an HTTP response
"""
import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, inline_serializer
from drf_spectacular.types import OpenApiTypes
from rest_framework import serializers
from rest_framework.response import Response

from payroll.exceptions import PayrollError

logger = logging.getLogger(__name__)

# ---- Reusable error schema
ErrorSerializer = inline_serializer(
    name="PayrollError",
    fields={
        "detail": serializers.CharField(),
        "code": serializers.CharField(),
    },
)

# ---- Param helpers

def path_int(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.INT, OpenApiParameter.PATH, description=description)

def q_int(name: str, description: str, required: bool = False):
    return OpenApiParameter(name, OpenApiTypes.INT, OpenApiParameter.QUERY, required=required, description=description)

def q_str(name: str, description: str, required: bool = False):
    return OpenApiParameter(name, OpenApiTypes.STR, OpenApiParameter.QUERY, required=required, description=description)

def q_date(name: str, description: str, required: bool = False):
    return OpenApiParameter(name, OpenApiTypes.DATE, OpenApiParameter.QUERY, required=required, description=description)

RECORD_FILTER_PARAMS = [
    q_int("worker_id", "Worker ID"),
    q_date("date", "Exact date (YYYY-MM-DD)"),
    q_str("month", "Month (YYYY-MM)"),
    q_date("start_date", "From date, inclusive"),
    q_date("end_date", "To date, inclusive"),
]

PAGE_PARAMS = [
    q_int("page", "Page (default 1)"),
    q_int("page_size", "Page size (default 20, max 200)"),
]

# ---- Convenience for common responses

def std_errors(extra: dict | None = None):
    """Standard error response mapping you can merge into responses=..."""
    errs = {
        400: OpenApiResponse(ErrorSerializer, description="Bad Request"),
        404: OpenApiResponse(ErrorSerializer, description="Not Found"),
        409: OpenApiResponse(ErrorSerializer, description="Locked / already settled / conflict"),
    }
    if extra:
        errs.update(extra)
    return errs


def error_response(exc: PayrollError) -> Response:
    logger.info("[api] %s: %s", exc.kind.value, exc.message)
    return Response(exc.as_dict(), status=exc.http_status)
