# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiResponse

from payroll.exceptions import PayrollError
from payroll.models import Expense
from payroll.selectors.filters import build_record_filter
from payroll.serializers.expense_serializer import (
    ExpenseTypeSerializer,
    ExpenseTypeCreateSerializer,
    ExpenseReadSerializer,
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
)
from payroll.services.expense_service import (
    create_expense as svc_create,
    update_expense as svc_update,
    delete_expense as svc_delete,
    get_expense as svc_get,
    list_expenses as svc_list,
    list_expense_types as svc_list_types,
    create_expense_type as svc_create_type,
)
from payroll.utils.pagination import DefaultPagination
from payroll.views.utils import PAGE_PARAMS, RECORD_FILTER_PARAMS, error_response, path_int, std_errors


@extend_schema_view(
    list=extend_schema(
        tags=["Expense"],
        summary="List expenses",
        parameters=[*RECORD_FILTER_PARAMS, *PAGE_PARAMS],
        responses={200: ExpenseReadSerializer(many=True), **std_errors()},
    ),
    retrieve=extend_schema(
        tags=["Expense"],
        summary="Expense by ID",
        parameters=[path_int("id", "Expense ID")],
        responses={200: ExpenseReadSerializer, **std_errors()},
    ),
    create=extend_schema(
        tags=["Expense"],
        summary="Record an expense",
        request=ExpenseCreateSerializer,
        responses={201: ExpenseReadSerializer, **std_errors()},
    ),
    update=extend_schema(
        tags=["Expense"],
        summary="Update an expense",
        parameters=[path_int("id", "Expense ID")],
        request=ExpenseUpdateSerializer,
        responses={200: ExpenseReadSerializer, **std_errors()},
    ),
    partial_update=extend_schema(
        tags=["Expense"],
        summary="Update an expense (partial)",
        parameters=[path_int("id", "Expense ID")],
        request=ExpenseUpdateSerializer,
        responses={200: ExpenseReadSerializer, **std_errors()},
    ),
    destroy=extend_schema(
        tags=["Expense"],
        summary="Delete an expense",
        parameters=[path_int("id", "Expense ID")],
        responses={204: OpenApiResponse(description="Deleted"), **std_errors()},
    ),
)
class ExpenseViewSet(viewsets.GenericViewSet):
    queryset = Expense.objects.all()
    serializer_class = ExpenseReadSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = DefaultPagination

    def list(self, request):
        try:
            qs = svc_list(build_record_filter(request.query_params))
        except PayrollError as e:
            return error_response(e)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(ExpenseReadSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        try:
            obj = svc_get(int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(ExpenseReadSerializer(obj).data)

    def create(self, request):
        ser = ExpenseCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_create(**ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(ExpenseReadSerializer(obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = ExpenseUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_update(expense_id=int(pk), **ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(ExpenseReadSerializer(obj).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        try:
            svc_delete(expense_id=int(pk))
        except PayrollError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ---- expense types
    @extend_schema(
        tags=["Expense"],
        summary="List or create expense types",
        request=ExpenseTypeCreateSerializer,
        responses={200: ExpenseTypeSerializer(many=True), 201: ExpenseTypeSerializer, **std_errors()},
    )
    @action(detail=False, methods=["get", "post"], url_path="types", pagination_class=None)
    def types(self, request):
        if request.method == "GET":
            return Response(ExpenseTypeSerializer(svc_list_types(), many=True).data)
        ser = ExpenseTypeCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            obj = svc_create_type(**ser.validated_data)
        except PayrollError as e:
            return error_response(e)
        return Response(ExpenseTypeSerializer(obj).data, status=status.HTTP_201_CREATED)
