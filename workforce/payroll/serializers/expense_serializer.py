# -*- coding: utf-8 -*-
from __future__ import annotations
from decimal import Decimal
from rest_framework import serializers
from payroll.models import Expense, ExpenseType


class ExpenseTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseType
        fields = ["id", "name"]


class ExpenseReadSerializer(serializers.ModelSerializer):
    worker_name = serializers.CharField(source="worker.name", read_only=True)
    type_name = serializers.CharField(source="type.name", read_only=True)

    class Meta:
        model = Expense
        fields = [
            "id",
            "worker",
            "worker_name",
            "type",
            "type_name",
            "date",
            "amount",
            "note",
            "created_at",
            "updated_at",
        ]


class ExpenseCreateSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    type_id = serializers.IntegerField()
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), max_value=Decimal("10000000"))
    note = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class ExpenseUpdateSerializer(serializers.Serializer):
    type_id = serializers.IntegerField(required=False)
    date = serializers.DateField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), max_value=Decimal("10000000"), required=False)
    note = serializers.CharField(required=False, allow_blank=True, max_length=500)


class ExpenseTypeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=60)
