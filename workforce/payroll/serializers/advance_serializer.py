# -*- coding: utf-8 -*-
from __future__ import annotations
from decimal import Decimal
from rest_framework import serializers
from payroll.models import Advance


class AdvanceReadSerializer(serializers.ModelSerializer):
    worker_name = serializers.CharField(source="worker.name", read_only=True)
    is_shortfall = serializers.BooleanField(read_only=True)

    class Meta:
        model = Advance
        fields = [
            "id",
            "worker",
            "worker_name",
            "date",
            "amount",
            "reason",
            "signature",
            "salary",
            "is_shortfall",
            "created_at",
            "updated_at",
        ]


class AdvanceCreateSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), max_value=Decimal("10000000"))
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
    signature = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AdvanceUpdateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), max_value=Decimal("10000000"), required=False)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)
    signature = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AdvanceTotalSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    start_date = serializers.DateField(allow_null=True)
    end_date = serializers.DateField(allow_null=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)


class WorkerLatestAdvanceSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    is_active = serializers.BooleanField()
    latest_advance_id = serializers.IntegerField(allow_null=True)
    latest_advance_date = serializers.DateField(allow_null=True)
    latest_advance_amount = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
