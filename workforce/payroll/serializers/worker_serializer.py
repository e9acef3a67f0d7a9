# -*- coding: utf-8 -*-
from __future__ import annotations
from decimal import Decimal
from rest_framework import serializers
from payroll.models import WageHistory, Worker


class WorkerReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Worker
        fields = [
            "id",
            "name",
            "phone",
            "wage",
            "ot_rate",
            "joined_at",
            "opening_balance",
            "balance",
            "is_active",
            "inactive_from",
            "created_at",
            "updated_at",
        ]


class WorkerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    phone = serializers.RegexField(r"^\d{10}$", required=False, allow_blank=True, default="")
    wage = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("1"), max_value=Decimal("100000"))
    ot_rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100000"), required=False, default=Decimal("0"))
    joined_at = serializers.DateField(required=False, allow_null=True)
    opening_balance = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=Decimal("0"))
    is_active = serializers.BooleanField(required=False, default=True)


class WorkerUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    phone = serializers.RegexField(r"^\d{10}$", required=False, allow_blank=True)
    wage = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("1"), max_value=Decimal("100000"), required=False)
    ot_rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100000"), required=False)
    opening_balance = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    is_active = serializers.BooleanField(required=False)
    wage_effective_date = serializers.DateField(required=False, allow_null=True)
    ot_rate_effective_date = serializers.DateField(required=False, allow_null=True)


class WorkerDeactivateSerializer(serializers.Serializer):
    effective_from = serializers.DateField(required=False, allow_null=True)


class WageHistoryReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = WageHistory
        fields = [
            "id",
            "worker",
            "wage",
            "ot_rate",
            "effective_from",
            "reason",
            "created_at",
        ]


class RateQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
