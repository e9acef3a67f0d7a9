# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from payroll.views.expense_view import ExpenseViewSet

app_name = "expense"

router = SimpleRouter()
router.register(r"", ExpenseViewSet, basename="expenses")

urlpatterns = [
    path("", include(router.urls)),
]
