# -*- coding: utf-8 -*-
from __future__ import annotations
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from payroll.views.advance_view import AdvanceViewSet

app_name = "advance"

router = SimpleRouter()
router.register(r"", AdvanceViewSet, basename="advances")

urlpatterns = [
    path("", include(router.urls)),
]
